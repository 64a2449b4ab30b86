# sistemas/acordos/services_status.py
"""
Reconciliação de status de parcelas e acordos

As derivações são funções puras de (estado, hoje): aplicá-las duas vezes
não altera nada. A persistência (reconciliar_acordo) grava só o que mudou
e registra uma auditoria por entidade alterada.

A varredura periódica (executar_varredura_vencimentos) marca parcelas e
acordos vencidos, um acordo por transação.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from config import VARREDURA_LOTE
from database.connection import unidade_de_trabalho
from sistemas.acordos.constants import (
    TipoAcordo, StatusAcordo, StatusParcela, StatusProcesso,
    STATUS_ACORDO_ABERTO, STATUS_ACORDO_TERMINAL
)
from sistemas.acordos.integracoes import (
    RegistroAuditoria, ProvedorProcessos, AuditoriaBanco, ProvedorProcessosSQL
)
from sistemas.acordos.models import Acordo, ParcelaAcordo
from utils.audit import AuditEvent
from utils.logging_config import get_logger
from utils.timezone import Relogio, now_utc

logger = get_logger(__name__)


# ==========================================
# Derivações puras
# ==========================================

def derivar_status_parcela(
    valor: Decimal,
    valor_pago: Decimal,
    data_vencimento: date,
    status_atual: str,
    hoje: date
) -> str:
    """
    Status da parcela em `hoje`.

    - paga/cancelada nunca mudam
    - totalmente paga -> paga
    - pendente com vencimento anterior a hoje -> vencida
    """
    if status_atual in (StatusParcela.PAGA, StatusParcela.CANCELADA):
        return status_atual
    if valor_pago is not None and valor_pago >= valor:
        return StatusParcela.PAGA.value
    if status_atual == StatusParcela.PENDENTE and data_vencimento < hoje:
        return StatusParcela.VENCIDA.value
    return status_atual


def derivar_status_acordo(
    status_atual: str,
    status_parcelas: Iterable[str],
    obrigacoes_quitadas: bool
) -> str:
    """
    Status do acordo a partir do status das parcelas.

    cumprido: todas as parcelas não canceladas pagas e obrigações avulsas
    (custas, efetivação da compensação) quitadas.
    vencido: alguma parcela vencida.
    Um acordo vencido sem parcelas vencidas volta a ativo.
    """
    if status_atual in STATUS_ACORDO_TERMINAL:
        return status_atual

    vigentes = [s for s in status_parcelas if s != StatusParcela.CANCELADA]

    if obrigacoes_quitadas and all(s == StatusParcela.PAGA for s in vigentes):
        return StatusAcordo.CUMPRIDO.value
    if any(s == StatusParcela.VENCIDA for s in vigentes):
        return StatusAcordo.VENCIDO.value
    if status_atual == StatusAcordo.VENCIDO:
        return StatusAcordo.ATIVO.value
    return status_atual


def _obrigacoes_transacao(acordo: Acordo) -> bool:
    termos = acordo.transacao
    return termos is not None and termos.custas_quitadas


def _obrigacoes_compensacao(acordo: Acordo) -> bool:
    termos = acordo.termos
    return termos is not None and termos.custas_quitadas and termos.data_efetivacao is not None


_OBRIGACOES: Dict[str, Callable[[Acordo], bool]] = {
    TipoAcordo.TRANSACAO_EXCEPCIONAL.value: _obrigacoes_transacao,
    TipoAcordo.COMPENSACAO.value: _obrigacoes_compensacao,
    TipoAcordo.DACAO_PAGAMENTO.value: _obrigacoes_compensacao,
}


def obrigacoes_avulsas_quitadas(acordo: Acordo) -> bool:
    """Custas (e, em compensação/dação, a efetivação) estão quitadas?"""
    verificar = _OBRIGACOES.get(acordo.tipo)
    return verificar(acordo) if verificar else False


# ==========================================
# Persistência
# ==========================================

@dataclass
class ResultadoReconciliacao:
    acordo_id: int
    status_anterior: str
    status_novo: str
    parcelas_vencidas: int = 0
    parcelas_pagas: int = 0

    @property
    def alterou_acordo(self) -> bool:
        return self.status_anterior != self.status_novo

    @property
    def cumpriu(self) -> bool:
        return self.alterou_acordo and self.status_novo == StatusAcordo.CUMPRIDO


def reconciliar_acordo(
    db: Session,
    acordo: Acordo,
    hoje: date,
    auditoria: RegistroAuditoria,
    processos: ProvedorProcessos,
    operador_id: Optional[int] = None,
    agora: Optional[datetime] = None,
) -> ResultadoReconciliacao:
    """
    Recalcula e grava o status das parcelas e do acordo.

    O acordo deve estar carregado com lock. Ao cumprir o acordo, o processo
    passa para `concluido`.
    """
    resultado = ResultadoReconciliacao(
        acordo_id=acordo.id,
        status_anterior=acordo.status,
        status_novo=acordo.status,
    )

    for parcela in acordo.parcelas:
        novo = derivar_status_parcela(
            parcela.valor, parcela.valor_pago, parcela.data_vencimento, parcela.status, hoje
        )
        if novo == parcela.status:
            continue

        auditoria.registrar(
            db, AuditEvent.PARCELA_STATUS, "ParcelaAcordo", parcela.id,
            antes={"status": parcela.status},
            depois={"status": novo},
            usuario_id=operador_id,
        )
        parcela.status = novo
        if novo == StatusParcela.VENCIDA:
            resultado.parcelas_vencidas += 1
        elif novo == StatusParcela.PAGA:
            resultado.parcelas_pagas += 1

    novo_status = derivar_status_acordo(
        acordo.status,
        [p.status for p in acordo.parcelas],
        obrigacoes_avulsas_quitadas(acordo),
    )
    resultado.status_novo = novo_status

    if resultado.alterou_acordo:
        depois = {"status": novo_status}
        acordo.status = novo_status

        if novo_status == StatusAcordo.CUMPRIDO:
            acordo.cumprido_em = agora or now_utc()
            processos.definir_status(db, acordo.processo_id, StatusProcesso.CONCLUIDO)
            depois["processo_status"] = StatusProcesso.CONCLUIDO

        auditoria.registrar(
            db, AuditEvent.ACORDO_STATUS, "Acordo", acordo.id,
            antes={"status": resultado.status_anterior},
            depois=depois,
            usuario_id=operador_id,
        )
        logger.info(
            "Status do acordo alterado",
            acordo_id=acordo.id,
            de=resultado.status_anterior,
            para=novo_status,
        )

    db.flush()
    return resultado


# ==========================================
# Varredura periódica
# ==========================================

@dataclass
class ResultadoVarredura:
    data_referencia: date
    acordos_inspecionados: int = 0
    parcelas_vencidas: int = 0
    acordos_vencidos: int = 0
    falhas: int = 0
    acordos_com_falha: List[int] = field(default_factory=list)


def executar_varredura_vencimentos(
    session_factory,
    relogio: Relogio,
    auditoria: Optional[RegistroAuditoria] = None,
    processos: Optional[ProvedorProcessos] = None,
    lote: int = VARREDURA_LOTE,
) -> ResultadoVarredura:
    """
    Marca como vencidas as parcelas pendentes com vencimento anterior a hoje
    e recalcula o status dos acordos afetados.

    Cada acordo é reconciliado em sua própria transação: a falha de um não
    desfaz os demais. Rodar duas vezes no mesmo dia não altera nada na segunda.
    """
    auditoria = auditoria or AuditoriaBanco()
    processos = processos or ProvedorProcessosSQL()
    hoje = relogio.hoje()
    resultado = ResultadoVarredura(data_referencia=hoje)

    logger.info("Varredura de vencimentos iniciada", data=hoje.isoformat(), lote=lote)

    # Paginação por id: cada acordo é visitado uma única vez por execução
    ultimo_id = 0
    while True:
        acordo_ids = _acordos_com_parcelas_vencidas(session_factory, hoje, ultimo_id, lote)
        if not acordo_ids:
            break

        for acordo_id in acordo_ids:
            try:
                with unidade_de_trabalho(session_factory) as db:
                    acordo = db.get(Acordo, acordo_id, with_for_update=True)
                    if acordo is None or not acordo.aberto:
                        continue

                    resultado.acordos_inspecionados += 1
                    reconciliacao = reconciliar_acordo(
                        db, acordo, hoje, auditoria, processos,
                        agora=relogio.agora_utc(),
                    )

                resultado.parcelas_vencidas += reconciliacao.parcelas_vencidas
                if reconciliacao.alterou_acordo and reconciliacao.status_novo == StatusAcordo.VENCIDO:
                    resultado.acordos_vencidos += 1

            except Exception:
                resultado.falhas += 1
                resultado.acordos_com_falha.append(acordo_id)
                logger.exception("Falha ao reconciliar acordo na varredura", acordo_id=acordo_id)

        ultimo_id = acordo_ids[-1]

    logger.info(
        "Varredura de vencimentos concluída",
        data=hoje.isoformat(),
        inspecionados=resultado.acordos_inspecionados,
        parcelas_vencidas=resultado.parcelas_vencidas,
        acordos_vencidos=resultado.acordos_vencidos,
        falhas=resultado.falhas,
    )
    return resultado


def _acordos_com_parcelas_vencidas(session_factory, hoje: date, apos_id: int, lote: int) -> List[int]:
    """Próximo lote de acordos abertos com parcela pendente já vencida (id > apos_id)."""
    with unidade_de_trabalho(session_factory) as db:
        return list(db.execute(
            select(Acordo.id)
            .join(ParcelaAcordo, ParcelaAcordo.acordo_id == Acordo.id)
            .where(
                Acordo.id > apos_id,
                Acordo.status.in_([s.value for s in STATUS_ACORDO_ABERTO]),
                ParcelaAcordo.status == StatusParcela.PENDENTE.value,
                ParcelaAcordo.data_vencimento < hoje,
            )
            .distinct()
            .order_by(Acordo.id)
            .limit(lote)
        ).scalars().all())
