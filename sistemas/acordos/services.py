# sistemas/acordos/services.py
"""
Orquestração do ciclo de vida dos acordos

Fluxo:
1. criar_acordo: valida elegibilidade do processo, gera o cronograma e
   coloca o processo em cumprimento
2. registrar_pagamento: lança o pagamento na parcela e reconcilia o acordo
   (acordo cumprido -> processo concluído)
3. cancelar_acordo / excluir_acordo: encerram o acordo e devolvem o processo
   ao status julgado
4. executar_varredura_vencimentos: marca parcelas e acordos vencidos

Cada operação roda em uma única transação (unidade_de_trabalho): ou tudo é
gravado (acordo, parcelas, status do processo, auditoria) ou nada é.
"""

from datetime import date
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy import select, func

from database.connection import SessionLocal, unidade_de_trabalho
from sistemas.acordos.constants import (
    TipoAcordo, StatusAcordo, StatusParcela, StatusProcesso, MetodoPagamento,
    STATUS_ACORDO_ABERTO, STATUS_ACORDO_TERMINAL, STATUS_PARCELA_PAGAVEL,
    JULGAMENTOS_FAVORAVEIS, STATUS_PROCESSO_SEM_ACORDO
)
from sistemas.acordos.exceptions import (
    ValidacaoError, NaoElegivelError, NaoEncontradoError, EstadoInvalidoError,
    PossuiPagamentosError, PermissaoNegadaError
)
from sistemas.acordos.integracoes import (
    Operador, ProvedorProcessos, ProvedorProcessosSQL, RegistroAuditoria, AuditoriaBanco
)
from sistemas.acordos.models import (
    Acordo, AcordoTransacao, AcordoCompensacao, AcordoDacao, ParcelaAcordo
)
from sistemas.acordos.schemas import (
    AcordoCreate, PagamentoCreate, AcordoOut, ParcelaOut, PagamentoOut, StatusAcordoOut,
    TermosTransacao, TermosCompensacao, TermosDacao
)
from sistemas.acordos.services_pagamentos import aplicar_pagamento
from sistemas.acordos.services_parcelas import (
    gerar_parcelas, calcular_valor_parcela, calcular_valor_liquido
)
from sistemas.acordos.services_status import (
    ResultadoReconciliacao, ResultadoVarredura,
    reconciliar_acordo, derivar_status_parcela, derivar_status_acordo,
    obrigacoes_avulsas_quitadas, executar_varredura_vencimentos
)
from sistemas.acordos.valores import ZERO, quantizar, formatar_numero_termo
from utils.audit import AuditEvent
from utils.logging_config import get_logger
from utils.timezone import Relogio

logger = get_logger(__name__)


class AcordoService:
    """Serviço de acordos: criação, pagamentos, cancelamento e consulta"""

    def __init__(
        self,
        session_factory: Optional[Callable] = None,
        relogio: Optional[Relogio] = None,
        processos: Optional[ProvedorProcessos] = None,
        auditoria: Optional[RegistroAuditoria] = None,
    ):
        self.session_factory = session_factory or SessionLocal
        self.relogio = relogio or Relogio()
        self.processos = processos or ProvedorProcessosSQL()
        self.auditoria = auditoria or AuditoriaBanco()

    # ==========================================
    # Criação
    # ==========================================

    def criar_acordo(self, dados: Union[AcordoCreate, Dict[str, Any]], operador: Operador) -> AcordoOut:
        """
        Cria o acordo, seus termos financeiros e o cronograma de parcelas.

        Raises:
            PermissaoNegadaError: operador somente leitura
            ValidacaoError: dados inválidos (datas, valores, quantidades)
            NaoElegivelError: processo não julgado/deferido ou com acordo em aberto
            NaoEncontradoError: processo inexistente
        """
        self._exigir_escrita(operador)
        dados = self._validar_entrada(AcordoCreate, dados)

        if dados.data_vencimento <= dados.data_assinatura:
            raise ValidacaoError(
                "Data de vencimento deve ser posterior à data de assinatura",
                detalhes={
                    "data_assinatura": dados.data_assinatura.isoformat(),
                    "data_vencimento": dados.data_vencimento.isoformat(),
                }
            )

        hoje = self.relogio.hoje()
        rascunhos = gerar_parcelas(dados.termos, dados.data_assinatura, hoje)

        with unidade_de_trabalho(self.session_factory) as db:
            processo = self.processos.obter_processo(db, dados.processo_id)

            if processo.status != StatusProcesso.JULGADO:
                raise NaoElegivelError(
                    "Acordo só pode ser criado para processo julgado",
                    detalhes={"processo_id": processo.id, "status": processo.status}
                )
            if processo.resultado_julgamento not in JULGAMENTOS_FAVORAVEIS:
                raise NaoElegivelError(
                    "Acordo exige julgamento deferido ou parcialmente deferido",
                    detalhes={"processo_id": processo.id, "resultado": processo.resultado_julgamento}
                )

            acordo_aberto = db.execute(
                select(Acordo.id).where(
                    Acordo.processo_id == processo.id,
                    Acordo.status.in_([s.value for s in STATUS_ACORDO_ABERTO]),
                )
            ).scalar()
            if acordo_aberto:
                raise NaoElegivelError(
                    "Processo já possui acordo ativo",
                    detalhes={"processo_id": processo.id, "acordo_id": acordo_aberto}
                )

            ano = hoje.year
            sequencial = self._proximo_sequencial(db, ano)

            acordo = Acordo(
                processo_id=processo.id,
                tipo=dados.termos.tipo,
                ano_termo=ano,
                sequencial_termo=sequencial,
                numero_termo=formatar_numero_termo(sequencial, ano),
                data_assinatura=dados.data_assinatura,
                data_vencimento=dados.data_vencimento,
                status=StatusAcordo.ATIVO.value,
                observacoes=dados.observacoes,
                clausulas_especiais=dados.clausulas_especiais,
                created_by=operador.user_id,
            )
            termos = _CONSTRUTORES_TERMOS[dados.termos.tipo](dados.termos)
            termos.acordo = acordo

            for rascunho in rascunhos:
                acordo.parcelas.append(ParcelaAcordo(
                    tipo_parcela=rascunho.tipo_parcela.value,
                    numero=rascunho.numero,
                    valor=rascunho.valor,
                    valor_pago=ZERO,
                    data_vencimento=rascunho.data_vencimento,
                    status=rascunho.status.value,
                ))

            db.add(acordo)
            db.flush()

            self.processos.definir_status(db, processo.id, StatusProcesso.EM_CUMPRIMENTO)

            self.auditoria.registrar(
                db, AuditEvent.ACORDO_CRIADO, "Acordo", acordo.id,
                depois={
                    "numero_termo": acordo.numero_termo,
                    "tipo": acordo.tipo,
                    "processo_id": acordo.processo_id,
                    "status": acordo.status,
                    "quantidade_parcelas": len(rascunhos),
                    "valor_parcelas": sum((r.valor for r in rascunhos), ZERO),
                    "processo_status": StatusProcesso.EM_CUMPRIMENTO,
                },
                usuario_id=operador.user_id,
            )

            logger.info(
                "Acordo criado",
                acordo_id=acordo.id,
                numero_termo=acordo.numero_termo,
                tipo=acordo.tipo,
                processo_id=processo.id,
                parcelas=len(rascunhos),
                operador=operador.user_id,
            )
            return self._acordo_out(acordo)

    # ==========================================
    # Encerramento
    # ==========================================

    def cancelar_acordo(self, acordo_id: int, motivo: str, operador: Operador) -> AcordoOut:
        """
        Cancela o acordo: parcelas não pagas viram canceladas, parcelas
        pagas e pagamentos permanecem. O processo volta a julgado.
        """
        self._exigir_escrita(operador)
        motivo = (motivo or "").strip()
        if not motivo:
            raise ValidacaoError("Motivo do cancelamento é obrigatório")

        with unidade_de_trabalho(self.session_factory) as db:
            acordo = self._carregar_acordo(db, acordo_id)
            if acordo.status in STATUS_ACORDO_TERMINAL:
                raise EstadoInvalidoError(
                    f"Acordo {acordo.status} não pode ser cancelado",
                    detalhes={"acordo_id": acordo.id, "status": acordo.status}
                )

            status_anterior = acordo.status
            canceladas = 0
            for parcela in acordo.parcelas:
                if parcela.status != StatusParcela.PAGA:
                    parcela.status = StatusParcela.CANCELADA.value
                    canceladas += 1

            acordo.status = StatusAcordo.CANCELADO.value
            acordo.motivo_cancelamento = motivo
            acordo.cancelado_em = self.relogio.agora_utc()

            self.processos.definir_status(db, acordo.processo_id, STATUS_PROCESSO_SEM_ACORDO)

            self.auditoria.registrar(
                db, AuditEvent.ACORDO_CANCELADO, "Acordo", acordo.id,
                antes={"status": status_anterior},
                depois={
                    "status": acordo.status,
                    "motivo": motivo,
                    "parcelas_canceladas": canceladas,
                    "processo_status": STATUS_PROCESSO_SEM_ACORDO,
                },
                usuario_id=operador.user_id,
            )
            db.flush()

            logger.info(
                "Acordo cancelado",
                acordo_id=acordo.id,
                parcelas_canceladas=canceladas,
                operador=operador.user_id,
            )
            return self._acordo_out(acordo)

    def excluir_acordo(self, acordo_id: int, operador: Operador) -> None:
        """
        Exclui o acordo e suas parcelas (somente administradores).

        Raises:
            PermissaoNegadaError: operador não é administrador
            PossuiPagamentosError: há pagamentos registrados (use cancelar_acordo)
        """
        if not operador.is_admin:
            raise PermissaoNegadaError(
                "Apenas administradores podem excluir acordos",
                detalhes={"perfil": operador.perfil}
            )

        with unidade_de_trabalho(self.session_factory) as db:
            acordo = self._carregar_acordo(db, acordo_id)

            if acordo.possui_pagamentos:
                raise PossuiPagamentosError(
                    "Não é possível excluir acordo com pagamentos registrados. "
                    "Cancele o acordo em vez de excluí-lo.",
                    detalhes={"acordo_id": acordo.id}
                )

            antes = {
                "numero_termo": acordo.numero_termo,
                "tipo": acordo.tipo,
                "status": acordo.status,
                "processo_id": acordo.processo_id,
            }
            depois = None
            if acordo.aberto:
                self.processos.definir_status(db, acordo.processo_id, STATUS_PROCESSO_SEM_ACORDO)
                depois = {"processo_status": STATUS_PROCESSO_SEM_ACORDO}

            db.delete(acordo)

            self.auditoria.registrar(
                db, AuditEvent.ACORDO_EXCLUIDO, "Acordo", acordo_id,
                antes=antes,
                depois=depois,
                usuario_id=operador.user_id,
            )

            logger.info("Acordo excluído", acordo_id=acordo_id, operador=operador.user_id)

    # ==========================================
    # Pagamentos
    # ==========================================

    def registrar_pagamento(
        self,
        parcela_id: int,
        dados: Union[PagamentoCreate, Dict[str, Any]],
        operador: Operador
    ) -> PagamentoOut:
        """
        Registra pagamento (parcial ou total) de uma parcela e reconcilia o acordo.

        Raises:
            PermissaoNegadaError: operador somente leitura
            NaoEncontradoError: parcela inexistente
            EstadoInvalidoError: acordo encerrado ou parcela não pagável
            ValidacaoError: valor inválido, acima do saldo ou data futura
            ConflitoError: parcela alterada por outra operação
        """
        self._exigir_escrita(operador)
        dados = self._validar_entrada(PagamentoCreate, dados)
        hoje = self.relogio.hoje()

        with unidade_de_trabalho(self.session_factory) as db:
            # Lock sempre na ordem acordo -> parcela, a mesma do cancelamento e da varredura
            acordo_id = db.execute(
                select(ParcelaAcordo.acordo_id).where(ParcelaAcordo.id == parcela_id)
            ).scalar()
            if acordo_id is None:
                raise NaoEncontradoError("Parcela não encontrada", detalhes={"parcela_id": parcela_id})
            acordo = self._carregar_acordo(db, acordo_id)
            parcela = db.get(ParcelaAcordo, parcela_id, with_for_update=True)

            status_anterior = parcela.status
            resultado = aplicar_pagamento(
                db,
                parcela,
                dados.valor,
                dados.data_pagamento,
                dados.forma_pagamento,
                hoje,
                numero_comprovante=dados.numero_comprovante,
                observacoes=dados.observacoes,
                registrado_por=operador.user_id,
            )
            pagamento = resultado.pagamento

            self.auditoria.registrar(
                db, AuditEvent.PAGAMENTO_REGISTRADO, "PagamentoParcela", pagamento.id,
                depois={
                    "parcela_id": parcela.id,
                    "acordo_id": acordo.id,
                    "valor_pago": pagamento.valor_pago,
                    "data_pagamento": pagamento.data_pagamento,
                    "forma_pagamento": pagamento.forma_pagamento,
                    "valor_pago_acumulado": parcela.valor_pago,
                },
                usuario_id=operador.user_id,
            )
            if resultado.quitou:
                self.auditoria.registrar(
                    db, AuditEvent.PARCELA_STATUS, "ParcelaAcordo", parcela.id,
                    antes={"status": status_anterior},
                    depois={"status": parcela.status, "data_pagamento": parcela.data_pagamento},
                    usuario_id=operador.user_id,
                )

            self.verificar_cumprimento(db, acordo, operador)

            logger.info(
                "Pagamento registrado",
                pagamento_id=pagamento.id,
                parcela_id=parcela.id,
                acordo_id=acordo.id,
                valor=str(pagamento.valor_pago),
                quitou=resultado.quitou,
                operador=operador.user_id,
            )

            return PagamentoOut(
                id=pagamento.id,
                parcela_id=parcela.id,
                valor_pago=pagamento.valor_pago,
                data_pagamento=pagamento.data_pagamento,
                forma_pagamento=pagamento.forma_pagamento,
                numero_comprovante=pagamento.numero_comprovante,
                observacoes=pagamento.observacoes,
                registrado_por=pagamento.registrado_por,
                created_at=pagamento.created_at,
                parcela=ParcelaOut.model_validate(parcela),
                parcela_quitada=resultado.quitou,
                acordo_status=acordo.status,
            )

    def registrar_pagamento_custas(self, acordo_id: int, data_pagamento: date, operador: Operador) -> AcordoOut:
        """Registra o pagamento das custas processuais e verifica o cumprimento."""
        self._exigir_escrita(operador)

        with unidade_de_trabalho(self.session_factory) as db:
            acordo = self._carregar_acordo(db, acordo_id)
            self._exigir_aberto(acordo)

            termos = acordo.termos
            if termos is None or not termos.possui_custas:
                raise EstadoInvalidoError(
                    "Acordo não possui custas a pagar",
                    detalhes={"acordo_id": acordo.id}
                )
            if termos.custas_data_pagamento is not None:
                raise EstadoInvalidoError(
                    "Pagamento das custas já registrado",
                    detalhes={"acordo_id": acordo.id, "custas_data_pagamento": termos.custas_data_pagamento.isoformat()}
                )
            self._validar_data_passada(data_pagamento, "data_pagamento")

            termos.custas_data_pagamento = data_pagamento

            self.auditoria.registrar(
                db, AuditEvent.CUSTAS_PAGAS, "Acordo", acordo.id,
                antes={"custas_data_pagamento": None},
                depois={"custas_data_pagamento": data_pagamento, "custas_valor": termos.custas_valor},
                usuario_id=operador.user_id,
            )
            self.verificar_cumprimento(db, acordo, operador)

            logger.info("Custas registradas como pagas", acordo_id=acordo.id, operador=operador.user_id)
            return self._acordo_out(acordo)

    def concluir_compensacao(self, acordo_id: int, data_efetivacao: date, operador: Operador) -> AcordoOut:
        """
        Registra a efetivação da compensação (ou da transferência dos bens,
        na dação) e verifica o cumprimento.
        """
        self._exigir_escrita(operador)

        with unidade_de_trabalho(self.session_factory) as db:
            acordo = self._carregar_acordo(db, acordo_id)
            if acordo.tipo == TipoAcordo.TRANSACAO_EXCEPCIONAL:
                raise EstadoInvalidoError(
                    "Transação excepcional é cumprida pelo pagamento das parcelas",
                    detalhes={"acordo_id": acordo.id, "tipo": acordo.tipo}
                )
            self._exigir_aberto(acordo)

            termos = acordo.termos
            if termos.data_efetivacao is not None:
                raise EstadoInvalidoError(
                    "Efetivação já registrada",
                    detalhes={"acordo_id": acordo.id, "data_efetivacao": termos.data_efetivacao.isoformat()}
                )
            self._validar_data_passada(data_efetivacao, "data_efetivacao")

            termos.data_efetivacao = data_efetivacao

            self.auditoria.registrar(
                db, AuditEvent.COMPENSACAO_EFETIVADA, "Acordo", acordo.id,
                antes={"data_efetivacao": None},
                depois={"data_efetivacao": data_efetivacao, "valor_liquido": termos.valor_liquido},
                usuario_id=operador.user_id,
            )
            self.verificar_cumprimento(db, acordo, operador)

            logger.info("Compensação efetivada", acordo_id=acordo.id, operador=operador.user_id)
            return self._acordo_out(acordo)

    def verificar_cumprimento(self, db, acordo: Acordo, operador: Optional[Operador] = None) -> ResultadoReconciliacao:
        """Reconcilia o acordo (acordo cumprido leva o processo a concluído)."""
        return reconciliar_acordo(
            db,
            acordo,
            self.relogio.hoje(),
            self.auditoria,
            self.processos,
            operador_id=operador.user_id if operador else None,
            agora=self.relogio.agora_utc(),
        )

    def executar_varredura_vencimentos(self) -> ResultadoVarredura:
        return executar_varredura_vencimentos(
            self.session_factory, self.relogio, self.auditoria, self.processos
        )

    # ==========================================
    # Consultas
    # ==========================================

    def obter_acordo(self, acordo_id: int) -> AcordoOut:
        with unidade_de_trabalho(self.session_factory) as db:
            return self._acordo_out(self._carregar_acordo(db, acordo_id, lock=False))

    def listar_acordos(self, processo_id: Optional[int] = None, status: Optional[str] = None) -> List[AcordoOut]:
        with unidade_de_trabalho(self.session_factory) as db:
            query = select(Acordo).order_by(Acordo.id)
            if processo_id is not None:
                query = query.where(Acordo.processo_id == processo_id)
            if status is not None:
                query = query.where(Acordo.status == StatusAcordo(status).value)
            return [self._acordo_out(a) for a in db.execute(query).scalars().all()]

    def obter_status_acordo(self, acordo_id: int) -> StatusAcordoOut:
        """
        Situação consolidada do acordo: totais, percentual pago, parcelas por
        status, próxima parcela e status recalculado para hoje.
        """
        hoje = self.relogio.hoje()

        with unidade_de_trabalho(self.session_factory) as db:
            acordo = self._carregar_acordo(db, acordo_id, lock=False)
            parcelas = list(acordo.parcelas)
            vigentes = [p for p in parcelas if p.status != StatusParcela.CANCELADA]

            valor_total = sum((p.valor for p in vigentes), ZERO)
            valor_pago = sum((p.valor_pago for p in vigentes), ZERO)
            percentual = quantizar(valor_pago * 100 / valor_total) if valor_total > ZERO else ZERO

            por_status = {s.value: 0 for s in StatusParcela}
            for parcela in parcelas:
                por_status[parcela.status] = por_status.get(parcela.status, 0) + 1

            abertas = sorted(
                (p for p in parcelas if p.status in STATUS_PARCELA_PAGAVEL),
                key=lambda p: (p.data_vencimento, p.id),
            )

            obrigacoes = obrigacoes_avulsas_quitadas(acordo)
            status_derivados = [
                derivar_status_parcela(p.valor, p.valor_pago, p.data_vencimento, p.status, hoje)
                for p in parcelas
            ]

            return StatusAcordoOut(
                acordo_id=acordo.id,
                numero_termo=acordo.numero_termo,
                status=acordo.status,
                status_derivado=derivar_status_acordo(acordo.status, status_derivados, obrigacoes),
                valor_total=valor_total,
                valor_pago=valor_pago,
                valor_restante=valor_total - valor_pago,
                percentual_pago=percentual,
                total_parcelas=len(parcelas),
                parcelas_por_status=por_status,
                proxima_parcela=ParcelaOut.model_validate(abertas[0]) if abertas else None,
                obrigacoes_avulsas_quitadas=obrigacoes,
            )

    # ==========================================
    # Auxiliares
    # ==========================================

    @staticmethod
    def _exigir_escrita(operador: Operador) -> None:
        if operador.somente_leitura:
            raise PermissaoNegadaError(
                "Perfil somente leitura não pode alterar acordos",
                detalhes={"perfil": operador.perfil}
            )

    @staticmethod
    def _exigir_aberto(acordo: Acordo) -> None:
        if not acordo.aberto:
            raise EstadoInvalidoError(
                f"Operação não permitida em acordo {acordo.status}",
                detalhes={"acordo_id": acordo.id, "status": acordo.status}
            )

    def _validar_data_passada(self, data: date, campo: str) -> None:
        hoje = self.relogio.hoje()
        if data > hoje:
            raise ValidacaoError(
                "Data não pode ser futura",
                detalhes={campo: data.isoformat(), "hoje": hoje.isoformat()}
            )

    @staticmethod
    def _validar_entrada(modelo, dados) -> BaseModel:
        """Aceita o schema já construído ou um dict; erros viram ValidacaoError."""
        if isinstance(dados, modelo):
            return dados
        try:
            return modelo.model_validate(dados)
        except ValidationError as e:
            raise ValidacaoError(
                "Dados inválidos",
                detalhes={
                    "erros": [
                        {"campo": ".".join(str(p) for p in erro["loc"]), "mensagem": erro["msg"]}
                        for erro in e.errors()
                    ]
                }
            ) from e

    @staticmethod
    def _carregar_acordo(db, acordo_id: int, lock: bool = True) -> Acordo:
        acordo = db.get(Acordo, acordo_id, with_for_update=lock or None)
        if not acordo:
            raise NaoEncontradoError("Acordo não encontrado", detalhes={"acordo_id": acordo_id})
        return acordo

    @staticmethod
    def _proximo_sequencial(db, ano: int) -> int:
        ultimo = db.execute(
            select(func.max(Acordo.sequencial_termo)).where(Acordo.ano_termo == ano)
        ).scalar()
        return (ultimo or 0) + 1

    @staticmethod
    def _acordo_out(acordo: Acordo) -> AcordoOut:
        termos = acordo.termos
        termos_dict = {}
        if termos is not None:
            termos_dict = {
                coluna.name: getattr(termos, coluna.name)
                for coluna in termos.__table__.columns
                if coluna.name not in ("id", "acordo_id")
            }

        return AcordoOut(
            id=acordo.id,
            processo_id=acordo.processo_id,
            tipo=acordo.tipo,
            numero_termo=acordo.numero_termo,
            data_assinatura=acordo.data_assinatura,
            data_vencimento=acordo.data_vencimento,
            status=acordo.status,
            observacoes=acordo.observacoes,
            clausulas_especiais=acordo.clausulas_especiais,
            motivo_cancelamento=acordo.motivo_cancelamento,
            cancelado_em=acordo.cancelado_em,
            cumprido_em=acordo.cumprido_em,
            created_by=acordo.created_by,
            created_at=acordo.created_at,
            termos=termos_dict,
            parcelas=[ParcelaOut.model_validate(p) for p in acordo.parcelas],
        )


# ==========================================
# Construção dos termos por formato
# ==========================================

def _honorarios_custas(termos) -> Dict[str, Any]:
    colunas = {}
    if termos.honorarios is not None:
        colunas.update(
            honorarios_valor=quantizar(termos.honorarios.valor),
            honorarios_metodo_pagamento=termos.honorarios.metodo_pagamento.value,
            honorarios_parcelas=(
                termos.honorarios.parcelas
                if termos.honorarios.metodo_pagamento == MetodoPagamento.PARCELADO else 1
            ),
        )
    if termos.custas is not None:
        colunas.update(
            custas_valor=quantizar(termos.custas.valor),
            custas_data_vencimento=termos.custas.data_vencimento,
        )
    return colunas


def _termos_transacao(termos: TermosTransacao) -> AcordoTransacao:
    parcelado = termos.metodo_pagamento == MetodoPagamento.PARCELADO
    return AcordoTransacao(
        valor_total_proposto=quantizar(termos.valor_total_proposto),
        metodo_pagamento=termos.metodo_pagamento.value,
        valor_entrada=quantizar(termos.valor_entrada) if parcelado else ZERO,
        quantidade_parcelas=termos.quantidade_parcelas if parcelado else 1,
        valor_parcela=calcular_valor_parcela(termos),
        **_honorarios_custas(termos)
    )


def _termos_compensacao(termos: TermosCompensacao) -> AcordoCompensacao:
    return AcordoCompensacao(
        valor_total_creditos=quantizar(termos.valor_total_creditos),
        valor_total_debitos=quantizar(termos.valor_total_debitos),
        valor_liquido=calcular_valor_liquido(termos),
        **_honorarios_custas(termos)
    )


def _termos_dacao(termos: TermosDacao) -> AcordoDacao:
    return AcordoDacao(
        valor_total_oferecido=quantizar(termos.valor_total_oferecido),
        valor_total_compensar=quantizar(termos.valor_total_compensar),
        valor_liquido=calcular_valor_liquido(termos),
        **_honorarios_custas(termos)
    )


_CONSTRUTORES_TERMOS: Dict[str, Callable[[Any], Any]] = {
    TipoAcordo.TRANSACAO_EXCEPCIONAL.value: _termos_transacao,
    TipoAcordo.COMPENSACAO.value: _termos_compensacao,
    TipoAcordo.DACAO_PAGAMENTO.value: _termos_dacao,
}
