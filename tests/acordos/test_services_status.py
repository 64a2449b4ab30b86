# tests/acordos/test_services_status.py
"""
Testes da reconciliação de status e da varredura de vencimentos.
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from sistemas.acordos.constants import StatusAcordo, StatusParcela, StatusProcesso
from sistemas.acordos.integracoes import AuditoriaBanco
from sistemas.acordos.models import Acordo, LogAuditoria, ParcelaAcordo, Processo
from sistemas.acordos.services import AcordoService
from sistemas.acordos.services_status import (
    derivar_status_parcela, derivar_status_acordo, executar_varredura_vencimentos
)
from utils.audit import AuditEvent

HOJE = date(2026, 3, 10)

P = StatusParcela
A = StatusAcordo


class TestDerivarStatusParcela:

    def test_pendente_vencida(self):
        assert derivar_status_parcela(Decimal("100"), Decimal("0"), date(2026, 3, 9), P.PENDENTE.value, HOJE) == P.VENCIDA

    def test_vence_hoje_continua_pendente(self):
        assert derivar_status_parcela(Decimal("100"), Decimal("0"), HOJE, P.PENDENTE.value, HOJE) == P.PENDENTE

    def test_totalmente_paga(self):
        assert derivar_status_parcela(Decimal("100"), Decimal("100"), date(2026, 1, 1), P.VENCIDA.value, HOJE) == P.PAGA

    def test_parcial_vencida_continua_vencida(self):
        assert derivar_status_parcela(Decimal("100"), Decimal("40"), date(2026, 1, 1), P.VENCIDA.value, HOJE) == P.VENCIDA

    @pytest.mark.parametrize("status", [P.PAGA.value, P.CANCELADA.value])
    def test_status_finais_nao_mudam(self, status):
        assert derivar_status_parcela(Decimal("100"), Decimal("0"), date(2020, 1, 1), status, HOJE) == status

    def test_idempotente(self):
        primeiro = derivar_status_parcela(Decimal("100"), Decimal("0"), date(2026, 3, 1), P.PENDENTE.value, HOJE)
        assert derivar_status_parcela(Decimal("100"), Decimal("0"), date(2026, 3, 1), primeiro, HOJE) == primeiro


class TestDerivarStatusAcordo:

    def test_todas_pagas_e_obrigacoes_quitadas(self):
        assert derivar_status_acordo(A.ATIVO.value, [P.PAGA, P.PAGA], True) == A.CUMPRIDO

    def test_todas_pagas_com_custas_pendentes(self):
        assert derivar_status_acordo(A.ATIVO.value, [P.PAGA, P.PAGA], False) == A.ATIVO

    def test_canceladas_sao_ignoradas(self):
        assert derivar_status_acordo(A.VENCIDO.value, [P.PAGA, P.CANCELADA], True) == A.CUMPRIDO

    def test_parcela_vencida(self):
        assert derivar_status_acordo(A.ATIVO.value, [P.PAGA, P.VENCIDA, P.PENDENTE], True) == A.VENCIDO

    def test_vencido_sem_atraso_volta_a_ativo(self):
        assert derivar_status_acordo(A.VENCIDO.value, [P.PAGA, P.PENDENTE], True) == A.ATIVO

    @pytest.mark.parametrize("status", [A.CANCELADO.value, A.CUMPRIDO.value])
    def test_terminais_nao_mudam(self, status):
        assert derivar_status_acordo(status, [P.VENCIDA], True) == status


def _status_acordo(session_factory, acordo_id):
    with session_factory() as s:
        return s.get(Acordo, acordo_id).status


def _status_parcelas(session_factory, acordo_id):
    with session_factory() as s:
        return [
            p.status for p in s.execute(
                select(ParcelaAcordo)
                .where(ParcelaAcordo.acordo_id == acordo_id)
                .order_by(ParcelaAcordo.data_vencimento, ParcelaAcordo.id)
            ).scalars()
        ]


def _total_auditoria(session_factory):
    with session_factory() as s:
        return s.execute(select(func.count(LogAuditoria.id))).scalar()


class TestVarredura:

    def test_marca_vencidas_e_acordo(self, service, funcionario, criar_processo, dados_transacao, relogio, session_factory):
        acordo = service.criar_acordo(dados_transacao(criar_processo()), funcionario)

        relogio.definir(date(2026, 4, 11))
        resultado = service.executar_varredura_vencimentos()

        assert resultado.acordos_inspecionados == 1
        assert resultado.parcelas_vencidas == 2  # entrada + 1ª parcela
        assert resultado.acordos_vencidos == 1
        assert resultado.falhas == 0
        assert _status_acordo(session_factory, acordo.id) == A.VENCIDO
        assert _status_parcelas(session_factory, acordo.id) == [
            P.VENCIDA, P.VENCIDA, P.PENDENTE, P.PENDENTE, P.PENDENTE, P.PENDENTE
        ]

    def test_segunda_execucao_nao_altera_nada(self, service, funcionario, criar_processo, dados_transacao, relogio, session_factory):
        acordo = service.criar_acordo(dados_transacao(criar_processo()), funcionario)
        relogio.definir(date(2026, 4, 11))
        service.executar_varredura_vencimentos()

        auditoria_antes = _total_auditoria(session_factory)
        parcelas_antes = _status_parcelas(session_factory, acordo.id)

        resultado = service.executar_varredura_vencimentos()

        assert resultado.acordos_inspecionados == 0
        assert resultado.parcelas_vencidas == 0
        assert resultado.acordos_vencidos == 0
        assert _total_auditoria(session_factory) == auditoria_antes
        assert _status_parcelas(session_factory, acordo.id) == parcelas_antes

    def test_nada_vencido(self, service, funcionario, criar_processo, dados_transacao):
        service.criar_acordo(dados_transacao(criar_processo()), funcionario)

        resultado = service.executar_varredura_vencimentos()

        assert resultado.acordos_inspecionados == 0
        assert resultado.parcelas_vencidas == 0

    def test_pagar_vencidas_volta_a_ativo(self, service, funcionario, criar_processo, dados_transacao, relogio, pagar, session_factory):
        acordo = service.criar_acordo(dados_transacao(criar_processo()), funcionario)
        relogio.definir(date(2026, 4, 11))
        service.executar_varredura_vencimentos()

        entrada, primeira = acordo.parcelas[0], acordo.parcelas[1]

        parcial = pagar(entrada.id, "2000.00")
        assert parcial.parcela.status == P.VENCIDA
        assert parcial.acordo_status == A.VENCIDO

        pagar(entrada.id, "3000.00")
        resultado = pagar(primeira.id, "23000.00")

        assert resultado.parcela.status == P.PAGA
        assert resultado.acordo_status == A.ATIVO
        assert _status_acordo(session_factory, acordo.id) == A.ATIVO

    def test_falha_em_um_acordo_nao_interrompe_varredura(
        self, service, funcionario, criar_processo, dados_transacao, relogio, session_factory
    ):
        acordo_ok = service.criar_acordo(dados_transacao(criar_processo()), funcionario)
        acordo_falho = service.criar_acordo(dados_transacao(criar_processo()), funcionario)

        class AuditoriaComFalha(AuditoriaBanco):
            def registrar(self, db, acao, entidade, entidade_id, **kwargs):
                if acao == AuditEvent.ACORDO_STATUS and entidade_id == acordo_falho.id:
                    raise RuntimeError("falha simulada")
                super().registrar(db, acao, entidade, entidade_id, **kwargs)

        relogio.definir(date(2026, 3, 11))
        varredura = AcordoService(session_factory=session_factory, relogio=relogio, auditoria=AuditoriaComFalha())
        resultado = varredura.executar_varredura_vencimentos()

        assert resultado.acordos_inspecionados == 2
        assert resultado.falhas == 1
        assert resultado.acordos_com_falha == [acordo_falho.id]
        assert resultado.acordos_vencidos == 1
        assert resultado.parcelas_vencidas == 1

        assert _status_acordo(session_factory, acordo_ok.id) == A.VENCIDO
        # Transação do acordo com falha foi desfeita por inteiro
        assert _status_acordo(session_factory, acordo_falho.id) == A.ATIVO
        assert _status_parcelas(session_factory, acordo_falho.id)[0] == P.PENDENTE

    def test_percorre_todos_os_lotes(self, service, funcionario, criar_processo, dados_transacao, relogio, session_factory):
        acordos = [service.criar_acordo(dados_transacao(criar_processo()), funcionario) for _ in range(3)]

        relogio.definir(date(2026, 3, 11))
        resultado = executar_varredura_vencimentos(session_factory, relogio, lote=2)

        assert resultado.acordos_inspecionados == 3
        assert resultado.acordos_vencidos == 3
        assert all(_status_acordo(session_factory, a.id) == A.VENCIDO for a in acordos)

    def test_falhas_no_inicio_nao_bloqueiam_proximos_lotes(
        self, service, funcionario, criar_processo, dados_transacao, relogio, session_factory
    ):
        acordos = [service.criar_acordo(dados_transacao(criar_processo()), funcionario) for _ in range(3)]
        falhos = {acordos[0].id, acordos[1].id}

        class AuditoriaComFalha(AuditoriaBanco):
            def registrar(self, db, acao, entidade, entidade_id, **kwargs):
                if acao == AuditEvent.ACORDO_STATUS and entidade_id in falhos:
                    raise RuntimeError("falha simulada")
                super().registrar(db, acao, entidade, entidade_id, **kwargs)

        relogio.definir(date(2026, 3, 11))
        resultado = executar_varredura_vencimentos(
            session_factory, relogio, auditoria=AuditoriaComFalha(), lote=1
        )

        assert resultado.acordos_com_falha == [acordos[0].id, acordos[1].id]
        assert resultado.acordos_vencidos == 1
        assert _status_acordo(session_factory, acordos[2].id) == A.VENCIDO

    def test_cumprimento_conclui_processo(self, service, funcionario, criar_processo, dados_transacao, pagar, session_factory):
        processo_id = criar_processo()
        acordo = service.criar_acordo(dados_transacao(processo_id, metodo="avista", total="1000.00", entrada="0"), funcionario)

        resultado = pagar(acordo.parcelas[0].id, "1000.00")

        assert resultado.acordo_status == A.CUMPRIDO
        with session_factory() as s:
            assert s.get(Processo, processo_id).status == StatusProcesso.CONCLUIDO
            assert s.get(Acordo, acordo.id).cumprido_em is not None
