# tests/acordos/test_services_pagamentos.py
"""
Testes do livro de pagamentos.

Verifica:
- Pagamentos parciais acumulam até quitar a parcela
- Pagamento acima do saldo é rejeitado sem alterar a parcela
- Datas futuras, valores não positivos e frações de centavo são rejeitados
- Parcela paga/cancelada não aceita pagamento
- Versão desatualizada da parcela gera ConflitoError
- Locks na ordem acordo -> parcela
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import event, func, select, update

from database.connection import unidade_de_trabalho
from sistemas.acordos.constants import StatusParcela, FormaPagamento
from sistemas.acordos.exceptions import (
    ValidacaoError, EstadoInvalidoError, ConflitoError, NaoEncontradoError
)
from sistemas.acordos.models import ParcelaAcordo, PagamentoParcela
from sistemas.acordos.services_pagamentos import aplicar_pagamento

HOJE = date(2026, 3, 10)


@pytest.fixture
def acordo(service, funcionario, criar_processo, dados_transacao):
    return service.criar_acordo(dados_transacao(criar_processo()), funcionario)


def _primeira_regular(acordo):
    return next(p for p in acordo.parcelas if p.tipo_parcela == "principal" and p.numero == 1)


def _parcela(session_factory, parcela_id):
    with session_factory() as s:
        parcela = s.get(ParcelaAcordo, parcela_id)
        s.expunge(parcela)
        return parcela


def _contar_pagamentos(session_factory, parcela_id):
    with session_factory() as s:
        return s.execute(
            select(func.count(PagamentoParcela.id)).where(PagamentoParcela.parcela_id == parcela_id)
        ).scalar()


class TestPagamentosParciais:

    def test_parcial_mantem_pendente(self, acordo, pagar, session_factory):
        parcela = _primeira_regular(acordo)

        resultado = pagar(parcela.id, "1000.00")

        assert resultado.parcela_quitada is False
        assert resultado.parcela.status == StatusParcela.PENDENTE
        assert resultado.parcela.valor_pago == Decimal("1000.00")
        assert resultado.parcela.data_pagamento is None

    def test_pagamentos_acumulam_ate_quitar(self, acordo, pagar, session_factory):
        parcela = _primeira_regular(acordo)

        pagar(parcela.id, "1000.00", data_pagamento=date(2026, 3, 1))
        resultado = pagar(parcela.id, "22000.00")

        assert resultado.parcela_quitada is True
        assert resultado.parcela.status == StatusParcela.PAGA
        assert resultado.parcela.valor_pago == Decimal("23000.00")
        assert resultado.parcela.data_pagamento == HOJE
        assert _contar_pagamentos(session_factory, parcela.id) == 2

    def test_versao_incrementa_a_cada_pagamento(self, acordo, pagar):
        parcela = _primeira_regular(acordo)
        assert parcela.versao == 1

        assert pagar(parcela.id, "100.00").parcela.versao == 2
        assert pagar(parcela.id, "100.00").parcela.versao == 3


class TestRejeicoes:

    def test_pagamento_acima_do_saldo(self, acordo, pagar, session_factory):
        parcela = _primeira_regular(acordo)
        pagar(parcela.id, "1000.00")

        with pytest.raises(ValidacaoError) as exc:
            pagar(parcela.id, "22000.01")

        assert exc.value.detalhes["valor_restante"] == "22000.00"
        assert "22000.00" in exc.value.mensagem

        gravada = _parcela(session_factory, parcela.id)
        assert gravada.valor_pago == Decimal("1000.00")
        assert gravada.status == StatusParcela.PENDENTE
        assert gravada.versao == 2
        assert _contar_pagamentos(session_factory, parcela.id) == 1

    def test_data_futura(self, acordo, pagar, session_factory):
        parcela = _primeira_regular(acordo)

        with pytest.raises(ValidacaoError):
            pagar(parcela.id, "100.00", data_pagamento=date(2026, 3, 11))

        assert _contar_pagamentos(session_factory, parcela.id) == 0

    @pytest.mark.parametrize("valor", ["0", "-10.00", "0.001"])
    def test_valor_nao_positivo(self, acordo, pagar, valor):
        with pytest.raises(ValidacaoError):
            pagar(_primeira_regular(acordo).id, valor)

    def test_fracao_de_centavo_rejeitada_sem_arredondar(
        self, service, funcionario, criar_processo, dados_transacao, pagar, session_factory
    ):
        acordo = service.criar_acordo(
            dados_transacao(criar_processo(), metodo="avista", total="100.00", entrada="0"),
            funcionario,
        )
        parcela_id = acordo.parcelas[0].id

        with pytest.raises(ValidacaoError) as exc:
            pagar(parcela_id, "100.004")

        assert exc.value.detalhes["valor"] == "100.004"
        gravada = _parcela(session_factory, parcela_id)
        assert gravada.valor_pago == Decimal("0.00")
        assert gravada.status == StatusParcela.PENDENTE
        assert _contar_pagamentos(session_factory, parcela_id) == 0

    def test_valor_sem_casas_decimais_aceito(self, acordo, pagar):
        resultado = pagar(_primeira_regular(acordo).id, "100")

        assert resultado.parcela.valor_pago == Decimal("100.00")

    def test_parcela_paga_nao_aceita_pagamento(self, acordo, pagar):
        parcela = _primeira_regular(acordo)
        pagar(parcela.id, "23000.00")

        with pytest.raises(EstadoInvalidoError):
            pagar(parcela.id, "1.00")

    def test_acordo_cancelado_nao_aceita_pagamento(self, acordo, pagar, service, funcionario):
        service.cancelar_acordo(acordo.id, "Desistência do contribuinte", funcionario)

        with pytest.raises(EstadoInvalidoError):
            pagar(_primeira_regular(acordo).id, "100.00")

    def test_dados_invalidos_viram_validacao(self, acordo, service, funcionario):
        with pytest.raises(ValidacaoError) as exc:
            service.registrar_pagamento(
                _primeira_regular(acordo).id,
                {"valor": "abc", "data_pagamento": "2026-03-10", "forma_pagamento": "cheque"},
                funcionario,
            )

        campos = {erro["campo"] for erro in exc.value.detalhes["erros"]}
        assert {"valor", "forma_pagamento"} <= campos


class TestConcorrencia:

    def test_versao_desatualizada_gera_conflito(self, acordo, session_factory):
        parcela_id = _primeira_regular(acordo).id

        with pytest.raises(ConflitoError):
            with unidade_de_trabalho(session_factory) as db:
                parcela = db.get(ParcelaAcordo, parcela_id)

                # Outra transação altera a parcela depois da leitura
                db.execute(
                    update(ParcelaAcordo)
                    .where(ParcelaAcordo.id == parcela_id)
                    .values(versao=ParcelaAcordo.versao + 1)
                    .execution_options(synchronize_session=False)
                )

                aplicar_pagamento(db, parcela, Decimal("100.00"), HOJE, FormaPagamento.PIX, HOJE)

        gravada = _parcela(session_factory, parcela_id)
        assert gravada.valor_pago == Decimal("0.00")
        assert gravada.versao == 1
        assert _contar_pagamentos(session_factory, parcela_id) == 0

    def test_pagamento_trava_acordo_antes_da_parcela(self, acordo, pagar, session_factory):
        travados = []

        def _registrar_lock(estado):
            if estado.is_select and estado.statement._for_update_arg is not None:
                travados.extend(m.class_.__name__ for m in estado.all_mappers)

        event.listen(session_factory, "do_orm_execute", _registrar_lock)
        try:
            pagar(_primeira_regular(acordo).id, "100.00")
        finally:
            event.remove(session_factory, "do_orm_execute", _registrar_lock)

        assert travados.index("Acordo") < travados.index("ParcelaAcordo")

    def test_parcela_inexistente(self, acordo, pagar):
        with pytest.raises(NaoEncontradoError):
            pagar(9999, "100.00")
