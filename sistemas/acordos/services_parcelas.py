# sistemas/acordos/services_parcelas.py
"""
Geração do cronograma de parcelas de um acordo

Regras (transação excepcional):
- À vista: uma parcela principal (nº 1) com o valor total, vencendo hoje
- Parcelado: entrada (nº 0, vence hoje) se houver + N parcelas do saldo,
  a i-ésima vencendo i meses após a assinatura
- A última parcela absorve os centavos do arredondamento

Compensação e dação: o principal é quitado pelo próprio ato de compensação
(ver AcordoService.concluir_compensacao), então só os honorários geram parcelas.

Custas nunca viram parcela: ficam no registro de termos (vencimento + pagamento).
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from sistemas.acordos.constants import (
    TipoAcordo, TipoParcela, StatusParcela, MetodoPagamento
)
from sistemas.acordos.exceptions import ValidacaoError
from sistemas.acordos.schemas import (
    TermosAcordo, TermosTransacao, TermosCompensacao, TermosDacao,
    HonorariosTermos, CustasTermos
)
from sistemas.acordos.valores import ZERO, quantizar, dividir_valor, somar_meses


@dataclass
class ParcelaRascunho:
    """Parcela ainda não persistida"""
    tipo_parcela: TipoParcela
    numero: int
    valor: Decimal
    data_vencimento: date
    status: StatusParcela = StatusParcela.PENDENTE


def gerar_parcelas(termos: TermosAcordo, data_assinatura: date, hoje: date) -> List[ParcelaRascunho]:
    """
    Gera o cronograma completo do acordo (principal + honorários).

    Args:
        termos: termos financeiros (um dos três formatos)
        data_assinatura: base dos vencimentos mensais
        hoje: vencimento da entrada e das parcelas à vista

    Returns:
        Lista ordenada de rascunhos, todos pendentes

    Raises:
        ValidacaoError: valores ou quantidades inválidos
    """
    gerador = _GERADORES.get(termos.tipo)
    if gerador is None:
        raise ValidacaoError(f"Tipo de acordo não suportado: {termos.tipo}")

    _validar_custas(termos.custas)
    parcelas = gerador(termos, data_assinatura, hoje)
    parcelas.extend(_gerar_honorarios(termos.honorarios, data_assinatura, hoje))
    return parcelas


def calcular_valor_parcela(termos: TermosTransacao) -> Optional[Decimal]:
    """Valor da parcela regular de uma transação (None se à vista)."""
    if termos.metodo_pagamento != MetodoPagamento.PARCELADO:
        return None
    saldo = quantizar(termos.valor_total_proposto) - quantizar(termos.valor_entrada)
    return quantizar(saldo / termos.quantidade_parcelas)


def calcular_valor_liquido(termos) -> Decimal:
    """Valor líquido de compensação/dação (informado ou calculado)."""
    if termos.valor_liquido is not None:
        return quantizar(termos.valor_liquido)
    if termos.tipo == TipoAcordo.COMPENSACAO.value:
        return quantizar(termos.valor_total_creditos - termos.valor_total_debitos)
    return quantizar(termos.valor_total_oferecido - termos.valor_total_compensar)


# ==========================================
# Geradores por formato
# ==========================================

def _gerar_transacao(termos: TermosTransacao, data_assinatura: date, hoje: date) -> List[ParcelaRascunho]:
    total = quantizar(termos.valor_total_proposto)
    if total <= ZERO:
        raise ValidacaoError(
            "Valor total proposto deve ser maior que zero",
            detalhes={"valor_total_proposto": str(total)}
        )

    if termos.metodo_pagamento == MetodoPagamento.AVISTA:
        return [ParcelaRascunho(TipoParcela.PRINCIPAL, 1, total, hoje)]

    entrada = quantizar(termos.valor_entrada)
    if entrada < ZERO or entrada >= total:
        raise ValidacaoError(
            "Valor de entrada deve ser maior ou igual a zero e menor que o valor total",
            detalhes={"valor_entrada": str(entrada), "valor_total_proposto": str(total)}
        )
    if termos.quantidade_parcelas <= 0:
        raise ValidacaoError(
            "Quantidade de parcelas deve ser maior que zero",
            detalhes={"quantidade_parcelas": termos.quantidade_parcelas}
        )

    parcelas = []
    if entrada > ZERO:
        parcelas.append(ParcelaRascunho(TipoParcela.ENTRADA, 0, entrada, hoje))

    valores = dividir_valor(total - entrada, termos.quantidade_parcelas)
    _exigir_partes_positivas(valores, "quantidade_parcelas", total - entrada)
    for i, valor in enumerate(valores, start=1):
        parcelas.append(
            ParcelaRascunho(TipoParcela.PRINCIPAL, i, valor, somar_meses(data_assinatura, i))
        )
    return parcelas


def _gerar_compensacao(termos: TermosCompensacao, data_assinatura: date, hoje: date) -> List[ParcelaRascunho]:
    if termos.valor_total_creditos <= ZERO or termos.valor_total_debitos <= ZERO:
        raise ValidacaoError(
            "Valores de créditos e débitos devem ser maiores que zero",
            detalhes={
                "valor_total_creditos": str(termos.valor_total_creditos),
                "valor_total_debitos": str(termos.valor_total_debitos),
            }
        )
    return []


def _gerar_dacao(termos: TermosDacao, data_assinatura: date, hoje: date) -> List[ParcelaRascunho]:
    if termos.valor_total_oferecido <= ZERO or termos.valor_total_compensar <= ZERO:
        raise ValidacaoError(
            "Valores oferecido e a compensar devem ser maiores que zero",
            detalhes={
                "valor_total_oferecido": str(termos.valor_total_oferecido),
                "valor_total_compensar": str(termos.valor_total_compensar),
            }
        )
    return []


_GERADORES: Dict[str, Callable[..., List[ParcelaRascunho]]] = {
    TipoAcordo.TRANSACAO_EXCEPCIONAL.value: _gerar_transacao,
    TipoAcordo.COMPENSACAO.value: _gerar_compensacao,
    TipoAcordo.DACAO_PAGAMENTO.value: _gerar_dacao,
}


# ==========================================
# Honorários e custas (comuns)
# ==========================================

def _gerar_honorarios(
    honorarios: Optional[HonorariosTermos],
    data_assinatura: date,
    hoje: date
) -> List[ParcelaRascunho]:
    if honorarios is None:
        return []

    valor = quantizar(honorarios.valor)
    if valor < ZERO:
        raise ValidacaoError(
            "Valor dos honorários não pode ser negativo",
            detalhes={"honorarios_valor": str(valor)}
        )
    if valor == ZERO:
        return []

    if honorarios.metodo_pagamento == MetodoPagamento.AVISTA:
        return [ParcelaRascunho(TipoParcela.HONORARIOS, 1, valor, hoje)]

    quantidade = honorarios.parcelas or 0
    if quantidade <= 0:
        raise ValidacaoError(
            "Quantidade de parcelas dos honorários deve ser maior que zero",
            detalhes={"honorarios_parcelas": honorarios.parcelas}
        )

    partes = dividir_valor(valor, quantidade)
    _exigir_partes_positivas(partes, "honorarios_parcelas", valor)
    return [
        ParcelaRascunho(TipoParcela.HONORARIOS, i, parte, somar_meses(data_assinatura, i))
        for i, parte in enumerate(partes, start=1)
    ]


def _exigir_partes_positivas(partes: List[Decimal], campo: str, saldo: Decimal) -> None:
    """Saldo pequeno demais para a quantidade gera parcelas de valor zero ou negativo."""
    if any(parte <= ZERO for parte in partes):
        raise ValidacaoError(
            f"Saldo de R$ {saldo} não comporta {len(partes)} parcelas de ao menos R$ 0,01",
            detalhes={campo: len(partes), "saldo": str(saldo)}
        )


def _validar_custas(custas: Optional[CustasTermos]) -> None:
    if custas is not None and quantizar(custas.valor) < ZERO:
        raise ValidacaoError(
            "Valor das custas não pode ser negativo",
            detalhes={"custas_valor": str(custas.valor)}
        )
