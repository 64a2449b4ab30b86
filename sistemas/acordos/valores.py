# sistemas/acordos/valores.py
"""
Utilitários de dinheiro e datas do módulo de acordos.

- Valores monetários são sempre Decimal com 2 casas (centavos)
- Vencimentos mensais preservam o dia do mês (limitado ao último dia)
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Union

from dateutil.relativedelta import relativedelta

CENTAVO = Decimal("0.01")
ZERO = Decimal("0.00")

Numero = Union[Decimal, int, float, str]


def para_decimal(valor: Numero) -> Decimal:
    """
    Converte para Decimal sem herdar erro de ponto flutuante.

    Floats passam por str() (0.1 -> Decimal("0.1"), não 0.1000000000000000055...).
    """
    if isinstance(valor, Decimal):
        return valor
    if isinstance(valor, bool):
        raise TypeError("Valor monetário não pode ser booleano")
    if isinstance(valor, float):
        return Decimal(str(valor))
    return Decimal(valor)


def quantizar(valor: Numero) -> Decimal:
    """Arredonda para centavos (meio para cima)."""
    return para_decimal(valor).quantize(CENTAVO, rounding=ROUND_HALF_UP)


def dividir_valor(total: Numero, partes: int) -> List[Decimal]:
    """
    Divide um valor em `partes` parcelas iguais, em centavos.

    A última parcela absorve a diferença de arredondamento, de modo que a
    soma é sempre exatamente igual ao total.

    Ex: dividir_valor(100000, 3) -> [33333.33, 33333.33, 33333.34]
    """
    if partes <= 0:
        raise ValueError("Quantidade de partes deve ser maior que zero")

    total = quantizar(total)
    valor_parte = quantizar(total / partes)
    valores = [valor_parte] * (partes - 1)
    valores.append(total - valor_parte * (partes - 1))
    return valores


def somar_meses(data_base: date, meses: int) -> date:
    """
    Soma meses de calendário mantendo o dia do mês.

    Dias inexistentes no mês de destino caem no último dia
    (31/01 + 1 mês = 28/02 ou 29/02).
    """
    return data_base + relativedelta(months=meses)


def dias_em_atraso(data_vencimento: date, hoje: date) -> int:
    """Dias corridos desde o vencimento (0 se ainda não venceu)."""
    dias = (hoje - data_vencimento).days
    return dias if dias > 0 else 0


def formatar_numero_termo(sequencial: int, ano: int) -> str:
    """Número do termo no formato NNNN/AAAA (ex: 0007/2026)."""
    return f"{sequencial:04d}/{ano}"
