# sistemas/acordos/services_multa.py
"""
Multa e juros de parcelas em atraso

Cálculo informativo (cobrança e relatórios): nunca altera o valor
nominal das parcelas.

    multa = valor * multa_percentual            (fração: 0.02 = 2%)
    juros = valor * (juros_dia / 100) * dias    (percentual: 0.033 = 0,033% ao dia)
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from config import ACORDO_MULTA_PERCENTUAL, ACORDO_JUROS_DIA_PERCENTUAL
from sistemas.acordos.constants import StatusParcela
from sistemas.acordos.models import Acordo, ParcelaAcordo, Processo
from sistemas.acordos.schemas import ParcelaVencidaRelatorio
from sistemas.acordos.valores import ZERO, Numero, para_decimal, quantizar, dias_em_atraso


@dataclass(frozen=True)
class ResultadoMultaJuros:
    valor_multa: Decimal
    valor_juros: Decimal
    valor_total: Decimal
    dias_atraso: int


def calcular_multa_juros(
    valor: Numero,
    dias_atraso: int,
    taxa_juros_dia: Optional[Numero] = None,
    multa: Optional[Numero] = None,
) -> ResultadoMultaJuros:
    """
    Calcula multa e juros simples sobre um valor em atraso.

    Ex: 1000.00 com 10 dias -> multa 20.00 + juros 3.30 = 1023.30
    """
    valor = quantizar(valor)
    if dias_atraso <= 0:
        return ResultadoMultaJuros(ZERO, ZERO, valor, 0)

    taxa = para_decimal(ACORDO_JUROS_DIA_PERCENTUAL if taxa_juros_dia is None else taxa_juros_dia)
    percentual_multa = para_decimal(ACORDO_MULTA_PERCENTUAL if multa is None else multa)

    valor_multa = quantizar(valor * percentual_multa)
    valor_juros = quantizar(valor * taxa / Decimal(100) * dias_atraso)

    return ResultadoMultaJuros(
        valor_multa=valor_multa,
        valor_juros=valor_juros,
        valor_total=valor + valor_multa + valor_juros,
        dias_atraso=dias_atraso,
    )


def gerar_relatorio_parcelas_vencidas(
    db: Session,
    hoje: date,
    dias_minimos: int = 0,
    taxa_juros_dia: Optional[Numero] = None,
    multa: Optional[Numero] = None,
) -> List[ParcelaVencidaRelatorio]:
    """
    Parcelas vencidas há pelo menos `dias_minimos` dias, da mais antiga para
    a mais recente, com saldo devedor atualizado por multa e juros.
    """
    limite = hoje - timedelta(days=dias_minimos)

    linhas = db.execute(
        select(ParcelaAcordo, Acordo, Processo)
        .join(Acordo, ParcelaAcordo.acordo_id == Acordo.id)
        .outerjoin(Processo, Acordo.processo_id == Processo.id)
        .where(
            ParcelaAcordo.status == StatusParcela.VENCIDA.value,
            ParcelaAcordo.data_vencimento <= limite,
        )
        .order_by(ParcelaAcordo.data_vencimento, ParcelaAcordo.id)
    ).all()

    relatorio = []
    for parcela, acordo, processo in linhas:
        restante = parcela.valor_restante
        dias = dias_em_atraso(parcela.data_vencimento, hoje)
        encargos = calcular_multa_juros(restante, dias, taxa_juros_dia, multa)

        relatorio.append(ParcelaVencidaRelatorio(
            parcela_id=parcela.id,
            acordo_id=acordo.id,
            numero_termo=acordo.numero_termo,
            processo_numero=processo.numero if processo else None,
            tipo_parcela=parcela.tipo_parcela,
            numero=parcela.numero,
            data_vencimento=parcela.data_vencimento,
            valor=parcela.valor,
            valor_pago=parcela.valor_pago,
            valor_restante=restante,
            dias_atraso=dias,
            valor_multa=encargos.valor_multa,
            valor_juros=encargos.valor_juros,
            valor_atualizado=encargos.valor_total,
        ))

    return relatorio
