# sistemas/acordos/services_pagamentos.py
"""
Livro de pagamentos das parcelas

Cada pagamento é uma linha nova em `pagamentos_parcela` (somente inclusão).
O valor pago acumulado da parcela nunca ultrapassa o valor nominal:
pagamento acima do saldo é rejeitado, nunca ajustado.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from sistemas.acordos.constants import (
    StatusParcela, FormaPagamento, STATUS_ACORDO_ABERTO, STATUS_PARCELA_PAGAVEL
)
from sistemas.acordos.exceptions import ValidacaoError, EstadoInvalidoError
from sistemas.acordos.models import ParcelaAcordo, PagamentoParcela
from sistemas.acordos.valores import ZERO, para_decimal, quantizar
from utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ResultadoPagamento:
    pagamento: PagamentoParcela
    parcela: ParcelaAcordo
    quitou: bool  # este pagamento quitou a parcela


def aplicar_pagamento(
    db: Session,
    parcela: ParcelaAcordo,
    valor: Decimal,
    data_pagamento: date,
    forma_pagamento: FormaPagamento,
    hoje: date,
    numero_comprovante: Optional[str] = None,
    observacoes: Optional[str] = None,
    registrado_por: Optional[int] = None,
) -> ResultadoPagamento:
    """
    Registra um pagamento contra a parcela.

    A parcela (e o acordo) devem ter sido carregados com lock pelo chamador.
    A alteração de `valor_pago` incrementa a versão da parcela no flush, de
    modo que um pagamento concorrente sobre a mesma versão falha.

    Raises:
        EstadoInvalidoError: acordo encerrado ou parcela não pagável
        ValidacaoError: valor não positivo, com fração de centavo, acima do
            saldo ou data futura
    """
    acordo = parcela.acordo
    if acordo.status not in STATUS_ACORDO_ABERTO:
        raise EstadoInvalidoError(
            f"Não é possível registrar pagamento em acordo {acordo.status}",
            detalhes={"acordo_id": acordo.id, "status": acordo.status}
        )

    if parcela.status not in STATUS_PARCELA_PAGAVEL:
        raise EstadoInvalidoError(
            f"Parcela com status '{parcela.status}' não aceita pagamento",
            detalhes={"parcela_id": parcela.id, "status": parcela.status}
        )

    valor = para_decimal(valor)
    if valor != quantizar(valor):
        raise ValidacaoError(
            "Valor do pagamento deve ter no máximo 2 casas decimais",
            detalhes={"valor": str(valor)}
        )
    if valor <= ZERO:
        raise ValidacaoError(
            "Valor do pagamento deve ser maior que zero",
            detalhes={"valor": str(valor)}
        )

    restante = parcela.valor_restante
    if valor > restante:
        raise ValidacaoError(
            f"Valor do pagamento excede o saldo da parcela. Valor restante: R$ {restante}",
            detalhes={"valor": str(valor), "valor_restante": str(restante)}
        )

    if data_pagamento > hoje:
        raise ValidacaoError(
            "Data do pagamento não pode ser futura",
            detalhes={"data_pagamento": data_pagamento.isoformat(), "hoje": hoje.isoformat()}
        )

    pagamento = PagamentoParcela(
        parcela=parcela,
        valor_pago=valor,
        data_pagamento=data_pagamento,
        forma_pagamento=FormaPagamento(forma_pagamento).value,
        numero_comprovante=numero_comprovante,
        observacoes=observacoes,
        registrado_por=registrado_por,
    )
    db.add(pagamento)

    parcela.valor_pago = (parcela.valor_pago or ZERO) + valor

    quitou = parcela.valor_pago >= parcela.valor
    if quitou:
        parcela.status = StatusParcela.PAGA.value
        parcela.data_pagamento = data_pagamento
        logger.info(
            "Parcela quitada",
            parcela_id=parcela.id,
            acordo_id=acordo.id,
            tipo=parcela.tipo_parcela,
            numero=parcela.numero,
        )

    db.flush()

    return ResultadoPagamento(pagamento=pagamento, parcela=parcela, quitou=quitou)
