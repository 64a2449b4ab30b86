# sistemas/acordos/__init__.py
"""
Motor de Acordos e Parcelas

Ciclo de vida dos acordos de pagamento firmados após julgamento favorável:
- Geração do cronograma de parcelas (entrada, principal, honorários)
- Livro de pagamentos parciais/totais
- Reconciliação de status (vencimentos, cumprimento) e varredura periódica
- Cálculo de multa e juros para cobrança
"""

from sistemas.acordos.services import AcordoService

__all__ = ["AcordoService"]
