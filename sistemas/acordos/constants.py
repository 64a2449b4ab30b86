# sistemas/acordos/constants.py
"""
Constantes do módulo de Acordos e Parcelas
"""

from enum import Enum


class TipoAcordo(str, Enum):
    """Formato financeiro do acordo"""
    COMPENSACAO = "compensacao"
    DACAO_PAGAMENTO = "dacao_pagamento"
    TRANSACAO_EXCEPCIONAL = "transacao_excepcional"


class StatusAcordo(str, Enum):
    ATIVO = "ativo"
    VENCIDO = "vencido"
    CUMPRIDO = "cumprido"
    CANCELADO = "cancelado"


class StatusParcela(str, Enum):
    PENDENTE = "pendente"
    PAGA = "paga"
    VENCIDA = "vencida"
    CANCELADA = "cancelada"


class TipoParcela(str, Enum):
    ENTRADA = "entrada"
    PRINCIPAL = "principal"
    HONORARIOS = "honorarios"


class MetodoPagamento(str, Enum):
    AVISTA = "avista"
    PARCELADO = "parcelado"


class FormaPagamento(str, Enum):
    PIX = "pix"
    TED = "ted"
    DINHEIRO = "dinheiro"
    BOLETO = "boleto"
    CARTAO = "cartao"
    DACAO = "dacao"
    COMPENSACAO = "compensacao"


# Status do processo (subsistema de processos)
class StatusProcesso:
    JULGADO = "julgado"
    EM_CUMPRIMENTO = "em_cumprimento"
    CONCLUIDO = "concluido"
    ARQUIVADO = "arquivado"


# Resultado do julgamento
class ResultadoJulgamento:
    DEFERIDO = "deferido"
    PARCIALMENTE_DEFERIDO = "parcialmente_deferido"
    INDEFERIDO = "indeferido"


# Perfis de operador
class PerfilOperador:
    ADMIN = "admin"
    FUNCIONARIO = "funcionario"
    VISUALIZADOR = "visualizador"


# Acordos que ainda podem receber pagamentos / ser cancelados
STATUS_ACORDO_ABERTO = (StatusAcordo.ATIVO, StatusAcordo.VENCIDO)
STATUS_ACORDO_TERMINAL = (StatusAcordo.CUMPRIDO, StatusAcordo.CANCELADO)

# Parcelas que aceitam pagamento
STATUS_PARCELA_PAGAVEL = (StatusParcela.PENDENTE, StatusParcela.VENCIDA)

JULGAMENTOS_FAVORAVEIS = (
    ResultadoJulgamento.DEFERIDO,
    ResultadoJulgamento.PARCIALMENTE_DEFERIDO,
)

# Status para o qual o processo volta quando o acordo é cancelado/excluído
STATUS_PROCESSO_SEM_ACORDO = StatusProcesso.JULGADO
