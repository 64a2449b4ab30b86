# sistemas/acordos/exceptions.py
"""
Exceções específicas do módulo de Acordos e Parcelas
"""

from typing import Any, Dict, Optional


class AcordoError(Exception):
    """Erro base do módulo"""

    def __init__(self, mensagem: str, detalhes: Optional[Dict[str, Any]] = None):
        super().__init__(mensagem)
        self.mensagem = mensagem
        self.detalhes = detalhes or {}


class ValidacaoError(AcordoError):
    """Entrada malformada ou fora da faixa (valor não positivo, datas invertidas...)"""
    pass


class NaoElegivelError(AcordoError):
    """Regra de negócio impede a operação (processo não deferido, acordo ativo existente)"""
    pass


class NaoEncontradoError(AcordoError):
    """Acordo, parcela ou processo referenciado não existe"""
    pass


class EstadoInvalidoError(AcordoError):
    """Operação não permitida no status atual do acordo/parcela"""
    pass


class PossuiPagamentosError(EstadoInvalidoError):
    """Acordo com pagamentos registrados não pode ser excluído"""
    pass


class ConflitoError(AcordoError):
    """Alteração concorrente invalidou as pré-condições da operação"""
    pass


class PermissaoNegadaError(AcordoError):
    """Perfil do operador não permite a operação"""
    pass
