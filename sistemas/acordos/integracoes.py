# sistemas/acordos/integracoes.py
"""
Interfaces com outros subsistemas consumidas pelo motor de acordos

- ProvedorProcessos: leitura do processo e transição de status
- Operador: identidade de quem executa a operação
- RegistroAuditoria: trilha de auditoria das alterações

As implementações padrão (ProvedorProcessosSQL, AuditoriaBanco) trabalham na
sessão do chamador, participando da mesma transação da alteração.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from sistemas.acordos.constants import PerfilOperador
from sistemas.acordos.exceptions import NaoEncontradoError
from sistemas.acordos.models import Processo, LogAuditoria
from utils.audit import AuditEvent, log_audit_event
from utils.logging_config import get_logger

logger = get_logger(__name__)


# ==========================================
# Identidade
# ==========================================

@dataclass(frozen=True)
class Operador:
    """Usuário que executa a operação"""
    user_id: int
    nome: str
    perfil: str = PerfilOperador.FUNCIONARIO

    @property
    def is_admin(self) -> bool:
        return self.perfil == PerfilOperador.ADMIN

    @property
    def somente_leitura(self) -> bool:
        return self.perfil == PerfilOperador.VISUALIZADOR


# ==========================================
# Processos
# ==========================================

@dataclass(frozen=True)
class ProcessoInfo:
    id: int
    numero: str
    status: str
    resultado_julgamento: Optional[str]


class ProvedorProcessos(ABC):
    """Contrato do subsistema de processos"""

    @abstractmethod
    def obter_processo(self, db: Session, processo_id: int) -> ProcessoInfo:
        raise NotImplementedError

    @abstractmethod
    def definir_status(self, db: Session, processo_id: int, status: str) -> None:
        raise NotImplementedError


class ProvedorProcessosSQL(ProvedorProcessos):
    """Lê e altera a tabela `processos` na sessão recebida."""

    def _carregar(self, db: Session, processo_id: int) -> Processo:
        processo = db.get(Processo, processo_id, with_for_update=True)
        if not processo:
            raise NaoEncontradoError(
                "Processo não encontrado",
                detalhes={"processo_id": processo_id}
            )
        return processo

    def obter_processo(self, db: Session, processo_id: int) -> ProcessoInfo:
        processo = self._carregar(db, processo_id)
        return ProcessoInfo(
            id=processo.id,
            numero=processo.numero,
            status=processo.status,
            resultado_julgamento=processo.resultado_julgamento,
        )

    def definir_status(self, db: Session, processo_id: int, status: str) -> None:
        processo = self._carregar(db, processo_id)
        if processo.status == status:
            return
        logger.info(
            "Status do processo alterado",
            processo_id=processo_id,
            de=processo.status,
            para=status,
        )
        processo.status = status


# ==========================================
# Auditoria
# ==========================================

def serializar_auditoria(dados: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Converte Decimal/datas/enums em valores compatíveis com JSON."""
    if dados is None:
        return None

    def _valor(v):
        if isinstance(v, Decimal):
            return str(v)
        if isinstance(v, (date, datetime)):
            return v.isoformat()
        if isinstance(v, Enum):
            return v.value
        if isinstance(v, dict):
            return {k: _valor(x) for k, x in v.items()}
        if isinstance(v, (list, tuple)):
            return [_valor(x) for x in v]
        return v

    return {k: _valor(v) for k, v in dados.items()}


class RegistroAuditoria(ABC):
    """Contrato do destino de auditoria"""

    @abstractmethod
    def registrar(
        self,
        db: Session,
        acao: AuditEvent,
        entidade: str,
        entidade_id: Any,
        antes: Optional[Dict[str, Any]] = None,
        depois: Optional[Dict[str, Any]] = None,
        usuario_id: Optional[int] = None,
    ) -> None:
        raise NotImplementedError


class AuditoriaBanco(RegistroAuditoria):
    """Grava `LogAuditoria` na sessão do chamador e replica no log estruturado."""

    def registrar(
        self,
        db: Session,
        acao: AuditEvent,
        entidade: str,
        entidade_id: Any,
        antes: Optional[Dict[str, Any]] = None,
        depois: Optional[Dict[str, Any]] = None,
        usuario_id: Optional[int] = None,
    ) -> None:
        antes = serializar_auditoria(antes)
        depois = serializar_auditoria(depois)

        db.add(LogAuditoria(
            acao=acao.value,
            entidade=entidade,
            entidade_id=str(entidade_id),
            dados_anteriores=antes,
            dados_novos=depois,
            usuario_id=usuario_id,
        ))

        log_audit_event(
            acao,
            entidade=entidade,
            entidade_id=entidade_id,
            user_id=usuario_id,
            antes=antes,
            depois=depois,
        )
