# utils/audit.py
"""
Audit logging de eventos do motor de acordos.

Cada alteração de acordo, parcela, pagamento ou processo gera:
- um registro persistente em `logs_auditoria` (feito pelo RegistroAuditoria,
  na mesma transação da alteração)
- uma linha estruturada no logger "security.audit" (este módulo)

Eventos registrados:
- ACORDO_CRIADO / ACORDO_CANCELADO / ACORDO_EXCLUIDO / ACORDO_STATUS
- PAGAMENTO_REGISTRADO / PARCELA_STATUS
- CUSTAS_PAGAS / COMPENSACAO_EFETIVADA

Mudanças de status do processo vão no payload do evento do acordo.
"""

import json
from enum import Enum
from typing import Any, Dict, Optional

from utils.logging_config import get_logger
from utils.timezone import get_utc_now

audit_logger = get_logger("security.audit")


class AuditEvent(str, Enum):
    """Tipos de eventos de auditoria"""
    ACORDO_CRIADO = "ACORDO_CRIADO"
    ACORDO_CANCELADO = "ACORDO_CANCELADO"
    ACORDO_EXCLUIDO = "ACORDO_EXCLUIDO"
    ACORDO_STATUS = "ACORDO_STATUS"

    PAGAMENTO_REGISTRADO = "PAGAMENTO_REGISTRADO"
    PARCELA_STATUS = "PARCELA_STATUS"

    CUSTAS_PAGAS = "CUSTAS_PAGAS"
    COMPENSACAO_EFETIVADA = "COMPENSACAO_EFETIVADA"


def mask_sensitive_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Trunca textos longos (observações, cláusulas) antes de logar.
    """
    masked = {}
    for key, value in data.items():
        if isinstance(value, dict):
            masked[key] = mask_sensitive_data(value)
        elif isinstance(value, str) and len(value) > 200:
            masked[key] = value[:200] + "...[truncated]"
        else:
            masked[key] = value
    return masked


def log_audit_event(
    event: AuditEvent,
    entidade: str,
    entidade_id: Any,
    user_id: Optional[int] = None,
    antes: Optional[Dict[str, Any]] = None,
    depois: Optional[Dict[str, Any]] = None,
):
    """
    Registra evento de auditoria no log estruturado.

    Example:
        log_audit_event(
            AuditEvent.PAGAMENTO_REGISTRADO,
            entidade="PagamentoParcela",
            entidade_id=pagamento.id,
            user_id=operador.user_id,
            depois={"valor_pago": "2300.00"}
        )
    """
    audit_record = {
        "event": event.value,
        "timestamp": get_utc_now().isoformat(),
        "entidade": entidade,
        "entidade_id": entidade_id,
        "user_id": user_id,
    }
    if antes:
        audit_record["antes"] = mask_sensitive_data(antes)
    if depois:
        audit_record["depois"] = mask_sensitive_data(depois)

    audit_logger.info(json.dumps(audit_record, ensure_ascii=False, default=str))
