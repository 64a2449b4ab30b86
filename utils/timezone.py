# utils/timezone.py
"""
POLÍTICA GLOBAL DE TIMEZONE E RELÓGIO DO SISTEMA

REGRAS:
1. GRAVAÇÃO NO BANCO: timestamps sempre em UTC (timezone-aware)
2. DATAS DE NEGÓCIO (vencimento, pagamento): "hoje" no timezone local
3. O "agora" dos serviços vem SEMPRE de um Relogio injetado

USO:
    from utils.timezone import Relogio, RelogioFixo, now_utc

    relogio = Relogio()
    hoje = relogio.hoje()

    # Em testes
    relogio = RelogioFixo(date(2026, 3, 10))

IMPORTANTE:
- Nunca use datetime.utcnow(), datetime.now() ou date.today() nos serviços
- Regras de vencimento recebem "hoje" como parâmetro
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

import pytz

from config import TIMEZONE_LOCAL_NAME

# =============================================================================
# CONFIGURAÇÃO DE TIMEZONE
# =============================================================================

TIMEZONE_LOCAL = pytz.timezone(TIMEZONE_LOCAL_NAME)

UTC = timezone.utc


# =============================================================================
# FUNÇÕES PRINCIPAIS
# =============================================================================

def now_utc() -> datetime:
    """
    Retorna o datetime atual em UTC com timezone-aware.

    USE ESTA FUNÇÃO para gravar timestamps no banco de dados.
    """
    return datetime.now(UTC)


def now_local() -> datetime:
    """Retorna o datetime atual no timezone local."""
    return datetime.now(TIMEZONE_LOCAL)


def to_local(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Converte um datetime para o timezone local.

    Se naive, assume que está em UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)

    return dt.astimezone(TIMEZONE_LOCAL)


def to_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Converte um datetime para UTC.

    Se naive, assume que está no timezone local.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = TIMEZONE_LOCAL.localize(dt)

    return dt.astimezone(UTC)


def get_utc_now():
    """
    Função callable para uso em Column(default=...).

    USE EM MODELS:
        created_at = Column(DateTime(timezone=True), default=get_utc_now)
    """
    return now_utc()


# =============================================================================
# RELÓGIO INJETÁVEL
# =============================================================================

class Relogio:
    """
    Fonte de "agora" para os serviços.

    A implementação padrão lê o relógio do sistema no timezone local.
    """

    def agora(self) -> datetime:
        """Datetime atual (timezone-aware, local)."""
        return now_local()

    def agora_utc(self) -> datetime:
        return to_utc(self.agora())

    def hoje(self) -> date:
        """Data de negócio atual no timezone local."""
        return self.agora().date()


class RelogioFixo(Relogio):
    """
    Relógio parado em um instante, para testes e reprocessamentos.

    Aceita date (meio-dia local) ou datetime (naive = local; com timezone
    é convertido para o local).
    """

    def __init__(self, instante: Union[date, datetime]):
        self.definir(instante)

    def definir(self, instante: Union[date, datetime]) -> None:
        if not isinstance(instante, datetime):
            instante = datetime.combine(instante, time(12, 0))
        if instante.tzinfo is None:
            instante = TIMEZONE_LOCAL.localize(instante)
        else:
            instante = to_local(instante)
        self._instante = instante

    def avancar_dias(self, dias: int) -> None:
        self._instante = self._instante + timedelta(days=dias)

    def agora(self) -> datetime:
        return self._instante
