"""
Configuração centralizada de logging estruturado com structlog.

BENEFÍCIOS:
- Logs em formato JSON em produção (parseable por ferramentas de observabilidade)
- Console legível em desenvolvimento
- Contexto adicional por chave/valor (acordo, parcela, operador...)
- Timestamps consistentes em UTC

USO:
    from utils.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Pagamento registrado", parcela_id=12, valor="2300.00")
"""

import logging
import sys
from functools import lru_cache

import structlog

from config import IS_PRODUCTION, LOG_LEVEL


def add_service_info(logger, method_name: str, event_dict: dict) -> dict:
    """
    Adiciona informações do serviço ao log.
    """
    event_dict["service"] = "acordos-engine"
    return event_dict


SHARED_PROCESSORS = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
    add_service_info,
]


def configure_structlog():
    """
    Configura structlog para logging estruturado.

    Em produção: JSON formatado para parsing por ferramentas
    Em desenvolvimento: Console colorido legível
    """
    if IS_PRODUCTION:
        processors = SHARED_PROCESSORS + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False)
        ]
    else:
        processors = SHARED_PROCESSORS + [
            structlog.dev.ConsoleRenderer(colors=False)
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging():
    """
    Configura logging padrão do Python para integração com structlog.
    """
    root_level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(root_level)

    if IS_PRODUCTION:
        handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(ensure_ascii=False),
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
            ],
        ))
    else:
        handler.setFormatter(logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    root_logger.handlers = [handler]

    # Silencia loggers verbosos
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)


def setup_logging():
    """
    Função principal de configuração de logging.

    Chame esta função no início do processo (worker da varredura, shell, etc.).
    """
    configure_stdlib_logging()
    configure_structlog()


@lru_cache(maxsize=128)
def get_logger(name: str):
    """
    Obtém um logger structlog.

    Uso:
        logger = get_logger(__name__)
        logger.info("mensagem", chave="valor")
    """
    return structlog.get_logger(name)


# structlog precisa estar configurado antes do primeiro uso dos loggers
configure_structlog()


__all__ = [
    "setup_logging",
    "get_logger",
]
