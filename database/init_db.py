# database/init_db.py
"""
Inicialização do banco de dados do motor de acordos
"""

import time

from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from database.connection import engine, Base
from utils.logging_config import get_logger, setup_logging

# Importa modelos para criar tabelas
from sistemas.acordos.models import (  # noqa: F401
    Processo, Acordo, AcordoTransacao, AcordoCompensacao, AcordoDacao,
    ParcelaAcordo, PagamentoParcela, LogAuditoria
)

logger = get_logger(__name__)


def wait_for_db(max_retries=10, delay=3):
    """Aguarda o banco de dados ficar disponível"""
    for attempt in range(max_retries):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Conexão com banco de dados estabelecida")
            return True
        except OperationalError:
            if attempt < max_retries - 1:
                logger.warning(
                    "Aguardando banco de dados",
                    tentativa=attempt + 1,
                    max_tentativas=max_retries
                )
                time.sleep(delay)
            else:
                logger.error("Banco indisponível", tentativas=max_retries)
                raise
    return False


def create_tables(bind=None):
    """Cria todas as tabelas no banco de dados"""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Tabelas criadas")


def init_database():
    """Aguarda o banco e cria as tabelas."""
    wait_for_db()
    create_tables()


if __name__ == "__main__":
    setup_logging()
    init_database()
