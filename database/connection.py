# database/connection.py
"""
Configuração da conexão com o banco de dados usando SQLAlchemy 2.0
"""

from contextlib import contextmanager
from typing import Callable, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from sqlalchemy.orm.exc import StaleDataError

from config import DATABASE_URL


def criar_engine(url: str = DATABASE_URL):
    """Cria o engine conforme o dialeto (SQLite em dev/testes, PostgreSQL em produção)."""
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},  # Necessário para SQLite
            echo=False
        )

    # PostgreSQL - configuração otimizada para produção
    return create_engine(
        url,
        echo=False,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,  # Recicla conexões a cada 30 min
        pool_pre_ping=True  # Verifica conexão antes de usar
    )


engine = criar_engine()

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base para os models
Base = declarative_base()


# PostgreSQL: deadlock_detected e serialization_failure
SQLSTATE_CONCORRENCIA = ("40P01", "40001")


def _sqlstate(erro: OperationalError) -> Optional[str]:
    """Código SQLSTATE do erro do driver (psycopg2: pgcode, psycopg 3: sqlstate)."""
    orig = erro.orig
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


@contextmanager
def unidade_de_trabalho(
    session_factory: Optional[Callable[[], Session]] = None
) -> Generator[Session, None, None]:
    """
    Unidade de trabalho: tudo o que for feito na sessão é confirmado junto
    ou desfeito junto.

    Uso:
        with unidade_de_trabalho(SessionLocal) as db:
            acordo = db.get(Acordo, 1)
            ...

    Raises:
        ConflitoError: se outra transação alterou as mesmas linhas
            (versão desatualizada), violou uma restrição de unicidade ou o
            banco abortou a transação por deadlock/serialização
    """
    # Import tardio: exceptions do módulo de acordos não dependem do banco
    from sistemas.acordos.exceptions import ConflitoError

    factory = session_factory or SessionLocal
    db = factory()
    try:
        yield db
        db.commit()
    except StaleDataError as e:
        db.rollback()
        raise ConflitoError(
            "Registro alterado por outra operação. Recarregue e tente novamente."
        ) from e
    except IntegrityError as e:
        db.rollback()
        raise ConflitoError(
            "Operação conflita com dados gravados simultaneamente.",
            detalhes={"erro": str(e.orig)}
        ) from e
    except OperationalError as e:
        db.rollback()
        codigo = _sqlstate(e)
        if codigo in SQLSTATE_CONCORRENCIA:
            raise ConflitoError(
                "Operação interrompida por transação concorrente. Tente novamente.",
                detalhes={"sqlstate": codigo}
            ) from e
        raise
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
