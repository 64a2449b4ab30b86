# tests/conftest.py
"""
Configuração global do pytest para o motor de Acordos e Parcelas.

Este arquivo é executado automaticamente pelo pytest antes dos testes.

IMPORTANTE: Este arquivo deve ser carregado antes de qualquer módulo de teste.
O pytest carrega conftest.py antes de importar os módulos de teste.
"""

import sys
import os

# Adiciona o diretório raiz do projeto ao PYTHONPATH
# para que os imports funcionem corretamente nos testes
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Configura variáveis de ambiente para testes
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from database.connection import Base
from sistemas.acordos.constants import PerfilOperador, StatusProcesso, ResultadoJulgamento
from sistemas.acordos.integracoes import Operador
from sistemas.acordos.models import Processo
from sistemas.acordos.schemas import AcordoCreate, TermosTransacao, PagamentoCreate
from sistemas.acordos.services import AcordoService
from utils.timezone import RelogioFixo

HOJE = date(2026, 3, 10)


@pytest.fixture
def engine():
    """Banco SQLite em memória, recriado a cada teste."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def relogio():
    return RelogioFixo(HOJE)


@pytest.fixture
def service(session_factory, relogio):
    return AcordoService(session_factory=session_factory, relogio=relogio)


@pytest.fixture
def funcionario():
    return Operador(user_id=10, nome="Servidor", perfil=PerfilOperador.FUNCIONARIO)


@pytest.fixture
def admin():
    return Operador(user_id=1, nome="Administrador", perfil=PerfilOperador.ADMIN)


@pytest.fixture
def visualizador():
    return Operador(user_id=20, nome="Consulta", perfil=PerfilOperador.VISUALIZADOR)


@pytest.fixture
def criar_processo(session_factory):
    """Factory de processos; por padrão julgado e deferido."""
    contador = {"n": 0}

    def _criar(status=StatusProcesso.JULGADO, resultado=ResultadoJulgamento.DEFERIDO):
        contador["n"] += 1
        session = session_factory()
        try:
            processo = Processo(
                numero=f"PROC-{contador['n']:04d}/2026",
                status=status,
                resultado_julgamento=resultado,
            )
            session.add(processo)
            session.commit()
            return processo.id
        finally:
            session.close()

    return _criar


@pytest.fixture
def dados_transacao():
    """Factory de AcordoCreate de transação excepcional (padrão: 120000 = 5000 + 5 x 23000)."""

    def _dados(
        processo_id,
        metodo="parcelado",
        total="120000.00",
        entrada="5000.00",
        parcelas=5,
        honorarios=None,
        custas=None,
        data_assinatura=HOJE,
    ):
        return AcordoCreate(
            processo_id=processo_id,
            data_assinatura=data_assinatura,
            data_vencimento=date(2026, 12, 31),
            termos=TermosTransacao(
                valor_total_proposto=Decimal(total),
                metodo_pagamento=metodo,
                valor_entrada=Decimal(entrada),
                quantidade_parcelas=parcelas,
                honorarios=honorarios,
                custas=custas,
            ),
        )

    return _dados


@pytest.fixture
def pagar(service, funcionario):
    """Registra pagamento via serviço (PIX, data de hoje por padrão)."""

    def _pagar(parcela_id, valor, data_pagamento=None, operador=None):
        return service.registrar_pagamento(
            parcela_id,
            PagamentoCreate(
                valor=Decimal(valor),
                data_pagamento=data_pagamento or service.relogio.hoje(),
                forma_pagamento="pix",
            ),
            operador or funcionario,
        )

    return _pagar
