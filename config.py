# config.py
# -*- coding: utf-8 -*-
"""
Configurações centralizadas do motor de Acordos e Parcelas
"""

import os
from decimal import Decimal
from dotenv import load_dotenv

# Carrega variáveis de ambiente (apenas se existir .env)
load_dotenv()

# ==================================================
# AMBIENTE
# ==================================================
ENV = os.getenv("ENV", "development")
IS_PRODUCTION = ENV == "production"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if IS_PRODUCTION else "DEBUG")

# ==================================================
# CONFIGURAÇÕES DO BANCO DE DADOS
# ==================================================
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./acordos.db")

# Heroku/Railway usam postgres:// mas SQLAlchemy precisa de postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# ==================================================
# TIMEZONE
# ==================================================
TIMEZONE_LOCAL_NAME = os.getenv("TIMEZONE_LOCAL_NAME", "America/Campo_Grande")

# ==================================================
# MULTA E JUROS (relatórios de cobrança)
# ==================================================
# Multa fixa sobre o valor da parcela (fração: 0.02 = 2%)
ACORDO_MULTA_PERCENTUAL = Decimal(os.getenv("ACORDO_MULTA_PERCENTUAL", "0.02"))
# Juros diários em PERCENTUAL (0.033 = 0,033% ao dia)
ACORDO_JUROS_DIA_PERCENTUAL = Decimal(os.getenv("ACORDO_JUROS_DIA_PERCENTUAL", "0.033"))

# ==================================================
# VARREDURA DE VENCIMENTOS
# ==================================================
# Quantidade máxima de acordos inspecionados por execução
VARREDURA_LOTE = int(os.getenv("VARREDURA_LOTE", "200"))
