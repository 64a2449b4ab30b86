#!/usr/bin/env python3
"""
Varredura periódica de vencimentos dos acordos.

Este script:
1. Marca como vencidas as parcelas pendentes com vencimento anterior a hoje
2. Recalcula o status dos acordos afetados (ativo -> vencido)
3. Opcionalmente lista as parcelas vencidas com multa e juros

Uso:
    python scripts/varredura_vencimentos.py
    python scripts/varredura_vencimentos.py --data 2026-04-11
    python scripts/varredura_vencimentos.py --relatorio --dias-minimos 30
"""

import os
import sys
import argparse
from datetime import date

# Adiciona o diretório raiz ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database.connection import SessionLocal, unidade_de_trabalho
from database.init_db import create_tables
from sistemas.acordos.services import AcordoService
from sistemas.acordos.services_multa import gerar_relatorio_parcelas_vencidas
from utils.logging_config import setup_logging
from utils.timezone import Relogio, RelogioFixo


def _data(texto: str) -> date:
    try:
        return date.fromisoformat(texto)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Data inválida (use AAAA-MM-DD): {texto}")


def imprimir_relatorio(linhas) -> None:
    print("\n" + "=" * 70)
    print(f"PARCELAS VENCIDAS: {len(linhas)}")
    print("=" * 70)
    for linha in linhas:
        print(
            f"  Termo {linha.numero_termo} | {linha.tipo_parcela} nº {linha.numero} | "
            f"venc. {linha.data_vencimento:%d/%m/%Y} | {linha.dias_atraso} dias | "
            f"saldo R$ {linha.valor_restante} | atualizado R$ {linha.valor_atualizado}"
        )


def main(argv=None, session_factory=None) -> int:
    parser = argparse.ArgumentParser(
        description="Marca parcelas e acordos vencidos"
    )
    parser.add_argument(
        "--data",
        type=_data,
        help="Data de referência (padrão: hoje no timezone local)"
    )
    parser.add_argument(
        "--relatorio",
        action="store_true",
        help="Lista as parcelas vencidas após a varredura"
    )
    parser.add_argument(
        "--dias-minimos",
        type=int,
        default=0,
        help="No relatório, apenas parcelas vencidas há pelo menos N dias"
    )
    parser.add_argument(
        "--criar-tabelas",
        action="store_true",
        help="Cria as tabelas antes de executar (ambiente novo)"
    )
    args = parser.parse_args(argv)

    session_factory = session_factory or SessionLocal
    if args.criar_tabelas:
        create_tables(bind=session_factory.kw.get("bind"))

    relogio = RelogioFixo(args.data) if args.data else Relogio()
    service = AcordoService(session_factory=session_factory, relogio=relogio)

    resultado = service.executar_varredura_vencimentos()

    print(f"Varredura de {resultado.data_referencia:%d/%m/%Y}")
    print(f"  Acordos inspecionados: {resultado.acordos_inspecionados}")
    print(f"  Parcelas marcadas como vencidas: {resultado.parcelas_vencidas}")
    print(f"  Acordos marcados como vencidos: {resultado.acordos_vencidos}")
    if resultado.falhas:
        print(f"  Falhas: {resultado.falhas} (acordos {resultado.acordos_com_falha})")

    if args.relatorio:
        with unidade_de_trabalho(session_factory) as db:
            imprimir_relatorio(
                gerar_relatorio_parcelas_vencidas(db, relogio.hoje(), dias_minimos=args.dias_minimos)
            )

    return 1 if resultado.falhas else 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(main())
