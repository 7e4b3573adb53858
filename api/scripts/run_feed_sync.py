"""
CLI: corrida unica del sync del feed de avisos -> Postgres.

Uso recomendado:
  - Operar a demanda o desde cron/systemd cuando el scheduler de la API
    esta deshabilitado (SCHEDULER_ENABLED=false).

Variables de entorno requeridas:
  - FEED_API_URL
  - FEED_API_TOKEN
  - DATABASE_URL (o DATABASE_HOST/PORT/USER/PASSWORD/NAME)

Ejecucion:
  python scripts/run_feed_sync.py --mode full
  python scripts/run_feed_sync.py --mode incremental
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger
from dotenv import load_dotenv

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

# .env del backend o de la raiz del repo (no pisa variables ya exportadas)
load_dotenv(_API_ROOT / ".env", override=False)
load_dotenv(_API_ROOT.parent / ".env", override=False)

from jobsearch.application.use_cases.sync_use_cases import FeedSyncUseCases
from jobsearch.infrastructure.database.session import init_db
from jobsearch.shared.exceptions.base import AppException


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Sincroniza el feed de avisos con la base de datos.")
    parser.add_argument(
        "--mode",
        choices=("full", "incremental"),
        default="incremental",
        help="full: barrido completo + desalojo. incremental: solo lo actualizado (default).",
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Crea las tablas faltantes antes de sincronizar.",
    )
    args = parser.parse_args(argv)

    if args.init_db:
        init_db()

    use_cases = FeedSyncUseCases()
    run = use_cases.run_full_sync if args.mode == "full" else use_cases.run_incremental_sync

    logger.info(f"Iniciando sync {args.mode}...")
    try:
        result = run()
    except AppException as e:
        logger.error(f"Sync {args.mode} fallido [{e.error_code}]: {e.message}")
        return 1

    if result.skipped_reason:
        logger.warning(f"Sync {args.mode} sin ejecutar: {result.skipped_reason}")
    else:
        logger.info(
            f"Sync OK: ventanas={result.windows}, paginas={result.pages_fetched}, "
            f"omitidas={result.pages_skipped}, upserts={result.upserted}, eliminados={result.evicted}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
