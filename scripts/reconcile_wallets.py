"""Compare every freelancer's cached wallet balance with its ledger.

Usage: python scripts/reconcile_wallets.py [--fix]
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src" / "opsdesk"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dotenv import load_dotenv

from opsdesk.config import get_settings_module
from opsdesk.container import build_container
from opsdesk.core.enums import Role


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--fix", action="store_true", help="rewrite drifted caches from the ledger")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
    reports = container.wallet_service.reconcile_all(current_role=Role.ADMIN, fix=args.fix)

    drifted = [r for r in reports if not r.in_sync]
    for r in drifted:
        print(f"user {r.freelancer_id}: cached={r.cached_balance} ledger={r.ledger_balance} fixed={r.corrected}")
    print(f"OK: {len(reports)} wallets checked, {len(drifted)} drifted")
    if drifted and not args.fix:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
