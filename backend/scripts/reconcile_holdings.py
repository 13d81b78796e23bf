#!/usr/bin/env python
"""Check the holdings ledger against the order log.

Replays every order to compute what each holding should be and reports
any instrument where the stored ledger disagrees. With --fix, rewrites
the ledger from the replay.

Usage:
    python -m scripts.reconcile_holdings
    python -m scripts.reconcile_holdings --fix
    python -m scripts.reconcile_holdings --verbose
"""

import argparse

from database import get_session_local
from logging_config import setup_logging
from services.ledger_reconciliation_service import LedgerReconciliationService


def reconcile_holdings(fix: bool = False) -> int:
    """Report ledger discrepancies and optionally repair them.

    Returns the number of discrepancies found.
    """
    SessionLocal = get_session_local()
    db = SessionLocal()

    try:
        discrepancies = LedgerReconciliationService.find_discrepancies(db)
        print(f"Found {len(discrepancies)} ledger discrepancies")

        for d in discrepancies:
            print(f"  - {d.instrument}: {d.kind} (stored={d.stored}, expected={d.expected})")

        if discrepancies and fix:
            changed = LedgerReconciliationService.rebuild(db)
            print(f"\nLedger rebuilt: {changed} holdings changed")
        elif discrepancies:
            print("\nRun with --fix to rebuild the ledger from the order log.")

        return len(discrepancies)

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Check the holdings ledger against the order log"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log each replayed order and skipped sell",
    )
    parser.add_argument(
        "--fix",
        action="store_true",
        help="Rebuild the ledger from the order log when discrepancies are found",
    )
    args = parser.parse_args()

    setup_logging("DEBUG" if args.verbose else None)

    reconcile_holdings(fix=args.fix)
