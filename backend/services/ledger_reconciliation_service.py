"""Ledger reconciliation - rebuilds holdings from the order log.

The holdings ledger is a projection of the order log: replaying every
order in insertion order with the execution arithmetic must reproduce the
stored holdings. This service computes that projection, reports where the
stored ledger disagrees, and can rewrite the ledger from the projection.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session

from models import Holding, Order, OrderSide, instrument_key
from services.order_execution_service import weighted_average_price
from utils.numbers import as_decimal

logger = logging.getLogger(__name__)

# The stored average is rounded to 6 places on every write, so a long run
# of buys drifts slightly from the exact replay.
AVERAGE_PRICE_TOLERANCE = Decimal("0.0001")
QUANTITY_TOLERANCE = Decimal("0.00000001")


@dataclass
class ProjectedHolding:
    """Holding state derived from the order log."""

    instrument: str
    quantity: Decimal
    average_price: Decimal


@dataclass
class LedgerDiscrepancy:
    """One instrument where the stored ledger and the projection disagree.

    ``kind`` is one of ``missing`` (projection has it, ledger does not),
    ``unexpected`` (ledger has it, projection does not), ``quantity`` or
    ``average_price``.
    """

    instrument: str
    kind: str
    stored: Decimal | None
    expected: Decimal | None


def project_holdings(orders: Iterable[Order]) -> dict[str, ProjectedHolding]:
    """Replay orders into holdings keyed by normalized instrument name.

    Sells that would drive a quantity negative, or that target an
    instrument with no projected holding, were never accepted by the
    engine; they are logged and skipped.
    """
    projected: dict[str, ProjectedHolding] = {}

    for order in orders:
        key = instrument_key(order.instrument)
        quantity = as_decimal(order.quantity)
        price = as_decimal(order.price)
        current = projected.get(key)
        logger.debug("Replaying %s %s x %s @ %s", order.side, order.instrument, quantity, price)

        if order.side == OrderSide.BUY.value:
            if current is None:
                projected[key] = ProjectedHolding(order.instrument, quantity, price)
            else:
                current.average_price = weighted_average_price(
                    current.quantity, current.average_price, quantity, price
                )
                current.quantity += quantity
            continue

        if current is None or current.quantity < quantity:
            logger.warning(
                "Skipping unfillable SELL %s x %s (order %s)",
                order.instrument, quantity, order.id,
            )
            continue
        current.quantity -= quantity
        if current.quantity == 0:
            del projected[key]

    return projected


class LedgerReconciliationService:
    """Compares and repairs the holdings ledger against the order log."""

    @staticmethod
    def project(db: Session) -> dict[str, ProjectedHolding]:
        orders = db.query(Order).order_by(Order.sequence).all()
        return project_holdings(orders)

    @staticmethod
    def find_discrepancies(db: Session) -> list[LedgerDiscrepancy]:
        """List every instrument where stored and projected holdings differ."""
        projected = LedgerReconciliationService.project(db)
        stored = {h.instrument_key: h for h in db.query(Holding).all()}
        discrepancies: list[LedgerDiscrepancy] = []

        for key in sorted(set(projected) | set(stored)):
            expected = projected.get(key)
            holding = stored.get(key)

            if holding is None:
                discrepancies.append(
                    LedgerDiscrepancy(expected.instrument, "missing", None, expected.quantity)
                )
                continue
            if expected is None:
                discrepancies.append(
                    LedgerDiscrepancy(holding.instrument, "unexpected", as_decimal(holding.quantity), None)
                )
                continue

            stored_quantity = as_decimal(holding.quantity)
            if abs(stored_quantity - expected.quantity) > QUANTITY_TOLERANCE:
                discrepancies.append(
                    LedgerDiscrepancy(holding.instrument, "quantity", stored_quantity, expected.quantity)
                )
            stored_average = as_decimal(holding.average_price)
            if abs(stored_average - expected.average_price) > AVERAGE_PRICE_TOLERANCE:
                discrepancies.append(
                    LedgerDiscrepancy(holding.instrument, "average_price", stored_average, expected.average_price)
                )

        return discrepancies

    @staticmethod
    def rebuild(db: Session) -> int:
        """Rewrite the holdings ledger from the order log.

        Existing rows keep their ids (and canonical names) where the
        instrument is still held. Returns the number of rows inserted,
        updated or deleted. Commits.
        """
        projected = LedgerReconciliationService.project(db)
        stored = {h.instrument_key: h for h in db.query(Holding).all()}
        changed = 0

        for key, holding in stored.items():
            if key not in projected:
                db.delete(holding)
                changed += 1

        for key, expected in projected.items():
            holding = stored.get(key)
            if holding is None:
                db.add(Holding(
                    instrument=expected.instrument,
                    quantity=expected.quantity,
                    average_price=expected.average_price,
                ))
                changed += 1
            elif (
                as_decimal(holding.quantity) != expected.quantity
                or abs(as_decimal(holding.average_price) - expected.average_price) > AVERAGE_PRICE_TOLERANCE
            ):
                holding.quantity = expected.quantity
                holding.average_price = expected.average_price
                changed += 1

        db.commit()
        logger.info("Ledger rebuilt from order log: %d holdings changed", changed)
        return changed
