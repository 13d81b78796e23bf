"""Test fixtures and sample data."""
import pytest
from decimal import Decimal

from models import Holding, Order, Position
from services.holdings_store import HoldingsStore
from services.identifier_resolver import IdentifierResolver, record_id_predicate
from services.instrument_locks import InstrumentLockRegistry
from services.order_execution_service import OrderExecutionService
from config import DEFAULT_RECORD_ID_PATTERN
from sqlalchemy.orm import Session


def create_holding(
    db: Session,
    instrument: str,
    quantity: Decimal | None,
    average_price: Decimal | None,
) -> Holding:
    """Insert and commit a Holding row directly, bypassing the engine.

    This is a helper function (not a fixture) for tests that need several
    holdings or rows with missing numeric fields.
    """
    h = Holding(instrument=instrument, quantity=quantity, average_price=average_price)
    db.add(h)
    db.commit()
    db.refresh(h)
    return h


def build_order_service(
    store: HoldingsStore,
    locks: InstrumentLockRegistry | None = None,
    pattern: str = DEFAULT_RECORD_ID_PATTERN,
) -> OrderExecutionService:
    """Wire an OrderExecutionService the way the API dependency does."""
    resolver = IdentifierResolver(store, record_id_predicate(pattern))
    return OrderExecutionService(store, resolver, locks=locks or InstrumentLockRegistry())


def order_log(db: Session) -> list[tuple[str, str, Decimal, Decimal]]:
    """Return (side, instrument, quantity, price) for every order, oldest first."""
    return [
        (o.side, o.instrument, o.quantity, o.price)
        for o in db.query(Order).order_by(Order.sequence).all()
    ]


@pytest.fixture
def store(db: Session) -> HoldingsStore:
    """HoldingsStore over the test session."""
    return HoldingsStore(db)


@pytest.fixture
def order_service(store: HoldingsStore) -> OrderExecutionService:
    """OrderExecutionService with its own lock registry."""
    return build_order_service(store)


@pytest.fixture
def holding(db: Session) -> Holding:
    """Create a test holding: 10 TCS at an average of 100."""
    return create_holding(db, "TCS", Decimal("10"), Decimal("100"))


@pytest.fixture
def position(db: Session) -> Position:
    """Create a test position record."""
    pos = Position(
        product="CNC",
        instrument="EVEREADY",
        quantity=Decimal("2"),
        average_price=Decimal("316.27"),
        last_price=Decimal("312.35"),
        net_change="+0.58%",
        day_change="-1.24%",
        is_loss=True,
    )
    db.add(pos)
    db.commit()
    db.refresh(pos)
    return pos
