"""SQLAlchemy-backed storage for holdings, orders and positions.

The execution engine only talks to storage through this class. Every
SQLAlchemy failure is re-raised as ``StorageError`` with the original
exception chained.
"""

import logging
from contextlib import contextmanager
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models import Holding, Order, OrderSide, Position, instrument_key
from services.exceptions import StorageError

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(action: str):
    """Translate SQLAlchemy errors raised inside the block."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Storage failure while %s", action, exc_info=True)
        raise StorageError(f"Storage failure while {action}") from e


class HoldingsStore:
    """Point operations on the holdings ledger and the order log."""

    def __init__(self, db: Session):
        self._db = db

    @property
    def is_sqlite(self) -> bool:
        bind = self._db.get_bind()
        return bind.dialect.name == "sqlite"

    # -- transaction control ------------------------------------------------

    def begin_write(self) -> None:
        """Start the write transaction for one order transition.

        On SQLite the database write lock is taken up front with
        ``BEGIN IMMEDIATE`` so the whole read-modify-write cycle is atomic
        against other processes as well.
        """
        if self.is_sqlite:
            with _storage_errors("starting a write transaction"):
                self._db.execute(text("BEGIN IMMEDIATE"))

    def commit(self) -> None:
        with _storage_errors("committing"):
            self._db.commit()

    def rollback(self) -> None:
        try:
            self._db.rollback()
        except SQLAlchemyError:
            logger.warning("Rollback failed", exc_info=True)

    # -- holdings -------------------------------------------------------------

    def _holdings_for_write(self):
        """Holdings query that re-reads rows and locks them until commit.

        SQLite already holds the database write lock from ``begin_write``;
        server databases get ``SELECT ... FOR UPDATE``.
        """
        query = self._db.query(Holding).populate_existing()
        if not self.is_sqlite:
            query = query.with_for_update()
        return query

    def find_holding_by_id(self, holding_id: str) -> Holding | None:
        """Point lookup by record id, always re-read from the database."""
        with _storage_errors("looking up a holding by id"):
            return (
                self._holdings_for_write()
                .filter(Holding.id == holding_id)
                .first()
            )

    def find_holding_by_name_ci(self, name: str) -> Holding | None:
        """Case-insensitive exact match on the instrument name."""
        with _storage_errors("looking up a holding by name"):
            return (
                self._holdings_for_write()
                .filter(Holding.instrument_key == instrument_key(name))
                .first()
            )

    def insert_holding(
        self, instrument: str, quantity: Decimal, average_price: Decimal
    ) -> Holding | None:
        """Insert a new holding inside a savepoint.

        Returns None, with the savepoint rolled back, when another
        transaction has already committed a holding for the same instrument.
        """
        with _storage_errors("inserting a holding"):
            holding = Holding(
                instrument=instrument,
                quantity=quantity,
                average_price=average_price,
            )
            try:
                with self._db.begin_nested():
                    self._db.add(holding)
            except IntegrityError:
                logger.info("Holding %s was created concurrently", instrument)
                return None
            return holding

    def update_holding(self, holding: Holding, quantity: Decimal, average_price: Decimal) -> Holding:
        """Replace quantity and average price on an existing holding."""
        with _storage_errors("updating a holding"):
            holding.quantity = quantity
            holding.average_price = average_price
            self._db.flush()
            return holding

    def delete_holding(self, holding: Holding) -> None:
        with _storage_errors("deleting a holding"):
            self._db.delete(holding)
            self._db.flush()

    def list_holdings(self) -> list[Holding]:
        with _storage_errors("listing holdings"):
            return self._db.query(Holding).order_by(Holding.instrument_key).all()

    # -- orders ---------------------------------------------------------------

    def insert_order(
        self,
        instrument: str,
        quantity: Decimal,
        price: Decimal,
        side: OrderSide,
    ) -> Order:
        with _storage_errors("recording an order"):
            order = Order(
                instrument=instrument,
                quantity=quantity,
                price=price,
                side=side.value,
            )
            self._db.add(order)
            self._db.flush()
            return order

    def list_orders(self) -> list[Order]:
        """All orders, oldest first."""
        with _storage_errors("listing orders"):
            return self._db.query(Order).order_by(Order.sequence).all()

    # -- positions ------------------------------------------------------------

    def list_positions(self) -> list[Position]:
        with _storage_errors("listing positions"):
            return self._db.query(Position).order_by(Position.instrument).all()
