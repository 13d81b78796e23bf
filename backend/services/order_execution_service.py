"""Order execution engine - applies buy and sell orders to the holdings ledger."""

import logging
from decimal import Decimal

from models import Holding, Order, OrderSide
from services.exceptions import HoldingNotFoundError, InsufficientQuantityError, StorageError
from services.holdings_store import HoldingsStore
from services.identifier_resolver import IdentifierResolver
from services.instrument_locks import InstrumentLockRegistry, instrument_locks
from services.order_validation import BuyIntent, SellIntent
from utils.numbers import as_decimal

logger = logging.getLogger(__name__)


def weighted_average_price(
    held_quantity: Decimal,
    held_average: Decimal,
    bought_quantity: Decimal,
    bought_price: Decimal,
) -> Decimal:
    """Average unit cost after adding ``bought_quantity`` at ``bought_price``.

    The caller guarantees ``held_quantity + bought_quantity > 0``.
    """
    total_quantity = held_quantity + bought_quantity
    total_cost = held_quantity * held_average + bought_quantity * bought_price
    return total_cost / total_quantity


class OrderExecutionService:
    """Executes validated order intents against the ledger.

    Each transition runs under the instrument's lock and inside a single
    storage transaction, so the order record and the holding change are
    committed together or not at all.
    """

    def __init__(
        self,
        store: HoldingsStore,
        resolver: IdentifierResolver,
        locks: InstrumentLockRegistry | None = None,
    ):
        self._store = store
        self._resolver = resolver
        self._locks = locks if locks is not None else instrument_locks

    def buy(self, intent: BuyIntent) -> Order:
        """Record a buy and merge it into the instrument's holding.

        An existing holding (matched case-insensitively) gets the summed
        quantity and the quantity-weighted average price; otherwise a new
        holding is created at the order's quantity and price.
        """
        with self._locks.hold(intent.name):
            self._store.begin_write()
            try:
                order = self._store.insert_order(
                    intent.name, intent.quantity, intent.price, OrderSide.BUY
                )
                existing = self._store.find_holding_by_name_ci(intent.name)
                if existing is not None:
                    self._merge_buy(existing, intent)
                elif self._store.insert_holding(intent.name, intent.quantity, intent.price) is not None:
                    logger.info("Opened holding %s: %s @ %s", intent.name, intent.quantity, intent.price)
                else:
                    # Another process opened it first; merge into theirs
                    existing = self._store.find_holding_by_name_ci(intent.name)
                    if existing is None:
                        raise StorageError(f"Storage failure while opening holding {intent.name}")
                    self._merge_buy(existing, intent)
                self._store.commit()
            except Exception:
                self._store.rollback()
                raise

        logger.info("BUY executed: %s x %s @ %s", intent.name, intent.quantity, intent.price)
        return order

    def _merge_buy(self, holding: Holding, intent: BuyIntent) -> None:
        held_quantity = as_decimal(holding.quantity)
        held_average = as_decimal(holding.average_price)
        new_quantity = held_quantity + intent.quantity
        new_average = weighted_average_price(
            held_quantity, held_average, intent.quantity, intent.price
        )
        self._store.update_holding(holding, new_quantity, new_average)
        logger.debug(
            "Holding %s: %s @ %s -> %s @ %s",
            holding.instrument, held_quantity, held_average, new_quantity, new_average,
        )

    def sell(self, intent: SellIntent) -> Order:
        """Reduce a holding and record the sell.

        The holding is resolved from the intent's identifier, then re-read
        under the instrument's lock, by id or, when that row is gone, by
        instrument name. A sell that empties the holding exactly
        deletes it. The recorded order carries the holding's canonical
        instrument name, whichever identifier the client used.

        Raises:
            HoldingNotFoundError: If the identifier matches no holding.
            InsufficientQuantityError: If the holding has less than requested.
        """
        target = self._resolver.resolve(intent.identifier)
        target_id, target_name = target.id, target.instrument

        with self._locks.hold(target_name):
            self._store.begin_write()
            try:
                holding = self._store.find_holding_by_id(target_id)
                if holding is None:
                    # Closed between resolve and lock, possibly reopened under a new id
                    holding = self._store.find_holding_by_name_ci(target_name)
                if holding is None:
                    raise HoldingNotFoundError(intent.identifier)

                available = as_decimal(holding.quantity)
                if available < intent.quantity:
                    raise InsufficientQuantityError(holding.instrument, intent.quantity, available)

                instrument = holding.instrument
                remaining = available - intent.quantity
                if remaining == 0:
                    self._store.delete_holding(holding)
                    logger.info("Closed holding %s", instrument)
                else:
                    self._store.update_holding(holding, remaining, holding.average_price)

                order = self._store.insert_order(
                    instrument, intent.quantity, intent.price, OrderSide.SELL
                )
                self._store.commit()
            except Exception:
                self._store.rollback()
                raise

        logger.info("SELL executed: %s x %s @ %s", instrument, intent.quantity, intent.price)
        return order
