"""SQLAlchemy ORM models."""

from .holding import Holding
from .order import Order, OrderSide
from .position import Position
from .utils import PRICE_SCALE, QUANTITY_SCALE, generate_uuid, instrument_key

__all__ = [
    "Holding",
    "Order",
    "OrderSide",
    "Position",
    "PRICE_SCALE",
    "QUANTITY_SCALE",
    "generate_uuid",
    "instrument_key",
]
