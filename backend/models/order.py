"""Order model - append-only log of executed orders."""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, DateTime, Integer, Numeric, String

from database import Base
from models.utils import PRICE_SCALE, QUANTITY_SCALE, generate_uuid


class OrderSide(str, Enum):
    """Direction of an executed order."""

    BUY = "BUY"
    SELL = "SELL"


class Order(Base):
    """An executed buy or sell.

    Orders are inserted once and never updated or deleted. ``sequence``
    gives a stable insertion order independent of clock resolution.
    """

    __tablename__ = "orders"

    id = Column(String(36), unique=True, nullable=False, default=generate_uuid)
    sequence = Column(Integer, primary_key=True, autoincrement=True)
    instrument = Column(String, nullable=False, index=True)
    quantity = Column(Numeric(18, QUANTITY_SCALE), nullable=False)
    price = Column(Numeric(18, PRICE_SCALE), nullable=False)
    side = Column(String(4), nullable=False)  # "BUY" / "SELL"
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
