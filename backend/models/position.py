"""Position model - intraday positions fed from outside the order flow."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Numeric, String

from database import Base
from models.utils import PRICE_SCALE, QUANTITY_SCALE, generate_uuid


class Position(Base):
    """A position record served as-is; order execution never touches it."""

    __tablename__ = "positions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    product = Column(String, nullable=True)  # e.g. "CNC", "MIS"
    instrument = Column(String, nullable=False)
    quantity = Column(Numeric(18, QUANTITY_SCALE), nullable=True)
    average_price = Column(Numeric(18, PRICE_SCALE), nullable=True)
    last_price = Column(Numeric(18, PRICE_SCALE), nullable=True)
    net_change = Column(String, nullable=True)  # Display strings, e.g. "+0.58%"
    day_change = Column(String, nullable=True)
    is_loss = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
