"""Holding model - current net position in one instrument."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Numeric, String

from database import Base
from models.utils import PRICE_SCALE, QUANTITY_SCALE, generate_uuid, instrument_key


class Holding(Base):
    """A live holding in the ledger.

    At most one row exists per instrument, compared case-insensitively via
    ``instrument_key``. Rows are deleted rather than persisted at zero
    quantity. ``quantity`` and ``average_price`` are nullable so rows
    written by older clients still load; readers sanitize them.
    """

    __tablename__ = "holdings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    instrument = Column(String, nullable=False)  # Canonical name as first recorded
    instrument_key = Column(String, nullable=False, unique=True, index=True)
    quantity = Column(Numeric(18, QUANTITY_SCALE), nullable=True)
    average_price = Column(Numeric(18, PRICE_SCALE), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __init__(self, **kwargs):
        if "instrument" in kwargs and "instrument_key" not in kwargs:
            kwargs["instrument_key"] = instrument_key(kwargs["instrument"])
        super().__init__(**kwargs)
