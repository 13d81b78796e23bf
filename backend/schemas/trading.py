"""Pydantic schemas for the trading API.

Request bodies are deliberately loose (``Any``): field rules live in
``services.order_validation`` so malformed orders are rejected with a 400
and a single message, like the rest of the order errors.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BuyOrderRequest(BaseModel):
    """Request body for a buy order. ``qty`` is accepted for ``quantity``."""

    name: Any = None
    quantity: Any = Field(default=None, validation_alias=AliasChoices("quantity", "qty"))
    price: Any = None
    mode: Any = None


class SellOrderRequest(BaseModel):
    """Request body for a sell order.

    The target is ``nameOrId`` (a holding id or an instrument name), or
    ``name`` when ``nameOrId`` is absent.
    """

    name_or_id: Any = Field(
        default=None, validation_alias=AliasChoices("nameOrId", "name_or_id")
    )
    name: Any = None
    quantity: Any = Field(default=None, validation_alias=AliasChoices("quantity", "qty"))
    price: Any = None

    @property
    def identifier(self) -> Any:
        return self.name_or_id if self.name_or_id is not None else self.name


class OrderResponse(BaseModel):
    """Schema for an executed order."""

    id: str
    instrument: str
    quantity: Decimal
    price: Decimal
    side: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HoldingResponse(BaseModel):
    """Schema for a holding, numeric fields always present."""

    id: str
    instrument: str
    quantity: Decimal
    average_price: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PositionResponse(BaseModel):
    """Schema for a position record, passed through as stored."""

    id: str
    product: Optional[str] = None
    instrument: str
    quantity: Optional[Decimal] = None
    average_price: Optional[Decimal] = None
    last_price: Optional[Decimal] = None
    net_change: Optional[str] = None
    day_change: Optional[str] = None
    is_loss: bool = False

    model_config = ConfigDict(from_attributes=True)
