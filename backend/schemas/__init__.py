"""Pydantic schemas for API request/response validation."""

from .trading import (
    BuyOrderRequest,
    HoldingResponse,
    OrderResponse,
    PositionResponse,
    SellOrderRequest,
)

__all__ = [
    "BuyOrderRequest",
    "HoldingResponse",
    "OrderResponse",
    "PositionResponse",
    "SellOrderRequest",
]
