"""Shared API helpers for route handlers.

Dependency providers and response builders used across multiple route files.
"""

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models import Holding
from services.exceptions import OrderError
from services.holdings_store import HoldingsStore
from utils.numbers import as_decimal


def get_holdings_store(db: Session = Depends(get_db)) -> HoldingsStore:
    """Dependency that wraps the request's session in a HoldingsStore."""
    return HoldingsStore(db)


def http_error(error: OrderError, detail: str | None = None) -> HTTPException:
    """Translate an order error into the HTTPException to raise.

    Args:
        error: The service-layer error.
        detail: Optional message overriding the error's own, used for
            storage failures so internals are not exposed.

    Returns:
        An HTTPException carrying the error's status code.
    """
    return HTTPException(status_code=error.status_code, detail=detail or error.message)


def holding_response_dict(holding: Holding) -> dict:
    """Build a HoldingResponse-compatible dict from a Holding.

    ``quantity`` and ``average_price`` are coerced to numbers, defaulting
    to 0 when a stored row has them missing or malformed.

    Args:
        holding: A Holding instance.

    Returns:
        Dict matching the HoldingResponse schema.
    """
    return {
        "id": holding.id,
        "instrument": holding.instrument,
        "quantity": as_decimal(holding.quantity),
        "average_price": as_decimal(holding.average_price),
        "created_at": holding.created_at,
        "updated_at": holding.updated_at,
    }
