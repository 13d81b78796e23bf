"""Holdings and positions API endpoints."""

import logging

from fastapi import APIRouter, Depends

from api.helpers import get_holdings_store, holding_response_dict, http_error
from schemas import HoldingResponse, PositionResponse
from services.exceptions import StorageError
from services.holdings_store import HoldingsStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["holdings"])


@router.get("/holdings", response_model=list[HoldingResponse])
def list_holdings(store: HoldingsStore = Depends(get_holdings_store)):
    """List every live holding with sanitized numeric fields."""
    try:
        holdings = store.list_holdings()
    except StorageError as e:
        raise http_error(e, "Error fetching holdings")
    return [holding_response_dict(h) for h in holdings]


@router.get("/positions", response_model=list[PositionResponse])
def list_positions(store: HoldingsStore = Depends(get_holdings_store)):
    """List positions as stored. Order execution never modifies them."""
    try:
        return store.list_positions()
    except StorageError as e:
        raise http_error(e, "Error fetching positions")
