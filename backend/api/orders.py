"""Order API endpoints - buy, sell and the order log."""

import logging

from fastapi import APIRouter, Depends

from api.helpers import get_holdings_store, http_error
from config import settings
from schemas import BuyOrderRequest, OrderResponse, SellOrderRequest
from services.exceptions import OrderError, StorageError
from services.holdings_store import HoldingsStore
from services.identifier_resolver import IdentifierResolver, record_id_predicate
from services.order_execution_service import OrderExecutionService
from services.order_validation import validate_buy_intent, validate_sell_intent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_order_service(
    store: HoldingsStore = Depends(get_holdings_store),
) -> OrderExecutionService:
    """Build the execution service around the request's store."""
    resolver = IdentifierResolver(store, record_id_predicate(settings.RECORD_ID_PATTERN))
    return OrderExecutionService(store, resolver)


@router.get("", response_model=list[OrderResponse])
def list_orders(store: HoldingsStore = Depends(get_holdings_store)):
    """Return the order log, oldest first."""
    try:
        return store.list_orders()
    except StorageError as e:
        raise http_error(e, "Error fetching orders")


@router.post("/buy", response_model=OrderResponse, status_code=201)
def submit_buy(
    body: BuyOrderRequest,
    service: OrderExecutionService = Depends(get_order_service),
):
    """Execute a buy order.

    Raises:
        HTTPException:
            - 400 Bad Request: Missing or malformed fields
            - 500 Internal Server Error: Storage failure
    """
    logger.info("New BUY order: %s", body.model_dump())
    try:
        intent = validate_buy_intent(body.name, body.quantity, body.price, body.mode)
        return service.buy(intent)
    except StorageError as e:
        raise http_error(e, "Error processing buy order")
    except OrderError as e:
        logger.info("BUY rejected: %s", e.message)
        raise http_error(e)


@router.post("/sell", response_model=OrderResponse, status_code=201)
def submit_sell(
    body: SellOrderRequest,
    service: OrderExecutionService = Depends(get_order_service),
):
    """Execute a sell order against an existing holding.

    Raises:
        HTTPException:
            - 400 Bad Request: Missing or malformed fields, or not enough quantity
            - 404 Not Found: No holding matches the identifier
            - 500 Internal Server Error: Storage failure
    """
    logger.info("Sell request: %s", body.model_dump())
    try:
        intent = validate_sell_intent(
            body.identifier,
            body.quantity,
            body.price,
            strict=settings.STRICT_SELL_VALIDATION,
        )
        return service.sell(intent)
    except StorageError as e:
        raise http_error(e, "Error processing sell request")
    except OrderError as e:
        logger.info("SELL rejected: %s", e.message)
        raise http_error(e)
