"""Validation of raw buy/sell requests into typed order intents.

Runs before any storage access: an intent that comes out of here is safe
to hand to ``OrderExecutionService``.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from models import PRICE_SCALE, QUANTITY_SCALE, OrderSide
from services.exceptions import OrderValidationError


@dataclass(frozen=True)
class BuyIntent:
    """A validated buy request."""

    name: str
    quantity: Decimal
    price: Decimal


@dataclass(frozen=True)
class SellIntent:
    """A validated sell request.

    ``identifier`` is either a holding record id or an instrument name.
    """

    identifier: str
    quantity: Decimal
    price: Decimal


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def to_decimal(value: Any, field: str) -> Decimal:
    """Coerce a JSON scalar to a finite Decimal.

    Accepts ints, floats, Decimals and numeric strings. Booleans, NaN and
    infinities are rejected.

    Raises:
        OrderValidationError: If the value is not a finite number.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise OrderValidationError(f"{field} must be a number", field=field)
    try:
        # str() keeps floats at their shortest repr (0.1 -> "0.1")
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise OrderValidationError(f"{field} must be a number", field=field)
    if not result.is_finite():
        raise OrderValidationError(f"{field} must be a finite number", field=field)
    return result


def _require_positive(value: Decimal, field: str) -> Decimal:
    if value <= 0:
        raise OrderValidationError(f"{field} must be a positive number", field=field)
    return value


def _check_scale(value: Decimal, field: str, places: int) -> Decimal:
    # Finer values would be rounded away by the storage columns
    if -value.normalize().as_tuple().exponent > places:
        raise OrderValidationError(
            f"{field} supports at most {places} decimal places", field=field
        )
    return value


def _check_required(**fields: Any) -> None:
    missing = [name for name, value in fields.items() if _is_missing(value)]
    if missing:
        raise OrderValidationError(
            f"Missing required fields: {', '.join(missing)}", field=missing[0]
        )


def validate_buy_intent(name: Any, quantity: Any, price: Any, mode: Any) -> BuyIntent:
    """Validate a buy request.

    ``name`` must be a non-empty string, ``quantity`` and ``price`` positive
    numbers within the stored decimal places, and ``mode`` must be ``BUY``
    (case-insensitive).

    Raises:
        OrderValidationError: On the first problem found.
    """
    _check_required(name=name, quantity=quantity, price=price, mode=mode)

    if not isinstance(name, str):
        raise OrderValidationError("name must be a string", field="name")
    if not isinstance(mode, str) or mode.strip().upper() != OrderSide.BUY.value:
        raise OrderValidationError(f"Unrecognized order mode: {mode!r}", field="mode")

    return BuyIntent(
        name=name.strip(),
        quantity=_check_scale(
            _require_positive(to_decimal(quantity, "quantity"), "quantity"), "quantity", QUANTITY_SCALE
        ),
        price=_check_scale(
            _require_positive(to_decimal(price, "price"), "price"), "price", PRICE_SCALE
        ),
    )


def validate_sell_intent(
    identifier: Any,
    quantity: Any,
    price: Any,
    strict: bool = False,
) -> SellIntent:
    """Validate a sell request.

    Only presence, numeric form and decimal places are checked by default;
    ``strict`` additionally requires ``quantity`` and ``price`` to be positive.

    Raises:
        OrderValidationError: On the first problem found.
    """
    _check_required(identifier=identifier)
    if quantity is None or price is None:
        missing = [n for n, v in (("quantity", quantity), ("price", price)) if v is None]
        raise OrderValidationError(
            f"Missing required fields: {', '.join(missing)}", field=missing[0]
        )

    if not isinstance(identifier, str):
        raise OrderValidationError("identifier must be a string", field="identifier")

    qty = to_decimal(quantity, "quantity")
    px = to_decimal(price, "price")
    if strict:
        _require_positive(qty, "quantity")
        _require_positive(px, "price")
    _check_scale(qty, "quantity", QUANTITY_SCALE)
    _check_scale(px, "price", PRICE_SCALE)

    return SellIntent(identifier=identifier.strip(), quantity=qty, price=px)
