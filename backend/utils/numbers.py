"""Lenient numeric coercion for values read back from storage."""

from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")


def as_decimal(value, default: Decimal = ZERO) -> Decimal:
    """Coerce a stored value to a finite Decimal.

    Rows written by older clients may hold ``None``, numeric strings or
    garbage in numeric columns. Anything that is not a finite number
    becomes ``default``.

    Args:
        value: A Decimal, int, float, string, or None.
        default: Returned when the value cannot be coerced.

    Returns:
        A finite Decimal.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value if value.is_finite() else default
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return default
    return result if result.is_finite() else default
