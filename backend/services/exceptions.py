"""Typed exception hierarchy for order execution.

Each error carries the HTTP status the API layer reports it with, so
route handlers can translate any ``OrderError`` uniformly.
"""

from decimal import Decimal


class OrderError(Exception):
    """Base exception for all order-execution errors."""

    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class OrderValidationError(OrderError):
    """A required field is missing or malformed (client fault)."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class HoldingNotFoundError(OrderError):
    """The sell target could not be resolved to a holding."""

    status_code = 404

    def __init__(self, identifier: str, message: str = "Stock not found in holdings"):
        self.identifier = identifier
        super().__init__(message)


class InsufficientQuantityError(OrderError):
    """The sell quantity exceeds what the holding has available."""

    def __init__(self, instrument: str, requested: Decimal, available: Decimal):
        self.instrument = instrument
        self.requested = requested
        self.available = available
        # normalize() drops the storage scale: Decimal("5.00000000") -> "5"
        super().__init__(f"Not enough quantity. Available: {available.normalize():f}")


class StorageError(OrderError):
    """A persistence operation failed, including loss of connectivity.

    The message is safe to show to clients; the underlying exception is
    chained as ``__cause__`` for the logs.
    """

    status_code = 500
