"""API route handlers."""
from . import holdings, orders

__all__ = ["holdings", "orders"]
