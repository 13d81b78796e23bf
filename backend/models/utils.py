"""Shared utilities for ORM models."""

import uuid


def generate_uuid() -> str:
    """Generate a UUID string."""
    return str(uuid.uuid4())


def instrument_key(name: str) -> str:
    """Normalize an instrument name for case-insensitive comparison."""
    return name.strip().lower()


# Decimal places kept by the quantity and price columns
QUANTITY_SCALE = 8
PRICE_SCALE = 6
