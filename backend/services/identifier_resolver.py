"""Resolution of client-supplied sell targets to holdings."""

import logging
import re
from typing import Callable

from models import Holding
from services.exceptions import HoldingNotFoundError
from services.holdings_store import HoldingsStore

logger = logging.getLogger(__name__)

RecordIdPredicate = Callable[[str], bool]


def record_id_predicate(pattern: str) -> RecordIdPredicate:
    """Build a "looks like a storage record id" predicate from a regex.

    The pattern is matched against the whole identifier.
    """
    compiled = re.compile(pattern)
    return lambda identifier: compiled.fullmatch(identifier) is not None


class IdentifierResolver:
    """Map a sell target to exactly one holding.

    Clients may name a holding by its record id or by its instrument name.
    An identifier shaped like a record id is tried as an id first; when that
    finds nothing (or the identifier is not id-shaped) the same string is
    matched case-insensitively against instrument names.
    """

    def __init__(self, store: HoldingsStore, looks_like_record_id: RecordIdPredicate):
        self._store = store
        self._looks_like_record_id = looks_like_record_id

    def find(self, identifier: str) -> Holding | None:
        """Return the holding for ``identifier``, or None."""
        if self._looks_like_record_id(identifier):
            holding = self._store.find_holding_by_id(identifier)
            if holding is not None:
                return holding
            logger.debug("No holding with id %s, trying it as a name", identifier)
        return self._store.find_holding_by_name_ci(identifier)

    def resolve(self, identifier: str) -> Holding:
        """Return the holding for ``identifier``.

        Raises:
            HoldingNotFoundError: If neither the id nor the name lookup matches.
        """
        holding = self.find(identifier)
        if holding is None:
            raise HoldingNotFoundError(identifier)
        return holding
