"""Tests for HoldingsStore."""

from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from models import Holding, OrderSide
from services.exceptions import StorageError
from services.holdings_store import HoldingsStore
from tests.fixtures import create_holding


class TestHoldingLookups:
    def test_find_by_id(self, store, holding):
        assert store.find_holding_by_id(holding.id).instrument == "TCS"

    def test_find_by_id_missing(self, store):
        assert store.find_holding_by_id("no-such-id") is None

    def test_find_by_name_ignores_case(self, store, holding):
        assert store.find_holding_by_name_ci("tCs").id == holding.id

    def test_find_by_name_ignores_surrounding_whitespace(self, store, holding):
        assert store.find_holding_by_name_ci(" TCS ").id == holding.id

    def test_find_by_id_rereads_database(self, db, store, holding):
        """Lookups refresh objects already loaded into the session."""
        other = Session(bind=db.get_bind())
        other.query(Holding).filter(Holding.id == holding.id).update({"quantity": Decimal("3")})
        other.commit()
        other.close()

        assert store.find_holding_by_id(holding.id).quantity == Decimal("3")


class TestHoldingWrites:
    def test_insert_sets_instrument_key(self, db, store):
        holding = store.insert_holding("Infy", Decimal("1"), Decimal("1500"))
        db.commit()

        assert holding.instrument == "Infy"
        assert holding.instrument_key == "infy"

    def test_insert_duplicate_instrument_returns_none(self, db, store, holding):
        """A holding committed by another writer leaves the transaction usable."""
        store.begin_write()
        assert store.insert_holding("tcs", Decimal("1"), Decimal("200")) is None
        store.insert_order("tcs", Decimal("1"), Decimal("200"), OrderSide.BUY)
        store.commit()

        assert db.query(Holding).count() == 1
        assert len(store.list_orders()) == 1

    def test_update_replaces_numbers(self, db, store, holding):
        store.update_holding(holding, Decimal("12"), Decimal("110"))
        db.commit()
        db.expire_all()

        reloaded = store.find_holding_by_id(holding.id)
        assert reloaded.quantity == Decimal("12")
        assert reloaded.average_price == Decimal("110")

    def test_delete(self, db, store, holding):
        store.delete_holding(holding)
        db.commit()
        assert db.query(Holding).count() == 0

    def test_list_holdings_sorted_by_name(self, db, store):
        create_holding(db, "wipro", Decimal("1"), Decimal("400"))
        create_holding(db, "INFY", Decimal("1"), Decimal("1500"))
        create_holding(db, "Tcs", Decimal("1"), Decimal("3500"))

        assert [h.instrument for h in store.list_holdings()] == ["INFY", "Tcs", "wipro"]


class TestOrders:
    def test_insert_and_list_in_insertion_order(self, db, store):
        store.insert_order("TCS", Decimal("10"), Decimal("100"), OrderSide.BUY)
        store.insert_order("INFY", Decimal("1"), Decimal("1500"), OrderSide.BUY)
        store.insert_order("TCS", Decimal("5"), Decimal("120"), OrderSide.SELL)
        db.commit()

        orders = store.list_orders()
        assert [(o.instrument, o.side) for o in orders] == [
            ("TCS", "BUY"),
            ("INFY", "BUY"),
            ("TCS", "SELL"),
        ]
        assert all(len(o.id) == 36 for o in orders)


class TestPositions:
    def test_list_positions(self, store, position):
        positions = store.list_positions()
        assert len(positions) == 1
        assert positions[0].instrument == "EVEREADY"


class TestBeginWrite:
    def test_sqlite_takes_write_lock_immediately(self, db, store):
        with patch.object(db, "execute", wraps=db.execute) as execute:
            store.begin_write()
        statement = execute.call_args[0][0]
        assert str(statement) == "BEGIN IMMEDIATE"
        store.rollback()

    def test_non_sqlite_is_noop(self, db):
        store = HoldingsStore(db)
        with patch.object(HoldingsStore, "is_sqlite", new=False), \
                patch.object(db, "execute") as execute:
            store.begin_write()
        execute.assert_not_called()


class TestRowLocking:
    @staticmethod
    def _sql(query) -> str:
        return str(query.statement.compile(dialect=postgresql.dialect()))

    def test_server_databases_lock_holding_rows(self, store):
        with patch.object(HoldingsStore, "is_sqlite", new=False):
            query = store._holdings_for_write()
        assert "FOR UPDATE" in self._sql(query)

    def test_sqlite_uses_database_lock_instead(self, store):
        assert "FOR UPDATE" not in self._sql(store._holdings_for_write())


class TestStorageErrors:
    def test_sqlalchemy_errors_become_storage_errors(self, db, store):
        failure = OperationalError("SELECT 1", {}, Exception("disk I/O error"))
        with patch.object(db, "query", side_effect=failure):
            with pytest.raises(StorageError) as exc_info:
                store.list_holdings()

        assert exc_info.value.status_code == 500
        assert exc_info.value.__cause__ is failure
        assert "disk I/O error" not in exc_info.value.message
