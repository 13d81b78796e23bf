"""Tests for the reconcile_holdings script."""

from decimal import Decimal
from unittest.mock import patch

from sqlalchemy.orm import sessionmaker

from models import Holding
from scripts.reconcile_holdings import reconcile_holdings
from services.order_validation import BuyIntent


def _session_local_for(db):
    """Sessionmaker bound to the test engine, like get_session_local()."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db.get_bind())


class TestReconcileHoldings:
    def test_reports_clean_ledger(self, db, order_service, capsys):
        order_service.buy(BuyIntent("TCS", Decimal("10"), Decimal("100")))

        with patch("scripts.reconcile_holdings.get_session_local", return_value=_session_local_for(db)):
            found = reconcile_holdings()

        assert found == 0
        assert "Found 0 ledger discrepancies" in capsys.readouterr().out

    def test_reports_without_fixing(self, db, order_service, capsys):
        order_service.buy(BuyIntent("TCS", Decimal("10"), Decimal("100")))
        db.query(Holding).one().quantity = Decimal("3")
        db.commit()

        with patch("scripts.reconcile_holdings.get_session_local", return_value=_session_local_for(db)):
            found = reconcile_holdings()

        out = capsys.readouterr().out
        assert found == 1
        assert "TCS: quantity" in out
        assert "--fix" in out
        db.expire_all()
        assert db.query(Holding).one().quantity == Decimal("3")

    def test_fix_rebuilds_ledger(self, db, order_service, capsys):
        order_service.buy(BuyIntent("TCS", Decimal("10"), Decimal("100")))
        db.query(Holding).one().quantity = Decimal("3")
        db.commit()

        with patch("scripts.reconcile_holdings.get_session_local", return_value=_session_local_for(db)):
            reconcile_holdings(fix=True)

        assert "Ledger rebuilt: 1 holdings changed" in capsys.readouterr().out
        db.expire_all()
        assert db.query(Holding).one().quantity == Decimal("10")
