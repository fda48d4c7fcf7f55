"""Tests for the ledger column types."""

from sqlalchemy import Numeric

from app.models.asset import Asset
from app.models.dividend import Dividend
from app.models.hypothesis import Hypothesis
from app.models.snapshot import Snapshot


class TestMoneyColumns:
    """Amounts are fixed-point in the database and floats in Python."""

    def test_asset_amounts_are_cents(self):
        for name in ("buying_amount", "current_amount"):
            column_type = Asset.__table__.c[name].type
            assert isinstance(column_type, Numeric)
            assert column_type.scale == 2
            assert column_type.asdecimal is False

    def test_asset_quantity_and_unit_values_keep_eight_decimals(self):
        for name in ("quantity", "buying_value", "current_value"):
            column_type = Asset.__table__.c[name].type
            assert isinstance(column_type, Numeric)
            assert column_type.scale == 8
            assert column_type.asdecimal is False

    def test_other_money_columns(self):
        for column in (
            Snapshot.__table__.c.total_value,
            Dividend.__table__.c.amount,
            Hypothesis.__table__.c.monthly_contribution_owner_1,
            Hypothesis.__table__.c.monthly_contribution_owner_2,
        ):
            assert isinstance(column.type, Numeric)
            assert column.type.scale == 2
