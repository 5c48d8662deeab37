"""
Unit Tests - Report Views
"""
from datetime import date, datetime

import pytest
import polars as pl

from sales_dwh.analytics import WarehouseTables, customer_report, product_report


class TestCustomerReport:
    """Tests for the per-customer report view"""

    def test_one_row_per_customer(self, sample_tables, evaluation_date):
        """Test that every dimension row appears, including non-buyers"""
        result = customer_report(sample_tables, as_of=evaluation_date)

        assert result["customer_key"].to_list() == [1, 2, 3, 4, 5]

    def test_customer_with_orders(self, sample_tables, evaluation_date):
        """Test aggregates and time-dependent columns for an active customer"""
        result = customer_report(sample_tables, as_of=evaluation_date)
        ana = result.filter(pl.col("customer_key") == 1).row(0, named=True)

        assert ana["customer_name"] == "Ana Silva"
        assert ana["country"] == "Brazil"
        assert ana["gender"] == "Female"
        assert ana["age"] == 34
        assert ana["total_orders"] == 2
        assert ana["total_revenue"] == 5100.0
        assert ana["total_quantity"] == 4
        assert ana["last_order_date"] == date(2024, 3, 1)
        assert ana["days_since_last_order"] == 121
        assert ana["customer_segment"] == "VIP"

    def test_customer_without_orders(self, sample_tables, evaluation_date):
        """Test zero orders, null aggregates and New segment"""
        result = customer_report(sample_tables, as_of=evaluation_date)
        dan = result.filter(pl.col("customer_key") == 4).row(0, named=True)

        assert dan["total_orders"] == 0
        assert dan["total_revenue"] is None
        assert dan["total_quantity"] is None
        assert dan["last_order_date"] is None
        assert dan["days_since_last_order"] is None
        assert dan["age"] is None
        assert dan["customer_segment"] == "New"

    def test_age_counts_year_boundaries(self, sample_tables, evaluation_date):
        """Test age is the difference in calendar years"""
        result = customer_report(sample_tables, as_of=evaluation_date)
        cara = result.filter(pl.col("customer_key") == 3).row(0, named=True)

        assert cara["age"] == 24

    def test_evaluation_date_is_pinned(self, sample_tables):
        """Test that results depend only on the given evaluation date"""
        first = customer_report(sample_tables, as_of=date(2025, 1, 1))
        second = customer_report(sample_tables, as_of=datetime(2025, 1, 1, 18, 30))

        assert first.equals(second)
        assert first.filter(pl.col("customer_key") == 1)["days_since_last_order"][0] == 306

    def test_empty_dimension(self, empty_tables, evaluation_date):
        assert customer_report(empty_tables, as_of=evaluation_date).height == 0


class TestProductReport:
    """Tests for the per-product report view"""

    def test_one_row_per_product(self, sample_tables):
        """Test ordering by revenue rank, then product key"""
        result = product_report(sample_tables)

        assert result["product_key"].to_list() == [10, 11, 12, 13, 15, 14]
        assert result["revenue_rank"].to_list() == [1, 1, 3, 3, 5, 6]

    def test_profit_and_margin(self, sample_tables):
        """Test profit = revenue - cost * units and margin percentage"""
        result = product_report(sample_tables)
        rows = {row["product_key"]: row for row in result.to_dicts()}

        assert rows[10]["total_profit"] == 4000.0
        assert rows[10]["profit_margin_pct"] == 80.0
        assert rows[11]["total_profit"] == 4200.0
        assert rows[11]["profit_margin_pct"] == 84.0
        assert rows[12]["total_units_sold"] == 4
        assert rows[12]["profit_margin_pct"] == 60.0
        assert rows[13]["total_profit"] == 160.0

    def test_unsold_product(self, sample_tables):
        """Test that a product without sales has null figures and a null margin"""
        result = product_report(sample_tables)
        jersey = result.filter(pl.col("product_key") == 14).row(0, named=True)

        assert jersey["total_orders"] == 0
        assert jersey["total_units_sold"] is None
        assert jersey["total_revenue"] is None
        assert jersey["total_profit"] is None
        assert jersey["profit_margin_pct"] is None
        assert jersey["revenue_rank"] == 6

    def test_zero_revenue_margin_is_null(self):
        """Test division guard when revenue is exactly zero"""
        tables = WarehouseTables.from_frames(
            pl.DataFrame({
                "order_number": ["SO1"],
                "product_key": [1],
                "customer_key": [1],
                "order_date": [date(2024, 1, 1)],
                "sales_amount": [0.0],
                "quantity": [3],
            }),
            dim_products=pl.DataFrame({
                "product_key": [1],
                "product_name": ["Free Sample"],
                "category": ["Promo"],
                "subcategory": ["Samples"],
                "cost": [1.5],
            }),
        )

        row = product_report(tables).row(0, named=True)

        assert row["total_profit"] == pytest.approx(-4.5)
        assert row["profit_margin_pct"] is None
