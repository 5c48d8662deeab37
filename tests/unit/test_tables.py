"""
Unit Tests - Table Bundle and Segmentation
"""
from datetime import date

import pytest
import polars as pl
from pydantic import ValidationError

from sales_dwh.analytics import CustomerSegment, SchemaMismatchError, WarehouseTables, classify_spend
from sales_dwh.analytics.tables import FACT_SALES_SCHEMA
from sales_dwh.config import AnalyticsSettings, Settings


class TestWarehouseTables:
    """Tests for WarehouseTables construction"""

    def test_missing_required_column(self):
        """Test that a frame without a required column is rejected"""
        df = pl.DataFrame({"order_number": ["SO1"], "sales_amount": [10.0]})

        with pytest.raises(SchemaMismatchError) as exc_info:
            WarehouseTables.from_frames(df)

        assert exc_info.value.table == "fact_sales"
        assert "customer_key" in exc_info.value.missing

    def test_conforms_types_and_columns(self):
        """Test casting, string dates, optional columns and dropped extras"""
        df = pl.DataFrame({
            "order_number": ["SO1"],
            "product_key": [1],
            "customer_key": [2],
            "order_date": ["2024-02-29"],
            "sales_amount": [10],
            "quantity": [1],
            "ingested_at": ["2024-03-01T00:00:00"],
        })

        tables = WarehouseTables.from_frames(df)

        assert tables.fact_sales.columns == list(FACT_SALES_SCHEMA)
        assert tables.fact_sales.schema["order_date"] == pl.Date
        assert tables.fact_sales["order_date"][0] == date(2024, 2, 29)
        assert tables.fact_sales["sales_amount"][0] == 10.0
        assert tables.fact_sales["price"][0] is None
        assert "ingested_at" not in tables.fact_sales.columns

    def test_from_rows(self):
        """Test building from row dicts as returned by the loader"""
        tables = WarehouseTables.from_rows({
            "fact_sales": [{
                "order_number": "SO1",
                "product_key": 1,
                "customer_key": 1,
                "order_date": date(2024, 1, 1),
                "shipping_date": None,
                "due_date": None,
                "sales_amount": 25.0,
                "quantity": 1,
                "price": 25.0,
            }],
        })

        assert tables.row_counts == {"fact_sales": 1, "dim_customers": 0, "dim_products": 0}

    def test_empty(self, empty_tables):
        assert empty_tables.row_counts == {"fact_sales": 0, "dim_customers": 0, "dim_products": 0}


class TestSegmentation:
    """Tests for spend segmentation"""

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (5000.0, CustomerSegment.VIP),
            (12000.0, CustomerSegment.VIP),
            (4999.99, CustomerSegment.REGULAR),
            (1000.0, CustomerSegment.REGULAR),
            (999.99, CustomerSegment.NEW),
            (0.0, CustomerSegment.NEW),
            (None, CustomerSegment.NEW),
        ],
    )
    def test_classify_spend(self, amount, expected, analytics_settings):
        """Test inclusive lower bounds"""
        assert classify_spend(amount, analytics_settings) == expected

    def test_segment_values(self):
        assert [s.value for s in CustomerSegment] == ["VIP", "Regular", "New"]

    def test_thresholds_from_environment(self, monkeypatch):
        """Test that policy is read from ANALYTICS_ variables"""
        monkeypatch.setenv("ANALYTICS_VIP_THRESHOLD", "2500")

        settings = AnalyticsSettings()

        assert settings.vip_threshold == 2500.0
        assert classify_spend(3000.0, settings) == CustomerSegment.VIP

    def test_thresholds_must_be_ordered(self):
        """Test that an inverted band configuration is rejected"""
        with pytest.raises(ValidationError):
            AnalyticsSettings(vip_threshold=100, regular_threshold=500)


class TestSettings:
    """Tests for application settings"""

    def test_environment_flags(self, test_settings):
        assert test_settings.app_env == "testing"
        assert not test_settings.is_development

    def test_environment_is_normalized(self):
        settings = Settings(APP_ENV="Development")

        assert settings.app_env == "development"
        assert settings.is_development

    def test_unknown_environment_rejected(self):
        with pytest.raises(ValidationError):
            Settings(APP_ENV="qa")
