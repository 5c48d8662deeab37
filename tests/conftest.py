"""
Test Suite Configuration
"""
from datetime import date

import pytest
import polars as pl

from sales_dwh.analytics import WarehouseTables
from sales_dwh.config import AnalyticsSettings, Settings


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        APP_ENV="testing",
        DEBUG=True,
    )


@pytest.fixture
def analytics_settings() -> AnalyticsSettings:
    """Default reporting policy"""
    return AnalyticsSettings()


@pytest.fixture
def sample_customers_df() -> pl.DataFrame:
    """Customer dimension; customer 4 never ordered"""
    return pl.DataFrame({
        "customer_key": [1, 2, 3, 4, 5],
        "customer_id": ["C-001", "C-002", "C-003", "C-004", "C-005"],
        "first_name": ["Ana", "Ben", "Cara", "Dan", "Eve"],
        "last_name": ["Silva", "Ng", "Doe", "Fox", "Moss"],
        "country": ["Brazil", "Canada", "Brazil", "Germany", "United States"],
        "gender": ["Female", "Male", "Female", "Male", "Female"],
        "birthdate": [
            date(1990, 6, 15),
            date(1985, 1, 1),
            date(2000, 12, 31),
            None,
            date(1970, 3, 3),
        ],
    })


@pytest.fixture
def sample_products_df() -> pl.DataFrame:
    """Product dimension; Jersey never sold"""
    return pl.DataFrame({
        "product_key": [10, 11, 12, 13, 14, 15],
        "product_name": ["Road Bike", "Mountain Bike", "Helmet", "Bottle", "Jersey", "Gloves"],
        "category": ["Bikes", "Bikes", "Accessories", "Accessories", "Clothing", "Accessories"],
        "subcategory": ["Road Bikes", "Mountain Bikes", "Helmets", "Bottles", "Jerseys", "Gloves"],
        "cost": [500.0, 400.0, 20.0, 2.0, 30.0, 5.0],
    })


@pytest.fixture
def sample_sales_df() -> pl.DataFrame:
    """
    Sales order lines.

    SO7 and SO9 reference an unknown product (999); SO8 has no order date.
    """
    return pl.DataFrame({
        "order_number": ["SO1", "SO1", "SO2", "SO3", "SO4", "SO5", "SO6", "SO7", "SO8", "SO9"],
        "product_key": [10, 12, 11, 10, 12, 13, 11, 999, 15, 999],
        "customer_key": [1, 1, 2, 3, 2, 3, 1, 2, 3, 5],
        "order_date": [
            date(2022, 12, 30),
            date(2022, 12, 30),
            date(2023, 1, 2),
            date(2023, 1, 5),
            date(2023, 2, 10),
            date(2023, 2, 10),
            date(2024, 3, 1),
            date(2024, 3, 2),
            None,
            date(2023, 3, 15),
        ],
        "sales_amount": [3000.0, 100.0, 3000.0, 2000.0, 100.0, 200.0, 2000.0, 40.0, 100.0, 500.0],
        "quantity": [1, 2, 1, 1, 2, 20, 1, 1, 4, 1],
        "price": [3000.0, 50.0, 3000.0, 2000.0, 50.0, 10.0, 2000.0, 40.0, 25.0, 500.0],
    })


@pytest.fixture
def sample_tables(sample_sales_df, sample_customers_df, sample_products_df) -> WarehouseTables:
    """Complete warehouse: 10 lines, revenue 11040, 34 units"""
    return WarehouseTables.from_frames(
        fact_sales=sample_sales_df,
        dim_customers=sample_customers_df,
        dim_products=sample_products_df,
    )


@pytest.fixture
def small_tables() -> WarehouseTables:
    """Three lines across two customers and two products"""
    return WarehouseTables.from_frames(
        fact_sales=pl.DataFrame({
            "order_number": ["SO1", "SO2", "SO3"],
            "product_key": [1, 2, 1],
            "customer_key": [1, 1, 2],
            "order_date": [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)],
            "sales_amount": [100.0, 50.0, 200.0],
            "quantity": [1, 1, 2],
        }),
        dim_products=pl.DataFrame({
            "product_key": [1, 2],
            "product_name": ["A", "B"],
            "category": ["Widgets", "Widgets"],
            "subcategory": ["Small", "Large"],
            "cost": [10.0, 5.0],
        }),
    )


@pytest.fixture
def empty_tables() -> WarehouseTables:
    return WarehouseTables.empty()


@pytest.fixture
def evaluation_date() -> date:
    """Pinned clock for time-dependent report columns"""
    return date(2024, 6, 30)
