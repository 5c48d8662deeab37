"""
Report Views

Dashboard-ready projections with one row per dimension member. They are
recomputed on every call; time-dependent columns are evaluated against an
explicit ``as_of`` date rather than the wall clock.
"""

from datetime import date, datetime
from typing import Optional

import polars as pl

from sales_dwh.config import AnalyticsSettings
from .queries import (
    competition_rank,
    count_distinct,
    customer_name_expr,
    resolve_settings,
    safe_pct,
    sql_sum,
)
from .segmentation import segment_expr
from .tables import WarehouseTables


def _as_date(as_of: date) -> date:
    if isinstance(as_of, datetime):
        return as_of.date()
    return as_of


def customer_report(
    tables: WarehouseTables,
    as_of: date,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """
    One row per customer, including customers who never ordered.

    Customers without orders have ``total_orders == 0``, null revenue,
    quantity and last order date, and fall into the New segment.

    ``age`` counts calendar-year boundaries between birthdate and
    ``as_of``; ``days_since_last_order`` is measured to ``as_of``.
    """
    settings = resolve_settings(settings)
    as_of = _as_date(as_of)

    per_customer = (
        tables.fact_sales.filter(pl.col("customer_key").is_not_null())
        .group_by("customer_key")
        .agg(
            count_distinct("order_number").alias("total_orders"),
            sql_sum("sales_amount").alias("total_revenue"),
            sql_sum("quantity").alias("total_quantity"),
            pl.col("order_date").max().alias("last_order_date"),
        )
    )

    report = tables.dim_customers.join(per_customer, on="customer_key", how="left")

    return report.select(
        "customer_key",
        customer_name_expr().alias("customer_name"),
        "country",
        "gender",
        (pl.lit(as_of.year, dtype=pl.Int64) - pl.col("birthdate").dt.year().cast(pl.Int64)).alias("age"),
        pl.col("total_orders").fill_null(0),
        "total_revenue",
        "total_quantity",
        "last_order_date",
        (pl.lit(as_of) - pl.col("last_order_date")).dt.total_days().alias("days_since_last_order"),
        segment_expr(pl.col("total_revenue"), settings).alias("customer_segment"),
    ).sort("customer_key")


def product_report(
    tables: WarehouseTables,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """
    One row per product with sales, profit, margin and a global revenue rank.

    Profit is revenue minus cost times units sold. The margin is null when
    a product has no revenue. Products without sales share the last rank.
    """
    settings = resolve_settings(settings)
    digits = settings.round_digits

    per_product = (
        tables.fact_sales.filter(pl.col("product_key").is_not_null())
        .group_by("product_key")
        .agg(
            count_distinct("order_number").alias("total_orders"),
            sql_sum("quantity").alias("total_units_sold"),
            sql_sum("sales_amount").alias("total_revenue"),
        )
    )

    revenue = pl.col("total_revenue")
    profit = revenue - pl.col("cost") * pl.col("total_units_sold")

    report = tables.dim_products.join(per_product, on="product_key", how="left")

    return report.select(
        "product_key",
        "product_name",
        "category",
        "subcategory",
        "cost",
        pl.col("total_orders").fill_null(0),
        "total_units_sold",
        "total_revenue",
        profit.round(digits).alias("total_profit"),
        safe_pct(profit, revenue, digits).alias("profit_margin_pct"),
        competition_rank("total_revenue").alias("revenue_rank"),
    ).sort(["revenue_rank", "product_key"])
