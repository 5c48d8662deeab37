"""
Aggregation Query Library

Pure aggregation functions over the Gold tables. Every function takes a
:class:`WarehouseTables` bundle and returns a new polars DataFrame; nothing
is cached and the inputs are never modified.

Null handling follows SQL aggregate semantics:
- SUM/AVG/MIN/MAX over zero non-null values is null
- COUNT and COUNT(DISTINCT) ignore nulls and yield 0 on empty input
- Ratios are null when the divisor is zero or null

Ordered results sort by their primary metric first and then by the
grouping attributes ascending (nulls last), so ties come back in a stable,
documented order.
"""

from typing import List, Optional, Sequence

import polars as pl

from sales_dwh.config import AnalyticsSettings, get_settings
from .segmentation import SEGMENT_ORDER, segment_expr
from .tables import WarehouseTables


# =============================================================================
# EXPRESSION HELPERS
# =============================================================================

def resolve_settings(settings: Optional[AnalyticsSettings] = None) -> AnalyticsSettings:
    """Fall back to the application-wide analytics policy."""
    return settings or get_settings().analytics


def sql_sum(column: str) -> pl.Expr:
    """SUM that yields null, not 0, when there is nothing to add."""
    col = pl.col(column)
    return pl.when(col.count() > 0).then(col.sum()).otherwise(None)


def sql_avg(column: str, digits: int) -> pl.Expr:
    return pl.col(column).mean().round(digits)


def count_distinct(column: str) -> pl.Expr:
    """COUNT(DISTINCT column), nulls excluded."""
    return pl.col(column).drop_nulls().n_unique().cast(pl.Int64)


def safe_pct(numerator: pl.Expr, denominator: pl.Expr, digits: int) -> pl.Expr:
    """100 * numerator / denominator, null when the denominator is 0 or null."""
    return (
        pl.when(denominator != 0)
        .then((100.0 * numerator / denominator).round(digits))
        .otherwise(None)
    )


def months_between(start: pl.Expr, end: pl.Expr) -> pl.Expr:
    """Number of calendar-month boundaries crossed between two dates."""
    return (
        (end.dt.year().cast(pl.Int64) - start.dt.year().cast(pl.Int64)) * 12
        + (end.dt.month().cast(pl.Int64) - start.dt.month().cast(pl.Int64))
    )


def competition_rank(column: str) -> pl.Expr:
    """
    Standard (1, 1, 3) rank by descending value.

    Null values rank after every non-null value, tied with each other.
    """
    return (
        pl.col(column)
        .fill_null(float("-inf"))
        .rank(method="min", descending=True)
        .cast(pl.Int64)
    )


def customer_name_expr() -> pl.Expr:
    """'first last', with missing name parts treated as empty strings."""
    return pl.concat_str(
        [
            pl.col("first_name").fill_null(""),
            pl.lit(" "),
            pl.col("last_name").fill_null(""),
        ]
    )


def _ordered(df: pl.DataFrame, metric: str, keys: Sequence[str], descending: bool = True) -> pl.DataFrame:
    return df.sort(
        [metric, *keys],
        descending=[descending] + [False] * len(keys),
        nulls_last=True,
    )


def _check_limit(n: int) -> int:
    if n < 1:
        raise ValueError(f"Row limit must be at least 1, got {n}")
    return n


def _dated_sales(tables: WarehouseTables) -> pl.DataFrame:
    return tables.fact_sales.filter(pl.col("order_date").is_not_null())


def _sales_with_products(tables: WarehouseTables) -> pl.DataFrame:
    return tables.fact_sales.join(tables.dim_products, on="product_key", how="left")


def _sales_with_customers(tables: WarehouseTables) -> pl.DataFrame:
    """
    Left join facts to customers.

    The dimension's key is carried as ``dim_customer_key`` so callers can
    count resolved customers separately from raw fact keys.
    """
    customers = tables.dim_customers.with_columns(
        pl.col("customer_key").alias("dim_customer_key")
    )
    return tables.fact_sales.join(customers, on="customer_key", how="left")


# =============================================================================
# KEY METRICS
# =============================================================================

def business_summary(
    tables: WarehouseTables,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """
    Overall business summary.

    Always returns exactly one row; sums, averages and dates are null when
    the fact table is empty.
    """
    settings = resolve_settings(settings)
    order_date = pl.col("order_date")

    return tables.fact_sales.select(
        count_distinct("customer_key").alias("total_customers"),
        count_distinct("product_key").alias("total_products"),
        pl.col("order_number").count().cast(pl.Int64).alias("total_orders"),
        sql_sum("sales_amount").alias("total_revenue"),
        sql_sum("quantity").alias("total_quantity_sold"),
        sql_avg("sales_amount", settings.round_digits).alias("avg_order_value"),
        order_date.min().alias("first_order_date"),
        order_date.max().alias("last_order_date"),
        months_between(order_date.min(), order_date.max()).alias("months_of_data"),
    )


# =============================================================================
# CHANGES OVER TIME
# =============================================================================

def monthly_trend(tables: WarehouseTables) -> pl.DataFrame:
    """Revenue, distinct customers and units per (year, month)."""
    order_date = pl.col("order_date")

    return (
        _dated_sales(tables)
        .group_by(
            order_date.dt.year().cast(pl.Int64).alias("order_year"),
            order_date.dt.month().cast(pl.Int64).alias("order_month"),
            order_date.dt.strftime("%B").alias("month_name"),
        )
        .agg(
            sql_sum("sales_amount").alias("monthly_revenue"),
            count_distinct("customer_key").alias("unique_customers"),
            sql_sum("quantity").alias("total_units_sold"),
        )
        .sort(["order_year", "order_month"])
    )


def yearly_comparison(
    tables: WarehouseTables,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """
    Year-over-year revenue comparison.

    ``prev_year_revenue`` is the previous row in year order, not
    necessarily the previous calendar year when a year has no sales.
    """
    settings = resolve_settings(settings)
    current = pl.col("yearly_revenue")
    previous = pl.col("prev_year_revenue")

    yearly = (
        _dated_sales(tables)
        .group_by(pl.col("order_date").dt.year().cast(pl.Int64).alias("order_year"))
        .agg(sql_sum("sales_amount").alias("yearly_revenue"))
        .sort("order_year")
    )

    return yearly.with_columns(current.shift(1).alias("prev_year_revenue")).with_columns(
        (current - previous).alias("revenue_change"),
        safe_pct(current - previous, previous, settings.round_digits).alias("yoy_growth_pct"),
    )


# =============================================================================
# CUMULATIVE ANALYTICS
# =============================================================================

def cumulative_revenue(
    tables: WarehouseTables,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """
    Daily revenue with running total and trailing moving average.

    The moving average covers the current day and the preceding
    ``moving_average_window - 1`` days present in the series, averaging
    over fewer rows at the start. A day with null revenue carries the
    previous running total forward; the total stays null until the first
    day with revenue.
    """
    settings = resolve_settings(settings)
    window = settings.moving_average_window
    daily_revenue = pl.col("daily_revenue")

    return (
        _dated_sales(tables)
        .group_by("order_date")
        .agg(sql_sum("sales_amount").alias("daily_revenue"))
        .sort("order_date")
        .with_columns(
            pl.when(daily_revenue.is_not_null().cum_sum() > 0)
            .then(daily_revenue.fill_null(0).cum_sum())
            .alias("running_total_revenue"),
            daily_revenue.rolling_mean(window_size=window, min_samples=1).alias(f"moving_avg_{window}day"),
        )
    )


# =============================================================================
# PRODUCT PERFORMANCE
# =============================================================================

PRODUCT_KEYS = ["product_name", "category", "subcategory"]


def product_performance(
    tables: WarehouseTables,
    keys: Optional[List[str]] = None,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """
    Revenue, units, distinct orders and average line value per product
    attribute group, ordered by revenue descending.

    Facts whose product key does not resolve form a single null group.
    """
    settings = resolve_settings(settings)
    keys = keys or PRODUCT_KEYS

    grouped = _sales_with_products(tables).group_by(keys).agg(
        sql_sum("sales_amount").alias("total_revenue"),
        sql_sum("quantity").alias("total_units_sold"),
        count_distinct("order_number").alias("total_orders"),
        sql_avg("sales_amount", settings.round_digits).alias("avg_order_value"),
    )
    return _ordered(grouped, "total_revenue", keys)


def top_products(
    tables: WarehouseTables,
    n: Optional[int] = None,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """Top N products by revenue."""
    settings = resolve_settings(settings)
    n = _check_limit(settings.top_n if n is None else n)
    return product_performance(tables, settings=settings).head(n)


def bottom_products(
    tables: WarehouseTables,
    n: Optional[int] = None,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """Bottom N products by revenue (review candidates)."""
    settings = resolve_settings(settings)
    n = _check_limit(settings.top_n if n is None else n)
    keys = ["product_name", "category"]
    grouped = product_performance(tables, keys=keys, settings=settings)
    return _ordered(grouped, "total_revenue", keys, descending=False).head(n)


def category_revenue(
    tables: WarehouseTables,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    settings = resolve_settings(settings)
    grouped = _sales_with_products(tables).group_by("category").agg(
        sql_sum("sales_amount").alias("category_revenue"),
        sql_sum("quantity").alias("units_sold"),
        count_distinct("customer_key").alias("unique_buyers"),
        sql_avg("sales_amount", settings.round_digits).alias("avg_order_value"),
    )
    return _ordered(grouped, "category_revenue", ["category"])


# =============================================================================
# PART-TO-WHOLE
# =============================================================================

def category_share(
    tables: WarehouseTables,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """
    Each category's percentage of total revenue.

    The total is the sum of the per-category sums, so the percentages add
    up to 100 within rounding.
    """
    settings = resolve_settings(settings)
    revenue = pl.col("revenue")

    grouped = _sales_with_products(tables).group_by("category").agg(
        sql_sum("sales_amount").alias("revenue")
    )
    shares = grouped.with_columns(revenue.sum().alias("total_revenue")).with_columns(
        safe_pct(revenue, pl.col("total_revenue"), settings.round_digits).alias("pct_of_total")
    )
    return _ordered(shares, "revenue", ["category"])


# =============================================================================
# CUSTOMER ANALYSIS
# =============================================================================

def _customer_spend(tables: WarehouseTables) -> pl.DataFrame:
    """Lifetime totals per resolved customer; unresolved facts form a null group."""
    spend = (
        _sales_with_customers(tables)
        .group_by("dim_customer_key", "first_name", "last_name", "country")
        .agg(
            sql_sum("sales_amount").alias("total_spent"),
            count_distinct("order_number").alias("total_orders"),
            sql_sum("quantity").alias("total_items_bought"),
            pl.col("order_date").min().alias("first_purchase"),
            pl.col("order_date").max().alias("last_purchase"),
        )
    )
    return spend.with_columns(
        pl.col("dim_customer_key").alias("customer_key"),
        customer_name_expr().alias("customer_name"),
        (pl.col("last_purchase") - pl.col("first_purchase")).dt.total_days().alias("lifespan_days"),
    )


def top_customers(
    tables: WarehouseTables,
    n: Optional[int] = None,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """Top N customers by lifetime spend."""
    settings = resolve_settings(settings)
    n = _check_limit(settings.top_n if n is None else n)

    spend = _customer_spend(tables).select(
        "customer_key",
        "customer_name",
        "country",
        "total_spent",
        "total_orders",
        "total_items_bought",
        "first_purchase",
        "last_purchase",
        pl.col("lifespan_days").alias("customer_lifespan_days"),
    )
    return _ordered(spend, "total_spent", ["customer_key"]).head(n)


def revenue_by_country(
    tables: WarehouseTables,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """Revenue per customer country; only resolved customers are counted."""
    settings = resolve_settings(settings)
    grouped = _sales_with_customers(tables).group_by("country").agg(
        count_distinct("dim_customer_key").alias("total_customers"),
        sql_sum("sales_amount").alias("total_revenue"),
        sql_avg("sales_amount", settings.round_digits).alias("avg_order_value"),
    )
    return _ordered(grouped, "total_revenue", ["country"])


# =============================================================================
# CUSTOMER SEGMENTATION
# =============================================================================

def customer_segments(
    tables: WarehouseTables,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """Every customer with lifetime spend and its VIP/Regular/New segment."""
    settings = resolve_settings(settings)

    segmented = _customer_spend(tables).select(
        "customer_key",
        "customer_name",
        "country",
        "total_spent",
        "total_orders",
        segment_expr(pl.col("total_spent"), settings).alias("customer_segment"),
        "lifespan_days",
    )
    return _ordered(segmented, "total_spent", ["customer_key"])


def segment_distribution(
    tables: WarehouseTables,
    settings: Optional[AnalyticsSettings] = None,
) -> pl.DataFrame:
    """
    Customer count and percentage share per segment.

    Customers are grouped on the fact table's key, so a null key counts as
    one customer. Only segments with at least one customer appear.
    """
    settings = resolve_settings(settings)
    count = pl.col("customer_count")

    counts = (
        tables.fact_sales.group_by("customer_key")
        .agg(sql_sum("sales_amount").alias("total_spent"))
        .select(segment_expr(pl.col("total_spent"), settings).alias("customer_segment"))
        .group_by("customer_segment")
        .agg(pl.len().cast(pl.Int64).alias("customer_count"))
    )
    return counts.with_columns(
        safe_pct(count, count.sum(), settings.round_digits).alias("pct_of_customers")
    ).sort(
        [count, pl.col("customer_segment").cast(pl.Enum(SEGMENT_ORDER))],
        descending=[True, False],
    )


# =============================================================================
# PRODUCT RANKING
# =============================================================================

def product_rank_in_category(tables: WarehouseTables) -> pl.DataFrame:
    """
    Products ranked by revenue within their category.

    Equal revenue shares a rank and the next rank skips the tied entries
    (300, 300, 200 ranks as 1, 1, 3).
    """
    revenue = (
        _sales_with_products(tables)
        .group_by("category", "product_name")
        .agg(sql_sum("sales_amount").alias("total_revenue"))
    )
    return revenue.with_columns(
        competition_rank("total_revenue").over("category").alias("rank_in_category")
    ).sort(["category", "rank_in_category", "product_name"], nulls_last=[False, False, True])
