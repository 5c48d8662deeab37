"""
Analytics Module

Aggregation queries and report views over the Gold tables.
"""
from .queries import (
    business_summary,
    monthly_trend,
    yearly_comparison,
    cumulative_revenue,
    product_performance,
    top_products,
    bottom_products,
    category_revenue,
    category_share,
    top_customers,
    revenue_by_country,
    customer_segments,
    segment_distribution,
    product_rank_in_category,
)
from .registry import REPORTS, UnknownReportError, get_report, list_reports, run_report
from .reports import customer_report, product_report
from .segmentation import CustomerSegment, classify_spend
from .tables import SchemaMismatchError, WarehouseTables

__all__ = [
    "business_summary",
    "monthly_trend",
    "yearly_comparison",
    "cumulative_revenue",
    "product_performance",
    "top_products",
    "bottom_products",
    "category_revenue",
    "category_share",
    "top_customers",
    "revenue_by_country",
    "customer_segments",
    "segment_distribution",
    "product_rank_in_category",
    "customer_report",
    "product_report",
    "REPORTS",
    "UnknownReportError",
    "get_report",
    "list_reports",
    "run_report",
    "CustomerSegment",
    "classify_spend",
    "SchemaMismatchError",
    "WarehouseTables",
]
