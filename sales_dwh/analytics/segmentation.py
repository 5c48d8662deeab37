"""
Customer Spend Segmentation

Three fixed bands with inclusive lower bounds, driven by AnalyticsSettings:

    spend >= vip_threshold                       -> VIP
    regular_threshold <= spend < vip_threshold   -> Regular
    otherwise (including no spend at all)        -> New
"""

from enum import Enum
from typing import Optional

import polars as pl

from sales_dwh.config import AnalyticsSettings


class CustomerSegment(str, Enum):
    """Customer segment enumeration"""
    VIP = "VIP"
    REGULAR = "Regular"
    NEW = "New"


# Display order used when sorting ties between segments
SEGMENT_ORDER = [CustomerSegment.VIP.value, CustomerSegment.REGULAR.value, CustomerSegment.NEW.value]


def classify_spend(amount: Optional[float], settings: AnalyticsSettings) -> CustomerSegment:
    """Classify a single lifetime spend value."""
    if amount is not None and amount >= settings.vip_threshold:
        return CustomerSegment.VIP
    if amount is not None and amount >= settings.regular_threshold:
        return CustomerSegment.REGULAR
    return CustomerSegment.NEW


def segment_expr(spend: pl.Expr, settings: AnalyticsSettings) -> pl.Expr:
    """
    Polars expression equivalent of :func:`classify_spend`.

    A null spend fails both comparisons and falls through to New.
    """
    return (
        pl.when(spend >= settings.vip_threshold)
        .then(pl.lit(CustomerSegment.VIP.value))
        .when(spend >= settings.regular_threshold)
        .then(pl.lit(CustomerSegment.REGULAR.value))
        .otherwise(pl.lit(CustomerSegment.NEW.value))
    )
