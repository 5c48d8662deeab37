"""
Report Registry

Maps stable report names to their functions so callers can list and run
reports by name. Each entry declares which optional parameters it accepts;
other parameters passed to :func:`run_report` are ignored.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List

import polars as pl
import structlog

from . import queries, reports
from .tables import WarehouseTables

logger = structlog.get_logger(__name__)


class UnknownReportError(KeyError):
    """Raised when a report name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown report: {name}")


@dataclass(frozen=True)
class ReportDefinition:
    """A named, parameterised report"""
    name: str
    func: Callable[..., pl.DataFrame]
    description: str
    parameters: FrozenSet[str] = field(default_factory=frozenset)
    required: FrozenSet[str] = field(default_factory=frozenset)

    def run(self, tables: WarehouseTables, **params: Any) -> pl.DataFrame:
        accepted = {k: v for k, v in params.items() if k in self.parameters and v is not None}
        missing = self.required - set(accepted)
        if missing:
            raise ValueError(f"Report '{self.name}' requires parameters: {sorted(missing)}")
        return self.func(tables, **accepted)


_SETTINGS = frozenset({"settings"})
_LIMITED = frozenset({"n", "settings"})
_TIMED = frozenset({"as_of", "settings"})

REPORTS: Dict[str, ReportDefinition] = {
    definition.name: definition
    for definition in [
        ReportDefinition("business_summary", queries.business_summary,
                         "Overall customer, product, order and revenue totals", _SETTINGS),
        ReportDefinition("monthly_trend", queries.monthly_trend,
                         "Revenue, customers and units per month"),
        ReportDefinition("yearly_comparison", queries.yearly_comparison,
                         "Year-over-year revenue change", _SETTINGS),
        ReportDefinition("cumulative_revenue", queries.cumulative_revenue,
                         "Daily revenue with running total and moving average", _SETTINGS),
        ReportDefinition("top_products", queries.top_products,
                         "Highest-revenue products", _LIMITED),
        ReportDefinition("bottom_products", queries.bottom_products,
                         "Lowest-revenue products", _LIMITED),
        ReportDefinition("category_revenue", queries.category_revenue,
                         "Revenue, units and buyers per category", _SETTINGS),
        ReportDefinition("category_share", queries.category_share,
                         "Each category's share of total revenue", _SETTINGS),
        ReportDefinition("top_customers", queries.top_customers,
                         "Highest-spending customers", _LIMITED),
        ReportDefinition("revenue_by_country", queries.revenue_by_country,
                         "Customers and revenue per country", _SETTINGS),
        ReportDefinition("customer_segments", queries.customer_segments,
                         "Customers with lifetime spend segment", _SETTINGS),
        ReportDefinition("segment_distribution", queries.segment_distribution,
                         "Customer count and share per segment", _SETTINGS),
        ReportDefinition("product_rank_in_category", queries.product_rank_in_category,
                         "Products ranked by revenue within category"),
        ReportDefinition("customer_report", reports.customer_report,
                         "Per-customer report view", _TIMED, frozenset({"as_of"})),
        ReportDefinition("product_report", reports.product_report,
                         "Per-product report view", _SETTINGS),
    ]
}


def list_reports() -> List[Dict[str, str]]:
    return [
        {"name": definition.name, "description": definition.description}
        for definition in REPORTS.values()
    ]


def get_report(name: str) -> ReportDefinition:
    try:
        return REPORTS[name]
    except KeyError:
        raise UnknownReportError(name) from None


def run_report(name: str, tables: WarehouseTables, **params: Any) -> pl.DataFrame:
    """
    Run a registered report.

    Args:
        name: Registered report name
        tables: Warehouse tables to aggregate
        **params: Optional ``n``, ``as_of`` and ``settings``

    Raises:
        UnknownReportError: If ``name`` is not registered
    """
    definition = get_report(name)

    start = time.perf_counter()
    try:
        result = definition.run(tables, **params)
    except Exception as e:
        logger.error("Report failed", report=name, error=str(e), error_type=type(e).__name__)
        raise

    logger.info(
        "Report computed",
        report=name,
        rows=result.height,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return result
