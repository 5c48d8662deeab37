"""
Warehouse Table Loader

Reads the Gold tables through SQLAlchemy into a WarehouseTables bundle.
Tables are read in full on every call; reports are never served from a
previous load.
"""

import time
from typing import Dict, Type

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sales_dwh.analytics.tables import TABLE_SCHEMAS, WarehouseTables
from .models import Base, DimCustomer, DimProduct, FactSales

logger = structlog.get_logger(__name__)

TABLE_MODELS: Dict[str, Type[Base]] = {
    "fact_sales": FactSales,
    "dim_customers": DimCustomer,
    "dim_products": DimProduct,
}


async def load_table(session: AsyncSession, table: str) -> list:
    """Fetch every row of ``table`` as a list of dicts with schema column names."""
    model = TABLE_MODELS[table]
    columns = [getattr(model, name) for name in TABLE_SCHEMAS[table]]
    result = await session.execute(select(*columns))
    return [dict(row) for row in result.mappings().all()]


async def load_tables(session: AsyncSession) -> WarehouseTables:
    """
    Load fact and dimension tables.

    Args:
        session: Open database session

    Returns:
        WarehouseTables: Conformed polars frames
    """
    start = time.perf_counter()
    rows = {}
    for table in TABLE_MODELS:
        rows[table] = await load_table(session, table)

    tables = WarehouseTables.from_rows(rows)
    logger.debug(
        "Warehouse tables loaded",
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
        **tables.row_counts,
    )
    return tables
