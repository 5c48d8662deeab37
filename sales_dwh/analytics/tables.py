"""
Warehouse Table Bundle

Holds the three Gold tables as polars DataFrames conformed to a fixed
schema, so every report sees the same column names and dtypes no matter
whether the frames came from the database or were built in memory.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Mapping, Optional

import polars as pl
import structlog

logger = structlog.get_logger(__name__)


FACT_SALES_SCHEMA: Dict[str, pl.DataType] = {
    "order_number": pl.Utf8,
    "product_key": pl.Int64,
    "customer_key": pl.Int64,
    "order_date": pl.Date,
    "shipping_date": pl.Date,
    "due_date": pl.Date,
    "sales_amount": pl.Float64,
    "quantity": pl.Int64,
    "price": pl.Float64,
}

DIM_CUSTOMERS_SCHEMA: Dict[str, pl.DataType] = {
    "customer_key": pl.Int64,
    "customer_id": pl.Utf8,
    "customer_number": pl.Utf8,
    "first_name": pl.Utf8,
    "last_name": pl.Utf8,
    "country": pl.Utf8,
    "marital_status": pl.Utf8,
    "gender": pl.Utf8,
    "birthdate": pl.Date,
    "create_date": pl.Date,
}

DIM_PRODUCTS_SCHEMA: Dict[str, pl.DataType] = {
    "product_key": pl.Int64,
    "product_id": pl.Int64,
    "product_number": pl.Utf8,
    "product_name": pl.Utf8,
    "category_id": pl.Utf8,
    "category": pl.Utf8,
    "subcategory": pl.Utf8,
    "maintenance": pl.Utf8,
    "product_line": pl.Utf8,
    "cost": pl.Float64,
    "start_date": pl.Date,
}

# Columns the reports read; the rest are filled with nulls when absent
REQUIRED_COLUMNS: Dict[str, FrozenSet[str]] = {
    "fact_sales": frozenset(
        {"order_number", "product_key", "customer_key", "order_date", "sales_amount", "quantity"}
    ),
    "dim_customers": frozenset(
        {"customer_key", "first_name", "last_name", "country", "gender", "birthdate"}
    ),
    "dim_products": frozenset(
        {"product_key", "product_name", "category", "subcategory", "cost"}
    ),
}

TABLE_SCHEMAS: Dict[str, Dict[str, pl.DataType]] = {
    "fact_sales": FACT_SALES_SCHEMA,
    "dim_customers": DIM_CUSTOMERS_SCHEMA,
    "dim_products": DIM_PRODUCTS_SCHEMA,
}


class SchemaMismatchError(ValueError):
    """Raised when an input frame lacks columns the reports depend on."""

    def __init__(self, table: str, missing: FrozenSet[str]):
        self.table = table
        self.missing = missing
        super().__init__(f"Table '{table}' is missing required columns: {sorted(missing)}")


def conform_frame(table: str, df: pl.DataFrame) -> pl.DataFrame:
    """
    Cast a frame to the declared schema of ``table``.

    Optional columns missing from ``df`` are added as typed nulls and
    columns outside the schema are dropped.

    Raises:
        SchemaMismatchError: If a required column is missing
    """
    schema = TABLE_SCHEMAS[table]
    missing = REQUIRED_COLUMNS[table] - set(df.columns)
    if missing:
        logger.error("Input frame failed schema check", table=table, missing=sorted(missing))
        raise SchemaMismatchError(table, frozenset(missing))

    absent = [name for name in schema if name not in df.columns]
    if absent:
        df = df.with_columns([pl.lit(None, dtype=schema[name]).alias(name) for name in absent])

    casts = []
    for name, dtype in schema.items():
        column = pl.col(name)
        if dtype == pl.Date and df.schema[name] == pl.Utf8:
            casts.append(column.str.to_date().alias(name))
        else:
            casts.append(column.cast(dtype).alias(name))

    return df.select(casts)


@dataclass(frozen=True)
class WarehouseTables:
    """
    Immutable bundle of the Gold tables.

    Construct with :meth:`from_frames` so the frames are conformed.
    """
    fact_sales: pl.DataFrame
    dim_customers: pl.DataFrame
    dim_products: pl.DataFrame

    @classmethod
    def from_frames(
        cls,
        fact_sales: pl.DataFrame,
        dim_customers: Optional[pl.DataFrame] = None,
        dim_products: Optional[pl.DataFrame] = None,
    ) -> "WarehouseTables":
        """Conform the given frames; absent dimensions become empty tables."""
        if dim_customers is None:
            dim_customers = pl.DataFrame(schema=DIM_CUSTOMERS_SCHEMA)
        if dim_products is None:
            dim_products = pl.DataFrame(schema=DIM_PRODUCTS_SCHEMA)

        return cls(
            fact_sales=conform_frame("fact_sales", fact_sales),
            dim_customers=conform_frame("dim_customers", dim_customers),
            dim_products=conform_frame("dim_products", dim_products),
        )

    @classmethod
    def from_rows(cls, rows: Mapping[str, list]) -> "WarehouseTables":
        """Build from lists of row dicts keyed by table name."""
        frames = {
            table: pl.from_dicts(rows[table], schema=schema)
            if rows.get(table)
            else pl.DataFrame(schema=schema)
            for table, schema in TABLE_SCHEMAS.items()
        }
        return cls.from_frames(**frames)

    @classmethod
    def empty(cls) -> "WarehouseTables":
        return cls.from_frames(pl.DataFrame(schema=FACT_SALES_SCHEMA))

    @property
    def row_counts(self) -> Dict[str, int]:
        return {
            "fact_sales": self.fact_sales.height,
            "dim_customers": self.dim_customers.height,
            "dim_products": self.dim_products.height,
        }
