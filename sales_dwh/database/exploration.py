"""
Schema Exploration

Lists the tables and views of the warehouse schema and describes their
columns, using SQLAlchemy's runtime inspector.
"""

from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncConnection

logger = structlog.get_logger(__name__)


async def list_tables(conn: AsyncConnection, schema: Optional[str] = None) -> List[Dict[str, str]]:
    """
    List tables and views in ``schema`` (the default schema when None).

    Returns:
        Rows of ``{"table_name": ..., "table_type": "table" | "view"}``
    """
    def _inspect(sync_conn) -> List[Dict[str, str]]:
        inspector = inspect(sync_conn)
        tables = [
            {"table_name": name, "table_type": "table"}
            for name in inspector.get_table_names(schema=schema)
        ]
        views = [
            {"table_name": name, "table_type": "view"}
            for name in inspector.get_view_names(schema=schema)
        ]
        return sorted(tables + views, key=lambda row: row["table_name"])

    return await conn.run_sync(_inspect)


async def describe_table(
    conn: AsyncConnection,
    table_name: str,
    schema: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Describe the columns of a table.

    Raises:
        sqlalchemy.exc.NoSuchTableError: If the table does not exist
    """
    def _inspect(sync_conn) -> List[Dict[str, Any]]:
        inspector = inspect(sync_conn)
        return [
            {
                "column_name": column["name"],
                "data_type": str(column["type"]),
                "nullable": column.get("nullable", True),
            }
            for column in inspector.get_columns(table_name, schema=schema)
        ]

    columns = await conn.run_sync(_inspect)
    logger.debug("Table described", table=table_name, columns=len(columns))
    return columns
