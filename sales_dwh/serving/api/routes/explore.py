"""
Schema Exploration Endpoints
"""

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException
from sqlalchemy.exc import NoSuchTableError

from sales_dwh.config import get_settings
from sales_dwh.database.connection import get_engine
from sales_dwh.database.exploration import describe_table, list_tables

router = APIRouter()


@router.get("/tables")
async def get_tables() -> List[Dict[str, str]]:
    """List tables and views of the warehouse schema."""
    schema = get_settings().database.schema_name
    async with get_engine().connect() as conn:
        return await list_tables(conn, schema=schema)


@router.get("/tables/{table_name}/columns")
async def get_table_columns(table_name: str) -> List[Dict[str, Any]]:
    """Describe a table's columns."""
    schema = get_settings().database.schema_name
    async with get_engine().connect() as conn:
        try:
            return await describe_table(conn, table_name, schema=schema)
        except NoSuchTableError:
            raise HTTPException(status_code=404, detail=f"Table '{table_name}' not found")
