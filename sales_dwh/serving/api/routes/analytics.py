"""
Analytics API Endpoints

Read-only access to every registered report. Tables are loaded on each
request, so responses always reflect the current warehouse contents.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sales_dwh.analytics import (
    UnknownReportError,
    WarehouseTables,
    get_report,
    list_reports,
    run_report,
)
from sales_dwh.database.connection import get_db_dependency
from sales_dwh.database.loader import load_tables

router = APIRouter()
logger = structlog.get_logger(__name__)


class ReportInfo(BaseModel):
    """Registered report"""
    name: str
    description: str


class ReportResponse(BaseModel):
    """Report result set"""
    report: str
    as_of: Optional[date]
    row_count: int
    rows: List[Dict[str, Any]]


async def get_warehouse_tables(
    db: AsyncSession = Depends(get_db_dependency),
) -> WarehouseTables:
    """FastAPI dependency loading the Gold tables for one request."""
    return await load_tables(db)


@router.get("/reports", response_model=List[ReportInfo])
async def get_reports() -> List[ReportInfo]:
    """List available reports."""
    return [ReportInfo(**info) for info in list_reports()]


@router.get("/reports/{name}", response_model=ReportResponse)
async def get_report_rows(
    name: str,
    n: Optional[int] = Query(None, ge=1, le=1000, description="Row limit for top/bottom reports"),
    as_of: Optional[date] = Query(None, description="Evaluation date for time-dependent columns"),
    tables: WarehouseTables = Depends(get_warehouse_tables),
) -> ReportResponse:
    """
    Compute a report.

    ``as_of`` defaults to today for reports with time-dependent columns.
    """
    try:
        definition = get_report(name)
    except UnknownReportError:
        raise HTTPException(status_code=404, detail=f"Report '{name}' not found")

    if "as_of" in definition.parameters and as_of is None:
        as_of = date.today()

    logger.info("get_report_rows called", report=name, n=n, as_of=str(as_of))

    try:
        result = run_report(name, tables, n=n, as_of=as_of)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ReportResponse(
        report=name,
        as_of=as_of if "as_of" in definition.parameters else None,
        row_count=result.height,
        rows=result.to_dicts(),
    )
