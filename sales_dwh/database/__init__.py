"""
Database Module
"""
from .connection import init_database, close_database, get_db, get_engine
from .exploration import describe_table, list_tables
from .loader import load_tables
from .models import Base, DimCustomer, DimProduct, FactSales

__all__ = [
    "init_database",
    "close_database",
    "get_db",
    "get_engine",
    "describe_table",
    "list_tables",
    "load_tables",
    "Base",
    "DimCustomer",
    "DimProduct",
    "FactSales",
]
