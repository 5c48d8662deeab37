"""
Database Models - Gold Layer Star Schema

Read-only mappings of the conformed Gold tables produced by the upstream
ETL. The analytics layer never writes through these models; they exist so
queries, loaders and tests share a single definition of the schema.

Fact Tables:
- FactSales: one row per sales order line

Dimension Tables:
- DimCustomer: conformed customer attributes
- DimProduct: conformed product catalog
"""

from datetime import date
from typing import Optional, List

from sqlalchemy import (
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# =============================================================================
# DIMENSION TABLES
# =============================================================================

class DimCustomer(Base):
    """
    Customer Dimension Table

    One row per distinct customer, keyed by a surrogate key assigned by the ETL.
    """
    __tablename__ = "dim_customers"

    customer_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    customer_id: Mapped[Optional[str]] = mapped_column(String(50))
    customer_number: Mapped[Optional[str]] = mapped_column(String(50))

    first_name: Mapped[Optional[str]] = mapped_column(String(100))
    last_name: Mapped[Optional[str]] = mapped_column(String(100))
    country: Mapped[Optional[str]] = mapped_column(String(100))
    marital_status: Mapped[Optional[str]] = mapped_column(String(20))
    gender: Mapped[Optional[str]] = mapped_column(String(20))
    birthdate: Mapped[Optional[date]] = mapped_column(Date)
    create_date: Mapped[Optional[date]] = mapped_column(Date)

    sales: Mapped[List["FactSales"]] = relationship(back_populates="customer")

    __table_args__ = (
        Index("ix_dim_customers_country", "country"),
    )


class DimProduct(Base):
    """
    Product Dimension Table

    One row per distinct product with its category hierarchy and unit cost.
    """
    __tablename__ = "dim_products"

    product_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    product_id: Mapped[Optional[int]] = mapped_column(Integer)
    product_number: Mapped[Optional[str]] = mapped_column(String(50))

    product_name: Mapped[Optional[str]] = mapped_column(String(255))
    category_id: Mapped[Optional[str]] = mapped_column(String(50))
    category: Mapped[Optional[str]] = mapped_column(String(100))
    subcategory: Mapped[Optional[str]] = mapped_column(String(100))
    maintenance: Mapped[Optional[str]] = mapped_column(String(20))
    product_line: Mapped[Optional[str]] = mapped_column(String(50))
    cost: Mapped[Optional[float]] = mapped_column(Numeric(12, 2, asdecimal=False))
    start_date: Mapped[Optional[date]] = mapped_column(Date)

    sales: Mapped[List["FactSales"]] = relationship(back_populates="product")

    __table_args__ = (
        Index("ix_dim_products_category", "category", "subcategory"),
    )


# =============================================================================
# FACT TABLES
# =============================================================================

class FactSales(Base):
    """
    Sales Fact Table

    Grain: one row per order line. ``order_number`` repeats across the lines
    of a multi-item order, so the table carries its own surrogate row id.
    Dimension keys are nullable; unresolved keys are kept, not dropped.
    """
    __tablename__ = "fact_sales"

    sales_line_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_number: Mapped[Optional[str]] = mapped_column(String(50))
    product_key: Mapped[Optional[int]] = mapped_column(ForeignKey("dim_products.product_key"))
    customer_key: Mapped[Optional[int]] = mapped_column(ForeignKey("dim_customers.customer_key"))

    order_date: Mapped[Optional[date]] = mapped_column(Date)
    shipping_date: Mapped[Optional[date]] = mapped_column(Date)
    due_date: Mapped[Optional[date]] = mapped_column(Date)

    sales_amount: Mapped[Optional[float]] = mapped_column(Numeric(12, 2, asdecimal=False))
    quantity: Mapped[Optional[int]] = mapped_column(Integer)
    price: Mapped[Optional[float]] = mapped_column(Numeric(12, 2, asdecimal=False))

    customer: Mapped[Optional["DimCustomer"]] = relationship(back_populates="sales")
    product: Mapped[Optional["DimProduct"]] = relationship(back_populates="sales")

    __table_args__ = (
        Index("ix_fact_sales_order_date", "order_date"),
        Index("ix_fact_sales_customer", "customer_key"),
        Index("ix_fact_sales_product", "product_key"),
    )
