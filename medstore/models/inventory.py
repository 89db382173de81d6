# FILE: medstore/models/inventory.py
from __future__ import annotations

import enum

from sqlalchemy import (
    Boolean, CheckConstraint, Column, Date, DateTime, Enum, ForeignKey,
    Index, Integer, Numeric, String,
)
from sqlalchemy.orm import relationship

from medstore.db.base import Base
from medstore.utils.timezone import now_local

Money = Numeric(14, 2, asdecimal=False)
Percent = Numeric(5, 2, asdecimal=False)


def enum_values(e):
    return [m.value for m in e]


# -------------------------
# Enums
# -------------------------
class DrugSchedule(str, enum.Enum):
    NONE = "none"
    H = "H"
    H1 = "H1"
    NARCOTIC = "narcotic"
    TB = "tb"


# -------------------------
# Catalog
# -------------------------
class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        Index("ix_products_category", "category"),
        Index("ix_products_schedule", "schedule"),
    )

    id = Column(Integer, primary_key=True, index=True)
    hsn_code = Column(String(50), nullable=False)
    name = Column(String(255), nullable=False, index=True)
    pack = Column(String(100), nullable=False)
    manufacturer = Column(String(255), nullable=False)
    salts = Column(String(500), nullable=True)
    schedule = Column(
        Enum(DrugSchedule, name="product_schedule", values_callable=enum_values),
        nullable=False,
        default=DrugSchedule.NONE,
    )
    category = Column(String(120), nullable=True)

    # 0 means "use DEFAULT_MIN_STOCK"
    min_stock = Column(Integer, nullable=False, default=0)
    order_later = Column(Boolean, nullable=False, default=False)
    is_ordered = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=now_local, nullable=False)
    updated_at = Column(DateTime, default=now_local, onupdate=now_local, nullable=False)

    batches = relationship(
        "ProductBatch",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductBatch.id",
    )


class ProductBatch(Base):
    """
    Dated, priced sub-lot of stock. Owned by exactly one product.
    """
    __tablename__ = "product_batches"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_product_batches_stock"),
        CheckConstraint("discount >= 0 AND discount <= 100", name="ck_product_batches_discount"),
        CheckConstraint("sale_discount >= 0 AND sale_discount <= 100", name="ck_product_batches_sale_discount"),
        Index("ix_product_batches_product_expiry", "product_id", "expiry_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    batch_number = Column(String(100), nullable=False, index=True)
    expiry_date = Column(Date, nullable=False)

    stock = Column(Integer, nullable=False, default=0)
    mrp = Column(Money, nullable=False, default=0)
    price = Column(Money, nullable=False, default=0)
    discount = Column(Percent, nullable=False, default=0)
    sale_discount = Column(Percent, nullable=False, default=0)

    created_at = Column(DateTime, default=now_local, nullable=False)
    updated_at = Column(DateTime, default=now_local, onupdate=now_local, nullable=False)

    product = relationship("Product", back_populates="batches")


# -------------------------
# Parties
# -------------------------
class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    address = Column(String(1000), nullable=False)
    contact = Column(String(100), nullable=False)
    gstin = Column(String(50), nullable=False)
    dl_number = Column(String(100), nullable=False)
    food_license_number = Column(String(100), nullable=False)
    default_discount = Column(Percent, nullable=False, default=0)

    created_at = Column(DateTime, default=now_local, nullable=False)
    updated_at = Column(DateTime, default=now_local, onupdate=now_local, nullable=False)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    customer_code = Column(String(50), unique=True, nullable=False)  # CUST-<epoch ms>
    name = Column(String(255), nullable=False, index=True)
    phone_number = Column(String(30), unique=True, nullable=False)

    created_at = Column(DateTime, default=now_local, nullable=False)
    updated_at = Column(DateTime, default=now_local, onupdate=now_local, nullable=False)
