# FILE: medstore/models/ledger.py
from __future__ import annotations

import enum

from sqlalchemy import (
    Boolean, Column, DateTime, Enum, ForeignKey, Index, Integer, JSON,
    String, Text,
)
from sqlalchemy.orm import relationship

from medstore.db.base import Base
from medstore.models.inventory import Money, Percent, enum_values
from medstore.utils.timezone import now_local


# -------------------------
# Enums
# -------------------------
class TransactionType(str, enum.Enum):
    SALE = "sale"
    PURCHASE = "purchase"


class PaymentStatus(str, enum.Enum):
    PAID = "paid"
    CREDIT = "credit"


class POStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    RECEIVED = "received"
    CANCELLED = "cancelled"


# -------------------------
# Ledger transactions (sale / purchase)
# -------------------------
class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_type_created", "type", "created_at"),
        Index("ix_transactions_status_created", "status", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # NULL only on legacy rows; backfilled to "sale" when listed
    type = Column(
        Enum(TransactionType, name="transaction_type", values_callable=enum_values),
        nullable=True,
        default=TransactionType.SALE,
    )

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True, index=True)
    customer_name = Column(String(255), nullable=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True, index=True)
    supplier_name = Column(String(255), nullable=True)

    doctor_name = Column(String(255), nullable=True)
    doctor_reg_no = Column(String(100), nullable=True)
    is_rghs = Column(Boolean, nullable=False, default=False)

    total = Column(Money, nullable=False, default=0)
    discount_percentage = Column(Percent, nullable=False, default=0)
    status = Column(
        Enum(PaymentStatus, name="transaction_status", values_callable=enum_values),
        nullable=False,
    )
    payment_method = Column(String(20), nullable=True)  # Cash / Card / UPI / Bank
    attached_prescriptions = Column(JSON, nullable=True)
    invoice_number = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=now_local, nullable=False, index=True)
    updated_at = Column(DateTime, default=now_local, onupdate=now_local, nullable=False)

    customer = relationship("Customer")
    supplier = relationship("Supplier")
    items = relationship(
        "TransactionItem",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionItem.id",
    )


class TransactionItem(Base):
    __tablename__ = "transaction_items"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False, index=True)

    # loose references: not guaranteed to resolve, so no FK
    product_id = Column(Integer, nullable=False, index=True)
    product_name = Column(String(255), nullable=False)
    batch_id = Column(Integer, nullable=True)

    quantity = Column(Integer, nullable=False)
    price = Column(Money, nullable=False, default=0)
    tax = Column(Money, nullable=False, default=0)

    transaction = relationship("Transaction", back_populates="items")


# -------------------------
# Supplier goods receipt
# -------------------------
class Purchase(Base):
    __tablename__ = "purchases"
    __table_args__ = (
        Index("ix_purchases_supplier_created", "supplier_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False, index=True)
    invoice_number = Column(String(100), nullable=True, index=True)

    total = Column(Money, nullable=False, default=0)
    status = Column(
        Enum(PaymentStatus, name="purchase_status", values_callable=enum_values),
        nullable=False,
    )
    payment_method = Column(String(20), nullable=True)  # cash / bank / upi
    notes = Column(Text, nullable=True)
    source_file_id = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=now_local, nullable=False, index=True)
    updated_at = Column(DateTime, default=now_local, onupdate=now_local, nullable=False)

    supplier = relationship("Supplier")
    items = relationship(
        "PurchaseItem",
        back_populates="purchase",
        cascade="all, delete-orphan",
        order_by="PurchaseItem.id",
    )


class PurchaseItem(Base):
    __tablename__ = "purchase_items"

    id = Column(Integer, primary_key=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id", ondelete="CASCADE"), nullable=False, index=True)

    product_id = Column(Integer, nullable=False, index=True)
    product_name = Column(String(255), nullable=False)
    batch_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)
    price = Column(Money, nullable=False, default=0)
    amount = Column(Money, nullable=False, default=0)

    purchase = relationship("Purchase", back_populates="items")


# -------------------------
# Purchase Orders
# -------------------------
class PurchaseOrder(Base):
    __tablename__ = "purchase_orders"
    __table_args__ = (
        Index("ix_purchase_orders_status_created", "status", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False, index=True)
    total_value = Column(Money, nullable=False, default=0)
    status = Column(
        Enum(POStatus, name="purchase_order_status", values_callable=enum_values),
        nullable=False,
        default=POStatus.PENDING,
    )

    created_at = Column(DateTime, default=now_local, nullable=False)
    updated_at = Column(DateTime, default=now_local, onupdate=now_local, nullable=False)

    supplier = relationship("Supplier")
    items = relationship(
        "PurchaseOrderItem",
        back_populates="purchase_order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderItem.id",
    )


class PurchaseOrderItem(Base):
    __tablename__ = "purchase_order_items"

    id = Column(Integer, primary_key=True)
    purchase_order_id = Column(Integer, ForeignKey("purchase_orders.id", ondelete="CASCADE"), nullable=False, index=True)

    product_id = Column(Integer, nullable=False)
    product_name = Column(String(255), nullable=False)
    manufacturer = Column(String(255), nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    rate = Column(Money, nullable=False, default=0)

    purchase_order = relationship("PurchaseOrder", back_populates="items")
