# FILE: medstore/models/returns.py
from __future__ import annotations

import enum

from sqlalchemy import (
    CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, String, Text,
)
from sqlalchemy.orm import relationship

from medstore.db.base import Base
from medstore.models.inventory import Money, enum_values
from medstore.utils.timezone import now_local


class ReturnType(str, enum.Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class SettlementType(str, enum.Enum):
    REFUND = "refund"
    VOUCHER = "voucher"
    CREDIT_NOTE = "credit_note"
    LEDGER_ADJUSTMENT = "ledger_adjustment"


class ReturnStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReturnNote(Base):
    __tablename__ = "returns"
    __table_args__ = (
        CheckConstraint(
            "(type = 'customer' AND original_transaction_id IS NOT NULL AND original_purchase_id IS NULL)"
            " OR (type = 'supplier' AND original_purchase_id IS NOT NULL AND original_transaction_id IS NULL)",
            name="ck_returns_original_by_type",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    type = Column(
        Enum(ReturnType, name="return_type", values_callable=enum_values),
        nullable=False,
        index=True,
    )

    original_transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True, index=True)
    original_purchase_id = Column(Integer, ForeignKey("purchases.id"), nullable=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True, index=True)

    total_amount = Column(Money, nullable=False, default=0)
    settlement_type = Column(
        Enum(SettlementType, name="return_settlement_type", values_callable=enum_values),
        nullable=True,
    )
    voucher_id = Column(String(50), nullable=True)
    credit_note_id = Column(String(50), nullable=True)

    status = Column(
        Enum(ReturnStatus, name="return_status", values_callable=enum_values),
        nullable=False,
        default=ReturnStatus.PENDING,
    )
    processed_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=now_local, nullable=False, index=True)
    updated_at = Column(DateTime, default=now_local, onupdate=now_local, nullable=False)

    items = relationship(
        "ReturnItem",
        back_populates="return_note",
        cascade="all, delete-orphan",
        order_by="ReturnItem.id",
    )


class ReturnItem(Base):
    __tablename__ = "return_items"

    id = Column(Integer, primary_key=True)
    return_id = Column(Integer, ForeignKey("returns.id", ondelete="CASCADE"), nullable=False, index=True)

    product_id = Column(Integer, nullable=False)
    product_name = Column(String(255), nullable=False)
    batch_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)
    price = Column(Money, nullable=False, default=0)
    discount = Column(Money, nullable=False, default=0)
    amount = Column(Money, nullable=False, default=0)

    return_note = relationship("ReturnNote", back_populates="items")
