# FILE: medstore/schemas/ledger.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import Field, model_validator

from medstore.models.ledger import PaymentStatus, POStatus, TransactionType
from medstore.schemas.common import CamelModel, not_null
from medstore.schemas.inventory import Amount, Percent, SupplierOut, Text

SalePaymentMethod = Literal["Cash", "Card", "UPI", "Bank"]
PurchasePaymentMethod = Literal["cash", "bank", "upi"]


# ---------- Ledger transactions ----------


class TransactionItemIn(CamelModel):
    product_id: int
    product_name: Text
    quantity: int = Field(..., ge=1)
    price: Amount
    tax: Amount = 0
    batch_id: Optional[int] = None


class TransactionItemOut(TransactionItemIn):
    id: int


class TransactionCreate(CamelModel):
    type: TransactionType = TransactionType.SALE
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    supplier_id: Optional[int] = None
    supplier_name: Optional[str] = None
    doctor_name: Optional[str] = None
    doctor_reg_no: Optional[str] = None
    is_rghs: bool = False
    items: List[TransactionItemIn] = Field(..., min_length=1)
    total: Amount
    discount_percentage: Percent = 0
    status: PaymentStatus
    payment_method: Optional[SalePaymentMethod] = None
    attached_prescriptions: Optional[Dict[str, str]] = None
    invoice_number: Optional[str] = None

    @model_validator(mode="after")
    def _counterparty_matches_type(self):
        if self.type == TransactionType.SALE and self.supplier_id is not None:
            raise ValueError("A sale cannot reference a supplier")
        if self.type == TransactionType.PURCHASE and self.customer_id is not None:
            raise ValueError("A purchase cannot reference a customer")
        return self


class TransactionUpdate(CamelModel):
    customer_name: Optional[str] = None
    supplier_name: Optional[str] = None
    doctor_name: Optional[str] = None
    doctor_reg_no: Optional[str] = None
    is_rghs: Optional[bool] = None
    discount_percentage: Optional[Percent] = None
    status: Optional[PaymentStatus] = None
    payment_method: Optional[SalePaymentMethod] = None
    attached_prescriptions: Optional[Dict[str, str]] = None
    invoice_number: Optional[str] = None

    _not_null = not_null("is_rghs", "discount_percentage", "status")


class TransactionOut(CamelModel):
    id: int
    type: Optional[TransactionType] = None
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    supplier_id: Optional[int] = None
    supplier_name: Optional[str] = None
    doctor_name: Optional[str] = None
    doctor_reg_no: Optional[str] = None
    is_rghs: bool = False
    items: List[TransactionItemOut] = Field(default_factory=list)
    total: float
    discount_percentage: float = 0
    status: PaymentStatus
    payment_method: Optional[str] = None
    attached_prescriptions: Optional[Dict[str, str]] = None
    invoice_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TransactionStatsOut(CamelModel):
    total_transactions: int
    total_sales: float
    total_purchases: int


class PeriodTotal(CamelModel):
    total: float = 0
    count: int = 0


class AnalyticsSummaryOut(CamelModel):
    daily_sales: PeriodTotal
    monthly_sales: PeriodTotal
    total_transactions: int


class ChartPointOut(CamelModel):
    period: str
    sales: float
    purchases: float
    date: datetime


# ---------- Purchases (goods receipt) ----------


class PurchaseItemIn(CamelModel):
    product_id: int
    product_name: Text
    batch_id: int
    quantity: int = Field(..., ge=1)
    price: Amount
    amount: Amount


class PurchaseItemOut(PurchaseItemIn):
    id: int


class PurchaseCreate(CamelModel):
    supplier_id: int
    invoice_number: Optional[str] = None
    items: List[PurchaseItemIn] = Field(..., min_length=1)
    total: Amount
    status: PaymentStatus
    payment_method: Optional[PurchasePaymentMethod] = None
    notes: Optional[str] = None
    source_file_id: Optional[str] = None


class PurchaseUpdate(CamelModel):
    invoice_number: Optional[str] = None
    status: Optional[PaymentStatus] = None
    payment_method: Optional[PurchasePaymentMethod] = None
    notes: Optional[str] = None

    _not_null = not_null("status")


class PurchaseOut(CamelModel):
    id: int
    supplier_id: int
    supplier: Optional[SupplierOut] = None
    invoice_number: Optional[str] = None
    items: List[PurchaseItemOut] = Field(default_factory=list)
    total: float
    status: PaymentStatus
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    source_file_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PurchaseCreatedOut(PurchaseOut):
    # zero-based indexes of items whose product/batch did not resolve
    skipped_items: List[int] = Field(default_factory=list)


# ---------- Purchase Orders ----------


class PurchaseOrderItemIn(CamelModel):
    product_id: int
    product_name: Text
    manufacturer: str = ""
    quantity: int = Field(..., gt=0)
    rate: Amount


class PurchaseOrderItemOut(PurchaseOrderItemIn):
    id: int


class PurchaseOrderCreate(CamelModel):
    supplier_id: int
    items: List[PurchaseOrderItemIn] = Field(..., min_length=1)
    total_value: Amount
    status: POStatus = POStatus.PENDING


class PurchaseOrderUpdate(CamelModel):
    status: Optional[POStatus] = None
    items: Optional[List[PurchaseOrderItemIn]] = Field(None, min_length=1)
    total_value: Optional[Amount] = None

    _not_null = not_null("status", "total_value")


class PurchaseOrderOut(CamelModel):
    id: int
    supplier_id: int
    items: List[PurchaseOrderItemOut] = Field(default_factory=list)
    total_value: float
    status: POStatus
    created_at: datetime
    updated_at: datetime
