# FILE: medstore/schemas/returns.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from medstore.models.returns import ReturnStatus, ReturnType, SettlementType
from medstore.schemas.common import CamelModel
from medstore.schemas.inventory import Amount, Text


class ReturnItemIn(CamelModel):
    product_id: int
    product_name: Text
    batch_id: int
    quantity: int = Field(..., ge=1)
    price: Amount
    discount: Amount = 0
    amount: Amount


class ReturnItemOut(ReturnItemIn):
    id: int


class CustomerReturnIn(CamelModel):
    original_transaction_id: int
    items: List[ReturnItemIn] = Field(..., min_length=1)
    total_amount: float = Field(..., gt=0)
    settlement_type: SettlementType
    notes: Optional[str] = None


class SupplierReturnIn(CamelModel):
    original_purchase_id: int
    items: List[ReturnItemIn] = Field(..., min_length=1)
    total_amount: Amount
    notes: Optional[str] = None


class ReturnOut(CamelModel):
    id: int
    type: ReturnType
    original_transaction_id: Optional[int] = None
    original_purchase_id: Optional[int] = None
    supplier_id: Optional[int] = None
    items: List[ReturnItemOut] = Field(default_factory=list)
    total_amount: float
    settlement_type: Optional[SettlementType] = None
    voucher_id: Optional[str] = None
    credit_note_id: Optional[str] = None
    status: ReturnStatus
    processed_by_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
