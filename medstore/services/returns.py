# FILE: medstore/services/returns.py
"""
Return settlement.

Both flows finish in one step: the return is written as ``completed``.
Stock is never touched here; inventory is reconciled separately.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from medstore.models.ledger import PaymentStatus, Purchase, Transaction
from medstore.models.returns import (
    ReturnItem,
    ReturnNote,
    ReturnStatus,
    ReturnType,
    SettlementType,
)
from medstore.schemas.returns import CustomerReturnIn, ReturnItemIn, SupplierReturnIn
from medstore.services.id_gen import new_credit_note_id, new_voucher_id

logger = logging.getLogger(__name__)


def supplier_settlement_for(purchase: Purchase) -> SettlementType:
    """Paid purchases get a credit note; credit purchases are adjusted on the ledger."""
    if purchase.status == PaymentStatus.PAID:
        return SettlementType.CREDIT_NOTE
    return SettlementType.LEDGER_ADJUSTMENT


def _items(rows: list[ReturnItemIn]) -> list[ReturnItem]:
    return [ReturnItem(**li.model_dump()) for li in rows]


def settle_customer_return(
    db: Session,
    payload: CustomerReturnIn,
    *,
    processed_by: Optional[Any] = None,
) -> Optional[ReturnNote]:
    """Returns None when the original sale does not exist. Caller commits."""
    original = db.get(Transaction, payload.original_transaction_id)
    if original is None:
        return None

    rn = ReturnNote(
        type=ReturnType.CUSTOMER,
        original_transaction_id=original.id,
        total_amount=payload.total_amount,
        settlement_type=payload.settlement_type,
        status=ReturnStatus.COMPLETED,
        processed_by_id=getattr(processed_by, "id", None),
        notes=payload.notes,
    )
    if payload.settlement_type == SettlementType.VOUCHER:
        rn.voucher_id = new_voucher_id()
    rn.items = _items(payload.items)

    db.add(rn)
    logger.info(
        "Customer return against transaction %s settled as %s (%s)",
        original.id, payload.settlement_type.value, payload.total_amount,
    )
    return rn


def settle_supplier_return(
    db: Session,
    payload: SupplierReturnIn,
    *,
    processed_by: Optional[Any] = None,
) -> Optional[ReturnNote]:
    """Returns None when the original purchase does not exist. Caller commits."""
    original = db.get(Purchase, payload.original_purchase_id)
    if original is None:
        return None

    settlement = supplier_settlement_for(original)
    rn = ReturnNote(
        type=ReturnType.SUPPLIER,
        original_purchase_id=original.id,
        supplier_id=original.supplier_id,
        total_amount=payload.total_amount,
        settlement_type=settlement,
        status=ReturnStatus.COMPLETED,
        processed_by_id=getattr(processed_by, "id", None),
        notes=payload.notes,
    )
    if settlement == SettlementType.CREDIT_NOTE:
        rn.credit_note_id = new_credit_note_id()
    rn.items = _items(payload.items)

    db.add(rn)
    logger.info(
        "Supplier return against purchase %s settled as %s (%s)",
        original.id, settlement.value, payload.total_amount,
    )
    return rn
