# FILE: medstore/services/recording.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from sqlalchemy import update
from sqlalchemy.orm import Session

from medstore.models.ledger import (
    Purchase,
    PurchaseItem,
    Transaction,
    TransactionItem,
    TransactionType,
)
from medstore.schemas.ledger import PurchaseCreate, TransactionCreate
from medstore.services.inventory import increment_batch_stock

logger = logging.getLogger(__name__)


@dataclass
class PurchaseReceipt:
    purchase: Purchase
    applied: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)


def record_purchase(db: Session, payload: PurchaseCreate) -> PurchaseReceipt:
    """
    Persist a goods receipt and add every line's quantity to its batch.

    Lines whose (product, batch) pair does not resolve are skipped and
    reported; the purchase itself is still saved. Caller commits.
    """
    purchase = Purchase(**payload.model_dump(exclude={"items"}))
    purchase.items = [PurchaseItem(**li.model_dump()) for li in payload.items]
    receipt = PurchaseReceipt(purchase=purchase)

    for idx, li in enumerate(payload.items):
        ok = increment_batch_stock(
            db,
            product_id=li.product_id,
            batch_id=li.batch_id,
            qty=li.quantity,
        )
        if ok:
            receipt.applied.append(idx)
        else:
            receipt.skipped.append(idx)
            logger.warning(
                "Purchase stock update skipped: product=%s batch=%s not found (qty=%s)",
                li.product_id, li.batch_id, li.quantity,
            )

    db.add(purchase)
    return receipt


def record_transaction(db: Session, payload: TransactionCreate) -> Transaction:
    """
    Ledger entry only. Line items carry loose product/batch references,
    so stock is not touched here.
    """
    txn = Transaction(**payload.model_dump(exclude={"items"}))
    txn.items = [TransactionItem(**li.model_dump()) for li in payload.items]
    db.add(txn)
    return txn


def backfill_transaction_types(db: Session) -> int:
    """Legacy rows were written before ``type`` existed; they are all sales."""
    result = db.execute(
        update(Transaction)
        .where(Transaction.type.is_(None))
        .values(type=TransactionType.SALE)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        logger.info("Backfilled type=sale on %s legacy transactions", result.rowcount)
        db.commit()
    return result.rowcount or 0
