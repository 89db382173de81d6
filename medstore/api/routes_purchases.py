# FILE: medstore/api/routes_purchases.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload

from medstore.api.deps import current_user as auth_current_user, get_db
from medstore.models.inventory import Supplier
from medstore.models.ledger import Purchase
from medstore.models.user import User
from medstore.schemas.ledger import (
    PurchaseCreate,
    PurchaseCreatedOut,
    PurchaseOut,
    PurchaseUpdate,
)
from medstore.services.recording import record_purchase

router = APIRouter(prefix="/purchases", tags=["Purchases"])


def _purchase_q():
    return (selectinload(Purchase.items), selectinload(Purchase.supplier))


@router.get("", response_model=List[PurchaseOut])
def list_purchases(
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return (
        db.query(Purchase)
        .options(*_purchase_q())
        .order_by(Purchase.created_at.desc(), Purchase.id.desc())
        .all()
    )


@router.post("", response_model=PurchaseCreatedOut, status_code=status.HTTP_201_CREATED)
def create_purchase(
    payload: PurchaseCreate,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    if not db.get(Supplier, payload.supplier_id):
        raise HTTPException(status_code=404, detail="Supplier not found")

    receipt = record_purchase(db, payload)
    db.commit()
    db.refresh(receipt.purchase)

    out = PurchaseOut.model_validate(receipt.purchase)
    return PurchaseCreatedOut(**out.model_dump(), skipped_items=receipt.skipped)


@router.get("/{purchase_id}", response_model=PurchaseOut)
def get_purchase(
    purchase_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    purchase = (
        db.query(Purchase)
        .options(*_purchase_q())
        .filter(Purchase.id == purchase_id)
        .first()
    )
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")
    return purchase


@router.put("/{purchase_id}", response_model=PurchaseOut)
def update_purchase(
    purchase_id: int,
    payload: PurchaseUpdate,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    purchase = db.get(Purchase, purchase_id)
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")

    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(purchase, k, v)
    db.commit()
    db.refresh(purchase)
    return purchase
