# FILE: medstore/api/routes_purchase_orders.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

from medstore.api.deps import current_user as auth_current_user, get_db
from medstore.models.inventory import Supplier
from medstore.models.ledger import POStatus, PurchaseOrder, PurchaseOrderItem
from medstore.models.user import User
from medstore.schemas.ledger import (
    PurchaseOrderCreate,
    PurchaseOrderOut,
    PurchaseOrderUpdate,
)

router = APIRouter(prefix="/purchase-orders", tags=["Purchase Orders"])


@router.get("", response_model=List[PurchaseOrderOut])
def list_purchase_orders(
    status_: Optional[str] = Query(None, alias="status"),
    supplier_id: Optional[int] = Query(None, alias="supplierId"),
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    query = (
        db.query(PurchaseOrder)
        .options(selectinload(PurchaseOrder.items))
        .order_by(PurchaseOrder.created_at.desc(), PurchaseOrder.id.desc())
    )
    if status_ and status_ != "all":
        try:
            query = query.filter(PurchaseOrder.status == POStatus(status_))
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid status")
    if supplier_id:
        query = query.filter(PurchaseOrder.supplier_id == supplier_id)
    return query.all()


@router.post("", response_model=PurchaseOrderOut, status_code=status.HTTP_201_CREATED)
def create_purchase_order(
    payload: PurchaseOrderCreate,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    if not db.get(Supplier, payload.supplier_id):
        raise HTTPException(status_code=404, detail="Supplier not found")

    po = PurchaseOrder(**payload.model_dump(exclude={"items"}))
    po.items = [PurchaseOrderItem(**li.model_dump()) for li in payload.items]
    db.add(po)
    db.commit()
    db.refresh(po)
    return po


@router.get("/{po_id}", response_model=PurchaseOrderOut)
def get_purchase_order(
    po_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    po = db.get(PurchaseOrder, po_id)
    if not po:
        raise HTTPException(status_code=404, detail="Purchase order not found")
    return po


@router.put("/{po_id}", response_model=PurchaseOrderOut)
def update_purchase_order(
    po_id: int,
    payload: PurchaseOrderUpdate,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    po = db.get(PurchaseOrder, po_id)
    if not po:
        raise HTTPException(status_code=404, detail="Purchase order not found")

    data = payload.model_dump(exclude_unset=True, exclude={"items"})
    for k, v in data.items():
        setattr(po, k, v)

    if payload.items is not None:
        po.items = [PurchaseOrderItem(**li.model_dump()) for li in payload.items]

    db.commit()
    db.refresh(po)
    return po
