# FILE: medstore/api/routes_suppliers.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from medstore.api.deps import current_user as auth_current_user, get_db
from medstore.models.inventory import Supplier
from medstore.models.ledger import Purchase, PurchaseOrder
from medstore.models.user import User
from medstore.schemas.common import MessageOut
from medstore.schemas.inventory import SupplierCreate, SupplierOut, SupplierUpdate
from medstore.services.catalog_query import search_suppliers

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])


def _get_supplier_or_404(db: Session, supplier_id: int) -> Supplier:
    supplier = db.get(Supplier, supplier_id)
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return supplier


@router.get("", response_model=List[SupplierOut])
def list_suppliers(
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return db.query(Supplier).order_by(Supplier.name.asc()).all()


@router.get("/search", response_model=List[SupplierOut])
def search(
    q: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return search_suppliers(db, q)


@router.get("/{supplier_id}", response_model=SupplierOut)
def get_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return _get_supplier_or_404(db, supplier_id)


@router.post("", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
def create_supplier(
    payload: SupplierCreate,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    supplier = Supplier(**payload.model_dump())
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return supplier


@router.put("/{supplier_id}", response_model=SupplierOut)
def update_supplier(
    supplier_id: int,
    payload: SupplierUpdate,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    supplier = _get_supplier_or_404(db, supplier_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(supplier, k, v)
    db.commit()
    db.refresh(supplier)
    return supplier


@router.delete("/{supplier_id}", response_model=MessageOut)
def delete_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    supplier = _get_supplier_or_404(db, supplier_id)

    in_use = (
        db.query(Purchase.id).filter(Purchase.supplier_id == supplier_id).first()
        or db.query(PurchaseOrder.id).filter(PurchaseOrder.supplier_id == supplier_id).first()
    )
    if in_use:
        raise HTTPException(status_code=400, detail="Supplier has purchases and cannot be deleted")

    db.delete(supplier)
    db.commit()
    return MessageOut(message="Supplier deleted")
