# FILE: medstore/api/routes_returns.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

from medstore.api.deps import current_user as auth_current_user, get_db
from medstore.models.returns import ReturnNote, ReturnType
from medstore.models.user import User
from medstore.schemas.ledger import PurchaseOut, TransactionOut
from medstore.schemas.returns import CustomerReturnIn, ReturnOut, SupplierReturnIn
from medstore.services import catalog_query
from medstore.services.returns import settle_customer_return, settle_supplier_return

router = APIRouter(prefix="/returns", tags=["Returns"])

HISTORY_LIMIT = 100


@router.get("/search")
def search_return_sources(
    q: Optional[str] = Query(None),
    type_: Optional[str] = Query(None, alias="type"),
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    if not (q or "").strip() or not type_:
        raise HTTPException(status_code=400, detail="Search term and type are required")
    if type_ not in ("customer", "supplier"):
        raise HTTPException(status_code=400, detail=f"Invalid return type '{type_}'")

    rows = catalog_query.search_return_sources(db, q, type_)
    schema = TransactionOut if type_ == "customer" else PurchaseOut
    return [schema.model_validate(r) for r in rows]


@router.get("", response_model=List[ReturnOut])
def list_returns(
    type_: Optional[str] = Query(None, alias="type"),
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    query = db.query(ReturnNote).options(selectinload(ReturnNote.items))
    if type_ and type_ != "all":
        try:
            query = query.filter(ReturnNote.type == ReturnType(type_))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid return type '{type_}'")
    return (
        query.order_by(ReturnNote.created_at.desc(), ReturnNote.id.desc())
        .limit(HISTORY_LIMIT)
        .all()
    )


@router.post("/customer", response_model=ReturnOut, status_code=status.HTTP_201_CREATED)
def create_customer_return(
    payload: CustomerReturnIn,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    rn = settle_customer_return(db, payload, processed_by=me)
    if rn is None:
        raise HTTPException(status_code=404, detail="Original transaction not found")
    db.commit()
    db.refresh(rn)
    return rn


@router.post("/supplier", response_model=ReturnOut, status_code=status.HTTP_201_CREATED)
def create_supplier_return(
    payload: SupplierReturnIn,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    rn = settle_supplier_return(db, payload, processed_by=me)
    if rn is None:
        raise HTTPException(status_code=404, detail="Original purchase not found")
    db.commit()
    db.refresh(rn)
    return rn
