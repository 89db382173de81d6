# FILE: medstore/api/routes_transactions.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

from medstore.api.deps import current_user as auth_current_user, get_db
from medstore.models.ledger import PaymentStatus, Transaction, TransactionType
from medstore.models.user import User
from medstore.schemas.ledger import (
    AnalyticsSummaryOut,
    ChartPointOut,
    TransactionCreate,
    TransactionOut,
    TransactionStatsOut,
    TransactionUpdate,
)
from medstore.services import catalog_query, dashboard_service
from medstore.services.drug_schedules import normalize_schedules
from medstore.services.recording import backfill_transaction_types, record_transaction
from medstore.utils.timezone import now_local, parse_client_datetime

router = APIRouter(prefix="/transactions", tags=["Transactions"])


def _enum_or_400(enum_cls, raw: Optional[str], label: str):
    if not raw or raw == "all":
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} '{raw}'")


def _date_or_400(raw: Optional[str], label: str, *, end: bool = False):
    if not raw:
        return None
    try:
        return parse_client_datetime(raw, end=end)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} '{raw}'")


# ============================================================
# Listing / analytics
# ============================================================
@router.get("", response_model=List[TransactionOut])
def list_transactions(
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    backfill_transaction_types(db)
    return (
        db.query(Transaction)
        .options(selectinload(Transaction.items))
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .all()
    )


@router.get("/stats", response_model=TransactionStatsOut)
def transaction_stats(
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return dashboard_service.build_transaction_stats(db)


@router.get("/analytics/summary", response_model=AnalyticsSummaryOut)
def analytics_summary(
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return dashboard_service.build_analytics_summary(db, now_local())


@router.get("/filter", response_model=List[TransactionOut])
def filter_transactions(
    type_: Optional[str] = Query(None, alias="type"),
    status_: Optional[str] = Query(None, alias="status"),
    period: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    customer_id: Optional[int] = Query(None, alias="customerId"),
    product_search: Optional[str] = Query(None, alias="productSearch"),
    party_search: Optional[str] = Query(None, alias="partySearch"),
    payment_methods: List[str] = Query([], alias="paymentMethods"),
    schedules: List[str] = Query([], alias="schedules"),
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    try:
        schedule_codes = normalize_schedules(schedules)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    f = catalog_query.TransactionFilter(
        type=_enum_or_400(TransactionType, type_, "type"),
        status=_enum_or_400(PaymentStatus, status_, "status"),
        customer_id=customer_id,
        period=period,
        start_date=_date_or_400(start_date, "startDate"),
        end_date=_date_or_400(end_date, "endDate", end=True),
        product_search=product_search,
        party_search=party_search,
        payment_methods=payment_methods,
        schedules=schedule_codes,
    )
    return catalog_query.filter_transactions(db, f, now_local())


@router.get("/chart/{range_}", response_model=List[ChartPointOut])
def chart(
    range_: str,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return dashboard_service.build_chart(db, range_, now_local())


# ============================================================
# CRUD
# ============================================================
@router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    txn = db.get(Transaction, transaction_id)
    if not txn:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return txn


@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    txn = record_transaction(db, payload)
    db.commit()
    db.refresh(txn)
    return txn


@router.put("/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: int,
    payload: TransactionUpdate,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    txn = db.get(Transaction, transaction_id)
    if not txn:
        raise HTTPException(status_code=404, detail="Transaction not found")

    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(txn, k, v)
    db.commit()
    db.refresh(txn)
    return txn
