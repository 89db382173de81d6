# FILE: medstore/services/catalog_query.py
"""
Filter construction for the search / listing endpoints.

Text matching is case-insensitive substring matching OR-ed across the
entity's fields. Short queries short-circuit to an empty result before any
query is issued.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import and_, false, or_
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql.elements import ColumnElement

from medstore.models.inventory import Customer, DrugSchedule, Product, ProductBatch, Supplier
from medstore.models.ledger import (
    PaymentStatus,
    Purchase,
    Transaction,
    TransactionItem,
    TransactionType,
)
from medstore.schemas.inventory import CustomerOut, ProductOut, SupplierOut
from medstore.schemas.ledger import TransactionOut
from medstore.schemas.search import SearchHit
from medstore.services import stock as stock_svc
from medstore.utils.timezone import end_of_day, start_of_day, start_of_month

MIN_ENTITY_QUERY = 3
MIN_GLOBAL_QUERY = 2
MIN_ITEM_QUERY = 3

ALL_CATEGORIES = "All Categories"
TRANSACTION_LIMIT = 100


# ============================================================
# Matching helpers
# ============================================================
def like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def icontains(col, term: str) -> ColumnElement:
    return col.ilike(like_pattern(term), escape="\\")


def any_field(term: str, *cols) -> ColumnElement:
    return or_(*[icontains(c, term) for c in cols])


def _clean(q: Optional[str]) -> str:
    return (q or "").strip()


# ============================================================
# Products
# ============================================================
def search_products(db: Session, q: Optional[str], limit: int = 10) -> List[Product]:
    """Name / manufacturer / salt search; only products with stock on hand."""
    term = _clean(q)
    if len(term) < MIN_ENTITY_QUERY:
        return []

    rows = (
        db.query(Product)
        .options(selectinload(Product.batches))
        .filter(any_field(term, Product.name, Product.manufacturer, Product.salts))
        .order_by(Product.name.asc())
        .limit(limit)
        .all()
    )
    return [p for p in rows if any((b.stock or 0) > 0 for b in p.batches)]


def filter_products(
    db: Session,
    *,
    search: Optional[str] = None,
    category: Optional[str] = None,
    status: Optional[str] = None,
    tag: Optional[str] = None,
) -> List[Product]:
    query = db.query(Product).options(selectinload(Product.batches))

    term = _clean(search)
    if term:
        query = query.filter(any_field(term, Product.name, Product.manufacturer))

    if category and category != ALL_CATEGORIES:
        query = query.filter(Product.category == category)

    if tag == "ordered":
        query = query.filter(Product.is_ordered.is_(True))
    elif tag == "order_later":
        query = query.filter(Product.order_later.is_(True))

    products = query.order_by(Product.name.asc()).all()

    # stock state is derived from batches, so it can only be filtered here
    return [p for p in products if stock_svc.matches_stock_status(p, status)]


# ============================================================
# Parties
# ============================================================
def search_customers(db: Session, q: Optional[str], limit: int = 10) -> List[Customer]:
    term = _clean(q)
    if len(term) < MIN_ENTITY_QUERY:
        return []
    return (
        db.query(Customer)
        .filter(icontains(Customer.name, term))
        .order_by(Customer.name.asc())
        .limit(limit)
        .all()
    )


def search_suppliers(db: Session, q: Optional[str]) -> List[Supplier]:
    term = _clean(q)
    if not term:
        return []
    return (
        db.query(Supplier)
        .filter(
            any_field(
                term,
                Supplier.name,
                Supplier.contact,
                Supplier.gstin,
                Supplier.dl_number,
                Supplier.food_license_number,
                Supplier.address,
            )
        )
        .order_by(Supplier.name.asc())
        .all()
    )


# ============================================================
# Transactions
# ============================================================
@dataclass
class TransactionFilter:
    type: Optional[str] = None
    status: Optional[str] = None
    customer_id: Optional[int] = None
    period: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    product_search: Optional[str] = None
    party_search: Optional[str] = None
    payment_methods: List[str] = field(default_factory=list)
    schedules: List[DrugSchedule] = field(default_factory=list)


def resolve_date_range(
    f: TransactionFilter, now: datetime
) -> Optional[Tuple[Optional[datetime], Optional[datetime]]]:
    """
    Explicit start+end wins over the named period.
    Returns (start, end) where either side may be open, or None for no filter.
    """
    if f.start_date and f.end_date:
        return f.start_date, f.end_date

    period = (f.period or "").strip().lower()
    if period == "today":
        return start_of_day(now.date()), end_of_day(now.date())
    if period == "week":
        return now - timedelta(days=7), None
    if period == "month":
        return start_of_month(now.date()), None
    return None


def _payment_group(methods: Sequence[str]) -> Optional[ColumnElement]:
    conds: List[ColumnElement] = []
    for m in methods:
        m = (m or "").strip()
        if not m:
            continue
        if m == "Credit":
            conds.append(Transaction.status == PaymentStatus.CREDIT)
        else:
            conds.append(icontains(Transaction.payment_method, m))
    return or_(*conds) if conds else None


def _products_with_schedules(db: Session, schedules: Sequence[DrugSchedule]) -> List[int]:
    rows = db.query(Product.id).filter(Product.schedule.in_(list(schedules))).all()
    return [r.id for r in rows]


def build_transaction_conditions(
    db: Session, f: TransactionFilter, now: datetime
) -> List[ColumnElement]:
    conds: List[ColumnElement] = []

    if f.type and f.type != "all":
        conds.append(Transaction.type == f.type)
    if f.status and f.status != "all":
        conds.append(Transaction.status == f.status)
    if f.customer_id is not None:
        conds.append(Transaction.customer_id == f.customer_id)

    payment = _payment_group(f.payment_methods)
    if payment is not None:
        conds.append(payment)

    window = resolve_date_range(f, now)
    if window is not None:
        start, end = window
        if start is not None:
            conds.append(Transaction.created_at >= start)
        if end is not None:
            conds.append(Transaction.created_at <= end)

    product_term = _clean(f.product_search)
    if len(product_term) >= MIN_ITEM_QUERY:
        conds.append(Transaction.items.any(icontains(TransactionItem.product_name, product_term)))

    party_term = _clean(f.party_search)
    if len(party_term) >= MIN_ITEM_QUERY:
        conds.append(any_field(party_term, Transaction.customer_name, Transaction.supplier_name))

    if f.schedules:
        product_ids = _products_with_schedules(db, f.schedules)
        if product_ids:
            conds.append(Transaction.items.any(TransactionItem.product_id.in_(product_ids)))
        else:
            conds.append(false())

    return conds


def filter_transactions(
    db: Session, f: TransactionFilter, now: datetime, limit: int = TRANSACTION_LIMIT
) -> List[Transaction]:
    conds = build_transaction_conditions(db, f, now)
    query = db.query(Transaction).options(selectinload(Transaction.items))
    if conds:
        query = query.filter(and_(*conds))
    return (
        query.order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .limit(limit)
        .all()
    )


# ============================================================
# Return sources
# ============================================================
def search_return_sources(db: Session, q: str, type_: str) -> List[Any]:
    """
    Find the sale (customer) or purchase (supplier) a return is raised against.
    A purely numeric term also matches the record id.
    """
    term = _clean(q)
    if type_ == "customer":
        conds = [
            icontains(Transaction.customer_name, term),
            icontains(Transaction.invoice_number, term),
        ]
        if term.isdigit():
            conds.append(Transaction.id == int(term))
        return (
            db.query(Transaction)
            .options(selectinload(Transaction.items))
            .filter(or_(*conds))
            .order_by(Transaction.created_at.desc())
            .all()
        )

    if type_ == "supplier":
        conds = [icontains(Purchase.invoice_number, term)]
        if term.isdigit():
            conds.append(Purchase.id == int(term))
        return (
            db.query(Purchase)
            .options(selectinload(Purchase.items), selectinload(Purchase.supplier))
            .filter(or_(*conds))
            .order_by(Purchase.created_at.desc())
            .all()
        )

    return []


# ============================================================
# Global search
# ============================================================
def _dump(schema, obj) -> dict:
    return schema.model_validate(obj).model_dump(by_alias=True, mode="json")


def global_search(db: Session, q: Optional[str]) -> List[SearchHit]:
    """
    Products (5) -> transactions (3) -> customers (3) -> suppliers (3),
    tagged by kind, first 10 overall.
    """
    term = _clean(q)
    if len(term) < MIN_GLOBAL_QUERY:
        return []

    hits: List[SearchHit] = []

    products = (
        db.query(Product)
        .options(selectinload(Product.batches))
        .filter(
            or_(
                icontains(Product.name, term),
                icontains(Product.manufacturer, term),
                Product.batches.any(icontains(ProductBatch.batch_number, term)),
            )
        )
        .order_by(Product.name.asc())
        .limit(5)
        .all()
    )
    for p in products:
        data = _dump(ProductOut, p)
        data["mrp"] = stock_svc.first_available_mrp(p)
        hits.append(SearchHit(type="product", data=data))

    transactions = (
        db.query(Transaction)
        .options(selectinload(Transaction.items))
        .filter(
            or_(
                icontains(Transaction.customer_name, term),
                Transaction.items.any(icontains(TransactionItem.product_name, term)),
            )
        )
        .order_by(Transaction.created_at.desc())
        .limit(3)
        .all()
    )
    for t in transactions:
        kind = "purchase" if t.type == TransactionType.PURCHASE else "sale"
        hits.append(SearchHit(type=kind, data=_dump(TransactionOut, t)))

    customers = (
        db.query(Customer)
        .filter(any_field(term, Customer.name, Customer.phone_number))
        .order_by(Customer.name.asc())
        .limit(3)
        .all()
    )
    for c in customers:
        hits.append(SearchHit(type="customer", data=_dump(CustomerOut, c)))

    suppliers = (
        db.query(Supplier)
        .filter(icontains(Supplier.name, term))
        .order_by(Supplier.name.asc())
        .limit(3)
        .all()
    )
    for s in suppliers:
        hits.append(SearchHit(type="supplier", data=_dump(SupplierOut, s)))

    return hits[:10]
