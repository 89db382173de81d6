# FILE: medstore/services/dashboard_service.py
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from medstore.models.inventory import Product
from medstore.models.ledger import Transaction, TransactionType
from medstore.schemas.dashboard import (
    DashboardAlertsOut,
    DashboardStatsOut,
    ExpiryAlert,
    LowStockAlert,
)
from medstore.schemas.ledger import (
    AnalyticsSummaryOut,
    ChartPointOut,
    PeriodTotal,
    TransactionStatsOut,
)
from medstore.services import stock as stock_svc
from medstore.utils.timezone import start_of_day, start_of_month

EXPIRY_ALERT_DAYS = 30


# ---------- Helpers ----------


def _safe_scalar(val: Any) -> float:
    try:
        return float(val or 0)
    except (TypeError, ValueError):
        return 0.0


def _sum_total(db: Session, *filters) -> Tuple[float, int]:
    total, count = (
        db.query(func.coalesce(func.sum(Transaction.total), 0), func.count(Transaction.id))
        .filter(*filters)
        .one()
    )
    return _safe_scalar(total), int(count or 0)


def _all_products(db: Session) -> List[Product]:
    return db.query(Product).options(selectinload(Product.batches)).all()


# ---------- Dashboard ----------


def build_dashboard_stats(db: Session, now: datetime) -> DashboardStatsOut:
    month_start = start_of_month(now.date())

    monthly_sales, _ = _sum_total(
        db,
        Transaction.type == TransactionType.SALE,
        Transaction.created_at >= month_start,
    )
    monthly_purchases, _ = _sum_total(
        db,
        Transaction.type == TransactionType.PURCHASE,
        Transaction.created_at >= month_start,
    )

    products = _all_products(db)
    low_stock = sum(1 for p in products if stock_svc.is_low_stock(p))
    expiring = len(stock_svc.collect_expiring(products, now.date(), EXPIRY_ALERT_DAYS))

    return DashboardStatsOut(
        monthly_sales=monthly_sales,
        monthly_purchases=monthly_purchases,
        low_stock_count=low_stock,
        expiring_soon_count=expiring,
    )


def build_dashboard_alerts(db: Session, now: datetime) -> DashboardAlertsOut:
    products = _all_products(db)

    low = [
        LowStockAlert(
            name=p.name,
            current_stock=stock_svc.total_stock(p),
            min_stock=stock_svc.effective_min_stock(p),
        )
        for p in products
        if stock_svc.is_low_stock(p)
    ]

    expiring = [
        ExpiryAlert(
            product_name=r.product.name,
            batch_number=r.batch.batch_number,
            expiry_date=r.batch.expiry_date,
            stock=r.batch.stock,
            days_to_expiry=r.days_remaining,
        )
        for r in stock_svc.collect_expiring(products, now.date(), EXPIRY_ALERT_DAYS)
    ]

    return DashboardAlertsOut(low_stock_items=low, expiring_items=expiring)


# ---------- Transaction analytics ----------


def build_transaction_stats(db: Session) -> TransactionStatsOut:
    total, count = _sum_total(db)
    purchases = db.query(func.count(Transaction.id)).filter(
        Transaction.type == TransactionType.PURCHASE
    ).scalar()
    return TransactionStatsOut(
        total_transactions=count,
        total_sales=total,
        total_purchases=int(purchases or 0),
    )


def build_analytics_summary(db: Session, now: datetime) -> AnalyticsSummaryOut:
    day_total, day_count = _sum_total(db, Transaction.created_at >= start_of_day(now.date()))
    month_total, month_count = _sum_total(db, Transaction.created_at >= start_of_month(now.date()))
    total_count = db.query(func.count(Transaction.id)).scalar()
    return AnalyticsSummaryOut(
        daily_sales=PeriodTotal(total=day_total, count=day_count),
        monthly_sales=PeriodTotal(total=month_total, count=month_count),
        total_transactions=int(total_count or 0),
    )


def _months_back(d: date, months: int) -> date:
    y, m = d.year, d.month - months
    while m <= 0:
        m += 12
        y -= 1
    return date(y, m, 1)


def chart_window(range_: str, now: datetime) -> Tuple[datetime, Any]:
    """
    (window start, bucket-key function) for a chart range.
    Unknown ranges fall back to month.
    """
    today = now.date()
    if range_ == "day":
        return start_of_day(today - timedelta(days=29)), lambda dt: dt.strftime("%Y-%m-%d")
    if range_ == "week":
        def week_key(dt: datetime) -> str:
            iso = dt.isocalendar()
            return f"{iso[0]}-W{iso[1]:02d}"
        return start_of_day(today - timedelta(days=84)), week_key
    return datetime.combine(_months_back(today, 11), datetime.min.time()), lambda dt: dt.strftime("%Y-%m")


def build_chart(db: Session, range_: str, now: datetime) -> List[ChartPointOut]:
    start, key_of = chart_window(range_, now)

    rows = (
        db.query(Transaction.created_at, Transaction.type, Transaction.total)
        .filter(Transaction.created_at >= start, Transaction.created_at <= now)
        .order_by(Transaction.created_at.asc())
        .all()
    )

    buckets: Dict[str, Dict[str, Any]] = {}
    for created_at, type_, total in rows:
        key = key_of(created_at)
        b = buckets.setdefault(key, {"sales": 0.0, "purchases": 0.0, "date": created_at})
        if type_ == TransactionType.SALE:
            b["sales"] += _safe_scalar(total)
        elif type_ == TransactionType.PURCHASE:
            b["purchases"] += _safe_scalar(total)

    return [
        ChartPointOut(period=k, sales=v["sales"], purchases=v["purchases"], date=v["date"])
        for k, v in sorted(buckets.items())
    ]
