# FILE: medstore/api/routes_products.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

from medstore.api.deps import current_user as auth_current_user, get_db
from medstore.models.inventory import Product
from medstore.models.user import User
from medstore.schemas.common import MessageOut
from medstore.schemas.inventory import (
    BatchDiscountIn,
    BatchDiscountOut,
    BatchIn,
    BatchOut,
    BatchStockIn,
    ExpiringBatchOut,
    ProductCreate,
    ProductOut,
    ProductRef,
    ProductStatsOut,
    ProductUpdate,
)
from medstore.services import catalog_query
from medstore.services import inventory as inventory_svc
from medstore.services import stock as stock_svc
from medstore.utils.timezone import today_local

router = APIRouter(prefix="/products", tags=["Products"])


def _get_product_or_404(db: Session, product_id: int) -> Product:
    product = (
        db.query(Product)
        .options(selectinload(Product.batches))
        .filter(Product.id == product_id)
        .first()
    )
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# ============================================================
# Listing / search
# ============================================================
@router.get("", response_model=List[ProductOut])
def list_products(
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return (
        db.query(Product)
        .options(selectinload(Product.batches))
        .order_by(Product.name.asc())
        .all()
    )


@router.get("/stats", response_model=ProductStatsOut)
def product_stats(
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    products = db.query(Product).options(selectinload(Product.batches)).all()
    return ProductStatsOut(
        total_items=len(products),
        low_stock_count=sum(1 for p in products if stock_svc.is_low_stock(p)),
        out_of_stock_count=sum(1 for p in products if stock_svc.is_out_of_stock(p)),
        total_value=sum(stock_svc.inventory_value(p) for p in products),
    )


@router.get("/filter", response_model=List[ProductOut])
def filter_products(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return catalog_query.filter_products(
        db, search=search, category=category, status=status, tag=tag
    )


@router.get("/search", response_model=List[ProductOut])
def search_products(
    q: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return catalog_query.search_products(db, q)


@router.get("/expiring", response_model=List[ExpiringBatchOut])
def expiring_products(
    filter: str = Query("30"),
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    try:
        horizon = stock_svc.parse_horizon(filter)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid expiry filter")

    products = db.query(Product).options(selectinload(Product.batches)).all()
    rows = stock_svc.collect_expiring(products, today_local(), horizon)
    return [
        ExpiringBatchOut(
            **BatchOut.model_validate(r.batch).model_dump(),
            product=ProductRef.model_validate(r.product),
            days_remaining=r.days_remaining,
        )
        for r in rows
    ]


# ============================================================
# CRUD
# ============================================================
@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    product = inventory_svc.create_product(db, payload)
    db.commit()
    db.refresh(product)
    return product


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return _get_product_or_404(db, product_id)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    product = _get_product_or_404(db, product_id)
    try:
        inventory_svc.apply_product_update(product, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    db.refresh(product)
    return product


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    product = _get_product_or_404(db, product_id)
    db.delete(product)
    db.commit()
    return MessageOut(message="Product deleted")


# ============================================================
# Batches
# ============================================================
@router.post(
    "/{product_id}/batches",
    response_model=ProductOut,
    status_code=status.HTTP_201_CREATED,
)
def add_batch(
    product_id: int,
    payload: BatchIn,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    product = _get_product_or_404(db, product_id)
    inventory_svc.add_batch(product, payload)
    db.commit()
    db.refresh(product)
    return product


@router.put("/{product_id}/batch/{batch_id}/stock", response_model=ProductOut)
def update_batch_stock(
    product_id: int,
    batch_id: int,
    payload: BatchStockIn,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    product = _get_product_or_404(db, product_id)
    batch = inventory_svc.find_batch(product, batch_id)
    if not batch:
        raise HTTPException(status_code=404, detail="Batch not found")
    try:
        inventory_svc.set_batch_stock(batch, payload.stock)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    db.refresh(product)
    return product


@router.put("/{product_id}/batch/{batch_id}/discount", response_model=BatchDiscountOut)
def update_batch_discount(
    product_id: int,
    batch_id: int,
    payload: BatchDiscountIn,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    product = _get_product_or_404(db, product_id)
    batch = inventory_svc.find_batch(product, batch_id)
    if not batch:
        raise HTTPException(status_code=404, detail="Batch not found")

    batch.sale_discount = payload.discount
    db.commit()
    db.refresh(batch)
    return BatchDiscountOut(
        message="Discount updated successfully",
        batch=BatchOut.model_validate(batch),
    )
