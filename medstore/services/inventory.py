# FILE: medstore/services/inventory.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from medstore.models.inventory import Product, ProductBatch
from medstore.schemas.inventory import BatchIn, ProductCreate, ProductUpdate


def find_batch(product: Product, batch_id: int) -> Optional[ProductBatch]:
    for b in product.batches:
        if b.id == batch_id:
            return b
    return None


def create_product(db: Session, payload: ProductCreate) -> Product:
    data = payload.model_dump(exclude={"batches"})
    product = Product(**data)
    product.batches = [ProductBatch(**b.model_dump()) for b in payload.batches]
    db.add(product)
    return product


def add_batch(product: Product, payload: BatchIn) -> ProductBatch:
    batch = ProductBatch(**payload.model_dump())
    product.batches.append(batch)
    return batch


def apply_product_update(product: Product, payload: ProductUpdate) -> None:
    """
    Header fields are overwritten as sent.
    When ``batches`` is sent it is the full list: ids update in place,
    rows without id are appended, batches left out are removed.
    Raises ValueError if an id does not belong to this product.
    """
    data = payload.model_dump(exclude_unset=True, exclude={"batches"})
    for k, v in data.items():
        setattr(product, k, v)

    if payload.batches is None:
        return

    existing = {b.id: b for b in product.batches}
    keep = []
    for row in payload.batches:
        fields = row.model_dump(exclude={"id"})
        if row.id is None:
            keep.append(ProductBatch(**fields))
            continue
        batch = existing.get(row.id)
        if batch is None:
            raise ValueError(f"Batch {row.id} does not belong to product {product.id}")
        for k, v in fields.items():
            setattr(batch, k, v)
        keep.append(batch)
    product.batches = keep


def set_batch_stock(batch: ProductBatch, stock: int) -> None:
    if stock is None or int(stock) < 0:
        raise ValueError("Stock cannot be negative")
    batch.stock = int(stock)


def increment_batch_stock(db: Session, *, product_id: int, batch_id: int, qty: int) -> bool:
    """
    Atomic ``stock = stock + qty`` keyed by (product, batch).
    Returns False when the pair does not resolve; nothing is written then.
    """
    result = db.execute(
        update(ProductBatch)
        .where(ProductBatch.id == batch_id, ProductBatch.product_id == product_id)
        .values(stock=ProductBatch.stock + qty)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
