# FILE: medstore/api/routes_customers.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from medstore.api.deps import current_user as auth_current_user, get_db
from medstore.models.inventory import Customer
from medstore.models.ledger import Transaction
from medstore.models.user import User
from medstore.schemas.common import MessageOut
from medstore.schemas.inventory import CustomerIn, CustomerOut, CustomerUpdate
from medstore.services.catalog_query import search_customers
from medstore.services.id_gen import new_customer_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["Customers"])


def _get_customer_or_404(db: Session, customer_id: int) -> Customer:
    customer = db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


def _insert_customer(db: Session, payload: CustomerIn) -> Customer:
    """
    Codes are unique per process; another worker can still mint the same
    millisecond, so a code clash is retried once with a fresh code.
    """
    for attempt in range(2):
        customer = Customer(
            name=payload.name,
            phone_number=payload.phone_number,
            customer_code=new_customer_code(),
        )
        db.add(customer)
        try:
            db.flush()
            return customer
        except IntegrityError:
            db.rollback()
            clash = db.query(Customer.id).filter(Customer.customer_code == customer.customer_code).first()
            if attempt or not clash:
                raise
            logger.warning("Customer code %s already taken, retrying", customer.customer_code)
    raise AssertionError("unreachable")


@router.get("", response_model=List[CustomerOut])
def list_customers(
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return db.query(Customer).order_by(Customer.name.asc()).all()


@router.get("/search", response_model=List[CustomerOut])
def search(
    q: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return search_customers(db, q)


@router.post("", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
def create_or_update_customer(
    payload: CustomerIn,
    response: Response,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    """
    Phone number is the natural key: a known number only gets its name
    refreshed (200), an unknown one creates the customer (201).
    """
    customer = db.query(Customer).filter(Customer.phone_number == payload.phone_number).first()
    if customer:
        customer.name = payload.name
        response.status_code = status.HTTP_200_OK
    else:
        customer = _insert_customer(db, payload)

    db.commit()
    db.refresh(customer)
    return customer


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return _get_customer_or_404(db, customer_id)


@router.put("/{customer_id}", response_model=CustomerOut)
def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    customer = _get_customer_or_404(db, customer_id)
    data = payload.model_dump(exclude_unset=True)

    phone = data.get("phone_number")
    if phone and phone != customer.phone_number:
        taken = db.query(Customer.id).filter(Customer.phone_number == phone).first()
        if taken:
            raise HTTPException(status_code=400, detail="Phone number already registered")

    for k, v in data.items():
        setattr(customer, k, v)
    db.commit()
    db.refresh(customer)
    return customer


@router.delete("/{customer_id}", response_model=MessageOut)
def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    customer = _get_customer_or_404(db, customer_id)
    if db.query(Transaction.id).filter(Transaction.customer_id == customer_id).first():
        raise HTTPException(status_code=400, detail="Customer has transactions and cannot be deleted")
    db.delete(customer)
    db.commit()
    return MessageOut(message="Customer deleted")
