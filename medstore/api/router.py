# medstore/api/router.py
from fastapi import APIRouter

from medstore.api import (
    routes_auth,
    routes_customers,
    routes_dashboard,
    routes_products,
    routes_purchase_orders,
    routes_purchases,
    routes_returns,
    routes_search,
    routes_suppliers,
    routes_transactions,
)

api_router = APIRouter()

# Core
api_router.include_router(routes_auth.router)

# Catalog
api_router.include_router(routes_products.router)
api_router.include_router(routes_suppliers.router)
api_router.include_router(routes_customers.router)

# Ledger
api_router.include_router(routes_purchases.router)
api_router.include_router(routes_purchase_orders.router)
api_router.include_router(routes_transactions.router)
api_router.include_router(routes_returns.router)

# Overview
api_router.include_router(routes_dashboard.router)
api_router.include_router(routes_search.router)
