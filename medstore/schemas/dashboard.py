# medstore/schemas/dashboard.py
from __future__ import annotations

from datetime import date
from typing import List

from medstore.schemas.common import CamelModel


class DashboardStatsOut(CamelModel):
    monthly_sales: float
    monthly_purchases: float
    low_stock_count: int
    expiring_soon_count: int


class LowStockAlert(CamelModel):
    name: str
    current_stock: int
    min_stock: int


class ExpiryAlert(CamelModel):
    product_name: str
    batch_number: str
    expiry_date: date
    stock: int
    days_to_expiry: int


class DashboardAlertsOut(CamelModel):
    low_stock_items: List[LowStockAlert]
    expiring_items: List[ExpiryAlert]
