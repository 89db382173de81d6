# FILE: medstore/schemas/inventory.py
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, StringConstraints, computed_field, field_validator
from typing_extensions import Annotated

from medstore.models.inventory import DrugSchedule
from medstore.schemas.common import CamelModel, not_null
from medstore.services import stock as stock_svc
from medstore.services.drug_schedules import get_schedule_meta, normalize_schedule

Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Percent = Annotated[float, Field(ge=0, le=100)]
Amount = Annotated[float, Field(ge=0)]


# ---------- Batches ----------


class BatchIn(CamelModel):
    batch_number: Text
    expiry_date: date
    stock: int = Field(0, ge=0)
    mrp: Amount = 0
    price: Amount = 0
    discount: Percent = 0
    sale_discount: Percent = 0


class BatchUpsert(BatchIn):
    # id present -> update that batch, absent -> new batch
    id: Optional[int] = None


class BatchOut(BatchIn):
    id: int
    created_at: datetime
    updated_at: datetime


class BatchStockIn(CamelModel):
    stock: int = Field(..., ge=0)


class BatchDiscountIn(CamelModel):
    discount: Percent


class BatchDiscountOut(CamelModel):
    message: str
    batch: BatchOut


# ---------- Products ----------


class ProductBase(CamelModel):
    hsn_code: Text
    name: Text
    pack: Text
    manufacturer: Text
    salts: Optional[str] = None
    schedule: DrugSchedule = DrugSchedule.NONE
    category: Optional[str] = None
    min_stock: int = Field(0, ge=0)
    order_later: bool = False
    is_ordered: bool = False

    @field_validator("schedule", mode="before")
    @classmethod
    def _schedule(cls, v):
        return normalize_schedule(v)


class ProductCreate(ProductBase):
    batches: List[BatchIn] = Field(default_factory=list)


class ProductUpdate(CamelModel):
    hsn_code: Optional[Text] = None
    name: Optional[Text] = None
    pack: Optional[Text] = None
    manufacturer: Optional[Text] = None
    salts: Optional[str] = None
    schedule: Optional[DrugSchedule] = None
    category: Optional[str] = None
    min_stock: Optional[int] = Field(None, ge=0)
    order_later: Optional[bool] = None
    is_ordered: Optional[bool] = None
    batches: Optional[List[BatchUpsert]] = None

    _not_null = not_null(
        "hsn_code", "name", "pack", "manufacturer",
        "min_stock", "order_later", "is_ordered",
    )

    @field_validator("schedule", mode="before")
    @classmethod
    def _schedule(cls, v):
        if v is None:
            raise ValueError("schedule cannot be null")
        return normalize_schedule(v)


class ScheduleMetaOut(CamelModel):
    code: str
    label: str
    desc: str
    requires_prescription: bool
    requires_register: bool


class ProductOut(ProductBase):
    id: int
    batches: List[BatchOut] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="totalStock")
    @property
    def total_stock(self) -> int:
        return stock_svc.total_stock(self)

    @computed_field(alias="stockStatus")
    @property
    def stock_status(self) -> str:
        return stock_svc.stock_status(self)

    @computed_field(alias="scheduleMeta")
    @property
    def schedule_meta(self) -> ScheduleMetaOut:
        return ScheduleMetaOut(**get_schedule_meta(self.schedule))


class ProductStatsOut(CamelModel):
    total_items: int
    low_stock_count: int
    out_of_stock_count: int
    total_value: float


class ProductRef(CamelModel):
    id: int
    name: str
    manufacturer: str


class ExpiringBatchOut(BatchOut):
    product: ProductRef
    days_remaining: int


# ---------- Suppliers ----------


class SupplierBase(CamelModel):
    name: Text
    address: Text
    contact: Text
    gstin: Text
    dl_number: Text
    food_license_number: Text
    default_discount: Percent = 0


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(CamelModel):
    name: Optional[Text] = None
    address: Optional[Text] = None
    contact: Optional[Text] = None
    gstin: Optional[Text] = None
    dl_number: Optional[Text] = None
    food_license_number: Optional[Text] = None
    default_discount: Optional[Percent] = None

    _not_null = not_null(
        "name", "address", "contact", "gstin",
        "dl_number", "food_license_number", "default_discount",
    )


class SupplierOut(SupplierBase):
    id: int
    created_at: datetime
    updated_at: datetime


# ---------- Customers ----------


class CustomerIn(CamelModel):
    name: Text
    phone_number: Text


class CustomerUpdate(CamelModel):
    name: Optional[Text] = None
    phone_number: Optional[Text] = None

    _not_null = not_null("name", "phone_number")


class CustomerOut(CamelModel):
    id: int
    customer_code: str
    name: str
    phone_number: str
    created_at: datetime
    updated_at: datetime
