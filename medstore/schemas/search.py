from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel

HitType = Literal["product", "sale", "purchase", "customer", "supplier"]


class SearchHit(BaseModel):
    type: HitType
    data: Dict[str, Any]
