# medstore/api/routes_search.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from medstore.api.deps import current_user as auth_current_user, get_db
from medstore.models.user import User
from medstore.schemas.search import SearchHit
from medstore.services.catalog_query import global_search

router = APIRouter(prefix="/search", tags=["Search"])


@router.get("", response_model=List[SearchHit])
def search_everything(
    q: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return global_search(db, q)
