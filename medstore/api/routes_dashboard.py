# FILE: medstore/api/routes_dashboard.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from medstore.api.deps import current_user as auth_current_user, get_db
from medstore.models.user import User
from medstore.schemas.dashboard import DashboardAlertsOut, DashboardStatsOut
from medstore.services.dashboard_service import build_dashboard_alerts, build_dashboard_stats
from medstore.utils.timezone import now_local

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStatsOut)
def dashboard_stats(
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return build_dashboard_stats(db, now_local())


@router.get("/alerts", response_model=DashboardAlertsOut)
def dashboard_alerts(
    db: Session = Depends(get_db),
    me: User = Depends(auth_current_user),
):
    return build_dashboard_alerts(db, now_local())
