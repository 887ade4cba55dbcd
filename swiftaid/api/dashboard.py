"""Admin dashboard API."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from swiftaid.core.deps import require_admin
from swiftaid.db.session import get_db
from swiftaid.models.profile import Admin
from swiftaid.schemas.driver import DashboardStats
from swiftaid.services.projection_service import dashboard_stats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
def stats(
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    """Counts, average rating, completion rate and driver utilization."""
    return dashboard_stats(db)
