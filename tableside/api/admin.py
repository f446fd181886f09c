"""
Admin dashboard endpoints
"""

from fastapi import APIRouter, Depends

from tableside.core.dependencies import get_storage, require_permission
from tableside.core.permissions import Permission
from tableside.schemas.views import DashboardStats
from tableside.services.storage import Storage

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    restaurant_id: int,
    role: str = Depends(require_permission(Permission.REPORTS_VIEW)),
    storage: Storage = Depends(get_storage),
):
    """Today's order counts, occupancy and revenue"""
    return storage.compute_stats(restaurant_id)
