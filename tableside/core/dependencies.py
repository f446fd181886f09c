"""
Caller dependencies for FastAPI
"""

from fastapi import Depends, HTTPException, Request, status
import structlog

from tableside.core.config import get_settings
from tableside.core.database import get_session
from tableside.core.permissions import Permission, ensure_permission
from tableside.services.storage import Storage
from tableside.services.table_views import OccupancyBoard, occupancy_board

logger = structlog.get_logger(__name__)
settings = get_settings()


async def get_user_role(request: Request) -> str:
    """Get caller role from the role header set by the auth gateway"""
    role = request.headers.get(settings.ROLE_HEADER)
    if not role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {settings.ROLE_HEADER} header",
        )
    return role.lower()


def require_permission(required_permission: Permission):
    """Dependency factory to check permissions"""
    async def check_permission(role: str = Depends(get_user_role)) -> str:
        ensure_permission(role, required_permission)
        return role
    return check_permission


def get_storage(session=Depends(get_session)) -> Storage:
    """Storage bound to the request's database session"""
    return Storage(session)


def get_occupancy_board() -> OccupancyBoard:
    """Live occupancy board fed by order events"""
    return occupancy_board
