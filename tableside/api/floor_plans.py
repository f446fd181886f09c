"""
Floor plan API endpoints
"""

from fastapi import APIRouter, Depends, status
from typing import Dict, List
import uuid

from tableside.core.dependencies import get_storage, get_user_role, require_permission
from tableside.core.permissions import Permission
from tableside.schemas.table import (
    FloorPlanCreate, FloorPlanRead, FloorPlanUpdate, FloorPlanWithPlacements,
    TableMove, TablePlacementCreate, TablePlacementRead, TablePlacementUpdate
)
from tableside.services.storage import Storage

router = APIRouter()


@router.post("/", response_model=FloorPlanRead, status_code=status.HTTP_201_CREATED)
async def create_floor_plan(
    data: FloorPlanCreate,
    role: str = Depends(require_permission(Permission.TABLES_EDIT)),
    storage: Storage = Depends(get_storage),
):
    """Create a floor plan for one floor of a restaurant"""
    return FloorPlanRead.model_validate(storage.create_floor_plan(data))


@router.get("/", response_model=List[FloorPlanRead])
async def list_floor_plans(
    restaurant_id: int,
    role: str = Depends(get_user_role),
    storage: Storage = Depends(get_storage),
):
    return [FloorPlanRead.model_validate(plan) for plan in storage.list_floor_plans(restaurant_id)]


@router.get("/{floor_plan_id}", response_model=FloorPlanWithPlacements)
async def get_floor_plan(
    floor_plan_id: uuid.UUID,
    role: str = Depends(get_user_role),
    storage: Storage = Depends(get_storage),
):
    """Floor plan with every table placed on it"""
    floor_plan = storage.get_floor_plan(floor_plan_id)
    return FloorPlanWithPlacements(
        **FloorPlanRead.model_validate(floor_plan).model_dump(),
        placements=[
            TablePlacementRead.model_validate(placement)
            for placement in storage.list_placements(floor_plan_id)
        ],
    )


@router.patch("/{floor_plan_id}", response_model=FloorPlanRead)
async def update_floor_plan(
    floor_plan_id: uuid.UUID,
    data: FloorPlanUpdate,
    role: str = Depends(require_permission(Permission.TABLES_EDIT)),
    storage: Storage = Depends(get_storage),
):
    """Rename or resize a floor plan"""
    return FloorPlanRead.model_validate(storage.update_floor_plan(floor_plan_id, data))


@router.get("/{floor_plan_id}/audit", response_model=Dict[str, List[str]])
async def audit_floor_plan(
    floor_plan_id: uuid.UUID,
    role: str = Depends(require_permission(Permission.TABLES_EDIT)),
    storage: Storage = Depends(get_storage),
):
    """Rule violations of the stored layout, keyed by table ID"""
    report = storage.load_layout(floor_plan_id).audit()
    return {str(table_id): violations for table_id, violations in report.items()}


@router.post(
    "/{floor_plan_id}/tables",
    response_model=TablePlacementRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_table(
    floor_plan_id: uuid.UUID,
    data: TablePlacementCreate,
    role: str = Depends(require_permission(Permission.TABLES_EDIT)),
    storage: Storage = Depends(get_storage),
):
    """Place a table on the floor plan"""
    return TablePlacementRead.model_validate(storage.add_table_placement(floor_plan_id, data))


@router.put("/{floor_plan_id}/tables/{table_id}", response_model=TablePlacementRead)
async def update_table_placement(
    floor_plan_id: uuid.UUID,
    table_id: uuid.UUID,
    data: TablePlacementUpdate,
    role: str = Depends(require_permission(Permission.TABLES_EDIT)),
    storage: Storage = Depends(get_storage),
):
    """Reposition and/or resize a placed table"""
    placement = storage.update_table_placement(floor_plan_id, table_id, data)
    return TablePlacementRead.model_validate(placement)


@router.post("/{floor_plan_id}/tables/{table_id}/move", response_model=TablePlacementRead)
async def move_table(
    floor_plan_id: uuid.UUID,
    table_id: uuid.UUID,
    data: TableMove,
    role: str = Depends(require_permission(Permission.TABLES_EDIT)),
    storage: Storage = Depends(get_storage),
):
    """Nudge a table one step in a direction"""
    placement = storage.move_table(floor_plan_id, table_id, data.direction, data.step)
    return TablePlacementRead.model_validate(placement)


@router.delete("/{floor_plan_id}/tables/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_table(
    floor_plan_id: uuid.UUID,
    table_id: uuid.UUID,
    role: str = Depends(require_permission(Permission.TABLES_EDIT)),
    storage: Storage = Depends(get_storage),
):
    storage.remove_table_placement(floor_plan_id, table_id)
