"""
Menu items API endpoints
"""

from fastapi import APIRouter, Depends, status
from typing import List, Optional

from tableside.core.dependencies import get_storage, require_permission
from tableside.core.permissions import Permission
from tableside.schemas.menu import MenuItemCreate, MenuItemRead
from tableside.services.storage import Storage

router = APIRouter()


@router.post("/", response_model=MenuItemRead, status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    data: MenuItemCreate,
    role: str = Depends(require_permission(Permission.MENU_EDIT)),
    storage: Storage = Depends(get_storage),
):
    """Create a menu item; price is in cents"""
    return MenuItemRead.model_validate(storage.create_menu_item(data))


@router.get("/", response_model=List[MenuItemRead])
async def list_menu_items(
    restaurant_id: int,
    category: Optional[str] = None,
    storage: Storage = Depends(get_storage),
):
    """Public menu listing"""
    return [
        MenuItemRead.model_validate(item)
        for item in storage.list_menu_items(restaurant_id, category)
    ]
