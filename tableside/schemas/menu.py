"""
Menu item schemas
"""

from sqlmodel import SQLModel
from typing import Optional
import uuid


class MenuItemCreate(SQLModel):
    restaurant_id: int
    name: str
    description: str = ""
    price: int
    category: str = "main_course"
    available: bool = True
    image_url: Optional[str] = None


class MenuItemRead(SQLModel):
    id: uuid.UUID
    restaurant_id: int
    name: str
    description: str
    price: int
    category: str
    available: bool
    image_url: Optional[str] = None
