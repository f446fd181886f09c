"""
Menu item model
"""

from sqlmodel import Field, SQLModel
from typing import Optional
import uuid


class MenuItem(SQLModel, table=True):
    """Item customers can order; prices are integer cents"""

    __tablename__ = "menu_items"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    restaurant_id: int = Field(index=True)

    name: str = Field(max_length=255)
    description: str = Field(default="", max_length=2000)
    price: int = Field(description="Current price in cents")
    category: str = Field(default="main_course", max_length=50, index=True)
    available: bool = Field(default=True, index=True)
    image_url: Optional[str] = Field(default=None, max_length=500, nullable=True)
