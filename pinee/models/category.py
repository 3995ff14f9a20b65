from typing import Optional
from uuid import uuid4

from sqlmodel import SQLModel, Field

from pinee.models.enums import CategoryType


class Category(SQLModel, table=True):
    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    user_id: str = Field(index=True)
    name: str
    type: CategoryType = Field(default=CategoryType.expense)
    icon: str = "tag"
    color: str = "gray"
    is_system: bool = Field(default=False)
    is_default: bool = Field(default=False)
