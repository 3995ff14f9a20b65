from typing import Optional
from pydantic import BaseModel, ConfigDict

from pinee.models.enums import CategoryType

class CategoryCreate(BaseModel):
    name: str
    type: CategoryType
    icon: str = "tag"
    color: str = "gray"

class CategoryRead(BaseModel):
    id: Optional[str] = None
    name: str
    type: CategoryType
    icon: str
    color: str
    is_system: bool = False
    is_default: bool = False
    user_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
