# app/models/category.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict

class CategoryPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int | None = None
    name: str # Internal name, e.g. "ANIMAL"
    display_name: str
    icon: str | None = None
    hint: str | None = None
    enabled: bool = True
    predefined: bool = False
    created_at: datetime | None = None
