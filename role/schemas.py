from typing import Optional
from pydantic import BaseModel, ConfigDict

class RoleSchema(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    level: int
    permissions: list[str]
    model_config = ConfigDict(from_attributes=True)
