from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from jobrole.schemas import JobRoleSchema

class DepartmentSchema(BaseModel):
    id: int
    company_id: int
    name: str
    department_code: Optional[str] = None
    description: Optional[str] = None
    manager_id: Optional[int] = None
    is_active: bool = True
    model_config = ConfigDict(from_attributes=True)

# PUBLIC payload, what clients send
class DepartmentCreatePayload(BaseModel):
    name: str = Field(..., min_length=1)
    department_code: Optional[str] = None
    description: Optional[str] = None
    manager_id: Optional[int] = None
    model_config = ConfigDict(extra="forbid")

# INTERNAL DTO for the service
class DepartmentCreate(BaseModel):
    company_id: int
    name: str
    department_code: Optional[str] = None
    description: Optional[str] = None
    manager_id: Optional[int] = None

class DepartmentUpdate(BaseModel):
    name: Optional[str] = None
    department_code: Optional[str] = None
    description: Optional[str] = None
    manager_id: Optional[int] = None
    is_active: Optional[bool] = None
    model_config = ConfigDict(extra="forbid")

class DepartmentDetailsSchema(DepartmentSchema):
    job_roles: list[JobRoleSchema] = []
    vacant_count: int = 0
    filled_count: int = 0
