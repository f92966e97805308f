from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .models import JobRoleStatus

class JobRoleSchema(BaseModel):
    id: int
    department_id: int
    title: str
    job_id: str
    description: Optional[str] = None
    status: JobRoleStatus
    assigned_employee_id: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)

# PUBLIC payload, what clients send
class JobRoleCreatePayload(BaseModel):
    title: str = Field(..., min_length=1)
    job_id: str = Field(..., min_length=1)
    description: Optional[str] = None
    assigned_employee_id: Optional[int] = None
    model_config = ConfigDict(extra="forbid")


# INTERNAL DTO for the service
class JobRoleCreate(BaseModel):
    department_id: int
    title: str
    job_id: str
    description: Optional[str] = None
    assigned_employee_id: Optional[int] = None


class JobRoleUpdate(BaseModel):
    title: Optional[str] = None
    job_id: Optional[str] = None
    description: Optional[str] = None
    assigned_employee_id: Optional[int] = None
    model_config = ConfigDict(extra="forbid")
