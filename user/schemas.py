from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, ConfigDict, Field

from role.schemas import RoleSchema

class UserSchema(BaseModel):
    id: int
    company_id: int
    email: str
    first_name: str
    last_name: str
    is_active: bool
    email_verified: bool
    role_id: int
    role: Optional[RoleSchema] = None
    department_id: Optional[int] = None
    employee_id: Optional[int] = None
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

class UserCreatePayload(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    role_id: int
    department_id: Optional[int] = None
    employee_id: Optional[int] = None
    model_config = ConfigDict(extra="forbid")

class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role_id: Optional[int] = None
    department_id: Optional[int] = None
    employee_id: Optional[int] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(None, min_length=8)
    model_config = ConfigDict(extra="forbid")

class UserStatusUpdate(BaseModel):
    is_active: bool
    model_config = ConfigDict(extra="forbid")
