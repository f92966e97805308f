from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from role.schemas import RoleSchema

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class SignupDepartment(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None

class SignupCompany(BaseModel):
    name: str = Field(..., min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    company_number: Optional[str] = None
    departments: list[SignupDepartment] = Field(default_factory=list)

class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    company: SignupCompany
    model_config = ConfigDict(extra="forbid")

class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None

class CompanySummary(BaseModel):
    id: int
    name: str
    setup_completed: bool
    model_config = ConfigDict(from_attributes=True)

class MeSchema(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    is_active: bool
    email_verified: bool
    last_login_at: Optional[datetime] = None
    role: RoleSchema
    company: CompanySummary
    model_config = ConfigDict(from_attributes=True)

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: MeSchema
