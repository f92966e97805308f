from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

class CompanySchema(BaseModel):
    id: int
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    company_number: Optional[str] = None
    setup_completed: bool = False
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

# what clients send
class CompanyCreatePayload(BaseModel):
    name: str = Field(..., min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    company_number: Optional[str] = None
    model_config = ConfigDict(extra="forbid")

class CompanyUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    company_number: Optional[str] = None
    model_config = ConfigDict(extra="forbid")

class CompanySettingsSchema(BaseModel):
    default_notice_period_weeks: int
    working_hours_per_week: Decimal
    working_days_per_week: int
    leave_entitlement_days: int
    probation_period_months: int
    public_holidays: Optional[list[str]] = None
    currency: str
    timezone: str
    model_config = ConfigDict(from_attributes=True)

class CompanySettingsUpdate(BaseModel):
    default_notice_period_weeks: Optional[int] = Field(None, ge=0, le=52)
    working_hours_per_week: Optional[Decimal] = Field(None, gt=0, le=100)
    working_days_per_week: Optional[int] = Field(None, ge=1, le=7)
    leave_entitlement_days: Optional[int] = Field(None, ge=0, le=365)
    probation_period_months: Optional[int] = Field(None, ge=0, le=24)
    public_holidays: Optional[list[str]] = None
    currency: Optional[str] = None
    timezone: Optional[str] = None
    model_config = ConfigDict(extra="forbid")

class SetupDepartment(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None

# company setup wizard, all in one go
class CompanySetupPayload(BaseModel):
    company: CompanyUpdate = Field(default_factory=CompanyUpdate)
    settings: CompanySettingsUpdate = Field(default_factory=CompanySettingsUpdate)
    departments: list[SetupDepartment] = Field(default_factory=list)
    model_config = ConfigDict(extra="forbid")

class CompanyDetailsSchema(BaseModel):
    company: CompanySchema
    settings: Optional[CompanySettingsSchema] = None
    department_count: int
    employee_count: int
    user_count: int

class CompanyStatsSchema(BaseModel):
    total_employees: int
    active_contracts: int
    pending_onboarding: int
    contract_renewals: int
