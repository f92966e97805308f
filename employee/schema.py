from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from company.schema import CompanySchema


class EmergencyContact(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    relationship: Optional[str] = None


class EmploymentSchema(BaseModel):
    id: int
    employee_id: int
    company_id: int
    job_title: str
    department: str
    manager: Optional[str] = None
    employment_status: str
    base_salary: Optional[Decimal] = None
    pay_frequency: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    location: Optional[str] = None
    weekly_hours: Optional[str] = None
    payment_method: Optional[str] = None
    tax_code: Optional[str] = None
    benefits: Optional[list[str]] = None
    status: str
    status_change_date: Optional[date] = None
    status_change_manager: Optional[str] = None
    status_change_reason: Optional[str] = None
    status_change_notes: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class EmployeeSchema(BaseModel):
    id: int
    company_id: int
    employee_code: Optional[str] = None
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    national_insurance_number: Optional[str] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    emergency_contact: Optional[EmergencyContact] = None
    passport_number: Optional[str] = None
    passport_issue_date: Optional[date] = None
    passport_expiry_date: Optional[date] = None
    visa_issue_date: Optional[date] = None
    visa_expiry_date: Optional[date] = None
    visa_category: Optional[str] = None
    dbs_certificate_number: Optional[str] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class EmployeeListItem(EmployeeSchema):
    employment: Optional[EmploymentSchema] = None


class EmployeeDetailSchema(EmployeeSchema):
    employment: Optional[EmploymentSchema] = None
    company: CompanySchema


# onboarding form, employment half
class EmploymentCreatePayload(BaseModel):
    job_title: str = Field(..., min_length=1)
    department: str = Field(..., min_length=1)
    manager: Optional[str] = None
    employment_status: str = Field(..., min_length=1)
    base_salary: Decimal = Field(..., ge=0)
    pay_frequency: str = Field(..., min_length=1)
    start_date: date
    end_date: Optional[date] = None
    location: str = Field(..., min_length=1)
    weekly_hours: Optional[str] = None
    payment_method: Optional[str] = None
    tax_code: Optional[str] = None
    benefits: list[str] = Field(default_factory=list)
    status: str = "active"
    model_config = ConfigDict(extra="forbid")


# PUBLIC payload, what the onboarding form sends
class EmployeeCreatePayload(BaseModel):
    company_id: int
    employee_code: Optional[str] = None
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    national_insurance_number: Optional[str] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    emergency_contact: Optional[EmergencyContact] = None
    passport_number: Optional[str] = None
    passport_issue_date: Optional[date] = None
    passport_expiry_date: Optional[date] = None
    visa_issue_date: Optional[date] = None
    visa_expiry_date: Optional[date] = None
    visa_category: Optional[str] = None
    dbs_certificate_number: Optional[str] = None
    employment: EmploymentCreatePayload
    model_config = ConfigDict(extra="forbid")


class EmploymentUpdate(BaseModel):
    job_title: Optional[str] = None
    department: Optional[str] = None
    manager: Optional[str] = None
    employment_status: Optional[str] = None
    base_salary: Optional[Decimal] = Field(None, ge=0)
    pay_frequency: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Optional[str] = None
    weekly_hours: Optional[str] = None
    payment_method: Optional[str] = None
    tax_code: Optional[str] = None
    benefits: Optional[list[str]] = None
    model_config = ConfigDict(extra="forbid")


class EmployeeUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    national_insurance_number: Optional[str] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    emergency_contact: Optional[EmergencyContact] = None
    passport_number: Optional[str] = None
    passport_issue_date: Optional[date] = None
    passport_expiry_date: Optional[date] = None
    visa_issue_date: Optional[date] = None
    visa_expiry_date: Optional[date] = None
    visa_category: Optional[str] = None
    dbs_certificate_number: Optional[str] = None
    employment: Optional[EmploymentUpdate] = None
    model_config = ConfigDict(extra="forbid")


class StatusChangeValue(str, Enum):
    active = "active"
    suspended = "suspended"
    terminated = "terminated"


class EmploymentStatusChange(BaseModel):
    status: StatusChangeValue
    status_date: date
    status_manager: str = Field(..., min_length=1)
    status_reason: str = Field(..., min_length=1)
    status_notes: Optional[str] = None
    model_config = ConfigDict(extra="forbid")
