from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .models import ContractStatus

class ContractTemplateSchema(BaseModel):
    id: int
    company_id: int
    name: str
    file_name: str
    file_size: int
    description: Optional[str] = None
    version: int
    is_active: bool
    uploaded_by: str
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

class TemplateVariableSchema(BaseModel):
    placeholder: str
    key: Optional[str] = None

class ContractSchema(BaseModel):
    id: int
    employee_id: int
    company_id: int
    template_id: Optional[int] = None
    template_name: str
    file_name: str
    notice_weeks: Optional[int] = None
    contract_date: Optional[date] = None
    probation_period: Optional[str] = None
    status: ContractStatus
    generated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

class ContractGenerateRequest(BaseModel):
    template_id: Optional[int] = None
    notice_weeks: Optional[int] = Field(None, ge=0, le=52)
    contract_date: Optional[date] = None
    probation_period: Optional[str] = None
    special_terms: Optional[str] = None
    model_config = ConfigDict(extra="forbid")

class ContractStatusUpdate(BaseModel):
    status: ContractStatus
    model_config = ConfigDict(extra="forbid")
