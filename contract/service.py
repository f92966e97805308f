import logging
import re
from datetime import date
from typing import Optional, List, Tuple
from sqlalchemy.orm import Session, undefer
from sqlalchemy import select, func, update
from fastapi import HTTPException

from company.models import CompanySettings
from employee.models import Employee
from .models import Contract, ContractTemplate
from .matching import VariableResolver
from .renderer import RenderResult, find_placeholders, render_template
from .schema import ContractGenerateRequest
from .variables import VARIABLE_KEYS, ContractTerms, build_contract_variables

logger = logging.getLogger("staffdesk.contract")

NO_ACTIVE_TEMPLATE = "No active contract template found. Please upload a template first."

# ---- templates ----

def get_templates(db: Session, *, company_id: int) -> List[ContractTemplate]:
    stmt = (
        select(ContractTemplate)
        .where(ContractTemplate.company_id == company_id)
        .order_by(ContractTemplate.name.asc(), ContractTemplate.version.desc())
    )
    return list(db.scalars(stmt))

def get_template_for_company(db: Session, template_id: int, company_id: int, *, with_content: bool = False) -> Optional[ContractTemplate]:
    stmt = select(ContractTemplate).where(ContractTemplate.id == template_id, ContractTemplate.company_id == company_id)
    if with_content:
        stmt = stmt.options(undefer(ContractTemplate.file_content))
    return db.scalars(stmt).first()

def get_active_template(db: Session, company_id: int) -> Optional[ContractTemplate]:
    stmt = (
        select(ContractTemplate)
        .options(undefer(ContractTemplate.file_content))
        .where(ContractTemplate.company_id == company_id, ContractTemplate.is_active.is_(True))
    )
    return db.scalars(stmt).first()

def create_template(
    db: Session,
    *,
    company_id: int,
    name: str,
    file_name: str,
    content: bytes,
    uploaded_by: str,
    description: Optional[str] = None,
) -> ContractTemplate:
    """New version of the named template. The company's first template starts active."""
    latest = db.scalar(
        select(func.max(ContractTemplate.version)).where(
            ContractTemplate.company_id == company_id, ContractTemplate.name == name
        )
    )
    has_any = db.scalar(
        select(func.count()).select_from(ContractTemplate).where(ContractTemplate.company_id == company_id)
    )
    row = ContractTemplate(
        company_id=company_id,
        name=name,
        file_name=file_name,
        file_content=content,
        file_size=len(content),
        description=description,
        version=(latest or 0) + 1,
        is_active=not has_any,
        uploaded_by=uploaded_by,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("stored template %s v%s for company %s (%d bytes)", name, row.version, company_id, row.file_size)
    return row

def activate_template(db: Session, template: ContractTemplate) -> ContractTemplate:
    db.execute(
        update(ContractTemplate)
        .where(ContractTemplate.company_id == template.company_id, ContractTemplate.id != template.id)
        .values(is_active=False)
    )
    template.is_active = True
    db.commit()
    db.refresh(template)
    return template

def delete_template(db: Session, template: ContractTemplate) -> None:
    if template.is_active:
        others = db.scalar(
            select(func.count()).select_from(ContractTemplate).where(
                ContractTemplate.company_id == template.company_id, ContractTemplate.id != template.id
            )
        )
        if others:
            raise HTTPException(status_code=409, detail="activate another template before deleting the active one")
    db.delete(template)
    db.commit()

def template_variables(template: ContractTemplate) -> list[dict]:
    resolver = VariableResolver(VARIABLE_KEYS)
    return [{"placeholder": p, "key": resolver.resolve(p)} for p in find_placeholders(template.file_content)]

# ---- generation ----

def contract_file_name(employee: Employee) -> str:
    def clean(part: str) -> str:
        return re.sub(r"[^A-Za-z0-9\-]+", "_", part.strip()).strip("_")
    return f"{clean(employee.first_name)}_{clean(employee.last_name)}_Contract.docx"

def generate_contract(db: Session, employee: Employee, req: ContractGenerateRequest, *, today: Optional[date] = None) -> Tuple[Contract, RenderResult]:
    if req.template_id is not None:
        template = get_template_for_company(db, req.template_id, employee.company_id, with_content=True)
        if template is None:
            raise HTTPException(status_code=404, detail="contract template not found")
    else:
        template = get_active_template(db, employee.company_id)
        if template is None:
            raise HTTPException(status_code=400, detail=NO_ACTIVE_TEMPLATE)

    settings = db.scalars(select(CompanySettings).where(CompanySettings.company_id == employee.company_id)).first()
    terms = ContractTerms(
        notice_weeks=req.notice_weeks,
        contract_date=req.contract_date,
        probation_period=req.probation_period,
        special_terms=req.special_terms,
    )
    values = build_contract_variables(employee, employee.company, settings, terms, today=today)
    result = render_template(template.file_content, values)

    contract = Contract(
        employee_id=employee.id,
        company_id=employee.company_id,
        template_id=template.id,
        template_name=template.name,
        file_name=contract_file_name(employee),
        file_content=result.content,
        notice_weeks=int(values["noticeWeeks"]) if values["noticeWeeks"] else None,
        contract_date=req.contract_date or today or date.today(),
        probation_period=values["probationPeriod"],
    )
    db.add(contract)
    db.commit()
    db.refresh(contract)
    logger.info(
        "generated contract %s for employee %s from template %s (%s, %d unresolved)",
        contract.id, employee.id, template.id, result.strategy, len(result.unresolved),
    )
    return contract, result

# ---- contracts ----

def get_contracts(db: Session, *, company_id: int) -> List[Contract]:
    stmt = select(Contract).where(Contract.company_id == company_id).order_by(Contract.generated_at.desc(), Contract.id.desc())
    return list(db.scalars(stmt))

def get_employee_contracts(db: Session, employee_id: int) -> List[Contract]:
    stmt = select(Contract).where(Contract.employee_id == employee_id).order_by(Contract.generated_at.desc(), Contract.id.desc())
    return list(db.scalars(stmt))

def get_contract_for_company(db: Session, contract_id: int, company_id: int, *, with_content: bool = False) -> Optional[Contract]:
    stmt = select(Contract).where(Contract.id == contract_id, Contract.company_id == company_id)
    if with_content:
        stmt = stmt.options(undefer(Contract.file_content))
    return db.scalars(stmt).first()

def update_contract_status(db: Session, contract: Contract, status: str) -> Contract:
    contract.status = status
    db.commit()
    db.refresh(contract)
    return contract

def delete_contract(db: Session, contract: Contract) -> None:
    db.delete(contract)
    db.commit()
