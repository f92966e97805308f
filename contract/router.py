import logging
import os
import re
from typing import Optional
from urllib.parse import quote
from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from sqlalchemy.orm import Session

from core.config_loader import settings
from core.database import get_db
from authz.deps import require_company_access, require_permission
from authz.permissions import Permission
from employee.service import get_employee_for_company
from .renderer import TemplateRenderError
from .schema import (
    ContractTemplateSchema,
    TemplateVariableSchema,
    ContractSchema,
    ContractGenerateRequest,
    ContractStatusUpdate,
)
from . import service

logger = logging.getLogger("staffdesk.contract")

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
UNRESOLVED_HEADER = "X-Unresolved-Placeholders"

template_router = APIRouter(tags=["Contract templates"])
contract_router = APIRouter(tags=["Contracts"])


def _content_disposition(file_name: str) -> str:
    # headers are latin-1; non-ASCII names travel in filename* (RFC 5987)
    stem, ext = os.path.splitext(file_name)
    fallback = (re.sub(r"[^A-Za-z0-9._\- ]+", "", stem).strip() or "document") + re.sub(r"[^A-Za-z0-9.]+", "", ext)
    disposition = f'attachment; filename="{fallback}"'
    if fallback != file_name:
        disposition += f"; filename*=UTF-8''{quote(file_name)}"
    return disposition

def _attachment(content: bytes, file_name: str) -> Response:
    return Response(
        content=content,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": _content_disposition(file_name)},
    )

# ---- templates ----

@template_router.get("/companies/{company_id}/contract-templates", response_model=list[ContractTemplateSchema])
def list_templates(
    company_id: int,
    db: Session = Depends(get_db),
    _user=Depends(require_company_access),
    _perm=Depends(require_permission(Permission.view_templates)),
    ):
    return service.get_templates(db, company_id=company_id)

# Upload a .docx template
@template_router.post("/companies/{company_id}/contract-templates", response_model=ContractTemplateSchema, status_code=status.HTTP_201_CREATED)
async def upload_template(
    company_id: int,
    file: UploadFile = File(...),
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    user=Depends(require_company_access),
    _perm=Depends(require_permission(Permission.manage_templates)),
    ):
    file_name = os.path.basename((file.filename or "").replace("\\", "/"))
    file_name = re.sub(r'[\x00-\x1f"]', "", file_name).strip()
    if not file_name.lower().endswith(".docx"):
        raise HTTPException(status_code=400, detail="only .docx templates are supported")
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="uploaded file is empty")
    if len(content) > settings.MAX_TEMPLATE_SIZE_BYTES:
        raise HTTPException(status_code=413, detail="template exceeds maximum size")
    return service.create_template(
        db,
        company_id=company_id,
        name=(name or "").strip() or os.path.splitext(file_name)[0],
        file_name=file_name,
        content=content,
        description=description,
        uploaded_by=f"{user.first_name} {user.last_name}".strip() or user.email,
    )

def _template_or_404(db: Session, template_id: int, company_id: int, with_content: bool = False):
    obj = service.get_template_for_company(db, template_id, company_id, with_content=with_content)
    if not obj:
        raise HTTPException(status_code=404, detail="contract template not found")
    return obj

@template_router.get("/contract-templates/{template_id}", response_model=ContractTemplateSchema)
def template_detail(template_id: int, db: Session = Depends(get_db), user=Depends(require_permission(Permission.view_templates))):
    return _template_or_404(db, template_id, user.company_id)

@template_router.get("/contract-templates/{template_id}/download")
def template_download(template_id: int, db: Session = Depends(get_db), user=Depends(require_permission(Permission.view_templates))):
    obj = _template_or_404(db, template_id, user.company_id, with_content=True)
    return _attachment(obj.file_content, obj.file_name)

# Placeholders in the template and what each resolves to
@template_router.get("/contract-templates/{template_id}/variables", response_model=list[TemplateVariableSchema])
def template_variables(template_id: int, db: Session = Depends(get_db), user=Depends(require_permission(Permission.view_templates))):
    obj = _template_or_404(db, template_id, user.company_id, with_content=True)
    return service.template_variables(obj)

@template_router.post("/contract-templates/{template_id}/activate", response_model=ContractTemplateSchema)
def template_activate(template_id: int, db: Session = Depends(get_db), user=Depends(require_permission(Permission.manage_templates))):
    obj = _template_or_404(db, template_id, user.company_id)
    return service.activate_template(db, obj)

@template_router.delete("/contract-templates/{template_id}")
def template_delete(template_id: int, db: Session = Depends(get_db), user=Depends(require_permission(Permission.manage_templates))):
    obj = _template_or_404(db, template_id, user.company_id)
    service.delete_template(db, obj)
    return {"message": "contract template deleted"}

# ---- contracts ----

# Generate and download a contract for an employee
@contract_router.post("/employees/{employee_id}/contract")
def generate_contract(
    employee_id: int,
    payload: Optional[ContractGenerateRequest] = None,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.generate_contracts)),
    ):
    employee = get_employee_for_company(db, employee_id, user.company_id)
    if not employee:
        raise HTTPException(status_code=404, detail="employee not found")
    try:
        contract, result = service.generate_contract(db, employee, payload or ContractGenerateRequest())
    except TemplateRenderError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    except HTTPException:
        raise
    except Exception:
        db.rollback()
        logger.exception("contract generation failed for employee %s", employee_id)
        raise HTTPException(status_code=500, detail="failed to generate contract")
    response = _attachment(contract.file_content, contract.file_name)
    if result.unresolved:
        # placeholders left in the document, percent-encoded to stay latin-1
        response.headers[UNRESOLVED_HEADER] = ",".join(quote(name, safe="") for name in result.unresolved)
    return response

@contract_router.get("/employees/{employee_id}/contracts", response_model=list[ContractSchema])
def employee_contracts(employee_id: int, db: Session = Depends(get_db), user=Depends(require_permission(Permission.view_contracts))):
    if not get_employee_for_company(db, employee_id, user.company_id):
        raise HTTPException(status_code=404, detail="employee not found")
    return service.get_employee_contracts(db, employee_id)

@contract_router.get("/companies/{company_id}/contracts", response_model=list[ContractSchema])
def list_contracts(
    company_id: int,
    db: Session = Depends(get_db),
    _user=Depends(require_company_access),
    _perm=Depends(require_permission(Permission.view_contracts)),
    ):
    return service.get_contracts(db, company_id=company_id)

def _contract_or_404(db: Session, contract_id: int, company_id: int, with_content: bool = False):
    obj = service.get_contract_for_company(db, contract_id, company_id, with_content=with_content)
    if not obj:
        raise HTTPException(status_code=404, detail="contract not found")
    return obj

@contract_router.get("/contracts/{contract_id}", response_model=ContractSchema)
def contract_detail(contract_id: int, db: Session = Depends(get_db), user=Depends(require_permission(Permission.view_contracts))):
    return _contract_or_404(db, contract_id, user.company_id)

@contract_router.get("/contracts/{contract_id}/download")
def contract_download(contract_id: int, db: Session = Depends(get_db), user=Depends(require_permission(Permission.view_contracts))):
    obj = _contract_or_404(db, contract_id, user.company_id, with_content=True)
    return _attachment(obj.file_content, obj.file_name)

@contract_router.patch("/contracts/{contract_id}", response_model=ContractSchema)
def contract_patch(
    contract_id: int,
    payload: ContractStatusUpdate,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.manage_contracts)),
    ):
    obj = _contract_or_404(db, contract_id, user.company_id)
    return service.update_contract_status(db, obj, payload.status.value)

@contract_router.delete("/contracts/{contract_id}")
def contract_delete(contract_id: int, db: Session = Depends(get_db), user=Depends(require_permission(Permission.delete_contracts))):
    obj = _contract_or_404(db, contract_id, user.company_id)
    service.delete_contract(db, obj)
    return {"message": "contract deleted"}
