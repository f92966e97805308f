from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from core.config_loader import settings
from core.logging_config import setup_logging

from auth.routes.auth_router import auth_router, me_router
from company.router import company_router
from role.router import role_router
from department.router import department_router
from jobrole.router import jobrole_router
from employee.router import employee_router
from user.router import user_router
from contract.router import UNRESOLVED_HEADER, template_router, contract_router
import models_bootstrap

setup_logging()

openapi_tags = [
    {
        "name": "Auth",
        "description": "Sign up, login and token refresh",
    },
    {
        "name": "Contracts",
        "description": "Contract generation from company templates",
    },
    {
        "name": "Health Checks",
        "description": "Application health checks",
    }
]

app = FastAPI(title=settings.PROJECT_NAME, openapi_tags=openapi_tags)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", UNRESOLVED_HEADER],
    )

app.include_router(auth_router)
app.include_router(me_router)
app.include_router(company_router, prefix="/api")
app.include_router(role_router, prefix="/api")
app.include_router(department_router, prefix="/api")
app.include_router(jobrole_router, prefix="/api")
app.include_router(employee_router, prefix="/api")
app.include_router(user_router, prefix="/api")
app.include_router(template_router, prefix="/api")
app.include_router(contract_router, prefix="/api")


@app.get("/health", tags=['Health Checks'])
def read_root():
    return {"health": "true"}
