"""
FastAPI Application — CCJB Compliance.

Architecture:
  - PostgreSQL (prod) / SQLite (dev) via SQLAlchemy
  - JWT do provedor de autenticação hospedado → UserSession
  - Consulta pública de CNPJ (CNPJá) para pré-preencher cadastros
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes.companies import router as companies_router
from src.api.routes.notifications import router as notifications_router
from src.api.routes.profile import router as profile_router
from src.api.routes.review import router as review_router
from src.api.routes.tasks import router as tasks_router
from src.config.logging_config import configure_logging
from src.config.settings import get_settings
from src.core.exceptions import (
    AuthorshipError,
    ComplianceError,
    ConstraintConflict,
    NotAuthenticatedError,
    RecordNotFoundError,
    RemoteStoreError,
    ValidationError,
)
from src.infrastructure.db.database import init_db

logger = logging.getLogger(__name__)

# Mais específico primeiro: RecordNotFound/ConstraintConflict herdam de RemoteStoreError
ERROR_STATUS = [
    (ValidationError, 422),
    (NotAuthenticatedError, 401),
    (AuthorshipError, 403),
    (RecordNotFoundError, 404),
    (ConstraintConflict, 409),
    (RemoteStoreError, 503),
]


def status_for(exc: ComplianceError) -> int:
    for exc_cls, status in ERROR_STATUS:
        if isinstance(exc, exc_cls):
            return status
    return 400


app = FastAPI(
    title="CCJB Compliance",
    description="Company and legal-representative review workflow with tasks and notifications.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(companies_router, prefix="/api/v1", tags=["Companies"])
app.include_router(review_router, prefix="/api/v1", tags=["Review"])
app.include_router(tasks_router, prefix="/api/v1", tags=["Tasks"])
app.include_router(notifications_router, prefix="/api/v1", tags=["Notifications"])
app.include_router(profile_router, prefix="/api/v1", tags=["Profile"])


@app.exception_handler(ComplianceError)
async def compliance_error_handler(request: Request, exc: ComplianceError):
    status = status_for(exc)
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=status, content={"code": exc.code, "detail": exc.message})


# ── Startup ──
@app.on_event("startup")
async def startup():
    settings = get_settings()
    configure_logging(settings.log_level)
    init_db()
    logger.info(f"CCJB Compliance API ready [{settings.env}]")


@app.get("/health")
async def health():
    return {"status": "ok", "service": "ccjb-compliance"}


def run():
    """Entry point: ccjb-api."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("src.api.main:app", host=settings.api_host, port=settings.api_port, reload=settings.debug)


if __name__ == "__main__":
    run()
