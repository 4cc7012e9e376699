"""
Routes: /companies — cadastro, quadro de status e revisão da empresa.
"""

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import Container, current_session, get_container
from src.api.schemas.requests import (
    CompanyCreateRequest,
    CompanyUpdateRequest,
    FlowRequest,
    NoteRequest,
    OpinionRequest,
    RepresentativeRequest,
    StatusRequest,
)
from src.api.schemas.responses import (
    CompanyResponse,
    CompanyStatsResponse,
    FlowResponse,
    NoteResponse,
    OpinionResponse,
    RepresentativeResponse,
)
from src.core.entities.company import (
    CompanyInput, FlowInput, NoteInput, OpinionInput, RepresentativeInput, Subject,
)
from src.core.entities.user import UserSession
from src.core.use_cases.validators import require_session

router = APIRouter(prefix="/companies")


@router.get("", response_model=list[CompanyResponse])
def list_companies(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    require_session(session)
    return container.companies.list_companies()


@router.get("/buckets", response_model=dict[str, list[CompanyResponse]])
def company_buckets(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    """todo / in-progress / completed / archived."""
    require_session(session)
    return container.companies.buckets()


@router.get("/stats", response_model=CompanyStatsResponse)
def company_stats(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    require_session(session)
    counts = container.companies.stats()
    return CompanyStatsResponse(
        todo=counts["todo"],
        in_progress=counts["in-progress"],
        completed=counts["completed"],
        archived=counts["archived"],
        total=counts["total"],
    )


@router.get("/prefill")
def prefill_company(
    cnpj: str = Query(...),
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    """Consulta pública do CNPJ; {} quando indisponível."""
    require_session(session)
    return container.prefill.execute(cnpj)


@router.post("", response_model=CompanyResponse, status_code=201)
def create_company(
    body: CompanyCreateRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.create_company(session, CompanyInput(**body.model_dump()))


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(
    company_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    require_session(session)
    return container.companies.get_company(company_id)


@router.patch("/{company_id}", response_model=CompanyResponse)
def update_company(
    company_id: str,
    body: CompanyUpdateRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.update_company(session, company_id, body.model_dump(exclude_unset=True))


@router.put("/{company_id}/status", response_model=CompanyResponse)
def change_status(
    company_id: str,
    body: StatusRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.change_status(session, company_id, body.status)


@router.post("/{company_id}/archive", response_model=CompanyResponse)
def archive_company(
    company_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.archive(session, company_id)


@router.post("/{company_id}/restore", response_model=CompanyResponse)
def restore_company(
    company_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.restore(session, company_id)


@router.put("/{company_id}/representative", response_model=RepresentativeResponse)
def attach_representative(
    company_id: str,
    body: RepresentativeRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    """Cria ou substitui o representante legal (um por empresa)."""
    return container.companies.attach_representative(
        session, company_id, RepresentativeInput(**body.model_dump())
    )


@router.post("/{company_id}/flows", response_model=FlowResponse, status_code=201)
def attach_flow(
    company_id: str,
    body: FlowRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.attach_flow(session, Subject.company(company_id), FlowInput(**body.model_dump()))


@router.post("/{company_id}/notes", response_model=NoteResponse, status_code=201)
def attach_note(
    company_id: str,
    body: NoteRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.attach_note(session, Subject.company(company_id), NoteInput(**body.model_dump()))


@router.put("/{company_id}/opinion", response_model=OpinionResponse)
def set_opinion(
    company_id: str,
    body: OpinionRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.set_opinion(
        session, Subject.company(company_id), OpinionInput(**body.model_dump())
    )
