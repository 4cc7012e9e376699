"""
Routes: revisão do representante legal e edição de fluxos, notas e
pareceres pelo id (só o autor altera ou remove).
"""

from fastapi import APIRouter, Depends, Response

from src.api.dependencies import Container, current_session, get_container
from src.api.schemas.requests import (
    FlowRequest,
    FlowUpdateRequest,
    NoteRequest,
    NoteUpdateRequest,
    OpinionRequest,
    OpinionUpdateRequest,
    RepresentativeUpdateRequest,
)
from src.api.schemas.responses import (
    FlowResponse,
    NoteResponse,
    OpinionResponse,
    RepresentativeResponse,
)
from src.core.entities.company import FlowInput, NoteInput, OpinionInput, Subject
from src.core.entities.user import UserSession
from src.core.use_cases.validators import require_session

router = APIRouter()


# ── Representante legal ────────────────────────────────────

@router.get("/representatives/{representative_id}", response_model=RepresentativeResponse)
def get_representative(
    representative_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    require_session(session)
    return container.companies.get_representative(representative_id)


@router.patch("/representatives/{representative_id}", response_model=RepresentativeResponse)
def update_representative(
    representative_id: str,
    body: RepresentativeUpdateRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.update_representative(
        session, representative_id, body.model_dump(exclude_unset=True)
    )


@router.post("/representatives/{representative_id}/flows", response_model=FlowResponse, status_code=201)
def attach_representative_flow(
    representative_id: str,
    body: FlowRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.attach_flow(
        session, Subject.representative(representative_id), FlowInput(**body.model_dump())
    )


@router.post("/representatives/{representative_id}/notes", response_model=NoteResponse, status_code=201)
def attach_representative_note(
    representative_id: str,
    body: NoteRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.attach_note(
        session, Subject.representative(representative_id), NoteInput(**body.model_dump())
    )


@router.put("/representatives/{representative_id}/opinion", response_model=OpinionResponse)
def set_representative_opinion(
    representative_id: str,
    body: OpinionRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    """Parecer do representante; risco Crítico não é aceito."""
    return container.companies.set_opinion(
        session, Subject.representative(representative_id), OpinionInput(**body.model_dump())
    )


# ── Fluxos / notas / pareceres ─────────────────────────────

@router.patch("/flows/{flow_id}", response_model=FlowResponse)
def update_flow(
    flow_id: str,
    body: FlowUpdateRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.update_flow(session, flow_id, body.model_dump(exclude_unset=True))


@router.delete("/flows/{flow_id}", status_code=204)
def delete_flow(
    flow_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    container.companies.delete_flow(session, flow_id)
    return Response(status_code=204)


@router.patch("/notes/{note_id}", response_model=NoteResponse)
def update_note(
    note_id: str,
    body: NoteUpdateRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.update_note(session, note_id, body.model_dump(exclude_unset=True))


@router.delete("/notes/{note_id}", status_code=204)
def delete_note(
    note_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    container.companies.delete_note(session, note_id)
    return Response(status_code=204)


@router.patch("/opinions/{opinion_id}", response_model=OpinionResponse)
def update_opinion(
    opinion_id: str,
    body: OpinionUpdateRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.companies.update_opinion(session, opinion_id, body.model_dump(exclude_unset=True))


@router.delete("/opinions/{opinion_id}", status_code=204)
def delete_opinion(
    opinion_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    container.companies.delete_opinion(session, opinion_id)
    return Response(status_code=204)
