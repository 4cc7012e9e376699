"""
Routes: /me e /users.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import Container, current_session, get_container
from src.api.schemas.requests import ProfileUpdateRequest
from src.api.schemas.responses import UserResponse
from src.core.entities.user import ProfileUpdate, UserSession
from src.core.use_cases.validators import require_session

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_profile(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.profile.get_profile(session)


@router.patch("/me", response_model=UserResponse)
def update_profile(
    body: ProfileUpdateRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.profile.update_profile(session, ProfileUpdate(**body.model_dump()))


@router.get("/users", response_model=list[UserResponse])
def list_users(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    """Usuários disponíveis para atribuição de tarefas."""
    require_session(session)
    return container.profile.list_users()
