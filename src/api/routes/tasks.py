"""
Routes: /tasks — quadro de tarefas, lixeira e arquivo.
"""

from fastapi import APIRouter, Depends, Response

from src.api.dependencies import Container, current_session, get_container
from src.api.schemas.requests import StatusRequest, TaskCreateRequest, TaskUpdateRequest
from src.api.schemas.responses import CountResponse, TaskResponse
from src.core.entities.task import TaskInput
from src.core.entities.user import UserSession
from src.core.use_cases.validators import require_session

router = APIRouter(prefix="/tasks")


@router.get("", response_model=list[TaskResponse])
def list_tasks(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    require_session(session)
    return container.tasks.list_tasks()


@router.get("/buckets", response_model=dict[str, list[TaskResponse]])
def task_buckets(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    require_session(session)
    return container.tasks.buckets()


@router.get("/mine", response_model=list[TaskResponse])
def my_tasks(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.tasks.my_tasks(session)


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(
    body: TaskCreateRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    """Sem responsável, a tarefa fica com quem criou."""
    return container.tasks.create_task(session, TaskInput(**body.model_dump()))


@router.delete("/trash", response_model=CountResponse)
def empty_trash(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return CountResponse(count=container.tasks.empty_trash(session))


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    require_session(session)
    return container.tasks.get_task(task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    body: TaskUpdateRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.tasks.update_task(session, task_id, body.model_dump(exclude_unset=True))


@router.put("/{task_id}/status", response_model=TaskResponse)
def update_status(
    task_id: str,
    body: StatusRequest,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.tasks.update_status(session, task_id, body.status)


@router.post("/{task_id}/trash", response_model=TaskResponse)
def move_to_trash(
    task_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.tasks.move_to_trash(session, task_id)


@router.post("/{task_id}/archive", response_model=TaskResponse)
def archive_task(
    task_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.tasks.archive_task(session, task_id)


@router.post("/{task_id}/restore-from-trash", response_model=TaskResponse)
def restore_from_trash(
    task_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.tasks.restore_from_trash(session, task_id)


@router.post("/{task_id}/restore-from-archive", response_model=TaskResponse)
def restore_from_archive(
    task_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.tasks.restore_from_archive(session, task_id)


@router.delete("/{task_id}", status_code=204)
def delete_permanently(
    task_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    container.tasks.delete_permanently(session, task_id)
    return Response(status_code=204)
