"""
Routes: /notifications — caixa do usuário logado.
"""

from fastapi import APIRouter, Depends, Response

from src.api.dependencies import Container, current_session, get_container
from src.api.schemas.responses import CountResponse, NotificationResponse, UnreadNotificationsResponse
from src.core.entities.user import UserSession

router = APIRouter(prefix="/notifications")


@router.get("", response_model=list[NotificationResponse])
def list_notifications(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.notifications.list_notifications(session)


@router.get("/unread", response_model=UnreadNotificationsResponse)
def unread_notifications(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    unread = container.notifications.unread(session)
    return UnreadNotificationsResponse(
        count=len(unread),
        notifications=[NotificationResponse.model_validate(n) for n in unread],
    )


@router.post("/read-all", response_model=CountResponse)
def mark_all_read(
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return CountResponse(count=container.notifications.mark_all_read(session))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    return container.notifications.mark_read(session, notification_id)


@router.delete("/{notification_id}", status_code=204)
def delete_notification(
    notification_id: str,
    session: UserSession | None = Depends(current_session),
    container: Container = Depends(get_container),
):
    container.notifications.delete(session, notification_id)
    return Response(status_code=204)
