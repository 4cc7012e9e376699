"""
Use Case: Notifications

Canal lateral de notificações. A criação é "fire-and-forget": uma
falha é registrada no log e nunca derruba a operação que a originou.
"""

import logging

from src.core.entities.task import Notification
from src.core.entities.user import UserSession
from src.core.exceptions import AuthorshipError, RemoteStoreError
from src.core.interfaces.task_store import INotificationStore
from src.core.use_cases.validators import require_session

logger = logging.getLogger(__name__)

ASSIGNMENT_TITLE = "Nova tarefa atribuída"


class NotificationUseCase:
    """Use Case: notificações do usuário logado."""

    def __init__(self, store: INotificationStore):
        self._store = store

    def notify_assignment(self, user_id: str, task_id: str, task_title: str) -> Notification | None:
        """Cria a notificação de atribuição; retorna None se falhar."""
        try:
            notification = self._store.insert_notification(
                user_id=user_id,
                task_id=task_id,
                title=ASSIGNMENT_TITLE,
                message=f"Você recebeu uma nova tarefa: {task_title}",
            )
        except RemoteStoreError as e:
            logger.warning(f"Could not notify {user_id} about task {task_id}: {e}")
            return None
        logger.info(f"Notification {notification.id} sent to {user_id} (task {task_id})")
        return notification

    def list_notifications(self, session: UserSession | None) -> list[Notification]:
        session = require_session(session)
        try:
            return self._store.list_for_user(session.user_id)
        except RemoteStoreError as e:
            logger.warning(f"Could not list notifications for {session.user_id}: {e}")
            return []

    def unread(self, session: UserSession | None) -> list[Notification]:
        session = require_session(session)
        try:
            return self._store.list_for_user(session.user_id, unread_only=True)
        except RemoteStoreError as e:
            logger.warning(f"Could not list unread notifications for {session.user_id}: {e}")
            return []

    def unread_count(self, session: UserSession | None) -> int:
        return len(self.unread(session))

    def mark_read(self, session: UserSession | None, notification_id: str) -> Notification:
        session = require_session(session)
        self._ensure_recipient(notification_id, session)
        return self._store.set_read(notification_id, True)

    def mark_all_read(self, session: UserSession | None) -> int:
        session = require_session(session)
        count = self._store.mark_all_read(session.user_id)
        logger.info(f"{count} notifications marked read for {session.user_id}")
        return count

    def delete(self, session: UserSession | None, notification_id: str) -> None:
        session = require_session(session)
        self._ensure_recipient(notification_id, session)
        self._store.delete_notification(notification_id)
        logger.info(f"Notification {notification_id} deleted")

    def _ensure_recipient(self, notification_id: str, session: UserSession) -> None:
        notification = self._store.get_notification(notification_id)
        if notification.user_id != session.user_id:
            raise AuthorshipError("notification", notification_id)
