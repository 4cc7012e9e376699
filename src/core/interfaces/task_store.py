"""
Contract: Task Store / Notification Store
"""

from abc import ABC, abstractmethod

from src.core.entities.task import Notification, Task, TaskStatus


class ITaskStore(ABC):
    """Port: persistência de tarefas."""

    @abstractmethod
    def list_tasks(self) -> list[Task]:
        """Todas as tarefas, mais recentes primeiro, com responsável e criador."""
        ...

    @abstractmethod
    def get_task(self, task_id: str) -> Task:
        ...

    @abstractmethod
    def insert_task(self, fields: dict, created_by: str) -> Task:
        ...

    @abstractmethod
    def update_task(self, task_id: str, changes: dict) -> Task:
        ...

    @abstractmethod
    def delete_task(self, task_id: str) -> None:
        """Remove a linha definitivamente."""
        ...

    @abstractmethod
    def delete_tasks_with_status(self, status: TaskStatus) -> int:
        """
        Remove todas as tarefas num status.

        Returns:
            Número de linhas removidas.
        """
        ...


class INotificationStore(ABC):
    """Port: persistência de notificações."""

    @abstractmethod
    def list_for_user(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        ...

    @abstractmethod
    def get_notification(self, notification_id: str) -> Notification:
        ...

    @abstractmethod
    def insert_notification(self, user_id: str, task_id: str | None, title: str, message: str) -> Notification:
        ...

    @abstractmethod
    def set_read(self, notification_id: str, read: bool = True) -> Notification:
        ...

    @abstractmethod
    def mark_all_read(self, user_id: str) -> int:
        ...

    @abstractmethod
    def delete_notification(self, notification_id: str) -> None:
        ...
