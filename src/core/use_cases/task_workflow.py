"""
Use Case: Task Workflow

Estados: nova → em_andamento → concluida, com desvios para arquivada
e lixeira (soft delete). Restaurar de arquivada ou lixeira sempre volta
para "nova". O status é um setter incondicional: nenhuma transição do
enum é bloqueada.
"""

import logging

from src.core.entities.company import Priority
from src.core.entities.task import Task, TaskInput, TaskStatus
from src.core.entities.user import UserSession
from src.core.exceptions import RemoteStoreError, ValidationError
from src.core.interfaces.task_store import ITaskStore
from src.core.use_cases.notifications import NotificationUseCase
from src.core.use_cases.validators import (
    parse_date,
    parse_enum,
    require_session,
    require_text,
)

logger = logging.getLogger(__name__)


def partition_tasks(tasks: list[Task]) -> dict[str, list[Task]]:
    """Um balde por status; cada tarefa está em exatamente um."""
    buckets: dict[str, list[Task]] = {s.value: [] for s in TaskStatus}
    for task in tasks:
        buckets[TaskStatus(task.status).value].append(task)
    return buckets


class TaskWorkflowUseCase:
    """
    Use Case: tarefas e atribuição.

    Atribuir a outro usuário gera uma notificação via NotificationUseCase.
    """

    def __init__(self, store: ITaskStore, notifications: NotificationUseCase):
        self._store = store
        self._notifications = notifications

    # ── Leitura ────────────────────────────────────────────

    def list_tasks(self) -> list[Task]:
        try:
            return self._store.list_tasks()
        except RemoteStoreError as e:
            logger.warning(f"Could not list tasks: {e}")
            return []

    def get_task(self, task_id: str) -> Task:
        return self._store.get_task(task_id)

    def buckets(self) -> dict[str, list[Task]]:
        return partition_tasks(self.list_tasks())

    def my_tasks(self, session: UserSession | None) -> list[Task]:
        session = require_session(session)
        return [t for t in self.list_tasks() if t.assigned_to == session.user_id]

    # ── Escrita ────────────────────────────────────────────

    def create_task(self, session: UserSession | None, data: TaskInput) -> Task:
        session = require_session(session)
        fields = {
            "title": require_text("title", data.title),
            "description": (data.description or "").strip() or None,
            "due_date": parse_date("due_date", data.due_date),
            "priority": parse_enum(Priority, "priority", data.priority or Priority.MEDIUM),
            "status": TaskStatus.NOVA,
            "assigned_to": data.assigned_to or session.user_id,
        }
        task = self._store.insert_task(fields, created_by=session.user_id)
        logger.info(f"Task {task.id} created, assigned to {task.assigned_to}")

        if task.assigned_to != session.user_id:
            self._notifications.notify_assignment(task.assigned_to, task.id, task.title)
        return task

    def update_task(self, session: UserSession | None, task_id: str, changes: dict) -> Task:
        """Atualiza só os campos informados; reatribuição notifica o novo responsável."""
        session = require_session(session)
        clean = {}
        for key, value in changes.items():
            if key == "title":
                clean[key] = require_text(key, value)
            elif key == "description":
                clean[key] = (value or "").strip() or None
            elif key == "due_date":
                clean[key] = parse_date(key, value)
            elif key == "priority":
                clean[key] = parse_enum(Priority, key, value)
            elif key == "status":
                clean[key] = parse_enum(TaskStatus, key, value)
            elif key == "assigned_to":
                clean[key] = value or session.user_id
            else:
                raise ValidationError(key, "is not an editable task field")

        previous_assignee = None
        if "assigned_to" in clean:
            previous_assignee = self._store.get_task(task_id).assigned_to

        task = self._store.update_task(task_id, clean)
        logger.info(f"Task {task_id} updated: {sorted(clean)}")

        new_assignee = clean.get("assigned_to")
        if new_assignee and new_assignee not in (previous_assignee, session.user_id):
            self._notifications.notify_assignment(new_assignee, task.id, task.title)
        return task

    def update_status(self, session: UserSession | None, task_id: str, status: str) -> Task:
        # Setter incondicional: nova → arquivada direto também é aceito.
        require_session(session)
        new_status = parse_enum(TaskStatus, "status", status)
        task = self._store.update_task(task_id, {"status": new_status})
        logger.info(f"Task {task_id} → {new_status.value}")
        return task

    def move_to_trash(self, session: UserSession | None, task_id: str) -> Task:
        return self.update_status(session, task_id, TaskStatus.LIXEIRA)

    def archive_task(self, session: UserSession | None, task_id: str) -> Task:
        return self.update_status(session, task_id, TaskStatus.ARQUIVADA)

    def restore_from_trash(self, session: UserSession | None, task_id: str) -> Task:
        return self.update_status(session, task_id, TaskStatus.NOVA)

    def restore_from_archive(self, session: UserSession | None, task_id: str) -> Task:
        return self.update_status(session, task_id, TaskStatus.NOVA)

    def delete_permanently(self, session: UserSession | None, task_id: str) -> None:
        require_session(session)
        self._store.delete_task(task_id)
        logger.info(f"Task {task_id} permanently deleted")

    def empty_trash(self, session: UserSession | None) -> int:
        require_session(session)
        removed = self._store.delete_tasks_with_status(TaskStatus.LIXEIRA)
        logger.info(f"Trash emptied: {removed} tasks removed")
        return removed
