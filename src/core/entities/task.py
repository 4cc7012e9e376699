"""
Entity: Task / Notification

Tarefas atribuídas entre usuários e as notificações geradas
quando uma tarefa é atribuída a outra pessoa.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from src.core.entities.company import Priority
from src.core.entities.user import UserRef


class TaskStatus(str, Enum):
    NOVA = "nova"
    EM_ANDAMENTO = "em_andamento"
    CONCLUIDA = "concluida"
    ARQUIVADA = "arquivada"
    LIXEIRA = "lixeira"


# Estados exibidos no quadro principal
ACTIVE_TASK_STATUSES = (TaskStatus.NOVA, TaskStatus.EM_ANDAMENTO, TaskStatus.CONCLUIDA)


@dataclass
class Task:
    id: str
    title: str
    due_date: date
    description: str | None = None
    status: TaskStatus = TaskStatus.NOVA
    priority: Priority = Priority.MEDIUM
    assigned_to: str | None = None
    created_by: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    assignee: UserRef | None = None
    creator: UserRef | None = None


@dataclass
class TaskInput:
    title: str
    due_date: date | str | None
    description: str | None = None
    priority: str = Priority.MEDIUM.value
    assigned_to: str | None = None


@dataclass
class Notification:
    id: str
    user_id: str
    task_id: str | None
    title: str
    message: str
    read: bool = False
    created_at: datetime | None = None
    task_title: str | None = None
    task_status: TaskStatus | None = None
