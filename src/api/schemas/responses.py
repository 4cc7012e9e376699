"""
Pydantic schemas — Response models para a API.

Construídos direto das entidades de domínio (from_attributes).
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from src.core.entities.company import (
    CompanySize, CompanyStatus, FlowCheck, FlowKind, NoteType, Orientation, Priority, RiskLevel,
)
from src.core.entities.task import TaskStatus
from src.core.entities.user import UserRole


class _FromEntity(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserRefResponse(_FromEntity):
    id: str
    name: str = ""
    email: str = ""
    avatar_url: str | None = None


class UserResponse(_FromEntity):
    id: str
    email: str
    name: str = ""
    role: UserRole
    avatar_url: str | None = None
    created_at: datetime | None = None


class FlowResponse(_FromEntity):
    id: str
    kind: FlowKind
    check: FlowCheck
    observation: str = ""
    company_id: str | None = None
    representante_legal_id: str | None = None
    created_by: str
    created_at: datetime | None = None
    author: UserRefResponse | None = None


class NoteResponse(_FromEntity):
    id: str
    type: NoteType
    content: str
    company_id: str | None = None
    representante_legal_id: str | None = None
    created_by: str
    created_at: datetime | None = None
    author: UserRefResponse | None = None


class OpinionResponse(_FromEntity):
    id: str
    risk: RiskLevel
    orientation: Orientation
    opinion: str
    company_id: str | None = None
    representante_legal_id: str | None = None
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: UserRefResponse | None = None


class RepresentativeResponse(_FromEntity):
    id: str
    company_id: str
    name: str
    cpf: str
    phone: str = ""
    address: str = ""
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    flows: list[FlowResponse] = []
    notes: list[NoteResponse] = []
    opinion: OpinionResponse | None = None


class CompanyResponse(_FromEntity):
    id: str
    cnpj: str
    name: str
    size: CompanySize | None = None
    state: str = ""
    city: str = ""
    address: str = ""
    cnae: str = ""
    phone: str = ""
    email: str = ""
    founded_on: date | None = None
    risk: RiskLevel
    status: CompanyStatus
    priority: Priority
    due_date: date
    archived: bool
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    creator: UserRefResponse | None = None
    representative: RepresentativeResponse | None = None
    flows: list[FlowResponse] = []
    notes: list[NoteResponse] = []
    opinion: OpinionResponse | None = None


class CompanyStatsResponse(BaseModel):
    todo: int
    in_progress: int
    completed: int
    archived: int
    total: int


class TaskResponse(_FromEntity):
    id: str
    title: str
    description: str | None = None
    status: TaskStatus
    priority: Priority
    due_date: date
    assigned_to: str | None = None
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    assignee: UserRefResponse | None = None
    creator: UserRefResponse | None = None


class NotificationResponse(_FromEntity):
    id: str
    user_id: str
    task_id: str | None = None
    title: str
    message: str
    read: bool
    created_at: datetime | None = None
    task_title: str | None = None
    task_status: TaskStatus | None = None


class UnreadNotificationsResponse(BaseModel):
    count: int
    notifications: list[NotificationResponse]


class CountResponse(BaseModel):
    count: int

