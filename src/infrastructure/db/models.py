"""
Database Models — SQLAlchemy.

Tables:
  - users: perfis (criados pelo provedor de identidade)
  - companies: empresas em análise
  - representantes_legais: no máximo um por empresa (company_id único)
  - flows / notes: histórico por sujeito (empresa OU representante)
  - parecer_final: no máximo um por sujeito (company_id / representante_legal_id únicos)
  - tasks / notifications: módulo de tarefas

Colunas mantêm os nomes do schema hospedado; ``to_entity`` faz o mapeamento
para as entidades de domínio.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Column, String, Boolean, Date, DateTime, Text,
    CheckConstraint, ForeignKey, TypeDecorator,
)
from sqlalchemy.orm import DeclarativeBase

from src.core.entities.company import (
    Company, CompanySize, CompanyStatus, Flow, FlowCheck, FlowKind, Note, NoteType,
    Orientation, ParecerFinal, Priority, RepresentanteLegal, RiskLevel,
)
from src.core.entities.task import Notification, Task, TaskStatus
from src.core.entities.user import User, UserRef, UserRole


def _uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """DateTime sempre em UTC; o SQLite devolve valores sem fuso."""

    impl = DateTime
    cache_ok = True

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


_ONE_SUBJECT = (
    "(company_id IS NOT NULL AND representante_legal_id IS NULL) OR "
    "(company_id IS NULL AND representante_legal_id IS NOT NULL)"
)


class Base(DeclarativeBase):
    pass


class UserRecord(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=False, default="")
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    avatar_url = Column(Text, nullable=True)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow)
    updated_at = Column(UTCDateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<User {self.email} [{self.role}]>"

    def to_entity(self) -> User:
        return User(
            id=self.id,
            email=self.email,
            name=self.name or "",
            role=UserRole(self.role or UserRole.USER.value),
            avatar_url=self.avatar_url,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def to_ref(self) -> UserRef:
        return UserRef(id=self.id, name=self.name or "", email=self.email, avatar_url=self.avatar_url)


class CompanyRecord(Base):
    __tablename__ = "companies"

    # entity field → column
    FIELD_COLUMNS = {
        "cnpj": "cnpj",
        "name": "nome_empresa",
        "size": "porte",
        "state": "estado",
        "city": "cidade",
        "address": "endereco",
        "cnae": "cnae",
        "phone": "telefone",
        "email": "email",
        "founded_on": "abertura",
        "risk": "risco",
        "status": "status",
        "priority": "priority",
        "due_date": "due_date",
        "archived": "archived",
    }

    id = Column(String(36), primary_key=True, default=_uuid)
    cnpj = Column(String(20), nullable=False, index=True)
    nome_empresa = Column(String(255), nullable=False)
    porte = Column(String(10), nullable=True)
    estado = Column(String(50), default="")
    cidade = Column(String(120), default="")
    endereco = Column(Text, default="")
    cnae = Column(String(255), default="")
    telefone = Column(String(40), default="")
    email = Column(String(255), default="")
    abertura = Column(Date, nullable=True)
    risco = Column(String(10), nullable=False, default=RiskLevel.BAIXO.value)
    status = Column(String(20), nullable=False, default=CompanyStatus.TODO.value, index=True)
    priority = Column(String(10), nullable=False, default=Priority.MEDIUM.value)
    due_date = Column(Date, nullable=False)
    archived = Column(Boolean, nullable=False, default=False, index=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(UTCDateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Company {self.cnpj} [{self.status}] archived={self.archived}>"

    def to_entity(self, users: dict[str, UserRef] | None = None) -> Company:
        users = users or {}
        return Company(
            id=self.id,
            cnpj=self.cnpj,
            name=self.nome_empresa,
            due_date=self.due_date,
            size=CompanySize(self.porte) if self.porte else None,
            state=self.estado or "",
            city=self.cidade or "",
            address=self.endereco or "",
            cnae=self.cnae or "",
            phone=self.telefone or "",
            email=self.email or "",
            founded_on=self.abertura,
            risk=RiskLevel(self.risco),
            status=CompanyStatus(self.status),
            priority=Priority(self.priority),
            archived=bool(self.archived),
            created_by=self.created_by or "",
            created_at=self.created_at,
            updated_at=self.updated_at,
            creator=users.get(self.created_by),
        )


class RepresentanteLegalRecord(Base):
    __tablename__ = "representantes_legais"

    FIELD_COLUMNS = {
        "name": "nome",
        "cpf": "cpf",
        "phone": "telefone",
        "address": "endereco",
    }

    id = Column(String(36), primary_key=True, default=_uuid)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="CASCADE"), unique=True, nullable=False)
    nome = Column(String(255), nullable=False)
    cpf = Column(String(20), nullable=False)
    telefone = Column(String(40), default="")
    endereco = Column(Text, default="")
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow)
    updated_at = Column(UTCDateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_entity(self) -> RepresentanteLegal:
        return RepresentanteLegal(
            id=self.id,
            company_id=self.company_id,
            name=self.nome,
            cpf=self.cpf,
            phone=self.telefone or "",
            address=self.endereco or "",
            created_by=self.created_by or "",
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class FlowRecord(Base):
    __tablename__ = "flows"
    __table_args__ = (CheckConstraint(_ONE_SUBJECT, name="flows_one_subject"),)

    FIELD_COLUMNS = {
        "kind": "nome_fluxo",
        "check": "check_fluxo",
        "observation": "observacao",
    }

    id = Column(String(36), primary_key=True, default=_uuid)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=True, index=True)
    representante_legal_id = Column(
        String(36), ForeignKey("representantes_legais.id", ondelete="CASCADE"), nullable=True, index=True
    )
    nome_fluxo = Column(String(40), nullable=False)
    check_fluxo = Column(String(20), nullable=False)
    observacao = Column(Text, default="")
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, index=True)

    def to_entity(self, users: dict[str, UserRef] | None = None) -> Flow:
        return Flow(
            id=self.id,
            kind=FlowKind(self.nome_fluxo),
            check=FlowCheck(self.check_fluxo),
            observation=self.observacao or "",
            company_id=self.company_id,
            representante_legal_id=self.representante_legal_id,
            created_by=self.created_by or "",
            created_at=self.created_at,
            author=(users or {}).get(self.created_by),
        )


class NoteRecord(Base):
    __tablename__ = "notes"
    __table_args__ = (CheckConstraint(_ONE_SUBJECT, name="notes_one_subject"),)

    FIELD_COLUMNS = {
        "type": "tipo",
        "content": "content",
    }

    id = Column(String(36), primary_key=True, default=_uuid)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=True, index=True)
    representante_legal_id = Column(
        String(36), ForeignKey("representantes_legais.id", ondelete="CASCADE"), nullable=True, index=True
    )
    tipo = Column(String(40), nullable=False)
    content = Column(Text, nullable=False)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, index=True)

    def to_entity(self, users: dict[str, UserRef] | None = None) -> Note:
        return Note(
            id=self.id,
            type=NoteType(self.tipo),
            content=self.content,
            company_id=self.company_id,
            representante_legal_id=self.representante_legal_id,
            created_by=self.created_by or "",
            created_at=self.created_at,
            author=(users or {}).get(self.created_by),
        )


class ParecerFinalRecord(Base):
    __tablename__ = "parecer_final"
    __table_args__ = (CheckConstraint(_ONE_SUBJECT, name="parecer_final_one_subject"),)

    FIELD_COLUMNS = {
        "risk": "risco",
        "orientation": "orientacao",
        "opinion": "parecer",
    }

    id = Column(String(36), primary_key=True, default=_uuid)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="CASCADE"), unique=True, nullable=True)
    representante_legal_id = Column(
        String(36), ForeignKey("representantes_legais.id", ondelete="CASCADE"), unique=True, nullable=True
    )
    risco = Column(String(10), nullable=False)
    orientacao = Column(String(10), nullable=False)
    parecer = Column(Text, nullable=False)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow)
    updated_at = Column(UTCDateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_entity(self, users: dict[str, UserRef] | None = None) -> ParecerFinal:
        return ParecerFinal(
            id=self.id,
            risk=RiskLevel(self.risco),
            orientation=Orientation(self.orientacao),
            opinion=self.parecer,
            company_id=self.company_id,
            representante_legal_id=self.representante_legal_id,
            created_by=self.created_by or "",
            created_at=self.created_at,
            updated_at=self.updated_at,
            author=(users or {}).get(self.created_by),
        )


class TaskRecord(Base):
    __tablename__ = "tasks"

    FIELD_COLUMNS = {
        "title": "titulo",
        "description": "descricao",
        "status": "status",
        "priority": "priority",
        "due_date": "due_date",
        "assigned_to": "assigned_to",
    }

    id = Column(String(36), primary_key=True, default=_uuid)
    titulo = Column(String(255), nullable=False)
    descricao = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=TaskStatus.NOVA.value, index=True)
    priority = Column(String(10), nullable=False, default=Priority.MEDIUM.value)
    due_date = Column(Date, nullable=False)
    assigned_to = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(UTCDateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Task {self.id} [{self.status}]>"

    def to_entity(self, users: dict[str, UserRef] | None = None) -> Task:
        users = users or {}
        return Task(
            id=self.id,
            title=self.titulo,
            description=self.descricao,
            due_date=self.due_date,
            status=TaskStatus(self.status),
            priority=Priority(self.priority),
            assigned_to=self.assigned_to,
            created_by=self.created_by or "",
            created_at=self.created_at,
            updated_at=self.updated_at,
            assignee=users.get(self.assigned_to),
            creator=users.get(self.created_by),
        )


class NotificationRecord(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, index=True)

    def to_entity(self, task: TaskRecord | None = None) -> Notification:
        return Notification(
            id=self.id,
            user_id=self.user_id,
            task_id=self.task_id,
            title=self.title,
            message=self.message,
            read=bool(self.read),
            created_at=self.created_at,
            task_title=task.titulo if task is not None else None,
            task_status=TaskStatus(task.status) if task is not None else None,
        )


def to_columns(record_cls, fields: dict) -> dict:
    """Traduz campos de domínio para colunas; enums viram o seu valor."""
    columns = {}
    for name, value in fields.items():
        column = record_cls.FIELD_COLUMNS[name]
        columns[column] = value.value if isinstance(value, Enum) else value
    return columns
