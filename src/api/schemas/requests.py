"""
Pydantic schemas — Request bodies.

Tipos permissivos (str) de propósito: enums, datas e obrigatoriedade
são validados nos use cases, que levantam ValidationError.
"""

from pydantic import BaseModel


class CompanyCreateRequest(BaseModel):
    cnpj: str = ""
    name: str = ""
    due_date: str | None = None
    size: str | None = None
    state: str = ""
    city: str = ""
    address: str = ""
    cnae: str = ""
    phone: str = ""
    email: str = ""
    founded_on: str | None = None
    risk: str = "Baixo"
    status: str = "todo"
    priority: str = "medium"


class CompanyUpdateRequest(BaseModel):
    cnpj: str | None = None
    name: str | None = None
    due_date: str | None = None
    size: str | None = None
    state: str | None = None
    city: str | None = None
    address: str | None = None
    cnae: str | None = None
    phone: str | None = None
    email: str | None = None
    founded_on: str | None = None
    risk: str | None = None
    status: str | None = None
    priority: str | None = None


class StatusRequest(BaseModel):
    status: str


class RepresentativeRequest(BaseModel):
    name: str = ""
    cpf: str = ""
    phone: str = ""
    address: str = ""


class RepresentativeUpdateRequest(BaseModel):
    name: str | None = None
    cpf: str | None = None
    phone: str | None = None
    address: str | None = None


class FlowRequest(BaseModel):
    kind: str
    check: str
    observation: str = ""


class FlowUpdateRequest(BaseModel):
    kind: str | None = None
    check: str | None = None
    observation: str | None = None


class NoteRequest(BaseModel):
    type: str
    content: str = ""


class NoteUpdateRequest(BaseModel):
    type: str | None = None
    content: str | None = None


class OpinionRequest(BaseModel):
    risk: str
    orientation: str
    opinion: str = ""


class OpinionUpdateRequest(BaseModel):
    risk: str | None = None
    orientation: str | None = None
    opinion: str | None = None


class TaskCreateRequest(BaseModel):
    title: str = ""
    due_date: str | None = None
    description: str | None = None
    priority: str = "medium"
    assigned_to: str | None = None


class TaskUpdateRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    due_date: str | None = None
    assigned_to: str | None = None


class ProfileUpdateRequest(BaseModel):
    name: str | None = None
    avatar_url: str | None = None
