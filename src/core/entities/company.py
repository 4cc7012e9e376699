"""
Entity: Company (empresa em análise) e seus registros dependentes.

Uma Company possui zero-ou-um RepresentanteLegal, zero-ou-muitos Flow e
Note, e zero-ou-um ParecerFinal. Flow/Note/ParecerFinal pertencem a um
único sujeito: a própria empresa OU o seu representante legal.
Modelo puro — sem dependência de framework ou banco.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from src.core.entities.user import UserRef
from src.core.exceptions import ValidationError


class CompanyStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class CompanySize(str, Enum):
    MEI = "MEI"
    ME = "ME"
    EPP = "EPP"
    GRANDE = "Grande"


class RiskLevel(str, Enum):
    BAIXO = "Baixo"
    MEDIO = "Médio"
    ALTO = "Alto"
    CRITICO = "Crítico"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FlowKind(str, Enum):
    CONTRATO_SOCIAL = "contrato social"
    CNPJ = "cnpj"
    REPRESENTANTE_LEGAL = "representante legal"
    CAPITAL_SOCIAL = "capital social"
    COMPROVANTE_ENDERECO = "comprovante endereço"


class FlowCheck(str, Enum):
    VALIDO = "válido"
    INVALIDO = "inválido"
    COMPATIVEL = "compatível"
    INCONSISTENTE = "inconsistente"
    POSITIVO = "positivo"
    NEGATIVO = "negativo"


class NoteType(str, Enum):
    ALERTA_CRITICO = "Alerta Crítico"
    ALERTA_NORMAL = "Alerta Normal"
    AVISO = "Aviso"
    PENDENCIA = "Pendência"
    REENVIO_DOCUMENTOS = "Reenvio de Documentos"


class Orientation(str, Enum):
    APROVAR = "Aprovar"
    REJEITAR = "Rejeitar"


@dataclass(frozen=True)
class Subject:
    """Sujeito de um Flow/Note/ParecerFinal: exatamente um dos ids."""
    company_id: str | None = None
    representante_legal_id: str | None = None

    def __post_init__(self):
        if bool(self.company_id) == bool(self.representante_legal_id):
            raise ValidationError(
                "subject", "exactly one of company_id or representante_legal_id must be set"
            )

    @classmethod
    def company(cls, company_id: str) -> "Subject":
        return cls(company_id=company_id)

    @classmethod
    def representative(cls, representante_legal_id: str) -> "Subject":
        return cls(representante_legal_id=representante_legal_id)

    @property
    def is_representative(self) -> bool:
        return self.representante_legal_id is not None

    @property
    def id(self) -> str:
        return self.company_id or self.representante_legal_id


@dataclass
class Flow:
    """Evento de verificação documental."""
    id: str
    kind: FlowKind
    check: FlowCheck
    observation: str = ""
    company_id: str | None = None
    representante_legal_id: str | None = None
    created_by: str = ""
    created_at: datetime | None = None
    author: UserRef | None = None

    @property
    def subject(self) -> Subject:
        return Subject(self.company_id, self.representante_legal_id)


@dataclass
class Note:
    id: str
    type: NoteType
    content: str
    company_id: str | None = None
    representante_legal_id: str | None = None
    created_by: str = ""
    created_at: datetime | None = None
    author: UserRef | None = None

    @property
    def subject(self) -> Subject:
        return Subject(self.company_id, self.representante_legal_id)


@dataclass
class ParecerFinal:
    """Parecer final: risco + orientação (aprovar/rejeitar). Um por sujeito."""
    id: str
    risk: RiskLevel
    orientation: Orientation
    opinion: str
    company_id: str | None = None
    representante_legal_id: str | None = None
    created_by: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: UserRef | None = None

    @property
    def subject(self) -> Subject:
        return Subject(self.company_id, self.representante_legal_id)


@dataclass
class RepresentanteLegal:
    """Representante legal. No máximo um por empresa."""
    id: str
    company_id: str
    name: str
    cpf: str
    phone: str = ""
    address: str = ""
    created_by: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    flows: list[Flow] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    opinion: ParecerFinal | None = None


@dataclass
class Company:
    """Agregado: empresa + coleções aninhadas."""
    id: str
    cnpj: str
    name: str
    due_date: date
    size: CompanySize | None = None
    state: str = ""
    city: str = ""
    address: str = ""
    cnae: str = ""
    phone: str = ""
    email: str = ""
    founded_on: date | None = None
    risk: RiskLevel = RiskLevel.BAIXO
    status: CompanyStatus = CompanyStatus.TODO
    priority: Priority = Priority.MEDIUM
    archived: bool = False
    created_by: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    creator: UserRef | None = None

    # Relações
    representative: RepresentanteLegal | None = None
    flows: list[Flow] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    opinion: ParecerFinal | None = None


# ── Inputs ──────────────────────────────────────────────────

@dataclass
class CompanyInput:
    """Dados de criação de uma empresa, como vêm do formulário."""
    cnpj: str
    name: str
    due_date: date | str | None
    size: str | None = None
    state: str = ""
    city: str = ""
    address: str = ""
    cnae: str = ""
    phone: str = ""
    email: str = ""
    founded_on: date | str | None = None
    risk: str = RiskLevel.BAIXO.value
    status: str = CompanyStatus.TODO.value
    priority: str = Priority.MEDIUM.value


@dataclass
class RepresentativeInput:
    name: str
    cpf: str
    phone: str = ""
    address: str = ""


@dataclass
class FlowInput:
    kind: str
    check: str
    observation: str = ""


@dataclass
class NoteInput:
    type: str
    content: str


@dataclass
class OpinionInput:
    risk: str
    orientation: str
    opinion: str
