"""
Use Case: Company Workflow

Fluxo de análise de empresas: cadastro, status, arquivamento,
representante legal, fluxos documentais, notas e parecer final.

Regras principais:
  - status aceita qualquer valor do enum, sem grafo de transições
    (reabrir completed → todo é permitido)
  - archived retira a empresa dos três quadros ativos
  - representante e parecer seguem upsert por sujeito (um por sujeito)
  - fluxos, notas e pareceres só são alterados pelo autor
"""

import logging
from typing import Callable, TypeVar

from src.core.entities.company import (
    Company,
    CompanyInput,
    CompanySize,
    CompanyStatus,
    Flow,
    FlowCheck,
    FlowInput,
    FlowKind,
    Note,
    NoteInput,
    NoteType,
    OpinionInput,
    Orientation,
    ParecerFinal,
    Priority,
    RepresentanteLegal,
    RepresentativeInput,
    RiskLevel,
    Subject,
)
from src.core.entities.user import UserSession
from src.core.exceptions import AuthorshipError, ConstraintConflict, RemoteStoreError, ValidationError
from src.core.interfaces.company_store import ICompanyStore
from src.core.interfaces.rules_engine import ITaxIdRules
from src.core.use_cases.validators import (
    optional_text,
    parse_date,
    parse_enum,
    require_session,
    require_text,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ARCHIVED_BUCKET = "archived"

# Campos de texto livre opcionais
_TEXT_FIELDS = ("state", "city", "address", "cnae", "phone", "email")


def partition_companies(companies: list[Company]) -> dict[str, list[Company]]:
    """
    Separa empresas nos quadros do dashboard.

    Toda empresa ativa cai em exatamente um de todo / in-progress /
    completed; arquivadas vão só para "archived".
    """
    buckets: dict[str, list[Company]] = {s.value: [] for s in CompanyStatus}
    buckets[ARCHIVED_BUCKET] = []
    for company in companies:
        if company.archived:
            buckets[ARCHIVED_BUCKET].append(company)
        else:
            buckets[CompanyStatus(company.status).value].append(company)
    return buckets


def upsert_on_subject(
    find: Callable[[], T | None],
    insert: Callable[[], T],
    update: Callable[[T], T],
    entity: str,
) -> T:
    """
    Cria-ou-atualiza garantindo um registro por sujeito.

    Se já existe, atualiza no lugar (mesmo id/created_at). Se não existe,
    insere; uma ConstraintConflict (inserção concorrente de outra sessão)
    cai de volta no caminho de atualização.
    """
    existing = find()
    if existing is not None:
        return update(existing)
    try:
        return insert()
    except ConstraintConflict:
        logger.info(f"Concurrent insert detected for {entity}, falling back to update")
        existing = find()
        if existing is None:
            raise
        return update(existing)


class CompanyWorkflowUseCase:
    """
    Use Case: operações da revisão de empresas.

    Dependency Injection: store e regras de CNPJ/CPF vêm pelo construtor;
    a sessão do usuário é passada em cada chamada.
    """

    def __init__(self, store: ICompanyStore, tax_id_rules: ITaxIdRules):
        self._store = store
        self._rules = tax_id_rules

    # ── Leitura ────────────────────────────────────────────

    def list_companies(self) -> list[Company]:
        """Lista tudo; falha do store vira lista vazia + warning."""
        try:
            return self._store.list_companies()
        except RemoteStoreError as e:
            logger.warning(f"Could not list companies: {e}")
            return []

    def get_company(self, company_id: str) -> Company:
        return self._store.get_company(company_id)

    def get_representative(self, representative_id: str) -> RepresentanteLegal:
        return self._store.get_representative(representative_id)

    def buckets(self) -> dict[str, list[Company]]:
        return partition_companies(self.list_companies())

    def stats(self) -> dict[str, int]:
        buckets = self.buckets()
        counts = {name: len(items) for name, items in buckets.items()}
        counts["total"] = sum(counts.values())
        return counts

    # ── Empresa ────────────────────────────────────────────

    def create_company(self, session: UserSession | None, data: CompanyInput) -> Company:
        session = require_session(session)
        cnpj = require_text("cnpj", data.cnpj)
        self._check_cnpj(cnpj)

        fields = {
            "cnpj": cnpj,
            "name": require_text("name", data.name),
            "due_date": parse_date("due_date", data.due_date),
            "size": parse_enum(CompanySize, "size", data.size) if data.size else None,
            "founded_on": parse_date("founded_on", data.founded_on, required=False),
            "risk": parse_enum(RiskLevel, "risk", data.risk or RiskLevel.BAIXO),
            "status": parse_enum(CompanyStatus, "status", data.status or CompanyStatus.TODO),
            "priority": parse_enum(Priority, "priority", data.priority or Priority.MEDIUM),
            "archived": False,
        }
        for name in _TEXT_FIELDS:
            fields[name] = optional_text(getattr(data, name))

        company = self._store.insert_company(fields, created_by=session.user_id)
        logger.info(f"Company {company.id} created [{company.status.value}]")
        return company

    def update_company(self, session: UserSession | None, company_id: str, changes: dict) -> Company:
        """Aplica só os campos informados."""
        require_session(session)
        clean = self._clean_company_changes(changes)
        if not clean:
            return self._store.get_company(company_id)
        company = self._store.update_company(company_id, clean)
        logger.info(f"Company {company_id} updated: {sorted(clean)}")
        return company

    def change_status(self, session: UserSession | None, company_id: str, new_status: str) -> Company:
        # Intencionalmente sem grafo de transições: qualquer valor do enum
        # é aceito, inclusive completed → todo para reabrir a análise.
        require_session(session)
        status = parse_enum(CompanyStatus, "status", new_status)
        company = self._store.update_company(company_id, {"status": status})
        logger.info(f"Company {company_id} → {status.value}")
        return company

    def archive(self, session: UserSession | None, company_id: str) -> Company:
        require_session(session)
        company = self._store.update_company(company_id, {"archived": True})
        logger.info(f"Company {company_id} archived")
        return company

    def restore(self, session: UserSession | None, company_id: str) -> Company:
        require_session(session)
        company = self._store.update_company(company_id, {"archived": False})
        logger.info(f"Company {company_id} restored")
        return company

    # ── Representante legal ────────────────────────────────

    def attach_representative(
        self, session: UserSession | None, company_id: str, data: RepresentativeInput
    ) -> RepresentanteLegal:
        session = require_session(session)
        fields = {
            "name": require_text("name", data.name),
            "cpf": require_text("cpf", data.cpf),
            "phone": optional_text(data.phone),
            "address": optional_text(data.address),
        }
        self._check_cpf(fields["cpf"])

        rep = upsert_on_subject(
            find=lambda: self._store.find_representative(company_id),
            insert=lambda: self._store.insert_representative(company_id, fields, created_by=session.user_id),
            update=lambda existing: self._store.update_representative(existing.id, fields),
            entity="representante_legal",
        )
        logger.info(f"Representative {rep.id} saved for company {company_id}")
        return rep

    def update_representative(
        self, session: UserSession | None, representative_id: str, changes: dict
    ) -> RepresentanteLegal:
        require_session(session)
        clean = {}
        for key, value in changes.items():
            if key in ("name", "cpf"):
                clean[key] = require_text(key, value)
            elif key in ("phone", "address"):
                clean[key] = optional_text(value)
            else:
                raise ValidationError(key, "is not an editable representative field")
        if "cpf" in clean:
            self._check_cpf(clean["cpf"])
        return self._store.update_representative(representative_id, clean)

    # ── Fluxos ─────────────────────────────────────────────

    def attach_flow(self, session: UserSession | None, subject: Subject, data: FlowInput) -> Flow:
        session = require_session(session)
        fields = {
            "kind": parse_enum(FlowKind, "kind", data.kind),
            "check": parse_enum(FlowCheck, "check", data.check),
            "observation": optional_text(data.observation),
        }
        flow = self._store.insert_flow(subject, fields, created_by=session.user_id)
        logger.info(f"Flow {flow.id} [{flow.kind.value}: {flow.check.value}] added to {subject.id}")
        return flow

    def update_flow(self, session: UserSession | None, flow_id: str, changes: dict) -> Flow:
        session = require_session(session)
        clean = {}
        for key, value in changes.items():
            if key == "kind":
                clean[key] = parse_enum(FlowKind, key, value)
            elif key == "check":
                clean[key] = parse_enum(FlowCheck, key, value)
            elif key == "observation":
                clean[key] = optional_text(value)
            else:
                raise ValidationError(key, "is not an editable flow field")
        self._ensure_author(self._store.get_flow(flow_id), session, "flow")
        return self._store.update_flow(flow_id, clean)

    def delete_flow(self, session: UserSession | None, flow_id: str) -> None:
        session = require_session(session)
        self._ensure_author(self._store.get_flow(flow_id), session, "flow")
        self._store.delete_flow(flow_id)
        logger.info(f"Flow {flow_id} deleted")

    # ── Notas ──────────────────────────────────────────────

    def attach_note(self, session: UserSession | None, subject: Subject, data: NoteInput) -> Note:
        session = require_session(session)
        fields = {
            "type": parse_enum(NoteType, "type", data.type),
            "content": require_text("content", data.content),
        }
        note = self._store.insert_note(subject, fields, created_by=session.user_id)
        logger.info(f"Note {note.id} [{note.type.value}] added to {subject.id}")
        return note

    def update_note(self, session: UserSession | None, note_id: str, changes: dict) -> Note:
        session = require_session(session)
        clean = {}
        for key, value in changes.items():
            if key == "type":
                clean[key] = parse_enum(NoteType, key, value)
            elif key == "content":
                clean[key] = require_text(key, value)
            else:
                raise ValidationError(key, "is not an editable note field")
        self._ensure_author(self._store.get_note(note_id), session, "note")
        return self._store.update_note(note_id, clean)

    def delete_note(self, session: UserSession | None, note_id: str) -> None:
        session = require_session(session)
        self._ensure_author(self._store.get_note(note_id), session, "note")
        self._store.delete_note(note_id)
        logger.info(f"Note {note_id} deleted")

    # ── Parecer final ──────────────────────────────────────

    def set_opinion(self, session: UserSession | None, subject: Subject, data: OpinionInput) -> ParecerFinal:
        session = require_session(session)
        fields = self._clean_opinion(subject, {
            "risk": data.risk,
            "orientation": data.orientation,
            "opinion": data.opinion,
        })

        opinion = upsert_on_subject(
            find=lambda: self._store.find_opinion(subject),
            insert=lambda: self._store.insert_opinion(subject, fields, created_by=session.user_id),
            update=lambda existing: self._update_own_opinion(existing, session, fields),
            entity="parecer_final",
        )
        logger.info(f"Opinion {opinion.id} [{opinion.orientation.value}] saved for {subject.id}")
        return opinion

    def update_opinion(self, session: UserSession | None, opinion_id: str, changes: dict) -> ParecerFinal:
        session = require_session(session)
        unknown = set(changes) - {"risk", "orientation", "opinion"}
        if unknown:
            raise ValidationError(sorted(unknown)[0], "is not an editable opinion field")
        current = self._store.get_opinion(opinion_id)
        self._ensure_author(current, session, "parecer_final")
        clean = self._clean_opinion(current.subject, changes)
        return self._store.update_opinion(opinion_id, clean)

    def delete_opinion(self, session: UserSession | None, opinion_id: str) -> None:
        session = require_session(session)
        self._ensure_author(self._store.get_opinion(opinion_id), session, "parecer_final")
        self._store.delete_opinion(opinion_id)
        logger.info(f"Opinion {opinion_id} deleted")

    # ── Helpers ────────────────────────────────────────────

    def _update_own_opinion(self, existing: ParecerFinal, session: UserSession, fields: dict) -> ParecerFinal:
        self._ensure_author(existing, session, "parecer_final")
        return self._store.update_opinion(existing.id, fields)

    def _check_cnpj(self, value: str) -> None:
        violation = self._rules.check_cnpj(value)
        if violation is not None:
            raise ValidationError("cnpj", violation.rule_name)

    def _check_cpf(self, value: str) -> None:
        violation = self._rules.check_cpf(value)
        if violation is not None:
            raise ValidationError("cpf", violation.rule_name)

    def _clean_company_changes(self, changes: dict) -> dict:
        clean = {}
        for key, value in changes.items():
            if key == "cnpj":
                clean[key] = require_text(key, value)
                self._check_cnpj(clean[key])
            elif key == "name":
                clean[key] = require_text(key, value)
            elif key == "due_date":
                clean[key] = parse_date(key, value)
            elif key == "founded_on":
                clean[key] = parse_date(key, value, required=False)
            elif key == "size":
                clean[key] = parse_enum(CompanySize, key, value) if value else None
            elif key == "risk":
                clean[key] = parse_enum(RiskLevel, key, value)
            elif key == "status":
                clean[key] = parse_enum(CompanyStatus, key, value)
            elif key == "priority":
                clean[key] = parse_enum(Priority, key, value)
            elif key == "archived":
                clean[key] = bool(value)
            elif key in _TEXT_FIELDS:
                clean[key] = optional_text(value)
            else:
                raise ValidationError(key, "is not an editable company field")
        return clean

    @staticmethod
    def _clean_opinion(subject: Subject, values: dict) -> dict:
        clean = {}
        if "risk" in values:
            risk = parse_enum(RiskLevel, "risk", values["risk"])
            if subject.is_representative and risk == RiskLevel.CRITICO:
                raise ValidationError("risk", "Crítico is not available for a representative opinion")
            clean["risk"] = risk
        if "orientation" in values:
            clean["orientation"] = parse_enum(Orientation, "orientation", values["orientation"])
        if "opinion" in values:
            clean["opinion"] = require_text("opinion", values["opinion"])
        return clean

    @staticmethod
    def _ensure_author(record: Flow | Note | ParecerFinal, session: UserSession, entity: str) -> None:
        if record.created_by != session.user_id:
            raise AuthorshipError(entity, record.id)
