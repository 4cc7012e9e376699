"""
Company Repository — CRUD do fluxo de análise.

Handles:
  - Empresas (agregado com representante, fluxos, notas e parecer)
  - Representantes legais (company_id único)
  - Fluxos / notas por sujeito
  - Pareceres finais (um por sujeito)

Aggregate reads use one IN-query per child table instead of a
follow-up query per company.
"""

import logging
from collections import defaultdict

from sqlalchemy import desc, or_
from sqlalchemy.orm import Session, sessionmaker

from src.core.entities.company import (
    Company, Flow, Note, ParecerFinal, RepresentanteLegal, Subject,
)
from src.core.entities.user import UserRef
from src.core.exceptions import RecordNotFoundError
from src.core.interfaces.company_store import ICompanyStore
from src.infrastructure.db.database import get_db, get_session_factory, store_errors
from src.infrastructure.db.models import (
    CompanyRecord,
    FlowRecord,
    NoteRecord,
    ParecerFinalRecord,
    RepresentanteLegalRecord,
    UserRecord,
    to_columns,
    utcnow,
)

logger = logging.getLogger(__name__)


def load_user_refs(db: Session, user_ids) -> dict[str, UserRef]:
    """Resolve um conjunto de ids de usuário numa única consulta."""
    ids = {uid for uid in user_ids if uid}
    if not ids:
        return {}
    users = db.query(UserRecord).filter(UserRecord.id.in_(ids)).all()
    return {u.id: u.to_ref() for u in users}


def fetch_or_raise(db: Session, record_cls, record_id: str, entity: str):
    record = db.get(record_cls, record_id)
    if record is None:
        raise RecordNotFoundError(entity, record_id)
    return record


class CompanyRepository(ICompanyStore):
    """Repository for companies and their review records."""

    def __init__(self, session_factory: sessionmaker = None):
        self._factory = session_factory or get_session_factory()

    # ── Companies ──────────────────────────────────────────

    def list_companies(self) -> list[Company]:
        with store_errors("list_companies", "companies"), get_db(self._factory) as db:
            records = db.query(CompanyRecord).order_by(desc(CompanyRecord.created_at)).all()
            return self._assemble(db, records)

    def get_company(self, company_id: str) -> Company:
        with store_errors("get_company", "companies"), get_db(self._factory) as db:
            record = fetch_or_raise(db, CompanyRecord, company_id, "company")
            return self._assemble(db, [record])[0]

    def insert_company(self, fields: dict, created_by: str) -> Company:
        with store_errors("insert_company", "companies"), get_db(self._factory) as db:
            record = CompanyRecord(**to_columns(CompanyRecord, fields), created_by=created_by)
            db.add(record)
            db.flush()
            logger.debug(f"Inserted company {record.id} ({record.cnpj})")
            return record.to_entity(load_user_refs(db, [created_by]))

    def update_company(self, company_id: str, changes: dict) -> Company:
        with store_errors("update_company", "companies"), get_db(self._factory) as db:
            record = fetch_or_raise(db, CompanyRecord, company_id, "company")
            for column, value in to_columns(CompanyRecord, changes).items():
                setattr(record, column, value)
            record.updated_at = utcnow()
            db.flush()
            return self._assemble(db, [record])[0]

    # ── Representantes legais ──────────────────────────────

    def find_representative(self, company_id: str) -> RepresentanteLegal | None:
        with store_errors("find_representative", "representantes_legais"), get_db(self._factory) as db:
            record = db.query(RepresentanteLegalRecord).filter_by(company_id=company_id).first()
            return record.to_entity() if record else None

    def get_representative(self, representative_id: str) -> RepresentanteLegal:
        with store_errors("get_representative", "representantes_legais"), get_db(self._factory) as db:
            record = fetch_or_raise(db, RepresentanteLegalRecord, representative_id, "representante_legal")
            flows, notes, opinions = self._children(db, [], [record.id])
            users = load_user_refs(
                db, [r.created_by for r in flows + notes + opinions]
            )
            return self._build_representative(record, flows, notes, opinions, users)

    def insert_representative(self, company_id: str, fields: dict, created_by: str) -> RepresentanteLegal:
        with store_errors("insert_representative", "representantes_legais"), get_db(self._factory) as db:
            fetch_or_raise(db, CompanyRecord, company_id, "company")
            record = RepresentanteLegalRecord(
                company_id=company_id,
                created_by=created_by,
                **to_columns(RepresentanteLegalRecord, fields),
            )
            db.add(record)
            db.flush()
            return record.to_entity()

    def update_representative(self, representative_id: str, changes: dict) -> RepresentanteLegal:
        with store_errors("update_representative", "representantes_legais"), get_db(self._factory) as db:
            record = fetch_or_raise(db, RepresentanteLegalRecord, representative_id, "representante_legal")
            for column, value in to_columns(RepresentanteLegalRecord, changes).items():
                setattr(record, column, value)
            record.updated_at = utcnow()
            db.flush()
            return record.to_entity()

    # ── Fluxos ─────────────────────────────────────────────

    def get_flow(self, flow_id: str) -> Flow:
        with store_errors("get_flow", "flows"), get_db(self._factory) as db:
            record = fetch_or_raise(db, FlowRecord, flow_id, "flow")
            return record.to_entity(load_user_refs(db, [record.created_by]))

    def insert_flow(self, subject: Subject, fields: dict, created_by: str) -> Flow:
        with store_errors("insert_flow", "flows"), get_db(self._factory) as db:
            self._ensure_subject(db, subject)
            record = FlowRecord(
                company_id=subject.company_id,
                representante_legal_id=subject.representante_legal_id,
                created_by=created_by,
                **to_columns(FlowRecord, fields),
            )
            db.add(record)
            db.flush()
            return record.to_entity(load_user_refs(db, [created_by]))

    def update_flow(self, flow_id: str, changes: dict) -> Flow:
        with store_errors("update_flow", "flows"), get_db(self._factory) as db:
            record = fetch_or_raise(db, FlowRecord, flow_id, "flow")
            for column, value in to_columns(FlowRecord, changes).items():
                setattr(record, column, value)
            db.flush()
            return record.to_entity(load_user_refs(db, [record.created_by]))

    def delete_flow(self, flow_id: str) -> None:
        with store_errors("delete_flow", "flows"), get_db(self._factory) as db:
            db.delete(fetch_or_raise(db, FlowRecord, flow_id, "flow"))

    # ── Notas ──────────────────────────────────────────────

    def get_note(self, note_id: str) -> Note:
        with store_errors("get_note", "notes"), get_db(self._factory) as db:
            record = fetch_or_raise(db, NoteRecord, note_id, "note")
            return record.to_entity(load_user_refs(db, [record.created_by]))

    def insert_note(self, subject: Subject, fields: dict, created_by: str) -> Note:
        with store_errors("insert_note", "notes"), get_db(self._factory) as db:
            self._ensure_subject(db, subject)
            record = NoteRecord(
                company_id=subject.company_id,
                representante_legal_id=subject.representante_legal_id,
                created_by=created_by,
                **to_columns(NoteRecord, fields),
            )
            db.add(record)
            db.flush()
            return record.to_entity(load_user_refs(db, [created_by]))

    def update_note(self, note_id: str, changes: dict) -> Note:
        with store_errors("update_note", "notes"), get_db(self._factory) as db:
            record = fetch_or_raise(db, NoteRecord, note_id, "note")
            for column, value in to_columns(NoteRecord, changes).items():
                setattr(record, column, value)
            db.flush()
            return record.to_entity(load_user_refs(db, [record.created_by]))

    def delete_note(self, note_id: str) -> None:
        with store_errors("delete_note", "notes"), get_db(self._factory) as db:
            db.delete(fetch_or_raise(db, NoteRecord, note_id, "note"))

    # ── Pareceres ──────────────────────────────────────────

    def find_opinion(self, subject: Subject) -> ParecerFinal | None:
        with store_errors("find_opinion", "parecer_final"), get_db(self._factory) as db:
            record = (
                db.query(ParecerFinalRecord)
                .filter_by(
                    company_id=subject.company_id,
                    representante_legal_id=subject.representante_legal_id,
                )
                .first()
            )
            if record is None:
                return None
            return record.to_entity(load_user_refs(db, [record.created_by]))

    def get_opinion(self, opinion_id: str) -> ParecerFinal:
        with store_errors("get_opinion", "parecer_final"), get_db(self._factory) as db:
            record = fetch_or_raise(db, ParecerFinalRecord, opinion_id, "parecer_final")
            return record.to_entity(load_user_refs(db, [record.created_by]))

    def insert_opinion(self, subject: Subject, fields: dict, created_by: str) -> ParecerFinal:
        with store_errors("insert_opinion", "parecer_final"), get_db(self._factory) as db:
            self._ensure_subject(db, subject)
            record = ParecerFinalRecord(
                company_id=subject.company_id,
                representante_legal_id=subject.representante_legal_id,
                created_by=created_by,
                **to_columns(ParecerFinalRecord, fields),
            )
            db.add(record)
            db.flush()
            return record.to_entity(load_user_refs(db, [created_by]))

    def update_opinion(self, opinion_id: str, changes: dict) -> ParecerFinal:
        with store_errors("update_opinion", "parecer_final"), get_db(self._factory) as db:
            record = fetch_or_raise(db, ParecerFinalRecord, opinion_id, "parecer_final")
            for column, value in to_columns(ParecerFinalRecord, changes).items():
                setattr(record, column, value)
            record.updated_at = utcnow()
            db.flush()
            return record.to_entity(load_user_refs(db, [record.created_by]))

    def delete_opinion(self, opinion_id: str) -> None:
        with store_errors("delete_opinion", "parecer_final"), get_db(self._factory) as db:
            db.delete(fetch_or_raise(db, ParecerFinalRecord, opinion_id, "parecer_final"))

    # ── Helpers ────────────────────────────────────────────

    @staticmethod
    def _ensure_subject(db: Session, subject: Subject) -> None:
        if subject.company_id:
            fetch_or_raise(db, CompanyRecord, subject.company_id, "company")
        else:
            fetch_or_raise(db, RepresentanteLegalRecord, subject.representante_legal_id, "representante_legal")

    @staticmethod
    def _children(db: Session, company_ids: list[str], rep_ids: list[str]):
        """Fluxos, notas e pareceres de um lote de sujeitos (três consultas)."""
        def subject_filter(record_cls):
            return or_(
                record_cls.company_id.in_(company_ids),
                record_cls.representante_legal_id.in_(rep_ids),
            )

        flows = (
            db.query(FlowRecord).filter(subject_filter(FlowRecord))
            .order_by(desc(FlowRecord.created_at)).all()
        )
        notes = (
            db.query(NoteRecord).filter(subject_filter(NoteRecord))
            .order_by(desc(NoteRecord.created_at)).all()
        )
        opinions = db.query(ParecerFinalRecord).filter(subject_filter(ParecerFinalRecord)).all()
        return flows, notes, opinions

    @staticmethod
    def _build_representative(record, flows, notes, opinions, users) -> RepresentanteLegal:
        rep = record.to_entity()
        rep.flows = [f.to_entity(users) for f in flows if f.representante_legal_id == record.id]
        rep.notes = [n.to_entity(users) for n in notes if n.representante_legal_id == record.id]
        rep.opinion = next(
            (o.to_entity(users) for o in opinions if o.representante_legal_id == record.id), None
        )
        return rep

    def _assemble(self, db: Session, records: list[CompanyRecord]) -> list[Company]:
        """Monta os agregados de um lote de empresas."""
        if not records:
            return []
        company_ids = [c.id for c in records]
        reps = (
            db.query(RepresentanteLegalRecord)
            .filter(RepresentanteLegalRecord.company_id.in_(company_ids))
            .all()
        )
        flows, notes, opinions = self._children(db, company_ids, [r.id for r in reps])

        users = load_user_refs(
            db,
            [c.created_by for c in records] + [r.created_by for r in flows + notes + opinions],
        )

        flows_by_company = defaultdict(list)
        for f in flows:
            if f.company_id:
                flows_by_company[f.company_id].append(f.to_entity(users))
        notes_by_company = defaultdict(list)
        for n in notes:
            if n.company_id:
                notes_by_company[n.company_id].append(n.to_entity(users))
        opinion_by_company = {o.company_id: o.to_entity(users) for o in opinions if o.company_id}
        rep_by_company = {
            r.company_id: self._build_representative(r, flows, notes, opinions, users) for r in reps
        }

        companies = []
        for record in records:
            company = record.to_entity(users)
            company.flows = flows_by_company.get(record.id, [])
            company.notes = notes_by_company.get(record.id, [])
            company.opinion = opinion_by_company.get(record.id)
            company.representative = rep_by_company.get(record.id)
            companies.append(company)
        return companies
