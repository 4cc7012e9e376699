"""
Tests for the company review workflow.

Validates:
- create_company defaults and the list round-trip
- unconditional status changes (reopen allowed)
- archive / restore and the dashboard partition
- partial updates and field validation
- session check before any store call
"""

from datetime import date

import pytest

from src.core.entities.company import (
    Company,
    CompanySize,
    CompanyStatus,
    Priority,
    RiskLevel,
)
from src.core.exceptions import (
    NotAuthenticatedError,
    RecordNotFoundError,
    RemoteStoreError,
    ValidationError,
)
from src.core.use_cases.company_workflow import CompanyWorkflowUseCase, partition_companies
from tests.conftest import ACME_CNPJ, ANALYST_ID, make_company_input


# =============================================================================
# Creation
# =============================================================================


class TestCreateCompany:

    def test_defaults(self, company):
        """Nova empresa: todo, não arquivada, risco Baixo, prioridade medium."""
        assert company.status == CompanyStatus.TODO
        assert company.archived is False
        assert company.risk == RiskLevel.BAIXO
        assert company.priority == Priority.MEDIUM
        assert company.id
        assert company.created_at is not None

    def test_author_is_acting_user(self, company):
        assert company.created_by == ANALYST_ID
        assert company.creator is not None
        assert company.creator.name == "Ana Analista"

    def test_round_trip_through_list(self, workflow, analyst):
        """createCompany(x) → listCompanies() devolve exatamente o registro enviado."""
        created = workflow.create_company(analyst, make_company_input(
            size="EPP",
            state="SP",
            city="São Paulo",
            address="Rua A, 10",
            cnae="6201-5/01",
            phone="(11) 99999-0000",
            email="contato@acme.com.br",
            founded_on="2010-05-20",
            risk="Alto",
            priority="high",
        ))

        listed = workflow.list_companies()
        assert len(listed) == 1
        stored = listed[0]
        assert stored.id == created.id
        assert stored.cnpj == ACME_CNPJ
        assert stored.name == "Acme Ltda"
        assert stored.due_date == date(2025, 12, 31)
        assert stored.size == CompanySize.EPP
        assert stored.state == "SP"
        assert stored.city == "São Paulo"
        assert stored.address == "Rua A, 10"
        assert stored.cnae == "6201-5/01"
        assert stored.phone == "(11) 99999-0000"
        assert stored.email == "contato@acme.com.br"
        assert stored.founded_on == date(2010, 5, 20)
        assert stored.risk == RiskLevel.ALTO
        assert stored.priority == Priority.HIGH
        assert stored.flows == []
        assert stored.notes == []
        assert stored.representative is None
        assert stored.opinion is None

    def test_requires_session(self, workflow):
        with pytest.raises(NotAuthenticatedError):
            workflow.create_company(None, make_company_input())

    @pytest.mark.parametrize("field", ["cnpj", "name", "due_date"])
    def test_required_fields(self, workflow, analyst, field):
        with pytest.raises(ValidationError) as exc:
            workflow.create_company(analyst, make_company_input(**{field: ""}))
        assert exc.value.field == field

    def test_cnpj_must_have_14_digits(self, workflow, analyst):
        with pytest.raises(ValidationError) as exc:
            workflow.create_company(analyst, make_company_input(cnpj="12.345.678/0001"))
        assert exc.value.field == "cnpj"

    def test_rejects_unknown_enum_value(self, workflow, analyst):
        with pytest.raises(ValidationError) as exc:
            workflow.create_company(analyst, make_company_input(risk="Extremo"))
        assert exc.value.field == "risk"

    def test_rejects_malformed_date(self, workflow, analyst):
        with pytest.raises(ValidationError):
            workflow.create_company(analyst, make_company_input(due_date="31/12/2025"))

    @pytest.mark.parametrize("due_date", [20251231, 2025.5, ["2025-12-31"]])
    def test_non_text_date_is_a_validation_error(self, workflow, analyst, due_date):
        with pytest.raises(ValidationError) as exc:
            workflow.create_company(analyst, make_company_input(due_date=due_date))
        assert exc.value.field == "due_date"

    def test_validation_happens_before_store(self, tax_id_rules, analyst):
        """Sem sessão ou com campo inválido, o store nunca é chamado."""

        class ExplodingStore:
            def __getattr__(self, name):
                raise AssertionError(f"store.{name} should not be called")

        workflow = CompanyWorkflowUseCase(ExplodingStore(), tax_id_rules)
        with pytest.raises(NotAuthenticatedError):
            workflow.create_company(None, make_company_input())
        with pytest.raises(ValidationError):
            workflow.create_company(analyst, make_company_input(name="  "))


# =============================================================================
# Status
# =============================================================================


class TestChangeStatus:

    def test_reopen_completed_company(self, workflow, analyst, company):
        """completed → todo é aceito e não mexe nos outros campos."""
        done = workflow.change_status(analyst, company.id, "completed")
        assert done.status == CompanyStatus.COMPLETED

        reopened = workflow.change_status(analyst, company.id, "todo")
        assert reopened.status == CompanyStatus.TODO
        assert reopened.cnpj == company.cnpj
        assert reopened.name == company.name
        assert reopened.due_date == company.due_date
        assert reopened.risk == company.risk
        assert reopened.priority == company.priority
        assert reopened.archived is False
        assert reopened.created_at == company.created_at

    def test_any_enum_value_accepted(self, workflow, analyst, company):
        for status in ("completed", "in-progress", "todo", "completed"):
            assert workflow.change_status(analyst, company.id, status).status == CompanyStatus(status)

    def test_invalid_status(self, workflow, analyst, company):
        with pytest.raises(ValidationError):
            workflow.change_status(analyst, company.id, "done")

    def test_requires_session(self, workflow, company):
        with pytest.raises(NotAuthenticatedError):
            workflow.change_status(None, company.id, "completed")

    def test_unknown_company(self, workflow, analyst):
        with pytest.raises(RecordNotFoundError):
            workflow.change_status(analyst, "missing", "completed")


# =============================================================================
# Archive / partition
# =============================================================================


class TestArchiveAndBuckets:

    def test_archive_and_restore(self, workflow, analyst, company):
        archived = workflow.archive(analyst, company.id)
        assert archived.archived is True
        assert archived.status == CompanyStatus.TODO

        restored = workflow.restore(analyst, company.id)
        assert restored.archived is False
        assert restored.status == CompanyStatus.TODO

    def test_archived_company_leaves_active_buckets(self, workflow, analyst, company):
        workflow.change_status(analyst, company.id, "in-progress")
        workflow.archive(analyst, company.id)

        buckets = workflow.buckets()
        assert buckets["todo"] == []
        assert buckets["in-progress"] == []
        assert buckets["completed"] == []
        assert [c.id for c in buckets["archived"]] == [company.id]

    def test_partition_is_complete_and_disjoint(self, workflow, analyst):
        ids = {}
        for name, status in [("A", "todo"), ("B", "in-progress"), ("C", "completed"), ("D", "todo")]:
            ids[name] = workflow.create_company(analyst, make_company_input(name=name, status=status)).id
        workflow.archive(analyst, ids["D"])

        buckets = workflow.buckets()
        seen = [c.id for items in buckets.values() for c in items]
        assert sorted(seen) == sorted(ids.values())
        assert [c.name for c in buckets["todo"]] == ["A"]
        assert [c.name for c in buckets["in-progress"]] == ["B"]
        assert [c.name for c in buckets["completed"]] == ["C"]
        assert [c.name for c in buckets["archived"]] == ["D"]

    def test_stats(self, workflow, analyst):
        workflow.create_company(analyst, make_company_input(name="A"))
        b = workflow.create_company(analyst, make_company_input(name="B", status="completed"))
        workflow.archive(analyst, b.id)

        assert workflow.stats() == {
            "todo": 1,
            "in-progress": 0,
            "completed": 0,
            "archived": 1,
            "total": 2,
        }

    def test_partition_helper(self):
        def make(company_id, status, archived):
            return Company(
                id=company_id, cnpj=ACME_CNPJ, name="X",
                due_date=date(2025, 1, 1), status=status, archived=archived,
            )

        buckets = partition_companies([
            make("archived-done", CompanyStatus.COMPLETED, True),
            make("active-done", CompanyStatus.COMPLETED, False),
        ])
        assert [c.id for c in buckets["completed"]] == ["active-done"]
        assert [c.id for c in buckets["archived"]] == ["archived-done"]
        assert set(buckets) == {"todo", "in-progress", "completed", "archived"}


# =============================================================================
# Update
# =============================================================================


class TestUpdateCompany:

    def test_applies_only_given_fields(self, workflow, analyst, company):
        updated = workflow.update_company(analyst, company.id, {"city": "Recife", "priority": "low"})
        assert updated.city == "Recife"
        assert updated.priority == Priority.LOW
        assert updated.name == company.name
        assert updated.cnpj == company.cnpj

    def test_rejects_unknown_field(self, workflow, analyst, company):
        with pytest.raises(ValidationError):
            workflow.update_company(analyst, company.id, {"created_by": "someone"})

    def test_rejects_blank_name(self, workflow, analyst, company):
        with pytest.raises(ValidationError):
            workflow.update_company(analyst, company.id, {"name": ""})

    def test_empty_changes_returns_current(self, workflow, analyst, company):
        assert workflow.update_company(analyst, company.id, {}).id == company.id


# =============================================================================
# Degraded reads
# =============================================================================


class TestDegradedReads:

    def test_list_failure_degrades_to_empty(self, tax_id_rules, caplog):
        class FailingStore:
            def list_companies(self):
                raise RemoteStoreError("connection refused", operation="list_companies")

        workflow = CompanyWorkflowUseCase(FailingStore(), tax_id_rules)
        assert workflow.list_companies() == []
        assert workflow.buckets()["todo"] == []
        assert "Could not list companies" in caplog.text

    def test_mutation_failure_propagates(self, tax_id_rules, analyst):
        class FailingStore:
            def insert_company(self, fields, created_by):
                raise RemoteStoreError("connection refused", operation="insert_company")

        workflow = CompanyWorkflowUseCase(FailingStore(), tax_id_rules)
        with pytest.raises(RemoteStoreError):
            workflow.create_company(analyst, make_company_input())
