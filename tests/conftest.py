"""
Shared fixtures.

Every test gets its own in-memory SQLite database with foreign keys on.
Two user profiles are seeded so created_by / assigned_to references
resolve: ANALYST (the acting user in most tests) and REVIEWER.
"""

import pytest

from src.core.entities.company import CompanyInput
from src.core.entities.user import UserRole, UserSession
from src.core.use_cases.company_workflow import CompanyWorkflowUseCase
from src.core.use_cases.notifications import NotificationUseCase
from src.core.use_cases.task_workflow import TaskWorkflowUseCase
from src.infrastructure.db.database import create_db_engine, create_session_factory, init_db
from src.infrastructure.db.repository import CompanyRepository
from src.infrastructure.db.task_repository import NotificationRepository, TaskRepository
from src.infrastructure.db.user_repository import UserRepository
from src.infrastructure.rules.brazilian_tax_id_rules import BrazilianTaxIdRules

ANALYST_ID = "00000000-0000-4000-a000-000000000001"
REVIEWER_ID = "00000000-0000-4000-a000-000000000002"

ACME_CNPJ = "12.345.678/0001-99"
VALID_CPF = "529.982.247-25"


def make_company_input(**overrides) -> CompanyInput:
    values = {
        "cnpj": ACME_CNPJ,
        "name": "Acme Ltda",
        "due_date": "2025-12-31",
    }
    values.update(overrides)
    return CompanyInput(**values)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def user_repo(session_factory):
    repo = UserRepository(session_factory)
    repo.upsert(ANALYST_ID, "ana@ccjb.com.br", "Ana Analista")
    repo.upsert(REVIEWER_ID, "rui@ccjb.com.br", "Rui Revisor", role=UserRole.ADMIN)
    return repo


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

@pytest.fixture
def analyst(user_repo) -> UserSession:
    return UserSession(user_id=ANALYST_ID, email="ana@ccjb.com.br", role=UserRole.USER)


@pytest.fixture
def reviewer(user_repo) -> UserSession:
    return UserSession(user_id=REVIEWER_ID, email="rui@ccjb.com.br", role=UserRole.ADMIN)


# ---------------------------------------------------------------------------
# Stores & use cases
# ---------------------------------------------------------------------------

@pytest.fixture
def company_store(session_factory):
    return CompanyRepository(session_factory)


@pytest.fixture
def task_store(session_factory):
    return TaskRepository(session_factory)


@pytest.fixture
def notification_store(session_factory):
    return NotificationRepository(session_factory)


@pytest.fixture
def tax_id_rules():
    return BrazilianTaxIdRules()


@pytest.fixture
def workflow(company_store, tax_id_rules):
    return CompanyWorkflowUseCase(company_store, tax_id_rules)


@pytest.fixture
def notifications(notification_store):
    return NotificationUseCase(notification_store)


@pytest.fixture
def tasks(task_store, notifications):
    return TaskWorkflowUseCase(task_store, notifications)


@pytest.fixture
def company(workflow, analyst):
    """Acme Ltda, created by the analyst."""
    return workflow.create_company(analyst, make_company_input())
