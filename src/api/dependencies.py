"""
Composition root — monta adapters e use cases a partir das settings.

As rotas dependem de get_container(); os testes sobrescrevem essa
dependência com um container ligado a um banco em memória.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, Header
from sqlalchemy.orm import sessionmaker

from src.config.settings import Settings, get_settings
from src.core.entities.user import UserSession
from src.core.interfaces.company_registry import ICompanyRegistry
from src.core.interfaces.identity_provider import IIdentityProvider
from src.core.use_cases.company_workflow import CompanyWorkflowUseCase
from src.core.use_cases.notifications import NotificationUseCase
from src.core.use_cases.prefill_company import PrefillCompanyUseCase
from src.core.use_cases.profile import ProfileUseCase
from src.core.use_cases.task_workflow import TaskWorkflowUseCase
from src.infrastructure.auth.jwt_identity import JWTIdentityProvider
from src.infrastructure.db.repository import CompanyRepository
from src.infrastructure.db.task_repository import NotificationRepository, TaskRepository
from src.infrastructure.db.user_repository import UserRepository
from src.infrastructure.registry.cnpja_registry import CnpjaRegistryClient
from src.infrastructure.rules.brazilian_tax_id_rules import BrazilianTaxIdRules

logger = logging.getLogger(__name__)


@dataclass
class Container:
    identity: IIdentityProvider
    companies: CompanyWorkflowUseCase
    tasks: TaskWorkflowUseCase
    notifications: NotificationUseCase
    prefill: PrefillCompanyUseCase
    profile: ProfileUseCase


def build_container(
    settings: Settings,
    session_factory: sessionmaker | None = None,
    registry: ICompanyRegistry | None = None,
) -> Container:
    """Factory — use cases com adapters concretos."""
    rules = BrazilianTaxIdRules(strict_checksum=settings.strict_tax_id_checksum)
    identity = JWTIdentityProvider(
        users=UserRepository(session_factory),
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        audience=settings.jwt_audience,
    )
    if registry is None and settings.registry_enabled:
        registry = CnpjaRegistryClient(
            base_url=settings.registry_base_url,
            timeout=settings.registry_timeout_seconds,
        )

    notifications = NotificationUseCase(NotificationRepository(session_factory))
    return Container(
        identity=identity,
        companies=CompanyWorkflowUseCase(CompanyRepository(session_factory), rules),
        tasks=TaskWorkflowUseCase(TaskRepository(session_factory), notifications),
        notifications=notifications,
        prefill=PrefillCompanyUseCase(registry, rules),
        profile=ProfileUseCase(identity),
    )


# Lazy singleton
_container: Container | None = None


def get_container() -> Container:
    global _container
    if _container is None:
        _container = build_container(get_settings())
        logger.info("Service container ready")
    return _container


def current_session(
    authorization: str | None = Header(default=None),
    container: Container = Depends(get_container),
) -> UserSession | None:
    """Bearer token → UserSession; None quando ausente ou inválido."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return container.identity.get_current_user(token.strip())
