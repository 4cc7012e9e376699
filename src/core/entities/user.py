"""
Entity: User / UserSession

Perfil do usuário (criado pelo provedor de identidade) e a sessão
explícita passada para cada chamada de workflow.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass
class User:
    """Perfil de usuário. Somente nome e avatar são editáveis aqui."""
    id: str
    email: str
    name: str = ""
    role: UserRole = UserRole.USER
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class UserSession:
    """Identidade autenticada do chamador."""
    user_id: str
    email: str = ""
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass
class UserRef:
    """Resumo de usuário embutido em registros (autor, responsável)."""
    id: str
    name: str = ""
    email: str = ""
    avatar_url: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserRef":
        return cls(id=user.id, name=user.name, email=user.email, avatar_url=user.avatar_url)


@dataclass
class ProfileUpdate:
    name: str | None = None
    avatar_url: str | None = None
