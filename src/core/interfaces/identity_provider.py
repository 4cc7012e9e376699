"""
Contract: Identity Provider

Fronteira com o provedor de autenticação hospedado. Somente leitura
para o núcleo, exceto nome/avatar do próprio perfil.
"""

from abc import ABC, abstractmethod

from src.core.entities.user import User, UserSession


class IIdentityProvider(ABC):
    """
    Port: Identity Provider

    Converte um token de acesso em uma UserSession e expõe os perfis.
    """

    @abstractmethod
    def get_current_user(self, token: str | None) -> UserSession | None:
        """
        Resolve a sessão a partir do token.

        Args:
            token: Access token emitido pelo provedor (ou None).

        Returns:
            UserSession, ou None se o token estiver ausente/inválido/expirado.
        """
        ...

    @abstractmethod
    def get_user_profile(self, user_id: str) -> User | None:
        ...

    @abstractmethod
    def list_users(self) -> list[User]:
        """Usuários disponíveis para atribuição de tarefas, por nome."""
        ...

    @abstractmethod
    def update_profile(self, user_id: str, changes: dict) -> User:
        ...
