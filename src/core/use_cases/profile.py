"""
Use Case: Profile

Perfil do usuário logado e lista de usuários para atribuição.
"""

import logging

from src.core.entities.user import ProfileUpdate, User, UserSession
from src.core.exceptions import RemoteStoreError
from src.core.interfaces.identity_provider import IIdentityProvider
from src.core.use_cases.validators import require_session, require_text

logger = logging.getLogger(__name__)


class ProfileUseCase:

    def __init__(self, identity: IIdentityProvider):
        self._identity = identity

    def get_profile(self, session: UserSession | None) -> User:
        """Perfil do banco; sem linha de perfil, monta um a partir da sessão."""
        session = require_session(session)
        profile = self._identity.get_user_profile(session.user_id)
        if profile is None:
            return User(
                id=session.user_id,
                email=session.email,
                name=session.email.split("@")[0] if session.email else "",
                role=session.role,
            )
        return profile

    def update_profile(self, session: UserSession | None, data: ProfileUpdate) -> User:
        session = require_session(session)
        changes = {}
        if data.name is not None:
            changes["name"] = require_text("name", data.name)
        if data.avatar_url is not None:
            changes["avatar_url"] = data.avatar_url.strip() or None
        if not changes:
            return self.get_profile(session)
        return self._identity.update_profile(session.user_id, changes)

    def list_users(self) -> list[User]:
        try:
            return self._identity.list_users()
        except RemoteStoreError as e:
            logger.warning(f"Could not list users: {e}")
            return []
