"""
Adapter: JWT Identity Provider

Valida os access tokens emitidos pelo provedor de autenticação hospedado
(HS256, ``sub`` = id do usuário, audience "authenticated") e carrega o
perfil da tabela users. Login/cadastro ficam no provedor.
"""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from src.core.entities.user import User, UserRole, UserSession
from src.core.exceptions import RemoteStoreError
from src.core.interfaces.identity_provider import IIdentityProvider
from src.infrastructure.db.user_repository import UserRepository

logger = logging.getLogger(__name__)


class JWTIdentityProvider(IIdentityProvider):

    def __init__(
        self,
        users: UserRepository,
        secret: str,
        algorithm: str = "HS256",
        audience: str | None = "authenticated",
    ):
        self._users = users
        self._secret = secret
        self._algorithm = algorithm
        self._audience = audience

    def get_current_user(self, token: str | None) -> UserSession | None:
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                options={"verify_aud": self._audience is not None},
            )
        except JWTError as e:
            logger.info(f"Rejected access token: {e}")
            return None

        user_id = payload.get("sub")
        if not user_id:
            return None

        email = payload.get("email", "")
        role = UserRole.USER
        try:
            profile = self._users.get(user_id)
            if profile is None:
                if not email:
                    # sem perfil e sem email não há como provisionar (users.email é obrigatório)
                    logger.info(f"Rejected access token: no profile and no email for {user_id}")
                    return None
                # primeiro acesso: provisiona o perfil como o trigger de cadastro
                profile = self._users.upsert(user_id, email)
        except RemoteStoreError as e:
            logger.warning(f"Profile lookup failed for {user_id}: {e}")
            profile = None
        if profile is not None:
            email = profile.email or email
            role = profile.role
        return UserSession(user_id=user_id, email=email, role=role)

    def get_user_profile(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def list_users(self) -> list[User]:
        return self._users.list_users()

    def update_profile(self, user_id: str, changes: dict) -> User:
        return self._users.update(user_id, changes)


def issue_token(
    user_id: str,
    email: str,
    secret: str,
    algorithm: str = "HS256",
    audience: str = "authenticated",
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Emite um token no mesmo formato do provedor (scripts e testes)."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "email": email,
        "aud": audience,
        "role": "authenticated",
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(claims, secret, algorithm=algorithm)
