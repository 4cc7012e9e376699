"""
User Repository — perfis da tabela users.
"""

import logging

from sqlalchemy import asc
from sqlalchemy.orm import sessionmaker

from src.core.entities.user import User, UserRole
from src.infrastructure.db.database import get_db, get_session_factory, store_errors
from src.infrastructure.db.models import UserRecord, utcnow
from src.infrastructure.db.repository import fetch_or_raise

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user profiles."""

    def __init__(self, session_factory: sessionmaker = None):
        self._factory = session_factory or get_session_factory()

    def get(self, user_id: str) -> User | None:
        with store_errors("get_user_profile", "users"), get_db(self._factory) as db:
            record = db.get(UserRecord, user_id)
            return record.to_entity() if record else None

    def list_users(self) -> list[User]:
        with store_errors("list_users", "users"), get_db(self._factory) as db:
            records = db.query(UserRecord).order_by(asc(UserRecord.name)).all()
            return [r.to_entity() for r in records]

    def update(self, user_id: str, changes: dict) -> User:
        """Só nome e avatar; o papel (role) não é editável por aqui."""
        with store_errors("update_profile", "users"), get_db(self._factory) as db:
            record = fetch_or_raise(db, UserRecord, user_id, "user")
            for key in ("name", "avatar_url"):
                if key in changes:
                    setattr(record, key, changes[key])
            record.updated_at = utcnow()
            db.flush()
            return record.to_entity()

    def upsert(self, user_id: str, email: str, name: str = "", role: UserRole = UserRole.USER) -> User:
        """Provisiona um perfil (cadastro no provedor / seed)."""
        with store_errors("upsert_user", "users"), get_db(self._factory) as db:
            record = db.get(UserRecord, user_id)
            if record is None:
                record = UserRecord(id=user_id, email=email, name=name or email.split("@")[0], role=role.value)
                db.add(record)
                logger.info(f"User profile {user_id} created [{role.value}]")
            else:
                record.email = email
                if name:
                    record.name = name
                record.role = role.value
                record.updated_at = utcnow()
            db.flush()
            return record.to_entity()
