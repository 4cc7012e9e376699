"""
Database bootstrap — CCJB Compliance

Creates every table and, optionally, a demo profile plus an access token
in the hosted provider's format (for local use of the API).

Usage:
    python -m scripts.init_db [--database-url sqlite:///ccjb_compliance.db]
    python -m scripts.init_db --seed-user ana@ccjb.com.br --name "Ana" --admin
"""
import argparse
import sys
import uuid
from datetime import timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.config.logging_config import configure_logging
from src.config.settings import get_settings
from src.core.entities.user import UserRole
from src.infrastructure.auth.jwt_identity import issue_token
from src.infrastructure.db.database import create_db_engine, create_session_factory, init_db
from src.infrastructure.db.user_repository import UserRepository


def main():
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create tables and seed a demo user")
    parser.add_argument("--database-url", default=settings.database_url, help="SQLAlchemy URL")
    parser.add_argument("--seed-user", metavar="EMAIL", help="Create/refresh a profile for EMAIL")
    parser.add_argument("--name", default="", help="Display name for the seeded user")
    parser.add_argument("--admin", action="store_true", help="Seed the user with role admin")
    parser.add_argument("--token-hours", type=int, default=12, help="Lifetime of the printed token")
    args = parser.parse_args()

    configure_logging(settings.log_level)

    engine = create_db_engine(args.database_url)
    init_db(engine)
    print(f"Tables ready on {engine.url.render_as_string(hide_password=True)}")

    if not args.seed_user:
        return

    users = UserRepository(create_session_factory(engine))
    existing = [u for u in users.list_users() if u.email == args.seed_user]
    user_id = existing[0].id if existing else str(uuid.uuid4())
    role = UserRole.ADMIN if args.admin else UserRole.USER
    user = users.upsert(user_id, args.seed_user, args.name, role=role)

    token = issue_token(
        user.id,
        user.email,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        audience=settings.jwt_audience,
        expires_in=timedelta(hours=args.token_hours),
    )
    print(f"  → User: {user.name} <{user.email}> [{user.role.value}] id={user.id}")
    print(f"  → Bearer token ({args.token_hours}h):\n{token}")


if __name__ == "__main__":
    main()
