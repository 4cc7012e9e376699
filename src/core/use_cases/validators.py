"""
Validação de entrada comum aos workflows.

Tudo aqui roda antes de qualquer chamada ao store e levanta
ValidationError / NotAuthenticatedError.
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import TypeVar

from src.core.entities.user import UserSession
from src.core.exceptions import NotAuthenticatedError, ValidationError

E = TypeVar("E", bound=Enum)


def require_session(session: UserSession | None) -> UserSession:
    """Falha rápido quando não há sessão."""
    if session is None or not session.user_id:
        raise NotAuthenticatedError()
    return session


def require_text(field: str, value: str | None) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(field, "is required")
    return str(value).strip()


def optional_text(value: str | None) -> str:
    return (value or "").strip()


def only_digits(value: str | None) -> str:
    """Remove pontuação (pontos, barras, hífens, espaços)."""
    return re.sub(r"\D", "", value or "")


def parse_date(field: str, value: date | str | None, required: bool = True) -> date | None:
    """Aceita date, datetime ou string ISO (yyyy-mm-dd)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(field, "is required")
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(field, f"invalid date: {value!r}")
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        raise ValidationError(field, f"invalid date: {value!r}") from None


def parse_enum(enum_cls: type[E], field: str, value) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(field, f"{value!r} is not one of: {allowed}") from None
