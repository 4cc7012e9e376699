"""
Application Settings.

Centraliza toda configuração via .env / variáveis de ambiente.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configurações carregadas de variáveis de ambiente."""

    # --- App ---
    env: str = "development"
    debug: bool = True
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    # --- Database ---
    database_url: str = "sqlite:///ccjb_compliance.db"

    # --- Auth (tokens do provedor hospedado) ---
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    # --- Company registry ---
    registry_enabled: bool = True
    registry_base_url: str = "https://open.cnpja.com/office"
    registry_timeout_seconds: float = 10.0

    # --- Rules ---
    strict_tax_id_checksum: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Singleton de settings."""
    return Settings()
