"""Configuración del proyecto."""

from pathlib import Path
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DATABASE_", extra="ignore")

    host: str = "localhost"
    port: int = 5432
    name: str = "postgres"
    user: str = "postgres"
    password: str = ""
    ssl: bool = False
    schema_name: str = "public"

    # Pool
    pool_max: int = 10
    idle_timeout_ms: int = 30000
    connect_timeout_ms: int = 10000

    def connect_kwargs(self) -> dict:
        """Parámetros para psycopg2.connect"""
        kwargs = {
            "host": self.host,
            "port": self.port,
            "dbname": self.name,
            "user": self.user,
            "password": self.password,
            "connect_timeout": max(1, self.connect_timeout_ms // 1000),
        }
        if self.ssl:
            kwargs["sslmode"] = "require"
        return kwargs


class AISettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    gemini_api_key: str = ""
    claude_api_key: str = ""
    llm_provider: str = "gemini"
    gemini_model: str = "gemini-2.0-flash"
    claude_model: str = "claude-sonnet-4-20250514"
    llm_temperature: float = 0.1
    llm_max_tokens: int = 1024
    llm_timeout_s: float = 60.0

    @field_validator("llm_provider")
    @classmethod
    def _normalize_provider(cls, value: str) -> str:
        return value.strip().lower()


class QuerySettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    query_timeout_ms: int = 30000
    max_result_rows: int = 1000


class LogSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")

    level: str = "INFO"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "NL2SQL"
    debug: bool = False
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    ai: AISettings = Field(default_factory=AISettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    logs: LogSettings = Field(default_factory=LogSettings)


settings = Settings()
