"""Configuration settings using Pydantic."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INTRO = (
    "This survey asks how you feel about your day-to-day work and what would "
    "make it better. There are no right answers; please be candid."
)


class ServerSettings(BaseSettings):
    """WebSocket server configuration."""
    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8765
    http_port: int = 8080  # health check and report endpoint


class StorageSettings(BaseSettings):
    """Storage backend configuration."""
    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    backend: str = "local"  # local, memory, supabase
    data_path: str = "./data"


class SupabaseSettings(BaseSettings):
    """Supabase configuration."""
    model_config = SettingsConfigDict(env_prefix="SUPABASE_")

    url: str = ""
    key: str = ""
    table: str = "survey_submissions"

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.key)


class SurveySettings(BaseSettings):
    """Respondent-facing survey text."""
    model_config = SettingsConfigDict(env_prefix="SURVEY_")

    title: str = "Team Pulse Survey"
    intro_text: str = DEFAULT_INTRO


class LoggingSettings(BaseSettings):
    """Logging configuration."""
    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    json_logs: bool = False


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    server: ServerSettings = Field(default_factory=ServerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    supabase: SupabaseSettings = Field(default_factory=SupabaseSettings)
    survey: SurveySettings = Field(default_factory=SurveySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
