from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pdfplumber"

    state_dir: Path = Path(".lotfill")
    state_key: str = "lotfill_batch_v1"

    target_host: str = "json_drafts"
    drafts_dir: Path = Path(".lotfill/drafts")
    source_url: str = ""

    filename_underscore_to_slash: bool = False
    default_quantity: int = 1

    poll_interval_seconds: float = 0.05
    poll_max_attempts: int = 600
    poll_backoff_factor: float = 1.0
    poll_max_interval_seconds: float = 1.0
