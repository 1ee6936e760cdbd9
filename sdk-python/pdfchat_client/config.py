from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PDFCHAT_", case_sensitive=False)

    api_url: str = Field("http://localhost:8000/", description="Base URL of the PDF chat backend")
    timeout_seconds: float = Field(30.0, gt=0, description="Per-request timeout for the httpx client")

    # Where the CLI keeps token/user_id between runs.
    # Defaults to ~/.config/pdfchat when unset
    config_dir: Optional[Path] = None

    log_level: str = "WARNING"


settings = Settings()
