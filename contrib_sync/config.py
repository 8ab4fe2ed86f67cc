from datetime import date
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import AuthorIdentity, ScheduleConfig


class Settings(BaseSettings):
    """Runtime configuration for the contribution sync service."""

    model_config = SettingsConfigDict(env_prefix="CONTRIB_SYNC_")

    author_name: str = Field("Your Name", min_length=1)
    author_email: str = Field(
        "your.email@example.com", pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
    )
    year: int = Field(default_factory=lambda: date.today().year)
    ledger_path: str = "contributions.txt"
    ledger_header: str = "GitHub Contributions History"
    enable_batching: bool = True
    batch_size: int = Field(500, gt=0, le=5000)
    batch_delay_minutes: int = Field(5, ge=0, le=60)
    approximate_policy: Literal["include", "exclude"] = "include"
    output_dir: str = "."
    git_remote: str = "origin"
    git_branch: str = "main"
    verbose: bool = False
    json_logs: bool = False

    def schedule_config(self) -> ScheduleConfig:
        return ScheduleConfig(
            batching_enabled=self.enable_batching,
            batch_threshold=self.batch_size,
            inter_batch_delay_seconds=self.batch_delay_minutes * 60,
        )

    def author(self) -> AuthorIdentity:
        return AuthorIdentity(name=self.author_name, email=self.author_email)


settings = Settings()
