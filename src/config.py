"""Configuration for the AI PR Reviewer action."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

REVIEW_MODE_REVIEW = "review"
REVIEW_MODE_REPLY = "reply"


class Settings(BaseSettings):
    """Action settings with environment variable support.

    GitHub Actions inputs are mapped to these variables in ``action.yml``;
    the ``GITHUB_*`` runner variables are read as-is.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    environment: str = Field(default="production")
    runner_debug: bool = Field(default=False)

    # GitHub runner context
    github_token: Optional[str] = Field(default=None)
    github_repository: Optional[str] = Field(default=None)
    github_event_name: Optional[str] = Field(default=None)
    github_event_path: Optional[str] = Field(default=None)
    github_workspace: Optional[str] = Field(default=None)

    # LLM
    ai_provider: Optional[str] = Field(default=None)
    ai_provider_model: Optional[str] = Field(default=None)
    groq_api_key: Optional[str] = Field(default=None)
    google_gemini_api_key: Optional[str] = Field(default=None)

    # Knowledge tools
    tavily_api_key: Optional[str] = Field(default=None)

    # Review Configuration
    codebase_high_overview_description: str = Field(default="")
    review_mode: str = Field(default=REVIEW_MODE_REVIEW)
    bot_login: str = Field(default="github-actions[bot]")
    max_file_content_chars: int = Field(default=10000, gt=0)
    max_patch_chars: int = Field(default=10000, gt=0)
    max_files_per_review: int = Field(default=50, gt=0)

    def missing_required(self) -> list[str]:
        """Names of required inputs that are not set."""
        required = {
            "GITHUB_TOKEN": self.github_token,
            "GITHUB_REPOSITORY": self.github_repository,
            "GITHUB_EVENT_PATH": self.github_event_path,
            "AI_PROVIDER": self.ai_provider,
            "AI_PROVIDER_MODEL": self.ai_provider_model,
        }
        return [name for name, value in required.items() if not value]

    @property
    def is_reply_mode(self) -> bool:
        return self.review_mode.strip().lower() == REVIEW_MODE_REPLY

