"""Shared fixtures for reviewer tests."""

import json
from unittest.mock import MagicMock

import pytest

from src.config import Settings
from src.services.github.client import GitHubClient
from src.services.github.schemas import ChangedFile, PullRequestInfo
from tests.helpers import FILE_A_PATCH, FILE_B_PATCH

PROVIDER_ENV_VARS = ("GROQ_API_KEY", "GOOGLE_GEMINI_API_KEY", "TAVILY_API_KEY")


@pytest.fixture(autouse=True)
def clear_provider_env(monkeypatch):
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def event_path(tmp_path):
    path = tmp_path / "event.json"
    path.write_text(
        json.dumps(
            {
                "action": "opened",
                "pull_request": {"number": 7, "head": {"ref": "feature/rename"}},
            }
        )
    )
    return path


@pytest.fixture
def make_settings(event_path):
    def _make(**overrides) -> Settings:
        values = {
            "github_token": "ghs_test",
            "github_repository": "acme/app",
            "github_event_name": "pull_request",
            "github_event_path": str(event_path),
            "github_workspace": None,
            "ai_provider": "GEMINI",
            "ai_provider_model": "gemini-1.5-pro",
            "google_gemini_api_key": "gemini-key",
            "groq_api_key": None,
            "tavily_api_key": None,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def changed_files():
    return [
        ChangedFile(filename="a.py", status="modified", additions=2, deletions=2, patch=FILE_A_PATCH),
        ChangedFile(filename="b.py", status="added", additions=2, patch=FILE_B_PATCH),
    ]


@pytest.fixture
def github(changed_files):
    client = MagicMock(spec=GitHubClient)
    client.ref = "acme/app#7"
    client.head_ref = "feature/rename"
    client.fetch_readme.return_value = "# App"
    client.fetch_pull_request.return_value = PullRequestInfo(
        number=7,
        title="Rename variables",
        description="Clearer names",
        mergeable=True,
        mergeable_state="clean",
        changed_files=len(changed_files),
        head_ref="feature/rename",
    )
    client.fetch_pr_files.return_value = changed_files
    client.fetch_reviews.return_value = []
    client.fetch_review_comments.return_value = []
    client.fetch_file_contents.return_value = "y = 1\nz = 2\n"
    return client
