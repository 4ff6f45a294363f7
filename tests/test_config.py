"""Tests for action settings."""

from src.config import Settings
from src.core.logging import _load_settings


class TestSettings:
    """Tests for Settings."""

    def test_reads_action_environment(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "GROQ")
        monkeypatch.setenv("AI_PROVIDER_MODEL", "llama-3.3-70b")
        monkeypatch.setenv("MAX_PATCH_CHARS", "2500")
        monkeypatch.setenv("REVIEW_MODE", "reply")

        settings = Settings(_env_file=None)

        assert settings.ai_provider == "GROQ"
        assert settings.ai_provider_model == "llama-3.3-70b"
        assert settings.max_patch_chars == 2500
        assert settings.is_reply_mode is True

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.max_file_content_chars == settings.max_patch_chars == 10000
        assert settings.bot_login == "github-actions[bot]"
        assert settings.is_reply_mode is False

    def test_missing_required(self, monkeypatch):
        for name in ("GITHUB_TOKEN", "GITHUB_REPOSITORY", "GITHUB_EVENT_PATH", "AI_PROVIDER", "AI_PROVIDER_MODEL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None, ai_provider="GEMINI")

        assert settings.missing_required() == [
            "GITHUB_TOKEN",
            "GITHUB_REPOSITORY",
            "GITHUB_EVENT_PATH",
            "AI_PROVIDER_MODEL",
        ]

    def test_nothing_missing(self, settings):
        assert settings.missing_required() == []


def test_logging_settings_fall_back_on_invalid_inputs(monkeypatch):
    monkeypatch.setenv("MAX_PATCH_CHARS", "0")
    monkeypatch.setenv("RUNNER_DEBUG", "1")

    settings = _load_settings()

    assert settings.runner_debug is False
    assert settings.environment == "production"
