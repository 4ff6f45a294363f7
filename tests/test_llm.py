"""Tests for model provider selection."""

from unittest.mock import patch

import pytest

from src.core.exceptions import ConfigurationError, MissingApiKeyError
from src.core.llm import GROQ_BASE_URL, AIProvider, get_chat_llm, parse_provider


class TestParseProvider:
    """Tests for parse_provider function."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("GROQ", AIProvider.GROQ),
            ("gemini", AIProvider.GEMINI),
            ("  Gemini ", AIProvider.GEMINI),
        ],
    )
    def test_known_providers(self, value, expected):
        assert parse_provider(value) is expected

    @pytest.mark.parametrize("value", ["OPENAI", "", None])
    def test_unknown_provider(self, value):
        with pytest.raises(ConfigurationError, match="Unsupported AI provider"):
            parse_provider(value)


class TestGetChatLLM:
    """Tests for get_chat_llm function."""

    @patch("src.core.llm.ChatOpenAI")
    def test_groq_uses_openai_compatible_endpoint(self, mock_chat, make_settings):
        settings = make_settings(ai_provider="GROQ", ai_provider_model="llama-3.3-70b", groq_api_key="gsk")

        llm = get_chat_llm(settings)

        assert llm is mock_chat.return_value
        mock_chat.assert_called_once_with(
            model="llama-3.3-70b",
            api_key="gsk",
            base_url=GROQ_BASE_URL,
            temperature=0.0,
            max_retries=2,
        )

    @patch("src.core.llm.ChatGoogleGenerativeAI")
    def test_gemini(self, mock_chat, settings):
        llm = get_chat_llm(settings)

        assert llm is mock_chat.return_value
        mock_chat.assert_called_once_with(
            model="gemini-1.5-pro",
            google_api_key="gemini-key",
            temperature=0.0,
            max_retries=2,
        )

    @patch("src.core.llm.ChatGoogleGenerativeAI")
    @patch("src.core.llm.ChatOpenAI")
    def test_missing_key_fails_before_client_construction(self, mock_openai, mock_gemini, make_settings):
        settings = make_settings(google_gemini_api_key=None, groq_api_key="gsk")

        with pytest.raises(MissingApiKeyError, match="GEMINI"):
            get_chat_llm(settings)

        mock_openai.assert_not_called()
        mock_gemini.assert_not_called()

    def test_missing_model(self, make_settings):
        with pytest.raises(ConfigurationError, match="AI_PROVIDER_MODEL"):
            get_chat_llm(make_settings(ai_provider_model=None))
