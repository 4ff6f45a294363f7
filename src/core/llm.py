"""LLM clients for the supported providers."""

from enum import Enum

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from src.config import Settings
from src.core.exceptions import ConfigurationError, MissingApiKeyError
from src.core.logging import get_logger

logger = get_logger("llm")

# Groq serves an OpenAI-compatible API
GROQ_BASE_URL = "https://api.groq.com/openai/v1"

MAX_RETRIES = 2


class AIProvider(str, Enum):
    """Model providers the action can talk to."""

    GROQ = "GROQ"
    GEMINI = "GEMINI"


def parse_provider(value: str | None) -> AIProvider:
    """Resolve the ``ai_provider`` input to a provider."""
    try:
        return AIProvider((value or "").strip().upper())
    except ValueError:
        supported = ", ".join(p.value for p in AIProvider)
        raise ConfigurationError(
            f"Unsupported AI provider: {value!r}. Use one of: {supported}"
        ) from None


def provider_api_key(provider: AIProvider, settings: Settings) -> str | None:
    if provider is AIProvider.GROQ:
        return settings.groq_api_key
    return settings.google_gemini_api_key


def get_chat_llm(
    settings: Settings,
    temperature: float = 0.0,
) -> BaseChatModel:
    """Build the chat model for the configured provider.

    Raises ``MissingApiKeyError`` before any client is constructed when the
    selected provider has no key, so the run stops before any network call.
    """
    provider = parse_provider(settings.ai_provider)
    model = settings.ai_provider_model
    if not model:
        raise ConfigurationError("AI_PROVIDER_MODEL not configured")

    api_key = provider_api_key(provider, settings)
    if not api_key:
        raise MissingApiKeyError(provider.value)

    logger.info(f"[LLM] Using {provider.value}: {model}")

    if provider is AIProvider.GROQ:
        return ChatOpenAI(
            model=model,
            api_key=api_key,
            base_url=GROQ_BASE_URL,
            temperature=temperature,
            max_retries=MAX_RETRIES,
        )

    return ChatGoogleGenerativeAI(
        model=model,
        google_api_key=api_key,
        temperature=temperature,
        max_retries=MAX_RETRIES,
    )
