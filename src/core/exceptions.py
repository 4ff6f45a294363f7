"""Exceptions raised by the reviewer action."""


class ReviewerError(Exception):
    """Base exception for all reviewer errors."""

    def __init__(
        self,
        message: str,
        details: dict | None = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(ReviewerError):
    """Action inputs are missing or invalid."""


class MissingApiKeyError(ConfigurationError):
    """No API key configured for the selected model provider."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"API KEY for provider: {provider} is not provided!")
        self.provider = provider


class UnsupportedEventError(ConfigurationError):
    """Action triggered by an event it cannot review."""

    def __init__(self, event: str | None) -> None:
        super().__init__(
            "This action can only be triggered by a pull request event.",
            {"event": event},
        )


class ExternalServiceError(ReviewerError):
    """External service (GitHub, model provider) error."""

    def __init__(self, service: str, message: str) -> None:
        super().__init__(f"{service} error: {message}")
        self.service = service


class ReviewGenerationError(ReviewerError):
    """The model never produced a usable review response."""
