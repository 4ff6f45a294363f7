"""AI PR Reviewer - GitHub Action entry point."""

import asyncio
import sys

from pydantic import ValidationError

from src.config import Settings
from src.core.exceptions import ConfigurationError, ReviewerError
from src.core.logging import get_logger
from src.services.reviewer.service import review_pull_request

logger = get_logger("main")


def set_failed(message: str) -> None:
    """Mark the workflow step as failed with a single error annotation."""
    print(f"::error::{message}", flush=True)


def load_settings() -> Settings:
    """Read settings, reporting invalid inputs as a configuration error."""
    try:
        return Settings()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigurationError(f"Invalid inputs: {problems}") from e


def run(settings: Settings | None = None) -> int:
    """Run the action and return its exit code."""
    try:
        settings = settings or load_settings()
        asyncio.run(review_pull_request(settings))
    except ReviewerError as exc:
        logger.error(f"Review failed: {exc.message}")
        set_failed(exc.message)
        return 1
    except Exception as exc:
        logger.exception(f"Review failed: {exc}")
        set_failed(str(exc) or exc.__class__.__name__)
        return 1
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
