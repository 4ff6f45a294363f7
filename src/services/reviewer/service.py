"""Reviewer service - orchestration layer."""

from src.config import REVIEW_MODE_REPLY, REVIEW_MODE_REVIEW, Settings
from src.core.exceptions import ConfigurationError
from src.core.llm import get_chat_llm
from src.core.logging import get_logger
from src.services.github.service import (
    create_github_client,
    load_event_payload,
    should_skip_event,
)
from src.services.reviewer.pipeline import ReviewPipeline
from src.services.reviewer.schemas import ReviewResult
from src.services.reviewer.tools import ToolRegistry, create_knowledge_tools

logger = get_logger("reviewer.service")


def validate_settings(settings: Settings) -> None:
    """Fail before any network call when required inputs are missing."""
    missing = settings.missing_required()
    if missing:
        raise ConfigurationError(f"Missing required inputs: {', '.join(missing)}")

    mode = settings.review_mode.strip().lower()
    if mode not in (REVIEW_MODE_REVIEW, REVIEW_MODE_REPLY):
        raise ConfigurationError(
            f"Unsupported review_mode: {settings.review_mode!r}. "
            f"Use '{REVIEW_MODE_REVIEW}' or '{REVIEW_MODE_REPLY}'"
        )


async def review_pull_request(settings: Settings) -> ReviewResult | None:
    """Review (or answer follow-ups on) the pull request that triggered the run.

    Returns ``None`` when the pull request event is one the action ignores.
    """
    validate_settings(settings)
    payload = load_event_payload(settings)
    # Provider credentials are checked before any GitHub client exists
    llm = get_chat_llm(settings)

    if should_skip_event(settings.github_event_name, payload, settings.is_reply_mode):
        logger.info(
            f"Event {settings.github_event_name} with action {payload.get('action')!r} "
            f"is not handled in {settings.review_mode} mode"
        )
        return None

    github = create_github_client(settings, payload)
    mode = REVIEW_MODE_REPLY if settings.is_reply_mode else REVIEW_MODE_REVIEW
    logger.info(f"Starting {mode} run: {github.ref}")

    pipeline = ReviewPipeline(
        llm=llm,
        github=github,
        knowledge_tools=ToolRegistry(create_knowledge_tools(settings)),
        settings=settings,
        reply_mode=settings.is_reply_mode,
    )
    state = await pipeline.run()

    result = ReviewResult(
        pr=github.ref,
        mode=mode,
        files_reviewed=pipeline.files_reviewed,
        comments=len(state.comments),
        replies=len(state.replies),
        action=state.decision.action if state.decision else None,
        summary=state.decision.summary if state.decision else "",
    )
    logger.info(
        f"Run completed: {result.comments} comments, {result.replies} replies, "
        f"action={result.action.value if result.action else None}"
    )
    return result
