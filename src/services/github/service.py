"""GitHub service - business logic layer."""

import json
from pathlib import Path

from src.config import Settings
from src.core.exceptions import ConfigurationError, UnsupportedEventError
from src.core.logging import get_logger
from src.services.github.client import GitHubClient
from src.services.github.schemas import (
    PullRequestContext,
    ReviewThread,
    ReviewThreadEntry,
)
from src.services.reviewer.schemas import ReviewComment, ReviewDecision, ReviewReply

logger = get_logger("github.service")

EVENT_PULL_REQUEST = "pull_request"
EVENT_PULL_REQUEST_TARGET = "pull_request_target"
EVENT_PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"

SUPPORTED_EVENTS = (
    EVENT_PULL_REQUEST,
    EVENT_PULL_REQUEST_TARGET,
    EVENT_PULL_REQUEST_REVIEW_COMMENT,
)
REVIEWABLE_PR_ACTIONS = ("opened", "synchronize", "reopened")
REPLYABLE_COMMENT_ACTIONS = ("created", "edited")

IGNORED_DIRECTORIES = {".git"}


def load_event_payload(settings: Settings) -> dict:
    """Read the webhook payload that triggered the workflow run."""
    if settings.github_event_name not in SUPPORTED_EVENTS:
        raise UnsupportedEventError(settings.github_event_name)

    try:
        payload = json.loads(Path(settings.github_event_path).read_text(encoding="utf-8"))
    except (OSError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Cannot read event payload: {e}") from e

    if not payload.get("pull_request"):
        raise UnsupportedEventError(settings.github_event_name)
    return payload


def should_skip_event(event_name: str | None, payload: dict, reply_mode: bool = False) -> bool:
    """Decide whether the triggering event is acknowledged without a run.

    PR events are reviewed on opened/synchronize/reopened. Review comment
    events are only answered in reply mode, and only when created or edited.
    """
    action = payload.get("action")
    if event_name == EVENT_PULL_REQUEST_REVIEW_COMMENT:
        return not reply_mode or action not in REPLYABLE_COMMENT_ACTIONS
    return action not in REVIEWABLE_PR_ACTIONS


def create_github_client(settings: Settings, payload: dict) -> GitHubClient:
    """Build the GitHub collaborator for the PR in ``payload``."""
    pr = payload["pull_request"]
    return GitHubClient(
        token=settings.github_token,
        repository=settings.github_repository,
        pr_number=int(pr["number"]),
        head_ref=pr["head"]["ref"],
    )


def get_local_repo_structure(dir_path: Path, current_path: Path = Path()) -> str:
    """Render the checked-out working tree as a nested markdown list."""
    markdown = ""
    try:
        items = sorted(dir_path.iterdir(), key=lambda item: item.name)
    except OSError as e:
        logger.debug(f"Cannot list {dir_path}: {e}")
        return ""

    for item in items:
        if item.name in IGNORED_DIRECTORIES:
            continue
        relative = current_path / item.name
        indent = "  " * (len(relative.parts) - 1)
        if item.is_symlink():
            continue
        if item.is_dir():
            markdown += f"{indent}- 📁 **{item.name}**\n"
            markdown += get_local_repo_structure(item, relative)
        elif item.is_file():
            markdown += f"{indent}- 📄 {item.name}\n"
    return markdown


def group_review_threads(comments: list[ReviewThreadEntry]) -> list[ReviewThread]:
    """Group review comments into threads keyed by their top-level comment."""
    threads: dict[int, ReviewThread] = {}
    for comment in comments:
        if comment.in_reply_to_id is None:
            threads[comment.id] = ReviewThread(root=comment)

    for comment in comments:
        if comment.in_reply_to_id is None:
            continue
        thread = threads.get(comment.in_reply_to_id)
        if thread is None:
            logger.debug(f"Reply {comment.id} has no top-level comment, skipping")
            continue
        thread.replies.append(comment)

    return list(threads.values())


def get_pull_request_context(client: GitHubClient, settings: Settings) -> PullRequestContext:
    """Gather README, working tree, PR details, changed files and review history."""
    logger.info(f"Fetching PR context: {client.ref}")

    readme = client.fetch_readme()
    folder_structure = ""
    if settings.github_workspace:
        folder_structure = get_local_repo_structure(Path(settings.github_workspace))

    context = PullRequestContext(
        readme=readme,
        folder_structure=folder_structure,
        pull_request=client.fetch_pull_request(),
        files=client.fetch_pr_files(),
        reviews=client.fetch_reviews(),
        threads=group_review_threads(client.fetch_review_comments()),
    )
    logger.info(
        f"Found {len(context.files)} changed files, {len(context.reviews)} reviews, "
        f"{len(context.threads)} review threads"
    )
    return context


def submit_review(
    client: GitHubClient,
    decision: ReviewDecision,
    comments: list[ReviewComment],
) -> None:
    """Submit one review carrying every inline comment."""
    review_comments = [
        {"path": c.path, "position": c.position, "body": c.body} for c in comments
    ]
    logger.info(
        f"Submitting {decision.action.value} review on {client.ref} "
        f"with {len(review_comments)} comments"
    )
    client.create_review(
        body=decision.summary,
        event=decision.action.value,
        comments=review_comments,
    )


def submit_replies(client: GitHubClient, replies: list[ReviewReply]) -> None:
    """Post each reply to its review comment thread."""
    for reply in replies:
        client.reply_to_review_comment(reply.comment_id, reply.body)
    logger.info(f"Posted {len(replies)} replies on {client.ref}")
