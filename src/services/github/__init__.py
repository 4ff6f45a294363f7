"""GitHub service."""

from src.services.github.client import GitHubClient
from src.services.github.service import (
    create_github_client,
    get_pull_request_context,
    load_event_payload,
    should_skip_event,
    submit_replies,
    submit_review,
)

__all__ = [
    "GitHubClient",
    "create_github_client",
    "get_pull_request_context",
    "load_event_payload",
    "should_skip_event",
    "submit_replies",
    "submit_review",
]
