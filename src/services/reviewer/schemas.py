"""Pydantic schemas for reviewer service."""

from pydantic import BaseModel, ConfigDict, PositiveInt

from src.schemas.review import ReviewAction


class ReviewComment(BaseModel):
    """Inline comment anchored to a diff position of one file."""

    model_config = ConfigDict(frozen=True)

    path: str
    position: PositiveInt
    body: str


class ReviewReply(BaseModel):
    """Reply to an existing review comment thread."""

    model_config = ConfigDict(frozen=True)

    comment_id: int
    body: str


class ReviewDecision(BaseModel):
    """Overall review body and action."""

    model_config = ConfigDict(frozen=True)

    summary: str
    action: ReviewAction = ReviewAction.COMMENT


class ReviewResult(BaseModel):
    """Result of a PR review run."""

    success: bool = True
    pr: str
    mode: str
    files_reviewed: int = 0
    comments: int = 0
    replies: int = 0
    action: ReviewAction | None = None
    summary: str = ""
