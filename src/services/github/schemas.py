"""Pydantic schemas for GitHub service."""

from pydantic import BaseModel, Field


class ChangedFile(BaseModel):
    """A file changed by the pull request."""

    filename: str
    previous_filename: str | None = None
    status: str = "modified"
    additions: int = 0
    deletions: int = 0
    patch: str = ""


class ReviewSummary(BaseModel):
    """A submitted pull request review."""

    author: str | None = None
    state: str | None = None
    body: str = ""


class ReviewThreadEntry(BaseModel):
    """One comment in a review comment thread."""

    id: int
    author: str | None = None
    body: str = ""
    path: str = ""
    position: int | None = None
    diff_hunk: str = ""
    in_reply_to_id: int | None = None


class ReviewThread(BaseModel):
    """A top-level review comment and the replies to it."""

    root: ReviewThreadEntry
    replies: list[ReviewThreadEntry] = Field(default_factory=list)

    @property
    def latest(self) -> ReviewThreadEntry:
        return self.replies[-1] if self.replies else self.root


class PullRequestInfo(BaseModel):
    """Pull request metadata used in prompts."""

    number: int
    title: str = ""
    description: str | None = None
    mergeable: bool | None = None
    mergeable_state: str | None = None
    changed_files: int = 0
    head_ref: str


class PullRequestContext(BaseModel):
    """Everything the input-understanding step knows about the PR."""

    readme: str = ""
    folder_structure: str = ""
    pull_request: PullRequestInfo
    files: list[ChangedFile] = Field(default_factory=list)
    reviews: list[ReviewSummary] = Field(default_factory=list)
    threads: list[ReviewThread] = Field(default_factory=list)
