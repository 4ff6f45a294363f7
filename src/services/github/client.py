"""GitHub API client - data layer."""

from github import Auth, Github, GithubException, UnknownObjectException
from github.PullRequest import PullRequest
from github.Repository import Repository
from loguru import logger

from src.core.exceptions import ExternalServiceError
from src.services.github.schemas import (
    ChangedFile,
    PullRequestInfo,
    ReviewSummary,
    ReviewThreadEntry,
)


class GitHubClient:
    """Access to one repository and pull request, created once per run."""

    def __init__(
        self,
        token: str,
        repository: str,
        pr_number: int,
        head_ref: str,
        github: Github | None = None,
    ) -> None:
        self.repository_name = repository
        self.pr_number = pr_number
        self.head_ref = head_ref
        self._github = github or Github(auth=Auth.Token(token))
        self._repo: Repository | None = None
        self._pr: PullRequest | None = None

    @property
    def repo(self) -> Repository:
        if self._repo is None:
            self._repo = self._github.get_repo(self.repository_name)
        return self._repo

    @property
    def pull_request(self) -> PullRequest:
        if self._pr is None:
            self._pr = self.repo.get_pull(self.pr_number)
        return self._pr

    @property
    def ref(self) -> str:
        return f"{self.repository_name}#{self.pr_number}"

    def fetch_readme(self) -> str:
        """Fetch the raw repository README, empty when the repo has none."""
        try:
            return self.repo.get_readme().decoded_content.decode("utf-8", errors="replace")
        except UnknownObjectException:
            logger.info(f"No README found in {self.repository_name}")
            return ""
        except GithubException as e:
            raise ExternalServiceError("GitHub", f"failed to fetch README: {e}") from e

    def fetch_file_contents(self, path: str, ref: str | None = None) -> str:
        """Fetch full file contents at ``ref`` (the PR head by default)."""
        try:
            content = self.repo.get_contents(path, ref=ref or self.head_ref)
            if isinstance(content, list):
                raise ValueError(f"Path {path} is a directory, not a file")
            return content.decoded_content.decode("utf-8", errors="replace")
        except Exception as e:
            logger.debug(f"Failed to fetch file {path}: {e}")
            raise

    def fetch_pull_request(self) -> PullRequestInfo:
        """Fetch pull request metadata."""
        try:
            pr = self.pull_request
            return PullRequestInfo(
                number=pr.number,
                title=pr.title or "",
                description=pr.body,
                mergeable=pr.mergeable,
                mergeable_state=pr.mergeable_state,
                changed_files=pr.changed_files,
                head_ref=pr.head.ref,
            )
        except GithubException as e:
            raise ExternalServiceError("GitHub", f"failed to fetch {self.ref}: {e}") from e

    def fetch_pr_files(self) -> list[ChangedFile]:
        """Fetch changed files from the PR."""
        try:
            return [
                ChangedFile(
                    filename=f.filename,
                    previous_filename=f.previous_filename,
                    status=f.status,
                    additions=f.additions,
                    deletions=f.deletions,
                    patch=f.patch or "",
                )
                for f in self.pull_request.get_files()
            ]
        except GithubException as e:
            raise ExternalServiceError("GitHub", f"failed to list files: {e}") from e

    def fetch_reviews(self) -> list[ReviewSummary]:
        """Fetch submitted reviews on the PR."""
        try:
            return [
                ReviewSummary(
                    author=review.user.login if review.user else None,
                    state=review.state,
                    body=review.body or "",
                )
                for review in self.pull_request.get_reviews()
            ]
        except GithubException as e:
            raise ExternalServiceError("GitHub", f"failed to list reviews: {e}") from e

    def fetch_review_comments(self) -> list[ReviewThreadEntry]:
        """Fetch inline review comments on the PR, oldest first."""
        try:
            return [
                ReviewThreadEntry(
                    id=comment.id,
                    author=comment.user.login if comment.user else None,
                    body=comment.body or "",
                    path=comment.path or "",
                    position=comment.position,
                    diff_hunk=comment.diff_hunk or "",
                    in_reply_to_id=comment.in_reply_to_id,
                )
                for comment in self.pull_request.get_review_comments()
            ]
        except GithubException as e:
            raise ExternalServiceError("GitHub", f"failed to list review comments: {e}") from e

    def create_review(
        self,
        body: str,
        event: str,
        comments: list[dict],
    ) -> None:
        """Create a review with inline ``{path, position, body}`` comments."""
        try:
            self.pull_request.create_review(
                body=body,
                event=event,
                comments=comments,
            )
        except GithubException as e:
            raise ExternalServiceError("GitHub", f"failed to create review: {e}") from e
        logger.info(f"Created review with {len(comments)} comments")

    def reply_to_review_comment(self, comment_id: int, body: str) -> None:
        """Reply to an existing top-level review comment."""
        try:
            self.pull_request.create_review_comment_reply(comment_id, body)
        except GithubException as e:
            raise ExternalServiceError(
                "GitHub", f"failed to reply to comment {comment_id}: {e}"
            ) from e
        logger.info(f"Replied to review comment {comment_id}")
