"""Response tools the model calls to hand back structured review output."""

from enum import Enum

from pydantic import BaseModel, Field

POSITION_DESCRIPTION = (
    "The position in the diff / patch where you want to add a review comment. "
    "Note this value is not the same as the line number in the file. The position "
    'value equals the number of lines down from the first "@@" hunk header in the '
    'file you want to add a comment. The line just below the "@@" line is position 1, '
    "the next line is position 2, and so on. The position in the diff continues to "
    "increase through lines of whitespace and additional hunks until the beginning "
    "of a new file."
)


class ReviewAction(str, Enum):
    APPROVE = "APPROVE"
    REQUEST_CHANGES = "REQUEST_CHANGES"
    COMMENT = "COMMENT"


class ReviewCommentResponse(BaseModel):
    """Leave one review comment on the file under review.

    Call this only when the file needs a comment.
    """

    comment: str = Field(description="Your comment to specific file and position.")
    position: int = Field(description=POSITION_DESCRIPTION)


class ReviewSummaryResponse(BaseModel):
    """Submit the overall pull request review summary and action."""

    review_summary: str = Field(description="Your PR Review summarization.")
    review_action: ReviewAction = Field(
        description=(
            "The review action you want to perform. The review actions include: "
            "APPROVE, REQUEST_CHANGES, or COMMENT."
        )
    )


class ReviewReplyResponse(BaseModel):
    """Reply to the review comment thread under discussion."""

    reply: str = Field(description="Your reply to the latest comment in the thread.")
