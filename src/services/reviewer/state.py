"""Conversation state for the review pipeline."""

from dataclasses import dataclass, field

from langchain_core.messages import BaseMessage

from src.services.reviewer.schemas import ReviewComment, ReviewDecision, ReviewReply


@dataclass(frozen=True)
class StateDelta:
    """What one pipeline step adds to the state."""

    messages: list[BaseMessage] = field(default_factory=list)
    comments: list[ReviewComment] = field(default_factory=list)
    replies: list[ReviewReply] = field(default_factory=list)
    decision: ReviewDecision | None = None


@dataclass(frozen=True)
class ReviewState:
    """Accumulated messages and review output of one run.

    Append-only: ``apply`` returns a new state with the delta concatenated and
    never touches what is already there.
    """

    messages: tuple[BaseMessage, ...] = ()
    comments: tuple[ReviewComment, ...] = ()
    replies: tuple[ReviewReply, ...] = ()
    decision: ReviewDecision | None = None

    def apply(self, delta: StateDelta) -> "ReviewState":
        return ReviewState(
            messages=self.messages + tuple(delta.messages),
            comments=self.comments + tuple(delta.comments),
            replies=self.replies + tuple(delta.replies),
            decision=delta.decision or self.decision,
        )
