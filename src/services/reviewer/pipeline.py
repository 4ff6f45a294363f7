"""Review agent pipeline.

A linear state machine: each step is an async ``(state) -> StateDelta``
method and ``run`` applies the deltas in order until ``DONE``.
"""

import asyncio
from enum import Enum

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from pydantic import ValidationError

from src.config import Settings
from src.core.exceptions import ReviewGenerationError
from src.core.logging import get_logger
from src.core.prompts import (
    render_input_understanding_prompt,
    render_reply_thread_prompt,
    render_review_file_prompt,
    render_review_summary_prompt,
)
from src.core.text import truncate_text
from src.schemas.review import (
    ReviewAction,
    ReviewCommentResponse,
    ReviewReplyResponse,
    ReviewSummaryResponse,
)
from src.services.github.client import GitHubClient
from src.services.github.schemas import ChangedFile, PullRequestContext, ReviewThread
from src.services.github.service import (
    get_pull_request_context,
    submit_replies,
    submit_review,
)
from src.services.reviewer.patch_parser import count_patch_positions, is_valid_position
from src.services.reviewer.schemas import ReviewComment, ReviewDecision, ReviewReply
from src.services.reviewer.state import ReviewState, StateDelta
from src.services.reviewer.tools import (
    CONTENT_NOT_FOUND,
    ToolRegistry,
    create_github_tools,
)

logger = get_logger("reviewer.pipeline")

INITIAL_REQUEST = "Please review my pull request."

DEFAULT_SUMMARY = "Automated review completed."

# Rounds of file lookups allowed before the model must decide on a file
MAX_FILE_TOOL_ROUNDS = 3

INPUT_UNDERSTANDING_SYSTEM_PROMPT = """You are an AI Agent that help human to do code review, you are one of the agents that have a task to answer these questions under these sections based on given repository informations:
  - Understanding given repository information (e.g README file, folder structure, etc.)
    - What framework is used?
    - What kind of coding styles are used?
    - What design patterns are used?
  - Understanding given pull request information
    - What's the intention of the pull request?
    - What kind of changes introduced in this pull request?
    - What's the impact of this pull request?
  - Understanding the business / domain logic context
    - What's the high overview of the business / domain in this repository?
    - What's the high overview about the business / domain logic?"""

KNOWLEDGE_UPDATE_SYSTEM_PROMPT = """You are an AI Agent that help human to do code review, you are one of the agents that have a task to gather additional knowledge needed based on the information given by the previous agent (it analysed the repository and pull request information).
Use the given tools to fill knowledge gaps that matter for reviewing this pull request, such as library versions and best practices. Gather knowledge for each of these topics:
- Design Pattern Guide
- Coding Style Guide
- Business / Domain Knowledge Guide"""

REVIEW_COMMENT_SYSTEM_PROMPT = """You are an AI agent that help human to do code review, you are one of the agents that have a task to create review comments based on the information provided by the previous agents' conversation.
You review one file at a time. Only comment on real issues: bugs, security concerns, performance problems, or significant code quality issues."""

REVIEW_SUMMARY_SYSTEM_PROMPT = """You are an AI agent that help human to do code review, you are one of the agents that have a task to create the review summary and decide the review action based on the information provided by the previous agents' conversation.
You must create the review summary and decide the review action."""

REPLY_SYSTEM_PROMPT = """You are an AI agent that help human to do code review. Reviewers answered or asked follow-up questions on review comments of this pull request.
Reply to the latest comment of the thread when it needs an answer, keeping the repository and pull request context in mind."""


class PipelineStep(str, Enum):
    INPUT_UNDERSTANDING = "input_understanding"
    KNOWLEDGE_UPDATE = "knowledge_update"
    REVIEW_GENERATION = "review_generation"
    REPLY_GENERATION = "reply_generation"
    SUBMIT = "submit"
    DONE = "done"


REVIEW_TRANSITIONS = {
    PipelineStep.INPUT_UNDERSTANDING: PipelineStep.KNOWLEDGE_UPDATE,
    PipelineStep.KNOWLEDGE_UPDATE: PipelineStep.REVIEW_GENERATION,
    PipelineStep.REVIEW_GENERATION: PipelineStep.SUBMIT,
    PipelineStep.SUBMIT: PipelineStep.DONE,
}

REPLY_TRANSITIONS = {
    PipelineStep.INPUT_UNDERSTANDING: PipelineStep.KNOWLEDGE_UPDATE,
    PipelineStep.KNOWLEDGE_UPDATE: PipelineStep.REPLY_GENERATION,
    PipelineStep.REPLY_GENERATION: PipelineStep.SUBMIT,
    PipelineStep.SUBMIT: PipelineStep.DONE,
}


def initial_state() -> ReviewState:
    return ReviewState(messages=(HumanMessage(content=INITIAL_REQUEST),))


class ReviewPipeline:
    """Drives the model through one review (or reply) run of a pull request."""

    def __init__(
        self,
        llm: BaseChatModel,
        github: GitHubClient,
        knowledge_tools: ToolRegistry,
        settings: Settings,
        reply_mode: bool = False,
    ) -> None:
        self.llm = llm
        self.github = github
        self.knowledge_tools = knowledge_tools
        self.settings = settings
        self.reply_mode = reply_mode
        self.transitions = REPLY_TRANSITIONS if reply_mode else REVIEW_TRANSITIONS
        self.context: PullRequestContext | None = None
        self.files_reviewed = 0

    async def run(self, state: ReviewState | None = None) -> ReviewState:
        """Run every step in order and return the final state."""
        state = state or initial_state()
        step = PipelineStep.INPUT_UNDERSTANDING
        handlers = {
            PipelineStep.INPUT_UNDERSTANDING: self.input_understanding,
            PipelineStep.KNOWLEDGE_UPDATE: self.knowledge_update,
            PipelineStep.REVIEW_GENERATION: self.review_generation,
            PipelineStep.REPLY_GENERATION: self.reply_generation,
            PipelineStep.SUBMIT: self.submit,
        }

        while step is not PipelineStep.DONE:
            try:
                delta = await handlers[step](state)
            except Exception:
                logger.error(f"Pipeline failed at step: {step.value}")
                raise
            state = state.apply(delta)
            step = self.transitions[step]

        return state

    async def input_understanding(self, state: ReviewState) -> StateDelta:
        logger.info("[LLM] - Understanding the input...")

        self.context = await asyncio.to_thread(get_pull_request_context, self.github, self.settings)
        prompt = render_input_understanding_prompt(
            codebase_description=self.settings.codebase_high_overview_description,
            context=self.context,
            patch_limit=self.settings.max_patch_chars,
        )

        response = await self.llm.ainvoke(
            [
                SystemMessage(content=INPUT_UNDERSTANDING_SYSTEM_PROMPT),
                HumanMessage(content=prompt),
            ]
        )
        return StateDelta(messages=[response])

    async def knowledge_update(self, state: ReviewState) -> StateDelta:
        logger.info("[LLM] - Gathering knowledge base...")

        llm_with_tools = self.llm
        if self.knowledge_tools.tools:
            llm_with_tools = self.llm.bind_tools(self.knowledge_tools.tools)
        response = await llm_with_tools.ainvoke(
            [SystemMessage(content=KNOWLEDGE_UPDATE_SYSTEM_PROMPT), *state.messages]
        )

        tool_calls = response.tool_calls if isinstance(response, AIMessage) else []
        if not tool_calls:
            return StateDelta(messages=[response])

        logger.info(f"Agent calling tools: {[t['name'] for t in tool_calls]}")
        tool_messages = await self.knowledge_tools.dispatch_all(tool_calls)
        return StateDelta(messages=[response, *tool_messages])

    async def review_generation(self, state: ReviewState) -> StateDelta:
        files = self._reviewable_files()
        logger.info(f"[LLM] - Generating review comments for {len(files)} files...")

        file_tools = ToolRegistry(create_github_tools(self.github, files, self.settings))
        llm_with_tools = self.llm.bind_tools([ReviewCommentResponse, *file_tools.tools])
        comments: list[ReviewComment] = []
        failed_files = 0

        for idx, changed_file in enumerate(files):
            logger.info(f"Reviewing file {idx + 1}/{len(files)}: {changed_file.filename}")
            patch = truncate_text(changed_file.patch, self.settings.max_patch_chars)
            prompt = render_review_file_prompt(
                filename=changed_file.filename,
                previous_filename=changed_file.previous_filename,
                status=changed_file.status,
                patch=patch,
                content=await self._file_content(changed_file),
            )
            messages = [
                SystemMessage(content=REVIEW_COMMENT_SYSTEM_PROMPT),
                *state.messages,
                HumanMessage(content=prompt),
            ]

            response = await llm_with_tools.ainvoke(messages)
            for _ in range(MAX_FILE_TOOL_ROUNDS):
                context_calls = _other_tool_calls(response, ReviewCommentResponse)
                if not context_calls or _response_tool_calls(response, ReviewCommentResponse):
                    break
                logger.info(f"Agent calling tools: {[t['name'] for t in context_calls]}")
                messages = [*messages, response, *await file_tools.dispatch_all(context_calls)]
                response = await llm_with_tools.ainvoke(messages)

            file_comments, invalid = self._comments_from_response(
                response, changed_file.filename, patch
            )
            if invalid and not file_comments:
                failed_files += 1
            comments.extend(file_comments)
            logger.info(f"Processed review for {changed_file.filename}: {len(file_comments)} comments")

        self.files_reviewed = len(files)
        if files and failed_files == len(files):
            raise ReviewGenerationError(
                "Model returned malformed review comments for every file"
            )

        return StateDelta(comments=comments)

    async def reply_generation(self, state: ReviewState) -> StateDelta:
        threads = self._threads_awaiting_reply()
        logger.info(f"[LLM] - Replying to {len(threads)} review threads...")

        llm_with_tools = self.llm.bind_tools([ReviewReplyResponse])
        replies: list[ReviewReply] = []

        for thread in threads:
            response = await llm_with_tools.ainvoke(
                [
                    SystemMessage(content=REPLY_SYSTEM_PROMPT),
                    *state.messages,
                    HumanMessage(content=render_reply_thread_prompt(thread)),
                ]
            )
            for call in _response_tool_calls(response, ReviewReplyResponse):
                try:
                    parsed = ReviewReplyResponse.model_validate(call["args"])
                except ValidationError as e:
                    logger.warning(f"Malformed reply for comment {thread.root.id}: {e}")
                    continue
                replies.append(ReviewReply(comment_id=thread.root.id, body=parsed.reply))
                break

        return StateDelta(replies=replies)

    async def submit(self, state: ReviewState) -> StateDelta:
        if self.reply_mode:
            if state.replies:
                await asyncio.to_thread(submit_replies, self.github, list(state.replies))
            else:
                logger.info("No review threads needed a reply")
            return StateDelta()

        decision = await self._summarize(state)
        if state.comments or decision.summary:
            await asyncio.to_thread(submit_review, self.github, decision, list(state.comments))
        else:
            logger.info("Nothing to submit")
        return StateDelta(decision=decision)

    async def _summarize(self, state: ReviewState) -> ReviewDecision:
        logger.info("[LLM] - Summarizing the review...")

        llm_with_tools = self.llm.bind_tools(
            [ReviewSummaryResponse], tool_choice=ReviewSummaryResponse.__name__
        )
        response = await llm_with_tools.ainvoke(
            [
                SystemMessage(content=REVIEW_SUMMARY_SYSTEM_PROMPT),
                *state.messages,
                HumanMessage(content=render_review_summary_prompt(state.comments)),
            ]
        )

        for call in _response_tool_calls(response, ReviewSummaryResponse):
            try:
                parsed = ReviewSummaryResponse.model_validate(call["args"])
            except ValidationError as e:
                logger.warning(f"Malformed review summary: {e}")
                continue
            return ReviewDecision(summary=parsed.review_summary, action=parsed.review_action)

        logger.warning("Model did not summarize the review, falling back to COMMENT")
        return ReviewDecision(summary=DEFAULT_SUMMARY, action=ReviewAction.COMMENT)

    def _reviewable_files(self) -> list[ChangedFile]:
        files = self.context.files if self.context else []
        reviewable = [f for f in files if f.patch]
        skipped = len(files) - len(reviewable)
        if skipped:
            logger.info(f"Skipping {skipped} files without a patch")

        limit = self.settings.max_files_per_review
        if len(reviewable) > limit:
            logger.warning(f"Limiting review to {limit} files")
            reviewable = reviewable[:limit]
        return reviewable

    async def _file_content(self, changed_file: ChangedFile) -> str:
        try:
            content = await asyncio.to_thread(
                self.github.fetch_file_contents, changed_file.filename
            )
        except Exception as e:
            logger.warning(f"Content unavailable for {changed_file.filename}: {e}")
            return CONTENT_NOT_FOUND
        return truncate_text(content, self.settings.max_file_content_chars)

    def _comments_from_response(
        self,
        response,
        path: str,
        patch: str,
    ) -> tuple[list[ReviewComment], int]:
        """Turn response tool calls into comments; also count the malformed ones."""
        comments = []
        invalid = 0
        max_position = count_patch_positions(patch)

        for call in _response_tool_calls(response, ReviewCommentResponse):
            try:
                parsed = ReviewCommentResponse.model_validate(call["args"])
            except ValidationError as e:
                logger.warning(f"Malformed review comment for {path}: {e}")
                invalid += 1
                continue

            if not is_valid_position(parsed.position, patch):
                logger.warning(
                    f"Dropping comment on {path}: position {parsed.position} "
                    f"outside 1..{max_position}"
                )
                continue

            comments.append(
                ReviewComment(path=path, position=parsed.position, body=parsed.comment)
            )

        return comments, invalid

    def _threads_awaiting_reply(self) -> list[ReviewThread]:
        threads = self.context.threads if self.context else []
        bot = self.settings.bot_login
        return [
            t
            for t in threads
            if t.latest.author != bot and any(e.author == bot for e in [t.root, *t.replies])
        ]


def _response_tool_calls(response, schema) -> list[dict]:
    """Tool calls in ``response`` aimed at the given response tool."""
    if not isinstance(response, AIMessage):
        return []
    return [call for call in response.tool_calls if call["name"] == schema.__name__]


def _other_tool_calls(response, schema) -> list[dict]:
    """Tool calls in ``response`` for anything but the given response tool."""
    if not isinstance(response, AIMessage):
        return []
    return [call for call in response.tool_calls if call["name"] != schema.__name__]
