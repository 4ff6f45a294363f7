"""Prompt templates using Jinja2."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from src.core.text import truncate_text

PROMPTS_DIR = Path(__file__).parent
_env = Environment(loader=FileSystemLoader(PROMPTS_DIR), keep_trailing_newline=True)
_env.filters["truncate_text"] = truncate_text


def render_input_understanding_prompt(
    codebase_description: str,
    context,
    patch_limit: int,
) -> str:
    """Render the repository and pull request information prompt."""
    template = _env.get_template("input_understanding.jinja2")
    return template.render(
        codebase_description=codebase_description,
        context=context,
        patch_limit=patch_limit,
    )


def render_review_file_prompt(
    filename: str,
    previous_filename: str | None,
    status: str,
    patch: str,
    content: str,
) -> str:
    """Render the per-file review prompt."""
    template = _env.get_template("review_file.jinja2")
    return template.render(
        filename=filename,
        previous_filename=previous_filename,
        status=status,
        patch=patch,
        content=content,
    )


def render_reply_thread_prompt(thread) -> str:
    """Render the prompt for answering one review comment thread."""
    template = _env.get_template("reply_thread.jinja2")
    return template.render(thread=thread)


def render_review_summary_prompt(comments) -> str:
    """Render the review summary prompt."""
    template = _env.get_template("review_summary.jinja2")
    return template.render(comments=comments)
