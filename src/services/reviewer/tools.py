"""Tools the review agent can call."""

import asyncio

from langchain_community.utilities import StackExchangeAPIWrapper, WikipediaAPIWrapper
from langchain_community.utilities.tavily_search import TavilySearchAPIWrapper
from langchain_core.messages import ToolCall, ToolMessage
from langchain_core.tools import BaseTool, tool
from pydantic import ValidationError

from src.config import Settings
from src.core.logging import get_logger
from src.core.text import truncate_text
from src.services.github.client import GitHubClient
from src.services.github.schemas import ChangedFile

logger = get_logger("reviewer.tools")

CONTENT_NOT_FOUND = "CONTENT_NOT_FOUND"

SEARCH_MAX_RESULTS = 3
WIKIPEDIA_TOP_K_RESULTS = 3
WIKIPEDIA_MAX_DOC_CHARS = 4000
STACKEXCHANGE_MAX_RESULTS = 3


def create_github_tools(
    client: GitHubClient,
    files: list[ChangedFile],
    settings: Settings,
) -> list[BaseTool]:
    """Create file tools bound to the pull request under review."""
    patches = {f.filename: f.patch for f in files}

    @tool
    async def get_file_full_content(path: str) -> str:
        """Fetch the full content of a file at the pull request's source branch.

        Use this when the patch alone is not enough context.

        Args:
            path: File path relative to repo root (e.g. "src/utils/helper.py")
        """
        try:
            content = await asyncio.to_thread(client.fetch_file_contents, path)
            return truncate_text(content, settings.max_file_content_chars)
        except Exception as e:
            logger.warning(f"get_file_full_content failed for {path}: {e}")
            return CONTENT_NOT_FOUND

    @tool
    async def get_file_changes_patch(path: str) -> str:
        """Get the diff patch between source and target branch for one changed file.

        Args:
            path: File path relative to repo root, as listed in the pull request
        """
        try:
            patch = patches[path]
            return truncate_text(patch, settings.max_patch_chars) or CONTENT_NOT_FOUND
        except Exception as e:
            logger.warning(f"get_file_changes_patch failed for {path}: {e}")
            return CONTENT_NOT_FOUND

    return [get_file_full_content, get_file_changes_patch]


def create_knowledge_tools(settings: Settings) -> list[BaseTool]:
    """Create read-only external knowledge tools.

    Web search is only offered when a Tavily key is configured.
    """

    @tool
    async def web_search(query: str) -> str:
        """Search the web for documentation, library versions and best practices.

        Args:
            query: Search query
        """
        try:
            search = TavilySearchAPIWrapper(tavily_api_key=settings.tavily_api_key)
            results = await search.results_async(query, max_results=SEARCH_MAX_RESULTS)
            if not results:
                return CONTENT_NOT_FOUND
            return "\n\n".join(f"{r.get('url', '')}\n{r.get('content', '')}" for r in results)
        except Exception as e:
            logger.warning(f"web_search failed for '{query}': {e}")
            return CONTENT_NOT_FOUND

    @tool
    async def wikipedia_lookup(query: str) -> str:
        """Look up a topic on Wikipedia, e.g. a business domain or a technology.

        Args:
            query: Topic to look up
        """
        try:
            wikipedia = WikipediaAPIWrapper(
                top_k_results=WIKIPEDIA_TOP_K_RESULTS,
                doc_content_chars_max=WIKIPEDIA_MAX_DOC_CHARS,
            )
            return await asyncio.to_thread(wikipedia.run, query)
        except Exception as e:
            logger.warning(f"wikipedia_lookup failed for '{query}': {e}")
            return CONTENT_NOT_FOUND

    @tool
    async def stackexchange_lookup(query: str) -> str:
        """Search StackOverflow question titles for programming problems.

        Args:
            query: Question title keywords
        """
        try:
            stackexchange = StackExchangeAPIWrapper(
                query_type="title",
                max_results=STACKEXCHANGE_MAX_RESULTS,
            )
            return await asyncio.to_thread(stackexchange.run, query)
        except Exception as e:
            logger.warning(f"stackexchange_lookup failed for '{query}': {e}")
            return CONTENT_NOT_FOUND

    tools: list[BaseTool] = [wikipedia_lookup, stackexchange_lookup]
    if settings.tavily_api_key:
        tools.insert(0, web_search)
    return tools


class ToolRegistry:
    """Name-to-tool lookup used to dispatch the model's tool calls."""

    def __init__(self, tools: list[BaseTool]) -> None:
        self._tools = {t.name: t for t in tools}

    @property
    def tools(self) -> list[BaseTool]:
        return list(self._tools.values())

    async def dispatch(self, tool_call: ToolCall) -> ToolMessage:
        """Run one tool call and wrap its text result as a tool message.

        Unknown tools and arguments that fail validation only fail this call.
        """
        name = tool_call["name"]
        call_id = tool_call.get("id") or ""
        selected = self._tools.get(name)
        if selected is None:
            logger.warning(f"Model requested unknown tool: {name}")
            return ToolMessage(
                content=f"{CONTENT_NOT_FOUND}: unknown tool {name}",
                tool_call_id=call_id,
                name=name,
                status="error",
            )

        try:
            result = await selected.ainvoke(tool_call.get("args") or {})
        except ValidationError as e:
            logger.warning(f"Invalid arguments for {name}: {e}")
            return ToolMessage(
                content=f"Invalid arguments for {name}: {e}",
                tool_call_id=call_id,
                name=name,
                status="error",
            )

        logger.debug(f"Tool {name} returned {len(str(result))} chars")
        return ToolMessage(content=str(result), tool_call_id=call_id, name=name)

    async def dispatch_all(self, tool_calls: list[ToolCall]) -> list[ToolMessage]:
        """Dispatch calls concurrently; results keep the order of ``tool_calls``."""
        return list(await asyncio.gather(*(self.dispatch(call) for call in tool_calls)))
