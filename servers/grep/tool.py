"""The grep tool: request handling and conversion of failures into results."""

import asyncio
import logging
import os
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from backends.errors import ScopeResolutionError, SearchCancelled
from backends.search import SearchClientFactory
from core import (
    MultiRootSearch,
    PathResolver,
    PromptManager,
    ResultFormatter,
    SearchRequest,
    ToolError,
    ToolResult,
    WorkspaceContext,
    describe_location,
)
from servers.grep.config import GrepServerConfig

logger = logging.getLogger(__name__)


class ActiveSearches:
    """Cancellation events of in-flight searches, with the loop that owns each one."""

    def __init__(self) -> None:
        self._events: Dict[asyncio.Event, asyncio.AbstractEventLoop] = {}

    def __len__(self) -> int:
        return len(self._events)

    @contextmanager
    def track(self) -> Iterator[asyncio.Event]:
        """Register a cancellation event for the duration of one search.

        Must be entered from a running event loop.
        """
        event = asyncio.Event()
        self._events[event] = asyncio.get_running_loop()
        try:
            yield event
        finally:
            self._events.pop(event, None)

    def cancel_all(self) -> int:
        """Set every registered event. Safe to call from a signal handler or another thread.

        Returns:
            Number of searches signalled
        """
        pending = list(self._events.items())
        for event, loop in pending:
            if loop.is_closed():
                continue
            loop.call_soon_threadsafe(event.set)
        return len(pending)


class GrepToolInvocation:
    """One execution of the grep tool for a validated request."""

    def __init__(self, tool: "GrepTool", request: SearchRequest) -> None:
        self.tool = tool
        self.request = request

    def _location(self) -> str:
        return describe_location(self.request, len(self.tool.workspace.list_roots()))

    async def execute(self, cancel_event: Optional[asyncio.Event] = None) -> ToolResult:
        """Run the search. Never raises for search failures.

        Args:
            cancel_event: Setting this event aborts the search and kills the matcher

        Returns:
            ToolResult with the report, or with error/cancelled set
        """
        formatter = self.tool.formatter
        try:
            result = await self.tool.search.run(self.request, cancel_event)
        except ScopeResolutionError as exc:
            message = str(exc)
            return ToolResult(
                report=message,
                status=f"Error: {message}",
                error=ToolError(message=message, kind=exc.kind),
            )
        except SearchCancelled:
            logger.info(f"Search cancelled: {self.describe()}")
            report, status = formatter.format_cancelled(self.request, self._location())
            return ToolResult(report=report, status=status, cancelled=True)
        except Exception as exc:
            logger.error(f"Error during grep search operation: {exc}")
            message = str(exc)
            report, status = formatter.format_error(message)
            return ToolResult(
                report=report,
                status=status,
                error=ToolError(message=message, kind=getattr(exc, "kind", "unknown")),
            )

        report, status = formatter.format(self.request, result, self._location())
        return ToolResult(report=report, status=status)

    def describe(self) -> str:
        """Short description of what this invocation searches."""
        description = f"'{self.request.pattern}'"
        if self.request.include_glob:
            description += f" in {self.request.include_glob}"
        if self.request.scope_path:
            scope = self.request.scope_path
            try:
                relative = os.path.relpath(
                    os.path.join(self.tool.target_dir, os.path.expanduser(scope)),
                    self.tool.target_dir,
                )
                description += f" within {relative}"
            except ValueError:
                description += f" within {scope}"
        elif len(self.tool.workspace.list_roots()) > 1:
            description += " across all workspace directories"
        return description


class GrepTool:
    """Searches file contents with an external matcher across the workspace."""

    name = "search_file_content"

    def __init__(
        self,
        search: MultiRootSearch,
        formatter: ResultFormatter,
        prompt_manager: PromptManager,
    ) -> None:
        self.search = search
        self.formatter = formatter
        self.description = prompt_manager.get_text(f"tools.{self.name}")

    @property
    def workspace(self) -> WorkspaceContext:
        return self.search.workspace

    @property
    def target_dir(self) -> str:
        return self.search.target_dir

    @classmethod
    def from_config(
        cls, config: GrepServerConfig, prompt_manager: Optional[PromptManager] = None
    ) -> "GrepTool":
        """Wire the tool from server configuration."""
        prompt_manager = prompt_manager or PromptManager()
        search_client = SearchClientFactory.create_client(
            backend=config.search_backend,
            matcher_path=config.matcher_path,
            debug=config.debug_mode,
        )
        workspace = WorkspaceContext(config.workspace_roots)
        search = MultiRootSearch(
            search_client=search_client,
            workspace=workspace,
            resolver=PathResolver(workspace, config.target_dir),
            target_dir=config.target_dir,
            max_matches=config.max_total_matches,
            debug=config.debug_mode,
        )
        formatter = ResultFormatter(prompt_manager, max_matches=config.max_total_matches)
        return cls(search, formatter, prompt_manager)

    def create_invocation(
        self, pattern: str, path: Optional[str] = None, include: Optional[str] = None
    ) -> GrepToolInvocation:
        """Validate the tool arguments and build an invocation.

        Raises:
            pydantic.ValidationError: If the arguments are invalid
        """
        request = SearchRequest(
            pattern=pattern,
            scope_path=path or None,
            include_glob=include or None,
        )
        return GrepToolInvocation(self, request)
