"""Multi-root search orchestration."""

import asyncio
import logging
import os
from typing import List, Optional

from backends.errors import ScopeResolutionError, SearchCancelled
from backends.models import AggregatedResult, Match
from backends.search import AbstractSearchClient
from core.limiters import DEFAULT_TOTAL_MAX_MATCHES, MatchLimiter
from core.models import SearchRequest
from core.workspace import PathResolver, WorkspaceContext

logger = logging.getLogger(__name__)


class MultiRootSearch:
    """Runs one search request over every target it expands to.

    Targets are searched one after the other. Matches are rewritten relative to
    ``target_dir`` and accumulated until the global cap is reached; the cap is
    checked only once a target has been searched completely.
    """

    def __init__(
        self,
        search_client: AbstractSearchClient,
        workspace: WorkspaceContext,
        resolver: PathResolver,
        target_dir: str,
        max_matches: int = DEFAULT_TOTAL_MAX_MATCHES,
        debug: bool = False,
    ) -> None:
        self.search_client = search_client
        self.workspace = workspace
        self.resolver = resolver
        self.target_dir = os.path.abspath(target_dir)
        self.max_matches = max_matches
        self.debug = debug

    def resolve_targets(self, request: SearchRequest) -> List[str]:
        """Expand a request into absolute search targets.

        Raises:
            ScopeResolutionError: If the scope path cannot be resolved
        """
        if request.scope_path:
            resolution = self.resolver.resolve(request.scope_path)
            if not resolution.ok:
                raise ScopeResolutionError(resolution.error_message, resolution.error_kind)
            return [resolution.absolute_path]
        return self.workspace.list_roots()

    async def run(
        self, request: SearchRequest, cancel_event: Optional[asyncio.Event] = None
    ) -> AggregatedResult:
        """Search all targets of ``request``.

        Raises:
            ScopeResolutionError: If the scope path cannot be resolved
            SearchCancelled: If ``cancel_event`` is set during the search
            SearchError: If the matcher fails on any target
        """
        targets = self.resolve_targets(request)
        limiter = MatchLimiter(self.max_matches)

        if self.debug:
            logger.debug(f"Total result limit: {self.max_matches}")

        for target in targets:
            if cancel_event is not None and cancel_event.is_set():
                raise SearchCancelled(f"Search cancelled before searching {target}")

            matches = await self.search_client.search(
                pattern=request.pattern,
                target=target,
                include=request.include_glob,
                cancel_event=cancel_event,
            )
            for match in matches:
                match.file_path = self._relative(match)

            if not limiter.add(matches):
                logger.info(
                    f"Match limit of {self.max_matches} reached after searching {target}"
                )
                break

        return limiter.result()

    def _relative(self, match: Match) -> str:
        try:
            return os.path.relpath(match.file_path, self.target_dir)
        except ValueError:
            # No relative form across drives on Windows
            return match.file_path
