"""Error kinds raised while running a search."""


class SearchError(Exception):
    """Base class for search failures."""

    kind = "search_error"


class ScopeResolutionError(SearchError):
    """The requested scope path could not be resolved to a search target."""

    def __init__(self, message: str, kind: str = "invalid_path") -> None:
        super().__init__(message)
        self.kind = kind


class MatcherUnavailableError(SearchError):
    """The matcher executable could not be provisioned."""

    kind = "matcher_unavailable"


class MatcherLaunchError(SearchError):
    """The matcher process could not be started."""

    kind = "matcher_launch_failed"


class MatcherRuntimeError(SearchError):
    """The matcher exited with a failure status."""

    kind = "matcher_failed"

    def __init__(self, message: str, exit_code: int, stderr: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class SearchCancelled(SearchError):
    """The search was aborted through its cancellation signal."""

    kind = "cancelled"
