from .formatter import ResultFormatter, describe_location, group_by_file
from .limiters import DEFAULT_TOTAL_MAX_MATCHES, MatchLimiter
from .models import SearchRequest, ToolError, ToolResult
from .orchestrator import MultiRootSearch
from .prompt_manager import PromptManager
from .workspace import PathResolver, ScopeResolution, WorkspaceContext

__all__ = [
    "DEFAULT_TOTAL_MAX_MATCHES",
    "MatchLimiter",
    "MultiRootSearch",
    "PathResolver",
    "PromptManager",
    "ResultFormatter",
    "ScopeResolution",
    "SearchRequest",
    "ToolError",
    "ToolResult",
    "WorkspaceContext",
    "describe_location",
    "group_by_file",
]
