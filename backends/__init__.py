"""Backend implementations driving the external matcher."""

from .errors import (
    MatcherLaunchError,
    MatcherRuntimeError,
    MatcherUnavailableError,
    ScopeResolutionError,
    SearchCancelled,
    SearchError,
)
from .globs import expand_braces, glob_matches
from .models import AggregatedResult, Match
from .parser import parse_match_line, parse_matcher_output
from .provisioning import BinaryProvider
from .search import (
    AbstractSearchClient,
    GrepSearchClient,
    RipgrepSearchClient,
    SearchClientFactory,
)

__all__ = [
    "AbstractSearchClient",
    "SearchClientFactory",
    "RipgrepSearchClient",
    "GrepSearchClient",
    "BinaryProvider",
    "expand_braces",
    "glob_matches",
    "parse_match_line",
    "parse_matcher_output",
    "AggregatedResult",
    "Match",
    "SearchError",
    "ScopeResolutionError",
    "MatcherUnavailableError",
    "MatcherLaunchError",
    "MatcherRuntimeError",
    "SearchCancelled",
]
