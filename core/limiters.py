"""Result limiters for multi-target searches."""

from typing import Iterable, List

from backends.models import AggregatedResult, Match

DEFAULT_TOTAL_MAX_MATCHES = 20000


class MatchLimiter:
    """Accumulates matches across targets and enforces the global cap."""

    def __init__(self, max_matches: int = DEFAULT_TOTAL_MAX_MATCHES) -> None:
        """Initialize match limiter.

        Args:
            max_matches: Maximum number of matches kept across all targets
        """
        if max_matches < 1:
            raise ValueError(f"max_matches must be positive, got {max_matches}")
        self.max_matches = max_matches
        self.matches: List[Match] = []
        self.truncated = False

    def add(self, matches: Iterable[Match]) -> bool:
        """Append one target's matches.

        The cap is only applied after the whole contribution is appended.

        Returns:
            True if further targets may be searched, False once the cap is reached
        """
        self.matches.extend(matches)
        if len(self.matches) >= self.max_matches:
            del self.matches[self.max_matches :]
            self.truncated = True
        return not self.truncated

    def result(self) -> AggregatedResult:
        return AggregatedResult(matches=list(self.matches), truncated=self.truncated)
