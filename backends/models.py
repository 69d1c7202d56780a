"""Backend models for matcher results."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class Match:
    """Represents a single matching line reported by the matcher."""

    file_path: str
    line_number: int
    line_text: str = ""


@dataclass
class AggregatedResult:
    """Matches collected across all search targets."""

    matches: List[Match] = field(default_factory=list)
    truncated: bool = False

    @property
    def count(self) -> int:
        return len(self.matches)
