"""Rendering aggregated matches as a report."""

from typing import Dict, List, Tuple

from backends.models import AggregatedResult, Match
from core.models import SearchRequest
from core.prompt_manager import PromptManager

NO_MATCHES_STATUS = "No matches found"
BLOCK_DELIMITER = "---"


def describe_location(request: SearchRequest, root_count: int) -> str:
    """Describe where a request searched, for use inside report sentences."""
    if request.scope_path:
        return f'in path "{request.scope_path}"'
    if root_count > 1:
        return f"across {root_count} workspace directories"
    return "in the workspace directory"


def group_by_file(matches: List[Match]) -> Dict[str, List[Match]]:
    """Group matches by file in first-seen order, each file sorted by line."""
    grouped: Dict[str, List[Match]] = {}
    for match in matches:
        grouped.setdefault(match.file_path, []).append(match)
    for file_matches in grouped.values():
        # Stable, so equal line numbers keep discovery order
        file_matches.sort(key=lambda m: m.line_number)
    return grouped


class ResultFormatter:
    """Turns an AggregatedResult into a report and a status line."""

    def __init__(self, prompt_manager: PromptManager, max_matches: int) -> None:
        self._prompts = prompt_manager
        self.max_matches = max_matches

    def format(
        self, request: SearchRequest, result: AggregatedResult, location: str
    ) -> Tuple[str, str]:
        """Render ``result``.

        Returns:
            (report, status)
        """
        if not result.matches:
            report = self._prompts.render(
                "reports.no_matches",
                pattern=request.pattern,
                location=location,
                include=request.include_glob,
            )
            return report, NO_MATCHES_STATUS

        count = result.count
        values = {
            "count": count,
            "term": "match" if count == 1 else "matches",
            "pattern": request.pattern,
            "location": location,
            "include": request.include_glob,
            "truncated": result.truncated,
            "limit": self.max_matches,
        }

        lines = [self._prompts.render("reports.summary", **values), BLOCK_DELIMITER]
        for file_path, file_matches in group_by_file(result.matches).items():
            lines.append(f"File: {file_path}")
            for match in file_matches:
                lines.append(f"L{match.line_number}: {match.line_text.strip()}")
            lines.append(BLOCK_DELIMITER)

        report = "\n".join(lines).strip()
        return report, self._prompts.render("reports.status", **values)

    def format_error(self, message: str) -> Tuple[str, str]:
        return self._prompts.render("reports.error", message=message), f"Error: {message}"

    def format_cancelled(self, request: SearchRequest, location: str) -> Tuple[str, str]:
        report = self._prompts.render(
            "reports.cancelled", pattern=request.pattern, location=location
        )
        return report, "Cancelled"
