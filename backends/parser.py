"""Parser for the line-oriented output of the matcher."""

import re
from typing import List, Optional

from backends.models import Match

_LINE_NUMBER = re.compile(r"[0-9]+")
_DRIVE_PREFIX = re.compile(r"[A-Za-z]:[\\/]")


def parse_match_line(line: str) -> Optional[Match]:
    """Parse one ``path:line:content`` line.

    Returns ``None`` when the line is malformed and should be skipped.
    Everything after the second delimiter is kept verbatim, so colons inside
    the matched text survive.
    """
    if not line.strip():
        return None

    search_from = 2 if _DRIVE_PREFIX.match(line) else 0
    first_colon = line.find(":", search_from)
    if first_colon == -1:
        return None

    second_colon = line.find(":", first_colon + 1)
    if second_colon == -1:
        return None

    line_number_str = line[first_colon + 1 : second_colon]
    if not _LINE_NUMBER.fullmatch(line_number_str):
        return None

    line_number = int(line_number_str, 10)
    if line_number < 1:
        return None

    return Match(
        file_path=line[:first_colon],
        line_number=line_number,
        line_text=line[second_colon + 1 :],
    )


def parse_matcher_output(output: str) -> List[Match]:
    """Convert captured matcher output into matches, in output order."""
    results: List[Match] = []
    if not output:
        return results

    for line in output.split("\n"):
        match = parse_match_line(line)
        if match is not None:
            results.append(match)
    return results
