"""Include-glob matching for backends without native glob support."""

import os
from fnmatch import fnmatchcase
from typing import List


def _split_options(body: str) -> List[str]:
    """Split a brace body on commas that are not nested in other braces."""
    options, depth, current = [], 0, ""
    for char in body:
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        if char == "," and depth == 0:
            options.append(current)
            current = ""
        else:
            current += char
    options.append(current)
    return options


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives, e.g. ``*.{ts,tsx}`` -> ``*.ts``, ``*.tsx``.

    Unbalanced braces and groups without a comma are kept literally.
    """
    start = pattern.find("{")
    while start != -1:
        depth = 0
        end = -1
        for index in range(start, len(pattern)):
            if pattern[index] == "{":
                depth += 1
            elif pattern[index] == "}":
                depth -= 1
                if depth == 0:
                    end = index
                    break
        if end == -1:
            return [pattern]

        options = _split_options(pattern[start + 1 : end])
        if len(options) > 1:
            prefix, suffix = pattern[:start], pattern[end + 1 :]
            expanded: List[str] = []
            for option in options:
                expanded.extend(expand_braces(prefix + option + suffix))
            return expanded
        start = pattern.find("{", end + 1)
    return [pattern]


def glob_matches(glob: str, relative_path: str) -> bool:
    """Match a path relative to the search root the way ripgrep's ``--glob`` does.

    A glob without a slash matches any path component (so ``*.py`` matches the
    file name and ``src`` matches everything below a ``src`` directory). A glob
    with a slash is matched against the whole relative path. Matching is case
    sensitive.
    """
    path = relative_path.replace(os.sep, "/")
    parts = path.split("/")
    for candidate in expand_braces(glob):
        candidate = candidate.strip("/")
        if not candidate:
            continue
        if "/" not in candidate:
            if any(fnmatchcase(part, candidate) for part in parts):
                return True
            continue
        if fnmatchcase(path, candidate):
            return True
        # "**/" also matches zero directories
        if candidate.startswith("**/") and fnmatchcase(path, candidate[3:]):
            return True
    return False
