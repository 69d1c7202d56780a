"""Workspace roots and scope path resolution."""

import os
from dataclasses import dataclass
from typing import List, Sequence


@dataclass
class ScopeResolution:
    """Outcome of resolving a user supplied scope path."""

    ok: bool
    absolute_path: str = ""
    error_message: str = ""
    error_kind: str = ""

    @classmethod
    def success(cls, absolute_path: str) -> "ScopeResolution":
        return cls(ok=True, absolute_path=absolute_path)

    @classmethod
    def failure(cls, message: str, kind: str) -> "ScopeResolution":
        return cls(ok=False, error_message=message, error_kind=kind)


class WorkspaceContext:
    """Ordered set of directories a search may cover."""

    def __init__(self, roots: Sequence[str]) -> None:
        """Initialize the workspace.

        Args:
            roots: Root directories in search order; duplicates are dropped
        """
        self._roots: List[str] = []
        for root in roots:
            absolute = os.path.abspath(os.path.expanduser(root))
            if absolute not in self._roots:
                self._roots.append(absolute)

    def list_roots(self) -> List[str]:
        return list(self._roots)

    def is_path_within_workspace(self, path: str) -> bool:
        real_path = os.path.realpath(path)
        for root in self._roots:
            real_root = os.path.realpath(root)
            try:
                if os.path.commonpath([real_root, real_path]) == real_root:
                    return True
            except ValueError:
                # Different drives on Windows
                continue
        return False


class PathResolver:
    """Turns a scope path into one absolute, existing file or directory."""

    def __init__(self, workspace: WorkspaceContext, target_dir: str) -> None:
        """Initialize the resolver.

        Args:
            workspace: Workspace the resolved path must belong to
            target_dir: Base directory for relative paths
        """
        self.workspace = workspace
        self.target_dir = os.path.abspath(target_dir)

    def resolve(self, input_path: str) -> ScopeResolution:
        """Resolve ``input_path`` against the target directory.

        Returns:
            ScopeResolution with either the absolute path or an error
        """
        if not input_path or not input_path.strip():
            return ScopeResolution.failure("Path cannot be empty.", "invalid_path")

        expanded = os.path.expanduser(input_path)
        if not os.path.isabs(expanded):
            expanded = os.path.join(self.target_dir, expanded)
        absolute = os.path.normpath(expanded)

        if not self.workspace.is_path_within_workspace(absolute):
            roots = ", ".join(self.workspace.list_roots())
            return ScopeResolution.failure(
                f'Path "{input_path}" is not within any of the workspace directories: {roots}',
                "path_not_in_workspace",
            )

        if not os.path.exists(absolute):
            return ScopeResolution.failure(f"Path does not exist: {absolute}", "path_not_found")

        if not (os.path.isfile(absolute) or os.path.isdir(absolute)):
            return ScopeResolution.failure(
                f"Path is neither a file nor a directory: {absolute}", "invalid_path_type"
            )

        return ScopeResolution.success(absolute)
