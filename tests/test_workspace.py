"""Tests for workspace roots and scope resolution."""

import os

from core.workspace import PathResolver, WorkspaceContext


class TestWorkspaceContext:
    def test_roots_keep_order_and_drop_duplicates(self, tmp_path):
        one, two = str(tmp_path / "one"), str(tmp_path / "two")

        workspace = WorkspaceContext([one, two, one + os.sep])

        assert workspace.list_roots() == [one, two]

    def test_membership(self, workspace_dir, tmp_path):
        workspace = WorkspaceContext([str(workspace_dir)])

        assert workspace.is_path_within_workspace(str(workspace_dir / "sub" / "c.py"))
        assert workspace.is_path_within_workspace(str(workspace_dir))
        assert not workspace.is_path_within_workspace(str(tmp_path))
        assert not workspace.is_path_within_workspace(str(tmp_path / "ab"))


class TestPathResolver:
    """Tests for resolving scope paths."""

    def _resolver(self, root):
        return PathResolver(WorkspaceContext([str(root)]), str(root))

    def test_relative_directory(self, workspace_dir):
        resolution = self._resolver(workspace_dir).resolve("sub")

        assert resolution.ok
        assert resolution.absolute_path == str(workspace_dir / "sub")

    def test_absolute_file(self, workspace_dir):
        target = str(workspace_dir / "b.txt")

        resolution = self._resolver(workspace_dir).resolve(target)

        assert resolution.ok
        assert resolution.absolute_path == target

    def test_missing_path(self, workspace_dir):
        resolution = self._resolver(workspace_dir).resolve("nope.txt")

        assert not resolution.ok
        assert resolution.error_kind == "path_not_found"
        assert "nope.txt" in resolution.error_message

    def test_outside_workspace(self, workspace_dir, tmp_path):
        resolution = self._resolver(workspace_dir).resolve(str(tmp_path))

        assert not resolution.ok
        assert resolution.error_kind == "path_not_in_workspace"

    def test_parent_traversal_is_outside(self, workspace_dir):
        resolution = self._resolver(workspace_dir).resolve("../")

        assert resolution.error_kind == "path_not_in_workspace"

    def test_empty_path(self, workspace_dir):
        resolution = self._resolver(workspace_dir).resolve("  ")

        assert resolution.error_kind == "invalid_path"
