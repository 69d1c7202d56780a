"""
Pytest configuration for the grep server test suite.

Configures:
- async tests via pytest-asyncio (@pytest.mark.asyncio)
- project root on sys.path
- fake matcher executables written as small shell scripts
"""
import stat
import sys
from pathlib import Path

import pytest

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


@pytest.fixture
def fake_matcher(tmp_path):
    """Factory writing an executable that prints ``stdout`` and exits ``exit_code``.

    The arguments it was called with are written one per line to ``args.txt``
    next to the script.
    """

    def _make(stdout: str = "", exit_code: int = 0, stderr: str = "", body: str = "") -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        script = bin_dir / "rg"
        args_file = bin_dir / "args.txt"
        lines = [
            "#!/bin/sh",
            f"printf '%s\\n' \"$@\" > '{args_file}'",
        ]
        if body:
            lines.append(body)
        if stdout:
            lines.extend(["cat <<'__OUT__'", stdout.rstrip("\n"), "__OUT__"])
        if stderr:
            lines.extend(["cat >&2 <<'__ERR__'", stderr.rstrip("\n"), "__ERR__"])
        lines.append(f"exit {exit_code}")
        script.write_text("\n".join(lines) + "\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def recorded_args(tmp_path):
    """Read the arguments the last fake matcher run was called with."""

    def _read():
        args_file = tmp_path / "bin" / "args.txt"
        if not args_file.exists():
            return None
        return args_file.read_text().splitlines()

    return _read


@pytest.fixture
def workspace_dir(tmp_path):
    root = tmp_path / "a"
    root.mkdir()
    (root / "b.txt").write_text("foo at start\nnothing\na foo bar\n")
    (root / "sub").mkdir()
    (root / "sub" / "c.py").write_text("print('foo')\n")
    return root


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep server configuration variables from leaking in from the host."""
    for key in (
        "SEARCH_BACKEND",
        "MATCHER_PATH",
        "TARGET_DIR",
        "WORKSPACE_ROOTS",
        "MAX_TOTAL_MATCHES",
        "DEBUG_MODE",
        "LANGFUSE_ENABLED",
    ):
        monkeypatch.delenv(key, raising=False)
