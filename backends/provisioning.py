"""Locating the matcher executable."""

import logging
import os
import shutil
from typing import Optional

from backends.errors import MatcherUnavailableError

logger = logging.getLogger(__name__)


class BinaryProvider:
    """Resolves the path of a matcher executable.

    An explicitly configured path wins; otherwise the executable is looked up
    on ``PATH``. The lookup is repeated on every call so a binary installed
    while the server runs is picked up.
    """

    def __init__(self, executable: str, configured_path: Optional[str] = None) -> None:
        """Initialize the provider.

        Args:
            executable: Executable name to look up on PATH (e.g. ``rg``)
            configured_path: Optional explicit location of the executable
        """
        self.executable = executable
        self.configured_path = configured_path

    def ensure_available(self) -> str:
        """Return the path to the executable.

        Raises:
            MatcherUnavailableError: If the executable cannot be found
        """
        if self.configured_path:
            path = os.path.expanduser(self.configured_path)
            if os.path.isfile(path) and os.access(path, os.X_OK):
                return path
            raise MatcherUnavailableError(
                f"Cannot use {self.executable}: {path} is not an executable file."
            )

        found = shutil.which(self.executable)
        if found:
            return found

        logger.warning(f"{self.executable} not found on PATH")
        raise MatcherUnavailableError(f"Cannot use {self.executable}.")
