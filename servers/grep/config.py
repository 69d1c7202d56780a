"""Configuration for the grep MCP server."""

import os
from typing import List

from dotenv import load_dotenv

from core.limiters import DEFAULT_TOTAL_MAX_MATCHES

load_dotenv()

SUPPORTED_BACKENDS = ("ripgrep", "grep")


class GrepServerConfig:
    """Server and search configuration read from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from the environment."""
        self.sse_port = int(os.getenv("MCP_SSE_PORT", "8000"))
        self.streamable_http_port = int(os.getenv("MCP_STREAMABLE_HTTP_PORT", "8080"))
        self.debug_mode = os.getenv("DEBUG_MODE", "false").lower() == "true"

        # Langfuse configuration (optional)
        self.langfuse_enabled = os.getenv("LANGFUSE_ENABLED", "false").lower() == "true"
        if self.langfuse_enabled:
            self.langfuse_public_key = self._get_required_env("LANGFUSE_PUBLIC_KEY")
            self.langfuse_secret_key = self._get_required_env("LANGFUSE_SECRET_KEY")
            self.langfuse_host = self._get_required_env("LANGFUSE_HOST")
        else:
            self.langfuse_public_key = ""
            self.langfuse_secret_key = ""
            self.langfuse_host = ""

        self.search_backend = os.getenv("SEARCH_BACKEND", "ripgrep").lower()
        if self.search_backend == "rg":
            self.search_backend = "ripgrep"
        if self.search_backend not in SUPPORTED_BACKENDS:
            raise ValueError(
                "Invalid option for SEARCH_BACKEND. Valid options are [ripgrep|grep] "
            )
        self.matcher_path = os.getenv("MATCHER_PATH", "")

        self.target_dir = os.path.abspath(os.getenv("TARGET_DIR") or os.getcwd())
        self.workspace_roots = self._parse_roots(os.getenv("WORKSPACE_ROOTS", ""))
        if not self.workspace_roots:
            self.workspace_roots = [self.target_dir]

        self.max_total_matches = int(
            os.getenv("MAX_TOTAL_MATCHES", str(DEFAULT_TOTAL_MAX_MATCHES))
        )
        if self.max_total_matches < 1:
            raise ValueError("MAX_TOTAL_MATCHES must be a positive integer")

    @staticmethod
    def _get_required_env(key: str) -> str:
        """Get required environment variable or raise descriptive error."""
        value = os.getenv(key)
        if not value:
            raise ValueError(f"Required environment variable {key} is not set")
        return value

    @staticmethod
    def _parse_roots(value: str) -> List[str]:
        """Split an os.pathsep separated list of directories."""
        return [
            os.path.abspath(os.path.expanduser(part.strip()))
            for part in value.split(os.pathsep)
            if part.strip()
        ]
