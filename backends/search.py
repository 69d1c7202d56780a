"""Search backends driving an external matcher process (ripgrep or grep)."""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from backends.errors import MatcherLaunchError, MatcherRuntimeError, SearchCancelled
from backends.globs import glob_matches
from backends.models import Match
from backends.parser import parse_matcher_output
from backends.provisioning import BinaryProvider

logger = logging.getLogger(__name__)

# Applied to directory searches only.
EXCLUDED_GLOBS = [
    ".git",
    "node_modules",
    "bower_components",
    "*.log",
    "*.tmp",
    "build",
    "dist",
    "coverage",
]

DEFAULT_THREADS = 4


class AbstractSearchClient(ABC):
    """Abstract base class for matcher-backed search clients.

    Subclasses only decide the command line. Running the process, mapping its
    exit status and honouring cancellation is shared.
    """

    name = "matcher"

    def __init__(self, provider: BinaryProvider, debug: bool = False) -> None:
        """Initialize the client.

        Args:
            provider: Resolves the matcher executable before each search
            debug: Log the full command line of every search
        """
        self.provider = provider
        self.debug = debug

    @abstractmethod
    def build_args(self, pattern: str, target: str, include: Optional[str] = None) -> List[str]:
        """Build the matcher arguments for one target.

        Args:
            pattern: Regular expression to search for
            target: Absolute file or directory path
            include: Optional glob restricting the files searched

        Returns:
            Argument list, without the executable
        """
        pass

    async def search(
        self,
        pattern: str,
        target: str,
        include: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[Match]:
        """Search one target and return the matches with absolute paths.

        Raises:
            MatcherUnavailableError: If the executable cannot be provisioned
            MatcherLaunchError: If the process cannot be started
            MatcherRuntimeError: If the matcher exits with a failure status
            SearchCancelled: If ``cancel_event`` is set before the matcher finishes
        """
        binary = self.provider.ensure_available()
        args = self.build_args(pattern, target, include)
        if self.debug:
            logger.debug(f"Running {binary} {' '.join(args)}")

        try:
            output = await self._run(binary, args, cancel_event)
        except (MatcherLaunchError, MatcherRuntimeError) as exc:
            logger.error(f"{self.name} failed: {exc}")
            raise

        return parse_matcher_output(output)

    async def _run(
        self, binary: str, args: List[str], cancel_event: Optional[asyncio.Event]
    ) -> str:
        """Run the matcher to completion and return its standard output."""
        if cancel_event is not None and cancel_event.is_set():
            raise SearchCancelled(f"{self.name} search was cancelled")

        try:
            proc = await asyncio.create_subprocess_exec(
                binary,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise MatcherLaunchError(f"Failed to start {self.name}: {exc}") from exc

        communicate = asyncio.ensure_future(proc.communicate())
        waiters = {communicate}
        cancel_wait = None
        if cancel_event is not None:
            cancel_wait = asyncio.ensure_future(cancel_event.wait())
            waiters.add(cancel_wait)

        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            await self._terminate(proc, communicate)
            raise
        finally:
            if cancel_wait is not None:
                cancel_wait.cancel()

        if not communicate.done():
            await self._terminate(proc, communicate)
            logger.info(f"{self.name} process {proc.pid} killed on cancellation")
            raise SearchCancelled(f"{self.name} search was cancelled")

        stdout, stderr = self._decode(communicate.result())
        code = proc.returncode
        if code == 0:
            return stdout
        if code == 1:
            # No matches
            return ""
        raise MatcherRuntimeError(
            f"{self.name} exited with code {code}: {stderr.strip()}",
            exit_code=code,
            stderr=stderr,
        )

    @staticmethod
    async def _terminate(proc: asyncio.subprocess.Process, communicate: asyncio.Future) -> None:
        """Kill the child and wait for its pipes to drain so it is reaped."""
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
        await asyncio.gather(communicate, return_exceptions=True)

    @staticmethod
    def _decode(streams: Tuple[bytes, bytes]) -> Tuple[str, str]:
        stdout_b, stderr_b = streams
        stdout = (stdout_b or b"").decode("utf-8", errors="replace")
        stderr = (stderr_b or b"").decode("utf-8", errors="replace")
        return stdout, stderr


class RipgrepSearchClient(AbstractSearchClient):
    """ripgrep search client implementation."""

    name = "ripgrep"

    def __init__(
        self, provider: BinaryProvider, threads: int = DEFAULT_THREADS, debug: bool = False
    ) -> None:
        """Initialize ripgrep client.

        Args:
            provider: Resolves the ``rg`` executable
            threads: Worker threads ripgrep may use per search
            debug: Log the full command line of every search
        """
        super().__init__(provider, debug=debug)
        self.threads = threads

    def build_args(self, pattern: str, target: str, include: Optional[str] = None) -> List[str]:
        """Build ripgrep arguments."""
        args = [
            "--line-number",
            "--no-heading",
            "--with-filename",
            "--ignore-case",
            "--regexp",
            pattern,
        ]

        # Globs mean nothing for a single file
        if not os.path.isfile(target):
            if include:
                args.extend(["--glob", include])
            for exclude in EXCLUDED_GLOBS:
                args.extend(["--glob", f"!{exclude}"])

        args.extend(["--threads", str(self.threads)])
        args.append(target)
        return args


class GrepSearchClient(AbstractSearchClient):
    """GNU grep search client implementation.

    Uses extended regular expressions, so patterns relying on ripgrep-only
    syntax (e.g. ``\\d``) behave differently. grep's own ``--include`` only
    sees file names and has no brace expansion, so the include glob is
    applied to the parsed matches instead.
    """

    name = "grep"

    def build_args(self, pattern: str, target: str, include: Optional[str] = None) -> List[str]:
        """Build grep arguments. ``include`` is applied after parsing."""
        args = ["-n", "-H", "-i", "-I", "-E"]

        if not os.path.isfile(target):
            args.append("-r")
            for exclude in EXCLUDED_GLOBS:
                if "*" in exclude:
                    args.append(f"--exclude={exclude}")
                else:
                    args.append(f"--exclude-dir={exclude}")

        args.extend(["-e", pattern, "--", target])
        return args

    async def search(
        self,
        pattern: str,
        target: str,
        include: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[Match]:
        """Search one target, keeping only files matching ``include``."""
        matches = await super().search(pattern, target, include, cancel_event)
        if not include or os.path.isfile(target):
            return matches
        return [
            match
            for match in matches
            if glob_matches(include, os.path.relpath(match.file_path, target))
        ]


class SearchClientFactory:
    """Factory for creating search clients."""

    @staticmethod
    def create_client(backend: str, **kwargs) -> AbstractSearchClient:
        """Create a search client for the given backend.

        Args:
            backend: Backend name ('ripgrep' or 'grep')
            **kwargs: ``matcher_path``, ``threads`` and ``debug``

        Returns:
            Search client instance

        Raises:
            ValueError: If backend is not supported
        """
        backend = backend.lower()
        matcher_path = kwargs.get("matcher_path") or None
        debug = bool(kwargs.get("debug", False))
        if backend in ("ripgrep", "rg"):
            return RipgrepSearchClient(
                provider=BinaryProvider("rg", matcher_path),
                threads=int(kwargs.get("threads") or DEFAULT_THREADS),
                debug=debug,
            )
        elif backend == "grep":
            return GrepSearchClient(provider=BinaryProvider("grep", matcher_path), debug=debug)
        else:
            raise ValueError(f"Unsupported backend: {backend}")
