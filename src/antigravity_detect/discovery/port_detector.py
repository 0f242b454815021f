"""Retrying discovery of the language server's credentials and API port.

Detection Algorithm (one attempt):
    1. Run the process-list command (5 s) and parse pid + CSRF token.
    2. Run the port-list command for that pid (3 s); failure means no ports.
    3. Probe the candidate ports in ascending order over HTTPS (2 s each),
       stopping at the first one that answers 200.

Any failure inside an attempt is logged and the whole attempt is retried
after ``retry_delay_ms``, up to ``max_retries`` attempts. Exhausting every
attempt is a normal outcome reported as ``None``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from antigravity_detect.discovery.models import Credentials
from antigravity_detect.discovery.prober import probe_port
from antigravity_detect.discovery.runner import run_command
from antigravity_detect.exceptions import (
    CommandTimeoutError,
    CommandUnavailableError,
    DetectionError,
    NoListeningPortsError,
    NoWorkingPortError,
    ProcessNotFoundError,
)
from antigravity_detect.platforms.base import PlatformStrategy
from antigravity_detect.platforms.detector import PlatformDetector
from antigravity_detect.platforms.models import ErrorMessages

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES: int = 3
DEFAULT_RETRY_DELAY_MS: int = 2000

# Time bounds for the enumeration commands (seconds).
PROCESS_LIST_TIMEOUT: float = 5.0
PORT_LIST_TIMEOUT: float = 3.0

CommandRunner = Callable[[str, float], Awaitable[str]]
PortProber = Callable[[int, str], Awaitable[bool]]
Sleeper = Callable[[float], Awaitable[None]]


class DiagnosticSink(Protocol):
    """Where progress and failure messages go. ``logging.Logger`` fits."""

    def debug(self, msg: str, *args: object, **kwargs: object) -> None: ...

    def info(self, msg: str, *args: object, **kwargs: object) -> None: ...

    def warning(self, msg: str, *args: object, **kwargs: object) -> None: ...

    def error(self, msg: str, *args: object, **kwargs: object) -> None: ...


class ProcessPortDetector:
    """Finds the running language server and its working API port.

    Args:
        max_retries: Number of full attempts before giving up.
        retry_delay_ms: Pause between attempts, in milliseconds.
        platform_detector: Host platform selection; defaults to the
            running OS.
        runner: Async shell runner ``(command, timeout) -> stdout``.
        prober: Async port check ``(port, csrf_token) -> bool``.
        sleep: Async sleep used between attempts.
        sink: Diagnostic sink; defaults to this module's logger.

    Usage::

        detector = ProcessPortDetector()
        creds = detector.detect_sync()
        if creds is not None:
            print(creds.connect_port, creds.token_preview)
    """

    def __init__(
        self,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS,
        platform_detector: PlatformDetector | None = None,
        runner: CommandRunner = run_command,
        prober: PortProber = probe_port,
        sleep: Sleeper = asyncio.sleep,
        sink: DiagnosticSink | None = None,
    ) -> None:
        if max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {max_retries}")
        if retry_delay_ms < 0:
            raise ValueError(f"retry_delay_ms must be non-negative, got {retry_delay_ms}")

        self._max_retries = max_retries
        self._retry_delay_ms = retry_delay_ms
        self._platform = platform_detector or PlatformDetector()
        self._strategy: PlatformStrategy = self._platform.select_strategy()
        self._process_name = self._platform.canonical_process_name()
        self._runner = runner
        self._prober = prober
        self._sleep = sleep
        self._sink: DiagnosticSink = sink if sink is not None else logger

    @property
    def strategy(self) -> PlatformStrategy:
        return self._strategy

    @property
    def process_name(self) -> str:
        return self._process_name

    async def detect(self) -> Credentials | None:
        """Run up to ``max_retries`` detection attempts.

        Returns:
            ``Credentials`` from the first successful attempt, or None once
            every attempt has failed.
        """
        messages = self._strategy.error_messages()
        label = self._platform.platform_label()

        for attempt in range(1, self._max_retries + 1):
            self._sink.info(
                "Detecting Antigravity process (%s, attempt %d/%d)...",
                label, attempt, self._max_retries,
            )
            try:
                creds = await self._attempt(messages)
            except DetectionError as exc:
                self._report_failure(attempt, exc, messages)
            except Exception:
                self._sink.warning("Attempt %d failed unexpectedly", attempt, exc_info=True)
            else:
                self._sink.info("Attempt %d succeeded", attempt)
                self._sink.info("API port (HTTPS): %d", creds.connect_port)
                return creds

            if attempt < self._max_retries:
                self._sink.info("Waiting %dms before retrying...", self._retry_delay_ms)
                await self._sleep(self._retry_delay_ms / 1000)

        self._report_exhausted(messages)
        return None

    def detect_sync(self) -> Credentials | None:
        """Blocking wrapper around ``detect``."""
        return asyncio.run(self.detect())

    async def _attempt(self, messages: ErrorMessages) -> Credentials:
        command = self._strategy.build_process_list_command(self._process_name)
        raw = await self._runner(command, PROCESS_LIST_TIMEOUT)

        info = self._strategy.parse_process_info(raw)
        if info is None:
            raise ProcessNotFoundError(messages.process_not_found)

        self._sink.info("Found process info:")
        self._sink.info("  PID: %d", info.pid)
        self._sink.info(
            "  extension_server_port: %s",
            info.declared_port if info.declared_port is not None else "(not found)",
        )
        self._sink.info("  CSRF Token: %s...", info.csrf_token[:8])

        ports = await self.list_listening_ports(info.pid)
        if not ports:
            raise NoListeningPortsError("process is not listening on any port")
        self._sink.info(
            "Found %d listening port(s): %s",
            len(ports), ", ".join(str(p) for p in ports),
        )

        connect_port = await self.find_working_port(ports, info.csrf_token)
        if connect_port is None:
            raise NoWorkingPortError("no candidate port answered the API probe")

        return Credentials(
            extension_port=info.declared_port,
            connect_port=connect_port,
            csrf_token=info.csrf_token,
        )

    async def list_listening_ports(self, pid: int) -> list[int]:
        """Return the loopback ports ``pid`` listens on; [] if enumeration fails."""
        self._sink.info("Listing ports for PID %d...", pid)
        command = self._strategy.build_port_list_command(pid)
        try:
            raw = await self._runner(command, PORT_LIST_TIMEOUT)
        except DetectionError as exc:
            self._sink.warning("Failed to list listening ports: %s", exc)
            return []
        return self._strategy.parse_listening_ports(raw, pid)

    async def find_working_port(self, ports: list[int], csrf_token: str) -> int | None:
        """Probe ``ports`` in order and return the first that answers.

        Probes run one at a time; candidates after the first success are
        never contacted.
        """
        self._sink.info("Testing port connectivity...")
        for port in ports:
            self._sink.debug("  Testing port %d...", port)
            if await self._prober(port, csrf_token):
                self._sink.info("  Port %d responded", port)
                return port
            self._sink.info("  Port %d did not respond", port)
        return None

    def _report_failure(
        self, attempt: int, exc: DetectionError, messages: ErrorMessages,
    ) -> None:
        self._sink.warning("Attempt %d failed: %s", attempt, exc)
        if isinstance(exc, CommandTimeoutError):
            self._sink.warning("  Reason: command timed out, the system may be under heavy load")
        elif isinstance(exc, CommandUnavailableError):
            self._sink.warning("  Reason: %s", messages.command_not_available)

    def _report_exhausted(self, messages: ErrorMessages) -> None:
        self._sink.error("All %d attempts failed", self._max_retries)
        self._sink.error("  Please make sure:")
        for index, requirement in enumerate(messages.requirements, start=1):
            self._sink.error("  %d. %s", index, requirement)
