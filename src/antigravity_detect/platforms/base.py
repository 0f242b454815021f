"""Abstract platform strategy for process and port enumeration.

A ``PlatformStrategy`` knows which shell commands list the language server
process and its sockets on one OS family, and how to read their
human-oriented output. Parsing never raises: unrecognized output yields
``None`` or an empty list so the orchestrator can treat it as an ordinary
failed attempt.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from antigravity_detect.platforms.models import ErrorMessages, ProcessInfo

# Command-line flags of the language server, shared by all platforms.
EXTENSION_PORT_PATTERN = re.compile(r"--extension_server_port[=\s]+(\d+)")
CSRF_TOKEN_PATTERN = re.compile(r"--csrf_token[=\s]+([a-f0-9\-]+)", re.IGNORECASE)

MIN_PORT = 1
MAX_PORT = 65535


class PlatformStrategy(ABC):
    """OS-specific process and port discovery.

    Subclasses implement the four command/parse operations and
    ``error_messages``. ``parse_process_info`` shares token and port
    extraction through ``_build_process_info``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short discriminator for this strategy (e.g. 'unix')."""

    @abstractmethod
    def build_process_list_command(self, process_name: str) -> str:
        """Return a shell command listing processes named ``process_name``.

        The output must include each process's full command line.
        """

    @abstractmethod
    def parse_process_info(self, raw_output: str) -> ProcessInfo | None:
        """Extract pid, CSRF token and declared port from process-list output.

        Returns:
            A ``ProcessInfo``, or None if the output is blank or lacks a
            pid or a token.
        """

    @abstractmethod
    def build_port_list_command(self, pid: int) -> str:
        """Return a shell command listing TCP listeners owned by ``pid``."""

    @abstractmethod
    def parse_listening_ports(self, raw_output: str, pid: int | None = None) -> list[int]:
        """Extract loopback listening ports, deduplicated and ascending.

        Args:
            raw_output: Output of the port-list command.
            pid: When given, drop lines that name another owning process.
        """

    @abstractmethod
    def error_messages(self) -> ErrorMessages:
        """Return diagnostics and the remediation checklist for this platform."""

    @staticmethod
    def _build_process_info(pid: int, raw_output: str) -> ProcessInfo | None:
        """Combine a parsed pid with the token and port found in ``raw_output``."""
        token_match = CSRF_TOKEN_PATTERN.search(raw_output)
        if token_match is None:
            return None

        port_match = EXTENSION_PORT_PATTERN.search(raw_output)
        declared_port = int(port_match.group(1)) if port_match else None
        return ProcessInfo(
            pid=pid,
            csrf_token=token_match.group(1),
            declared_port=declared_port,
        )

    def _line_owner(self, line: str) -> int | None:
        """Owning pid reported on a socket line, or None if the layout has none."""
        return None

    def _collect_ports(
        self,
        raw_output: str,
        patterns: list[re.Pattern[str]],
        pid: int | None = None,
    ) -> list[int]:
        """Scan output line by line, taking the first pattern that matches.

        Each pattern must capture the port number in its first non-empty
        group. Ports outside 1-65535 are dropped. When ``pid`` is given,
        lines whose layout names a different owner are skipped.
        """
        ports: set[int] = set()
        if not raw_output or not raw_output.strip():
            return []

        for line in raw_output.strip().splitlines():
            for pattern in patterns:
                match = pattern.search(line)
                if match is None:
                    continue
                if pid is not None and self._line_owner(line) not in (None, pid):
                    break
                port = int(next(g for g in match.groups() if g))
                if MIN_PORT <= port <= MAX_PORT:
                    ports.add(port)
                break
        return sorted(ports)
