"""Unix-like (macOS/Linux) process discovery using ps and lsof/netstat."""

from __future__ import annotations

import re

from antigravity_detect.platforms.base import PlatformStrategy
from antigravity_detect.platforms.models import ErrorMessages, ProcessInfo

# lsof:    language_ 1234 user 10u IPv4 0x... 0t0 TCP 127.0.0.1:2873 (LISTEN)
# netstat: tcp  0  0 127.0.0.1:2873  0.0.0.0:*  LISTEN  1234/language_server
_PORT_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"127\.0\.0\.1:(\d+).*\(LISTEN\)"),
    re.compile(r"127\.0\.0\.1:(\d+).*LISTEN"),
    re.compile(r"localhost:(\d+).*\(LISTEN\)|localhost:(\d+).*LISTEN"),
]

# netstat -p program column, e.g. "1234/language_server"
_NETSTAT_OWNER = re.compile(r"\s(\d+)/\S*\s*$")


class UnixPlatformStrategy(PlatformStrategy):
    """Strategy for macOS and Linux hosts.

    Args:
        system: Value of ``platform.system()``; only used to name the
            expected binary in the remediation checklist.
    """

    def __init__(self, system: str = "Linux") -> None:
        self._system = system

    @property
    def name(self) -> str:
        return "unix"

    def build_process_list_command(self, process_name: str) -> str:
        # ps aux prints the full command line; drop grep's own match
        return f'ps aux | grep "{process_name}" | grep -v grep'

    def parse_process_info(self, raw_output: str) -> ProcessInfo | None:
        """Parse ``ps aux`` output.

        Expected format (the pid is the second column of the first line)::

            user  1234  0.0  0.0  ...  /path/language_server_linux --extension_server_port=2873 --csrf_token=ab12
        """
        if not raw_output or not raw_output.strip():
            return None

        first_line = raw_output.strip().splitlines()[0]
        columns = first_line.split()
        if len(columns) < 2:
            return None

        try:
            pid = int(columns[1])
        except ValueError:
            return None
        if pid <= 0:
            return None

        return self._build_process_info(pid, raw_output)

    def build_port_list_command(self, pid: int) -> str:
        # lsof: -P no port names, -a AND filters, -n no DNS, -p pid, -i inet only
        return f"lsof -Pan -p {pid} -i 2>/dev/null || netstat -tulpn 2>/dev/null | grep {pid}"

    def parse_listening_ports(self, raw_output: str, pid: int | None = None) -> list[int]:
        return self._collect_ports(raw_output, _PORT_PATTERNS, pid)

    def _line_owner(self, line: str) -> int | None:
        match = _NETSTAT_OWNER.search(line)
        if match is not None:
            return int(match.group(1))
        columns = line.split()
        # lsof puts the pid in the second column
        if "(LISTEN)" in line and len(columns) > 1 and columns[1].isdecimal():
            return int(columns[1])
        return None

    def error_messages(self) -> ErrorMessages:
        binary = "language_server_macos" if self._system == "Darwin" else "language_server_linux"
        return ErrorMessages(
            process_not_found="language_server process not found",
            command_not_available="ps/lsof command not available, check the system environment",
            requirements=(
                "Antigravity is running",
                f"the {binary} process exists",
                "you have permission to run ps and lsof",
            ),
        )
