"""Windows process discovery using wmic and netstat.

When ``netstat`` finds nothing the port-list command falls back to
PowerShell's ``Get-NetTCPConnection``, printed as a header-less table so
that both layouts can be parsed line by line.
"""

from __future__ import annotations

import re

from antigravity_detect.platforms.base import PlatformStrategy
from antigravity_detect.platforms.models import ErrorMessages, ProcessInfo

_PID_PATTERN = re.compile(r"ProcessId=(\d+)")

# netstat:             TCP    127.0.0.1:2873    0.0.0.0:0    LISTENING    4412
# Get-NetTCPConnection: 127.0.0.1    2873    Listen
_PORT_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"127\.0\.0\.1:(\d+)\s+0\.0\.0\.0:0\s+LISTENING"),
    re.compile(r"^\s*127\.0\.0\.1\s+(\d+)\s+Listen\b"),
]

_NETSTAT_OWNER = re.compile(r"LISTENING\s+(\d+)\s*$")


class WindowsPlatformStrategy(PlatformStrategy):
    """Strategy for Windows hosts."""

    @property
    def name(self) -> str:
        return "windows"

    def build_process_list_command(self, process_name: str) -> str:
        return (
            f"wmic process where \"name='{process_name}'\" "
            "get ProcessId,CommandLine /format:list"
        )

    def parse_process_info(self, raw_output: str) -> ProcessInfo | None:
        """Parse ``wmic ... /format:list`` output.

        Expected format::

            CommandLine=...--extension_server_port=1234 --csrf_token=abc123...
            ProcessId=5678
        """
        if not raw_output or not raw_output.strip():
            return None

        pid_match = _PID_PATTERN.search(raw_output)
        if pid_match is None:
            return None
        pid = int(pid_match.group(1))
        if pid <= 0:
            return None

        return self._build_process_info(pid, raw_output)

    def build_port_list_command(self, pid: int) -> str:
        fallback = (
            "powershell -NoProfile -Command "
            f"\"Get-NetTCPConnection -OwningProcess {pid} -State Listen "
            "| Format-Table -HideTableHeaders LocalAddress,LocalPort,State\""
        )
        return f'netstat -ano | findstr "{pid}" | findstr "LISTENING" || {fallback}'

    def parse_listening_ports(self, raw_output: str, pid: int | None = None) -> list[int]:
        return self._collect_ports(raw_output, _PORT_PATTERNS, pid)

    def _line_owner(self, line: str) -> int | None:
        # netstat -ano ends each row with the owning pid
        match = _NETSTAT_OWNER.search(line)
        return int(match.group(1)) if match else None

    def error_messages(self) -> ErrorMessages:
        return ErrorMessages(
            process_not_found="language_server process not found",
            command_not_available="wmic command not available, check the system environment",
            requirements=(
                "Antigravity is running",
                "the language_server_windows_x64.exe process exists",
                "you have permission to run wmic and netstat",
            ),
        )
