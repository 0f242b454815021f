"""Data models for the platforms module.

Contains the values produced by ``PlatformStrategy`` implementations:
the parsed process record and the per-platform diagnostic text.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProcessInfo:
    """Connection secrets parsed from the language server command line.

    Attributes:
        pid: Process id of the language server.
        csrf_token: Value of ``--csrf_token``; required on every API call.
        declared_port: Value of ``--extension_server_port``, or None when
            the flag is missing from the command line.
    """

    pid: int
    csrf_token: str
    declared_port: int | None = None


@dataclass(frozen=True)
class ErrorMessages:
    """User-facing diagnostics for one platform.

    Attributes:
        process_not_found: Shown when the process list yields no match.
        command_not_available: Shown when the enumeration tool is missing.
        requirements: Ordered remediation checklist shown after the final
            failed attempt.
    """

    process_not_found: str
    command_not_available: str
    requirements: tuple[str, ...]
