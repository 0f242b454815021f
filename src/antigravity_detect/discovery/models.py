"""Data models for the discovery module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Credentials:
    """Everything a client needs to call the language server API.

    Attributes:
        extension_port: Port declared via ``--extension_server_port``,
            or None if the flag was absent.
        connect_port: Loopback HTTPS port verified by a successful probe.
        csrf_token: Token sent as ``X-Codeium-Csrf-Token``.
    """

    extension_port: int | None
    connect_port: int
    csrf_token: str

    @property
    def token_preview(self) -> str:
        """First 8 characters of the token, safe to print."""
        return f"{self.csrf_token[:8]}..."

    def as_dict(self) -> dict[str, Any]:
        """Render the machine-readable result; an unknown extension port is 0."""
        return {
            "extensionPort": self.extension_port or 0,
            "connectPort": self.connect_port,
            "csrfToken": self.csrf_token,
        }
