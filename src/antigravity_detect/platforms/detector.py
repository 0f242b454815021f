"""Host platform detection.

Chooses the ``PlatformStrategy`` and the language server binary name for
the running OS. The strategy is built once per detector and reused, so a
``PlatformDetector`` is the single source of truth for "which platform am
I" during a detection run.
"""

from __future__ import annotations

import platform

from antigravity_detect.platforms.base import PlatformStrategy
from antigravity_detect.platforms.unix import UnixPlatformStrategy
from antigravity_detect.platforms.windows import WindowsPlatformStrategy

# Language server binary names, keyed by ``platform.system()``.
PROCESS_NAMES: dict[str, str] = {
    "Windows": "language_server_windows_x64.exe",
    "Darwin": "language_server_macos",
    "Linux": "language_server_linux",
}

_PLATFORM_LABELS: dict[str, str] = {
    "Windows": "Windows",
    "Darwin": "macOS",
    "Linux": "Linux",
}


class PlatformDetector:
    """Selects platform-specific discovery behaviour.

    Args:
        system: OS discriminator as reported by ``platform.system()``.
            Defaults to the running host (override for testing).

    Usage::

        detector = PlatformDetector()
        strategy = detector.select_strategy()
        command = strategy.build_process_list_command(detector.canonical_process_name())
    """

    def __init__(self, system: str | None = None) -> None:
        self._system = system if system is not None else platform.system()
        self._strategy = self._create_strategy()

    @property
    def system(self) -> str:
        """The OS discriminator this detector was built for."""
        return self._system

    @property
    def is_windows(self) -> bool:
        return self._system == "Windows"

    def _create_strategy(self) -> PlatformStrategy:
        if self.is_windows:
            return WindowsPlatformStrategy()
        return UnixPlatformStrategy(self._system)

    def select_strategy(self) -> PlatformStrategy:
        """Return the strategy chosen at construction time."""
        return self._strategy

    def canonical_process_name(self) -> str:
        """Return the language server binary name for this OS.

        Unix-likes other than macOS fall back to the Linux binary name.
        """
        return PROCESS_NAMES.get(self._system, PROCESS_NAMES["Linux"])

    def platform_label(self) -> str:
        """Human-readable platform name, for diagnostics only."""
        return _PLATFORM_LABELS.get(self._system, self._system or "Unknown")
