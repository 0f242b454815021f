"""Platform-specific process and port enumeration.

Public API::

    from antigravity_detect.platforms import PlatformDetector

    detector = PlatformDetector()
    strategy = detector.select_strategy()
    info = strategy.parse_process_info(ps_output)
"""

from __future__ import annotations

from antigravity_detect.platforms.base import PlatformStrategy
from antigravity_detect.platforms.detector import PROCESS_NAMES, PlatformDetector
from antigravity_detect.platforms.models import ErrorMessages, ProcessInfo
from antigravity_detect.platforms.unix import UnixPlatformStrategy
from antigravity_detect.platforms.windows import WindowsPlatformStrategy

__all__ = [
    "ErrorMessages",
    "PROCESS_NAMES",
    "PlatformDetector",
    "PlatformStrategy",
    "ProcessInfo",
    "UnixPlatformStrategy",
    "WindowsPlatformStrategy",
]
