"""Language server credential and port discovery.

Public API::

    from antigravity_detect.discovery import ProcessPortDetector

    detector = ProcessPortDetector(max_retries=3, retry_delay_ms=2000)
    creds = detector.detect_sync()
    if creds is not None:
        print(creds.as_dict())
"""

from __future__ import annotations

from antigravity_detect.discovery.models import Credentials
from antigravity_detect.discovery.port_detector import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY_MS,
    DiagnosticSink,
    ProcessPortDetector,
)
from antigravity_detect.discovery.prober import probe_port
from antigravity_detect.discovery.runner import run_command

__all__ = [
    "Credentials",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_DELAY_MS",
    "DiagnosticSink",
    "ProcessPortDetector",
    "probe_port",
    "run_command",
]
