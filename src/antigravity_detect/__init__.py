"""antigravity-detect: Locate the Antigravity language server and its private API port."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
