"""Shared fixtures for antigravity-detect tests.

Provides captured output samples from the enumeration tools each
platform strategy has to read.
"""

from __future__ import annotations

import pytest

TOKEN = "ab12cd34-ef56-7890-abcd-ef1234567890"


@pytest.fixture
def ps_output() -> str:
    """``ps aux | grep`` output for a running Linux language server."""
    return (
        "alice     4412  1.2  0.8 1234567 89012 ?  Sl  10:02  0:14 "
        "/opt/antigravity/bin/language_server_linux "
        f"--extension_server_port=2873 --csrf_token={TOKEN} --random_port\n"
    )


@pytest.fixture
def lsof_output() -> str:
    """``lsof -Pan -p 4412 -i`` output with listeners and one connection."""
    return (
        "COMMAND    PID  USER   FD   TYPE DEVICE SIZE/OFF NODE NAME\n"
        "language_ 4412 alice  10u  IPv4 0x1a2b      0t0  TCP 127.0.0.1:42100 (LISTEN)\n"
        "language_ 4412 alice  11u  IPv4 0x1a2c      0t0  TCP 127.0.0.1:2873 (LISTEN)\n"
        "language_ 4412 alice  12u  IPv4 0x1a2d      0t0  TCP 127.0.0.1:42101 (LISTEN)\n"
        "language_ 4412 alice  13u  IPv4 0x1a2e      0t0  "
        "TCP 127.0.0.1:42100->127.0.0.1:53211 (ESTABLISHED)\n"
    )


@pytest.fixture
def wmic_output() -> str:
    """``wmic process ... /format:list`` output for a Windows language server."""
    return (
        "\r\n\r\n"
        "CommandLine=\"C:\\Users\\alice\\AppData\\Local\\Programs\\Antigravity\\"
        "language_server_windows_x64.exe\" --extension_server_port=2873 "
        f"--csrf_token={TOKEN.upper()}\r\n"
        "ProcessId=4412\r\n"
        "\r\n"
    )


@pytest.fixture
def windows_netstat_output() -> str:
    """``netstat -ano | findstr`` output for pid 4412."""
    return (
        "  TCP    127.0.0.1:42100        0.0.0.0:0              LISTENING       4412\r\n"
        "  TCP    127.0.0.1:2873         0.0.0.0:0              LISTENING       4412\r\n"
        "  TCP    0.0.0.0:5040           0.0.0.0:0              LISTENING       4412\r\n"
        "  TCP    127.0.0.1:42100        127.0.0.1:53211        ESTABLISHED     4412\r\n"
    )
