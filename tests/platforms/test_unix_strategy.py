"""Tests for UnixPlatformStrategy command building and output parsing."""

from __future__ import annotations

import pytest

from antigravity_detect.platforms import ProcessInfo, UnixPlatformStrategy


@pytest.fixture
def strategy() -> UnixPlatformStrategy:
    return UnixPlatformStrategy("Linux")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestUnixCommands:
    """Shell commands produced for ps and lsof/netstat."""

    def test_name(self, strategy: UnixPlatformStrategy) -> None:
        assert strategy.name == "unix"

    def test_process_list_command_excludes_grep(self, strategy: UnixPlatformStrategy) -> None:
        """ps output is filtered by name and grep's own line is dropped."""
        command = strategy.build_process_list_command("language_server_linux")
        assert command == 'ps aux | grep "language_server_linux" | grep -v grep'

    def test_port_list_command_prefers_lsof(self, strategy: UnixPlatformStrategy) -> None:
        """lsof runs first, netstat is the fallback."""
        command = strategy.build_port_list_command(4412)
        primary, fallback = command.split(" || ")
        assert primary.startswith("lsof -Pan -p 4412 -i")
        assert fallback.startswith("netstat -tulpn")
        assert fallback.endswith("grep 4412")


# ---------------------------------------------------------------------------
# parse_process_info
# ---------------------------------------------------------------------------


class TestUnixParseProcessInfo:
    """Extraction of pid, token and declared port from ps output."""

    @pytest.mark.parametrize("raw", ["", "   ", "\n\n", "\t \n"])
    def test_blank_output(self, strategy: UnixPlatformStrategy, raw: str) -> None:
        assert strategy.parse_process_info(raw) is None

    def test_reference_line(self, strategy: UnixPlatformStrategy) -> None:
        raw = (
            "user 4412 0.0 0.1 ... /opt/x/language_server_linux "
            "--extension_server_port=2873 --csrf_token=ab12cd34-ef56"
        )
        assert strategy.parse_process_info(raw) == ProcessInfo(
            pid=4412, csrf_token="ab12cd34-ef56", declared_port=2873,
        )

    def test_full_ps_line(self, strategy: UnixPlatformStrategy, ps_output: str) -> None:
        info = strategy.parse_process_info(ps_output)
        assert info is not None
        assert info.pid == 4412
        assert info.declared_port == 2873
        assert info.csrf_token == "ab12cd34-ef56-7890-abcd-ef1234567890"

    def test_missing_token(self, strategy: UnixPlatformStrategy) -> None:
        """A pid and port without a token is not a usable process."""
        raw = "user 4412 0.0 0.1 /opt/x/language_server_linux --extension_server_port=2873"
        assert strategy.parse_process_info(raw) is None

    def test_missing_port_is_none(self, strategy: UnixPlatformStrategy) -> None:
        """The declared port is optional and absent rather than zero."""
        raw = "user 4412 0.0 0.1 /opt/x/language_server_linux --csrf_token=deadbeef"
        info = strategy.parse_process_info(raw)
        assert info is not None
        assert info.declared_port is None

    def test_space_separated_flags(self, strategy: UnixPlatformStrategy) -> None:
        raw = "user 77 0.0 0.1 ls --extension_server_port 2873 --csrf_token abc-123"
        info = strategy.parse_process_info(raw)
        assert info == ProcessInfo(pid=77, csrf_token="abc-123", declared_port=2873)

    def test_uppercase_token(self, strategy: UnixPlatformStrategy) -> None:
        raw = "user 77 0.0 0.1 ls --csrf_token=ABCDEF-0123"
        info = strategy.parse_process_info(raw)
        assert info is not None
        assert info.csrf_token == "ABCDEF-0123"

    def test_non_numeric_pid(self, strategy: UnixPlatformStrategy) -> None:
        raw = "user PID %CPU --csrf_token=abc"
        assert strategy.parse_process_info(raw) is None

    def test_single_column(self, strategy: UnixPlatformStrategy) -> None:
        assert strategy.parse_process_info("--csrf_token=abc") is None

    def test_first_line_wins(self, strategy: UnixPlatformStrategy) -> None:
        """With several matches the pid comes from the first line."""
        raw = (
            "user 100 0.0 0.1 language_server_linux --csrf_token=aaaa\n"
            "user 200 0.0 0.1 language_server_linux --csrf_token=bbbb\n"
        )
        info = strategy.parse_process_info(raw)
        assert info is not None
        assert info.pid == 100
        assert info.csrf_token == "aaaa"


# ---------------------------------------------------------------------------
# parse_listening_ports
# ---------------------------------------------------------------------------


class TestUnixParseListeningPorts:
    """Loopback listener extraction from lsof and netstat output."""

    def test_lsof_mixed_with_duplicate(self, strategy: UnixPlatformStrategy) -> None:
        raw = (
            "lang 1 u 10u IPv4 0x1 0t0 TCP 127.0.0.1:9001 (LISTEN)\n"
            "lang 1 u 11u IPv4 0x2 0t0 TCP 127.0.0.1:8000 (LISTEN)\n"
            "lang 1 u 12u IPv4 0x3 0t0 TCP 127.0.0.1:9001 (LISTEN)\n"
        )
        assert strategy.parse_listening_ports(raw) == [8000, 9001]

    def test_lsof_fixture(self, strategy: UnixPlatformStrategy, lsof_output: str) -> None:
        """Established connections and the header line are ignored."""
        assert strategy.parse_listening_ports(lsof_output) == [2873, 42100, 42101]

    def test_netstat_format(self, strategy: UnixPlatformStrategy) -> None:
        raw = (
            "tcp        0      0 127.0.0.1:2873     0.0.0.0:*    LISTEN      4412/language_server\n"
            "tcp        0      0 127.0.0.1:42100    0.0.0.0:*    LISTEN      4412/language_server\n"
            "udp        0      0 127.0.0.1:5353     0.0.0.0:*                4412/language_server\n"
        )
        assert strategy.parse_listening_ports(raw) == [2873, 42100]

    def test_localhost_format(self, strategy: UnixPlatformStrategy) -> None:
        raw = (
            "lang 1 u 10u IPv4 0x1 0t0 TCP localhost:7000 (LISTEN)\n"
            "tcp 0 0 localhost:7001 *:* LISTEN 1/lang\n"
        )
        assert strategy.parse_listening_ports(raw) == [7000, 7001]

    def test_non_loopback_ignored(self, strategy: UnixPlatformStrategy) -> None:
        raw = (
            "lang 1 u 10u IPv4 0x1 0t0 TCP *:7000 (LISTEN)\n"
            "tcp 0 0 0.0.0.0:7001 0.0.0.0:* LISTEN 1/lang\n"
        )
        assert strategy.parse_listening_ports(raw) == []

    @pytest.mark.parametrize("raw", ["", "   \n", "lsof: command not found", "garbage\nmore"])
    def test_unrecognized(self, strategy: UnixPlatformStrategy, raw: str) -> None:
        assert strategy.parse_listening_ports(raw) == []

    @pytest.mark.parametrize("bad_port", ["0", "65536", "99999", "123456789012345678901234"])
    def test_out_of_range_ports_dropped(self, strategy: UnixPlatformStrategy, bad_port: str) -> None:
        raw = (
            f"lang 4412 u 10u IPv4 0x1 0t0 TCP 127.0.0.1:{bad_port} (LISTEN)\n"
            "lang 4412 u 11u IPv4 0x2 0t0 TCP 127.0.0.1:65535 (LISTEN)\n"
            f"tcp 0 0 127.0.0.1:{bad_port} 0.0.0.0:* LISTEN 4412/lang\n"
        )
        assert strategy.parse_listening_ports(raw, 4412) == [65535]


class TestUnixPortOwnerFilter:
    """``grep <pid>`` matches substrings; rows owned by other pids are dropped."""

    def test_netstat_other_owner_excluded(self, strategy: UnixPlatformStrategy) -> None:
        raw = (
            "tcp 0 0 127.0.0.1:2873  0.0.0.0:* LISTEN 4412/language_server\n"
            "tcp 0 0 127.0.0.1:44123 0.0.0.0:* LISTEN 5555/other\n"
            "tcp 0 0 127.0.0.1:6000  0.0.0.0:* LISTEN 44121/other\n"
        )
        assert strategy.parse_listening_ports(raw, 4412) == [2873]

    def test_lsof_other_owner_excluded(self, strategy: UnixPlatformStrategy) -> None:
        raw = (
            "lang   4412 u 10u IPv4 0x1 0t0 TCP 127.0.0.1:2873 (LISTEN)\n"
            "other 14412 u 10u IPv4 0x2 0t0 TCP 127.0.0.1:7000 (LISTEN)\n"
        )
        assert strategy.parse_listening_ports(raw, 4412) == [2873]

    def test_unattributed_netstat_row_kept(self, strategy: UnixPlatformStrategy) -> None:
        """Without -p privileges netstat prints '-' instead of pid/program."""
        raw = "tcp 0 0 127.0.0.1:2873 0.0.0.0:* LISTEN -\n"
        assert strategy.parse_listening_ports(raw, 4412) == [2873]

    def test_no_pid_keeps_everything(self, strategy: UnixPlatformStrategy) -> None:
        raw = (
            "tcp 0 0 127.0.0.1:2873  0.0.0.0:* LISTEN 4412/language_server\n"
            "tcp 0 0 127.0.0.1:44123 0.0.0.0:* LISTEN 5555/other\n"
        )
        assert strategy.parse_listening_ports(raw) == [2873, 44123]

    def test_fixture_with_pid(self, strategy: UnixPlatformStrategy, lsof_output: str) -> None:
        assert strategy.parse_listening_ports(lsof_output, 4412) == [2873, 42100, 42101]


# ---------------------------------------------------------------------------
# error_messages
# ---------------------------------------------------------------------------


class TestUnixErrorMessages:
    """Diagnostics name the binary for the running OS."""

    def test_linux_checklist(self) -> None:
        messages = UnixPlatformStrategy("Linux").error_messages()
        assert any("language_server_linux" in r for r in messages.requirements)
        assert "ps/lsof" in messages.command_not_available

    def test_macos_checklist(self) -> None:
        messages = UnixPlatformStrategy("Darwin").error_messages()
        assert any("language_server_macos" in r for r in messages.requirements)

    def test_checklist_order(self) -> None:
        messages = UnixPlatformStrategy("Linux").error_messages()
        assert len(messages.requirements) == 3
        assert messages.requirements[0] == "Antigravity is running"
