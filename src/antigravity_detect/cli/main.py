"""antigravity-detect CLI.

Entry point for the ``antigravity-detect`` command-line tool. Registers
all subcommands under a single Click group.

Commands:
    detect    Find the language server's CSRF token and API port.
    platform  Show the detected platform and enumeration commands.

Usage::

    antigravity-detect detect
    antigravity-detect detect --retries 5 --retry-delay 1000 --format json
    antigravity-detect platform
"""

from __future__ import annotations

import click

from antigravity_detect import __version__
from antigravity_detect.cli.detect_cmd import detect_command, platform_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """antigravity-detect: Locate the Antigravity language server API.

    Reads the CSRF token from the running language server's command line
    and finds the loopback port that serves its HTTPS API.
    """


cli.add_command(detect_command)
cli.add_command(platform_command)
