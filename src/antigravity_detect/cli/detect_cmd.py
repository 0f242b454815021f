"""``antigravity-detect detect``: Find the language server and its API port.

Exit Codes:
    0: Credentials found and the API port verified.
    1: Every attempt failed; the process or a working port was not found.
"""

from __future__ import annotations

import sys

import click

from antigravity_detect.discovery import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY_MS,
    ProcessPortDetector,
)


@click.command("detect")
@click.option(
    "--retries",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_RETRIES,
    show_default=True,
    help="Number of detection attempts before giving up.",
)
@click.option(
    "--retry-delay",
    type=click.IntRange(min=0),
    default=DEFAULT_RETRY_DELAY_MS,
    show_default=True,
    help="Delay between attempts, in milliseconds.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
@click.option(
    "--show-token",
    is_flag=True,
    default=False,
    help="Print the full CSRF token in text output.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Log detection progress to stderr.",
)
def detect_command(
    retries: int,
    retry_delay: int,
    output_format: str,
    show_token: bool,
    verbose: bool,
) -> None:
    """Detect the Antigravity language server's port and CSRF token.

    Lists the language server process, reads its command-line flags,
    enumerates its loopback listening ports and probes each one over
    HTTPS until the API answers.
    """
    from antigravity_detect.cli.output import (
        configure_logging,
        credentials_to_json,
        print_credentials,
        print_not_found,
    )

    if verbose:
        configure_logging(verbose=True)

    detector = ProcessPortDetector(max_retries=retries, retry_delay_ms=retry_delay)
    creds = detector.detect_sync()

    if output_format == "json":
        click.echo(credentials_to_json(creds))
    elif creds is not None:
        print_credentials(creds, show_token=show_token)
    else:
        print_not_found()

    sys.exit(0 if creds is not None else 1)


@click.command("platform")
def platform_command() -> None:
    """Show the detected platform and the commands that would be run."""
    from antigravity_detect.cli.output import print_platform_info
    from antigravity_detect.platforms import PlatformDetector

    print_platform_info(PlatformDetector())
