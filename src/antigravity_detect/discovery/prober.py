"""HTTPS connectivity probe for candidate language server ports.

Issues a single ``GetUnleashData`` call, which the language server answers
without a signed-in user. The server uses a self-signed certificate on
loopback, so TLS verification is disabled for this request only.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

PROBE_HOST: str = "127.0.0.1"
PROBE_PATH: str = "/exa.language_server_pb.LanguageServerService/GetUnleashData"

# Timeout for a single probe (seconds).
PROBE_TIMEOUT: float = 2.0

# Minimal client context accepted by GetUnleashData.
PROBE_BODY: dict[str, Any] = {
    "context": {
        "properties": {
            "devMode": "false",
            "extensionVersion": "",
            "hasAnthropicModelAccess": "true",
            "ide": "antigravity",
            "ideVersion": "1.11.2",
            "installationId": "test-detection",
            "language": "UNSPECIFIED",
            "os": "windows",
            "requestedModelId": "MODEL_UNSPECIFIED",
        }
    }
}


def probe_url(port: int) -> str:
    return f"https://{PROBE_HOST}:{port}{PROBE_PATH}"


def probe_headers(csrf_token: str) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Connect-Protocol-Version": "1",
        "X-Codeium-Csrf-Token": csrf_token,
    }


async def probe_port(
    port: int,
    csrf_token: str,
    *,
    timeout: float = PROBE_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """Check whether ``port`` serves the language server API.

    Args:
        port: Loopback port to probe.
        csrf_token: Token attached as ``X-Codeium-Csrf-Token``.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (for testing).

    Returns:
        True iff the server answered with status 200. Connection errors,
        timeouts and any other status yield False.
    """
    try:
        async with httpx.AsyncClient(
            verify=False,
            timeout=timeout,
            transport=transport,
        ) as client:
            resp = await client.post(
                probe_url(port),
                json=PROBE_BODY,
                headers=probe_headers(csrf_token),
            )
    except httpx.TimeoutException:
        logger.debug("Probe timed out on port %d", port)
        return False
    except httpx.HTTPError as exc:
        logger.debug("Probe failed on port %d: %s", port, exc)
        return False

    logger.debug("Probe on port %d returned HTTP %d", port, resp.status_code)
    return resp.status_code == 200
