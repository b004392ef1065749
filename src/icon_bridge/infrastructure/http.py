"""HTTP transport shared by the provider API clients.

The transport exposes the single primitive the core relies on,
``get_text(url, headers) -> TransportResponse``, on top of an aiohttp
session. JSON decoding and error shaping live here as well so that both
providers report failures identically.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import aiohttp
import orjson

from icon_bridge.exceptions import ProviderError, ProviderHTTPError
from icon_bridge.logger import get_logger
from icon_bridge.types import Settings
from icon_bridge.utils.text import normalize_string

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class TransportResponse:
    """Status line and body of a completed request."""

    status: int
    reason: str
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@asynccontextmanager
async def create_http_session(
    settings: Settings | None = None,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Create a configured HTTP session.

    A ``timeout_seconds`` of 0 (the default) leaves requests without a
    timeout; a superseded sync simply completes and is discarded.

    Args:
        settings: Global settings

    Yields:
        Configured aiohttp.ClientSession

    """
    timeout_seconds = 0
    if settings is not None:
        timeout_seconds = int(settings["network"]["timeout_seconds"])

    timeout = aiohttp.ClientTimeout(
        total=timeout_seconds * 3 if timeout_seconds else None,
        sock_connect=timeout_seconds or None,
    )
    connector = aiohttp.TCPConnector(limit=10, limit_per_host=8)

    async with aiohttp.ClientSession(
        timeout=timeout,
        connector=connector,
    ) as session:
        yield session


class ApiTransport:
    """Thin GET-only wrapper over an aiohttp session."""

    def __init__(self, session: aiohttp.ClientSession) -> None:
        self.session = session

    async def get_text(
        self, url: str, headers: dict[str, str]
    ) -> TransportResponse:
        """Issue a GET request and read the whole body as text.

        Raises:
            ProviderError: If the request fails at the network level

        """
        try:
            async with self.session.get(url, headers=headers) as response:
                body = await response.read()
                return TransportResponse(
                    status=response.status,
                    reason=response.reason or "",
                    text=body.decode("utf-8", errors="replace"),
                )
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.warning("Request to %s failed: %s", url, e)
            msg = f"Network request failed: {e}"
            raise ProviderError(msg) from e


def parse_json_or_none(text: str) -> Any | None:
    if not text:
        return None
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError:
        return None


def extract_payload_message(payload: Any) -> str:
    """Find a message in a provider error payload.

    Checks ``message``, ``error.message`` and ``errors[0].message``.
    """
    if not isinstance(payload, dict):
        return ""
    if isinstance(payload.get("message"), str):
        return payload["message"]
    error = payload.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    errors = payload.get("errors")
    if (
        isinstance(errors, list)
        and errors
        and isinstance(errors[0], dict)
        and isinstance(errors[0].get("message"), str)
    ):
        return errors[0]["message"]
    return ""


def build_error_message(
    response: TransportResponse, payload: Any | None = None
) -> str:
    status_line = f"{response.status} {response.reason}".strip()
    detail = (
        extract_payload_message(payload)
        or normalize_string(response.text)
        or status_line
    )
    return f"{status_line}: {detail}".strip()


def response_error(
    response: TransportResponse, provider: str | None = None
) -> ProviderHTTPError:
    """Build the exception for a non-2xx response."""
    payload = parse_json_or_none(response.text)
    return ProviderHTTPError(
        build_error_message(response, payload),
        status=response.status,
        reason=response.reason,
        provider=provider,
    )


async def fetch_json_with_errors(
    transport: ApiTransport,
    url: str,
    headers: dict[str, str],
    provider: str | None = None,
) -> Any:
    """GET a JSON document.

    Raises:
        ProviderHTTPError: On a non-2xx status
        ProviderError: When a 2xx response carries no JSON body

    """
    response = await transport.get_text(url, headers)
    payload = parse_json_or_none(response.text)

    if not response.ok:
        raise ProviderHTTPError(
            build_error_message(response, payload),
            status=response.status,
            reason=response.reason,
            provider=provider,
        )

    if payload is None:
        msg = "Unexpected empty response."
        raise ProviderError(msg, provider)

    return payload
