"""Low-level Azure DevOps Git items API client."""

from typing import Any
from urllib.parse import quote, urlencode

import orjson

from icon_bridge.constants import (
    AZURE_API_BASE,
    AZURE_API_VERSION,
    DEFAULT_BRANCH,
    PROVIDER_AZURE,
)
from icon_bridge.exceptions import ProviderError
from icon_bridge.infrastructure.http import (
    ApiTransport,
    fetch_json_with_errors,
    response_error,
)
from icon_bridge.logger import get_logger
from icon_bridge.utils.codec import encode_basic_auth

logger = get_logger(__name__)


def azure_headers(pat: str) -> dict[str, str]:
    return {
        "Accept": "application/json",
        "Authorization": encode_basic_auth("", pat),
    }


def items_endpoint(organization: str, project: str, repository: str) -> str:
    return (
        f"{AZURE_API_BASE}/{quote(organization, safe='')}/"
        f"{quote(project, safe='')}/_apis/git/repositories/"
        f"{quote(repository, safe='')}/items"
    )


def _unwrap_item_content(body: str) -> str:
    """Return file text from an items response.

    With ``includeContent=true`` Azure answers either with the raw file or
    with a JSON envelope, depending on the Accept negotiation.
    """
    trimmed = body.strip()
    if not trimmed.startswith(("{", "[")):
        return body

    try:
        payload = orjson.loads(trimmed)
    except orjson.JSONDecodeError:
        return body

    if isinstance(payload, dict):
        if isinstance(payload.get("content"), str):
            return payload["content"]
        value = payload.get("value")
        if isinstance(value, str):
            return value
        if (
            isinstance(value, list)
            and value
            and isinstance(value[0], dict)
            and isinstance(value[0].get("content"), str)
        ):
            return value[0]["content"]
    return body


class AzureDevOpsClient:
    """Handles direct communication with the Azure DevOps REST API."""

    def __init__(self, transport: ApiTransport, pat: str) -> None:
        self.transport = transport
        self.pat = pat

    async def list_items(
        self, organization: str, project: str, repository: str, branch: str
    ) -> list[dict[str, Any]]:
        """List every item of a branch recursively."""
        params = urlencode(
            {
                "scopePath": "/",
                "recursionLevel": "Full",
                "includeContentMetadata": "true",
                "versionDescriptor.versionType": "branch",
                "versionDescriptor.version": branch,
                "api-version": AZURE_API_VERSION,
            }
        )
        url = f"{items_endpoint(organization, project, repository)}?{params}"
        logger.debug("GET %s", url)
        payload = await fetch_json_with_errors(
            self.transport, url, azure_headers(self.pat), PROVIDER_AZURE
        )
        items = payload.get("value") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    async def fetch_file_text(
        self,
        organization: str,
        project: str,
        repository: str,
        branch: str,
        path: str,
    ) -> str:
        """Fetch one file's text.

        Raises:
            ProviderHTTPError: On a non-2xx status
            ProviderError: If the body is empty

        """
        params = urlencode(
            {
                "path": path,
                "includeContent": "true",
                "versionDescriptor.versionType": "branch",
                "versionDescriptor.version": branch or DEFAULT_BRANCH,
                "api-version": AZURE_API_VERSION,
            }
        )
        url = f"{items_endpoint(organization, project, repository)}?{params}"
        logger.debug("GET %s", url)
        response = await self.transport.get_text(url, azure_headers(self.pat))
        if not response.ok:
            raise response_error(response, PROVIDER_AZURE)

        if not response.text:
            msg = f"Azure DevOps returned an empty payload for {path}."
            raise ProviderError(msg, PROVIDER_AZURE)

        return _unwrap_item_content(response.text)
