"""Low-level GitHub API client.

Covers the three endpoints the icon index needs: the recursive git tree,
git blobs by sha and the contents API. Bodies of blobs and contents are
base64 and are decoded to text here.
"""

from typing import Any
from urllib.parse import quote

from icon_bridge.constants import (
    DEFAULT_BRANCH,
    GITHUB_API_BASE,
    GITHUB_API_VERSION,
    PROVIDER_GITHUB,
)
from icon_bridge.exceptions import ProviderError
from icon_bridge.infrastructure.http import ApiTransport, fetch_json_with_errors
from icon_bridge.logger import get_logger
from icon_bridge.utils.codec import decode_base64_text

logger = get_logger(__name__)


def encode_path(path: str) -> str:
    """URL-encode each segment of a repository path."""
    return "/".join(quote(segment, safe="") for segment in path.split("/"))


def github_headers(pat: str) -> dict[str, str]:
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {pat}",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }


class GitHubApiClient:
    """Handles direct communication with the GitHub REST API."""

    def __init__(self, transport: ApiTransport, pat: str) -> None:
        """Initialize the API client.

        Args:
            transport: HTTP transport
            pat: Personal access token

        """
        self.transport = transport
        self.pat = pat

    def _repo_url(self, owner: str, repo: str) -> str:
        return (
            f"{GITHUB_API_BASE}/repos/{quote(owner, safe='')}/"
            f"{quote(repo, safe='')}"
        )

    async def _get_json(self, url: str) -> Any:
        logger.debug("GET %s", url)
        return await fetch_json_with_errors(
            self.transport, url, github_headers(self.pat), PROVIDER_GITHUB
        )

    async def fetch_tree(self, owner: str, repo: str, branch: str) -> Any:
        """Fetch the recursive file tree of a branch."""
        url = (
            f"{self._repo_url(owner, repo)}/git/trees/"
            f"{quote(branch, safe='')}?recursive=1"
        )
        return await self._get_json(url)

    async def fetch_blob_text(self, owner: str, repo: str, sha: str) -> str:
        """Fetch a blob by sha and decode its content.

        Raises:
            ProviderError: If the blob payload carries no content

        """
        url = f"{self._repo_url(owner, repo)}/git/blobs/{quote(sha, safe='')}"
        payload = await self._get_json(url)
        if isinstance(payload, dict) and isinstance(payload.get("content"), str):
            return decode_base64_text(payload["content"])
        msg = f"GitHub returned an empty blob for {sha}."
        raise ProviderError(msg, PROVIDER_GITHUB)

    async def fetch_file_text(
        self,
        owner: str,
        repo: str,
        branch: str,
        path: str,
        empty_message: str | None = None,
    ) -> str:
        """Fetch a file through the contents API and decode it.

        Raises:
            ProviderError: If the payload carries no content

        """
        normalized_path = path.lstrip("/")
        url = (
            f"{self._repo_url(owner, repo)}/contents/"
            f"{encode_path(normalized_path)}"
            f"?ref={quote(branch or DEFAULT_BRANCH, safe='')}"
        )
        payload = await self._get_json(url)
        if isinstance(payload, dict) and isinstance(payload.get("content"), str):
            return decode_base64_text(payload["content"])
        msg = (
            empty_message
            or f"GitHub returned an empty payload for {normalized_path}."
        )
        raise ProviderError(msg, PROVIDER_GITHUB)
