"""GitHub icon source backed by the git trees API."""

from __future__ import annotations

from collections.abc import Mapping
from functools import partial
from typing import Any

from icon_bridge.constants import (
    DEFAULT_BRANCH,
    GITHUB_METADATA_CANDIDATES,
    PROVIDER_GITHUB,
)
from icon_bridge.core.addressing import parse_github_repository
from icon_bridge.core.metadata import load_metadata
from icon_bridge.core.models import GitHubDescriptor, IconDescriptor, IconIndex
from icon_bridge.core.sources.base import (
    build_icon_index,
    require_pat,
    select_svg_files,
)
from icon_bridge.exceptions import (
    NoIconsFoundError,
    ProviderError,
    TruncatedListingError,
)
from icon_bridge.infrastructure.github import GitHubApiClient
from icon_bridge.infrastructure.http import ApiTransport
from icon_bridge.logger import get_logger
from icon_bridge.utils.text import normalize_string

logger = get_logger(__name__)


class GitHubIconSource:
    """Lists and reads icons stored in a GitHub repository."""

    provider = PROVIDER_GITHUB

    def __init__(self, transport: ApiTransport) -> None:
        self.transport = transport

    def _client(self, pat: str) -> GitHubApiClient:
        return GitHubApiClient(self.transport, pat)

    async def fetch_index(self, provider_config: Mapping[str, Any]) -> IconIndex:
        """Build the icon index for the configured repository and branch.

        Raises:
            AuthRequiredError: If no PAT is configured
            InvalidInputError: If the repository cannot be parsed
            TruncatedListingError: If GitHub truncated the tree
            NoIconsFoundError: If the tree holds no SVG files
            ProviderError: On API failures

        """
        pat = require_pat(self.provider, provider_config)
        address = parse_github_repository(provider_config.get("repository"))
        branch = normalize_string(provider_config.get("branch")) or DEFAULT_BRANCH
        client = self._client(pat)

        payload = await client.fetch_tree(address.owner, address.repo, branch)
        if isinstance(payload, dict) and payload.get("truncated"):
            msg = (
                "GitHub tree response is truncated. Keep icon repo smaller "
                "or target a narrower branch."
            )
            raise TruncatedListingError(msg, self.provider)

        tree = payload.get("tree") if isinstance(payload, dict) else None
        blobs = [
            item
            for item in (tree if isinstance(tree, list) else [])
            if isinstance(item, dict)
            and item.get("type") == "blob"
            and isinstance(item.get("path"), str)
        ]
        svg_files = select_svg_files(blobs, lambda item: item["path"])
        if not svg_files:
            msg = "No .svg files were found in the GitHub repository."
            raise NoIconsFoundError(msg, self.provider)

        metadata_lookup = await load_metadata(
            partial(client.fetch_file_text, address.owner, address.repo, branch),
            GITHUB_METADATA_CANDIDATES,
        )

        descriptors = [
            GitHubDescriptor(
                owner=address.owner,
                repo=address.repo,
                branch=branch,
                path=item["path"],
                sha=normalize_string(item.get("sha")),
            )
            for item in svg_files
        ]
        logger.info(
            "Listed %d icons from %s@%s",
            len(descriptors),
            address.full_name,
            branch,
        )
        return build_icon_index(
            self.provider,
            descriptors,
            metadata_lookup,
            {"repository": address.full_name, "branch": branch},
        )

    async def fetch_file_text(self, descriptor: IconDescriptor, pat: str) -> str:
        """Fetch an icon body, preferring the blob API when a sha is known."""
        if not isinstance(descriptor, GitHubDescriptor):
            msg = "Descriptor does not belong to GitHub."
            raise ProviderError(msg, self.provider)

        client = self._client(pat)
        if descriptor.sha:
            try:
                return await client.fetch_blob_text(
                    descriptor.owner, descriptor.repo, descriptor.sha
                )
            except ProviderError as e:
                logger.debug(
                    "Blob fetch failed for %s, using contents API: %s",
                    descriptor.path,
                    e,
                )

        return await client.fetch_file_text(
            descriptor.owner,
            descriptor.repo,
            descriptor.branch or DEFAULT_BRANCH,
            descriptor.path,
            empty_message="GitHub returned an empty SVG payload.",
        )
