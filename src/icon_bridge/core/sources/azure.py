"""Azure DevOps icon source backed by the Git items API."""

from __future__ import annotations

from collections.abc import Mapping
from functools import partial
from typing import Any

from icon_bridge.constants import (
    AZURE_API_BASE,
    AZURE_METADATA_CANDIDATES,
    DEFAULT_BRANCH,
    PROVIDER_AZURE,
)
from icon_bridge.core.addressing import (
    parse_azure_organization,
    resolve_azure_project_and_repository,
)
from icon_bridge.core.metadata import load_metadata
from icon_bridge.core.models import AzureDescriptor, IconDescriptor, IconIndex
from icon_bridge.core.sources.base import (
    build_icon_index,
    require_pat,
    select_svg_files,
)
from icon_bridge.exceptions import NoIconsFoundError, ProviderError
from icon_bridge.infrastructure.azure import AzureDevOpsClient
from icon_bridge.infrastructure.http import ApiTransport
from icon_bridge.logger import get_logger
from icon_bridge.utils.text import normalize_string

logger = get_logger(__name__)


class AzureIconSource:
    """Lists and reads icons stored in an Azure DevOps Git repository."""

    provider = PROVIDER_AZURE

    def __init__(self, transport: ApiTransport) -> None:
        self.transport = transport

    def _client(self, pat: str) -> AzureDevOpsClient:
        return AzureDevOpsClient(self.transport, pat)

    async def fetch_index(self, provider_config: Mapping[str, Any]) -> IconIndex:
        """Build the icon index for the configured organization and repo."""
        pat = require_pat(self.provider, provider_config)
        organization = parse_azure_organization(
            provider_config.get("organizationUrl")
        )
        branch = normalize_string(provider_config.get("branch")) or DEFAULT_BRANCH
        address = resolve_azure_project_and_repository(
            provider_config.get("repository"),
            provider_config.get("project"),
            organization,
        )
        client = self._client(pat)

        items = await client.list_items(
            organization, address.project, address.repository, branch
        )
        files = [
            item
            for item in items
            if item.get("isFolder") is not True
            and isinstance(item.get("path"), str)
        ]
        svg_files = select_svg_files(files, lambda item: item["path"])
        if not svg_files:
            msg = "No .svg files were found in the Azure DevOps repository."
            raise NoIconsFoundError(msg, self.provider)

        metadata_lookup = await load_metadata(
            partial(
                client.fetch_file_text,
                organization,
                address.project,
                address.repository,
                branch,
            ),
            AZURE_METADATA_CANDIDATES,
        )

        descriptors = [
            AzureDescriptor(
                organization=organization,
                project=address.project,
                repository=address.repository,
                branch=branch,
                path=item["path"],
            )
            for item in svg_files
        ]
        logger.info(
            "Listed %d icons from %s/%s/%s@%s",
            len(descriptors),
            organization,
            address.project,
            address.repository,
            branch,
        )
        return build_icon_index(
            self.provider,
            descriptors,
            metadata_lookup,
            {
                "organizationUrl": f"{AZURE_API_BASE}/{organization}",
                "project": address.project,
                "repository": address.repository,
                "branch": branch,
            },
        )

    async def fetch_file_text(self, descriptor: IconDescriptor, pat: str) -> str:
        if not isinstance(descriptor, AzureDescriptor):
            msg = "Descriptor does not belong to Azure DevOps."
            raise ProviderError(msg, self.provider)

        return await self._client(pat).fetch_file_text(
            descriptor.organization,
            descriptor.project,
            descriptor.repository,
            descriptor.branch or DEFAULT_BRANCH,
            descriptor.path,
        )
