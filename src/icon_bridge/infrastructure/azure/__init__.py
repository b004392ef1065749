"""Azure DevOps REST API access."""

from icon_bridge.infrastructure.azure.client import AzureDevOpsClient

__all__ = ["AzureDevOpsClient"]
