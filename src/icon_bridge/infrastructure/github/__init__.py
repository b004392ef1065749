"""GitHub REST API access."""

from icon_bridge.infrastructure.github.client import GitHubApiClient

__all__ = ["GitHubApiClient"]
