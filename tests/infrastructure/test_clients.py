"""Tests for the GitHub and Azure DevOps API clients."""

import base64

import pytest

from icon_bridge.exceptions import ProviderError, ProviderHTTPError
from icon_bridge.infrastructure.azure.client import (
    AzureDevOpsClient,
    _unwrap_item_content,
    azure_headers,
    items_endpoint,
)
from icon_bridge.infrastructure.github.client import (
    GitHubApiClient,
    encode_path,
    github_headers,
)
from tests.fakes import FakeTransport, b64, svg


class TestGitHubApiClient:
    """Test GitHubApiClient requests and decoding."""

    def test_headers(self):
        headers = github_headers("ghp_x")
        assert headers["Authorization"] == "Bearer ghp_x"
        assert headers["Accept"] == "application/vnd.github+json"
        assert headers["X-GitHub-Api-Version"] == "2022-11-28"

    def test_encode_path_keeps_separators(self):
        assert encode_path("My Icons/a b.svg") == "My%20Icons/a%20b.svg"

    @pytest.mark.asyncio
    async def test_fetch_tree_url(self):
        transport = FakeTransport()
        transport.add("/git/trees/", {"tree": [], "truncated": False})
        client = GitHubApiClient(transport, "ghp_x")

        await client.fetch_tree("octo", "icons", "feature/x")

        url, headers = transport.requests[0]
        assert url == (
            "https://api.github.com/repos/octo/icons/git/trees/"
            "feature%2Fx?recursive=1"
        )
        assert headers["Authorization"] == "Bearer ghp_x"

    @pytest.mark.asyncio
    async def test_fetch_blob_text_decodes_wrapped_base64(self):
        markup = svg("home")
        encoded = base64.encodebytes(markup.encode()).decode()
        transport = FakeTransport()
        transport.add("/git/blobs/abc", {"content": encoded})

        text = await GitHubApiClient(transport, "p").fetch_blob_text(
            "octo", "icons", "abc"
        )

        assert text == markup

    @pytest.mark.asyncio
    async def test_fetch_blob_without_content(self):
        transport = FakeTransport()
        transport.add("/git/blobs/abc", {"sha": "abc"})

        with pytest.raises(ProviderError, match="empty blob for abc"):
            await GitHubApiClient(transport, "p").fetch_blob_text(
                "octo", "icons", "abc"
            )

    @pytest.mark.asyncio
    async def test_fetch_file_text(self):
        transport = FakeTransport()
        transport.add("/contents/", {"content": b64("[]")})

        text = await GitHubApiClient(transport, "p").fetch_file_text(
            "octo", "icons", "dev", "/Icons/Icons.json"
        )

        assert text == "[]"
        assert transport.urls() == [
            "https://api.github.com/repos/octo/icons/contents/"
            "Icons/Icons.json?ref=dev"
        ]

    @pytest.mark.asyncio
    async def test_fetch_file_text_empty_message(self):
        transport = FakeTransport()
        transport.add("/contents/", [])
        client = GitHubApiClient(transport, "p")

        with pytest.raises(ProviderError) as exc_info:
            await client.fetch_file_text("octo", "icons", "main", "a.svg")
        assert str(exc_info.value) == (
            "GitHub returned an empty payload for a.svg."
        )

        with pytest.raises(ProviderError, match="custom"):
            await client.fetch_file_text(
                "octo", "icons", "main", "a.svg", empty_message="custom"
            )

    @pytest.mark.asyncio
    async def test_missing_file_is_http_error(self):
        client = GitHubApiClient(FakeTransport(), "p")
        with pytest.raises(ProviderHTTPError) as exc_info:
            await client.fetch_file_text("octo", "icons", "main", "x.json")
        assert exc_info.value.status == 404


class TestAzureDevOpsClient:
    """Test AzureDevOpsClient requests and body unwrapping."""

    def test_headers_use_basic_auth_with_empty_user(self):
        expected = base64.b64encode(b":secret").decode()
        assert azure_headers("secret")["Authorization"] == f"Basic {expected}"

    def test_items_endpoint_quotes_segments(self):
        assert items_endpoint("acme", "My Project", "icons") == (
            "https://dev.azure.com/acme/My%20Project/_apis/git/"
            "repositories/icons/items"
        )

    @pytest.mark.asyncio
    async def test_list_items(self):
        transport = FakeTransport()
        transport.add(
            "/items?",
            {"count": 2, "value": [{"path": "/a.svg"}, "junk"]},
        )
        client = AzureDevOpsClient(transport, "pat")

        items = await client.list_items("acme", "Design", "icons", "main")

        assert items == [{"path": "/a.svg"}]
        url = transport.urls()[0]
        assert "recursionLevel=Full" in url
        assert "versionDescriptor.version=main" in url
        assert "api-version=7.1" in url

    @pytest.mark.asyncio
    async def test_list_items_without_value(self):
        transport = FakeTransport()
        transport.add("/items?", {"count": 0})
        client = AzureDevOpsClient(transport, "pat")
        assert await client.list_items("acme", "D", "icons", "main") == []

    @pytest.mark.asyncio
    async def test_fetch_raw_file(self):
        transport = FakeTransport()
        transport.add("/items?", svg("home"))
        client = AzureDevOpsClient(transport, "pat")

        text = await client.fetch_file_text(
            "acme", "Design", "icons", "main", "/Icons/home.svg"
        )

        assert text == svg("home")
        assert "path=%2FIcons%2Fhome.svg" in transport.urls()[0]

    @pytest.mark.asyncio
    async def test_fetch_empty_body(self):
        transport = FakeTransport()
        transport.add("/items?", "")
        client = AzureDevOpsClient(transport, "pat")

        with pytest.raises(ProviderError, match="empty payload for /a.svg"):
            await client.fetch_file_text("acme", "D", "icons", "main", "/a.svg")

    @pytest.mark.asyncio
    async def test_fetch_http_error(self):
        transport = FakeTransport()
        transport.add(
            "/items?", {"message": "TF401019: missing"}, 404, "Not Found"
        )
        client = AzureDevOpsClient(transport, "pat")

        with pytest.raises(ProviderHTTPError, match="TF401019"):
            await client.fetch_file_text("acme", "D", "icons", "main", "/a")

    @pytest.mark.parametrize(
        ("body", "expected"),
        [
            ("<svg/>", "<svg/>"),
            ('{"content": "<svg/>"}', "<svg/>"),
            ('{"value": "<svg/>"}', "<svg/>"),
            ('{"value": [{"content": "<svg/>"}]}', "<svg/>"),
            ('{"broken', '{"broken'),
            ('{"other": 1}', '{"other": 1}'),
        ],
    )
    def test_unwrap_item_content(self, body, expected):
        assert _unwrap_item_content(body) == expected
