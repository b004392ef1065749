"""Tests for the GitHub and Azure icon sources and the registry."""

import pytest

from icon_bridge.core.models import AzureDescriptor, GitHubDescriptor
from icon_bridge.core.sources import (
    AzureIconSource,
    GitHubIconSource,
    IconSource,
    SourceRegistry,
)
from icon_bridge.core.sources.base import (
    build_icon_summary,
    require_pat,
    select_svg_files,
)
from icon_bridge.exceptions import (
    AuthRequiredError,
    InvalidInputError,
    NoIconsFoundError,
    ProviderError,
    TruncatedListingError,
    UnknownProviderError,
)
from tests.fakes import (
    FakeTransport,
    azure_config,
    b64,
    github_config,
    github_tree,
    svg,
)


class TestSourceHelpers:
    """Test provider-independent index helpers."""

    def test_require_pat(self):
        assert require_pat("github", {"pat": " tok "}) == "tok"
        with pytest.raises(AuthRequiredError, match="^Azure PAT is required"):
            require_pat("azure", {"pat": ""})

    def test_icons_folder_preferred(self):
        paths = ["Icons/a.svg", "logo.svg", "docs/icons/b.svg", "x.md"]
        assert select_svg_files(paths, str) == [
            "Icons/a.svg",
            "docs/icons/b.svg",
        ]

    def test_all_svgs_without_icons_folder(self):
        paths = ["assets/a.svg", "logo.SVG", "README.md"]
        assert select_svg_files(paths, str) == ["assets/a.svg", "logo.SVG"]

    def test_no_svgs(self):
        assert select_svg_files(["README.md"], str) == []

    def test_summary_without_metadata(self):
        summary = build_icon_summary("github", "Icons/IconArrowLeft.svg", {})
        assert summary.id == "github:Icons/IconArrowLeft.svg"
        assert summary.name == "IconArrowLeft"
        assert summary.title == "Arrow Left"
        assert summary.tag == ""


class TestGitHubIconSource:
    """Test listing and reading icons from GitHub."""

    @pytest.fixture
    def transport(self):
        return FakeTransport()

    @pytest.fixture
    def source(self, transport):
        return GitHubIconSource(transport)

    def test_satisfies_protocol(self, source):
        assert isinstance(source, IconSource)

    @pytest.mark.asyncio
    async def test_lists_icons_folder_sorted(self, transport, source):
        """Two variants of one family share a label and sort by path."""
        transport.add(
            "/git/trees/main",
            github_tree(
                [
                    "Icons/home-outline.svg",
                    "Icons/home-fill.svg",
                    "README.md",
                ]
            ),
        )

        index = await source.fetch_index(github_config())

        assert [icon.id for icon in index.icons] == [
            "github:Icons/home-fill.svg",
            "github:Icons/home-outline.svg",
        ]
        assert [icon.title for icon in index.icons] == ["home", "home"]
        assert set(index.descriptors_by_id) == {
            "github:Icons/home-fill.svg",
            "github:Icons/home-outline.svg",
        }
        assert index.normalized_config == {
            "repository": "octo/icons",
            "branch": "main",
        }

    @pytest.mark.asyncio
    async def test_metadata_titles_and_tags(self, transport, source):
        transport.add(
            "/git/trees/dev",
            github_tree(["Icons/home.svg", "Icons/gear.svg"]),
        )
        transport.add(
            "/contents/Icons/Icons.json",
            {
                "content": b64(
                    '[{"name": "home", "title": "Home", "tag": "Nav"},'
                    ' {"name": "gear", "title": "Settings"}]'
                )
            },
        )

        index = await source.fetch_index(
            github_config(
                repository="https://github.com/octo/icons.git", branch="dev"
            )
        )

        assert [(i.title, i.tag) for i in index.icons] == [
            ("Home", "Nav"),
            ("Settings", ""),
        ]
        metadata_urls = [u for u in transport.urls() if "/contents/" in u]
        assert len(metadata_urls) == 3
        assert metadata_urls[0].endswith("/contents/Icons.json?ref=dev")

    @pytest.mark.asyncio
    async def test_descriptor_carries_sha(self, transport, source):
        transport.add("/git/trees/", github_tree(["icons/a.svg"]))
        index = await source.fetch_index(github_config())
        assert index.descriptors_by_id["github:icons/a.svg"] == (
            GitHubDescriptor(
                owner="octo",
                repo="icons",
                path="icons/a.svg",
                branch="main",
                sha="a",
            )
        )

    @pytest.mark.asyncio
    async def test_blank_branch_defaults_to_main(self, transport, source):
        transport.add("/git/trees/main", github_tree(["icons/a.svg"]))
        index = await source.fetch_index(github_config(branch="  "))
        assert index.normalized_config["branch"] == "main"

    @pytest.mark.asyncio
    async def test_truncated_tree(self, transport, source):
        transport.add(
            "/git/trees/", github_tree(["Icons/a.svg"], truncated=True)
        )
        with pytest.raises(TruncatedListingError) as exc_info:
            await source.fetch_index(github_config())
        assert str(exc_info.value) == (
            "GitHub tree response is truncated. Keep icon repo smaller or "
            "target a narrower branch."
        )

    @pytest.mark.asyncio
    async def test_no_svg_files(self, transport, source):
        transport.add("/git/trees/", github_tree(["README.md"]))
        with pytest.raises(NoIconsFoundError) as exc_info:
            await source.fetch_index(github_config())
        assert str(exc_info.value) == (
            "No .svg files were found in the GitHub repository."
        )

    @pytest.mark.asyncio
    async def test_missing_pat_fails_before_network(self, transport, source):
        with pytest.raises(AuthRequiredError, match="GitHub PAT is required"):
            await source.fetch_index(github_config(pat=""))
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_bad_repository(self, transport, source):
        with pytest.raises(InvalidInputError):
            await source.fetch_index(github_config(repository="octo"))

    @pytest.mark.asyncio
    async def test_fetch_file_prefers_blob(self, transport, source):
        transport.add("/git/blobs/abc", {"content": b64(svg("a"))})
        descriptor = GitHubDescriptor("octo", "icons", "Icons/a.svg", sha="abc")

        assert await source.fetch_file_text(descriptor, "p") == svg("a")
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_fetch_file_falls_back_to_contents(self, transport, source):
        transport.add("/git/blobs/abc", {}, 500, "Server Error")
        transport.add("/contents/Icons/a.svg", {"content": b64(svg("a"))})
        descriptor = GitHubDescriptor("octo", "icons", "Icons/a.svg", sha="abc")

        assert await source.fetch_file_text(descriptor, "p") == svg("a")
        assert "/contents/Icons/a.svg?ref=main" in transport.urls()[1]

    @pytest.mark.asyncio
    async def test_fetch_file_empty_contents(self, transport, source):
        transport.add("/contents/", {"type": "file"})
        descriptor = GitHubDescriptor("octo", "icons", "Icons/a.svg")

        with pytest.raises(ProviderError) as exc_info:
            await source.fetch_file_text(descriptor, "p")
        assert str(exc_info.value) == "GitHub returned an empty SVG payload."

    @pytest.mark.asyncio
    async def test_fetch_file_rejects_foreign_descriptor(self, source):
        descriptor = AzureDescriptor("acme", "D", "icons", "/a.svg")
        with pytest.raises(ProviderError):
            await source.fetch_file_text(descriptor, "p")


class TestAzureIconSource:
    """Test listing and reading icons from Azure DevOps."""

    @pytest.fixture
    def transport(self):
        return FakeTransport()

    @pytest.fixture
    def source(self, transport):
        return AzureIconSource(transport)

    @pytest.mark.asyncio
    async def test_lists_items(self, transport, source):
        transport.add(
            "recursionLevel=Full",
            {
                "value": [
                    {"path": "/Icons", "isFolder": True},
                    {"path": "/Icons/gear.svg"},
                    {"path": "/Icons/add.svg"},
                    {"path": "/logo.svg"},
                    {"objectId": "no-path"},
                ]
            },
        )

        index = await source.fetch_index(
            azure_config(
                organizationUrl="https://acme.visualstudio.com",
                repository="Design/_git/icons",
                project="",
            )
        )

        assert [icon.id for icon in index.icons] == [
            "azure:/Icons/add.svg",
            "azure:/Icons/gear.svg",
        ]
        assert index.normalized_config == {
            "organizationUrl": "https://dev.azure.com/acme",
            "project": "Design",
            "repository": "icons",
            "branch": "main",
        }
        assert index.descriptors_by_id["azure:/Icons/add.svg"] == (
            AzureDescriptor("acme", "Design", "icons", "/Icons/add.svg")
        )

    @pytest.mark.asyncio
    async def test_metadata_from_root(self, transport, source):
        transport.add("recursionLevel=Full", {"value": [{"path": "/a.svg"}]})
        transport.add("path=%2FIcons.json", '[{"name": "a", "title": "Alpha"}]')

        index = await source.fetch_index(azure_config())

        assert index.icons[0].title == "Alpha"

    @pytest.mark.asyncio
    async def test_no_svg_files(self, transport, source):
        transport.add("recursionLevel=Full", {"value": [{"path": "/a.md"}]})
        with pytest.raises(NoIconsFoundError, match="Azure DevOps repository"):
            await source.fetch_index(azure_config())

    @pytest.mark.asyncio
    async def test_missing_project(self, source):
        with pytest.raises(InvalidInputError, match="Project is required"):
            await source.fetch_index(azure_config(project=""))

    @pytest.mark.asyncio
    async def test_fetch_file_text(self, transport, source):
        transport.add("includeContent=true", svg("a"))
        descriptor = AzureDescriptor("acme", "Design", "icons", "/a.svg")
        assert await source.fetch_file_text(descriptor, "pat") == svg("a")


class TestSourceRegistry:
    """Test provider dispatch."""

    @pytest.mark.asyncio
    async def test_unknown_provider(self):
        registry = SourceRegistry(FakeTransport(), lambda provider: "pat")
        with pytest.raises(UnknownProviderError, match="Unknown provider: x"):
            await registry.fetch_index("x", {})

    @pytest.mark.asyncio
    async def test_file_fetch_reads_current_pat(self):
        tokens = {"github": ""}
        transport = FakeTransport()
        transport.add("/git/blobs/abc", {"content": b64(svg())})
        registry = SourceRegistry(transport, tokens.get)
        descriptor = GitHubDescriptor("octo", "icons", "a.svg", sha="abc")

        with pytest.raises(AuthRequiredError, match="GitHub PAT is required"):
            await registry.fetch_file_text(descriptor)

        tokens["github"] = "ghp_new"
        assert await registry.fetch_file_text(descriptor) == svg()
        assert transport.requests[0][1]["Authorization"] == "Bearer ghp_new"

    @pytest.mark.asyncio
    async def test_register_replaces_source(self):
        class StaticSource:
            provider = "github"

            async def fetch_index(self, provider_config):
                return "index"

            async def fetch_file_text(self, descriptor, pat):
                return "body"

        registry = SourceRegistry(FakeTransport(), lambda provider: "pat")
        registry.register(StaticSource())
        assert await registry.fetch_index("github", {}) == "index"
