"""Tests for the session SVG cache."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from icon_bridge.core.cache import ContentCache, normalize_svg_markup
from icon_bridge.core.models import AzureDescriptor, GitHubDescriptor
from icon_bridge.exceptions import InvalidSvgError, ProviderError
from tests.fakes import svg


class TestNormalizeSvgMarkup:
    """Test SVG validation."""

    def test_trims(self):
        assert normalize_svg_markup("  <svg></svg>\n") == "<svg></svg>"

    def test_accepts_xml_prolog_and_uppercase(self):
        markup = '<?xml version="1.0"?>\n<SVG viewBox="0 0 1 1"/>'
        assert normalize_svg_markup(markup) == markup

    @pytest.mark.parametrize("markup", ["", None, "<svgx/>", "<html></html>"])
    def test_rejects_non_svg(self, markup):
        with pytest.raises(InvalidSvgError) as exc_info:
            normalize_svg_markup(markup)
        assert str(exc_info.value) == "Fetched file is not a valid SVG."


class TestContentCache:
    """Test caching and invalidation."""

    @pytest.mark.asyncio
    async def test_fetches_once(self):
        fetcher = AsyncMock(return_value=f"  {svg('a')}  ")
        cache = ContentCache(fetcher)
        descriptor = GitHubDescriptor("octo", "icons", "a.svg")

        first = await cache.get_or_fetch("github:a.svg", descriptor)
        second = await cache.get_or_fetch("github:a.svg", descriptor)

        assert first == second == svg("a")
        fetcher.assert_awaited_once_with(descriptor)
        assert "github:a.svg" in cache
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_invalid_body_is_not_cached(self):
        fetcher = AsyncMock(return_value="<html/>")
        cache = ContentCache(fetcher)

        with pytest.raises(InvalidSvgError):
            await cache.get_or_fetch(
                "github:a.svg", GitHubDescriptor("o", "r", "a.svg")
            )
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self):
        fetcher = AsyncMock(side_effect=ProviderError("boom"))
        cache = ContentCache(fetcher)

        with pytest.raises(ProviderError, match="boom"):
            await cache.get_or_fetch(
                "azure:/a.svg", AzureDescriptor("o", "p", "r", "/a.svg")
            )
        assert cache.get("azure:/a.svg") is None

    def test_invalidate_provider(self):
        cache = ContentCache(AsyncMock())
        cache.put("github:a.svg", "<svg/>")
        cache.put("github:b.svg", "<svg/>")
        cache.put("azure:/a.svg", "<svg/>")

        assert cache.invalidate_provider("github") == 2
        assert "github:a.svg" not in cache
        assert cache.get("azure:/a.svg") == "<svg/>"
        assert cache.invalidate_provider("github") == 0

    @pytest.mark.asyncio
    async def test_resync_during_fetch_is_not_cached(self):
        release = asyncio.Event()

        async def fetcher(descriptor):
            await release.wait()
            return svg("old")

        cache = ContentCache(fetcher)
        task = asyncio.create_task(
            cache.get_or_fetch(
                "github:a.svg", GitHubDescriptor("octo", "icons", "a.svg")
            )
        )
        await asyncio.sleep(0)
        cache.invalidate_provider("github")
        release.set()

        assert await task == svg("old")
        assert cache.get("github:a.svg") is None

    @pytest.mark.asyncio
    async def test_other_provider_resync_keeps_fetch(self):
        release = asyncio.Event()

        async def fetcher(descriptor):
            await release.wait()
            return svg("a")

        cache = ContentCache(fetcher)
        task = asyncio.create_task(
            cache.get_or_fetch(
                "github:a.svg", GitHubDescriptor("octo", "icons", "a.svg")
            )
        )
        await asyncio.sleep(0)
        cache.invalidate_provider("azure")
        release.set()
        await task

        assert cache.get("github:a.svg") == svg("a")
