"""Tests for icon insertion and variant/size switching."""

import pytest

from icon_bridge.constants import ICON_TINT_COLOR, NODE_DATA_NAMESPACE
from icon_bridge.core.models import IconIdentity
from icon_bridge.core.variants import (
    VariantApplyReport,
    VariantSizeEngine,
    nominal_size,
    parse_size,
    parse_variant,
    read_node_identity,
    scale_to_size,
    tint_node,
    write_node_identity,
)
from icon_bridge.exceptions import InvalidInputError, VariantMissingError
from tests.fakes import (
    FakeDocument,
    FakeNode,
    FakeTransport,
    github_config,
    github_index,
    make_state,
    serve_blobs,
    svg,
)

PATHS = [
    "Icons/home-outline.svg",
    "Icons/home-fill.svg",
    "Icons/home-bulk.svg",
    "Icons/gear.svg",
    "Icons/star-outline.svg",
    "Icons/star-fill.svg",
]


def plugin_data(node, key):
    return node.get_plugin_data(NODE_DATA_NAMESPACE, key)


@pytest.fixture
def document():
    return FakeDocument()


@pytest.fixture
def transport():
    transport = FakeTransport()
    serve_blobs(transport, [p for p in PATHS if "star-fill" not in p])
    return transport


@pytest.fixture
def engine(transport, document):
    state, _ = make_state(transport)
    state.config_store.save_provider("github", github_config())
    state.replace_index("github", github_index(PATHS))
    return VariantSizeEngine(state, document)


@pytest.fixture
def frame(document):
    frame = FakeNode("Frame", width=400, height=400)
    document.current_page.append_child(frame)
    return frame


async def place(engine, frame, icon_id, **kwargs):
    """Insert an icon and move it into ``frame`` between two siblings."""
    node = await engine.insert_icon(icon_id, **kwargs)
    frame.append_child(FakeNode("before"))
    frame.append_child(node)
    frame.append_child(FakeNode("after"))
    return node


class TestHelpers:
    """Test node helpers and input parsing."""

    def test_nominal_size(self):
        assert nominal_size(FakeNode(width=23.6, height=10)) == 24

    def test_scale_keeps_aspect_ratio(self):
        node = FakeNode(width=24, height=12)
        scale_to_size(node, 48)
        assert (node.width, node.height) == (48, 24)

    def test_scale_degenerate_node(self):
        node = FakeNode(width=0, height=0)
        scale_to_size(node, 16)
        assert (node.width, node.height) == (16, 16)

    def test_tint_recolors_solid_paints_only(self, document):
        node = document.create_node_from_svg(svg())
        tint_node(node)

        vector = node.children[0]
        assert node.fills[0]["color"] == ICON_TINT_COLOR
        assert vector.fills[0]["color"] == ICON_TINT_COLOR
        assert vector.fills[0]["opacity"] == 0.5
        assert vector.fills[1] == {
            "type": "GRADIENT_LINEAR",
            "gradientStops": [],
        }
        assert vector.strokes[0]["color"] == ICON_TINT_COLOR

    def test_identity_round_trip(self):
        node = FakeNode("home")
        identity = IconIdentity(
            base_name="home",
            variant="fill",
            size=32,
            provider="github",
            icon_id="github:Icons/home-fill.svg",
            path="Icons/home-fill.svg",
        )
        write_node_identity(node, identity)

        assert plugin_data(node, "managed") == "1"
        assert plugin_data(node, "size") == "32"
        assert read_node_identity(node) == identity

    def test_unmanaged_node_has_no_identity(self):
        assert read_node_identity(FakeNode("home")) is None

    def test_unknown_stored_variant_reads_as_outline(self):
        node = FakeNode("home")
        write_node_identity(node, IconIdentity("home", variant="duotone"))
        identity = read_node_identity(node)
        assert identity is not None
        assert identity.variant == "outline"

    @pytest.mark.parametrize("stored", ["inf", "1e999", "nan", "wide"])
    def test_unreadable_stored_size_reads_as_zero(self, stored):
        node = FakeNode("home")
        write_node_identity(node, IconIdentity("home", size=24))
        node.set_plugin_data(NODE_DATA_NAMESPACE, "size", stored)

        identity = read_node_identity(node)

        assert identity is not None
        assert identity.size == 0

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, None), ("", None), ("Fill", "fill"), (" bulk ", "bulk")],
    )
    def test_parse_variant(self, value, expected):
        assert parse_variant(value) == expected

    def test_parse_variant_rejects_unknown(self):
        with pytest.raises(InvalidInputError, match="Unknown icon variant"):
            parse_variant("duotone")

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, None), ("", None), (32, 32), ("31.6", 32), (1, 1)],
    )
    def test_parse_size(self, value, expected):
        assert parse_size(value) == expected

    @pytest.mark.parametrize(
        "value", [0, -4, "big", [16], "inf", "1e999", "nan", float("inf")]
    )
    def test_parse_size_rejects_invalid(self, value):
        with pytest.raises(InvalidInputError, match="Invalid icon size"):
            parse_size(value)

    def test_report_notice(self):
        report = VariantApplyReport(
            missing=["gear", "cog"], failed=[("star", "404 Not Found")]
        )
        assert report.notice("fill") == (
            "No fill variant for: gear, cog. "
            "Could not update: star (404 Not Found)"
        )
        assert VariantApplyReport().notice("fill") is None


class TestInsertIcon:
    """Test VariantSizeEngine.insert_icon."""

    @pytest.mark.asyncio
    async def test_inserts_at_viewport_center(self, engine, document):
        node = await engine.insert_icon(
            "github:Icons/home-outline.svg", title="Home"
        )

        assert node.name == "Home"
        assert node.parent is document.current_page
        assert (node.x, node.y) == (488, 288)
        assert node.markup == svg("home-outline")
        assert node.fills[0]["color"] == ICON_TINT_COLOR
        assert document.selection == [node]
        assert document.scrolled == [[node]]
        assert read_node_identity(node) == IconIdentity(
            base_name="home",
            variant="outline",
            size=24,
            provider="github",
            icon_id="github:Icons/home-outline.svg",
            path="Icons/home-outline.svg",
        )

    @pytest.mark.asyncio
    async def test_name_falls_back_to_file_name(self, engine):
        node = await engine.insert_icon("github:Icons/gear.svg", name=" ")
        assert node.name == "gear"

    @pytest.mark.asyncio
    async def test_inserts_requested_size(self, engine):
        node = await engine.insert_icon("github:Icons/gear.svg", size=48)
        assert (node.width, node.height) == (48, 48)
        assert plugin_data(node, "size") == "48"

    @pytest.mark.asyncio
    async def test_inserts_requested_variant(self, engine):
        node = await engine.insert_icon(
            "github:Icons/home-outline.svg", variant="bulk"
        )
        assert node.markup == svg("home-bulk")
        assert plugin_data(node, "iconId") == "github:Icons/home-bulk.svg"
        assert plugin_data(node, "variant") == "bulk"

    @pytest.mark.asyncio
    async def test_missing_variant(self, engine, document):
        with pytest.raises(VariantMissingError) as exc_info:
            await engine.insert_icon("github:Icons/gear.svg", variant="fill")
        assert str(exc_info.value) == "gear has no fill variant"
        assert document.created == []

    @pytest.mark.asyncio
    async def test_unknown_icon(self, engine):
        with pytest.raises(InvalidInputError, match="Please sync again"):
            await engine.insert_icon("github:Icons/nope.svg")


class TestApplyVariantAndSize:
    """Test VariantSizeEngine.apply_variant_and_size."""

    @pytest.mark.asyncio
    async def test_variant_and_size_replace_in_place(
        self, engine, document, frame
    ):
        """Switching to fill at 32px keeps center and stacking order."""
        node = await place(engine, frame, "github:Icons/home-outline.svg")
        node.opacity = 0.4
        node.locked = True
        document.set_selection([node])
        center = (node.x + node.width / 2, node.y + node.height / 2)

        report = await engine.apply_variant_and_size(variant="fill", size=32)

        assert report.replaced == 1
        new = report.nodes[0]
        assert node.removed
        assert frame.children.index(new) == 1
        assert [child.name for child in frame.children] == [
            "before",
            "home-fill",
            "after",
        ]
        assert (new.width, new.height) == (32, 32)
        assert (new.x + new.width / 2, new.y + new.height / 2) == center
        assert new.markup == svg("home-fill")
        assert new.opacity == 0.4
        assert new.locked is True
        assert plugin_data(new, "variant") == "fill"
        assert plugin_data(new, "size") == "32"
        assert plugin_data(new, "iconId") == "github:Icons/home-fill.svg"
        assert document.selection == [new]

    @pytest.mark.asyncio
    async def test_size_only_replaces_same_icon(self, engine, document, frame):
        node = await place(engine, frame, "github:Icons/gear.svg")
        document.set_selection([node])

        report = await engine.apply_variant_and_size(size=48)

        new = report.nodes[0]
        assert report.replaced == 1
        assert (new.width, new.height) == (48, 48)
        assert plugin_data(new, "iconId") == "github:Icons/gear.svg"
        assert new.name == "gear-outline"

    @pytest.mark.asyncio
    async def test_unchanged_node_is_relabeled(self, engine, document, frame):
        node = await place(
            engine, frame, "github:Icons/home-outline.svg", title="Home"
        )
        document.set_selection([node])
        created = len(document.created)

        report = await engine.apply_variant_and_size(
            variant="outline", size=24
        )

        assert report.relabeled == 1
        assert report.replaced == 0
        assert report.nodes == [node]
        assert node.name == "home-outline"
        assert len(document.created) == created

    @pytest.mark.asyncio
    async def test_missing_variants_are_aggregated(
        self, engine, document, frame
    ):
        home = await place(engine, frame, "github:Icons/home-outline.svg")
        gear = await place(engine, frame, "github:Icons/gear.svg")
        document.set_selection([home, gear])

        report = await engine.apply_variant_and_size(variant="fill")

        assert report.replaced == 1
        assert report.missing == ["gear"]
        assert report.nodes[1] is gear
        assert document.notices == ["No fill variant for: gear"]

    @pytest.mark.asyncio
    async def test_fetch_failure_keeps_node(self, engine, document, frame):
        star = await place(engine, frame, "github:Icons/star-outline.svg")
        document.set_selection([star])

        report = await engine.apply_variant_and_size(variant="fill")

        assert report.replaced == 0
        assert report.failed == [("star-outline", "404 Not Found: Not Found")]
        assert star.parent is frame
        assert not star.removed
        assert document.notices == [
            "Could not update: star-outline (404 Not Found: Not Found)"
        ]

    @pytest.mark.asyncio
    async def test_identity_from_node_name(self, engine, document, frame):
        """An unmanaged node is matched to a family by its name."""
        node = FakeNode("home-fill", width=24, height=24)
        frame.append_child(node)
        document.set_selection([node])

        report = await engine.apply_variant_and_size(variant="bulk")

        new = report.nodes[0]
        assert report.replaced == 1
        assert new.markup == svg("home-bulk")
        assert plugin_data(new, "baseName") == "home"
        assert plugin_data(new, "provider") == "github"

    @pytest.mark.asyncio
    async def test_unrecognized_nodes_are_skipped(
        self, engine, document, frame
    ):
        rectangle = FakeNode("Rectangle")
        frame.append_child(rectangle)
        document.set_selection([rectangle])

        report = await engine.apply_variant_and_size(variant="fill")

        assert report.skipped == 1
        assert report.nodes == [rectangle]
        assert document.notices == []

    @pytest.mark.asyncio
    async def test_no_change_requested(self, engine, document, frame):
        node = await place(engine, frame, "github:Icons/gear.svg")
        document.set_selection([node])

        report = await engine.apply_variant_and_size()

        assert report.changed == 0
        assert report.nodes == []

    @pytest.mark.asyncio
    async def test_empty_selection(self, engine, document):
        document.set_selection([])
        report = await engine.apply_variant_and_size(variant="fill")
        assert report.nodes == []
