"""List command handler."""

from argparse import Namespace

from icon_bridge.cli.commands.base import BaseCommandHandler
from icon_bridge.core.models import IconSummary


def split_tags(tag: str) -> list[str]:
    return [part.strip().casefold() for part in tag.split(",") if part.strip()]


def filter_icons(
    icons: list[IconSummary],
    search: str | None = None,
    tag: str | None = None,
) -> list[IconSummary]:
    """Filter by free text over title, name and tag, and by exact tag."""
    needle = (search or "").strip().casefold()
    wanted_tag = (tag or "").strip().casefold()

    matches = []
    for icon in icons:
        if wanted_tag and wanted_tag not in split_tags(icon.tag):
            continue
        if needle and not any(
            needle in value.casefold()
            for value in (icon.title, icon.name, icon.tag)
        ):
            continue
        matches.append(icon)
    return matches


class ListHandler(BaseCommandHandler):
    """Print the icons of the active provider."""

    async def execute(self, args: Namespace) -> int:
        if not await self.ensure_synced():
            return 1

        provider = self.orchestrator.config_store.selected_provider
        icons = filter_icons(
            self.orchestrator.state.icons_for(provider),
            search=args.search,
            tag=args.tag,
        )
        if not icons:
            print("No icons match.")
            return 0

        width = max(len(icon.display_label) for icon in icons)
        for icon in icons:
            tag = f"  [{icon.tag}]" if icon.tag else ""
            print(f"{icon.display_label:<{width}}  {icon.id}{tag}")
        return 0
