"""Configure and select command handlers."""

from argparse import Namespace
from typing import Any

from icon_bridge.cli.commands.base import BaseCommandHandler
from icon_bridge.constants import PROVIDER_AZURE, PROVIDER_LABELS


def provider_values(args: Namespace) -> dict[str, Any]:
    """Collect the provider fields given on the command line."""
    fields = {
        "repository": args.repository,
        "branch": args.branch,
        "pat": args.pat,
    }
    if args.provider == PROVIDER_AZURE:
        fields["organizationUrl"] = args.organization
        fields["project"] = args.project
    return {key: value for key, value in fields.items() if value is not None}


class ConfigureHandler(BaseCommandHandler):
    """Save a provider's settings and sync it when it is active."""

    async def execute(self, args: Namespace) -> int:
        await self.orchestrator.handle_save_provider(
            {
                "provider": args.provider,
                "values": provider_values(args),
                "setSelectedProvider": args.select,
            }
        )
        label = PROVIDER_LABELS[args.provider]
        print(f"✅ {label} configuration saved")
        return 1 if self.ui.last_error else 0


class SelectHandler(BaseCommandHandler):
    """Switch the active provider and sync it."""

    async def execute(self, args: Namespace) -> int:
        await self.orchestrator.handle_select_provider(
            {"provider": args.provider}
        )
        return 1 if self.ui.last_error else 0
