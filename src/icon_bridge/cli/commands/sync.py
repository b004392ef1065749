"""Sync command handler."""

from argparse import Namespace

from icon_bridge.cli.commands.base import BaseCommandHandler


class SyncHandler(BaseCommandHandler):
    """Re-run the sync of the active provider."""

    async def execute(self, args: Namespace) -> int:
        await self.orchestrator.handle_retry_sync({})
        return 1 if self.ui.last_error else 0
