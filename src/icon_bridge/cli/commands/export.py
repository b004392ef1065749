"""Export command handler."""

from argparse import Namespace
from pathlib import Path

from icon_bridge.cli.commands.base import BaseCommandHandler
from icon_bridge.logger import get_logger

logger = get_logger(__name__)


class ExportHandler(BaseCommandHandler):
    """Write one icon's SVG markup to a file or stdout."""

    async def execute(self, args: Namespace) -> int:
        if not await self.ensure_synced():
            return 1

        markup = await self.orchestrator.export_icon(args.icon_id)
        if not args.output:
            print(markup)
            return 0

        output = Path(args.output).expanduser()
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(markup + "\n", encoding="utf-8")
        logger.info("Exported %s to %s", args.icon_id, output)
        print(f"✅ Saved {output}")
        return 0
