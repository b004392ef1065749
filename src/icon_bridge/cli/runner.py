"""CLI runner for icon-bridge.

Builds one Orchestrator session per invocation and routes parsed
arguments to the matching command handler.
"""

from argparse import Namespace

from icon_bridge import __version__
from icon_bridge.cli.commands import (
    BaseCommandHandler,
    ConfigureHandler,
    ExportHandler,
    ListHandler,
    SelectHandler,
    SyncHandler,
)
from icon_bridge.cli.console import ConsoleUiChannel, print_notice
from icon_bridge.cli.parser import CLIParser
from icon_bridge.config import Paths, SettingsManager
from icon_bridge.core.protocols import KeyValueStore
from icon_bridge.exceptions import IconBridgeError
from icon_bridge.infrastructure.http import ApiTransport, create_http_session
from icon_bridge.infrastructure.storage import JsonFileStore
from icon_bridge.logger import get_logger, update_logger_from_config
from icon_bridge.orchestrator import Orchestrator, create_orchestrator

logger = get_logger(__name__)

COMMAND_HANDLERS: dict[str, type[BaseCommandHandler]] = {
    "configure": ConfigureHandler,
    "select": SelectHandler,
    "sync": SyncHandler,
    "list": ListHandler,
    "export": ExportHandler,
}


class CLIRunner:
    """CLI command runner and composition root."""

    def __init__(
        self,
        settings_manager: SettingsManager | None = None,
        store: KeyValueStore | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            settings_manager: Settings source, defaults to settings.conf
            store: Configuration store, defaults to the JSON file store in
                the configured storage directory

        """
        self.settings_manager = settings_manager or SettingsManager()
        self.settings = self.settings_manager.load_settings()
        update_logger_from_config(self.settings)
        self.store = store or JsonFileStore(
            Paths.store_file(self.settings["directory"]["storage"])
        )

    async def run(self, argv: list[str] | None = None) -> int:
        """Parse arguments and run the selected command.

        Returns:
            Process exit code

        """
        args = CLIParser().parse_args(argv)

        if args.version:
            print(__version__)
            return 0

        if not args.command:
            print("❌ No command specified. Use --help.")
            return 1

        try:
            return await self._execute_command(args)
        except IconBridgeError as e:
            logger.error("%s failed: %s", args.command, e)
            print(f"❌ {e.message}")
            return 1

    async def _execute_command(self, args: Namespace) -> int:
        ui = ConsoleUiChannel()
        async with create_http_session(self.settings) as session:
            orchestrator = create_orchestrator(
                self.store,
                ApiTransport(session),
                ui,
                notifier=print_notice,
            )
            await orchestrator.start()
            handler = self._create_handler(args.command, orchestrator, ui)
            return await handler.execute(args)

    def _create_handler(
        self,
        command: str,
        orchestrator: Orchestrator,
        ui: ConsoleUiChannel,
    ) -> BaseCommandHandler:
        return COMMAND_HANDLERS[command](orchestrator, ui)
