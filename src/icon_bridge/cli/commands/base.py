"""Base command handler for icon-bridge CLI commands."""

from abc import ABC, abstractmethod
from argparse import Namespace

from icon_bridge.cli.console import ConsoleUiChannel
from icon_bridge.constants import CONTEXT_STARTUP
from icon_bridge.core.sync import SyncOutcome
from icon_bridge.logger import get_logger
from icon_bridge.orchestrator import Orchestrator

logger = get_logger(__name__)


class BaseCommandHandler(ABC):
    """Abstract base class for all command handlers.

    Handlers share one Orchestrator session; the runner acts as the
    composition root and injects it together with the console channel.
    """

    def __init__(
        self, orchestrator: Orchestrator, ui: ConsoleUiChannel
    ) -> None:
        self.orchestrator = orchestrator
        self.ui = ui

    @abstractmethod
    async def execute(self, args: Namespace) -> int:
        """Run the command.

        Args:
            args: Parsed command-line arguments

        Returns:
            Process exit code

        """

    async def ensure_synced(self) -> bool:
        """Sync the active provider so the index is available in memory."""
        provider = self.orchestrator.config_store.ensure_selected_provider()
        if provider is None:
            print("❌ No provider is configured. Run 'icon-bridge configure'.")
            return False

        outcome = await self.orchestrator.sync(provider, CONTEXT_STARTUP)
        logger.debug("Sync outcome for %s: %s", provider, outcome.value)
        return outcome is SyncOutcome.APPLIED
