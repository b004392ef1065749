"""CLI command handlers."""

from icon_bridge.cli.commands.base import BaseCommandHandler
from icon_bridge.cli.commands.configure import ConfigureHandler, SelectHandler
from icon_bridge.cli.commands.export import ExportHandler
from icon_bridge.cli.commands.list import ListHandler
from icon_bridge.cli.commands.sync import SyncHandler

__all__ = [
    "BaseCommandHandler",
    "ConfigureHandler",
    "ExportHandler",
    "ListHandler",
    "SelectHandler",
    "SyncHandler",
]
