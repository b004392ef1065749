"""Command line interface for icon-bridge."""

from icon_bridge.cli.parser import CLIParser
from icon_bridge.cli.runner import CLIRunner

__all__ = ["CLIParser", "CLIRunner"]
