"""CLI argument parser for icon-bridge.

Handles parsing of command-line arguments and provides a clean
interface for defining CLI commands and their options.
"""

import argparse
from argparse import Namespace

from icon_bridge.constants import PROVIDER_AZURE, PROVIDER_GITHUB

PROVIDER_CHOICES = (PROVIDER_GITHUB, PROVIDER_AZURE)


class CLIParser:
    """Command-line argument parser for icon-bridge."""

    def parse_args(self, argv: list[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments to parse, defaults to ``sys.argv[1:]``

        Returns:
            Parsed arguments namespace

        """
        return self.build().parse_args(argv)

    def build(self) -> argparse.ArgumentParser:
        parser = self._create_main_parser()
        # --version is handled by the runner before any command runs
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show icon-bridge version and exit",
        )
        self._add_subcommands(parser)
        return parser

    def _create_main_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(
            prog="icon-bridge",
            description="Browse and export SVG icons kept in a Git repository",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Connect a GitHub repository and make it the active provider
  %(prog)s configure github --repository octo/icons --pat ghp_xxx --select

  # Connect an Azure DevOps repository
  %(prog)s configure azure --organization https://dev.azure.com/acme \\
      --project Design --repository icons --pat xxx

  # Sync and browse
  %(prog)s sync
  %(prog)s list --search arrow
  %(prog)s export "github:Icons/home-outline.svg" --output home.svg
            """,
        )

    def _add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands"
        )
        self._add_configure_command(subparsers)
        self._add_select_command(subparsers)
        self._add_sync_command(subparsers)
        self._add_list_command(subparsers)
        self._add_export_command(subparsers)

    def _add_configure_command(self, subparsers) -> None:
        configure_parser = subparsers.add_parser(
            "configure", help="Save the connection settings of a provider"
        )
        configure_parser.add_argument("provider", choices=PROVIDER_CHOICES)
        configure_parser.add_argument(
            "--repository",
            help="owner/repo or URL (GitHub), repository name or URL (Azure)",
        )
        configure_parser.add_argument("--branch", help="Branch to read")
        configure_parser.add_argument(
            "--pat", help="Personal access token with read access"
        )
        configure_parser.add_argument(
            "--organization",
            help="Azure organization name or URL",
        )
        configure_parser.add_argument("--project", help="Azure project")
        configure_parser.add_argument(
            "--select",
            action="store_true",
            help="Make this the active provider",
        )

    def _add_select_command(self, subparsers) -> None:
        select_parser = subparsers.add_parser(
            "select", help="Switch the active provider"
        )
        select_parser.add_argument("provider", choices=PROVIDER_CHOICES)

    def _add_sync_command(self, subparsers) -> None:
        subparsers.add_parser(
            "sync", help="Fetch the icon index of the active provider"
        )

    def _add_list_command(self, subparsers) -> None:
        list_parser = subparsers.add_parser(
            "list", help="List icons of the active provider"
        )
        list_parser.add_argument(
            "--search", help="Match text in title, name or tag"
        )
        list_parser.add_argument("--tag", help="Only icons with this tag")

    def _add_export_command(self, subparsers) -> None:
        export_parser = subparsers.add_parser(
            "export", help="Write the SVG markup of one icon"
        )
        export_parser.add_argument("icon_id", help="Icon id as shown by list")
        export_parser.add_argument(
            "-o",
            "--output",
            help="Output file (default: print to stdout)",
        )
