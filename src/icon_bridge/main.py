"""Main CLI entry point for icon-bridge.

Installs uvloop and delegates to the CLI runner.
"""

import sys

import uvloop

from icon_bridge.cli import CLIRunner
from icon_bridge.logger import get_logger

logger = get_logger(__name__)


async def async_main(argv: list[str] | None = None) -> int:
    """Run the CLI asynchronously and return its exit code."""
    logger.debug("CLI started")
    runner = CLIRunner()
    try:
        return await runner.run(argv)
    except Exception:
        logger.exception("CLI encountered an error")
        raise


def main() -> None:
    """Run the CLI application."""
    try:
        exit_code = uvloop.run(async_main())
    except KeyboardInterrupt:
        logger.info("CLI cancelled by user")
        print("\n⏹️  Operation cancelled by user")
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        print(f"❌ Unexpected error: {e}")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
