"""
Entry point for the command bot.
"""

import asyncio
import sys

from chatcmd.bot.client import run_bot
from chatcmd.bot.config import config
from chatcmd.utils.logger import get_logger, setup_logging

logger = get_logger("Main")


def main():
    """Configure logging, check the environment and run the bot until stopped."""
    setup_logging(debug=config.DEBUG)

    try:
        config.validate()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)

    logger.info(f"Starting command bot (prefixes: {', '.join(config.PREFIXES) or 'none'})")
    try:
        asyncio.run(run_bot())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
