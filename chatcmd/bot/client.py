"""
Discord client wiring the command engine to the gateway using discord.py.
"""

import re
from typing import Any, Optional

import discord

from chatcmd.bot.config import Config, config
from chatcmd.commands.command_handler import CommandHandler
from chatcmd.commands.command_registry import CommandRegistry
from chatcmd.commands.help_command import HelpCommand
from chatcmd.utils.discord import DiscordUtils
from chatcmd.utils.error_handler import ErrorHandler
from chatcmd.utils.logger import get_logger
from chatcmd.utils.monitoring import Monitoring

logger = get_logger("Client")

VALID_PERMISSIONS = frozenset(discord.Permissions.VALID_FLAGS)


class DiscordMessage:
    """Adapts a discord.Message to the interface the command engine reads."""

    valid_permissions = VALID_PERMISSIONS

    def __init__(self, message: discord.Message):
        self.message = message

    @property
    def content(self) -> str:
        return self.message.content

    @property
    def author_id(self) -> str:
        return str(self.message.author.id)

    @property
    def guild(self) -> Optional[discord.Guild]:
        return self.message.guild

    def has_permission(self, permission: str, subject: str) -> bool:
        """
        Check a permission in the message's channel.

        Args:
            permission: discord.py permission flag name
            subject: "self" for the bot, "author" for the invoker
        """
        if self.message.guild is None:
            return True

        member = self.message.guild.me if subject == "self" else self.message.author
        permissions = self.message.channel.permissions_for(member)
        return bool(getattr(permissions, permission, False))

    async def send(self, content: str, destination: str = "channel") -> Any:
        target = self.message.author if destination == "author" else self.message.channel
        return await DiscordUtils.safe_send(target, content)


class CommandBot(discord.Client):
    """Discord client that dispatches prefixed messages as commands."""

    def __init__(self, settings: Config):
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(intents=intents)

        self.settings = settings
        self.monitoring = Monitoring()
        self.error_handler = ErrorHandler(debug=settings.DEBUG, monitoring=self.monitoring)
        self.registry = CommandRegistry(
            client=self,
            owner=settings.OWNER_ID,
            monitoring=self.monitoring,
        )
        self.handler = CommandHandler(
            self.registry,
            settings.prefix_list(),
            debug=settings.DEBUG,
            error_handler=self.error_handler,
            monitoring=self.monitoring,
        )
        self._mention_prefix_added = False

    async def setup_hook(self) -> None:
        """Called when the client is starting up."""
        if self.settings.DEFAULT_HELP:
            await self.registry.add(HelpCommand, "help")

    async def on_ready(self) -> None:
        """Called when the client is ready (and again after reconnects)."""
        logger.info(f"Logged in as: {self.user}")

        if self.settings.MENTION_PREFIX and not self._mention_prefix_added:
            self.handler.matcher.add(re.compile(rf"^<@!?{self.user.id}>\s*(.+)", re.DOTALL))
            self._mention_prefix_added = True

        if self.settings.AUTO_LOAD:
            try:
                failures = await self.registry.load_all(self.settings.COMMAND_DIRECTORY, deep=True)
            except FileNotFoundError as e:
                logger.warning(f"Auto load skipped: {e}")
            else:
                for module_id, error in failures.items():
                    logger.warning(f"Skipped {module_id}: {error}")

        logger.info(f"{len(self.registry)} commands ready")

    async def on_message(self, message: discord.Message) -> None:
        """Handle incoming messages."""
        if message.author == self.user:
            return

        await self.handler.handle(DiscordMessage(message))

    async def close(self) -> None:
        """Clean shutdown."""
        logger.info("Shutting down bot...")
        logger.info(self.monitoring.format_status())
        await super().close()


# Global bot instance
bot: Optional[CommandBot] = None


def create_bot(settings: Config = config) -> CommandBot:
    """Create and return bot instance."""
    global bot
    bot = CommandBot(settings)
    return bot


async def run_bot() -> None:
    """Run the bot."""
    config.validate()

    client = create_bot(config)

    try:
        async with client:
            await client.start(config.DISCORD_TOKEN)
    except Exception as e:
        logger.error(f"Bot error: {e}")
        raise
