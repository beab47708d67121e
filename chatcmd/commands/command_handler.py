"""
Command Handler
Turns inbound messages into command invocations using the Command Registry
"""

import inspect
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type, Union

from chatcmd.commands.command import Command
from chatcmd.commands.command_registry import CommandRegistry
from chatcmd.commands.context import Context
from chatcmd.commands.permissions import PermissionResult, evaluate_permissions
from chatcmd.utils.discord import DiscordUtils
from chatcmd.utils.error_handler import ErrorHandler
from chatcmd.utils.logger import get_logger
from chatcmd.utils.monitoring import Monitoring
from chatcmd.utils.parsing import parse_args, parse_opts
from chatcmd.utils.prefix import Prefix, PrefixMatch, PrefixMatcher, PrefixParser

PreParser = Callable[[str], Union[str, Tuple[str, Dict[str, Any]]]]

GUILD_ONLY_REPLY = "This command can only be run in a server."


class CommandHandler:
    """Runs each message through prefix, parsing, resolution, checks and the handler."""

    def __init__(
        self,
        registry: CommandRegistry,
        prefixes: Sequence[Prefix],
        *,
        debug: bool = False,
        prefix_parser: Optional[PrefixParser] = None,
        pre_parsers: Optional[Sequence[PreParser]] = None,
        context_class: Type[Context] = Context,
        error_handler: Optional[ErrorHandler] = None,
        monitoring: Optional[Monitoring] = None,
    ):
        self.logger = get_logger("Command")
        self.registry = registry
        self.matcher = PrefixMatcher(prefixes, prefix_parser)
        self.pre_parsers: List[PreParser] = list(pre_parsers or [])
        self.context_class = context_class
        self.monitoring = monitoring
        self.error_handler = error_handler or ErrorHandler(debug=debug, monitoring=monitoring)

    def test_prefix(self, content: str) -> PrefixMatch:
        return self.matcher.match(content)

    def pre_parse(self, content: str) -> Tuple[str, Dict[str, Any]]:
        """
        Apply pre-parsers in order.

        Returns:
            Rewritten content and the merged metadata they produced
        """
        meta: Dict[str, Any] = {}
        for parser in self.pre_parsers:
            result = parser(content)
            if isinstance(result, tuple):
                content, extra = result
                meta.update(extra or {})
            else:
                content = result
        return content, meta

    def build_context(self, message: Any) -> Context:
        """
        Build an invocation context for a message.

        The context is marked invalid when no prefix matches.

        Args:
            message: Transport message adapter

        Returns:
            Context
        """
        content, pre_meta = self.pre_parse(message.content or "")
        match = self.test_prefix(content)

        if not match:
            return self.context_class(message, self.registry, valid=False, monitoring=self.monitoring)

        parsed = parse_args(match.remainder or "")
        opts: Dict[str, Any] = {}
        operands: List[str] = []

        command = self.registry.get(parsed.cmd) if parsed.cmd else None
        schema = command.option_schema if command is not None else None
        if schema is not None:
            # Operands begin with the command token
            opts, operands = parse_opts(match.remainder or "", schema)

        return self.context_class(
            message,
            self.registry,
            cmd=parsed.cmd,
            args=parsed.args,
            suffix=parsed.suffix,
            opts=opts,
            operands=operands,
            meta={**pre_meta, **(match.meta or {})},
            valid=bool(parsed.cmd),
            monitoring=self.monitoring,
        )

    async def handle(self, message: Any) -> Optional[Context]:
        """
        Handle incoming message.

        Failures while building the context or running the handler are
        reported through the error handler and never raised from here.

        Args:
            message: Transport message adapter

        Returns:
            The context when the message was a command, otherwise None
        """
        if self.monitoring:
            self.monitoring.record_message()

        try:
            ctx = self.build_context(message)
        except Exception as error:
            # No context to reply to yet
            self.error_handler.handle_exception(error, "build_context")
            return None

        if not ctx.valid:
            return None

        try:
            await self.run(ctx)
        except Exception as error:
            await self.error_handler.handle_command_error(ctx, error)

        return ctx

    async def run(self, ctx: Context) -> bool:
        """
        Resolve and run the command for a context.

        Args:
            ctx: Valid invocation context

        Returns:
            True if a handler was invoked

        Raises:
            Exception: Whatever the command handler raises
        """
        if not ctx.valid:
            return False

        command = self.registry.resolve(ctx.cmd, ctx.args)
        if command is None:
            return False

        if command.guild_only and ctx.guild is None:
            await ctx.send(GUILD_ONLY_REPLY)
            return False

        for check in command.pre_checks:
            passed = check(ctx)
            if inspect.isawaitable(passed):
                passed = await passed
            if not passed:
                self.logger.debug(f"Pre-check stopped: {command.name}")
                return False

        if command.owner_only:
            if not ctx.is_bot_owner:
                return False
        else:
            result = evaluate_permissions(command.requirements, ctx)
            if not result:
                await self.reject(ctx, command, result)
                return False

        self.logger.debug(f"Executing: {command.name}")
        await command.main(ctx)

        if self.monitoring:
            self.monitoring.record_command()
        return True

    async def reject(self, ctx: Context, command: Command, result: PermissionResult) -> None:
        """Tell the user which permission stopped the command."""
        if self.monitoring:
            self.monitoring.record_permission_denied()

        self.logger.debug(f"Permission denied for {command.name}: {result.scope}/{result.permission}")
        await ctx.send(self.permission_message(result))

    @staticmethod
    def permission_message(result: PermissionResult) -> str:
        """
        Phrase a permission failure.

        The bot is named as missing the permission when the failing scope is
        ``self``, or ``both`` with the bot's side lacking it.
        """
        display = DiscordUtils.format_permission(result.permission or "")

        if result.bot_missing:
            return f"I am missing the **{display}** permission."
        return f"You are missing the **{display}** permission."
