"""
Help Command
Shows available commands and command details
"""

from typing import Any, List

from chatcmd.commands.command import Command

UNCATEGORIZED = "Other"


class HelpCommand(Command):
    """Built-in help, registered under the ``help`` module id."""

    name = "help"
    overview = "Shows the available commands, or details about one command."
    usage = "[command] [subcommand ...]"
    category = "General"

    async def main(self, ctx: Any) -> None:
        if ctx.args:
            await ctx.send(self.command_help(ctx.registry, ctx.args))
        else:
            await ctx.send(self.overview_help(ctx.registry))

    @staticmethod
    def overview_help(registry: Any) -> str:
        """
        Generate help text for all visible commands.

        Returns:
            Formatted help string grouped by category
        """
        lines = ["📖 **Commands**", ""]

        for category, commands in registry.commands_by_category():
            visible = [command for command in commands if not command.hidden]
            if not visible:
                continue

            lines.append(f"**{category or UNCATEGORIZED}:**")
            for command in visible:
                lines.append(f"• `{command.name}` - {command.overview}")
            lines.append("")

        return "\n".join(lines).rstrip()

    @staticmethod
    def command_help(registry: Any, args: List[str]) -> str:
        """
        Generate detailed help for one command.

        Args:
            registry: Command registry
            args: Command name followed by optional subcommand names

        Returns:
            Formatted help string, or an unknown command message
        """
        command = registry.get(args[0])
        if command is None or command.hidden:
            return f"❌ Unknown command: `{args[0]}`"

        # Same descent as CommandRegistry.resolve, keeping the path for the title
        path = [command.name]
        for arg in args[1:]:
            subcommand = command.get_subcommand(arg)
            if subcommand is not None:
                path.append(subcommand.name)
                command = subcommand
        title = " ".join(path)

        lines = [f"📖 **Command:** `{title}`", "", command.overview]

        if command.description:
            lines.append("")
            lines.append(command.description)

        if command.usage:
            lines.append(f"**Usage:** `{title} {command.usage}`")

        if command.aliases:
            aliases_formatted = ", ".join(f"`{alias}`" for alias in command.aliases)
            lines.append(f"**Aliases:** {aliases_formatted}")

        visible = [subcommand for subcommand in command.subcommands if not subcommand.hidden]
        if visible:
            lines.append("**Subcommands:**")
            for subcommand in visible:
                lines.append(f"  • `{subcommand.name}` - {subcommand.overview}")

        return "\n".join(lines)


COMMANDS = HelpCommand
