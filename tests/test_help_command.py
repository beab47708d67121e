"""
Tests for the built-in help command.
"""

import pytest
import pytest_asyncio

from chatcmd.commands import Command, HelpCommand

from conftest import FakeMessage, module_path


class Secret(Command):
    overview = "Not listed."
    hidden = True

    async def main(self, ctx):
        pass


class Loose(Command):
    overview = "Has no category."
    description = "A longer description."

    async def main(self, ctx):
        pass


@pytest_asyncio.fixture
async def loaded(registry):
    await registry.add(HelpCommand, "help")
    await registry.load(module_path("ping"))
    await registry.load(module_path("moderation"))
    await registry.add(Secret, "secret")
    await registry.add(Loose, "loose")
    return registry


class TestOverview:
    @pytest.mark.asyncio
    async def test_groups_by_category(self, loaded):
        text = HelpCommand.overview_help(loaded)
        lines = text.splitlines()

        assert lines[0] == "📖 **Commands**"
        assert "**General:**" in lines
        assert "• `ping` - Replies with pong." in lines
        assert "• `kick` - Kick a member." in lines
        assert lines.index("**General:**") < lines.index("**Moderation:**") < lines.index("**Other:**")
        assert lines[-1] == "• `loose` - Has no category."

    @pytest.mark.asyncio
    async def test_hides_hidden_commands(self, loaded):
        assert "secret" not in HelpCommand.overview_help(loaded)


class TestCommandHelp:
    @pytest.mark.asyncio
    async def test_details(self, loaded):
        text = HelpCommand.command_help(loaded, ["PONG?"])

        assert text.startswith("📖 **Command:** `ping`")
        assert "Replies with pong." in text
        assert "**Aliases:** `p`, `pong?`" in text

    @pytest.mark.asyncio
    async def test_description(self, loaded):
        assert "A longer description." in HelpCommand.command_help(loaded, ["loose"])

    @pytest.mark.asyncio
    async def test_lists_subcommands(self, loaded):
        text = HelpCommand.command_help(loaded, ["role"])

        assert "**Subcommands:**" in text
        assert "  • `add` - Give a role." in text
        assert "  • `remove` - Take a role away." in text

    @pytest.mark.asyncio
    async def test_subcommand_details(self, loaded):
        text = HelpCommand.command_help(loaded, ["role", "add"])

        assert text.startswith("📖 **Command:** `role add`")
        assert "**Usage:** `role add <member> <role>`" in text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["nope", "secret"])
    async def test_unknown_or_hidden(self, loaded, name):
        assert HelpCommand.command_help(loaded, [name]) == f"❌ Unknown command: `{name}`"


class TestHelpDispatch:
    @pytest.mark.asyncio
    async def test_help_for_command(self, loaded, handler):
        message = FakeMessage("!help kick")

        await handler.handle(message)

        assert message.replies[0].startswith("📖 **Command:** `kick`")

    @pytest.mark.asyncio
    async def test_help_is_unloadable(self, loaded):
        await loaded.unload("help")

        assert not loaded.has("help")
