"""
Tests for permission evaluation and context permission checks.
"""

import pytest

from chatcmd.commands.command import PermissionRequirements
from chatcmd.commands.context import Context
from chatcmd.commands.exceptions import ConfigurationError
from chatcmd.commands.permissions import evaluate_permissions
from chatcmd.utils.monitoring import Monitoring

from conftest import FakeMessage


def make_context(bot=(), author=(), guild="g1", monitoring=None):
    message = FakeMessage("!x", guild=guild, bot_permissions=bot, author_permissions=author)
    return Context(message, cmd="x", monitoring=monitoring)


class TestEvaluatePermissions:
    def test_no_requirements_pass(self):
        ctx = make_context()

        assert evaluate_permissions(None, ctx)
        assert evaluate_permissions(PermissionRequirements(), ctx)

    def test_author_scope_reports_missing_permission(self):
        requirements = PermissionRequirements.from_config({"author": ["kick_members", "ban_members"]})
        ctx = make_context(author={"kick_members"})

        result = evaluate_permissions(requirements, ctx)

        assert not result
        assert result.scope == "author"
        assert result.permission == "ban_members"
        assert result.subject == "author"

    def test_first_missing_in_declared_order(self):
        requirements = PermissionRequirements(author=["manage_messages", "kick_members", "ban_members"])
        ctx = make_context(author={"kick_members"})

        assert evaluate_permissions(requirements, ctx).permission == "manage_messages"

    def test_both_requires_bot_and_author(self):
        requirements = PermissionRequirements.from_config({"both": "kick_members"})

        result = evaluate_permissions(requirements, make_context(bot=(), author={"kick_members"}))
        assert not result
        assert result.scope == "both"
        assert result.permission == "kick_members"
        assert result.subject == "self"
        assert result.bot_missing

        result = evaluate_permissions(requirements, make_context(bot={"kick_members"}, author=()))
        assert not result
        assert result.subject == "author"
        assert not result.bot_missing

        assert evaluate_permissions(requirements, make_context(bot={"kick_members"}, author={"kick_members"}))

    def test_scope_order_is_both_author_self(self):
        requirements = PermissionRequirements.from_config({
            "self": "embed_links",
            "author": "manage_messages",
            "both": "send_messages",
        })

        assert evaluate_permissions(requirements, make_context()).scope == "both"
        assert evaluate_permissions(requirements, make_context(bot={"send_messages"}, author={"send_messages"})).scope == "author"
        result = evaluate_permissions(
            requirements,
            make_context(bot={"send_messages"}, author={"send_messages", "manage_messages"}),
        )
        assert result.scope == "self"
        assert result.permission == "embed_links"

    def test_order_of_declaration_does_not_matter_for_pass(self):
        granted = {"kick_members", "ban_members"}
        forwards = PermissionRequirements(author=["kick_members", "ban_members"])
        backwards = PermissionRequirements(author=["ban_members", "kick_members"])

        assert evaluate_permissions(forwards, make_context(author=granted))
        assert evaluate_permissions(backwards, make_context(author=granted))

    def test_duplicate_names_are_collapsed(self):
        requirements = PermissionRequirements(author=["kick_members", "kick_members"])

        assert requirements.get("author") == ["kick_members"]
        assert evaluate_permissions(requirements, make_context(author={"kick_members"}))

    def test_unknown_permission_passes(self):
        requirements = PermissionRequirements(bot="teleport_members")

        assert evaluate_permissions(requirements, make_context())

    def test_unknown_scope_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            PermissionRequirements.from_config({"owner": "ban_members"})


class TestContextHasPermission:
    def test_defaults_to_author(self):
        ctx = make_context(bot={"ban_members"}, author=())

        assert not ctx.has_permission("ban_members")
        assert ctx.has_permission("ban_members", "self")

    def test_unknown_permission_warns(self):
        monitoring = Monitoring()
        ctx = make_context(monitoring=monitoring)

        assert ctx.has_permission("teleport_members", "author")
        assert monitoring.metrics["warnings"] == 1
        assert 'Unknown permission "teleport_members"' in monitoring.warnings[0]

    def test_direct_messages_pass(self):
        ctx = make_context(guild=None)

        assert ctx.has_permission("ban_members", "both")

    def test_unknown_target(self):
        with pytest.raises(ValueError):
            make_context().has_permission("ban_members", "everyone")

    def test_lacking_subject(self):
        ctx = make_context(bot={"kick_members"}, author={"ban_members"})

        assert ctx.lacking_subject("kick_members", "both") == "author"
        assert ctx.lacking_subject("ban_members", "both") == "self"
        assert ctx.lacking_subject("ban_members", "author") is None
        assert ctx.lacking_subject("teleport_members", "both") is None
