"""
Shared fixtures: a fake transport message and registry/handler setups.
"""

import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pytest

from chatcmd.commands import CommandHandler, CommandRegistry
from chatcmd.utils.monitoring import Monitoring

FIXTURES = Path(__file__).parent / "fixtures"
COMMANDS_DIR = FIXTURES / "commands"
BROKEN_DIR = FIXTURES / "broken_commands"

KNOWN_PERMISSIONS = frozenset({
    "ban_members",
    "embed_links",
    "kick_members",
    "manage_messages",
    "read_message_history",
    "send_messages",
})


class FakeMessage:
    """Stand-in for the transport message adapter."""

    valid_permissions = KNOWN_PERMISSIONS

    def __init__(
        self,
        content: str,
        author_id: str = "u1",
        guild: Optional[str] = "g1",
        bot_permissions: Iterable[str] = KNOWN_PERMISSIONS,
        author_permissions: Iterable[str] = KNOWN_PERMISSIONS,
    ):
        self.content = content
        self.author_id = author_id
        self.guild = guild
        self.granted = {"self": set(bot_permissions), "author": set(author_permissions)}
        self.sent: List[Tuple[str, str]] = []

    def has_permission(self, permission: str, subject: str) -> bool:
        return permission in self.granted[subject]

    async def send(self, content: str, destination: str = "channel"):
        self.sent.append((content, destination))
        return content

    @property
    def replies(self) -> List[str]:
        return [content for content, _ in self.sent]


@pytest.fixture
def monitoring():
    return Monitoring()


@pytest.fixture
def registry(monitoring):
    return CommandRegistry(owner="u1", monitoring=monitoring)


@pytest.fixture
def handler(registry, monitoring):
    return CommandHandler(registry, ["!", re.compile(r"^foo (.+)")], monitoring=monitoring)


def module_path(name: str, directory: Path = COMMANDS_DIR) -> str:
    return str(directory / f"{name}.py")
