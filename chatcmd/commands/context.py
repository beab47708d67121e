"""
Invocation Context
Parsed view of one inbound message

The message object handed to a context is the transport's adapter. It must
provide:

    content: str
    author_id: str
    guild: server the message was sent in, or None for direct messages
    valid_permissions: collection of permission names the platform knows
    has_permission(permission, subject) -> bool, subject "self" or "author"
    async send(content, destination) with destination "channel" or "author"
"""

from typing import Any, Dict, List, Optional

from chatcmd.utils.logger import get_logger
from chatcmd.utils.monitoring import Monitoring

logger = get_logger("Context")

DESTINATIONS = ("channel", "author")


class Context:
    """Command name, arguments and options of a message, plus helpers."""

    def __init__(
        self,
        message: Any,
        registry: Any = None,
        cmd: str = "",
        args: Optional[List[str]] = None,
        suffix: str = "",
        opts: Optional[Dict[str, Any]] = None,
        operands: Optional[List[str]] = None,
        meta: Optional[Dict[str, Any]] = None,
        valid: bool = True,
        monitoring: Optional[Monitoring] = None,
    ):
        self.message = message
        self.registry = registry
        self.cmd = cmd
        self.args = args or []
        self.suffix = suffix
        self.opts = opts or {}
        self.operands = operands or []
        self.meta = meta or {}
        self.valid = valid
        self.monitoring = monitoring

    @property
    def content(self) -> str:
        return self.message.content

    @property
    def author_id(self) -> str:
        return str(self.message.author_id)

    @property
    def guild(self) -> Optional[Any]:
        return getattr(self.message, "guild", None)

    @property
    def is_bot_owner(self) -> bool:
        owner = getattr(self.registry, "owner", None)
        return owner is not None and self.author_id == str(owner)

    async def send(self, content: str, destination: str = "channel") -> Any:
        """
        Send a message to the conversation channel or the author's DMs.

        Raises:
            ValueError: If the destination is unknown
        """
        if destination not in DESTINATIONS:
            raise ValueError(f"Unknown destination: {destination}")
        return await self.message.send(content, destination)

    def has_permission(self, permission: str, target: str = "author") -> bool:
        """
        Check whether the author, the bot, or both hold a permission.

        Unknown permission names pass with a warning. Outside a server
        every permission passes.

        Raises:
            ValueError: If the target is unknown
        """
        return self.lacking_subject(permission, target) is None

    def lacking_subject(self, permission: str, target: str = "author") -> Optional[str]:
        """
        Find which side lacks a permission.

        For ``both`` the bot is asked first and the author only if the bot
        holds it, so the transport is queried at most once per side.

        Returns:
            "self" or "author", or None when the permission is held

        Raises:
            ValueError: If the target is unknown
        """
        if target == "both":
            subjects = ("self", "author")
        elif target in ("self", "author"):
            subjects = (target,)
        else:
            raise ValueError(f"Unknown target: {target}")

        if permission not in self.message.valid_permissions:
            warning = f'Unknown permission "{permission}"'
            logger.warning(warning)
            if self.monitoring:
                self.monitoring.record_warning(warning)
            return None

        if self.guild is None:
            return None

        for subject in subjects:
            if not self.message.has_permission(permission, subject):
                return subject
        return None

    def __repr__(self) -> str:
        return f"<Context cmd={self.cmd!r} args={self.args!r} valid={self.valid}>"
