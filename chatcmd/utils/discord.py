"""
Discord Utilities
Helper functions for Discord-facing text
"""

from typing import Any, Optional

# Display names that title-casing gets wrong
PERMISSION_NAMES = {
    "administrator": "Administrator",
    "create_instant_invite": "Create Invite",
    "external_emojis": "Use External Emojis",
    "external_stickers": "Use External Stickers",
    "manage_emojis": "Manage Emojis and Stickers",
    "manage_emojis_and_stickers": "Manage Emojis and Stickers",
    "read_message_history": "Read Message History",
    "send_tts_messages": "Send TTS Messages",
    "use_application_commands": "Use Application Commands",
    "view_audit_log": "View Audit Log",
    "view_guild_insights": "View Server Insights",
}


class DiscordUtils:
    """Utility class for Discord-related helper functions."""

    @staticmethod
    def format_permission(permission: str) -> str:
        """
        Turn a permission flag name into its display name.

        Args:
            permission: Flag name such as ``manage_messages``

        Returns:
            Display name such as ``Manage Messages``
        """
        if permission in PERMISSION_NAMES:
            return PERMISSION_NAMES[permission]
        return permission.replace("_", " ").title()

    @staticmethod
    async def safe_send(target: Any, content: str) -> Optional[Any]:
        """
        Send a message, returning None when the target cannot receive it.

        Args:
            target: Channel or user
            content: Message content

        Returns:
            Sent message or None if the target has no ``send``
        """
        if not target or not hasattr(target, "send"):
            return None
        return await target.send(content)
