"""
Text-command dispatch engine for chat bots.
"""

__version__ = "1.0.0"
__description__ = "Prefix, subcommand and permission aware command dispatch"

from .commands import Command, CommandHandler, CommandRegistry, Context, SubCommand

__all__ = [
    "Command",
    "CommandHandler",
    "CommandRegistry",
    "Context",
    "SubCommand",
    "__version__",
]
