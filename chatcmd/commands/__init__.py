"""
Command system: registry, resolution, permissions and dispatch.
"""

from .command import Command, OptionSchema, PermissionRequirements, SubCommand
from .command_handler import CommandHandler
from .command_registry import CommandRegistry
from .context import Context
from .exceptions import (
    AlreadyLoadedError,
    CommandError,
    ConfigurationError,
    ModuleLoadError,
    NotLoadedError,
)
from .help_command import HelpCommand
from .module_source import ModuleSource
from .permissions import PermissionResult, evaluate_permissions

__all__ = [
    "AlreadyLoadedError",
    "Command",
    "CommandError",
    "CommandHandler",
    "CommandRegistry",
    "ConfigurationError",
    "Context",
    "HelpCommand",
    "ModuleLoadError",
    "ModuleSource",
    "NotLoadedError",
    "OptionSchema",
    "PermissionRequirements",
    "PermissionResult",
    "SubCommand",
    "evaluate_permissions",
]
