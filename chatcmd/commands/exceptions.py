"""
Command Exceptions
Errors raised while registering and loading commands
"""


class CommandError(Exception):
    """Base class for command engine errors."""


class ConfigurationError(CommandError):
    """A command is malformed or collides with an existing registration."""


class ModuleLoadError(CommandError):
    """A command module cannot be loaded or unloaded in its current state."""

    def __init__(self, module_id: str, message: str):
        super().__init__(message)
        self.module_id = module_id


class AlreadyLoadedError(ModuleLoadError):
    def __init__(self, module_id: str):
        super().__init__(module_id, f"Command module '{module_id}' is already loaded")


class NotLoadedError(ModuleLoadError):
    def __init__(self, module_id: str):
        super().__init__(module_id, f"Command module '{module_id}' isn't loaded")
