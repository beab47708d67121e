"""
Command Registry
Loads, unloads and looks up commands grouped by the module that defined them
"""

import asyncio
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from chatcmd.commands.command import Command
from chatcmd.commands.exceptions import (
    AlreadyLoadedError,
    ConfigurationError,
    ModuleLoadError,
    NotLoadedError,
)
from chatcmd.commands.module_source import ModuleSource
from chatcmd.utils.logger import get_logger
from chatcmd.utils.monitoring import Monitoring

CommandConstructor = Callable[[Any], Command]


class CommandRegistry:
    """
    Catalog of commands, aliases and module ownership.

    All mutations (load, unload, reload, add) are serialized by one lock, so
    a second concurrent load of the same module fails with
    AlreadyLoadedError. Lookups read the maps directly and see the state of
    the last completed mutation.
    """

    def __init__(
        self,
        client: Any = None,
        owner: Optional[str] = None,
        module_source: Optional[ModuleSource] = None,
        monitoring: Optional[Monitoring] = None,
    ):
        self.logger = get_logger("CommandRegistry")
        self.client = client
        self.owner = owner
        self.module_source = module_source or ModuleSource()
        self.monitoring = monitoring
        self.commands: Dict[str, Command] = {}
        self.aliases: Dict[str, Command] = {}
        self.modules: Dict[str, List[str]] = {}
        self._lock = asyncio.Lock()

    # Loading

    async def load(self, module_id: str) -> List[Command]:
        """
        Load every command a module exports.

        Args:
            module_id: File path or dotted module name

        Returns:
            The registered commands

        Raises:
            AlreadyLoadedError: If the module is already loaded
            ConfigurationError: If a command is malformed or collides
        """
        async with self._lock:
            return await self._load_reported(module_id)

    async def unload(self, module_id: str) -> None:
        """
        Remove every name a module registered.

        Raises:
            NotLoadedError: If the module isn't loaded
        """
        async with self._lock:
            self._unload(module_id)

    async def reload(self, module_id: str) -> List[Command]:
        """Unload a module if it is loaded, then load it again."""
        async with self._lock:
            if module_id in self.modules:
                self._unload(module_id)
            return await self._load_reported(module_id)

    async def load_all(self, root: str, deep: bool = False) -> Dict[str, Exception]:
        """
        Load every command module found under a directory.

        A failing module does not stop the others; failures are logged,
        recorded and returned. Modules that are already loaded are skipped.

        Args:
            root: Directory to search
            deep: Whether to search nested directories too

        Returns:
            Mapping of module id to the error that stopped it loading
        """
        failures: Dict[str, Exception] = {}

        for module_id in self.module_source.discover(root, deep):
            if module_id in self.modules:
                continue
            try:
                await self.load(module_id)
            except Exception as error:
                failures[module_id] = error

        loaded = len(self.modules)
        self.logger.info(f"Loaded command modules from {root} ({loaded} loaded, {len(failures)} failed)")
        return failures

    async def add(self, constructor: CommandConstructor, module_id: str) -> Command:
        """
        Construct and register a single command under a module id.

        Args:
            constructor: Command class or factory taking the client
            module_id: Module to record the command's names under

        Returns:
            The registered command
        """
        async with self._lock:
            command = await self._build(constructor, module_id)
            self._insert([command], module_id)
            return command

    async def _load_reported(self, module_id: str) -> List[Command]:
        try:
            commands = await self._load(module_id)
        except ModuleLoadError:
            raise
        except Exception as error:
            self.logger.error(f"Failed to load command module '{module_id}': {error}")
            if self.monitoring:
                self.monitoring.record_load_failure(module_id, error)
            raise

        if self.monitoring:
            self.monitoring.clear_load_failure(module_id)
        return commands

    async def _load(self, module_id: str) -> List[Command]:
        if module_id in self.modules:
            raise AlreadyLoadedError(module_id)

        module = self.module_source.import_module(module_id)
        try:
            constructors = self.module_source.exported_commands(module, module_id)
            commands = []
            for constructor in constructors:
                commands.append(await self._build(constructor, module_id))
            self._insert(commands, module_id)
        except BaseException:
            self.module_source.evict(module_id)
            raise

        self.logger.info(f"Loaded module '{module_id}': {', '.join(c.name for c in commands) or 'no commands'}")
        return commands

    def _unload(self, module_id: str) -> None:
        names = self.modules.get(module_id)
        if names is None:
            raise NotLoadedError(module_id)

        for name in names:
            self.aliases.pop(name, None)
            self.commands.pop(name, None)

        del self.modules[module_id]
        self.module_source.evict(module_id)
        self.logger.info(f"Unloaded module '{module_id}'")

    async def _build(self, constructor: CommandConstructor, module_id: str) -> Command:
        try:
            command = constructor(self.client)
        except ConfigurationError as error:
            raise ConfigurationError(f"Module '{module_id}': {error}") from error

        if not isinstance(command, Command):
            raise ConfigurationError(f"Module '{module_id}' produced {command!r}, not a Command")

        await command.init()

        command.name = (command.name or getattr(constructor, "__name__", "")).lower()
        self._validate(command, module_id)
        return command

    def _validate(self, command: Command, module_id: str, parent: Optional[str] = None) -> None:
        label = f"{parent} {command.name}" if parent else command.name

        if not command.name:
            raise ConfigurationError(f"A command in module '{module_id}' has no name")
        if not command.overview:
            raise ConfigurationError(
                f"Command '{label}' in module '{module_id}' is missing 'overview' property"
            )
        if not callable(command.main):
            raise ConfigurationError(
                f"Command '{label}' in module '{module_id}' is missing 'main' method"
            )

        try:
            command.requirements
            command.option_schema
        except ConfigurationError as error:
            raise ConfigurationError(f"Command '{label}' in module '{module_id}': {error}") from error

        for subcommand in command.subcommands:
            self._validate(subcommand, module_id, label)

    def _insert(self, commands: Sequence[Command], module_id: str) -> None:
        # Check every name first so a module registers fully or not at all
        taken = set(self.commands) | set(self.aliases)
        for command in commands:
            for key in [command.name, *command.aliases]:
                if key in taken:
                    raise ConfigurationError(
                        f"Name '{key}' of command '{command.name}' in module '{module_id}' is already registered"
                    )
                taken.add(key)

        names = self.modules.setdefault(module_id, [])
        for command in commands:
            self.commands[command.name] = command
            names.append(command.name)

            for alias in command.aliases:
                self.aliases[alias] = command
                names.append(alias)

            self.logger.debug(f"Registered command: {command.name}")

    # Lookup

    def get(self, name: str) -> Optional[Command]:
        """
        Get a command by name, falling back to aliases.

        Args:
            name: Command name or alias

        Returns:
            Command or None if not found
        """
        normalized = name.lower()
        return self.commands.get(normalized) or self.aliases.get(normalized)

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def resolve(self, name: str, args: Sequence[str]) -> Optional[Command]:
        """
        Find a command and descend its subcommand tree.

        Each argument that names a subcommand of the current command moves
        the descent into it; other arguments are skipped.

        Args:
            name: Command name or alias
            args: Positional arguments

        Returns:
            The deepest matched command, or None if the name is unknown
        """
        command = self.get(name)
        if command is None:
            return None

        for arg in args:
            subcommand = command.get_subcommand(arg)
            if subcommand is not None:
                command = subcommand

        return command

    # Enumeration

    def for_each(self, callback: Callable[[Command, str], Any]) -> None:
        for name, command in list(self.commands.items()):
            callback(command, name)

    def filter(self, predicate: Callable[[Command, str], bool]) -> List[Command]:
        return [command for name, command in self.items() if predicate(command, name)]

    def items(self) -> List[Tuple[str, Command]]:
        return list(self.commands.items())

    @property
    def categories(self) -> List[str]:
        """Categories that have at least one command, in registration order."""
        found: List[str] = []
        for command in self.commands.values():
            if command.category and command.category not in found:
                found.append(command.category)
        return found

    def commands_by_category(self) -> List[Tuple[Optional[str], List[Command]]]:
        """
        Group commands by category.

        Returns:
            (category, commands) pairs; commands without a category are
            grouped last under None
        """
        groups: List[Tuple[Optional[str], List[Command]]] = []
        for category in [*self.categories, None]:
            members = [
                command
                for command in self.commands.values()
                if (command.category or None) == category
            ]
            groups.append((category, members))
        return groups

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self.commands.values()))

    def __len__(self) -> int:
        return len(self.commands)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)
