"""
Command Definitions
Commands, subcommands and the schemas they declare
"""

from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Union

from chatcmd.commands.exceptions import ConfigurationError

# Scopes in the order they are evaluated and reported
PERMISSION_SCOPES = ("both", "author", "self")

PermissionValue = Union[str, Iterable[str], None]
CommandMain = Callable[[Any], Awaitable[Any]]
PreCheck = Callable[[Any], Union[bool, Awaitable[bool]]]


def _as_names(value: PermissionValue) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]

    names: List[str] = []
    for name in value:
        if name not in names:
            names.append(name)
    return names


class PermissionRequirements:
    """Permission names a command requires, per scope."""

    def __init__(
        self,
        bot: PermissionValue = None,
        author: PermissionValue = None,
        both: PermissionValue = None,
    ):
        self.scopes: Dict[str, List[str]] = {
            "both": _as_names(both),
            "author": _as_names(author),
            "self": _as_names(bot),
        }

    @classmethod
    def from_config(cls, config: Optional[Dict[str, PermissionValue]]) -> Optional["PermissionRequirements"]:
        """
        Build requirements from a ``{"self": ..., "author": ..., "both": ...}`` mapping.

        Raises:
            ConfigurationError: If the mapping names an unknown scope
        """
        if config is None:
            return None
        if isinstance(config, PermissionRequirements):
            return config

        unknown = sorted(set(config) - set(PERMISSION_SCOPES))
        if unknown:
            raise ConfigurationError(f"Unknown permission scope(s): {', '.join(unknown)}")

        return cls(bot=config.get("self"), author=config.get("author"), both=config.get("both"))

    def get(self, scope: str) -> List[str]:
        return self.scopes.get(scope, [])

    def __bool__(self) -> bool:
        return any(self.scopes.values())


class OptionSchema:
    """Declared flags for ``--option`` parsing."""

    def __init__(
        self,
        boolean: Optional[Iterable[str]] = None,
        string: Optional[Iterable[str]] = None,
        defaults: Optional[Dict[str, Any]] = None,
        unknown: Optional[Callable[[str], bool]] = None,
    ):
        self.booleans = frozenset(boolean or ())
        self.strings = frozenset(string or ())
        self.defaults = dict(defaults or {})
        self.unknown = unknown

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> Optional["OptionSchema"]:
        if config is None:
            return None
        if isinstance(config, OptionSchema):
            return config

        unknown_keys = sorted(set(config) - {"boolean", "string", "defaults", "unknown"})
        if unknown_keys:
            raise ConfigurationError(f"Unknown option schema key(s): {', '.join(unknown_keys)}")

        return cls(
            boolean=config.get("boolean"),
            string=config.get("string"),
            defaults=config.get("defaults"),
            unknown=config.get("unknown"),
        )

    def is_known(self, name: str) -> bool:
        return name in self.booleans or name in self.strings or name in self.defaults


class Command:
    """
    Base class for chat commands.

    Subclasses set ``overview`` and implement ``async def main(self, ctx)``.
    Optional metadata is declared as class attributes:

        class Ban(Command):
            overview = "Ban a member."
            aliases = ["b"]
            guild_only = True
            permissions = {"both": "ban_members"}
            opts = {"boolean": ["silent"], "string": ["reason"]}

            async def main(self, ctx):
                ...

    Subcommands are attached explicitly with ``add_subcommand`` or the
    ``subcommand`` decorator, typically from ``__init__`` or ``init``.
    """

    name: Optional[str] = None
    overview: str = ""
    description: Optional[str] = None
    usage: Optional[str] = None
    category: Optional[str] = None
    hidden: bool = False
    owner_only: bool = False
    guild_only: bool = False
    aliases: Sequence[str] = ()
    permissions: Optional[Dict[str, PermissionValue]] = None
    opts: Optional[Dict[str, Any]] = None
    pre_checks: Sequence[PreCheck] = ()
    main: Optional[CommandMain] = None

    def __init__(self, client: Any = None):
        self.client = client
        self.aliases = list(dict.fromkeys(alias.lower() for alias in self.aliases))
        self.pre_checks = list(self.pre_checks)
        self.subcommands: List["SubCommand"] = []

    async def init(self) -> None:
        """Optional async setup, run once before the command is registered."""

    @property
    def requirements(self) -> Optional[PermissionRequirements]:
        return PermissionRequirements.from_config(self.permissions)

    @property
    def option_schema(self) -> Optional[OptionSchema]:
        return OptionSchema.from_config(self.opts)

    def add_subcommand(self, subcommand: "SubCommand") -> "SubCommand":
        """
        Attach a subcommand.

        Raises:
            ConfigurationError: If a subcommand with the same name exists
        """
        if any(existing.name == subcommand.name for existing in self.subcommands):
            raise ConfigurationError(
                f"Command '{self.name}' already has a subcommand named '{subcommand.name}'"
            )
        self.subcommands.append(subcommand)
        return subcommand

    def subcommand(self, name: str, overview: str, **options: Any) -> Callable[[CommandMain], CommandMain]:
        """Decorator form of ``add_subcommand`` for a plain async function."""
        def decorator(func: CommandMain) -> CommandMain:
            self.add_subcommand(SubCommand(name, overview, func, **options))
            return func
        return decorator

    def get_subcommand(self, name: str) -> Optional["SubCommand"]:
        for subcommand in self.subcommands:
            if subcommand.name == name:
                return subcommand
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


class SubCommand(Command):
    """A named child of a command, built from a handler plus metadata."""

    def __init__(
        self,
        name: str,
        overview: str,
        main: CommandMain,
        *,
        description: Optional[str] = None,
        usage: Optional[str] = None,
        category: Optional[str] = None,
        hidden: bool = False,
        owner_only: bool = False,
        guild_only: bool = False,
        aliases: Optional[Sequence[str]] = None,
        permissions: Optional[Dict[str, PermissionValue]] = None,
        opts: Optional[Dict[str, Any]] = None,
        pre_checks: Optional[Sequence[PreCheck]] = None,
    ):
        self.name = name.lower() if name else ""
        self.overview = overview
        self.main = main
        self.description = description
        self.usage = usage
        self.category = category
        self.hidden = hidden
        self.owner_only = owner_only
        self.guild_only = guild_only
        self.aliases = aliases or ()
        self.permissions = permissions
        self.opts = opts
        self.pre_checks = pre_checks or ()
        super().__init__()
