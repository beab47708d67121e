"""
Module Source
Imports command modules by id and evicts them for reloads
"""

import hashlib
import importlib
import importlib.util
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, List

from chatcmd.commands.exceptions import ConfigurationError
from chatcmd.utils.logger import LoggerMixin

# Attribute a command module exports: one constructor or a list of them
EXPORT_NAME = "COMMANDS"

LOADED_PREFIX = "chatcmd_loaded"


class ModuleSource(LoggerMixin):
    """
    Resolve module ids to Python modules.

    A module id is either a path to a ``.py`` file or a dotted module name.
    File modules are executed under a private name derived from their path,
    so evicting them and importing again always runs fresh code.
    """

    def __init__(self):
        super().__init__("ModuleSource")
        self._imported: Dict[str, str] = {}

    @staticmethod
    def is_path(module_id: str) -> bool:
        return module_id.endswith(".py") or "/" in module_id or "\\" in module_id

    @staticmethod
    def _module_name(path: Path) -> str:
        digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
        stem = re.sub(r"\W", "_", path.stem)
        return f"{LOADED_PREFIX}_{stem}_{digest}"

    def import_module(self, module_id: str) -> ModuleType:
        """
        Import the module behind an id.

        Raises:
            ImportError: If the module cannot be found
        """
        if not self.is_path(module_id):
            module = importlib.import_module(module_id)
            self._imported[module_id] = module.__name__
            return module

        path = Path(module_id).resolve()
        if not path.is_file():
            raise ImportError(f"No command module at {path}")

        name = self._module_name(path)
        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot import command module at {path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(name, None)
            raise

        self._imported[module_id] = name
        self.debug(f"Imported {module_id} as {name}")
        return module

    def evict(self, module_id: str) -> None:
        """Forget a previously imported module so the next import is fresh."""
        name = self._imported.pop(module_id, None)
        if name is None:
            return
        # Another id (relative vs absolute path) may share the same file
        if name in self._imported.values():
            self.debug(f"Kept {name}, still imported by another id")
            return
        sys.modules.pop(name, None)
        importlib.invalidate_caches()
        self.debug(f"Evicted {module_id}")

    @staticmethod
    def exported_commands(module: ModuleType, module_id: str) -> List[Callable[..., Any]]:
        """
        Read the command constructors a module exports.

        Raises:
            ConfigurationError: If the module exports nothing usable
        """
        exported = getattr(module, EXPORT_NAME, None)
        if exported is None:
            raise ConfigurationError(f"Command module '{module_id}' has no {EXPORT_NAME} export")

        constructors = list(exported) if isinstance(exported, (list, tuple)) else [exported]
        for constructor in constructors:
            if not callable(constructor):
                raise ConfigurationError(
                    f"Command module '{module_id}' exports a non-callable: {constructor!r}"
                )
        return constructors

    @staticmethod
    def discover(root: str, deep: bool = False) -> List[str]:
        """
        List command module files under a directory.

        Files whose names start with an underscore are skipped.

        Args:
            root: Directory to search
            deep: Whether to search nested directories too

        Returns:
            Sorted file paths
        """
        directory = Path(root)
        if not directory.is_dir():
            raise FileNotFoundError(f"Command directory not found: {root}")

        pattern = "**/*.py" if deep else "*.py"
        return sorted(
            str(path)
            for path in directory.glob(pattern)
            if path.is_file() and not path.name.startswith("_")
        )
