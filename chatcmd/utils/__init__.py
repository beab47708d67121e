"""
Utility modules for the command engine.
"""

from .logger import LoggerMixin, get_logger, setup_logging
from .discord import DiscordUtils
from .monitoring import Monitoring
from .error_handler import ErrorHandler
from .parsing import parse_args, parse_opts, tokenize
from .prefix import PrefixMatch, PrefixMatcher, match_prefix

__all__ = [
    "LoggerMixin",
    "get_logger",
    "setup_logging",
    "DiscordUtils",
    "Monitoring",
    "ErrorHandler",
    "parse_args",
    "parse_opts",
    "tokenize",
    "PrefixMatch",
    "PrefixMatcher",
    "match_prefix",
]
