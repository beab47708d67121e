"""
Prefix Matching
Decides whether message text starts with one of the configured prefixes
"""

import re
from typing import Any, Callable, Dict, List, Optional, Pattern, Sequence, Union

Prefix = Union[str, Pattern[str]]


class PrefixMatch:
    """Result of a prefix test: no match, match, or match with metadata."""

    def __init__(
        self,
        matched: bool,
        remainder: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
    ):
        self.matched = matched
        self.remainder = remainder
        self.meta = meta

    def __bool__(self) -> bool:
        return self.matched

    def __repr__(self) -> str:
        return f"PrefixMatch(matched={self.matched!r}, remainder={self.remainder!r}, meta={self.meta!r})"


NO_MATCH = PrefixMatch(False)

PrefixParser = Callable[[str, Sequence[Prefix]], PrefixMatch]


def match_prefix(content: str, prefixes: Sequence[Prefix]) -> PrefixMatch:
    """
    Test content against prefixes in their declared order.

    Literal prefixes match when the content starts with them. Pattern
    prefixes match when they are found in the content and their first
    capture group is non-empty; named groups become the match metadata.

    Args:
        content: Raw message text
        prefixes: Ordered literal strings and compiled patterns

    Returns:
        PrefixMatch for the first prefix that matches, or NO_MATCH
    """
    for prefix in prefixes:
        if isinstance(prefix, str):
            if content.startswith(prefix):
                return PrefixMatch(True, content[len(prefix):].strip())
            continue

        match = prefix.search(content)
        if match and match.group(1):
            meta = {key: value for key, value in match.groupdict().items() if value is not None}
            return PrefixMatch(True, match.group(1).strip(), meta or None)

    return NO_MATCH


class PrefixMatcher:
    """Ordered prefix list with an optional replacement parser."""

    def __init__(self, prefixes: Sequence[Prefix], parser: Optional[PrefixParser] = None):
        self.prefixes: List[Prefix] = []
        self.parser = parser or match_prefix

        for prefix in prefixes:
            self.add(prefix)

    def add(self, prefix: Prefix) -> None:
        """
        Append a prefix, keeping it lowest in priority.

        Raises:
            ValueError: If a pattern prefix has no capture group
        """
        if not isinstance(prefix, str):
            if not isinstance(prefix, re.Pattern):
                raise ValueError(f"Unsupported prefix: {prefix!r}")
            if prefix.groups < 1:
                raise ValueError(f"Prefix pattern {prefix.pattern!r} needs a capture group")
        elif not prefix:
            raise ValueError("Literal prefixes cannot be empty")

        self.prefixes.append(prefix)

    def match(self, content: str) -> PrefixMatch:
        return self.parser(content, self.prefixes)


def compile_pattern(pattern: str) -> Pattern[str]:
    """Compile a prefix pattern, requiring one capture group."""
    compiled = re.compile(pattern)
    if compiled.groups < 1:
        raise ValueError(f"Prefix pattern {pattern!r} needs a capture group")
    return compiled
