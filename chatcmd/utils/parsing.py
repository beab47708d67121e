"""
Parsing Utilities
Quote-aware tokenizing, command splitting and option parsing
"""

import re
from typing import Any, Dict, List, NamedTuple, Optional

QUOTES = ('"', "'")
SEPARATOR = " "
ESCAPE = "\\"

IS_QUOTED = re.compile(r"^([\"']).*\1$", re.DOTALL)
INTEGER_REGEX = re.compile(r"^[-+]?\d+$")
NUMBER_REGEX = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:e[-+]?\d+)?$", re.IGNORECASE)
SHORT_VALUE_REGEX = re.compile(r"^-?\d+(?:\.\d*)?(?:e-?\d+)?$", re.IGNORECASE)


class ParsedArguments(NamedTuple):
    """Command token, positional arguments and raw suffix of a message."""

    cmd: str
    args: List[str]
    suffix: str


class ParsedOptions(NamedTuple):
    """Named options and the operands left over after extracting them."""

    options: Dict[str, Any]
    operands: List[str]


def split_quoted(text: str) -> List[str]:
    """
    Split text on unescaped spaces, keeping quoted sequences together.

    A quote only groups text when a matching closing quote follows it;
    otherwise it is kept as a literal character (so ``I'm`` survives).
    Quotes are left in place and empty tokens are kept.

    Args:
        text: Text to split

    Returns:
        Raw tokens
    """
    tokens: List[str] = []
    current: List[str] = []
    i = 0

    while i < len(text):
        char = text[i]

        if char == ESCAPE and i + 1 < len(text) and text[i + 1] in (SEPARATOR, ESCAPE) + QUOTES:
            current.append(text[i + 1])
            i += 2
            continue

        if char in QUOTES:
            end = text.find(char, i + 1)
            if end != -1:
                current.append(text[i:end + 1])
                i = end + 1
                continue

        if char == SEPARATOR:
            tokens.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    tokens.append("".join(current))
    return tokens


def strip_quotes(token: str) -> str:
    """Remove surrounding quotes when one quote type wraps the whole token."""
    if IS_QUOTED.match(token):
        return token[1:-1]
    return token


def tokenize(text: str) -> List[str]:
    """
    Tokenize text into arguments.

    Example:
        tokenize('bar "foo bar" baz') -> ['bar', 'foo bar', 'baz']

    Args:
        text: Text to tokenize

    Returns:
        Tokens with quotes stripped and empty tokens discarded
    """
    tokens = (strip_quotes(token) for token in split_quoted(text))
    return [token for token in tokens if token]


def parse_args(text: str) -> ParsedArguments:
    """
    Split matched message text into command, arguments and suffix.

    Args:
        text: Message text with its prefix already removed

    Returns:
        ParsedArguments with the lowercase command token, positional
        arguments and the raw text after the command token
    """
    parts = text.strip().split(None, 1)
    if not parts:
        return ParsedArguments("", [], "")

    cmd = parts[0].lower()
    suffix = parts[1].strip() if len(parts) > 1 else ""

    return ParsedArguments(cmd, tokenize(suffix), suffix)


def _coerce(value: str, name: str, schema: Any) -> Any:
    if name in schema.booleans:
        lowered = value.lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        return value
    if name in schema.strings:
        return value
    if INTEGER_REGEX.match(value):
        return int(value)
    if NUMBER_REGEX.match(value):
        return float(value)
    return value


class _OptionCollector:
    """Accumulates flag values while honoring the schema's unknown-flag policy."""

    def __init__(self, schema: Any):
        self.schema = schema
        self.options: Dict[str, Any] = {name: False for name in schema.booleans}
        self.options.update(schema.defaults)
        self._seen: Dict[str, bool] = {}

    def set(self, name: str, value: Any, raw: str) -> None:
        if not self.schema.is_known(name) and self.schema.unknown is not None:
            if self.schema.unknown(raw) is False:
                return

        if isinstance(value, str):
            value = _coerce(value, name, self.schema)

        if self._seen.get(name):
            existing = self.options[name]
            if isinstance(existing, list):
                existing.append(value)
            else:
                self.options[name] = [existing, value]
        else:
            self.options[name] = value
            self._seen[name] = True

    def wants_value(self, name: str, next_token: Optional[str]) -> bool:
        if next_token is None or name in self.schema.booleans:
            return False
        return not next_token.startswith("-") or bool(NUMBER_REGEX.match(next_token))


def parse_opts(text: str, schema: Any) -> ParsedOptions:
    """
    Parse ``--flag`` style options out of text.

    Args:
        text: Message text with its prefix removed
        schema: OptionSchema describing boolean/string flags, defaults and
            the unknown-flag policy

    Returns:
        ParsedOptions with the option mapping and residual operands
    """
    tokens = tokenize(text)
    collector = _OptionCollector(schema)
    operands: List[str] = []
    i = 0

    while i < len(tokens):
        token = tokens[i]
        next_token = tokens[i + 1] if i + 1 < len(tokens) else None

        if token == "--":
            operands.extend(tokens[i + 1:])
            break

        if token.startswith("--") and len(token) > 2:
            body = token[2:]
            if "=" in body:
                name, value = body.split("=", 1)
                collector.set(name, value, token)
            elif body.startswith("no-") and len(body) > 3:
                collector.set(body[3:], False, token)
            elif _bool_literal_follows(collector, body, next_token):
                collector.set(body, next_token, token)
                i += 1
            elif collector.wants_value(body, next_token):
                collector.set(body, next_token, token)
                i += 1
            else:
                collector.set(body, "" if body in schema.strings else True, token)

        elif token.startswith("-") and len(token) > 1 and not NUMBER_REGEX.match(token):
            letters = token[1:]
            consumed_rest = False

            for j, letter in enumerate(letters[:-1]):
                rest = letters[j + 1:]
                if rest.startswith("="):
                    collector.set(letter, rest[1:], token)
                    consumed_rest = True
                    break
                if letter.isalpha() and SHORT_VALUE_REGEX.match(rest):
                    collector.set(letter, rest, token)
                    consumed_rest = True
                    break
                collector.set(letter, "" if letter in schema.strings else True, token)

            if not consumed_rest:
                last = letters[-1]
                if _bool_literal_follows(collector, last, next_token):
                    collector.set(last, next_token, token)
                    i += 1
                elif collector.wants_value(last, next_token):
                    collector.set(last, next_token, token)
                    i += 1
                else:
                    collector.set(last, "" if last in schema.strings else True, token)

        else:
            operands.append(token)

        i += 1

    return ParsedOptions(collector.options, operands)


def _bool_literal_follows(collector: _OptionCollector, name: str, next_token: Optional[str]) -> bool:
    """Whether a boolean flag is followed by an explicit true/false value."""
    return (
        name in collector.schema.booleans
        and next_token is not None
        and next_token.lower() in ("true", "false")
    )
