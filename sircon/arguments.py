"""Argument and option formats, parsing of typed values and of command lines."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sircon.colors import resolve_color
from sircon.shortcut_parser import ParsedShortcut, parse_shortcut

_QUOTES = ("'", '"')


class ArgumentError(ValueError):
    """A value that does not match the expected argument format."""


class ArgType(enum.Enum):
    COLOR = "color"
    PATH = "path"
    SHORTCUT = "shortcut"
    LOGICAL = "logical"
    INT = "int"
    STRING = "string"


@dataclass
class ArgumentFormat:
    """The expected type of an argument or option, with its constraints and default."""

    kind: ArgType = ArgType.COLOR
    default: str | None = None
    background: bool = False
    path_ends_with: str = ""
    path_filename: str = ""
    path_exists: bool = False
    path_parent_exists: bool = False
    path_absolute: bool = False
    freeform_start: str = ""
    int_positive: bool = False
    suggest: Callable[..., Any] | None = field(default=None, compare=False)
    hook: Callable[[ParsedArg], None] | None = field(default=None, compare=False)

    def type_verbose(self) -> str:
        return self.kind.value

    def has_default(self) -> bool:
        return self.default is not None


@dataclass
class ParsedArg:
    """A value parsed according to an :class:`ArgumentFormat`."""

    text: str = ""
    kind: ArgType | None = None
    color: str = ""
    path: Path | None = None
    shortcut: ParsedShortcut | None = None
    logical: bool = False
    number: int = 0
    is_default: bool = False

    @property
    def is_unset(self) -> bool:
        return self.kind is None


@dataclass(frozen=True)
class CommandArg:
    """One argument of a command line, with the spaces that follow it."""

    text: str
    quoted: bool = False
    trailing_space: str = ""

    def full_string(self) -> str:
        return self.text + self.trailing_space


def _validate_path(value: str, fmt: ArgumentFormat) -> str:
    path = Path(value)
    if fmt.path_exists and not path.exists():
        raise ArgumentError(f'The path should exist but "{value}" does not')
    if fmt.path_parent_exists and not path.parent.exists():
        raise ArgumentError(
            'The parent of the path should exist but, when setting '
            f'"{value}"\nThe path "{path.parent}" does not exist.'
        )
    if fmt.path_filename and path.name != fmt.path_filename:
        raise ArgumentError(
            "The path should end with the following file name: "
            f'"{fmt.path_filename}"\nProblem: this is not the case for "{value}"'
        )
    if fmt.path_ends_with and not value.endswith(fmt.path_ends_with):
        raise ArgumentError(
            "The path should end with the following string: "
            f'"{fmt.path_ends_with}"\nProblem: this is not the case for "{value}".'
        )
    if fmt.path_absolute:
        return str(path.absolute())
    return value


def _validate_int(value: str, fmt: ArgumentFormat) -> None:
    if not value:
        raise ArgumentError("We expect an integer but the input is empty.")
    negative = value.startswith("-")
    if value == "-":
        raise ArgumentError("We expect an integer but the input is equal to '-'.")
    for pos, char in enumerate(value):
        if pos == 0 and negative:
            continue
        if not "0" <= char <= "9":
            raise ArgumentError(
                f'We expect an integer, hence the input "{value}" is incorrect.\n'
                f"The character in position {pos}, [{char}], is invalid."
            )
    if fmt.int_positive and negative:
        raise ArgumentError(
            f'We expect a positive integer, but the input "{value}" is negative.'
        )


def validate_value(value: str, fmt: ArgumentFormat) -> str:
    """Check a value against a format and return its cleaned form."""
    if fmt.kind is ArgType.COLOR:
        try:
            resolve_color(value)
        except ValueError as exc:
            raise ArgumentError(str(exc)) from None
        return value.lower()
    if fmt.kind is ArgType.PATH:
        return _validate_path(value, fmt)
    if fmt.kind is ArgType.SHORTCUT:
        shortcut = parse_shortcut(value)
        if not shortcut.is_valid():
            raise ArgumentError(shortcut.error)
        return value
    if fmt.kind is ArgType.LOGICAL:
        if value not in ("true", "false"):
            raise ArgumentError(
                "This option must be logical (i.e. `true` or `false`), "
                f"hence `{value}` is invalid."
            )
        return value
    if fmt.kind is ArgType.INT:
        _validate_int(value, fmt)
    return value


def parse_arg(value: str, fmt: ArgumentFormat, check: bool = False) -> ParsedArg:
    """Parse a value according to a format, validating it first if ``check``."""
    clean = validate_value(value, fmt) if check else value
    parsed = ParsedArg(text=value, kind=fmt.kind)
    try:
        if fmt.kind is ArgType.COLOR:
            parsed.color = resolve_color(clean, fmt.background)
        elif fmt.kind is ArgType.PATH:
            parsed.path = Path(clean)
        elif fmt.kind is ArgType.SHORTCUT:
            parsed.shortcut = parse_shortcut(clean)
        elif fmt.kind is ArgType.LOGICAL:
            parsed.logical = clean == "true"
        elif fmt.kind is ArgType.INT:
            parsed.number = int(clean)
    except ValueError as exc:
        raise ArgumentError(f"The value {value!r} could not be parsed as "
                            f"{fmt.type_verbose()}: {exc}") from None
    if fmt.hook is not None:
        fmt.hook(parsed)
    return parsed


def default_arg(fmt: ArgumentFormat) -> ParsedArg:
    """The parsed default value of a format."""
    if fmt.default is None:
        raise ArgumentError("The format has no default value.")
    try:
        parsed = parse_arg(fmt.default, fmt, check=True)
    except ArgumentError as exc:
        raise ArgumentError(
            "The default value for an argument (or option) could not be parsed.\n"
            f"The argument was of type:\n{fmt.type_verbose()}\n"
            f"The default value was:\n{fmt.default}\n{exc}"
        ) from None
    parsed.is_default = True
    return parsed


def _is_escaped(text: str, pos: int) -> bool:
    count = 0
    pos -= 1
    while pos >= 0 and text[pos] == "\\":
        count += 1
        pos -= 1
    return count % 2 == 1


def parse_command_arguments(text: str) -> list[CommandArg]:
    """Split a command line into arguments.

    An empty trailing argument is added when the line ends with a space or a
    closing quote, as the cursor then stands outside the last argument.
    """
    n = len(text)
    i = 0
    while i < n and text[i].isspace():
        i += 1

    args: list[CommandArg] = []
    cursor_outside = True
    while i < n:
        quoted = text[i] in _QUOTES
        start = i
        if quoted:
            quote = text[i]
            i += 1
            start = i
            while i < n and not (text[i] == quote and not _is_escaped(text, i)):
                i += 1
            arg = text[start:i]
            if i < n:
                i += 1
            else:
                cursor_outside = False
        else:
            while i < n and text[i] != " ":
                i += 1
            arg = text[start:i]
        space_start = i
        while i < n and text[i] == " ":
            i += 1
        args.append(CommandArg(arg, quoted, text[space_start:i]))

    if cursor_outside and not (n > 0 and (text[-1] == " " or text[-1] in _QUOTES)):
        cursor_outside = False
    if cursor_outside:
        args.append(CommandArg(""))
    return args


def arg_signature(formats: Iterable[ArgumentFormat]) -> str:
    """Signature such as ``int? logical``: ``?`` marks arguments with a default."""
    return " ".join(
        fmt.type_verbose() + ("?" if fmt.has_default() else "") for fmt in formats
    )