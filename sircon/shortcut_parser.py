"""Parsing of keyboard shortcut definitions into sequences of editor actions.

A shortcut is written as a mix of commands within angle brackets, such as
``<move_x: leftmost>``, and text to insert, such as ``head(_all_)`` or
``" %in% "``. Conditions are written ``<if: cond> ... <else> ... <endif>``.
"""

from __future__ import annotations

import difflib
import enum
from dataclasses import dataclass, field

IF_CONDITIONS: tuple[str, ...] = (
    "empty", "line_empty", "line_matches", "one_liner",
    "is_letter_left", "is_letter_right", "is_punct_left", "is_punct_right",
    "any_selection", "y_top", "y_bottom",
    "x_leftmost", "x_rightmost",
)

CONDITION_COMMANDS: tuple[str, ...] = (
    "if", "if not", "and if", "and if not", "or if", "or if not", "else if",
    "else if not", "else", "endif",
)

SHORTCUT_COMMANDS: dict[str, tuple[str, ...]] = {
    "select": ("all", "context"),
    "move_x": ("left", "right", "leftmost", "rightmost", "word_left", "word_right"),
    "move_y": ("down", "up", "top", "bottom"),
    "delete": ("left", "right", "line", "word_left", "word_right", "all_left", "all_right"),
    "selection": ("stash", "pop"),
    "command": ("stash", "pop", "clear"),
    "copy": (),
    "paste": (),
    "cut": (),
    "undo": (),
    "redo": (),
    "newline": (),
    "insert": (),
    "enter": (),
    "run": (),
    "run_no_echo": (),
    "clear_screen": (),
    "debug": (),
    "if": IF_CONDITIONS,
    "else if": IF_CONDITIONS,
    "else": (),
    "endif": (),
}

FREEFORM_VALUES: dict[str, str] = {
    "left": "int",
    "right": "int",
    "word_left": "int",
    "word_right": "int",
    "up": "int",
    "down": "int",
    "insert": "string",
    "run": "string",
    "run_no_echo": "string",
    "line_matches": "string",
}

_HIGHLIGHT_COMMAND = "\033[38;2;255;20;147m"
_HIGHLIGHT_ERROR = "\033[38;2;255;0;0m"


class ActionType(enum.Enum):
    COMMAND = "command"
    CONDITION = "condition"
    UNSET = "unset"


class SuggestType(enum.Enum):
    """What the autocompletion should propose at the point parsing stopped."""

    DEFAULT = "default"
    COMMAND = "command"
    VALUE = "value"
    CONDITION_FIRST = "condition_first"
    CONDITION = "condition"
    FREEFORM_STRING = "freeform_string"
    FREEFORM_INT = "freeform_int"


class ShortcutError(ValueError):
    """An invalid shortcut definition."""


@dataclass(frozen=True)
class ShortcutAction:
    """One step of a shortcut: a command to run or a condition to test."""

    name: str = ""
    value: str = ""
    freeform: str = ""

    @property
    def kind(self) -> ActionType:
        if not self.name:
            return ActionType.UNSET
        if self.name in CONDITION_COMMANDS:
            return ActionType.CONDITION
        return ActionType.COMMAND

    def is_if(self) -> bool:
        return self.name.startswith("if")

    def is_endif(self) -> bool:
        return self.name == "endif"

    def is_condition(self) -> bool:
        return self.kind is ActionType.CONDITION

    def is_and_or(self) -> bool:
        return self.is_condition() and self.name.startswith(("and", "or"))

    def is_and(self) -> bool:
        return self.is_condition() and self.name.startswith("and")

    def is_or(self) -> bool:
        return self.is_condition() and self.name.startswith("or")

    def is_else(self) -> bool:
        return self.name.startswith("else")

    def is_else_no_if(self) -> bool:
        return self.name == "else"

    def is_else_if(self) -> bool:
        return self.name.startswith("else if")

    def is_else_endif(self) -> bool:
        return self.is_else() or self.is_endif()

    def raw_command(self) -> str:
        """The action written back in shortcut syntax."""
        res = "<" + self.name
        if self.value:
            res += ": " + self.value
            if self.freeform:
                res += ": " + self.freeform
        return res + ">"


@dataclass(frozen=True)
class ParsedShortcut:
    """Result of parsing a shortcut, with the context needed for completion."""

    actions: tuple[ShortcutAction, ...] = ()
    error: str = ""
    valid_context: bool = False
    cmd: str = ""
    value: str = ""
    freeform: str = ""
    i_context: int = 0
    is_first_condition: bool = False
    suggest_type: SuggestType = SuggestType.DEFAULT

    def is_valid(self) -> bool:
        return not self.error

    def __len__(self) -> int:
        return len(self.actions)


def _bquote(text: str) -> str:
    return f"`{text}`"


def _dquote(text: str) -> str:
    return f'"{text}"'


def _enumerate(items, conjunction: str = "and") -> str:
    quoted = [_bquote(item) for item in items]
    if len(quoted) <= 1:
        return "".join(quoted)
    return ", ".join(quoted[:-1]) + f" {conjunction} " + quoted[-1]


def _printable(text: str) -> str:
    return text.replace("\r", "\\r").replace("\n", "\\n").replace("\t", "\\t")


def _is_escaped(text: str, pos: int) -> bool:
    count = 0
    pos -= 1
    while pos >= 0 and text[pos] == "\\":
        count += 1
        pos -= 1
    return count % 2 == 1


def _is_int(text: str) -> bool:
    digits = text[1:] if text.startswith("-") else text
    return digits.isdigit() and digits.isascii()


def _split_on(text: str, marker: str) -> tuple[str, str]:
    left, _, right = text.partition(marker)
    return left, right


@dataclass
class _Parser:
    text: str
    i: int = 0
    actions: list[ShortcutAction] = field(default_factory=list)
    cmd: str = ""
    value: str = ""
    freeform: str = ""
    i_start: int = 0
    i_context: int = 0
    is_first_condition: bool = False
    suggest: SuggestType = SuggestType.DEFAULT
    valid_context: bool = False

    @property
    def n(self) -> int:
        return len(self.text)

    def char(self) -> str:
        return self.text[self.i] if self.i < self.n else ""

    def skip_ws(self) -> None:
        while self.i < self.n and self.text[self.i].isspace():
            self.i += 1

    def extract_word(self) -> str:
        self.skip_ws()
        start = self.i
        while self.i < self.n and (self.text[self.i].isalnum() or self.text[self.i] == "_"):
            self.i += 1
        word = self.text[start:self.i]
        self.skip_ws()
        return word

    def until_unescaped(self, stop: str) -> str:
        start = self.i
        while self.i < self.n and not (
            self.text[self.i] == stop and not _is_escaped(self.text, self.i)
        ):
            self.i += 1
        return self.text[start:self.i]

    def mark(self, text: str | None = None) -> str:
        text = self.text if text is None else text
        pos = min(self.i, len(text))
        start = min(self.i_start, pos)
        marked = text[:pos] + _HIGHLIGHT_ERROR + text[pos:]
        marked = marked[:start] + _HIGHLIGHT_COMMAND + marked[start:]
        return _bquote(marked)

    def fail(self, *parts: str, suggest: SuggestType | None = None) -> None:
        if suggest is not None:
            self.suggest = suggest
        raise ShortcutError("".join(parts))

    def not_closed(self, suggest: SuggestType | None = None) -> None:
        self.fail(
            'The current shortcut is invalid. Each shortcut command should be contained within "<>".\n',
            "Problem: in the shortcut ", self.mark(), "\n",
            "=> the command ", _dquote(self.cmd), ' does not have a closing ">"',
            suggest=suggest,
        )

    def run(self) -> None:
        while self.i < self.n:
            self.suggest = SuggestType.DEFAULT
            self.skip_ws()
            if self.i >= self.n:
                break
            self.i_start = self.i
            if self.char() == "<":
                self.parse_command()
            else:
                self.parse_insertion()
        self.valid_context = True
        self.check_balance()

    def parse_command(self) -> None:
        self.i_context = self.i + 1
        self.cmd = self.value = self.freeform = ""
        self.i += 1
        start = self.i
        while self.i < self.n and self.text[self.i] not in ">:":
            self.i += 1
        self.cmd = self.text[start:self.i]
        if self.i == self.n:
            self.not_closed(SuggestType.COMMAND)

        self.cmd = cmd = self.cmd.strip()
        if not cmd:
            self.fail(
                'The current shortcut is invalid. Each shortcut command should be contained within "<>".\n',
                "Problem: in the shortcut ", self.mark(), "\n",
                "=> the command is empty",
                suggest=SuggestType.COMMAND,
            )

        if cmd in ("if", "else if"):
            self.parse_condition()
            return

        if cmd not in SHORTCUT_COMMANDS:
            message = (
                "The current shortcut is invalid.\n"
                f"Problem: in the shortcut {self.mark()}\n"
                f"=> the command {_dquote(cmd)} does not exist"
            )
            matches = difflib.get_close_matches(cmd, list(SHORTCUT_COMMANDS), n=3, cutoff=0.6)
            if matches:
                message += "\nDid you mean " + _enumerate(matches, "or") + "?"
            self.fail(message, suggest=SuggestType.COMMAND)

        valid_values = SHORTCUT_COMMANDS[cmd]

        if cmd in FREEFORM_VALUES:
            text = self.parse_freeform(cmd, FREEFORM_VALUES[cmd], SuggestType.COMMAND)
            if text is None:
                self.freeform = "1"
            else:
                self.value = text
        elif not valid_values:
            self.suggest = SuggestType.COMMAND
            if self.char() == ":":
                self.fail(
                    f"The current shortcut is invalid. The shortcut {cmd} does not accept options.\n",
                    "Problem: in the shortcut ", self.mark(), "\n",
                    f"=> option found for {cmd}. Simply write <{cmd}> instead.",
                )
        else:
            options = _enumerate(valid_values)
            if self.char() != ":":
                self.fail(
                    "The current shortcut is invalid. \n",
                    "Problem: in the shortcut ", self.mark(), "\n",
                    f"=> the command {cmd} has no option.\n",
                    "FYI, the valid options are: ", options,
                    suggest=SuggestType.COMMAND,
                )
            self.i += 1
            self.i_context = self.i
            self.value = self.extract_word()
            self.suggest = SuggestType.VALUE
            if self.value not in valid_values:
                self.fail(
                    "The current shortcut is invalid. \n",
                    "Problem: in the shortcut ", self.mark(), "\n",
                    f"=> the command {cmd} has no option",
                    _bquote(self.value) if self.value else "", ".\n",
                    "FYI, the valid options are: ", options,
                )
            self.skip_ws()
            if self.value in FREEFORM_VALUES:
                text = self.parse_freeform(
                    f"{cmd}: {self.value}", FREEFORM_VALUES[self.value], SuggestType.VALUE
                )
                self.freeform = "1" if text is None else text

        if self.char() != ">":
            self.not_closed()

        self.actions.append(ShortcutAction(cmd, self.value, self.freeform))
        self.i += 1

    def parse_freeform(self, label: str, kind: str, missing: SuggestType) -> str | None:
        """Read the free-form argument after a command; None means the int default."""
        form_int = f'"<{label}: int>".'
        form_string = f'"<{label}: {_dquote("string")}>".'
        if self.char() != ":":
            if kind == "int":
                self.suggest = SuggestType.FREEFORM_INT
                return None
            self.fail(
                f"The current shortcut is invalid. The command `{label}` must be of the form \n",
                form_string,
                "Problem: in the shortcut ", self.mark(), "\n",
                "=> there is no ':' following the command",
                suggest=missing,
            )

        self.i += 1
        self.skip_ws()
        self.i_context = self.i

        if kind == "string":
            self.suggest = SuggestType.FREEFORM_STRING
            if self.char() != '"':
                self.fail(
                    f"The current shortcut is invalid. The command `{label}` must be of the form \n",
                    form_string,
                    "Problem: in the shortcut ", self.mark(), "\n",
                    "=> there is no starting quote",
                )
            self.i += 1
            text = self.until_unescaped('"')
            if self.i == self.n:
                self.fail(
                    f"The current shortcut is invalid. The command `{label}` must be of the form \n",
                    form_string,
                    "Problem: in the shortcut ", self.mark(), "\n",
                    f"=> the quotes following {_bquote(label)} are not closed",
                )
            self.i += 1
            self.skip_ws()
            if "\n" in text:
                self.fail(
                    f"The current shortcut is invalid. The command `{label}` shall not contain newlines.",
                    "Problem: in the shortcut ", self.mark(_printable(self.text)), "\n",
                    f"=> the value for {_bquote(label)} ({_printable(text)}), contains a newline",
                )
            return text

        self.suggest = SuggestType.FREEFORM_INT
        text = self.until_unescaped(">").strip()
        if not _is_int(text):
            self.fail(
                f"The current shortcut is invalid. The command `{label}` must be of the form \n",
                form_int,
                "Problem: in the shortcut ", self.mark(), "\n",
                f"=> the integer in `{text}` could not be parsed",
            )
        return text

    def parse_condition(self) -> None:
        if self.char() != ":":
            self.fail(
                "The current shortcut is invalid. The command 'if' must be followed with a condition.\n",
                "ex: <if: one_liner and not x_rightmost> \n",
                "Problem: in the shortcut ", self.mark(), "\n",
                "=> there is no condition associated to the if",
                suggest=SuggestType.COMMAND,
            )
        self.i += 1
        self.i_context = self.i
        self.is_first_condition = True

        first = True
        is_not = is_and = is_or = False
        while self.i < self.n and self.char() != ">":
            kw = self.extract_word()
            position = SuggestType.CONDITION_FIRST if first else SuggestType.CONDITION

            if kw == "not":
                is_not = True
                self.i_context = self.i
            elif kw in ("and", "or"):
                if first:
                    self.fail(
                        f"The current shortcut is invalid. In `if`: the operator {_bquote(kw)} "
                        "is used to combine conditions.\n",
                        f"ex: <if: one_liner {kw} not x_rightmost> \n",
                        "Problem: in the shortcut ", self.mark(), "\n",
                        f"=> the operator {kw} cannot be placed before the first condition",
                        suggest=SuggestType.CONDITION_FIRST,
                    )
                is_and = kw == "and"
                is_or = kw == "or"
                self.i_context = self.i
            elif kw in IF_CONDITIONS:
                if not first and not is_and and not is_or:
                    self.fail(
                        "The current shortcut is invalid. In `if`: to combine different conditions, "
                        "you need to use `and` or `or`.\n",
                        "ex: <if: one_liner and x_rightmost> \n",
                        "Problem: in the shortcut ", self.mark(), "\n",
                        "=> use `and` or `or`",
                        suggest=SuggestType.CONDITION,
                    )
                freeform = ""
                if kw in FREEFORM_VALUES:
                    self.skip_ws()
                    if self.char() == ":":
                        self.i += 1
                        self.skip_ws()
                    self.i_context = self.i
                    if self.char() != '"':
                        self.fail(
                            f"The current shortcut is invalid. In `if`: the condition {_bquote(kw)} "
                            "must be followed with a value within double quotes.\n",
                            "Problem: in the shortcut ", self.mark(), "\n",
                            f"=> no double quotes found following {_bquote(kw)}",
                            suggest=position,
                        )
                    self.i += 1
                    freeform = self.until_unescaped('"')
                    if self.i == self.n:
                        self.fail(
                            f"The current shortcut is invalid. Problem in `if`: the condition {_bquote(kw)} "
                            "must be followed with a value within double quotes.\n",
                            "Problem: in the shortcut ", self.mark(), "\n",
                            f"=> the quotes following {_bquote(kw)} are not closed",
                            suggest=SuggestType.FREEFORM_STRING,
                        )
                    self.i += 1
                self.i_context = self.i

                name = self.cmd if first else ("and if" if is_and else "or if")
                if is_not:
                    name += " not"
                self.actions.append(ShortcutAction(name, kw, freeform))

                first = False
                is_not = is_and = is_or = False
                self.is_first_condition = False
            else:
                self.fail(
                    "Problem: in the shortcut ", self.mark(), "\n",
                    f"In `if`: the condition {_bquote(kw)} is invalid.\n",
                    "FYI, the valid conditions are: ", _enumerate(IF_CONDITIONS),
                    suggest=position,
                )

        if self.i == self.n:
            self.not_closed(SuggestType.CONDITION)
        self.i += 1

    def parse_insertion(self) -> None:
        self.i_context = self.i
        text, n = self.text, self.n
        if self.char() == '"':
            self.i += 1
            chars: list[str] = []
            while self.i < n and not (text[self.i] == '"' and not _is_escaped(text, self.i)):
                if text[self.i] == '"':
                    chars[-1] = '"'
                else:
                    chars.append(text[self.i])
                self.i += 1
            if self.i == n:
                self.fail(
                    "The current shortcut is invalid. When using quotes to insert text, "
                    "each open quote must be closed.\n",
                    "Problem: in the shortcut ", self.mark(), "\n",
                    "=> there is no closing quote",
                )
            while self.i < n and text[self.i] != "<":
                self.i += 1
            value = "".join(chars)
        else:
            start = self.i
            while self.i < n and text[self.i] != "<":
                self.i += 1
            value = text[start:self.i].strip()

        if "_sel_" in value:
            left, right = _split_on(value, "_sel_")
            self.actions += [
                ShortcutAction("selection", "stash"),
                ShortcutAction("insert", left),
                ShortcutAction("selection", "pop"),
                ShortcutAction("insert", right),
            ]
        elif "_all_" in value:
            left, right = _split_on(value, "_all_")
            self.actions += [
                ShortcutAction("move_x", "leftmost"),
                ShortcutAction("insert", left),
                ShortcutAction("move_x", "rightmost"),
                ShortcutAction("insert", right),
            ]
        else:
            self.actions.append(ShortcutAction("insert", value))

    def check_balance(self) -> None:
        n_open = 0
        for action in self.actions:
            if action.is_if():
                n_open += 1
            elif action.is_endif():
                n_open -= 1
            elif action.is_else() and n_open <= 0:
                self.fail(
                    "The shortcut is invalid. `else` statements must be placed after an 'if'.\n",
                    f"Problem: in the shortcut {_dquote(self.text)}\n",
                    f"=> the statement {action.raw_command()} does not follow an 'if'",
                )
        if n_open > 0:
            self.fail(
                "The shortcut is invalid. All 'if' statements must be closed with an <endif> .\n",
                f"Problem: in the shortcut {_dquote(self.text)}\n",
                "=> <endif> is missing",
            )
        if n_open < 0:
            self.fail(
                "The shortcut is invalid. The <endif> statement can only be used to close an 'if' statement.\n",
                f"Problem: in the shortcut {_dquote(self.text)}\n",
                "=> too many <endif>",
            )


def parse_shortcut(text: str) -> ParsedShortcut:
    """Parse a shortcut definition; errors are reported in the result's ``error``."""
    parser = _Parser(text)
    error = ""
    try:
        parser.run()
    except ShortcutError as exc:
        error = str(exc)
    return ParsedShortcut(
        actions=tuple(parser.actions),
        error=error,
        valid_context=parser.valid_context,
        cmd=parser.cmd,
        value=parser.value,
        freeform=parser.freeform,
        i_context=parser.i_context,
        is_first_condition=parser.is_first_condition,
        suggest_type=parser.suggest,
    )