"""Completion suggestions for writing shortcut definitions."""

from __future__ import annotations

from dataclasses import dataclass

from sircon.shortcut_parser import FREEFORM_VALUES, IF_CONDITIONS, SHORTCUT_COMMANDS


@dataclass(frozen=True)
class Suggestion:
    """A completion candidate and how to place it in the line."""

    text: str
    append_left: str = ""
    append_right: str = ""
    cursor_shift: int = 0
    continues: bool = False


def command_suggestions(already_closed: bool) -> list[Suggestion]:
    """Candidates for a command name after ``<``, in alphabetical order."""
    closing = "" if already_closed else ">"
    result = []
    for cmd in sorted(SHORTCUT_COMMANDS):
        kind = FREEFORM_VALUES.get(cmd)
        if kind == "string":
            result.append(Suggestion(cmd + ': ""', append_right=closing,
                                     cursor_shift=-1 if already_closed else -2))
        elif kind is not None:
            result.append(Suggestion(cmd + ": ", append_right=closing))
        elif not SHORTCUT_COMMANDS[cmd]:
            result.append(Suggestion(cmd, append_right=closing))
        else:
            result.append(Suggestion(cmd + ": ", continues=True))
    return result


def condition_suggestions(already_closed: bool, is_first: bool, opening_if: bool) -> list[Suggestion]:
    """Candidates for a condition inside ``<if: ...>``, in alphabetical order."""
    conditions = list(IF_CONDITIONS)
    if not is_first:
        conditions += ["and", "or"]
    if already_closed:
        opening_if = False

    result = []
    for cond in sorted(conditions):
        if cond in FREEFORM_VALUES:
            text = cond + ': ""'
            if opening_if:
                result.append(Suggestion(text, " ", ">  <endif>", -11))
            elif not already_closed:
                result.append(Suggestion(text, " ", ">", -2))
            else:
                result.append(Suggestion(text, " ", "", -1))
        elif opening_if:
            result.append(Suggestion(cond, " ", ">  <endif>", -8))
        elif not already_closed:
            result.append(Suggestion(cond, " ", ">"))
        else:
            result.append(Suggestion(cond, " "))
    return result


def value_suggestions(cmd: str, already_closed: bool) -> list[Suggestion]:
    """Candidates for the value of a command, in the order the command lists them."""
    if cmd not in SHORTCUT_COMMANDS:
        raise ValueError(f"The shortcut command {cmd!r} does not exist.")
    closing = "" if already_closed else ">"
    result = []
    for value in SHORTCUT_COMMANDS[cmd]:
        kind = FREEFORM_VALUES.get(value)
        if kind == "string":
            result.append(Suggestion(value + ': ""', " ", closing,
                                     -1 if already_closed else -2))
        elif kind is not None:
            result.append(Suggestion(value + ": ", " ", closing))
        else:
            result.append(Suggestion(value, " ", closing))
    return result