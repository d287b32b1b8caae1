"""Running parsed shortcuts against a line editor."""

from __future__ import annotations

import string
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from sircon.shortcut_parser import ActionType, ParsedShortcut, ShortcutAction, ShortcutError


@dataclass
class EditorState:
    """What conditions look at: the lines of the command, cursor and selection."""

    lines: list[str] = field(default_factory=lambda: [""])
    cursor_x: int = 0
    cursor_y: int = 0
    selection: bool = False

    @property
    def line(self) -> str:
        if not self.lines:
            return ""
        return self.lines[min(max(self.cursor_y, 0), len(self.lines) - 1)]


@dataclass
class CommandToEvaluate:
    """A command produced by the editor, complete when it should be evaluated."""

    cmd: str = ""
    is_complete: bool = False
    is_parse_error: bool = False


def _is_punct(char: str) -> bool:
    return char in string.punctuation


def is_condition_verified(action: ShortcutAction, state: Any) -> bool:
    """Evaluate a condition action against the editor state."""
    if action.kind is ActionType.UNSET:
        raise ValueError("Trying to run a shortcut that has not been set.")
    if action.kind is not ActionType.CONDITION:
        raise ValueError("Only conditions can be verified; commands are run.")
    if action.name in ("else", "endif"):
        raise ValueError(f"The statement `{action.name}` is not a condition to verify.")

    value = action.value
    line = state.line
    cx = state.cursor_x
    res = False

    if value == "empty":
        res = len(state.lines) == 1 and not line
    elif value == "line_empty":
        res = not line
    elif value == "line_matches":
        pattern = action.freeform
        if "_cursor_" in pattern:
            left, _, right = pattern.partition("_cursor_")
            res = True
            if left:
                res = cx > 0 and line[:cx].endswith(left)
            if res and right:
                res = cx < len(line) and line[cx:].startswith(right)
        else:
            res = pattern in line
    elif value == "one_liner":
        res = len(state.lines) == 1
    elif value in ("is_letter_left", "is_punct_left"):
        i = cx - 1
        while i >= 0 and line[i].isspace():
            i -= 1
        if i < 0:
            return False
        punct = _is_punct(line[i])
        return punct if value == "is_punct_left" else not punct
    elif value in ("is_letter_right", "is_punct_right"):
        i = cx
        while i < len(line) and line[i].isspace():
            i += 1
        if i >= len(line):
            return False
        punct = _is_punct(line[i])
        return punct if value == "is_punct_right" else not punct
    elif value == "any_selection":
        res = bool(state.selection)
    elif value == "y_top":
        res = state.cursor_y == 0
    elif value == "y_bottom":
        res = state.cursor_y == len(state.lines)
    elif value == "x_leftmost":
        res = cx == 0
    elif value == "x_rightmost":
        res = cx == len(line)

    if "not" in action.name:
        res = not res
    return res


def _missing_endif() -> ShortcutError:
    return ShortcutError(
        "The shortcut condition is invalid. A condition must be "
        "a <if: condition> terminated with an <endif>\n"
        "Problem: end of the shortcut reached before <endif>"
    )


def _skip_to_else_or_endif(actions: list[ShortcutAction], i: int) -> int:
    depth = 0
    while i < len(actions):
        action = actions[i]
        if action.is_if():
            depth += 1
        elif action.is_else_endif():
            if depth == 0:
                break
            if action.is_endif():
                depth -= 1
        i += 1
    return i


def select_branch(actions: Iterable[ShortcutAction], state: Any) -> list[ShortcutAction]:
    """Replace the leading if-statement by the actions of the branch that holds."""
    actions = list(actions)
    if not actions:
        raise ShortcutError("The shortcut actions cannot be empty.")
    if not actions[0].is_if():
        raise ShortcutError("The first shortcut action must be an `if`.")

    n = len(actions)
    i = 0
    valid = False
    while i < n and not valid:
        action = actions[i]
        if action.is_if() or action.is_else_if():
            valid = is_condition_verified(action, state)
            i += 1
            while i < n and actions[i].is_and_or():
                combined = actions[i]
                if combined.is_and():
                    valid = valid and is_condition_verified(combined, state)
                else:
                    valid = valid or is_condition_verified(combined, state)
                i += 1
            if not valid:
                i = _skip_to_else_or_endif(actions, i)
                if i == n:
                    raise _missing_endif()
                if actions[i].is_endif():
                    i += 1
                    break
        elif action.is_else_no_if():
            valid = True
            i += 1
        else:
            raise ShortcutError(
                "Expecting either if/else if/else, received: "
                f'"{action.raw_command()}".'
            )

    branch: list[ShortcutAction] = []
    if valid:
        end = _skip_to_else_or_endif(actions, i)
        branch = actions[i:end]
        i = end
        if i == n:
            raise _missing_endif()
        if not actions[i].is_endif():
            i += 1
            depth = 0
            while i < n:
                action = actions[i]
                if action.is_if():
                    depth += 1
                elif action.is_endif():
                    if depth == 0:
                        break
                    depth -= 1
                i += 1
            if i == n:
                raise _missing_endif()
        i += 1

    return branch + actions[i:]


def _unknown(action: ShortcutAction) -> ValueError:
    return ValueError(f'For command "{action.name}", unknown value {action.value}')


def run_action(action: ShortcutAction, editor: Any) -> CommandToEvaluate:
    """Run one command action on the editor."""
    if action.kind is ActionType.UNSET:
        raise ValueError("Trying to run a shortcut that has not been set.")
    if action.kind is not ActionType.COMMAND:
        raise ValueError("Only commands can be run; conditions are verified.")

    name, value = action.name, action.value
    count = int(action.freeform) if action.freeform else 0
    result = CommandToEvaluate()

    if name == "select":
        editor.select_all(value != "context")
    elif name == "move_x":
        if value in ("left", "word_left"):
            for _ in range(count):
                editor.move_x("left", value == "word_left")
        elif value in ("right", "word_right"):
            for _ in range(count):
                editor.move_x("right", value == "word_right")
        elif value in ("leftmost", "rightmost"):
            editor.move_x(value, False)
        else:
            raise _unknown(action)
    elif name == "move_y":
        if value in ("up", "down"):
            for _ in range(count):
                editor.move_y(value, False)
        elif value == "top":
            editor.move_y("up", True)
        elif value == "bottom":
            editor.move_y("down", True)
        else:
            raise _unknown(action)
    elif name == "delete":
        if value in ("left", "right"):
            for _ in range(count):
                editor.delete("left", False)
        elif value == "word_left":
            editor.delete("left", True)
        elif value == "word_right":
            editor.delete("right", True)
        elif value == "line":
            editor.delete_current_line()
        elif value == "all_left":
            editor.delete_all_left()
        elif value == "all_right":
            editor.delete_all_right()
        else:
            raise _unknown(action)
    elif name == "selection":
        if value == "stash":
            editor.selection_stash()
        elif value == "pop":
            editor.selection_pop()
        else:
            raise _unknown(action)
    elif name == "command":
        if value == "stash":
            editor.command_stash()
        elif value == "pop":
            editor.command_pop()
        elif value == "clear":
            editor.clear_command()
        else:
            raise _unknown(action)
    elif name == "copy":
        editor.copy_selection()
    elif name == "paste":
        editor.paste()
    elif name == "cut":
        editor.cut_selection()
    elif name == "undo":
        editor.undo()
    elif name == "redo":
        editor.redo()
    elif name == "newline":
        editor.insert_newline()
    elif name == "insert":
        editor.insert(value)
    elif name == "enter":
        result = editor.enter()
    elif name == "run":
        editor.command_stash()
        result = CommandToEvaluate(value, True)
        editor.insert(value)
        editor.flush_command()
    elif name == "run_no_echo":
        editor.command_stash()
        editor.clear_display_line()
        result = CommandToEvaluate(value, True)
    elif name == "clear_screen":
        editor.clear_screen()
    elif name == "debug":
        editor.next_debug_type()

    return result


def apply_shortcut(
    shortcut: ParsedShortcut | Iterable[ShortcutAction], editor: Any
) -> CommandToEvaluate:
    """Run a shortcut; stops at the first action producing a complete command."""
    source = shortcut.actions if isinstance(shortcut, ParsedShortcut) else shortcut
    pending = deque(source)
    result = CommandToEvaluate()
    while pending:
        if pending[0].is_if():
            pending = deque(select_branch(pending, editor))
            continue
        result = run_action(pending.popleft(), editor)
        if result.is_complete:
            return result
    return result