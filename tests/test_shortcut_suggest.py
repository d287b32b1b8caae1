import pytest

from sircon.shortcut_parser import IF_CONDITIONS, SHORTCUT_COMMANDS
from sircon.shortcut_suggest import (
    Suggestion,
    command_suggestions,
    condition_suggestions,
    value_suggestions,
)


def _by_text(suggestions):
    return {s.text: s for s in suggestions}


def test_command_suggestions_cover_all_commands_sorted():
    sugg = command_suggestions(False)
    assert len(sugg) == len(SHORTCUT_COMMANDS)
    texts = [s.text for s in sugg]
    assert texts == sorted(texts)


def test_command_suggestions_open():
    sugg = _by_text(command_suggestions(False))
    assert sugg['insert: ""'] == Suggestion('insert: ""', append_right=">", cursor_shift=-2)
    assert sugg["if: "].continues is True
    assert sugg["if: "].append_right == ""
    assert sugg["copy"].append_right == ">"


def test_command_suggestions_closed():
    sugg = command_suggestions(True)
    assert all(s.append_right == "" for s in sugg)
    assert _by_text(sugg)['run: ""'].cursor_shift == -1


def test_condition_suggestions_first_excludes_operators():
    texts = [s.text for s in condition_suggestions(False, True, False)]
    assert "and" not in texts and "or" not in texts
    assert len(texts) == len(IF_CONDITIONS)
    assert texts == sorted(texts)


def test_condition_suggestions_later_includes_operators():
    texts = [s.text for s in condition_suggestions(False, False, False)]
    assert "and" in texts and "or" in texts


def test_condition_suggestions_opening_if():
    sugg = _by_text(condition_suggestions(False, True, True))
    assert sugg['line_matches: ""'].append_right == ">  <endif>"
    assert sugg['line_matches: ""'].cursor_shift == -11
    assert sugg["empty"].cursor_shift == -8
    assert all(s.append_left == " " for s in sugg.values())


def test_condition_suggestions_closed_overrides_opening_if():
    sugg = _by_text(condition_suggestions(True, True, True))
    assert all(s.append_right == "" for s in sugg.values())
    assert sugg['line_matches: ""'].cursor_shift == -1


def test_value_suggestions_move_x_order():
    texts = [s.text for s in value_suggestions("move_x", False)]
    assert texts == ["left: ", "right: ", "leftmost", "rightmost", "word_left: ", "word_right: "]


def test_value_suggestions_closed_has_no_closing():
    sugg = value_suggestions("delete", True)
    assert all(s.append_right == "" and s.append_left == " " for s in sugg)


def test_value_suggestions_no_values():
    assert value_suggestions("copy", False) == []


def test_value_suggestions_unknown_command():
    with pytest.raises(ValueError):
        value_suggestions("nope", False)