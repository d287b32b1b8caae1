from pathlib import Path

import pytest

from sircon.arguments import (
    ArgType,
    ArgumentError,
    ArgumentFormat,
    CommandArg,
    arg_signature,
    default_arg,
    parse_arg,
    parse_command_arguments,
    validate_value,
)
from sircon.colors import HTML_COLORS, fg_rgb, to_background


@pytest.mark.parametrize(
    "kind, name",
    [
        (ArgType.COLOR, "color"),
        (ArgType.PATH, "path"),
        (ArgType.SHORTCUT, "shortcut"),
        (ArgType.LOGICAL, "logical"),
        (ArgType.INT, "int"),
        (ArgType.STRING, "string"),
    ],
)
def test_type_verbose(kind, name):
    assert ArgumentFormat(kind).type_verbose() == name


def test_has_default():
    assert ArgumentFormat(ArgType.LOGICAL, default="true").has_default()
    assert not ArgumentFormat(ArgType.LOGICAL).has_default()
    assert ArgumentFormat(ArgType.STRING, default="").has_default()


def test_arg_signature():
    formats = [ArgumentFormat(ArgType.INT, default="1"), ArgumentFormat(ArgType.LOGICAL)]
    assert arg_signature(formats) == "int? logical"
    assert arg_signature([]) == ""


def test_validate_int_accepts_negative():
    assert validate_value("-12", ArgumentFormat(ArgType.INT)) == "-12"


@pytest.mark.parametrize("value", ["", "-", "1a", "3.5"])
def test_validate_int_rejects(value):
    with pytest.raises(ArgumentError, match="integer"):
        validate_value(value, ArgumentFormat(ArgType.INT))


def test_validate_int_positive():
    with pytest.raises(ArgumentError, match="positive"):
        validate_value("-3", ArgumentFormat(ArgType.INT, int_positive=True))


def test_validate_logical():
    fmt = ArgumentFormat(ArgType.LOGICAL)
    assert validate_value("false", fmt) == "false"
    with pytest.raises(ArgumentError, match="logical"):
        validate_value("yes", fmt)


def test_validate_color_lowercases():
    assert validate_value("RED", ArgumentFormat(ArgType.COLOR)) == "red"
    assert validate_value("#AbCdEf", ArgumentFormat(ArgType.COLOR)) == "#abcdef"
    with pytest.raises(ArgumentError):
        validate_value("#12345", ArgumentFormat(ArgType.COLOR))


def test_validate_path_exists(tmp_path):
    fmt = ArgumentFormat(ArgType.PATH, path_exists=True)
    assert validate_value(str(tmp_path), fmt) == str(tmp_path)
    with pytest.raises(ArgumentError, match="should exist"):
        validate_value(str(tmp_path / "missing"), fmt)


def test_validate_path_parent_exists(tmp_path):
    fmt = ArgumentFormat(ArgType.PATH, path_parent_exists=True)
    target = tmp_path / "new.txt"
    assert validate_value(str(target), fmt) == str(target)
    with pytest.raises(ArgumentError, match="parent"):
        validate_value(str(tmp_path / "no" / "new.txt"), fmt)


def test_validate_path_filename_and_ending(tmp_path):
    fmt = ArgumentFormat(ArgType.PATH, path_filename="R.exe")
    assert validate_value(str(tmp_path / "R.exe"), fmt) == str(tmp_path / "R.exe")
    with pytest.raises(ArgumentError, match="file name"):
        validate_value(str(tmp_path / "Rscript.exe"), fmt)
    ending = ArgumentFormat(ArgType.PATH, path_ends_with=".txt")
    with pytest.raises(ArgumentError, match="end with"):
        validate_value("notes.md", ending)


def test_validate_path_absolute():
    fmt = ArgumentFormat(ArgType.PATH, path_absolute=True)
    result = validate_value("some_file", fmt)
    assert Path(result).is_absolute()
    assert Path(result).name == "some_file"


def test_validate_shortcut():
    fmt = ArgumentFormat(ArgType.SHORTCUT)
    assert validate_value("<enter>", fmt) == "<enter>"
    with pytest.raises(ArgumentError, match="does not exist"):
        validate_value("<nonsense>", fmt)


def test_string_is_free():
    assert validate_value("anything at all", ArgumentFormat(ArgType.STRING)) == "anything at all"


def test_parse_int_and_logical():
    parsed = parse_arg("42", ArgumentFormat(ArgType.INT), check=True)
    assert parsed.kind is ArgType.INT
    assert parsed.number == 42
    assert not parsed.is_unset
    assert parse_arg("true", ArgumentFormat(ArgType.LOGICAL)).logical is True
    assert parse_arg("false", ArgumentFormat(ArgType.LOGICAL)).logical is False


def test_parse_checked_error_raises():
    with pytest.raises(ArgumentError):
        parse_arg("maybe", ArgumentFormat(ArgType.LOGICAL), check=True)


def test_parse_color_foreground_and_background():
    assert parse_arg("red", ArgumentFormat(ArgType.COLOR)).color == HTML_COLORS["red"]
    hexa = parse_arg("#102030", ArgumentFormat(ArgType.COLOR)).color
    assert hexa == fg_rgb("#102030")
    bg = parse_arg("red", ArgumentFormat(ArgType.COLOR, background=True)).color
    assert bg == to_background(HTML_COLORS["red"])


def test_parse_path_and_string(tmp_path):
    parsed = parse_arg(str(tmp_path), ArgumentFormat(ArgType.PATH))
    assert parsed.path == tmp_path
    text = parse_arg("> ", ArgumentFormat(ArgType.STRING))
    assert text.text == "> "
    assert text.kind is ArgType.STRING


def test_parse_shortcut_value():
    parsed = parse_arg("<enter>", ArgumentFormat(ArgType.SHORTCUT), check=True)
    assert parsed.shortcut.is_valid()
    assert [a.name for a in parsed.shortcut.actions] == ["enter"]


def test_hook_receives_parsed_arg():
    seen = []
    fmt = ArgumentFormat(ArgType.STRING, hook=lambda arg: seen.append(arg.text))
    parse_arg("hello", fmt)
    assert seen == ["hello"]


def test_default_arg():
    parsed = default_arg(ArgumentFormat(ArgType.INT, default="-1"))
    assert parsed.number == -1
    assert parsed.is_default


def test_default_arg_without_default():
    with pytest.raises(ArgumentError):
        default_arg(ArgumentFormat(ArgType.INT))


def test_default_arg_invalid_default():
    with pytest.raises(ArgumentError, match="default"):
        default_arg(ArgumentFormat(ArgType.LOGICAL, default="nope"))


def test_unset_parsed_arg():
    from sircon.arguments import ParsedArg

    assert ParsedArg().is_unset


def test_command_args_simple():
    assert parse_command_arguments("a b") == [
        CommandArg("a", False, " "),
        CommandArg("b", False, ""),
    ]


def test_command_args_trailing_space_adds_empty():
    args = parse_command_arguments("  a  ")
    assert args == [CommandArg("a", False, "  "), CommandArg("")]
    assert args[0].full_string() == "a  "


def test_command_args_quoted():
    args = parse_command_arguments('"x y" z')
    assert args == [CommandArg("x y", True, " "), CommandArg("z", False, "")]


def test_command_args_closing_quote_adds_empty():
    args = parse_command_arguments('"abc"')
    assert args == [CommandArg("abc", True, ""), CommandArg("")]


def test_command_args_unclosed_quote():
    assert parse_command_arguments('"abc') == [CommandArg("abc", True, "")]


def test_command_args_empty():
    assert parse_command_arguments("") == []


def test_command_args_roundtrip_unquoted():
    line = "one two  three"
    assert "".join(a.full_string() for a in parse_command_arguments(line)) == line