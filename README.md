# sircon

Building blocks for an interactive console, using only the standard library:

- `sircon.shortcut_parser`: a keyboard shortcut mini-language, parsed into
  a sequence of editor actions with `if` / `else if` / `else` / `endif`
  branches.
- `sircon.shortcut_runner`: runs a parsed shortcut against an editor,
  choosing the branch of each condition from the editor's state.
- `sircon.shortcut_suggest`: completion candidates for a shortcut being
  typed.
- `sircon.arguments`: typed argument formats (color, path, shortcut,
  logical, int, string), validation, parsing and splitting of command lines.
- `sircon.colors`: HTML color names and `#rrggbb` codes turned into
  terminal escape sequences.

## Shortcuts

```python
from sircon.shortcut_parser import parse_shortcut

shortcut = parse_shortcut('<move_y: bottom> <move_x: rightmost> <insert: " |>"> <newline>')
shortcut.is_valid()                          # True
[a.raw_command() for a in shortcut.actions]
```

Commands sit between `<` and `>`. Some take a value (`<move_x: leftmost>`),
some a free-form integer (`<move_x: left: 3>`, which defaults to 1 when
omitted) or a quoted string (`<insert: "text">`). Text outside angle
brackets is inserted as is; wrap it in double quotes to keep leading or
trailing spaces. `_sel_` stands for the current selection and `_all_` for
the whole line.

Conditions usable in `<if: ...>` are `empty`, `line_empty`, `line_matches`,
`one_liner`, `is_letter_left`, `is_letter_right`, `is_punct_left`,
`is_punct_right`, `any_selection`, `y_top`, `y_bottom`, `x_leftmost` and
`x_rightmost`; they combine with `and`, `or` and `not`. `line_matches`
takes a quoted pattern, where `_cursor_` marks the cursor position. Every
`if` must be closed with `<endif>`.

`parse_shortcut` never raises: a faulty definition gives a `ParsedShortcut`
whose `is_valid()` is false and whose `error` explains the problem. The
result also carries the completion context (`suggest_type`, `cmd`, `value`,
`i_context`, ...) for the point where parsing stopped.

### Running shortcuts

`apply_shortcut(shortcut, editor)` runs the actions in order and stops at
the first one that yields a complete `CommandToEvaluate` (`<run: "...">`,
`<run_no_echo: "...">`, or `<enter>` when the editor says so). The editor is
any object providing the state read by conditions (`lines`, `line`,
`cursor_x`, `cursor_y`, `selection`, as in `EditorState`) and the methods
the commands call: `select_all`, `move_x`, `move_y`, `delete`,
`delete_current_line`, `delete_all_left`, `delete_all_right`,
`selection_stash`, `selection_pop`, `command_stash`, `command_pop`,
`clear_command`, `copy_selection`, `paste`, `cut_selection`, `undo`, `redo`,
`insert_newline`, `insert`, `enter`, `flush_command`, `clear_display_line`,
`clear_screen` and `next_debug_type`.

`select_branch(actions, state)` and `is_condition_verified(action, state)`
are available on their own.

### Completion

`command_suggestions(already_closed)`, `condition_suggestions(already_closed,
is_first, opening_if)` and `value_suggestions(cmd, already_closed)` return
`Suggestion` objects giving the text to insert, what to add on each side,
the cursor shift and whether completion should continue.

## Arguments

```python
from sircon.arguments import ArgType, ArgumentFormat, arg_signature, parse_arg, parse_command_arguments

args = parse_command_arguments('copy "my dir/a.txt" ./backup')
[arg.full_string() for arg in args]   # ['copy ', 'my dir/a.txt ', './backup']

width = ArgumentFormat(ArgType.INT, default="-1")
parse_arg("80", width, check=True).number   # 80
arg_signature([width, ArgumentFormat(ArgType.LOGICAL)])   # 'int? logical'
```

`validate_value` raises `ArgumentError` for a value that does not fit its
format (path that must exist or end with a given file name, positive
integer, `true`/`false`, valid shortcut or color) and returns the cleaned
value. `default_arg(fmt)` parses a format's default and marks it as such.

## Colors

```python
from sircon.colors import is_valid_color, resolve_color

is_valid_color("#ff8800")                   # True
is_valid_color("hot_pink")                  # True
resolve_color("hot_pink", background=True)  # background escape sequence
```

## What the package does not do

It provides no interactive console, no `key = value` options files to read
or write, and no `%`-prefixed special functions: these pieces are meant to
be used by such a program, which is not part of this package. There is no
command-line entry point.