"""Parsed prompt elements.

A prompt is parsed into a flat tuple of elements; conditionals carry their branches as nested
tuples. Every class here is a frozen dataclass, so a parsed tree never changes after the parser
builds it.

Element kinds
- `Character`: a single literal character (also the fallback for anything unrecognized).
- `Escape`: `%<code>` with no argument. `%r`, `%p`, `%q`, `%x` are git extensions; the rest pass
  through unchanged.
- `NumericEscape`: `%<num><code>` with an optional signed argument (`%-3~`, `%v`).
- `DateFormat`: `%D{<format>}`.
- `NamedColor`: `%<num>F{<name>}` / `%<num>K{<name>}`.
- `PathPrefix`: `%d{<delim>alias<delim>prefix...}` / `%/{...}` directory substitutions.
- `EscapeLiteral`: `%{<text>%}`.
- `Conditional`: `%<num>(<code><delim><true><delim><false>)`.
- `AdvancedConditional`: `%(<code><delim><b0><delim><b1>...)` for the `o`, `p`, `q`, `x` codes.
- `Truncation`: `%<num><<text><` / `%<num>><text>>`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Character:
    char: str


@dataclass(frozen=True)
class Escape:
    code: str


@dataclass(frozen=True)
class NumericEscape:
    num: int | None
    code: str
    # The argument as written (`+3`, `007`) so it re-renders byte for byte. Not part of equality.
    num_text: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class DateFormat:
    fmt: str


@dataclass(frozen=True)
class NamedColor:
    num: int | None
    code: str
    name: str
    num_text: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class PathPrefix:
    num: int | None
    code: str
    delim: str
    # (alias, prefix) pairs with backslash escapes resolved.
    prefix_subs: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class EscapeLiteral:
    text: str


@dataclass(frozen=True)
class Conditional:
    num: int | None
    code: str
    delim: str
    true_branch: tuple["Element", ...] = ()
    false_branch: tuple["Element", ...] = ()
    num_text: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class AdvancedConditional:
    code: str
    delim: str
    conditions: tuple[tuple["Element", ...], ...] = ((),)


@dataclass(frozen=True)
class Truncation:
    num: int | None
    code: str
    # Raw text, backslashes included.
    replacement: str = ""
    num_text: str | None = field(default=None, compare=False)


Element = Union[
    Character,
    Escape,
    NumericEscape,
    DateFormat,
    NamedColor,
    PathPrefix,
    EscapeLiteral,
    Conditional,
    AdvancedConditional,
    Truncation,
]
