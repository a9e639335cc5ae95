"""Grammar rules for zsh-style prompt escapes.

Every rule has the shape ``rule(text, pos) -> (element, end) | None``: it tries to recognize one
element starting at ``text[pos]`` and returns the element together with the index just past it,
or ``None`` when the input at ``pos`` is not that kind of element. Rules never raise and never
consume input on failure, so the parser can try them one after another.

Conditional rules (`NESTING_RULES`) parse their branches through a `zprompt.parser.Parser`, which
they take as a third argument. Called on their own they build one for `text`; `Parser` is imported
inside the function since the parser module imports this one.

Code sets
- `ESCAPE_CODES`: `%<code>` escapes without an argument.
- `NUMERIC_CODES`: `%<num><code>` escapes taking an optional signed integer.
- `CONDITIONAL_CODES`: predicates accepted by `%(<code>...)`.
- `ADVANCED_CODES`: predicates that also accept the N-armed `%(<code>...)` form.
- `EXTENSION_ESCAPES` / `EXTENSION_CONDITIONALS`: codes backed by git state at render time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .elements import (
    AdvancedConditional,
    Character,
    Conditional,
    DateFormat,
    Element,
    Escape,
    EscapeLiteral,
    NamedColor,
    NumericEscape,
    PathPrefix,
    Truncation,
)

if TYPE_CHECKING:
    from .parser import Parser

ESCAPE_CODES = "%)lMny#?eh!iIjLTt@*wWBbEUuSsDrpqx"
NUMERIC_CODES = "m_^d/~Nc.CvFfKkG"
CONDITIONAL_CODES = "!#?_C/c.~DdegjLlSTtvVwGymsopqx"
ADVANCED_CODES = "opqx"
EXTENSION_ESCAPES = "rpqx"
EXTENSION_CONDITIONALS = "Gymsopqx"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
MAX_DIGITS = len(str(INT64_MAX))

Match = tuple[Element, int]


def number(text: str, pos: int) -> tuple[int | None, int]:
    """Read an optional signed decimal integer; returns ``(None, pos)`` when there is none.

    Arguments outside the signed 64-bit range are not numbers either, so the escape they belong
    to falls through to literal text.
    """
    end = pos
    if end < len(text) and text[end] in "+-":
        end += 1
    digits = end
    while end < len(text) and text[end].isdigit() and text[end].isascii():
        end += 1
    if end == digits or len(text[digits:end].lstrip("0")) > MAX_DIGITS:
        return None, pos
    value = int(text[pos:end])
    if not INT64_MIN <= value <= INT64_MAX:
        return None, pos
    return value, end


def escaped(text: str, pos: int, stop: str, *, allow_empty: bool) -> tuple[str, str, int] | None:
    """Scan a run of characters up to one in `stop`, honoring backslash escapes.

    Returns ``(raw, value, end)`` where `raw` is the text as written and `value` has the
    escaping backslashes removed. A trailing lone backslash fails the scan.
    """
    value: list[str] = []
    end = pos
    while end < len(text):
        ch = text[end]
        if ch in stop:
            break
        if ch == "\\":
            if end + 1 >= len(text):
                return None
            value.append(text[end + 1])
            end += 2
            continue
        value.append(ch)
        end += 1
    if end == pos and not allow_empty:
        return None
    return text[pos:end], "".join(value), end


def _argument(text: str, pos: int) -> tuple[int | None, str | None, int]:
    num, end = number(text, pos)
    return num, (text[pos:end] if num is not None else None), end


def _fresh_parser(text: str) -> Parser:
    from .parser import Parser

    return Parser(text)


def _until(text: str, pos: int, stop: str) -> tuple[str, int] | None:
    # One or more characters not in `stop`.
    end = pos
    while end < len(text) and text[end] not in stop:
        end += 1
    if end == pos:
        return None
    return text[pos:end], end


def _expect(text: str, pos: int, literal: str) -> int | None:
    if text.startswith(literal, pos):
        return pos + len(literal)
    return None


def _one_of(text: str, pos: int, chars: str) -> tuple[str, int] | None:
    if pos < len(text) and text[pos] in chars:
        return text[pos], pos + 1
    return None


def _any(text: str, pos: int) -> tuple[str, int] | None:
    if pos < len(text):
        return text[pos], pos + 1
    return None


def truncation(text: str, pos: int) -> Match | None:
    p = _expect(text, pos, "%")
    if p is None:
        return None
    num, num_text, p = _argument(text, p)
    code = _one_of(text, p, "<>")
    if code is None:
        return None
    chr_, p = code
    scanned = escaped(text, p, chr_, allow_empty=True)
    if scanned is None:
        return None
    raw, _, p = scanned
    p = _expect(text, p, chr_)
    if p is None:
        return None
    return Truncation(num=num, code=chr_, replacement=raw, num_text=num_text), p


def advanced_conditional(text: str, pos: int, parser: Parser | None = None) -> Match | None:
    if parser is None:
        parser = _fresh_parser(text)

    p = _expect(text, pos, "%(")
    if p is None:
        return None
    code = _one_of(text, p, ADVANCED_CODES)
    if code is None:
        return None
    chr_, p = code
    delim = _any(text, p)
    if delim is None:
        return None
    dchr, p = delim

    conditions: list[tuple[Element, ...]] = []
    stop = dchr + ")"
    while True:
        region = parser.elements_until(p, stop)
        if region is None:
            return None
        elems, found, p = region
        conditions.append(elems)
        if found == ")":
            break
    return AdvancedConditional(code=chr_, delim=dchr, conditions=tuple(conditions)), p


def conditional(text: str, pos: int, parser: Parser | None = None) -> Match | None:
    if parser is None:
        parser = _fresh_parser(text)

    p = _expect(text, pos, "%")
    if p is None:
        return None
    num, num_text, p = _argument(text, p)
    p = _expect(text, p, "(")
    if p is None:
        return None
    code = _one_of(text, p, CONDITIONAL_CODES)
    if code is None:
        return None
    chr_, p = code
    delim = _any(text, p)
    if delim is None:
        return None
    dchr, p = delim

    true_region = parser.elements_until(p, dchr)
    if true_region is None:
        return None
    true_branch, _, p = true_region
    false_region = parser.elements_until(p, ")")
    if false_region is None:
        return None
    false_branch, _, p = false_region
    return (
        Conditional(
            num=num,
            code=chr_,
            delim=dchr,
            true_branch=true_branch,
            false_branch=false_branch,
            num_text=num_text,
        ),
        p,
    )


def date_format(text: str, pos: int) -> Match | None:
    p = _expect(text, pos, "%D{")
    if p is None:
        return None
    body = _until(text, p, "}")
    if body is None:
        return None
    fmt, p = body
    p = _expect(text, p, "}")
    if p is None:
        return None
    return DateFormat(fmt=fmt), p


def named_color(text: str, pos: int) -> Match | None:
    p = _expect(text, pos, "%")
    if p is None:
        return None
    num, num_text, p = _argument(text, p)
    code = _one_of(text, p, "FK")
    if code is None:
        return None
    chr_, p = code
    p = _expect(text, p, "{")
    if p is None:
        return None
    body = _until(text, p, "}")
    if body is None:
        return None
    name, p = body
    p = _expect(text, p, "}")
    if p is None:
        return None
    return NamedColor(num=num, code=chr_, name=name, num_text=num_text), p


def _prefix_pair(text: str, pos: int, delim: str) -> tuple[tuple[str, str], int] | None:
    stop = delim + "}"
    alias = escaped(text, pos, stop, allow_empty=True)
    if alias is None:
        return None
    _, alias_value, p = alias
    p = _expect(text, p, delim)
    if p is None:
        return None
    prefix = escaped(text, p, stop, allow_empty=False)
    if prefix is None:
        return None
    _, prefix_value, p = prefix
    return (alias_value, prefix_value), p


def path_prefix(text: str, pos: int) -> Match | None:
    p = _expect(text, pos, "%")
    if p is None:
        return None
    num, p = number(text, p)
    code = _one_of(text, p, "d/")
    if code is None:
        return None
    chr_, p = code
    p = _expect(text, p, "{")
    if p is None:
        return None
    delim = _any(text, p)
    if delim is None:
        return None
    dchr, p = delim

    subs: list[tuple[str, str]] = []
    pair = _prefix_pair(text, p, dchr)
    while pair is not None:
        sub, p = pair
        subs.append(sub)
        after_sep = _expect(text, p, dchr)
        if after_sep is None:
            break
        # A dangling separator is left for the closing brace check to reject.
        pair = _prefix_pair(text, after_sep, dchr)

    p = _expect(text, p, "}")
    if p is None:
        return None
    return PathPrefix(num=num, code=chr_, delim=dchr, prefix_subs=tuple(subs)), p


def escape_literal(text: str, pos: int) -> Match | None:
    p = _expect(text, pos, "%{")
    if p is None:
        return None
    end = text.find("%}", p)
    if end < 0:
        return None
    return EscapeLiteral(text=text[p:end]), end + 2


def numeric_escape(text: str, pos: int) -> Match | None:
    p = _expect(text, pos, "%")
    if p is None:
        return None
    num, num_text, p = _argument(text, p)
    code = _one_of(text, p, NUMERIC_CODES)
    if code is None:
        return None
    chr_, p = code
    return NumericEscape(num=num, code=chr_, num_text=num_text), p


def escape(text: str, pos: int) -> Match | None:
    p = _expect(text, pos, "%")
    if p is None:
        return None
    code = _one_of(text, p, ESCAPE_CODES)
    if code is None:
        return None
    chr_, p = code
    return Escape(code=chr_), p


def character(text: str, pos: int) -> Match | None:
    ch = _any(text, pos)
    if ch is None:
        return None
    chr_, p = ch
    return Character(char=chr_), p


RULES = (
    truncation,
    advanced_conditional,
    conditional,
    date_format,
    named_color,
    path_prefix,
    escape_literal,
    numeric_escape,
    escape,
    character,
)

# Rules that parse nested branches; the parser passes itself to them.
NESTING_RULES = (advanced_conditional, conditional)
