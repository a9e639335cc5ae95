from __future__ import annotations

import pytest

from zprompt import grammar
from zprompt.elements import (
    AdvancedConditional,
    Character,
    Conditional,
    DateFormat,
    Escape,
    EscapeLiteral,
    NamedColor,
    NumericEscape,
    PathPrefix,
    Truncation,
)
from zprompt.parser import Parser


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("12x", (12, 2)),
        ("-3~", (-3, 2)),
        ("+7v", (7, 2)),
        ("-~", (None, 0)),
        ("v", (None, 0)),
        ("", (None, 0)),
        ("9223372036854775807v", (2**63 - 1, 19)),
        ("-9223372036854775808v", (-(2**63), 20)),
        ("00000000000000000000000042v", (42, 26)),
        ("9223372036854775808v", (None, 0)),
        ("1" * 5000 + "v", (None, 0)),
    ],
)
def test_number_reads_optional_signed_integer(text: str, expected: tuple[int | None, int]) -> None:
    assert grammar.number(text, 0) == expected


def test_escaped_resolves_backslashes_and_keeps_raw_text() -> None:
    assert grammar.escaped(r"a\:b:c", 0, ":}", allow_empty=False) == (r"a\:b", "a:b", 4)


def test_escaped_empty_run_respects_allow_empty() -> None:
    assert grammar.escaped(":rest", 0, ":", allow_empty=True) == ("", "", 0)
    assert grammar.escaped(":rest", 0, ":", allow_empty=False) is None


def test_escaped_fails_on_trailing_backslash() -> None:
    assert grammar.escaped("abc\\", 0, ":", allow_empty=True) is None


def test_rules_report_end_position_and_leave_rest_alone() -> None:
    text = "%F{red}tail"
    assert grammar.named_color(text, 0) == (NamedColor(num=None, code="F", name="red"), 7)
    assert text[7:] == "tail"


@pytest.mark.parametrize(
    ("rule", "text", "expected"),
    [
        (grammar.truncation, "%8<..<", Truncation(num=8, code="<", replacement="..")),
        (grammar.truncation, "%>>", Truncation(num=None, code=">", replacement="")),
        (grammar.date_format, "%D{%H:%M}", DateFormat(fmt="%H:%M")),
        (grammar.named_color, "%-1K{black}", NamedColor(num=-1, code="K", name="black")),
        (grammar.escape_literal, "%{%}", EscapeLiteral(text="")),
        (grammar.numeric_escape, "%3~", NumericEscape(num=3, code="~")),
        (grammar.escape, "%r", Escape(code="r")),
        (grammar.character, "%", Character(char="%")),
    ],
)
def test_rules_match_their_own_syntax(rule, text: str, expected) -> None:
    assert rule(text, 0) == (expected, len(text))


@pytest.mark.parametrize(
    ("rule", "text"),
    [
        (grammar.truncation, "%<unterminated"),
        (grammar.truncation, "%<ends in backslash\\"),
        (grammar.date_format, "%D{}"),
        (grammar.date_format, "%D{open"),
        (grammar.named_color, "%F{}"),
        (grammar.escape_literal, "%{no close"),
        (grammar.numeric_escape, "%-"),
        (grammar.escape, "%z"),
        (grammar.path_prefix, "%d"),
        (grammar.path_prefix, "%d{:a:b"),
        (grammar.path_prefix, "%d{:a:b:}"),
        (grammar.conditional, "%(Z.a.b)"),
        (grammar.conditional, "%(C.a.b"),
        (grammar.advanced_conditional, "%1(o.a.b)"),
        (grammar.advanced_conditional, "%(o.a.b"),
        (grammar.advanced_conditional, "%(o"),
        (grammar.character, ""),
    ],
)
def test_rules_reject_malformed_input(rule, text: str) -> None:
    assert rule(text, 0) is None


def test_rules_start_at_given_position() -> None:
    assert grammar.escape("ab%xcd", 2) == (Escape(code="x"), 4)
    assert grammar.escape("ab%xcd", 0) is None


def test_path_prefix_pairs_honor_escapes() -> None:
    matched = grammar.path_prefix(r"%/{:a\:b:/x\}y:c:/z}", 0)

    assert matched is not None
    elem, end = matched
    assert elem == PathPrefix(num=None, code="/", delim=":", prefix_subs=(("a:b", "/x}y"), ("c", "/z")))
    assert end == len(r"%/{:a\:b:/x\}y:c:/z}")


def test_path_prefix_allows_empty_alias() -> None:
    matched = grammar.path_prefix("%d{,,/tmp}", 0)

    assert matched is not None
    assert matched[0] == PathPrefix(num=None, code="d", delim=",", prefix_subs=(("", "/tmp"),))


def test_conditional_predicate_set_includes_git_codes() -> None:
    for code in grammar.EXTENSION_CONDITIONALS:
        assert code in grammar.CONDITIONAL_CODES
    for code in grammar.ADVANCED_CODES:
        assert code in grammar.EXTENSION_CONDITIONALS


def test_advanced_conditional_requires_a_closing_paren_after_every_branch() -> None:
    matched = grammar.advanced_conditional("%(p|a|b|c)rest", 0)

    assert matched == (
        AdvancedConditional(
            code="p",
            delim="|",
            conditions=((Character("a"),), (Character("b"),), (Character("c"),)),
        ),
        10,
    )


def test_conditional_with_numeric_argument() -> None:
    matched = grammar.conditional("%-2(x.a.b)", 0)

    assert matched == (
        Conditional(num=-2, code="x", delim=".", true_branch=(Character("a"),), false_branch=(Character("b"),)),
        10,
    )


@pytest.mark.parametrize(
    ("rule", "text", "num_text"),
    [
        (grammar.numeric_escape, "%+03v", "+03"),
        (grammar.named_color, "%007F{red}", "007"),
        (grammar.truncation, "%+8<..<", "+8"),
        (grammar.conditional, "%-0(C.a.b)", "-0"),
        (grammar.numeric_escape, "%v", None),
    ],
)
def test_rules_keep_argument_as_written(rule, text: str, num_text: str | None) -> None:
    matched = rule(text, 0)

    assert matched is not None
    assert matched[0].num_text == num_text


def test_argument_as_written_does_not_affect_equality() -> None:
    assert NumericEscape(num=3, code="v", num_text="+3") == NumericEscape(num=3, code="v")


def test_nesting_rules_parse_branches_with_given_parser() -> None:
    text = "%(G.a.b)"
    parser = Parser(text)

    assert grammar.NESTING_RULES == (grammar.advanced_conditional, grammar.conditional)
    assert grammar.conditional(text, 0, parser) == (
        Conditional(num=None, code="G", delim=".", true_branch=(Character("a"),), false_branch=(Character("b"),)),
        len(text),
    )
    assert parser.depth == 0
