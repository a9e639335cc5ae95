"""Prompt parser.

`parse()` turns a prompt string into a tuple of `zprompt.elements` values by applying the rules
of `zprompt.grammar.RULES` in order at each position, taking the first that matches. The last
rule accepts any single character, so parsing is total: every input yields elements, and the
elements cover the whole input.

Conditional branches are parsed with `elements_until()`, which keeps applying the same rules
until it sees a bare `Character` from a stop set. Nested escapes (including nested conditionals
and `%)`) are whole elements, so their characters never end an outer branch.

A `Parser` holds the state of one parse:

- Nesting depth. Branches nest at most `MAX_DEPTH` levels; a conditional that would open a
  deeper branch fails to match and its text is parsed as ordinary characters.
- Memoized branch scans and elements, keyed by position, stop set and depth. An unterminated
  conditional fails once per position instead of being re-scanned by every rule that tries the
  same suffix, so malformed input costs polynomial rather than exponential time.
"""

from __future__ import annotations

from functools import partial

from .elements import Character, Element
from .grammar import NESTING_RULES, RULES, Match

MAX_DEPTH = 64

Region = tuple[tuple[Element, ...], str, int]


class Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.depth = 0
        self._rules = tuple(partial(rule, parser=self) if rule in NESTING_RULES else rule for rule in RULES)
        self._elements: dict[tuple[int, int], Match | None] = {}
        self._regions: dict[tuple[int, str, int], Region | None] = {}

    def element(self, pos: int) -> Match | None:
        """Parse one element at `pos`; ``None`` only at end of input."""
        key = (pos, self.depth)
        if key not in self._elements:
            self._elements[key] = self._first_match(pos)
        return self._elements[key]

    def _first_match(self, pos: int) -> Match | None:
        for rule in self._rules:
            matched = rule(self.text, pos)
            if matched is not None:
                return matched
        return None

    def elements_until(self, pos: int, stop: str) -> Region | None:
        """Parse elements up to (and consuming) the first bare character in `stop`.

        Returns ``(elements, stop_char, end)``, or ``None`` if the input ends first or the branch
        would nest deeper than `MAX_DEPTH`.
        """
        if self.depth >= MAX_DEPTH:
            return None
        key = (pos, stop, self.depth)
        if key in self._regions:
            return self._regions[key]

        self.depth += 1
        region = self._scan(pos, stop)
        self.depth -= 1
        self._regions[key] = region
        return region

    def _scan(self, pos: int, stop: str) -> Region | None:
        elems: list[Element] = []
        while True:
            matched = self.element(pos)
            if matched is None:
                return None
            elem, pos = matched
            if isinstance(elem, Character) and elem.char in stop:
                return tuple(elems), elem.char, pos
            elems.append(elem)

    def parse(self) -> tuple[Element, ...]:
        elems: list[Element] = []
        pos = 0
        while pos < len(self.text):
            matched = self.element(pos)
            # The character rule always matches before end of input.
            assert matched is not None
            elem, pos = matched
            elems.append(elem)
        return tuple(elems)


def element(text: str, pos: int) -> Match | None:
    return Parser(text).element(pos)


def elements_until(text: str, pos: int, stop: str) -> Region | None:
    return Parser(text).elements_until(pos, stop)


def parse(text: str) -> tuple[Element, ...]:
    return Parser(text).parse()
