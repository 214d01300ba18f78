"""
Character classes and scanners for the generic DID syntax.

Each scanner takes the remaining input and returns ``Scan(matched, rest)``.
Scanners ending in ``1`` need at least one character of their class and raise
``GrammarError`` otherwise; the others accept an empty match.
"""
from __future__ import annotations

import string
from typing import Callable, NamedTuple

from src.core.exceptions import GrammarError

DID_SCHEME = "did"
COLON_SEP = ":"
SEMICOLON_SEP = ";"
EQUAL_SEP = "="
FRAGMENT_SEP = "#"

_ALNUM = frozenset(string.ascii_letters + string.digits)

METHOD_CHARS = frozenset(string.ascii_lowercase + string.digits)
ID_CHARS = _ALNUM | frozenset(".-_")
# TODO: pct-encoded sequences once percent-decoding is supported
PARAM_CHARS = ID_CHARS | frozenset(":")
SUB_DELIMS = frozenset("!$&'()*+,;=")
FRAGMENT_CHARS = ID_CHARS | frozenset("~") | SUB_DELIMS | frozenset(":@")


class Scan(NamedTuple):
    matched: str
    rest: str


def is_method_char(c: str) -> bool:
    return c in METHOD_CHARS


def is_id_char(c: str) -> bool:
    return c in ID_CHARS


def is_param_char(c: str) -> bool:
    return c in PARAM_CHARS


def is_fragment_char(c: str) -> bool:
    return c in FRAGMENT_CHARS


def _split_at(input: str, pred: Callable[[str], bool]) -> Scan:
    end = 0
    for c in input:
        if not pred(c):
            break
        end += 1
    return Scan(input[:end], input[end:])


def take_while(input: str, pred: Callable[[str], bool]) -> Scan:
    return _split_at(input, pred)


def take_while1(input: str, pred: Callable[[str], bool], expected: str, *, offset: int = 0) -> Scan:
    scan = _split_at(input, pred)
    if not scan.matched:
        raise GrammarError(expected, offset)
    return scan


def tag(input: str, literal: str) -> Scan | None:
    """Match ``literal`` at the front of ``input``; ``None`` when it is not there."""
    if input.startswith(literal):
        return Scan(literal, input[len(literal):])
    return None


def method_chars1(input: str, *, offset: int = 0) -> Scan:
    return take_while1(input, is_method_char, "method-char", offset=offset)


def method_specific_id_chars(input: str) -> Scan:
    # colon-joined id segments; empty segments are allowed
    return take_while(input, lambda c: is_id_char(c) or c == COLON_SEP)


def param_chars1(input: str, *, offset: int = 0) -> Scan:
    return take_while1(input, is_param_char, "param-char", offset=offset)


def param_chars0(input: str) -> Scan:
    return take_while(input, is_param_char)


def fragment_chars0(input: str) -> Scan:
    return take_while(input, is_fragment_char)
