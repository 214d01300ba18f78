# Parser for Decentralized Identifiers following the generic DID syntax:
# https://w3c-ccg.github.io/did-spec/#generic-did-syntax
from __future__ import annotations

import logging
from typing import NamedTuple

from src.core.exceptions import GrammarError, ValidationError
from src.dids.did import Did, DidBuilder
from src.dids.errors import ParseError, ParseErrorKind
from src.dids.grammar import (
    COLON_SEP,
    DID_SCHEME,
    EQUAL_SEP,
    FRAGMENT_SEP,
    SEMICOLON_SEP,
    fragment_chars0,
    is_id_char,
    method_chars1,
    method_specific_id_chars,
    param_chars0,
    param_chars1,
    tag,
)
from src.dids.result import Err, Ok, Result

log = logging.getLogger(__name__)


class DidSyntaxError(ValidationError):
    def __init__(self, error: ParseError):
        super().__init__(str(error), extra={"kind": error.kind, "position": error.position})
        self.error = error


class DidParts(NamedTuple):
    method_name: str
    method_specific_id: str
    params: list[tuple[str, str | None]] | None
    fragment: str | None


def _reject(kind: ParseErrorKind, source: str, rest: str, expected: str | None = None):
    raise DidSyntaxError(ParseError(kind, len(source) - len(rest), expected))


def _scheme(source: str) -> str:
    scan = tag(source, DID_SCHEME)
    if scan is None:
        _reject(ParseErrorKind.NOT_A_DID, source, source)
    sep = tag(scan.rest, COLON_SEP)
    if sep is None:
        _reject(ParseErrorKind.NOT_A_DID, source, scan.rest)
    return sep.rest


def _method_name(source: str, rest: str) -> tuple[str, str]:
    try:
        scan = method_chars1(rest, offset=len(source) - len(rest))
    except GrammarError as exc:
        if not rest or rest.startswith(COLON_SEP):
            kind = ParseErrorKind.MISSING_METHOD_NAME
        else:
            kind = ParseErrorKind.INVALID_METHOD_NAME
        raise DidSyntaxError(ParseError(kind, exc.position, exc.expected)) from exc
    return scan.matched, scan.rest


def _method_specific_id(source: str, rest: str) -> tuple[str, str]:
    sep = tag(rest, COLON_SEP)
    if sep is None:
        # "did:exAMPLE:..." stops inside the method name
        if rest and is_id_char(rest[0]):
            _reject(ParseErrorKind.INVALID_METHOD_NAME, source, rest)
        _reject(ParseErrorKind.MISSING_METHOD_SPECIFIC_ID, source, rest)
    scan = method_specific_id_chars(sep.rest)
    return scan.matched, scan.rest


def _generic_params(source: str, rest: str) -> tuple[list[tuple[str, str | None]] | None, str]:
    if not rest.startswith(SEMICOLON_SEP):
        return None, rest

    params: list[tuple[str, str | None]] = []
    while rest.startswith(SEMICOLON_SEP):
        rest = rest[len(SEMICOLON_SEP):]
        try:
            name = param_chars1(rest, offset=len(source) - len(rest))
        except GrammarError as exc:
            raise DidSyntaxError(
                ParseError(ParseErrorKind.INVALID_PARAMETER, exc.position, exc.expected)
            ) from exc
        rest = name.rest
        value = None
        eq = tag(rest, EQUAL_SEP)
        if eq is not None:
            scan = param_chars0(eq.rest)
            value, rest = scan.matched, scan.rest
        params.append((name.matched, value))
    return params, rest


def _fragment(rest: str) -> tuple[str | None, str]:
    sep = tag(rest, FRAGMENT_SEP)
    if sep is None:
        return None, rest
    scan = fragment_chars0(sep.rest)
    return scan.matched, scan.rest


def recognize_did(source: str) -> DidParts:
    """
    Run the five grammar stages over ``source`` and return its parts.
    Raises DidSyntaxError on the first stage that fails or on leftover input.
    """
    if not isinstance(source, str):
        raise DidSyntaxError(ParseError(ParseErrorKind.NOT_A_DID, 0))

    rest = _scheme(source)
    method_name, rest = _method_name(source, rest)
    method_id, rest = _method_specific_id(source, rest)
    params, rest = _generic_params(source, rest)
    fragment, rest = _fragment(rest)
    if rest:
        _reject(ParseErrorKind.TRAILING_INPUT, source, rest)

    return DidParts(method_name, method_id, params, fragment)


def parse_did(source: str) -> Result[Did, ParseError]:
    try:
        parts = recognize_did(source)
    except DidSyntaxError as exc:
        log.debug("DID rejected: %r: %s", source, exc.message)
        return Err(exc.error)

    builder = DidBuilder(parts.method_name, parts.method_specific_id)
    if parts.params is not None:
        builder.with_params(parts.params)
    if parts.fragment is not None:
        builder.with_fragment(parts.fragment)
    return Ok(builder.build())


def validate_did(source: str) -> bool:
    try:
        recognize_did(source)
    except DidSyntaxError:
        return False
    return True
