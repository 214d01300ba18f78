from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from src.dids.grammar import COLON_SEP, DID_SCHEME, EQUAL_SEP, FRAGMENT_SEP, SEMICOLON_SEP


@dataclass(frozen=True)
class DidParam:
    name: str
    value: str | None = None

    def __str__(self) -> str:
        if self.value is None:
            return self.name
        return f"{self.name}{EQUAL_SEP}{self.value}"


@dataclass(frozen=True)
class Did:
    """
    A parsed Decentralized Identifier.

    ``params`` is None when the source carried no ``;`` section at all, and
    ``fragment`` is None when there was no ``#``.
    """

    method_name: str
    method_specific_id: str
    params: tuple[DidParam, ...] | None = None
    fragment: str | None = None

    @property
    def did(self) -> str:
        """The bare ``did:method:id`` without params or fragment."""
        return f"{DID_SCHEME}{COLON_SEP}{self.method_name}{COLON_SEP}{self.method_specific_id}"

    def __str__(self) -> str:
        out = self.did
        if self.params:
            out += SEMICOLON_SEP + SEMICOLON_SEP.join(str(p) for p in self.params)
        if self.fragment is not None:
            out += FRAGMENT_SEP + self.fragment
        return out

    @classmethod
    def parse(cls, did_string: str):
        from src.dids.did_parser import parse_did

        return parse_did(did_string)

    @staticmethod
    def is_valid(did_string: str) -> bool:
        from src.dids.did_parser import validate_did

        return validate_did(did_string)


class DidBuilder:
    def __init__(self, method_name: str, method_specific_id: str):
        self.method_name = method_name
        self.method_specific_id = method_specific_id
        self.params: list[DidParam] = []
        self.fragment: str | None = None

    def with_params(self, params: Iterable[tuple[str, str | None]]) -> "DidBuilder":
        self.params.extend(DidParam(name, value) for name, value in params)
        return self

    def with_fragment(self, fragment: str) -> "DidBuilder":
        self.fragment = fragment
        return self

    def build(self) -> Did:
        return Did(
            method_name=self.method_name,
            method_specific_id=self.method_specific_id,
            params=tuple(self.params) or None,
            fragment=self.fragment,
        )


def did(did_string: str) -> Did:
    """Parse ``did_string`` or raise ValidationError."""
    return Did.parse(did_string).unwrap()
