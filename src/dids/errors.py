from __future__ import annotations

from dataclasses import dataclass

from django.db import models


class ParseErrorKind(models.TextChoices):
    NOT_A_DID = "NOT_A_DID", "not a DID"
    MISSING_METHOD_NAME = "MISSING_METHOD_NAME", "missing DID method name"
    INVALID_METHOD_NAME = "INVALID_METHOD_NAME", "invalid DID method name"
    MISSING_METHOD_SPECIFIC_ID = (
        "MISSING_METHOD_SPECIFIC_ID",
        "missing DID method-specific id",
    )
    INVALID_PARAMETER = "INVALID_PARAMETER", "invalid DID parameter"
    TRAILING_INPUT = "TRAILING_INPUT", "unexpected trailing input"


@dataclass(frozen=True)
class ParseError:
    """Why a DID string was rejected, and where."""

    kind: ParseErrorKind
    position: int
    expected: str | None = None

    def __str__(self) -> str:
        msg = f"{self.kind.label} at position {self.position}"
        if self.expected:
            msg += f" (expected at least one {self.expected})"
        return msg


class DocumentError(models.TextChoices):
    """Closed set of DID Document rejection messages. The value is the message."""

    MALFORMED_JSON = "malformed DID document JSON"

    # Document
    MISSING_CONTEXT = "missing DID context"
    INVALID_CONTEXT = "invalid DID context"
    MISSING_SUBJECT = "missing DID subject"
    INVALID_SUBJECT = "invalid DID subject"
    INVALID_CREATED = "invalid created timestamp"
    INVALID_UPDATED = "invalid updated timestamp"

    # Public keys
    MISSING_PUBKEY_ID = "missing DID public key id"
    INVALID_PUBKEY_ID = "invalid DID public key id"
    DUPLICATE_PUBKEY_ID = "duplicate DID public key id"
    MISSING_PUBKEY_TYPE = "missing DID public key type"
    INVALID_PUBKEY_TYPE = "invalid DID public key type"
    MISSING_PUBKEY_CONTROLLER = "missing DID public key controller"
    MISSING_PUBKEY_PROPERTY = "missing DID public key property"
    INVALID_PUBKEY_PROPERTY = "invalid DID public key property"
    UNKNOWN_PUBKEY_FORMAT = "unknown DID public key format"

    # Authentication
    INVALID_REFERENCE = "invalid reference verification method"
    UNKNOWN_REFERENCE = "unknown reference verification method"
    DUPLICATE_EMBEDDED_ID = "duplicate public key id from embedded verification method"
    INVALID_EMBEDDED = "invalid embedded verification method"

    # Services
    MISSING_SERVICE_ID = "missing service endpoint id"
    INVALID_SERVICE_ID = "invalid service endpoint id"
    MISSING_SERVICE_TYPE = "missing service endpoint type"
    SERVICE_JSONLD_UNIMPLEMENTED = "invalid service endpoint JSON-LD object : unimplemented"
    SERVICE_UNKNOWN_FORMAT = "invalid service endpoint : unknown format"
