from __future__ import annotations

import json
import logging
import re

from src.core.exceptions import ValidationError
from src.dids.conf import validate_timestamps_enabled
from src.dids.did import Did
from src.dids.did_doc import (
    GENERIC_DID_CTX,
    KEY_FORMATS,
    DidDocument,
    DidDocumentBuilder,
    Embedded,
    KeyEncoding,
    PublicKey,
    PublicKeyBuilder,
    PublicKeyEncoded,
    PublicKeyType,
    Reference,
    Service,
    UriEndpoint,
    VerificationMethod,
)
from src.dids.errors import DocumentError
from src.dids.result import Err, Ok, Result

log = logging.getLogger(__name__)

CONTEXT_PROP = "@context"
SUBJECT_PROP = "id"
CREATED_PROP = "created"
UPDATED_PROP = "updated"
PUBKEYS_PROP = "publicKey"
AUTHN_PROP = "authentication"
SERVICE_PROP = "service"
SVCENDP_PROP = "serviceEndpoint"

ID_PROP = "id"
TYPE_PROP = "type"
CTRL_PROP = "controller"

# See https://www.w3.org/TR/xmlschema11-2/#dateTime (UTC only)
DATETIME_REGEX = re.compile(
    r"""
    -?([1-9][0-9]{3,}|0[0-9]{3})
    -(0[1-9]|1[0-2])
    -(0[1-9]|[12][0-9]|3[01])
    T(([01][0-9]|2[0-3]):[0-5][0-9]:[0-5][0-9](\.[0-9]+)?|(24:00:00(\.0+)?))
    Z
    """,
    re.VERBOSE,
)


class DocumentRejected(ValidationError):
    def __init__(self, error: DocumentError):
        super().__init__(error.value, extra={"code": error.name})
        self.error = error


def _get(json_value, prop: str):
    if isinstance(json_value, dict):
        return json_value.get(prop)
    return None


def _get_str(json_value, prop: str) -> str | None:
    value = _get(json_value, prop)
    return value if isinstance(value, str) else None


def _get_list(json_value, prop: str) -> list:
    # a non-array collection is treated as absent
    value = _get(json_value, prop)
    return value if isinstance(value, list) else []


def _require_str(json_value, prop: str, missing: DocumentError) -> str:
    value = _get_str(json_value, prop)
    if value is None:
        raise DocumentRejected(missing)
    return value


def _require_did(json_value, prop: str, missing: DocumentError, invalid: DocumentError) -> str:
    value = _require_str(json_value, prop, missing)
    if not Did.is_valid(value):
        raise DocumentRejected(invalid)
    return value


def _until_null(items: list):
    # Legacy leniency: a null slot ends the list instead of failing it.
    for item in items:
        if item is None:
            return
        yield item


def validate_datetime(value: str) -> bool:
    if not validate_timestamps_enabled():
        return True
    return DATETIME_REGEX.fullmatch(value) is not None


def parse_did_context(json_value) -> str:
    ctx = _require_str(json_value, CONTEXT_PROP, DocumentError.MISSING_CONTEXT)
    # TODO: accept additional contexts beyond the generic DID context
    if ctx != GENERIC_DID_CTX:
        raise DocumentRejected(DocumentError.INVALID_CONTEXT)
    return GENERIC_DID_CTX


def parse_did_subject(json_value) -> str:
    return _require_did(
        json_value, SUBJECT_PROP, DocumentError.MISSING_SUBJECT, DocumentError.INVALID_SUBJECT
    )


def _parse_timestamp(json_value, prop: str, invalid: DocumentError) -> str | None:
    value = _get_str(json_value, prop)
    if value is None:
        return None
    if not validate_datetime(value):
        raise DocumentRejected(invalid)
    return value


def parse_did_created(json_value) -> str | None:
    return _parse_timestamp(json_value, CREATED_PROP, DocumentError.INVALID_CREATED)


def parse_did_updated(json_value) -> str | None:
    return _parse_timestamp(json_value, UPDATED_PROP, DocumentError.INVALID_UPDATED)


def parse_did_pubkey_type(key) -> PublicKeyType:
    label = _require_str(key, TYPE_PROP, DocumentError.MISSING_PUBKEY_TYPE)
    result = PublicKeyType.from_label(label)
    if result.is_err():
        raise DocumentRejected(result.unwrap_err())
    return result.unwrap()


def parse_did_pubkey_format(key) -> str:
    for prop, _encoding in KEY_FORMATS:
        if prop in key:
            return prop
    raise DocumentRejected(DocumentError.MISSING_PUBKEY_PROPERTY)


def parse_did_pubkey_encoded(key, key_format: str) -> PublicKeyEncoded:
    value = _require_str(key, key_format, DocumentError.INVALID_PUBKEY_PROPERTY)
    encoded = PublicKeyEncoded.from_property(key_format, value)
    if encoded.encoding == KeyEncoding.UNSUPPORTED:
        raise DocumentRejected(DocumentError.UNKNOWN_PUBKEY_FORMAT)
    return encoded


def parse_did_pubkey(key, known_ids: set[str]) -> PublicKey:
    key_id = _require_did(
        key, ID_PROP, DocumentError.MISSING_PUBKEY_ID, DocumentError.INVALID_PUBKEY_ID
    )
    if key_id in known_ids:
        raise DocumentRejected(DocumentError.DUPLICATE_PUBKEY_ID)

    key_type = parse_did_pubkey_type(key)
    key_ctrl = _require_str(key, CTRL_PROP, DocumentError.MISSING_PUBKEY_CONTROLLER)
    key_format = parse_did_pubkey_format(key)
    key_encoded = parse_did_pubkey_encoded(key, key_format)

    return PublicKeyBuilder(key_id, key_type, key_ctrl).with_encoded_key(key_encoded).build()


def parse_did_pubkey_list(json_value) -> list[PublicKey]:
    keys: list[PublicKey] = []
    seen: set[str] = set()
    for entry in _until_null(_get_list(json_value, PUBKEYS_PROP)):
        key = parse_did_pubkey(entry, seen)
        keys.append(key)
        seen.add(key.id)
    return keys


def parse_auth_verif_method(entry, known_ids: set[str], pub_key_ids: set[str]) -> VerificationMethod:
    if isinstance(entry, str):
        if not Did.is_valid(entry):
            raise DocumentRejected(DocumentError.INVALID_REFERENCE)
        if entry not in pub_key_ids:
            raise DocumentRejected(DocumentError.UNKNOWN_REFERENCE)
        return Reference(entry)

    if isinstance(entry, dict):
        key = parse_did_pubkey(entry, set())
        if key.id in known_ids:
            raise DocumentRejected(DocumentError.DUPLICATE_EMBEDDED_ID)
        return Embedded(key)

    raise DocumentRejected(DocumentError.INVALID_EMBEDDED)


def parse_did_auth_list(json_value, pub_keys: list[PublicKey]) -> list[VerificationMethod]:
    pub_key_ids = {k.id for k in pub_keys}
    known_ids = set(pub_key_ids)
    methods: list[VerificationMethod] = []
    for entry in _until_null(_get_list(json_value, AUTHN_PROP)):
        method = parse_auth_verif_method(entry, known_ids, pub_key_ids)
        if isinstance(method, Embedded):
            known_ids.add(method.key.id)
        methods.append(method)
    return methods


def parse_did_svc_endpoint_value(entry) -> UriEndpoint:
    endpoint = _get(entry, SVCENDP_PROP)
    if isinstance(endpoint, str):
        return UriEndpoint(endpoint)
    if isinstance(endpoint, dict) or (endpoint is None and isinstance(entry, dict)):
        raise DocumentRejected(DocumentError.SERVICE_JSONLD_UNIMPLEMENTED)
    raise DocumentRejected(DocumentError.SERVICE_UNKNOWN_FORMAT)


def parse_did_svc_endpoint(entry) -> Service:
    svc_id = _require_did(
        entry, ID_PROP, DocumentError.MISSING_SERVICE_ID, DocumentError.INVALID_SERVICE_ID
    )
    svc_type = _require_str(entry, TYPE_PROP, DocumentError.MISSING_SERVICE_TYPE)
    svc_endpoint = parse_did_svc_endpoint_value(entry)
    return Service(svc_id, svc_type, svc_endpoint)


def parse_did_service_list(json_value) -> list[Service]:
    # TODO: validate endpoint URIs
    return [parse_did_svc_endpoint(entry) for entry in _get_list(json_value, SERVICE_PROP)]


def build_did_doc(json_value) -> DidDocument:
    """
    Walk a decoded JSON value and build the document.
    Raises DocumentRejected on the first rule the input breaks.
    """
    parse_did_context(json_value)
    sub = parse_did_subject(json_value)
    created = parse_did_created(json_value)
    updated = parse_did_updated(json_value)
    keys = parse_did_pubkey_list(json_value)
    auth = parse_did_auth_list(json_value, keys)
    services = parse_did_service_list(json_value)

    builder = (
        DidDocumentBuilder(sub)
        .with_authentication(auth)
        .with_pubkeys(keys)
        .with_services(services)
    )
    if created is not None:
        builder.created_on(created)
    if updated is not None:
        builder.updated_on(updated)
    return builder.build()


def parse_did_doc(json_value) -> Result[DidDocument, str]:
    try:
        doc = build_did_doc(json_value)
    except DocumentRejected as exc:
        log.debug("DID document rejected: %s", exc.message)
        return Err(exc.error)
    return Ok(doc)


def parse_did_doc_json(text: str | bytes) -> Result[DidDocument, str]:
    try:
        json_value = json.loads(text)
    except (ValueError, RecursionError) as e:
        # also oversized integer literals and nesting past the recursion limit
        log.debug("DID document is not valid JSON: %s", e)
        return Err(DocumentError.MALFORMED_JSON)
    return parse_did_doc(json_value)
