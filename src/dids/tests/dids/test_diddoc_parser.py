import json

import pytest

from src.core.exceptions import ValidationError
from src.dids.did_doc import (
    GENERIC_DID_CTX,
    DidDocument,
    DidDocumentBuilder,
    Embedded,
    KeyEncoding,
    PublicKeyBuilder,
    PublicKeyEncoded,
    PublicKeyType,
    Reference,
    Service,
    UriEndpoint,
)
from src.dids.diddoc_parser import parse_did_doc, parse_did_doc_json
from src.dids.errors import DocumentError
from src.dids.result import Err, Ok

SUBJECT = "did:example:123456789abcdefghi"


def make_doc(**extra):
    doc = {"@context": GENERIC_DID_CTX, "id": SUBJECT}
    doc.update(extra)
    return doc


def make_key(n=1, **overrides):
    key = {
        "id": f"{SUBJECT}#keys-{n}",
        "type": "Ed25519VerificationKey2018",
        "controller": SUBJECT,
        "publicKeyBase58": "H3C2AVvLMv6gmMNam3uVAjZpfkcJCwDwnZn6z3wXmqPV",
    }
    key.update(overrides)
    return {k: v for k, v in key.items() if v is not None}


def make_service(**overrides):
    svc = {
        "id": f"{SUBJECT}#openid",
        "type": "OpenIdConnectVersion1.0Service",
        "serviceEndpoint": "https://openid.example.com/",
    }
    svc.update(overrides)
    return {k: v for k, v in svc.items() if v is not None}


# --- document level -------------------------------------------------------


def test_parse_did_doc_with_missing_context():
    assert parse_did_doc({"id": "did:example:21tDAKCERh95uGgKbJNHYp"}) == Err("missing DID context")


def test_parse_did_doc_with_non_string_context():
    assert parse_did_doc({"@context": [GENERIC_DID_CTX], "id": SUBJECT}) == Err(
        DocumentError.MISSING_CONTEXT
    )


def test_parse_did_doc_with_invalid_context():
    assert parse_did_doc(
        {"@context": "https://w3id.org/security/v1", "id": "did:example:21tDAKCERh95uGgKbJNHYp"}
    ) == Err("invalid DID context")


def test_parse_did_doc_that_is_not_an_object():
    assert parse_did_doc([]) == Err(DocumentError.MISSING_CONTEXT)
    assert parse_did_doc(None) == Err(DocumentError.MISSING_CONTEXT)


def test_parse_did_doc_with_missing_subject():
    assert parse_did_doc({"@context": GENERIC_DID_CTX}) == Err("missing DID subject")


def test_parse_did_doc_with_invalid_subject():
    assert parse_did_doc({"@context": GENERIC_DID_CTX, "id": "foobar"}) == Err("invalid DID subject")


def test_parse_minimal_did_doc():
    result = parse_did_doc({"@context": GENERIC_DID_CTX, "id": "did:example:21tDAKCERh95uGgKbJNHYp"})
    assert result == Ok(DidDocumentBuilder("did:example:21tDAKCERh95uGgKbJNHYp").build())

    doc = result.unwrap()
    assert doc.context == GENERIC_DID_CTX
    assert doc.pub_keys == ()
    assert doc.authentication == ()
    assert doc.service == ()
    assert doc.created is None and doc.updated is None


def test_did_document_parse_entry_point():
    assert DidDocument.parse(make_doc()) == parse_did_doc(make_doc())


# --- timestamps -------------------------------------------------------------


@pytest.mark.parametrize(
    "stamp",
    [
        "2002-10-10T17:00:00Z",
        "2002-10-10T17:00:00.123Z",
        "2002-10-10T24:00:00Z",
        "2002-10-10T24:00:00.000Z",
        "-0044-03-15T12:00:00Z",
        "12345-01-01T00:00:00Z",
    ],
)
def test_valid_timestamps(stamp):
    doc = parse_did_doc(make_doc(created=stamp, updated=stamp)).unwrap()
    assert doc.created == stamp
    assert doc.updated == stamp


@pytest.mark.parametrize(
    "stamp",
    [
        "2002-10-32T17:00:00",
        "2002-10-10T17:00:00",
        "2002-13-10T17:00:00Z",
        "2002-10-10T24:00:01Z",
        "2002-10-10T17:00:00+01:00",
        "2002-10-10T17:00:00Zjunk",
        "0000-10-10 17:00:00Z",
    ],
)
def test_invalid_created_and_updated(stamp):
    assert parse_did_doc(make_doc(created=stamp)) == Err("invalid created timestamp")
    assert parse_did_doc(make_doc(updated=stamp)) == Err("invalid updated timestamp")


def test_parse_did_doc_with_created():
    assert parse_did_doc(make_doc(created="2002-10-10T17:00:00Z")) == Ok(
        DidDocumentBuilder(SUBJECT).created_on("2002-10-10T17:00:00Z").build()
    )


def test_parse_did_doc_with_updated():
    assert parse_did_doc(make_doc(updated="2002-10-10T17:00:00Z")) == Ok(
        DidDocumentBuilder(SUBJECT).updated_on("2002-10-10T17:00:00Z").build()
    )


def test_created_is_checked_before_updated():
    assert parse_did_doc(make_doc(created="bad", updated="bad")) == Err(DocumentError.INVALID_CREATED)


def test_timestamp_validation_can_be_disabled(settings):
    settings.DIDS_VALIDATE_TIMESTAMPS = False
    doc = parse_did_doc(make_doc(created="yesterday")).unwrap()
    assert doc.created == "yesterday"


def test_context_is_checked_before_timestamps():
    doc = make_doc(created="bad")
    doc["@context"] = "https://w3id.org/security/v1"
    assert parse_did_doc(doc) == Err(DocumentError.INVALID_CONTEXT)


# --- public keys ------------------------------------------------------------


def test_parse_did_doc_with_pub_keys():
    doc = {
        "@context": GENERIC_DID_CTX,
        "id": SUBJECT,
        "publicKey": [
            {
                "id": f"{SUBJECT}#keys-1",
                "type": "RsaVerificationKey2018",
                "controller": SUBJECT,
                "publicKeyPem": "-----BEGIN PUBLIC KEY...END PUBLIC KEY-----\r\n",
            },
            {
                "id": f"{SUBJECT}#keys-2",
                "type": "Ed25519VerificationKey2018",
                "controller": "did:example:pqrstuvwxyz0987654321",
                "publicKeyBase58": "H3C2AVvLMv6gmMNam3uVAjZpfkcJCwDwnZn6z3wXmqPV",
            },
            {
                "id": f"{SUBJECT}#keys-3",
                "type": "Secp256k1VerificationKey2018",
                "controller": SUBJECT,
                "publicKeyHex": "02b97c30de767f084ce3080168ee293053ba33b235d7116a3263d29f1450936b71",
            },
        ],
    }
    expected = (
        DidDocumentBuilder(SUBJECT)
        .with_pubkeys(
            [
                PublicKeyBuilder(f"{SUBJECT}#keys-1", PublicKeyType.RSA, SUBJECT)
                .with_encoded_key(PublicKeyEncoded.pem("-----BEGIN PUBLIC KEY...END PUBLIC KEY-----\r\n"))
                .build(),
                PublicKeyBuilder(
                    f"{SUBJECT}#keys-2", PublicKeyType.ED25519, "did:example:pqrstuvwxyz0987654321"
                )
                .with_encoded_key(PublicKeyEncoded.base58("H3C2AVvLMv6gmMNam3uVAjZpfkcJCwDwnZn6z3wXmqPV"))
                .build(),
                PublicKeyBuilder(f"{SUBJECT}#keys-3", PublicKeyType.ECDSA_SECP256K1, SUBJECT)
                .with_encoded_key(
                    PublicKeyEncoded.hex(
                        "02b97c30de767f084ce3080168ee293053ba33b235d7116a3263d29f1450936b71"
                    )
                )
                .build(),
            ]
        )
        .build()
    )
    assert parse_did_doc(doc) == Ok(expected)


def test_duplicate_public_key_id():
    doc = make_doc(publicKey=[make_key(1), make_key(1, publicKeyBase58=None, publicKeyHex="02ab")])
    assert parse_did_doc(doc) == Err("duplicate DID public key id")


@pytest.mark.parametrize(
    "key, error",
    [
        (make_key(id=None), DocumentError.MISSING_PUBKEY_ID),
        (make_key(id=42), DocumentError.MISSING_PUBKEY_ID),
        (make_key(id="keys-1"), DocumentError.INVALID_PUBKEY_ID),
        (make_key(type=None), DocumentError.MISSING_PUBKEY_TYPE),
        (make_key(type="JsonWebKey2020"), DocumentError.INVALID_PUBKEY_TYPE),
        (make_key(controller=None), DocumentError.MISSING_PUBKEY_CONTROLLER),
        (make_key(publicKeyBase58=None), DocumentError.MISSING_PUBKEY_PROPERTY),
        (make_key(publicKeyBase58=None, publicKeyJwk={"kty": "OKP"}), DocumentError.INVALID_PUBKEY_PROPERTY),
        ("did:example:123456789abcdefghi#keys-1", DocumentError.MISSING_PUBKEY_ID),
    ],
)
def test_public_key_errors(key, error):
    assert parse_did_doc(make_doc(publicKey=[key])) == Err(error)


def test_controller_may_be_any_string():
    doc = parse_did_doc(make_doc(publicKey=[make_key(controller="not a did")])).unwrap()
    assert doc.pub_keys[0].controller == "not a did"


@pytest.mark.parametrize(
    "prop, encoding",
    [
        ("publicKeyPem", KeyEncoding.PEM),
        ("publicKeyJwk", KeyEncoding.JWK),
        ("publicKeyHex", KeyEncoding.HEX),
        ("publicKeyBase58", KeyEncoding.BASE58),
        ("publicKeyBase64", KeyEncoding.BASE64),
        ("publicKeyMultibase", KeyEncoding.MULTIBASE),
        ("ethereumAddress", KeyEncoding.ETHR_ADDRESS),
    ],
)
def test_encoding_is_picked_from_property_name(prop, encoding):
    key = make_key(**{"publicKeyBase58": None, prop: "abc"})
    parsed = parse_did_doc(make_doc(publicKey=[key])).unwrap().pub_keys[0]
    assert parsed.encoded_key == PublicKeyEncoded(encoding, "abc")
    assert parsed.encoded_key.property_name == prop


def test_first_property_of_the_format_table_wins():
    key = make_key(publicKeyBase58=None, publicKeyHex="02ab", publicKeyPem="-----PEM-----")
    parsed = parse_did_doc(make_doc(publicKey=[key])).unwrap().pub_keys[0]
    assert parsed.encoded_key == PublicKeyEncoded.pem("-----PEM-----")


def test_public_key_list_stops_at_first_null():
    doc = make_doc(publicKey=[make_key(1), None, make_key(1), "garbage"])
    parsed = parse_did_doc(doc).unwrap()
    assert [k.id for k in parsed.pub_keys] == [f"{SUBJECT}#keys-1"]


def test_public_key_order_follows_source_order():
    doc = make_doc(publicKey=[make_key(3), make_key(1), make_key(2)])
    parsed = parse_did_doc(doc).unwrap()
    assert [k.id for k in parsed.pub_keys] == [f"{SUBJECT}#keys-{n}" for n in (3, 1, 2)]


def test_non_array_public_key_is_ignored():
    assert parse_did_doc(make_doc(publicKey=make_key(1))).unwrap().pub_keys == ()


def test_public_key_type_labels():
    assert PublicKeyType.from_label("RsaVerificationKey2018") == Ok(PublicKeyType.RSA)
    assert PublicKeyType.from_label("Ed25519VerificationKey2018") == Ok(PublicKeyType.ED25519)
    assert PublicKeyType.from_label("Secp256k1VerificationKey2018") == Ok(PublicKeyType.ECDSA_SECP256K1)
    assert PublicKeyType.from_label("rsaverificationkey2018") == Err("invalid DID public key type")


def test_unknown_property_is_unsupported():
    assert PublicKeyEncoded.from_property("publicKeyBase32", "abc").encoding == KeyEncoding.UNSUPPORTED


# --- authentication -------------------------------------------------------


def test_authentication_by_reference():
    doc = make_doc(publicKey=[make_key(1)], authentication=[f"{SUBJECT}#keys-1"])
    parsed = parse_did_doc(doc).unwrap()
    assert parsed.authentication == (Reference(f"{SUBJECT}#keys-1"),)


def test_authentication_unknown_reference():
    doc = make_doc(publicKey=[make_key(1)], authentication=[f"{SUBJECT}#keys-2"])
    assert parse_did_doc(doc) == Err("unknown reference verification method")


def test_authentication_invalid_reference():
    doc = make_doc(publicKey=[make_key(1)], authentication=["keys-1"])
    assert parse_did_doc(doc) == Err(DocumentError.INVALID_REFERENCE)


def test_authentication_embedded_key():
    doc = make_doc(publicKey=[make_key(1)], authentication=[f"{SUBJECT}#keys-1", make_key(2)])
    parsed = parse_did_doc(doc).unwrap()
    assert parsed.authentication[0] == Reference(f"{SUBJECT}#keys-1")
    embedded = parsed.authentication[1]
    assert isinstance(embedded, Embedded)
    assert embedded.key.id == f"{SUBJECT}#keys-2"
    assert embedded.key.key_type == PublicKeyType.ED25519
    assert parsed.find_key(f"{SUBJECT}#keys-2") == embedded.key
    assert parsed.find_key(f"{SUBJECT}#keys-9") is None


def test_embedded_key_colliding_with_public_key():
    doc = make_doc(publicKey=[make_key(1)], authentication=[make_key(1)])
    assert parse_did_doc(doc) == Err("duplicate public key id from embedded verification method")


def test_embedded_keys_colliding_with_each_other():
    doc = make_doc(authentication=[make_key(2), make_key(2)])
    assert parse_did_doc(doc) == Err(DocumentError.DUPLICATE_EMBEDDED_ID)


def test_embedded_key_errors_propagate():
    doc = make_doc(authentication=[make_key(2, type=None)])
    assert parse_did_doc(doc) == Err(DocumentError.MISSING_PUBKEY_TYPE)


@pytest.mark.parametrize("entry", [42, True, ["did:example:1"]])
def test_authentication_invalid_entry(entry):
    assert parse_did_doc(make_doc(authentication=[entry])) == Err("invalid embedded verification method")


def test_authentication_list_stops_at_first_null():
    doc = make_doc(publicKey=[make_key(1)], authentication=[f"{SUBJECT}#keys-1", None, 42])
    assert parse_did_doc(doc).unwrap().authentication == (Reference(f"{SUBJECT}#keys-1"),)


def test_reference_cannot_point_at_an_embedded_key():
    doc = make_doc(authentication=[make_key(2), f"{SUBJECT}#keys-2"])
    assert parse_did_doc(doc) == Err(DocumentError.UNKNOWN_REFERENCE)


# --- services ---------------------------------------------------------------


def test_service_with_uri_endpoint():
    parsed = parse_did_doc(make_doc(service=[make_service()])).unwrap()
    assert parsed.service == (
        Service(f"{SUBJECT}#openid", "OpenIdConnectVersion1.0Service", UriEndpoint("https://openid.example.com/")),
    )


@pytest.mark.parametrize(
    "svc, error",
    [
        (make_service(id=None), "missing service endpoint id"),
        (make_service(id="openid"), "invalid service endpoint id"),
        (make_service(type=None), "missing service endpoint type"),
        (
            make_service(serviceEndpoint={"@context": "https://schema.identity.foundation/hub", "type": "Hub"}),
            "invalid service endpoint JSON-LD object : unimplemented",
        ),
        (make_service(serviceEndpoint=None), "invalid service endpoint JSON-LD object : unimplemented"),
        (make_service(serviceEndpoint=["https://a.example.com/"]), "invalid service endpoint : unknown format"),
        (make_service(serviceEndpoint=443), "invalid service endpoint : unknown format"),
        (None, "missing service endpoint id"),
    ],
)
def test_service_errors(svc, error):
    assert parse_did_doc(make_doc(service=[svc])) == Err(error)


# --- ordering / wrappers ----------------------------------------------------


def test_first_error_wins():
    doc = make_doc(
        publicKey=[make_key(1, type="Unknown")],
        authentication=[42],
        service=[make_service(id=None)],
    )
    assert parse_did_doc(doc) == Err(DocumentError.INVALID_PUBKEY_TYPE)


def test_parse_did_doc_json():
    text = json.dumps(make_doc(publicKey=[make_key(1)], service=[make_service()]))
    parsed = parse_did_doc_json(text).unwrap()
    assert parsed.id == SUBJECT
    assert len(parsed.pub_keys) == 1


MALFORMED_JSON_INPUTS = [
    "{",
    "",
    b"\x80abc",
    '{"@context": "' + GENERIC_DID_CTX + '", "id": "did:example:1", "x": ' + "9" * 5000 + "}",
    "[" * 200000 + "]" * 200000,
]


@pytest.mark.parametrize(
    "text", MALFORMED_JSON_INPUTS, ids=["unterminated", "empty", "bad-utf8", "huge-int", "deep-nesting"]
)
def test_parse_did_doc_json_malformed(text):
    assert parse_did_doc_json(text) == Err("malformed DID document JSON")


def test_unwrap_error_raises_validation_error():
    with pytest.raises(ValidationError) as exc:
        parse_did_doc(make_doc(id="foobar")).unwrap()
    assert exc.value.message == "invalid DID subject"


def test_input_is_not_mutated():
    doc = make_doc(publicKey=[make_key(1)], authentication=[make_key(2)], service=[make_service()])
    snapshot = json.loads(json.dumps(doc))
    parse_did_doc(doc)
    assert doc == snapshot
