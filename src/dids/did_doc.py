from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Union

from django.db import models

from src.dids.errors import DocumentError
from src.dids.result import Err, Ok, Result

GENERIC_DID_CTX = "https://www.w3.org/2019/did/v1"


class PublicKeyType(models.TextChoices):
    RSA = "RsaVerificationKey2018", "Rsa"
    ED25519 = "Ed25519VerificationKey2018", "Ed25519"
    ECDSA_SECP256K1 = "Secp256k1VerificationKey2018", "EcdsaSecp256k1"

    @classmethod
    def from_label(cls, label: str) -> Result["PublicKeyType", str]:
        try:
            return Ok(cls(label))
        except ValueError:
            return Err(DocumentError.INVALID_PUBKEY_TYPE)


class KeyEncoding(models.TextChoices):
    PEM = "PEM", "Pem"
    JWK = "JWK", "Jwk"
    HEX = "HEX", "Hex"
    BASE64 = "BASE64", "Base64"
    BASE58 = "BASE58", "Base58"
    MULTIBASE = "MULTIBASE", "Multibase"
    ETHR_ADDRESS = "ETHR_ADDRESS", "EthrAddress"
    NONE = "NONE", "None"
    UNSUPPORTED = "UNSUPPORTED", "Unsupported"


KEYPEM_PROP = "publicKeyPem"
KEYJWK_PROP = "publicKeyJwk"
KEYHEX_PROP = "publicKeyHex"
KEYB58_PROP = "publicKeyBase58"
KEYB64_PROP = "publicKeyBase64"
KEYMUL_PROP = "publicKeyMultibase"
KEYETH_PROP = "ethereumAddress"

# Property name -> encoding; the order is the lookup order on a key object.
KEY_FORMATS: tuple[tuple[str, KeyEncoding], ...] = (
    (KEYPEM_PROP, KeyEncoding.PEM),
    (KEYJWK_PROP, KeyEncoding.JWK),
    (KEYHEX_PROP, KeyEncoding.HEX),
    (KEYB58_PROP, KeyEncoding.BASE58),
    (KEYB64_PROP, KeyEncoding.BASE64),
    (KEYMUL_PROP, KeyEncoding.MULTIBASE),
    (KEYETH_PROP, KeyEncoding.ETHR_ADDRESS),
)
_FORMAT_BY_PROP = dict(KEY_FORMATS)
_PROP_BY_FORMAT = {enc: prop for prop, enc in KEY_FORMATS}


@dataclass(frozen=True)
class PublicKeyEncoded:
    encoding: KeyEncoding
    value: str | None = None

    @classmethod
    def from_property(cls, prop: str, value: str) -> "PublicKeyEncoded":
        encoding = _FORMAT_BY_PROP.get(prop)
        if encoding is None:
            return cls(KeyEncoding.UNSUPPORTED)
        return cls(encoding, value)

    @classmethod
    def none(cls) -> "PublicKeyEncoded":
        return cls(KeyEncoding.NONE)

    @classmethod
    def pem(cls, value: str) -> "PublicKeyEncoded":
        return cls(KeyEncoding.PEM, value)

    @classmethod
    def jwk(cls, value: str) -> "PublicKeyEncoded":
        return cls(KeyEncoding.JWK, value)

    @classmethod
    def hex(cls, value: str) -> "PublicKeyEncoded":
        return cls(KeyEncoding.HEX, value)

    @classmethod
    def base64(cls, value: str) -> "PublicKeyEncoded":
        return cls(KeyEncoding.BASE64, value)

    @classmethod
    def base58(cls, value: str) -> "PublicKeyEncoded":
        return cls(KeyEncoding.BASE58, value)

    @classmethod
    def multibase(cls, value: str) -> "PublicKeyEncoded":
        return cls(KeyEncoding.MULTIBASE, value)

    @classmethod
    def ethr_address(cls, value: str) -> "PublicKeyEncoded":
        return cls(KeyEncoding.ETHR_ADDRESS, value)

    @property
    def property_name(self) -> str | None:
        return _PROP_BY_FORMAT.get(self.encoding)


@dataclass(frozen=True)
class PublicKey:
    id: str
    key_type: PublicKeyType
    controller: str
    encoded_key: PublicKeyEncoded = field(default_factory=PublicKeyEncoded.none)


class PublicKeyBuilder:
    def __init__(self, id: str, key_type: PublicKeyType, controller: str):
        self.id = id
        self.key_type = key_type
        self.controller = controller
        self.encoded_key = PublicKeyEncoded.none()

    def with_encoded_key(self, encoded_key: PublicKeyEncoded) -> "PublicKeyBuilder":
        self.encoded_key = encoded_key
        return self

    def build(self) -> PublicKey:
        return PublicKey(self.id, self.key_type, self.controller, self.encoded_key)


@dataclass(frozen=True)
class Reference:
    """Authentication by reference to a key of the document's publicKey list."""

    did: str

    @property
    def id(self) -> str:
        return self.did


@dataclass(frozen=True)
class Embedded:
    """Authentication key declared inline."""

    key: PublicKey

    @property
    def id(self) -> str:
        return self.key.id


VerificationMethod = Union[Reference, Embedded]


@dataclass(frozen=True)
class UriEndpoint:
    uri: str


# JSON-LD endpoint objects are not modelled; the parser rejects them.
ServiceEndpoint = UriEndpoint


@dataclass(frozen=True)
class Service:
    id: str
    svc_type: str
    endpoint: ServiceEndpoint


@dataclass(frozen=True)
class DidDocument:
    id: str
    context: str = GENERIC_DID_CTX
    created: str | None = None
    updated: str | None = None
    authentication: tuple[VerificationMethod, ...] = ()
    pub_keys: tuple[PublicKey, ...] = ()
    service: tuple[Service, ...] = ()

    @classmethod
    def parse(cls, json_value) -> Result["DidDocument", str]:
        from src.dids.diddoc_parser import parse_did_doc

        return parse_did_doc(json_value)

    def find_key(self, key_id: str) -> PublicKey | None:
        """Look a key up by id among publicKey entries, then embedded authentication keys."""
        for key in self.pub_keys:
            if key.id == key_id:
                return key
        for vm in self.authentication:
            if isinstance(vm, Embedded) and vm.key.id == key_id:
                return vm.key
        return None


class DidDocumentBuilder:
    def __init__(self, id: str):
        self.id = id
        self.context = GENERIC_DID_CTX
        self.created: str | None = None
        self.updated: str | None = None
        self.authentication: list[VerificationMethod] = []
        self.pub_keys: list[PublicKey] = []
        self.service: list[Service] = []

    def created_on(self, created: str) -> "DidDocumentBuilder":
        self.created = created
        return self

    def updated_on(self, updated: str) -> "DidDocumentBuilder":
        self.updated = updated
        return self

    def with_authentication(self, methods: Iterable[VerificationMethod]) -> "DidDocumentBuilder":
        self.authentication.extend(methods)
        return self

    def with_pubkeys(self, keys: Iterable[PublicKey]) -> "DidDocumentBuilder":
        self.pub_keys.extend(keys)
        return self

    def with_services(self, services: Iterable[Service]) -> "DidDocumentBuilder":
        self.service.extend(services)
        return self

    def add_pubkey(self, key: PublicKey) -> "DidDocumentBuilder":
        self.pub_keys.append(key)
        return self

    def add_authentication(self, method: VerificationMethod) -> "DidDocumentBuilder":
        self.authentication.append(method)
        return self

    def add_service(self, service: Service) -> "DidDocumentBuilder":
        self.service.append(service)
        return self

    def build(self) -> DidDocument:
        return DidDocument(
            id=self.id,
            context=self.context,
            created=self.created,
            updated=self.updated,
            authentication=tuple(self.authentication),
            pub_keys=tuple(self.pub_keys),
            service=tuple(self.service),
        )
