from pydantic import BaseModel, field_validator

from src.dids.did import Did
from src.dids.did_doc import DidDocument, Embedded


class DidParamOut(BaseModel):
    name: str
    value: str | None = None


class DidReport(BaseModel):
    did: str
    method_name: str
    method_specific_id: str
    params: list[DidParamOut] | None = None
    fragment: str | None = None

    @classmethod
    def from_did(cls, parsed: Did) -> "DidReport":
        return cls(
            did=str(parsed),
            method_name=parsed.method_name,
            method_specific_id=parsed.method_specific_id,
            params=[DidParamOut(name=p.name, value=p.value) for p in parsed.params]
            if parsed.params is not None
            else None,
            fragment=parsed.fragment,
        )


##########################################################################


class ValidateReport(BaseModel):
    did: str | None = None
    valid: bool
    error: str | None = None
    schema_errors: list[str] = []
    canonical_sha256: str | None = None
    public_keys: int = 0
    authentication: int = 0
    embedded_keys: int = 0
    services: int = 0

    @field_validator("canonical_sha256")
    @classmethod
    def _validate_digest(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().lower()
        if len(v) != 64 or any(c not in "0123456789abcdef" for c in v):
            raise ValueError("canonical_sha256 must be a hex SHA-256 digest")
        return v

    @classmethod
    def from_document(cls, doc: DidDocument, *, digest: str, schema_errors=None) -> "ValidateReport":
        return cls(
            did=doc.id,
            valid=True,
            canonical_sha256=digest,
            schema_errors=list(schema_errors or []),
            public_keys=len(doc.pub_keys),
            authentication=len(doc.authentication),
            embedded_keys=sum(1 for vm in doc.authentication if isinstance(vm, Embedded)),
            services=len(doc.service),
        )
