from src.dids.did_doc import (
    DidDocument,
    Embedded,
    KeyEncoding,
    PublicKey,
    Reference,
    Service,
    UriEndpoint,
    VerificationMethod,
)
from src.dids.diddoc_parser import (
    AUTHN_PROP,
    CONTEXT_PROP,
    CREATED_PROP,
    CTRL_PROP,
    ID_PROP,
    PUBKEYS_PROP,
    SERVICE_PROP,
    SUBJECT_PROP,
    SVCENDP_PROP,
    TYPE_PROP,
    UPDATED_PROP,
)
from .ordering import order_did_document


def render_public_key(key: PublicKey) -> dict:
    out = {
        ID_PROP: key.id,
        TYPE_PROP: key.key_type.value,
        CTRL_PROP: key.controller,
    }
    # NONE / UNSUPPORTED have no property to carry them
    prop = key.encoded_key.property_name
    if prop and key.encoded_key.encoding not in (KeyEncoding.NONE, KeyEncoding.UNSUPPORTED):
        out[prop] = key.encoded_key.value
    return out


def render_verification_method(vm: VerificationMethod):
    if isinstance(vm, Reference):
        return vm.did
    if isinstance(vm, Embedded):
        return render_public_key(vm.key)
    raise ValueError(f"Unsupported verification method: {vm!r}")


def render_service(svc: Service) -> dict:
    if not isinstance(svc.endpoint, UriEndpoint):
        raise ValueError(f"Unsupported service endpoint: {svc.endpoint!r}")
    return {
        ID_PROP: svc.id,
        TYPE_PROP: svc.svc_type,
        SVCENDP_PROP: svc.endpoint.uri,
    }


def render_did_document(doc: DidDocument) -> dict:
    """
    JSON-ready dict for ``doc`` in the preferred key order.
    Empty collections and unset timestamps are omitted.
    """
    out = {
        CONTEXT_PROP: doc.context,
        SUBJECT_PROP: doc.id,
    }
    if doc.created is not None:
        out[CREATED_PROP] = doc.created
    if doc.updated is not None:
        out[UPDATED_PROP] = doc.updated
    if doc.pub_keys:
        out[PUBKEYS_PROP] = [render_public_key(k) for k in doc.pub_keys]
    if doc.authentication:
        out[AUTHN_PROP] = [render_verification_method(vm) for vm in doc.authentication]
    if doc.service:
        out[SERVICE_PROP] = [render_service(s) for s in doc.service]
    return order_did_document(out)
