import hashlib

import rfc8785


def dumps_bytes(document: dict) -> bytes:
    return rfc8785.dumps(document)


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
