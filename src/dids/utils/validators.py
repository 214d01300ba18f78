from functools import lru_cache
from importlib import resources
import jsonschema
import json


@lru_cache(maxsize=1)
def did_document_schema() -> dict:
    with resources.files("src.dids.jsonschemas").joinpath("did_document.schema.json").open("rb") as f:
        return json.load(f)


def validate_did_document(doc: dict):
    """
    Structural check against the packaged JSON Schema.
    Raises jsonschema.ValidationError; semantic rules (duplicate ids, unknown
    references) are left to the document parser.
    """
    jsonschema.validate(instance=doc, schema=did_document_schema())


def did_document_schema_errors(doc) -> list[str]:
    validator = jsonschema.Draft202012Validator(did_document_schema())
    return [
        f"{'/'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}"
        for err in sorted(validator.iter_errors(doc), key=lambda e: [str(p) for p in e.absolute_path])
    ]
