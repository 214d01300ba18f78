import json
import logging
import pathlib

from django.core.management.base import BaseCommand, CommandError
from src.dids.diddoc_parser import parse_did_doc
from src.dids.did_document_compiler.builders import render_did_document
from src.dids.canonical.jcs import dumps_bytes, sha256_hex
from src.dids.errors import DocumentError
from src.dids.schemas import ValidateReport
from src.dids.utils.validators import did_document_schema_errors

log = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Validate a DID Document JSON file and print its JCS SHA-256"

    def add_arguments(self, parser):
        parser.add_argument("path", type=str)
        parser.add_argument(
            "--schema", action="store_true", help="Also check the document against the JSON Schema"
        )
        parser.add_argument("--json", action="store_true", help="Print a JSON report")

    def handle(self, *args, **opts):
        path = pathlib.Path(opts["path"])
        try:
            document = json.loads(path.read_bytes())
        except OSError as e:
            raise CommandError(f"Cannot read {path}: {e}") from e
        except (ValueError, RecursionError) as e:
            raise CommandError(f"Invalid DID Document: {DocumentError.MALFORMED_JSON}") from e

        schema_errors = []
        if opts["schema"]:
            schema_errors = did_document_schema_errors(document)
            if schema_errors:
                raise CommandError("Schema validation failed: " + "; ".join(schema_errors))

        result = parse_did_doc(document)
        if result.is_err():
            log.info("dids_validate: %s rejected: %s", path, result.unwrap_err())
            raise CommandError(f"Invalid DID Document: {result.unwrap_err()}")

        doc = result.unwrap()
        # digest the normalized form so key order and unknown props do not matter
        digest = sha256_hex(dumps_bytes(render_did_document(doc)))
        if opts["json"]:
            report = ValidateReport.from_document(doc, digest=digest, schema_errors=schema_errors)
            self.stdout.write(report.model_dump_json())
            return
        self.stdout.write(self.style.SUCCESS(f"Valid ✓  JCS SHA-256: {digest}"))
