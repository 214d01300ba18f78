from django.core.management.base import BaseCommand, CommandError
from src.dids.did_parser import parse_did
from src.dids.schemas import DidReport


class Command(BaseCommand):
    help = "Parse a DID string and print its components"

    def add_arguments(self, parser):
        parser.add_argument("did", type=str)
        parser.add_argument("--json", action="store_true", help="Print a JSON report")

    def handle(self, *args, **opts):
        result = parse_did(opts["did"])
        if result.is_err():
            raise CommandError(f"Invalid DID: {result.unwrap_err()}")

        parsed = result.unwrap()
        if opts["json"]:
            self.stdout.write(DidReport.from_did(parsed).model_dump_json())
            return

        self.stdout.write(f"method: {parsed.method_name}")
        self.stdout.write(f"method-specific-id: {parsed.method_specific_id}")
        for p in parsed.params or ():
            self.stdout.write(f"param: {p}")
        if parsed.fragment is not None:
            self.stdout.write(f"fragment: {parsed.fragment}")
        self.stdout.write(self.style.SUCCESS(f"Valid ✓  {parsed}"))
