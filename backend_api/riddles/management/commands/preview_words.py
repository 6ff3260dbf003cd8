from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from riddles.puzzles import IngestionError, dedupe, decode_upload, format_from_filename, parse


class Command(BaseCommand):
    help = "Parse a word file (.txt, .csv or .json) and print the puzzles it would load."

    def add_arguments(self, parser):
        parser.add_argument("path", help="Word file to read.")
        parser.add_argument(
            "--format",
            choices=["text", "csv", "json"],
            help="File format; inferred from the extension when omitted.",
        )
        parser.add_argument(
            "--max-words",
            type=int,
            default=settings.RIDDLES_MAX_WORDS,
            help="Maximum number of words kept after removing duplicates.",
        )

    def handle(self, *args, **options):
        # PUBLIC_INTERFACE
        # Read-only: nothing is persisted.
        path = Path(options["path"])
        try:
            data = path.read_bytes()
        except OSError as e:
            raise CommandError(f"Cannot read {path}: {e}") from e

        format_hint = options["format"] or format_from_filename(path.name)
        try:
            items = dedupe(parse(decode_upload(data), format_hint), options["max_words"])
        except IngestionError as e:
            raise CommandError(f"{path.name}: {e}") from e

        for n, item in enumerate(items, start=1):
            line = f"{n:2d}. {item.word}"
            if item.hint:
                line += f" | {item.hint}"
            self.stdout.write(line)
        self.stdout.write(self.style.SUCCESS(f"{len(items)} words from {path.name} ({format_hint})."))
