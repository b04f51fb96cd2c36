from __future__ import annotations

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from apps.regions.services.city_import import import_cities_from_xlsx


class Command(BaseCommand):
    help = "Import cities from an XLSX file with Province and City columns."

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "--path",
            required=True,
            help="Path to the XLSX file.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Validate the file without saving changes.",
        )
        parser.add_argument(
            "--create-provinces",
            action="store_true",
            help="Create provinces that do not exist yet.",
        )

    def handle(self, *args, **options) -> None:
        path = Path(options["path"])
        if not path.exists():
            raise CommandError(f"File not found: {path}")

        try:
            report = import_cities_from_xlsx(
                path,
                dry_run=options["dry_run"],
                create_provinces=options["create_provinces"],
            )
        except ValueError as exc:
            raise CommandError(str(exc)) from exc
        self.stdout.write(
            self.style.SUCCESS(
                "Import finished: "
                f"provinces created {report.provinces_created}; "
                f"cities created {report.cities_created}, "
                f"already present {report.cities_existing}; "
                f"empty rows skipped {report.ignored_rows}."
            )
        )
        for error in report.errors:
            self.stdout.write(self.style.ERROR(error))
