from __future__ import annotations

from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.regions.models import Province
from apps.regions.services.seed import load_reference_data, read_seed_file
from apps.regions.services.store import ReferenceDataStore
from apps.regions.services.validation import normalize_name


def _resolve_path(path_value: str) -> Path:
    path = Path(path_value)
    if path.is_absolute():
        return path
    return Path(settings.BASE_DIR) / path


class Command(BaseCommand):
    help = "Load provinces and cities from a YAML seed file."

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "--file",
            default=settings.REGIONS_SEED_FILE,
            help="Path to the YAML seed file (default: configs/regions.yaml).",
        )
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete the provinces listed in the file (with their cities) before loading.",
        )

    @transaction.atomic
    def handle(self, *args, **options) -> None:
        seed_path = _resolve_path(options["file"])
        if not seed_path.exists():
            raise CommandError(f"Seed file not found: {seed_path}")

        try:
            data = read_seed_file(seed_path)
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        if options["reset"]:
            self._reset(data)

        report = load_reference_data(data)
        self.stdout.write(
            self.style.SUCCESS(
                "Regions seeded. "
                f"Provinces created: {report.provinces_created}, "
                f"existing: {report.provinces_existing}; "
                f"cities created: {report.cities_created}, "
                f"existing: {report.cities_existing}."
            )
        )
        for error in report.errors:
            self.stdout.write(self.style.ERROR(error))

    def _reset(self, data: dict) -> None:
        store = ReferenceDataStore()
        names = [normalize_name(name) for name in data.get("provinces") or []]
        province_ids = list(
            Province.objects.filter(name__in=names).values_list("pk", flat=True)
        )
        for province_id in province_ids:
            store.delete_province(province_id)
