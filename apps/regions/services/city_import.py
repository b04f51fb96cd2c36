from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import BinaryIO, Iterable
from zipfile import BadZipFile

from django.db import transaction
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from apps.regions.errors import DuplicateNameError
from apps.regions.models import NAME_MAX_LENGTH, Province
from apps.regions.services.store import ReferenceDataStore
from apps.regions.services.validation import normalize_name

logger = logging.getLogger(__name__)

HEADER = ("province", "city")


@dataclass
class CityImportReport:
    provinces_created: int = 0
    cities_created: int = 0
    cities_existing: int = 0
    ignored_rows: int = 0
    errors: list[str] = field(default_factory=list)

    def add_error(self, row_number: int, reason: str) -> None:
        self.errors.append(f"row {row_number}: {reason}")


def _iter_rows(values: Iterable[tuple[object | None, ...]]) -> Iterable[tuple[str, str]]:
    for row in values:
        if not row:
            yield "", ""
            continue
        province = normalize_name(row[0]) if len(row) > 0 else ""
        city = normalize_name(row[1]) if len(row) > 1 else ""
        yield province, city


def import_cities_from_xlsx(
    source: str | BinaryIO,
    *,
    dry_run: bool = False,
    create_provinces: bool = False,
) -> CityImportReport:
    """Import ``Province | City`` rows from the first sheet of a workbook.

    An optional ``Province, City`` header row is skipped. With ``dry_run``
    the whole import is rolled back after validation. Raises ``ValueError``
    when ``source`` is not a readable XLSX workbook.
    """
    try:
        workbook = load_workbook(source, data_only=True)
    except (BadZipFile, InvalidFileException, KeyError) as exc:
        raise ValueError(f"Not a readable XLSX workbook: {exc}") from exc
    sheet = workbook.active
    store = ReferenceDataStore()
    report = CityImportReport()
    province_ids = dict(Province.objects.values_list("name", "pk"))

    with transaction.atomic():
        for row_index, (province_name, city_name) in enumerate(
            _iter_rows(sheet.iter_rows(values_only=True)), start=1
        ):
            if row_index == 1 and (province_name.lower(), city_name.lower()) == HEADER:
                continue
            if not province_name and not city_name:
                report.ignored_rows += 1
                continue
            if not province_name:
                report.add_error(row_index, "province is empty")
                continue
            if not city_name:
                report.add_error(row_index, "city is empty")
                continue
            if len(province_name) > NAME_MAX_LENGTH or len(city_name) > NAME_MAX_LENGTH:
                report.add_error(row_index, f"name is too long (>{NAME_MAX_LENGTH})")
                continue

            province_id = province_ids.get(province_name)
            if province_id is None:
                if not create_provinces:
                    report.add_error(row_index, f"unknown province '{province_name}'")
                    continue
                province_id = store.create_province(province_name).pk
                province_ids[province_name] = province_id
                report.provinces_created += 1

            try:
                store.create_city(province_id, city_name)
            except DuplicateNameError:
                report.cities_existing += 1
            else:
                report.cities_created += 1

        if dry_run:
            transaction.set_rollback(True)

    logger.info(
        "City import finished (dry_run=%s): created %s, existing %s, errors %s",
        dry_run,
        report.cities_created,
        report.cities_existing,
        len(report.errors),
    )
    return report
