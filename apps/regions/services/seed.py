from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Mapping

import yaml
from django.db import transaction

from apps.regions.errors import DuplicateNameError
from apps.regions.models import NAME_MAX_LENGTH, Province
from apps.regions.services.store import ReferenceDataStore
from apps.regions.services.validation import normalize_name

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    provinces_created: int = 0
    provinces_existing: int = 0
    cities_created: int = 0
    cities_existing: int = 0
    errors: list[str] = field(default_factory=list)


def check_seed_data(data: object) -> None:
    """Raise ``ValueError`` unless ``data`` has the provinces/cities layout."""
    if not isinstance(data, Mapping):
        raise ValueError("Seed data must be a mapping at the top level.")
    provinces = data.get("provinces")
    if provinces is not None and not isinstance(provinces, list):
        raise ValueError("'provinces' must be a list of names.")
    cities = data.get("cities")
    if cities is None:
        return
    if not isinstance(cities, Mapping):
        raise ValueError("'cities' must map province names to lists of city names.")
    for province_name, city_names in cities.items():
        if city_names is not None and not isinstance(city_names, list):
            raise ValueError(f"cities of {province_name!r} must be a list of names.")


def read_seed_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Seed file {path} is not valid YAML: {exc}") from exc
    try:
        check_seed_data(data)
    except ValueError as exc:
        raise ValueError(f"Seed file {path}: {exc}") from exc
    return data


def _valid_name(name: str) -> bool:
    return bool(name) and len(name) <= NAME_MAX_LENGTH


def load_reference_data(data: Mapping[str, Any]) -> SeedReport:
    """Load provinces, then cities, keyed by the ids captured in the first phase."""
    check_seed_data(data)
    store = ReferenceDataStore()
    report = SeedReport()
    province_ids: dict[str, int] = {}

    with transaction.atomic():
        for raw_name in data.get("provinces") or []:
            name = normalize_name(raw_name)
            if not _valid_name(name):
                report.errors.append(f"province {raw_name!r}: invalid name")
                continue
            try:
                province_ids[name] = store.create_province(name).pk
            except DuplicateNameError:
                province_ids[name] = Province.objects.get(name=name).pk
                report.provinces_existing += 1
            else:
                report.provinces_created += 1

        cities: Mapping[str, Any] = data.get("cities") or {}
        for raw_province, city_names in cities.items():
            province_name = normalize_name(raw_province)
            province_id = province_ids.get(province_name)
            if province_id is None:
                report.errors.append(f"cities of {province_name!r}: unknown province")
                continue
            for raw_city in city_names or []:
                city_name = normalize_name(raw_city)
                if not _valid_name(city_name):
                    report.errors.append(
                        f"city {raw_city!r} in {province_name!r}: invalid name"
                    )
                    continue
                try:
                    store.create_city(province_id, city_name)
                except DuplicateNameError:
                    report.cities_existing += 1
                else:
                    report.cities_created += 1

    logger.info(
        "Seeded regions: provinces +%s, cities +%s, errors %s",
        report.provinces_created,
        report.cities_created,
        len(report.errors),
    )
    return report
