from __future__ import annotations

import logging
from typing import Iterable

from django.db import IntegrityError, transaction
from django.db.models import Count, F, QuerySet

from apps.regions.errors import (
    DuplicateNameError,
    ForeignKeyError,
    InvalidNameError,
    NotFoundError,
)
from apps.regions.models import NAME_MAX_LENGTH, City, Province
from apps.regions.services.validation import (
    city_name_collides,
    normalize_name,
    province_name_collides,
)

logger = logging.getLogger(__name__)


def _clean_name(value: object | None, label: str) -> str:
    name = normalize_name(value)
    if not name:
        raise InvalidNameError(f"{label} name is required.")
    if len(name) > NAME_MAX_LENGTH:
        raise InvalidNameError(
            f"{label} name must be at most {NAME_MAX_LENGTH} characters."
        )
    return name


class ReferenceDataStore:
    """Persistence for provinces and cities.

    Every write runs inside ``transaction.atomic()``. The uniqueness
    predicates fail fast before touching the table; the database constraints
    remain the authority, and their ``IntegrityError`` is mapped back onto
    the same error types.
    """

    def get_province(self, province_id: int) -> Province:
        try:
            return Province.objects.get(pk=province_id)
        except Province.DoesNotExist as exc:
            raise NotFoundError(f"Province {province_id} does not exist.") from exc

    def get_city(self, city_id: int) -> City:
        try:
            return City.objects.select_related("province").get(pk=city_id)
        except City.DoesNotExist as exc:
            raise NotFoundError(f"City {city_id} does not exist.") from exc

    def list_provinces(self) -> QuerySet[Province]:
        return Province.objects.annotate(city_count=Count("cities")).order_by("name")

    def list_cities(self, province_id: int | None = None) -> QuerySet[City]:
        queryset = (
            City.objects.select_related("province")
            .annotate(province_name=F("province__name"))
            .order_by("province__name", "name")
        )
        if province_id is not None:
            queryset = queryset.filter(province_id=province_id)
        return queryset

    def create_province(self, name: str) -> Province:
        name = _clean_name(name, "Province")
        try:
            with transaction.atomic():
                if province_name_collides(name):
                    raise DuplicateNameError(f"Province '{name}' already exists.")
                province = Province.objects.create(name=name)
        except IntegrityError as exc:
            raise DuplicateNameError(f"Province '{name}' already exists.") from exc
        logger.info("Created province %s (%s)", province.pk, province.name)
        return province

    def update_province(self, province_id: int, name: str) -> Province:
        name = _clean_name(name, "Province")
        try:
            with transaction.atomic():
                province = self._lock_province(province_id)
                if province_name_collides(name, exclude_id=province.pk):
                    raise DuplicateNameError(f"Province '{name}' already exists.")
                province.name = name
                province.save(update_fields=["name", "updated_at"])
        except IntegrityError as exc:
            raise DuplicateNameError(f"Province '{name}' already exists.") from exc
        logger.info("Renamed province %s to %s", province.pk, province.name)
        return province

    def delete_province(self, province_id: int) -> int:
        """Delete a province together with its cities; return the city count."""
        with transaction.atomic():
            province = self._lock_province(province_id)
            _, deleted = province.delete()
        cities_removed = deleted.get(City._meta.label, 0)
        logger.info(
            "Deleted province %s with %s cities", province_id, cities_removed
        )
        return cities_removed

    def create_city(self, province_id: int, name: str) -> City:
        name = _clean_name(name, "City")
        try:
            with transaction.atomic():
                self._ensure_province(province_id)
                if city_name_collides(province_id, name):
                    raise self._duplicate_city(province_id, name)
                city = City.objects.create(province_id=province_id, name=name)
        except IntegrityError as exc:
            raise self._integrity_to_city_error(province_id, name) from exc
        logger.info("Created city %s (%s) in province %s", city.pk, city.name, province_id)
        return city

    def update_city(self, city_id: int, province_id: int, name: str) -> City:
        name = _clean_name(name, "City")
        try:
            with transaction.atomic():
                city = self._lock_city(city_id)
                self._ensure_province(province_id)
                if city_name_collides(province_id, name, exclude_id=city.pk):
                    raise self._duplicate_city(province_id, name)
                city.province_id = province_id
                city.name = name
                city.save(update_fields=["province", "name", "updated_at"])
        except IntegrityError as exc:
            raise self._integrity_to_city_error(province_id, name) from exc
        logger.info("Updated city %s to %s in province %s", city.pk, city.name, province_id)
        return city

    def delete_city(self, city_id: int) -> None:
        with transaction.atomic():
            city = self._lock_city(city_id)
            city.delete()
        logger.info("Deleted city %s", city_id)

    def delete_cities(self, city_ids: Iterable[int]) -> int:
        ids = list(city_ids)
        if not ids:
            return 0
        with transaction.atomic():
            removed, _ = City.objects.filter(pk__in=ids).delete()
        logger.info("Deleted %s cities in bulk", removed)
        return removed

    def _lock_province(self, province_id: int) -> Province:
        province = (
            Province.objects.select_for_update().filter(pk=province_id).order_by("pk").first()
        )
        if province is None:
            raise NotFoundError(f"Province {province_id} does not exist.")
        return province

    def _lock_city(self, city_id: int) -> City:
        city = City.objects.select_for_update().filter(pk=city_id).order_by("pk").first()
        if city is None:
            raise NotFoundError(f"City {city_id} does not exist.")
        return city

    def _ensure_province(self, province_id: int | None) -> None:
        # Row lock keeps the province from being deleted before the
        # deferred foreign key check runs at commit.
        if province_id is None:
            raise ForeignKeyError("Province is required.")
        try:
            self._lock_province(province_id)
        except NotFoundError as exc:
            raise ForeignKeyError(f"Province {province_id} does not exist.") from exc

    @staticmethod
    def _duplicate_city(province_id: int, name: str) -> DuplicateNameError:
        return DuplicateNameError(
            f"City '{name}' already exists in province {province_id}."
        )

    def _integrity_to_city_error(self, province_id: int, name: str) -> Exception:
        if not Province.objects.filter(pk=province_id).exists():
            return ForeignKeyError(f"Province {province_id} does not exist.")
        return self._duplicate_city(province_id, name)
