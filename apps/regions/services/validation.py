from __future__ import annotations

from apps.regions.models import City, Province


def normalize_name(value: object | None) -> str:
    if value is None:
        return ""
    return str(value).strip()


def province_name_collides(name: str, exclude_id: int | None = None) -> bool:
    queryset = Province.objects.filter(name=normalize_name(name))
    if exclude_id is not None:
        queryset = queryset.exclude(pk=exclude_id)
    return queryset.exists()


def city_name_collides(
    province_id: int | None, name: str, exclude_id: int | None = None
) -> bool:
    """Return True if another city under ``province_id`` already uses ``name``.

    ``province_id`` is the province proposed by the caller, not the one
    stored on the row being edited, so moving a city to another province is
    checked against that province's cities.
    """
    if province_id is None:
        return False
    queryset = City.objects.filter(province_id=province_id, name=normalize_name(name))
    if exclude_id is not None:
        queryset = queryset.exclude(pk=exclude_id)
    return queryset.exists()
