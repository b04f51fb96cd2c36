import pytest

from apps.regions.services.validation import (
    city_name_collides,
    normalize_name,
    province_name_collides,
)


def test_normalize_name() -> None:
    assert normalize_name("  Red Deer ") == "Red Deer"
    assert normalize_name(None) == ""
    assert normalize_name(42) == "42"


def test_city_collision_is_scoped_to_proposed_province(store, alberta, ontario) -> None:
    calgary = store.create_city(alberta.pk, "Calgary")

    assert city_name_collides(alberta.pk, "Calgary") is True
    assert city_name_collides(alberta.pk, " Calgary ") is True
    assert city_name_collides(ontario.pk, "Calgary") is False
    assert city_name_collides(alberta.pk, "Calgary", exclude_id=calgary.pk) is False


def test_city_collision_when_moving_into_province(store, alberta, ontario) -> None:
    store.create_city(ontario.pk, "London")
    city = store.create_city(alberta.pk, "London")

    assert city_name_collides(ontario.pk, "London", exclude_id=city.pk) is True


@pytest.mark.django_db
def test_city_collision_without_province_is_false() -> None:
    assert city_name_collides(None, "Calgary") is False


def test_province_collision_ignores_self(alberta) -> None:
    assert province_name_collides("Alberta") is True
    assert province_name_collides("Alberta", exclude_id=alberta.pk) is False
    assert province_name_collides("Manitoba") is False
