import pytest
from django.conf import settings
from django.core.management import call_command
from django.core.management.base import CommandError

from apps.regions.errors import DuplicateNameError
from apps.regions.models import City, Province
from apps.regions.services.seed import load_reference_data, read_seed_file

CANADIAN_PROVINCES = [
    "Alberta",
    "British Columbia",
    "Manitoba",
    "New Brunswick",
    "Newfoundland and Labrador",
    "Northwest Territories",
    "Nova Scotia",
    "Nunavut",
    "Ontario",
    "Prince Edward Island",
    "Quebec",
    "Saskatchewan",
    "Yukon",
]


@pytest.mark.django_db
def test_seed_regions_loads_all_provinces_and_cities() -> None:
    call_command("seed_regions")

    assert sorted(Province.objects.values_list("name", flat=True)) == CANADIAN_PROVINCES
    assert City.objects.count() == 68
    assert set(
        City.objects.filter(province__name="Alberta").values_list("name", flat=True)
    ) == {"Calgary", "Edmonton", "Red Deer", "Lethbridge", "Medicine Hat"}
    assert City.objects.filter(province__name="Newfoundland and Labrador", name="St. John's").exists()


@pytest.mark.django_db
def test_seed_regions_is_idempotent() -> None:
    call_command("seed_regions")
    call_command("seed_regions")
    call_command("seed_regions", "--reset")

    assert Province.objects.count() == 13
    assert City.objects.count() == 68


@pytest.mark.django_db
def test_seed_regions_missing_file(tmp_path) -> None:
    with pytest.raises(CommandError):
        call_command("seed_regions", "--file", str(tmp_path / "missing.yaml"))


@pytest.mark.django_db
def test_seeded_scenario_calgary(store) -> None:
    call_command("seed_regions")
    alberta = Province.objects.get(name="Alberta")
    ontario = Province.objects.get(name="Ontario")
    ontario_cities = set(ontario.cities.values_list("pk", flat=True))

    with pytest.raises(DuplicateNameError):
        store.create_city(alberta.pk, "Calgary")
    ontario_calgary = store.create_city(ontario.pk, "Calgary")

    store.delete_province(alberta.pk)

    assert not City.objects.filter(name__in=["Calgary", "Edmonton"], province_id=alberta.pk).exists()
    assert set(ontario.cities.values_list("pk", flat=True)) == ontario_cities | {ontario_calgary.pk}


@pytest.mark.django_db
def test_load_reference_data_reports_unknown_province_and_bad_names() -> None:
    report = load_reference_data(
        {
            "provinces": ["Alberta", " "],
            "cities": {"Alberta": ["Calgary", ""], "Atlantis": ["Poseidonia"]},
        }
    )

    assert report.provinces_created == 1
    assert report.cities_created == 1
    assert report.errors == [
        "province ' ': invalid name",
        "city '' in 'Alberta': invalid name",
        "cities of 'Atlantis': unknown province",
    ]
    assert not City.objects.filter(name="Poseidonia").exists()


def test_read_seed_file_rejects_non_mapping(tmp_path) -> None:
    path = tmp_path / "regions.yaml"
    path.write_text("- Alberta\n", encoding="utf-8")

    with pytest.raises(ValueError):
        read_seed_file(path)


def test_bundled_seed_file_lists_thirteen_provinces() -> None:
    data = read_seed_file(settings.BASE_DIR / "configs" / "regions.yaml")

    assert data["provinces"] == CANADIAN_PROVINCES
    assert set(data["cities"]) == set(CANADIAN_PROVINCES)


@pytest.mark.django_db
@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("provinces: [Alberta\ncities: {\n", "not valid YAML"),
        ("provinces: [Alberta]\ncities: [Calgary]\n", "'cities' must map province names"),
        ("provinces: Alberta\n", "'provinces' must be a list"),
        ("provinces: [Alberta]\ncities:\n  Alberta: Calgary\n", "cities of 'Alberta' must be a list"),
    ],
)
def test_seed_regions_rejects_malformed_file(tmp_path, content, message) -> None:
    path = tmp_path / "regions.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(CommandError, match=message):
        call_command("seed_regions", "--file", str(path))

    assert Province.objects.count() == 0


@pytest.mark.django_db
def test_load_reference_data_rejects_bad_layout() -> None:
    with pytest.raises(ValueError):
        load_reference_data({"provinces": ["Alberta"], "cities": ["Calgary"]})

    assert Province.objects.count() == 0


@pytest.mark.django_db
def test_seed_writes_go_through_store(caplog) -> None:
    with caplog.at_level("INFO", logger="apps.regions.services.store"):
        report = load_reference_data(
            {"provinces": ["Alberta"], "cities": {"Alberta": ["Calgary", "Calgary"]}}
        )

    assert report.cities_created == 1
    assert report.cities_existing == 1
    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Created province") for message in messages)
    assert sum(message.startswith("Created city") for message in messages) == 1
