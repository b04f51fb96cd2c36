import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from openpyxl import Workbook

from apps.regions.models import City, Province


@pytest.mark.django_db
def test_admin_changelists_render(admin_client, store, alberta) -> None:
    store.create_city(alberta.pk, "Calgary")

    province_response = admin_client.get(reverse("admin:regions_province_changelist"))
    city_response = admin_client.get(
        reverse("admin:regions_city_changelist"), {"province__id__exact": alberta.pk}
    )

    assert province_response.status_code == 200
    assert city_response.status_code == 200
    assert b"Calgary" in city_response.content


@pytest.mark.django_db
def test_admin_add_city_shows_duplicate_error(admin_client, store, alberta) -> None:
    store.create_city(alberta.pk, "Calgary")

    response = admin_client.post(
        reverse("admin:regions_city_add"),
        {"province": alberta.pk, "name": "Calgary"},
    )

    assert response.status_code == 200
    assert "A city with this name already exists in Alberta." in response.content.decode()
    assert City.objects.filter(name="Calgary").count() == 1


@pytest.mark.django_db
def test_admin_add_and_edit_city(admin_client, alberta, ontario) -> None:
    response = admin_client.post(
        reverse("admin:regions_city_add"),
        {"province": alberta.pk, "name": "Calgary"},
    )
    assert response.status_code == 302
    city = City.objects.get(name="Calgary")

    response = admin_client.post(
        reverse("admin:regions_city_change", args=[city.pk]),
        {"province": ontario.pk, "name": "Calgary"},
    )

    assert response.status_code == 302
    city.refresh_from_db()
    assert city.province_id == ontario.pk


@pytest.mark.django_db
def test_admin_delete_province_cascades(admin_client, store, alberta, ontario) -> None:
    store.create_city(alberta.pk, "Calgary")
    store.create_city(ontario.pk, "Toronto")

    response = admin_client.post(
        reverse("admin:regions_province_delete", args=[alberta.pk]),
        {"post": "yes"},
    )

    assert response.status_code == 302
    assert not Province.objects.filter(pk=alberta.pk).exists()
    assert list(City.objects.values_list("name", flat=True)) == ["Toronto"]


@pytest.mark.django_db
def test_admin_bulk_delete_cities(admin_client, store, alberta) -> None:
    cities = [store.create_city(alberta.pk, name) for name in ("Calgary", "Edmonton", "Banff")]

    response = admin_client.post(
        reverse("admin:regions_city_changelist"),
        {
            "action": "delete_selected",
            "_selected_action": [cities[0].pk, cities[1].pk],
            "post": "yes",
        },
    )

    assert response.status_code == 302
    assert list(City.objects.values_list("name", flat=True)) == ["Banff"]


@pytest.mark.django_db
def test_admin_import_xlsx(admin_client, alberta, tmp_path) -> None:
    workbook = Workbook()
    workbook.active.append(["Alberta", "Calgary"])
    path = tmp_path / "cities.xlsx"
    workbook.save(path)
    upload = SimpleUploadedFile("cities.xlsx", path.read_bytes())

    page = admin_client.get(reverse("admin:regions_city_import"))
    response = admin_client.post(reverse("admin:regions_city_import"), {"file": upload})

    assert page.status_code == 200
    assert response.status_code == 302
    assert City.objects.filter(province=alberta, name="Calgary").exists()


@pytest.mark.django_db
def test_admin_import_xlsx_rejects_file_that_is_not_a_workbook(admin_client, alberta) -> None:
    upload = SimpleUploadedFile("cities.xlsx", b"not a workbook")

    response = admin_client.post(reverse("admin:regions_city_import"), {"file": upload})

    assert response.status_code == 200
    assert "Not a readable XLSX workbook" in response.content.decode()
    assert City.objects.count() == 0
