import pytest

from apps.core import views


@pytest.mark.django_db
def test_health_ok(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["checks"]["db_default"]["ok"] is True


@pytest.mark.django_db
def test_health_reports_failed_database(client, monkeypatch) -> None:
    def broken_check(_alias: str) -> None:
        raise RuntimeError("database is down")

    monkeypatch.setattr(views, "_check_db", broken_check)

    response = client.get("/health")

    assert response.status_code == 503
    payload = response.json()
    assert payload["ok"] is False
    assert payload["checks"]["db_default"] == {"ok": False, "error": "database is down"}
