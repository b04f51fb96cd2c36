import pytest
from django.contrib.auth import get_user_model

from apps.core.apps import create_default_admin


@pytest.mark.django_db
def test_create_default_admin_is_idempotent(settings) -> None:
    settings.APP_ADMIN_LOGIN = "registry-admin"
    settings.APP_ADMIN_PASSWORD = "secret"
    user_model = get_user_model()

    create_default_admin()
    create_default_admin()

    user = user_model.objects.get(username="registry-admin")
    assert user.is_superuser is True
    assert user.is_staff is True
    assert user.check_password("secret")
    assert user_model.objects.filter(username="registry-admin").count() == 1


@pytest.mark.django_db
def test_create_default_admin_skips_without_password(settings) -> None:
    settings.APP_ADMIN_LOGIN = "nobody"
    settings.APP_ADMIN_PASSWORD = ""

    create_default_admin()

    assert not get_user_model().objects.filter(username="nobody").exists()
