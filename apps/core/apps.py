import logging

from django.apps import AppConfig
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models.signals import post_migrate

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.core"

    def ready(self) -> None:
        post_migrate.connect(create_default_admin, sender=self)


def create_default_admin(**_kwargs) -> None:
    admin_login = settings.APP_ADMIN_LOGIN
    admin_password = settings.APP_ADMIN_PASSWORD
    if not admin_login or not admin_password:
        return
    user_model = get_user_model()
    if user_model.objects.filter(username=admin_login).exists():
        return
    user_model.objects.create_superuser(username=admin_login, password=admin_password)
    logger.info("Created default admin user %s", admin_login)
