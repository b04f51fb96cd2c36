from __future__ import annotations

import logging
import os
import time

from django.db import connections
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect
from django.utils import timezone
from django.views.decorators.http import require_http_methods

logger = logging.getLogger(__name__)


def root(request: HttpRequest) -> HttpResponse:
    return redirect("admin:index")


def _check_db(alias: str) -> dict[str, object]:
    connection = connections[alias]
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")
    return {"vendor": connection.vendor}


@require_http_methods(["GET"])
def health_view(request: HttpRequest) -> JsonResponse:
    start = time.monotonic()
    checks: dict[str, dict[str, object]] = {}

    def record(name: str, action: callable) -> None:
        try:
            extra = action() or {}
            checks[name] = {"ok": True, **extra}
        except Exception as exc:  # noqa: BLE001
            checks[name] = {"ok": False, "error": str(exc)}
            logger.exception("Healthcheck failed for %s", name)

    record("db_default", lambda: _check_db("default"))

    elapsed_ms = int((time.monotonic() - start) * 1000)
    ok = all(check.get("ok", False) for check in checks.values())
    payload = {
        "ok": ok,
        "timestamp": timezone.now().isoformat(),
        "version": os.environ.get("APP_VERSION", "dev"),
        "checks": checks,
        "elapsed_ms": elapsed_ms,
    }
    status = 200 if ok else 503
    return JsonResponse(payload, status=status)
