from django.contrib import admin
from django.urls import include, path

from apps.core import views as core_views

urlpatterns = [
    path("", core_views.root, name="root"),
    path("admin/", admin.site.urls),
    path("health", core_views.health_view, name="health"),
    path("api/regions/", include("apps.regions.urls")),
]
