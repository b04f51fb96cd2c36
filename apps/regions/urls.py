from django.urls import path

from . import views

app_name = "regions"

urlpatterns = [
    path("provinces/", views.province_list, name="province_list"),
    path(
        "provinces/<int:province_id>/cities/",
        views.province_cities,
        name="province_cities",
    ),
    path("cities/", views.city_list, name="city_list"),
    path("schema/<slug:entity>/", views.entity_schema, name="entity_schema"),
]
