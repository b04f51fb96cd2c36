from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods

from .errors import NotFoundError
from .schema import get_schema
from .services.store import ReferenceDataStore

store = ReferenceDataStore()


def _error(message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": message}, status=status)


@require_http_methods(["GET"])
def province_list(request: HttpRequest) -> JsonResponse:
    """API: all provinces with their city counts."""

    provinces = [
        {"id": province.id, "name": province.name, "city_count": province.city_count}
        for province in store.list_provinces()
    ]
    return JsonResponse({"results": provinces})


@require_http_methods(["GET"])
def province_cities(request: HttpRequest, province_id: int) -> JsonResponse:
    """API: cities of one province."""

    try:
        province = store.get_province(province_id)
    except NotFoundError as exc:
        return _error(exc.message, 404)
    cities = [
        {"id": city.id, "name": city.name}
        for city in store.list_cities(province_id=province.id)
    ]
    return JsonResponse(
        {
            "province": {"id": province.id, "name": province.name},
            "results": cities,
        }
    )


@require_http_methods(["GET"])
def city_list(request: HttpRequest) -> JsonResponse:
    """API: cities joined with their province name, optionally filtered."""

    province_param = request.GET.get("province")
    province_id = None
    if province_param:
        try:
            province_id = int(province_param)
        except ValueError:
            return _error("province must be an integer id", 400)
    cities = [
        {
            "id": city.id,
            "name": city.name,
            "province_id": city.province_id,
            "province_name": city.province_name,
        }
        for city in store.list_cities(province_id=province_id)
    ]
    return JsonResponse({"results": cities})


@require_http_methods(["GET"])
def entity_schema(request: HttpRequest, entity: str) -> JsonResponse:
    try:
        schema = get_schema(entity)
    except LookupError as exc:
        return _error(str(exc), 404)
    return JsonResponse(schema.as_dict())
