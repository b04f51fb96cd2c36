from django.contrib import admin, messages
from django.db.models import Count
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.urls import path

from .forms import CityForm, CityImportForm, ProvinceForm
from .models import City, Province
from .services.city_import import import_cities_from_xlsx
from .services.store import ReferenceDataStore

store = ReferenceDataStore()


class CityInline(admin.TabularInline):
    model = City
    extra = 0
    fields = ("name", "updated_at")
    readonly_fields = ("name", "updated_at")
    show_change_link = True
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Province)
class ProvinceAdmin(admin.ModelAdmin):
    form = ProvinceForm
    list_display = ("name", "city_count", "updated_at")
    search_fields = ("name",)
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")
    inlines = (CityInline,)

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(city_count=Count("cities"))

    @admin.display(description="Cities", ordering="city_count")
    def city_count(self, obj: Province) -> int:
        return obj.city_count

    def save_model(self, request, obj, form, change):
        if change:
            saved = store.update_province(obj.pk, obj.name)
        else:
            saved = store.create_province(obj.name)
        obj.pk = saved.pk
        obj.created_at = saved.created_at
        obj.updated_at = saved.updated_at

    def delete_model(self, request, obj):
        store.delete_province(obj.pk)

    def delete_queryset(self, request, queryset):
        for province_id in list(queryset.values_list("pk", flat=True)):
            store.delete_province(province_id)


@admin.register(City)
class CityAdmin(admin.ModelAdmin):
    form = CityForm
    list_display = ("name", "province", "updated_at")
    list_filter = ("province",)
    list_select_related = ("province",)
    search_fields = ("name", "province__name")
    ordering = ("province__name", "name")
    readonly_fields = ("created_at", "updated_at")
    autocomplete_fields = ("province",)
    change_list_template = "admin/regions/city/change_list.html"

    def save_model(self, request, obj, form, change):
        if change:
            saved = store.update_city(obj.pk, obj.province_id, obj.name)
        else:
            saved = store.create_city(obj.province_id, obj.name)
        obj.pk = saved.pk
        obj.created_at = saved.created_at
        obj.updated_at = saved.updated_at

    def delete_model(self, request, obj):
        store.delete_city(obj.pk)

    def delete_queryset(self, request, queryset):
        store.delete_cities(queryset.values_list("pk", flat=True))

    def get_urls(self):
        urls = super().get_urls()
        custom_urls = [
            path(
                "import-xlsx/",
                self.admin_site.admin_view(self.import_xlsx_view),
                name="regions_city_import",
            )
        ]
        return custom_urls + urls

    def import_xlsx_view(self, request: HttpRequest) -> HttpResponse:
        if request.method == "POST":
            form = CityImportForm(request.POST, request.FILES)
            report = None
            if form.is_valid():
                try:
                    report = import_cities_from_xlsx(
                        form.cleaned_data["file"],
                        dry_run=form.cleaned_data["dry_run"],
                        create_provinces=form.cleaned_data["create_provinces"],
                    )
                except ValueError as exc:
                    form.add_error("file", str(exc))
            if report is not None:
                messages.success(
                    request,
                    (
                        "Import finished: "
                        f"provinces created {report.provinces_created}; "
                        f"cities created {report.cities_created}, "
                        f"already present {report.cities_existing}; "
                        f"empty rows skipped {report.ignored_rows}."
                    ),
                )
                for error in report.errors:
                    messages.error(request, error)
                return redirect("..")
        else:
            form = CityImportForm()
        context = {
            **self.admin_site.each_context(request),
            "form": form,
            "opts": self.model._meta,
            "title": "Import cities from XLSX",
        }
        return render(request, "admin/regions/city/import_xlsx.html", context)
