from __future__ import annotations

from django import forms

from apps.regions.models import City, Province
from apps.regions.services.validation import city_name_collides, province_name_collides


class ProvinceForm(forms.ModelForm):
    class Meta:
        model = Province
        fields = ("name",)

    def clean_name(self) -> str:
        name = self.cleaned_data["name"]
        if province_name_collides(name, exclude_id=self.instance.pk):
            raise forms.ValidationError(
                "A province with this name already exists.", code="duplicate"
            )
        return name


class CityForm(forms.ModelForm):
    class Meta:
        model = City
        fields = ("province", "name")

    def clean(self) -> dict:
        cleaned_data = super().clean()
        province = cleaned_data.get("province")
        name = cleaned_data.get("name")
        if province is not None and name:
            if city_name_collides(province.pk, name, exclude_id=self.instance.pk):
                self.add_error(
                    "name",
                    forms.ValidationError(
                        "A city with this name already exists in %(province)s.",
                        code="duplicate",
                        params={"province": province.name},
                    ),
                )
        return cleaned_data


class CityImportForm(forms.Form):
    file = forms.FileField(label="XLSX file")
    create_provinces = forms.BooleanField(
        label="Create missing provinces",
        required=False,
    )
    dry_run = forms.BooleanField(
        label="Validate only, do not save",
        required=False,
    )
