from django.db import models

from apps.core.models import TimestampedModel

NAME_MAX_LENGTH = 255


class Province(TimestampedModel):
    id = models.BigAutoField(primary_key=True)
    name = models.CharField(
        max_length=NAME_MAX_LENGTH,
        unique=True,
        verbose_name="Province name",
    )

    class Meta:
        verbose_name = "Province"
        verbose_name_plural = "Provinces"
        ordering = ("name",)

    def __str__(self) -> str:
        return self.name


class City(TimestampedModel):
    id = models.BigAutoField(primary_key=True)
    province = models.ForeignKey(
        Province,
        on_delete=models.CASCADE,
        related_name="cities",
        verbose_name="Province",
    )
    name = models.CharField(
        max_length=NAME_MAX_LENGTH,
        verbose_name="City name",
    )

    class Meta:
        verbose_name = "City"
        verbose_name_plural = "Cities"
        ordering = ("province__name", "name")
        constraints = [
            models.UniqueConstraint(
                fields=["province", "name"],
                name="uq_city_province_name",
            )
        ]

    def __str__(self) -> str:
        return self.name
