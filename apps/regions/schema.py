from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

from apps.regions.models import NAME_MAX_LENGTH
from apps.regions.services.validation import normalize_name


@dataclass(frozen=True)
class FieldSpec:
    name: str
    type: str
    label: str
    required: bool = True
    max_length: int | None = None
    unique: bool = False
    unique_within: str | None = None
    references: str | None = None
    read_only: bool = False


@dataclass(frozen=True)
class EntitySchema:
    """Presentation-neutral description of an entity and its field rules."""

    entity: str
    label: str
    fields: tuple[FieldSpec, ...] = field(default_factory=tuple)

    def get_field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def editable_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if not spec.read_only)

    def validate(self, data: Mapping[str, Any]) -> dict[str, list[str]]:
        """Check required and length rules; uniqueness needs the database."""
        errors: dict[str, list[str]] = {}
        for spec in self.editable_fields():
            value = data.get(spec.name)
            if spec.type == "string":
                value = normalize_name(value)
            if spec.required and value in (None, ""):
                errors.setdefault(spec.name, []).append(f"{spec.label} is required.")
                continue
            if spec.max_length and isinstance(value, str) and len(value) > spec.max_length:
                errors.setdefault(spec.name, []).append(
                    f"{spec.label} must be at most {spec.max_length} characters."
                )
        return errors

    def as_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity,
            "label": self.label,
            "fields": [asdict(spec) for spec in self.fields],
        }


_TIMESTAMP_FIELDS = (
    FieldSpec("created_at", "datetime", "Created at", required=False, read_only=True),
    FieldSpec("updated_at", "datetime", "Updated at", required=False, read_only=True),
)

PROVINCE_SCHEMA = EntitySchema(
    entity="province",
    label="Province",
    fields=(
        FieldSpec("id", "integer", "ID", required=False, read_only=True),
        FieldSpec(
            "name",
            "string",
            "Province name",
            max_length=NAME_MAX_LENGTH,
            unique=True,
        ),
        *_TIMESTAMP_FIELDS,
    ),
)

CITY_SCHEMA = EntitySchema(
    entity="city",
    label="City",
    fields=(
        FieldSpec("id", "integer", "ID", required=False, read_only=True),
        FieldSpec("province", "reference", "Province", references="province"),
        FieldSpec(
            "name",
            "string",
            "City name",
            max_length=NAME_MAX_LENGTH,
            unique_within="province",
        ),
        *_TIMESTAMP_FIELDS,
    ),
)

SCHEMAS = {schema.entity: schema for schema in (PROVINCE_SCHEMA, CITY_SCHEMA)}


def get_schema(entity: str) -> EntitySchema:
    try:
        return SCHEMAS[entity]
    except KeyError as exc:
        raise LookupError(f"Unknown entity: {entity}") from exc
