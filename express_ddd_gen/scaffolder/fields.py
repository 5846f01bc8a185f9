"""Schema field definitions for the database generators.

``--fields`` takes a JSON array of ``{name, type, required, ...constraints}``
objects.  :func:`parse_fields` validates it into :class:`SchemaField` models;
:func:`enrich_mongodb_fields` and :func:`enrich_mysql_fields` turn them into
the template-ready dicts the Mongoose / Sequelize templates expect.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import UserInputError
from .templates import ts_literal


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

_NUMERIC_CONSTRAINTS = ("length", "min", "max")


class SchemaField(BaseModel):
    """One schema field.

    The numeric constraints ``length``, ``min`` and ``max`` are validated;
    any other extra key (``unique``, ``enum``, ``default`` ...) is kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    type: str
    required: bool = False
    length: Optional[int] = Field(default=None, gt=0)
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None

    @field_validator("name", "type")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    def constraints(self) -> dict[str, Any]:
        """The keys supplied beyond ``name``/``type``/``required``."""
        values = {key: getattr(self, key) for key in _NUMERIC_CONSTRAINTS if getattr(self, key) is not None}
        values.update(self.model_extra or {})
        return values


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_fields(raw: str) -> list[SchemaField]:
    """Parse a ``--fields`` JSON string.

    Shells often mangle double quotes, so a value that is not valid JSON is
    retried once with single quotes swapped for double quotes.

    Raises:
        UserInputError: If the value is not a JSON array of objects that each
            carry a ``name`` and a ``type``.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        try:
            data = json.loads(raw.replace("'", '"'))
        except json.JSONDecodeError as exc:
            raise UserInputError(f"Invalid --fields JSON: {exc.msg} (value: {raw!r})") from exc
    return validate_fields(data)


def validate_fields(data: Any) -> list[SchemaField]:
    """Validate already-decoded field data (from ``--fields`` or ``--config``)."""
    if not isinstance(data, list):
        raise UserInputError("Fields must be a JSON array of field objects")

    fields: list[SchemaField] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise UserInputError(f"Field at index {index} must be an object")
        if not item.get("name"):
            raise UserInputError(f"Field at index {index} is missing 'name' property")
        if not item.get("type"):
            raise UserInputError(f"Field '{item['name']}' is missing 'type' property")
        try:
            fields.append(SchemaField.model_validate(item))
        except ValidationError as exc:
            raise UserInputError(f"Invalid field '{item['name']}': {exc}") from exc
    return fields


# ---------------------------------------------------------------------------
# Type maps
# ---------------------------------------------------------------------------

_TS_TYPE_MAP: dict[str, str] = {
    "string": "string",
    "text": "string",
    "uuid": "string",
    "number": "number",
    "integer": "number",
    "float": "number",
    "decimal": "number",
    "boolean": "boolean",
    "date": "Date",
    "array": "any[]",
    "object": "Record<string, any>",
    "json": "Record<string, any>",
}

_MONGOOSE_TYPE_MAP: dict[str, str] = {
    "string": "String",
    "text": "String",
    "uuid": "String",
    "number": "Number",
    "integer": "Number",
    "float": "Number",
    "decimal": "Number",
    "boolean": "Boolean",
    "date": "Date",
    "array": "[Schema.Types.Mixed]",
}

_SEQUELIZE_TYPE_MAP: dict[str, str] = {
    "string": "DataTypes.STRING",
    "text": "DataTypes.TEXT",
    "number": "DataTypes.INTEGER",
    "integer": "DataTypes.INTEGER",
    "float": "DataTypes.FLOAT",
    "decimal": "DataTypes.DECIMAL",
    "boolean": "DataTypes.BOOLEAN",
    "date": "DataTypes.DATE",
    "enum": "DataTypes.ENUM",
    "json": "DataTypes.JSON",
    "object": "DataTypes.JSON",
    "array": "DataTypes.JSON",
    "uuid": "DataTypes.UUID",
}

# Mongoose schema options copied verbatim from a field when present.
_MONGOOSE_OPTIONS = (
    "unique", "index", "default", "trim", "lowercase", "uppercase",
    "minlength", "maxlength", "min", "max", "enum",
)


def ts_type(field_type: str) -> str:
    return _TS_TYPE_MAP.get(field_type.lower(), "any")


def mongoose_type(field_type: str) -> str:
    return _MONGOOSE_TYPE_MAP.get(field_type.lower(), "Schema.Types.Mixed")


def sequelize_type(field_type: str) -> str:
    return _SEQUELIZE_TYPE_MAP.get(field_type.lower(), "DataTypes.STRING")


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_MONGODB_FIELDS: list[dict[str, Any]] = [
    {"name": "name", "type": "string", "required": True, "trim": True},
    {"name": "email", "type": "string", "required": True, "unique": True, "lowercase": True, "trim": True},
    {"name": "isActive", "type": "boolean", "default": True},
]

DEFAULT_MYSQL_FIELDS: list[dict[str, Any]] = [
    {"name": "name", "type": "string", "required": True, "length": 255},
    {"name": "description", "type": "text"},
    {"name": "isActive", "type": "boolean", "default": True},
]


# ---------------------------------------------------------------------------
# Enrichment
# ---------------------------------------------------------------------------


def _object_literal(parts: list[tuple[str, str]]) -> str:
    return "{ " + ", ".join(f"{key}: {value}" for key, value in parts) + " }"


def enrich_mongodb_field(field: SchemaField) -> dict[str, Any]:
    """Add ``tsType`` and a Mongoose ``definition`` literal to *field*."""
    extra = field.constraints()
    parts = [("type", mongoose_type(field.type))]
    if field.required:
        parts.append(("required", "true"))
    for option in _MONGOOSE_OPTIONS:
        if option in extra and extra[option] is not None:
            parts.append((option, ts_literal(extra[option])))
    return {
        **field.model_dump(),
        "tsType": ts_type(field.type),
        "definition": _object_literal(parts),
    }


def enrich_mysql_field(field: SchemaField) -> dict[str, Any]:
    """Add ``tsType``, ``sequelizeType`` and a Sequelize attribute literal."""
    extra = field.constraints()
    column_type = sequelize_type(field.type)
    if column_type == "DataTypes.ENUM" and extra.get("enum"):
        column_type = f"DataTypes.ENUM({', '.join(ts_literal(v) for v in extra['enum'])})"
    elif column_type == "DataTypes.STRING" and extra.get("length"):
        column_type = f"DataTypes.STRING({extra['length']})"

    parts = [("type", column_type), ("allowNull", "false" if field.required else "true")]
    if extra.get("unique"):
        parts.append(("unique", "true"))
    if extra.get("default") is not None:
        parts.append(("defaultValue", ts_literal(extra["default"])))

    validate: dict[str, Any] = {}
    if extra.get("min") is not None:
        validate["min"] = extra["min"]
    if extra.get("max") is not None:
        validate["max"] = extra["max"]
    if extra.get("length") and field.type.lower() == "string":
        validate["len"] = [0, extra["length"]]
    if validate:
        parts.append(("validate", ts_literal(validate)))

    return {
        **field.model_dump(),
        "tsType": ts_type(field.type),
        "sequelizeType": column_type,
        "definition": _object_literal(parts),
    }


def enrich_mongodb_fields(fields: list[SchemaField] | None) -> list[dict[str, Any]]:
    """Enrich *fields*, falling back to :data:`DEFAULT_MONGODB_FIELDS` when empty."""
    if not fields:
        fields = validate_fields(DEFAULT_MONGODB_FIELDS)
    return [enrich_mongodb_field(f) for f in fields]


def enrich_mysql_fields(fields: list[SchemaField] | None) -> list[dict[str, Any]]:
    """Enrich *fields*, falling back to :data:`DEFAULT_MYSQL_FIELDS` when empty.

    An ``id`` field is dropped; the model always declares a UUID primary key.
    """
    if not fields:
        fields = validate_fields(DEFAULT_MYSQL_FIELDS)
    return [enrich_mysql_field(f) for f in fields if f.name != "id"]
