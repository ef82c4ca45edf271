"""Build pydantic response models from JSON example data."""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, create_model

ENVELOPE_FIELD = "schema"

_FIELD_NAME_RE = re.compile(r"[^0-9a-zA-Z_]")


class _ExampleModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


def _field_name(key: str, index: int) -> str:
    name = _FIELD_NAME_RE.sub("_", key)
    if (
        not name
        or name[0].isdigit()
        or name.startswith("_")
        or name.startswith("model_")
        or hasattr(BaseModel, name)
    ):
        name = f"field_{index}_{name.strip('_')}"
    return name


def _annotation_for(example: Any, name: str) -> Any:
    if isinstance(example, dict):
        return model_from_example(example, name)
    if isinstance(example, list):
        if not example:
            return list[Any]
        return list[_annotation_for(example[0], f"{name}Item")]
    return str


def model_from_example(example: dict[str, Any], name: str = "ExampleSchema") -> type[BaseModel]:
    """Convert JSON example data into a pydantic model.

    Keys map to fields; arrays take the shape of their first element;
    string leaves become ``str`` fields described by the example string;
    every other leaf defaults to ``str``. Original keys are kept as
    aliases so validation and dumps use them.

    Args:
        example: Parsed JSON object.
        name: Model class name.

    Returns:
        A dynamically created BaseModel subclass.
    """
    fields: dict[str, Any] = {}
    for index, (key, value) in enumerate(example.items()):
        field_name = _field_name(key, index)
        if field_name in fields:
            field_name = f"{field_name}_{index}"
        annotation = _annotation_for(value, f"{name}_{field_name}")
        if isinstance(value, str):
            field = Field(alias=key, description=value)
        else:
            field = Field(alias=key)
        fields[field_name] = (annotation, field)
    return create_model(name, __base__=_ExampleModel, **fields)


def build_response_schema(example: Any, name: str = "ResponseSchema") -> type[BaseModel]:
    """Wrap example-derived schema in an envelope nesting it under ``schema``.

    Non-object examples (arrays, scalars) are supported through the same
    leaf rules as nested values.
    """
    inner = _annotation_for(example, name)
    return create_model(
        f"{name}Envelope",
        __base__=_ExampleModel,
        payload=(inner, Field(alias=ENVELOPE_FIELD)),
    )


def wrap_model(model: type[BaseModel]) -> type[BaseModel]:
    """Envelope an existing pydantic model under ``schema``."""
    return create_model(
        f"{model.__name__}Envelope",
        __base__=_ExampleModel,
        payload=(model, Field(alias=ENVELOPE_FIELD)),
    )


def resolve_response_schema(schema: Any) -> type[BaseModel] | None:
    """Normalize a caller schema into an envelope model.

    Accepts None, an envelope built by this module, any BaseModel
    subclass, or JSON example data.
    """
    if schema is None:
        return None
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        if is_envelope(schema):
            return schema
        return wrap_model(schema)
    return build_response_schema(schema)


def is_envelope(model: type[BaseModel]) -> bool:
    field = model.model_fields.get("payload")
    return field is not None and field.alias == ENVELOPE_FIELD and len(model.model_fields) == 1


def unwrap_payload(envelope: BaseModel) -> Any:
    """Return the validated payload as plain JSON-compatible data."""
    dumped = envelope.model_dump(by_alias=True, mode="json")
    return dumped[ENVELOPE_FIELD]
