"""Mutation API for schemas. Every function returns a new snapshot."""
import uuid
from typing import Any, Mapping, Union
from appgen.core.errors import FieldNotFoundError
from appgen.schemas.schema import FieldDefinition, Operation, SchemaDefinition


NEW_FIELD_DEFAULTS = {
    "name": "new_field",
    "label": "New Field",
    "type": "string",
    "required": False,
}


def new_field_id() -> str:
    return uuid.uuid4().hex


def label_from_name(name: str) -> str:
    """Derive a display label from a field name (``publication_year`` -> ``Publication Year``)."""
    words = [w for w in name.replace("-", "_").split("_") if w]
    if not words:
        return name
    if len(words) == 1 and words[0].lower() == "id":
        return "ID"
    return " ".join(w[:1].upper() + w[1:] for w in words)


def create_schema(result: Union[SchemaDefinition, Mapping[str, Any]]) -> SchemaDefinition:
    """
    Build a schema from an interpretation result.

    Any field ids supplied by the collaborator are discarded and replaced by
    fresh ones, so ids stay unique across submissions and refinements.

    Args:
        result: A SchemaDefinition or a mapping in its JSON shape
            (``entityName``, ``fields``, ``operations``)

    Returns:
        A new SchemaDefinition
    """
    if isinstance(result, SchemaDefinition):
        data = result.model_dump(by_alias=True)
    else:
        data = dict(result)

    fields = []
    for raw in data.get("fields") or []:
        field_data = dict(raw)
        field_data["id"] = new_field_id()
        if not field_data.get("label"):
            field_data["label"] = label_from_name(str(field_data.get("name", "")))
        fields.append(field_data)
    data["fields"] = fields

    return SchemaDefinition.model_validate(data)


def set_entity_name(schema: SchemaDefinition, name: str) -> SchemaDefinition:
    return schema.model_copy(update={"entity_name": name})


def update_field(schema: SchemaDefinition, field_id: str, **changes: Any) -> SchemaDefinition:
    """
    Merge ``changes`` into the field with ``field_id``.

    Name uniqueness is deliberately not checked here; duplicates are reported
    by validation so a name can be edited through an intermediate duplicate.
    Changes may use either Python names or JSON aliases (``defaultValue``).
    """
    changes.pop("id", None)
    fields = list(schema.fields)
    for index, field in enumerate(fields):
        if field.id == field_id:
            merged = {**field.model_dump(), **changes}
            if "defaultValue" in changes:
                merged["default_value"] = merged.pop("defaultValue")
            # Empty string clears the default, as an emptied input box would.
            if merged.get("default_value") == "":
                merged["default_value"] = None
            fields[index] = FieldDefinition.model_validate(merged)
            return schema.model_copy(update={"fields": tuple(fields)})
    raise FieldNotFoundError(field_id)


def add_field(schema: SchemaDefinition) -> SchemaDefinition:
    field = FieldDefinition(id=new_field_id(), **NEW_FIELD_DEFAULTS)
    return schema.model_copy(update={"fields": schema.fields + (field,)})


def remove_field(schema: SchemaDefinition, field_id: str) -> SchemaDefinition:
    if schema.get_field(field_id) is None:
        raise FieldNotFoundError(field_id)
    fields = tuple(f for f in schema.fields if f.id != field_id)
    return schema.model_copy(update={"fields": fields})


def toggle_operation(schema: SchemaDefinition, op: Union[Operation, str]) -> SchemaDefinition:
    name = Operation(op).value
    current = getattr(schema.operations, name)
    operations = schema.operations.model_copy(update={name: not current})
    return schema.model_copy(update={"operations": operations})


def set_pagination(schema: SchemaDefinition, enabled: bool) -> SchemaDefinition:
    return schema.model_copy(update={"paginate": bool(enabled)})
