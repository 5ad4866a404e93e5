"""Naming helpers shared by the generators."""
import json
import keyword
import re
from typing import Dict, Iterable, Optional, Tuple
from appgen.schemas.schema import FieldDefinition, SchemaDefinition


IDENTITY_COLUMN = "id"


def to_snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', name)
    s2 = re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1)
    return s2.lower()


def to_kebab_case(name: str) -> str:
    """Convert PascalCase or camelCase to kebab-case."""
    return to_snake_case(name).replace('_', '-')


def to_pascal_case(name: str) -> str:
    """Convert snake_case or camelCase to PascalCase."""
    if '_' not in name:
        return name[:1].upper() + name[1:]
    return "".join(part[:1].upper() + part[1:] for part in name.split('_') if part) or name


def pluralize(word: str) -> str:
    """Simple English pluralization of a lower-case word."""
    if word.endswith('s') or word.endswith('x') or word.endswith('z') or word.endswith('ch') or word.endswith('sh'):
        return word + 'es'
    elif word.endswith('y') and len(word) > 1 and word[-2] not in 'aeiou':
        return word[:-1] + 'ies'
    else:
        return word + 's'


def table_name(entity_name: str) -> str:
    """Entity name to table name: snake_case with the last word pluralized (OrderItem -> order_items)."""
    snake = to_snake_case(entity_name)
    words = [w for w in snake.split('_') if w]
    if not words:
        return pluralize(snake)
    words[-1] = pluralize(words[-1])
    return '_'.join(words)


def entity_to_path(entity_name: str) -> str:
    """Entity name to API path segment (OrderItem -> order-items)."""
    return table_name(entity_name).replace('_', '-')


def is_identity_field(field: FieldDefinition) -> bool:
    return field.name.lower() == IDENTITY_COLUMN


def split_identity(schema: SchemaDefinition) -> Tuple[Optional[FieldDefinition], Tuple[FieldDefinition, ...]]:
    """Return the declared identity field (if any) and the remaining data fields in order."""
    identity = None
    data_fields = []
    for field in schema.fields:
        if identity is None and is_identity_field(field):
            identity = field
        else:
            data_fields.append(field)
    return identity, tuple(data_fields)


def js_string(value: str) -> str:
    """Quote a string as a JavaScript/Python double-quoted literal."""
    return json.dumps(value)


# Attribute names taken by SQLAlchemy's declarative layer, pydantic or the generated model
RESERVED_ATTRIBUTE_NAMES = {"metadata", "registry", "model_config", "to_dict"}


def py_name(name: str) -> str:
    """
    Attribute/parameter name for a field.

    Keywords and reserved names get a ``_`` suffix. Leading underscores are
    moved to the end (``_notes`` -> ``notes_``), or kept behind an ``f``
    prefix when only digits would lead; pydantic treats underscored
    attributes as private.
    """
    if name.startswith("_"):
        stripped = name.lstrip("_")
        if not stripped or stripped[0].isdigit():
            return "f" + name
        return stripped + "_"
    if keyword.iskeyword(name) or name in RESERVED_ATTRIBUTE_NAMES:
        return name + "_"
    return name


def attribute_names(fields: Iterable[FieldDefinition]) -> Dict[str, str]:
    """Map each field name to a Python attribute name, unique across ``fields``."""
    fields = list(fields)
    taken = {IDENTITY_COLUMN} | {f.name for f in fields}
    names = {}
    for field in fields:
        attr = py_name(field.name)
        if attr != field.name:
            while attr in taken:
                attr += "_"
            taken.add(attr)
        names[field.name] = attr
    return names
