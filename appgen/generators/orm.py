"""ORM generator: a SQLAlchemy 2.0 declarative model for one entity."""
from typing import List
from appgen.generators.types import coerce_default, get_mapping
from appgen.generators.utils import (
    IDENTITY_COLUMN,
    attribute_names,
    js_string,
    split_identity,
    table_name,
    to_pascal_case,
)
from appgen.schemas.schema import FieldDefinition, SchemaDefinition


def _server_default_arg(field: FieldDefinition) -> str:
    value = coerce_default(field.type, field.default_value)
    if isinstance(value, bool):
        return f'text("{"true" if value else "false"}")'
    if isinstance(value, int):
        return f'text("{value}")'
    return js_string(value)


def _sa_type_name(storage: str) -> str:
    return storage.split("(", 1)[0]


def render_orm_column(field: FieldDefinition, attr: str) -> str:
    """One mapped attribute line for a declared field, bound to attribute ``attr``."""
    mapping = get_mapping(field.type)

    annotation = mapping.binding if field.required else f"Optional[{mapping.binding}]"

    args = []
    if attr != field.name:
        args.append(js_string(field.name))
    args.append(mapping.storage)
    args.append("nullable=False" if field.required else "nullable=True")
    if field.default_value is not None:
        args.append(f"server_default={_server_default_arg(field)}")
    if field.indexed:
        args.append("index=True")

    return f"    {attr}: Mapped[{annotation}] = mapped_column({', '.join(args)})"


def render_orm(schema: SchemaDefinition) -> str:
    """Generate the models module for an entity."""
    class_name = to_pascal_case(schema.entity_name)
    _, data_fields = split_identity(schema)
    attrs = attribute_names(data_fields)

    sa_types = {"Identity", "Integer"}
    for field in data_fields:
        sa_types.add(_sa_type_name(get_mapping(field.type).storage))
    if any(f.default_value is not None and f.type in ("number", "boolean") for f in data_fields):
        sa_types.add("text")

    lines = []
    if any(f.type == "date" for f in data_fields):
        lines.append("from datetime import date")
    lines.extend([
        "from typing import Optional",
        "",
        f"from sqlalchemy import {', '.join(sorted(sa_types, key=lambda name: (name.lower(), name)))}",
        "from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column",
        "",
        "",
        "class Base(DeclarativeBase):",
        "    pass",
        "",
        "",
        f"class {class_name}(Base):",
        f'    __tablename__ = "{table_name(schema.entity_name)}"',
        "",
        f"    {IDENTITY_COLUMN}: Mapped[int] = mapped_column(Integer, Identity(always=True), primary_key=True)",
    ])
    for field in data_fields:
        lines.append(render_orm_column(field, attrs[field.name]))

    lines.append("")
    lines.append("    def to_dict(self) -> dict:")
    lines.append("        return {")
    lines.append(f'            "{IDENTITY_COLUMN}": self.{IDENTITY_COLUMN},')
    for field in data_fields:
        lines.append(f"            {js_string(field.name)}: self.{attrs[field.name]},")
    lines.append("        }")

    return "\n".join(lines) + "\n"
