"""SQL generator: CREATE TABLE (and CREATE INDEX) statements for one entity.

The DDL is assembled as a SQLAlchemy ``Table`` and compiled with the
PostgreSQL dialect, so quoting, type rendering and constraint layout come from
SQLAlchemy rather than hand-written string templates.
"""
from typing import List
from sqlalchemy import Boolean, Column, Date, Identity, Index, Integer, MetaData, String, Table, Text, text
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex, CreateTable
from appgen.generators.types import STRING_MAX_LENGTH, coerce_default
from appgen.generators.utils import IDENTITY_COLUMN, split_identity, table_name
from appgen.schemas.schema import FieldDefinition, SchemaDefinition


SQL_TYPES = {
    "string": String(STRING_MAX_LENGTH),
    "number": Integer(),
    "boolean": Boolean(),
    "date": Date(),
    "email": String(STRING_MAX_LENGTH),
    "text": Text(),
}

# Non-percent paramstyle so literal defaults keep their "%" characters
DIALECT = postgresql.dialect(paramstyle="named")


def _server_default(field: FieldDefinition):
    """Default clause for a column, or None. Numbers and booleans render unquoted."""
    if field.default_value is None:
        return None
    value = coerce_default(field.type, field.default_value)
    if isinstance(value, bool):
        return text("true" if value else "false")
    if isinstance(value, int):
        return text(str(value))
    return value


def build_table(schema: SchemaDefinition, metadata: MetaData) -> Table:
    """Build the SQLAlchemy Table for ``schema``: identity column first, then fields in declared order."""
    _, data_fields = split_identity(schema)

    columns = [Column(IDENTITY_COLUMN, Integer, Identity(always=True), primary_key=True)]
    for field in data_fields:
        columns.append(Column(
            field.name,
            SQL_TYPES[field.type],
            nullable=not field.required,
            server_default=_server_default(field),
        ))

    table = Table(table_name(schema.entity_name), metadata, *columns)

    for field in data_fields:
        if field.indexed:
            Index(f"ix_{table.name}_{field.name.lower()}", table.c[field.name])

    return table


def _format_statement(ddl) -> str:
    compiled = str(ddl.compile(dialect=DIALECT))
    lines = []
    for line in compiled.strip().splitlines():
        line = line.rstrip()
        if line.startswith("\t"):
            line = "    " + line[1:]
        lines.append(line)
    return "\n".join(lines) + ";"


def render_sql(schema: SchemaDefinition) -> str:
    """Generate the data-definition script for an entity."""
    metadata = MetaData()
    table = build_table(schema, metadata)

    statements: List[str] = [
        f"-- {schema.entity_name} schema",
        _format_statement(CreateTable(table)),
    ]
    for index in sorted(table.indexes, key=lambda ix: ix.name):
        statements.append(_format_statement(CreateIndex(index)))

    return "\n\n".join(statements) + "\n"
