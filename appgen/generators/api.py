"""API generator: a FastAPI application exposing the enabled CRUD operations."""
from typing import List, Tuple
from appgen.generators.types import STRING_MAX_LENGTH, get_mapping
from appgen.generators.utils import (
    IDENTITY_COLUMN,
    attribute_names,
    entity_to_path,
    js_string,
    split_identity,
    table_name,
    to_pascal_case,
    to_snake_case,
)
from appgen.schemas.schema import FieldDefinition, SchemaDefinition


DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500


def _validated_type(field: FieldDefinition) -> Tuple[str, List[str]]:
    """Request-model type annotation and Field() constraints for a field's validation rule."""
    rule = get_mapping(field.type).validation
    if rule == "max_length":
        return "str", [f"max_length={STRING_MAX_LENGTH}"]
    if rule == "email":
        return "EmailStr", []
    if rule == "integer":
        return "int", []
    if rule == "boolean":
        return "bool", []
    if rule == "iso_date":
        return "date", []
    return "str", []


def render_request_field(field: FieldDefinition, attr: str, all_optional: bool = False) -> str:
    """One request-model attribute line for a declared field."""
    base_type, constraints = _validated_type(field)
    args = list(constraints)
    if attr != field.name:
        args.append(f"alias={js_string(field.name)}")

    if field.required and not all_optional:
        if args:
            return f"    {attr}: {base_type} = Field({', '.join(args)})"
        return f"    {attr}: {base_type}"

    if args:
        return f"    {attr}: Optional[{base_type}] = Field({', '.join(['default=None'] + args)})"
    return f"    {attr}: Optional[{base_type}] = None"


def render_out_field(field: FieldDefinition, attr: str) -> str:
    binding = get_mapping(field.type).binding
    annotation = binding if field.required else f"Optional[{binding}]"
    if attr != field.name:
        return f"    {attr}: {annotation} = Field(serialization_alias={js_string(field.name)})"
    return f"    {attr}: {annotation}"


def render_api(schema: SchemaDefinition) -> str:
    """Generate the FastAPI application module for an entity."""
    entity = to_pascal_case(schema.entity_name)
    singular = to_snake_case(schema.entity_name)
    plural = table_name(schema.entity_name)
    path = "/" + entity_to_path(schema.entity_name)
    ops = schema.operations
    _, data_fields = split_identity(schema)
    attrs = attribute_names(data_fields)
    # Always qualified: an entity name may equal any name imported below
    model = f"models.{entity}"

    lines = ["import os"]
    if any(f.type == "date" for f in data_fields):
        lines.append("from datetime import date")
    lines.extend([
        "from typing import List, Optional",
        "",
        "from fastapi import Depends, FastAPI, HTTPException, Query",
        "from pydantic import BaseModel, ConfigDict, EmailStr, Field",
        "from sqlalchemy import create_engine, select",
        "from sqlalchemy.orm import Session, sessionmaker",
        "",
        "import models",
        "",
        'engine = create_engine(os.environ.get("DATABASE_URL", "sqlite:///./app.db"))',
        "SessionLocal = sessionmaker(bind=engine, autoflush=False)",
        "",
        f'app = FastAPI(title="{entity} API")',
        "",
        "",
        "def _db_session():",
        "    db = SessionLocal()",
        "    try:",
        "        yield db",
        "    finally:",
        "        db.close()",
        "",
        "",
    ])

    # Request / response models
    if ops.create:
        lines.append(f"class {entity}Create(BaseModel):")
        lines.append("    model_config = ConfigDict(populate_by_name=True)")
        lines.append("")
        for field in data_fields:
            lines.append(render_request_field(field, attrs[field.name]))
        lines.append("")
        lines.append("")

    if ops.update:
        lines.append(f"class {entity}Update(BaseModel):")
        lines.append("    model_config = ConfigDict(populate_by_name=True)")
        lines.append("")
        for field in data_fields:
            lines.append(render_request_field(field, attrs[field.name], all_optional=True))
        lines.append("")
        lines.append("")

    lines.append(f"class {entity}Out(BaseModel):")
    lines.append("    model_config = ConfigDict(from_attributes=True)")
    lines.append("")
    lines.append(f"    {IDENTITY_COLUMN}: int")
    for field in data_fields:
        lines.append(render_out_field(field, attrs[field.name]))
    lines.append("")
    lines.append("")

    lines.append(f"def _get_or_404(db: Session, item_id: int) -> {model}:")
    lines.append(f"    item = db.get({model}, item_id)")
    lines.append("    if item is None:")
    lines.append(f'        raise HTTPException(status_code=404, detail=f"{entity} {{item_id}} not found")')
    lines.append("    return item")

    # Endpoints, in create / read / update / delete order
    if ops.create:
        lines.append("")
        lines.append("")
        lines.append(f'@app.post("{path}", response_model={entity}Out, status_code=201)')
        lines.append(f"def create_{singular}(payload: {entity}Create, db: Session = Depends(_db_session)):")
        lines.append(f"    item = {model}(**payload.model_dump(exclude_unset=True))")
        lines.append("    db.add(item)")
        lines.append("    db.commit()")
        lines.append("    db.refresh(item)")
        lines.append("    return item")

    if ops.read:
        lines.append("")
        lines.append("")
        lines.append(f'@app.get("{path}", response_model=List[{entity}Out])')
        if schema.paginate:
            lines.append(f"def list_{plural}(")
            lines.append(f"    limit: int = Query({DEFAULT_PAGE_SIZE}, ge=1, le={MAX_PAGE_SIZE}),")
            lines.append("    offset: int = Query(0, ge=0),")
            lines.append("    db: Session = Depends(_db_session),")
            lines.append("):")
            lines.append(f"    stmt = select({model}).order_by({model}.{IDENTITY_COLUMN}).limit(limit).offset(offset)")
        else:
            lines.append(f"def list_{plural}(db: Session = Depends(_db_session)):")
            lines.append(f"    stmt = select({model}).order_by({model}.{IDENTITY_COLUMN})")
        lines.append("    return db.scalars(stmt).all()")
        lines.append("")
        lines.append("")
        lines.append(f'@app.get("{path}/{{item_id}}", response_model={entity}Out)')
        lines.append(f"def get_{singular}(item_id: int, db: Session = Depends(_db_session)):")
        lines.append("    return _get_or_404(db, item_id)")

    if ops.update:
        lines.append("")
        lines.append("")
        lines.append(f'@app.put("{path}/{{item_id}}", response_model={entity}Out)')
        lines.append(f"def update_{singular}(item_id: int, payload: {entity}Update, db: Session = Depends(_db_session)):")
        lines.append("    item = _get_or_404(db, item_id)")
        lines.append("    for key, value in payload.model_dump(exclude_unset=True).items():")
        lines.append("        setattr(item, key, value)")
        lines.append("    db.commit()")
        lines.append("    db.refresh(item)")
        lines.append("    return item")

    if ops.delete:
        lines.append("")
        lines.append("")
        lines.append(f'@app.delete("{path}/{{item_id}}", status_code=204)')
        lines.append(f"def delete_{singular}(item_id: int, db: Session = Depends(_db_session)):")
        lines.append("    item = _get_or_404(db, item_id)")
        lines.append("    db.delete(item)")
        lines.append("    db.commit()")
        lines.append("    return None")

    lines.append("")
    lines.append("")
    lines.append('if __name__ == "__main__":')
    lines.append("    models.Base.metadata.create_all(engine)")

    return "\n".join(lines) + "\n"
