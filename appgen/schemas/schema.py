"""Schema value types: fields, operations and the entity schema itself.

Every model is frozen. Edits go through ``appgen.schemas.mutations``, which
returns fresh snapshots, so validation and compilation never observe a
partially edited value.
"""
from enum import Enum
from typing import Dict, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


FieldType = Literal["string", "number", "boolean", "date", "email", "text"]

FIELD_TYPES: Tuple[str, ...] = ("string", "number", "boolean", "date", "email", "text")


class Operation(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class FieldDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    label: str = ""
    type: FieldType = "string"
    required: bool = False
    default_value: Optional[str] = Field(default=None, alias="defaultValue")
    indexed: bool = False


class Operations(BaseModel):
    model_config = ConfigDict(frozen=True)

    create: bool = True
    read: bool = True
    update: bool = True
    delete: bool = True

    def enabled(self, op: Operation) -> bool:
        return getattr(self, Operation(op).value)

    def any_enabled(self) -> bool:
        return self.create or self.read or self.update or self.delete

    @classmethod
    def from_set(cls, ops) -> "Operations":
        names = {Operation(op).value for op in ops}
        return cls(**{op.value: op.value in names for op in Operation})


class SchemaDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    entity_name: str = Field(alias="entityName")
    fields: Tuple[FieldDefinition, ...] = ()
    operations: Operations = Field(default_factory=Operations)
    paginate: bool = False

    def get_field(self, field_id: str) -> Optional[FieldDefinition]:
        for field in self.fields:
            if field.id == field_id:
                return field
        return None

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class Diagnostic(BaseModel):
    """One validation finding (error or warning)."""
    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    field: Optional[str] = None


class GeneratedFiles(BaseModel):
    """The artifact bundle. The four keys are always present together."""
    model_config = ConfigDict(frozen=True)

    sql: str
    orm: str
    api: str
    frontend: str

    def as_dict(self) -> Dict[str, str]:
        return {"sql": self.sql, "orm": self.orm, "api": self.api, "frontend": self.frontend}


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: bool
    errors: List[Diagnostic] = Field(default_factory=list)
    warnings: List[Diagnostic] = Field(default_factory=list)
    generated_files: Optional[GeneratedFiles] = Field(default=None, alias="generatedFiles")

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
