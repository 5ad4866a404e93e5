from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional, Dict, Any, List
from appgen.core.workflow import WorkflowStep
from appgen.schemas.schema import Operation, FieldType


class PromptRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(..., min_length=1, examples=["Create an app to manage a library with books, authors, and publication years"])
    entity_name: Optional[str] = Field(default=None, alias="entityName", examples=["Book"])
    operations: List[Operation] = Field(default_factory=lambda: list(Operation))


class RegenerateRequest(BaseModel):
    feedback: str = Field(..., min_length=1, examples=["Add an email field"])


class EntityNameRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entity_name: str = Field(..., alias="entityName")


class FieldUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    label: Optional[str] = None
    type: Optional[FieldType] = None
    required: Optional[bool] = None
    default_value: Optional[str] = Field(default=None, alias="defaultValue")
    indexed: Optional[bool] = None


class PaginationRequest(BaseModel):
    enabled: bool


class SessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    step: WorkflowStep
    origin: Optional[WorkflowStep] = None
    schema_: Optional[Dict[str, Any]] = Field(default=None, alias="schema")
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    paths: Optional[Dict[str, str]] = None
    status: Literal["idle", "busy"] = "idle"
