from typing import Any, Mapping, Optional, Set, Union
from pydantic import BaseModel, ConfigDict, Field
from appgen.schemas.schema import Operation, SchemaDefinition

InterpretationResult = Union[SchemaDefinition, Mapping[str, Any]]


class InterpretationParams(BaseModel):
    """Structured hints that accompany a natural-language prompt."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    entity_name: Optional[str] = Field(default=None, alias="entityName")
    operations: Set[Operation] = Field(default_factory=lambda: set(Operation))


class Interpreter:
    """External collaborator turning natural language into a schema.

    Both methods raise ``InterpretationError`` on failure.
    """

    async def interpret(self, prompt: str, params: InterpretationParams) -> InterpretationResult:
        raise NotImplementedError

    async def refine(self, schema: SchemaDefinition, feedback: str) -> InterpretationResult:
        raise NotImplementedError
