"""Offline interpreter producing a fixed starter schema."""
import logging
from appgen.interpreters.base import InterpretationParams, InterpretationResult, Interpreter
from appgen.schemas.schema import Operations, SchemaDefinition

log = logging.getLogger(__name__)

DEFAULT_ENTITY_NAME = "Book"

STARTER_FIELDS = [
    {"name": "id", "label": "ID", "type": "number", "required": True},
    {"name": "title", "label": "Title", "type": "string", "required": True},
    {"name": "author", "label": "Author", "type": "string", "required": True},
    {"name": "publication_year", "label": "Publication Year", "type": "number", "required": False},
    {"name": "stock", "label": "Stock", "type": "number", "required": False, "defaultValue": "0"},
]


class TemplateInterpreter(Interpreter):
    """Deterministic interpreter used when no interpretation service is configured.

    The prompt text is ignored; the entity name and operations come from
    ``params``. Refinement hands back the current schema unchanged.
    """

    async def interpret(self, prompt: str, params: InterpretationParams) -> InterpretationResult:
        entity_name = (params.entity_name or "").strip() or DEFAULT_ENTITY_NAME
        log.info("Template interpretation for entity %r", entity_name)
        return {
            "entityName": entity_name,
            "fields": [dict(f) for f in STARTER_FIELDS],
            "operations": Operations.from_set(params.operations).model_dump(),
        }

    async def refine(self, schema: SchemaDefinition, feedback: str) -> InterpretationResult:
        log.info("Template refinement ignores feedback (%d chars)", len(feedback))
        return schema
