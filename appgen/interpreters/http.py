from __future__ import annotations
import logging
import httpx
from dataclasses import dataclass
from typing import Any, Dict, Optional
from pydantic import ValidationError
from appgen.core.errors import InterpretationError
from appgen.interpreters.base import InterpretationParams, InterpretationResult, Interpreter
from appgen.schemas.schema import SchemaDefinition

log = logging.getLogger(__name__)


@dataclass
class HttpInterpreter(Interpreter):
    """Interpreter backed by a remote interpretation service.

    The service exposes ``POST /interpret`` and ``POST /refine``, both
    answering with a schema in its JSON shape.
    """
    base_url: str
    timeout: float = 60.0
    transport: Optional[httpx.AsyncBaseTransport] = None

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url.rstrip('/')}/{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(url, json=payload)
                r.raise_for_status()
                body = r.json()
        except httpx.HTTPStatusError as e:
            raise InterpretationError(
                f"Interpretation service returned {e.response.status_code} for {path}"
            ) from e
        except httpx.HTTPError as e:
            raise InterpretationError(f"Interpretation service unreachable: {e}") from e
        except ValueError as e:
            raise InterpretationError(f"Interpretation service returned invalid JSON: {e}") from e

        schema = body.get("schema", body) if isinstance(body, dict) else None
        if not isinstance(schema, dict):
            raise InterpretationError("Interpretation service returned no schema")
        try:
            # Shape check only; ids are reassigned by create_schema
            SchemaDefinition.model_validate({
                **schema,
                "fields": [{"id": "-", **f} for f in schema.get("fields") or [] if isinstance(f, dict)],
            })
        except ValidationError as e:
            raise InterpretationError(f"Interpretation service returned a malformed schema: {e}") from e
        return schema

    async def interpret(self, prompt: str, params: InterpretationParams) -> InterpretationResult:
        log.info("Requesting interpretation from %s", self.base_url)
        return await self._post("interpret", {
            "prompt": prompt,
            "params": {
                "entityName": params.entity_name,
                "operations": sorted(op.value for op in params.operations),
            },
        })

    async def refine(self, schema: SchemaDefinition, feedback: str) -> InterpretationResult:
        log.info("Requesting refinement from %s", self.base_url)
        return await self._post("refine", {
            "schema": schema.to_json(),
            "feedback": feedback,
        })
