from __future__ import annotations
import asyncio
import itertools
import logging
import uuid
from typing import Awaitable, Callable, Optional
from pydantic import ValidationError
from appgen.core.config import Settings, settings as default_settings
from appgen.core.errors import (
    CompilationError,
    InterpretationError,
    InvalidTransitionError,
    WorkflowBusyError,
)
from appgen.core.workflow import CONFIRMING, MOCKUP, PROMPT, REPORT, WorkflowState, WorkflowStep
from appgen.interpreters.base import InterpretationParams, Interpreter
from appgen.schemas import mutations
from appgen.schemas.schema import Operation, SchemaDefinition, ValidationResult
from appgen.validators.engine import run_validation

log = logging.getLogger(__name__)

Pipeline = Callable[[SchemaDefinition], Awaitable[ValidationResult]]


class WorkflowController:
    """State machine driving one Prompt -> Mockup -> Report session.

    At most one of submit/regenerate/confirm is outstanding at a time. Each
    dispatch takes a fresh token; a completion whose token is no longer the
    outstanding one (for example after ``start_over``) is discarded.
    """

    def __init__(
        self,
        interpreter: Interpreter,
        pipeline: Optional[Pipeline] = None,
        settings: Optional[Settings] = None,
        session_id: Optional[str] = None,
    ):
        self.interpreter = interpreter
        self.settings = settings or default_settings
        self._pipeline = pipeline or self._validate_and_compile
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self._tokens = itertools.count(1)
        self._outstanding: Optional[int] = None

        self.state: WorkflowState = PROMPT
        self.schema: Optional[SchemaDefinition] = None
        self.result: Optional[ValidationResult] = None
        self.error: Optional[str] = None

    @property
    def step(self) -> WorkflowStep:
        return self.state.step

    @property
    def outstanding(self) -> Optional[int]:
        return self._outstanding

    def _extra(self) -> dict:
        return {"session_id": self.session_id, "step": str(self.state)}

    async def _validate_and_compile(self, schema: SchemaDefinition) -> ValidationResult:
        return await asyncio.to_thread(run_validation, schema, self.settings)

    def _dispatch(self, action: str, allowed: WorkflowStep, next_state: WorkflowState) -> int:
        if self.state.busy:
            raise WorkflowBusyError(f"Cannot {action}: a request is already outstanding ({self.state})")
        if self.state.step != allowed:
            raise InvalidTransitionError(f"Cannot {action} from {self.state}")
        token = next(self._tokens)
        self._outstanding = token
        self.state = next_state
        self.error = None
        log.info("Dispatched %s (token %d)", action, token, extra=self._extra())
        return token

    def _complete(self, token: int, action: str) -> bool:
        """Release the outstanding request. False when ``token`` is stale."""
        if token != self._outstanding:
            log.info("Discarding stale %s result (token %d)", action, token, extra=self._extra())
            return False
        self._outstanding = None
        return True

    async def _interpret(self, call: Awaitable) -> SchemaDefinition:
        raw = await call
        try:
            return mutations.create_schema(raw)
        except ValidationError as e:
            raise InterpretationError(f"Interpretation returned an invalid schema: {e}") from e

    # Async transitions

    async def submit(self, prompt: str, params: Optional[InterpretationParams] = None) -> bool:
        """
        Interpret ``prompt`` into a new schema (PROMPT -> GENERATING -> MOCKUP).

        Returns:
            True if the result was applied, False on interpretation failure or
            when the result arrived stale
        """
        params = params or InterpretationParams()
        token = self._dispatch("submit", WorkflowStep.PROMPT, WorkflowState(WorkflowStep.GENERATING, WorkflowStep.PROMPT))
        try:
            schema = await self._interpret(self.interpreter.interpret(prompt, params))
        except InterpretationError as e:
            if self._complete(token, "submit"):
                self.state = PROMPT
                self.schema = None
                self.error = e.reason
                log.warning("Interpretation failed: %s", e.reason, extra=self._extra())
            return False
        except BaseException:
            if self._complete(token, "submit"):
                self.state = PROMPT
            raise

        if not self._complete(token, "submit"):
            return False
        self.schema = schema
        self.state = MOCKUP
        log.info("Schema for %r ready with %d fields", schema.entity_name, len(schema.fields), extra=self._extra())
        return True

    async def regenerate(self, feedback: str) -> bool:
        """
        Replace the current schema from free-text feedback (MOCKUP -> GENERATING -> MOCKUP).

        On failure the current schema is kept and the error surfaced.
        """
        token = self._dispatch("regenerate", WorkflowStep.MOCKUP, WorkflowState(WorkflowStep.GENERATING, WorkflowStep.MOCKUP))
        current = self.schema
        try:
            schema = await self._interpret(self.interpreter.refine(current, feedback))
        except InterpretationError as e:
            if self._complete(token, "regenerate"):
                self.state = MOCKUP
                self.error = e.reason
                log.warning("Refinement failed: %s", e.reason, extra=self._extra())
            return False
        except BaseException:
            if self._complete(token, "regenerate"):
                self.state = MOCKUP
            raise

        if not self._complete(token, "regenerate"):
            return False
        self.schema = schema
        self.state = MOCKUP
        log.info("Schema replaced by refinement", extra=self._extra())
        return True

    async def confirm(self) -> Optional[ValidationResult]:
        """
        Validate and compile the current schema (MOCKUP -> CONFIRMING -> REPORT).

        A schema with validation errors still reaches REPORT, with
        ``success=False`` and no generated files.

        Returns:
            The applied ValidationResult, or None if it arrived stale

        Raises:
            CompilationError: if a validated schema fails to compile; the
                controller returns to MOCKUP with the schema intact
        """
        token = self._dispatch("confirm", WorkflowStep.MOCKUP, CONFIRMING)
        schema = self.schema
        try:
            result = await self._pipeline(schema)
        except CompilationError:
            if not self._complete(token, "confirm"):
                return None
            self.state = MOCKUP
            self.error = "Internal error while generating artifacts"
            log.error("Compilation fault", exc_info=True, extra=self._extra())
            raise
        except BaseException:
            if self._complete(token, "confirm"):
                self.state = MOCKUP
            raise

        if not self._complete(token, "confirm"):
            return None
        self.result = result
        self.state = REPORT
        log.info(
            "Report ready: success=%s errors=%d warnings=%d",
            result.success, len(result.errors), len(result.warnings),
            extra=self._extra(),
        )
        return result

    # Synchronous transitions

    def start_over(self) -> None:
        """Discard schema, result and any outstanding request; return to PROMPT."""
        if self._outstanding is not None:
            log.info("Abandoning outstanding request (token %d)", self._outstanding, extra=self._extra())
        self._outstanding = None
        self.state = PROMPT
        self.schema = None
        self.result = None
        self.error = None
        log.info("Session reset", extra=self._extra())

    def revise(self) -> SchemaDefinition:
        """Return from a failed REPORT to MOCKUP so the errors can be fixed."""
        if self.state.step != WorkflowStep.REPORT:
            raise InvalidTransitionError(f"Cannot revise from {self.state}")
        if self.result is not None and self.result.success:
            raise InvalidTransitionError("Cannot revise a successful report; start over instead")
        self.result = None
        self.state = MOCKUP
        return self.schema

    # Local edits (MOCKUP only)

    def _edit(self, fn, *args, **kwargs) -> SchemaDefinition:
        if self.state.busy:
            raise WorkflowBusyError(f"Cannot edit while {self.state}")
        if self.state.step != WorkflowStep.MOCKUP:
            raise InvalidTransitionError(f"Cannot edit the schema from {self.state}")
        self.schema = fn(self.schema, *args, **kwargs)
        return self.schema

    def set_entity_name(self, name: str) -> SchemaDefinition:
        return self._edit(mutations.set_entity_name, name)

    def update_field(self, field_id: str, **changes) -> SchemaDefinition:
        return self._edit(mutations.update_field, field_id, **changes)

    def add_field(self) -> SchemaDefinition:
        return self._edit(mutations.add_field)

    def remove_field(self, field_id: str) -> SchemaDefinition:
        return self._edit(mutations.remove_field, field_id)

    def toggle_operation(self, op: Operation) -> SchemaDefinition:
        return self._edit(mutations.toggle_operation, op)

    def set_pagination(self, enabled: bool) -> SchemaDefinition:
        return self._edit(mutations.set_pagination, enabled)
