"""Tests for the workflow controller state machine."""
import asyncio
from unittest.mock import AsyncMock
import pytest
from appgen.core.controller import WorkflowController
from appgen.core.errors import (
    CompilationError,
    FieldNotFoundError,
    InterpretationError,
    InvalidTransitionError,
    WorkflowBusyError,
)
from appgen.core.workflow import WorkflowStep
from appgen.interpreters.base import InterpretationParams, Interpreter
from appgen.interpreters.template import TemplateInterpreter
from appgen.schemas.schema import Operation
from appgen.validators import run_validation
from conftest import BOOK_SCHEMA, field_id


class GatedInterpreter(Interpreter):
    """Interpreter that blocks until ``gate`` is set."""

    def __init__(self, payload=None):
        self.gate = asyncio.Event()
        self.payload = payload or BOOK_SCHEMA
        self.interpret_calls = 0
        self.refine_calls = 0

    async def interpret(self, prompt, params):
        self.interpret_calls += 1
        await self.gate.wait()
        return self.payload

    async def refine(self, schema, feedback):
        self.refine_calls += 1
        await self.gate.wait()
        return {**schema.to_json(), "entityName": "Novel"}


async def wait_for(ctl, step):
    for _ in range(100):
        if ctl.step == step:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"controller never reached {step}, still {ctl.state}")


async def in_mockup(interpreter=None, **kwargs):
    ctl = WorkflowController(interpreter=interpreter or TemplateInterpreter(), **kwargs)
    assert await ctl.submit("Create an app to manage a library")
    assert ctl.step == WorkflowStep.MOCKUP
    return ctl


@pytest.mark.asyncio
async def test_submit_produces_mockup():
    ctl = WorkflowController(interpreter=TemplateInterpreter())
    params = InterpretationParams(entity_name="Book", operations={Operation.CREATE, Operation.READ})

    applied = await ctl.submit("Create an app to manage a library", params)

    assert applied is True
    assert ctl.step == WorkflowStep.MOCKUP
    assert ctl.schema.entity_name == "Book"
    assert [f.name for f in ctl.schema.fields] == ["id", "title", "author", "publication_year", "stock"]
    assert len({f.id for f in ctl.schema.fields}) == 5
    assert ctl.schema.operations.update is False
    assert ctl.outstanding is None


@pytest.mark.asyncio
async def test_state_is_generating_while_interpretation_pending():
    interpreter = GatedInterpreter()
    ctl = WorkflowController(interpreter=interpreter)

    task = asyncio.create_task(ctl.submit("library app"))
    await wait_for(ctl, WorkflowStep.GENERATING)
    assert str(ctl.state) == "GENERATING(PROMPT)"
    assert ctl.state.busy

    interpreter.gate.set()
    assert await task is True
    assert ctl.step == WorkflowStep.MOCKUP


@pytest.mark.asyncio
async def test_interpretation_failure_returns_to_prompt():
    interpreter = TemplateInterpreter()
    interpreter.interpret = AsyncMock(side_effect=InterpretationError("service unavailable"))
    ctl = WorkflowController(interpreter=interpreter)

    applied = await ctl.submit("library app")

    assert applied is False
    assert ctl.step == WorkflowStep.PROMPT
    assert ctl.schema is None
    assert ctl.error == "service unavailable"


@pytest.mark.asyncio
async def test_malformed_interpretation_is_an_interpretation_failure():
    interpreter = GatedInterpreter(payload={"entityName": "Book", "fields": [{"type": "string"}]})
    interpreter.gate.set()
    ctl = WorkflowController(interpreter=interpreter)

    assert await ctl.submit("library app") is False
    assert ctl.step == WorkflowStep.PROMPT
    assert "invalid schema" in ctl.error


@pytest.mark.asyncio
async def test_submit_only_allowed_from_prompt():
    ctl = await in_mockup()
    with pytest.raises(InvalidTransitionError):
        await ctl.submit("another app")


@pytest.mark.asyncio
async def test_regenerate_replaces_schema():
    interpreter = GatedInterpreter()
    interpreter.gate.set()
    ctl = await in_mockup(interpreter)
    old_ids = {f.id for f in ctl.schema.fields}

    assert await ctl.regenerate("call it Novel") is True

    assert ctl.step == WorkflowStep.MOCKUP
    assert ctl.schema.entity_name == "Novel"
    assert old_ids.isdisjoint(f.id for f in ctl.schema.fields)


@pytest.mark.asyncio
async def test_regenerate_while_generating_is_rejected():
    """Test that a second regenerate is rejected and never reaches the interpreter."""
    interpreter = GatedInterpreter()
    interpreter.gate.set()
    ctl = await in_mockup(interpreter)
    interpreter.gate.clear()

    task = asyncio.create_task(ctl.regenerate("call it Novel"))
    await wait_for(ctl, WorkflowStep.GENERATING)
    assert str(ctl.state) == "GENERATING(MOCKUP)"

    with pytest.raises(WorkflowBusyError):
        await ctl.regenerate("again")
    assert interpreter.refine_calls == 1

    interpreter.gate.set()
    assert await task is True
    assert ctl.schema.entity_name == "Novel"


@pytest.mark.asyncio
async def test_regenerate_failure_keeps_schema():
    ctl = await in_mockup()
    before = ctl.schema
    ctl.interpreter.refine = AsyncMock(side_effect=InterpretationError("model overloaded"))

    assert await ctl.regenerate("add an email") is False

    assert ctl.step == WorkflowStep.MOCKUP
    assert ctl.schema == before
    assert ctl.error == "model overloaded"


@pytest.mark.asyncio
async def test_confirm_valid_schema_reaches_successful_report():
    ctl = await in_mockup()

    result = await ctl.confirm()

    assert ctl.step == WorkflowStep.REPORT
    assert result is ctl.result
    assert result.success is True
    assert result.errors == []
    assert "CREATE TABLE books" in result.generated_files.sql


@pytest.mark.asyncio
async def test_confirm_invalid_schema_reports_errors_and_can_be_revised():
    ctl = await in_mockup()
    ctl.set_entity_name("")

    result = await ctl.confirm()

    assert ctl.step == WorkflowStep.REPORT
    assert result.success is False
    assert result.generated_files is None
    assert [e.code for e in result.errors] == ["ENTITY_NAME_EMPTY"]

    schema = ctl.revise()
    assert ctl.step == WorkflowStep.MOCKUP
    assert ctl.result is None
    assert schema.entity_name == ""


@pytest.mark.asyncio
async def test_revise_rejected_after_success():
    ctl = await in_mockup()
    await ctl.confirm()

    with pytest.raises(InvalidTransitionError):
        ctl.revise()
    assert ctl.step == WorkflowStep.REPORT


@pytest.mark.asyncio
async def test_start_over_during_confirm_discards_stale_result():
    gate = asyncio.Event()
    calls = []

    async def pipeline(schema):
        calls.append(schema)
        await gate.wait()
        return run_validation(schema)

    ctl = await in_mockup(pipeline=pipeline)
    task = asyncio.create_task(ctl.confirm())
    await wait_for(ctl, WorkflowStep.CONFIRMING)

    ctl.start_over()
    assert ctl.step == WorkflowStep.PROMPT
    assert ctl.outstanding is None

    gate.set()
    assert await task is None
    assert len(calls) == 1
    assert ctl.step == WorkflowStep.PROMPT
    assert ctl.result is None
    assert ctl.schema is None


@pytest.mark.asyncio
async def test_start_over_during_confirm_discards_stale_fault():
    """Test that a compile fault resolving after start_over neither raises nor touches the new session."""
    gate = asyncio.Event()

    async def pipeline(schema):
        await gate.wait()
        raise CompilationError("generator crashed")

    ctl = await in_mockup(pipeline=pipeline)
    task = asyncio.create_task(ctl.confirm())
    await wait_for(ctl, WorkflowStep.CONFIRMING)

    ctl.start_over()
    assert await ctl.submit("a fresh app") is True
    fresh = ctl.schema

    gate.set()
    assert await task is None
    assert ctl.step == WorkflowStep.MOCKUP
    assert ctl.schema is fresh
    assert ctl.error is None
    assert ctl.outstanding is None


@pytest.mark.asyncio
async def test_compilation_error_returns_to_mockup():
    async def pipeline(schema):
        raise CompilationError("generator crashed")

    ctl = await in_mockup(pipeline=pipeline)
    before = ctl.schema

    with pytest.raises(CompilationError):
        await ctl.confirm()

    assert ctl.step == WorkflowStep.MOCKUP
    assert ctl.schema == before
    assert ctl.result is None
    assert ctl.error
    assert ctl.outstanding is None


@pytest.mark.asyncio
async def test_edits_apply_in_mockup():
    ctl = await in_mockup()
    title = field_id(ctl.schema, "title")

    ctl.update_field(title, name="headline", defaultValue="Untitled")
    ctl.add_field()
    ctl.remove_field(field_id(ctl.schema, "stock"))
    ctl.toggle_operation(Operation.DELETE)
    ctl.set_pagination(True)

    schema = ctl.schema
    assert [f.name for f in schema.fields] == ["id", "headline", "author", "publication_year", "new_field"]
    assert schema.get_field(title).default_value == "Untitled"
    assert schema.operations.delete is False
    assert schema.paginate is True


@pytest.mark.asyncio
async def test_edit_of_unknown_field_raises():
    ctl = await in_mockup()
    with pytest.raises(FieldNotFoundError):
        ctl.update_field("missing", name="x")


def test_edits_rejected_in_prompt():
    ctl = WorkflowController(interpreter=TemplateInterpreter())
    with pytest.raises(InvalidTransitionError):
        ctl.add_field()


@pytest.mark.asyncio
async def test_edits_rejected_while_confirming():
    gate = asyncio.Event()

    async def pipeline(schema):
        await gate.wait()
        raise CompilationError("never mind")

    ctl = await in_mockup(pipeline=pipeline)
    task = asyncio.create_task(ctl.confirm())
    await wait_for(ctl, WorkflowStep.CONFIRMING)

    with pytest.raises(WorkflowBusyError):
        ctl.set_entity_name("Other")
    with pytest.raises(WorkflowBusyError):
        await ctl.confirm()

    gate.set()
    with pytest.raises(CompilationError):
        await task
    assert ctl.schema.entity_name == "Book"


@pytest.mark.asyncio
async def test_start_over_from_report():
    ctl = await in_mockup()
    await ctl.confirm()

    ctl.start_over()

    assert ctl.step == WorkflowStep.PROMPT
    assert ctl.schema is None
    assert ctl.result is None
    assert await ctl.submit("again") is True
