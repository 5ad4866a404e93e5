import logging
from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from appgen.core.controller import WorkflowController
from appgen.core.errors import CompilationError, FieldNotFoundError, InvalidTransitionError, WorkflowBusyError
from appgen.api.deps import get_controller
from appgen.generators import suggested_paths
from appgen.interpreters.base import InterpretationParams
from appgen.schemas.schema import Operation
from appgen.schemas.session import (
    EntityNameRequest,
    FieldUpdateRequest,
    PaginationRequest,
    PromptRequest,
    RegenerateRequest,
    SessionResponse,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/session")


def to_response(ctl: WorkflowController) -> SessionResponse:
    result = ctl.result
    paths = None
    if result is not None and result.success and ctl.schema is not None:
        paths = suggested_paths(ctl.schema)
    return SessionResponse(
        session_id=ctl.session_id,
        step=ctl.state.step,
        origin=ctl.state.origin,
        schema_=ctl.schema.to_json() if ctl.schema is not None else None,
        result=result.to_json() if result is not None else None,
        error=ctl.error,
        paths=paths,
        status="busy" if ctl.state.busy else "idle",
    )


def _conflict(e: Exception) -> HTTPException:
    return HTTPException(status_code=409, detail=str(e))


@router.get("", response_model=SessionResponse)
def get_session(ctl: WorkflowController = Depends(get_controller)):
    return to_response(ctl)


@router.post("/prompt", response_model=SessionResponse)
async def submit_prompt(req: PromptRequest, ctl: WorkflowController = Depends(get_controller)):
    params = InterpretationParams(entity_name=req.entity_name, operations=set(req.operations))
    try:
        await ctl.submit(req.prompt, params)
    except (WorkflowBusyError, InvalidTransitionError) as e:
        raise _conflict(e)
    return to_response(ctl)


@router.post("/regenerate", response_model=SessionResponse)
async def regenerate(req: RegenerateRequest, ctl: WorkflowController = Depends(get_controller)):
    try:
        await ctl.regenerate(req.feedback)
    except (WorkflowBusyError, InvalidTransitionError) as e:
        raise _conflict(e)
    return to_response(ctl)


@router.post("/confirm", response_model=SessionResponse)
async def confirm(ctl: WorkflowController = Depends(get_controller)):
    try:
        await ctl.confirm()
    except (WorkflowBusyError, InvalidTransitionError) as e:
        raise _conflict(e)
    except CompilationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return to_response(ctl)


@router.post("/start-over", response_model=SessionResponse)
def start_over(ctl: WorkflowController = Depends(get_controller)):
    ctl.start_over()
    return to_response(ctl)


@router.post("/revise", response_model=SessionResponse)
def revise(ctl: WorkflowController = Depends(get_controller)):
    try:
        ctl.revise()
    except InvalidTransitionError as e:
        raise _conflict(e)
    return to_response(ctl)


def _apply_edit(ctl: WorkflowController, edit, *args, **kwargs) -> SessionResponse:
    try:
        edit(*args, **kwargs)
    except (WorkflowBusyError, InvalidTransitionError) as e:
        raise _conflict(e)
    except FieldNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    return to_response(ctl)


@router.put("/entity-name", response_model=SessionResponse)
def set_entity_name(req: EntityNameRequest, ctl: WorkflowController = Depends(get_controller)):
    return _apply_edit(ctl, ctl.set_entity_name, req.entity_name)


@router.post("/fields", response_model=SessionResponse)
def add_field(ctl: WorkflowController = Depends(get_controller)):
    return _apply_edit(ctl, ctl.add_field)


@router.patch("/fields/{field_id}", response_model=SessionResponse)
def update_field(field_id: str, req: FieldUpdateRequest, ctl: WorkflowController = Depends(get_controller)):
    return _apply_edit(ctl, ctl.update_field, field_id, **req.model_dump(exclude_unset=True))


@router.delete("/fields/{field_id}", response_model=SessionResponse)
def remove_field(field_id: str, ctl: WorkflowController = Depends(get_controller)):
    return _apply_edit(ctl, ctl.remove_field, field_id)


@router.post("/operations/{op}/toggle", response_model=SessionResponse)
def toggle_operation(op: Operation, ctl: WorkflowController = Depends(get_controller)):
    return _apply_edit(ctl, ctl.toggle_operation, op)


@router.put("/pagination", response_model=SessionResponse)
def set_pagination(req: PaginationRequest, ctl: WorkflowController = Depends(get_controller)):
    return _apply_edit(ctl, ctl.set_pagination, req.enabled)
