from typing import Optional
from appgen.core.config import settings
from appgen.core.controller import WorkflowController
from appgen.interpreters import build_interpreter

_controller: Optional[WorkflowController] = None


def get_controller() -> WorkflowController:
    """The single active workflow session."""
    global _controller
    if _controller is None:
        _controller = WorkflowController(interpreter=build_interpreter(settings), settings=settings)
    return _controller
