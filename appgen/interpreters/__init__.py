from typing import Optional
from appgen.core.config import Settings, settings as default_settings
from appgen.interpreters.base import InterpretationParams, InterpretationResult, Interpreter
from appgen.interpreters.http import HttpInterpreter
from appgen.interpreters.template import TemplateInterpreter


def build_interpreter(settings: Optional[Settings] = None) -> Interpreter:
    """Use the remote service when one is configured, otherwise the offline template."""
    settings = settings or default_settings
    if settings.interpreter_url:
        return HttpInterpreter(base_url=settings.interpreter_url, timeout=settings.interpreter_timeout)
    return TemplateInterpreter()


__all__ = [
    "HttpInterpreter",
    "InterpretationParams",
    "InterpretationResult",
    "Interpreter",
    "TemplateInterpreter",
    "build_interpreter",
]
