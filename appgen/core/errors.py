"""Exception hierarchy shared by the schema model, compiler and workflow."""


class AppGenError(Exception):
    """Base class for all appgen errors."""


class FieldNotFoundError(AppGenError, KeyError):
    """Raised when a mutation targets a field id that is not in the schema."""

    def __init__(self, field_id: str):
        self.field_id = field_id
        super().__init__(f"Field {field_id!r} not found")

    def __str__(self) -> str:
        return self.args[0]


class InterpretationError(AppGenError):
    """Raised by an interpretation collaborator that could not produce a schema."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class CompilationError(AppGenError):
    """A generator failed on a schema that passed validation.

    This is an internal consistency fault, never a user-correctable error.
    """


class WorkflowError(AppGenError):
    pass


class WorkflowBusyError(WorkflowError):
    """Another submit/regenerate/confirm request is still outstanding."""


class InvalidTransitionError(WorkflowError):
    """The requested operation is not allowed in the current workflow step."""
