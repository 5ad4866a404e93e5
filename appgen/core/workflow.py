from dataclasses import dataclass
from enum import Enum
from typing import Optional

class WorkflowStep(str, Enum):
    PROMPT = "PROMPT"
    GENERATING = "GENERATING"
    MOCKUP = "MOCKUP"
    CONFIRMING = "CONFIRMING"
    REPORT = "REPORT"

# Steps during which a request is outstanding
BUSY_STEPS = frozenset({WorkflowStep.GENERATING, WorkflowStep.CONFIRMING})

@dataclass(frozen=True)
class WorkflowState:
    step: WorkflowStep
    # Only set while GENERATING: the step the request was issued from
    origin: Optional[WorkflowStep] = None

    @property
    def busy(self) -> bool:
        return self.step in BUSY_STEPS

    def __str__(self) -> str:
        if self.origin is not None:
            return f"{self.step.value}({self.origin.value})"
        return self.step.value

PROMPT = WorkflowState(WorkflowStep.PROMPT)
MOCKUP = WorkflowState(WorkflowStep.MOCKUP)
CONFIRMING = WorkflowState(WorkflowStep.CONFIRMING)
REPORT = WorkflowState(WorkflowStep.REPORT)
