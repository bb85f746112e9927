from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from docimport.document.models import Document
from docimport.response.models import ImporterStatus


class Stage(str, Enum):
    CREATED = "created"
    PRE_HANDLED = "pre_handled"
    PARSED = "parsed"
    POST_HANDLED = "post_handled"
    TERMINAL = "terminal"


@dataclass(slots=True)
class PipelineContext:
    document: Document
    depth: int = 0
    stage: Stage = Stage.CREATED
    children: list[Document] = field(default_factory=list)
    terminal_status: ImporterStatus | None = None

    @property
    def is_terminal(self) -> bool:
        return self.terminal_status is not None

    def terminate(self, status: ImporterStatus) -> None:
        self.terminal_status = status
        self.stage = Stage.TERMINAL


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
