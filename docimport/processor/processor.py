from concurrent.futures import ThreadPoolExecutor
from typing import BinaryIO

from docimport.config.settings import Settings
from docimport.document.cancellation import CancelToken
from docimport.document.metadata import Metadata
from docimport.document.models import Document
from docimport.handler.handler import Handler
from docimport.logging.logger import Log
from docimport.parser.document_parser import DocumentParser
from docimport.parser.factory import ParserFactory
from docimport.processor.exceptions import SplitDepthExceededError
from docimport.processor.pipeline import PipelineContext, PipelineStep, Stage
from docimport.processor.steps import HandlersStep, ParseStep
from docimport.response.models import ImporterResponse, ImporterStatus, Status


class Processor:
    """Imports documents through the step chain and builds the response tree.

    Pipeline per document: pre-parse handlers -> parse -> post-parse handlers
    -> import split children recursively. Every failure is contained in the
    response of the branch where it happened.
    """

    def __init__(
        self,
        steps: list[PipelineStep],
        *,
        max_memory: int = 1024 * 1024,
        split_max_workers: int = 1,
        max_split_depth: int = 10,
    ) -> None:
        self._steps = list(steps)
        self._max_memory = max_memory
        self._split_max_workers = max(1, split_max_workers)
        self._max_split_depth = max_split_depth

    def process(
        self,
        reference: str,
        content: bytes | BinaryIO,
        metadata: Metadata | dict[str, list[str]] | None = None,
        cancel_token: CancelToken | None = None,
    ) -> ImporterResponse:
        """Import one top-level document. Never raises for document-level failures."""
        Log.info(f"Importing document '{reference}'")
        try:
            document = Document.create(
                reference,
                content,
                metadata,
                max_memory=self._max_memory,
                cancel_token=cancel_token,
            )
        except Exception as exc:
            Log.error(f"Could not load document '{reference}': {exc}")
            return ImporterResponse(reference, self._error_status(exc))
        return self.process_document(document)

    def process_document(self, document: Document, depth: int = 0) -> ImporterResponse:
        """Run *document* through the whole pipeline, starting from the Created state."""
        context = PipelineContext(document=document, depth=depth)
        try:
            if depth > self._max_split_depth:
                raise SplitDepthExceededError(
                    f"'{document.reference}' is nested {depth} levels deep "
                    f"(max {self._max_split_depth})"
                )
            for step in self._steps:
                context = step.run(context)
                if context.is_terminal:
                    break
        except Exception as exc:
            Log.error(f"Import of '{document.reference}' failed: {exc}")
            context.terminate(self._error_status(exc))

        if context.terminal_status is not None:
            self._discard(context)
            return ImporterResponse(document.reference, context.terminal_status)

        response = ImporterResponse(document.reference, document=document)
        for child_response in self._process_children(context):
            response.add_nested_response(child_response)
        Log.info(
            f"Imported '{document.reference}' with {len(response.nested_responses)} "
            "nested documents"
        )
        return response

    def _process_children(self, context: PipelineContext) -> list[ImporterResponse]:
        children = context.children
        if not children:
            return []
        for child in children:
            child.cancel_token = context.document.cancel_token.child()
        depth = context.depth + 1
        if self._split_max_workers == 1 or len(children) == 1:
            return [self.process_document(child, depth) for child in children]
        with ThreadPoolExecutor(
            max_workers=min(self._split_max_workers, len(children)),
            thread_name_prefix="split",
        ) as pool:
            return list(pool.map(lambda child: self.process_document(child, depth), children))

    @staticmethod
    def _discard(context: PipelineContext) -> None:
        context.document.release()
        for child in context.children:
            child.release()
        context.children.clear()

    @staticmethod
    def _error_status(exc: Exception) -> ImporterStatus:
        return ImporterStatus(Status.ERROR, str(exc), exc)


def build_processor(
    settings: Settings,
    pre_parse_handlers: list[Handler] | None = None,
    post_parse_handlers: list[Handler] | None = None,
    parser: DocumentParser | None = None,
) -> Processor:
    """Build a Processor with the configured parser and handler chains."""
    Log.configure(settings.log_level)
    steps: list[PipelineStep] = [
        HandlersStep(pre_parse_handlers or [], Stage.PRE_HANDLED),
        ParseStep(parser or ParserFactory.create(settings)),
        HandlersStep(post_parse_handlers or [], Stage.POST_HANDLED),
    ]
    return Processor(
        steps,
        max_memory=settings.max_memory_bytes,
        split_max_workers=settings.split_max_workers,
        max_split_depth=settings.max_split_depth,
    )
