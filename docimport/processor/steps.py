from docimport.document.metadata import DOC_CONTENT_TYPE
from docimport.handler.handler import Handler
from docimport.logging.logger import Log
from docimport.parser.document_parser import DocumentParser
from docimport.processor.exceptions import DocumentCancelledError
from docimport.processor.pipeline import PipelineContext, PipelineStep, Stage
from docimport.response.models import ImporterStatus, Status


def _check_cancelled(context: PipelineContext) -> None:
    if context.document.cancel_token.cancelled:
        raise DocumentCancelledError(f"Import of '{context.document.reference}' was cancelled")


class HandlersStep(PipelineStep):
    """Runs a handler list in order.

    A rejecting filter terminates the branch; splitter children are queued on
    the context and imported once the branch's own chain is done.
    """

    def __init__(self, handlers: list[Handler], stage: Stage) -> None:
        self._handlers = list(handlers)
        self._stage = stage

    def run(self, context: PipelineContext) -> PipelineContext:
        doc = context.document
        for handler in self._handlers:
            _check_cancelled(context)
            outcome = handler.apply(doc, doc.parsed)
            if not outcome.accepted:
                Log.info(f"Document '{doc.reference}' rejected by {handler}")
                context.terminate(
                    ImporterStatus(Status.REJECTED, f"Rejected by {handler}")
                )
                return context
            if outcome.children:
                Log.info(
                    f"{handler} split '{doc.reference}' into {len(outcome.children)} documents"
                )
                context.children.extend(outcome.children)
        _check_cancelled(context)
        context.stage = self._stage
        return context


class ParseStep(PipelineStep):
    """Extracts text and metadata; the document content becomes the extracted text."""

    def __init__(self, parser: DocumentParser) -> None:
        self._parser = parser

    def run(self, context: PipelineContext) -> PipelineContext:
        _check_cancelled(context)
        doc = context.document
        result = self._parser.parse(doc.reference, doc.content, doc.content_type, doc)
        _check_cancelled(context)
        for name, values in result.metadata.items():
            doc.metadata.add_string(name, *values)
        doc.metadata.set_string(DOC_CONTENT_TYPE, result.content_type)
        doc.replace_content(result.text.encode("utf-8"))
        doc.parsed = True
        context.stage = Stage.PARSED
        Log.info(
            f"Parsed '{doc.reference}' as {result.content_type}: {len(result.text)} chars"
        )
        return context
