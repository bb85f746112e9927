from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from docimport.config.settings import Settings
from docimport.logging.logger import Log
from docimport.processor.file_loader import FileLoader
from docimport.processor.models import ImportRequest
from docimport.processor.processor import Processor
from docimport.response.models import ImporterResponse, ImporterStatus, Status


class Worker:
    """Imports many top-level documents concurrently.

    Each request is its own branch; one failing request never affects another.
    """

    def __init__(
        self,
        processor: Processor,
        settings: Settings,
        file_loader: FileLoader | None = None,
    ) -> None:
        self._processor = processor
        self._settings = settings
        self._file_loader = file_loader or FileLoader()

    def run(self, requests: Iterable[ImportRequest]) -> list[ImporterResponse]:
        """Import every request and return the responses in request order."""
        pending = list(requests)
        workers = max(1, self._settings.import_max_workers)
        Log.info(f"Worker started: {len(pending)} documents, {workers} threads")
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="import") as pool:
            responses = list(pool.map(self.run_one, pending))
        failed = sum(1 for response in responses if not response.all_successful())
        Log.info(f"Worker finished: {len(responses) - failed} succeeded, {failed} with errors")
        return responses

    def run_one(self, request: ImportRequest) -> ImporterResponse:
        """Import a single request with error handling."""
        if request.content is not None:
            return self._processor.process(
                request.reference, request.content, request.metadata, request.cancel_token
            )
        try:
            with self._file_loader.open(request) as stream:
                return self._processor.process(
                    request.reference, stream, request.metadata, request.cancel_token
                )
        except Exception as exc:
            Log.exception(f"Request '{request.reference}' failed: {exc}")
            return ImporterResponse(
                request.reference, ImporterStatus(Status.ERROR, str(exc), exc)
            )
