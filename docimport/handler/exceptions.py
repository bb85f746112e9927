class HandlerError(Exception):
    """Raised when a filter, tagger, transformer or splitter fails on a document."""

    def __init__(self, handler_name: str, reference: str, message: str) -> None:
        super().__init__(f"{handler_name} failed on '{reference}': {message}")
        self.handler_name = handler_name
        self.reference = reference
