class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentCancelledError(ProcessorError):
    """Raised when a document branch is cancelled before it completes."""


class SplitDepthExceededError(ProcessorError):
    """Raised when split children nest deeper than the configured limit."""
