class ExtractionError(Exception):
    """Raised when content or metadata extraction fails."""


class ContentTypeMismatchError(ExtractionError):
    """Raised when a parser receives content that is not of the type it handles."""

    def __init__(self, expected: str, message: str = "") -> None:
        super().__init__(message or f"Content is not {expected}")
        self.expected = expected


class UnsupportedContentTypeError(ExtractionError):
    """Raised when no parser is registered for a content type."""
