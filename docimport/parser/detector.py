import mimetypes

PDF = "application/pdf"
TEXT = "text/plain"
BINARY = "application/octet-stream"

_PDF_MAGIC = b"%PDF-"
HEAD_SIZE = 4096


def looks_like_pdf(head: bytes) -> bool:
    return head.lstrip(b"\r\n\t ").startswith(_PDF_MAGIC)


def looks_binary(head: bytes) -> bool:
    return b"\x00" in head


def detect_from_content(head: bytes) -> str:
    """Guess a content type from the first bytes only."""
    if looks_like_pdf(head):
        return PDF
    if looks_binary(head):
        return BINARY
    return TEXT


def detect(reference: str, head: bytes) -> str:
    """Guess a content type from magic bytes, then from the reference extension."""
    if looks_like_pdf(head):
        return PDF
    guessed, _ = mimetypes.guess_type(reference, strict=False)
    if guessed:
        return guessed
    return detect_from_content(head)
