from dataclasses import dataclass, field
from pathlib import Path

from docimport.document.cancellation import CancelToken


@dataclass(frozen=True)
class ImportRequest:
    """A top-level document to import: raw bytes or a file path, plus a reference."""

    reference: str
    content: bytes | None = None
    path: Path | None = None
    metadata: dict[str, list[str]] = field(default_factory=dict)
    cancel_token: CancelToken = field(default_factory=CancelToken, compare=False)

    def __post_init__(self) -> None:
        if (self.content is None) == (self.path is None):
            raise ValueError("ImportRequest needs exactly one of content or path")

    @classmethod
    def from_path(cls, path: Path, metadata: dict[str, list[str]] | None = None) -> "ImportRequest":
        return cls(reference=str(path), path=path, metadata=metadata or {})
