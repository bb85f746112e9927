import shutil
import tempfile
from typing import BinaryIO

DEFAULT_MAX_MEMORY = 1024 * 1024


class CachedContent:
    """Re-readable document content, kept in memory up to *max_memory* bytes
    and spilled to a temporary file beyond that."""

    def __init__(self, max_memory: int = DEFAULT_MAX_MEMORY) -> None:
        self.max_memory = max_memory
        self._file: tempfile.SpooledTemporaryFile[bytes] = tempfile.SpooledTemporaryFile(
            max_size=max_memory
        )
        self._size = 0

    @classmethod
    def from_bytes(cls, data: bytes, max_memory: int = DEFAULT_MAX_MEMORY) -> "CachedContent":
        content = cls(max_memory)
        content._file.write(data)
        content._size = len(data)
        return content

    @classmethod
    def from_stream(
        cls, stream: BinaryIO, max_memory: int = DEFAULT_MAX_MEMORY
    ) -> "CachedContent":
        """Copy *stream* to a new cache. The source stream is consumed but not closed."""
        content = cls(max_memory)
        shutil.copyfileobj(stream, content._file)
        content._size = content._file.tell()
        return content

    @property
    def size(self) -> int:
        return self._size

    @property
    def closed(self) -> bool:
        return self._file.closed

    @property
    def in_memory(self) -> bool:
        return not getattr(self._file, "_rolled", False)

    def open(self) -> BinaryIO:
        """Rewind and return the underlying stream for reading."""
        if self._file.closed:
            raise ValueError("Content has been released")
        self._file.seek(0)
        return self._file  # type: ignore[return-value]

    def read(self) -> bytes:
        return self.open().read()

    def read_text(self, encoding: str = "utf-8") -> str:
        return self.read().decode(encoding, errors="replace")

    def head(self, length: int) -> bytes:
        return self.open().read(length)

    def close(self) -> None:
        self._file.close()
