from pathlib import Path
from typing import BinaryIO

from docimport.processor.models import ImportRequest


class FileLoader:
    """Opens the content stream of an import request."""

    def open(self, request: ImportRequest) -> BinaryIO:
        """Return a readable binary stream; the caller closes it.

        Raises:
            FileNotFoundError: if the request points to a missing file.
        """
        if request.path is None:
            raise ValueError(f"Request '{request.reference}' has no file path")
        path = Path(request.path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return path.open("rb")
