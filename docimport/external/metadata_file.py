"""Metadata exchange files shared with external applications.

Line formats hold one ``key<separator>value`` pair per line; a field with
several values is written on several lines. Backslashes and line breaks
are escaped with a backslash, and so is the separator inside keys. Blank lines and lines starting
with ``#`` or ``!`` are ignored when reading. The ``json`` format is an
object mapping each field to a list of values.
"""

import json
from collections.abc import Iterable
from pathlib import Path

from docimport.document.metadata import Metadata
from docimport.external.exceptions import MetadataFormatError

SEPARATORS: dict[str, str] = {
    "properties": "=",
    "colon": ":",
}
JSON = "json"


def supported_formats() -> list[str]:
    return [*SEPARATORS, JSON]


def _check(fmt: str) -> str:
    fmt = fmt.lower()
    if fmt != JSON and fmt not in SEPARATORS:
        raise MetadataFormatError(
            f"Unknown metadata format '{fmt}'. Choose from: {supported_formats()}"
        )
    return fmt


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\r", "\\r").replace("\n", "\\n")


def _escape_key(name: str, separator: str) -> str:
    return _escape(name).replace(separator, "\\" + separator)


def _unescape(text: str) -> str:
    out: list[str] = []
    chars = iter(text)
    for char in chars:
        if char != "\\":
            out.append(char)
            continue
        following = next(chars, "")
        out.append({"n": "\n", "r": "\r", "\\": "\\"}.get(following, following))
    return "".join(out)


def _split(line: str, separator: str) -> tuple[str, str] | None:
    escaped = False
    for index, char in enumerate(line):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == separator:
            return line[:index], line[index + 1 :]
    return None


def dumps(metadata: Metadata, fmt: str) -> str:
    fmt = _check(fmt)
    if fmt == JSON:
        return json.dumps(metadata.to_dict(), ensure_ascii=False, indent=2)
    separator = SEPARATORS[fmt]
    lines = [
        f"{_escape_key(name, separator)}{separator}{_escape(value)}"
        for name, values in metadata.items()
        for value in values
    ]
    return "\n".join(lines) + ("\n" if lines else "")


def loads(text: str, fmt: str) -> list[tuple[str, str]]:
    """Parse metadata text into ordered ``(field, value)`` pairs."""
    fmt = _check(fmt)
    if fmt == JSON:
        return _loads_json(text)
    separator = SEPARATORS[fmt]
    pairs: list[tuple[str, str]] = []
    for line in text.splitlines():
        if not line.strip() or line.lstrip().startswith(("#", "!")):
            continue
        split = _split(line, separator)
        if split is None:
            continue
        name, value = split
        pairs.append((_unescape(name.strip()), _unescape(value)))
    return pairs


def _loads_json(text: str) -> list[tuple[str, str]]:
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MetadataFormatError(f"Invalid JSON metadata: {exc}") from exc
    if not isinstance(data, dict):
        raise MetadataFormatError("JSON metadata must be an object")
    pairs: list[tuple[str, str]] = []
    for name, values in data.items():
        items: Iterable[object] = values if isinstance(values, list) else [values]
        pairs.extend((str(name), "" if item is None else str(item)) for item in items)
    return pairs


def write(path: Path, metadata: Metadata, fmt: str) -> None:
    path.write_text(dumps(metadata, fmt), encoding="utf-8")


def read(path: Path, fmt: str) -> list[tuple[str, str]]:
    if not path.exists():
        return []
    return loads(path.read_text(encoding="utf-8", errors="replace"), fmt)
