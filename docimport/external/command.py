import re
import shlex
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

INPUT = "${INPUT}"
OUTPUT = "${OUTPUT}"
INPUT_META = "${INPUT_META}"
OUTPUT_META = "${OUTPUT_META}"
REFERENCE = "${REFERENCE}"

_PLACEHOLDER_RE = re.compile(r"\$\{(INPUT|OUTPUT|INPUT_META|OUTPUT_META|REFERENCE)\}")


@dataclass(frozen=True)
class TempFiles:
    """Temp file paths for one invocation; None when the placeholder is unused."""

    input: Path | None = None
    output: Path | None = None
    input_meta: Path | None = None
    output_meta: Path | None = None


def split_command(command: str | Sequence[str]) -> list[str]:
    """Tokenize a command template without touching its placeholders."""
    if isinstance(command, str):
        return shlex.split(command)
    return [str(arg) for arg in command]


def uses(placeholder: str, args: Sequence[str], environment: Mapping[str, str]) -> bool:
    return any(placeholder in arg for arg in args) or any(
        placeholder in value for value in environment.values()
    )


def resolve(text: str, reference: str, files: TempFiles) -> str:
    """Substitute placeholders in a single argument or environment value.

    Values are inserted verbatim: a reference with spaces or backslashes stays
    one intact argument because substitution happens after tokenizing.
    """
    values = {
        "INPUT": files.input,
        "OUTPUT": files.output,
        "INPUT_META": files.input_meta,
        "OUTPUT_META": files.output_meta,
    }

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name == "REFERENCE":
            return reference
        path = values[name]
        return str(path) if path is not None else ""

    return _PLACEHOLDER_RE.sub(_replace, text)


def resolve_all(
    args: Sequence[str],
    environment: Mapping[str, str],
    reference: str,
    files: TempFiles,
) -> tuple[list[str], dict[str, str]]:
    return (
        [resolve(arg, reference, files) for arg in args],
        {name: resolve(value, reference, files) for name, value in environment.items()},
    )
