"""Delegates document work to an external executable.

The command line may reference these placeholders, in arguments or in
environment variable values:

* ``${INPUT}``: file holding the document content. Without it the content
  is streamed to the process stdin.
* ``${OUTPUT}``: file the process writes its output content to. Without it
  the output content is read from stdout.
* ``${INPUT_META}``: file holding the document metadata.
* ``${OUTPUT_META}``: file the process writes extra metadata to.
* ``${REFERENCE}``: the document reference.

Only referenced files are created, inside a temporary directory unique to
the invocation and removed afterwards whatever happens. Field rules are
applied to stdout and stderr, and the output metadata file is parsed in the
configured format; everything found is appended to the document metadata.
"""

import os
import tempfile
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from docimport.config.settings import Settings
from docimport.document.content import DEFAULT_MAX_MEMORY
from docimport.document.models import Document
from docimport.external import command as cmd
from docimport.external import metadata_file
from docimport.external.exceptions import ProcessExitError
from docimport.external.process import ProcessResult, run_process
from docimport.fields.extractor import FieldExtractor, RegexFieldRule
from docimport.logging.logger import Log


@dataclass
class ExternalResult:
    exit_code: int
    output: bytes
    metadata: list[tuple[str, str]] = field(default_factory=list)


class ExternalApp:
    def __init__(
        self,
        command: str | Sequence[str],
        *,
        environment: Mapping[str, str] | None = None,
        field_rules: Sequence[RegexFieldRule] = (),
        metadata_input_format: str = "properties",
        metadata_output_format: str = "properties",
        timeout_seconds: float | None = None,
        exit_error_fatal: bool = False,
        max_memory: int = DEFAULT_MAX_MEMORY,
    ) -> None:
        self._args = cmd.split_command(command)
        if not self._args:
            raise ValueError("External command must not be empty")
        self._environment = dict(environment or {})
        self._extractor = FieldExtractor(list(field_rules))
        self._metadata_input_format = metadata_input_format
        self._metadata_output_format = metadata_output_format
        self._timeout_seconds = timeout_seconds
        self._exit_error_fatal = exit_error_fatal
        self._max_memory = max_memory
        for fmt in (metadata_input_format, metadata_output_format):
            if fmt.lower() not in metadata_file.supported_formats():
                raise ValueError(
                    f"Unknown metadata format '{fmt}'. "
                    f"Choose from: {metadata_file.supported_formats()}"
                )

    @property
    def max_memory(self) -> int:
        return self._max_memory

    def uses(self, placeholder: str) -> bool:
        return cmd.uses(placeholder, self._args, self._environment)

    def execute(self, doc: Document) -> ExternalResult:
        """Run the command for *doc* without modifying it.

        Raises:
            ExternalProcessError: on launch failure, timeout, cancellation, or a
                non-zero exit status when exit errors are fatal.
        """
        with tempfile.TemporaryDirectory(prefix="docimport-") as tmp:
            workdir = Path(tmp)
            files = self._temp_files(workdir)
            args, env_overrides = cmd.resolve_all(self._args, self._environment, doc.reference, files)

            if files.input is not None:
                files.input.write_bytes(doc.content.read())
            if files.input_meta is not None:
                metadata_file.write(files.input_meta, doc.metadata, self._metadata_input_format)

            stdin = None if files.input is not None else doc.content.open()
            result = run_process(
                args,
                {**os.environ, **env_overrides},
                stdin,
                timeout_seconds=self._timeout_seconds,
                cancel_token=doc.cancel_token,
                max_memory=self._max_memory,
            )
            if Log.is_debug() and result.stderr:
                Log.debug(
                    f"External stderr for '{doc.reference}': "
                    f"{result.stderr.decode('utf-8', errors='replace').strip()[:500]}"
                )
            output = result.stdout
            if files.output is not None:
                output = files.output.read_bytes() if files.output.exists() else b""
            external = ExternalResult(
                exit_code=result.exit_code, output=output, metadata=self._harvest(result, files)
            )
            self._check_exit(result, doc.reference, external)
            return external

    def apply(self, doc: Document, replace_content: bool) -> ExternalResult:
        """Execute and merge harvested metadata into *doc*, optionally replacing its content."""
        result = self.execute(doc)
        added = doc.metadata.merge(result.metadata)
        if replace_content:
            doc.replace_content(result.output)
        Log.debug(
            f"External command on '{doc.reference}' exited {result.exit_code}, "
            f"{added} metadata values added"
        )
        return result

    def _temp_files(self, workdir: Path) -> cmd.TempFiles:
        def _path(placeholder: str, name: str) -> Path | None:
            return workdir / name if self.uses(placeholder) else None

        return cmd.TempFiles(
            input=_path(cmd.INPUT, "input-content"),
            output=_path(cmd.OUTPUT, "output-content"),
            input_meta=_path(cmd.INPUT_META, "input-meta"),
            output_meta=_path(cmd.OUTPUT_META, "output-meta"),
        )

    def _check_exit(
        self, result: ProcessResult, reference: str, external: ExternalResult
    ) -> None:
        if result.exit_code == 0:
            return
        stderr_tail = result.stderr.decode("utf-8", errors="replace").strip()[-500:]
        if self._exit_error_fatal:
            raise ProcessExitError(result.exit_code, stderr_tail, captured=external)
        Log.error(
            f"External command for '{reference}' exited with status {result.exit_code}; "
            "keeping captured output"
        )

    def _harvest(self, result: ProcessResult, files: cmd.TempFiles) -> list[tuple[str, str]]:
        pairs: list[tuple[str, str]] = []
        if self._extractor.has_rules:
            for stream in (result.stdout, result.stderr):
                pairs.extend(self._extractor.extract(stream.decode("utf-8", errors="replace")))
        if files.output_meta is not None:
            pairs.extend(metadata_file.read(files.output_meta, self._metadata_output_format))
        return pairs

    def __repr__(self) -> str:
        return f"ExternalApp(command={self._args!r})"


def build_external_app(
    command: str | Sequence[str],
    settings: Settings,
    **overrides: object,
) -> ExternalApp:
    """Create an ExternalApp using the external_* defaults from settings."""
    options: dict[str, object] = {
        "timeout_seconds": settings.external_timeout_seconds,
        "exit_error_fatal": settings.external_exit_error_fatal,
        "metadata_input_format": settings.external_metadata_format,
        "metadata_output_format": settings.external_metadata_format,
        "max_memory": settings.max_memory_bytes,
    }
    options.update(overrides)
    return ExternalApp(command, **options)  # type: ignore[arg-type]
