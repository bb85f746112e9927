"""Stand-in external application used by the external adapter tests.

Reverses the words of every line it reads. Options:

    -ic FILE   read content from FILE instead of stdin
    -oc FILE   write content to FILE instead of stdout
    -im FILE   read metadata (key=value lines) from FILE
    -om FILE   write metadata with reversed values to FILE
    -ref REF   print ``reference=REF`` on stdout
    --exit N   exit with status N after processing
    --sleep S  sleep S seconds before processing

Environment variables STDOUT_BEFORE, STDOUT_AFTER, STDERR_BEFORE and
STDERR_AFTER are echoed on the matching stream before/after the content.
"""

import os
import sys
import time


def _reverse(line: str) -> str:
    return " ".join(reversed(line.split(" ")))


def _options(argv: list[str]) -> dict[str, str]:
    options: dict[str, str] = {}
    index = 0
    while index < len(argv) - 1:
        options[argv[index]] = argv[index + 1]
        index += 2
    return options


def main() -> int:
    options = _options(sys.argv[1:])
    if "--sleep" in options:
        time.sleep(float(options["--sleep"]))

    _echo(sys.stdout, "STDOUT_BEFORE")
    _echo(sys.stderr, "STDERR_BEFORE")

    source = open(options["-ic"], encoding="utf-8") if "-ic" in options else sys.stdin
    target = open(options["-oc"], "w", encoding="utf-8") if "-oc" in options else sys.stdout
    with source:
        for line in source:
            target.write(_reverse(line.rstrip("\n")) + "\n")
    if target is not sys.stdout:
        target.close()

    if "-im" in options and "-om" in options:
        with open(options["-im"], encoding="utf-8") as meta_in, open(
            options["-om"], "w", encoding="utf-8"
        ) as meta_out:
            for line in meta_in:
                key, _, value = line.rstrip("\n").partition("=")
                if key and not key.startswith("document."):
                    meta_out.write(f"{key}={_reverse(value)}\n")

    if "-ref" in options:
        sys.stdout.write(f"reference={options['-ref']}\n")

    _echo(sys.stdout, "STDOUT_AFTER")
    _echo(sys.stderr, "STDERR_AFTER")
    sys.stdout.flush()
    return int(options.get("--exit", "0"))


def _echo(stream, name: str) -> None:  # type: ignore[no-untyped-def]
    value = os.environ.get(name)
    if value:
        stream.write(value + "\n")


if __name__ == "__main__":
    sys.exit(main())
