import re
import threading

from docimport.fields.exceptions import PatternCompileError


def compile_pattern(pattern: str, case_sensitive: bool) -> re.Pattern[str]:
    """Compile *pattern* with dot-matches-all, ignoring case unless *case_sensitive*.

    Raises:
        PatternCompileError: if the expression is malformed.
    """
    flags = re.DOTALL
    if not case_sensitive:
        flags |= re.IGNORECASE
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise PatternCompileError(pattern, str(exc)) from exc


class PatternCache:
    """Memoizes compiled patterns keyed by (pattern, case_sensitive).

    Each handler owns its own cache; lookups are safe from concurrent branches.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._patterns: dict[tuple[str, bool], re.Pattern[str]] = {}

    def get(self, pattern: str, case_sensitive: bool) -> re.Pattern[str]:
        key = (pattern, case_sensitive)
        with self._lock:
            compiled = self._patterns.get(key)
            if compiled is None:
                compiled = compile_pattern(pattern, case_sensitive)
                self._patterns[key] = compiled
            return compiled

    def clear(self) -> None:
        with self._lock:
            self._patterns.clear()

    def __len__(self) -> int:
        return len(self._patterns)
