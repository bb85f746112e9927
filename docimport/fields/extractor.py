"""Turns free text into metadata fields using ordered regular-expression rules.

Each rule names where its field name and its value come from: either a
literal string or a capture group of the rule's own match (0 being the whole
match). Text is read line by line; for every line each rule is tried in
declaration order, so results come out in line order, then rule order.
"""

import re
from dataclasses import dataclass

from docimport.document.metadata import Metadata
from docimport.fields.exceptions import PatternCompileError
from docimport.fields.patterns import compile_pattern
from docimport.logging.logger import Log

Selector = str | int


@dataclass(frozen=True)
class RegexFieldRule:
    """One extraction rule: where a match's field name and value come from."""

    pattern: str
    field: Selector
    value: Selector = 0
    case_sensitive: bool = False


def _resolve(selector: Selector, match: re.Match[str]) -> str:
    if isinstance(selector, str):
        return selector
    if selector < 0 or selector > (match.re.groups or 0):
        return ""
    return match.group(selector) or ""


class FieldExtractor:
    """Applies :class:`RegexFieldRule` objects to text.

    Rules are compiled once. A rule that fails to compile is skipped and its
    error kept in :attr:`errors`; the remaining rules still run.
    """

    def __init__(self, rules: list[RegexFieldRule] | tuple[RegexFieldRule, ...] = ()) -> None:
        self.rules = tuple(rules)
        self.errors: tuple[PatternCompileError, ...] = ()
        self._compiled: list[tuple[RegexFieldRule, re.Pattern[str]]] = []
        errors: list[PatternCompileError] = []
        for rule in self.rules:
            try:
                self._compiled.append((rule, compile_pattern(rule.pattern, rule.case_sensitive)))
            except PatternCompileError as exc:
                Log.error(f"Skipping field extraction rule: {exc}")
                errors.append(exc)
        self.errors = tuple(errors)

    def extract(self, text: str) -> list[tuple[str, str]]:
        """Return ``(field, value)`` pairs found in *text*."""
        pairs: list[tuple[str, str]] = []
        if not self._compiled or not text:
            return pairs
        for line in text.splitlines():
            for rule, pattern in self._compiled:
                match = pattern.search(line)
                if match is None:
                    continue
                pairs.append((_resolve(rule.field, match), _resolve(rule.value, match)))
        return pairs

    def extract_into(self, text: str, metadata: Metadata) -> int:
        """Extract from *text* and append the results to *metadata*."""
        return metadata.merge(self.extract(text))

    @property
    def has_rules(self) -> bool:
        return bool(self._compiled)
