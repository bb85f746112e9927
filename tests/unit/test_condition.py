from concurrent.futures import ThreadPoolExecutor

import pytest

from docimport.document.metadata import Metadata
from docimport.fields.exceptions import PatternCompileError
from docimport.fields.patterns import PatternCache
from docimport.handler.condition import RestrictTo, matches


class TestMatches:
    def test_empty_conditions_always_match(self) -> None:
        assert matches((), "ref", Metadata())

    def test_any_condition_is_enough(self) -> None:
        meta = Metadata({"type": ["pdf"]})
        conditions = (RestrictTo("type", "html"), RestrictTo("type", "pdf"))
        assert matches(conditions, "ref", meta)

    def test_no_condition_matching(self) -> None:
        meta = Metadata({"type": ["doc"]})
        conditions = (RestrictTo("type", "html"), RestrictTo("type", "pdf"))
        assert not matches(conditions, "ref", meta)

    def test_missing_field_does_not_match(self) -> None:
        assert not matches((RestrictTo("title", ".*"),), "ref", Metadata())

    def test_any_value_of_a_field_can_match(self) -> None:
        meta = Metadata({"tag": ["a", "b", "c"]})
        assert matches((RestrictTo("tag", "c"),), "ref", meta)


class TestRestrictTo:
    def test_whole_value_must_match(self) -> None:
        meta = Metadata({"title": ["big potato"]})
        assert not RestrictTo("title", "potato").matches("ref", meta)
        assert RestrictTo("title", ".*potato").matches("ref", meta)

    def test_case_insensitive_by_default(self) -> None:
        meta = Metadata({"f": ["foo"]})
        assert RestrictTo("f", "FOO").matches("ref", meta)
        assert not RestrictTo("f", "FOO", case_sensitive=True).matches("ref", meta)

    def test_case_folding_is_unicode_aware(self) -> None:
        meta = Metadata({"city": ["ÉCOLE"]})
        assert RestrictTo("city", "école").matches("ref", meta)

    def test_dot_matches_line_breaks(self) -> None:
        meta = Metadata({"body": ["first line\nsecond line"]})
        assert RestrictTo("body", "first.*second.*").matches("ref", meta)

    def test_reference_is_addressable(self) -> None:
        condition = RestrictTo("document.reference", r".*\.pdf")
        assert condition.matches("http://x/a.pdf", Metadata())
        assert not condition.matches("http://x/a.html", Metadata())

    def test_invalid_pattern_raises(self) -> None:
        with pytest.raises(PatternCompileError):
            RestrictTo("f", "(unclosed").matches("ref", Metadata({"f": ["x"]}))

    def test_pattern_is_compiled_once(self) -> None:
        condition = RestrictTo("f", "x.*")
        meta = Metadata({"f": ["xy"]})
        condition.matches("ref", meta)
        condition.matches("ref", meta)
        assert len(condition._cache) == 1

    def test_concurrent_matching(self) -> None:
        condition = RestrictTo("f", "v[0-9]+")
        metas = [Metadata({"f": [f"v{i}"]}) for i in range(200)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda m: condition.matches("ref", m), metas))
        assert all(results)


class TestPatternCache:
    def test_keys_on_pattern_and_case_flag(self) -> None:
        cache = PatternCache()
        insensitive = cache.get("abc", False)
        sensitive = cache.get("abc", True)
        assert insensitive is not sensitive
        assert cache.get("abc", False) is insensitive
        assert len(cache) == 2

    def test_clear(self) -> None:
        cache = PatternCache()
        cache.get("abc", False)
        cache.clear()
        assert len(cache) == 0
