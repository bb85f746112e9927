from docimport.handler import Handler, OnMatch
from docimport.handler.regex_metadata_filter import RegexMetadataFilter


class TestRegexMetadataFilter:
    def test_includes_matching_title(self, make_document) -> None:
        handler = Handler.filter(RegexMetadataFilter("title", ".*potato.*"))
        doc = make_document(metadata={"title": ["Best POTATO recipes"]})
        assert handler.apply(doc, parsed=True).accepted

    def test_rejects_non_matching_title(self, make_document) -> None:
        handler = Handler.filter(RegexMetadataFilter("title", ".*potato.*"))
        doc = make_document(metadata={"title": ["Carrots"]})
        assert not handler.apply(doc, parsed=True).accepted

    def test_rejects_missing_field(self, make_document) -> None:
        handler = Handler.filter(RegexMetadataFilter("title", ".*potato.*"))
        assert not handler.apply(make_document(), parsed=True).accepted

    def test_any_value_can_match(self, make_document) -> None:
        handler = Handler.filter(RegexMetadataFilter("title", ".*potato.*"))
        doc = make_document(metadata={"title": ["Carrots", "potatoes"]})
        assert handler.apply(doc, parsed=True).accepted

    def test_exclude_polarity(self, make_document) -> None:
        handler = Handler.filter(RegexMetadataFilter("title", ".*potato.*", OnMatch.EXCLUDE))
        doc = make_document(metadata={"title": ["potato"]})
        assert not handler.apply(doc, parsed=True).accepted

    def test_blank_regex_always_accepts(self, make_document) -> None:
        for regex in (None, "", "   "):
            handler = Handler.filter(RegexMetadataFilter("title", regex))
            assert handler.apply(make_document(), parsed=True).accepted

    def test_decision_is_repeatable(self, make_document) -> None:
        handler = Handler.filter(RegexMetadataFilter("title", ".*potato.*"))
        doc = make_document(metadata={"title": ["potato"]})
        first = handler.apply(doc, parsed=True).accepted
        second = handler.apply(doc, parsed=True).accepted
        assert first is second is True

    def test_changing_case_sensitivity_recompiles(self, make_document) -> None:
        filt = RegexMetadataFilter("title", "FOO")
        doc = make_document(metadata={"title": ["foo"]})
        assert filt.is_matched(doc, parsed=True)
        filt.case_sensitive = True
        assert not filt.is_matched(doc, parsed=True)

    def test_changing_regex_recompiles(self, make_document) -> None:
        filt = RegexMetadataFilter("title", "foo")
        doc = make_document(metadata={"title": ["bar"]})
        assert not filt.is_matched(doc, parsed=True)
        filt.regex = "bar"
        assert filt.is_matched(doc, parsed=True)
