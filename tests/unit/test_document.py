import io

import pytest

from docimport.document.cancellation import CancelToken
from docimport.document.content import CachedContent
from docimport.document.metadata import DOC_REFERENCE
from docimport.document.models import Document


class TestCachedContent:
    def test_content_is_rereadable(self) -> None:
        content = CachedContent.from_bytes(b"hello")
        assert content.read() == b"hello"
        assert content.read() == b"hello"
        assert content.size == 5

    def test_small_content_stays_in_memory(self) -> None:
        content = CachedContent.from_bytes(b"x" * 10, max_memory=100)
        assert content.in_memory

    def test_large_content_spills_to_disk(self) -> None:
        content = CachedContent.from_stream(io.BytesIO(b"x" * 1000), max_memory=100)
        assert not content.in_memory
        assert content.read() == b"x" * 1000

    def test_released_content_cannot_be_read(self) -> None:
        content = CachedContent.from_bytes(b"x")
        content.close()
        with pytest.raises(ValueError, match="released"):
            content.read()


class TestDocument:
    def test_create_records_reference_metadata(self) -> None:
        doc = Document.create("c:\\ref with spaces\\doc.txt", b"abc")
        assert doc.metadata.get_string(DOC_REFERENCE) == "c:\\ref with spaces\\doc.txt"
        assert not doc.parsed

    def test_replace_content_releases_previous(self) -> None:
        doc = Document.create("ref", b"old")
        previous = doc.content
        doc.replace_content(b"new")
        assert previous.closed
        assert doc.content.read() == b"new"

    def test_create_from_stream(self) -> None:
        doc = Document.create("ref", io.BytesIO(b"streamed"), {"a": ["1"]})
        assert doc.content.read_text() == "streamed"
        assert doc.metadata.get_string("a") == "1"


class TestCancelToken:
    def test_child_sees_parent_cancellation(self) -> None:
        parent = CancelToken()
        child = parent.child()
        parent.cancel()
        assert child.cancelled

    def test_child_cancellation_does_not_reach_parent_or_sibling(self) -> None:
        parent = CancelToken()
        child = parent.child()
        sibling = parent.child()
        child.cancel()
        assert child.cancelled
        assert not parent.cancelled
        assert not sibling.cancelled
