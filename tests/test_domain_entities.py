"""
Tests for domain entities.

Covers document validation, id generation, serialization and answer
context windows.
"""

import pytest

from docsearch.domain.entities import Answer, AskResult, Document, SearchResult, make_context


class TestDocument:
    """Test Document entity."""

    def test_generates_id(self):
        doc = Document(content="hello world")
        assert len(doc.id) == 32
        assert doc.meta == {}
        assert doc.score is None

    def test_ids_are_unique(self):
        assert Document(content="a").id != Document(content="a").id

    def test_keeps_supplied_id(self):
        assert Document(content="a", id="doc-1").id == "doc-1"

    def test_empty_id_is_replaced(self):
        assert Document(content="a", id="").id

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_blank_content_rejected(self, content):
        with pytest.raises(ValueError, match="empty"):
            Document(content=content)

    def test_with_score_returns_copy(self):
        doc = Document(content="a", id="1", meta={"k": "v"})
        scored = doc.with_score(2)

        assert scored.score == 2.0
        assert doc.score is None
        scored.meta["k"] = "changed"
        assert doc.meta["k"] == "v"

    def test_dict_round_trip(self):
        doc = Document(content="text", id="42", meta={"lang": "en"}, score=1.5)
        assert Document.from_dict(doc.to_dict()) == doc

    def test_from_dict_without_id(self):
        doc = Document.from_dict({"content": "text"})
        assert doc.id
        assert doc.meta == {}


class TestAnswer:
    """Test Answer serialization."""

    def test_to_dict(self):
        answer = Answer(
            answer="Eddard",
            score=0.9,
            context="daughter of Eddard Stark",
            document_id="arya",
            offsets_in_document=(30, 36),
            offsets_in_context=(12, 18),
        )
        data = answer.to_dict()

        assert data["answer"] == "Eddard"
        assert data["document_id"] == "arya"
        assert data["offsets_in_document"] == [{"start": 30, "end": 36}]
        assert data["offsets_in_context"] == [{"start": 12, "end": 18}]

    def test_results_to_dict(self):
        doc = Document(content="text", id="1")
        assert SearchResult(query="q", documents=[doc]).to_dict() == {
            "query": "q",
            "documents": [doc.to_dict()],
        }
        assert AskResult(query="q", answers=[], documents=[]).to_dict() == {
            "query": "q",
            "answers": [],
            "documents": [],
        }


class TestMakeContext:
    """Test answer context windows."""

    def test_window_centred_on_answer(self):
        text = "a" * 100 + "ANSWER" + "b" * 100
        context, (start, end) = make_context(text, 100, 106, window=26)

        assert context[start:end] == "ANSWER"
        assert len(context) == 26

    def test_clipped_at_text_start(self):
        text = "ANSWER and some trailing text"
        context, (start, end) = make_context(text, 0, 6, window=12)

        assert start == 0
        assert context[start:end] == "ANSWER"

    def test_short_text_returned_whole(self):
        text = "short ANSWER"
        context, (start, end) = make_context(text, 6, 12, window=150)

        assert context == text
        assert (start, end) == (6, 12)
