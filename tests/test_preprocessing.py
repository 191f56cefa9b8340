"""
Tests for text preprocessing and directory loading.
"""

import pytest

from docsearch.preprocessing import documents_from_text, load_directory, split_text

TEXT = " ".join(f"w{i}" for i in range(10))


class TestSplitText:
    def test_without_overlap(self):
        assert split_text(TEXT, split_length=4) == ["w0 w1 w2 w3", "w4 w5 w6 w7", "w8 w9"]

    def test_with_overlap(self):
        assert split_text(TEXT, split_length=4, split_overlap=2) == [
            "w0 w1 w2 w3",
            "w2 w3 w4 w5",
            "w4 w5 w6 w7",
            "w6 w7 w8 w9",
        ]

    def test_text_shorter_than_window(self):
        assert split_text("one two", split_length=5) == ["one two"]

    def test_blank_text(self):
        assert split_text("   ", split_length=5) == []

    @pytest.mark.parametrize("length,overlap", [(0, 0), (3, 3), (3, -1)])
    def test_invalid_lengths(self, length, overlap):
        with pytest.raises(ValueError):
            split_text(TEXT, split_length=length, split_overlap=overlap)


class TestDocumentsFromText:
    def test_single_document(self):
        docs = documents_from_text("hello world", meta={"a": 1}, document_id="doc")

        assert len(docs) == 1
        assert docs[0].id == "doc"
        assert docs[0].meta == {"a": 1}

    def test_blank_text_yields_nothing(self):
        assert documents_from_text("  ") == []

    def test_split_documents_get_derived_ids(self):
        docs = documents_from_text(TEXT, meta={"a": 1}, split_length=5, document_id="doc")

        assert [d.id for d in docs] == ["doc_0", "doc_1"]
        assert [d.meta["_split_id"] for d in docs] == [0, 1]
        assert all(d.meta["a"] == 1 for d in docs)

    def test_split_documents_without_id(self):
        docs = documents_from_text(TEXT, split_length=5)
        assert len({d.id for d in docs}) == 2


class TestLoadDirectory:
    def test_loads_supported_files(self, tmp_path):
        (tmp_path / "a.txt").write_text("Arya Stark of Winterfell", encoding="utf-8")
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "b.md").write_text("# Jon Snow", encoding="utf-8")
        (tmp_path / "image.png").write_bytes(b"\x89PNG")
        (tmp_path / "empty.txt").write_text("", encoding="utf-8")

        docs = load_directory(tmp_path)

        assert sorted(d.meta["name"] for d in docs) == ["a.txt", "b.md"]

    def test_split_while_loading(self, tmp_path):
        (tmp_path / "long.txt").write_text(TEXT, encoding="utf-8")
        docs = load_directory(tmp_path, split_length=3)
        assert len(docs) == 4

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ValueError, match="Not a directory"):
            load_directory(tmp_path / "missing")
