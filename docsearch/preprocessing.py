"""
Text preprocessing for ingestion.

Splits long texts into overlapping word windows so that keyword
retrieval and the reader work on passage-sized documents.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import structlog

from .domain.entities import Document

logger = structlog.get_logger(__name__)

SUPPORTED_SUFFIXES = (".txt", ".md")


def split_text(text: str, split_length: int = 200, split_overlap: int = 0) -> List[str]:
    """
    Split text into windows of ``split_length`` words.

    Consecutive windows share ``split_overlap`` words.

    Args:
        text: Text to split
        split_length: Words per passage
        split_overlap: Words repeated between consecutive passages

    Returns:
        List of passages, empty for blank text

    Raises:
        ValueError: If the lengths are inconsistent
    """
    if split_length < 1:
        raise ValueError("split_length must be at least 1")
    if split_overlap < 0 or split_overlap >= split_length:
        raise ValueError("split_overlap must be >= 0 and smaller than split_length")

    words = text.split()
    if not words:
        return []

    step = split_length - split_overlap
    passages = []
    for start in range(0, len(words), step):
        passages.append(" ".join(words[start : start + split_length]))
        if start + split_length >= len(words):
            break
    return passages


def documents_from_text(
    text: str,
    meta: Optional[Dict[str, Any]] = None,
    split_length: Optional[int] = None,
    split_overlap: int = 0,
    document_id: Optional[str] = None,
) -> List[Document]:
    """
    Turn one text into one or more documents.

    Without ``split_length`` the whole text becomes a single document.
    Split documents carry ``_split_id`` in their metadata, and when a
    ``document_id`` is given their ids are ``<document_id>_<split_id>``.
    """
    meta = dict(meta or {})
    if split_length is None:
        if not text.strip():
            return []
        return [Document(content=text, id=document_id or "", meta=meta)]

    documents = []
    for index, passage in enumerate(split_text(text, split_length, split_overlap)):
        split_meta = {**meta, "_split_id": index}
        split_id = f"{document_id}_{index}" if document_id else ""
        documents.append(Document(content=passage, id=split_id, meta=split_meta))
    return documents


def iter_text_files(directory: Path) -> Iterable[Path]:
    """Yield supported text files below ``directory`` in a stable order."""
    for path in sorted(directory.rglob("*")):
        if path.is_file() and path.suffix.lower() in SUPPORTED_SUFFIXES:
            yield path


def load_directory(
    directory: Path, split_length: Optional[int] = None, split_overlap: int = 0
) -> List[Document]:
    """
    Read every text file in a directory into documents.

    Args:
        directory: Directory to scan recursively
        split_length: Optional words per passage
        split_overlap: Words shared between passages

    Returns:
        Documents with ``meta["name"]`` set to the file name
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise ValueError(f"Not a directory: {directory}")

    documents: List[Document] = []
    for path in iter_text_files(directory):
        text = path.read_text(encoding="utf-8", errors="replace")
        documents.extend(
            documents_from_text(text, {"name": path.name}, split_length, split_overlap)
        )
        logger.debug("File converted", file=str(path))

    logger.info("Directory loaded", directory=str(directory), documents=len(documents))
    return documents
