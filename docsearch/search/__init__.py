"""
Search module for keyword ranking.

Provides tokenization and BM25 ranking shared by local backends.
"""
from .bm25 import rank_documents, tokenize

__all__ = [
    "rank_documents",
    "tokenize",
]
