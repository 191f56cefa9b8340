"""
BM25 keyword ranking for backends without a native full-text engine.

OpenSearch ranks with BM25 server-side. The in-memory and Cosmos DB
backends rank candidate documents locally with rank_bm25 so that all
backends return comparable orderings.
"""

import re
from typing import List, Sequence

from rank_bm25 import BM25Plus

from ..domain.entities import Document

TOKEN_PATTERN = re.compile(r"\w+", re.UNICODE)


def tokenize(text: str) -> List[str]:
    """Split text into lower-cased word tokens."""
    return TOKEN_PATTERN.findall(text.lower())


def rank_documents(query: str, documents: Sequence[Document], top_k: int) -> List[Document]:
    """
    Rank documents against a keyword query.

    Only documents sharing at least one token with the query are returned.
    BM25+ is used because its IDF stays positive on very small corpora,
    where BM25Okapi produces zero or negative scores.

    Args:
        query: Free-text query
        documents: Candidate documents
        top_k: Maximum number of documents to return

    Returns:
        Copies of the matching documents with ``score`` set, best first.
        Ties keep the original candidate order.
    """
    query_tokens = tokenize(query)
    if not query_tokens or not documents or top_k <= 0:
        return []

    corpus = [tokenize(doc.content) for doc in documents]
    scorer = BM25Plus(corpus)
    scores = scorer.get_scores(query_tokens)

    wanted = set(query_tokens)
    ranked = [
        (float(score), position)
        for position, (score, tokens) in enumerate(zip(scores, corpus))
        if wanted.intersection(tokens)
    ]
    ranked.sort(key=lambda item: (-item[0], item[1]))

    return [documents[position].with_score(score) for score, position in ranked[:top_k]]
