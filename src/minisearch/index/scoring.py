"""
TF-IDF scoring and ranking.
"""

from typing import List, Set
import logging
import math

from .inverted_index import InvertedIndex, DocumentStore

logger = logging.getLogger(__name__)


class QueryResult:
    """Container for a scored document."""

    def __init__(self, doc_id: int, score: float):
        self.doc_id = doc_id
        self.score = score

    def __repr__(self):
        return f"QueryResult(doc_id={self.doc_id}, score={self.score:.4f})"

    def __lt__(self, other):
        # Descending score, then ascending doc_id
        if self.score != other.score:
            return self.score > other.score
        return self.doc_id < other.doc_id


class TfIdfScorer:
    """
    Term-at-a-time TF-IDF scorer.

    tf(t, d) = frequency / raw word count of d (0 for empty documents)
    idf(t) = ln(N / df(t))
    """

    def __init__(self, index: InvertedIndex, doc_store: DocumentStore):
        """
        Args:
            index: InvertedIndex to query
            doc_store: Document store holding document lengths
        """
        self.index = index
        self.doc_store = doc_store

    def tf(self, term: str, doc_id: int) -> float:
        """Term frequency normalized by the document's raw word count."""
        posting = self.index.lookup(term).get(doc_id)
        if posting is None:
            return 0.0

        doc_length = self.doc_store.get_document_length(doc_id)
        if doc_length == 0:
            return 0.0

        return posting.frequency / doc_length

    def idf(self, term: str) -> float:
        """
        Inverse document frequency, ln(N / df).

        Returns 0.0 for terms that are not indexed.
        """
        df = len(self.index.lookup(term))
        if df == 0:
            return 0.0
        return math.log(self.doc_store.get_document_count() / df)

    def score_document(self, doc_id: int, query_terms: List[str]) -> float:
        """
        Sum the TF-IDF contribution of every query term occurrence.

        Repeated query terms contribute once per occurrence.
        """
        return sum(self.tf(term, doc_id) * self.idf(term) for term in query_terms)

    def candidates(self, query_terms: List[str]) -> Set[int]:
        """Union of documents holding a posting for any query term."""
        doc_ids: Set[int] = set()
        for term in set(query_terms):
            doc_ids.update(self.index.lookup(term).keys())
        return doc_ids

    def rank(self, query_terms: List[str]) -> List[QueryResult]:
        """
        Score all candidate documents and order them.

        Algorithm:
        1. Collect candidates holding any query term
        2. Score each candidate over every query term occurrence
        3. Sort by score descending, doc_id ascending

        Args:
            query_terms: Tokenized query

        Returns:
            List of QueryResult objects, unrounded scores
        """
        results = [
            QueryResult(doc_id, self.score_document(doc_id, query_terms))
            for doc_id in self.candidates(query_terms)
        ]
        results.sort()

        logger.debug(f"Ranked {len(results)} candidates for {len(query_terms)} query terms")
        return results
