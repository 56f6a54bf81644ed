"""
Main SearchEngine class.

Integrates the tokenizer, postings index, document store, scorer, snippet
generator and serializer behind the SearchIndexBase interface. An engine is a
plain in-process object owned by its caller; state survives between calls only
through export_index / import_index.

The engine does no locking. Callers that share an instance across threads must
serialize add_document and import_index against every other call.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Union

from omegaconf import DictConfig, OmegaConf

from .index_base import SearchIndexBase
from .index.inverted_index import InvertedIndex, DocumentStore, Document
from .index.scoring import TfIdfScorer
from .index.snippet import SnippetGenerator
from .preprocessing.tokenizer import tokenize
from .serialization import SnapshotError, export_snapshot, restore_snapshot

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """A ranked search hit."""
    document_id: int
    title: str
    content: str
    score: float
    snippet: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ImportResult:
    """Outcome of import_index. Truthy on success."""
    success: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success


class SearchEngine(SearchIndexBase):
    """
    In-memory full-text search with TF-IDF ranking.

    Example:
        engine = SearchEngine()
        engine.add_document("cat dog cat", title="Pets")
        results = engine.search("cat")
    """

    def __init__(self, config: Optional[Union[DictConfig, dict]] = None):
        """
        Initialize an empty engine.

        Args:
            config: OmegaConf config (or plain dict) with optional
                    snippet.* and search.* settings
        """
        if config is None:
            config = OmegaConf.create({})
        elif not isinstance(config, DictConfig):
            config = OmegaConf.create(config)
        self.config = config

        self.score_precision = OmegaConf.select(config, 'search.score_precision', default=4)
        self.max_results = OmegaConf.select(config, 'search.max_results', default=None)

        self.snippets = SnippetGenerator(
            window_size=OmegaConf.select(config, 'snippet.window_size', default=30),
            context_before=OmegaConf.select(config, 'snippet.context_before', default=10),
            highlight_tag=OmegaConf.select(config, 'snippet.highlight_tag', default='strong'),
            ellipsis=OmegaConf.select(config, 'snippet.ellipsis', default='...')
        )

        self.inverted_index = InvertedIndex()
        self.doc_store = DocumentStore()
        self.scorer = TfIdfScorer(self.inverted_index, self.doc_store)

    def add_document(self, content: str, title: str = '') -> int:
        """
        Store and index a document.

        Empty content is accepted and stored with length 0 and no postings.

        Args:
            content: Raw document text
            title: Optional title, defaults to "Document {id}"

        Returns:
            Assigned document id
        """
        doc_id = self.doc_store.add(content, title)
        tokens = tokenize(content)
        self.inverted_index.update(doc_id, tokens)

        logger.info(f"Added document {doc_id} ({len(tokens)} terms)")
        return doc_id

    def search(self, query: str, limit: Optional[int] = None) -> List[SearchResult]:
        """
        Rank documents against a query.

        Args:
            query: Free-text query
            limit: Maximum number of results; falls back to search.max_results,
                   all candidates when both are unset

        Returns:
            List of SearchResult, best first. Empty for queries with no terms.

        Raises:
            ValueError: If the effective limit is negative
        """
        if limit is None:
            limit = self.max_results
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        query_terms = tokenize(query)
        if not query_terms:
            logger.debug(f"Query '{query}' has no searchable terms")
            return []

        ranked = self.scorer.rank(query_terms)
        if limit is not None:
            ranked = ranked[:limit]

        results = []
        for result in ranked:
            doc = self.doc_store.get_document(result.doc_id)
            results.append(SearchResult(
                document_id=doc.id,
                title=doc.title,
                content=doc.content,
                score=round(result.score, self.score_precision),
                snippet=self.snippets.generate(doc.content, query_terms)
            ))

        logger.debug(f"Query '{query}' returned {len(results)} results")
        return results

    def stats(self) -> Dict[str, Any]:
        """Get collection statistics."""
        return {
            'total_documents': self.doc_store.get_document_count(),
            'total_terms': self.inverted_index.get_vocabulary_size(),
            'average_document_length': self.doc_store.average_document_length()
        }

    def export_index(self) -> dict:
        """Export the postings index, documents and counter as a snapshot."""
        snapshot = export_snapshot(self.inverted_index, self.doc_store)
        logger.info(f"Exported snapshot with {self.doc_store.get_document_count()} documents")
        return snapshot

    def import_index(self, snapshot: dict) -> ImportResult:
        """
        Replace all state with a snapshot.

        The snapshot is fully validated first; on failure the current state is
        left untouched.

        Args:
            snapshot: Snapshot dictionary from export_index

        Returns:
            ImportResult with the failure reason when rejected
        """
        try:
            inverted_index, doc_store = restore_snapshot(snapshot)
        except SnapshotError as e:
            logger.warning(f"Rejected snapshot: {e}")
            return ImportResult(success=False, reason=str(e))

        self.inverted_index = inverted_index
        self.doc_store = doc_store
        self.scorer = TfIdfScorer(inverted_index, doc_store)

        logger.info(f"Imported snapshot with {doc_store.get_document_count()} documents")
        return ImportResult(success=True)

    def get_document(self, doc_id: int) -> Optional[Document]:
        """Get a stored document, or None for unknown ids."""
        return self.doc_store.get_document(doc_id)

    def score_document(self, doc_id: int, query: str) -> float:
        """Unrounded TF-IDF score of one document for a query."""
        return self.scorer.score_document(doc_id, tokenize(query))
