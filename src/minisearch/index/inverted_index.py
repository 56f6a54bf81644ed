"""
Core inverted index and document store.
"""

from types import MappingProxyType
from typing import Dict, List, Mapping, Optional
from collections import defaultdict
from dataclasses import dataclass
import logging

from .postings import Posting, PostingsList
from ..preprocessing.tokenizer import count_words

logger = logging.getLogger(__name__)

_EMPTY_POSTINGS: Mapping[int, Posting] = MappingProxyType({})


class InvertedIndex:
    """
    Core inverted index structure.
    Maps terms to postings lists.
    """

    def __init__(self):
        """Initialize empty inverted index."""
        # Term -> PostingsList mapping
        self.dictionary: Dict[str, PostingsList] = {}

    def update(self, doc_id: int, tokens: List[str]):
        """
        Index the tokens of one document.

        Each document is indexed once, so postings are set rather than merged.

        Args:
            doc_id: Document identifier
            tokens: Tokenized document content
        """
        term_positions = defaultdict(list)

        for position, token in enumerate(tokens):
            term_positions[token].append(position)

        for term, positions in term_positions.items():
            if term not in self.dictionary:
                self.dictionary[term] = PostingsList()
            self.dictionary[term].set_posting(doc_id, positions)

        logger.debug(f"Indexed document {doc_id}: {len(term_positions)} distinct terms")

    def lookup(self, term: str) -> Mapping[int, Posting]:
        """
        Get the postings of a term as a read-only mapping of document id to posting.

        Args:
            term: The term to look up

        Returns:
            Mapping of document id to Posting, empty if the term is not indexed
        """
        postings = self.dictionary.get(term)
        if postings is None:
            return _EMPTY_POSTINGS
        return MappingProxyType(postings.postings)

    def get_vocabulary_size(self) -> int:
        """Get size of vocabulary (number of unique terms)."""
        return len(self.dictionary)

    def to_dict(self) -> dict:
        """Convert index to dictionary for serialization."""
        return {
            term: postings.to_dict()
            for term, postings in self.dictionary.items()
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'InvertedIndex':
        """Create index from dictionary."""
        index = cls()
        for term, postings_data in data.items():
            index.dictionary[term] = PostingsList.from_dict(postings_data)
        return index


@dataclass(frozen=True)
class Document:
    """An indexed document. Length is the raw whitespace word count."""
    id: int
    title: str
    content: str
    length: int

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'length': self.length
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Document':
        return cls(
            id=int(data['id']),
            title=data['title'],
            content=data['content'],
            length=int(data['length'])
        )


class DocumentStore:
    """
    Append-only store of documents keyed by an auto-incrementing id.
    """

    def __init__(self):
        """Initialize document store."""
        self.documents: Dict[int, Document] = {}
        self.document_count = 0

    def add(self, content: str, title: str = '') -> int:
        """
        Store a document and assign it the next id.

        Args:
            content: Raw document text
            title: Document title, defaults to "Document {id}"

        Returns:
            Assigned document id
        """
        doc_id = self.document_count + 1
        content = content or ''

        self.documents[doc_id] = Document(
            id=doc_id,
            title=title or f"Document {doc_id}",
            content=content,
            length=count_words(content)
        )
        self.document_count = doc_id

        return doc_id

    def get_document(self, doc_id: int) -> Optional[Document]:
        """Get document by id."""
        return self.documents.get(doc_id)

    def get_document_length(self, doc_id: int) -> int:
        """Get raw word count of a document, 0 if unknown."""
        doc = self.get_document(doc_id)
        return doc.length if doc else 0

    def get_document_count(self) -> int:
        """Get total number of documents."""
        return self.document_count

    def average_document_length(self) -> float:
        """Mean stored document length, 0 when the store is empty."""
        if not self.documents:
            return 0.0
        return sum(doc.length for doc in self.documents.values()) / len(self.documents)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            str(doc_id): doc.to_dict()
            for doc_id, doc in sorted(self.documents.items())
        }

    @classmethod
    def from_dict(cls, data: dict, document_count: int) -> 'DocumentStore':
        """Create from dictionary."""
        store = cls()
        store.documents = {
            int(doc_id): Document.from_dict(dict(doc, id=int(doc_id)))
            for doc_id, doc in data.items()
        }
        store.document_count = document_count
        return store
