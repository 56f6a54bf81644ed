"""
Inverted index, scoring and snippet components.
"""

from .postings import Posting, PostingsList
from .inverted_index import InvertedIndex, Document, DocumentStore
from .scoring import QueryResult, TfIdfScorer
from .snippet import SnippetGenerator

__all__ = [
    'Posting',
    'PostingsList',
    'InvertedIndex',
    'Document',
    'DocumentStore',

    'QueryResult',
    'TfIdfScorer',
    'SnippetGenerator',
]
