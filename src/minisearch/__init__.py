"""
minisearch - in-memory full-text search with TF-IDF ranking.
"""

from .engine import SearchEngine, SearchResult, ImportResult
from .serialization import SnapshotError

__version__ = '0.1.0'

__all__ = ['SearchEngine', 'SearchResult', 'ImportResult', 'SnapshotError']
