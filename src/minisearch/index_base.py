from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class SearchIndexBase(ABC):
    """
    Base search index class with abstract methods to inherit for specific implementations.
    """

    @abstractmethod
    def add_document(self, content: str, title: str = '') -> int:
        """
        Adds a document to the index.

        Args:
            content: Raw document text
            title: Optional document title

        Returns:
            The assigned document id.
        """
        pass

    @abstractmethod
    def search(self, query: str, limit: Optional[int] = None) -> List[Any]:
        """
        Queries the index and returns ranked results.

        Args:
            query: Input query in str format
            limit: Maximum number of results, all when None

        Returns:
            results: Ranked list of search results
        """
        pass

    @abstractmethod
    def stats(self) -> Dict[str, Any]:
        """Returns collection statistics."""
        pass

    @abstractmethod
    def export_index(self) -> dict:
        """
        Exports the complete index state.

        Returns:
            A snapshot dictionary that import_index accepts.
        """
        pass

    @abstractmethod
    def import_index(self, snapshot: dict) -> Any:
        """
        Replaces the complete index state with a snapshot.

        Args:
            snapshot: Snapshot dictionary produced by export_index
        """
        pass
