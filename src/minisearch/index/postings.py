"""
Posting records and per-term postings lists.
"""

from typing import Dict, List
from dataclasses import dataclass, field


@dataclass
class Posting:
    """
    Occurrences of one term in one document.

    Attributes:
        frequency: Number of times the term appears in the document
        positions: Offsets of those occurrences in the tokenized document
    """
    frequency: int
    positions: List[int] = field(default_factory=list)

    @classmethod
    def from_positions(cls, positions: List[int]) -> 'Posting':
        """Build a posting whose frequency is the number of positions."""
        ordered = sorted(positions)
        return cls(frequency=len(ordered), positions=ordered)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'frequency': self.frequency,
            'positions': list(self.positions)
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Posting':
        """Create from dictionary."""
        return cls(
            frequency=data['frequency'],
            positions=list(data['positions'])
        )


class PostingsList:
    """
    Postings for a single term, keyed by document id.
    """

    def __init__(self):
        """Initialize empty postings list."""
        self.postings: Dict[int, Posting] = {}

    def set_posting(self, doc_id: int, positions: List[int]):
        """
        Set the posting for a document, replacing any previous one.

        Args:
            doc_id: Document identifier
            positions: Positions where the term appears
        """
        if not positions:
            return
        self.postings[doc_id] = Posting.from_positions(positions)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            str(doc_id): posting.to_dict()
            for doc_id, posting in sorted(self.postings.items())
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'PostingsList':
        """Create from dictionary. Document id keys may be strings."""
        pl = cls()
        pl.postings = {
            int(doc_id): Posting.from_dict(posting)
            for doc_id, posting in data.items()
        }
        return pl
