"""
Tokenization shared by indexing and querying.
"""

import re
from typing import FrozenSet, List

# Characters that survive normalization: letters, digits, underscore
_NON_WORD = re.compile(r'[^\w]')

STOPWORDS: FrozenSet[str] = frozenset([
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of',
    'with', 'by', 'is', 'are', 'was', 'were', 'be', 'been', 'have', 'has',
    'had', 'do', 'does', 'did', 'will', 'would', 'could', 'should',
])


def tokenize(text: str) -> List[str]:
    """
    Normalize text into an ordered list of index terms.

    Lowercases, replaces every non-word character with whitespace, splits on
    whitespace and drops stopwords and single-character fragments. Order is
    preserved because postings record positions in this sequence.

    Args:
        text: Raw document or query text

    Returns:
        List of terms
    """
    if not text:
        return []

    text = _NON_WORD.sub(' ', text.lower())

    return [
        token for token in text.split()
        if len(token) > 1 and token not in STOPWORDS
    ]


def split_words(text: str) -> List[str]:
    """Split on single spaces, keeping punctuation attached to words."""
    return text.split(' ')


def clean_word(word: str) -> str:
    """Lowercase a raw word and strip its non-word characters."""
    return _NON_WORD.sub('', word).lower()


def count_words(text: str) -> int:
    """Count whitespace-delimited words in unfiltered text."""
    return len(text.split()) if text else 0
