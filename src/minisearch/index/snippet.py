"""
Snippet extraction and query term highlighting.
"""

import re
from typing import Iterable, List

from ..preprocessing.tokenizer import clean_word, split_words


class SnippetGenerator:
    """
    Extracts a word window around the first query match and highlights query terms.
    """

    def __init__(self, window_size: int = 30, context_before: int = 10,
                 highlight_tag: str = 'strong', ellipsis: str = '...'):
        """
        Args:
            window_size: Maximum number of words in a snippet
            context_before: Words kept before the first match
            highlight_tag: Markup tag wrapped around matched terms
            ellipsis: Marker appended when the window stops before the end
        """
        self.window_size = window_size
        self.context_before = context_before
        self.highlight_tag = highlight_tag
        self.ellipsis = ellipsis

    def find_start(self, words: List[str], query_terms: Iterable[str]) -> int:
        """Start of the window: context_before words ahead of the first match, else 0."""
        terms = set(query_terms)
        for pos, word in enumerate(words):
            if clean_word(word) in terms:
                return max(0, pos - self.context_before)
        return 0

    def highlight(self, text: str, query_terms: Iterable[str]) -> str:
        """Wrap case-insensitive whole-word matches of the query terms in markup."""
        # Longest first so a term never shadows a longer one sharing its prefix
        terms = sorted(set(t for t in query_terms if t), key=len, reverse=True)
        if not terms:
            return text

        pattern = re.compile(
            r'\b(?:' + '|'.join(re.escape(t) for t in terms) + r')\b',
            re.IGNORECASE
        )
        open_tag = f"<{self.highlight_tag}>"
        close_tag = f"</{self.highlight_tag}>"

        return pattern.sub(lambda m: f"{open_tag}{m.group(0)}{close_tag}", text)

    def generate(self, content: str, query_terms: List[str]) -> str:
        """
        Build a highlighted snippet of content.

        Args:
            content: Raw document text
            query_terms: Tokenized query

        Returns:
            Snippet text, with ellipsis when truncated at the end
        """
        words = split_words(content)
        start = self.find_start(words, query_terms)

        snippet = self.highlight(' '.join(words[start:start + self.window_size]), query_terms)

        if start + self.window_size < len(words):
            snippet += self.ellipsis
        return snippet
