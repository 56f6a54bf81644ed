"""Text preprocessing."""

from .tokenizer import STOPWORDS, tokenize, clean_word, count_words, split_words

__all__ = ['STOPWORDS', 'tokenize', 'clean_word', 'count_words', 'split_words']
