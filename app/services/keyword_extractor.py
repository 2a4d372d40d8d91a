"""
Keyword Frequency Extraction
Single-pass tokenizer with a stopword filter, used by the keywords trend.
"""
from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, List, Optional, Tuple

# Common English function words plus a few chat fillers ("use", "get", "make").
DEFAULT_STOPWORDS = frozenset([
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
    "to", "was", "will", "with", "i", "you", "this", "can", "do",
    "what", "when", "where", "which", "who", "why", "my", "me",
    "am", "im", "get", "make", "use", "using", "used", "does", "did",
])

_SPLIT_RE = re.compile(r"[^a-z0-9]+")


class KeywordExtractor:
    def __init__(self, stopwords: Optional[Iterable[str]] = None, min_length: int = 3):
        if min_length < 1:
            raise ValueError("min_length must be a positive integer")
        words = DEFAULT_STOPWORDS if stopwords is None else stopwords
        self.stopwords = frozenset(w.strip().lower() for w in words if w and w.strip())
        self.min_length = min_length

    def tokenize(self, text: str) -> List[str]:
        return [
            token
            for token in _SPLIT_RE.split((text or "").lower())
            if len(token) >= self.min_length
            and not token.isdigit()
            and token not in self.stopwords
        ]

    def count(self, texts: Iterable[str]) -> Counter:
        freq: Counter = Counter()
        for text in texts:
            freq.update(self.tokenize(text))
        return freq

    def top_keywords(self, texts: Iterable[str], limit: int = 20) -> List[Tuple[str, int]]:
        """Most frequent keywords, ties kept in first-seen order."""
        if limit < 1:
            raise ValueError("limit must be a positive integer")
        # Counter preserves insertion order and sorted() is stable.
        ranked = sorted(self.count(texts).items(), key=lambda kv: kv[1], reverse=True)
        return ranked[:limit]
