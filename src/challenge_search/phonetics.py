"""
Phonetic keyword normalisation.

Free text is split into unique lowercase words, stop words are dropped
and each remaining word is reduced to its Metaphone code. The same
normaliser runs at write time (building the keyword Facet Sets) and at
read time (resolving a query), so a query word matches a record only if
both reduce to the same code.
"""

import re
from typing import FrozenSet, Iterable, List, Optional

import jellyfish

from config.constants import STOP_WORDS

_WORD_SPLIT = re.compile(r"\s+")


class PhoneticNormalizer:
    """Maps free text to deduplicated Metaphone codes."""

    def __init__(self, stop_words: Optional[Iterable[str]] = None):
        self.stop_words: FrozenSet[str] = frozenset(
            w.lower() for w in (STOP_WORDS if stop_words is None else stop_words)
        )

    def words(self, *texts: Optional[str]) -> List[str]:
        """Unique lowercase words across `texts`, first-seen order, stop words removed."""
        seen = {}
        for text in texts:
            if not text:
                continue
            for word in _WORD_SPLIT.split(text.strip().lower()):
                if word and word not in self.stop_words:
                    seen.setdefault(word, None)
        return list(seen)

    def encode(self, word: str) -> Optional[str]:
        """Metaphone code for one word, or None when it has no phonetic content."""
        code = jellyfish.metaphone(word)
        return code or None

    def codes(self, *texts: Optional[str]) -> List[str]:
        """Deduplicated phonetic codes for every word in `texts`."""
        seen = {}
        for word in self.words(*texts):
            code = self.encode(word)
            if code:
                seen.setdefault(code, None)
        return list(seen)
