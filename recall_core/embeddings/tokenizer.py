"""
Tokenizer for local TF-IDF embeddings.

Deliberately independent of the BM25 tokenizer: no stopword removal and no
numbers, so changing BM25 stopwords never shifts embedding slots. Only the CJK
character range is shared.
"""

import re
from typing import List

from ..bm25.tokenizer import CJK_PATTERN

_WORD_PATTERN = re.compile(r'[a-z]+')


def tokenize_for_embedding(text: str) -> List[str]:
    """
    Split text into embedding tokens.

    Latin words (2+ letters, lowercased) first, then for each CJK run its
    single characters followed by its overlapping bigrams.

    Examples:
        >>> tokenize_for_embedding("Hello, a World")
        ['hello', 'world']
        >>> tokenize_for_embedding("你好世界")
        ['你', '好', '世', '界', '你好', '好世', '世界']
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be str, got {type(text).__name__}")

    lower = text.lower()
    tokens = [word for word in _WORD_PATTERN.findall(lower) if len(word) > 1]

    for segment in CJK_PATTERN.findall(lower):
        tokens.extend(segment)
        tokens.extend(segment[i:i + 2] for i in range(len(segment) - 1))

    return tokens
