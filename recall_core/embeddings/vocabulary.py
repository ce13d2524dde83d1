"""
Hashed vocabulary for the local TF-IDF embedder, plus its JSON snapshot.

The vocabulary is an append-only log: words are never removed or reindexed.
Each new word gets an IDF placeholder of 1.0 that is never recalculated, and
document_count grows by one per embedded text (queries included). Changing
either behaviour would change every vector produced against an existing
snapshot.

Snapshot format (one file per embedder cache directory):
    {
        "words": ["hello", "world", ...],
        "wordToIndex": {"hello": 0, "world": 1, ...},
        "idf": [1.0, 1.0, ...],
        "documentCount": 42
    }
"""

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

VOCABULARY_FILENAME = "tfidf-vocab.json"
INITIAL_IDF = 1.0


class VocabularyWriteError(OSError):
    """Vocabulary snapshot could not be written"""


@dataclass
class Vocabulary:
    """Growing token table shared by all texts embedded through one embedder"""
    words: List[str] = field(default_factory=list)
    word_to_index: Dict[str, int] = field(default_factory=dict)
    idf: List[float] = field(default_factory=list)   # Index-aligned with words
    document_count: int = 0

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, word: str) -> bool:
        return word in self.word_to_index

    def index_of(self, word: str) -> Optional[int]:
        return self.word_to_index.get(word)

    def add_words(self, tokens: Iterable[str]) -> List[str]:
        """
        Append unseen tokens in first-seen order.

        Returns:
            Newly added words (empty if nothing was new)
        """
        added = []
        for token in tokens:
            if token not in self.word_to_index:
                self.word_to_index[token] = len(self.words)
                self.words.append(token)
                self.idf.append(INITIAL_IDF)
                added.append(token)
        return added

    def to_dict(self) -> dict:
        return {
            "words": list(self.words),
            "wordToIndex": dict(self.word_to_index),
            "idf": list(self.idf),
            "documentCount": self.document_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Vocabulary":
        """
        Build a vocabulary from snapshot data.

        Raises:
            ValueError: Data does not describe a consistent vocabulary
        """
        if not isinstance(data, dict):
            raise ValueError("Vocabulary snapshot must be a JSON object")

        words = data.get("words") or []
        if not isinstance(words, list) or not all(isinstance(w, str) for w in words):
            raise ValueError("'words' must be a list of strings")

        word_to_index = data.get("wordToIndex")
        if word_to_index is None:
            word_to_index = {word: i for i, word in enumerate(words)}
        elif not isinstance(word_to_index, dict) or any(
            not isinstance(i, int) or not 0 <= i < len(words) or words[i] != w
            for w, i in word_to_index.items()
        ):
            raise ValueError("'wordToIndex' does not match 'words'")
        if len(word_to_index) != len(words):
            # Unmapped or duplicated words would be appended again by add_words()
            raise ValueError("'wordToIndex' must map every word in 'words' exactly once")

        idf = data.get("idf") or []
        if not isinstance(idf, list) or not all(
            isinstance(v, (int, float)) and math.isfinite(v) and v >= 0 for v in idf
        ):
            raise ValueError("'idf' must be a list of non-negative numbers")
        idf = [float(v) for v in idf[:len(words)]]
        idf.extend([INITIAL_IDF] * (len(words) - len(idf)))

        document_count = data.get("documentCount") or 0
        if not isinstance(document_count, int) or document_count < 0:
            raise ValueError("'documentCount' must be a non-negative integer")

        return cls(
            words=list(words),
            word_to_index=dict(word_to_index),
            idf=idf,
            document_count=document_count,
        )


class VocabularyStore:
    """JSON file holding one vocabulary snapshot"""

    def __init__(self, cache_dir: Union[str, Path], filename: str = VOCABULARY_FILENAME):
        self.cache_dir = Path(cache_dir).expanduser()
        self.path = self.cache_dir / filename

    def load(self) -> Vocabulary:
        """
        Load the snapshot.

        A missing, unreadable or malformed snapshot yields an empty vocabulary;
        corruption is logged but never raised.
        """
        if not self.path.exists():
            logger.debug(f"No vocabulary snapshot at {self.path}, starting empty")
            return Vocabulary()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            vocabulary = Vocabulary.from_dict(data)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Ignoring unusable vocabulary snapshot {self.path}: {e}")
            return Vocabulary()

        logger.debug(
            f"Loaded vocabulary: {len(vocabulary)} words, "
            f"{vocabulary.document_count} documents from {self.path}"
        )
        return vocabulary

    def save(self, vocabulary: Vocabulary) -> None:
        """
        Write the snapshot synchronously.

        Raises:
            VocabularyWriteError: Directory or file could not be written
        """
        snapshot_json = json.dumps(vocabulary.to_dict(), ensure_ascii=False, indent=2)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            self.path.write_text(snapshot_json, encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to write vocabulary snapshot {self.path}: {e}")
            raise VocabularyWriteError(f"Failed to write vocabulary snapshot {self.path}: {e}") from e

        logger.debug(f"Saved vocabulary: {len(vocabulary)} words -> {self.path}")
