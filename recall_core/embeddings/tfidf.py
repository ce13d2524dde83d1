"""
Local TF-IDF embedder with feature hashing.

Works fully offline and produces the same vector for the same text as long as
the vocabulary does not grow in between. Each token is projected into a fixed
number of dimensions:

    slot   = hash(token) mod dimensions
    sign   = +1 if hash(token + "_sign") is even else -1
    weight = ln(1 + document_count / (1 + idf[token]))
    v[slot] += sign × tf(token) × weight

followed by L2 normalization. Colliding tokens share a slot; the random sign
keeps collisions from systematically inflating it. Normalization makes the
result invariant to a common scale, so weights are applied relative to the
largest weight in the text.

document_count counts every embedded text, queries included, and every idf
entry keeps its 1.0 placeholder, so the weight is one global scalar that
cancels out under normalization: vectors depend only on the text. Per-term
weights only take effect for snapshots that carry non-uniform idf values.
"""

import logging
import math
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np

from ..config import RetrievalSettings
from .base import BaseEmbedder
from .tokenizer import tokenize_for_embedding
from .vocabulary import Vocabulary, VocabularyStore

logger = logging.getLogger(__name__)

DEFAULT_DIMENSIONS = 384
HASH_SEED = 5381


def _utf16_code_units(text: str):
    for char in text:
        code_point = ord(char)
        if code_point > 0xFFFF:
            code_point -= 0x10000
            yield 0xD800 + (code_point >> 10)
            yield 0xDC00 + (code_point & 0x3FF)
        else:
            yield code_point


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def string_hash(text: str) -> int:
    """
    djb2-style string hash over UTF-16 code units.

    Only the left shift is truncated to signed 32 bits; the running sum is
    not, so long tokens can hash above 2**31. Returns the absolute value,
    ready for modulo. Slots must match existing vocabulary snapshots, so the
    arithmetic here must not change.
    """
    h = HASH_SEED
    for unit in _utf16_code_units(text):
        h = _to_int32(h << 5) + h + unit
    return abs(h)


def term_frequencies(tokens: List[str]) -> Dict[str, float]:
    """Normalized term frequency (count / total), in first-occurrence order."""
    total = len(tokens)
    return {token: count / total for token, count in Counter(tokens).items()}


class LocalTFIDFEmbedder(BaseEmbedder):
    """
    Offline TF-IDF embedder backed by a persisted hashed vocabulary.

    Usage:
        embedder = LocalTFIDFEmbedder(dimensions=384, cache_dir="/tmp/recall")
        vector = embedder.embed("fix flaky file watcher test")

    Not thread-safe: concurrent embed() calls race on the vocabulary and the
    snapshot file (last writer wins).
    """

    def __init__(
        self,
        dimensions: int = DEFAULT_DIMENSIONS,
        cache_dir: Optional[Union[str, Path]] = None,
        vocabulary: Optional[Vocabulary] = None,
        store: Optional[VocabularyStore] = None,
        autosave: bool = True,
    ):
        """
        Args:
            dimensions: Output vector length (fixed for the embedder's lifetime)
            cache_dir: Directory for the vocabulary snapshot
                (default: EMBEDDING_CACHE_DIR or ~/.recall/embeddings)
            vocabulary: Explicit vocabulary to use instead of loading the snapshot
            store: Snapshot store (overrides cache_dir)
            autosave: Write the snapshot whenever the vocabulary grows

        Raises:
            ValueError: dimensions is not a positive integer
        """
        if isinstance(dimensions, bool) or not isinstance(dimensions, int) or dimensions <= 0:
            raise ValueError(f"dimensions must be a positive integer, got {dimensions!r}")

        if store is None:
            if cache_dir is None:
                cache_dir = RetrievalSettings.from_env().embedding_cache_dir
            store = VocabularyStore(cache_dir)

        self._dimensions = dimensions
        self.store = store
        self.autosave = autosave
        self.vocabulary = vocabulary if vocabulary is not None else store.load()

        logger.debug(
            f"Local TF-IDF embedder ready: {dimensions} dims, "
            f"{len(self.vocabulary)} words in vocabulary"
        )

    def get_dimensions(self) -> int:
        return self._dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> List[float]:
        """
        Embed a text (updates the vocabulary first).

        Raises:
            TypeError: text is not a str
            VocabularyWriteError: New words could not be persisted
        """
        tokens = tokenize_for_embedding(text)
        tf = term_frequencies(tokens) if tokens else {}
        self.update_vocabulary(tokens)
        return self._project(tf)

    def update_vocabulary(self, tokens: List[str]) -> List[str]:
        """
        Register unseen tokens and count one more document.

        document_count is incremented even when nothing is new. The snapshot
        is written only if words were added.

        Returns:
            Newly added words
        """
        added = self.vocabulary.add_words(tokens)
        self.vocabulary.document_count += 1

        if added:
            logger.debug(f"Vocabulary grew by {len(added)} words to {len(self.vocabulary)}")
            if self.autosave:
                self.save()

        return added

    def save(self) -> None:
        """Persist the vocabulary snapshot (raises VocabularyWriteError)."""
        self.store.save(self.vocabulary)

    def _project(self, tf: Dict[str, float]) -> List[float]:
        vector = np.zeros(self._dimensions, dtype=np.float64)
        document_count = self.vocabulary.document_count

        contributions = []
        for word, tf_value in tf.items():
            index = self.vocabulary.index_of(word)
            if index is None:
                continue

            slot = string_hash(word) % self._dimensions
            sign = 1.0 if string_hash(word + "_sign") % 2 == 0 else -1.0
            # A zero placeholder (hand-edited snapshot) falls back to 1.0
            idf_placeholder = self.vocabulary.idf[index] or 1.0
            weight = math.log(1 + document_count / (1 + idf_placeholder))
            contributions.append((slot, sign * tf_value, weight))

        if not contributions:
            return vector.tolist()

        # Weights relative to the largest one: identical placeholders give
        # exactly 1.0, so document_count growth cannot perturb the normalized
        # vector through rounding.
        max_weight = max(weight for _, _, weight in contributions)
        if max_weight == 0:
            # Every weight underflowed (huge idf values): nothing to normalize
            return vector.tolist()

        for slot, signed_tf, weight in contributions:
            vector[slot] += signed_tf * (weight / max_weight)

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm

        return vector.tolist()
