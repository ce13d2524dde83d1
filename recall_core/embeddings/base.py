"""
Abstract base class for embedding generators.

All embedders must implement this interface to be swappable: the local
TF-IDF embedder in this package, or a cloud embedding client supplied by the
caller. Vectors from different embedders have different dimensions and must
never be mixed in one vector index.
"""

from abc import ABC, abstractmethod
from typing import List


class BaseEmbedder(ABC):
    """
    Abstract base class for embedding generators.
    """

    @abstractmethod
    def embed(self, text: str) -> List[float]:
        """
        Generate an embedding for a single text.

        Returns:
            Vector of length get_dimensions()
        """
        pass

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """Embed each text independently, preserving order."""
        return [self.embed(text) for text in texts]

    @abstractmethod
    def get_dimensions(self) -> int:
        """Fixed vector length produced by this embedder."""
        pass

    def close(self):
        """Optional cleanup (flush caches, close API clients, etc.)"""
        pass
