"""
Embedding generation for memory retrieval.

Usage:
    # Get embedder (auto-configured from env):
    from recall_core.embeddings import get_embedder

    embedder = get_embedder()
    vector = embedder.embed("refactor session storage")

    # Or create a specific implementation with an isolated vocabulary:
    from recall_core.embeddings import LocalTFIDFEmbedder, Vocabulary

    embedder = LocalTFIDFEmbedder(dimensions=128, vocabulary=Vocabulary(), autosave=False)
"""

from .base import BaseEmbedder
from .tokenizer import tokenize_for_embedding
from .vocabulary import Vocabulary, VocabularyStore, VocabularyWriteError
from .tfidf import LocalTFIDFEmbedder, string_hash
from .factory import EmbedderFactory, EmbeddingProvider, get_embedder, reset_embedder

__all__ = [
    'BaseEmbedder',
    'tokenize_for_embedding',
    'Vocabulary',
    'VocabularyStore',
    'VocabularyWriteError',
    'LocalTFIDFEmbedder',
    'string_hash',
    'EmbedderFactory',
    'EmbeddingProvider',
    'get_embedder',
    'reset_embedder',
]
