"""
recall-core - offline retrieval for persistent assistant memory.

Two independent strategies over the same memory documents:
- bm25: keyword ranking with incrementally mutable corpus statistics
- embeddings: deterministic hashed TF-IDF vectors for a vector index

Neither performs network I/O.
"""

from .bm25 import BM25Document, BM25Engine, BM25SearchResult, tokenize
from .embeddings import LocalTFIDFEmbedder, Vocabulary, VocabularyStore, get_embedder

__version__ = "0.1.0"

__all__ = [
    "BM25Document",
    "BM25Engine",
    "BM25SearchResult",
    "tokenize",
    "LocalTFIDFEmbedder",
    "Vocabulary",
    "VocabularyStore",
    "get_embedder",
]
