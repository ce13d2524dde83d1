"""
Factory to create embedder instances based on configuration.
"""

import logging
from enum import Enum
from typing import Optional

from ..config import RetrievalSettings
from .base import BaseEmbedder
from .tfidf import LocalTFIDFEmbedder

logger = logging.getLogger(__name__)


class EmbeddingProvider(Enum):
    """Supported embedding providers"""
    LOCAL_TFIDF = "local-tfidf"  # Offline hashed TF-IDF (this package)
    OPENAI = "openai"            # Cloud API, supplied by the caller


class EmbedderFactory:
    """Factory to create embedder instances based on configuration."""

    _instance: Optional[BaseEmbedder] = None  # Singleton cache

    @classmethod
    def create(
        cls,
        settings: Optional[RetrievalSettings] = None,
        force_reload: bool = False,
    ) -> BaseEmbedder:
        """
        Create embedder based on settings (default: read from environment).

        Config (env vars):
            EMBEDDER_PROVIDER: "local-tfidf" | "openai" (default: local-tfidf)
            EMBEDDING_DIMENSIONS: Local TF-IDF vector length (default: 384)
            EMBEDDING_CACHE_DIR: Vocabulary snapshot directory

        Args:
            settings: Explicit settings instead of the environment
            force_reload: If True, recreate instance even if cached

        Returns:
            Embedder instance

        Raises:
            ValueError: Unknown provider, or a provider this offline core
                cannot construct
        """
        if cls._instance is not None and not force_reload:
            return cls._instance

        if settings is None:
            settings = RetrievalSettings.from_env()

        try:
            provider = EmbeddingProvider(settings.embedder_provider)
        except ValueError:
            valid = ", ".join(p.value for p in EmbeddingProvider)
            raise ValueError(
                f"Unknown embedder provider: {settings.embedder_provider}. Valid options: {valid}"
            ) from None

        if provider is EmbeddingProvider.OPENAI:
            raise ValueError(
                "The openai embedder requires network access and is not part of the "
                "offline retrieval core; construct the cloud client and pass it to the "
                "vector index directly"
            )

        logger.info(
            f"Creating local TF-IDF embedder: {settings.embedding_dimensions} dims, "
            f"cache={settings.embedding_cache_dir}"
        )
        cls._instance = LocalTFIDFEmbedder(
            dimensions=settings.embedding_dimensions,
            cache_dir=settings.embedding_cache_dir,
        )
        return cls._instance

    @classmethod
    def cleanup(cls):
        """Cleanup cached embedder instance."""
        if cls._instance is not None:
            logger.info("Cleaning up embedder instance")
            cls._instance.close()
            cls._instance = None


def get_embedder(settings: Optional[RetrievalSettings] = None) -> BaseEmbedder:
    """Get the shared embedder instance (created on first call)."""
    return EmbedderFactory.create(settings=settings)


def reset_embedder() -> None:
    """Drop the shared embedder so the next get_embedder() rebuilds it."""
    EmbedderFactory.cleanup()
