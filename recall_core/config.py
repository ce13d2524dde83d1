"""
Configuration from environment variables.

Load order (first match wins per variable):
1. Process environment
2. .env.local in the project root (local dev)
3. .env in the project root

Variables:
    BM25_K1               BM25 term frequency saturation (default: 1.2)
    BM25_B                BM25 length normalization (default: 0.75)
    EMBEDDER_PROVIDER     "local-tfidf" (default) | "openai"
    EMBEDDING_DIMENSIONS  Local TF-IDF vector length (default: 384)
    EMBEDDING_CACHE_DIR   Vocabulary snapshot directory (default: ~/.recall/embeddings)
    LOG_LEVEL             Console log level (default: INFO)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_CACHE_DIR = Path.home() / ".recall" / "embeddings"


def load_environment(project_root: Optional[Path] = None) -> Optional[Path]:
    """
    Load .env.local (preferred) or .env without overriding the process environment.

    Returns:
        The env file that was loaded, or None
    """
    root = Path(project_root) if project_root else PROJECT_ROOT
    for candidate in (root / ".env.local", root / ".env"):
        if candidate.exists():
            load_dotenv(candidate, override=False)
            logger.info(f"Loaded environment from: {candidate}")
            return candidate

    logger.debug("No .env.local or .env file found - using system environment variables only")
    return None


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


@dataclass
class RetrievalSettings:
    """Resolved settings for the BM25 engine and the embedder factory"""
    bm25_k1: float = 1.2
    bm25_b: float = 0.75
    embedder_provider: str = "local-tfidf"
    embedding_dimensions: int = 384
    embedding_cache_dir: Path = DEFAULT_CACHE_DIR
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "RetrievalSettings":
        """
        Read settings from the environment (call load_environment() first to
        pick up .env files).

        Raises:
            ValueError: A numeric variable cannot be parsed
        """
        cache_dir = os.getenv("EMBEDDING_CACHE_DIR")
        return cls(
            bm25_k1=_env_float("BM25_K1", 1.2),
            bm25_b=_env_float("BM25_B", 0.75),
            embedder_provider=os.getenv("EMBEDDER_PROVIDER", "local-tfidf").strip().lower(),
            embedding_dimensions=_env_int("EMBEDDING_DIMENSIONS", 384),
            embedding_cache_dir=Path(cache_dir).expanduser() if cache_dir else DEFAULT_CACHE_DIR,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def console_log_level(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)
