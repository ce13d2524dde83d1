"""Unit test configuration - isolated environment and caches"""

import pytest

from recall_core.embeddings import reset_embedder

CONFIG_ENV_VARS = (
    "BM25_K1",
    "BM25_B",
    "EMBEDDER_PROVIDER",
    "EMBEDDING_DIMENSIONS",
    "EMBEDDING_CACHE_DIR",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """
    Strip retrieval settings from the environment for each unit test.

    The default cache dir is redirected into tmp_path so no test ever writes
    a vocabulary snapshot into the real home directory.
    """
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("recall_core.config.DEFAULT_CACHE_DIR", tmp_path / "default-cache")
    yield
    reset_embedder()


@pytest.fixture
def cache_dir(tmp_path):
    """Directory for vocabulary snapshots"""
    return tmp_path / "embeddings"


@pytest.fixture
def memory_corpus():
    """Small mixed English/Chinese memory corpus"""
    return [
        {"id": "1", "text": "the cat sat on the mat"},
        {"id": "2", "text": "the dog sat on the log"},
        {"id": "3", "text": "file watcher race condition fixed in session storage"},
        {"id": "4", "text": "这是第一个关于机器学习的文档"},
        {"id": "5", "text": "这是第二个关于深度学习的文档"},
    ]
