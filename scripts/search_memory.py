#!/usr/bin/env python3
"""
Search an exported BM25 memory snapshot from the command line.
Also embeds ad-hoc text with the configured local embedder for debugging.

Reads settings from .env.local / .env (see recall_core/config.py).
"""

import sys
from pathlib import Path

# Allow running from a source checkout without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from recall_core.bm25 import create_bm25_engine, load_index_snapshot
from recall_core.config import RetrievalSettings, load_environment
from recall_core.embeddings import get_embedder
from recall_core.logging_config import setup_logging


def search_snapshot(snapshot_path: str, query: str, settings: RetrievalSettings, top_k: int = 10) -> None:
    """
    Load a snapshot, run one query and print ranked ids.

    BM25_K1 / BM25_B apply unless the snapshot carries its own config.
    """
    engine = create_bm25_engine(settings)
    engine.import_index(load_index_snapshot(snapshot_path))

    results = engine.search(query, top_k=top_k)
    if not results:
        print("No matches")
        return

    for rank, result in enumerate(results, start=1):
        terms = ", ".join(result.matched_terms)
        print(f"{rank:2d}. {result.id}  score={result.score:.4f}  terms=[{terms}]")


def embed_text(text: str, settings: RetrievalSettings) -> None:
    """Embed text and print the non-zero slots."""
    embedder = get_embedder(settings)
    vector = embedder.embed(text)

    nonzero = [(i, v) for i, v in enumerate(vector) if v != 0.0]
    print(f"dimensions={len(vector)} nonzero={len(nonzero)}")
    for slot, value in nonzero:
        print(f"  [{slot:4d}] {value:+.6f}")


def main():
    """Main entry point."""
    if len(sys.argv) < 3:
        print("Usage:")
        print('  python scripts/search_memory.py SNAPSHOT.json "query" [TOP_K]')
        print('  python scripts/search_memory.py --embed "text"')
        print("\nExamples:")
        print('  python scripts/search_memory.py ~/.recall/bm25.json "file watcher race"')
        print('  python scripts/search_memory.py --embed "你好世界"')
        sys.exit(1)

    load_environment(project_root)
    try:
        settings = RetrievalSettings.from_env()
    except ValueError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    setup_logging(log_file=None, console_level=settings.console_log_level)

    if sys.argv[1] == "--embed":
        embed_text(sys.argv[2], settings)
    else:
        top_k = int(sys.argv[3]) if len(sys.argv) > 3 else 10
        search_snapshot(sys.argv[1], sys.argv[2], settings, top_k)


if __name__ == "__main__":
    main()
