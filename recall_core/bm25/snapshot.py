"""
Local JSON snapshots of an exported BM25 index.

Structure on disk (UTF-8, non-ASCII kept verbatim):
    {
        "config": {"k1": 1.2, "b": 0.75, "fieldWeights": {"text": 1}},
        "documents": [{"id": "...", "text": "...", "fields": {...}}, ...]
    }

Unlike the vocabulary snapshot, a corpus snapshot is written only when the
caller asks for it, so read and write errors propagate unchanged.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)


def save_index_snapshot(path: Union[str, Path], data: Dict[str, Any]) -> Path:
    """
    Write export_index() output to a JSON file.

    Args:
        path: Target file (parent directories are created)
        data: Exported index

    Returns:
        Resolved snapshot path
    """
    snapshot_path = Path(path)
    snapshot_path.parent.mkdir(parents=True, exist_ok=True)

    snapshot_json = json.dumps(data, ensure_ascii=False, indent=2)
    snapshot_path.write_text(snapshot_json, encoding="utf-8")

    logger.info(f"Saved BM25 snapshot: {len(data.get('documents', []))} documents -> {snapshot_path}")
    return snapshot_path


def load_index_snapshot(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a snapshot written by save_index_snapshot().

    Raises:
        FileNotFoundError: Snapshot does not exist
        ValueError: Snapshot is not a JSON object with a "documents" list
    """
    snapshot_path = Path(path)
    data = json.loads(snapshot_path.read_text(encoding="utf-8"))

    if not isinstance(data, dict) or not isinstance(data.get("documents"), list):
        raise ValueError(f"Invalid BM25 snapshot (expected object with 'documents' list): {snapshot_path}")

    logger.debug(f"Loaded BM25 snapshot: {len(data['documents'])} documents from {snapshot_path}")
    return data
