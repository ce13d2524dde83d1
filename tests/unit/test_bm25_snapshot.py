"""
Unit tests for BM25 snapshot persistence.
"""

import json

import pytest
from recall_core.bm25 import BM25Engine, load_index_snapshot, save_index_snapshot


class TestIndexSnapshot:
    """Test JSON snapshot save/load"""
    
    def test_save_and_restore_engine(self, tmp_path, memory_corpus):
        """Test a saved export restores an equivalent engine"""
        engine = BM25Engine()
        engine.add_documents(memory_corpus)
        snapshot_path = tmp_path / "snapshots" / "bm25.json"
        
        written = save_index_snapshot(snapshot_path, engine.export_index())
        
        restored = BM25Engine()
        restored.import_index(load_index_snapshot(written))
        
        assert written == snapshot_path
        assert restored.search("机器学习") == engine.search("机器学习")
        assert restored.search("cat") == engine.search("cat")
    
    def test_non_ascii_written_verbatim(self, tmp_path):
        """Test Chinese text is stored as UTF-8, not escaped"""
        snapshot_path = tmp_path / "bm25.json"
        
        save_index_snapshot(snapshot_path, {"documents": [{"id": "1", "text": "测试"}]})
        
        assert "测试" in snapshot_path.read_text(encoding="utf-8")
    
    def test_missing_snapshot_raises(self, tmp_path):
        """Test read errors propagate"""
        with pytest.raises(FileNotFoundError):
            load_index_snapshot(tmp_path / "missing.json")
    
    def test_invalid_snapshot_raises(self, tmp_path):
        """Test structurally invalid snapshots are rejected"""
        snapshot_path = tmp_path / "bm25.json"
        snapshot_path.write_text(json.dumps({"config": {}}), encoding="utf-8")
        
        with pytest.raises(ValueError):
            load_index_snapshot(snapshot_path)
    
    def test_corrupt_snapshot_raises(self, tmp_path):
        """Test unparseable JSON is not silently ignored"""
        snapshot_path = tmp_path / "bm25.json"
        snapshot_path.write_text("{not json", encoding="utf-8")
        
        with pytest.raises(ValueError):
            load_index_snapshot(snapshot_path)
