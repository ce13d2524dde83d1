"""
Unit tests for logging setup (console + per-session rotating file).
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from recall_core.logging_config import KEEP_SESSION_LOGS, setup_logging


@pytest.fixture
def root_logger():
    """Restore the root logger configuration after each test"""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestSetupLogging:
    """Test handler configuration"""
    
    def test_console_only(self, root_logger):
        assert setup_logging(log_file=None, console_level=logging.WARNING) is None
        
        assert len(root_logger.handlers) == 1
        assert root_logger.handlers[0].level == logging.WARNING
        assert root_logger.level == logging.DEBUG
    
    def test_session_log_file_created(self, root_logger, tmp_path):
        session_log = setup_logging(log_file=str(tmp_path / "logs" / "recall.log"))
        logging.getLogger("recall_core.test").debug("detailed message")
        
        assert session_log.parent == tmp_path / "logs"
        assert session_log.name.startswith("recall_")
        assert len(root_logger.handlers) == 2
        file_handlers = [h for h in root_logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        file_handlers[0].flush()
        assert "detailed message" in session_log.read_text(encoding="utf-8")
    
    def test_repeated_setup_does_not_duplicate_handlers(self, root_logger):
        setup_logging(log_file=None)
        setup_logging(log_file=None)
        
        assert len(root_logger.handlers) == 1
    
    def test_old_session_logs_cleaned_up(self, root_logger, tmp_path):
        """Test only the newest sessions survive, counting the new one"""
        log_dir = tmp_path / "logs"
        log_dir.mkdir()
        old_logs = [log_dir / f"recall_20240101_00000{i}.log" for i in range(6)]
        for path in old_logs:
            path.write_text("old session", encoding="utf-8")
        
        session_log = setup_logging(log_file=str(log_dir / "recall.log"))
        
        remaining = sorted(p for p in log_dir.glob("recall_*.log") if p != session_log)
        assert remaining == old_logs[-(KEEP_SESSION_LOGS - 1):]
        assert session_log.exists()
