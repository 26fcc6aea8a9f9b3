import logging

from madegg import config
from madegg.logger import get_logger


def test_level_and_file_come_from_config(tmp_path, monkeypatch):
    path = tmp_path / "nested" / "chat.log"
    monkeypatch.setattr(config, "LOG_LEVEL", "debug")
    monkeypatch.setattr(config, "LOG_FILE", str(path))
    log = get_logger("madegg.test.configured")
    assert log.level == logging.DEBUG
    log.debug("written to file")
    for h in log.handlers:
        h.flush()
    assert "written to file" in path.read_text(encoding="utf-8")


def test_empty_log_file_means_stdout_only(monkeypatch):
    monkeypatch.setattr(config, "LOG_LEVEL", "nonsense")
    monkeypatch.setattr(config, "LOG_FILE", "")
    log = get_logger("madegg.test.stdout_only")
    assert log.level == logging.INFO
    assert [type(h) for h in log.handlers] == [logging.StreamHandler]
