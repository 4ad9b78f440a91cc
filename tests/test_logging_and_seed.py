import json
import logging

from vaultgen import app
from vaultgen.dungeon import DungeonGenerator
from vaultgen.logging_utils import format_event, get_logger
from vaultgen.server import _configure_logging


def test_configure_logging_creates_log_file(tmp_path, monkeypatch):
    # Redirect instance path to a temp directory to exercise logging setup
    monkeypatch.setattr(app, "instance_path", str(tmp_path))
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        # Run twice to ensure idempotence (handler replace path)
        _configure_logging()
        path = _configure_logging()
        assert len(root.handlers) == 2
        logging.getLogger("vaultgen.test").info("hello")
        for h in root.handlers:
            h.flush()
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
    log_file = tmp_path / "app.log"
    assert path == str(log_file)
    assert log_file.exists()
    assert "hello" in log_file.read_text()


def test_event_line_format(monkeypatch):
    monkeypatch.delenv("VAULTGEN_LOG_JSON", raising=False)
    line = format_event("info", event="generation_complete", seed=42, note="two words", skipped=None)
    assert line.startswith("level=info ts=")
    assert "event=generation_complete" in line
    assert "seed=42" in line
    assert "note=two_words" in line
    assert "skipped" not in line


def test_event_json_mode(monkeypatch):
    monkeypatch.setenv("VAULTGEN_LOG_JSON", "1")
    rec = json.loads(format_event("warn", event="x", attempts=3))
    assert rec["level"] == "warn" and rec["attempts"] == 3


def test_level_threshold(monkeypatch, capsys):
    log = get_logger("vaultgen.test")
    monkeypatch.setenv("VAULTGEN_LOG_LEVEL", "warn")
    log.info(event="quiet")
    log.warn(event="loud")
    log.error(event="broken")
    captured = capsys.readouterr()
    assert "quiet" not in captured.out
    assert "event=loud" in captured.out and "logger=vaultgen.test" in captured.out
    assert "event=broken" in captured.err


def test_generation_logs_completion_with_seed(monkeypatch, capsys):
    monkeypatch.setenv("VAULTGEN_LOG_LEVEL", "debug")
    monkeypatch.delenv("VAULTGEN_LOG_JSON", raising=False)
    DungeonGenerator().generate(123)
    out = capsys.readouterr().out
    assert "event=generation_complete" in out
    assert "seed=123" in out
