"""
Tests for the logging module: HUMAN level, HumanFormatter, pipeline setup.
"""

import io
import json
import logging
from pathlib import Path

import structlog

from skillfetch.config.schema import LoggingConfig
from skillfetch.logging import HUMAN, HumanFormatter, HumanLog, HumanLogHandler, configure_logging


class TestHumanLevel:
    def test_level_registered(self):
        assert HUMAN == 25
        assert logging.getLevelName(HUMAN) == "HUMAN"

    def test_level_known_to_structlog(self):
        assert structlog.stdlib.LEVEL_TO_NAME[HUMAN] == "human"


class TestHumanFormatter:
    def setup_method(self):
        self.fmt = HumanFormatter()

    def test_download_start(self):
        assert self.fmt.format_event("install.download.start", url="x") == "📥 Downloading skills from GitHub..."

    def test_install_start(self):
        assert self.fmt.format_event("install.start", target=".claude/skills") == "📦 Installing to .claude/skills..."

    def test_install_start_dry_run(self):
        assert "Dry run" in self.fmt.format_event("install.start", target="t", dry_run=True)

    def test_missing(self):
        assert self.fmt.format_event("install.skill.missing", skill="ghost") == "⚠  Not in archive: ghost"

    def test_done(self):
        assert self.fmt.format_event("install.done") == "✨ Done!"

    def test_sizes(self):
        assert self.fmt.format_event("install.download.complete", bytes=512) == "   512 B received"
        assert self.fmt.format_event("install.download.complete", bytes=2048) == "   2.0 KB received"
        assert self.fmt.format_event("install.download.complete", bytes=3 * 1024 * 1024) == "   3.0 MB received"

    def test_unknown_event(self):
        assert self.fmt.format_event("something.else") is None


class TestHumanLogHandler:
    def test_ignores_other_levels(self):
        stream = io.StringIO()
        handler = HumanLogHandler(stream=stream)
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "install.done", (), None)
        handler.emit(record)
        assert stream.getvalue() == ""

    def test_plain_record(self):
        stream = io.StringIO()
        handler = HumanLogHandler(stream=stream)
        record = logging.LogRecord("x", HUMAN, __file__, 1, "install.done", (), None)
        handler.emit(record)
        assert stream.getvalue() == "✨ Done!\n"

    def test_structlog_event_dict(self):
        stream = io.StringIO()
        handler = HumanLogHandler(stream=stream)
        record = logging.LogRecord(
            "x", HUMAN, __file__, 1,
            {"event": "install.skill.missing", "skill": "ghost", "level": "human", "timestamp": "t"},
            (), None,
        )
        handler.emit(record)
        assert stream.getvalue() == "⚠  Not in archive: ghost\n"


class TestConfigureLogging:
    def test_human_events_reach_stderr(self, capsys):
        configure_logging(LoggingConfig())
        HumanLog(structlog.get_logger("t")).install_start("dest")
        err = capsys.readouterr().err
        assert "📦 Installing to dest..." in err

    def test_quiet_silences_everything(self, capsys):
        configure_logging(LoggingConfig(), quiet=True)
        log = structlog.get_logger("t")
        HumanLog(log).done()
        log.warning("something.odd")
        captured = capsys.readouterr()
        assert captured.err == ""
        assert captured.out == ""

    def test_warn_level_hides_progress(self, capsys):
        configure_logging(LoggingConfig(level="warn"))
        HumanLog(structlog.get_logger("t")).done()
        assert "Done" not in capsys.readouterr().err

    def test_json_file_pipeline(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "run.jsonl"
        configure_logging(LoggingConfig(file=log_file), quiet=True)
        structlog.get_logger("t").info("archive.opened", entries=3)
        for handler in logging.root.handlers:
            handler.flush()
        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert lines[-1]["event"] == "archive.opened"
        assert lines[-1]["entries"] == 3
        assert lines[-1]["level"] == "info"
