"""
Human Log -- formatter and helper for install progress lines.

Produces readable output with icons, one line per step, so the user can
follow what the installer does without technical noise.

Example output:
    📥 Downloading skills from GitHub...
    📦 Installing to .claude/skills...
    ⚠  Not in archive: css-tokenz
    ✨ Done!
"""

import logging
import sys
from typing import Any

from .levels import HUMAN

# Keys structlog adds to every event dict; never passed to the formatter
_STRUCTLOG_KEYS = frozenset({"event", "level", "logger", "timestamp", "_record", "_from_structlog"})

_RECORD_KEYS = frozenset({
    "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "message",
    "taskName", "name", "event",
})


class HumanFormatter:
    """Formats install progress events as readable text.

    Each event type has its own format. Unknown events return None and
    are not printed.
    """

    def format_event(self, event: str, **kw: Any) -> str | None:
        """Format an event as readable text.

        Args:
            event: Event name (e.g. "install.download.start")
            **kw: Event parameters

        Returns:
            Formatted text, or None if the event has no format
        """
        match event:

            # ── DOWNLOAD ────────────────────────────────────────────────
            case "install.download.start":
                return "📥 Downloading skills from GitHub..."

            case "install.download.retry":
                attempt = kw.get("attempt", "?")
                return f"   ↻ Retrying download (attempt {attempt})..."

            case "install.download.complete":
                size = kw.get("bytes")
                if size is None:
                    return None
                return f"   {_format_size(size)} received"

            # ── INSTALL ─────────────────────────────────────────────────
            case "install.start":
                target = kw.get("target", "?")
                if kw.get("dry_run"):
                    return f"📦 Dry run, would install to {target}..."
                return f"📦 Installing to {target}..."

            case "install.skill.missing":
                skill = kw.get("skill", "?")
                return f"⚠  Not in archive: {skill}"

            case "install.done":
                return "✨ Done!"

            case _:
                return None


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


class HumanLogHandler(logging.Handler):
    """Logging handler that keeps HUMAN events and formats them.

    Only processes records at the HUMAN level (25); everything else is ignored.
    Writes to stderr so stdout stays clean for per-skill confirmations.
    """

    def __init__(self, stream=None) -> None:
        super().__init__(level=HUMAN)
        self.stream = stream or sys.stderr
        self.formatter_inst = HumanFormatter()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if record.levelno != HUMAN:
                return

            event, kw = _event_from_record(record)
            formatted = self.formatter_inst.format_event(event, **kw)
            if formatted is not None:
                self.stream.write(formatted + "\n")
                self.stream.flush()
        except Exception:
            self.handleError(record)


def _event_from_record(record: logging.LogRecord) -> tuple[str, dict[str, Any]]:
    """Extract (event, kwargs) from a structlog or plain stdlib record."""
    # structlog's ProcessorFormatter.wrap_for_formatter leaves the event dict in msg
    if isinstance(record.msg, dict):
        event = str(record.msg.get("event", ""))
        kw = {k: v for k, v in record.msg.items() if k not in _STRUCTLOG_KEYS}
        return event, kw

    event = getattr(record, "event", None) or record.getMessage()
    kw = {
        k: v for k, v in record.__dict__.items()
        if not k.startswith("_") and k not in _RECORD_KEYS
    }
    return event, kw


class HumanLog:
    """Typed helper to emit HUMAN-level logs from code.

    Instead of calling log.log(HUMAN, "event", ...) directly,
    use methods with clear semantic names.

    Usage:
        hlog = HumanLog(structlog.get_logger())
        hlog.download_start(url)
        hlog.install_start(".claude/skills")
    """

    def __init__(self, logger) -> None:
        self._log = logger

    def download_start(self, url: str) -> None:
        self._log.log(HUMAN, "install.download.start", url=url)

    def download_retry(self, attempt: int) -> None:
        self._log.log(HUMAN, "install.download.retry", attempt=attempt)

    def download_complete(self, size: int) -> None:
        self._log.log(HUMAN, "install.download.complete", bytes=size)

    def install_start(self, target: str, dry_run: bool = False) -> None:
        self._log.log(HUMAN, "install.start", target=target, dry_run=dry_run)

    def skill_missing(self, skill: str) -> None:
        self._log.log(HUMAN, "install.skill.missing", skill=skill)

    def done(self) -> None:
        self._log.log(HUMAN, "install.done")
