"""
Tests for ArchiveDownloader and temporary_archive (httpx.MockTransport, no network).
"""

import tempfile
from pathlib import Path

import httpx
import pytest

from skillfetch.config.schema import DownloadConfig
from skillfetch.skills.download import ArchiveDownloader, temporary_archive
from skillfetch.skills.errors import DownloadError

URL = "https://github.com/schalkneethling/webdev-agent-skills/archive/refs/heads/main.zip"


def _sequence_transport(responses: list):
    """Transport that replays responses (or raises exceptions) in order."""
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        item = responses[min(len(calls), len(responses)) - 1]
        if isinstance(item, Exception):
            raise item
        return item

    transport = httpx.MockTransport(handler)
    transport.calls = calls
    return transport


class TestFetch:
    def test_writes_body(self, tmp_path: Path):
        transport = _sequence_transport([httpx.Response(200, content=b"PK\x03\x04data")])
        dest = tmp_path / "a.zip"
        size = ArchiveDownloader(DownloadConfig(), transport=transport).fetch(URL, dest)
        assert size == 8
        assert dest.read_bytes() == b"PK\x03\x04data"
        assert len(transport.calls) == 1
        assert transport.calls[0].method == "GET"

    def test_follows_redirects(self, tmp_path: Path):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "github.com":
                return httpx.Response(302, headers={"Location": "https://codeload.github.com/x.zip"})
            return httpx.Response(200, content=b"zip")

        dest = tmp_path / "a.zip"
        ArchiveDownloader(DownloadConfig(), transport=httpx.MockTransport(handler)).fetch(URL, dest)
        assert dest.read_bytes() == b"zip"

    def test_404_is_fatal(self, tmp_path: Path):
        transport = _sequence_transport([httpx.Response(404)])
        with pytest.raises(DownloadError, match="HTTP 404"):
            ArchiveDownloader(DownloadConfig(retries=3, backoff_max=0), transport=transport).fetch(
                URL, tmp_path / "a.zip"
            )
        # Client errors are never retried
        assert len(transport.calls) == 1

    def test_no_retry_by_default(self, tmp_path: Path):
        transport = _sequence_transport([httpx.Response(503), httpx.Response(200, content=b"ok")])
        with pytest.raises(DownloadError, match="HTTP 503"):
            ArchiveDownloader(DownloadConfig(), transport=transport).fetch(URL, tmp_path / "a.zip")
        assert len(transport.calls) == 1

    def test_transport_error_wrapped(self, tmp_path: Path):
        transport = _sequence_transport([httpx.ConnectError("connection refused")])
        with pytest.raises(DownloadError, match="connection refused"):
            ArchiveDownloader(DownloadConfig(), transport=transport).fetch(URL, tmp_path / "a.zip")

    def test_retries_transient_errors(self, tmp_path: Path):
        transport = _sequence_transport([
            httpx.ConnectError("reset"),
            httpx.Response(502),
            httpx.Response(200, content=b"finally"),
        ])
        dest = tmp_path / "a.zip"
        cfg = DownloadConfig(retries=2, backoff_max=0)
        ArchiveDownloader(cfg, transport=transport).fetch(URL, dest)
        assert dest.read_bytes() == b"finally"
        assert len(transport.calls) == 3

    def test_retries_exhausted(self, tmp_path: Path):
        transport = _sequence_transport([httpx.Response(500)])
        cfg = DownloadConfig(retries=1, backoff_max=0)
        with pytest.raises(DownloadError, match="HTTP 500"):
            ArchiveDownloader(cfg, transport=transport).fetch(URL, tmp_path / "a.zip")
        assert len(transport.calls) == 2

    def test_unwritable_destination(self, tmp_path: Path):
        transport = _sequence_transport([httpx.Response(200, content=b"x")])
        dest = tmp_path / "missing-dir" / "a.zip"
        with pytest.raises(DownloadError, match="Could not write"):
            ArchiveDownloader(DownloadConfig(), transport=transport).fetch(URL, dest)


class TestTemporaryArchive:
    def test_unique_and_removed(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
        with temporary_archive() as a, temporary_archive() as b:
            assert a != b
            assert a.name.startswith("webdev-skills-")
            assert a.suffix == ".zip"
            assert a.exists() and b.exists()
        assert list(tmp_path.iterdir()) == []

    def test_removed_on_error(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
        with pytest.raises(RuntimeError):
            with temporary_archive() as path:
                path.write_bytes(b"partial")
                raise RuntimeError("boom")
        assert list(tmp_path.iterdir()) == []

    def test_already_deleted_is_fine(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
        with temporary_archive() as path:
            path.unlink()
