"""
Archive downloader -- fetches the skills ZIP over HTTPS.

One unauthenticated GET, streamed to disk. Retries are off by default
(download.retries = 0); when enabled they only cover transient failures:
- Transport errors (connection refused, reset, timeouts)
- HTTP 429 and 5xx responses

Any other HTTP status is a hard failure and is never retried.
"""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Iterator

import httpx
import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..config.schema import DownloadConfig
from ..logging.human import HumanLog
from .errors import DownloadError

logger = structlog.get_logger()

_USER_AGENT = "skillfetch"


class _RetryableStatus(Exception):
    """Internal marker for HTTP statuses worth retrying."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}")


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, (httpx.TransportError, _RetryableStatus))


@contextlib.contextmanager
def temporary_archive(prefix: str = "webdev-skills-") -> Iterator[Path]:
    """Yield a unique temporary path for the archive and always delete it.

    The file is created by mkstemp (no name collisions between concurrent
    runs) and removed on exit, including on errors and KeyboardInterrupt.
    """
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=".zip")
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug("download.tmp_removed", path=str(path))


class ArchiveDownloader:
    """Downloads the skills archive with httpx.

    Attributes:
        config: Download configuration (timeout, retries, chunk size)
    """

    def __init__(
        self,
        config: DownloadConfig,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the downloader.

        Args:
            config: Download configuration
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.config = config
        self._transport = transport
        self.log = logger.bind(component="downloader")
        self.hlog = HumanLog(self.log)

    def _on_retry_sleep(self, retry_state: RetryCallState) -> None:
        """Called before each retry. Logs the attempt and wait time."""
        next_wait = retry_state.next_action.sleep if retry_state.next_action else 0
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        self.log.warning(
            "download.retry",
            attempt=retry_state.attempt_number,
            wait_seconds=round(next_wait, 1),
            error=str(exc) if exc else None,
            error_type=type(exc).__name__ if exc else None,
        )
        self.hlog.download_retry(retry_state.attempt_number + 1)

    def fetch(self, url: str, dest: Path) -> int:
        """Download url into dest, overwriting it.

        Args:
            url: Archive URL
            dest: Destination file (usually from temporary_archive())

        Returns:
            Number of bytes written.

        Raises:
            DownloadError: On transport failure or a non-2xx response
        """
        self.hlog.download_start(url)
        max_attempts = self.config.retries + 1  # 1 original attempt + N retries

        try:
            with httpx.Client(
                timeout=self.config.timeout,
                follow_redirects=True,
                headers={"User-Agent": _USER_AGENT},
                transport=self._transport,
            ) as client:
                for attempt in Retrying(
                    retry=retry_if_exception(_is_retryable),
                    stop=stop_after_attempt(max_attempts),
                    wait=wait_exponential(multiplier=0.5, max=self.config.backoff_max),
                    before_sleep=self._on_retry_sleep,
                    reraise=True,
                ):
                    with attempt:
                        size = self._stream_to(client, url, dest)
        except _RetryableStatus as e:
            self.log.error("download.http_error", url=url, status=e.status_code)
            raise DownloadError(f"Download failed: HTTP {e.status_code} from {url}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.log.error("download.transport_error", url=url, error=str(e))
            raise DownloadError(f"Download failed: {e}") from e
        except OSError as e:
            raise DownloadError(f"Could not write archive to {dest}: {e}") from e

        self.log.info("download.complete", url=url, bytes=size)
        self.hlog.download_complete(size)
        return size

    def _stream_to(self, client: httpx.Client, url: str, dest: Path) -> int:
        """One download attempt. Truncates dest first so retries start clean."""
        with client.stream("GET", url) as response:
            if response.status_code == 429 or response.status_code >= 500:
                raise _RetryableStatus(response.status_code)
            if response.is_error:
                self.log.error("download.http_error", url=url, status=response.status_code)
                raise DownloadError(
                    f"Download failed: HTTP {response.status_code} from {url}"
                )

            total = 0
            with open(dest, "wb") as fh:
                for chunk in response.iter_bytes(chunk_size=self.config.chunk_size):
                    fh.write(chunk)
                    total += len(chunk)

        self.log.debug("download.attempt_ok", url=str(response.url), bytes=total)
        return total
