"""
Shared fixtures: in-memory skills archives and a mock HTTP transport.
"""

import io
import logging
import zipfile

import httpx
import pytest
import structlog

from skillfetch.config.schema import LoggingConfig
from skillfetch.logging import configure_logging

ARCHIVE_ROOT = "webdev-agent-skills-main"


def _build_zip(files: dict[str, str | bytes], dirs: tuple[str, ...] = ()) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for d in dirs:
            zf.writestr(d.rstrip("/") + "/", "")
        for name, content in files.items():
            zf.writestr(name, content)
    return buf.getvalue()


@pytest.fixture(autouse=True)
def _quiet_logging():
    """Every test starts with structlog wired to stdlib and no output handlers."""
    configure_logging(LoggingConfig(), quiet=True)
    yield
    logging.root.handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def zip_builder():
    return _build_zip


@pytest.fixture
def skills_zip() -> bytes:
    """A small snapshot shaped like the GitHub branch archive."""
    r = ARCHIVE_ROOT
    return _build_zip(
        {
            f"{r}/README.md": "# webdev agent skills\n",
            f"{r}/css-tokens/SKILL.md": (
                "---\nname: css-tokens\ndescription: Design tokens as CSS custom properties\n---\n\n"
                "# CSS tokens\n"
            ),
            f"{r}/css-tokens/references/tokens.css": ":root { --space-s: 0.5rem; }\n",
            f"{r}/semantic-html/SKILL.md": (
                "---\nname: semantic-html\ndescription: Use the right element\n---\n\n# Semantic HTML\n"
            ),
            f"{r}/frontend-security/SKILL.md": "# Frontend security\n",
        },
        dirs=(
            f"{r}/",
            f"{r}/css-tokens/",
            f"{r}/css-tokens/references/",
            f"{r}/semantic-html/",
            f"{r}/frontend-security/",
        ),
    )


@pytest.fixture
def archive_transport(skills_zip):
    """MockTransport serving skills_zip for every GET; records requests."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=skills_zip)

    transport = httpx.MockTransport(handler)
    transport.requests = seen
    return transport
