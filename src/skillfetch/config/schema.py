"""
Pydantic models for skillfetch configuration.

Defines all configuration schemas using Pydantic v2 for validation,
defaults, and serialization.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_REPO_URL = (
    "https://github.com/schalkneethling/webdev-agent-skills/archive/refs/heads/main.zip"
)


def _default_known_skills() -> list[str]:
    from ..skills.catalog import KNOWN_SKILLS

    return list(KNOWN_SKILLS)


class SourceConfig(BaseModel):
    """Where skills come from.

    Only settable from the YAML file. No CLI flag or environment
    variable maps to the archive URL.
    """

    repo_url: str = DEFAULT_REPO_URL
    archive_root: str = Field(
        default="webdev-agent-skills-main",
        description="Top-level directory inside the ZIP that holds one folder per skill.",
    )
    known_skills: list[str] = Field(
        default_factory=_default_known_skills,
        description="Skill names listed in the usage text and by 'skillfetch list'.",
    )

    model_config = {"extra": "forbid"}

    @field_validator("archive_root")
    @classmethod
    def _strip_slashes(cls, v: str) -> str:
        v = v.strip("/")
        if not v:
            raise ValueError("archive_root cannot be empty")
        return v


class InstallConfig(BaseModel):
    """Install target and behavior for skills absent from the archive."""

    target_dir: Path = Path(".claude/skills")
    on_missing: Literal["warn", "error"] = Field(
        default="warn",
        description=(
            "'warn': report missing skills and keep installing the rest (exit 2). "
            "'error': verify every name first and write nothing if one is missing."
        ),
    )

    model_config = {"extra": "forbid"}


class DownloadConfig(BaseModel):
    """HTTP download of the skills archive."""

    timeout: float = Field(default=60.0, gt=0, description="Per-request timeout in seconds")
    retries: int = Field(
        default=0,
        ge=0,
        le=10,
        description="Retries for transient failures (transport errors, 429, 5xx). 0 = single attempt.",
    )
    backoff_max: float = Field(default=10.0, ge=0, description="Max wait between retries (s)")
    chunk_size: int = Field(default=65536, ge=1024)

    model_config = {"extra": "forbid"}


class LoggingConfig(BaseModel):
    """Logging system configuration."""

    # "human" shows progress lines; "warn"/"error" hide them
    level: Literal["debug", "info", "human", "warn", "error"] = "human"
    file: Path | None = None
    verbose: int = 0

    model_config = {"extra": "forbid"}


class AppConfig(BaseModel):
    """Complete application configuration.

    This is the root of the configuration tree. It combines all sections
    and is the entry point for validation.
    """

    source: SourceConfig = Field(default_factory=SourceConfig)
    install: InstallConfig = Field(default_factory=InstallConfig)
    download: DownloadConfig = Field(default_factory=DownloadConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "forbid"}
