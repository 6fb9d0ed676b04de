"""
Skills -- catalog, archive download/extraction and installation.
"""

from .archive import SkillArchive
from .catalog import KNOWN_SKILLS, format_usage, parse_skill_names, validate_skill_name
from .download import ArchiveDownloader, temporary_archive
from .errors import (
    ArchiveError,
    DownloadError,
    InstallError,
    InvalidSkillNameError,
    SkillFetchError,
    SkillNotFoundError,
)
from .installer import InstallReport, SkillInstaller, SkillResult

__all__ = [
    "ArchiveDownloader",
    "ArchiveError",
    "DownloadError",
    "InstallError",
    "InstallReport",
    "InvalidSkillNameError",
    "KNOWN_SKILLS",
    "SkillArchive",
    "SkillFetchError",
    "SkillInstaller",
    "SkillNotFoundError",
    "SkillResult",
    "format_usage",
    "parse_skill_names",
    "temporary_archive",
    "validate_skill_name",
]
