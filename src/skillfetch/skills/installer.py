"""
Skills Installer -- installs, lists and removes skills from the webdev-agent-skills archive.

One install run is a linear sequence:
1. Validate the requested names (before any network activity)
2. Download the archive once to a unique temporary file
3. Extract each skill flattened into <target>/<skill>/
4. Delete the temporary archive (always, even on failure)

Skills missing from the archive follow install.on_missing:
- "warn": reported, no directory created, the rest still installs
- "error": every name is checked first, nothing is written if one is missing
"""

import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Literal

import structlog
import yaml

from ..config.schema import AppConfig
from ..logging.human import HumanLog
from .archive import SkillArchive
from .catalog import validate_skill_name
from .download import ArchiveDownloader, temporary_archive
from .errors import SkillFetchError, SkillNotFoundError

logger = structlog.get_logger()

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)


@dataclass
class SkillResult:
    """Outcome for a single requested skill."""

    name: str
    status: Literal["installed", "missing", "planned"]
    path: Path
    files: list[str] = field(default_factory=list)


@dataclass
class InstallReport:
    """Outcome of an install run."""

    target_dir: Path
    results: list[SkillResult] = field(default_factory=list)
    dry_run: bool = False

    @property
    def installed(self) -> list[str]:
        return [r.name for r in self.results if r.status == "installed"]

    @property
    def missing(self) -> list[str]:
        return [r.name for r in self.results if r.status == "missing"]

    @property
    def ok(self) -> bool:
        return not self.missing


class SkillInstaller:
    """Installs skills from the configured archive into a target directory."""

    def __init__(self, config: AppConfig, downloader: ArchiveDownloader | None = None):
        self.config = config
        self.downloader = downloader or ArchiveDownloader(config.download)
        self.log = logger.bind(component="installer")
        self.hlog = HumanLog(self.log)

    def install(
        self,
        names: list[str],
        target_dir: Path | None = None,
        dry_run: bool = False,
        on_result: Callable[[SkillResult], None] | None = None,
    ) -> InstallReport:
        """Download the archive once and install every requested skill.

        Args:
            names: Skill names, already parsed (see catalog.parse_skill_names)
            target_dir: Install root. Default: config.install.target_dir
            dry_run: If True, report what would be written and write nothing
            on_result: Called with each SkillResult as soon as that skill is done

        Returns:
            InstallReport with one SkillResult per name, in request order.

        Raises:
            InvalidSkillNameError: A name is not a single path component
            SkillFetchError: No names were given
            DownloadError: The archive could not be fetched
            ArchiveError: The archive is corrupt
            InstallError: A skill directory or file could not be written
            SkillNotFoundError: on_missing="error" and a name is not in the archive
        """
        if not names:
            raise SkillFetchError("No skills requested")
        for name in names:
            validate_skill_name(name)

        target = Path(target_dir) if target_dir is not None else self.config.install.target_dir
        source = self.config.source
        report = InstallReport(target_dir=target, dry_run=dry_run)

        with temporary_archive() as tmp_path:
            self.downloader.fetch(source.repo_url, tmp_path)
            self.hlog.install_start(str(target), dry_run=dry_run)

            with SkillArchive(tmp_path, source.archive_root) as archive:
                if self.config.install.on_missing == "error":
                    absent = [n for n in names if not archive.has_skill(n)]
                    if absent:
                        self.log.error(
                            "install.skills_missing",
                            missing=absent,
                            available=archive.available_skills(),
                        )
                        raise SkillNotFoundError(absent)

                for name in names:
                    result = self._install_one(archive, name, target, dry_run)
                    report.results.append(result)
                    if on_result is not None:
                        on_result(result)

        self.log.info(
            "install.complete",
            target=str(target),
            installed=report.installed,
            missing=report.missing,
            dry_run=dry_run,
        )
        self.hlog.done()
        return report

    def _install_one(
        self, archive: SkillArchive, name: str, target: Path, dry_run: bool
    ) -> SkillResult:
        dest = target / name
        if not archive.has_skill(name):
            self.log.warning("install.skill_missing", skill=name)
            self.hlog.skill_missing(name)
            return SkillResult(name=name, status="missing", path=dest)

        if dry_run:
            return SkillResult(name=name, status="planned", path=dest, files=archive.plan_skill(name))

        files = archive.extract_skill(name, dest)
        self.log.info("install.skill_installed", skill=name, path=str(dest), files=len(files))
        return SkillResult(name=name, status="installed", path=dest, files=files)

    def list_installed(self, target_dir: Path | None = None) -> list[dict[str, str]]:
        """List skills present in the target directory.

        Name and description come from SKILL.md frontmatter when present;
        otherwise the directory name is used and the description is empty.

        Returns:
            List of dicts with name, description, path, sorted by directory name.
        """
        target = Path(target_dir) if target_dir is not None else self.config.install.target_dir
        if not target.is_dir():
            return []

        skills: list[dict[str, str]] = []
        for skill_dir in sorted(target.iterdir()):
            if not skill_dir.is_dir():
                continue
            meta = _read_frontmatter(skill_dir / "SKILL.md")
            skills.append({
                "name": str(meta.get("name") or skill_dir.name),
                "description": str(meta.get("description") or ""),
                "path": str(skill_dir),
            })
        return skills

    def uninstall(self, name: str, target_dir: Path | None = None) -> bool:
        """Remove an installed skill.

        Returns:
            True if the skill directory was found and removed.
        """
        validate_skill_name(name)
        target = Path(target_dir) if target_dir is not None else self.config.install.target_dir
        path = target / name
        if path.is_dir():
            shutil.rmtree(path)
            self.log.info("skill_uninstalled", name=name, path=str(path))
            return True
        return False


def _read_frontmatter(path: Path) -> dict:
    """YAML frontmatter of a SKILL.md, or {} if missing or unparsable."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("skill_md_unreadable", path=str(path), error=str(e))
        return {}

    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}
    try:
        meta = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.warning("skill_frontmatter_invalid", path=str(path), error=str(e))
        return {}
    return meta if isinstance(meta, dict) else {}
