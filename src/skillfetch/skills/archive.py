"""
Skill archive -- reads the downloaded ZIP and extracts one skill at a time.

Archive layout (GitHub branch snapshot):
    webdev-agent-skills-main/
        css-tokens/SKILL.md
        css-tokens/references/tokens.md
        semantic-html/SKILL.md
        ...

Extraction is flattened: every file under <root>/<skill>/ lands directly in
the destination directory under its base name, whatever its depth in the
archive. When two members share a base name the later one wins.
"""

import shutil
import zipfile
from pathlib import Path, PurePosixPath

import structlog

from .errors import ArchiveError, InstallError

logger = structlog.get_logger()

_S_IFMT = 0o170000
_S_IFLNK = 0o120000


def _is_symlink(info: zipfile.ZipInfo) -> bool:
    # Unix mode lives in the high 16 bits of external_attr
    return (info.external_attr >> 16) & _S_IFMT == _S_IFLNK


class SkillArchive:
    """Read-only view over the skills ZIP.

    Usage:
        with SkillArchive(path, "webdev-agent-skills-main") as archive:
            if archive.has_skill("css-tokens"):
                archive.extract_skill("css-tokens", Path(".claude/skills/css-tokens"))
    """

    def __init__(self, path: Path, root: str):
        """Open the archive.

        Args:
            path: Path to the ZIP file
            root: Top-level directory inside the archive

        Raises:
            ArchiveError: If the file is not a readable ZIP
        """
        self.path = Path(path)
        self.root = root.strip("/")
        try:
            self._zip = zipfile.ZipFile(self.path)
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveError(f"Not a valid ZIP archive: {self.path} ({e})") from e
        logger.info("archive.opened", path=str(self.path), entries=len(self._zip.infolist()))

    def __enter__(self) -> "SkillArchive":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def _prefix(self, name: str) -> str:
        return f"{self.root}/{name}/"

    def members_for(self, name: str) -> list[zipfile.ZipInfo]:
        """File members under <root>/<name>/, in archive order.

        Directory entries and symlinks are skipped.
        """
        prefix = self._prefix(name)
        return [
            info for info in self._zip.infolist()
            if info.filename.startswith(prefix)
            and not info.is_dir()
            and not _is_symlink(info)
        ]

    def has_skill(self, name: str) -> bool:
        """True if the archive contains at least one file for the skill."""
        return bool(self.members_for(name))

    def available_skills(self) -> list[str]:
        """Sorted names of the top-level directories under <root>/."""
        names: set[str] = set()
        for info in self._zip.infolist():
            parts = PurePosixPath(info.filename).parts
            if len(parts) >= 3 and parts[0] == self.root:
                names.add(parts[1])
        return sorted(names)

    def plan_skill(self, name: str) -> list[str]:
        """Flattened file names that extract_skill() would write, without duplicates."""
        planned: list[str] = []
        for info in self.members_for(name):
            base = PurePosixPath(info.filename).name
            if base not in planned:
                planned.append(base)
        return planned

    def extract_skill(self, name: str, dest: Path) -> list[str]:
        """Extract the skill's files flattened into dest.

        Creates dest (and parents) if needed and overwrites existing files.

        Args:
            name: Skill name (directory under the archive root)
            dest: Destination directory

        Returns:
            Base names of the files written, in order, without duplicates.

        Raises:
            ArchiveError: If a member cannot be read (corrupt data, bad CRC)
            InstallError: If dest or a file in it cannot be written
        """
        dest = Path(dest)
        try:
            dest.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallError(f"Cannot create directory {dest}: {e.strerror or e}") from e

        written: list[str] = []
        for info in self.members_for(name):
            base = PurePosixPath(info.filename).name
            if base in ("", ".", ".."):
                logger.warning("archive.member_skipped", member=info.filename)
                continue
            if base in written:
                logger.debug("archive.flatten_overwrite", skill=name, file=base, member=info.filename)
            else:
                written.append(base)

            try:
                with self._zip.open(info) as src, open(dest / base, "wb") as dst:
                    shutil.copyfileobj(src, dst)
            except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
                raise ArchiveError(f"Cannot extract {info.filename}: {e}") from e
            except OSError as e:
                raise InstallError(f"Cannot write {dest / base}: {e.strerror or e}") from e

        logger.info("archive.skill_extracted", skill=name, dest=str(dest), files=len(written))
        return written
