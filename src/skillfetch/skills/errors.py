"""
Error taxonomy for skill installation.

Every failure in the download/extract pipeline surfaces as a subclass of
SkillFetchError so the CLI can map it to an exit code in one place.
"""


class SkillFetchError(Exception):
    """Base error for skillfetch operations."""

    pass


class InvalidSkillNameError(SkillFetchError, ValueError):
    """A requested skill name is not a single path component."""

    pass


class DownloadError(SkillFetchError):
    """The skills archive could not be downloaded."""

    pass


class ArchiveError(SkillFetchError):
    """The downloaded archive is unreadable or cannot be extracted."""

    pass


class SkillNotFoundError(SkillFetchError):
    """One or more requested skills are absent from the archive."""

    def __init__(self, names: list[str]):
        self.names = list(names)
        super().__init__(
            f"Skill(s) not found in archive: {', '.join(self.names)}"
        )


class InstallError(SkillFetchError):
    """Skill files could not be written to the target directory."""

    pass
