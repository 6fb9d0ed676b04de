"""
Skill catalog -- known skill names and parsing of the requested skill list.

The skill list arrives as a single string ("css-tokens, semantic-html").
Commas and whitespace both separate names; empty pieces disappear.
"""

import re

from .errors import InvalidSkillNameError

# Skills published in the webdev-agent-skills repository
KNOWN_SKILLS: tuple[str, ...] = (
    "component-scaffolding",
    "component-usage-analysis",
    "css-coder",
    "css-tokens",
    "frontend-security",
    "frontend-testing",
    "semantic-html",
)

_SEPARATORS = re.compile(r"[,\s]+")


def parse_skill_names(raw: str | None) -> list[str]:
    """Split a comma-separated skill list into trimmed, unique names.

    Args:
        raw: Value of the first CLI argument (may be None or blank)

    Returns:
        Names in the order given, without duplicates. Empty list if there are none.

    Example:
        >>> parse_skill_names(" css-tokens , semantic-html,css-tokens ")
        ['css-tokens', 'semantic-html']
    """
    if not raw:
        return []

    names: list[str] = []
    for piece in _SEPARATORS.split(raw):
        if piece and piece not in names:
            names.append(piece)
    return names


def validate_skill_name(name: str) -> str:
    """Check that a skill name maps to exactly one directory.

    Raises:
        InvalidSkillNameError: If the name contains path separators or is '.'/'..'
    """
    if name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise InvalidSkillNameError(f"Invalid skill name: {name!r}")
    return name


def format_usage(prog: str, known: tuple[str, ...] | list[str] = KNOWN_SKILLS) -> str:
    """Usage block shown when no skills were requested."""
    lines = [
        f'Usage: {prog} "skill1,skill2" [target-dir]',
        f'Example: {prog} "css-tokens,frontend-security"',
        "",
        "Available skills:",
    ]
    lines.extend(f"  - {name}" for name in known)
    return "\n".join(lines)
