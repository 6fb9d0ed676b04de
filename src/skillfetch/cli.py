"""
Main CLI for skillfetch using Click.

Two entry points:
- install-skills "<names>" [target-dir]   (standalone installer)
- skillfetch install|list|installed|remove (command group)
"""

import sys
from pathlib import Path
from typing import Any

import click
import structlog
import yaml
from pydantic import ValidationError

from . import __version__
from .config.loader import load_config
from .config.schema import AppConfig
from .logging import configure_logging
from .skills import (
    KNOWN_SKILLS,
    InvalidSkillNameError,
    SkillFetchError,
    SkillInstaller,
    SkillResult,
    format_usage,
    parse_skill_names,
)

logger = structlog.get_logger()

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILED = 1
EXIT_PARTIAL = 2
EXIT_CONFIG_ERROR = 3
EXIT_INTERRUPTED = 130


def _load_app_config(config_path: Path | None, cli_args: dict[str, Any]) -> AppConfig:
    """Load config or exit with EXIT_CONFIG_ERROR."""
    try:
        return load_config(config_path=config_path, cli_args=cli_args)
    except FileNotFoundError as e:
        click.echo(f"Configuration error: {e}", err=True)
    except yaml.YAMLError as e:
        click.echo(f"Configuration error: invalid YAML: {e}", err=True)
    except ValidationError as e:
        click.echo(f"Configuration error:\n{e}", err=True)
    sys.exit(EXIT_CONFIG_ERROR)


def _print_result(result: SkillResult) -> None:
    """Confirmation line on stdout for one finished skill."""
    if result.status == "installed":
        click.echo(f"✓ Installed: {result.name}")
    elif result.status == "planned":
        click.echo(f"• Would install: {result.name} ({len(result.files)} files → {result.path})")
        for name in result.files:
            click.echo(f"    {name}")


def _known_skills(config_path: Path | None) -> list[str]:
    """Skill names for the usage text. Falls back to the built-in list if config is broken."""
    try:
        return load_config(config_path=config_path).source.known_skills
    except (FileNotFoundError, yaml.YAMLError, ValidationError) as e:
        logger.debug("usage.config_unavailable", error=str(e))
        return list(KNOWN_SKILLS)


def _run_install(
    prog: str,
    skills: str | None,
    target_dir: Path | None,
    *,
    config_path: Path | None = None,
    dry_run: bool = False,
    strict: bool = False,
    verbose: int = 0,
    quiet: bool = False,
    log_level: str | None = None,
    log_file: Path | None = None,
) -> int:
    """Shared body of both install entry points. Returns the exit code."""
    names = parse_skill_names(skills)
    if not names:
        # Usage goes to stdout, nothing else happens
        click.echo(format_usage(prog, _known_skills(config_path)))
        return EXIT_FAILED

    cli_args = {
        "target_dir": target_dir,
        "strict": strict,
        "verbose": verbose,
        "log_level": log_level,
        "log_file": log_file,
    }
    config = _load_app_config(config_path, cli_args)

    configure_logging(config.logging, quiet=quiet)
    installer = SkillInstaller(config)

    try:
        report = installer.install(
            names, config.install.target_dir, dry_run=dry_run, on_result=_print_result
        )
    except InvalidSkillNameError as e:
        click.echo(f"Error: {e}", err=True)
        return EXIT_FAILED
    except SkillFetchError as e:
        logger.error("install.failed", error=str(e), error_type=type(e).__name__)
        click.echo(f"Error: {e}", err=True)
        return EXIT_FAILED
    except KeyboardInterrupt:
        click.echo("\nInterrupted.", err=True)
        return EXIT_INTERRUPTED

    if report.missing:
        click.echo(
            f"Not found in archive: {', '.join(report.missing)}",
            err=True,
        )
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def _install_options(fn):
    """Options shared by install-skills and 'skillfetch install'."""
    decorators = [
        click.argument("skills", required=False, default="", metavar='"SKILL1,SKILL2"'),
        click.argument(
            "target_dir",
            required=False,
            type=click.Path(file_okay=False, path_type=Path),
        ),
        click.option(
            "-c",
            "--config",
            "config_path",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="Path to the YAML configuration file",
        ),
        click.option(
            "--dry-run",
            is_flag=True,
            help="Download the archive and show what would be installed, without writing",
        ),
        click.option(
            "--strict",
            is_flag=True,
            help="Fail without writing anything if a requested skill is not in the archive",
        ),
        click.option(
            "-v",
            "--verbose",
            count=True,
            help="Technical log verbosity (-v INFO, -vv DEBUG)",
        ),
        click.option(
            "--quiet",
            is_flag=True,
            help="Only print per-skill confirmations and errors",
        ),
        click.option(
            "--log-level",
            type=click.Choice(["debug", "info", "human", "warn", "error"]),
            help="Logging level",
        ),
        click.option(
            "--log-file",
            type=click.Path(dir_okay=False, path_type=Path),
            help="Write JSON logs to this file",
        ),
    ]
    for decorator in reversed(decorators):
        fn = decorator(fn)
    return fn


@click.command("install-skills")
@click.version_option(version=__version__, prog_name="install-skills")
@_install_options
@click.pass_context
def install_skills(ctx: click.Context, skills: str, target_dir: Path | None, **kwargs: Any) -> None:
    """Install Agent Skills from the webdev-agent-skills repository.

    SKILLS is a comma-separated list of skill names. TARGET_DIR defaults to
    .claude/skills.
    """
    ctx.exit(_run_install(ctx.info_name or "install-skills", skills, target_dir, **kwargs))


@click.group()
@click.version_option(version=__version__, prog_name="skillfetch")
def main() -> None:
    """skillfetch - Install Agent Skills for AI coding assistants."""
    pass


@main.command("install")
@_install_options
@click.pass_context
def install_cmd(ctx: click.Context, skills: str, target_dir: Path | None, **kwargs: Any) -> None:
    """Install skills into TARGET_DIR (default: .claude/skills).

    SKILLS is a comma-separated list, e.g. "css-tokens,frontend-security".
    """
    ctx.exit(_run_install(ctx.command_path, skills, target_dir, **kwargs))


@main.command("list")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the YAML configuration file",
)
def list_cmd(config_path: Path | None) -> None:
    """List the skills available in the archive."""
    config = _load_app_config(config_path, {})
    click.echo("Available skills:")
    for name in config.source.known_skills:
        click.echo(f"  - {name}")


@main.command("installed")
@click.argument("target_dir", required=False, type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the YAML configuration file",
)
def installed_cmd(target_dir: Path | None, config_path: Path | None) -> None:
    """List skills installed in TARGET_DIR (default: .claude/skills)."""
    config = _load_app_config(config_path, {"target_dir": target_dir})
    installer = SkillInstaller(config)
    skills = installer.list_installed()
    if not skills:
        click.echo(f"  No skills installed in {config.install.target_dir}.")
        return
    for s in skills:
        desc = f"  {s['description']}" if s["description"] else ""
        click.echo(f"  {s['name']:28s}{desc}")


@main.command("remove")
@click.argument("name")
@click.argument("target_dir", required=False, type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the YAML configuration file",
)
def remove_cmd(name: str, target_dir: Path | None, config_path: Path | None) -> None:
    """Remove an installed skill."""
    config = _load_app_config(config_path, {"target_dir": target_dir})
    installer = SkillInstaller(config)
    try:
        removed = installer.uninstall(name)
    except InvalidSkillNameError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAILED)

    if removed:
        click.echo(f"Skill '{name}' removed")
    else:
        click.echo(f"Skill '{name}' not found", err=True)
        sys.exit(EXIT_FAILED)


if __name__ == "__main__":
    main()
