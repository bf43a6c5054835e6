# src/retainer/cli.py
"""Retainer Command Line Interface.

Entry point for the retainer CLI tool.
"""

from __future__ import annotations

import json as json_module
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from retainer import __version__
from retainer.contracts.enums import StoreProtocol
from retainer.contracts.errors import ConfigurationError, ExpiryError, TransportError
from retainer.contracts.grammar import NameGrammar
from retainer.core.config import RetainerSettings, load_settings
from retainer.core.expiry.engine import validate_threshold
from retainer.core.expiry.filter import ExpiryFilter, resolve_scope
from retainer.core.naming.registry import available_grammars, get_grammar
from retainer.transport.factory import open_store

__all__ = [
    "app",
]

DEFAULT_SETTINGS_FILE = Path("retainer.yaml")

app = typer.Typer(
    name="retainer",
    help="Retainer: dependency-aware expiration of backup archives.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"retainer version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)  # Don't override existing env vars


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
        exists=False,  # Existence checked in _load_dotenv for a clearer message
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """Retainer: dependency-aware expiration of backup archives."""
    # Must run before any subcommand so early diagnostics are formatted
    from retainer.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if debug else "INFO")

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


def _format_validation_error(error: ValidationError) -> list[str]:
    lines = []
    for item in error.errors():
        loc = ".".join(str(part) for part in item["loc"])
        lines.append(f"  - {loc}: {item['msg']}")
    return lines


def _resolve_settings(settings_file: str | None, overrides: dict[str, dict[str, Any]]) -> RetainerSettings:
    """Load settings (file + environment) and apply CLI overrides.

    CLI values win over file and environment values. Only options the user
    actually passed appear in ``overrides``.

    Raises:
        typer.Exit: On missing files or invalid configuration.
    """
    if settings_file is not None:
        settings_path = Path(settings_file).expanduser()
    elif DEFAULT_SETTINGS_FILE.exists():
        settings_path = DEFAULT_SETTINGS_FILE
    else:
        settings_path = None

    try:
        base = load_settings(settings_path)
        data = base.model_dump()
        for section, values in overrides.items():
            data[section].update(values)
        return RetainerSettings.model_validate(data)
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings_path}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for line in _format_validation_error(e):
            typer.echo(line, err=True)
        raise typer.Exit(1) from None


def _collect_overrides(
    *,
    max_age_days: int | None,
    profile: str | None,
    all_profiles: bool,
    grammar: str | None,
    protocol: StoreProtocol | None,
    host: str | None,
    port: int | None,
    user: str | None,
    directory: str | None,
) -> dict[str, dict[str, Any]]:
    expiry: dict[str, Any] = {}
    if max_age_days is not None:
        expiry["max_age_days"] = max_age_days
    # Scope flags on the command line replace the configured scope entirely
    if profile is not None:
        expiry["profile"] = profile
        expiry["all_profiles"] = False
    if all_profiles:
        expiry["all_profiles"] = True
        if profile is None:
            expiry["profile"] = None
    if grammar is not None:
        expiry["grammar"] = grammar

    remote: dict[str, Any] = {}
    for key, value in (("protocol", protocol), ("host", host), ("port", port), ("username", user), ("directory", directory)):
        if value is not None:
            remote[key] = value

    return {"expiry": expiry, "remote": remote}


def _validate_request(config: RetainerSettings) -> NameGrammar:
    """Check scope, threshold and grammar before anything touches the network.

    Raises:
        typer.Exit: If the request is malformed.
    """
    expiry = config.expiry
    if expiry.max_age_days is None:
        typer.echo("Error: --max-age-days is required (or set expiry.max_age_days).", err=True)
        raise typer.Exit(1)
    try:
        resolve_scope(expiry.profile, expiry.all_profiles)
        validate_threshold(expiry.max_age_days)
        return get_grammar(expiry.grammar)
    except (ExpiryError, ConfigurationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def _acquire_password(config: RetainerSettings) -> str | None:
    """Prompt for the store password when settings and environment lack one."""
    remote = config.remote
    if not remote.needs_password:
        return None
    prompt: str = typer.prompt(f"Password for {remote.username}@{remote.host}", hide_input=True)
    return prompt


def _echo_transport_error(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)


# Shared option declarations
_SETTINGS_OPTION = typer.Option(None, "--settings", "-s", help="Path to settings YAML file (default: retainer.yaml if present).")
_MAX_AGE_OPTION = typer.Option(None, "--max-age-days", "-d", help="Backups at least this many days old may expire.")
_PROFILE_OPTION = typer.Option(None, "--profile", "-p", help="Only expire backups of this profile.")
_ALL_OPTION = typer.Option(False, "--all", "-a", help="Expire backups of every profile.")
_GRAMMAR_OPTION = typer.Option(None, "--grammar", help=f"Filename grammar ({', '.join(available_grammars())}).")
_PROTOCOL_OPTION = typer.Option(None, "--protocol", help="Store protocol: ftp, ftps or local.")
_HOST_OPTION = typer.Option(None, "--host", "-H", help="FTP server hostname.")
_PORT_OPTION = typer.Option(None, "--port", help="FTP server port.")
_USER_OPTION = typer.Option(None, "--user", "-u", help="FTP login name.")
_DIRECTORY_OPTION = typer.Option(None, "--directory", "-D", help="Directory holding the backups.")
_VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Report unrecognized files and chain problems.")


@app.command()
def expire(
    settings: str | None = _SETTINGS_OPTION,
    max_age_days: int | None = _MAX_AGE_OPTION,
    profile: str | None = _PROFILE_OPTION,
    all_profiles: bool = _ALL_OPTION,
    grammar: str | None = _GRAMMAR_OPTION,
    protocol: StoreProtocol | None = _PROTOCOL_OPTION,
    host: str | None = _HOST_OPTION,
    port: int | None = _PORT_OPTION,
    user: str | None = _USER_OPTION,
    directory: str | None = _DIRECTORY_OPTION,
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be deleted without deleting.",
    ),
    truncate: bool = typer.Option(
        False,
        "--truncate",
        help="Empty each file before deleting it.",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt.",
    ),
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Delete expired backups that no retained backup depends on.

    Examples:

        # See what would be deleted
        retainer expire -H ftp.example.org -u backup -p home -d 30 --dry-run

        # Expire every profile on a mounted store
        retainer expire --protocol local -D /mnt/backups --all -d 90 --yes
    """
    from retainer.core.retention.purge import PurgeManager

    overrides = _collect_overrides(
        max_age_days=max_age_days,
        profile=profile,
        all_profiles=all_profiles,
        grammar=grammar,
        protocol=protocol,
        host=host,
        port=port,
        user=user,
        directory=directory,
    )
    overrides["execution"] = {}
    if dry_run:
        overrides["execution"]["dry_run"] = True
    if truncate:
        overrides["execution"]["truncate_before_delete"] = True
    config = _resolve_settings(settings, overrides)

    name_grammar = _validate_request(config)
    expiry = config.expiry
    assert expiry.max_age_days is not None  # checked in _validate_request
    scope_label = f"profile {expiry.profile!r}" if expiry.profile else "all profiles"
    password = _acquire_password(config)

    try:
        with open_store(config.remote, password=password) as store:
            expiry_filter = ExpiryFilter(name_grammar, verbose=verbose)
            expiry_filter.set_files(store.list_names())
            doomed = expiry_filter.expire(expiry.max_age_days, expiry.profile, all_profiles=expiry.all_profiles)

            if not doomed:
                typer.echo(f"No backups of {scope_label} can be deleted at {expiry.max_age_days} days.")
                return

            if config.execution.dry_run:
                typer.echo(f"Would delete {len(doomed)} file(s) of {scope_label}:")
                for name in doomed:
                    typer.echo(f"  {name}")
                return

            if config.execution.confirm and not yes:
                confirm = typer.confirm(f"Delete {len(doomed)} file(s) of {scope_label}?")
                if not confirm:
                    typer.echo("Aborted.")
                    raise typer.Exit(1)

            result = PurgeManager(store).purge_files(doomed, truncate_first=config.execution.truncate_before_delete)
    except (TransportError, ConfigurationError) as e:
        _echo_transport_error(e)
        raise typer.Exit(1) from None

    typer.echo(f"Purge completed in {result.duration_seconds:.2f}s:")
    typer.echo(f"  Deleted: {result.deleted_count}")
    if result.truncated_count:
        typer.echo(f"  Truncated first: {result.truncated_count}")
    typer.echo(f"  Skipped (not found): {result.skipped_count}")
    if result.failed_names:
        typer.echo(f"  Failed: {len(result.failed_names)}", err=True)
        for name in result.failed_names:
            typer.echo(f"    {name}: {result.errors[name]}", err=True)
        raise typer.Exit(1)


@app.command()
def inspect(
    settings: str | None = _SETTINGS_OPTION,
    max_age_days: int | None = _MAX_AGE_OPTION,
    profile: str | None = _PROFILE_OPTION,
    all_profiles: bool = _ALL_OPTION,
    grammar: str | None = _GRAMMAR_OPTION,
    protocol: StoreProtocol | None = _PROTOCOL_OPTION,
    host: str | None = _HOST_OPTION,
    port: int | None = _PORT_OPTION,
    user: str | None = _USER_OPTION,
    directory: str | None = _DIRECTORY_OPTION,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output verdicts as JSON.",
    ),
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Show the expiry verdict of every listed file without deleting anything."""
    overrides = _collect_overrides(
        max_age_days=max_age_days,
        profile=profile,
        all_profiles=all_profiles,
        grammar=grammar,
        protocol=protocol,
        host=host,
        port=port,
        user=user,
        directory=directory,
    )
    config = _resolve_settings(settings, overrides)

    name_grammar = _validate_request(config)
    expiry = config.expiry
    assert expiry.max_age_days is not None  # checked in _validate_request
    password = _acquire_password(config)

    try:
        with open_store(config.remote, password=password) as store:
            names = store.list_names()
    except (TransportError, ConfigurationError) as e:
        _echo_transport_error(e)
        raise typer.Exit(1) from None

    expiry_filter = ExpiryFilter(name_grammar, verbose=verbose)
    expiry_filter.set_files(names)
    verdicts = expiry_filter.verdicts(expiry.max_age_days, expiry.profile, all_profiles=expiry.all_profiles)

    if json_output:
        payload = [{"name": v.raw_name, "reason": v.reason.value, "deletable": v.deletable} for v in verdicts]
        typer.echo(json_module.dumps(payload, indent=2))
        return

    if not verdicts:
        typer.echo("No files found.")
        return
    width = max(len(v.reason.value) for v in verdicts)
    for verdict in verdicts:
        typer.echo(f"{verdict.reason.value:<{width}}  {verdict.raw_name}")
