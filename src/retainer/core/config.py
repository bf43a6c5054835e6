# src/retainer/core/config.py
"""
Configuration schema and loading for retainer.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from retainer.contracts.enums import StoreProtocol

_DEFAULT_PORTS: dict[StoreProtocol, int] = {
    StoreProtocol.FTP: 21,
    StoreProtocol.FTPS: 21,
}


class ExpirySettings(BaseModel):
    """What to expire.

    Example YAML:
        expiry:
          max_age_days: 30
          profile: home        # or all_profiles: true
          grammar: dashed
    """

    # Environment values arrive TOML-typed; an all-digit profile is still a name
    model_config = {"frozen": True, "coerce_numbers_to_str": True}

    max_age_days: int | None = Field(
        default=None,
        ge=0,
        description="Backups at least this many days old may expire",
    )
    profile: str | None = Field(
        default=None,
        description="Only expire backups of this profile",
    )
    all_profiles: bool = Field(
        default=False,
        description="Expire backups of every profile",
    )
    grammar: Literal["dashed", "duplicity"] = Field(
        default="dashed",
        description="Filename grammar used to recognize backups",
    )

    @field_validator("profile")
    @classmethod
    def validate_profile_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("profile must not be blank")
        return v

    @model_validator(mode="after")
    def validate_scope_exclusive(self) -> "ExpirySettings":
        """A profile and all_profiles cannot both be set."""
        if self.profile is not None and self.all_profiles:
            raise ValueError("set either profile or all_profiles, not both")
        return self


class RemoteSettings(BaseModel):
    """Where the backups live and how to reach them."""

    # RETAINER_REMOTE__PASSWORD=123456 arrives as an int
    model_config = {"frozen": True, "coerce_numbers_to_str": True}

    protocol: StoreProtocol = Field(
        default=StoreProtocol.FTP,
        description="Transport: ftp, ftps (explicit TLS) or local directory",
    )
    host: str | None = Field(default=None, description="Server hostname (ftp/ftps)")
    port: int | None = Field(
        default=None,
        ge=1,
        le=65535,
        description="Server port (default: protocol default)",
    )
    username: str = Field(default="anonymous", description="Login name")
    password: str | None = Field(
        default=None,
        repr=False,
        description="Login password; prompted for when missing and username is not anonymous",
    )
    directory: str = Field(default=".", description="Remote directory holding the backups")
    timeout_seconds: float = Field(default=30.0, gt=0, description="Socket timeout")
    passive: bool = Field(default=True, description="Use passive mode for FTP data connections")

    @property
    def effective_port(self) -> int | None:
        """Configured port, or the protocol default."""
        if self.port is not None:
            return self.port
        return _DEFAULT_PORTS.get(self.protocol)

    @property
    def needs_password(self) -> bool:
        """Whether a password must be acquired before connecting."""
        return self.protocol != StoreProtocol.LOCAL and self.username != "anonymous" and self.password is None


class ExecutionSettings(BaseModel):
    """How deletions are carried out."""

    model_config = {"frozen": True}

    dry_run: bool = Field(default=False, description="Report the delete list without deleting")
    truncate_before_delete: bool = Field(
        default=False,
        description="Empty each file before deleting it (for stores that bill by stored bytes)",
    )
    confirm: bool = Field(default=True, description="Ask before deleting")


class RetainerSettings(BaseModel):
    """Top-level retainer configuration. Every section has defaults."""

    model_config = {"frozen": True}

    expiry: ExpirySettings = Field(default_factory=ExpirySettings)
    remote: RemoteSettings = Field(default_factory=RemoteSettings)
    execution: ExecutionSettings = Field(default_factory=ExecutionSettings)


# Pattern for ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Args:
        config: Configuration dict (may contain nested structures)

    Returns:
        New dict with environment variables expanded
    """

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            if default is not None:
                return default
            # Left as-is; validation reports it
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value


def load_settings(config_path: Path | None = None) -> RetainerSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (RETAINER_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Without a config file only the environment and the defaults apply.

    Environment variable format: RETAINER_REMOTE__PASSWORD for nested keys.

    Args:
        config_path: Path to YAML configuration file, or None for environment only

    Returns:
        Validated RetainerSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="RETAINER",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; filter its own bookkeeping keys too
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    raw_config = _expand_env_vars(raw_config)

    return RetainerSettings(**raw_config)
