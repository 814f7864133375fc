"""Settings resolution with named profile support."""

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

import tomlkit
import typer
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from triager.classifier import DEFAULT_TAXONOMY

CONFIG_PATH = Path.home() / ".config" / "triager" / "config.toml"


class TriagerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TRIAGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_profile: str | None = None

    # Polling
    poll_interval: float = Field(default=30.0, gt=0)  # seconds between ticks
    max_workers: int = Field(default=4, ge=1)
    request_timeout: float = Field(default=30.0, gt=0)

    # Issue source, first one set wins: upstream_url, github_repo, namespace
    upstream_url: str | None = None
    github_repo: str | None = None  # "owner/repo"
    namespace: str | None = None  # cluster namespace running issue-puller

    # Label API
    github_token: SecretStr | None = None

    # Change detection
    cache_name: str = "issues"
    cache_max_entries: int = Field(default=10_000, ge=1)

    taxonomy: dict[str, str] = dict(DEFAULT_TAXONOMY)

    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Profile values arrive as init kwargs; env vars and .env win over them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


@lru_cache(maxsize=1)
def _load_toml() -> tomlkit.TOMLDocument:
    """Load ~/.config/triager/config.toml, returning empty document if missing."""
    if not CONFIG_PATH.exists():
        return tomlkit.document()
    return tomlkit.load(CONFIG_PATH.open())


def _list_profiles(config: Mapping) -> list[str]:
    # tomlkit Table implements MutableMapping but not dict, so check Mapping
    return [k for k, v in config.items() if isinstance(v, Mapping)]


def get_settings(profile: str | None = None) -> TriagerSettings:
    """Resolve the active profile and return a fully populated TriagerSettings.

    Profile precedence (highest to lowest):
    1. profile argument (--profile CLI flag)
    2. TRIAGER_PROFILE env var
    3. default_profile key in ~/.config/triager/config.toml
    4. First profile defined in ~/.config/triager/config.toml

    TRIAGER_* env vars and .env always override values from the profile.
    """
    toml_config = _load_toml()

    active = (
        profile
        or os.environ.get("TRIAGER_PROFILE")
        or toml_config.get("default_profile")
        or ((_profiles := _list_profiles(toml_config)) and _profiles[0] or None)
    )

    profile_defaults: dict = {}
    if active:
        if active in toml_config and isinstance(toml_config[active], Mapping):
            profile_defaults = toml_config[active].unwrap()
        else:
            profiles = _list_profiles(toml_config)
            typer.echo(f"Profile '{active}' not found in {CONFIG_PATH}. Available: {profiles or '(none)'}")
            raise typer.Exit(1)

    settings = TriagerSettings(**profile_defaults)

    if not settings.github_token:
        typer.echo(
            "Missing GitHub credentials. Set TRIAGER_GITHUB_TOKEN or "
            f"github_token in the [{active or 'profile'}] section of {CONFIG_PATH}"
        )
        raise typer.Exit(1)
    if not (settings.upstream_url or settings.github_repo or settings.namespace):
        typer.echo("No issue source configured. Set one of TRIAGER_UPSTREAM_URL, TRIAGER_GITHUB_REPO, TRIAGER_NAMESPACE.")
        raise typer.Exit(1)

    return settings
