"""YAML configuration file loader."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor

from envs_provisioner.config.schema import Config, Settings
from envs_provisioner.core.platform import Platform
from envs_provisioner.resources.environment import EnvType, PythonResource, ZipEnvResource

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from envs_provisioner.resources.base import Resource
    from envs_provisioner.resources.environment import EnvResource


class ConfigError(Exception):
    """Raised for configuration loading / validation errors."""


# Field name → environment variable.
_SETTINGS_ENV_MAP: dict[str, str] = {
    field: f"ENVS_{field.upper()}" for field in Settings.model_fields
}

_SETTINGS_BOOL_FIELDS: frozenset[str] = frozenset({"is64", "use_zips_from_repository"})


def _resolve_settings(raw_settings: dict[str, Any], config_dir: Path) -> dict[str, Any]:
    """Resolve settings fields from YAML, env vars, and ``.env`` file.

    Priority (highest wins): YAML value > env var > ``.env`` file.
    """
    unknown = sorted(set(raw_settings) - set(_SETTINGS_ENV_MAP))
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

    env_file = config_dir / ".env"
    dotenv_vals = dotenv_values(env_file, encoding="utf-8-sig") if env_file.is_file() else {}

    resolved: dict[str, Any] = {}
    for field, env_key in _SETTINGS_ENV_MAP.items():
        val = raw_settings.get(field)
        if val is None:
            val = os.environ.get(env_key)
        if val is None:
            val = dotenv_vals.get(env_key)
        if val is not None:
            if field in _SETTINGS_BOOL_FIELDS and isinstance(val, str):
                if val.lower() not in SafeConstructor.bool_values:
                    raise ConfigError(f"Invalid boolean for {env_key}: {val!r}")
                val = SafeConstructor.bool_values[val.lower()]
            resolved[field] = val

    return resolved


def _validate_unique_names(resources: list[Resource]) -> list[str]:
    """Check that no two resources share the same name within a namespace."""
    groups: dict[str, dict[str, str]] = {}  # namespace → {name: first_address}
    errors: list[str] = []
    for r in resources:
        seen = groups.setdefault(r.namespace, {})
        if r.name in seen:
            errors.append(
                f"Duplicate {r.namespace} name '{r.name}': "
                f"found in both {seen[r.name]} and {r.address}"
            )
        else:
            seen[r.name] = r.address
    return errors


def _validate_sources(config: Config) -> list[str]:
    names = {env.name for env in config.environments}
    return [
        f"{env.address} references unknown source env '{env.source_env}'"
        for env in [*config.virtual_envs, *config.conda_envs]
        if env.source_env not in names
    ]


def _absolute(path: Path, base: Path) -> Path:
    return path if path.is_absolute() else base / path


def repository_zip_url(repository: str, platform: Platform, env: PythonResource) -> str:
    """Location of a prebuilt interpreter archive in a zip repository."""
    env_type = (env.type or EnvType.PYTHON).value
    arch = "x86_64" if env.is64 else "x86"
    return f"{repository.rstrip('/')}/{platform.os_name}/{env_type}-{env.version}-{arch}.zip"


def _pythons_from_repository(config: Config, platform: Platform) -> None:
    """Replace native installs with prebuilt archives from ``zip_repository``."""
    repository = config.settings.zip_repository
    if not repository:
        raise ConfigError("settings.use_zips_from_repository requires settings.zip_repository")

    converted = [
        ZipEnvResource(
            name=env.name,
            type=env.type,
            env_dir=env.env_dir,
            packages=env.packages,
            is64=env.is64,
            depends_on=env.depends_on,
            url=repository_zip_url(repository, platform, env),
        )
        for env in config.pythons
    ]
    logger.debug("Using %d interpreter(s) from %s", len(converted), repository)
    config.pythons_from_zip = [*converted, *config.pythons_from_zip]
    config.pythons = []


def _with_env_defaults(env: EnvResource, settings: Settings, config_dir: Path) -> Any:
    updates: dict[str, Any] = {}
    if env.env_dir is None:
        updates["env_dir"] = settings.envs_dir / env.name
    else:
        updates["env_dir"] = _absolute(env.env_dir, config_dir)
    if "is64" not in env.model_fields_set:
        updates["is64"] = settings.is64
    return env.model_copy(update=updates)


def _resolve_paths(config: Config) -> None:
    """Make every path absolute against the config directory and fill env defaults."""
    base = config.config_dir
    settings = config.settings
    settings.build_dir = _absolute(settings.build_dir, base)
    settings.envs_dir = _absolute(settings.envs_dir, base)

    config.pythons = [_with_env_defaults(e, settings, base) for e in config.pythons]
    config.pythons_from_zip = [
        _with_env_defaults(e, settings, base) for e in config.pythons_from_zip
    ]
    config.virtual_envs = [_with_env_defaults(e, settings, base) for e in config.virtual_envs]
    config.condas = [_with_env_defaults(e, settings, base) for e in config.condas]
    config.conda_envs = [_with_env_defaults(e, settings, base) for e in config.conda_envs]
    config.files = [
        f.model_copy(update={"path": _absolute(f.path, base)}) for f in config.files
    ]
    config.links = [
        link.model_copy(
            update={"link": _absolute(link.link, base), "source": _absolute(link.source, base)}
        )
        for link in config.links
    ]


def load_config(path: Path | str, *, platform: Platform | None = None) -> Config:
    """Load a YAML configuration file and return a ``Config`` object.

    Raises:
        ConfigError: On YAML parse errors, missing sections, or validation failures.
    """
    path = Path(path)

    try:
        raw = YAML(typ="safe").load(path)
    except Exception as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    try:
        raw["settings"] = _resolve_settings(raw.get("settings") or {}, path.parent)
        config = Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    config.config_dir = path.parent.absolute()
    _resolve_paths(config)

    if config.settings.use_zips_from_repository and config.pythons:
        _pythons_from_repository(config, platform or Platform.detect())

    errors = _validate_unique_names(config.resources) + _validate_sources(config)
    if errors:
        raise ConfigError("\n".join(errors))

    logger.info("Loaded config from %s (%d resources)", path, len(config.resources))
    return config
