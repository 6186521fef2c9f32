"""YAML configuration loading and convenience plan/apply API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from envs_provisioner.config.loader import ConfigError, load_config
from envs_provisioner.config.registry import default_registry
from envs_provisioner.config.schema import Config, Settings
from envs_provisioner.core.platform import Platform
from envs_provisioner.engine.download import Downloader
from envs_provisioner.engine.engine import ProgressCallback, ProvisionEngine
from envs_provisioner.engine.executables import executable
from envs_provisioner.engine.handlers import ProvisionContext
from envs_provisioner.engine.process import CommandRunner

if TYPE_CHECKING:
    from pathlib import Path

    from envs_provisioner.engine.types import ApplyResult, Plan

__all__ = [
    "Config",
    "ConfigError",
    "Settings",
    "apply",
    "build_context",
    "load",
    "load_config",
    "plan",
    "plan_and_apply",
    "which",
]


def load(path: Path | str) -> Config:
    """Load a YAML configuration file."""
    return load_config(path)


def build_context(config: Config, *, platform: Platform | None = None) -> ProvisionContext:
    """Wire the real platform, runner and downloader with the config settings."""
    settings = config.settings
    return ProvisionContext(
        platform=platform or Platform.detect(),
        runner=CommandRunner(),
        downloader=Downloader(),
        build_dir=settings.build_dir,
        pip_install_options=settings.pip_install_options,
        jython_installer_version=settings.jython_installer_version,
        java=settings.java,
    )


def _engine_from_config(config: Config) -> ProvisionEngine:
    """Build a ``ProvisionEngine`` from a ``Config`` instance."""
    return ProvisionEngine(context=build_context(config), registry=default_registry())


def plan(config: Config) -> Plan:
    """Plan provisioning for the given configuration."""
    engine = _engine_from_config(config)
    return engine.plan(config.resources)


def apply(
    plan_obj: Plan, config: Config, *, progress: ProgressCallback | None = None
) -> ApplyResult:
    """Apply a previously computed plan."""
    config.settings.build_dir.mkdir(parents=True, exist_ok=True)
    engine = _engine_from_config(config)
    return engine.apply(plan_obj, progress=progress)


def plan_and_apply(config: Config) -> ApplyResult:
    """Plan and apply in one step."""
    plan_obj = plan(config)
    return apply(plan_obj, config)


def which(config: Config, env_name: str, name: str, *, platform: Platform | None = None) -> Path:
    """Path of executable *name* inside the configured environment *env_name*."""
    for env in config.environments:
        if env.name == env_name:
            return executable(env, name, platform or Platform.detect())
    raise ConfigError(f"Unknown environment '{env_name}'")
