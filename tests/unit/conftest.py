"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from envs_provisioner.config import load_config
from envs_provisioner.core.platform import Platform
from envs_provisioner.engine.handlers import ProvisionContext

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from envs_provisioner.config.schema import Config

_ENVS_ENV_VARS = (
    "ENVS_BUILD_DIR",
    "ENVS_ENVS_DIR",
    "ENVS_PIP_INSTALL_OPTIONS",
    "ENVS_IS64",
    "ENVS_ZIP_REPOSITORY",
    "ENVS_USE_ZIPS_FROM_REPOSITORY",
    "ENVS_JYTHON_INSTALLER_VERSION",
    "ENVS_JAVA",
    "ENVS_LOG",
)


@pytest.fixture(autouse=True)
def _clean_envs_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove ENVS_* env vars so unit tests don't leak host config."""
    for var in _ENVS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory fixture: write YAML + optional .env, return loaded Config."""

    def _make(
        yaml_str: str, *, dotenv: str | None = None, platform: Platform | None = None
    ) -> Config:
        (tmp_path / "config.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load_config(tmp_path / "config.yaml", platform=platform or Platform.linux())

    return _make


@pytest.fixture
def make_ctx(tmp_path: Path) -> Callable[..., ProvisionContext]:
    """Factory fixture: ProvisionContext with mocked runner and downloader.

    The mocked downloader returns the destination path it was asked for.
    """

    def _make(platform: Platform | None = None, **kwargs: object) -> ProvisionContext:
        downloader = MagicMock()
        downloader.fetch.side_effect = lambda url, dest: dest
        downloader.fetch_cached.side_effect = lambda url, dest: dest
        return ProvisionContext(
            platform=platform or Platform.linux(),
            runner=MagicMock(),
            downloader=downloader,
            build_dir=tmp_path / "build",
            **kwargs,  # type: ignore[arg-type]
        )

    return _make
