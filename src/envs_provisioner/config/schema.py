"""Configuration models for YAML-based provisioning."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from envs_provisioner.engine.handlers import DEFAULT_PIP_INSTALL_OPTIONS
from envs_provisioner.engine.python_build_handler import PYTHON_BUILD_DIR
from envs_provisioner.resources.base import Resource  # noqa: TC001
from envs_provisioner.resources.environment import (
    CondaEnvResource,
    CondaResource,
    EnvResource,
    EnvType,
    PythonBuildResource,
    PythonResource,
    VirtualEnvResource,
    ZipEnvResource,
)
from envs_provisioner.resources.files import FileResource, LinkResource


class Settings(BaseSettings):
    """Global provisioning settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``ENVS_`` prefix.  Constructor kwargs take precedence.
    """

    model_config = SettingsConfigDict(env_prefix="ENVS_")

    build_dir: Path = Path("build")
    envs_dir: Path = Path("build/envs")
    pip_install_options: str = DEFAULT_PIP_INSTALL_OPTIONS
    is64: bool = True
    zip_repository: str | None = None
    use_zips_from_repository: bool = False
    jython_installer_version: str = "2.7.1"
    java: str = "java"


def _none_to_list(v: Any) -> Any:
    return v if v is not None else []


# python-build is only needed for interpreters compiled from source.
_PYTHON_BUILD_TYPES = frozenset({EnvType.PYTHON, EnvType.PYPY})


class Config(BaseModel):
    """Provisioning configuration, validated directly from the YAML structure."""

    settings: Settings = Field(default_factory=Settings)
    pythons: Annotated[list[PythonResource], BeforeValidator(_none_to_list)] = []
    pythons_from_zip: Annotated[list[ZipEnvResource], BeforeValidator(_none_to_list)] = []
    virtual_envs: Annotated[list[VirtualEnvResource], BeforeValidator(_none_to_list)] = []
    condas: Annotated[list[CondaResource], BeforeValidator(_none_to_list)] = []
    conda_envs: Annotated[list[CondaEnvResource], BeforeValidator(_none_to_list)] = []
    files: Annotated[list[FileResource], BeforeValidator(_none_to_list)] = []
    links: Annotated[list[LinkResource], BeforeValidator(_none_to_list)] = []
    config_dir: Path = Path()

    @property
    def environments(self) -> list[EnvResource]:
        return [
            *self.pythons,
            *self.pythons_from_zip,
            *self.virtual_envs,
            *self.condas,
            *self.conda_envs,
        ]

    @property
    def python_build(self) -> PythonBuildResource | None:
        if not any(p.type in _PYTHON_BUILD_TYPES for p in self.pythons):
            return None
        return PythonBuildResource(install_dir=self.settings.build_dir / PYTHON_BUILD_DIR)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def resources(self) -> list[Resource]:
        """All declared resources; the engine decides the order."""
        resources: list[Resource] = []
        if self.python_build is not None:
            resources.append(self.python_build)
        resources.extend(self.environments)
        resources.extend(self.files)
        resources.extend(self.links)
        return resources
