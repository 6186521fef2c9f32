"""Environment resource models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Literal, Self

from pydantic import Field, field_validator, model_validator

from envs_provisioner.resources.base import Resource


class EnvType(str, Enum):
    PYTHON = "python"
    JYTHON = "jython"
    PYPY = "pypy"
    IRONPYTHON = "ironpython"
    CONDA = "conda"
    VIRTUALENV = "virtualenv"


class EnvResource(Resource):
    """One desired Python-family environment on disk.

    ``env_dir`` existence is the only signal that the environment is already
    provisioned. The config loader fills it in from ``envs_dir`` when the
    YAML leaves it out.
    """

    namespace: ClassVar[str] = "env"
    fixed_type: ClassVar[EnvType | None] = None

    type: EnvType | None = None
    version: str = ""
    env_dir: Path | None = None
    packages: list[str] = Field(default_factory=list)
    is64: bool = True

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, v: Any) -> Any:
        # YAML reads `version: 3.6` as a float.
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @model_validator(mode="after")
    def _check_fixed_type(self) -> Self:
        if self.fixed_type is not None and self.type != self.fixed_type:
            raise ValueError(f"{self.resource_type} type must be {self.fixed_type.value!r}")
        return self

    @property
    def target_dir(self) -> Path:
        if self.env_dir is None:
            raise ValueError(f"Environment '{self.name}' has no env_dir")
        return self.env_dir


class PythonResource(EnvResource):
    """Interpreter installed natively (python-build, python.org installer, Jython jar)."""

    resource_type: ClassVar[str] = "python"
    category: ClassVar[str] = "pythons"

    type: EnvType | None = EnvType.PYTHON
    version: str = Field(min_length=1)


class ZipEnvResource(EnvResource):
    """Interpreter unpacked from a zip archive; ``type`` is optional."""

    resource_type: ClassVar[str] = "python_from_zip"
    category: ClassVar[str] = "pythons_from_zip"

    url: str = Field(min_length=1)

    @property
    def archive_name(self) -> str:
        return self.url.rsplit("/", 1)[-1]


class VirtualEnvResource(EnvResource):
    """Virtualenv created from another environment's interpreter."""

    resource_type: ClassVar[str] = "virtualenv"
    category: ClassVar[str] = "virtual_envs"

    fixed_type: ClassVar[EnvType | None] = EnvType.VIRTUALENV

    type: EnvType | None = EnvType.VIRTUALENV
    source_env: str = Field(min_length=1)


class CondaResource(EnvResource):
    """Anaconda or Miniconda distribution, ``version`` is the installer name."""

    resource_type: ClassVar[str] = "conda"
    category: ClassVar[str] = "condas"

    fixed_type: ClassVar[EnvType | None] = EnvType.CONDA

    type: EnvType | None = EnvType.CONDA
    version: str = Field(min_length=1)
    conda_packages: list[str] = Field(default_factory=list)


class CondaEnvResource(EnvResource):
    """Conda environment created by a conda distribution, ``version`` is the python version."""

    resource_type: ClassVar[str] = "conda_env"
    category: ClassVar[str] = "conda_envs"

    fixed_type: ClassVar[EnvType | None] = EnvType.CONDA

    type: EnvType | None = EnvType.CONDA
    version: str = Field(min_length=1)
    source_env: str = Field(min_length=1)
    conda_packages: list[str] = Field(default_factory=list)


class PythonBuildResource(Resource):
    """The python-build tool from pyenv, needed to compile interpreters on Unix."""

    resource_type: ClassVar[str] = "python_build"
    namespace: ClassVar[str] = "tool"
    category: ClassVar[str] = "python_build"

    name: Literal["python_build"] = "python_build"
    install_dir: Path
    archive_url: str = "https://github.com/pyenv/pyenv/archive/master.zip"
    archive_subdir: str = "pyenv-master/plugins/python-build"

    @property
    def executable(self) -> Path:
        return self.install_dir / "bin" / "python-build"
