"""Executable path resolution inside environment directories."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from envs_provisioner.engine.errors import (
    UnsupportedEnvironmentTypeError,
    UnsupportedExecutableError,
)
from envs_provisioner.resources.environment import EnvType

if TYPE_CHECKING:
    from envs_provisioner.core.platform import Platform
    from envs_provisioner.resources.environment import EnvResource

_SCRIPTS = frozenset({"pip", "virtualenv", "conda"})


def _relative_path(
    env_type: EnvType, platform: Platform, executable: str, *, is64: bool
) -> str:
    match env_type:
        case EnvType.PYTHON | EnvType.CONDA:
            if executable in _SCRIPTS:
                return f"Scripts/{executable}.exe" if platform.is_windows else f"bin/{executable}"
            if executable.startswith("python"):
                return f"{executable}{platform.exe_suffix}"
            raise UnsupportedExecutableError(executable, env_type.value)
        case EnvType.JYTHON | EnvType.PYPY:
            return f"bin/{executable}{platform.exe_suffix}"
        case EnvType.IRONPYTHON:
            if executable == "ipy":
                return "ipy64.exe" if is64 else "ipy.exe"
            return f"Scripts/{executable}.exe"
        case EnvType.VIRTUALENV:
            return f"Scripts/{executable}.exe" if platform.is_windows else f"bin/{executable}"
        case _:
            raise UnsupportedEnvironmentTypeError(f"{env_type} env type is not supported yet")


def resolve_executable(
    env_type: EnvType | None,
    env_dir: Path,
    platform: Platform,
    executable: str,
    *,
    is64: bool = False,
) -> Path:
    """Return the path of *executable* inside an environment of *env_type*.

    The result only depends on the arguments; nothing is checked on disk.

    Raises:
        UnsupportedExecutableError: *executable* has no layout for *env_type*.
        UnsupportedEnvironmentTypeError: *env_type* is missing.
    """
    if env_type is None:
        raise UnsupportedEnvironmentTypeError(
            f"Cannot locate {executable}: environment type is not set"
        )
    return Path(env_dir) / _relative_path(env_type, platform, executable, is64=is64)


def executable(env: EnvResource, name: str, platform: Platform) -> Path:
    """Resolve *name* inside a configured environment."""
    return resolve_executable(env.type, env.target_dir, platform, name, is64=env.is64)
