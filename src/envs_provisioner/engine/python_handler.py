"""Native interpreter provisioning: python-build, python.org installers, Jython."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from envs_provisioner.engine.errors import ProvisionError, UnsupportedEnvironmentTypeError
from envs_provisioner.engine.executables import executable
from envs_provisioner.engine.handlers import EnvHandler
from envs_provisioner.engine.packages import bootstrap_pip, pip_install
from envs_provisioner.engine.python_build_handler import python_build_executable
from envs_provisioner.resources.environment import EnvType

if TYPE_CHECKING:
    from envs_provisioner.engine.handlers import ProvisionContext
    from envs_provisioner.resources.environment import PythonResource

logger = logging.getLogger(__name__)

PYTHON_FTP_URL = "https://www.python.org/ftp/python"
JYTHON_INSTALLER_URL = "https://repo1.maven.org/maven2/org/python/jython-installer"

_FIRST_EXE_INSTALLER = (3, 5, 0)


def _version_tuple(version: str) -> tuple[int, ...]:
    """Numeric release parts of a version string ("3.6.8rc1" -> (3, 6, 8))."""
    parts: list[int] = []
    for piece in version.split("."):
        m = re.match(r"\d+", piece)
        if m is None:
            break
        parts.append(int(m.group()))
        if m.end() != len(piece):
            break
    return tuple(parts)


def windows_installer_name(version: str, *, is64: bool) -> str:
    """python.org installer file name: an .exe from 3.5.0 on, an .msi before."""
    padded = _version_tuple(version) + (0,) * 3
    extension = "exe" if padded[:3] >= _FIRST_EXE_INSTALLER else "msi"
    arch = ""
    if is64:
        arch = ".amd64" if extension == "msi" else "-amd64"
    return f"python-{version}{arch}.{extension}"


def windows_installer_url(version: str, *, is64: bool) -> str:
    return f"{PYTHON_FTP_URL}/{version}/{windows_installer_name(version, is64=is64)}"


class PythonHandler(EnvHandler["PythonResource"]):
    """Provision CPython, PyPy and Jython interpreters with native installers."""

    def skip_reason(self, ctx: ProvisionContext, desired: PythonResource) -> str | None:
        match desired.type:
            case EnvType.JYTHON:
                return None
            case EnvType.PYTHON:
                if ctx.platform.is_unix or ctx.platform.is_windows:
                    return None
                raise UnsupportedEnvironmentTypeError(
                    f"Something is wrong with os: {ctx.platform.system!r}"
                )
            case EnvType.PYPY:
                if ctx.platform.is_unix:
                    return None
                return (
                    f"PyPy installation isn't supported for {ctx.platform.os_name}, "
                    "please use pythons_from_zip instead"
                )
            case EnvType.IRONPYTHON:
                raise UnsupportedEnvironmentTypeError(
                    "IronPython has no native installer, please use pythons_from_zip instead"
                )
            case _:
                raise UnsupportedEnvironmentTypeError(f"{desired.type} isn't supported yet")

    def provision(self, ctx: ProvisionContext, desired: PythonResource) -> None:
        logger.info(
            "Creating %s '%s' at %s directory",
            desired.type.value if desired.type else "python",
            desired.name,
            desired.target_dir,
        )
        match desired.type:
            case EnvType.PYTHON if ctx.platform.is_windows:
                self._install_windows(ctx, desired)
            case EnvType.PYTHON | EnvType.PYPY if ctx.platform.is_unix:
                self._install_unix(ctx, desired)
            case EnvType.JYTHON:
                self._install_jython(ctx, desired)
            case _:
                raise UnsupportedEnvironmentTypeError(
                    f"{desired.type} can't be installed on {ctx.platform.os_name}"
                )

        pip_install(ctx, desired, desired.packages)

    def _install_unix(self, ctx: ProvisionContext, desired: PythonResource) -> None:
        python_build = python_build_executable(ctx.build_dir)
        if not python_build.exists():
            raise ProvisionError(f"python-build is not installed at {python_build}")
        ctx.runner.run([python_build, desired.version, desired.target_dir])
        logger.info("Successfully built '%s'", desired.name)

    def _install_windows(self, ctx: ProvisionContext, desired: PythonResource) -> None:
        filename = windows_installer_name(desired.version, is64=desired.is64)
        # The installer stays in the build dir so the environment can be uninstalled.
        installer = ctx.downloader.fetch_cached(
            windows_installer_url(desired.version, is64=desired.is64),
            ctx.build_dir / filename,
        )

        target = desired.target_dir.absolute()
        logger.info("Installing '%s'", desired.name)
        if installer.suffix == ".msi":
            ctx.runner.run(["msiexec", "/i", installer, "/quiet", f"TARGETDIR={target}"])
        else:
            target.mkdir(parents=True, exist_ok=True)
            ctx.runner.run(
                [
                    installer,
                    "/i",
                    "/quiet",
                    f"TargetDir={target}",
                    "Include_launcher=0",
                    "InstallLauncherAllUsers=0",
                    "Shortcuts=0",
                    "AssociateFiles=0",
                ]
            )

        if not executable(desired, "pip", ctx.platform).exists():
            bootstrap_pip(ctx, desired)

    def _install_jython(self, ctx: ProvisionContext, desired: PythonResource) -> None:
        version = ctx.jython_installer_version
        jar_name = f"jython-installer-{version}.jar"
        jar = ctx.downloader.fetch_cached(
            f"{JYTHON_INSTALLER_URL}/{version}/{jar_name}", ctx.build_dir / jar_name
        )
        ctx.runner.run(
            [ctx.java, "-jar", jar, "-s", "-d", desired.target_dir, "-t", "standard"]
        )
