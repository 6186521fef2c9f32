"""Installs the python-build tool from the pyenv sources."""

from __future__ import annotations

import contextlib
import logging
import shutil
from typing import TYPE_CHECKING

from envs_provisioner.engine.archives import extract_subtree
from envs_provisioner.engine.errors import CorruptArchiveError
from envs_provisioner.engine.handlers import ResourceHandler

if TYPE_CHECKING:
    from pathlib import Path

    from envs_provisioner.engine.handlers import ProvisionContext
    from envs_provisioner.resources.environment import PythonBuildResource

logger = logging.getLogger(__name__)

PYTHON_BUILD_DIR = "python-build"


def python_build_executable(build_dir: Path) -> Path:
    """Where the python-build prerequisite installs its entry point."""
    return build_dir / PYTHON_BUILD_DIR / "bin" / "python-build"


class PythonBuildHandler(ResourceHandler["PythonBuildResource"]):
    """Download pyenv, run python-build's install.sh once, clean up."""

    def applies(self, ctx: ProvisionContext, desired: PythonBuildResource) -> bool:
        _ = desired
        # Only Unix interpreters are compiled.
        return ctx.platform.is_unix

    def exists(self, ctx: ProvisionContext, desired: PythonBuildResource) -> bool:
        _ = ctx
        return desired.install_dir.exists()

    def provision(self, ctx: ProvisionContext, desired: PythonBuildResource) -> None:
        archive = ctx.build_dir / "pyenv.zip"
        unzip_dir = ctx.build_dir / "python-build-tmp"

        logger.info("Downloading latest pyenv from %s", desired.archive_url)
        ctx.downloader.fetch(desired.archive_url, archive)
        try:
            logger.info("Unzipping python-build to %s", unzip_dir)
            if not extract_subtree(archive, desired.archive_subdir, unzip_dir):
                raise CorruptArchiveError(
                    f"{desired.archive_subdir} not found in {desired.archive_url}"
                )

            logger.info("Installing python-build via bash to %s", desired.install_dir)
            ctx.runner.run(
                ["bash", unzip_dir / "install.sh"],
                env={"PREFIX": str(desired.install_dir)},
            )
        finally:
            logger.info("Removing garbage")
            shutil.rmtree(unzip_dir, ignore_errors=True)
            with contextlib.suppress(FileNotFoundError):
                archive.unlink()
