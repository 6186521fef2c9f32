"""Provisioning of environments unpacked from zip archives."""

from __future__ import annotations

import contextlib
import logging
import shutil
from typing import TYPE_CHECKING

from envs_provisioner.engine.archives import extract_zip, flatten_single_root
from envs_provisioner.engine.errors import CorruptArchiveError, UnsupportedArchiveError
from envs_provisioner.engine.executables import executable
from envs_provisioner.engine.handlers import EnvHandler
from envs_provisioner.engine.packages import bootstrap_pip, pip_install

if TYPE_CHECKING:
    from envs_provisioner.engine.handlers import ProvisionContext
    from envs_provisioner.resources.environment import ZipEnvResource

logger = logging.getLogger(__name__)


class ZipEnvHandler(EnvHandler["ZipEnvResource"]):
    """Download a zip, unpack it as the environment, make sure pip works."""

    def provision(self, ctx: ProvisionContext, desired: ZipEnvResource) -> None:
        archive_name = desired.archive_name
        if not archive_name.endswith(".zip"):
            raise UnsupportedArchiveError(desired.url)

        archive = ctx.build_dir / archive_name
        logger.info("Downloading %s archive from %s", archive_name, desired.url)
        ctx.downloader.fetch(desired.url, archive)

        logger.info("Unzipping downloaded %s archive", archive_name)
        try:
            extract_zip(archive, desired.target_dir)
            flatten_single_root(desired.target_dir, source=desired.url)
        except CorruptArchiveError:
            # A leftover env_dir would count as provisioned on the next run.
            shutil.rmtree(desired.target_dir, ignore_errors=True)
            raise

        if desired.type is not None:
            if not executable(desired, "pip", ctx.platform).exists():
                bootstrap_pip(ctx, desired)
            else:
                logger.info("Force upgrade pip and setuptools")
                ctx.runner.run(
                    [
                        executable(desired, "python", ctx.platform),
                        "-m",
                        "pip",
                        "install",
                        "--upgrade",
                        "--force",
                        "setuptools",
                        "pip",
                    ]
                )

        logger.info("Deleting %s archive", archive_name)
        with contextlib.suppress(FileNotFoundError):
            archive.unlink()

        pip_install(ctx, desired, desired.packages)
