"""Anaconda/Miniconda distributions and the conda environments created from them."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from envs_provisioner.engine.errors import ProvisionError
from envs_provisioner.engine.executables import executable
from envs_provisioner.engine.handlers import EnvHandler
from envs_provisioner.engine.packages import conda_install, pip_install
from envs_provisioner.resources.environment import CondaResource

if TYPE_CHECKING:
    from envs_provisioner.core.platform import Platform
    from envs_provisioner.engine.handlers import ProvisionContext
    from envs_provisioner.resources.environment import CondaEnvResource

logger = logging.getLogger(__name__)

CONDA_REPOSITORY_URL = "https://repo.continuum.io"


def conda_download_url(version: str, platform: Platform, *, is64: bool) -> str:
    """Installer URL for a distribution name such as ``Miniconda3-4.5.4``."""
    repository = "miniconda" if "miniconda" in version.lower() else "archive"
    arch = f"{platform.os_name}-x86{'_64' if is64 else ''}"
    extension = "exe" if platform.is_windows else "sh"
    return f"{CONDA_REPOSITORY_URL}/{repository}/{version}-{arch}.{extension}"


class CondaHandler(EnvHandler["CondaResource"]):
    """Run the distribution installer silently, then install pip and conda packages."""

    def provision(self, ctx: ProvisionContext, desired: CondaResource) -> None:
        url = conda_download_url(desired.version, ctx.platform, is64=desired.is64)
        installer = ctx.downloader.fetch_cached(url, ctx.build_dir / url.rsplit("/", 1)[-1])

        logger.info("Bootstrapping '%s' to %s", desired.name, desired.target_dir)
        if ctx.platform.is_windows:
            ctx.runner.run(
                [
                    installer,
                    "/InstallationType=JustMe",
                    "/AddToPath=0",
                    "/RegisterPython=0",
                    "/S",
                    f"/D={desired.target_dir.absolute()}",
                ]
            )
        else:
            ctx.runner.run(["bash", installer, "-b", "-p", desired.target_dir])

        pip_install(ctx, desired, desired.packages)
        conda_install(ctx, desired, desired.conda_packages)


class CondaEnvHandler(EnvHandler["CondaEnvResource"]):
    """Create a conda environment with ``conda create`` from the source distribution.

    A directory left behind by a failed ``conda create`` counts as provisioned.
    """

    def validate(self, ctx: ProvisionContext, desired: CondaEnvResource) -> list[str]:
        errors = super().validate(ctx, desired)
        source = ctx.environments.get(desired.source_env)
        if source is None:
            return errors + [
                f"Conda env '{desired.name}' references unknown source env '{desired.source_env}'"
            ]
        if not isinstance(source, CondaResource):
            return errors + [
                f"Conda env '{desired.name}' needs a conda source env, "
                f"'{source.name}' is a {source.resource_type}"
            ]
        return errors

    def provision(self, ctx: ProvisionContext, desired: CondaEnvResource) -> None:
        source = ctx.source_env(desired.source_env)
        if not source.target_dir.exists():
            raise ProvisionError(f"Source env '{source.name}' is not provisioned")

        logger.info("Creating condaenv '%s' at %s directory", desired.name, desired.target_dir)
        ctx.runner.run(
            [
                executable(source, "conda", ctx.platform),
                "create",
                "-p",
                desired.target_dir,
                "-y",
                f"python={desired.version}",
                *desired.conda_packages,
            ]
        )

        pip_install(ctx, desired, desired.packages)
