"""Package installation into provisioned environments via pip or conda."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from envs_provisioner.engine.executables import executable
from envs_provisioner.resources.environment import EnvType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from envs_provisioner.engine.handlers import ProvisionContext
    from envs_provisioner.resources.environment import CondaResource, EnvResource

logger = logging.getLogger(__name__)

GET_PIP_URL = "https://bootstrap.pypa.io/get-pip.py"


def get_pip_script(ctx: ProvisionContext) -> Path:
    """Path to get-pip.py in the build dir, downloaded on first use."""
    return ctx.downloader.fetch_cached(GET_PIP_URL, ctx.build_dir / "get-pip.py")


def bootstrap_pip(ctx: ProvisionContext, env: EnvResource) -> None:
    """Install pip and setuptools into an environment that lacks them."""
    logger.info("Downloading & installing pip and setuptools into '%s'", env.name)
    if env.type == EnvType.IRONPYTHON:
        ctx.runner.run([executable(env, "ipy", ctx.platform), "-X:Frames", "-m", "ensurepip"])
    else:
        ctx.runner.run([executable(env, "python", ctx.platform), get_pip_script(ctx)])


def pip_install(ctx: ProvisionContext, env: EnvResource, packages: Sequence[str] | None) -> None:
    """Install *packages* into *env* with its own pip.

    Does nothing when there are no packages or the environment has no type.
    """
    if not packages or env.type is None:
        return
    logger.info("Installing packages via pip into '%s': %s", env.name, ", ".join(packages))

    if env.type == EnvType.IRONPYTHON:
        command = [executable(env, "ipy", ctx.platform), "-X:Frames", "-m", "pip", "install"]
    else:
        command = [executable(env, "pip", ctx.platform), "install"]
    ctx.runner.run([*command, *ctx.pip_options, *packages])


def conda_install(
    ctx: ProvisionContext, env: CondaResource, packages: Sequence[str] | None
) -> None:
    """Install conda channel *packages* into *env*."""
    if not packages:
        return
    logger.info("Installing packages via conda into '%s': %s", env.name, ", ".join(packages))
    ctx.runner.run(
        [
            executable(env, "conda", ctx.platform),
            "install",
            "-y",
            "-p",
            env.target_dir,
            *packages,
        ]
    )
