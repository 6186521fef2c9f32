"""Virtualenv provisioning from an already provisioned interpreter."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from envs_provisioner.engine.errors import ProvisionError
from envs_provisioner.engine.executables import executable
from envs_provisioner.engine.handlers import EnvHandler
from envs_provisioner.engine.packages import pip_install
from envs_provisioner.resources.environment import (
    CondaEnvResource,
    EnvType,
    VirtualEnvResource,
)

if TYPE_CHECKING:
    from envs_provisioner.engine.handlers import ProvisionContext

logger = logging.getLogger(__name__)


class VirtualEnvHandler(EnvHandler["VirtualEnvResource"]):
    """Create a standalone (always-copy) virtualenv from ``source_env``."""

    def validate(self, ctx: ProvisionContext, desired: VirtualEnvResource) -> list[str]:
        errors = super().validate(ctx, desired)
        source = ctx.environments.get(desired.source_env)
        if source is None:
            return errors + [
                f"Virtualenv '{desired.name}' references unknown source env '{desired.source_env}'"
            ]
        if isinstance(source, (VirtualEnvResource, CondaEnvResource)):
            return errors + [
                f"Virtualenv '{desired.name}' can't be created from "
                f"{source.resource_type} '{source.name}'"
            ]
        return errors

    def skip_reason(self, ctx: ProvisionContext, desired: VirtualEnvResource) -> str | None:
        source = ctx.source_env(desired.source_env)
        if source.type == EnvType.IRONPYTHON:
            return "IronPython doesn't support virtualenvs"
        if source.type is None:
            return f"Source env '{source.name}' has no type, can't create virtualenv from it"
        return None

    def provision(self, ctx: ProvisionContext, desired: VirtualEnvResource) -> None:
        source = ctx.source_env(desired.source_env)
        if not source.target_dir.exists():
            raise ProvisionError(f"Source env '{source.name}' is not provisioned")

        logger.info("Installing needed virtualenv package")
        pip_install(ctx, source, ["virtualenv"])

        logger.info("Creating virtualenv from %s at %s", source.name, desired.target_dir)
        ctx.runner.run(
            [
                executable(source, "virtualenv", ctx.platform),
                desired.target_dir.absolute(),
                "--always-copy",
            ],
            cwd=source.target_dir,
        )

        pip_install(ctx, desired, desired.packages)
