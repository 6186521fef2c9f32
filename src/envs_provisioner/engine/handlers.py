"""Engine-facing handler interfaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from envs_provisioner.engine.errors import ProvisionError
from envs_provisioner.resources.base import Resource
from envs_provisioner.resources.environment import EnvResource

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from envs_provisioner.core.platform import Platform
    from envs_provisioner.engine.download import Downloader
    from envs_provisioner.engine.process import CommandRunner

R = TypeVar("R", bound=Resource)
E = TypeVar("E", bound=EnvResource)

DEFAULT_PIP_INSTALL_OPTIONS = "--trusted-host pypi.python.org"


@dataclass(frozen=True)
class ProvisionContext:
    """Context passed to handlers.

    ``environments`` indexes every declared environment by name so handlers
    can resolve ``source_env`` references.
    """

    platform: Platform
    runner: CommandRunner
    downloader: Downloader
    build_dir: Path
    pip_install_options: str = DEFAULT_PIP_INSTALL_OPTIONS
    jython_installer_version: str = "2.7.1"
    java: str = "java"
    environments: Mapping[str, EnvResource] = field(default_factory=dict)

    @property
    def pip_options(self) -> list[str]:
        return self.pip_install_options.split()

    def source_env(self, name: str) -> EnvResource:
        try:
            return self.environments[name]
        except KeyError:
            raise ProvisionError(f"Unknown source environment '{name}'") from None


class ResourceHandler(Generic[R]):
    """Base class for resource handlers.

    Handlers translate a resource into installer and package manager calls.
    Subclass and override ``exists`` and ``provision``; ``validate``,
    ``applies`` and ``skip_reason`` are optional.
    """

    # Existing targets are reported as warnings rather than info lines.
    warn_if_exists: ClassVar[bool] = False

    def validate(self, ctx: ProvisionContext, desired: R) -> list[str]:
        """Configuration problems that make the whole plan invalid.

        Return list of error messages (empty = valid).
        """
        _ = ctx, desired
        return []

    def applies(self, ctx: ProvisionContext, desired: R) -> bool:
        """False when the resource means nothing on this platform; it is left out of the plan."""
        _ = ctx, desired
        return True

    def skip_reason(self, ctx: ProvisionContext, desired: R) -> str | None:
        """Why this resource cannot be provisioned here (logged as a warning), or None.

        May raise ``UnsupportedEnvironmentTypeError`` when no strategy exists.
        """
        _ = ctx, desired
        return None

    def exists(self, ctx: ProvisionContext, desired: R) -> bool:
        """Whether the resource is already provisioned."""
        raise NotImplementedError

    def provision(self, ctx: ProvisionContext, desired: R) -> None:
        """Download, install and populate the resource."""
        raise NotImplementedError


class EnvHandler(ResourceHandler[E]):
    """Handler for environments: the env_dir existing means provisioned."""

    def validate(self, ctx: ProvisionContext, desired: E) -> list[str]:
        _ = ctx
        if desired.env_dir is None:
            return [f"Environment '{desired.name}' has no env_dir"]
        return []

    def exists(self, ctx: ProvisionContext, desired: E) -> bool:
        _ = ctx
        return desired.target_dir.exists()
