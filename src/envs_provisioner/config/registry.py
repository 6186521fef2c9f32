"""Default resource type registry factory."""

from __future__ import annotations

from envs_provisioner.engine.conda_handler import CondaEnvHandler, CondaHandler
from envs_provisioner.engine.file_handler import FileHandler, LinkHandler
from envs_provisioner.engine.python_build_handler import PythonBuildHandler
from envs_provisioner.engine.python_handler import PythonHandler
from envs_provisioner.engine.registry import ResourceTypeRegistry
from envs_provisioner.engine.virtualenv_handler import VirtualEnvHandler
from envs_provisioner.engine.zip_handler import ZipEnvHandler
from envs_provisioner.resources.environment import (
    CondaEnvResource,
    CondaResource,
    PythonBuildResource,
    PythonResource,
    VirtualEnvResource,
    ZipEnvResource,
)
from envs_provisioner.resources.files import FileResource, LinkResource


def default_registry() -> ResourceTypeRegistry:
    """Create a fresh registry with all built-in resource types and handlers."""
    registry = ResourceTypeRegistry()

    registry.register(PythonBuildResource, PythonBuildHandler())
    registry.register(PythonResource, PythonHandler())
    registry.register(ZipEnvResource, ZipEnvHandler())
    registry.register(VirtualEnvResource, VirtualEnvHandler())
    registry.register(CondaResource, CondaHandler())
    registry.register(CondaEnvResource, CondaEnvHandler())
    registry.register(FileResource, FileHandler())
    registry.register(LinkResource, LinkHandler())

    return registry
