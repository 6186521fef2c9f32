"""Resource definitions for provisioned environments."""

from envs_provisioner.resources.base import Resource
from envs_provisioner.resources.environment import (
    CondaEnvResource,
    CondaResource,
    EnvResource,
    EnvType,
    PythonBuildResource,
    PythonResource,
    VirtualEnvResource,
    ZipEnvResource,
)
from envs_provisioner.resources.files import FileResource, LinkResource

__all__ = [
    "CondaEnvResource",
    "CondaResource",
    "EnvResource",
    "EnvType",
    "FileResource",
    "LinkResource",
    "PythonBuildResource",
    "PythonResource",
    "Resource",
    "VirtualEnvResource",
    "ZipEnvResource",
]
