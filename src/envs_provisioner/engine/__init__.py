"""Plan and apply engine for Python-family environments."""

from envs_provisioner.engine.engine import ProgressCallback, ProvisionEngine
from envs_provisioner.engine.errors import (
    CorruptArchiveError,
    DependencyCycleError,
    DownloadError,
    DuplicateAddressError,
    EngineError,
    ExternalProcessError,
    ProvisionCanceled,
    ProvisionError,
    UnknownResourceTypeError,
    UnsupportedArchiveError,
    UnsupportedEnvironmentTypeError,
    UnsupportedExecutableError,
    ValidationError,
)
from envs_provisioner.engine.executables import executable, resolve_executable
from envs_provisioner.engine.handlers import EnvHandler, ProvisionContext, ResourceHandler
from envs_provisioner.engine.packages import conda_install, pip_install
from envs_provisioner.engine.pipeline import DEFAULT_CATEGORIES, Category
from envs_provisioner.engine.registry import ResourceTypeRegistration, ResourceTypeRegistry
from envs_provisioner.engine.types import (
    Action,
    ApplyResult,
    Outcome,
    Plan,
    PlanMetadata,
    ResourceChange,
    Status,
)

__all__ = [
    "DEFAULT_CATEGORIES",
    "Action",
    "ApplyResult",
    "Category",
    "CorruptArchiveError",
    "DependencyCycleError",
    "DownloadError",
    "DuplicateAddressError",
    "EngineError",
    "EnvHandler",
    "ExternalProcessError",
    "Outcome",
    "Plan",
    "PlanMetadata",
    "ProgressCallback",
    "ProvisionCanceled",
    "ProvisionContext",
    "ProvisionEngine",
    "ProvisionError",
    "ResourceChange",
    "ResourceHandler",
    "ResourceTypeRegistration",
    "ResourceTypeRegistry",
    "Status",
    "UnknownResourceTypeError",
    "UnsupportedArchiveError",
    "UnsupportedEnvironmentTypeError",
    "UnsupportedExecutableError",
    "ValidationError",
    "conda_install",
    "executable",
    "pip_install",
    "resolve_executable",
]
