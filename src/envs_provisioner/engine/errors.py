"""Engine error types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class EngineError(Exception):
    """Base exception for engine errors."""


class UnknownResourceTypeError(EngineError):
    """Raised when a resource type has no registration/handler."""

    def __init__(self, resource_type: str) -> None:
        super().__init__(f"Unknown resource type: {resource_type}")
        self.resource_type = resource_type


class DuplicateAddressError(EngineError):
    """Raised when multiple desired resources share the same address."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Duplicate resource address: {address}")
        self.address = address


class DependencyCycleError(EngineError):
    """Raised when dependencies contain a cycle."""

    def __init__(self, addresses: list[str]) -> None:
        msg = "Dependency cycle detected"
        if addresses:
            msg += f": {', '.join(addresses)}"
        super().__init__(msg)
        self.addresses = addresses


class ValidationError(EngineError):
    """One or more resources failed plan validation."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        msg = "Validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(msg)


class ProvisionCanceled(EngineError):
    """Raised when a run is canceled (e.g., Ctrl-C)."""


class ProvisionError(EngineError):
    """Provisioning of a single resource failed.

    The engine catches these at the resource boundary, logs them and moves on
    to the next resource.
    """


class UnsupportedExecutableError(ProvisionError):
    """No path mapping exists for an executable in an environment type."""

    def __init__(self, executable: str, env_type: str) -> None:
        super().__init__(f"{executable} is not supported for {env_type} yet")
        self.executable = executable
        self.env_type = env_type


class UnsupportedEnvironmentTypeError(ProvisionError):
    """No provisioning strategy exists for an environment type on this host."""


class UnsupportedArchiveError(ProvisionError):
    """Archive is not a zip file."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Wrong archive extension, only zip is supported: {url}")
        self.url = url


class CorruptArchiveError(ProvisionError):
    """Archive content does not have the expected layout."""


class DownloadError(ProvisionError):
    """An HTTP download failed."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"Failed to download {url}: {message}")
        self.url = url


class ExternalProcessError(ProvisionError):
    """An installer or package manager exited non-zero or could not be started."""

    def __init__(self, command: Sequence[str], returncode: int | None, output: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        msg = f"Command failed: {' '.join(self.command)}"
        if returncode is not None:
            msg += f" (exit code {returncode})"
        if output:
            msg += f": {output}"
        super().__init__(msg)
