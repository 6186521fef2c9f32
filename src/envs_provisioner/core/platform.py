"""Host platform capabilities."""

from __future__ import annotations

import platform as _platform
from dataclasses import dataclass
from typing import Self

# platform.system() value -> name used in installer download URLs.
_OS_NAMES: dict[str, str] = {
    "Darwin": "MacOSX",
    "Linux": "Linux",
    "Windows": "Windows",
}


@dataclass(frozen=True)
class Platform:
    """Describes the host OS for every component that branches on it.

    Detect it once at the edge with :meth:`detect` and pass it down; tests
    construct the variant they need with :meth:`windows` / :meth:`linux`.
    """

    system: str

    @property
    def is_windows(self) -> bool:
        return self.system == "Windows"

    @property
    def is_unix(self) -> bool:
        return not self.is_windows and self.system != ""

    @property
    def os_name(self) -> str:
        """OS name as it appears in python.org and Anaconda installer names."""
        return _OS_NAMES.get(self.system, self.system.replace(" ", ""))

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self.is_windows else ""

    @classmethod
    def detect(cls) -> Self:
        return cls(system=_platform.system())

    @classmethod
    def windows(cls) -> Self:
        return cls(system="Windows")

    @classmethod
    def linux(cls) -> Self:
        return cls(system="Linux")

    @classmethod
    def macos(cls) -> Self:
        return cls(system="Darwin")
