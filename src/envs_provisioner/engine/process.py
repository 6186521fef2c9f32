"""Subprocess execution for installers and package managers."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import TYPE_CHECKING

from envs_provisioner.engine.errors import ExternalProcessError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

logger = logging.getLogger(__name__)

# Keep error messages readable when an installer dumps a wall of text.
_MAX_OUTPUT_CHARS = 2000


def _tail(text: str) -> str:
    text = text.strip()
    if len(text) <= _MAX_OUTPUT_CHARS:
        return text
    return "..." + text[-_MAX_OUTPUT_CHARS:]


class CommandRunner:
    """Run external commands to completion, raising on failure."""

    def run(
        self,
        command: Sequence[str | os.PathLike[str]],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> str:
        """Run *command* and return its stdout.

        ``env`` entries are added on top of the current process environment.

        Raises:
            ExternalProcessError: The command could not be started or exited non-zero.
        """
        cmd = [os.fspath(part) for part in command]
        full_env = {**os.environ, **env} if env else None
        logger.debug("Running %s", " ".join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                env=full_env,
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as exc:
            output = _tail(exc.stderr or "") or _tail(exc.stdout or "")
            raise ExternalProcessError(cmd, exc.returncode, output) from exc
        except OSError as exc:
            raise ExternalProcessError(cmd, None, str(exc)) from exc

        if completed.stdout:
            logger.debug("%s", completed.stdout.rstrip())
        return completed.stdout
