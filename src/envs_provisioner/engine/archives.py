"""Zip extraction helpers shared by archive-based handlers."""

from __future__ import annotations

import shutil
import zipfile
from pathlib import Path

from envs_provisioner.engine.errors import CorruptArchiveError

# Deflate64 and other methods raise NotImplementedError, encrypted entries
# RuntimeError.
_UNREADABLE = (zipfile.BadZipFile, zipfile.LargeZipFile, NotImplementedError, RuntimeError)


def _restore_mode(info: zipfile.ZipInfo, target: Path) -> None:
    # Unix permission bits live in the high word of external_attr.
    mode = (info.external_attr >> 16) & 0o777
    if mode:
        target.chmod(mode)


def extract_zip(archive: Path, dest: Path) -> None:
    """Extract *archive* into *dest*, keeping executable bits."""
    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                extracted = Path(zf.extract(info, dest))
                if not info.is_dir():
                    _restore_mode(info, extracted)
    except _UNREADABLE as exc:
        raise CorruptArchiveError(f"Archive is broken: {archive}: {exc}") from exc


def extract_subtree(archive: Path, prefix: str, dest: Path) -> int:
    """Extract only the entries under *prefix*, with *prefix* stripped.

    Returns the number of files written. Entries that would land outside
    *dest* make the archive corrupt.
    """
    prefix = prefix.strip("/") + "/"
    root = dest.resolve()
    count = 0
    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                if info.is_dir() or not info.filename.startswith(prefix):
                    continue
                target = (dest / info.filename.removeprefix(prefix)).resolve()
                if root not in target.parents:
                    raise CorruptArchiveError(
                        f"Archive entry escapes {dest}: {info.filename} in {archive}"
                    )
                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, target.open("wb") as dst:
                    shutil.copyfileobj(src, dst)
                _restore_mode(info, target)
                count += 1
    except _UNREADABLE as exc:
        raise CorruptArchiveError(f"Archive is broken: {archive}: {exc}") from exc
    return count


def flatten_single_root(dest: Path, *, source: str) -> None:
    """Move the children of a lone top-level directory up into *dest*.

    Archives usually wrap their content in one folder; a lone file instead
    means the archive is not an environment.
    """
    entries = list(dest.iterdir())
    if len(entries) != 1:
        return
    wrapper = entries[0]
    if not wrapper.is_dir():
        raise CorruptArchiveError(f"Archive is wrong, {source}")

    # A child named like the wrapper would collide with it while moving.
    staging = wrapper.rename(dest / f".{wrapper.name}.flatten")
    for child in staging.iterdir():
        shutil.move(str(child), str(dest / child.name))
    staging.rmdir()
