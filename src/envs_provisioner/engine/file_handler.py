"""Plain files and hard links."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from envs_provisioner.engine.handlers import ResourceHandler

if TYPE_CHECKING:
    from envs_provisioner.engine.handlers import ProvisionContext
    from envs_provisioner.resources.files import FileResource, LinkResource

logger = logging.getLogger(__name__)


class FileHandler(ResourceHandler["FileResource"]):
    warn_if_exists = True

    def exists(self, ctx: ProvisionContext, desired: FileResource) -> bool:
        _ = ctx
        return desired.path.exists()

    def provision(self, ctx: ProvisionContext, desired: FileResource) -> None:
        _ = ctx
        logger.info(
            "Creating file %s with the following content:\n%s", desired.path, desired.content
        )
        desired.path.parent.mkdir(parents=True, exist_ok=True)
        desired.path.write_text(desired.content, encoding="utf-8", newline="")


class LinkHandler(ResourceHandler["LinkResource"]):
    warn_if_exists = True

    @staticmethod
    def _occupied(desired: LinkResource) -> bool:
        # exists() follows symlinks, a dangling one still blocks the name.
        return desired.link.is_symlink() or desired.link.exists()

    def skip_reason(self, ctx: ProvisionContext, desired: LinkResource) -> str | None:
        _ = ctx
        if not self._occupied(desired) and not desired.source.exists():
            return f"Source file {desired.source} doesn't exist"
        return None

    def exists(self, ctx: ProvisionContext, desired: LinkResource) -> bool:
        _ = ctx
        return self._occupied(desired)

    def provision(self, ctx: ProvisionContext, desired: LinkResource) -> None:
        _ = ctx
        logger.info("Creating link %s pointing to %s", desired.link, desired.source)
        desired.link.hardlink_to(desired.source)
