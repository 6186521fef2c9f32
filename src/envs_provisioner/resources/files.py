"""Plain file and hard link resource models."""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar

from pydantic import model_validator

from envs_provisioner.resources.base import Resource


class FileResource(Resource):
    """A file written with literal content unless it already exists."""

    resource_type: ClassVar[str] = "file"
    namespace: ClassVar[str] = "file"
    category: ClassVar[str] = "files"

    path: Path
    content: str = ""

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name") and data.get("path") is not None:
            data = {**data, "name": str(data["path"])}
        return data


class LinkResource(Resource):
    """A hard link at ``link`` pointing to ``source``."""

    resource_type: ClassVar[str] = "link"
    namespace: ClassVar[str] = "link"
    category: ClassVar[str] = "links"

    link: Path
    source: Path

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name") and data.get("link") is not None:
            data = {**data, "name": str(data["link"])}
        return data
