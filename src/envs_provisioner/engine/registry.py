"""Resource type registry for handler dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from envs_provisioner.engine.errors import UnknownResourceTypeError

if TYPE_CHECKING:
    from envs_provisioner.engine.handlers import ResourceHandler
    from envs_provisioner.resources.base import Resource


@dataclass(frozen=True)
class ResourceTypeRegistration:
    resource_type: str
    category: str
    model: type[Resource]
    handler: ResourceHandler[Any]


class ResourceTypeRegistry:
    """Registry mapping resource_type -> (category, model, handler)."""

    def __init__(self) -> None:
        self._registrations: dict[str, ResourceTypeRegistration] = {}

    def register(self, model: type[Resource], handler: ResourceHandler[Any]) -> None:
        resource_type = getattr(model, "resource_type", None)
        if not isinstance(resource_type, str) or not resource_type:
            raise ValueError("Resource model must define a non-empty classvar `resource_type`")
        category = getattr(model, "category", None)
        if not isinstance(category, str) or not category:
            raise ValueError(f"Resource model {model.__name__} must define a `category`")

        if resource_type in self._registrations:
            raise ValueError(f"Resource type already registered: {resource_type}")

        self._registrations[resource_type] = ResourceTypeRegistration(
            resource_type=resource_type,
            category=category,
            model=model,
            handler=handler,
        )

    def get(self, resource_type: str) -> ResourceTypeRegistration:
        try:
            return self._registrations[resource_type]
        except KeyError as e:
            raise UnknownResourceTypeError(resource_type) from e

    def categories(self) -> set[str]:
        return {r.category for r in self._registrations.values()}
