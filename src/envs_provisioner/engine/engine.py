"""Plan/apply engine."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Literal

from envs_provisioner import __version__
from envs_provisioner.engine.errors import (
    DuplicateAddressError,
    ProvisionCanceled,
    ProvisionError,
    UnsupportedEnvironmentTypeError,
    UnsupportedExecutableError,
    ValidationError,
)
from envs_provisioner.engine.graph import DependencyGraph
from envs_provisioner.engine.pipeline import DEFAULT_CATEGORIES, category_order
from envs_provisioner.engine.types import (
    Action,
    ApplyResult,
    Outcome,
    Plan,
    PlanMetadata,
    ResourceChange,
    Status,
)
from envs_provisioner.resources.environment import EnvResource

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ResourceChange, Literal["start", "done", "failed"]], None]

if TYPE_CHECKING:
    from collections.abc import Sequence

    from envs_provisioner.engine.handlers import ProvisionContext, ResourceHandler
    from envs_provisioner.engine.pipeline import Category
    from envs_provisioner.engine.registry import ResourceTypeRegistry
    from envs_provisioner.resources.base import Resource


def _environment_index(resources: Sequence[Resource]) -> dict[str, EnvResource]:
    return {r.name: r for r in resources if isinstance(r, EnvResource)}


class ProvisionEngine:
    """Runs categories of resources in dependency order.

    ``plan`` classifies every resource without touching the disk beyond
    existence checks; ``apply`` re-checks each resource right before
    provisioning it and keeps going when one of them fails.
    """

    def __init__(
        self,
        *,
        context: ProvisionContext,
        registry: ResourceTypeRegistry,
        categories: Sequence[Category] = DEFAULT_CATEGORIES,
    ) -> None:
        self._context = context
        self._registry = registry
        self._categories = tuple(categories)

    @property
    def context(self) -> ProvisionContext:
        return self._context

    def _ctx(self, resources: Sequence[Resource]) -> ProvisionContext:
        return replace(self._context, environments=_environment_index(resources))

    def _handler(self, resource: Resource) -> ResourceHandler[Any]:
        return self._registry.get(resource.resource_type).handler

    def _validate(self, ctx: ProvisionContext, desired_by_addr: dict[str, Resource]) -> None:
        known_categories = {c.name for c in self._categories}
        order = {c.name: i for i, c in enumerate(category_order(self._categories))}
        errors: list[str] = []
        for r in desired_by_addr.values():
            if r.category not in known_categories:
                errors.append(f"Resource '{r.address}' has no provisioning category")
                continue
            errors.extend(self._handler(r).validate(ctx, r))
            for dep in r.depends_on:
                dep_resource = desired_by_addr.get(dep)
                if dep_resource is None:
                    errors.append(f"Resource '{r.address}' depends on unknown address '{dep}'")
                elif order.get(dep_resource.category, len(order)) > order[r.category]:
                    errors.append(
                        f"Resource '{r.address}' can't depend on '{dep}': "
                        f"{dep_resource.category} run after {r.category}"
                    )
        if errors:
            raise ValidationError(errors)

    def _ordered(self, desired_by_addr: dict[str, Resource]) -> list[Resource]:
        """Resources grouped by category in pipeline order, empty categories dropped."""
        by_category: dict[str, list[Resource]] = {}
        for r in desired_by_addr.values():
            by_category.setdefault(r.category, []).append(r)

        ordered: list[Resource] = []
        for category in category_order(self._categories):
            members = by_category.get(category.name, [])
            if not members:
                logger.debug("Skipping %s: nothing declared", category.name)
                continue
            # Declaration order, adjusted only by explicit depends_on.
            position = {r.address: i for i, r in enumerate(members)}
            graph = DependencyGraph(
                position,
                {r.address: r.depends_on for r in members},
                priorities=position,
            )
            ordered.extend(desired_by_addr[addr] for addr in graph.topological_order())
        return ordered

    def _classify(self, ctx: ProvisionContext, resource: Resource) -> tuple[Action, str | None]:
        handler = self._handler(resource)
        try:
            reason = handler.skip_reason(ctx, resource)
        except (UnsupportedEnvironmentTypeError, UnsupportedExecutableError) as e:
            return Action.UNSUPPORTED, str(e)
        if reason is not None:
            return Action.SKIP, reason
        if handler.exists(ctx, resource):
            return Action.NOOP, f"{resource.address} already exists"
        return Action.PROVISION, None

    def plan(self, resources: Sequence[Resource]) -> Plan:
        logger.info("Planning %d resources", len(resources))
        desired_by_addr: dict[str, Resource] = {}
        for r in resources:
            if r.address in desired_by_addr:
                raise DuplicateAddressError(r.address)
            self._registry.get(r.resource_type)
            desired_by_addr[r.address] = r

        ctx = self._ctx(resources)
        self._validate(ctx, desired_by_addr)

        changes: list[ResourceChange] = []
        for r in self._ordered(desired_by_addr):
            if not self._handler(r).applies(ctx, r):
                logger.debug("Leaving out %s on %s", r.address, ctx.platform.os_name)
                continue
            action, reason = self._classify(ctx, r)
            logger.debug("Classified %s as %s", r.address, action.value)
            changes.append(
                ResourceChange(
                    address=r.address,
                    resource_type=r.resource_type,
                    category=r.category,
                    action=action,
                    reason=reason,
                    desired=r.model_dump(mode="json", exclude={"address"}),
                )
            )

        metadata = PlanMetadata(
            platform=self._context.platform.system,
            engine_version=__version__,
        )
        return Plan(metadata=metadata, changes=changes)

    def _desired_object(self, change: ResourceChange) -> Resource:
        if change.desired is None:
            raise ValueError(f"Missing desired config for {change.address}")

        desired = self._registry.get(change.resource_type).model.model_validate(change.desired)
        if desired.address != change.address:
            raise ValueError(f"Desired address mismatch: {change.address} != {desired.address}")
        return desired

    def _log_skip(self, resource: Resource, action: Action, reason: str | None) -> None:
        match action:
            case Action.UNSUPPORTED:
                logger.error("%s: %s", resource.address, reason)
            case Action.SKIP:
                logger.warning("%s: %s", resource.address, reason)
            case Action.NOOP if self._handler(resource).warn_if_exists:
                logger.warning("%s", reason)
            case _:
                logger.info("%s", reason)

    def apply(self, plan: Plan, *, progress: ProgressCallback | None = None) -> ApplyResult:
        """Provision every resource of *plan* that does not exist yet.

        A failing resource is logged and recorded; the remaining resources
        still run.
        """
        resources = [self._desired_object(c) for c in plan.changes]
        ctx = self._ctx(resources)
        outcomes: list[Outcome] = []
        logger.info("Applying %d resources", len(resources))

        try:
            for change, resource in zip(plan.changes, resources, strict=True):
                outcomes.append(self._apply_one(ctx, change, resource, progress))
        except KeyboardInterrupt as e:  # pragma: no cover
            raise ProvisionCanceled("Provisioning canceled") from e

        return ApplyResult(outcomes=outcomes)

    def _apply_one(
        self,
        ctx: ProvisionContext,
        change: ResourceChange,
        resource: Resource,
        progress: ProgressCallback | None,
    ) -> Outcome:
        started = False
        try:
            action, reason = self._classify(ctx, resource)
            if action != Action.PROVISION:
                self._log_skip(resource, action, reason)
                return Outcome(
                    address=change.address,
                    resource_type=change.resource_type,
                    status=Status.SKIPPED,
                    message=reason,
                )

            if progress:
                progress(change, "start")
                started = True
            self._handler(resource).provision(ctx, resource)
        except (ProvisionError, OSError) as e:
            logger.error("Provisioning %s failed: %s", change.address, e)
            if progress and started:
                progress(change, "failed")
            return Outcome(
                address=change.address,
                resource_type=change.resource_type,
                status=Status.FAILED,
                message=str(e),
            )

        if progress:
            progress(change, "done")
        return Outcome(
            address=change.address,
            resource_type=change.resource_type,
            status=Status.PROVISIONED,
        )
