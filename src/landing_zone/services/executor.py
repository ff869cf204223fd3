"""Execution service: walk the plan in dependency order and hand each step to a provisioner."""
from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from rich.progress import Progress, SpinnerColumn, TextColumn

from landing_zone.domain.catalog import get_resource_type
from landing_zone.domain.errors import ProvisioningError
from landing_zone.domain.models import (
    DeploymentContext,
    DeploymentPlan,
    ExecutionReport,
    Step,
    StepResult,
)
from landing_zone.services.deps import StepGraph, topo_sort

logger = logging.getLogger(__name__)


class Provisioner(Protocol):
    def provision(self, step: Step, upstream: Mapping[str, dict[str, Any]]) -> dict[str, Any]:
        """Carry out ``step`` and return the outputs it publishes."""
        ...


class PlanProvisioner:
    """Records operations and returns the outputs each step would publish.

    Nothing is sent to Azure; the outputs are derived from the resolved
    references so downstream steps and reports see the same identifiers a real
    deployment would produce.
    """

    def __init__(self, context: DeploymentContext) -> None:
        self.context = context
        self.operations: list[dict[str, Any]] = []

    def _network_id(self, kind: str, name: str) -> str:
        return (
            f"/subscriptions/{self.context.subscription_id}"
            f"/resourceGroups/{self.context.resource_group}"
            f"/providers/Microsoft.Network/{kind}/{name}"
        )

    def provision(self, step: Step, upstream: Mapping[str, dict[str, Any]]) -> dict[str, Any]:
        missing = [d for d in step.depends_on if d not in upstream]
        if missing:
            raise ProvisioningError(step.name, f"outputs missing for {missing}")
        outputs: dict[str, Any]
        if step.kind in ("resource", "reference"):
            if step.ref is None or step.component is None:
                raise ProvisioningError(step.name, "resource step without a reference")
            outputs = {
                "resource_id": step.ref.resource_id,
                "name": step.ref.name,
                "action": step.ref.action,
            }
            endpoint = get_resource_type(step.component).endpoint(step.ref.name)
            if endpoint:
                outputs["endpoint"] = endpoint
        elif step.kind == "dns_zone":
            zone = step.properties["zone"]
            outputs = {"zone": zone, "resource_id": self._network_id("privateDnsZones", zone)}
        elif step.kind == "private_endpoint":
            name = step.properties["name"]
            outputs = {"name": name, "resource_id": self._network_id("privateEndpoints", name)}
        elif step.kind == "role_assignment":
            scope = step.properties["scope"]
            outputs = {"assignments": [{"role": r, "scope": scope} for r in step.properties["roles"]]}
        elif step.kind == "capability_host":
            name = step.properties["name"]
            outputs = {
                "name": name,
                "resource_id": f"{step.properties['project_id']}/capabilityHosts/{name}",
            }
        else:  # pragma: no cover - Literal keeps this unreachable
            raise ProvisioningError(step.name, f"unsupported step kind {step.kind}")
        self.operations.append(
            {
                "step": step.name,
                "kind": step.kind,
                "action": step.ref.action if step.ref else "create",
            }
        )
        return outputs


def execute_plan(
    plan: DeploymentPlan,
    provisioner: Provisioner | None = None,
    *,
    fail_fast: bool = True,
    targets: Sequence[str] | None = None,
    show_progress: bool = True,
) -> ExecutionReport:
    """Run plan steps in topological order.

    A failed step blocks its dependents. With ``fail_fast`` every step after
    the first failure is skipped. Failures are recorded in the report, never
    retried.
    """
    provisioner = provisioner or PlanProvisioner(plan.context)
    graph = StepGraph(plan.steps)
    order = topo_sort(graph, targets)
    report = ExecutionReport(parameter_set=plan.parameter_set)
    outputs: dict[str, dict[str, Any]] = {}
    failed_or_blocked: set[str] = set()
    stop = False
    progress: Progress | None = None
    task_id = None
    if show_progress and order:
        progress = Progress(SpinnerColumn(), TextColumn("{task.description}"))
        progress.start()
        task_id = progress.add_task("provisioning", total=len(order))
    try:
        for name in order:
            step = graph.get(name)
            if progress is not None and task_id is not None:
                progress.update(task_id, description=f"{step.kind}: {name}")
            blocked_by = [d for d in step.depends_on if d in failed_or_blocked]
            if blocked_by:
                logger.warning("%s blocked by %s", name, ", ".join(blocked_by))
                report.results.append(
                    StepResult(
                        name=name,
                        status="blocked",
                        error_message=f"blocked by {', '.join(blocked_by)}",
                    )
                )
                failed_or_blocked.add(name)
                continue
            if stop:
                report.results.append(StepResult(name=name, status="skipped"))
                continue
            upstream = {d: outputs[d] for d in step.depends_on}
            start = time.perf_counter()
            try:
                result = provisioner.provision(step, upstream)
            except Exception as exc:
                elapsed = (time.perf_counter() - start) * 1000.0
                logger.exception("step %s failed", name)
                report.results.append(
                    StepResult(
                        name=name, status="failed", error_message=str(exc), elapsed_ms=elapsed
                    )
                )
                failed_or_blocked.add(name)
                stop = fail_fast
                continue
            elapsed = (time.perf_counter() - start) * 1000.0
            outputs[name] = result
            report.results.append(
                StepResult(name=name, status="succeeded", outputs=result, elapsed_ms=elapsed)
            )
            if progress is not None and task_id is not None:
                progress.advance(task_id)
    finally:
        if progress is not None:
            progress.stop()
    logger.info("%s: %s", plan.parameter_set, report.counts())
    return report


__all__ = ["PlanProvisioner", "Provisioner", "execute_plan"]
