"""Collect deployment outputs (ids, names, endpoints, subnet ids) from a plan.

Pure calculations only - no file IO here.
"""
from __future__ import annotations

from landing_zone.domain.catalog import get_resource_type
from landing_zone.domain.models import DeploymentOutputs, DeploymentPlan, ExecutionReport
from landing_zone.services.stages import CAPABILITY_HOST


def collect_outputs(plan: DeploymentPlan, report: ExecutionReport | None = None) -> DeploymentOutputs:
    """Build outputs for every resolved component.

    When a report is given only components whose step succeeded are included,
    plus the capability host id if it ran.
    """
    succeeded: set[str] | None = None
    if report is not None:
        succeeded = {r.name for r in report.results if r.status == "succeeded"}
    out = DeploymentOutputs(subnet_ids=dict(plan.subnet_ids), private_dns_zones=list(plan.dns_zones))
    for component, ref in plan.refs.items():
        if succeeded is not None and component not in succeeded:
            continue
        out.resource_ids[component] = ref.resource_id
        out.names[component] = ref.name
        endpoint = get_resource_type(component).endpoint(ref.name)
        if endpoint:
            out.endpoints[component] = endpoint
    if report is not None:
        host = report.result(CAPABILITY_HOST)
        if host is not None and host.status == "succeeded":
            out.resource_ids[CAPABILITY_HOST] = host.outputs["resource_id"]
    return out


__all__ = ["collect_outputs"]
