"""Expand a parameter set into the landing zone deployment graph.

Ordering rules:
    * log analytics before application insights
    * virtual network before private DNS zones, zones before private endpoints
    * container apps environment after the network and log analytics
    * AI Foundry: storage / cosmos / search -> account -> project -> project
      role assignments -> capability host -> container-scoped role assignments

Reused resources become ``reference`` steps so dependents can still read their
outputs; only created resources get provisioning work.
"""
from __future__ import annotations

import logging
from typing import Any

from landing_zone.domain.catalog import CAPABILITY_HOST_DEPENDENCIES, get_resource_type
from landing_zone.domain.models import (
    DeploymentContext,
    DeploymentPlan,
    LandingZoneParameters,
    ResourceRef,
    Step,
)
from landing_zone.services.deps import StepGraph, topo_sort
from landing_zone.services.naming import deployment_token, subnet_id
from landing_zone.services.resolver import resolve_all

logger = logging.getLogger(__name__)

CAPABILITY_HOST = "capability_host"

# Roles the project identity needs on each capability host dependency.
PROJECT_ROLES: dict[str, list[str]] = {
    "storage": ["Storage Blob Data Contributor"],
    "cosmos_db": ["Cosmos DB Operator"],
    "ai_search": ["Search Index Data Contributor", "Search Service Contributor"],
}

# Data-plane roles scoped to the containers the capability host creates.
CONTAINER_ROLES: dict[str, dict[str, Any]] = {
    "storage": {
        "roles": ["Storage Blob Data Owner"],
        "scope": "containers/*-azureml-agent",
    },
    "cosmos_db": {
        "roles": ["Cosmos DB Built-in Data Contributor"],
        "scope": "sqlDatabases/enterprise_memory",
    },
}

_STATIC_DEPENDENCIES: dict[str, tuple[str, ...]] = {
    "app_insights": ("log_analytics",),
    "container_apps_env": ("vnet", "log_analytics"),
    "ai_foundry": ("vnet", *CAPABILITY_HOST_DEPENDENCIES),
    "ai_project": ("ai_foundry",),
}


def pe_step_name(component: str) -> str:
    return f"pe:{component}"


def dns_step_name(zone: str) -> str:
    return f"dns:{zone}"


def project_rbac_step_name(component: str) -> str:
    return f"rbac:project:{component}"


def container_rbac_step_name(component: str) -> str:
    return f"rbac:containers:{component}"


def _resource_properties(
    component: str,
    ref: ResourceRef,
    params: LandingZoneParameters,
    refs: dict[str, ResourceRef],
    subnet_ids: dict[str, str],
) -> dict[str, Any]:
    rtype = get_resource_type(component)
    props: dict[str, Any] = {"type": rtype.full_type, "name": ref.name}
    if ref.reuse:
        return props
    props["location"] = params.location
    if params.tags:
        props["tags"] = dict(params.tags)
    net = params.network
    if component == "vnet":
        props["address_space"] = net.address_space
        props["subnets"] = dict(net.subnets)
    elif component == "app_insights" and "log_analytics" in refs:
        props["workspace_id"] = refs["log_analytics"].resource_id
    elif component == "container_apps_env":
        if net.container_apps_subnet in subnet_ids:
            props["infrastructure_subnet_id"] = subnet_ids[net.container_apps_subnet]
        if "log_analytics" in refs:
            props["log_analytics_workspace_id"] = refs["log_analytics"].resource_id
    elif component == "ai_foundry":
        if net.agent_subnet in subnet_ids:
            props["agent_subnet_id"] = subnet_ids[net.agent_subnet]
    elif component == "ai_project":
        props["account_id"] = refs["ai_foundry"].resource_id
    if rtype.supports_private_endpoint:
        props["public_network_access"] = "Disabled" if params.private_endpoints else "Enabled"
    return props


def _add_resource_steps(
    graph: StepGraph,
    params: LandingZoneParameters,
    refs: dict[str, ResourceRef],
    subnet_ids: dict[str, str],
) -> None:
    for component, ref in refs.items():
        deps = [d for d in _STATIC_DEPENDENCIES.get(component, ()) if d in refs]
        graph.add(
            Step(
                name=component,
                kind="resource" if ref.create else "reference",
                component=component,
                depends_on=deps if ref.create else [],
                ref=ref,
                properties=_resource_properties(component, ref, params, refs, subnet_ids),
            )
        )


def _add_private_networking(
    graph: StepGraph,
    params: LandingZoneParameters,
    refs: dict[str, ResourceRef],
    subnet_ids: dict[str, str],
) -> list[str]:
    if not params.private_endpoints:
        return []
    targets = [
        c for c, r in refs.items() if r.create and get_resource_type(c).supports_private_endpoint
    ]
    if not targets:
        return []
    if "vnet" not in refs:
        logger.warning(
            "%s: private endpoints requested but no virtual network is deployed or supplied",
            params.name,
        )
        return []
    zones: list[str] = []
    for component in targets:
        for zone in get_resource_type(component).private_dns_zones:
            if zone not in zones:
                zones.append(zone)
    for zone in zones:
        graph.add(
            Step(
                name=dns_step_name(zone),
                kind="dns_zone",
                depends_on=["vnet"],
                properties={"zone": zone, "vnet_id": refs["vnet"].resource_id},
            )
        )
    pe_subnet = subnet_ids[params.network.private_endpoint_subnet]
    for component in targets:
        rtype = get_resource_type(component)
        graph.add(
            Step(
                name=pe_step_name(component),
                kind="private_endpoint",
                component=component,
                depends_on=[component, "vnet", *(dns_step_name(z) for z in rtype.private_dns_zones)],
                properties={
                    "name": f"pe-{refs[component].name}",
                    "target_id": refs[component].resource_id,
                    "group_id": rtype.private_link_group,
                    "subnet_id": pe_subnet,
                    "dns_zones": list(rtype.private_dns_zones),
                },
            )
        )
    return zones


def _add_agent_setup(
    graph: StepGraph, params: LandingZoneParameters, refs: dict[str, ResourceRef]
) -> None:
    project = refs.get("ai_project")
    if project is None:
        return
    missing = [c for c in CAPABILITY_HOST_DEPENDENCIES if c not in refs]
    if missing:
        logger.info(
            "%s: skipping capability host, missing dependencies %s", params.name, missing
        )
        return
    host_deps = ["ai_project"]
    if params.role_assignments:
        for component in CAPABILITY_HOST_DEPENDENCIES:
            name = project_rbac_step_name(component)
            graph.add(
                Step(
                    name=name,
                    kind="role_assignment",
                    component=component,
                    depends_on=["ai_project", component],
                    properties={
                        "principal": project.resource_id,
                        "scope": refs[component].resource_id,
                        "roles": PROJECT_ROLES[component],
                    },
                )
            )
            host_deps.append(name)
    for component in (*CAPABILITY_HOST_DEPENDENCIES, "ai_foundry"):
        if pe_step_name(component) in graph:
            host_deps.append(pe_step_name(component))
    graph.add(
        Step(
            name=CAPABILITY_HOST,
            kind="capability_host",
            component="ai_project",
            depends_on=host_deps,
            properties={
                "name": f"caphost-{project.name}",
                "project_id": project.resource_id,
                "storage_connections": [refs["storage"].name],
                "thread_storage_connections": [refs["cosmos_db"].name],
                "vector_store_connections": [refs["ai_search"].name],
            },
        )
    )
    if not params.role_assignments:
        return
    for component, spec in CONTAINER_ROLES.items():
        graph.add(
            Step(
                name=container_rbac_step_name(component),
                kind="role_assignment",
                component=component,
                depends_on=[CAPABILITY_HOST],
                properties={
                    "principal": project.resource_id,
                    "scope": f"{refs[component].resource_id}/{spec['scope']}",
                    "roles": list(spec["roles"]),
                },
            )
        )


def build_graph(
    params: LandingZoneParameters,
    refs: dict[str, ResourceRef],
    subnet_ids: dict[str, str],
) -> tuple[StepGraph, list[str]]:
    graph = StepGraph()
    _add_resource_steps(graph, params, refs, subnet_ids)
    zones = _add_private_networking(graph, params, refs, subnet_ids)
    _add_agent_setup(graph, params, refs)
    graph.validate()
    return graph, zones


def build_plan(
    params: LandingZoneParameters,
    *,
    context: DeploymentContext | None = None,
    strict: bool = False,
) -> DeploymentPlan:
    ctx = context or params.context
    token = deployment_token(ctx.subscription_id, ctx.resource_group, ctx.location)
    refs = resolve_all(params, context=ctx, token=token, strict=strict)
    subnet_ids: dict[str, str] = {}
    if "vnet" in refs:
        subnet_ids = {
            name: subnet_id(refs["vnet"].resource_id, name) for name in params.network.subnets
        }
    graph, zones = build_graph(params, refs, subnet_ids)
    ordered = [graph.get(n) for n in topo_sort(graph)]
    logger.info("%s: planned %d steps", params.name, len(ordered))
    return DeploymentPlan(
        parameter_set=params.name,
        context=ctx,
        token=token,
        refs=refs,
        subnet_ids=subnet_ids,
        dns_zones=zones,
        steps=ordered,
        tags=dict(params.tags),
    )


def plan_graph(plan: DeploymentPlan) -> StepGraph:
    return StepGraph(plan.steps)


__all__ = [
    "CAPABILITY_HOST",
    "CONTAINER_ROLES",
    "PROJECT_ROLES",
    "build_graph",
    "build_plan",
    "container_rbac_step_name",
    "dns_step_name",
    "pe_step_name",
    "plan_graph",
    "project_rbac_step_name",
]
