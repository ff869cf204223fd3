"""Resolve landing zone components to create-or-reuse resource references.

Every component follows the same rule: a non-empty existing resource id means
"reuse" and is parsed into subscription / resource group / name so it can be
referenced from another scope; an empty one means "create" under a name
derived from the deployment token.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping

from landing_zone.domain.catalog import COMPONENTS, get_resource_type
from landing_zone.domain.errors import InvalidResourceIdError, ParameterSetError
from landing_zone.domain.models import (
    DeploymentContext,
    LandingZoneParameters,
    ResourceIdParts,
    ResourceRef,
)
from landing_zone.services.naming import build_resource_id, default_name, deployment_token

logger = logging.getLogger(__name__)

# "", "subscriptions", sub, "resourceGroups", rg, "providers", namespace, type, name
MIN_SEGMENTS = 9


def should_create(existing_id: str | None) -> bool:
    return not (existing_id or "").strip()


def _validate_segments(resource_id: str, segments: list[str]) -> None:
    if len(segments) < MIN_SEGMENTS:
        raise InvalidResourceIdError(
            resource_id, f"expected at least {MIN_SEGMENTS} segments, got {len(segments)}"
        )
    if segments[0] != "":
        raise InvalidResourceIdError(resource_id, "must start with '/'")
    expected = {1: "subscriptions", 3: "resourcegroups", 5: "providers"}
    for idx, keyword in expected.items():
        if segments[idx].lower() != keyword:
            raise InvalidResourceIdError(
                resource_id, f"segment {idx} should be '{keyword}', got '{segments[idx]}'"
            )
    if (len(segments) - 7) % 2:
        raise InvalidResourceIdError(resource_id, "type/name segments are unbalanced")
    if any(not s for s in segments[1:]):
        raise InvalidResourceIdError(resource_id, "contains empty segments")


def parse_resource_id(resource_id: str, *, strict: bool = False) -> ResourceIdParts:
    """Split a resource id into its subscription, resource group and name segments.

    Segments 2 and 4 are the subscription and resource group, the last element
    is the name. Ids shorter than ``MIN_SEGMENTS`` yield empty fields unless
    ``strict`` is set, in which case any malformed id raises
    ``InvalidResourceIdError``.
    """
    segments = (resource_id or "").strip().split("/")
    if strict:
        _validate_segments(resource_id, segments)
    if len(segments) < MIN_SEGMENTS:
        return ResourceIdParts()
    return ResourceIdParts(
        subscription_id=segments[2],
        resource_group=segments[4],
        provider=segments[6],
        resource_type="/".join(segments[7::2]),
        name=segments[-1],
    )


def resolve(
    existing_id: str | None,
    desired_name: str | None,
    token_suffix: str,
    *,
    context: DeploymentContext,
    component: str,
    base_name: str | None = None,
    parent: ResourceRef | None = None,
    strict: bool = False,
) -> ResourceRef:
    rtype = get_resource_type(component)
    if not should_create(existing_id):
        rid = (existing_id or "").strip()
        parts = parse_resource_id(rid, strict=strict)
        logger.debug("%s: reusing %s", component, rid)
        return ResourceRef(
            component=component,
            action="reuse",
            name=parts.name,
            subscription_id=parts.subscription_id,
            resource_group=parts.resource_group,
            resource_id=rid,
        )
    name = desired_name or default_name(rtype, token_suffix, base_name)
    subscription_id = parent.subscription_id if parent else context.subscription_id
    resource_group = parent.resource_group if parent else context.resource_group
    resource_id = build_resource_id(
        subscription_id,
        resource_group,
        rtype,
        name,
        parent_id=parent.resource_id if parent else None,
    )
    logger.debug("%s: creating %s", component, name)
    return ResourceRef(
        component=component,
        action="create",
        name=name,
        subscription_id=subscription_id,
        resource_group=resource_group,
        resource_id=resource_id,
    )


def is_enabled(params: LandingZoneParameters, component: str) -> bool:
    rtype = get_resource_type(component)
    return params.deploy.get(component, rtype.deploy_by_default)


def resolve_component(
    params: LandingZoneParameters,
    component: str,
    *,
    context: DeploymentContext,
    token: str,
    resolved: Mapping[str, ResourceRef] | None = None,
    strict: bool = False,
) -> ResourceRef | None:
    """Resolve one component, or return None when it is neither supplied nor enabled."""
    rtype = get_resource_type(component)
    existing_id = params.existing.get(component, "")
    if should_create(existing_id) and not is_enabled(params, component):
        logger.debug("%s: disabled", component)
        return None
    parent: ResourceRef | None = None
    if rtype.parent and should_create(existing_id):
        parent = (resolved or {}).get(rtype.parent)
        if parent is None:
            raise ParameterSetError(
                f"{params.name}: '{component}' requires '{rtype.parent}' to be deployed or supplied"
            )
    return resolve(
        existing_id,
        params.names.get(component),
        token,
        context=context,
        component=component,
        base_name=params.base_name,
        parent=parent,
        strict=strict,
    )


def resolve_all(
    params: LandingZoneParameters,
    *,
    context: DeploymentContext | None = None,
    token: str | None = None,
    strict: bool = False,
) -> dict[str, ResourceRef]:
    ctx = context or params.context
    tok = token or deployment_token(ctx.subscription_id, ctx.resource_group, ctx.location)
    out: dict[str, ResourceRef] = {}
    for component in COMPONENTS:
        ref = resolve_component(
            params, component, context=ctx, token=tok, resolved=out, strict=strict
        )
        if ref is not None:
            out[component] = ref
    logger.info(
        "Resolved %d components (%d create, %d reuse)",
        len(out),
        sum(1 for r in out.values() if r.create),
        sum(1 for r in out.values() if r.reuse),
    )
    return out


__all__ = [
    "MIN_SEGMENTS",
    "is_enabled",
    "parse_resource_id",
    "resolve",
    "resolve_all",
    "resolve_component",
    "should_create",
]
