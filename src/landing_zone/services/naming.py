"""Deterministic deployment token & default resource names.

The token plays the role of the deployment engine's ``uniqueString``: a short,
stable string derived from subscription, resource group and region so default
names are unique per deployment scope yet identical across re-evaluations.
"""
from __future__ import annotations

import base64
import hashlib
import re

from landing_zone.domain.catalog import ResourceType

TOKEN_LENGTH = 13

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_NON_NAME = re.compile(r"[^a-z0-9-]")


def deployment_token(
    subscription_id: str, resource_group: str, location: str, *, length: int = TOKEN_LENGTH
) -> str:
    seed = "|".join(part.strip().lower() for part in (subscription_id, resource_group, location))
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return base64.b32encode(digest).decode("ascii").lower()[:length]


def sanitize_name(raw: str, resource_type: ResourceType) -> str:
    name = raw.lower()
    if resource_type.alphanumeric_only:
        name = _NON_ALNUM.sub("", name)
    else:
        name = _NON_NAME.sub("-", name).strip("-")
    return name[: resource_type.max_length].rstrip("-")


def default_name(resource_type: ResourceType, token: str, base_name: str | None = None) -> str:
    """Compose ``prefix + base_name + token`` sanitized for the resource type.

    The token is kept whole when truncating so names stay unique; the base name
    is shortened instead.
    """
    prefix = resource_type.prefix
    stem = base_name or ""
    if stem and not resource_type.alphanumeric_only:
        stem = f"{stem}-"
    budget = resource_type.max_length - len(prefix) - len(token)
    stem = stem[: max(0, budget)]
    return sanitize_name(f"{prefix}{stem}{token}", resource_type)


def subnet_id(vnet_id: str, subnet_name: str) -> str:
    return f"{vnet_id.rstrip('/')}/subnets/{subnet_name}"


def build_resource_id(
    subscription_id: str,
    resource_group: str,
    resource_type: ResourceType,
    name: str,
    *,
    parent_id: str | None = None,
) -> str:
    if parent_id:
        child = resource_type.type.rsplit("/", 1)[-1]
        return f"{parent_id}/{child}/{name}"
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/{resource_type.full_type}/{name}"
    )


__all__ = [
    "TOKEN_LENGTH",
    "build_resource_id",
    "default_name",
    "deployment_token",
    "sanitize_name",
    "subnet_id",
]
