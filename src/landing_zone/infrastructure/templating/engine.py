"""Templating engine (Jinja2) used to render parameter files for the deployment engine.

Templates live next to this module under ``templates/``. Undefined variables
raise so a half-rendered parameter file never reaches the engine.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from landing_zone.domain.catalog import COMPONENTS
from landing_zone.domain.models import DeploymentPlan, LandingZoneParameters

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


# ---------------------------- Filters & Globals ---------------------------- #

def _f_camel(value: str) -> str:
    head, *rest = value.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _bicep_string(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _bicep_key(key: str) -> str:
    return key if _IDENTIFIER.match(key) else _bicep_string(key)


def _f_bicep(value: Any, indent: int = 0) -> str:
    """Render a Python value as a Bicep literal."""
    pad = "  " * indent
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if value is None:
        return "null"
    if isinstance(value, str):
        return _bicep_string(value)
    if isinstance(value, dict):
        if not value:
            return "{}"
        lines = [
            f"{pad}  {_bicep_key(str(k))}: {_f_bicep(v, indent + 1)}" for k, v in value.items()
        ]
        return "{\n" + "\n".join(lines) + f"\n{pad}}}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        lines = [f"{pad}  {_f_bicep(v, indent + 1)}" for v in value]
        return "[\n" + "\n".join(lines) + f"\n{pad}]"
    raise TypeError(f"Cannot render {type(value).__name__} as Bicep")


_env.filters["bicep"] = _f_bicep


# ----------------------------- Render Function ----------------------------- #

def render_template(name: str, ctx: dict[str, Any]) -> str:
    return _env.get_template(name).render(**ctx)


def render_bicepparam(
    plan: DeploymentPlan,
    params: LandingZoneParameters,
    *,
    template: str = "main.bicepparam.j2",
) -> str:
    """Render the ``.bicepparam`` file handing resolved decisions to the engine."""
    toggles = {_f_camel(c): c in plan.refs and plan.refs[c].create for c in COMPONENTS}
    resource_ids = {
        f"{_f_camel(c)}ResourceId": (plan.refs[c].resource_id if c in plan.refs and plan.refs[c].reuse else "")
        for c in COMPONENTS
    }
    names = {_f_camel(c): ref.name for c, ref in plan.refs.items() if ref.create}
    ctx = {
        "plan": plan,
        "location": plan.context.location,
        "base_name": params.base_name or "",
        "token": plan.token,
        "deploy_toggles": toggles,
        "resource_ids": resource_ids,
        "resource_names": names,
        "network": {
            "addressSpace": params.network.address_space,
            "subnets": dict(params.network.subnets),
        },
        "private_endpoints": params.private_endpoints,
        "tags": dict(params.tags),
    }
    return render_template(template, ctx)


__all__ = ["render_bicepparam", "render_template"]
