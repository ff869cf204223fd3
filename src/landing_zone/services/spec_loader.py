"""Parameter set loading & validation service.

A parameter set is one YAML file describing a landing zone deployment; the
file stem is its default name.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from landing_zone.domain.errors import ParameterSetError
from landing_zone.domain.models import LandingZoneParameters

ALLOWED_FIELDS = set(LandingZoneParameters.model_fields.keys())


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ParameterSetError(f"{path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ParameterSetError(f"{path}: parameter set root must be a mapping")
    return data


def discover_parameter_sets(root: Path) -> dict[str, Path]:
    out: dict[str, Path] = {}
    if not root.exists():
        return out
    for p in sorted(root.iterdir()):
        if p.is_file() and p.suffix in {".yaml", ".yml"}:
            out[p.stem] = p
    return out


def parse_parameters(raw: dict[str, Any], *, source: str = "<memory>") -> LandingZoneParameters:
    unknown = set(raw.keys()) - ALLOWED_FIELDS
    if unknown:
        raise ParameterSetError(f"{source}: unknown fields {sorted(unknown)}")
    try:
        return LandingZoneParameters(**raw)
    except ValidationError as exc:
        raise ParameterSetError(f"{source}: {exc}") from exc


def load_parameters(path: Path) -> LandingZoneParameters:
    raw = _load_yaml(path)
    raw.setdefault("name", path.stem)
    return parse_parameters(raw, source=str(path))


def resolve_parameter_set(name: str, root: Path) -> LandingZoneParameters:
    mapping = discover_parameter_sets(root)
    if name not in mapping:
        raise ParameterSetError(f"Parameter set '{name}' not found in {root}")
    return load_parameters(mapping[name])


def apply_overrides(params: LandingZoneParameters, overrides: list[str]) -> LandingZoneParameters:
    """Apply ``key=value`` overrides; dotted keys address nested mappings.

    ``deploy.storage=false`` or ``existing.ai_search=/subscriptions/...``.
    Values stay strings; field types decide the conversion.
    """
    data = params.model_dump()
    for item in overrides:
        if "=" not in item:
            raise ParameterSetError(f"Override must be key=value: {item}")
        key, value = item.split("=", 1)
        path = key.strip().split(".")
        if path[0] not in ALLOWED_FIELDS:
            raise ParameterSetError(f"Unknown override key: {key}")
        target = data
        for part in path[:-1]:
            nested = target.setdefault(part, {})
            if not isinstance(nested, dict):
                raise ParameterSetError(f"Cannot override inside scalar field: {key}")
            target = nested
        target[path[-1]] = value.strip()
    return parse_parameters(data, source=f"{params.name} (overrides)")


__all__ = [
    "apply_overrides",
    "discover_parameter_sets",
    "load_parameters",
    "parse_parameters",
    "resolve_parameter_set",
]
