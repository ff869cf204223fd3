"""Exception hierarchy shared by the resolver, graph, loader and executor layers."""
from __future__ import annotations


class LandingZoneError(Exception):
    """Root of all errors raised by the landing zone planner."""


class InvalidResourceIdError(LandingZoneError, ValueError):
    def __init__(self, resource_id: str, reason: str) -> None:
        super().__init__(f"Invalid resource id '{resource_id}': {reason}")
        self.resource_id = resource_id
        self.reason = reason


class UnknownComponentError(LandingZoneError, KeyError):
    def __init__(self, component: str) -> None:
        super().__init__(component)
        self.component = component

    def __str__(self) -> str:
        return f"Unknown landing zone component: {self.component}"


class ParameterSetError(LandingZoneError, ValueError):
    """A parameter set file could not be read or failed validation."""


class GraphError(LandingZoneError):
    """Base for step graph construction and ordering errors."""


class DuplicateStepError(GraphError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Step '{name}' is already defined")
        self.name = name


class UnknownStepError(GraphError, ValueError):
    def __init__(self, name: str, referenced_by: str | None = None) -> None:
        msg = f"Step '{name}' not found"
        if referenced_by:
            msg += f" (required by '{referenced_by}')"
        super().__init__(msg)
        self.name = name
        self.referenced_by = referenced_by


class CycleError(GraphError, RuntimeError):
    def __init__(self, cycle: list[str]) -> None:
        super().__init__("Cycle detected: " + " -> ".join(cycle))
        self.cycle = cycle


class ProvisioningError(LandingZoneError, RuntimeError):
    """Raised by a provisioner when a step cannot be carried out."""

    def __init__(self, step: str, message: str) -> None:
        super().__init__(f"{step}: {message}")
        self.step = step


__all__ = [
    "CycleError",
    "DuplicateStepError",
    "GraphError",
    "InvalidResourceIdError",
    "LandingZoneError",
    "ParameterSetError",
    "ProvisioningError",
    "UnknownComponentError",
    "UnknownStepError",
]
