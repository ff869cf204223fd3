"""Domain models (Pydantic) defining the contracts between resolver, planner and executor."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from landing_zone.domain.catalog import COMPONENTS

ResourceAction = Literal["create", "reuse"]
StepKind = Literal[
    "resource",
    "reference",
    "dns_zone",
    "private_endpoint",
    "role_assignment",
    "capability_host",
]
StepStatus = Literal["succeeded", "failed", "blocked", "skipped"]


# -------------------- Resource references -------------------- #


class ResourceIdParts(BaseModel):
    """Segments of a fully-qualified resource id.

    Fields are empty strings when the id was too short to contain them.
    """

    model_config = ConfigDict(frozen=True)

    subscription_id: str = ""
    resource_group: str = ""
    provider: str = ""
    resource_type: str = ""
    name: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.subscription_id and self.resource_group and self.name)


class DeploymentContext(BaseModel):
    """Scope the deployment is evaluated in."""

    model_config = ConfigDict(frozen=True)

    subscription_id: str
    resource_group: str
    location: str


class ResourceRef(BaseModel):
    """Resolved reference: either a resource this deployment creates or one it reuses."""

    model_config = ConfigDict(frozen=True)

    component: str
    action: ResourceAction
    name: str
    subscription_id: str
    resource_group: str
    resource_id: str

    @property
    def create(self) -> bool:
        return self.action == "create"

    @property
    def reuse(self) -> bool:
        return self.action == "reuse"


# -------------------- Parameter sets -------------------- #


class NetworkSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    address_space: str = "10.0.0.0/16"
    subnets: dict[str, str] = Field(
        default_factory=lambda: {
            "agent-subnet": "10.0.0.0/24",
            "pe-subnet": "10.0.1.0/24",
            "aca-env-subnet": "10.0.2.0/23",
            "jumpbox-subnet": "10.0.4.0/24",
        }
    )
    private_endpoint_subnet: str = "pe-subnet"
    agent_subnet: str = "agent-subnet"
    container_apps_subnet: str = "aca-env-subnet"

    @model_validator(mode="after")
    def _check_subnet_roles(self) -> NetworkSpec:
        for role in ("private_endpoint_subnet", "agent_subnet", "container_apps_subnet"):
            subnet = getattr(self, role)
            if subnet not in self.subnets:
                raise ValueError(f"{role} '{subnet}' is not declared in subnets")
        return self


class LandingZoneParameters(BaseModel):
    """User-authored parameter set (YAML) describing one landing zone deployment.

    ``existing`` maps a component to the id of a resource to reuse; an empty
    string means "create". ``deploy`` toggles creation of components that have
    no existing id; components missing from it use the catalog default.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    description: str | None = None
    location: str
    subscription_id: str
    resource_group: str
    base_name: str | None = None
    deploy: dict[str, bool] = Field(default_factory=dict)
    existing: dict[str, str] = Field(default_factory=dict)
    names: dict[str, str] = Field(default_factory=dict)
    tags: dict[str, str] = Field(default_factory=dict)
    network: NetworkSpec = Field(default_factory=NetworkSpec)
    private_endpoints: bool = True
    role_assignments: bool = True

    @field_validator("deploy", "existing", "names")
    @classmethod
    def _known_components(cls, value: dict[str, Any]) -> dict[str, Any]:
        unknown = sorted(set(value) - set(COMPONENTS))
        if unknown:
            raise ValueError(f"unknown components: {unknown}")
        return value

    @field_validator("existing")
    @classmethod
    def _strip_ids(cls, value: dict[str, str]) -> dict[str, str]:
        return {k: (v or "").strip() for k, v in value.items()}

    @property
    def context(self) -> DeploymentContext:
        return DeploymentContext(
            subscription_id=self.subscription_id,
            resource_group=self.resource_group,
            location=self.location,
        )


# -------------------- Plan & execution -------------------- #


class Step(BaseModel):
    """One node of the deployment graph."""

    name: str
    kind: StepKind
    component: str | None = None
    depends_on: list[str] = Field(default_factory=list)
    ref: ResourceRef | None = None
    properties: dict[str, Any] = Field(default_factory=dict)


class DeploymentPlan(BaseModel):
    parameter_set: str
    context: DeploymentContext
    token: str
    refs: dict[str, ResourceRef] = Field(default_factory=dict)
    subnet_ids: dict[str, str] = Field(default_factory=dict)
    dns_zones: list[str] = Field(default_factory=list)
    steps: list[Step] = Field(default_factory=list)
    tags: dict[str, str] = Field(default_factory=dict)

    def step(self, name: str) -> Step:
        for s in self.steps:
            if s.name == name:
                return s
        raise KeyError(name)

    @property
    def step_names(self) -> list[str]:
        return [s.name for s in self.steps]


class StepResult(BaseModel):
    name: str
    status: StepStatus
    outputs: dict[str, Any] = Field(default_factory=dict)
    error_message: str | None = None
    elapsed_ms: float | None = None


class ExecutionReport(BaseModel):
    parameter_set: str
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    results: list[StepResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(r.status == "succeeded" for r in self.results)

    def result(self, name: str) -> StepResult | None:
        for r in self.results:
            if r.name == name:
                return r
        return None

    def counts(self) -> dict[str, int]:
        out: dict[str, int] = {}
        for r in self.results:
            out[r.status] = out.get(r.status, 0) + 1
        return out


class DeploymentOutputs(BaseModel):
    """Values consumed by downstream deployment stages or application config."""

    resource_ids: dict[str, str] = Field(default_factory=dict)
    names: dict[str, str] = Field(default_factory=dict)
    endpoints: dict[str, str] = Field(default_factory=dict)
    subnet_ids: dict[str, str] = Field(default_factory=dict)
    private_dns_zones: list[str] = Field(default_factory=list)


__all__ = [
    "DeploymentContext",
    "DeploymentOutputs",
    "DeploymentPlan",
    "ExecutionReport",
    "LandingZoneParameters",
    "NetworkSpec",
    "ResourceAction",
    "ResourceIdParts",
    "ResourceRef",
    "Step",
    "StepKind",
    "StepResult",
    "StepStatus",
]
