"""Static catalog of landing zone components.

One entry per logical resource the landing zone can create or reuse. Values
mirror the Azure naming abbreviations and private link zones; update them
centrally here.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from landing_zone.domain.errors import UnknownComponentError


@dataclass(frozen=True, slots=True)
class ResourceType:
    key: str
    provider: str
    type: str
    prefix: str
    max_length: int
    alphanumeric_only: bool = False
    endpoint_template: str | None = None
    private_link_group: str | None = None
    private_dns_zones: tuple[str, ...] = field(default_factory=tuple)
    parent: str | None = None
    deploy_by_default: bool = True

    @property
    def full_type(self) -> str:
        return f"{self.provider}/{self.type}"

    @property
    def supports_private_endpoint(self) -> bool:
        return self.private_link_group is not None

    def endpoint(self, name: str) -> str | None:
        if self.endpoint_template is None:
            return None
        return self.endpoint_template.format(name=name)


_CATALOG: Mapping[str, ResourceType] = {
    "log_analytics": ResourceType(
        "log_analytics", "Microsoft.OperationalInsights", "workspaces", "log-", 63
    ),
    "app_insights": ResourceType(
        "app_insights", "Microsoft.Insights", "components", "appi-", 260
    ),
    "vnet": ResourceType("vnet", "Microsoft.Network", "virtualNetworks", "vnet-", 64),
    "key_vault": ResourceType(
        "key_vault",
        "Microsoft.KeyVault",
        "vaults",
        "kv-",
        24,
        endpoint_template="https://{name}.vault.azure.net/",
        private_link_group="vault",
        private_dns_zones=("privatelink.vaultcore.azure.net",),
    ),
    "storage": ResourceType(
        "storage",
        "Microsoft.Storage",
        "storageAccounts",
        "st",
        24,
        alphanumeric_only=True,
        endpoint_template="https://{name}.blob.core.windows.net/",
        private_link_group="blob",
        private_dns_zones=("privatelink.blob.core.windows.net",),
    ),
    "cosmos_db": ResourceType(
        "cosmos_db",
        "Microsoft.DocumentDB",
        "databaseAccounts",
        "cosmos-",
        44,
        endpoint_template="https://{name}.documents.azure.com:443/",
        private_link_group="Sql",
        private_dns_zones=("privatelink.documents.azure.com",),
    ),
    "ai_search": ResourceType(
        "ai_search",
        "Microsoft.Search",
        "searchServices",
        "srch-",
        60,
        endpoint_template="https://{name}.search.windows.net",
        private_link_group="searchService",
        private_dns_zones=("privatelink.search.windows.net",),
    ),
    "container_registry": ResourceType(
        "container_registry",
        "Microsoft.ContainerRegistry",
        "registries",
        "cr",
        50,
        alphanumeric_only=True,
        endpoint_template="{name}.azurecr.io",
        private_link_group="registry",
        private_dns_zones=("privatelink.azurecr.io",),
    ),
    "container_apps_env": ResourceType(
        "container_apps_env", "Microsoft.App", "managedEnvironments", "cae-", 60
    ),
    "ai_foundry": ResourceType(
        "ai_foundry",
        "Microsoft.CognitiveServices",
        "accounts",
        "aif",
        64,
        alphanumeric_only=True,
        endpoint_template="https://{name}.services.ai.azure.com/",
        private_link_group="account",
        private_dns_zones=(
            "privatelink.cognitiveservices.azure.com",
            "privatelink.openai.azure.com",
            "privatelink.services.ai.azure.com",
        ),
    ),
    "ai_project": ResourceType(
        "ai_project",
        "Microsoft.CognitiveServices",
        "accounts/projects",
        "proj-",
        64,
        parent="ai_foundry",
    ),
}

COMPONENTS: tuple[str, ...] = tuple(_CATALOG)

# Resources the AI Foundry capability host binds to the project.
CAPABILITY_HOST_DEPENDENCIES: tuple[str, ...] = ("storage", "cosmos_db", "ai_search")


def get_resource_type(key: str) -> ResourceType:
    try:
        return _CATALOG[key]
    except KeyError:
        raise UnknownComponentError(key) from None


def iter_resource_types() -> list[ResourceType]:
    return list(_CATALOG.values())


__all__ = [
    "CAPABILITY_HOST_DEPENDENCIES",
    "COMPONENTS",
    "ResourceType",
    "get_resource_type",
    "iter_resource_types",
]
