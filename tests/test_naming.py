"""Tests for the deployment token and default names."""

from __future__ import annotations

from landing_zone.domain.catalog import get_resource_type
from landing_zone.services.naming import (
    TOKEN_LENGTH,
    default_name,
    deployment_token,
    sanitize_name,
    subnet_id,
)


class TestDeploymentToken:
    def test_deterministic(self) -> None:
        assert deployment_token("s", "rg", "eastus") == deployment_token("s", "rg", "eastus")

    def test_shape(self) -> None:
        token = deployment_token("s", "rg", "eastus")
        assert len(token) == TOKEN_LENGTH
        assert token.isalnum() and token == token.lower()

    def test_sensitive_to_each_input(self) -> None:
        base = deployment_token("s", "rg", "eastus")
        assert deployment_token("s2", "rg", "eastus") != base
        assert deployment_token("s", "rg2", "eastus") != base
        assert deployment_token("s", "rg", "westus") != base

    def test_case_insensitive(self) -> None:
        assert deployment_token("S", "RG", "EastUS") == deployment_token("s", "rg", "eastus")


class TestDefaultName:
    def test_storage_is_alphanumeric_and_bounded(self) -> None:
        storage = get_resource_type("storage")
        name = default_name(storage, "abcdefghijklm", "My-Very-Long-Base-Name")
        assert name.isalnum()
        assert len(name) <= storage.max_length
        assert name.startswith("st")
        assert name.endswith("abcdefghijklm")

    def test_hyphenated_types_keep_separator(self) -> None:
        kv = get_resource_type("key_vault")
        assert default_name(kv, "tok", "demo") == "kv-demo-tok"

    def test_without_base_name(self) -> None:
        assert default_name(get_resource_type("ai_search"), "tok") == "srch-tok"

    def test_sanitize_strips_invalid_characters(self) -> None:
        assert sanitize_name("Cosmos_DB!", get_resource_type("cosmos_db")) == "cosmos-db"


def test_subnet_id() -> None:
    assert subnet_id("/vnet/", "pe-subnet") == "/vnet/subnets/pe-subnet"
