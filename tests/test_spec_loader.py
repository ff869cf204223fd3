"""Tests for parameter set loading, validation and overrides."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import STORAGE_ID, make_params
from landing_zone.domain.errors import ParameterSetError
from landing_zone.services.spec_loader import (
    apply_overrides,
    discover_parameter_sets,
    load_parameters,
    parse_parameters,
    resolve_parameter_set,
)


class TestLoading:
    def test_discover(self, parameters_root: Path) -> None:
        assert sorted(discover_parameter_sets(parameters_root)) == ["broken", "full"]

    def test_discover_missing_root(self, tmp_path: Path) -> None:
        assert discover_parameter_sets(tmp_path / "nope") == {}

    def test_name_defaults_to_stem(self, parameters_root: Path) -> None:
        params = load_parameters(parameters_root / "full.yaml")
        assert params.name == "full"
        assert params.base_name == "demo"
        assert params.private_endpoints is True

    def test_unknown_fields_rejected(self, parameters_root: Path) -> None:
        with pytest.raises(ParameterSetError, match="foo"):
            load_parameters(parameters_root / "broken.yaml")

    def test_root_must_be_mapping(self, tmp_path: Path) -> None:
        p = tmp_path / "list.yaml"
        p.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ParameterSetError, match="mapping"):
            load_parameters(p)

    def test_unknown_component_rejected(self) -> None:
        with pytest.raises(ParameterSetError, match="unknown components"):
            parse_parameters(
                {
                    "name": "x",
                    "location": "l",
                    "subscription_id": "s",
                    "resource_group": "g",
                    "deploy": {"mainframe": True},
                }
            )

    def test_subnet_roles_must_exist(self) -> None:
        with pytest.raises(ParameterSetError, match="pe-subnet"):
            parse_parameters(
                {
                    "name": "x",
                    "location": "l",
                    "subscription_id": "s",
                    "resource_group": "g",
                    "network": {"subnets": {"agent-subnet": "10.0.0.0/24"}},
                }
            )

    def test_resolve_missing_set(self, parameters_root: Path) -> None:
        with pytest.raises(ParameterSetError, match="not found"):
            resolve_parameter_set("ghost", parameters_root)

    def test_existing_ids_are_stripped(self) -> None:
        params = make_params(existing={"storage": f"  {STORAGE_ID} "})
        assert params.existing["storage"] == STORAGE_ID


class TestOverrides:
    def test_nested_toggle(self) -> None:
        params = apply_overrides(make_params(), ["deploy.storage=false"])
        assert params.deploy == {"storage": False}

    def test_existing_id(self) -> None:
        params = apply_overrides(make_params(), [f"existing.storage={STORAGE_ID}"])
        assert params.existing["storage"] == STORAGE_ID

    def test_scalar(self) -> None:
        params = apply_overrides(make_params(), ["location=westus3", "private_endpoints=false"])
        assert params.location == "westus3"
        assert params.private_endpoints is False

    def test_digit_values_stay_strings_for_string_fields(self) -> None:
        params = apply_overrides(make_params(), ["names.storage=123", "tags.cost_center=42"])
        assert params.names == {"storage": "123"}
        assert params.tags == {"cost_center": "42"}

    def test_bool_strings_converted_by_field_type(self) -> None:
        params = apply_overrides(make_params(), ["deploy.vnet=true", "tags.flag=true"])
        assert params.deploy == {"vnet": True}
        assert params.tags == {"flag": "true"}

    def test_unknown_key(self) -> None:
        with pytest.raises(ParameterSetError, match="Unknown override key"):
            apply_overrides(make_params(), ["colour=blue"])

    def test_malformed(self) -> None:
        with pytest.raises(ParameterSetError, match="key=value"):
            apply_overrides(make_params(), ["deploy.storage"])

    def test_original_untouched(self) -> None:
        original = make_params()
        apply_overrides(original, ["deploy.vnet=false"])
        assert original.deploy == {}
