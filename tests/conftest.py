"""Shared fixtures for landing zone tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from landing_zone.domain.models import LandingZoneParameters

REPO_PARAMETERS = Path(__file__).resolve().parents[1] / "src" / "parameters"

STORAGE_ID = (
    "/subscriptions/abc/resourceGroups/rg1/providers/Microsoft.Storage/storageAccounts/mystorage"
)


def make_params(**overrides: Any) -> LandingZoneParameters:
    data: dict[str, Any] = {
        "name": "test",
        "location": "eastus2",
        "subscription_id": "sub-1",
        "resource_group": "rg-test",
    }
    data.update(overrides)
    return LandingZoneParameters(**data)


@pytest.fixture
def params() -> LandingZoneParameters:
    return make_params()


@pytest.fixture
def parameters_root(tmp_path: Path) -> Path:
    root = tmp_path / "parameters"
    root.mkdir()
    (root / "full.yaml").write_text(
        "location: eastus2\n"
        "subscription_id: sub-1\n"
        "resource_group: rg-test\n"
        "base_name: demo\n",
        encoding="utf-8",
    )
    (root / "broken.yaml").write_text("location: eastus2\nfoo: bar\n", encoding="utf-8")
    return root
