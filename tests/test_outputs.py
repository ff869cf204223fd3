"""Tests for outputs collection, artifacts and bicepparam rendering."""

from __future__ import annotations

from pathlib import Path

from conftest import STORAGE_ID, make_params
from landing_zone.infrastructure.artifacts import (
    ensure_run_dir,
    read_json,
    write_bicepparam,
    write_plan_artifacts,
)
from landing_zone.infrastructure.templating.engine import _f_bicep, render_bicepparam
from landing_zone.services.executor import execute_plan
from landing_zone.services.outputs import collect_outputs
from landing_zone.services.stages import CAPABILITY_HOST, build_plan


class TestCollectOutputs:
    def test_plan_only(self) -> None:
        plan = build_plan(make_params())
        outputs = collect_outputs(plan)
        assert outputs.resource_ids["storage"] == plan.refs["storage"].resource_id
        assert outputs.endpoints["key_vault"] == f"https://{plan.refs['key_vault'].name}.vault.azure.net/"
        assert "vnet" not in outputs.endpoints
        assert outputs.subnet_ids == plan.subnet_ids
        assert CAPABILITY_HOST not in outputs.resource_ids

    def test_with_report(self) -> None:
        plan = build_plan(make_params())
        outputs = collect_outputs(plan, execute_plan(plan, show_progress=False))
        assert CAPABILITY_HOST in outputs.resource_ids
        assert set(plan.refs) <= set(outputs.resource_ids)

    def test_reused_resource_outputs(self) -> None:
        plan = build_plan(make_params(existing={"storage": STORAGE_ID}))
        outputs = collect_outputs(plan)
        assert outputs.names["storage"] == "mystorage"
        assert outputs.endpoints["storage"] == "https://mystorage.blob.core.windows.net/"


class TestArtifacts:
    def test_write_plan_artifacts(self, tmp_path: Path) -> None:
        plan = build_plan(make_params())
        report = execute_plan(plan, show_progress=False)
        run_dir = ensure_run_dir(tmp_path / "test", "2026-01-01_00-00-00")
        written = write_plan_artifacts(run_dir, plan, collect_outputs(plan, report), report)
        assert [p.name for p in written] == ["plan.json", "outputs.json", "report.json"]
        assert (tmp_path / "test" / "latest.txt").read_text(encoding="utf-8") == "2026-01-01_00-00-00"
        data = read_json(run_dir / "report.json")
        assert data["succeeded"] is True
        assert read_json(run_dir / "plan.json")["token"] == plan.token


class TestBicepparam:
    def test_literals(self) -> None:
        assert _f_bicep(True) == "true"
        assert _f_bicep("it's") == "'it\\'s'"
        assert _f_bicep({}) == "{}"
        assert _f_bicep({"a": 1}) == "{\n  a: 1\n}"
        assert _f_bicep(["x"]) == "[\n  'x'\n]"

    def test_render(self, tmp_path: Path) -> None:
        params = make_params(existing={"storage": STORAGE_ID}, tags={"env": "dev"})
        plan = build_plan(params)
        text = render_bicepparam(plan, params)
        assert text.startswith("// Generated for parameter set 'test'")
        assert "using './main.bicep'" in text
        assert "param location = 'eastus2'" in text
        assert f"storageResourceId: '{STORAGE_ID}'" in text
        assert "cosmosDbResourceId: ''" in text
        assert "storage: false" in text
        assert "cosmosDb: true" in text
        assert "env: 'dev'" in text
        path = write_bicepparam(tmp_path, text)
        assert path.read_text(encoding="utf-8") == text

    def test_non_identifier_keys_quoted(self) -> None:
        assert _f_bicep({"agent-subnet": "10.0.0.0/24", "ok_key": 1}) == (
            "{\n  'agent-subnet': '10.0.0.0/24'\n  ok_key: 1\n}"
        )
        params = make_params(tags={"cost-center": "42", "env": "dev"})
        text = render_bicepparam(build_plan(params), params)
        for subnet in ("agent-subnet", "pe-subnet", "aca-env-subnet"):
            assert f"'{subnet}': " in text
            assert f" {subnet}: " not in text
        assert "'cost-center': '42'" in text
        assert "  env: 'dev'" in text
        assert "addressSpace: " in text
