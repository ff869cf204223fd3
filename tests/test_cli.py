"""CLI tests (typer CliRunner)."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from conftest import STORAGE_ID
from landing_zone.cli import app
from landing_zone.runtime import AppContext

runner = CliRunner()


@pytest.fixture(autouse=True)
def _config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    out = tmp_path / "out"
    cfg = tmp_path / "config.yaml"
    cfg.write_text(f"output_root: {out.as_posix()}\nfail_fast: true\n", encoding="utf-8")
    monkeypatch.setenv("LZ_CONFIG", str(cfg))
    AppContext.reset()
    yield out
    AppContext.reset()


class TestInspect:
    def test_list(self, parameters_root: Path) -> None:
        result = runner.invoke(app, ["list", "--root", str(parameters_root)])
        assert result.exit_code == 0, result.output
        assert "full" in result.output
        assert "broken" in result.output

    def test_list_empty(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["list", "--root", str(tmp_path / "none")])
        assert result.exit_code == 0
        assert "No parameter sets found" in result.output

    def test_show(self, parameters_root: Path) -> None:
        result = runner.invoke(app, ["show", "full", "--root", str(parameters_root)])
        assert result.exit_code == 0, result.output
        assert "create" in result.output

    def test_show_missing(self, parameters_root: Path) -> None:
        result = runner.invoke(app, ["show", "ghost", "--root", str(parameters_root)])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_resolve(self) -> None:
        result = runner.invoke(app, ["resolve", STORAGE_ID])
        assert result.exit_code == 0, result.output
        assert "mystorage" in result.output
        assert "rg1" in result.output

    def test_resolve_incomplete_warns(self) -> None:
        result = runner.invoke(app, ["resolve", "/subscriptions/abc"])
        assert result.exit_code == 0, result.output
        assert "incomplete resource id" in result.output

    def test_resolve_complete_no_warning(self) -> None:
        result = runner.invoke(app, ["resolve", STORAGE_ID])
        assert "incomplete" not in result.output

    def test_resolve_strict_rejects(self) -> None:
        result = runner.invoke(app, ["resolve", "/bogus", "--strict"])
        assert result.exit_code == 1
        assert "error" in result.output

    def test_order(self, parameters_root: Path) -> None:
        result = runner.invoke(app, ["order", "full", "--root", str(parameters_root)])
        assert result.exit_code == 0, result.output
        assert "capability_host" in result.output

    def test_order_layers(self, parameters_root: Path) -> None:
        result = runner.invoke(app, ["order", "full", "--root", str(parameters_root), "--layers"])
        assert result.exit_code == 0, result.output
        assert "0:" in result.output


class TestPlan:
    def test_plan_writes_artifacts(self, parameters_root: Path, _config: Path) -> None:
        result = runner.invoke(app, ["plan", "full", "--root", str(parameters_root)])
        assert result.exit_code == 0, result.output
        set_dir = _config / "full"
        stamp = (set_dir / "latest.txt").read_text(encoding="utf-8")
        run_dir = set_dir / stamp
        for name in ("plan.json", "outputs.json", "report.json", "main.bicepparam"):
            assert (run_dir / name).exists()

    def test_plan_with_override_and_target(self, parameters_root: Path, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            [
                "plan",
                "full",
                "--root",
                str(parameters_root),
                "--override",
                "deploy.container_apps_env=false",
                "--target",
                "ai_*",
                "--output",
                str(tmp_path / "custom"),
            ],
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "custom" / "full" / "latest.txt").exists()

    def test_plan_unknown_target(self, parameters_root: Path) -> None:
        result = runner.invoke(
            app, ["plan", "full", "--root", str(parameters_root), "--target", "nope"]
        )
        assert result.exit_code == 1
        assert "Unknown step" in result.output

    def test_plan_invalid_parameter_set(self, parameters_root: Path) -> None:
        result = runner.invoke(app, ["plan", "broken", "--root", str(parameters_root)])
        assert result.exit_code == 1
        assert "unknown fields" in result.output
