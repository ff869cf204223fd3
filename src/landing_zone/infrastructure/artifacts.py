"""Persistence of plan artifacts (plan, outputs, report, bicepparam) under a run directory."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import orjson

from landing_zone.domain.models import DeploymentOutputs, DeploymentPlan, ExecutionReport


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))
    return path


def read_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def ensure_run_dir(base: Path, timestamp: str | None = None) -> Path:
    stamp = timestamp or datetime.now(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
    run_dir = base / stamp
    run_dir.mkdir(parents=True, exist_ok=True)
    (base / "latest.txt").write_text(stamp, encoding="utf-8")
    return run_dir


def write_plan(run_dir: Path, plan: DeploymentPlan) -> Path:
    return write_json(run_dir / "plan.json", plan.model_dump(mode="json"))


def write_outputs(run_dir: Path, outputs: DeploymentOutputs) -> Path:
    return write_json(run_dir / "outputs.json", outputs.model_dump(mode="json"))


def write_report(run_dir: Path, report: ExecutionReport) -> Path:
    data = report.model_dump(mode="json")
    data["succeeded"] = report.succeeded
    data["counts"] = report.counts()
    return write_json(run_dir / "report.json", data)


def write_bicepparam(run_dir: Path, text: str, filename: str = "main.bicepparam") -> Path:
    p = run_dir / filename
    p.write_text(text, encoding="utf-8")
    return p


def write_plan_artifacts(
    run_dir: Path,
    plan: DeploymentPlan,
    outputs: DeploymentOutputs,
    report: ExecutionReport | None = None,
) -> list[Path]:
    written = [write_plan(run_dir, plan), write_outputs(run_dir, outputs)]
    if report is not None:
        written.append(write_report(run_dir, report))
    return written


__all__ = [
    "ensure_run_dir",
    "read_json",
    "write_bicepparam",
    "write_json",
    "write_outputs",
    "write_plan",
    "write_plan_artifacts",
    "write_report",
]
