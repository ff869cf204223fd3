"""Clean caches, __pycache__, and (optionally) plan outputs.

Usage (examples):
  lz-clean                                  # remove caches only
  lz-clean --outputs                        # also remove all plan run directories
  lz-clean --outputs --parameter-set ai_foundry
  lz-clean --outputs --keep-latest          # keep latest run per parameter set

Flags:
  --outputs / -o         Remove run directories under the output root
  --parameter-set / -p   Scope output deletion to one parameter set
  --keep-latest          Keep the run named in latest.txt per parameter set
  --output-root          Output root (default: output)
  --yes / -y             Do not prompt for confirmation
"""
from __future__ import annotations

import argparse
import shutil
from collections.abc import Iterable
from pathlib import Path

CACHE_DIRS: list[str] = [
    ".mypy_cache",
    ".ruff_cache",
    ".pytest_cache",
]

OUTPUT_ROOT = Path("output")


def rm(path: Path) -> None:
    if not path.exists():
        return
    if path.is_dir():
        shutil.rmtree(path, ignore_errors=True)
    else:
        path.unlink(missing_ok=True)


def iter_set_dirs(root: Path) -> Iterable[Path]:
    if not root.exists():
        return []
    return [child for child in sorted(root.iterdir()) if child.is_dir()]


def delete_outputs(
    root: Path, parameter_set: str | None = None, keep_latest: bool = False
) -> list[str]:
    removed: list[str] = []
    if parameter_set:
        set_dir = root / parameter_set
        targets: Iterable[Path] = [set_dir] if set_dir.is_dir() else []
    else:
        targets = iter_set_dirs(root)
    for set_dir in targets:
        latest_name: str | None = None
        latest_file = set_dir / "latest.txt"
        if keep_latest and latest_file.exists():
            latest_name = latest_file.read_text(encoding="utf-8").strip()
        for run_dir in sorted(set_dir.iterdir()):
            if not run_dir.is_dir() or run_dir.name == latest_name:
                continue
            shutil.rmtree(run_dir, ignore_errors=True)
            removed.append(str(run_dir))
        if not any(p.is_dir() for p in set_dir.iterdir()):
            latest_file.unlink(missing_ok=True)
            if not any(set_dir.iterdir()):
                set_dir.rmdir()
    return removed


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Clean caches and (optionally) plan outputs")
    parser.add_argument("--outputs", "-o", action="store_true", help="Remove plan run directories")
    parser.add_argument("--parameter-set", "-p", help="Target a single parameter set only")
    parser.add_argument(
        "--keep-latest", action="store_true", help="Keep the latest run (per latest.txt)"
    )
    parser.add_argument("--output-root", type=Path, default=OUTPUT_ROOT)
    parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation prompt")
    args = parser.parse_args(argv)

    for d in CACHE_DIRS:
        rm(Path(d))
    for pyc in list(Path(".").rglob("__pycache__")):
        shutil.rmtree(pyc, ignore_errors=True)
    print("[clean] Removed caches")

    if not args.outputs:
        return
    if not args.yes:
        label = args.parameter_set or "ALL parameter sets"
        if input(f"Delete outputs for {label}? (y/N): ").strip().lower() != "y":
            print("[clean] Aborted output deletion")
            return
    removed = delete_outputs(args.output_root, args.parameter_set, args.keep_latest)
    if removed:
        print(f"[clean] Deleted {len(removed)} run directories")
    else:
        print("[clean] No outputs deleted")


if __name__ == "__main__":  # pragma: no cover
    main()
