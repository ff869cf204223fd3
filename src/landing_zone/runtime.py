"""Runtime context & bootstrap utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from landing_zone.infrastructure.logging import setup_logging

DEFAULT_CONFIG_PATH = Path("src/configs/default.yaml")


@dataclass(slots=True)
class RuntimeConfig:
    raw: dict[str, Any]
    path: Path

    @property
    def parameters_root(self) -> Path:
        return Path(self.raw.get("parameters_root", "src/parameters"))

    @property
    def output_root(self) -> Path:
        return Path(self.raw.get("output_root", "output"))

    @property
    def strict_resource_ids(self) -> bool:
        return bool(self.raw.get("strict_resource_ids", False))

    @property
    def fail_fast(self) -> bool:
        return bool(self.raw.get("fail_fast", True))

    @property
    def log_level(self) -> str | None:
        return self.raw.get("log_level")


class AppContext:
    _instance: AppContext | None = None

    def __init__(self, config: RuntimeConfig):
        self.config = config

    @classmethod
    def init(cls, config: RuntimeConfig) -> AppContext:
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def get(cls) -> AppContext:
        if cls._instance is None:
            raise RuntimeError("AppContext not initialized")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


def load_config(path: Path) -> RuntimeConfig:
    if not path.exists():
        return RuntimeConfig(raw={}, path=path)
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    return RuntimeConfig(raw=data, path=path)


def bootstrap(force: bool = False) -> AppContext:
    if not force:
        try:
            return AppContext.get()
        except RuntimeError:
            pass
    else:
        AppContext.reset()
    load_dotenv(override=False)
    cfg_path = Path(os.getenv("LZ_CONFIG", str(DEFAULT_CONFIG_PATH)))
    config = load_config(cfg_path)
    setup_logging(level=config.log_level)
    return AppContext.init(config)
