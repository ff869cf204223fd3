"""AI landing zone planner: resource resolution, deployment graph and plan execution."""

__version__ = "0.1.0"

__all__ = [
    "cli",
]
