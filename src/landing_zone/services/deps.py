"""Dependency graph of deployment steps (topological ordering, layers, impact)."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from landing_zone.domain.errors import CycleError, DuplicateStepError, UnknownStepError
from landing_zone.domain.models import Step


class StepGraph:
    """Named steps plus their ``depends_on`` edges, kept in insertion order."""

    def __init__(self, steps: Iterable[Step] = ()) -> None:
        self._steps: dict[str, Step] = {}
        for step in steps:
            self.add(step)

    def add(self, step: Step) -> Step:
        if step.name in self._steps:
            raise DuplicateStepError(step.name)
        self._steps[step.name] = step
        return step

    def get(self, name: str) -> Step:
        try:
            return self._steps[name]
        except KeyError:
            raise UnknownStepError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._steps

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps.values())

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def names(self) -> list[str]:
        return list(self._steps)

    def validate(self) -> None:
        for step in self:
            for dep in step.depends_on:
                if dep not in self._steps:
                    raise UnknownStepError(dep, referenced_by=step.name)
        topo_sort(self)


def topo_sort(graph: StepGraph, targets: Sequence[str] | None = None) -> list[str]:
    """Order steps so every step follows its dependencies.

    With ``targets`` only those steps and their transitive dependencies are
    returned. Ties keep insertion order, so the result is deterministic.
    """
    order: list[str] = []
    done: set[str] = set()
    path: list[str] = []

    def visit(n: str, referenced_by: str | None = None) -> None:
        if n in done:
            return
        if n in path:
            raise CycleError([*path[path.index(n):], n])
        if n not in graph:
            raise UnknownStepError(n, referenced_by=referenced_by)
        path.append(n)
        for dep in graph.get(n).depends_on:
            visit(dep, n)
        path.pop()
        done.add(n)
        order.append(n)

    for name in targets if targets is not None else graph.names:
        visit(name)
    return order


def layers(graph: StepGraph) -> list[list[str]]:
    """Group steps into waves; steps in one wave have no edges between them."""
    depth: dict[str, int] = {}
    for name in topo_sort(graph):
        deps = graph.get(name).depends_on
        depth[name] = 1 + max((depth[d] for d in deps), default=-1)
    out: list[list[str]] = [[] for _ in range(max(depth.values(), default=-1) + 1)]
    for name in graph.names:
        out[depth[name]].append(name)
    return out


def dependents(graph: StepGraph, name: str) -> set[str]:
    """Transitive downstream steps of ``name``."""
    graph.get(name)
    reverse: dict[str, list[str]] = {n: [] for n in graph.names}
    for step in graph:
        for dep in step.depends_on:
            if dep in reverse:
                reverse[dep].append(step.name)
    seen: set[str] = set()
    stack = list(reverse[name])
    while stack:
        current = stack.pop()
        if current in seen:
            continue
        seen.add(current)
        stack.extend(reverse[current])
    return seen


__all__ = ["StepGraph", "dependents", "layers", "topo_sort"]
