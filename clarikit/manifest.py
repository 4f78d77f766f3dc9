"""Project manifest (``Clarinet.toml``) loading and contract ordering."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

__all__ = [
    "ManifestError",
    "CyclicDependencyError",
    "RequirementConfig",
    "ContractConfig",
    "ProjectConfig",
    "ProjectManifest",
    "sort_dependencies",
    "find_cycling_dependencies",
]


class ManifestError(Exception):
    """The project manifest is missing or malformed."""


class CyclicDependencyError(ManifestError):
    """Contracts depend on each other in a cycle."""

    def __init__(self, contracts: Sequence[str]) -> None:
        self.contracts = list(contracts)
        super().__init__(f"cycling dependencies: {', '.join(self.contracts)}")


@dataclass(frozen=True)
class RequirementConfig:
    contract_id: str


@dataclass
class ContractConfig:
    path: str
    depends_on: list[str] = field(default_factory=list)


@dataclass
class ProjectConfig:
    name: str
    requirements: list[RequirementConfig] | None = None
    costs_version: int = 1


@dataclass
class ProjectManifest:
    """A parsed project manifest; ``contracts`` is keyed by contract name, sorted."""

    project: ProjectConfig
    contracts: dict[str, ContractConfig] = field(default_factory=dict)

    @classmethod
    def from_path(cls, path: str | Path) -> ProjectManifest:
        """Read and parse a manifest file."""
        path = Path(path)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise ManifestError(
                "unable to locate Clarinet.toml in current directory"
            ) from exc
        try:
            data = tomllib.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ManifestError(f"invalid manifest {path}: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProjectManifest:
        """Build a manifest from already parsed TOML data."""
        project_data = data.get("project") if isinstance(data, Mapping) else None
        if not isinstance(project_data, Mapping):
            raise ManifestError("manifest has no [project] table")
        name = project_data.get("name")
        if not isinstance(name, str):
            raise ManifestError("project.name must be a string")
        costs_version = project_data.get("costs_version", 1)
        if isinstance(costs_version, bool) or not isinstance(costs_version, int):
            raise ManifestError("project.costs_version must be an integer")

        requirements: list[RequirementConfig] = []
        raw_requirements = project_data.get("requirements")
        if isinstance(raw_requirements, list):
            for entry in raw_requirements:
                if not isinstance(entry, Mapping):
                    continue
                contract_id = entry.get("contract_id")
                if isinstance(contract_id, str):
                    requirements.append(RequirementConfig(contract_id))

        contracts: dict[str, ContractConfig] = {}
        raw_contracts = data.get("contracts")
        if isinstance(raw_contracts, Mapping):
            for contract_name, settings in raw_contracts.items():
                if not isinstance(settings, Mapping):
                    continue
                path = settings.get("path")
                depends_on = settings.get("depends_on")
                if not isinstance(path, str) or not isinstance(depends_on, list):
                    continue
                for dep in depends_on:
                    if not isinstance(dep, str):
                        raise ManifestError(
                            f"contracts.{contract_name}.depends_on must hold strings"
                        )
                contracts[str(contract_name)] = ContractConfig(path, list(depends_on))

        project = ProjectConfig(
            name=name, requirements=requirements, costs_version=costs_version
        )
        return cls(project=project, contracts=dict(sorted(contracts.items())))

    def ordered_contracts(self) -> list[tuple[str, ContractConfig]]:
        """Contracts ordered so that each comes after the contracts it depends on.

        Raises CyclicDependencyError when dependencies form a cycle and
        ManifestError when a dependency names an unknown contract.
        """
        names = sorted(self.contracts)
        if not names:
            return []
        lookup = {name: index for index, name in enumerate(names)}
        adjacency: list[list[int]] = []
        for name in names:
            edges = []
            for dep in self.contracts[name].depends_on:
                if dep not in lookup:
                    raise ManifestError(
                        f"contract {name!r} depends on unknown contract {dep!r}"
                    )
                edges.append(lookup[dep])
            adjacency.append(edges)

        order = sort_dependencies(adjacency)
        cyclic = find_cycling_dependencies(adjacency, order)
        if cyclic is not None:
            raise CyclicDependencyError([names[index] for index in cyclic])
        return [(names[index], self.contracts[names[index]]) for index in order]


def sort_dependencies(adjacency: Sequence[Sequence[int]]) -> list[int]:
    """Depth-first post-order of all nodes, starting from each node in turn."""
    seen: set[int] = set()
    order: list[int] = []

    def edges(node: int) -> Sequence[int]:
        return adjacency[node] if 0 <= node < len(adjacency) else ()

    for start in range(len(adjacency)):
        if start in seen:
            continue
        seen.add(start)
        stack = [(start, iter(edges(start)))]
        while stack:
            node, neighbours = stack[-1]
            for neighbour in neighbours:
                if neighbour not in seen:
                    seen.add(neighbour)
                    stack.append((neighbour, iter(edges(neighbour))))
                    break
            else:
                stack.pop()
                order.append(node)
    return order


def find_cycling_dependencies(
    adjacency: Sequence[Sequence[int]], sorted_indexes: Sequence[int]
) -> list[int] | None:
    """Nodes that cannot be resolved to leaves, or None when there are none."""
    tainted: set[int] = set()
    for node in sorted_indexes:
        descendants = adjacency[node]
        resolved = 0
        for descendant in descendants:
            if not adjacency[descendant] or descendant in tainted:
                tainted.add(descendant)
                resolved += 1
        if resolved == len(descendants):
            tainted.add(node)

    if len(tainted) == len(sorted_indexes):
        return None
    return sorted(set(sorted_indexes) - tainted)