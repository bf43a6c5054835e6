# src/retainer/core/chains/forest.py
"""DependencyForest: one profile's backups linked parent -> dependent."""

from __future__ import annotations

from collections.abc import Iterable

import networkx as nx
from networkx import DiGraph

from retainer.contracts.records import BackupRecord
from retainer.core.chains.models import ChainWarning


class DependencyForest:
    """Immutable dependency forest for a single profile.

    Wraps a frozen NetworkX DiGraph whose nodes are raw filenames and whose
    edges point from a backup to the backups taken relative to it. Roots are
    full backups and incrementals whose parent is not in the listing.

    Construction is done by build_forests(); the forest never changes after
    __init__ returns.
    """

    def __init__(
        self,
        profile: str,
        records: Iterable[BackupRecord],
        dependencies: Iterable[tuple[str, str]] = (),
        warnings: Iterable[ChainWarning] = (),
    ) -> None:
        """Build and freeze the forest.

        Args:
            profile: Profile every record belongs to
            records: Records of that profile (raw names must be unique)
            dependencies: (parent raw name, dependent raw name) pairs
            warnings: Problems reported while linking

        Raises:
            ValueError: If a record belongs to another profile, an edge names
                an unknown record, or the edges contain a cycle.
        """
        self.profile = profile
        self._records: dict[str, BackupRecord] = {}
        graph: DiGraph[str] = nx.DiGraph()

        for record in records:
            if record.profile != profile:
                raise ValueError(f"Record {record.raw_name!r} belongs to profile {record.profile!r}, not {profile!r}")
            self._records[record.raw_name] = record
            graph.add_node(record.raw_name)

        for parent, dependent in dependencies:
            if parent not in self._records or dependent not in self._records:
                raise ValueError(f"Dependency {parent!r} -> {dependent!r} references a record outside the forest")
            graph.add_edge(parent, dependent)

        if not nx.is_directed_acyclic_graph(graph):
            cycle = nx.find_cycle(graph)
            raise ValueError(f"Dependency cycle in profile {profile!r}: {cycle}")

        self._graph: DiGraph[str] = nx.freeze(graph)
        self.warnings: tuple[ChainWarning, ...] = tuple(warnings)

    @property
    def record_count(self) -> int:
        """Number of records in the forest."""
        return self._graph.number_of_nodes()

    @property
    def dependency_count(self) -> int:
        """Number of parent -> dependent links."""
        return self._graph.number_of_edges()

    def __contains__(self, raw_name: object) -> bool:
        return raw_name in self._records

    def record(self, raw_name: str) -> BackupRecord:
        """Return the record for a raw name.

        Raises:
            KeyError: If the name is not part of this forest.
        """
        return self._records[raw_name]

    def records(self) -> list[BackupRecord]:
        """All records, oldest first."""
        return sorted(self._records.values(), key=lambda r: r.sort_key)

    def roots(self) -> list[str]:
        """Records that depend on nothing present in the listing."""
        return sorted(
            (name for name, degree in self._graph.in_degree() if degree == 0),
            key=lambda name: self._records[name].sort_key,
        )

    def parents_of(self, raw_name: str) -> list[str]:
        return sorted(self._graph.predecessors(raw_name))

    def dependents_of(self, raw_name: str) -> list[str]:
        return sorted(self._graph.successors(raw_name))

    def ancestors_of(self, raw_name: str) -> set[str]:
        """Every record ``raw_name`` needs, directly or transitively, to restore."""
        return nx.ancestors(self._graph, raw_name)

    def descendants_of(self, raw_name: str) -> set[str]:
        """Every record that needs ``raw_name``, directly or transitively."""
        return nx.descendants(self._graph, raw_name)

    def leaves_first(self) -> list[str]:
        """Raw names ordered so every dependent precedes its parents.

        Ties are broken newest-first by (timestamp, raw name) so the order is
        stable for identical listings.
        """
        ordered = nx.lexicographical_topological_sort(
            self._graph,
            key=lambda name: (self._records[name].timestamp, name),
        )
        return list(reversed(list(ordered)))

    def get_nx_graph(self) -> DiGraph[str]:
        """Return the frozen underlying graph for analysis."""
        return self._graph
