"""
Graph model and graph constructors.

A graph is an ordered set of positive integer vertex ids plus a set of
undirected edges. The vertex order is the fixed iteration order every
algorithm uses to break ties.

Constructors:
- random_graph: Erdos-Renyi G(n, p) on vertices 1..n
- parse_edge_list: permissive parser for text such as "((1,2),(2,3))"
- Graph.from_dimacs: DIMACS .col instance file

DIMACS file format:
- "c ..." comment lines
- "p edge n m" problem line (vertices are numbered 1 to n)
- "e u v" edge lines
"""

import logging
import numbers
import random
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union

import networkx as nx

from .errors import InvalidParameterError

logger = logging.getLogger(__name__)

_PAIR_PATTERN = re.compile(r"\((\d+),(\d+)\)")


@dataclass(frozen=True)
class Graph:
    """Immutable undirected simple graph."""

    vertices: tuple[int, ...]
    edges: tuple[tuple[int, int], ...]
    name: str = "graph"

    # Derived data, computed after construction
    adjacency: dict[int, frozenset[int]] = field(init=False, repr=False, compare=False)
    index: dict[int, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Validate and compute derived data structures."""
        edges = tuple((int(u), int(v)) for u, v in self.edges)
        vertices = self._vertex_ids(self.vertices)
        self._validate(vertices, edges)

        neighbors: dict[int, set[int]] = {v: set() for v in vertices}
        for u, v in edges:
            neighbors[u].add(v)
            neighbors[v].add(u)

        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "edges", edges)
        object.__setattr__(self, "adjacency", {v: frozenset(n) for v, n in neighbors.items()})
        object.__setattr__(self, "index", {v: i for i, v in enumerate(vertices)})

    @staticmethod
    def _vertex_ids(vertices: Iterable) -> tuple[int, ...]:
        """Vertex ids as plain ints (numpy integers accepted, bools rejected)."""
        ids = []
        for v in vertices:
            if isinstance(v, bool) or not isinstance(v, numbers.Integral) or v < 1:
                raise ValueError(f"Vertex ids must be positive integers, got {v!r}")
            ids.append(int(v))
        return tuple(ids)

    @staticmethod
    def _validate(vertices: tuple[int, ...], edges: tuple[tuple[int, int], ...]):
        """Validate graph consistency."""
        vertex_set = set()
        for v in vertices:
            if v in vertex_set:
                raise ValueError(f"Duplicate vertex {v}")
            vertex_set.add(v)

        seen_edges = set()
        for u, v in edges:
            if u not in vertex_set or v not in vertex_set:
                raise ValueError(f"Invalid vertex in edge ({u}, {v})")
            if u == v:
                raise ValueError(f"Self-loop on vertex {u}")
            key = (u, v) if u < v else (v, u)
            if key in seen_edges:
                raise ValueError(f"Duplicate edge ({u}, {v})")
            seen_edges.add(key)

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[int, int]],
        num_vertices: int,
        name: str = "graph",
    ) -> "Graph":
        """Build a graph on vertices 1..num_vertices from a list of edges."""
        return cls(vertices=tuple(range(1, num_vertices + 1)), edges=tuple(edges), name=name)

    @classmethod
    def from_networkx(cls, nx_graph: nx.Graph, name: str = "graph") -> "Graph":
        """Build a graph from a networkx graph whose nodes are positive integers."""
        return cls(vertices=tuple(nx_graph.nodes()), edges=tuple(nx_graph.edges()), name=name)

    @classmethod
    def from_dimacs(cls, filepath: Union[str, Path]) -> "Graph":
        """
        Parse a graph from a DIMACS .col file.

        Self-loops and repeated edges (present in some benchmark files) are
        skipped.

        Args:
            filepath: Path to the instance file

        Returns:
            Graph named after the file stem

        Raises:
            ValueError: If the file has no problem line or an edge is out of range
        """
        filepath = Path(filepath)

        num_vertices = None
        edges: list[tuple[int, int]] = []
        seen = set()

        with open(filepath, "r", encoding="utf-8", errors="ignore") as f:
            for line_no, raw in enumerate(f, start=1):
                parts = raw.split()
                if not parts or parts[0] == "c":
                    continue

                if parts[0] == "p":
                    if len(parts) < 3:
                        raise ValueError(f"Invalid problem line {line_no} in {filepath}")
                    num_vertices = int(parts[2])
                elif parts[0] == "e":
                    if num_vertices is None:
                        raise ValueError(f"Edge before problem line on line {line_no} in {filepath}")
                    if len(parts) < 3:
                        raise ValueError(f"Invalid edge format on line {line_no} in {filepath}")
                    u, v = int(parts[1]), int(parts[2])
                    if not (1 <= u <= num_vertices and 1 <= v <= num_vertices):
                        raise ValueError(f"Invalid vertex in edge ({u}, {v}) in {filepath}")
                    key = (u, v) if u < v else (v, u)
                    if u == v or key in seen:
                        continue
                    seen.add(key)
                    edges.append(key)

        if num_vertices is None:
            raise ValueError(f"Missing 'p edge n m' line in {filepath}")

        return cls.from_edges(edges, num_vertices, name=filepath.stem)

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    def neighbors(self, vertex: int) -> frozenset[int]:
        return self.adjacency[vertex]

    def degree(self, vertex: int) -> int:
        return len(self.adjacency[vertex])

    def copy(self) -> "Graph":
        """Independent copy (for handing one graph to several workers)."""
        return Graph(vertices=self.vertices, edges=self.edges, name=self.name)

    def to_networkx(self) -> nx.Graph:
        nx_graph = nx.Graph()
        nx_graph.add_nodes_from(self.vertices)
        nx_graph.add_edges_from(self.edges)
        return nx_graph

    def __str__(self) -> str:
        return f"Graph({self.name}: n={self.num_vertices}, m={self.num_edges})"


def random_graph(
    n: int,
    p: float,
    seed: Optional[Union[int, random.Random]] = None,
    name: Optional[str] = None,
) -> Graph:
    """
    Generate an Erdos-Renyi G(n, p) graph on vertices 1..n.

    Each unordered pair (i, j), i < j, is an edge independently with
    probability p.

    Args:
        n: Number of vertices
        p: Edge probability in [0, 1]
        seed: Integer seed or random.Random instance for reproducibility
        name: Graph name (default: "gnp_n{n}_p{p}")

    Returns:
        Graph with vertex ids 1..n
    """
    if n < 0:
        raise InvalidParameterError(f"n must be >= 0, got {n}")
    if not 0.0 <= p <= 1.0:
        raise InvalidParameterError(f"p must be in [0, 1], got {p}")

    nx_graph = nx.gnp_random_graph(n, p, seed=seed)
    edges = sorted((min(u, v) + 1, max(u, v) + 1) for u, v in nx_graph.edges())

    return Graph.from_edges(edges, n, name=name or f"gnp_n{n}_p{p}")


def parse_edge_list(text: str, n: int, name: str = "manual") -> Graph:
    """
    Parse a loosely formatted edge list such as "((1,2),(2,3))".

    Whitespace is ignored. Pairs with ids outside 1..n, self-loops and
    duplicates (in either orientation) are dropped rather than rejected.

    Args:
        text: Edge list text
        n: Number of vertices (ids 1..n)
        name: Graph name

    Returns:
        Graph on vertices 1..n with the accepted edges
    """
    if n < 0:
        raise InvalidParameterError(f"n must be >= 0, got {n}")

    clean = re.sub(r"\s", "", text)

    edges: list[tuple[int, int]] = []
    seen = set()
    dropped = 0
    for match in _PAIR_PATTERN.finditer(clean):
        u, v = int(match.group(1)), int(match.group(2))
        key = (u, v) if u < v else (v, u)
        if not (1 <= u <= n and 1 <= v <= n) or u == v or key in seen:
            dropped += 1
            continue
        seen.add(key)
        edges.append((u, v))

    if dropped:
        logger.debug("Dropped %d invalid or duplicate pairs from edge list", dropped)

    return Graph.from_edges(edges, n, name=name)
