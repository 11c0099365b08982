from __future__ import annotations

import posixpath
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .model import DependencyGraph, GraphEdge, GraphNode, RepoAnalysis
from .resolve import PathResolver


class ImportGraph:
    """Directed file-import graph keyed by node id.

    Nodes and edges are kept in first-insertion order so repeated builds from the
    same input produce the same output. Edges are unique per (source, target).
    """
    def __init__(self):
        self.nodes: Dict[str, GraphNode] = {}
        self.edges: List[Tuple[str, str]] = []
        self._edge_set: Set[Tuple[str, str]] = set()

    def add_node(self, node_id: str, ghost: bool = False):
        if node_id not in self.nodes:
            label = posixpath.basename(node_id.rstrip("/")) or node_id
            self.nodes[node_id] = GraphNode(id=node_id, label=label, ghost=ghost)

    def add_edge(self, source: str, target: str):
        key = (source, target)
        if key in self._edge_set:
            return
        self._edge_set.add(key)
        self.edges.append(key)

    def to_model(self) -> DependencyGraph:
        return DependencyGraph(
            nodes=list(self.nodes.values()),
            edges=[GraphEdge(id=f"{s}->{t}", source=s, target=t) for s, t in self.edges],
        )


def build_graph(
    known_files: Iterable[str],
    imports: Mapping[str, Iterable[str]],
    aliases: Optional[Mapping[str, str]] = None,
    include_external: bool = False,
) -> DependencyGraph:
    """Build the file import graph from a scan's import map.

    Resolved specifiers link two scanned files. Local-looking specifiers that match
    no file become ghost nodes named by the raw specifier. Bare external module
    names are dropped unless ``include_external`` is set, in which case they are
    ghost nodes too.
    """
    resolver = PathResolver(known_files, aliases)
    graph = ImportGraph()

    for source, specifiers in imports.items():
        graph.add_node(source)
        for specifier in specifiers:
            edge = resolver.resolve_edge(source, specifier)
            if not edge.resolved and not include_external and not resolver.is_local(specifier):
                continue
            graph.add_node(edge.target, ghost=not edge.resolved)
            graph.add_edge(source, edge.target)

    return graph.to_model()


def build_analysis_graph(
    analysis: RepoAnalysis,
    aliases: Optional[Mapping[str, str]] = None,
    include_external: bool = False,
) -> DependencyGraph:
    return build_graph(analysis.known_files(), analysis.imports, aliases, include_external)
