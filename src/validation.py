"""Diagnostics for person/relationship graphs. Warnings only, never used by the layouts."""

import networkx as nx

from models import PARENT

# Parents younger than this at a child's birth are flagged
MIN_PARENT_AGE = 12
# horizontal and fan charts only draw the first two
MAX_DRAWN_PARENTS = 2


def _name(G: nx.DiGraph, node) -> str:
    return G.nodes[node].get("person_name") or str(node)


def _parent_edges(G: nx.DiGraph) -> list[tuple]:
    return [(u, v) for u, v, kind in G.edges(data="relationship_type") if kind == PARENT]


def parent_cycle(G: nx.DiGraph) -> list | None:
    """Nodes of one parent/child cycle, or None if the lineage is acyclic."""
    try:
        cycle = nx.find_cycle(nx.DiGraph(_parent_edges(G)), orientation="original")
    except nx.NetworkXNoCycle:
        return None
    return [edge[0] for edge in cycle]


def parent_age_warnings(G: nx.DiGraph) -> list[str]:
    warnings = []
    for parent, child in _parent_edges(G):
        parent_birth = G.nodes[parent].get("birth_date")
        child_birth = G.nodes[child].get("birth_date")
        if not (parent_birth and child_birth):
            continue

        if child_birth < parent_birth:
            warnings.append(
                f"Impossible: {_name(G, child)} born before parent {_name(G, parent)}"
            )
        elif child_birth.year - parent_birth.year < MIN_PARENT_AGE:
            warnings.append(
                f"Suspicious: {_name(G, parent)} was less than {MIN_PARENT_AGE} years old "
                f"when {_name(G, child)} was born"
            )
    return warnings


def lifespan_warnings(G: nx.DiGraph) -> list[str]:
    return [
        f"Impossible: {_name(G, node)} died before being born"
        for node, data in G.nodes(data=True)
        if data.get("birth_date") and data.get("death_date")
        and data["death_date"] < data["birth_date"]
    ]


def extra_parent_warnings(G: nx.DiGraph) -> list[str]:
    warnings = []
    for node in G.nodes:
        parents = [p for p in G.predecessors(node) if G.edges[p, node]["relationship_type"] == PARENT]
        if len(parents) > MAX_DRAWN_PARENTS:
            warnings.append(
                f"Ambiguous: {_name(G, node)} has {len(parents)} parents, "
                f"ancestor charts show only the first {MAX_DRAWN_PARENTS}"
            )
    return warnings


def validate_graph(G: nx.DiGraph) -> list[str]:
    """
    Validate the family tree graph for:
    - Cycles in parent-child relationships
    - Impossible ages (child born before parent, parent younger than MIN_PARENT_AGE)
    - Death before birth
    - More parents than the ancestor charts can draw

    Returns a list of warning messages.
    """
    warnings: list[str] = []

    cycle = parent_cycle(G)
    if cycle:
        warnings.append(f"Cycle detected in parent-child relationships: {cycle}")

    warnings.extend(parent_age_warnings(G))
    warnings.extend(lifespan_warnings(G))
    warnings.extend(extra_parent_warnings(G))
    return warnings
