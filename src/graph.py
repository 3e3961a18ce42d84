"""NetworkX view of the stored property graph."""

import networkx as nx

from database import SQLiteGraphStore


def build_graph(store: SQLiteGraphStore) -> nx.MultiDiGraph:
    """
    Load every node and relationship from the store into a MultiDiGraph.

    Nodes and edges are keyed by their store ids. Nodes carry ``label`` plus
    their properties, edges carry ``rel_type`` plus theirs.
    """
    G = nx.MultiDiGraph()

    # Note: properties may include 'name', so the label goes in its own attribute
    for node in store.nodes():
        G.add_node(node.id, label=node.label, **store.get_properties(node))

    for rel in store.relationships():
        G.add_edge(rel.start_id, rel.end_id, key=rel.id, rel_type=rel.type, **store.get_properties(rel))

    return G


def edges_of_type(G: nx.MultiDiGraph, *rel_types: str) -> list[tuple[int, int, dict]]:
    return [(u, v, d) for u, v, d in G.edges(data=True) if d["rel_type"] in rel_types]


def event_date(G: nx.MultiDiGraph, person: int, event_type: str, vocabulary) -> str | None:
    """Raw date of the first event of ``event_type`` attached to ``person``."""
    for _, event, edge in G.out_edges(person, data=True):
        if edge["rel_type"] != vocabulary.has_event:
            continue
        data = G.nodes[event]
        if data.get(vocabulary.type) == event_type and data.get(vocabulary.date):
            return data[vocabulary.date]
    return None


def display_name(G: nx.MultiDiGraph, node: int, vocabulary) -> str:
    data = G.nodes[node]
    names = data.get(vocabulary.name) or []
    return names[0] if names else data.get(vocabulary.id, str(node))
