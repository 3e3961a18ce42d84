"""Sanity checks over an imported family graph."""

import networkx as nx

from graph import display_name, edges_of_type, event_date
from parsing import parse_date_string
from vocabulary import ENGLISH, Vocabulary


def validate_graph(G: nx.MultiDiGraph, vocabulary: Vocabulary = ENGLISH) -> list[str]:
    """
    Validate the imported graph for:
    - Cycles in parent relationships (MOTHER/FATHER)
    - Impossible ages (child born before parent)
    - Death before birth

    Returns a list of warning messages.
    """
    v = vocabulary
    warnings: list[str] = []

    # Parent edges point from child to parent
    parent_edges = edges_of_type(G, v.mother, v.father)
    parent_graph = nx.DiGraph([(u, w) for u, w, _ in parent_edges])

    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        cycle_nodes = [display_name(G, edge[0], v) for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    birth_label = v.event_label("BIRT")
    death_label = v.event_label("DEAT")

    # ISO dates (YYYY-MM-DD) can be compared as strings
    births = {
        n: parse_date_string(event_date(G, n, birth_label, v))
        for n, data in G.nodes(data=True)
        if data.get("label") == v.person
    }

    for child, parent, _ in parent_edges:
        parent_birth = births.get(parent)
        child_birth = births.get(child)
        if not (parent_birth and child_birth):
            continue

        if child_birth < parent_birth:
            warnings.append(
                f"Impossible: {display_name(G, child, v)} born before parent "
                f"{display_name(G, parent, v)}"
            )
        elif int(child_birth[:4]) - int(parent_birth[:4]) < 12:
            warnings.append(
                f"Suspicious: {display_name(G, parent, v)} was less than 12 years "
                f"old when {display_name(G, child, v)} was born"
            )

    for person, birth in births.items():
        death = parse_date_string(event_date(G, person, death_label, v))
        if birth and death and death < birth:
            warnings.append(f"Impossible: {display_name(G, person, v)} died before being born")

    return warnings
