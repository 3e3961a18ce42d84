"""Resolution of hierarchical place names into chains of Place nodes."""

import logging

from database import SQLiteGraphStore
from models import NodeHandle
from vocabulary import Vocabulary

logger = logging.getLogger(__name__)

PLACE_SEPARATOR = ", "


def split_place_name(place_name: str) -> list[str]:
    """Split 'Springfield, Sangamon, Illinois' into its segments, most specific first."""
    return place_name.split(PLACE_SEPARATOR)


def fetch_or_create_place(
    store: SQLiteGraphStore, vocabulary: Vocabulary, place_name: str
) -> NodeHandle:
    """Return the head node of the Place chain for ``place_name``."""
    logger.info(f"fetch_or_create_place('{place_name}')")
    return fetch_or_create_place_chain(store, vocabulary, split_place_name(place_name))


def chain_names(store: SQLiteGraphStore, vocabulary: Vocabulary, place: NodeHandle) -> list[str]:
    """Names along the containment chain starting at ``place``."""
    return [
        store.get_property(node, vocabulary.name)
        for node in store.traverse_outgoing(place, vocabulary.contains)
    ]


def fetch_or_create_place_chain(
    store: SQLiteGraphStore, vocabulary: Vocabulary, names: list[str]
) -> NodeHandle:
    """
    Resolve ``names`` (most specific first) to a chain of Place nodes.

    An existing chain is reused only if its names equal ``names`` exactly,
    from the head all the way to the root. Otherwise a new node is created
    for the head and the tail is resolved the same way, so a partially
    matching chain is never extended or shared.
    """
    logger.debug(f"fetch_or_create_place_chain({names})")
    head, tail = names[0], names[1:]

    for candidate in store.find_nodes_by_label_and_property(vocabulary.place, vocabulary.name, head):
        if chain_names(store, vocabulary, candidate) == names:
            logger.debug(f"Found existing place {names}")
            return candidate

    logger.debug(f"Creating new place '{head}'")
    place = store.create_node(vocabulary.place)
    store.set_property(place, vocabulary.name, head)
    if tail:
        broader = fetch_or_create_place_chain(store, vocabulary, tail)
        store.create_relationship(place, broader, vocabulary.contains)
    return place
