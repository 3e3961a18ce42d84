"""Event nodes: type, date, description, place, notes and citations."""

import logging

from citations import add_citations, add_notes
from database import SQLiteGraphStore
from models import Event, NodeHandle
from places import fetch_or_create_place
from vocabulary import Vocabulary

logger = logging.getLogger(__name__)


def create_event(store: SQLiteGraphStore, vocabulary: Vocabulary, event: Event) -> NodeHandle:
    """
    Create a new Event node for ``event``.

    Events are never deduplicated: two records with the same type, date and
    place describe different occurrences.
    """
    node = store.create_node(vocabulary.event)
    store.set_property(node, vocabulary.type, vocabulary.event_label(event.tag))

    if event.date is not None:
        store.set_property(node, vocabulary.date, event.date)
    if event.place:
        store.create_relationship(
            node, fetch_or_create_place(store, vocabulary, event.place), vocabulary.at_place
        )
    if event.description is not None:
        store.set_property(node, vocabulary.description, event.description)

    add_notes(store, vocabulary, node, event.notes)
    add_citations(store, vocabulary, vocabulary.citation, event.citations, node)
    return node
