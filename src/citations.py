"""Notes, citations and the Source nodes they point at."""

import logging

from database import SQLiteGraphStore
from errors import MalformedRecordError
from models import Citation, NodeHandle, Note, Source
from resolver import fetch_or_create, make_id
from vocabulary import Vocabulary

logger = logging.getLogger(__name__)


def add_notes(store: SQLiteGraphStore, vocabulary: Vocabulary, node: NodeHandle, notes: list[Note]):
    """Store one string per note (its lines joined by spaces); no notes, no property."""
    if notes:
        store.set_property(node, vocabulary.notes, [" ".join(note.lines) for note in notes])


def add_citations(
    store: SQLiteGraphStore,
    vocabulary: Vocabulary,
    rel_type: str,
    citations: list[Citation] | None,
    node: NodeHandle,
):
    if citations:
        for citation in citations:
            create_citation(store, vocabulary, node, rel_type, citation)


def create_citation(
    store: SQLiteGraphStore,
    vocabulary: Vocabulary,
    on: NodeHandle,
    rel_type: str,
    citation: Citation,
):
    """Link ``on`` to the cited Source, copying locator and certainty onto the edge."""
    if citation.source is None:
        raise MalformedRecordError("Citation does not reference a source record")

    source = fetch_or_create_source(store, vocabulary, citation.source)
    relationship = store.create_relationship(on, source, rel_type)

    if citation.where_in_source is not None:
        store.set_property(relationship, vocabulary.locator, citation.where_in_source)
    if citation.certainty is not None:
        store.set_property(relationship, vocabulary.certainty, citation.certainty)


def fetch_or_create_source(
    store: SQLiteGraphStore, vocabulary: Vocabulary, source: Source
) -> NodeHandle:
    source_id = make_id(source.xref)
    logger.info(f"fetch_or_create_source('{source_id}')")

    def populate(node: NodeHandle, record: Source):
        store.set_property(node, vocabulary.title, list(record.title))
        if record.publication_facts:
            store.set_property(node, vocabulary.publication_facts, list(record.publication_facts))
        if record.authors:
            store.set_property(node, vocabulary.author, list(record.authors))
        add_notes(store, vocabulary, node, record.notes)

    return fetch_or_create(store, vocabulary.source, vocabulary.id, source_id, source, populate)
