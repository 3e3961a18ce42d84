"""Import of a parsed GEDCOM tree into the graph store."""

from dataclasses import dataclass
import logging
from pathlib import Path

from citations import add_citations, add_notes
from database import SQLiteGraphStore, create_database
from events import create_event
from models import Family, GedcomTree, Individual, NodeHandle
from parsing import parse_gedcom
from resolver import fetch_or_create, make_id
from vocabulary import ENGLISH, Vocabulary

logger = logging.getLogger(__name__)


@dataclass
class ImportStats:
    families: int = 0
    persons: int = 0
    events: int = 0
    places: int = 0
    sources: int = 0
    relationships: int = 0


class GedcomImporter:
    """Walks the families of a GEDCOM tree and writes them to a graph store.

    Persons and Sources are upserted by id, so an individual referenced from
    several families becomes a single node, populated from its first
    appearance. Families and events always produce new nodes.
    """

    def __init__(self, store: SQLiteGraphStore, vocabulary: Vocabulary = ENGLISH):
        self.store = store
        self.vocabulary = vocabulary

    def load(self, tree: GedcomTree) -> ImportStats:
        """Import every family in ``tree`` inside a single transaction."""
        logger.info(f"Importing {len(tree.families)} families")
        before = self._counts()

        with self.store.transaction():
            for family in tree.families.values():
                self.import_family(family)

        after = self._counts()
        stats = ImportStats(**{key: after[key] - before[key] for key in before})
        logger.info(f"Import finished: {stats}")
        return stats

    def import_family(self, f: Family) -> NodeHandle:
        v = self.vocabulary
        family = self.create_family(f)
        family_id = make_id(f.xref)

        mother = self.create_family_relationship(family, f.wife, v.wife)
        father = self.create_family_relationship(family, f.husband, v.husband)
        for c in f.children:
            child = self.create_family_relationship(family, c, v.child)
            self.create_parent_relationship(child, mother, v.mother, family_id)
            self.create_parent_relationship(child, father, v.father, family_id)

        for e in f.events:
            self.store.create_relationship(family, create_event(self.store, v, e), v.has_event)
        return family

    def create_family(self, f: Family) -> NodeHandle:
        family_id = make_id(f.xref)
        logger.info(f"create_family('{family_id}')")
        family = self.store.create_node(self.vocabulary.family)
        self.store.set_property(family, self.vocabulary.id, family_id)
        return family

    def create_family_relationship(
        self, family: NodeHandle, member: Individual | None, rel_type: str
    ) -> NodeHandle | None:
        """Resolve ``member`` and link the family to it; ``None`` when the member is absent."""
        if member is None:
            return None
        person = self.fetch_or_create_individual(member)
        logger.info(f"create_family_relationship(({family.id})-[:{rel_type}]->({make_id(member.xref)}))")
        self.store.create_relationship(family, person, rel_type)
        return person

    def create_parent_relationship(
        self, child: NodeHandle, parent: NodeHandle | None, rel_type: str, family_id: str
    ):
        if parent is None:
            return
        logger.info(f"create_parent_relationship(({child.id})-[:{rel_type}]->({parent.id})): family {family_id}")
        relationship = self.store.create_relationship(child, parent, rel_type)
        self.store.set_property(relationship, self.vocabulary.family_ref, family_id)

    def fetch_or_create_individual(self, individual: Individual) -> NodeHandle:
        person_id = make_id(individual.xref)
        logger.info(f"fetch_or_create_individual('{person_id}')")
        return fetch_or_create(
            self.store,
            self.vocabulary.person,
            self.vocabulary.id,
            person_id,
            individual,
            self._populate_individual,
        )

    def _populate_individual(self, node: NodeHandle, individual: Individual):
        store, v = self.store, self.vocabulary

        store.set_property(node, v.name, [n.basic.strip() for n in individual.names])
        if individual.sex is not None:
            store.set_property(node, v.sex, individual.sex)
        add_notes(store, v, node, individual.notes)
        add_citations(store, v, v.citation, individual.citations, node)

        for a in individual.attributes:
            store.create_relationship(node, create_event(store, v, a), v.has_event)
        for e in individual.events:
            store.create_relationship(node, create_event(store, v, e), v.has_event)
        for n in individual.names:
            add_citations(store, v, v.name_citation, n.citations, node)

    def _counts(self) -> dict[str, int]:
        v = self.vocabulary
        return {
            "families": self.store.count_nodes(v.family),
            "persons": self.store.count_nodes(v.person),
            "events": self.store.count_nodes(v.event),
            "places": self.store.count_nodes(v.place),
            "sources": self.store.count_nodes(v.source),
            "relationships": self.store.count_relationships(),
        }


def import_gedcom(
    gedcom_path: Path, database_path: Path | str, vocabulary: Vocabulary = ENGLISH
) -> ImportStats:
    """Parse ``gedcom_path`` and import it into the graph store at ``database_path``."""
    logger.info(f"import_gedcom('{gedcom_path}', '{database_path}')")
    tree = parse_gedcom(gedcom_path)
    with create_database(database_path) as store:
        return GedcomImporter(store, vocabulary).load(tree)
