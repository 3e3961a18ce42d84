"""
Graph store test suite.

Covers node and relationship creation, JSON properties, label-scoped lookup,
outgoing traversal, transactions and the scoped-resource lifecycle.

Run: pytest tests/test_database.py -v
"""

import sqlite3

import pytest

from database import create_database
from errors import StorageError
from models import NodeHandle, RelationshipHandle


# ============================================================================
# Nodes and properties
# ============================================================================


class TestProperties:
    def test_node_properties_round_trip(self, store):
        node = store.create_node("Person")
        store.set_property(node, "id", "I1")
        store.set_property(node, "name", ["Ola Nordmann", "Ole"])

        assert store.get_property(node, "name") == ["Ola Nordmann", "Ole"]
        assert store.get_properties(node) == {"id": "I1", "name": ["Ola Nordmann", "Ole"]}

    def test_missing_property_returns_default(self, store):
        node = store.create_node("Person")
        assert store.get_property(node, "sex") is None
        assert store.get_property(node, "sex", "U") == "U"

    def test_set_property_replaces_value(self, store):
        node = store.create_node("Event")
        store.set_property(node, "date", "1900")
        store.set_property(node, "date", "1901")
        assert store.get_property(node, "date") == "1901"

    def test_relationship_properties_are_separate_from_nodes(self, store):
        a = store.create_node("Person")
        b = store.create_node("Person")
        rel = store.create_relationship(a, b, "MOTHER")
        store.set_property(rel, "family", "F1")

        assert isinstance(rel, RelationshipHandle)
        assert (rel.start_id, rel.end_id, rel.type) == (a.id, b.id, "MOTHER")
        assert store.get_properties(rel) == {"family": "F1"}
        assert store.get_properties(a) == {}


# ============================================================================
# Lookup
# ============================================================================


class TestLookup:
    def test_find_is_scoped_by_label(self, store):
        person = store.create_node("Person")
        store.set_property(person, "id", "X1")
        source = store.create_node("Source")
        store.set_property(source, "id", "X1")

        assert store.find_nodes_by_label_and_property("Person", "id", "X1") == [person]
        assert store.find_nodes_by_label_and_property("Source", "id", "X1") == [source]
        assert store.find_nodes_by_label_and_property("Family", "id", "X1") == []

    def test_find_returns_oldest_first(self, store):
        nodes = []
        for _ in range(3):
            node = store.create_node("Place")
            store.set_property(node, "name", "Oslo")
            nodes.append(node)

        assert store.find_nodes_by_label_and_property("Place", "name", "Oslo") == nodes

    def test_counts_and_listing(self, store):
        a = store.create_node("Person")
        b = store.create_node("Family")
        store.create_relationship(b, a, "CHILD")

        assert store.count_nodes() == 2
        assert store.count_nodes("Person") == 1
        assert store.count_relationships("CHILD") == 1
        assert store.count_relationships("MOTHER") == 0
        assert [n.label for n in store.nodes()] == ["Person", "Family"]
        assert [r.type for r in store.relationships()] == ["CHILD"]


# ============================================================================
# Traversal
# ============================================================================


class TestTraversal:
    def test_traverse_includes_start_node(self, store):
        a = store.create_node("Place")
        assert store.traverse_outgoing(a, "CONTAINS") == [a]

    def test_traverse_follows_chain_in_order(self, store):
        a, b, c = (store.create_node("Place") for _ in range(3))
        store.create_relationship(a, b, "CONTAINS")
        store.create_relationship(b, c, "CONTAINS")
        # Other relationship types are ignored
        store.create_relationship(c, a, "PLACE")

        assert store.traverse_outgoing(a, "CONTAINS") == [a, b, c]
        assert store.traverse_outgoing(b, "CONTAINS") == [b, c]

    def test_traverse_terminates_on_cycle(self, store):
        a, b = store.create_node("Place"), store.create_node("Place")
        store.create_relationship(a, b, "CONTAINS")
        store.create_relationship(b, a, "CONTAINS")

        assert store.traverse_outgoing(a, "CONTAINS") == [a, b]


# ============================================================================
# Transactions and lifecycle
# ============================================================================


class TestTransactions:
    def test_commit_keeps_writes(self, store):
        with store.transaction():
            store.create_node("Person")
        assert store.count_nodes() == 1

    def test_exception_rolls_back_everything(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction():
                a = store.create_node("Person")
                b = store.create_node("Person")
                store.create_relationship(a, b, "FATHER")
                raise RuntimeError("boom")

        assert store.count_nodes() == 0
        assert store.count_relationships() == 0

    def test_store_usable_after_rollback(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.create_node("Person")
                raise RuntimeError("boom")

        with store.transaction():
            store.create_node("Person")
        assert store.count_nodes() == 1

    def test_nested_transaction_rejected(self, store):
        with store.transaction():
            with pytest.raises(StorageError):
                with store.transaction():
                    pass

    def test_original_error_survives_rollback_by_sqlite(self, store):
        with pytest.raises(RuntimeError, match="disk gone"):
            with store.transaction():
                store.create_node("Person")
                # Leave no active transaction, as SQLite does after an I/O error
                store.conn.execute("ROLLBACK")
                raise RuntimeError("disk gone")

        assert store.count_nodes() == 0
        with store.transaction():
            store.create_node("Person")
        assert store.count_nodes() == 1


class TestStorageErrors:
    def test_failed_write_raises_storage_error(self, store):
        person = store.create_node("Person")
        missing = NodeHandle(id=99999, label="Person")

        with pytest.raises(StorageError, match="create MOTHER relationship") as excinfo:
            store.create_relationship(person, missing, "MOTHER")

        assert isinstance(excinfo.value.__cause__, sqlite3.IntegrityError)
        assert store.count_relationships() == 0

    def test_failed_write_rolls_back_transaction(self, store):
        with pytest.raises(StorageError):
            with store.transaction():
                a = store.create_node("Person")
                b = store.create_node("Person")
                store.create_relationship(a, b, "FATHER")
                store.create_relationship(a, NodeHandle(id=99999, label="Person"), "MOTHER")

        assert store.count_nodes() == 0
        assert store.count_relationships() == 0


class TestLifecycle:
    def test_context_manager_closes_connection(self):
        with create_database(":memory:") as store:
            store.create_node("Person")
        assert store.conn is None

    def test_closed_on_exception(self):
        with pytest.raises(ValueError):
            with create_database(":memory:") as store:
                raise ValueError("boom")
        assert store.conn is None

    def test_data_persists_across_reopen(self, tmp_path):
        db_path = tmp_path / "graph.db"
        with create_database(db_path) as store:
            with store.transaction():
                node = store.create_node("Person")
                store.set_property(node, "id", "I1")

        with create_database(db_path) as store:
            assert len(store.find_nodes_by_label_and_property("Person", "id", "I1")) == 1

    def test_uncommitted_writes_are_not_persisted(self, tmp_path):
        db_path = tmp_path / "graph.db"
        with pytest.raises(RuntimeError):
            with create_database(db_path) as store:
                with store.transaction():
                    store.create_node("Person")
                    raise RuntimeError("boom")

        with create_database(db_path) as store:
            assert store.count_nodes() == 0
