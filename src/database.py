"""SQLite-backed property graph store."""

from collections.abc import Iterator
from contextlib import contextmanager
import json
import logging
from pathlib import Path
import sqlite3

from errors import StorageError
from models import NodeHandle, RelationshipHandle

logger = logging.getLogger(__name__)


SCHEMA = """
    CREATE TABLE IF NOT EXISTS node (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        label TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS node_property (
        node_id INTEGER NOT NULL,
        key TEXT NOT NULL,
        value TEXT NOT NULL,
        PRIMARY KEY (node_id, key),
        FOREIGN KEY (node_id) REFERENCES node(id)
    );

    CREATE TABLE IF NOT EXISTS relationship (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        start_id INTEGER NOT NULL,
        end_id INTEGER NOT NULL,
        type TEXT NOT NULL,
        FOREIGN KEY (start_id) REFERENCES node(id),
        FOREIGN KEY (end_id) REFERENCES node(id)
    );

    CREATE TABLE IF NOT EXISTS relationship_property (
        relationship_id INTEGER NOT NULL,
        key TEXT NOT NULL,
        value TEXT NOT NULL,
        PRIMARY KEY (relationship_id, key),
        FOREIGN KEY (relationship_id) REFERENCES relationship(id)
    );

    CREATE INDEX IF NOT EXISTS idx_node_label ON node (label);
    CREATE INDEX IF NOT EXISTS idx_node_property_lookup ON node_property (key, value);
    CREATE INDEX IF NOT EXISTS idx_relationship_start ON relationship (start_id, type);
"""


def _encode(value) -> str:
    return json.dumps(value, ensure_ascii=False)


def _decode(text: str):
    return json.loads(text)


@contextmanager
def _storage_errors(action: str):
    try:
        yield
    except sqlite3.Error as e:
        raise StorageError(f"Failed to {action}: {e}") from e


class SQLiteGraphStore:
    """Labelled nodes and typed relationships with JSON properties, kept in SQLite.

    Node ids are allocated in creation order, so every lookup that returns
    several nodes returns them oldest first.

    The store is a scoped resource: use it as a context manager, or call
    ``close()`` yourself. Writes made inside ``transaction()`` are committed
    together or not at all.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._in_transaction = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self):
        """Close the underlying connection."""
        if self.conn is not None:
            logger.debug("Closing graph store")
            self.conn.close()
            self.conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @contextmanager
    def transaction(self) -> Iterator["SQLiteGraphStore"]:
        """Run the enclosed block as one transaction; roll back on any exception."""
        if self._in_transaction:
            raise StorageError("Nested transactions are not supported")
        with _storage_errors("begin transaction"):
            self.conn.execute("BEGIN")
        self._in_transaction = True
        try:
            yield self
        except BaseException:
            # SQLite may already have rolled back on its own (disk full, I/O error)
            if self.conn.in_transaction:
                logger.warning("Rolling back transaction")
                self.conn.execute("ROLLBACK")
            raise
        else:
            with _storage_errors("commit transaction"):
                self.conn.execute("COMMIT")
        finally:
            self._in_transaction = False

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_node(self, label: str) -> NodeHandle:
        with _storage_errors(f"create {label} node"):
            cursor = self.conn.execute("INSERT INTO node (label) VALUES (?)", (label,))
        return NodeHandle(id=cursor.lastrowid, label=label)

    def create_relationship(
        self, start: NodeHandle, end: NodeHandle, rel_type: str
    ) -> RelationshipHandle:
        with _storage_errors(f"create {rel_type} relationship"):
            cursor = self.conn.execute(
                "INSERT INTO relationship (start_id, end_id, type) VALUES (?, ?, ?)",
                (start.id, end.id, rel_type),
            )
        return RelationshipHandle(
            id=cursor.lastrowid, type=rel_type, start_id=start.id, end_id=end.id
        )

    def set_property(self, handle: NodeHandle | RelationshipHandle, key: str, value):
        """Set a property on a node or a relationship, replacing any previous value."""
        table, column = self._property_table(handle)
        with _storage_errors(f"set property {key!r}"):
            self.conn.execute(
                f"INSERT OR REPLACE INTO {table} ({column}, key, value) VALUES (?, ?, ?)",
                (handle.id, key, _encode(value)),
            )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_property(self, handle: NodeHandle | RelationshipHandle, key: str, default=None):
        table, column = self._property_table(handle)
        with _storage_errors(f"read property {key!r}"):
            row = self.conn.execute(
                f"SELECT value FROM {table} WHERE {column} = ? AND key = ?",
                (handle.id, key),
            ).fetchone()
        return _decode(row[0]) if row else default

    def get_properties(self, handle: NodeHandle | RelationshipHandle) -> dict:
        table, column = self._property_table(handle)
        with _storage_errors("read properties"):
            rows = self.conn.execute(
                f"SELECT key, value FROM {table} WHERE {column} = ? ORDER BY key",
                (handle.id,),
            ).fetchall()
        return {key: _decode(value) for key, value in rows}

    def find_nodes_by_label_and_property(self, label: str, key: str, value) -> list[NodeHandle]:
        """Return all nodes carrying ``label`` whose ``key`` property equals ``value``."""
        with _storage_errors(f"look up {label} nodes"):
            rows = self.conn.execute(
                """
                SELECT n.id FROM node n
                JOIN node_property p ON p.node_id = n.id
                WHERE p.key = ? AND p.value = ? AND n.label = ?
                ORDER BY n.id
                """,
                (key, _encode(value), label),
            ).fetchall()
        return [NodeHandle(id=row[0], label=label) for row in rows]

    def traverse_outgoing(self, node: NodeHandle, rel_type: str) -> list[NodeHandle]:
        """
        Walk outgoing ``rel_type`` relationships depth-first from ``node``.

        The start node comes first, followed by every node reachable from it
        in visiting order. Each node is visited at most once.
        """
        result: list[NodeHandle] = []
        seen: set[int] = set()
        stack = [node]
        while stack:
            current = stack.pop()
            if current.id in seen:
                continue
            seen.add(current.id)
            result.append(current)
            with _storage_errors(f"traverse {rel_type} relationships"):
                rows = self.conn.execute(
                    """
                    SELECT n.id, n.label FROM relationship r
                    JOIN node n ON n.id = r.end_id
                    WHERE r.start_id = ? AND r.type = ?
                    ORDER BY r.id DESC
                    """,
                    (current.id, rel_type),
                ).fetchall()
            stack.extend(NodeHandle(id=row[0], label=row[1]) for row in rows)
        return result

    def nodes(self, label: str | None = None) -> list[NodeHandle]:
        query = "SELECT id, label FROM node"
        params: tuple = ()
        if label is not None:
            query += " WHERE label = ?"
            params = (label,)
        with _storage_errors("list nodes"):
            rows = self.conn.execute(query + " ORDER BY id", params).fetchall()
        return [NodeHandle(id=row[0], label=row[1]) for row in rows]

    def relationships(self, rel_type: str | None = None) -> list[RelationshipHandle]:
        query = "SELECT id, type, start_id, end_id FROM relationship"
        params: tuple = ()
        if rel_type is not None:
            query += " WHERE type = ?"
            params = (rel_type,)
        with _storage_errors("list relationships"):
            rows = self.conn.execute(query + " ORDER BY id", params).fetchall()
        return [
            RelationshipHandle(id=row[0], type=row[1], start_id=row[2], end_id=row[3])
            for row in rows
        ]

    def count_nodes(self, label: str | None = None) -> int:
        query = "SELECT COUNT(*) FROM node"
        params: tuple = ()
        if label is not None:
            query += " WHERE label = ?"
            params = (label,)
        with _storage_errors("count nodes"):
            return self.conn.execute(query, params).fetchone()[0]

    def count_relationships(self, rel_type: str | None = None) -> int:
        query = "SELECT COUNT(*) FROM relationship"
        params: tuple = ()
        if rel_type is not None:
            query += " WHERE type = ?"
            params = (rel_type,)
        with _storage_errors("count relationships"):
            return self.conn.execute(query, params).fetchone()[0]

    @staticmethod
    def _property_table(handle) -> tuple[str, str]:
        if isinstance(handle, RelationshipHandle):
            return "relationship_property", "relationship_id"
        return "node_property", "node_id"


def create_database(db_path: Path | str) -> SQLiteGraphStore:
    """Open (creating if needed) a graph store at ``db_path``; ``":memory:"`` is allowed."""
    logger.info(f"Opening graph store: {db_path}")
    with _storage_errors(f"open database {db_path}"):
        # Autocommit mode: transaction boundaries are issued explicitly by the store.
        conn = sqlite3.connect(db_path, isolation_level=None)
        conn.execute("PRAGMA foreign_keys = ON")
        conn.executescript(SCHEMA)
    return SQLiteGraphStore(conn)
