"""Fetch-or-create upserts keyed by a unique node property."""

from collections.abc import Callable
import logging
from typing import TypeVar

from database import SQLiteGraphStore
from errors import MalformedRecordError
from models import NodeHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")

Populator = Callable[[NodeHandle, T], None]


def make_id(xref: str | None) -> str:
    """Turn a GEDCOM xref like '@I12@' into a node id like 'I12'."""
    if xref is None:
        raise MalformedRecordError("Record has no cross-reference identifier")
    node_id = xref.replace("@", "")
    if not node_id:
        raise MalformedRecordError(f"Empty cross-reference identifier: {xref!r}")
    return node_id


def fetch_or_create(
    store: SQLiteGraphStore,
    label: str,
    key_name: str,
    key_value: str,
    source: T,
    populate: Populator,
) -> NodeHandle:
    """
    Return the node labelled ``label`` whose ``key_name`` equals ``key_value``.

    If no such node exists, create it, set the key and call
    ``populate(node, source)`` to attach everything else. An existing node is
    returned untouched: whatever ``source`` carries on later encounters is
    not applied. When several nodes match, the oldest one wins.
    """
    logger.info(f"fetch_or_create('{label}', '{key_name}', '{key_value}')")
    nodes = store.find_nodes_by_label_and_property(label, key_name, key_value)
    if nodes:
        logger.debug(f"Found existing node '{key_value}'")
        return nodes[0]

    logger.debug(f"Creating new node '{key_value}'")
    node = store.create_node(label)
    store.set_property(node, key_name, key_value)
    populate(node, source)
    return node
