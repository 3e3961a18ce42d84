"""Exceptions raised while importing a GEDCOM file into the graph store."""


class GedgraphError(Exception):
    """Base class for import failures."""


class MalformedRecordError(GedgraphError, ValueError):
    """A record cannot be resolved to a usable key."""


class StorageError(GedgraphError):
    """The graph store rejected a read or write."""
