"""Data classes for GEDCOM records and graph store handles."""

from dataclasses import dataclass, field


# ============================================================================
# Record tree (built by parsing.py, consumed by the importer)
# ============================================================================


@dataclass
class Note:
    lines: list[str] = field(default_factory=list)


@dataclass
class Source:
    xref: str | None
    title: list[str] = field(default_factory=list)
    publication_facts: list[str] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)


@dataclass
class Citation:
    source: Source | None
    where_in_source: str | None = None
    certainty: str | None = None


@dataclass
class Event:
    tag: str  # BIRT, DEAT, OCCU, ...
    date: str | None = None
    description: str | None = None
    place: str | None = None  # "Town, County, Country"
    notes: list[Note] = field(default_factory=list)
    citations: list[Citation] = field(default_factory=list)


@dataclass
class PersonalName:
    basic: str
    citations: list[Citation] = field(default_factory=list)


@dataclass
class Individual:
    xref: str | None
    names: list[PersonalName] = field(default_factory=list)
    sex: str | None = None
    notes: list[Note] = field(default_factory=list)
    citations: list[Citation] = field(default_factory=list)
    attributes: list[Event] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)


@dataclass
class Family:
    xref: str | None
    wife: Individual | None = None
    husband: Individual | None = None
    children: list[Individual] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)


@dataclass
class GedcomTree:
    families: dict[str, Family] = field(default_factory=dict)


# ============================================================================
# Graph store handles
# ============================================================================


@dataclass(frozen=True)
class NodeHandle:
    id: int
    label: str


@dataclass(frozen=True)
class RelationshipHandle:
    id: int
    type: str
    start_id: int
    end_id: int
