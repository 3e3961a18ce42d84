"""Graph schema names and the fixed GEDCOM event-type table.

Two vocabularies are provided. ``ENGLISH`` is the default and the schema any
consumer of the graph should rely on; ``NORWEGIAN`` produces the same graph
shape with Norwegian labels, relationship types and property keys.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Vocabulary:
    code: str

    # Node labels
    person: str
    family: str
    event: str
    place: str
    source: str

    # Relationship types
    wife: str
    husband: str
    child: str
    mother: str
    father: str
    has_event: str
    at_place: str
    citation: str
    name_citation: str
    contains: str

    # Property keys
    id: str
    name: str
    sex: str
    notes: str
    type: str
    date: str
    description: str
    title: str
    publication_facts: str
    author: str
    locator: str
    certainty: str
    family_ref: str

    event_types: Mapping[str, str]

    def event_label(self, code: str) -> str:
        """Map a GEDCOM event tag to its label; unknown tags pass through."""
        return self.event_types.get(code, code)


ENGLISH = Vocabulary(
    code="en",
    person="Person",
    family="Family",
    event="Event",
    place="Place",
    source="Source",
    wife="SPOUSE_WIFE",
    husband="SPOUSE_HUSBAND",
    child="CHILD",
    mother="MOTHER",
    father="FATHER",
    has_event="EVENT",
    at_place="PLACE",
    citation="CITATION",
    name_citation="NAME_CITATION",
    contains="CONTAINS",
    id="id",
    name="name",
    sex="sex",
    notes="notes",
    type="type",
    date="date",
    description="description",
    title="title",
    publication_facts="publicationFacts",
    author="author",
    locator="locator",
    certainty="certainty",
    family_ref="family",
    event_types=MappingProxyType(
        {
            "EVEN": "Event",
            "BIRT": "Birth",
            "DEAT": "Death",
            "OCCU": "Occupation",
            "RESI": "Residence",
            "BAPM": "Baptism",
            "ADOP": "Adoption",
            "CENS": "Census",
            "MARR": "Marriage",
            "BURI": "Burial",
            "PROB": "Probate",
            "CONF": "Confirmation",
            "ENGA": "Engagement",
            "NATI": "Nationality",
            "IMMI": "Immigration",
            "NATU": "Naturalization",
            "DIV": "Divorce",
            "DIVF": "Divorce filed",
            "RELI": "Religion",
            "RETI": "Retirement",
        }
    ),
)

NORWEGIAN = Vocabulary(
    code="no",
    person="Person",
    family="Familie",
    event="Hendelse",
    place="Sted",
    source="Kilde",
    wife="HUSTRU",
    husband="EKTEMANN",
    child="BARN",
    mother="MOR",
    father="FAR",
    has_event="HENDELSE",
    at_place="STED",
    citation="SITAT",
    name_citation="NAVNESITAT",
    contains="PLASSERING",
    id="id",
    name="navn",
    sex="kjonn",
    notes="notater",
    type="type",
    date="dato",
    description="beskrivelse",
    title="tittel",
    publication_facts="publisering",
    author="forfatter",
    locator="sitat",
    certainty="kvalitet",
    family_ref="familie",
    event_types=MappingProxyType(
        {
            "EVEN": "Hendelse",
            "BIRT": "Fødsel",
            "DEAT": "Død",
            "OCCU": "Yrke",
            "RESI": "Bosted",
            "BAPM": "Dåp",
            "ADOP": "Adopsjon",
            "CENS": "Folketelling",
            "MARR": "Ekteskap",
            "BURI": "Begravelse",
            "PROB": "Skifte",
            "CONF": "Konfirmasjon",
            "ENGA": "Forlovelse",
            "NATI": "Nasjonalitet",
            "IMMI": "Immigrasjon",
            "NATU": "Statsborgerskap",
            "DIV": "Skilsmisse",
            "DIVF": "Separasjon",
            "RELI": "Religion",
            "RETI": "Pensjon",
        }
    ),
)

VOCABULARIES = {v.code: v for v in (ENGLISH, NORWEGIAN)}


def get_vocabulary(code: str) -> Vocabulary:
    """Return the vocabulary for a language code ('en' or 'no')."""
    try:
        return VOCABULARIES[code]
    except KeyError:
        raise ValueError(
            f"Unknown vocabulary: {code!r} (expected one of {sorted(VOCABULARIES)})"
        ) from None
