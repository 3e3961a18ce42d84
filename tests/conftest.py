"""Shared fixtures and record builders for the gedgraph tests."""

import pytest

from database import create_database
from models import Citation, Event, Family, Individual, Note, PersonalName, Source


SAMPLE_GEDCOM = """\
0 HEAD
1 SOUR TEST
1 GEDC
2 VERS 5.5.1
2 FORM LINEAGE-LINKED
1 CHAR UTF-8
0 @I1@ INDI
1 NAME John /Smith/
2 SOUR @S1@
3 PAGE p. 4
1 SEX M
1 BIRT
2 DATE 1 JAN 1900
2 PLAC Springfield, Sangamon, Illinois
1 OCCU Farmer
1 NOTE First line
2 CONT second line
1 FAMS @F1@
0 @I2@ INDI
1 NAME Mary /Jones/
1 SEX F
1 FAMS @F1@
0 @I3@ INDI
1 NAME Ann /Smith/
1 SEX F
1 FAMC @F1@
1 SOUR @S1@
2 PAGE Entry 12
2 QUAY 3
0 @F1@ FAM
1 HUSB @I1@
1 WIFE @I2@
1 CHIL @I3@
1 MARR
2 DATE 1925
2 PLAC Springfield, Sangamon, Illinois
0 @S1@ SOUR
1 TITL Parish register
1 AUTH Parish clerk
0 TRLR
"""


@pytest.fixture
def store():
    with create_database(":memory:") as s:
        yield s


@pytest.fixture
def gedcom_file(tmp_path):
    path = tmp_path / "sample.ged"
    path.write_text(SAMPLE_GEDCOM, encoding="utf-8")
    return path


def make_person(xref, *names, sex=None, **kwargs) -> Individual:
    return Individual(
        xref=xref,
        names=[PersonalName(basic=n) for n in names],
        sex=sex,
        **kwargs,
    )


def make_family(xref, wife=None, husband=None, children=(), events=()) -> Family:
    return Family(xref=xref, wife=wife, husband=husband, children=list(children), events=list(events))


def make_source(xref, title="Parish register", **kwargs) -> Source:
    return Source(xref=xref, title=[title], **kwargs)


def make_citation(source, page=None, quality=None) -> Citation:
    return Citation(source=source, where_in_source=page, certainty=quality)


def make_note(*lines) -> Note:
    return Note(lines=list(lines))


def make_event(tag, date=None, place=None, **kwargs) -> Event:
    return Event(tag=tag, date=date, place=place, **kwargs)
