"""GEDCOM parsing into the record tree, and date handling utilities."""

from pathlib import Path
import logging
import re

from ged4py import GedcomReader

from models import Citation, Event, Family, GedcomTree, Individual, Note, PersonalName, Source

logger = logging.getLogger(__name__)


# Individual attribute and event tags (GEDCOM 5.5.1). Attributes are listed
# before events on a person, the same order the importer writes them in.
INDIVIDUAL_ATTRIBUTE_TAGS = frozenset(
    ["CAST", "DSCR", "EDUC", "IDNO", "NATI", "NCHI", "NMR", "OCCU", "PROP", "RELI", "RESI", "SSN", "TITL", "FACT"]
)
INDIVIDUAL_EVENT_TAGS = frozenset(
    [
        "BIRT", "CHR", "DEAT", "BURI", "CREM", "ADOP", "BAPM", "BARM", "BASM", "BLES", "CHRA",
        "CONF", "FCOM", "ORDN", "NATU", "EMIG", "IMMI", "CENS", "PROB", "WILL", "GRAD", "RETI", "EVEN",
    ]
)
FAMILY_EVENT_TAGS = frozenset(
    ["ANUL", "CENS", "DIV", "DIVF", "ENGA", "MARB", "MARC", "MARR", "MARL", "MARS", "RESI", "EVEN"]
)

# Month name mappings (handle abbreviations and full names)
MONTH_MAP = {
    "JAN": 1,
    "JANUARY": 1,
    "FEB": 2,
    "FEBRUARY": 2,
    "MAR": 3,
    "MARCH": 3,
    "APR": 4,
    "APRIL": 4,
    "MAY": 5,
    "JUN": 6,
    "JUNE": 6,
    "JUL": 7,
    "JULY": 7,
    "AUG": 8,
    "AUGUST": 8,
    "SEP": 9,
    "SEPT": 9,
    "SEPTEMBER": 9,
    "OCT": 10,
    "OCTOBER": 10,
    "NOV": 11,
    "NOVEMBER": 11,
    "DEC": 12,
    "DECEMBER": 12,
}


def parse_date_string(date_str: str | None) -> str | None:
    """
    Parse a GEDCOM date string into ISO format (YYYY-MM-DD).
    Returns None if the date cannot be parsed.

    Handles formats like:
    - "25 NOV 1954"
    - "1698"
    - "ABT 1905"
    - "JAN 1905"
    - "01-27-1920" / "05/15/1923"
    - "1839-08-29"
    - "April 17, 1850"
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?")
    # Remove qualifiers (ABT, BEF, AFT, EST, CAL, ...) - with optional colon.
    # Long forms come first: ged4py renders ABT as ABOUT, BET as BETWEEN, etc.
    s = re.sub(
        r"^(ABOUT|ABT\.?|BEFORE|BEF\.?|AFTER|AFT\.?|ESTIMATED|EST\.?|CALCULATED|CAL\.?|BETWEEN|BET\.?"
        r"|INTERPRETED|INT\.?|FROM|TO|AND|CIRCA|CA\.?|AROUND):?\s*",
        "",
        s,
        flags=re.IGNORECASE,
    )
    # Ranges ("1950 AND 1960", "1900 TO 1910") keep their first date
    s = re.split(r"\s+(?:AND|TO)\s+", s, maxsplit=1, flags=re.IGNORECASE)[0]
    s = s.strip()

    if not s:
        return None

    # "1839-08-29" or "1746-00-00"
    match = re.match(r"^(\d{4})-(\d{2})-(\d{2})$", s)
    if match:
        year, month, day = (int(g) for g in match.groups())
        month = month or 1
        day = day or 1
        if 1 <= month <= 12 and 1 <= day <= 31:
            return f"{year:04d}-{month:02d}-{day:02d}"

    # "25 NOV 1954", "11 Aug. 1968", "02 May1838"
    match = re.match(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$", s)
    if match:
        month = MONTH_MAP.get(match.group(2).upper())
        if month:
            return f"{int(match.group(3)):04d}-{month:02d}-{int(match.group(1)):02d}"

    # "NOV 1954", "May, 1837"
    match = re.match(r"^([A-Za-z]+)\.?,?\s*(\d{4})$", s)
    if match:
        month = MONTH_MAP.get(match.group(1).upper())
        if month:
            return f"{int(match.group(2)):04d}-{month:02d}-01"

    # "1698"
    match = re.match(r"^(\d{4})$", s)
    if match:
        return f"{int(match.group(1)):04d}-01-01"

    # "01-27-1920" or "01/27/1920" (MM-DD-YYYY)
    match = re.match(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$", s)
    if match:
        month, day, year = (int(g) for g in match.groups())
        if 1 <= month <= 12 and 1 <= day <= 31:
            return f"{year:04d}-{month:02d}-{day:02d}"

    # "April 17, 1850", "Oct.12,1929"
    match = re.match(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$", s)
    if match:
        month = MONTH_MAP.get(match.group(1).upper())
        if month:
            return f"{int(match.group(3)):04d}-{month:02d}-{int(match.group(2)):02d}"

    return None


# ============================================================================
# Record helpers
# ============================================================================


def pointer_xref(value) -> str | None:
    """Return the '@X1@' target of a pointer value, or None for plain text."""
    # ged4py wraps pointers in an object whose .value is the xref string
    xref = getattr(value, "value", value)
    if value is not None and not isinstance(xref, str):
        xref = str(value)
    if isinstance(xref, str) and len(xref) > 2 and xref.startswith("@") and xref.endswith("@"):
        return xref
    return None


def text_value(rec) -> str | None:
    if rec is None or rec.value is None:
        return None
    return str(rec.value)


def text_lines(rec) -> list[str]:
    """Value of ``rec`` split into lines, continuation records included."""
    if rec is None:
        return []
    value = text_value(rec)
    lines = value.split("\n") if value else []
    # ged4py normally folds CONT/CONC into the value already
    for sub in rec.sub_records:
        if sub.tag == "CONT":
            lines.append(text_value(sub) or "")
        elif sub.tag == "CONC":
            if lines:
                lines[-1] += text_value(sub) or ""
            else:
                lines.append(text_value(sub) or "")
    return lines


def extract_full_name(name_rec) -> str:
    """Full name of a NAME record, e.g. 'John Smith' for 'John /Smith/'."""
    name_value = name_rec.value
    if name_value is None:
        return ""

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_value, tuple):
        return " ".join(p for p in name_value if p)

    return str(name_value).replace("/", "")


def extract_sex(indi) -> str | None:
    """Extract sex from an individual record."""
    sex_rec = indi.sub_tag("SEX")
    return sex_rec.value if sex_rec else None


class RecordTreeBuilder:
    """Builds the record tree from a ged4py reader.

    Pointers are resolved through indexes of the level-0 INDI, SOUR and NOTE
    records, so each individual and source is converted once and shared by
    every record that points at it.
    """

    def __init__(self, reader: GedcomReader):
        self.reader = reader
        self.individual_records = {rec.xref_id: rec for rec in reader.records0("INDI") if rec.xref_id}
        self.source_records = {rec.xref_id: rec for rec in reader.records0("SOUR") if rec.xref_id}
        self.note_records = {rec.xref_id: rec for rec in reader.records0("NOTE") if rec.xref_id}
        self._individuals: dict[str, Individual] = {}
        self._sources: dict[str, Source] = {}

    def build(self) -> GedcomTree:
        tree = GedcomTree()
        for rec in self.reader.records0("FAM"):
            family = self.extract_family(rec)
            tree.families[rec.xref_id] = family
        return tree

    def extract_family(self, rec) -> Family:
        family = Family(xref=rec.xref_id)
        for sub in rec.sub_records:
            if sub.tag == "WIFE":
                family.wife = self.individual(pointer_xref(sub.value))
            elif sub.tag == "HUSB":
                family.husband = self.individual(pointer_xref(sub.value))
            elif sub.tag == "CHIL":
                family.children.append(self.individual(pointer_xref(sub.value)))
            elif sub.tag in FAMILY_EVENT_TAGS:
                family.events.append(self.extract_event(sub))
        return family

    def individual(self, xref: str | None) -> Individual:
        if xref in self._individuals:
            return self._individuals[xref]

        individual = Individual(xref=xref)
        rec = self.individual_records.get(xref)
        if rec is None:
            logger.warning(f"Individual {xref} is referenced but not defined")
        else:
            self._individuals[xref] = individual
            individual.sex = extract_sex(rec)
            for sub in rec.sub_records:
                if sub.tag == "NAME":
                    individual.names.append(
                        PersonalName(basic=extract_full_name(sub), citations=self.extract_citations(sub))
                    )
                elif sub.tag in INDIVIDUAL_ATTRIBUTE_TAGS:
                    individual.attributes.append(self.extract_event(sub))
                elif sub.tag in INDIVIDUAL_EVENT_TAGS:
                    individual.events.append(self.extract_event(sub))
            individual.notes = self.extract_notes(rec)
            individual.citations = self.extract_citations(rec)
        return individual

    def extract_event(self, rec) -> Event:
        description = text_value(rec)
        if description in ("", "Y"):
            description = None
        date_rec = rec.sub_tag("DATE")
        place_rec = rec.sub_tag("PLAC")
        return Event(
            tag=rec.tag,
            # Convert date value to string (ged4py may return DateValue objects)
            date=str(date_rec.value) if date_rec and date_rec.value else None,
            description=description,
            place=text_value(place_rec) or None,
            notes=self.extract_notes(rec),
            citations=self.extract_citations(rec),
        )

    def extract_notes(self, rec) -> list[Note]:
        notes = []
        for sub in rec.sub_records:
            if sub.tag != "NOTE":
                continue
            xref = pointer_xref(sub.value)
            target = self.note_records.get(xref) if xref else sub
            notes.append(Note(lines=text_lines(target)))
        return notes

    def extract_citations(self, rec) -> list[Citation]:
        citations = []
        for sub in rec.sub_records:
            if sub.tag != "SOUR":
                continue
            page = sub.sub_tag("PAGE")
            quay = sub.sub_tag("QUAY")
            citations.append(
                Citation(
                    source=self.source(pointer_xref(sub.value)),
                    where_in_source=text_value(page),
                    certainty=text_value(quay),
                )
            )
        return citations

    def source(self, xref: str | None) -> Source | None:
        """The Source a citation points at; None for citations without a source record."""
        if xref is None:
            return None
        if xref not in self._sources:
            rec = self.source_records.get(xref)
            if rec is None:
                logger.warning(f"Source {xref} is referenced but not defined")
                return Source(xref=xref)
            self._sources[xref] = Source(
                xref=xref,
                title=text_lines(rec.sub_tag("TITL")),
                publication_facts=text_lines(rec.sub_tag("PUBL")),
                authors=text_lines(rec.sub_tag("AUTH")),
                notes=self.extract_notes(rec),
            )
        return self._sources[xref]


def parse_gedcom(filepath: Path) -> GedcomTree:
    """Parse a GEDCOM file into the record tree the importer consumes."""
    logger.info(f"Parsing GEDCOM file: {filepath}")
    with GedcomReader(str(filepath)) as reader:
        tree = RecordTreeBuilder(reader).build()
    logger.info(f"Parsed {len(tree.families)} families")
    return tree
