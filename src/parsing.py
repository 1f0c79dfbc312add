"""Load persons and relationships from GEDCOM or JSON files, and parse loose dates."""

from datetime import date
import json
import logging
from pathlib import Path
import re

from ged4py import GedcomReader

from models import PARENT, RELATIONSHIP_TYPES, SPOUSE, Person, Relationship

logger = logging.getLogger(__name__)


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

QUALIFIERS = re.compile(
    r"^(ABOUT|ABT\.?|BEFORE|BEF\.?|AFTER|AFT\.?|EST\.?|CAL\.?|FROM|TO|BET\.?|AND|CIRCA|CA\.?|AROUND):?\s*",
    flags=re.IGNORECASE,
)

# (pattern, field order); fields are y(ear), m(onth number), n(month name), d(ay)
DATE_PATTERNS = [
    (re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:T.*)?$"), "ymd"),  # 1839-08-29, 1950-05-01T00:00:00Z
    (re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$"), "dny"),  # 25 NOV 1954, 02 May1838
    (re.compile(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$"), "ndy"),  # April 17, 1850
    (re.compile(r"^([A-Za-z]+)\.?,?\s*(\d{4})$"), "ny"),  # NOV 1954, May, 1837
    (re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$"), "mdy"),  # 01-27-1920, 1/15/1957
    (re.compile(r"^(\d{1,2})\s+(\d{1,2})\s+(\d{4})$"), "mdy"),  # 04 05 1911
    (re.compile(r"^(\d{4})$"), "y"),  # 1698
]


def parse_date_string(date_str: str | None) -> date | None:
    """
    Parse a GEDCOM or free-form date string.
    Returns None if the date cannot be parsed.

    Handles qualifiers ("ABT 1905", "(about 1833)"), missing parts ("JAN 1905",
    "1698", "1746-00-00" all fall back to the first month/day) and the usual
    day-month-year, month-day-year and ISO orderings.
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?")
    s = QUALIFIERS.sub("", s).strip()
    if not s:
        return None

    for pattern, order in DATE_PATTERNS:
        match = pattern.match(s)
        if not match:
            continue

        parts = dict(zip(order, match.groups()))
        if "n" in parts:
            month = MONTH_MAP.get(parts["n"].upper().rstrip("."))
            if month is None:
                continue
        else:
            month = int(parts.get("m", 1)) or 1
        day = int(parts.get("d", 1)) or 1

        try:
            return date(int(parts["y"]), month, day)
        except ValueError:
            continue

    return None


# ============================================================================
# GEDCOM
# ============================================================================


def gedcom_id(xref_id: str) -> str:
    """'@I_347421849@' -> 'I_347421849'."""
    return xref_id.strip("@")


def extract_name_parts(indi) -> tuple[str, str]:
    """Extract given name and surname from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return ("", "")

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_rec.value, tuple):
        given, surname, _suffix = name_rec.value
        return (given or "", surname or "")

    givn = name_rec.sub_tag("GIVN")
    surn = name_rec.sub_tag("SURN")
    if givn or surn:
        return (givn.value if givn else "", surn.value if surn else "")

    # "Given /Surname/"
    match = re.match(r"^(.*?)\s*/(.*)/", str(name_rec.value))
    if match:
        return (match.group(1).strip(), match.group(2).strip())
    return (str(name_rec.value).strip(), "")


def extract_event_date(indi, tag: str) -> date | None:
    event = indi.sub_tag(tag)
    if event is None:
        return None
    date_rec = event.sub_tag("DATE")
    # ged4py may return DateValue objects
    if date_rec and date_rec.value:
        return parse_date_string(str(date_rec.value))
    return None


def load_gedcom(filepath: Path) -> tuple[list[Person], list[Relationship]]:
    """
    Read INDI and FAM records into persons plus spouse and parent relationships.
    Ignores non-standard, vendor-specific tags.
    """
    persons: list[Person] = []
    relationships: list[Relationship] = []

    with GedcomReader(str(filepath)) as reader:
        for rec in reader.records0("INDI"):
            if rec.xref_id is None:
                continue
            first_name, last_name = extract_name_parts(rec)
            sex_rec = rec.sub_tag("SEX")
            persons.append(
                Person(
                    id=gedcom_id(rec.xref_id),
                    first_name=first_name,
                    last_name=last_name,
                    date_of_birth=extract_event_date(rec, "BIRT"),
                    date_of_death=extract_event_date(rec, "DEAT"),
                    sex=sex_rec.value if sex_rec else None,
                )
            )

        for rec in reader.records0("FAM"):
            if rec.xref_id is None:
                continue
            fam_id = gedcom_id(rec.xref_id)
            parent_ids = [
                gedcom_id(tag.xref_id)
                for tag in (rec.sub_tag("HUSB"), rec.sub_tag("WIFE"))
                if tag is not None and tag.xref_id
            ]
            child_ids = [gedcom_id(c.xref_id) for c in rec.sub_tags("CHIL") if c.xref_id]

            if len(parent_ids) == 2:
                relationships.append(
                    Relationship(
                        id=f"{fam_id}-spouse",
                        from_person_id=parent_ids[0],
                        to_person_id=parent_ids[1],
                        relationship_type=SPOUSE,
                    )
                )
            for parent_id in parent_ids:
                for child_id in child_ids:
                    relationships.append(
                        Relationship(
                            id=f"{fam_id}-{parent_id}-{child_id}",
                            from_person_id=parent_id,
                            to_person_id=child_id,
                            relationship_type=PARENT,
                        )
                    )

    logger.info(
        "Loaded %d persons and %d relationships from %s",
        len(persons),
        len(relationships),
        filepath,
    )
    return persons, relationships


# ============================================================================
# JSON
# ============================================================================


def person_from_dict(data: dict) -> Person:
    """Build a Person from the camelCase shape used by the web client."""
    return Person(
        id=str(data.get("id") or data["_id"]),
        first_name=data.get("firstName") or "",
        last_name=data.get("lastName") or "",
        date_of_birth=parse_date_string(data.get("dateOfBirth")),
        date_of_death=parse_date_string(data.get("dateOfDeath")),
        sex=data.get("gender") or data.get("sex"),
    )


def relationship_from_dict(data: dict, position: int) -> Relationship | None:
    relationship_type = data.get("type")
    if relationship_type not in RELATIONSHIP_TYPES:
        logger.warning("Skipping relationship %d: unknown type %r", position, relationship_type)
        return None
    return Relationship(
        id=str(data.get("id") or data.get("_id") or position),
        from_person_id=str(data["fromPersonId"]),
        to_person_id=str(data["toPersonId"]),
        relationship_type=relationship_type,
    )


def load_json(filepath: Path) -> tuple[list[Person], list[Relationship]]:
    """Read `{"persons": [...], "relationships": [...]}`."""
    with open(filepath, encoding="utf-8") as f:
        data = json.load(f)

    persons = [person_from_dict(p) for p in data.get("persons", [])]
    relationships = [
        rel
        for i, raw in enumerate(data.get("relationships", []))
        if (rel := relationship_from_dict(raw, i)) is not None
    ]
    return persons, relationships


def load_file(filepath: Path) -> tuple[list[Person], list[Relationship]]:
    """Dispatch on extension: .ged is GEDCOM, anything else is JSON."""
    if filepath.suffix.lower() == ".ged":
        return load_gedcom(filepath)
    return load_json(filepath)
