from datetime import date
import json

import pytest

from models import PARENT, SPOUSE
from parsing import (
    gedcom_id,
    load_file,
    load_gedcom,
    load_json,
    parse_date_string,
    person_from_dict,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("25 NOV 1954", date(1954, 11, 25)),
        ("(02 May1838)", date(1838, 5, 2)),
        ("April 17, 1850", date(1850, 4, 17)),
        ("NOV 1954", date(1954, 11, 1)),
        ("(May, 1837)", date(1837, 5, 1)),
        ("1/15/1957", date(1957, 1, 15)),
        ("01-27-1920", date(1920, 1, 27)),
        ("04 05 1911", date(1911, 4, 5)),
        ("1839-08-29", date(1839, 8, 29)),
        ("1950-05-01T00:00:00.000Z", date(1950, 5, 1)),
        ("1746-00-00", date(1746, 1, 1)),
        ("1698", date(1698, 1, 1)),
        ("ABT 1905", date(1905, 1, 1)),
        ("(about 1833)", date(1833, 1, 1)),
        ("AFTER 1900", date(1900, 1, 1)),
        ("BEF. 3 MAR 1870", date(1870, 3, 3)),
        ("1888?", date(1888, 1, 1)),
    ],
)
def test_parse_date_string(text, expected):
    assert parse_date_string(text) == expected


@pytest.mark.parametrize("text", [None, "", "unknown", "31 FEB 1900", "Smarch 1900", "()"])
def test_parse_date_string_unparseable(text):
    assert parse_date_string(text) is None


def test_gedcom_id():
    assert gedcom_id("@I_347421849@") == "I_347421849"


def test_person_from_dict():
    p = person_from_dict(
        {"_id": 7, "firstName": "Ada", "lastName": "King", "dateOfBirth": "1815-12-10", "gender": "F"}
    )

    assert p.id == "7"
    assert p.sort_name == "King Ada"
    assert p.date_of_birth == date(1815, 12, 10)
    assert p.date_of_death is None
    assert p.sex == "F"


def test_load_json_skips_unknown_relationship_types(tmp_path, caplog):
    path = tmp_path / "family.json"
    path.write_text(
        json.dumps(
            {
                "persons": [
                    {"id": "1", "firstName": "Ann"},
                    {"id": "2", "firstName": "Bob"},
                ],
                "relationships": [
                    {"id": "r1", "fromPersonId": "1", "toPersonId": "2", "type": "parent"},
                    {"fromPersonId": "1", "toPersonId": "2", "type": "cousin"},
                ],
            }
        ),
        encoding="utf-8",
    )

    persons, relationships = load_json(path)

    assert [p.id for p in persons] == ["1", "2"]
    assert [(r.id, r.relationship_type) for r in relationships] == [("r1", PARENT)]
    assert "unknown type 'cousin'" in caplog.text


GEDCOM = """\
0 HEAD
1 GEDC
2 VERS 5.5.1
2 FORM LINEAGE-LINKED
1 CHAR UTF-8
0 @I1@ INDI
1 NAME John /Smith/
1 SEX M
1 BIRT
2 DATE 1 JAN 1900
1 DEAT
2 DATE 1970
1 FAMS @F1@
0 @I2@ INDI
1 NAME Mary /Jones/
1 SEX F
1 FAMS @F1@
0 @I3@ INDI
1 NAME Tom /Smith/
1 SEX M
1 BIRT
2 DATE ABT 1930
1 FAMC @F1@
0 @F1@ FAM
1 HUSB @I1@
1 WIFE @I2@
1 CHIL @I3@
0 TRLR
"""


def test_load_gedcom(tmp_path):
    path = tmp_path / "family.ged"
    path.write_text(GEDCOM, encoding="utf-8")

    persons, relationships = load_gedcom(path)

    by_id = {p.id: p for p in persons}
    assert set(by_id) == {"I1", "I2", "I3"}
    assert (by_id["I1"].first_name, by_id["I1"].last_name) == ("John", "Smith")
    assert by_id["I1"].date_of_birth == date(1900, 1, 1)
    assert by_id["I1"].date_of_death.year == 1970
    assert by_id["I3"].date_of_birth.year == 1930
    assert by_id["I2"].date_of_birth is None
    assert by_id["I2"].sex == "F"

    kinds = sorted((r.relationship_type, r.from_person_id, r.to_person_id) for r in relationships)
    assert kinds == [(PARENT, "I1", "I3"), (PARENT, "I2", "I3"), (SPOUSE, "I1", "I2")]


def test_load_file_dispatches_on_extension(tmp_path):
    ged = tmp_path / "tree.GED"
    ged.write_text(GEDCOM, encoding="utf-8")
    js = tmp_path / "tree.json"
    js.write_text(json.dumps({"persons": [{"id": "a"}]}), encoding="utf-8")

    assert len(load_file(ged)[0]) == 3
    assert [p.id for p in load_file(js)[0]] == ["a"]
