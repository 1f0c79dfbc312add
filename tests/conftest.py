from datetime import date

import pytest

from models import CHILD, PARENT, SPOUSE, Person, Relationship


def person(person_id, first="", last="", born=None, died=None, sex=None):
    return Person(
        id=person_id,
        first_name=first,
        last_name=last,
        date_of_birth=date(born, 1, 1) if isinstance(born, int) else born,
        date_of_death=date(died, 1, 1) if isinstance(died, int) else died,
        sex=sex,
    )


def parent(parent_id, child_id):
    return Relationship(f"p-{parent_id}-{child_id}", parent_id, child_id, PARENT)


def child(parent_id, child_id):
    # "child" relationships are stored parent -> child as well
    return Relationship(f"c-{parent_id}-{child_id}", parent_id, child_id, CHILD)


def spouse(a, b):
    return Relationship(f"s-{a}-{b}", a, b, SPOUSE)


@pytest.fixture
def three_generations():
    """
    G1 + G2 -> F ; F + M -> R, S ; R + W -> K.
    X is not related to anyone.
    """
    persons = [
        person("G1", "George", "Smith", born=1900, died=1970, sex="M"),
        person("G2", "Grace", "Smith", born=1903, died=1980, sex="F"),
        person("F", "Frank", "Smith", born=1930, died=2000, sex="M"),
        person("M", "Mary", "Jones", born=1932, sex="F"),
        person("R", "Robert", "Smith", born=1960, sex="M"),
        person("S", "Susan", "Smith", born=1958, sex="F"),
        person("W", "Wendy", "Brown", born=1962, sex="F"),
        person("K", "Kevin", "Smith", born=1990, sex="M"),
        person("X", "Xavier", "Young"),
    ]
    relationships = [
        spouse("G1", "G2"),
        parent("G1", "F"),
        parent("G2", "F"),
        spouse("F", "M"),
        parent("F", "R"),
        parent("M", "R"),
        parent("F", "S"),
        parent("M", "S"),
        spouse("R", "W"),
        parent("R", "K"),
        parent("W", "K"),
    ]
    return persons, relationships


REMARRIAGE_LINKS = 1000


@pytest.fixture
def remarriage_chain():
    """
    P0 + P1 -> C1, P1 + P2 -> C2, ... : every P remarries, so the whole chain is one
    connected family that spans only two generations.
    """
    persons = [person(f"P{i}") for i in range(REMARRIAGE_LINKS + 1)]
    persons += [person(f"C{i}") for i in range(1, REMARRIAGE_LINKS + 1)]
    relationships = []
    for i in range(1, REMARRIAGE_LINKS + 1):
        relationships += [
            spouse(f"P{i - 1}", f"P{i}"),
            parent(f"P{i - 1}", f"C{i}"),
            parent(f"P{i}", f"C{i}"),
        ]
    return persons, relationships
