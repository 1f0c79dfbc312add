from conftest import child, parent, person, spouse
from graph import assign_generations, build_index, identify_family_units, pair_key, to_networkx
from models import PARENT, SIBLING, SPOUSE, Relationship


def test_build_index_skips_dangling_and_self_references():
    persons = [person("A"), person("B")]
    relationships = [
        parent("A", "B"),
        parent("A", "ghost"),
        parent("ghost", "B"),
        spouse("A", "A"),
    ]

    index = build_index(persons, relationships)

    assert index.children("A") == ["B"]
    assert index.parents("B") == ["A"]
    assert index.spouses("A") == []
    assert "ghost" not in index


def test_build_index_reads_child_type_as_parent_to_child():
    index = build_index([person("P"), person("C")], [child("P", "C")])

    assert index.children("P") == ["C"]
    assert index.parents("C") == ["P"]


def test_build_index_ignores_other_relationship_types():
    relationships = [Relationship("r1", "A", "B", SIBLING)]

    index = build_index([person("A"), person("B")], relationships)

    assert index.children("A") == []
    assert index.spouses("A") == []


def test_build_index_stores_spouses_both_ways_once():
    index = build_index([person("A"), person("B")], [spouse("A", "B"), spouse("B", "A")])

    assert index.spouses("A") == ["B"]
    assert index.spouses("B") == ["A"]


def test_assign_generations_levels(three_generations):
    persons, relationships = three_generations
    index = build_index(persons, relationships)

    generations = assign_generations(index, "R")

    assert generations["R"] == 0
    assert generations["W"] == 0
    assert generations["S"] == 0
    assert generations["F"] == -1
    assert generations["M"] == -1
    assert generations["G1"] == -2
    assert generations["G2"] == -2
    assert generations["K"] == 1
    # unreachable persons default to 0
    assert generations["X"] == 0


def test_assign_generations_terminates_on_cycles():
    persons = [person("A"), person("B"), person("C")]
    relationships = [parent("A", "B"), spouse("B", "C"), parent("C", "A")]
    index = build_index(persons, relationships)

    generations = assign_generations(index, "A")

    assert generations == {"A": 0, "C": -1, "B": 1}


def test_assign_generations_unknown_root_defaults_everyone_to_zero():
    index = build_index([person("A"), person("B")], [parent("A", "B")])

    assert assign_generations(index, "missing") == {"A": 0, "B": 0}


def test_pair_key_is_order_independent():
    assert pair_key("b", "a") == pair_key("a", "b") == "a-b"


def test_family_units_pair_spouses_once_with_shared_children(three_generations):
    persons, relationships = three_generations
    relationships = relationships + [spouse("M", "F")]
    index = build_index(persons, relationships)

    units = identify_family_units(index, assign_generations(index, "R"))

    by_id = {unit.id: unit for unit in units}
    assert set(by_id) == {"G1-G2", "F-M", "R-W"}
    assert by_id["F-M"].children == ("R", "S")
    assert by_id["F-M"].parent_ids == ("F", "M")
    assert by_id["G1-G2"].generation == -2


def test_family_units_children_need_both_spouses():
    persons = [person("A"), person("B"), person("C"), person("D")]
    relationships = [spouse("A", "B"), parent("A", "C"), parent("B", "C"), parent("A", "D")]
    index = build_index(persons, relationships)

    (unit,) = identify_family_units(index, assign_generations(index, "A"))

    assert unit.children == ("C",)


def test_family_units_single_parent_and_sort_order():
    persons = [
        person("Y", "Amy", "Young"),
        person("Y2", "Yves", "Young"),
        person("A", "Bob", "Adams"),
        person("C1"),
        person("C2"),
    ]
    relationships = [spouse("Y", "Y2"), parent("A", "C1"), parent("Y", "C2"), parent("Y2", "C2")]
    index = build_index(persons, relationships)

    units = identify_family_units(index, assign_generations(index, "A"))

    assert [unit.id for unit in units] == ["single-A", "Y-Y2"]
    assert units[0].spouse2 is None
    assert units[0].parent_ids == ("A",)
    assert units[0].children == ("C1",)


def test_to_networkx_edges(three_generations):
    persons, relationships = three_generations
    G = to_networkx(build_index(persons, relationships))

    assert G.number_of_nodes() == 9
    assert G.edges["F", "R"]["relationship_type"] == PARENT
    assert G.edges["F", "M"]["relationship_type"] == SPOUSE
    assert not G.has_edge("M", "F")
    assert G.nodes["K"]["person_name"] == "Kevin Smith"
