"""Graph index, generation assignment and family units over person/relationship records."""

from collections import deque
from dataclasses import dataclass, field
import logging
from typing import Iterable

import networkx as nx

from models import PARENT, PARENT_TYPES, SPOUSE, Person, Relationship

logger = logging.getLogger(__name__)


@dataclass
class GraphIndex:
    """Adjacency maps keyed by person id. Only known persons appear in the maps."""

    person_by_id: dict[str, Person] = field(default_factory=dict)
    parents_of: dict[str, list[str]] = field(default_factory=dict)
    children_of: dict[str, list[str]] = field(default_factory=dict)
    spouses_of: dict[str, list[str]] = field(default_factory=dict)

    def parents(self, person_id: str) -> list[str]:
        return self.parents_of.get(person_id, [])

    def children(self, person_id: str) -> list[str]:
        return self.children_of.get(person_id, [])

    def spouses(self, person_id: str) -> list[str]:
        return self.spouses_of.get(person_id, [])

    def __contains__(self, person_id: str) -> bool:
        return person_id in self.person_by_id


def _append_unique(mapping: dict[str, list[str]], key: str, value: str):
    values = mapping.setdefault(key, [])
    if value not in values:
        values.append(value)


def build_index(persons: Iterable[Person], relationships: Iterable[Relationship]) -> GraphIndex:
    """Build the lookup maps from flat person and relationship lists in one pass."""
    index = GraphIndex()
    for person in persons:
        index.person_by_id[person.id] = person

    for rel in relationships:
        from_id, to_id = rel.from_person_id, rel.to_person_id
        if rel.relationship_type not in PARENT_TYPES and rel.relationship_type != SPOUSE:
            continue
        if from_id not in index or to_id not in index:
            logger.debug(
                "Skipping relationship %s: references unknown person (%s -> %s)",
                rel.id,
                from_id,
                to_id,
            )
            continue
        if from_id == to_id:
            logger.debug("Skipping self-referencing relationship %s", rel.id)
            continue

        if rel.relationship_type == SPOUSE:
            _append_unique(index.spouses_of, from_id, to_id)
            _append_unique(index.spouses_of, to_id, from_id)
        else:
            # PARENT_OF edges go from parent -> child
            _append_unique(index.children_of, from_id, to_id)
            _append_unique(index.parents_of, to_id, from_id)

    return index


def to_networkx(index: GraphIndex) -> nx.DiGraph:
    """Build a NetworkX directed graph from the index (for diagnostics and export)."""
    G = nx.DiGraph()

    for person in index.person_by_id.values():
        G.add_node(
            person.id,
            person_name=f"{person.first_name} {person.last_name}".strip(),
            sex=person.sex,
            birth_date=person.date_of_birth,
            death_date=person.date_of_death,
        )

    for parent_id, child_ids in index.children_of.items():
        for child_id in child_ids:
            G.add_edge(parent_id, child_id, relationship_type=PARENT)

    # Spouse pairs are stored once, lowest id first
    for person_id, spouse_ids in index.spouses_of.items():
        for spouse_id in spouse_ids:
            a, b = sorted((person_id, spouse_id))
            if not G.has_edge(a, b):
                G.add_edge(a, b, relationship_type=SPOUSE)

    return G


def assign_generations(index: GraphIndex, root_person_id: str) -> dict[str, int]:
    """
    Assign a generation level to every person by breadth-first search from the root.

    The root is level 0, spouses share their partner's level, parents are one level
    lower (-1) and children one level higher (+1). Each person is enqueued at most
    once, which also breaks cycles such as a marriage between two people reachable
    through different ancestor lines. Persons the search never reaches are set to 0.
    """
    generations: dict[str, int] = {}

    if root_person_id in index:
        queue = deque([(root_person_id, 0)])
        seen = {root_person_id}
        while queue:
            person_id, generation = queue.popleft()
            generations[person_id] = generation

            neighbours = (
                [(s, generation) for s in index.spouses(person_id)]
                + [(p, generation - 1) for p in index.parents(person_id)]
                + [(c, generation + 1) for c in index.children(person_id)]
            )
            for neighbour_id, level in neighbours:
                if neighbour_id not in seen:
                    seen.add(neighbour_id)
                    queue.append((neighbour_id, level))
    else:
        logger.debug("Root %s not in index, all persons default to generation 0", root_person_id)

    for person_id in index.person_by_id:
        generations.setdefault(person_id, 0)

    return generations


@dataclass(frozen=True)
class FamilyUnit:
    """A spouse pair (or a single parent) together with their shared children."""

    id: str
    spouse1: str
    spouse2: str | None
    children: tuple[str, ...]
    generation: int

    @property
    def parent_ids(self) -> tuple[str, ...]:
        if self.spouse2 is None:
            return (self.spouse1,)
        return (self.spouse1, self.spouse2)


def pair_key(a: str, b: str) -> str:
    return "-".join(sorted((a, b)))


def identify_family_units(index: GraphIndex, generations: dict[str, int]) -> list[FamilyUnit]:
    """
    Group persons into family units.

    Every distinct spouse pair is a unit whose children are the persons listing both
    spouses as parents. A person with children and no spouse forms a single-parent
    unit. Units are sorted by spouse1's last and first name so left-to-right order is
    stable between runs.
    """
    units: list[FamilyUnit] = []
    processed: set[str] = set()

    for spouse1, spouse_ids in index.spouses_of.items():
        for spouse2 in spouse_ids:
            key = pair_key(spouse1, spouse2)
            if key in processed:
                continue
            processed.add(key)

            children = tuple(
                child_id
                for child_id in index.children(spouse1)
                if spouse2 in index.parents(child_id)
            )
            units.append(
                FamilyUnit(
                    id=key,
                    spouse1=spouse1,
                    spouse2=spouse2,
                    children=children,
                    generation=generations.get(spouse1, 0),
                )
            )

    # Single parents
    for person_id in index.person_by_id:
        if index.spouses(person_id):
            continue
        children = tuple(index.children(person_id))
        if children:
            units.append(
                FamilyUnit(
                    id=f"single-{person_id}",
                    spouse1=person_id,
                    spouse2=None,
                    children=children,
                    generation=generations.get(person_id, 0),
                )
            )

    units.sort(key=lambda u: (index.person_by_id[u.spouse1].sort_name, u.id))
    return units
