"""Tree, ancestor, fan and timeline layouts. Each strategy needs the root to be present."""

import logging
import math
from typing import Iterable

from bounds import center_of, node_bounds
from errors import RootNotFoundError
from graph import GraphIndex, assign_generations, build_index, pair_key
from models import (
    BEZIER,
    ORTHOGONAL,
    PARENT_TYPES,
    SPOUSE,
    Bounds,
    LayoutOptions,
    LayoutResult,
    Person,
    Point,
    PositionedEdge,
    PositionedNode,
    Relationship,
    pick,
)

logger = logging.getLogger(__name__)


def _require_root(index: GraphIndex, root_person_id: str):
    if root_person_id not in index:
        raise RootNotFoundError(root_person_id)


def _result(nodes: list[PositionedNode], edges: list[PositionedEdge], center: Point | None = None):
    bounds = node_bounds(nodes)
    return LayoutResult(
        nodes=tuple(nodes),
        edges=tuple(edges),
        bounds=bounds,
        center_point=center if center is not None else center_of(bounds),
    )


# ============================================================================
# Vertical descendant tree
# ============================================================================

VERTICAL_H_SPACING = 200
VERTICAL_V_SPACING = 150
VERTICAL_MAX_GENERATIONS = 10


def subtree_widths(
    index: GraphIndex, root_person_id: str, leaf_width: float, max_generations: int
) -> dict[str, float]:
    """
    Width each descendant subtree needs: a leaf takes `leaf_width`, a parent the sum
    of its children's widths. A person reachable twice is only counted the first time.
    """
    widths: dict[str, float] = {}

    def width(person_id: str, generation: int) -> float:
        if person_id in widths or generation > max_generations:
            return 0.0
        widths[person_id] = leaf_width
        total = sum(width(child_id, generation + 1) for child_id in index.children(person_id))
        if total > 0:
            widths[person_id] = total
        return widths[person_id]

    width(root_person_id, 0)
    return widths


class VerticalTreeStrategy:
    name = "vertical"

    def calculate(
        self,
        persons: Iterable[Person],
        relationships: Iterable[Relationship],
        options: LayoutOptions,
    ) -> LayoutResult:
        h_spacing = pick(options.horizontal_spacing, VERTICAL_H_SPACING)
        v_spacing = pick(options.vertical_spacing, VERTICAL_V_SPACING)
        max_gen = pick(options.max_generations, VERTICAL_MAX_GENERATIONS)
        root_id = options.root_person_id

        index = build_index(persons, relationships)
        _require_root(index, root_id)

        widths = subtree_widths(index, root_id, h_spacing, max_gen)
        order: list[tuple[str, int]] = []
        placed: set[str] = set()
        offsets: dict[str, float] = {}
        edges: list[PositionedEdge] = []

        def position(person_id: str, generation: int, start: float) -> float:
            # Reserve [start, start + width) for this subtree; return the node's centre.
            order.append((person_id, generation))
            placed.add(person_id)
            child_offsets = []
            cursor = start
            for child_id in index.children(person_id):
                if generation + 1 > max_gen:
                    break
                edges.append(
                    PositionedEdge(
                        id=f"{person_id}-{child_id}",
                        source=person_id,
                        target=child_id,
                        edge_type=ORTHOGONAL,
                    )
                )
                if child_id in widths and child_id not in placed:
                    child_offsets.append(position(child_id, generation + 1, cursor))
                    cursor += widths[child_id]

            if child_offsets:
                offsets[person_id] = sum(child_offsets) / len(child_offsets)
            else:
                offsets[person_id] = start + widths[person_id] / 2
            return offsets[person_id]

        position(root_id, 0, -widths[root_id] / 2)

        nodes = []
        for person_id, generation in order:
            across = offsets[person_id]
            depth = generation * v_spacing
            if options.direction == "down":
                point = Point(across, depth)
            elif options.direction == "up":
                point = Point(across, -depth)
            elif options.direction == "right":
                point = Point(depth, across)
            else:
                point = Point(-depth, across)
            nodes.append(
                PositionedNode(
                    id=person_id,
                    position=point,
                    generation=generation,
                    is_root=person_id == root_id,
                )
            )

        logger.info("Vertical layout: %d nodes, %d edges", len(nodes), len(edges))
        return _result(nodes, edges)


# ============================================================================
# Horizontal ancestor tree
# ============================================================================

HORIZONTAL_H_SPACING = 250
HORIZONTAL_V_SPACING = 120
HORIZONTAL_MAX_GENERATIONS = 5


class HorizontalAncestorStrategy:
    """
    Binary pedigree growing to the right: father above, mother below, and the
    vertical gap halving each generation so the branches can never overlap.
    """

    name = "horizontal"

    def calculate(
        self,
        persons: Iterable[Person],
        relationships: Iterable[Relationship],
        options: LayoutOptions,
    ) -> LayoutResult:
        h_spacing = pick(options.horizontal_spacing, HORIZONTAL_H_SPACING)
        v_spacing = pick(options.vertical_spacing, HORIZONTAL_V_SPACING)
        max_gen = pick(options.max_generations, HORIZONTAL_MAX_GENERATIONS)
        root_id = options.root_person_id

        index = build_index(persons, relationships)
        _require_root(index, root_id)

        nodes: list[PositionedNode] = []
        edges: list[PositionedEdge] = []
        placed: set[str] = set()

        def position(person_id: str, generation: int, x: float, y: float, spacing: float):
            placed.add(person_id)
            nodes.append(
                PositionedNode(
                    id=person_id,
                    position=Point(x, y),
                    generation=generation,
                    is_root=person_id == root_id,
                )
            )
            if generation >= max_gen:
                return

            # father first (above), mother second (below)
            for parent_id, sign in zip(index.parents(person_id), (-1, 1)):
                edges.append(
                    PositionedEdge(
                        id=f"{person_id}-{parent_id}",
                        source=person_id,
                        target=parent_id,
                        edge_type=ORTHOGONAL,
                    )
                )
                if parent_id not in placed:
                    position(
                        parent_id,
                        generation + 1,
                        x + h_spacing,
                        y + sign * spacing / 2,
                        spacing / 2,
                    )

        root_y = 2**max_gen * v_spacing / 2
        position(root_id, 0, 0, root_y, v_spacing * 2 ** (max_gen - 1))

        logger.info("Horizontal layout: %d nodes, %d edges", len(nodes), len(edges))
        return _result(nodes, edges)


# ============================================================================
# Fan chart
# ============================================================================

FAN_RADIUS_INCREMENT = 120
FAN_MAX_GENERATIONS = 5
FAN_GAP_DEGREES = 60
# Angles in degrees, screen coordinates (y grows downwards, 90 is straight down)
FAN_START_ANGLE = 90 + FAN_GAP_DEGREES / 2
FAN_END_ANGLE = 450 - FAN_GAP_DEGREES / 2


def polar_to_cartesian(center: Point, radius: float, angle_degrees: float) -> Point:
    angle = math.radians(angle_degrees)
    return Point(center.x + radius * math.cos(angle), center.y + radius * math.sin(angle))


class FanChartStrategy:
    name = "fan"

    def calculate(
        self,
        persons: Iterable[Person],
        relationships: Iterable[Relationship],
        options: LayoutOptions,
    ) -> LayoutResult:
        radius_increment = pick(options.radius_increment, FAN_RADIUS_INCREMENT)
        max_gen = pick(options.max_generations, FAN_MAX_GENERATIONS)
        root_id = options.root_person_id

        index = build_index(persons, relationships)
        _require_root(index, root_id)

        center = Point(0, 0)
        nodes = [PositionedNode(id=root_id, position=center, generation=0, is_root=True)]
        edges: list[PositionedEdge] = []
        placed = {root_id}

        def position_parents(person_id: str, generation: int, start: float, end: float):
            if generation > max_gen:
                return

            middle = (start + end) / 2
            # father gets the first half of the arc, mother the second
            arcs = [(start, middle), (middle, end)]
            for parent_id, (arc_start, arc_end) in zip(index.parents(person_id), arcs):
                edges.append(
                    PositionedEdge(
                        id=f"{person_id}-{parent_id}",
                        source=person_id,
                        target=parent_id,
                        edge_type=BEZIER,
                    )
                )
                if parent_id in placed:
                    continue
                placed.add(parent_id)
                angle = (arc_start + arc_end) / 2
                nodes.append(
                    PositionedNode(
                        id=parent_id,
                        position=polar_to_cartesian(center, generation * radius_increment, angle),
                        generation=generation,
                    )
                )
                position_parents(parent_id, generation + 1, arc_start, arc_end)

        position_parents(root_id, 1, FAN_START_ANGLE, FAN_END_ANGLE)

        logger.info("Fan layout: %d nodes, %d edges", len(nodes), len(edges))
        return _result(nodes, edges, center=center)


# ============================================================================
# Timeline
# ============================================================================

YEAR_WIDTH = 20
ROW_HEIGHT = 100
ROW_BUFFER_YEARS = 5
ESTIMATED_LIFESPAN = 80


def assign_rows(persons: list[Person], reference_year: int | None = None) -> dict[str, int]:
    """
    Greedy interval packing of lifespans into rows.

    `persons` must be sorted by birth date. A person goes into the first row whose
    last lifespan ended more than ROW_BUFFER_YEARS before their birth year, else
    into a new row. Living persons end at `reference_year`, or an estimated
    lifespan when none is given.
    """
    row_end_years: list[int] = []
    rows: dict[str, int] = {}

    for person in persons:
        birth_year = person.date_of_birth.year
        if person.date_of_death is not None:
            end_year = person.date_of_death.year
        elif reference_year is not None:
            end_year = reference_year
        else:
            end_year = birth_year + ESTIMATED_LIFESPAN

        row = next(
            (
                i
                for i, row_end in enumerate(row_end_years)
                if row_end < birth_year - ROW_BUFFER_YEARS
            ),
            None,
        )
        if row is None:
            row_end_years.append(end_year)
            row = len(row_end_years) - 1
        else:
            row_end_years[row] = end_year
        rows[person.id] = row

    return rows


class TimelineStrategy:
    """Chronological layout. Persons without a birth date are left out."""

    name = "timeline"

    def calculate(
        self,
        persons: Iterable[Person],
        relationships: Iterable[Relationship],
        options: LayoutOptions,
    ) -> LayoutResult:
        year_width = pick(options.year_width, YEAR_WIDTH)
        row_height = pick(options.row_height, ROW_HEIGHT)
        root_id = options.root_person_id

        relationships = list(relationships)
        index = build_index(persons, relationships)
        _require_root(index, root_id)

        dated = sorted(
            (p for p in index.person_by_id.values() if p.date_of_birth is not None),
            key=lambda p: (p.date_of_birth, p.last_name, p.first_name, p.id),
        )
        if not dated:
            return LayoutResult(nodes=(), edges=(), bounds=Bounds(), center_point=Point(0, 0))

        min_year = dated[0].date_of_birth.year
        rows = assign_rows(dated, options.reference_year)
        generations = assign_generations(index, root_id)

        nodes = [
            PositionedNode(
                id=person.id,
                position=Point(
                    (person.date_of_birth.year - min_year) * year_width,
                    rows[person.id] * row_height,
                ),
                generation=generations[person.id],
                is_root=person.id == root_id,
            )
            for person in dated
        ]

        edges: list[PositionedEdge] = []
        seen: set[tuple[str, str]] = set()
        for rel in relationships:
            source, target = rel.from_person_id, rel.to_person_id
            if source not in rows or target not in rows or source == target:
                continue
            is_spouse = rel.relationship_type == SPOUSE
            if not is_spouse and rel.relationship_type not in PARENT_TYPES:
                continue
            key = (SPOUSE if is_spouse else "parent", pair_key(source, target))
            if key in seen:
                continue
            seen.add(key)
            edges.append(
                PositionedEdge(
                    id=f"{source}-{target}",
                    source=source,
                    target=target,
                    edge_type=BEZIER,
                    animated=is_spouse,
                )
            )

        logger.info(
            "Timeline layout: %d of %d persons dated, %d rows",
            len(nodes),
            len(index.person_by_id),
            len(set(rows.values())),
        )
        return _result(nodes, edges)
