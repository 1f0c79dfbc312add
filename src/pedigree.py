"""
Pedigree layouts centred on a root person.

- PedigreeStrategy: ancestors to the right, descendants to the left, one column per
  generation, rows re-spaced at the end so no two people share a spot.
- OrthogonalPedigreeStrategy: one horizontal row per generation with junction nodes
  that merge both parents into a single trunk for right-angle connectors.
"""

from datetime import date
import logging
from typing import Iterable

from bounds import center_of, node_bounds, redistribute_generations, resolve_row_overlap
from graph import (
    FamilyUnit,
    GraphIndex,
    assign_generations,
    build_index,
    identify_family_units,
    pair_key,
)
from models import (
    ORTHOGONAL,
    SPOUSE_EDGE,
    GenerationRow,
    JunctionNode,
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


# ============================================================================
# Pedigree (combined ancestors + descendants)
# ============================================================================

PEDIGREE_H_SPACING = 250
PEDIGREE_V_SPACING = 150
PEDIGREE_BASELINE = 300


class PedigreeStrategy:
    name = "pedigree"

    def calculate(
        self,
        persons: Iterable[Person],
        relationships: Iterable[Relationship],
        options: LayoutOptions,
    ) -> LayoutResult:
        h_spacing = pick(options.horizontal_spacing, PEDIGREE_H_SPACING)
        v_spacing = pick(options.vertical_spacing, PEDIGREE_V_SPACING)
        root_id = options.root_person_id

        index = build_index(persons, relationships)
        positions: dict[str, Point] = {}
        generations: dict[str, int] = {}
        edges: list[PositionedEdge] = []
        connected: set[str] = set()  # unordered pairs that already have an edge
        spouse_pairs: dict[str, tuple[str, str]] = {}

        def connect(source: str, target: str):
            key = pair_key(source, target)
            if key not in connected:
                connected.add(key)
                edges.append(
                    PositionedEdge(
                        id=f"{source}-{target}", source=source, target=target, edge_type=ORTHOGONAL
                    )
                )

        def record_spouses(person_id: str):
            for spouse_id in index.spouses(person_id):
                spouse_pairs.setdefault(pair_key(person_id, spouse_id), (person_id, spouse_id))

        def traverse(root_person_id: str):
            """
            Depth-first walk from the root: parents in declaration order, then children.
            Stack frames are (reached_from, person_id, generation, y).
            """
            stack = [(None, root_person_id, 0, PEDIGREE_BASELINE)]
            while stack:
                reached_from, person_id, generation, y = stack.pop()
                if reached_from is not None:
                    connect(reached_from, person_id)
                if person_id in positions or person_id not in index:
                    continue

                positions[person_id] = Point(generation * h_spacing, y)
                generations[person_id] = generation
                record_spouses(person_id)

                # Parents go one column up, centred on this person
                parent_ids = index.parents(person_id)
                start_y = y - (len(parent_ids) - 1) * v_spacing / 2
                frames = [
                    (person_id, parent_id, generation + 1, start_y + i * v_spacing)
                    for i, parent_id in enumerate(parent_ids)
                ]

                # Children go one column down
                child_ids = index.children(person_id)
                start_y = y + (len(child_ids) - 1) * v_spacing / 2
                frames += [
                    (person_id, child_id, generation - 1, start_y + i * v_spacing)
                    for i, child_id in enumerate(child_ids)
                ]

                stack.extend(reversed(frames))

        traverse(root_id)

        # Persons the traversal never reached go below everything else, at generation 0
        lowest_y = max((p.y for p in positions.values()), default=PEDIGREE_BASELINE)
        unconnected = 0
        for person_id in index.person_by_id:
            if person_id in positions:
                continue
            unconnected += 1
            positions[person_id] = Point(0, lowest_y + unconnected * v_spacing)
            generations[person_id] = 0
            record_spouses(person_id)
        if unconnected:
            logger.debug("Pedigree: %d persons not connected to root %s", unconnected, root_id)

        # Spouse edges once everything is positioned
        for key, (person_id, spouse_id) in spouse_pairs.items():
            if key in connected:
                continue
            connected.add(key)
            edges.append(
                PositionedEdge(
                    id=f"{person_id}-{spouse_id}-spouse",
                    source=person_id,
                    target=spouse_id,
                    edge_type=SPOUSE_EDGE,
                    dashed=True,
                )
            )

        positions = redistribute_generations(positions, generations, v_spacing, PEDIGREE_BASELINE)

        nodes = tuple(
            PositionedNode(
                id=person_id,
                position=point,
                generation=generations[person_id],
                is_root=person_id == root_id,
            )
            for person_id, point in positions.items()
        )
        bounds = node_bounds(nodes)
        logger.info("Pedigree layout: %d nodes, %d edges", len(nodes), len(edges))
        return LayoutResult(
            nodes=nodes, edges=tuple(edges), bounds=bounds, center_point=center_of(bounds)
        )


# ============================================================================
# Orthogonal pedigree (generation rows + junctions)
# ============================================================================

ORTHOGONAL_H_SPACING = 280
ORTHOGONAL_V_SPACING = 200
NODE_WIDTH = 160
NODE_HEIGHT = 100
TOP_MARGIN = 200
ROW_PADDING = 40
SIBLING_GAP = 20
SPOUSE_GAP = 40
JUNCTION_OFFSET = 140


def generation_label(level: int) -> str:
    if level < 0:
        return f"Ancestors {abs(level)}"
    if level == 0:
        return "Self"
    return f"Descendants {level}"


def generation_rows(
    generations: dict[str, int], v_spacing: float, node_height: float, show_labels: bool
) -> list[GenerationRow]:
    """One row per distinct level, stacked top to bottom in ascending level order."""
    levels = sorted(set(generations.values()))
    if not levels:
        return []

    min_level = levels[0]
    return [
        GenerationRow(
            level=level,
            y=(level - min_level) * v_spacing + TOP_MARGIN,
            height=node_height + ROW_PADDING,
            label=generation_label(level),
            label_visible=show_labels,
        )
        for level in levels
    ]


def orthogonal_points(source: Point, target: Point) -> list[Point]:
    """Corners of a right-angle connector: down to mid-height, across, down."""
    mid_y = (source.y + target.y) / 2
    return [source, Point(source.x, mid_y), Point(target.x, mid_y), target]


def orthogonal_path(source_x: float, source_y: float, target_x: float, target_y: float) -> str:
    """SVG path string for the connector from `orthogonal_points`."""
    start, *rest = orthogonal_points(Point(source_x, source_y), Point(target_x, target_y))
    return f"M {start.x} {start.y} " + " ".join(f"L {p.x} {p.y}" for p in rest)


def _child_order(index: GraphIndex):
    def key(person_id: str):
        person = index.person_by_id[person_id]
        born = person.date_of_birth
        return (born is None, born or date.min, person.sort_name, person_id)

    return key


class OrthogonalPedigreeStrategy:
    name = "orthogonal"

    def calculate(
        self,
        persons: Iterable[Person],
        relationships: Iterable[Relationship],
        options: LayoutOptions,
    ) -> LayoutResult:
        h_spacing = pick(options.horizontal_spacing, ORTHOGONAL_H_SPACING)
        v_spacing = pick(options.vertical_spacing, ORTHOGONAL_V_SPACING)
        node_width = pick(options.node_width, NODE_WIDTH)
        node_height = pick(options.node_height, NODE_HEIGHT)
        root_id = options.root_person_id

        index = build_index(persons, relationships)
        generations = assign_generations(index, root_id)
        rows = generation_rows(generations, v_spacing, node_height, options.show_generation_labels)
        units = identify_family_units(index, generations)

        positions = self._place(index, generations, rows, units, h_spacing, v_spacing, node_width)
        positions = resolve_row_overlap(positions, node_width + SIBLING_GAP)

        junctions = self._junctions(units, positions, node_width)
        edges = self._edges(units, junctions)

        nodes = tuple(
            PositionedNode(
                id=person_id,
                position=point,
                generation=generations[person_id],
                is_root=person_id == root_id,
            )
            for person_id, point in positions.items()
        )
        bounds = node_bounds(nodes)
        logger.info(
            "Orthogonal layout: %d nodes, %d junctions, %d rows",
            len(nodes),
            len(junctions),
            len(rows),
        )
        return LayoutResult(
            nodes=nodes,
            edges=tuple(edges),
            bounds=bounds,
            center_point=center_of(bounds),
            junctions=tuple(junctions.values()),
            rows=tuple(rows),
        )

    def _place(
        self,
        index: GraphIndex,
        generations: dict[str, int],
        rows: list[GenerationRow],
        units: list[FamilyUnit],
        h_spacing: float,
        v_spacing: float,
        node_width: float,
    ) -> dict[str, Point]:
        positions: dict[str, Point] = {}
        row_y = {row.level: row.y for row in rows}
        unit_gap = max(h_spacing - node_width, SIBLING_GAP)
        child_order = _child_order(index)

        for level in sorted(row_y):
            y = row_y[level]
            in_row = [p.x for pid, p in positions.items() if generations[pid] == level]
            current_x = max(in_row) + node_width + unit_gap if in_row else 0.0

            def place(person_id: str, x: float, y: float = y):
                nonlocal current_x
                positions[person_id] = Point(x, y)
                current_x = max(current_x, x + node_width + SIBLING_GAP)

            for unit in units:
                if generations[unit.spouse1] != level:
                    continue

                if unit.spouse1 not in positions:
                    place(unit.spouse1, current_x)
                first = positions[unit.spouse1]

                # a spouse from another generation is placed in their own row
                if (
                    unit.spouse2 is not None
                    and unit.spouse2 not in positions
                    and generations[unit.spouse2] == level
                ):
                    place(unit.spouse2, first.x + node_width + SPOUSE_GAP, first.y)

                if unit.children:
                    centres = [
                        positions[pid].x + node_width / 2
                        for pid in unit.parent_ids
                        if pid in positions
                    ]
                    junction_x = sum(centres) / len(centres)
                    child_y = row_y.get(level + 1, y + v_spacing)
                    pending = [
                        c
                        for c in sorted(unit.children, key=child_order)
                        if c not in positions and generations[c] == level + 1
                    ]
                    total_width = len(pending) * (node_width + SIBLING_GAP) - SIBLING_GAP
                    child_x = junction_x - total_width / 2
                    for child_id in pending:
                        positions[child_id] = Point(child_x, child_y)
                        child_x += node_width + SIBLING_GAP

                current_x += unit_gap - SIBLING_GAP

            # Everyone else in this generation, left to right
            for person_id, person_level in generations.items():
                if person_level == level and person_id not in positions:
                    place(person_id, current_x)

        return positions

    def _junctions(
        self, units: list[FamilyUnit], positions: dict[str, Point], node_width: float
    ) -> dict[str, JunctionNode]:
        """One junction beneath the parents of every unit that has children."""
        junctions: dict[str, JunctionNode] = {}
        for unit in units:
            if not unit.children:
                continue
            parents = [positions[pid] for pid in unit.parent_ids]
            x = sum(p.x + node_width / 2 for p in parents) / len(parents)
            y = max(p.y for p in parents) + JUNCTION_OFFSET
            junctions[unit.id] = JunctionNode(
                id=f"junction-{unit.id}",
                position=Point(x, y),
                parent_ids=unit.parent_ids,
                child_ids=unit.children,
            )
        return junctions

    def _edges(
        self, units: list[FamilyUnit], junctions: dict[str, JunctionNode]
    ) -> list[PositionedEdge]:
        edges: list[PositionedEdge] = []
        for unit in units:
            if unit.spouse2 is not None:
                edges.append(
                    PositionedEdge(
                        id=f"spouse-{unit.id}",
                        source=unit.spouse1,
                        target=unit.spouse2,
                        edge_type=SPOUSE_EDGE,
                        dashed=True,
                    )
                )

            junction = junctions.get(unit.id)
            if junction is None:
                continue
            for parent_id in unit.parent_ids:
                edges.append(
                    PositionedEdge(
                        id=f"edge-{parent_id}-{junction.id}",
                        source=parent_id,
                        target=junction.id,
                        edge_type=ORTHOGONAL,
                    )
                )
            for child_id in unit.children:
                edges.append(
                    PositionedEdge(
                        id=f"edge-{junction.id}-{child_id}",
                        source=junction.id,
                        target=child_id,
                        edge_type=ORTHOGONAL,
                    )
                )
        return edges
