"""Bounding boxes and per-generation overlap removal for positioned layouts."""

from typing import Iterable

from models import Bounds, Point, PositionedNode


def calculate_bounds(points: Iterable[Point]) -> Bounds:
    """Axis-aligned box around `points`; all zeros when there are none."""
    points = list(points)
    if not points:
        return Bounds()

    min_x = min(p.x for p in points)
    max_x = max(p.x for p in points)
    min_y = min(p.y for p in points)
    max_y = max(p.y for p in points)
    return Bounds(
        min_x=min_x,
        max_x=max_x,
        min_y=min_y,
        max_y=max_y,
        width=max_x - min_x,
        height=max_y - min_y,
    )


def center_of(bounds: Bounds) -> Point:
    return Point((bounds.min_x + bounds.max_x) / 2, (bounds.min_y + bounds.max_y) / 2)


def node_bounds(nodes: Iterable[PositionedNode]) -> Bounds:
    return calculate_bounds(n.position for n in nodes)


def redistribute_generations(
    positions: dict[str, Point], generations: dict[str, int], spacing: float, baseline: float
) -> dict[str, Point]:
    """
    Re-space each generation evenly along y, centred on `baseline`.

    Nodes are bucketed by generation and keep their current top-to-bottom order
    (ties broken by insertion order), so N nodes in a bucket end up at N distinct,
    evenly spaced y values. x is left untouched.
    """
    buckets: dict[int, list[str]] = {}
    for person_id in positions:
        buckets.setdefault(generations[person_id], []).append(person_id)

    result: dict[str, Point] = {}
    for person_ids in buckets.values():
        person_ids.sort(key=lambda pid: positions[pid].y)
        total_height = (len(person_ids) - 1) * spacing
        start_y = baseline - total_height / 2
        for i, person_id in enumerate(person_ids):
            result[person_id] = Point(positions[person_id].x, start_y + i * spacing)

    # keep the caller's ordering
    return {person_id: result[person_id] for person_id in positions}


def resolve_row_overlap(positions: dict[str, Point], min_pitch: float) -> dict[str, Point]:
    """
    Push nodes to the right until no two nodes sharing a y are closer than `min_pitch`.

    Rows are keyed by the y a node sits at. Each row is processed left to right
    (ties broken by insertion order); a node only moves when it would overlap its
    left neighbour, so layouts without overlap come back unchanged.
    """
    by_row: dict[float, list[str]] = {}
    for person_id, point in positions.items():
        by_row.setdefault(point.y, []).append(person_id)

    result = dict(positions)
    for person_ids in by_row.values():
        person_ids.sort(key=lambda pid: positions[pid].x)
        previous_x = None
        for person_id in person_ids:
            point = result[person_id]
            if previous_x is not None and point.x < previous_x + min_pitch:
                point = Point(previous_x + min_pitch, point.y)
                result[person_id] = point
            previous_x = point.x

    return result
