from bounds import calculate_bounds, center_of, redistribute_generations, resolve_row_overlap
from models import Bounds, Point


def test_calculate_bounds():
    bounds = calculate_bounds([Point(-10, 5), Point(30, -5), Point(0, 0)])

    assert bounds == Bounds(min_x=-10, max_x=30, min_y=-5, max_y=5, width=40, height=10)
    assert center_of(bounds) == Point(10, 0)


def test_calculate_bounds_empty():
    assert calculate_bounds([]) == Bounds()


def test_redistribute_generations_keeps_order_and_x():
    positions = {"a": Point(0, 900), "b": Point(0, 100), "c": Point(250, 42)}
    generations = {"a": 0, "b": 0, "c": 1}

    result = redistribute_generations(positions, generations, 150, 300)

    assert list(result) == ["a", "b", "c"]
    assert result == {"a": Point(0, 375), "b": Point(0, 225), "c": Point(250, 300)}


def test_resolve_row_overlap_checks_nodes_sharing_a_row():
    positions = {
        "a": Point(0, 400),
        "b": Point(100, 400),
        "c": Point(50, 200),
        "d": Point(500, 400),
    }

    result = resolve_row_overlap(positions, 180)

    assert result == {
        "a": Point(0, 400),
        "b": Point(180, 400),
        "c": Point(50, 200),
        "d": Point(500, 400),
    }


def test_resolve_row_overlap_cascades():
    positions = {"a": Point(0, 0), "b": Point(10, 0), "c": Point(20, 0)}

    result = resolve_row_overlap(positions, 100)

    assert [result[k].x for k in "abc"] == [0, 100, 200]
