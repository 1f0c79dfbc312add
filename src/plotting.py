"""Static previews of a computed layout: matplotlib images and Graphviz DOT with pinned positions."""

from pathlib import Path

import matplotlib.pyplot as plt
import pydot

from models import ORTHOGONAL, LayoutResult, Person, Point
from pedigree import orthogonal_points

SEX_COLORS = {"M": "lightblue", "F": "lightpink"}
DEFAULT_COLOR = "lightgray"
EDGE_COLOR = "darkgray"
SPOUSE_COLOR = "#f472b6"


def _label(person_id: str, persons: dict[str, Person]) -> str:
    person = persons.get(person_id)
    if person is None:
        return person_id

    birth_year = person.date_of_birth.year if person.date_of_birth else ""
    death_year = person.date_of_death.year if person.date_of_death else ""
    name = f"{person.first_name}\n{person.last_name}".strip() or person_id
    return f"{name}\n{birth_year}-{death_year}"


def _color(person_id: str, persons: dict[str, Person]) -> str:
    person = persons.get(person_id)
    return SEX_COLORS.get(person.sex, DEFAULT_COLOR) if person else DEFAULT_COLOR


def _pos(point: Point) -> str:
    # Graphviz y points up
    return f"{point.x:g},{0.0 - point.y:g}!"


def _anchors(result: LayoutResult) -> dict[str, Point]:
    anchors = {node.id: node.position for node in result.nodes}
    anchors.update({junction.id: junction.position for junction in result.junctions})
    return anchors


def layout_to_dot(result: LayoutResult, persons: dict[str, Person] | None = None) -> pydot.Dot:
    """
    Build a DOT graph with every node pinned at its computed position.

    Render with `neato -n`, which keeps the given coordinates. Graphviz's y axis
    points up, so y is negated.
    """
    persons = persons or {}
    P = pydot.Dot(graph_type="digraph")
    P.set("splines", "ortho")
    P.set("outputorder", "edgesfirst")

    for node in result.nodes:
        P.add_node(
            pydot.Node(
                str(node.id),
                label=_label(node.id, persons),
                shape="box",
                style="rounded,filled",
                fillcolor=_color(node.id, persons),
                fontsize="10",
                pos=_pos(node.position),
            )
        )

    for junction in result.junctions:
        P.add_node(
            pydot.Node(
                str(junction.id),
                shape="point",
                width="0.1",
                height="0.1",
                label="",
                pos=_pos(junction.position),
            )
        )

    for edge in result.edges:
        attrs = {"dir": "none", "color": EDGE_COLOR}
        if edge.dashed:
            attrs.update(style="dashed", color=SPOUSE_COLOR)
        P.add_edge(pydot.Edge(str(edge.source), str(edge.target), **attrs))

    return P


def plot_layout(
    result: LayoutResult,
    persons: dict[str, Person] | None = None,
    output_path: Path | None = None,
):
    """
    Draw the layout with matplotlib in screen coordinates (y grows downwards).

    Args:
        result: Positioned nodes, edges and junctions from any strategy
        persons: Person records by id, for labels and colours
        output_path: Path to save the image (png, svg or pdf). If None, displays interactively.
    """
    persons = persons or {}
    anchors = _anchors(result)

    fig, ax = plt.subplots(figsize=(20, 16))

    for edge in result.edges:
        source = anchors.get(edge.source)
        target = anchors.get(edge.target)
        if source is None or target is None:
            continue
        if edge.edge_type == ORTHOGONAL:
            points = orthogonal_points(source, target)
        else:
            points = [source, target]
        ax.plot(
            [p.x for p in points],
            [p.y for p in points],
            color=SPOUSE_COLOR if edge.dashed else EDGE_COLOR,
            linestyle="--" if edge.dashed else "-",
            linewidth=1,
            zorder=1,
        )

    for junction in result.junctions:
        ax.plot(junction.position.x, junction.position.y, "o", color=EDGE_COLOR, markersize=3, zorder=2)

    for row in result.rows:
        if row.label_visible:
            ax.axhline(row.y, color="whitesmoke", linewidth=row.height / 4, zorder=0)
            ax.text(result.bounds.min_x - 100, row.y, row.label, fontsize=8, va="center", ha="right")

    for node in result.nodes:
        ax.text(
            node.position.x,
            node.position.y,
            _label(node.id, persons),
            fontsize=6,
            ha="center",
            va="center",
            zorder=3,
            fontweight="bold" if node.is_root else "normal",
            bbox={
                "boxstyle": "round",
                "facecolor": _color(node.id, persons),
                "edgecolor": "black" if node.is_root else EDGE_COLOR,
            },
        )

    margin = 100
    ax.set_xlim(result.bounds.min_x - margin * 2, result.bounds.max_x + margin)
    ax.set_ylim(result.bounds.max_y + margin, result.bounds.min_y - margin)
    ax.set_aspect("equal")
    ax.axis("off")
    ax.set_title(f"Family layout ({len(result.nodes)} people, {len(result.edges)} connections)")
    fig.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
        plt.close(fig)
        print(f"Layout saved to {output_path}")
    else:
        plt.show()
