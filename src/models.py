"""Data classes for layout inputs (persons, relationships) and layout outputs."""

from dataclasses import dataclass
from datetime import date

from errors import InvalidOptionError


# Relationship types
PARENT = "parent"
CHILD = "child"
SPOUSE = "spouse"
SIBLING = "sibling"
STEP_PARENT = "step-parent"
STEP_CHILD = "step-child"
ADOPTIVE_PARENT = "adoptive-parent"
ADOPTIVE_CHILD = "adoptive-child"
PARTNER = "partner"

RELATIONSHIP_TYPES = (
    PARENT,
    CHILD,
    SPOUSE,
    SIBLING,
    STEP_PARENT,
    STEP_CHILD,
    ADOPTIVE_PARENT,
    ADOPTIVE_CHILD,
    PARTNER,
)

# Types read as "from is the parent of to". Everything else except SPOUSE is ignored.
PARENT_TYPES = (PARENT, CHILD)

# Edge routing tags
STRAIGHT = "straight"
ORTHOGONAL = "orthogonal"
BEZIER = "bezier"
SPOUSE_EDGE = "spouse"

DIRECTIONS = ("up", "down", "left", "right")


@dataclass(frozen=True)
class Person:
    id: str
    first_name: str = ""
    last_name: str = ""
    date_of_birth: date | None = None
    date_of_death: date | None = None
    sex: str | None = None  # M, F or None; only used for preview colours

    @property
    def sort_name(self) -> str:
        return f"{self.last_name} {self.first_name}"


@dataclass(frozen=True)
class Relationship:
    id: str
    from_person_id: str
    to_person_id: str
    relationship_type: str  # one of RELATIONSHIP_TYPES


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class PositionedNode:
    id: str
    position: Point
    generation: int
    is_root: bool = False


@dataclass(frozen=True)
class PositionedEdge:
    id: str
    source: str
    target: str
    edge_type: str = STRAIGHT
    animated: bool = False
    dashed: bool = False


@dataclass(frozen=True)
class JunctionNode:
    """Routing point that merges one or two parent lines before branching to children.

    Not a person: it has no entry in the input and never carries a generation.
    """

    id: str
    position: Point
    parent_ids: tuple[str, ...]
    child_ids: tuple[str, ...]


@dataclass(frozen=True)
class GenerationRow:
    level: int
    y: float
    height: float
    label: str
    label_visible: bool = True


@dataclass(frozen=True)
class Bounds:
    min_x: float = 0.0
    max_x: float = 0.0
    min_y: float = 0.0
    max_y: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class LayoutResult:
    nodes: tuple[PositionedNode, ...]
    edges: tuple[PositionedEdge, ...]
    bounds: Bounds
    center_point: Point
    junctions: tuple[JunctionNode, ...] = ()
    rows: tuple[GenerationRow, ...] = ()

    def node(self, person_id: str) -> PositionedNode | None:
        for node in self.nodes:
            if node.id == person_id:
                return node
        return None

    def to_dict(self) -> dict:
        """Convert to the camelCase mapping consumed by the rendering layer."""

        def point(p: Point) -> dict:
            return {"x": p.x, "y": p.y}

        return {
            "nodes": [
                {
                    "id": n.id,
                    "position": point(n.position),
                    "generation": n.generation,
                    "isRoot": n.is_root,
                }
                for n in self.nodes
            ],
            "edges": [
                {
                    "id": e.id,
                    "source": e.source,
                    "target": e.target,
                    "type": e.edge_type,
                    "animated": e.animated,
                    "dashed": e.dashed,
                }
                for e in self.edges
            ],
            "junctions": [
                {
                    "id": j.id,
                    "type": "junction",
                    "position": point(j.position),
                    "parentIds": list(j.parent_ids),
                    "childIds": list(j.child_ids),
                }
                for j in self.junctions
            ],
            "generationRows": [
                {
                    "level": r.level,
                    "y": r.y,
                    "height": r.height,
                    "label": r.label,
                    "labelVisible": r.label_visible,
                }
                for r in self.rows
            ],
            "bounds": {
                "minX": self.bounds.min_x,
                "maxX": self.bounds.max_x,
                "minY": self.bounds.min_y,
                "maxY": self.bounds.max_y,
                "width": self.bounds.width,
                "height": self.bounds.height,
            },
            "centerPoint": point(self.center_point),
        }


@dataclass(frozen=True)
class LayoutOptions:
    """
    Options shared by all strategies.

    A field left as None falls back to the strategy's own default, so a strategy
    can have its own spacing while still honouring explicit values (including 0).
    """

    root_person_id: str
    max_generations: int | None = None
    horizontal_spacing: float | None = None
    vertical_spacing: float | None = None
    node_width: float | None = None
    node_height: float | None = None
    direction: str = "down"
    show_generation_labels: bool = True
    radius_increment: float | None = None
    year_width: float | None = None
    row_height: float | None = None
    reference_year: int | None = None

    def __post_init__(self):
        if self.direction not in DIRECTIONS:
            raise InvalidOptionError(
                f"Unknown direction '{self.direction}', expected one of {', '.join(DIRECTIONS)}"
            )
        if self.max_generations is not None and self.max_generations < 0:
            raise InvalidOptionError(
                f"max_generations must be >= 0, got {self.max_generations}"
            )


def pick(value, default):
    """Return `value` unless it is None."""
    return default if value is None else value
