"""
1) Load persons and relationships from a GEDCOM (.ged) or JSON file.
2) Optionally validate the family graph (cycles, impossible ages, date ordering).
3) Lay out the graph with the chosen strategy, centred on a root person.
4) Write the layout as JSON, a preview image and/or a Graphviz DOT file.
"""

import argparse
import json
import logging
from pathlib import Path
import sys

from errors import LayoutError
from graph import build_index, to_networkx
from models import DIRECTIONS, LayoutOptions
from parsing import load_file
from plotting import layout_to_dot, plot_layout
from registry import DEFAULT_REGISTRY, calculate_layout
from validation import validate_graph


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="famlayout", description="Lay out a family tree around a root person."
    )
    parser.add_argument("input", type=Path, help="GEDCOM (.ged) or JSON file")
    parser.add_argument("--root", required=True, help="ID of the root person")
    parser.add_argument(
        "--strategy",
        default="vertical",
        help=f"layout strategy ({', '.join(DEFAULT_REGISTRY.names())})",
    )
    parser.add_argument("--max-generations", type=int, default=None)
    parser.add_argument("--direction", choices=DIRECTIONS, default="down")
    parser.add_argument("--horizontal-spacing", type=float, default=None)
    parser.add_argument("--vertical-spacing", type=float, default=None)
    parser.add_argument("--hide-generation-labels", action="store_true")
    parser.add_argument("--json", type=Path, help="write the layout as JSON")
    parser.add_argument("--plot", type=Path, help="write a preview image (png, svg, pdf)")
    parser.add_argument("--dot", type=Path, help="write a Graphviz DOT file with pinned positions")
    parser.add_argument("--validate", action="store_true", help="report data warnings")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    print(f"Loading: {args.input}")
    persons, relationships = load_file(args.input)
    print(f"  Found {len(persons)} persons and {len(relationships)} relationships")

    if args.validate:
        print("Validating graph...")
        warnings = validate_graph(to_networkx(build_index(persons, relationships)))
        if warnings:
            print(f"  Found {len(warnings)} validation warnings:")
            for w in warnings[:10]:  # Show first 10 warnings
                print(f"    - {w}")
            if len(warnings) > 10:
                print(f"    ... and {len(warnings) - 10} more")
        else:
            print("  No validation issues found")

    try:
        options = LayoutOptions(
            root_person_id=args.root,
            max_generations=args.max_generations,
            horizontal_spacing=args.horizontal_spacing,
            vertical_spacing=args.vertical_spacing,
            direction=args.direction,
            show_generation_labels=not args.hide_generation_labels,
        )
        print(f"Calculating '{args.strategy}' layout from {args.root}...")
        result = calculate_layout(args.strategy, persons, relationships, options)
    except LayoutError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    bounds = result.bounds
    print(
        f"  {len(result.nodes)} nodes, {len(result.edges)} edges, "
        f"{len(result.junctions)} junctions, bounds {bounds.width:g} x {bounds.height:g}"
    )

    if args.json:
        args.json.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
        print(f"Layout written to {args.json}")

    person_by_id = {p.id: p for p in persons}
    if args.dot:
        layout_to_dot(result, person_by_id).write(str(args.dot), format="raw")
        print(f"DOT written to {args.dot}")

    if args.plot:
        plot_layout(result, person_by_id, args.plot)

    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
