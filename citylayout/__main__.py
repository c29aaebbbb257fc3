"""Command-line preview of a generated city layout.

Usage:
    python -m citylayout --strategy lattice --width 20 --height 20 --seed 7
    python -m citylayout --strategy bsp --json plan.json --preview -v

Generates a plan with placeholder assets, prints a per-category summary and
optionally an ASCII zone map, and can write the plan as JSON for golden-file
comparisons.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path

from citylayout.generation import (
    AssetCatalog,
    CityLayoutError,
    DeadEndStyle,
    Grid,
    ZoneKind,
    ZoningStrategy,
    create_engine,
)

ZONE_GLYPHS: dict[ZoneKind, str] = {
    ZoneKind.EMPTY: " ",
    ZoneKind.ROAD: "#",
    ZoneKind.RESIDENTIAL: "r",
    ZoneKind.COMMERCIAL: "c",
    ZoneKind.INDUSTRIAL: "i",
    ZoneKind.PARK: "p",
}


def render_zones(grid: Grid) -> str:
    """ASCII zone map, north up. Raised cells are shown in upper case."""
    lines = []
    for y in reversed(range(grid.height)):
        row = []
        for x in range(grid.width):
            glyph = ZONE_GLYPHS[grid.zone_at(x, y)]
            if grid.elevation[x, y] > 0:
                glyph = "^" if glyph == "#" else glyph.upper()
            row.append(glyph)
        lines.append("".join(row))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="citylayout", description="Generate a city layout plan"
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in ZoningStrategy],
        default=ZoningStrategy.LATTICE.value,
        help="Zoning strategy (default: lattice)",
    )
    parser.add_argument("--width", type=int, help="Grid width in cells")
    parser.add_argument("--height", type=int, help="Grid height in cells")
    parser.add_argument("--seed", type=int, help="Master random seed")
    parser.add_argument("--density", type=float, help="Building density in [0, 1]")
    parser.add_argument(
        "--dead-ends",
        choices=[s.value for s in DeadEndStyle],
        help="Tile used for dead-end roads",
    )
    parser.add_argument(
        "--variants",
        type=int,
        default=3,
        help="Placeholder assets per building/prop category (default: 3)",
    )
    parser.add_argument("--json", type=Path, help="Write the plan as JSON here")
    parser.add_argument(
        "--preview", action="store_true", help="Print an ASCII zone map"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides = {
        name: value
        for name, value in (
            ("width", args.width),
            ("height", args.height),
            ("seed", args.seed),
            ("density", args.density),
        )
        if value is not None
    }
    if args.dead_ends is not None:
        overrides["dead_end_style"] = DeadEndStyle(args.dead_ends)

    engine = create_engine(
        args.strategy, assets=AssetCatalog.placeholder(args.variants), **overrides
    )
    try:
        ctx, plan = engine.build()
    except CityLayoutError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.preview:
        print(render_zones(ctx.grid))
        print()

    counts = Counter(command.category for command in plan)
    print(f"{len(plan)} commands")
    for category, count in sorted(counts.items(), key=lambda i: i[0].value):
        print(f"{category.value:>22} {count:6d}")

    if args.json is not None:
        args.json.write_text(plan.to_json(indent=2))
        print(f"\nSaved plan to {args.json}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
