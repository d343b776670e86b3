from typing import Iterable, Optional

from .geometry import Point


def point_str(p: Point) -> str:
    return "(%f, %f)" % (p.x, p.y)


def _bracket(options: str) -> str:
    options = options.strip()
    return f"[{options}]" if options else ""


def draw_statement(
    points: Iterable[Point],
    draw_options: str = "",
    node_options: str = "",
    close: bool = False,
) -> str:
    """``\\draw[DOPTS] P1 NOPTS -- P2 NOPTS -- ... ;``"""
    rendered = [point_str(p) for p in points]
    if not rendered:
        raise ValueError("draw statement needs at least one point")
    if close and len(rendered) > 1:
        rendered.append(rendered[0])
    suffix = f" {node_options.strip()}" if node_options.strip() else ""
    path = " -- ".join(f"{p}{suffix}" for p in rendered)
    return f"\\draw{_bracket(draw_options)} {path};"


def node_statement(p: Point, node_options: str = "", text: str = "") -> str:
    """``\\node[NOPTS] at (x, y) {NVAL};``"""
    return f"\\node{_bracket(node_options)} at {point_str(p)} {{{text}}};"


def rotate_annotation(degrees: float, key: str = "rotate") -> str:
    return "%s=%f" % (key, degrees)


def _decimals(literal: str) -> Optional[int]:
    if "e" in literal or "E" in literal:
        return None
    if "." not in literal:
        return 0
    return len(literal.split(".", 1)[1])


def format_coordinate(value: float, original: str = "", precision: int = 6) -> str:
    """Render a rewritten number in the style of the literal it replaces.

    At least as many decimals as ``original`` are kept; further decimals up to
    ``precision`` appear only when the value needs them.
    """
    keep = _decimals(original) if original else 0
    if keep is None:
        keep = 0
    digits = max(keep, precision)
    rendered = f"{value:.{digits}f}"
    if digits > keep and "." in rendered:
        head, tail = rendered.split(".")
        tail = tail[:keep] + tail[keep:].rstrip("0")
        rendered = f"{head}.{tail}" if tail else head
    if rendered.startswith("-") and float(rendered) == 0.0:
        rendered = rendered[1:]
    return rendered
