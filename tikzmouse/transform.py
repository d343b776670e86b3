"""Rigid transforms of the coordinate literals inside TikZ statements.

Every operation first scans the whole region and collects its edits; the text
is only spliced once that pass has succeeded, so a failure leaves the input
untouched.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .config import FormatOptions, ScannerConfig, get_format_options
from .errors import MalformedCoordinate
from .formatting import format_coordinate, rotate_annotation
from .geometry import ORIGIN, Point, rotate_point
from .logging_utils import apply_debug_logging
from .scanner import (
    CoordinatePair,
    find_statement_bounds,
    is_number_literal,
    iter_node_options,
    scan_top_level_pairs,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextEdit:
    start: int
    end: int
    replacement: str


def apply_edits(text: str, edits: Iterable[TextEdit]) -> str:
    """Splice all edits into ``text`` at once, last position first."""
    ordered = sorted(edits, key=lambda e: (e.start, e.end))
    for left, right in zip(ordered, ordered[1:]):
        if right.start < left.end:
            raise ValueError(f"overlapping edits at {left.start}..{left.end} and {right.start}..{right.end}")
    for edit in reversed(ordered):
        text = text[:edit.start] + edit.replacement + text[edit.end:]
    return text


def _pair_edits(pair: CoordinatePair, new: Point, precision: int) -> List[TextEdit]:
    edits = []
    # untouched literals keep their exact spelling
    if new.x != pair.x:
        edits.append(TextEdit(pair.x_span[0], pair.x_span[1], format_coordinate(new.x, pair.x_text, precision)))
    if new.y != pair.y:
        edits.append(TextEdit(pair.y_span[0], pair.y_span[1], format_coordinate(new.y, pair.y_text, precision)))
    return edits


def translate_edits(
    text: str,
    start: int,
    end: int,
    dx: float,
    dy: float,
    options: Optional[FormatOptions] = None,
) -> List[TextEdit]:
    options = options or get_format_options()
    edits: List[TextEdit] = []
    for pair in scan_top_level_pairs(text, start, end):
        if pair.relative:
            # +(a,b) and ++(a,b) are offsets from the previous point
            continue
        edits.extend(_pair_edits(pair, Point(pair.x + dx, pair.y + dy), options.precision))
    return edits


def translate_span(
    text: str,
    start: int,
    end: int,
    dx: float,
    dy: float,
    options: Optional[FormatOptions] = None,
) -> str:
    """Shift every absolute coordinate pair of ``text[start:end]`` by ``(dx, dy)``."""
    edits = translate_edits(text, start, end, dx, dy, options)
    logger.info("Translating region %d..%d by (%g, %g): %d edit(s)", start, end, dx, dy, len(edits))
    return apply_edits(text, edits)


def _annotation_edits(
    text: str,
    start: int,
    end: int,
    degrees: float,
    options: FormatOptions,
    config: Optional[ScannerConfig],
) -> List[TextEdit]:
    key = options.annotation_key
    edits: List[TextEdit] = []
    for node in iter_node_options(text, start, end, config):
        if not node.present:
            edits.append(TextEdit(node.keyword_end, node.keyword_end, f"[{rotate_annotation(degrees, key)}]"))
        elif node.rotate_span is None:
            close = node.end - 1
            inner = text[node.start + 1:close].rstrip()
            glue = "" if not inner or inner.endswith(",") else ", "
            edits.append(TextEdit(close, close, glue + rotate_annotation(degrees, key)))
        else:
            current = (node.rotate_text or "").strip()
            if not is_number_literal(current):
                raise MalformedCoordinate(
                    node.rotate_span[0], f"cannot accumulate onto {key}={current!r}", current
                )
            value = float(current) + degrees
            edits.append(TextEdit(node.rotate_span[0], node.rotate_span[1], "%f" % value))
    return edits


def rotate_edits(
    text: str,
    start: int,
    end: int,
    theta: float,
    center: Point = ORIGIN,
    rotate_annotations: bool = True,
    options: Optional[FormatOptions] = None,
    config: Optional[ScannerConfig] = None,
) -> List[TextEdit]:
    options = options or get_format_options()
    edits: List[TextEdit] = []
    for pair in scan_top_level_pairs(text, start, end):
        # relative offsets are vectors: they turn about the origin
        pivot = ORIGIN if pair.relative else center
        new = rotate_point(Point(pair.x, pair.y), pivot, theta)
        edits.extend(_pair_edits(pair, new, options.precision))
    if rotate_annotations:
        edits.extend(_annotation_edits(text, start, end, math.degrees(theta), options, config))
    return edits


def rotate_span(
    text: str,
    start: int,
    end: int,
    theta: float,
    center: Point = ORIGIN,
    rotate_annotations: bool = True,
    options: Optional[FormatOptions] = None,
    config: Optional[ScannerConfig] = None,
) -> str:
    """Rotate the coordinate pairs of ``text[start:end]`` by ``theta`` radians.

    With ``rotate_annotations`` the ``rotate=`` option of every top-level node
    is created or increased by the same angle in degrees.
    """
    edits = rotate_edits(text, start, end, theta, center, rotate_annotations, options, config)
    logger.info(
        "Rotating region %d..%d by %.6g deg about (%g, %g): %d edit(s)",
        start,
        end,
        math.degrees(theta),
        center.x,
        center.y,
        len(edits),
    )
    return apply_edits(text, edits)


def translate_statement_at(
    text: str,
    pos: int,
    dx: float,
    dy: float,
    bounds: Optional[Tuple[int, int]] = None,
    options: Optional[FormatOptions] = None,
    config: Optional[ScannerConfig] = None,
) -> str:
    lower, upper = bounds or (0, len(text))
    start, end = find_statement_bounds(text, pos, lower, upper, config)
    return translate_span(text, start, end, dx, dy, options)


def rotate_statement_at(
    text: str,
    pos: int,
    theta: float,
    center: Point = ORIGIN,
    rotate_annotations: bool = True,
    bounds: Optional[Tuple[int, int]] = None,
    options: Optional[FormatOptions] = None,
    config: Optional[ScannerConfig] = None,
) -> str:
    lower, upper = bounds or (0, len(text))
    start, end = find_statement_bounds(text, pos, lower, upper, config)
    return rotate_span(text, start, end, theta, center, rotate_annotations, options, config)


apply_debug_logging(globals(), logger=logger)
