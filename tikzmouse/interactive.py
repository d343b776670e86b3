"""Commands driven by pointer captures and number prompts.

The pointer and the number prompt are supplied by the host; here they are
only seen through the two small protocols below. Nothing is written to the
buffer until every capture a command needs has arrived.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Iterator, List, Optional, Protocol, Tuple, Union

from .buffer import TextBuffer
from .calibration import CalibrationState, CalibrationStore, get_calibration_store, to_drawing
from .config import FormatOptions, ScannerConfig
from .errors import AbortedByUser
from .formatting import draw_statement, node_statement, point_str
from .geometry import ORIGIN, Point, angle_between
from .logging_utils import apply_debug_logging
from .scanner import find_statement_bounds
from .transform import rotate_span, translate_span

logger = logging.getLogger(__name__)

Drag = Tuple[Point, Point]
Capture = Union[Point, Drag, None]
CalibrationSource = Union[CalibrationState, CalibrationStore, None]


class PointerSource(Protocol):
    def capture(self, prompt: str) -> Capture:
        """Return a click, a ``(start, end)`` drag, or ``None`` on abort."""


class NumberSource(Protocol):
    def prompt_number(self, label: str) -> Optional[float]:
        """Return the entered number or ``None`` on abort."""


class ScriptedPointer:
    """Replays a fixed list of captures, then reports abort."""

    def __init__(self, captures: Iterable[Capture]):
        self._captures = list(captures)
        self.prompts: List[str] = []

    def capture(self, prompt: str) -> Capture:
        self.prompts.append(prompt)
        if not self._captures:
            return None
        return self._captures.pop(0)


class ScriptedNumbers:
    def __init__(self, values: Iterable[Optional[float]]):
        self._values = list(values)
        self.labels: List[str] = []

    def prompt_number(self, label: str) -> Optional[float]:
        self.labels.append(label)
        if not self._values:
            return None
        return self._values.pop(0)


def _is_drag(capture: Capture) -> bool:
    return isinstance(capture, tuple)


def _release_point(capture: Capture) -> Point:
    return capture[1] if _is_drag(capture) else capture  # type: ignore[index,return-value]


def iter_captured_points(pointer: PointerSource, prompt: str = "Click point") -> Iterator[Point]:
    """Yield device points until the pointer reports abort.

    A drag contributes the point where the button was released.
    """
    while True:
        capture = pointer.capture(prompt)
        if capture is None:
            return
        yield _release_point(capture)


def _require_number(numbers: NumberSource, label: str) -> float:
    value = numbers.prompt_number(label)
    if value is None:
        raise AbortedByUser(f"no value entered for {label!r}")
    return float(value)


def _resolve_calibration(calibration: CalibrationSource) -> CalibrationSource:
    return calibration if calibration is not None else get_calibration_store()


def capture_drawing_point(
    pointer: PointerSource, prompt: str, calibration: CalibrationSource = None
) -> Point:
    capture = pointer.capture(prompt)
    if capture is None:
        raise AbortedByUser(f"no point captured for {prompt!r}")
    return to_drawing(_release_point(capture), _resolve_calibration(calibration))


def insert_point(
    buffer: TextBuffer, pointer: PointerSource, calibration: CalibrationSource = None
) -> Point:
    """Insert ``(x, y)`` for one captured point at the cursor."""
    point = capture_drawing_point(pointer, "Click point to insert", calibration)
    buffer.insert(point_str(point))
    return point


def build_draw_statement(
    buffer: TextBuffer,
    pointer: PointerSource,
    calibration: CalibrationSource = None,
    draw_options: str = "",
    node_options: str = "",
    close: bool = False,
) -> str:
    calibration = _resolve_calibration(calibration)
    points = [to_drawing(p, calibration) for p in iter_captured_points(pointer, "Click next point")]
    if not points:
        raise AbortedByUser("no point captured for \\draw statement")
    statement = draw_statement(points, draw_options, node_options, close)
    buffer.insert(statement)
    logger.info("Inserted \\draw statement with %d point(s)", len(points))
    return statement


def build_node_statement(
    buffer: TextBuffer,
    pointer: PointerSource,
    calibration: CalibrationSource = None,
    node_options: str = "",
    text: str = "",
) -> str:
    point = capture_drawing_point(pointer, "Click node position", calibration)
    statement = node_statement(point, node_options, text)
    buffer.insert(statement)
    return statement


def operand_span(buffer: TextBuffer, config: Optional[ScannerConfig] = None) -> Tuple[int, int]:
    """The active non-empty selection, else the statement around the cursor."""
    region = buffer.region()
    if region is not None and region[0] < region[1]:
        return region
    lower, upper = buffer.accessible
    return find_statement_bounds(buffer.text, buffer.cursor, lower, upper, config)


def _capture_motion(
    pointer: PointerSource, calibration: CalibrationSource, first: str, second: str
) -> Tuple[Point, Point]:
    capture = pointer.capture(first)
    if capture is None:
        raise AbortedByUser(f"no point captured for {first!r}")
    if _is_drag(capture):
        start, end = capture  # type: ignore[misc]
    else:
        start = capture  # type: ignore[assignment]
        follow = pointer.capture(second)
        if follow is None:
            raise AbortedByUser(f"no point captured for {second!r}")
        end = _release_point(follow)
    return to_drawing(start, calibration), to_drawing(end, calibration)


def move_by_drag(
    buffer: TextBuffer,
    pointer: PointerSource,
    calibration: CalibrationSource = None,
    options: Optional[FormatOptions] = None,
    config: Optional[ScannerConfig] = None,
) -> Tuple[float, float]:
    """Translate the operand by the drawing-space length of a drag."""
    calibration = _resolve_calibration(calibration)
    start_pt, end_pt = _capture_motion(pointer, calibration, "Drag or click start", "Click end")
    dx, dy = end_pt.x - start_pt.x, end_pt.y - start_pt.y
    _translate_operand(buffer, dx, dy, options, config)
    return dx, dy


def move_by_offset(
    buffer: TextBuffer,
    numbers: NumberSource,
    options: Optional[FormatOptions] = None,
    config: Optional[ScannerConfig] = None,
) -> Tuple[float, float]:
    dx = _require_number(numbers, "dx")
    dy = _require_number(numbers, "dy")
    _translate_operand(buffer, dx, dy, options, config)
    return dx, dy


def _translate_operand(
    buffer: TextBuffer,
    dx: float,
    dy: float,
    options: Optional[FormatOptions],
    config: Optional[ScannerConfig],
) -> None:
    start, end = operand_span(buffer, config)
    new_text = translate_span(buffer.text, start, end, dx, dy, options)
    buffer.rewrite(new_text, start, end)


def rotate_by_drag(
    buffer: TextBuffer,
    pointer: PointerSource,
    calibration: CalibrationSource = None,
    center: Optional[Point] = None,
    ask_center: bool = False,
    rotate_annotations: bool = True,
    options: Optional[FormatOptions] = None,
    config: Optional[ScannerConfig] = None,
) -> float:
    """Rotate the operand by the angle a drag sweeps around ``center``.

    ``center`` is in drawing space; with ``ask_center`` it is captured first,
    otherwise it defaults to the drawing origin.
    """
    calibration = _resolve_calibration(calibration)
    if ask_center:
        center = capture_drawing_point(pointer, "Click rotation center", calibration)
    center = center if center is not None else ORIGIN
    start_pt, end_pt = _capture_motion(pointer, calibration, "Drag or click start", "Click end")
    try:
        theta = angle_between(start_pt - center, end_pt - center)
    except ValueError as exc:
        raise AbortedByUser(f"drag point coincides with the rotation center {point_str(center)}") from exc
    _rotate_operand(buffer, theta, center, rotate_annotations, options, config)
    return theta


def rotate_by_angle(
    buffer: TextBuffer,
    numbers: NumberSource,
    center: Point = ORIGIN,
    rotate_annotations: bool = True,
    options: Optional[FormatOptions] = None,
    config: Optional[ScannerConfig] = None,
) -> float:
    theta = math.radians(_require_number(numbers, "degrees"))
    _rotate_operand(buffer, theta, center, rotate_annotations, options, config)
    return theta


def _rotate_operand(
    buffer: TextBuffer,
    theta: float,
    center: Point,
    rotate_annotations: bool,
    options: Optional[FormatOptions],
    config: Optional[ScannerConfig],
) -> None:
    start, end = operand_span(buffer, config)
    new_text = rotate_span(buffer.text, start, end, theta, center, rotate_annotations, options, config)
    buffer.rewrite(new_text, start, end)


def calibrate_interactively(
    pointer: PointerSource,
    numbers: NumberSource,
    store: Optional[CalibrationStore] = None,
) -> CalibrationState:
    """Capture two reference points and ask for their drawing coordinates."""
    store = store if store is not None else get_calibration_store()
    samples = []
    for index in (1, 2):
        capture = pointer.capture(f"Click reference point {index}")
        if capture is None:
            raise AbortedByUser(f"reference point {index} not captured")
        device = _release_point(capture)
        drawing = Point(
            _require_number(numbers, f"x of point {index}"),
            _require_number(numbers, f"y of point {index}"),
        )
        samples.append((device, drawing))
    (device1, drawing1), (device2, drawing2) = samples
    return store.calibrate(device1, device2, drawing1, drawing2)


apply_debug_logging(globals(), logger=logger, skip={"iter_captured_points"})
