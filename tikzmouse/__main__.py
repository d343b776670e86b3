import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from tikzmouse import (
    AbortedByUser,
    CalibrationStore,
    Point,
    ScriptedNumbers,
    ScriptedPointer,
    TextBuffer,
    TikzMouseError,
    build_draw_statement,
    build_node_statement,
    move_by_drag,
    move_by_offset,
    rotate_by_angle,
    rotate_by_drag,
    to_drawing,
)
from tikzmouse.formatting import point_str

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _parse_point(value: str) -> Point:
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected X,Y but got {value!r}")
    try:
        return Point(float(parts[0]), float(parts[1]))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected X,Y but got {value!r}") from exc


def _parse_drag(value: str) -> Tuple[Point, Point]:
    if ":" not in value:
        raise argparse.ArgumentTypeError(f"expected X1,Y1:X2,Y2 but got {value!r}")
    start, end = value.split(":", 1)
    return _parse_point(start), _parse_point(end)


def _parse_region(value: str) -> Tuple[int, int]:
    try:
        start, end = (int(part) for part in value.split(":", 1))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected START:END offsets but got {value!r}") from exc
    return start, end


def _load_store(path: Optional[str]) -> CalibrationStore:
    store = CalibrationStore()
    if path:
        store.load(path)
    return store


def _add_calibration_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--calibration",
        help="JSON calibration file written by 'calibrate' (default: identity)",
    )


def _add_operand_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", help="TikZ/LaTeX source file")
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--pos",
        type=int,
        default=0,
        help="Character offset inside the statement to transform (default: 0)",
    )
    target.add_argument(
        "--region",
        type=_parse_region,
        help="Transform every statement in START:END instead of one statement",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write the result here instead of stdout",
    )
    parser.add_argument(
        "--in-place",
        action="store_true",
        help="Overwrite the input file",
    )


def _open_buffer(args: argparse.Namespace) -> TextBuffer:
    text = Path(args.path).read_text(encoding="utf-8")
    return TextBuffer(text, cursor=args.pos or 0, selection=args.region)


def _emit(args: argparse.Namespace, text: str) -> None:
    if args.in_place:
        target = Path(args.path)
    elif args.output:
        target = Path(args.output)
    else:
        sys.stdout.write(text)
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    logger.info("Wrote %s", target)


def _cmd_calibrate(args: argparse.Namespace) -> None:
    store = CalibrationStore()
    state = store.calibrate(args.device1, args.device2, args.drawing1, args.drawing2)
    if args.output:
        store.save(args.output)
    print(json.dumps(state.to_dict(), indent=2))


def _cmd_map(args: argparse.Namespace) -> None:
    store = _load_store(args.calibration)
    for point in args.points:
        print(point_str(to_drawing(point, store)))


def _cmd_draw(args: argparse.Namespace) -> None:
    buffer = TextBuffer()
    build_draw_statement(
        buffer,
        ScriptedPointer(args.points),
        _load_store(args.calibration),
        draw_options=args.draw_options,
        node_options=args.node_options,
        close=args.close,
    )
    print(buffer.text)


def _cmd_node(args: argparse.Namespace) -> None:
    buffer = TextBuffer()
    build_node_statement(
        buffer,
        ScriptedPointer([args.point]),
        _load_store(args.calibration),
        node_options=args.node_options,
        text=args.text,
    )
    print(buffer.text)


def _cmd_translate(args: argparse.Namespace) -> None:
    buffer = _open_buffer(args)
    if args.drag is not None:
        dx, dy = move_by_drag(buffer, ScriptedPointer([args.drag]), _load_store(args.calibration))
    else:
        dx, dy = move_by_offset(buffer, ScriptedNumbers(args.by))
    logger.info("Translated by (%.6g, %.6g)", dx, dy)
    _emit(args, buffer.text)


def _cmd_rotate(args: argparse.Namespace) -> None:
    buffer = _open_buffer(args)
    rotate_annotations = not args.no_annotations
    if args.drag is not None:
        theta = rotate_by_drag(
            buffer,
            ScriptedPointer([args.drag]),
            _load_store(args.calibration),
            center=args.center,
            rotate_annotations=rotate_annotations,
        )
    else:
        theta = rotate_by_angle(
            buffer,
            ScriptedNumbers([args.degrees]),
            center=args.center,
            rotate_annotations=rotate_annotations,
        )
    logger.info("Rotated by %.6g degrees", math.degrees(theta))
    _emit(args, buffer.text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tikzmouse",
        description="Map pointer positions into TikZ coordinates and move or rotate TikZ statements",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_cal = sub.add_parser("calibrate", help="Fit the device-to-drawing map from two reference points")
    p_cal.add_argument("device1", type=_parse_point, help="First reference point in device space, X,Y")
    p_cal.add_argument("device2", type=_parse_point, help="Second reference point in device space, X,Y")
    p_cal.add_argument("drawing1", type=_parse_point, help="Drawing coordinates of the first point, X,Y")
    p_cal.add_argument("drawing2", type=_parse_point, help="Drawing coordinates of the second point, X,Y")
    p_cal.add_argument("-o", "--output", help="Save the calibration as JSON")
    p_cal.set_defaults(func=_cmd_calibrate)

    p_map = sub.add_parser("map", help="Print drawing coordinates of device points")
    p_map.add_argument("points", nargs="+", type=_parse_point, help="Device points, X,Y")
    _add_calibration_arg(p_map)
    p_map.set_defaults(func=_cmd_map)

    p_draw = sub.add_parser("draw", help="Print a \\draw statement through device points")
    p_draw.add_argument("points", nargs="+", type=_parse_point, help="Device points, X,Y")
    p_draw.add_argument("--draw-options", default="", help="Options for \\draw[...]")
    p_draw.add_argument("--node-options", default="", help="Text emitted after every point")
    p_draw.add_argument("--close", action="store_true", help="Return to the first point")
    _add_calibration_arg(p_draw)
    p_draw.set_defaults(func=_cmd_draw)

    p_node = sub.add_parser("node", help="Print a \\node statement at a device point")
    p_node.add_argument("point", type=_parse_point, help="Device point, X,Y")
    p_node.add_argument("--node-options", default="", help="Options for \\node[...]")
    p_node.add_argument("--text", default="", help="Node text")
    _add_calibration_arg(p_node)
    p_node.set_defaults(func=_cmd_node)

    p_tr = sub.add_parser("translate", help="Move the coordinates of a statement")
    _add_operand_args(p_tr)
    how = p_tr.add_mutually_exclusive_group(required=True)
    how.add_argument("--by", type=lambda v: list(_parse_point(v)), help="Drawing-space offset DX,DY")
    how.add_argument("--drag", type=_parse_drag, help="Device-space drag X1,Y1:X2,Y2")
    _add_calibration_arg(p_tr)
    p_tr.set_defaults(func=_cmd_translate)

    p_rot = sub.add_parser("rotate", help="Rotate the coordinates of a statement")
    _add_operand_args(p_rot)
    how = p_rot.add_mutually_exclusive_group(required=True)
    how.add_argument("--degrees", type=float, help="Counter-clockwise angle in degrees")
    how.add_argument("--drag", type=_parse_drag, help="Device-space drag X1,Y1:X2,Y2 swept around the center")
    p_rot.add_argument(
        "--center",
        type=_parse_point,
        default=Point(0.0, 0.0),
        help="Rotation center in drawing space (default: 0,0)",
    )
    p_rot.add_argument(
        "--no-annotations",
        action="store_true",
        help="Leave node rotate= options untouched",
    )
    _add_calibration_arg(p_rot)
    p_rot.set_defaults(func=_cmd_rotate)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        args.func(args)
    except AbortedByUser as exc:
        logger.warning("Cancelled: %s", exc)
        raise SystemExit(1)
    except (TikzMouseError, OSError, ValueError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1)


if __name__ == "__main__":
    main(sys.argv[1:])
