"""Example session: calibrate, draw a triangle from clicks, then rotate it."""

import math

from tikzmouse import (
    CalibrationStore,
    Point,
    ScriptedNumbers,
    ScriptedPointer,
    TextBuffer,
    build_draw_statement,
    calibrate_interactively,
    rotate_by_angle,
)

# screen pixels, y growing downwards
REFERENCE_CLICKS = [Point(100, 500), Point(500, 100)]
REFERENCE_COORDS = [0, 0, 4, 4]
TRIANGLE_CLICKS = [Point(100, 500), Point(400, 500), Point(100, 100)]


def main() -> None:
    store = CalibrationStore()
    calibrate_interactively(ScriptedPointer(REFERENCE_CLICKS), ScriptedNumbers(REFERENCE_COORDS), store)

    buffer = TextBuffer()
    build_draw_statement(buffer, ScriptedPointer(TRIANGLE_CLICKS), store, draw_options="thick", close=True)
    print("Drawn:  ", buffer.text)

    buffer.cursor = 1
    theta = rotate_by_angle(buffer, ScriptedNumbers([30]), center=Point(0, 0))
    print(f"Rotated by {math.degrees(theta):.1f} deg:", buffer.text)


if __name__ == "__main__":
    main()
