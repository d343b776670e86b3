"""Device-to-drawing calibration.

Each axis is fitted on its own from two correspondences: the device and the
drawing frames are assumed axis-aligned, differing only by a per-axis scale and
offset. Rotation or skew between the frames is not modelled.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import DegenerateCalibration
from .geometry import AxisCalibration, Point, linear_fit
from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalibrationState:
    x: AxisCalibration = field(default_factory=AxisCalibration)
    y: AxisCalibration = field(default_factory=AxisCalibration)

    @classmethod
    def identity(cls) -> "CalibrationState":
        return cls(AxisCalibration(0.0, 1.0), AxisCalibration(0.0, 1.0))

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            "x": {"intercept": self.x.intercept, "slope": self.x.slope},
            "y": {"intercept": self.y.intercept, "slope": self.y.slope},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CalibrationState":
        axes = {}
        for axis in ("x", "y"):
            entry = data.get(axis)
            if not isinstance(entry, dict):
                raise ValueError(f"calibration entry for axis {axis!r} is missing")
            try:
                intercept = float(entry["intercept"])
                slope = float(entry["slope"])
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"invalid calibration entry for axis {axis!r}: {entry!r}") from exc
            if slope == 0.0:
                raise DegenerateCalibration(axis, "stored slope is zero")
            axes[axis] = AxisCalibration(intercept, slope)
        return cls(axes["x"], axes["y"])


class CalibrationStore:
    """Holds the calibration of one session.

    The state is only replaced as a whole: a failed calibration leaves the
    previous one active.
    """

    def __init__(self, state: Optional[CalibrationState] = None) -> None:
        self._state = state or CalibrationState.identity()

    @property
    def state(self) -> CalibrationState:
        return self._state

    def reset(self) -> CalibrationState:
        self._state = CalibrationState.identity()
        return self._state

    def calibrate(
        self,
        device1: Point,
        device2: Point,
        drawing1: Point,
        drawing2: Point,
    ) -> CalibrationState:
        x_axis = linear_fit((device1.x, device2.x), (drawing1.x, drawing2.x), axis="x")
        y_axis = linear_fit((device1.y, device2.y), (drawing1.y, drawing2.y), axis="y")
        self._state = CalibrationState(x_axis, y_axis)
        logger.info(
            "Calibrated: x = %.6g + %.6g*u, y = %.6g + %.6g*v",
            x_axis.intercept,
            x_axis.slope,
            y_axis.intercept,
            y_axis.slope,
        )
        return self._state

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self._state.to_dict(), indent=2), encoding="utf-8")
        logger.info("Saved calibration to %s", path)

    def load(self, path: Union[str, Path]) -> CalibrationState:
        path = Path(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        self._state = CalibrationState.from_dict(data)
        logger.info("Loaded calibration from %s", path)
        return self._state

    def __repr__(self) -> str:
        return f"CalibrationStore({self._state!r})"


_DEFAULT_STORE = CalibrationStore()


def get_calibration_store() -> CalibrationStore:
    return _DEFAULT_STORE


def set_calibration_store(store: CalibrationStore) -> None:
    global _DEFAULT_STORE
    _DEFAULT_STORE = store


def _resolve_state(source: Union[CalibrationState, CalibrationStore, None]) -> CalibrationState:
    if source is None:
        return _DEFAULT_STORE.state
    if isinstance(source, CalibrationStore):
        return source.state
    return source


def calibrate(
    device1: Point,
    device2: Point,
    drawing1: Point,
    drawing2: Point,
    store: Optional[CalibrationStore] = None,
) -> CalibrationState:
    """Fit both axes from two correspondences and install the result."""
    target = store if store is not None else _DEFAULT_STORE
    return target.calibrate(device1, device2, drawing1, drawing2)


def to_drawing(
    device: Point, calibration: Union[CalibrationState, CalibrationStore, None] = None
) -> Point:
    state = _resolve_state(calibration)
    return Point(state.x.apply(device.x), state.y.apply(device.y))


def to_device(
    drawing: Point, calibration: Union[CalibrationState, CalibrationStore, None] = None
) -> Point:
    state = _resolve_state(calibration)
    return Point(state.x.invert(drawing.x), state.y.invert(drawing.y))


apply_debug_logging(globals(), logger=logger, wrap_methods=True)
