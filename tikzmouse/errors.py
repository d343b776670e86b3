class TikzMouseError(Exception):
    """Base class for every error raised by tikzmouse."""


class DegenerateCalibration(TikzMouseError):
    """Raised when two calibration samples cannot define an axis map."""

    def __init__(self, axis: str, message: str):
        super().__init__(f'[axis {axis}] {message}')
        self.axis = axis


class UnboundedStatement(TikzMouseError, ValueError):
    """Raised when a statement has no start marker or no terminator."""

    def __init__(self, offset: int, message: str):
        super().__init__(f'[offset {offset}] {message}')
        self.offset = offset


class MalformedCoordinate(TikzMouseError, ValueError):
    """Raised when a coordinate group does not hold two numbers."""

    def __init__(self, offset: int, message: str, text: str = ''):
        super().__init__(f'[offset {offset}] {message}')
        self.offset = offset
        self.text = text


class AbortedByUser(TikzMouseError, RuntimeError):
    """Raised when a pointer or number prompt returns nothing."""
