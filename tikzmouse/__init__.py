from .errors import (
    TikzMouseError,
    DegenerateCalibration,
    UnboundedStatement,
    MalformedCoordinate,
    AbortedByUser,
)
from .geometry import Point, AxisCalibration, ORIGIN, linear_fit, angle_between, rotate_point
from .calibration import (
    CalibrationState,
    CalibrationStore,
    calibrate,
    to_drawing,
    to_device,
    get_calibration_store,
    set_calibration_store,
)
from .config import (
    ScannerConfig,
    FormatOptions,
    get_scanner_config,
    set_scanner_config,
    get_format_options,
    set_format_options,
)
from .scanner import (
    CoordinatePair,
    OptionBracket,
    paren_depth,
    find_statement_bounds,
    iter_top_level_pairs,
    scan_top_level_pairs,
    iter_node_options,
)
from .formatting import point_str, draw_statement, node_statement, format_coordinate
from .transform import (
    TextEdit,
    apply_edits,
    translate_span,
    rotate_span,
    translate_statement_at,
    rotate_statement_at,
)
from .buffer import TextBuffer
from .interactive import (
    PointerSource,
    NumberSource,
    ScriptedPointer,
    ScriptedNumbers,
    iter_captured_points,
    insert_point,
    build_draw_statement,
    build_node_statement,
    move_by_drag,
    move_by_offset,
    rotate_by_drag,
    rotate_by_angle,
    calibrate_interactively,
)

__all__ = [
    'TikzMouseError',
    'DegenerateCalibration',
    'UnboundedStatement',
    'MalformedCoordinate',
    'AbortedByUser',
    'Point',
    'AxisCalibration',
    'ORIGIN',
    'linear_fit',
    'angle_between',
    'rotate_point',
    'CalibrationState',
    'CalibrationStore',
    'calibrate',
    'to_drawing',
    'to_device',
    'get_calibration_store',
    'set_calibration_store',
    'ScannerConfig',
    'FormatOptions',
    'get_scanner_config',
    'set_scanner_config',
    'get_format_options',
    'set_format_options',
    'CoordinatePair',
    'OptionBracket',
    'paren_depth',
    'find_statement_bounds',
    'iter_top_level_pairs',
    'scan_top_level_pairs',
    'iter_node_options',
    'point_str',
    'draw_statement',
    'node_statement',
    'format_coordinate',
    'TextEdit',
    'apply_edits',
    'translate_span',
    'rotate_span',
    'translate_statement_at',
    'rotate_statement_at',
    'TextBuffer',
    'PointerSource',
    'NumberSource',
    'ScriptedPointer',
    'ScriptedNumbers',
    'iter_captured_points',
    'insert_point',
    'build_draw_statement',
    'build_node_statement',
    'move_by_drag',
    'move_by_offset',
    'rotate_by_drag',
    'rotate_by_angle',
    'calibrate_interactively',
]
