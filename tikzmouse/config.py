"""Configuration helpers for scanning and formatting."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Tuple

DEFAULT_START_MARKERS: Tuple[str, ...] = (
    "draw",
    "filldraw",
    "fill",
    "shadedraw",
    "shade",
    "path",
    "clip",
    "node",
    "coordinate",
)


@dataclass
class ScannerConfig:
    """What counts as a statement and as a node inside one."""

    start_markers: Tuple[str, ...] = DEFAULT_START_MARKERS
    terminator: str = ";"
    node_keywords: Tuple[str, ...] = ("node",)


@dataclass
class FormatOptions:
    """Number formatting used when coordinates are rewritten."""

    precision: int = 6
    annotation_key: str = "rotate"


_SCANNER_CONFIG = ScannerConfig()
_FORMAT_OPTIONS = FormatOptions()


def get_scanner_config() -> ScannerConfig:
    return copy.deepcopy(_SCANNER_CONFIG)


def set_scanner_config(config: ScannerConfig) -> None:
    global _SCANNER_CONFIG
    _SCANNER_CONFIG = copy.deepcopy(config)


def get_format_options() -> FormatOptions:
    return copy.deepcopy(_FORMAT_OPTIONS)


def set_format_options(options: FormatOptions) -> None:
    global _FORMAT_OPTIONS
    _FORMAT_OPTIONS = copy.deepcopy(options)
