"""Statement scanning over raw TikZ text.

Nesting is tracked by a small bracket counter: ``(``, ``[`` and ``{`` all open
a level, their counterparts close one. TeX comments (``%`` to end of line) and
backslash-escaped characters never count. Offsets are plain string indices.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .config import ScannerConfig, get_scanner_config
from .errors import MalformedCoordinate, UnboundedStatement
from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)

OPENERS = "([{"
CLOSERS = ")]}"

_num_re = re.compile(r'[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?')
_ws_re = re.compile(r'\s+')
_rotate_entry_re = re.compile(r'^(\s*)rotate\s*=\s*(.*?)\s*$', re.DOTALL)

Span = Tuple[int, int]


@dataclass(frozen=True)
class CoordinatePair:
    """A ``(x, y)`` literal found at the top level of a statement.

    ``start``/``end`` cover the parentheses; ``x_span``/``y_span`` cover the
    number literals only so they can be rewritten without touching layout.
    """

    x: float
    y: float
    start: int
    end: int
    x_span: Span
    y_span: Span
    x_text: str
    y_text: str
    relative: bool = False


@dataclass(frozen=True)
class OptionBracket:
    """The ``[...]`` option list attached to a node keyword."""

    keyword_start: int
    keyword_end: int
    start: Optional[int] = None
    end: Optional[int] = None
    rotate_span: Optional[Span] = None
    rotate_text: Optional[str] = None

    @property
    def present(self) -> bool:
        return self.start is not None


def _walk(text: str, start: int, end: int) -> Iterator[Tuple[int, str, int]]:
    """Yield ``(index, char, depth)`` for every live character of the span.

    ``depth`` is the level the character sits at: an opener reports the level
    outside it, a closer the level it returns to.
    """
    depth = 0
    i = start
    while i < end:
        ch = text[i]
        if ch == '\\':
            # escaped character or control word start: the next char is inert
            yield i, ch, depth
            i += 2
            continue
        if ch == '%':
            newline = text.find('\n', i, end)
            if newline < 0:
                return
            i = newline
            continue
        if ch in OPENERS:
            yield i, ch, depth
            depth += 1
        elif ch in CLOSERS:
            depth -= 1
            yield i, ch, depth
        else:
            yield i, ch, depth
        i += 1


def paren_depth(text: str, start: int, pos: int) -> int:
    """Nesting depth at ``pos`` measured from ``start`` (``pos`` excluded)."""
    depth = 0
    for _, ch, level in _walk(text, start, pos):
        if ch in OPENERS:
            depth = level + 1
        else:
            depth = level
    return depth


def _in_comment(text: str, index: int) -> bool:
    line_start = text.rfind('\n', 0, index) + 1
    i = line_start
    while i < index:
        ch = text[i]
        if ch == '\\':
            i += 2
            continue
        if ch == '%':
            return True
        i += 1
    return False


def _marker_re(config: ScannerConfig) -> re.Pattern:
    names = sorted(config.start_markers, key=len, reverse=True)
    return re.compile(r'(?<!\\)\\(?:' + '|'.join(re.escape(n) for n in names) + r')(?![A-Za-z@])')


def _find_terminator(text: str, start: int, upper: int, terminator: str) -> Optional[int]:
    """End offset of the statement at ``start``, or None when the marker sits
    inside a group that closes before any terminator.
    """
    for i, ch, depth in _walk(text, start, upper):
        if depth < 0:
            return None
        if ch == terminator and depth == 0:
            return i + 1
    raise UnboundedStatement(start, f'statement is not terminated by {terminator!r}')


def find_statement_bounds(
    text: str,
    pos: int,
    lower: int = 0,
    upper: Optional[int] = None,
    config: Optional[ScannerConfig] = None,
) -> Tuple[int, int]:
    """Return ``(start, end)`` of the statement enclosing ``pos``.

    ``end`` is just past the terminator. ``lower``/``upper`` restrict the
    search to a narrowed region of ``text``.
    """
    config = config or get_scanner_config()
    upper = len(text) if upper is None else upper
    if not lower <= pos <= upper:
        raise UnboundedStatement(pos, f'position outside accessible region {lower}..{upper}')

    candidates = [
        m.start()
        for m in _marker_re(config).finditer(text, lower, upper)
        if m.start() <= pos and not _in_comment(text, m.start())
    ]
    for start in reversed(candidates):
        end = _find_terminator(text, start, upper, config.terminator)
        if end is None:
            logger.debug('Marker at %d is nested in an enclosing group', start)
            continue
        if pos < end:
            logger.debug('Statement at %d spans %d..%d', pos, start, end)
            return start, end
    raise UnboundedStatement(pos, 'no statement start marker encloses this position')


def is_number_literal(text: str) -> bool:
    return _num_re.fullmatch(_ws_re.sub('', text)) is not None


def _parse_number(raw: str, offset: int, group: str) -> float:
    cleaned = _ws_re.sub('', raw)
    if not _num_re.fullmatch(cleaned):
        raise MalformedCoordinate(offset, f'not a number: {cleaned!r} in {group!r}', group)
    return float(cleaned)


def _literal_span(text: str, start: int, end: int) -> Span:
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end


def _is_relative(text: str, lower: int, paren: int) -> bool:
    i = paren - 1
    while i >= lower and text[i].isspace():
        i -= 1
    return i >= lower and text[i] == '+'


def _make_pair(text: str, lower: int, open_idx: int, close_idx: int, comma: int) -> CoordinatePair:
    group = text[open_idx:close_idx + 1]
    x_span = _literal_span(text, open_idx + 1, comma)
    y_span = _literal_span(text, comma + 1, close_idx)
    x_text = text[x_span[0]:x_span[1]]
    y_text = text[y_span[0]:y_span[1]]
    return CoordinatePair(
        x=_parse_number(x_text, x_span[0], group),
        y=_parse_number(y_text, y_span[0], group),
        start=open_idx,
        end=close_idx + 1,
        x_span=x_span,
        y_span=y_span,
        x_text=_ws_re.sub('', x_text),
        y_text=_ws_re.sub('', y_text),
        relative=_is_relative(text, lower, open_idx),
    )


def iter_top_level_pairs(text: str, start: int, end: int) -> Iterator[CoordinatePair]:
    """Lazily yield the coordinate pairs at depth zero of ``text[start:end]``.

    Groups without a comma at their own level (named coordinates, polar
    coordinates, radii) are not pairs and are passed over; groups nested in
    options, node text or other groups are never looked at.
    """
    open_idx: Optional[int] = None
    commas: List[int] = []
    for i, ch, depth in _walk(text, start, end):
        if depth < 0:
            raise UnboundedStatement(i, f'unbalanced {ch!r} in scanned region')
        if ch == '(' and depth == 0:
            open_idx = i
            commas = []
        elif open_idx is not None:
            if ch == ',' and depth == 1:
                commas.append(i)
            elif ch in CLOSERS and depth == 0:
                close_idx = i
                group_start, group_commas = open_idx, commas
                open_idx, commas = None, []
                if ch != ')':
                    raise UnboundedStatement(i, f'group opened at {group_start} closed by {ch!r}')
                if not group_commas:
                    continue
                if len(group_commas) > 1:
                    group = text[group_start:close_idx + 1]
                    raise MalformedCoordinate(group_start, f'expected two coordinates in {group!r}', group)
                yield _make_pair(text, start, group_start, close_idx, group_commas[0])
    if open_idx is not None:
        raise UnboundedStatement(open_idx, 'coordinate group is not closed')
    if paren_depth(text, start, end) != 0:
        raise UnboundedStatement(end, 'nesting does not return to zero at end of region')


def scan_top_level_pairs(text: str, start: int, end: int) -> List[CoordinatePair]:
    """Fully scan ``text[start:end]``; any malformed group aborts the whole scan."""
    pairs = list(iter_top_level_pairs(text, start, end))
    logger.debug('Found %d coordinate pair(s) in %d..%d', len(pairs), start, end)
    return pairs


def _keyword_re(config: ScannerConfig) -> re.Pattern:
    names = '|'.join(re.escape(n) for n in config.node_keywords)
    return re.compile(r'(?<![A-Za-z@\\])\\?(?:' + names + r')(?![A-Za-z@])')


def _skip_blank(text: str, i: int, end: int) -> int:
    while i < end and text[i].isspace():
        i += 1
    return i


def _matching_close(text: str, open_idx: int, end: int) -> int:
    for i, ch, depth in _walk(text, open_idx, end):
        if ch in CLOSERS and depth == 0:
            return i
    raise UnboundedStatement(open_idx, f'{text[open_idx]!r} is not closed')


def _find_rotate_entry(text: str, open_idx: int, close_idx: int) -> Tuple[Optional[Span], Optional[str]]:
    bounds = [open_idx]
    for i, ch, depth in _walk(text, open_idx + 1, close_idx):
        if ch == ',' and depth == 0:
            bounds.append(i)
    bounds.append(close_idx)
    for left, right in zip(bounds, bounds[1:]):
        entry = text[left + 1:right]
        m = _rotate_entry_re.match(entry)
        if m:
            value_start = left + 1 + m.start(2)
            value_end = left + 1 + m.end(2)
            return (value_start, value_end), m.group(2)
    return None, None


def iter_node_options(
    text: str, start: int, end: int, config: Optional[ScannerConfig] = None
) -> Iterator[OptionBracket]:
    """Yield node keywords at depth zero of the span with their option list."""
    config = config or get_scanner_config()
    depth_at = {i: depth for i, ch, depth in _walk(text, start, end) if ch not in CLOSERS}
    for m in _keyword_re(config).finditer(text, start, end):
        if depth_at.get(m.start()) != 0:
            continue
        i = _skip_blank(text, m.end(), end)
        if i < end and text[i] == '(':
            # node (name) [options] is accepted by TikZ as well
            i = _skip_blank(text, _matching_close(text, i, end) + 1, end)
        if i < end and text[i] == '[':
            close_idx = _matching_close(text, i, end)
            rotate_span, rotate_text = _find_rotate_entry(text, i, close_idx)
            yield OptionBracket(m.start(), m.end(), i, close_idx + 1, rotate_span, rotate_text)
        else:
            yield OptionBracket(m.start(), m.end())


apply_debug_logging(globals(), logger=logger, skip={'paren_depth'})
