import pytest

from tikzmouse.config import ScannerConfig, get_scanner_config, set_scanner_config
from tikzmouse.errors import MalformedCoordinate, UnboundedStatement
from tikzmouse.scanner import (
    find_statement_bounds,
    iter_node_options,
    iter_top_level_pairs,
    paren_depth,
    scan_top_level_pairs,
)


def _values(text, start=0, end=None):
    end = len(text) if end is None else end
    return [(p.x, p.y) for p in scan_top_level_pairs(text, start, end)]


def test_nested_option_pairs_are_skipped():
    text = r'\draw (1,2) node[opt=(3,4)] {} -- (5,6);'
    assert _values(text) == [(1.0, 2.0), (5.0, 6.0)]


def test_pairs_inside_node_text_are_skipped():
    text = r'\draw (0,0) node {$f(1,2)$} -- (1.5,-2);'
    assert _values(text) == [(0.0, 0.0), (1.5, -2.0)]


def test_groups_without_comma_are_not_pairs():
    text = r'\draw (A) -- (30:1) -- (1,2) circle (1);'
    assert _values(text) == [(1.0, 2.0)]


def test_pair_spans_cover_literals():
    text = r'\draw ( 1.5 ,  -2 );'
    (pair,) = scan_top_level_pairs(text, 0, len(text))
    assert text[pair.start:pair.end] == '( 1.5 ,  -2 )'
    assert text[pair.x_span[0]:pair.x_span[1]] == '1.5'
    assert text[pair.y_span[0]:pair.y_span[1]] == '-2'


def test_line_breaks_inside_pair_are_tolerated():
    text = '\\draw (1,\n  2) -- (3.5,\n4);'
    assert _values(text) == [(1.0, 2.0), (3.5, 4.0)]


def test_relative_pairs_are_flagged():
    text = r'\draw (0,0) -- ++(1,0) -- + (0,1) -- (2,2);'
    pairs = scan_top_level_pairs(text, 0, len(text))
    assert [p.relative for p in pairs] == [False, True, True, False]


def test_malformed_pair_aborts_scan():
    text = r'\draw (1,a) -- (2,2);'
    with pytest.raises(MalformedCoordinate) as exc:
        scan_top_level_pairs(text, 0, len(text))
    assert "'a'" in str(exc.value)


def test_three_components_are_rejected():
    text = r'\draw (1,2,3);'
    with pytest.raises(MalformedCoordinate):
        scan_top_level_pairs(text, 0, len(text))


def test_iteration_is_lazy():
    text = r'\draw (1,2) -- (x,y);'
    pairs = iter_top_level_pairs(text, 0, len(text))
    first = next(pairs)
    assert (first.x, first.y) == (1.0, 2.0)
    with pytest.raises(MalformedCoordinate):
        next(pairs)


@pytest.mark.parametrize('text', [r'\draw (1,2', r'\draw (1,2) node[a {b};', r'\draw (1,2)) -- (0,0);'])
def test_unbalanced_region_is_rejected(text):
    with pytest.raises(UnboundedStatement):
        scan_top_level_pairs(text, 0, len(text))


def test_comments_are_ignored():
    text = '\\draw (0,0) % (9,9); [\n -- (1,1);'
    assert _values(text) == [(0.0, 0.0), (1.0, 1.0)]


def test_paren_depth():
    text = r'\draw[a=(1,2)] (0,0);'
    assert paren_depth(text, 0, text.index('1')) == 2
    assert paren_depth(text, 0, text.index('(0,0)')) == 0
    assert paren_depth(text, 0, text.index('0,0)')) == 1


def test_statement_bounds_around_position():
    text = 'before \\draw (0,0) -- (1,1);\n\\node at (2,3) {x};\n'
    first = text.index('\\draw')
    second = text.index('\\node')

    assert find_statement_bounds(text, text.index('(1,1)')) == (first, text.index(';') + 1)
    assert find_statement_bounds(text, first) == (first, text.index(';') + 1)
    assert find_statement_bounds(text, text.index('{x}')) == (second, text.rindex(';') + 1)


def test_terminator_inside_group_is_not_statement_end():
    text = r'\draw (0,0) node {a;b} -- (1,1);'
    assert find_statement_bounds(text, 2) == (0, len(text))


def test_position_between_statements_is_unbounded():
    text = r'\draw (0,0);  \draw (1,1);'
    with pytest.raises(UnboundedStatement):
        find_statement_bounds(text, text.index(';') + 1)


def test_missing_terminator_is_unbounded():
    with pytest.raises(UnboundedStatement) as exc:
        find_statement_bounds(r'\draw (0,0) -- (1,1)', 3)
    assert 'not terminated' in str(exc.value)


def test_no_marker_is_unbounded():
    with pytest.raises(UnboundedStatement):
        find_statement_bounds('(0,0) -- (1,1);', 3)


def test_marker_in_comment_is_ignored():
    text = '% \\draw (9,9);\n\\draw (0,0);'
    start = text.index('\\draw (0,0)')
    assert find_statement_bounds(text, start + 7) == (start, len(text))


def test_marker_prefix_is_not_confused():
    text = r'\filldraw (0,0) circle (1);'
    assert find_statement_bounds(text, 12) == (0, len(text))


def test_narrowed_region_hides_marker():
    text = r'\draw (0,0);'
    with pytest.raises(UnboundedStatement):
        find_statement_bounds(text, 5, lower=1)


def test_custom_start_markers():
    config = ScannerConfig(start_markers=('mypath',))
    text = r'\draw (0,0); \mypath (1,1);'
    start = text.index('\\mypath')
    assert find_statement_bounds(text, start + 9, config=config) == (start, len(text))


def test_node_options_are_located():
    text = r'\draw (0,0) node[above, rotate=30] {a} -- (1,1) node {b};'
    nodes = list(iter_node_options(text, 0, len(text)))

    assert len(nodes) == 2
    first, second = nodes
    assert first.present
    assert text[first.start:first.end] == '[above, rotate=30]'
    assert first.rotate_text == '30'
    assert text[first.rotate_span[0]:first.rotate_span[1]] == '30'
    assert not second.present
    assert text[second.keyword_start:second.keyword_end] == 'node'


def test_node_statement_keyword_and_named_node():
    text = r'\node (a) [draw] at (0,0) {every node};'
    (node,) = list(iter_node_options(text, 0, len(text)))
    assert text[node.keyword_start:node.keyword_end] == '\\node'
    assert text[node.start:node.end] == '[draw]'
    assert node.rotate_span is None


def test_nested_node_keywords_are_ignored():
    text = r'\draw[every node/.style={draw}] (0,0) -- (1,1);'
    assert list(iter_node_options(text, 0, len(text))) == []


@pytest.fixture
def restore_scanner_config():
    saved = get_scanner_config()
    yield
    set_scanner_config(saved)


def test_default_scanner_config_is_copied(restore_scanner_config):
    config = get_scanner_config()
    config.start_markers = ("mypath",)
    assert "draw" in get_scanner_config().start_markers

    set_scanner_config(config)
    config.start_markers = ("draw",)
    text = r'\mypath (0,0) -- (1,1);'
    assert find_statement_bounds(text, 10) == (0, len(text))


def test_marker_nested_in_group_defers_to_enclosing_statement():
    text = r'\draw (0,0) node {\node} -- (1,1);'
    assert find_statement_bounds(text, text.index('(1,1)')) == (0, len(text))
    assert find_statement_bounds(text, text.index('}')) == (0, len(text))


def test_relative_prefix_may_precede_line_break():
    text = '\\draw (0,0) -- +\n(1,0) -- ++ \n\t(0,1);'
    pairs = scan_top_level_pairs(text, 0, len(text))
    assert [p.relative for p in pairs] == [False, True, True]
