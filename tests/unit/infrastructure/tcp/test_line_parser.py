from statsd_console.infrastructure.tcp.line_parser import parse_line


def test_command_and_args():
    assert parse_line(b"delcounters a b c\n") == ["delcounters", "a", "b", "c"]


def test_blank_lines_yield_nothing():
    assert parse_line(b"\n") == []
    assert parse_line(b"   \t \r\n") == []


def test_collapses_runs_of_whitespace_and_crlf():
    assert parse_line(b"  counters\t\tx   y\r\n") == ["counters", "x", "y"]


def test_no_quoting_support():
    assert parse_line(b'delgauges "a b"\n') == ["delgauges", '"a', 'b"']


def test_invalid_utf8_is_replaced():
    tokens = parse_line(b"delcounters \xff\xfe\n")
    assert tokens[0] == "delcounters"
    assert len(tokens) == 2
