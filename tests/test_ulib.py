import io

from xv6tools.ulib import atoi, gets, strcmp


def test_atoi_plain_number():
    assert atoi("123") == 123


def test_atoi_stops_at_non_digit():
    assert atoi("42abc") == 42


def test_atoi_empty_and_signed():
    assert atoi("") == 0
    assert atoi("-5") == 0
    assert atoi(" 7") == 0


def test_strcmp_equal():
    assert strcmp("hello", "hello") == 0


def test_strcmp_ordering():
    assert strcmp("abc", "abd") < 0
    assert strcmp("abd", "abc") > 0


def test_strcmp_prefix_returns_next_byte():
    assert strcmp("abc", "ab") == ord("c")
    assert strcmp("ab", "abc") == -ord("c")


def test_strcmp_stops_at_nul():
    assert strcmp("hi\0there", "hi") == 0


def test_strcmp_unsigned_bytes():
    assert strcmp(b"\xff", b"a") > 0


def test_gets_reads_one_line():
    stream = io.BytesIO(b"hello\nworld\n")
    assert gets(stream, 100) == b"hello\n"
    assert gets(stream, 100) == b"world\n"
    assert gets(stream, 100) == b""


def test_gets_respects_limit():
    stream = io.BytesIO(b"abcdef\n")
    assert gets(stream, 4) == b"abc"
    assert gets(stream, 100) == b"def\n"


def test_gets_stops_at_carriage_return():
    stream = io.BytesIO(b"ls\rrest")
    assert gets(stream, 100) == b"ls\r"


def test_gets_without_terminator():
    assert gets(io.BytesIO(b"tail"), 100) == b"tail"