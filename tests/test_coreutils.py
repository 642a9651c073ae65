import io
import os

import pytest

from xv6tools.coreutils import (
    DIRSIZ,
    cat,
    cat_main,
    count,
    echo,
    echo_main,
    fmtname,
    kill_main,
    ln_main,
    ls,
    ls_main,
    mkdir_main,
    rm_main,
    wc_main,
)
from xv6tools.records import FileType


class _BrokenStream:
    def read(self, n=-1):
        raise OSError("disk gone")


def test_cat_concatenates_streams():
    out = io.BytesIO()
    cat([io.BytesIO(b"abc"), io.BytesIO(b"def")], out)
    assert out.getvalue() == b"abc" + b"def"


def test_cat_copies_large_stream_exactly():
    data = bytes(range(256)) * 10
    out = io.BytesIO()
    cat([io.BytesIO(data)], out)
    assert out.getvalue() == data


def test_cat_read_error():
    with pytest.raises(OSError, match="read error"):
        cat([_BrokenStream()], io.BytesIO())


def test_echo_joins_with_spaces():
    out = io.StringIO()
    echo(["hello", "world"], out)
    assert out.getvalue() == "hello world\n"


def test_echo_without_arguments_prints_nothing():
    out = io.StringIO()
    echo([], out)
    assert out.getvalue() == ""


@pytest.mark.parametrize("data", [b"", b"one two\nthree\n", b"\n\n  x", b"a\tb\rc\vd"])
def test_count_invariants(data):
    c = count(data)
    assert c.chars == len(data)
    assert c.lines == data.count(b"\n")
    assert c.words <= len(data)


def test_count_nul_separates_words():
    assert count(b"a\0b").words == 2


def test_count_formfeed_is_not_space():
    assert count(b"x\fy").words == 1


def test_fmtname_pads_last_component():
    name = fmtname("dir/sub/file")
    assert len(name) == DIRSIZ
    assert name.rstrip() == "file"


def test_fmtname_long_name_unchanged():
    long_name = "n" * (DIRSIZ + 3)
    assert fmtname("x/" + long_name) == long_name


def test_fmtname_without_slash():
    assert fmtname("README").rstrip() == "README"


def test_ls_file(tmp_path):
    path = tmp_path / "data.txt"
    path.write_bytes(b"hello")
    out = io.StringIO()
    ls(str(path), out)
    fields = out.getvalue().split()
    assert fields[0] == "data.txt"
    assert fields[1] == str(int(FileType.FILE))
    assert fields[2] == str(os.stat(path).st_ino)
    assert fields[3] == str(len(b"hello"))


def test_ls_directory_lists_dots_and_entries(tmp_path):
    (tmp_path / "f1").write_bytes(b"x")
    (tmp_path / "sub").mkdir()
    out = io.StringIO()
    ls(str(tmp_path), out)
    lines = out.getvalue().splitlines()
    names = [line.split()[0] for line in lines]
    assert names == [".", "..", "f1", "sub"]
    types = {line.split()[0]: line.split()[1] for line in lines}
    assert types["sub"] == str(int(FileType.DIR))
    assert types["f1"] == str(int(FileType.FILE))


def test_ls_missing_path(tmp_path, capsys):
    missing = str(tmp_path / "nope")
    out = io.StringIO()
    ls(missing, out)
    assert out.getvalue() == ""
    assert capsys.readouterr().err == f"ls: cannot open {missing}\n"


def test_ls_main_returns_zero(tmp_path, capsys):
    (tmp_path / "f").write_bytes(b"")
    assert ls_main([str(tmp_path / "f")]) == 0
    assert capsys.readouterr().out.split()[0] == "f"


def test_cat_main_outputs_file(tmp_path, capsysbinary):
    path = tmp_path / "in"
    path.write_bytes(b"payload\n")
    assert cat_main([str(path), str(path)]) == 0
    assert capsysbinary.readouterr().out == b"payload\n" * 2


def test_cat_main_missing_file(tmp_path, capsys):
    missing = str(tmp_path / "missing")
    assert cat_main([missing]) == 1
    assert capsys.readouterr().err == f"cat: cannot open {missing}\n"


def test_echo_main(capsys):
    assert echo_main(["a", "b"]) == 0
    assert capsys.readouterr().out == "a b\n"


def test_wc_main_file(tmp_path, capsys):
    path = tmp_path / "text"
    data = b"one two\nthree\n"
    path.write_bytes(data)
    assert wc_main([str(path)]) == 0
    c = count(data)
    assert capsys.readouterr().out == f"{c.lines} {c.words} {c.chars} {path}\n"


def test_wc_main_missing_file(tmp_path, capsys):
    missing = str(tmp_path / "gone")
    assert wc_main([missing]) == 1
    assert capsys.readouterr().out == f"wc: cannot open {missing}\n"


def test_ln_main_usage(capsys):
    assert ln_main(["only"]) == 1
    assert capsys.readouterr().err == "Usage: ln old new\n"


def test_ln_main_creates_link(tmp_path):
    old = tmp_path / "old"
    old.write_bytes(b"content")
    new = tmp_path / "new"
    assert ln_main([str(old), str(new)]) == 0
    assert new.read_bytes() == b"content"
    assert os.stat(new).st_ino == os.stat(old).st_ino


def test_ln_main_failure_reports(tmp_path, capsys):
    old = tmp_path / "old"
    old.write_bytes(b"")
    assert ln_main([str(old), str(old)]) == 0
    assert capsys.readouterr().err == f"link {old} {old}: failed\n"


def test_mkdir_main_creates(tmp_path):
    a, b = tmp_path / "a", tmp_path / "b"
    assert mkdir_main([str(a), str(b)]) == 0
    assert a.is_dir() and b.is_dir()


def test_mkdir_main_stops_on_failure(tmp_path, capsys):
    a, b = tmp_path / "a", tmp_path / "b"
    a.mkdir()
    assert mkdir_main([str(a), str(b)]) == 0
    assert not b.exists()
    assert capsys.readouterr().err == f"mkdir: {a} failed to create\n"


def test_mkdir_main_usage(capsys):
    assert mkdir_main([]) == 1
    assert capsys.readouterr().err == "Usage: mkdir files...\n"


def test_rm_main_removes_file_and_empty_dir(tmp_path):
    f = tmp_path / "f"
    f.write_bytes(b"x")
    d = tmp_path / "d"
    d.mkdir()
    assert rm_main([str(f), str(d)]) == 0
    assert not f.exists() and not d.exists()


def test_rm_main_stops_on_failure(tmp_path, capsys):
    missing = tmp_path / "missing"
    keep = tmp_path / "keep"
    keep.write_bytes(b"")
    assert rm_main([str(missing), str(keep)]) == 0
    assert keep.exists()
    assert capsys.readouterr().err == f"rm: {missing} failed to delete\n"


def test_rm_main_usage(capsys):
    assert rm_main([]) == 1
    assert capsys.readouterr().err == "Usage: rm files...\n"


def test_kill_main_usage(capsys):
    assert kill_main([]) == 1
    assert capsys.readouterr().err == "usage: kill pid...\n"


def test_kill_main_ignores_non_numeric_pid():
    assert kill_main(["abc"]) == 0