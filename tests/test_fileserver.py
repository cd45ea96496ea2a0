import pytest

from custasm.util.fileserver import (
    FILESERVER_MOCK_WRITE_FILENAME_SUFFIX,
    MockFileServer,
    RealFileServer,
)
from custasm.util.source import AsmError, Span


def test_mock_add_and_read():
    fs = MockFileServer()
    fs.add("main.asm", "nop\nhalt")
    handle = fs.get_handle("main.asm")
    assert fs.get_filename(handle) == "main.asm"
    assert fs.get_str(handle) == "nop\nhalt"
    assert fs.get_bytes(handle) == b"nop\nhalt"


def test_mock_distinct_handles():
    fs = MockFileServer()
    fs.add("a", "1")
    fs.add("b", "2")
    assert fs.get_handle("a") != fs.get_handle("b")
    assert fs.get_str(fs.get_handle("b")) == "2"


def test_mock_readd_keeps_handle_and_replaces_contents():
    fs = MockFileServer()
    fs.add("a", "old")
    first = fs.get_handle("a")
    fs.add("a", b"new")
    assert fs.get_handle("a") == first
    assert fs.get_str(first) == "new"


def test_mock_missing_file_raises():
    fs = MockFileServer()
    span = Span(0, 1, 2)
    with pytest.raises(AsmError) as info:
        fs.get_handle("missing.asm", span)
    assert info.value.message == "file not found: `missing.asm`"
    assert info.value.span == span


def test_mock_write_bytes_uses_suffix():
    fs = MockFileServer()
    fs.write_bytes("out.bin", b"\x01\x02")
    handle = fs.get_handle("out.bin" + FILESERVER_MOCK_WRITE_FILENAME_SUFFIX)
    assert fs.get_bytes(handle) == b"\x01\x02"
    with pytest.raises(AsmError):
        fs.get_handle("out.bin")


def test_mock_add_std_files():
    fs = MockFileServer()
    fs.add_std_files([("<std>/a.asm", "x"), ("<std>/b.asm", "y")])
    assert fs.get_str(fs.get_handle("<std>/a.asm")) == "x"
    assert fs.get_str(fs.get_handle("<std>/b.asm")) == "y"


def test_get_str_replaces_invalid_utf8():
    fs = MockFileServer()
    fs.add("bad", b"a\xffb")
    assert fs.get_str(fs.get_handle("bad")) == "a\ufffdb"


def test_get_excerpt():
    fs = MockFileServer()
    fs.add("main.asm", "hello world")
    handle = fs.get_handle("main.asm")
    assert fs.get_excerpt(Span(handle, 6, 11)) == "world"


def test_real_reads_file(tmp_path):
    path = tmp_path / "prog.asm"
    path.write_bytes(b"ld a, 1")
    fs = RealFileServer()
    handle = fs.get_handle(str(path))
    assert fs.get_handle(str(path)) == handle
    assert fs.get_filename(handle) == str(path)
    assert fs.get_bytes(handle) == b"ld a, 1"


def test_real_distinct_files(tmp_path):
    (tmp_path / "a").write_text("1")
    (tmp_path / "b").write_text("2")
    fs = RealFileServer()
    ha = fs.get_handle(str(tmp_path / "a"))
    hb = fs.get_handle(str(tmp_path / "b"))
    assert ha != hb
    assert fs.get_str(hb) == "2"


def test_real_missing_file(tmp_path):
    fs = RealFileServer()
    name = str(tmp_path / "nope.asm")
    with pytest.raises(AsmError) as info:
        fs.get_handle(name)
    assert info.value.message == f"file not found: `{name}`"


def test_real_deleted_file_cannot_open(tmp_path):
    path = tmp_path / "gone.asm"
    path.write_text("abc")
    fs = RealFileServer()
    handle = fs.get_handle(str(path))
    path.unlink()
    with pytest.raises(AsmError) as info:
        fs.get_bytes(handle)
    assert info.value.message.startswith(f"could not open file `{path}`")
    assert fs.get_excerpt(Span(handle, 0, 1)) == ""


def test_real_std_files():
    fs = RealFileServer()
    fs.add_std_files([("<std>/cpu.asm", "#ruledef {}")])
    handle = fs.get_handle("<std>/cpu.asm")
    assert fs.get_str(handle) == "#ruledef {}"
    assert fs.get_excerpt(Span(handle, 1, 8)) == "ruledef"


def test_real_write_bytes(tmp_path):
    path = tmp_path / "out.bin"
    fs = RealFileServer()
    fs.write_bytes(str(path), b"\x00\xff")
    assert path.read_bytes() == b"\x00\xff"


def test_real_write_to_directory_fails(tmp_path):
    fs = RealFileServer()
    with pytest.raises(AsmError) as info:
        fs.write_bytes(str(tmp_path), b"x")
    assert info.value.message.startswith(f"could not create file `{tmp_path}`")