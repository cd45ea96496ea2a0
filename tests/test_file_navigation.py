import pytest

from custasm.util.file_navigation import (
    STD_PATH_PREFIX,
    filename_navigate,
    is_std_path,
)
from custasm.util.source import AsmError, Span


def test_is_std_path():
    assert is_std_path(STD_PATH_PREFIX + "cpu/x.asm")
    assert not is_std_path("cpu/x.asm")


def test_std_path_returned_unchanged():
    target = STD_PATH_PREFIX + "lib.asm"
    assert filename_navigate("dir/main.asm", target) == target


def test_sibling_file():
    assert filename_navigate("main.asm", "other.asm") == "other.asm"


def test_file_in_same_directory():
    assert filename_navigate("dir/main.asm", "other.asm") == "dir/other.asm"


def test_parent_directory():
    assert filename_navigate("dir/main.asm", "../x.asm") == "x.asm"


def test_dot_components_are_dropped():
    assert filename_navigate("dir/main.asm", "./sub/./x.asm") == "dir/sub/x.asm"


def test_absolute_path_starts_from_root():
    assert filename_navigate("a/main.asm", "/b.asm") == "b.asm"


def test_backslashes_are_normalised():
    assert filename_navigate("a\\main.asm", "x\\y.asm") == "a/x/y.asm"


def test_navigate_out_of_project_raises():
    span = Span(0, 0, 3)
    with pytest.raises(AsmError) as info:
        filename_navigate("main.asm", "../x.asm", span)
    assert info.value.message == "cannot navigate out of project directory"
    assert info.value.span == span


def test_empty_relative_path_is_invalid():
    with pytest.raises(AsmError, match="invalid filename"):
        filename_navigate("a/main.asm", "./")


def test_collapsing_to_nothing_is_invalid():
    with pytest.raises(AsmError, match="invalid filename"):
        filename_navigate("a/main.asm", "..")