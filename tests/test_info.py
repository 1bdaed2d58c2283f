import textwrap

import pytest

from npyarray import NPArray
from npyarray._info import ArrayInfo, byte_info, human_readable_size


@pytest.mark.parametrize("count_bytes", [None, 100])
def test_array_info(count_bytes: int | None) -> None:
    info = ArrayInfo(
        _data_type="float32",
        _shape=(100, 100),
        _order="F",
        _count_bytes=count_bytes,
    )

    result = repr(info)
    expected = textwrap.dedent("""\
        Type               : NPArray
        Data type          : float32
        Shape              : (100, 100)
        Order              : F""")
    if count_bytes is not None:
        expected += "\nNo. bytes          : 100"
    assert result == expected


def test_info_property() -> None:
    arr = NPArray((100, 100), "int32")
    assert repr(arr.info) == textwrap.dedent("""\
        Type               : NPArray
        Data type          : int32
        Shape              : (100, 100)
        Order              : C
        No. bytes          : 40000 (39.1K)""")


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (1, "1"),
        (2**10, "1.0K"),
        (2**20, "1.0M"),
        (2**30, "1.0G"),
        (2**40, "1.0T"),
        (2**50, "1.0P"),
    ],
)
def test_human_readable_size(size: int, expected: str) -> None:
    result = human_readable_size(size)
    assert result == expected


@pytest.mark.parametrize(("size", "expected"), [(1023, "1023"), (2048, "2048 (2.0K)")])
def test_byte_info(size: int, expected: str) -> None:
    assert byte_info(size) == expected
