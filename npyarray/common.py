from __future__ import annotations

import functools
import numbers
import operator
import sys
from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING, Final, Literal

from npyarray.errors import EmptyShapeError

if TYPE_CHECKING:
    import numpy as np

ShapeLike = Iterable[int] | int
MemoryOrder = Literal["C", "F"]
EndiannessStr = Literal["little", "big"]
ENDIANNESS_STR: Final = "little", "big"


class Layout(Enum):
    """
    Enum for the mapping from a coordinate to a flat storage offset.

    ``ROW_MAJOR`` (alias ``C``) varies the last dimension fastest.
    ``COLUMN_MAJOR`` (alias ``F``) varies the first dimension fastest.
    """

    ROW_MAJOR = "C"
    COLUMN_MAJOR = "F"
    C = "C"
    F = "F"


def product(tup: tuple[int, ...]) -> int:
    return functools.reduce(operator.mul, tup, 1)


def parse_shapelike(data: ShapeLike) -> tuple[int, ...]:
    if isinstance(data, numbers.Integral) and not isinstance(data, bool):
        if data < 0:
            raise ValueError(f"Expected a non-negative integer. Got {data} instead")
        return (int(data),)
    try:
        data_tuple = tuple(data)
    except TypeError as e:
        msg = f"Expected an integer or an iterable of integers. Got {data} instead."
        raise TypeError(msg) from e

    if not all(isinstance(v, numbers.Integral) and not isinstance(v, bool) for v in data_tuple):
        msg = f"Expected an iterable of integers. Got {data} instead."
        raise TypeError(msg)
    if not all(v > -1 for v in data_tuple):
        msg = f"Expected all values to be non-negative. Got {data} instead."
        raise ValueError(msg)
    return tuple(int(v) for v in data_tuple)


def normalize_shape(*args: ShapeLike, operation: str = "create") -> tuple[int, ...]:
    """
    Normalize a shape given either as a single sequence or as unpacked integers,
    e.g. ``normalize_shape((2, 3))`` or ``normalize_shape(2, 3)``.

    Raises
    ------
    EmptyShapeError
        If the shape has zero dimensions.
    """
    if len(args) == 1:
        shape = parse_shapelike(args[0])
    else:
        shape = parse_shapelike(args)  # type: ignore[arg-type]
    if len(shape) == 0:
        raise EmptyShapeError(operation, shape)
    return shape


def parse_layout(data: object) -> Layout:
    if isinstance(data, Layout):
        return data
    if isinstance(data, str) and data.upper() in ("C", "F"):
        return Layout(data.upper())
    raise ValueError(f"Expected one of ('C', 'F'), got {data!r} instead.")


def endianness_from_numpy_dtype(dtype: np.dtype) -> EndiannessStr | None:
    """
    Get the endianness of a numpy dtype. Single-byte dtypes have no endianness,
    in which case ``None`` is returned.
    """
    match dtype.byteorder:
        case "|":
            return None
        case "=":
            return sys.byteorder
        case "<":
            return "little"
        case ">":
            return "big"
    raise ValueError(f"Invalid byte order: {dtype.byteorder!r}")  # pragma: no cover


def endianness_to_numpy_str(endianness: EndiannessStr | None) -> Literal["<", ">", "|"]:
    match endianness:
        case "little":
            return "<"
        case "big":
            return ">"
        case None:
            return "|"
    raise ValueError(
        f"Invalid endianness: {endianness!r}. Expected one of {ENDIANNESS_STR} or None"
    )
