from __future__ import annotations

import numbers
from collections.abc import Sequence
from typing import Any, TypeGuard

import numpy as np

from npyarray.common import Layout, parse_layout, product
from npyarray.errors import IndexOutOfRangeError, RankMismatchError

Coordinate = tuple[int, ...]


def is_integer(x: Any) -> TypeGuard[int]:
    """True if x is an integer (both pure Python or NumPy)."""
    return isinstance(x, numbers.Integral) and type(x) not in (bool, np.bool_)


def normalize_index(dim_sel: Any, dim_len: int, axis: int | None = None) -> int:
    if not is_integer(dim_sel):
        raise TypeError(f"Expected an integer index, got {dim_sel!r} of type {type(dim_sel)}.")

    # normalize type to int
    dim_sel = int(dim_sel)

    # no wraparound, negative indices are out of range
    if dim_sel >= dim_len or dim_sel < 0:
        if axis is None:
            msg = f"index {dim_sel} is out of bounds for array with size {dim_len}"
        else:
            msg = f"index {dim_sel} is out of bounds for axis {axis} with size {dim_len}"
        raise IndexOutOfRangeError(msg)

    return dim_sel


def check_coordinate(coords: Sequence[Any], shape: tuple[int, ...]) -> Coordinate:
    """
    Validate a coordinate against a shape.

    The number of indices must equal the rank, and each index must satisfy
    ``0 <= index[d] < shape[d]``. Dimensions are checked in ascending order and the first
    violation is reported.

    Returns
    -------
    tuple of int
        The coordinate with every index converted to a Python int.

    Raises
    ------
    RankMismatchError
        If the number of indices differs from the number of dimensions.
    IndexOutOfRangeError
        If an index is negative or not smaller than the extent of its dimension.
    """
    if len(coords) != len(shape):
        raise RankMismatchError(len(coords), len(shape))
    return tuple(normalize_index(i, n, axis) for axis, (i, n) in enumerate(zip(coords, shape)))


def check_linear_index(index: Any, size: int) -> int:
    """Validate a flat index against the number of elements only."""
    return normalize_index(index, size)


def c_order_offset(coords: Coordinate, shape: tuple[int, ...]) -> int:
    # running coefficient, innermost dimension outwards
    offset = coords[-1]
    coeff = 1
    for d in range(len(coords) - 1, 0, -1):
        coeff *= shape[d]
        offset += coeff * coords[d - 1]
    return offset


def f_order_offset(coords: Coordinate, shape: tuple[int, ...]) -> int:
    # running coefficient, outermost dimension inwards
    offset = coords[0]
    coeff = 1
    for d in range(len(coords) - 1):
        coeff *= shape[d]
        offset += coeff * coords[d + 1]
    return offset


def element_strides(shape: tuple[int, ...], order: Layout | str) -> tuple[int, ...]:
    """
    The distance, in elements, between neighbouring cells along each dimension.

    Examples
    --------
    >>> element_strides((2, 3, 4), "C")
    (12, 4, 1)
    >>> element_strides((2, 3, 4), "F")
    (1, 2, 6)
    """
    order = parse_layout(order)
    strides = [1] * len(shape)
    if order is Layout.ROW_MAJOR:
        for d in range(len(shape) - 2, -1, -1):
            strides[d] = strides[d + 1] * shape[d + 1]
    else:
        for d in range(1, len(shape)):
            strides[d] = strides[d - 1] * shape[d - 1]
    return tuple(strides)


def ravel_coordinate(
    coords: Sequence[Any], shape: tuple[int, ...], order: Layout | str
) -> int:
    """
    Map a coordinate to the flat storage offset of its element under the given layout.

    This is the single validation and offset computation used by every structured accessor
    of ``NPArray``.

    Examples
    --------
    >>> ravel_coordinate((1, 2), (2, 3), "C")
    5
    >>> ravel_coordinate((1, 2), (2, 3), "F")
    5
    >>> ravel_coordinate((1, 0), (2, 3), "F")
    1
    """
    order = parse_layout(order)
    checked = check_coordinate(coords, shape)
    if order is Layout.ROW_MAJOR:
        return c_order_offset(checked, shape)
    return f_order_offset(checked, shape)


def unravel_offset(offset: int, shape: tuple[int, ...], order: Layout | str) -> Coordinate:
    """
    Map a flat storage offset back to the coordinate of its element under the given layout.
    """
    order = parse_layout(order)
    offset = check_linear_index(offset, product(shape))
    coords = [0] * len(shape)
    # peel off the fastest varying dimension first
    dims = range(len(shape) - 1, -1, -1) if order is Layout.ROW_MAJOR else range(len(shape))
    for d in dims:
        offset, coords[d] = divmod(offset, shape[d])
    return tuple(coords)
