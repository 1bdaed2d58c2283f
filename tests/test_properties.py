from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

import numpy as np
import pytest

pytest.importorskip("hypothesis")

import hypothesis.extra.numpy as npst
import hypothesis.strategies as st
from hypothesis import assume, given

from npyarray import NPArray
from npyarray.common import Layout, product
from npyarray.errors import DTypeMismatchError, ShapeSizeMismatchError
from npyarray.indexing import ravel_coordinate, unravel_offset
from npyarray.testing.strategies import (
    array_shapes,
    coordinates,
    element_types,
    layouts,
    nonempty_array_shapes,
    npyarrays,
)


@given(shape=nonempty_array_shapes, order=layouts, data=st.data())
def test_structured_access_matches_offset_formula(
    shape: tuple[int, ...], order: Layout, data: st.DataObject
) -> None:
    arr = NPArray(shape, "int64", data=np.arange(product(shape)), order=order)
    strides = arr.strides
    for coords in np.ndindex(*shape):
        offset = sum(i * s for i, s in zip(coords, strides, strict=True))
        assert arr.offset(coords) == offset
        assert arr[coords] == offset
    index = data.draw(st.integers(min_value=0, max_value=arr.size - 1))
    assert arr[arr.coordinate(index)] == arr[index]


@given(shape=nonempty_array_shapes, order=layouts, data=st.data())
def test_ravel_unravel_are_inverse(
    shape: tuple[int, ...], order: Layout, data: st.DataObject
) -> None:
    offset = data.draw(st.integers(min_value=0, max_value=product(shape) - 1))
    coords = unravel_offset(offset, shape, order)
    assert ravel_coordinate(coords, shape, order) == offset
    assert offset == int(np.ravel_multi_index(coords, shape, order=order.value))  # type: ignore[call-overload]


@given(arr=npyarrays(), new_shape=array_shapes)
def test_reshape_preserves_size(arr: NPArray[Any], new_shape: tuple[int, ...]) -> None:
    before = arr.elements.copy()
    if product(new_shape) == arr.size:
        arr.reshape(new_shape)
        assert arr.shape == new_shape
    else:
        with pytest.raises(ShapeSizeMismatchError):
            arr.reshape(new_shape)
    assert product(arr.shape) == arr.size == len(arr.elements)
    np.testing.assert_array_equal(arr.elements, before)


@given(arr=npyarrays(), new_shape=array_shapes)
def test_reallocate_keeps_prefix(arr: NPArray[Any], new_shape: tuple[int, ...]) -> None:
    before = arr.elements.copy()
    arr.reallocate(new_shape)
    new_size = product(new_shape)
    keep = min(new_size, before.size)
    assert arr.shape == new_shape
    assert product(arr.shape) == arr.size == len(arr.elements)
    np.testing.assert_array_equal(arr.elements[:keep], before[:keep])
    assert not arr.elements[keep:].any()


@given(arr=npyarrays())
def test_save_load_round_trip(arr: NPArray[Any]) -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "data.npy"
        arr.save(path)
        loaded = NPArray.load(path, arr.dtype)
        assert loaded == arr
        np.testing.assert_array_equal(np.load(path), arr.to_numpy())


@given(arr=npyarrays(), other=element_types)
def test_load_never_reinterprets(arr: NPArray[Any], other: Any) -> None:
    assume(other != arr.dtype)
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "data.npy"
        arr.save(path)
        with pytest.raises(DTypeMismatchError):
            NPArray.load(path, other)


@given(nparr=npst.arrays(dtype=npst.integer_dtypes(endianness="="), shape=nonempty_array_shapes))
def test_array_from_numpy(nparr: np.ndarray[Any, Any]) -> None:
    for order in ("C", "F"):
        arr = NPArray(nparr.shape, nparr.dtype, data=nparr, order=order)
        np.testing.assert_array_equal(arr.to_numpy(), nparr)
        for coords in np.ndindex(*nparr.shape):
            assert arr[coords] == nparr[coords]


@given(data=st.data(), arr=npyarrays(shapes=nonempty_array_shapes))
def test_setitem_touches_one_cell(data: st.DataObject, arr: NPArray[Any]) -> None:
    coords = data.draw(coordinates(shape=arr.shape))
    before = arr.elements.copy()
    value = arr.dtype.cast_scalar(1) if before[arr.offset(coords)] == 0 else arr.dtype.default_scalar()
    arr[coords] = value
    changed = np.flatnonzero(arr.elements != before)
    assert changed.tolist() == [arr.offset(coords)]
    assert arr[coords] == value
