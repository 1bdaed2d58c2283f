from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from npyarray.array import NPArray

if TYPE_CHECKING:
    import os

    import numpy.typing as npt

    from npyarray.codec import FormatVersion
    from npyarray.common import Layout, MemoryOrder, ShapeLike
    from npyarray.dtype import ElementTypeLike

__all__ = ["array", "load", "save", "zeros"]


def zeros(
    shape: ShapeLike,
    dtype: ElementTypeLike,
    *,
    order: Layout | MemoryOrder | None = None,
) -> NPArray[Any]:
    """Create an array, with zero being used as the default value for all elements.

    Examples
    --------
    >>> import npyarray
    >>> a = npyarray.zeros((10000, 10000), "float32")
    >>> a
    <NPArray (10000, 10000) float32 C>
    """
    return NPArray(shape, dtype, order=order)


def array(
    data: npt.ArrayLike,
    dtype: ElementTypeLike | None = None,
    *,
    order: Layout | MemoryOrder | None = None,
) -> NPArray[Any]:
    """Create an array filled with `data`.

    The shape is taken from `data`, and so is the element type unless `dtype` is given.
    Elements are laid out in storage according to `order`, so indexing the result with a
    coordinate gives the same value as indexing `data` with it.

    Examples
    --------
    >>> import numpy as np
    >>> import npyarray
    >>> a = npyarray.array(np.arange(6, dtype="i4").reshape(2, 3), order="F")
    >>> a.elements.tolist()
    [0, 3, 1, 4, 2, 5]
    >>> a[1, 2]
    np.int32(5)
    """
    data = np.asarray(data)
    if dtype is None:
        dtype = data.dtype
    return NPArray(data.shape, dtype, data=data, order=order)


def save(
    path: str | os.PathLike[str], arr: NPArray[Any], *, version: FormatVersion | None = None
) -> None:
    """Convenience function to save an NPArray to a ``.npy`` file.

    Examples
    --------
    >>> import npyarray
    >>> a = npyarray.array([[1.0, 2.0], [3.0, 4.0]])
    >>> npyarray.save("example.npy", a)
    >>> npyarray.load("example.npy", "float64")
    <NPArray (2, 2) float64 C>
    """
    arr.save(path, version=version)


def load(path: str | os.PathLike[str], dtype: ElementTypeLike) -> NPArray[Any]:
    """Load an NPArray holding elements of type `dtype` from a ``.npy`` file."""
    return NPArray.load(path, dtype)
