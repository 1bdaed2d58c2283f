from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Generic, Self, TypeVar

import numpy as np

from npyarray import codec
from npyarray._info import ArrayInfo
from npyarray.common import Layout, MemoryOrder, ShapeLike, normalize_shape, parse_layout, product
from npyarray.config import config
from npyarray.dtype import (
    DTypeTag,
    ElementType,
    ElementTypeLike,
    data_type_registry,
    parse_element_type,
)
from npyarray.errors import DTypeMismatchError, EmptyShapeError, ShapeSizeMismatchError
from npyarray.indexing import (
    check_linear_index,
    element_strides,
    is_integer,
    ravel_coordinate,
    unravel_offset,
)

if TYPE_CHECKING:
    import os
    from collections.abc import Iterator

    import numpy.typing as npt

    from npyarray.codec import FormatVersion

__all__ = ["NPArray"]

logger = getLogger(__name__)

TElementType_co = TypeVar("TElementType_co", bound=ElementType[Any, Any], covariant=True)


class NPArray(Generic[TElementType_co]):
    """A dense N-dimensional array of one of the supported element types.

    Parameters
    ----------
    shape : int or sequence of int
        The extent of each dimension. At least one dimension is required; extents may be zero.
    dtype : ElementType, DTypeTag, str or numpy dtype-like
        The element type, e.g. ``Float64()``, ``"uint16"`` or ``np.int32``.
    data : array-like, optional
        Initial elements. The data is copied into storage owned by the array. A
        one-dimensional sequence is taken as the storage sequence itself; a multi-dimensional
        array-like is flattened in the layout given by ``order``. If not provided, all elements
        are zero. Values must convert exactly to integer element types; see
        ``ElementType.cast_array``.
    order : {"C", "F"} or Layout, optional
        Row-major (``"C"``) or column-major (``"F"``) layout. Defaults to the ``array.order``
        configuration value, which is ``"C"`` unless changed.

    Examples
    --------
    >>> from npyarray import NPArray
    >>> a = NPArray((2, 3), "int32", data=range(6))
    >>> a[1, 2]
    np.int32(5)
    >>> a.offset(1, 2)
    5
    >>> f = NPArray((2, 3), "int32", data=range(6), order="F")
    >>> f[1, 0]
    np.int32(1)
    """

    _data: np.ndarray[Any, Any]
    _shape: tuple[int, ...]
    _dtype: TElementType_co
    _order: Layout

    def __init__(
        self,
        shape: ShapeLike,
        dtype: ElementTypeLike,
        data: npt.ArrayLike | None = None,
        *,
        order: Layout | MemoryOrder | None = None,
    ) -> None:
        shape = normalize_shape(shape)
        element_type = parse_element_type(dtype)
        order = parse_layout(config.get("array.order") if order is None else order)
        native = element_type.to_native_dtype()
        size = product(shape)

        if data is None:
            storage = np.full(size, element_type.default_scalar(), dtype=native)
        else:
            storage = element_type.cast_array(data)
            storage = np.ascontiguousarray(storage.ravel(order=order.value))
            if storage.size != size:
                raise ShapeSizeMismatchError(shape, size, storage.size)

        self._init_storage(storage, shape, element_type, order)  # type: ignore[arg-type]

    def _init_storage(
        self,
        storage: np.ndarray[Any, Any],
        shape: tuple[int, ...],
        element_type: TElementType_co,
        order: Layout,
    ) -> None:
        # N.B., storage is assumed to be a one-dimensional array exclusively owned by this object
        self._data = storage
        self._shape = shape
        self._dtype = element_type
        self._order = order

    @classmethod
    def _from_storage(
        cls,
        storage: np.ndarray[Any, Any],
        shape: tuple[int, ...],
        element_type: ElementType[Any, Any],
        order: Layout,
    ) -> Self:
        obj = cls.__new__(cls)
        obj._init_storage(storage, shape, element_type, order)  # type: ignore[arg-type]
        return obj

    @property
    def shape(self) -> tuple[int, ...]:
        """A tuple of integers describing the length of each dimension of the array."""
        return self._shape

    @property
    def ndim(self) -> int:
        """Number of dimensions."""
        return len(self._shape)

    @property
    def rank(self) -> int:
        """Number of dimensions. Alias of ``ndim``."""
        return self.ndim

    @property
    def size(self) -> int:
        """The total number of elements in the array."""
        return int(self._data.size)

    @property
    def dtype(self) -> TElementType_co:
        """The element type."""
        return self._dtype

    @property
    def tag(self) -> DTypeTag:
        """The on-disk tag of the element type."""
        return self._dtype.tag

    @property
    def itemsize(self) -> int:
        """The size in bytes of each item in the array."""
        return self._dtype.item_size

    @property
    def nbytes(self) -> int:
        """The total number of bytes of element storage."""
        return self.size * self.itemsize

    @property
    def order(self) -> Layout:
        """The layout mapping coordinates to storage offsets."""
        return self._order

    @property
    def c_contiguous(self) -> bool:
        """True if elements are stored in row-major order, False if in column-major order."""
        return self._order is Layout.ROW_MAJOR

    @property
    def strides(self) -> tuple[int, ...]:
        """The distance, in elements, between neighbouring cells along each dimension."""
        return element_strides(self._shape, self._order)

    @property
    def elements(self) -> np.ndarray[Any, Any]:
        """A read-only one-dimensional view of the element storage."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def offset(self, *indices: Any) -> int:
        """
        Return the storage offset of the element at the given coordinate.

        The coordinate may be given as unpacked integers, ``a.offset(1, 2)``, or as a
        single sequence, ``a.offset((1, 2))``.

        Raises
        ------
        RankMismatchError
            If the number of indices differs from ``ndim``.
        IndexOutOfRangeError
            If an index is negative or not smaller than the extent of its dimension.
        """
        if len(indices) == 1 and isinstance(indices[0], (tuple, list)):
            indices = tuple(indices[0])
        return ravel_coordinate(indices, self._shape, self._order)

    def coordinate(self, offset: int) -> tuple[int, ...]:
        """Return the coordinate of the element stored at the given offset."""
        return unravel_offset(offset, self._shape, self._order)

    def _resolve(self, selection: Any) -> int:
        if is_integer(selection):
            return check_linear_index(selection, self._data.size)
        if isinstance(selection, (tuple, list)):
            return ravel_coordinate(selection, self._shape, self._order)
        raise TypeError(
            "NPArray supports a single integer (linear index) or a coordinate "
            f"(tuple of integers) as index; got {selection!r}"
        )

    def __getitem__(self, selection: Any) -> Any:
        """Retrieve an element.

        An integer addresses storage directly (linear access); a tuple or list of integers is a
        coordinate with one index per dimension (structured access).

        Examples
        --------
        >>> a = NPArray((2, 3), "float64", data=[0, 1, 2, 3, 4, 5])
        >>> a[1, 0]
        np.float64(3.0)
        >>> a[4]
        np.float64(4.0)
        """
        return self._data[self._resolve(selection)]

    def __setitem__(self, selection: Any, value: Any) -> None:
        """Modify an element. Indices are interpreted as for ``__getitem__``.

        The value is converted with ``ElementType.cast_scalar``, so strings are rejected and
        integer element types only accept integral values within their range.
        """
        self._data[self._resolve(selection)] = self._dtype.cast_scalar(value)

    def __iter__(self) -> Iterator[Any]:
        """Iterate over the elements in storage order."""
        return iter(self._data.copy())

    def reshape(self, *shape: ShapeLike) -> None:
        """Change the shape of the array without changing its elements.

        The element storage and the layout are left untouched; only the extents used to map
        coordinates to offsets change.

        Examples
        --------
        >>> a = NPArray((2, 3), "int8", data=range(6))
        >>> a.reshape(3, 2)
        >>> a[2, 1]
        np.int8(5)

        Raises
        ------
        EmptyShapeError
            If the new shape has zero dimensions.
        ShapeSizeMismatchError
            If the new shape implies a different number of elements.
        """
        new_shape = normalize_shape(*shape, operation="reshape")
        new_size = product(new_shape)
        if new_size != self.size:
            raise ShapeSizeMismatchError(new_shape, new_size, self.size)
        self._shape = new_shape

    def reallocate(self, *shape: ShapeLike) -> None:
        """Change the shape of the array and resize its storage to match.

        Notes
        -----
        Data can be lost. If the new shape holds fewer elements, elements beyond the new size are
        discarded. If it holds more, the new trailing elements are zero. Elements are kept by
        storage offset, not by coordinate.

        Examples
        --------
        >>> a = NPArray(4, "uint16", data=[1, 2, 3, 4])
        >>> a.reallocate(2, 3)
        >>> a.elements.tolist()
        [1, 2, 3, 4, 0, 0]
        >>> a.reallocate(2)
        >>> a.elements.tolist()
        [1, 2]

        Raises
        ------
        EmptyShapeError
            If the new shape has zero dimensions.
        """
        new_shape = normalize_shape(*shape, operation="reallocate")
        old_size = self.size
        new_size = product(new_shape)

        if new_size != old_size:
            storage = np.full(new_size, self._dtype.default_scalar(), dtype=self._data.dtype)
            keep = min(old_size, new_size)
            storage[:keep] = self._data[:keep]
            if new_size < old_size:
                logger.debug("reallocate: discarding %d trailing elements", old_size - new_size)
            else:
                logger.debug("reallocate: appending %d zero elements", new_size - old_size)
            self._data = storage

        self._shape = new_shape

    def save(self, path: str | os.PathLike[str], *, version: FormatVersion | None = None) -> None:
        """Save the array to a ``.npy`` file.

        Parameters
        ----------
        path : str or os.PathLike
            The file to write. No suffix is appended.
        version : tuple of int, optional
            The ``.npy`` format version, ``(1, 0)`` or ``(2, 0)``.

        Raises
        ------
        UnsupportedTypeError
            If the element type of the array is not a supported element type.
        """
        tag = data_type_registry.tag_of(self._dtype)
        codec.write_array(path, self._data, self._shape, tag, self._order, version=version)

    @classmethod
    def load(cls, path: str | os.PathLike[str], dtype: ElementTypeLike) -> NPArray[Any]:
        """Load an array from a ``.npy`` file.

        Parameters
        ----------
        path : str or os.PathLike
            The file to read.
        dtype : ElementType, DTypeTag, str or numpy dtype-like
            The element type the file must hold. Files holding any other element type are
            rejected; bytes are never reinterpreted.

        Examples
        --------
        >>> import numpy as np
        >>> np.save("data.npy", np.arange(6, dtype="<u2").reshape(2, 3))
        >>> a = NPArray.load("data.npy", "uint16")
        >>> a.shape, a[1, 2]
        ((2, 3), np.uint16(5))

        Raises
        ------
        UnsupportedTypeError
            If ``dtype`` or the type declared by the file is not a supported element type.
        DTypeMismatchError
            If the file declares a different element type than ``dtype``. Checked before the
            shape, so a zero-dimensional file of another type reports this error.
        EmptyShapeError
            If the file holds a zero-dimensional array.
        NpyFormatError
            If the file is not a valid ``.npy`` file.
        """
        element_type = parse_element_type(dtype)
        expected = data_type_registry.tag_of(element_type)

        with codec.read_array(path) as decoded:
            if decoded.tag is not expected:
                raise DTypeMismatchError(str(path), decoded.tag.value, expected.value)
            if len(decoded.shape) == 0:
                raise EmptyShapeError("load", decoded.shape)
            stored = element_type.to_native_dtype(decoded.endianness)
            storage = np.frombuffer(decoded.buffer, dtype=stored).astype(
                element_type.to_native_dtype(), copy=True
            )

        return cls._from_storage(storage, decoded.shape, element_type, decoded.order)

    def to_numpy(self) -> np.ndarray[Any, Any]:
        """Return a copy of the array as a NumPy array with the same shape and layout."""
        return self._data.copy().reshape(self._shape, order=self._order.value)

    def __array__(self, dtype: npt.DTypeLike | None = None, copy: bool | None = None) -> Any:
        if copy is False:
            raise ValueError("NPArray cannot be converted to a NumPy array without a copy.")
        out = self.to_numpy()
        if dtype is not None:
            out = out.astype(dtype, copy=False)
        return out

    def copy(self) -> Self:
        """Return an independent copy of the array."""
        return self._from_storage(self._data.copy(), self._shape, self._dtype, self._order)

    def __copy__(self) -> Self:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NPArray):
            return NotImplemented
        return (
            self._dtype == other._dtype
            and self._shape == other._shape
            and self._order is other._order
            and bool(np.array_equal(self._data, other._data))
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        t = type(self)
        return f"<{t.__name__} {self._shape} {self._dtype.tag.value} {self._order.value}>"

    @property
    def info(self) -> ArrayInfo:
        """Report some diagnostic information about the array.

        Examples
        --------
        >>> a = NPArray((100, 100), "int32")
        >>> a.info
        Type               : NPArray
        Data type          : int32
        Shape              : (100, 100)
        Order              : C
        No. bytes          : 40000 (39.1K)
        """
        return ArrayInfo(
            _data_type=self._dtype.tag.value,
            _shape=self._shape,
            _order=self._order.value,  # type: ignore[arg-type]
            _count_bytes=self.nbytes,
        )
