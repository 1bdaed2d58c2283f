"""
Element types supported by ``NPArray``.

Each supported element type is a small frozen dataclass that binds a Python class to exactly one
on-disk type tag (``DTypeTag``), a NumPy dtype class and an item size. The set of element types is
closed: the ten classes defined in this module are registered in ``data_type_registry`` and
nothing else is accepted as the element type of an array.

Element types are endianness-free. Arrays always hold their elements in native byte order; the
byte order of a file is a property of the file, handled by the byte codec.
"""

from __future__ import annotations

import contextlib
from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Literal, Self, TypeGuard, TypeVar

import numpy as np

from npyarray.common import EndiannessStr, endianness_to_numpy_str
from npyarray.errors import UnsupportedTypeError

if TYPE_CHECKING:
    from collections.abc import Iterator

    import numpy.typing as npt


class DTypeTag(Enum):
    """
    The on-disk tags of the supported element types.
    """

    INT8 = "int8"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"


class DataTypeValidationError(ValueError): ...


TScalar_co = TypeVar("TScalar_co", bound=np.generic, covariant=True)
TDType_co = TypeVar("TDType_co", bound=np.dtype[Any], covariant=True)


@dataclass(frozen=True, slots=True)
class ElementType(ABC, Generic[TDType_co, TScalar_co]):
    """
    Abstract base class binding an element type to its on-disk tag.

    Attributes
    ----------
    dtype_cls : ClassVar[type[np.dtype]]
        The wrapped NumPy dtype class.
    tag : ClassVar[DTypeTag]
        The tag written to and expected from files.
    kind : ClassVar[str]
        The NumPy dtype kind character, one of ``"i"``, ``"u"`` or ``"f"``.
    item_size : ClassVar[int]
        The size of a single element in bytes.
    """

    dtype_cls: ClassVar[type[np.dtype[Any]]]
    tag: ClassVar[DTypeTag]
    kind: ClassVar[Literal["i", "u", "f"]]
    item_size: ClassVar[int]

    @classmethod
    def _check_native_dtype(cls, dtype: np.dtype[Any]) -> TypeGuard[TDType_co]:
        """
        Check that a NumPy dtype has the kind and item size of this element type, in either byte
        order.

        ``type(dtype) is cls.dtype_cls`` is not used because NumPy has several dtype classes for
        the same machine type on some platforms (e.g. ``np.dtype("q")`` and ``np.dtype("l")``).
        """
        return (
            isinstance(dtype, np.dtype)
            and dtype.kind == cls.kind
            and dtype.itemsize == cls.item_size
        )

    @classmethod
    def from_native_dtype(cls, dtype: np.dtype[Any]) -> Self:
        """
        Create an instance of this element type from a NumPy dtype.

        Raises
        ------
        DataTypeValidationError
            If the dtype does not correspond to this element type.
        """
        if cls._check_native_dtype(dtype):
            return cls()
        raise DataTypeValidationError(
            f"Invalid data type: {dtype}. Expected an instance of {cls.dtype_cls}"
        )

    def to_native_dtype(self, endianness: EndiannessStr | None = None) -> TDType_co:
        """
        Convert this element type to a NumPy dtype.

        Parameters
        ----------
        endianness : {"little", "big"} or None
            The byte order of the returned dtype. ``None`` means native byte order.
        """
        dtype = self.dtype_cls()
        if endianness is None or self.item_size == 1:
            return dtype  # type: ignore[return-value]
        return dtype.newbyteorder(endianness_to_numpy_str(endianness))  # type: ignore[return-value]

    def default_scalar(self) -> TScalar_co:
        """The value new elements are initialized with, 0 cast to this type."""
        return self.to_native_dtype().type(0)  # type: ignore[no-any-return]

    def cast_scalar(self, data: object) -> TScalar_co:
        """
        Cast a Python or NumPy scalar to the scalar type of this element type.

        Raises
        ------
        TypeError
            If the value is not a number, or is a non-integral number and this is an integer
            type.
        ValueError
            If the value is outside the range of this integer type.
        """
        native = self.to_native_dtype()
        if not isinstance(data, (int, float, np.integer, np.floating)) or isinstance(data, bool):
            msg = (
                f"Cannot convert object {data!r} with type {type(data)} to a scalar compatible "
                f"with the data type {self}."
            )
            raise TypeError(msg)
        if self.kind == "f":
            return native.type(data)  # type: ignore[no-any-return]
        if isinstance(data, (float, np.floating)) and not float(data).is_integer():
            raise TypeError(f"Cannot convert non-integral value {data!r} to the data type {self}.")
        value = int(data)
        info = np.iinfo(native)
        if not info.min <= value <= info.max:
            raise ValueError(
                f"Value {value} is out of range for the data type {self} "
                f"({info.min} to {info.max})."
            )
        return native.type(value)  # type: ignore[no-any-return]

    def cast_array(self, data: npt.ArrayLike) -> np.ndarray[Any, Any]:
        """
        Copy array-like data into a new NumPy array of this element type, in native byte order.

        Integers and floats are accepted. Conversion to an integer type must be exact: every
        value must be integral and within the range of the type.

        Raises
        ------
        TypeError
            If the data is not numeric, or holds non-integral values and this is an integer type.
        ValueError
            If a value is outside the range of this integer type.
        """
        src = np.asarray(data)
        native = self.to_native_dtype()
        if src.size and src.dtype.kind not in "iuf":
            raise TypeError(
                f"Cannot convert data of type {src.dtype} to an array compatible with the data "
                f"type {self}."
            )
        if src.size and self.kind != "f" and not np.can_cast(src.dtype, native, casting="safe"):
            with np.errstate(invalid="ignore"):
                integral = np.all(np.isfinite(src) & (np.mod(src, 1) == 0))
            if src.dtype.kind == "f" and not integral:
                raise TypeError(f"Cannot convert non-integral values to the data type {self}.")
            info = np.iinfo(native)
            if src.min() < info.min or src.max() > info.max:
                raise ValueError(
                    f"Values in the range {src.min()} to {src.max()} are out of range for the "
                    f"data type {self} ({info.min} to {info.max})."
                )
        return src.astype(native, copy=True)


@dataclass(frozen=True, slots=True)
class Int8(ElementType[np.dtypes.Int8DType, np.int8]):
    """8-bit signed integers, the equivalent of a C ``char``."""

    dtype_cls = np.dtypes.Int8DType
    tag = DTypeTag.INT8
    kind = "i"
    item_size = 1


@dataclass(frozen=True, slots=True)
class UInt8(ElementType[np.dtypes.UInt8DType, np.uint8]):
    """8-bit unsigned integers, the equivalent of a C ``unsigned char``."""

    dtype_cls = np.dtypes.UInt8DType
    tag = DTypeTag.UINT8
    kind = "u"
    item_size = 1


@dataclass(frozen=True, slots=True)
class UInt16(ElementType[np.dtypes.UInt16DType, np.uint16]):
    dtype_cls = np.dtypes.UInt16DType
    tag = DTypeTag.UINT16
    kind = "u"
    item_size = 2


@dataclass(frozen=True, slots=True)
class UInt32(ElementType[np.dtypes.UInt32DType, np.uint32]):
    dtype_cls = np.dtypes.UInt32DType
    tag = DTypeTag.UINT32
    kind = "u"
    item_size = 4


@dataclass(frozen=True, slots=True)
class UInt64(ElementType[np.dtypes.UInt64DType, np.uint64]):
    dtype_cls = np.dtypes.UInt64DType
    tag = DTypeTag.UINT64
    kind = "u"
    item_size = 8


@dataclass(frozen=True, slots=True)
class Int16(ElementType[np.dtypes.Int16DType, np.int16]):
    dtype_cls = np.dtypes.Int16DType
    tag = DTypeTag.INT16
    kind = "i"
    item_size = 2


@dataclass(frozen=True, slots=True)
class Int32(ElementType[np.dtypes.Int32DType, np.int32]):
    dtype_cls = np.dtypes.Int32DType
    tag = DTypeTag.INT32
    kind = "i"
    item_size = 4


@dataclass(frozen=True, slots=True)
class Int64(ElementType[np.dtypes.Int64DType, np.int64]):
    dtype_cls = np.dtypes.Int64DType
    tag = DTypeTag.INT64
    kind = "i"
    item_size = 8


@dataclass(frozen=True, slots=True)
class Float32(ElementType[np.dtypes.Float32DType, np.float32]):
    dtype_cls = np.dtypes.Float32DType
    tag = DTypeTag.FLOAT32
    kind = "f"
    item_size = 4


@dataclass(frozen=True, slots=True)
class Float64(ElementType[np.dtypes.Float64DType, np.float64]):
    dtype_cls = np.dtypes.Float64DType
    tag = DTypeTag.FLOAT64
    kind = "f"
    item_size = 8


@dataclass(frozen=True, kw_only=True)
class DataTypeRegistry:
    """
    A registry mapping each ``DTypeTag`` to its ``ElementType`` class.

    Attributes
    ----------
    contents : dict[DTypeTag, type[ElementType]]
        The mapping from tags to their corresponding element type classes.
    """

    contents: dict[DTypeTag, type[ElementType[Any, Any]]] = field(
        default_factory=dict, init=False
    )

    def _register(self, cls: type[ElementType[Any, Any]]) -> None:
        if cls.tag in self.contents and self.contents[cls.tag] is not cls:
            raise ValueError(f"Tag {cls.tag.value!r} is already bound to {self.contents[cls.tag]}")
        self.contents[cls.tag] = cls

    def __iter__(self) -> Iterator[type[ElementType[Any, Any]]]:
        return iter(self.contents.values())

    def tags(self) -> tuple[str, ...]:
        return tuple(tag.value for tag in self.contents)

    def get(self, tag: DTypeTag) -> type[ElementType[Any, Any]]:
        """
        Retrieve the element type class bound to a tag.

        Raises
        ------
        UnsupportedTypeError
            If no element type is bound to the tag.
        """
        try:
            return self.contents[tag]
        except KeyError:
            raise UnsupportedTypeError(tag, self.tags()) from None

    def tag_of(self, element_type: ElementType[Any, Any]) -> DTypeTag:
        """
        Return the tag bound to an element type instance.

        Raises
        ------
        UnsupportedTypeError
            If the element type is not one of the registered classes.
        """
        tag = getattr(type(element_type), "tag", None)
        if tag is None or self.contents.get(tag) is not type(element_type):
            raise UnsupportedTypeError(element_type, self.tags())
        return tag

    def match_native_dtype(self, dtype: np.dtype[Any]) -> ElementType[Any, Any]:
        """
        Match a NumPy dtype of either byte order to a registered element type.

        Raises
        ------
        UnsupportedTypeError
            If no registered element type matches the dtype.
        """
        for cls in self.contents.values():
            with contextlib.suppress(DataTypeValidationError):
                return cls.from_native_dtype(dtype)
        raise UnsupportedTypeError(str(dtype), self.tags())


data_type_registry = DataTypeRegistry()
for _cls in (Int8, UInt8, UInt16, UInt32, UInt64, Int16, Int32, Int64, Float32, Float64):
    data_type_registry._register(_cls)
del _cls


ElementTypeLike = ElementType[Any, Any] | type[ElementType[Any, Any]] | DTypeTag | str | Any


def parse_element_type(data: ElementTypeLike) -> ElementType[Any, Any]:
    """
    Resolve an element type from an ``ElementType`` instance or class, a ``DTypeTag``, a tag
    name such as ``"uint16"``, or anything ``numpy.dtype`` accepts (``np.int16``, ``"<i2"``,
    ``float``...).

    Raises
    ------
    UnsupportedTypeError
        If the value does not resolve to one of the supported element types.
    """
    if isinstance(data, ElementType):
        data_type_registry.tag_of(data)
        return data
    if isinstance(data, type) and issubclass(data, ElementType):
        tag = getattr(data, "tag", None)
        if tag is None or data_type_registry.contents.get(tag) is not data:
            raise UnsupportedTypeError(data.__name__, data_type_registry.tags())
        return data()
    if isinstance(data, DTypeTag):
        return data_type_registry.get(data)()
    if isinstance(data, str) and data in data_type_registry.tags():
        return data_type_registry.get(DTypeTag(data))()
    if data is None:
        raise UnsupportedTypeError(data, data_type_registry.tags())
    try:
        dtype = np.dtype(data)
    except (TypeError, ValueError):
        raise UnsupportedTypeError(data, data_type_registry.tags()) from None
    return data_type_registry.match_native_dtype(dtype)
