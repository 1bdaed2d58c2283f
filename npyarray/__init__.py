from npyarray.array import NPArray
from npyarray.common import Layout
from npyarray.config import config
from npyarray.creation import array, load, save, zeros
from npyarray.dtype import (
    DTypeTag,
    ElementType,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from npyarray.errors import (
    DTypeMismatchError,
    EmptyShapeError,
    IndexOutOfRangeError,
    NpyFormatError,
    RankMismatchError,
    ShapeSizeMismatchError,
    UnsupportedTypeError,
)
from npyarray.version import version as __version__

__all__ = [
    "DTypeMismatchError",
    "DTypeTag",
    "ElementType",
    "EmptyShapeError",
    "Float32",
    "Float64",
    "IndexOutOfRangeError",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Layout",
    "NPArray",
    "NpyFormatError",
    "RankMismatchError",
    "ShapeSizeMismatchError",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnsupportedTypeError",
    "__version__",
    "array",
    "config",
    "load",
    "save",
    "zeros",
]
