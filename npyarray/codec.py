"""
Byte codec for the NumPy ``.npy`` file format.

A ``.npy`` file starts with the magic string ``\\x93NUMPY``, a two byte format version and a
length-prefixed header holding a Python dictionary literal with the keys ``descr``,
``fortran_order`` and ``shape``. The raw element bytes follow the header. The magic string,
version and header are encoded and decoded with ``numpy.lib.format``.

This module knows nothing about ``NPArray``. It writes raw bytes described by a shape, a
``DTypeTag`` and a ``Layout``, and reads them back as a ``DecodedArray``.
"""

from __future__ import annotations

import contextlib
import io
import os
import uuid
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Self

from numpy.lib import format as npy_format

from npyarray.common import (
    EndiannessStr,
    Layout,
    endianness_from_numpy_dtype,
    parse_layout,
    parse_shapelike,
    product,
)
from npyarray.config import config
from npyarray.dtype import DTypeTag, data_type_registry
from npyarray.errors import NpyFormatError

if TYPE_CHECKING:
    from collections.abc import Buffer, Iterator, Sequence

logger = getLogger(__name__)

FormatVersion = tuple[int, int]
SUPPORTED_VERSIONS: tuple[FormatVersion, ...] = ((1, 0), (2, 0))

_header_writers = {
    (1, 0): npy_format.write_array_header_1_0,
    (2, 0): npy_format.write_array_header_2_0,
}
_header_readers = {
    (1, 0): npy_format.read_array_header_1_0,
    (2, 0): npy_format.read_array_header_2_0,
}


@dataclass
class DecodedArray:
    """
    The result of reading a ``.npy`` file.

    ``buffer`` holds ``product(shape) * item_size`` raw bytes in the byte order given by
    ``endianness`` (``None`` for single byte types). The buffer belongs to whoever called
    ``read_array``; use the instance as a context manager to release it once it has been
    copied.
    """

    buffer: bytes | bytearray
    shape: tuple[int, ...]
    tag: DTypeTag
    order: Layout
    endianness: EndiannessStr | None
    version: FormatVersion

    def release(self) -> None:
        self.buffer = b""

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: object) -> None:
        self.release()


def parse_format_version(data: Any) -> FormatVersion | None:
    if data is None:
        return None
    if isinstance(data, str):
        data = tuple(int(v) for v in data.split("."))
    version = tuple(data)
    if version in SUPPORTED_VERSIONS:
        return version  # type: ignore[return-value]
    raise ValueError(f"Expected one of {SUPPORTED_VERSIONS} or None, got {data!r} instead.")


def _encode_header(header: dict[str, Any], version: FormatVersion | None) -> bytes:
    if version is None:
        # the smallest version that fits the header
        try:
            return _encode_header(header, (1, 0))
        except ValueError:
            return _encode_header(header, (2, 0))
    buf = io.BytesIO()
    _header_writers[version](buf, header)
    return buf.getvalue()


@contextlib.contextmanager
def _atomic_write(path: Path) -> Iterator[BinaryIO]:
    tmp_path = path.with_suffix(f".{uuid.uuid4().hex}.partial")
    try:
        with tmp_path.open("wb") as f:
            yield f
        tmp_path.replace(path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def write_array(
    path: str | os.PathLike[str],
    data: Buffer,
    shape: Sequence[int],
    tag: DTypeTag,
    order: Layout | str,
    *,
    version: FormatVersion | None = None,
) -> None:
    """
    Write raw element bytes to a ``.npy`` file.

    Parameters
    ----------
    path : str or os.PathLike
        The file to write. Used as given; no suffix is appended. The file is replaced
        atomically.
    data : bytes-like
        The elements in native byte order, laid out according to ``order``.
    shape : sequence of int
        The extent of each dimension.
    tag : DTypeTag
        The element type of ``data``.
    order : Layout or {"C", "F"}
        The memory layout of ``data``.
    version : tuple of int, optional
        The format version, ``(1, 0)`` or ``(2, 0)``. Defaults to the ``npy.format_version``
        configuration value; if that is ``None`` too, the smallest version that can hold the
        header is used.

    Raises
    ------
    NpyFormatError
        If the number of bytes does not match the shape and element type.
    """
    element_type = data_type_registry.get(tag)()
    order = parse_layout(order)
    shape = tuple(shape)
    if version is None:
        version = parse_format_version(config.get("npy.format_version"))
    else:
        version = parse_format_version(version)

    view = memoryview(data)
    expected = product(shape) * element_type.item_size
    if view.nbytes != expected:
        raise NpyFormatError(
            f"Expected {expected} bytes for shape {shape} and data type {tag.value!r}, "
            f"got {view.nbytes}."
        )

    header = {
        "descr": npy_format.dtype_to_descr(element_type.to_native_dtype()),
        "fortran_order": order is Layout.COLUMN_MAJOR,
        "shape": shape,
    }
    encoded = _encode_header(header, version)

    path = Path(path)
    logger.debug("writing %s: shape=%s, tag=%s, order=%s", path, shape, tag.value, order.value)
    with _atomic_write(path) as f:
        f.write(encoded)
        f.write(view)


def read_array(path: str | os.PathLike[str]) -> DecodedArray:
    """
    Read a ``.npy`` file.

    Raises
    ------
    NpyFormatError
        If the magic string, version or header is invalid, or if the file holds fewer
        element bytes than its header declares.
    UnsupportedTypeError
        If the header declares a data type outside the supported set.
    OSError
        If the file cannot be read. Raised unchanged.
    """
    path = Path(path)
    with path.open("rb") as f:
        try:
            version = npy_format.read_magic(f)
        except ValueError as e:
            raise NpyFormatError(f"{str(path)!r} is not a .npy file: {e}") from e
        if version not in _header_readers:
            raise NpyFormatError(
                f"{str(path)!r} uses .npy format version {version}; "
                f"supported versions are {SUPPORTED_VERSIONS}."
            )
        try:
            shape, fortran_order, dtype = _header_readers[version](
                f, max_header_size=config.get("npy.max_header_size")
            )
            shape = parse_shapelike(shape)
        except (TypeError, ValueError) as e:
            raise NpyFormatError(f"Invalid header in {str(path)!r}: {e}") from e

        element_type = data_type_registry.match_native_dtype(dtype)
        nbytes = product(shape) * element_type.item_size
        available = os.fstat(f.fileno()).st_size - f.tell()
        if nbytes > available:
            raise NpyFormatError(
                f"{str(path)!r} is truncated: expected {nbytes} bytes of data, got {available}."
            )
        buffer = bytearray(nbytes)
        f.readinto(buffer)

    logger.debug(
        "read %s: version=%s, shape=%s, tag=%s", path, version, shape, element_type.tag.value
    )
    return DecodedArray(
        buffer=buffer,
        shape=shape,
        tag=element_type.tag,
        order=Layout.COLUMN_MAJOR if fortran_order else Layout.ROW_MAJOR,
        endianness=endianness_from_numpy_dtype(dtype),
        version=version,
    )
