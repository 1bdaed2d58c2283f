__all__ = [
    "BaseNPArrayError",
    "DTypeMismatchError",
    "EmptyShapeError",
    "IndexOutOfRangeError",
    "NpyFormatError",
    "RankMismatchError",
    "ShapeSizeMismatchError",
    "UnsupportedTypeError",
]


class BaseNPArrayError(ValueError):
    """
    Base error which all npyarray value errors are sub-classed from.
    """

    _msg: str = "{}"

    def __init__(self, *args: object) -> None:
        """
        If a single argument is passed, treat it as a pre-formatted message.

        If multiple arguments are passed, they are used as arguments for the
        ``_msg`` template string class variable.
        """
        if len(args) == 1:
            super().__init__(args[0])
        else:
            super().__init__(self._msg.format(*args))


class EmptyShapeError(BaseNPArrayError):
    """
    Raised when a shape with zero dimensions is supplied or decoded.
    """

    _msg = "Cannot {} an array with the zero-dimensional shape {!r}."


class ShapeSizeMismatchError(BaseNPArrayError):
    """
    Raised when the element count implied by a shape does not match the data.
    """

    _msg = "Shape {!r} implies {} elements, got {} elements."


class UnsupportedTypeError(BaseNPArrayError):
    """
    Raised when an element type is outside the supported set of data types.
    """

    _msg = "Data type {!r} is not supported. Expected one of {!r}."


class DTypeMismatchError(BaseNPArrayError):
    """
    Raised when a file declares a data type other than the one requested.
    """

    _msg = "File {!r} declares data type {!r}, but data type {!r} was requested."


class NpyFormatError(BaseNPArrayError):
    """Raised when the contents of a .npy file are malformed."""


class RankMismatchError(IndexError):
    def __init__(self, got: int, expected: int) -> None:
        super().__init__(f"Expected {expected} indices for array of rank {expected}, got {got}.")


class IndexOutOfRangeError(IndexError): ...
