"""
The config module is responsible for managing the configuration of npyarray and is based on the
Donfig python library.

Example:
    The default memory layout of newly allocated arrays is row-major (``"C"``). To allocate
    column-major arrays by default, set ``array.order``:

    ```python
    from npyarray.config import config

    config.set({"array.order": "F"})
    ```

    Instead of setting the value programmatically with ``config.set``, you can also set the value
    with an environment variable. The environment variable ``NPYARRAY_ARRAY__ORDER`` can be set to
    ``F``. The double underscore ``__`` is used to indicate nested access.

For more information, see the Donfig documentation at https://github.com/pytroll/donfig.
"""

from __future__ import annotations

from donfig import Config as DConfig


class Config(DConfig):  # type: ignore[misc]
    """The Config will collect configuration from config files and environment variables

    Example environment variables:
    Grabs environment variables of the form "NPYARRAY_FOO__BAR_BAZ=123" and
    turns these into config variables of the form ``{"foo": {"bar-baz": 123}}``
    It transforms the key and value in the following way:

    -  Lower-cases the key text
    -  Treats ``__`` (double-underscore) as nested access
    -  Calls ``ast.literal_eval`` on the value

    """

    def reset(self) -> None:
        self.clear()
        self.refresh()


# The default configuration for npyarray
config = Config(
    "npyarray",
    defaults=[
        {
            "array": {
                "order": "C",
            },
            "npy": {
                "format_version": None,
                "max_header_size": 10000,
            },
        }
    ],
)
