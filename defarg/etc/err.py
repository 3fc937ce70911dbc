from textwrap import dedent
from typing import Any

from . import txt


class ArgTypeError(TypeError):
    """Raised when an argument is not of the type the callee can work with.

    ```python
    >>> error = ArgTypeError("text", str, 123)
    >>> isinstance(error, TypeError)
    True
    >>> str(error).startswith("Expected `text` to be")
    True

    ```
    """

    MULTILINE_TEMPLATE = dedent(
        """\
        Expected `{name}` to be `{expected_type}`.

        Given `{type}`:

        {value}"""
    )

    def __init__(self, name: str, expected_type: Any, value: Any):
        message = self.MULTILINE_TEMPLATE.format(
            name=name,
            expected_type=txt.fmt(expected_type),
            type=txt.fmt_type_of(value),
            value=txt.fmt_pretty(value),
        )

        super().__init__(message)
