"""Printing things as plain, markdown-ish strings, mostly for error messages.

> ❗❗ WARNING ❗❗
>
> This module is used in already bad situations, like formatting error messages.
>
> As such, it must **_NOT_** depend on any parts of the package outside
> `defarg.etc`, and it must **_NOT_** raise exceptions unless there is a logic
> error that needs to be fixed.
>
"""

from typing import Any, Callable
import os

import splatlog.lib.text

from rich.console import Console
from rich.pretty import Pretty
from rich.padding import Padding

from more_itertools import collapse

_CONSOLE = Console(
    file=open(os.devnull, "w"),
    force_terminal=False,
    width=80,
)

fmt = splatlog.lib.text.fmt
fmt_type_of = splatlog.lib.text.fmt_type_of


def fmt_pretty(obj: object) -> str:
    with _CONSOLE.capture() as capture:
        _CONSOLE.print(Padding(Pretty(obj), (0, 4)))
    return capture.get()


def join(
    *iterable: Any,
    seperator: str = ", ",
    coordinator: str | None = " and ",
    to_s: Callable[[Any], str] = str,
    empty: str = "",
) -> str:
    """
    Joins items into a textual list suitable for prose, with a coordinating
    conjunction between the last two items.

    ##### Examples #####

    ```python
    >>> join("a", "b", "c")
    'a, b and c'

    >>> join("a", ("b", "c"), coordinator=" or ")
    'a, b or c'

    >>> join(["x"])
    'x'

    >>> join([], empty="(none)")
    '(none)'

    >>> join(1, 2, to_s=repr, coordinator=None)
    '1, 2'

    ```
    """
    items = list(collapse(iterable))

    if coordinator is None:
        return seperator.join(to_s(i) for i in items)

    match items:
        case []:
            return empty
        case [only]:
            return to_s(only)
        case [*rest, penult, ult]:
            return seperator.join(
                [
                    *(to_s(i) for i in rest),
                    to_s(penult) + coordinator + to_s(ult),
                ]
            )
    assert False, "unreachable"
