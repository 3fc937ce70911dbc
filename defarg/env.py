"""Reading environment variables, including as `OptionalValue` so that an
unset variable means "use the default".

```python
>>> import os
>>> os.environ["DEFARG_DOCTEST_PORT"] = "8080"

>>> get_optional("DEFARG_DOCTEST_PORT", int)
Present(8080)

>>> get_optional("DEFARG_DOCTEST_UNSET", int)
Absent()

>>> get_optional("DEFARG_DOCTEST_UNSET", int).value_or(80)
80

```
"""

from os import environ
from typing import Any, TypeVar, cast

import yaml
import splatlog
from splatlog.lib.typeguard import satisfies

from .etc.txt import fmt, join
from .optional import ABSENT, OptionalValue, Present

T = TypeVar("T")

_LOG = splatlog.get_logger(__name__)

TRUE_STRINGS = frozenset(
    (
        "1",
        "t",
        "y",
        "true",
        "yes",
    )
)
FALSE_STRINGS = frozenset(
    (
        "",
        "0",
        "f",
        "n",
        "false",
        "no",
    )
)


class UnreachableError(RuntimeError):
    def __init__(self):
        super().__init__("This code should never be reachable")


def get_bool(name: str) -> bool:
    """
    ```python
    >>> import os
    >>> os.environ["DEFARG_DOCTEST_FLAG"] = "Yes"
    >>> get_bool("DEFARG_DOCTEST_FLAG")
    True

    >>> os.environ["DEFARG_DOCTEST_FLAG"] = "maybe"
    >>> get_bool("DEFARG_DOCTEST_FLAG")
    Traceback (most recent call last):
        ...
    TypeError: can't get `bool` from env var DEFARG_DOCTEST_FLAG='maybe'; ...

    ```
    """
    match environ.get(name):
        case None:
            return False
        case str(s):
            if s.lower() in TRUE_STRINGS:
                return True
            if s.lower() in FALSE_STRINGS:
                return False
            raise TypeError(
                f"can't get `bool` from env var {name}={s!r}; "
                f"recognized values are True={'|'.join(sorted(TRUE_STRINGS))} "
                f"and False={'|'.join(sorted(FALSE_STRINGS))} "
                "(case-insensitive)"
            )
    raise UnreachableError()


def get_str(name: str) -> str:
    match environ.get(name):
        case None:
            return ""
        case str(s):
            return s
    raise UnreachableError()


def get_int(name: str) -> int:
    match environ.get(name):
        case None | "":
            return 0
        case str(s):
            try:
                return int(s)
            except ValueError as error:
                raise TypeError(
                    f"can't get `int` from env var {name}={s!r}"
                ) from error
    raise UnreachableError()


def get_float(name: str) -> float:
    match environ.get(name):
        case None | "":
            return 0.0
        case str(s):
            try:
                return float(s)
            except ValueError as error:
                raise TypeError(
                    f"can't get `float` from env var {name}={s!r}"
                ) from error
    raise UnreachableError()


def get_yaml(name: str) -> Any:
    match environ.get(name):
        case None | "":
            return None
        case str(s):
            try:
                return yaml.safe_load(s)
            except yaml.YAMLError as error:
                raise TypeError(
                    f"can't parse YAML from env var {name}={s!r}"
                ) from error
    raise UnreachableError()


def get_as(name: str, as_a: type[T]) -> T:
    """
    ```python
    >>> import os
    >>> os.environ["DEFARG_DOCTEST_HOSTS"] = "[a.example, b.example]"
    >>> get_as("DEFARG_DOCTEST_HOSTS", list[str])
    ['a.example', 'b.example']

    ```
    """
    match as_a:
        case t if t is bool:
            return cast(T, get_bool(name))
        case t if t is str:
            return cast(T, get_str(name))
        case t if t is int:
            return cast(T, get_int(name))
        case t if t is float:
            return cast(T, get_float(name))
        case _:
            value = get_yaml(name)
            if satisfies(value, as_a):
                return value
            raise TypeError(
                f"YAML-parsed value {fmt(value)} from env var {name} "
                f"does not satisfy type {fmt(as_a)}"
            )


def get_optional(
    name: str, as_a: type[T] = cast(Any, str)
) -> OptionalValue[T]:
    """`Absent` when `name` is not set in the environment, otherwise `Present`
    of the value parsed with `get_as`.

    An empty value counts as set, and parses to whatever "empty" is for `as_a`
    (`""`, `0`, `False`...).
    """
    if name not in environ:
        _LOG.debug("env var not set", name=name)
        return ABSENT
    return Present(get_as(name, as_a))


def first_set(*names: str, as_a: type[T] = cast(Any, str)) -> OptionalValue[T]:
    """The value of the first of `names` that is set, or `Absent`.

    ```python
    >>> import os
    >>> os.environ["DEFARG_DOCTEST_B"] = "b"
    >>> first_set("DEFARG_DOCTEST_A", "DEFARG_DOCTEST_B")
    Present('b')

    >>> first_set()
    Absent()

    ```
    """
    for name in names:
        if name in environ:
            return get_optional(name, as_a)
    _LOG.debug("none of the env vars are set", names=join(names))
    return ABSENT
