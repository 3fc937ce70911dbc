"""Optional-with-default function arguments.

```python
>>> from defarg import OptionalValue, ABSENT, optional_args

>>> @optional_args
... def birthday(age: OptionalValue[int] = ABSENT) -> str:
...     return age.fold(
...         "You are one year older!",
...         "You are {} years old!".format,
...     )

>>> birthday(20)
'You are 20 years old!'

>>> birthday()
'You are one year older!'

```
"""

from . import etc, err, optional, env
from .err import AbsentValueError, ArgTypeError, DefargError
from .optional import (
    ABSENT,
    Absent,
    Alternative,
    OptionalValue,
    Present,
    absent,
    apply,
    as_optional,
    bind,
    coerce_arg,
    first_present,
    fmap,
    fold,
    from_fraction,
    from_int,
    from_text,
    lift2,
    lifted_identity,
    optional_args,
    or_else,
    present,
    to_alternative,
    to_nullable,
    value_or,
)

__all__ = [
    "ABSENT",
    "Absent",
    "AbsentValueError",
    "Alternative",
    "ArgTypeError",
    "DefargError",
    "OptionalValue",
    "Present",
    "absent",
    "apply",
    "as_optional",
    "bind",
    "coerce_arg",
    "env",
    "first_present",
    "fmap",
    "fold",
    "from_fraction",
    "from_int",
    "from_text",
    "lift2",
    "lifted_identity",
    "optional_args",
    "or_else",
    "present",
    "to_alternative",
    "to_nullable",
    "value_or",
]
