##############################################################################
# Optional Arguments
# ============================================================================
#
# An `OptionalValue` is a function argument that has a default: it is either
# `Absent` ("use the default") or `Present(value)` ("the caller gave us
# `value`").
#
# The point is to be able to tell `None` apart from "really nothing, not even
# `None`", which is what you actually want for argument defaults. Sentinel
# values do the job, but each module ends up rolling its own, none of them
# compose, and there's nothing making you handle both cases.
#
# Python has no literal overloading, so the "pass a bare literal" experience
# comes from three places:
#
# 1.  `as_optional` and the named constructors (`present`, `from_text`,
#     `from_int`, `from_fraction`). These are the canonical, always-available
#     path.
# 2.  Arithmetic operators, which lift bare operands (`present(2) + 3`).
# 3.  The `optional_args` decorator, which converts bare arguments at call
#     sites of functions with `OptionalValue[...]` parameters.
#
##############################################################################

from __future__ import annotations
from abc import ABC, abstractmethod
from collections.abc import Collection, Mapping
from decimal import Decimal
from fractions import Fraction
from functools import reduce, wraps
from inspect import Parameter, signature
from numbers import Complex, Number, Real
import operator
from types import UnionType
from typing import (
    Any,
    Callable,
    Generic,
    Iterator,
    Protocol,
    TypeVar,
    Union,
    cast,
    final,
    get_args,
    get_origin,
    get_type_hints,
    overload,
    runtime_checkable,
)

import splatlog
from rich.repr import RichReprResult

from .err import AbsentValueError, ArgTypeError

T = TypeVar("T")
U = TypeVar("U")
B = TypeVar("B")
TFn = TypeVar("TFn", bound=Callable[..., Any])

_LOG = splatlog.get_logger(__name__)

#: What `from_fraction` accepts. There's no fractional literal in Python, so
#: these are the types a "fractional literal" shows up as in practice.
FractionalLiteral = float | Fraction | Decimal


@runtime_checkable
class Alternative(Protocol):
    """Things that can be built "empty" or around a single value. The targets of
    `to_alternative` (besides plain collection types).

    `OptionalValue` itself is one:

    ```python
    >>> isinstance(OptionalValue, Alternative)
    True

    >>> isinstance(list, Alternative)
    False

    ```
    """

    @classmethod
    def empty(cls) -> Any:
        ...

    @classmethod
    def pure(cls, value: Any) -> Any:
        ...


class OptionalValue(ABC, Generic[T]):
    """
    A function argument that may be explicitly given (`Present`) or left at its
    default (`Absent`). Closed: those are the only two subclasses there will
    ever be.

    Instances are immutable plain values.

    ##### Examples #####

    The common case is a parameter with a default:

    ```python
    >>> def greet(name: OptionalValue[str] = ABSENT) -> str:
    ...     match name:
    ...         case Present(n):
    ...             return "Hello, " + n
    ...         case Absent():
    ...             return "Hello"

    >>> greet(present("John"))
    'Hello, John'

    >>> greet()
    'Hello'

    ```

    `Present(None)` is perfectly valid, and is _not_ `Absent`:

    ```python
    >>> present(None) == absent()
    False

    ```
    """

    __slots__ = ()

    def __init_subclass__(cls, **kwds: Any) -> None:
        super().__init_subclass__(**kwds)
        if cls.__module__ != __name__:
            raise TypeError(
                f"{cls.__qualname__} can't subclass `OptionalValue`; "
                "it is closed over `Absent` and `Present`"
            )

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"`{type(self).__name__}` values are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"`{type(self).__name__}` values are immutable")

    # Alternative / Default Protocol
    # ========================================================================

    @classmethod
    def empty(cls) -> OptionalValue[Any]:
        return ABSENT

    @classmethod
    def pure(cls, value: U) -> OptionalValue[U]:
        return Present(value)

    @classmethod
    def default(cls) -> OptionalValue[Any]:
        """The default value of the type, which is `Absent`. Also what
        `absent` gives you, so either works as a `default_factory`.

        ```python
        >>> OptionalValue.default()
        Absent()

        ```
        """
        return ABSENT

    # Inspection
    # ========================================================================

    @property
    @abstractmethod
    def is_present(self) -> bool:
        ...

    @property
    def is_absent(self) -> bool:
        return not self.is_present

    def __bool__(self) -> bool:
        return self.is_present

    @abstractmethod
    def __iter__(self) -> Iterator[T]:
        ...

    @abstractmethod
    def unwrap(self) -> T:
        ...

    @abstractmethod
    def fold(self, default: B, f: Callable[[T], B]) -> B:
        ...

    def value_or(self, default: T) -> T:
        return self.fold(default, _identity)

    def to_alternative(self, into: Any) -> Any:
        return to_alternative(self, into)

    # Functor, Applicative, Monad
    # ========================================================================

    def map(self, f: Callable[[T], U]) -> OptionalValue[U]:
        match self:
            case Present(x):
                return Present(f(x))
        return ABSENT

    def bind(self, f: Callable[[T], OptionalValue[U]]) -> OptionalValue[U]:
        """
        Sequence into `f`. `Absent` short-circuits without calling `f`.

        ```python
        >>> def half(n: int) -> OptionalValue[int]:
        ...     return present(n // 2) if n % 2 == 0 else absent()

        >>> present(8).bind(half).bind(half)
        Present(2)

        >>> present(6).bind(half).bind(half)
        Absent()

        ```
        """
        match self:
            case Present(x):
                return f(x)
        return ABSENT

    def apply(self, vx: OptionalValue[Any]) -> OptionalValue[Any]:
        """
        Applicative product, with `self` holding the function. `Present` only
        when _both_ sides are.

        ```python
        >>> present(str.upper).apply(present("hi"))
        Present('HI')

        >>> present(str.upper).apply(absent())
        Absent()

        >>> absent().apply(present("hi"))
        Absent()

        ```
        """
        match (self, vx):
            case (Present(f), Present(x)):
                return Present(f(x))
        return ABSENT

    # Fallback (Alternative)
    # ========================================================================

    def or_else(self, other: OptionalValue[T]) -> OptionalValue[T]:
        """
        `self` if it's `Present`, otherwise `other` (whatever that is). Also
        available as the `|` operator.

        `Absent` is the identity, so this is the _fallback_ monoid. Not to be
        confused with `combine`.

        ```python
        >>> present(1) | present(2)
        Present(1)

        >>> absent() | present(2)
        Present(2)

        >>> absent() | absent()
        Absent()

        ```
        """
        if self.is_present:
            return self
        return other

    def __or__(self, other: OptionalValue[T]) -> OptionalValue[T]:
        if not isinstance(other, OptionalValue):
            return NotImplemented
        return self.or_else(other)

    # Combining Contained Values (Monoid)
    # ========================================================================

    def combine(
        self,
        other: OptionalValue[T],
        op: Callable[[T, T], T] = operator.add,
    ) -> OptionalValue[T]:
        """
        Combine the contained values with `op` (default `+`), following the
        applicative product: any `Absent` makes the result `Absent`.

        This is the _value-lifting_ monoid; its identity is
        `lifted_identity(as_type)`, **not** `Absent`.

        ```python
        >>> present("ab").combine(present("cd"))
        Present('abcd')

        >>> present([1]).combine(absent())
        Absent()

        >>> present("ab").combine(lifted_identity(str))
        Present('ab')

        ```
        """
        return lift2(op, self, other)

    # Arithmetic
    # ========================================================================
    #
    # Binary operators lift bare operands through `as_optional`, which is how
    # `present(20) + 1` stands in for a numeric literal.
    #

    def __add__(self, other: Any) -> OptionalValue[Any]:
        return lift2(operator.add, self, as_optional(other))

    def __radd__(self, other: Any) -> OptionalValue[Any]:
        return lift2(operator.add, as_optional(other), self)

    def __sub__(self, other: Any) -> OptionalValue[Any]:
        return lift2(operator.sub, self, as_optional(other))

    def __rsub__(self, other: Any) -> OptionalValue[Any]:
        return lift2(operator.sub, as_optional(other), self)

    def __mul__(self, other: Any) -> OptionalValue[Any]:
        return lift2(operator.mul, self, as_optional(other))

    def __rmul__(self, other: Any) -> OptionalValue[Any]:
        return lift2(operator.mul, as_optional(other), self)

    def __truediv__(self, other: Any) -> OptionalValue[Any]:
        return lift2(operator.truediv, self, as_optional(other))

    def __rtruediv__(self, other: Any) -> OptionalValue[Any]:
        return lift2(operator.truediv, as_optional(other), self)

    def __neg__(self) -> OptionalValue[T]:
        return self.map(operator.neg)

    def __abs__(self) -> OptionalValue[T]:
        return self.map(abs)

    def signum(self) -> OptionalValue[T]:
        """
        Sign of the contained value, as the value's own type. Complex values
        get `x / abs(x)` (and zero stays zero).

        ```python
        >>> present(-7).signum()
        Present(-1)

        >>> present(2.5).signum()
        Present(1.0)

        >>> present(3 + 4j).signum()
        Present((0.6+0.8j))

        >>> absent().signum()
        Absent()

        ```
        """
        return self.map(_signum)

    def recip(self) -> OptionalValue[Any]:
        return self.map(_recip)


@final
class Absent(OptionalValue[T]):
    __slots__ = ()

    @property
    def is_present(self) -> bool:
        return False

    def __iter__(self) -> Iterator[T]:
        return iter(())

    def unwrap(self) -> T:
        raise AbsentValueError()

    def fold(self, default: B, f: Callable[[T], B]) -> B:
        return default

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OptionalValue):
            return isinstance(other, Absent)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(Absent)

    def __reduce__(self):
        return (Absent, ())

    def __repr__(self) -> str:
        return "Absent()"

    def __rich_repr__(self) -> RichReprResult:
        yield from ()


@final
class Present(OptionalValue[T]):
    __slots__ = ("value",)
    __match_args__ = ("value",)

    value: T

    def __init__(self, value: T):
        object.__setattr__(self, "value", value)

    @property
    def is_present(self) -> bool:
        return True

    def __iter__(self) -> Iterator[T]:
        yield self.value

    def unwrap(self) -> T:
        return self.value

    def fold(self, default: B, f: Callable[[T], B]) -> B:
        return f(self.value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Present):
            return bool(self.value == other.value)
        if isinstance(other, OptionalValue):
            return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash((Present, self.value))

    def __reduce__(self):
        return (Present, (self.value,))

    def __repr__(self) -> str:
        return f"Present({self.value!r})"

    def __rich_repr__(self) -> RichReprResult:
        yield self.value


#: The shared `Absent` value. Any `Absent()` is equal to it, this one just
#: saves allocating.
ABSENT: OptionalValue[Any] = Absent()


def _identity(x: T) -> T:
    return x


def _signum(x: Any) -> Any:
    if isinstance(x, Complex) and not isinstance(x, Real):
        return x / abs(x) if x else x
    return type(x)((x > 0) - (x < 0))


def _recip(x: Any) -> Any:
    return 1 / x


# Construction
# ============================================================================


def present(value: T) -> OptionalValue[T]:
    return Present(value)


def absent() -> OptionalValue[Any]:
    return ABSENT


@overload
def as_optional(x: OptionalValue[T]) -> OptionalValue[T]:
    ...


@overload
def as_optional(x: T) -> OptionalValue[T]:
    ...


def as_optional(x):
    """Make `x` into an `OptionalValue`. If it already was one, it simply gets
    returned. Otherwise, it becomes `Present(x)`.

    ```python
    >>> as_optional(20)
    Present(20)

    >>> as_optional(absent())
    Absent()

    >>> as_optional(None)
    Present(None)

    ```
    """
    if isinstance(x, OptionalValue):
        return x
    return Present(x)


def _check_as_type(as_type: Any) -> None:
    if not callable(as_type):
        raise ArgTypeError("as_type", Callable, as_type)


def from_text(
    text: str, as_type: Callable[[str], Any] = str
) -> OptionalValue[T]:
    """
    Text literal to `OptionalValue`, run through `as_type` first. `as_type` can
    be `str` itself or any wrapper that builds from a `str`.

    ```python
    >>> from_text("John")
    Present('John')

    >>> class Name(str):
    ...     pass

    >>> from_text("John", Name) == present(Name("John"))
    True

    >>> from_text(b"John")
    Traceback (most recent call last):
        ...
    defarg.etc.err.ArgTypeError: Expected `text` to be ...

    ```
    """
    if not isinstance(text, str):
        raise ArgTypeError("text", str, text)
    _check_as_type(as_type)
    return Present(as_type(text))


def from_int(
    n: int, as_type: Callable[[int], Any] = int
) -> OptionalValue[T]:
    """
    Integer literal to `OptionalValue`, run through `as_type` first.

    ```python
    >>> from_int(20) == present(20)
    True

    >>> from_int(20, float)
    Present(20.0)

    ```
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise ArgTypeError("n", int, n)
    _check_as_type(as_type)
    return Present(as_type(n))


def from_fraction(
    q: FractionalLiteral,
    as_type: Callable[[Any], Any] = float,
) -> OptionalValue[T]:
    """
    Fractional literal to `OptionalValue`, run through `as_type` first.

    ```python
    >>> from_fraction(Fraction(1, 4))
    Present(0.25)

    >>> from_fraction(0.5, Fraction)
    Present(Fraction(1, 2))

    ```
    """
    if not isinstance(q, (float, Fraction, Decimal)):
        raise ArgTypeError("q", FractionalLiteral, q)
    _check_as_type(as_type)
    return Present(as_type(q))


def lifted_identity(as_type: Callable[[], T]) -> OptionalValue[T]:
    """
    Identity of the value-lifting monoid (`combine`): `present` of the
    contained type's own identity, which `as_type()` is expected to build.

    ```python
    >>> lifted_identity(str)
    Present('')

    >>> lifted_identity(list)
    Present([])

    ```
    """
    _check_as_type(as_type)
    return Present(as_type())


# Free-Function Forms
# ============================================================================


def fmap(f: Callable[[T], U], v: OptionalValue[T]) -> OptionalValue[U]:
    return v.map(f)


def bind(
    v: OptionalValue[T], f: Callable[[T], OptionalValue[U]]
) -> OptionalValue[U]:
    return v.bind(f)


def apply(
    vf: OptionalValue[Callable[[T], U]], vx: OptionalValue[T]
) -> OptionalValue[U]:
    return vf.apply(vx)


def lift2(
    f: Callable[[T, U], B], va: OptionalValue[T], vb: OptionalValue[U]
) -> OptionalValue[B]:
    """Lift a binary function over two `OptionalValue`, through `apply`."""
    return va.map(lambda a: lambda b: f(a, b)).apply(vb)


def or_else(a: OptionalValue[T], b: OptionalValue[T]) -> OptionalValue[T]:
    return a.or_else(b)


def first_present(*values: OptionalValue[T]) -> OptionalValue[T]:
    """
    Fold `or_else` over `values`, starting from `Absent`: the first `Present`
    wins.

    ```python
    >>> first_present(absent(), present("env"), present("file"))
    Present('env')

    >>> first_present()
    Absent()

    ```
    """
    return reduce(or_else, values, cast(OptionalValue[T], ABSENT))


def fold(default: B, f: Callable[[T], B], v: OptionalValue[T]) -> B:
    """
    `default` for `Absent`, `f(x)` for `Present(x)`.

    ```python
    >>> older, aged = "You are one year older!", "You are {} years old!".format

    >>> fold(older, aged, present(20))
    'You are 20 years old!'

    >>> fold(older, aged, absent())
    'You are one year older!'

    ```
    """
    return v.fold(default, f)


def value_or(default: T, v: OptionalValue[T]) -> T:
    """
    ```python
    >>> value_or(0, absent())
    0

    >>> value_or(0, present(20))
    20

    ```
    """
    return v.value_or(default)


def to_alternative(v: OptionalValue[T], into: Any) -> Any:
    """
    Convert into another "empty or a single value" kind of thing.

    `into` is either something with `empty()` and `pure(x)` class methods (see
    `Alternative`) or a collection type that builds from an iterable.

    ```python
    >>> to_alternative(present(1), list)
    [1]

    >>> to_alternative(absent(), tuple)
    ()

    >>> to_alternative(present(1), OptionalValue)
    Present(1)

    >>> to_alternative(present(1), dict)
    Traceback (most recent call last):
        ...
    defarg.etc.err.ArgTypeError: Expected `into` to be ...

    ```
    """
    if isinstance(into, Alternative):
        _LOG.debug("converting via Alternative protocol", into=into)
        return v.fold(into.empty(), into.pure)
    if (
        isinstance(into, type)
        and issubclass(into, Collection)
        and not issubclass(into, (str, bytes, bytearray, Mapping))
    ):
        _LOG.debug("converting via collection constructor", into=into)
        return into(v)
    raise ArgTypeError("into", "Alternative | type[Collection]", into)


def to_nullable(v: OptionalValue[T]) -> T | None:
    return v.value_or(None)


# Call-Site Conversion
# ============================================================================


def _optional_arg_type(hint: Any) -> tuple[Any] | None:
    """If `hint` is an `OptionalValue` annotation, return a 1-tuple of the
    contained type (`Any` when unparameterized), otherwise `None`.

    ```python
    >>> _optional_arg_type(OptionalValue[int])
    (<class 'int'>,)

    >>> _optional_arg_type(Present[str] | Absent[str])
    (<class 'str'>,)

    >>> _optional_arg_type(OptionalValue)
    (typing.Any,)

    >>> _optional_arg_type(int) is None
    True

    ```
    """
    if hint in (OptionalValue, Present, Absent):
        return (Any,)
    origin = get_origin(hint)
    if origin in (OptionalValue, Present, Absent):
        args = get_args(hint)
        return (args[0] if args else Any,)
    if origin is Union or origin is UnionType:
        for member in get_args(hint):
            if (found := _optional_arg_type(member)) is not None:
                return found
    return None


def coerce_arg(value: Any, arg_type: Any = Any) -> OptionalValue[Any]:
    """
    Convert a bare argument `value` for an `OptionalValue[arg_type]` parameter.
    This is what `optional_args` does to each such argument.

    1.  `OptionalValue` values pass through.
    2.  `None` is `Absent`.
    3.  Instances of `arg_type` (and anything when `arg_type` isn't a class we
        can check against) are wrapped as they are.
    4.  Literals go through `from_text`, `from_int` or `from_fraction` with
        `as_type=arg_type`, so one layer of wrapper type around `str`, `int`,
        etc. gets built for you. Text only builds `str` types, numbers only
        build number types, and `bool` is never converted.
    5.  The converted value must compare equal to `value`. Anything that would
        truncate, stringify or otherwise change the value raises
        `ArgTypeError`.

    ```python
    >>> class Age(int):
    ...     pass

    >>> coerce_arg(20, Age) == present(Age(20))
    True

    >>> coerce_arg(None, Age)
    Absent()

    >>> coerce_arg("x")
    Present('x')

    >>> coerce_arg(1.5, Age)
    Traceback (most recent call last):
        ...
    defarg.etc.err.ArgTypeError: Expected `value` to be ...

    ```
    """
    if isinstance(value, OptionalValue):
        return value
    if value is None:
        return ABSENT

    check_type = get_origin(arg_type) or arg_type
    if (
        check_type is Any
        or not isinstance(check_type, type)
        or isinstance(value, check_type)
    ):
        return Present(value)

    match value:
        case bool():
            raise ArgTypeError("value", arg_type, value)
        case str(text) if issubclass(check_type, str):
            converted = from_text(text, arg_type)
        case int(n) if issubclass(check_type, Number):
            converted = from_int(n, arg_type)
        case float() | Fraction() | Decimal() if issubclass(check_type, Number):
            converted = from_fraction(value, arg_type)
        case str() | int() | float() | Fraction() | Decimal():
            raise ArgTypeError("value", arg_type, value)
        case _:
            converted = Present(arg_type(value))

    if converted.unwrap() != value:
        raise ArgTypeError("value", arg_type, value)
    return converted


def optional_args(fn: TFn) -> TFn:
    """
    Decorate `fn` so that parameters annotated `OptionalValue[T]` accept bare
    values (see `coerce_arg`), and are `Absent` when omitted with no default
    (or a `None` default).

    ```python
    >>> class Name(str):
    ...     pass

    >>> @optional_args
    ... def greet(name: OptionalValue[Name] = ABSENT) -> str:
    ...     return name.fold(
    ...         "Hello", lambda n: f"Hello, {n} ({type(n).__name__})"
    ...     )

    >>> greet("John")
    'Hello, John (Name)'

    >>> greet()
    'Hello'

    >>> @optional_args
    ... def birthday(age: OptionalValue[int]) -> str:
    ...     return age.fold(
    ...         "You are one year older!",
    ...         lambda a: f"You are {a} years old!",
    ...     )

    >>> birthday(20)
    'You are 20 years old!'

    >>> birthday()
    'You are one year older!'

    ```

    Annotations are resolved on the first call, so forward references work.
    """
    sig = signature(fn)
    arg_types: dict[str, Any] | None = None

    def resolve_arg_types() -> dict[str, Any]:
        hints = get_type_hints(fn)
        found = {}
        for name, param in sig.parameters.items():
            if param.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD):
                continue
            if name in hints and (t := _optional_arg_type(hints[name])):
                found[name] = t[0]
        return found

    @wraps(fn)
    def optional_args_wrapper(*args, **kwds):
        nonlocal arg_types
        if arg_types is None:
            arg_types = resolve_arg_types()
            _LOG.debug(
                "resolved optional parameters",
                fn=fn.__qualname__,
                arg_types=arg_types,
            )

        bound = sig.bind_partial(*args, **kwds)

        for name, arg_type in arg_types.items():
            if name in bound.arguments:
                bound.arguments[name] = coerce_arg(
                    bound.arguments[name], arg_type
                )
            else:
                default = sig.parameters[name].default
                bound.arguments[name] = (
                    ABSENT
                    if default is Parameter.empty
                    else coerce_arg(default, arg_type)
                )

        return fn(*bound.args, **bound.kwargs)

    return cast(TFn, optional_args_wrapper)
