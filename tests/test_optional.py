import copy
import operator
import pickle
from collections import deque
from fractions import Fraction

import pytest

from defarg import (
    ABSENT,
    Absent,
    AbsentValueError,
    ArgTypeError,
    OptionalValue,
    Present,
    absent,
    apply,
    as_optional,
    bind,
    first_present,
    fmap,
    fold,
    from_fraction,
    from_int,
    from_text,
    lifted_identity,
    or_else,
    present,
    to_alternative,
    to_nullable,
    value_or,
)

VALUES = [absent(), present(0), present(3), present(-8)]
FUNCTIONS = [
    lambda x: present(x + 1),
    lambda x: absent(),
    lambda x: present(x * 2) if x > 0 else absent(),
]


def _inc(x: int) -> int:
    return x + 1


def _double(x: int) -> int:
    return x * 2


def _identity(x):
    return x


@pytest.mark.parametrize("v", VALUES)
def test_value_or(v: OptionalValue[int]) -> None:
    """`value_or` gives back the value, or the default when absent."""
    expected = v.unwrap() if v.is_present else 99
    assert value_or(99, v) == expected


@pytest.mark.parametrize("v", VALUES)
def test_fold_with_identity_is_value_or(v: OptionalValue[int]) -> None:
    assert fold(99, _identity, v) == value_or(99, v)


def test_fold_does_not_call_f_when_absent() -> None:
    def explode(x):
        raise AssertionError("should not be called")

    assert fold("default", explode, absent()) == "default"


@pytest.mark.parametrize("v", VALUES)
def test_map_identity(v: OptionalValue[int]) -> None:
    assert fmap(_identity, v) == v


@pytest.mark.parametrize("v", VALUES)
def test_map_composition(v: OptionalValue[int]) -> None:
    assert fmap(lambda x: _double(_inc(x)), v) == fmap(_double, fmap(_inc, v))


@pytest.mark.parametrize("v", VALUES)
@pytest.mark.parametrize("f", FUNCTIONS)
@pytest.mark.parametrize("g", FUNCTIONS)
def test_bind_associativity(v, f, g) -> None:
    assert bind(bind(v, f), g) == bind(v, lambda x: bind(f(x), g))


@pytest.mark.parametrize("x", [0, 3, -8])
@pytest.mark.parametrize("f", FUNCTIONS)
def test_bind_left_identity(x, f) -> None:
    assert bind(present(x), f) == f(x)


@pytest.mark.parametrize("v", VALUES)
def test_bind_right_identity(v) -> None:
    assert bind(v, present) == v


def test_bind_short_circuits() -> None:
    calls = []
    assert absent().bind(lambda x: calls.append(x) or present(x)) == absent()
    assert calls == []


def test_apply_product() -> None:
    assert apply(present(_inc), present(1)) == present(2)
    assert apply(absent(), present(1)) == absent()
    assert apply(present(_inc), absent()) == absent()
    assert apply(absent(), absent()) == absent()


@pytest.mark.parametrize("b", VALUES)
def test_or_else_identity(b) -> None:
    assert or_else(absent(), b) == b
    assert or_else(present("x"), b) == present("x")
    assert or_else(b, absent()) == b


@pytest.mark.parametrize("a", VALUES)
@pytest.mark.parametrize("b", VALUES)
@pytest.mark.parametrize("c", VALUES)
def test_or_else_associativity(a, b, c) -> None:
    assert or_else(or_else(a, b), c) == or_else(a, or_else(b, c))
    assert (a | b) | c == a | (b | c)


def test_or_else_rejects_bare_operand() -> None:
    with pytest.raises(TypeError):
        present(1) | 2  # type: ignore[operator]


def test_first_present() -> None:
    assert first_present(absent(), present(3), present(4)) == present(3)
    assert first_present(absent(), absent()) == absent()


def test_combine_lifts_contained_monoid() -> None:
    assert present("ab").combine(present("cd")) == present("abcd")
    assert present([1]).combine(present([2])) == present([1, 2])
    assert present({1}).combine(present({2}), operator.or_) == present({1, 2})


def test_combine_with_absent_is_absent() -> None:
    assert present("ab").combine(absent()) == absent()
    assert absent().combine(present("ab")) == absent()


def test_combine_identity_is_not_absent() -> None:
    """The value-lifting identity is `present("")`, while the fallback identity
    is `absent()`; they must not be confused."""
    e = lifted_identity(str)
    assert e == present("")
    assert e != absent()
    assert e.combine(present("x")) == present("x")
    assert present("x").combine(e) == present("x")
    assert absent().combine(e) == absent()


@pytest.mark.parametrize(
    "a,b,c",
    [
        (present("a"), present("b"), present("c")),
        (present("a"), absent(), present("c")),
    ],
)
def test_combine_associativity(a, b, c) -> None:
    assert a.combine(b).combine(c) == a.combine(b.combine(c))


def test_arithmetic_propagates_absent() -> None:
    assert present(2) + absent() == absent()
    assert absent() * present(2) == absent()
    assert present(20) - absent() == absent()
    assert present(1) / absent() == absent()


def test_arithmetic_on_present() -> None:
    assert present(2) + present(3) == present(5)
    assert present(2) - present(3) == present(-1)
    assert present(2) * present(3) == present(6)
    assert present(Fraction(1)) / present(4) == present(Fraction(1, 4))


def test_arithmetic_lifts_bare_operands() -> None:
    assert present(2) + 3 == present(5)
    assert 3 + present(2) == present(5)
    assert 10 - present(4) == present(6)
    assert 1 / present(4) == present(0.25)
    assert absent() + 3 == absent()


def test_unary_arithmetic() -> None:
    assert -present(5) == present(-5)
    assert abs(present(-5)) == present(5)
    assert present(-5).signum() == present(-1)
    assert present(0).signum() == present(0)
    assert present(Fraction(-3, 2)).signum() == present(Fraction(-1))
    assert present(4).recip() == present(0.25)
    assert -absent() == absent()
    assert abs(absent()) == absent()
    assert absent().recip() == absent()


def test_signum_of_complex() -> None:
    assert present(3 + 4j).signum() == present(0.6 + 0.8j)
    assert present(-2j).signum() == present(-1j)
    assert present(0j).signum() == present(0j)
    assert abs(present(1j)) == present(1.0)


def test_literal_construction() -> None:
    assert from_int(20) == present(20)
    assert from_text("John") == present("John")
    assert from_fraction(0.5) == present(0.5)
    assert from_fraction(Fraction(1, 3), Fraction) == present(Fraction(1, 3))


def test_literal_construction_through_wrapper() -> None:
    class Name(str):
        pass

    class Age(int):
        pass

    name = from_text("John", Name).unwrap()
    age = from_int(20, Age).unwrap()

    assert type(name) is Name and name == "John"
    assert type(age) is Age and age == 20


@pytest.mark.parametrize(
    "construct,arg",
    [
        (from_text, 1),
        (from_int, "1"),
        (from_int, True),
        (from_int, 1.0),
        (from_fraction, 1),
    ],
)
def test_literal_construction_rejects_wrong_literal(construct, arg) -> None:
    with pytest.raises(ArgTypeError):
        construct(arg)


def test_literal_construction_rejects_non_callable_as_type() -> None:
    with pytest.raises(ArgTypeError):
        from_text("John", "str")  # type: ignore[arg-type]


def test_as_optional() -> None:
    assert as_optional(1) == present(1)
    assert as_optional(present(1)) == present(1)
    assert as_optional(absent()) is ABSENT
    assert as_optional(None) == present(None)


@pytest.mark.parametrize(
    "into,empty,wrapped",
    [
        (list, [], [1]),
        (tuple, (), (1,)),
        (set, set(), {1}),
        (frozenset, frozenset(), frozenset({1})),
        (deque, deque(), deque([1])),
        (OptionalValue, absent(), present(1)),
    ],
)
def test_to_alternative(into, empty, wrapped) -> None:
    assert to_alternative(absent(), into) == empty
    assert to_alternative(present(1), into) == wrapped
    assert present(1).to_alternative(into) == wrapped


def test_to_alternative_custom_target() -> None:
    class Box:
        def __init__(self, *items):
            self.items = items

        @classmethod
        def empty(cls):
            return cls()

        @classmethod
        def pure(cls, value):
            return cls(value)

    assert to_alternative(absent(), Box).items == ()
    assert to_alternative(present("x"), Box).items == ("x",)


@pytest.mark.parametrize("into", [dict, str, bytes, int, "list", None])
def test_to_alternative_rejects_unsupported_targets(into) -> None:
    with pytest.raises(ArgTypeError):
        to_alternative(present(1), into)


def test_to_nullable() -> None:
    assert to_nullable(present(1)) == 1
    assert to_nullable(absent()) is None


def test_equality() -> None:
    assert absent() == absent()
    assert Absent() == ABSENT
    assert present(1) == present(1)
    assert present(1) != present(2)
    assert absent() != present(1)
    assert present(1) != absent()
    assert present(None) != absent()
    assert present(1) != 1
    assert absent() != None  # noqa: E711


@pytest.mark.parametrize("a", VALUES)
@pytest.mark.parametrize("b", VALUES)
def test_equality_is_symmetric_and_hash_consistent(a, b) -> None:
    assert (a == b) == (b == a)
    if a == b:
        assert hash(a) == hash(b)


def test_truthiness_and_iteration() -> None:
    assert present(0)
    assert not absent()
    assert list(present(0)) == [0]
    assert list(absent()) == []
    assert sum(present(5)) == 5


def test_unwrap() -> None:
    assert present(1).unwrap() == 1
    with pytest.raises(AbsentValueError):
        absent().unwrap()
    with pytest.raises(LookupError):
        absent().unwrap()


def test_immutable() -> None:
    v = present(1)
    with pytest.raises(AttributeError):
        v.value = 2  # type: ignore[misc]
    with pytest.raises(AttributeError):
        del v.value
    with pytest.raises(AttributeError):
        absent().value = 2  # type: ignore[attr-defined]


@pytest.mark.parametrize("v", [absent(), present(1), present([1, 2])])
def test_copy_and_pickle(v) -> None:
    assert copy.copy(v) == v
    assert copy.deepcopy(v) == v
    assert pickle.loads(pickle.dumps(v)) == v


def test_closed_over_two_variants() -> None:
    with pytest.raises(TypeError):

        class Maybe(OptionalValue[int]):
            pass


def test_default() -> None:
    assert OptionalValue.default() == absent()
    assert OptionalValue.empty() == absent()
    assert OptionalValue.pure(1) == present(1)


def test_repr() -> None:
    assert repr(present("a")) == "Present('a')"
    assert repr(absent()) == "Absent()"


def test_generic_alias_construction() -> None:
    assert Present[int](1) == present(1)
    assert Absent[int]() == absent()


def test_greet_scenario() -> None:
    def greet(v: OptionalValue[str]) -> str:
        match v:
            case Present(name):
                return "Hello, " + name
            case Absent():
                return "Hello"
        raise AssertionError("unreachable")

    assert greet(present("John")) == "Hello, John"
    assert greet(absent()) == "Hello"


def test_value_or_scenario() -> None:
    assert value_or(0, absent()) == 0
    assert value_or(0, present(20)) == 20
    assert present(20) + absent() == absent()
