"""
Deferred-assertion matcher.

An Expect wraps either an Immediate value or a Deferred producer. Comparing
an Immediate returns a bool right away. Comparing a Deferred returns a
zero-argument evaluator that re-reads the producer every time it is called,
so constraints declared up front still see live state.

Example:
    >>> Expect(5).gt(3)
    True
    >>> check = Expect(lambda: store.get("light")).is_("purple")
    >>> check()   # reads the store now
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Union


class _Undefined:
    """Sentinel for "no value at all" (distinct from None)."""

    _instance = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


@dataclass(frozen=True)
class Immediate:
    """A value captured when the Expect was built."""

    value: Any

    def read(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Deferred:
    """A producer called every time the comparison is evaluated."""

    producer: Callable[[], Any]

    def read(self) -> Any:
        return self.producer()


Source = Union[Immediate, Deferred]
Evaluator = Callable[[], bool]


def strict_equal(actual: Any, expected: Any) -> bool:
    """Same object, or same type and equal (no cross-type coercion)."""
    if actual is expected:
        return True
    return type(actual) is type(expected) and actual == expected


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _matches(value: Any, pattern: Union[str, "re.Pattern[str]"]) -> bool:
    if not isinstance(value, str):
        return False
    return re.search(pattern, value) is not None


# Comparison name -> predicate(actual, *expected)
_COMPARISONS = {
    "to_be": lambda actual, expected: strict_equal(actual, expected),
    "to_be_defined": lambda actual: actual is not UNDEFINED,
    "to_be_undefined": lambda actual: actual is UNDEFINED,
    "to_be_falsy": lambda actual: not actual,
    "to_be_truthy": lambda actual: bool(actual),
    "to_be_none": lambda actual: actual is None,
    "to_be_nan": _is_nan,
    "to_be_greater_than": lambda actual, expected: actual > expected,
    "to_be_greater_than_or_equal": lambda actual, expected: actual >= expected,
    "to_be_less_than": lambda actual, expected: actual < expected,
    "to_be_less_than_or_equal": lambda actual, expected: actual <= expected,
    "to_contain": lambda actual, expected: expected in actual,
    "to_equal": lambda actual, expected: actual == expected,
    "to_match": _matches,
}

ALIASES = {
    "is_": "to_be",
    "is_defined": "to_be_defined",
    "is_undefined": "to_be_undefined",
    "is_falsy": "to_be_falsy",
    "is_truthy": "to_be_truthy",
    "is_none": "to_be_none",
    "is_nan": "to_be_nan",
    "gt": "to_be_greater_than",
    "gte": "to_be_greater_than_or_equal",
    "lt": "to_be_less_than",
    "lte": "to_be_less_than_or_equal",
    "contain": "to_contain",
    "equal": "to_equal",
    "match": "to_match",
}

COMPARATORS = frozenset(_COMPARISONS) | frozenset(ALIASES)


class Expect:
    """
    Comparator over an Immediate value or a Deferred producer.

    Args:
        value: The value to check, or a zero-argument producer
        deferred: Force Deferred (True) or Immediate (False) handling. By
            default callables are Deferred and everything else Immediate.
        negate: Invert every result
    """

    def __init__(
        self,
        value: Any = UNDEFINED,
        deferred: bool | None = None,
        negate: bool = False,
    ) -> None:
        if isinstance(value, (Immediate, Deferred)):
            self.source: Source = value
        else:
            if deferred is None:
                deferred = callable(value)
            if deferred and not callable(value):
                raise TypeError("A deferred Expect needs a zero-argument callable")
            self.source = Deferred(value) if deferred else Immediate(value)
        self.negate = negate

    @classmethod
    def deferred(cls, producer: Callable[[], Any]) -> "Expect":
        """Build an Expect that re-reads producer on every evaluation."""
        return cls(Deferred(producer))

    @property
    def is_deferred(self) -> bool:
        return isinstance(self.source, Deferred)

    @property
    def not_(self) -> "Expect":
        """An equivalent Expect with negated results."""
        return Expect(self.source, negate=not self.negate)

    def _compare(self, name: str, *args: Any) -> Union[bool, Evaluator]:
        predicate = _COMPARISONS[name]
        source = self.source
        negate = self.negate

        def evaluate() -> bool:
            result = bool(predicate(source.read(), *args))
            return not result if negate else result

        if isinstance(source, Deferred):
            return evaluate
        return evaluate()

    # Comparators

    def to_be(self, expected: Any) -> Union[bool, Evaluator]:
        return self._compare("to_be", expected)

    def to_be_defined(self) -> Union[bool, Evaluator]:
        return self._compare("to_be_defined")

    def to_be_undefined(self) -> Union[bool, Evaluator]:
        return self._compare("to_be_undefined")

    def to_be_falsy(self) -> Union[bool, Evaluator]:
        return self._compare("to_be_falsy")

    def to_be_truthy(self) -> Union[bool, Evaluator]:
        return self._compare("to_be_truthy")

    def to_be_none(self) -> Union[bool, Evaluator]:
        return self._compare("to_be_none")

    def to_be_nan(self) -> Union[bool, Evaluator]:
        return self._compare("to_be_nan")

    def to_be_greater_than(self, expected: Any) -> Union[bool, Evaluator]:
        return self._compare("to_be_greater_than", expected)

    def to_be_greater_than_or_equal(self, expected: Any) -> Union[bool, Evaluator]:
        return self._compare("to_be_greater_than_or_equal", expected)

    def to_be_less_than(self, expected: Any) -> Union[bool, Evaluator]:
        return self._compare("to_be_less_than", expected)

    def to_be_less_than_or_equal(self, expected: Any) -> Union[bool, Evaluator]:
        return self._compare("to_be_less_than_or_equal", expected)

    def to_contain(self, expected: Any) -> Union[bool, Evaluator]:
        return self._compare("to_contain", expected)

    def to_equal(self, expected: Any) -> Union[bool, Evaluator]:
        return self._compare("to_equal", expected)

    def to_match(self, pattern: Union[str, "re.Pattern[str]"]) -> Union[bool, Evaluator]:
        return self._compare("to_match", pattern)

    # Short aliases
    is_ = to_be
    is_defined = to_be_defined
    is_undefined = to_be_undefined
    is_falsy = to_be_falsy
    is_truthy = to_be_truthy
    is_none = to_be_none
    is_nan = to_be_nan
    gt = to_be_greater_than
    gte = to_be_greater_than_or_equal
    lt = to_be_less_than
    lte = to_be_less_than_or_equal
    contain = to_contain
    equal = to_equal
    match = to_match

    def __repr__(self) -> str:
        prefix = "not " if self.negate else ""
        return f"Expect({prefix}{self.source!r})"


def expect(value: Any = UNDEFINED) -> Expect:
    """Shortcut for Expect(value)."""
    return Expect(value)
