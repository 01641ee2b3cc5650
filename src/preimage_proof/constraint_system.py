"""Rank-1 constraint system abstraction shared by gadgets and proving backends.

A constraint ``enforce(a, b, c)`` states ``<a, w> * <b, w> = <c, w>`` for the
assignment ``w``. Variables are split into public inputs (``ONE`` is input 0)
and auxiliary witnesses. Values are ``Optional[int]``: ``None`` stands for an
unknown value while only the circuit shape is being recorded.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Protocol, Tuple, Union

from .errors import DuplicatePathError


@dataclass(frozen=True, slots=True)
class Variable:
    index: int
    is_input: bool

    def __mul__(self, coeff: int) -> "LinearCombination":
        return LinearCombination({self: coeff})

    __rmul__ = __mul__

    def __add__(self, other: "Term") -> "LinearCombination":
        return LinearCombination({self: 1}) + other

    def __sub__(self, other: "Term") -> "LinearCombination":
        return LinearCombination({self: 1}) - other


class LinearCombination:
    """Sparse linear combination of variables with integer coefficients."""

    __slots__ = ("terms",)

    def __init__(self, terms: Optional[Dict[Variable, int]] = None) -> None:
        self.terms: Dict[Variable, int] = dict(terms) if terms else {}

    def add_term(self, var: Variable, coeff: int) -> None:
        self.terms[var] = self.terms.get(var, 0) + coeff

    def _merge(self, other: "Term", sign: int) -> None:
        if isinstance(other, Variable):
            self.add_term(other, sign)
        elif isinstance(other, LinearCombination):
            for var, coeff in other.terms.items():
                self.add_term(var, sign * coeff)
        else:
            raise TypeError(f"Cannot combine LinearCombination with {type(other).__name__}")

    def __add__(self, other: "Term") -> "LinearCombination":
        out = LinearCombination(self.terms)
        out._merge(other, 1)
        return out

    def __sub__(self, other: "Term") -> "LinearCombination":
        out = LinearCombination(self.terms)
        out._merge(other, -1)
        return out

    def __iadd__(self, other: "Term") -> "LinearCombination":
        self._merge(other, 1)
        return self

    def __isub__(self, other: "Term") -> "LinearCombination":
        self._merge(other, -1)
        return self

    def __mul__(self, coeff: int) -> "LinearCombination":
        return LinearCombination({var: c * coeff for var, c in self.terms.items()})

    __rmul__ = __mul__

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self) -> Iterator[Tuple[Variable, int]]:
        return iter(self.terms.items())

    def __repr__(self) -> str:
        return f"LinearCombination({self.terms!r})"

    def evaluate(self, value_of: Callable[[Variable], Optional[int]], modulus: int) -> Optional[int]:
        total = 0
        for var, coeff in self.terms.items():
            value = value_of(var)
            if value is None:
                return None
            total += coeff * value
        return total % modulus


Term = Union[Variable, LinearCombination]


class ConstraintSystem:
    """Base class handling namespaces; subclasses decide what gets recorded."""

    ONE = Variable(0, True)

    def __init__(self, modulus: int) -> None:
        self.modulus = modulus
        self._scope: List[str] = []

    @property
    def capacity(self) -> int:
        """Bits that pack into one field element without wrapping."""
        return self.modulus.bit_length() - 1

    @contextmanager
    def namespace(self, name: str) -> Iterator["ConstraintSystem"]:
        if "/" in name:
            raise ValueError(f"Namespace names may not contain '/': {name!r}")
        self._scope.append(name)
        try:
            yield self
        finally:
            self._scope.pop()

    def path(self, annotation: str) -> str:
        if "/" in annotation:
            raise ValueError(f"Annotations may not contain '/': {annotation!r}")
        return "/".join([*self._scope, annotation])

    def alloc(self, annotation: str, value: Optional[int]) -> Variable:
        raise NotImplementedError

    def alloc_input(self, annotation: str, value: Optional[int]) -> Variable:
        raise NotImplementedError

    def enforce(self, annotation: str, a: LinearCombination, b: LinearCombination, c: LinearCombination) -> None:
        raise NotImplementedError


class Circuit(Protocol):
    def synthesize(self, cs: ConstraintSystem) -> None: ...


@dataclass(slots=True)
class _Constraint:
    path: str
    a: LinearCombination
    b: LinearCombination
    c: LinearCombination


class RecordingConstraintSystem(ConstraintSystem):
    """Constraint system that keeps every named value for inspection.

    It never fails on unknown values, so it can record the setup shape of a
    circuit as well as check a fully assigned witness.
    """

    def __init__(self, modulus: int) -> None:
        super().__init__(modulus)
        self._inputs: List[Optional[int]] = [1]
        self._aux: List[Optional[int]] = []
        self._named: Dict[str, Variable] = {"ONE": self.ONE}
        self._constraints: List[_Constraint] = []
        self._paths = {"ONE"}

    def _claim(self, path: str) -> None:
        if path in self._paths:
            raise DuplicatePathError(f"Path already exists: {path}")
        self._paths.add(path)

    def alloc(self, annotation: str, value: Optional[int]) -> Variable:
        path = self.path(annotation)
        self._claim(path)
        var = Variable(len(self._aux), False)
        self._aux.append(None if value is None else value % self.modulus)
        self._named[path] = var
        return var

    def alloc_input(self, annotation: str, value: Optional[int]) -> Variable:
        path = self.path(annotation)
        self._claim(path)
        var = Variable(len(self._inputs), True)
        self._inputs.append(None if value is None else value % self.modulus)
        self._named[path] = var
        return var

    def enforce(self, annotation: str, a: LinearCombination, b: LinearCombination, c: LinearCombination) -> None:
        path = self.path(annotation)
        self._claim(path)
        self._constraints.append(_Constraint(path, a, b, c))

    def _value(self, var: Variable) -> Optional[int]:
        return self._inputs[var.index] if var.is_input else self._aux[var.index]

    @property
    def num_constraints(self) -> int:
        return len(self._constraints)

    @property
    def num_inputs(self) -> int:
        return len(self._inputs)

    @property
    def num_aux(self) -> int:
        return len(self._aux)

    def constraint_paths(self) -> List[str]:
        return [constraint.path for constraint in self._constraints]

    def constraints(self) -> Iterator[Tuple[LinearCombination, LinearCombination, LinearCombination]]:
        for constraint in self._constraints:
            yield constraint.a, constraint.b, constraint.c

    def aux_values(self) -> List[Optional[int]]:
        return list(self._aux)

    def first_unassigned(self) -> Optional[str]:
        """Path of the first variable allocated without a value."""
        for path, var in self._named.items():
            if self._value(var) is None:
                return path
        return None

    def input_values(self) -> List[Optional[int]]:
        """Public input values, excluding the constant ``ONE``."""
        return list(self._inputs[1:])

    def get(self, path: str) -> Optional[int]:
        try:
            var = self._named[path]
        except KeyError:
            raise KeyError(f"No variable at path {path!r}") from None
        return self._value(var)

    def set(self, path: str, value: int) -> None:
        try:
            var = self._named[path]
        except KeyError:
            raise KeyError(f"No variable at path {path!r}") from None
        if var.is_input:
            self._inputs[var.index] = value % self.modulus
        else:
            self._aux[var.index] = value % self.modulus

    def which_is_unsatisfied(self) -> Optional[str]:
        for constraint in self._constraints:
            a = constraint.a.evaluate(self._value, self.modulus)
            b = constraint.b.evaluate(self._value, self.modulus)
            c = constraint.c.evaluate(self._value, self.modulus)
            if a is None or b is None or c is None:
                return constraint.path
            if a * b % self.modulus != c:
                return constraint.path
        return None

    def is_satisfied(self) -> bool:
        return self.which_is_unsatisfied() is None
