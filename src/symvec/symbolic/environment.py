# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Environment - Variable to Number Bindings

An Environment maps variables to floating-point values and evaluates
expressions by plain substitution. No simplification is performed: the
expression is walked once with ``xreplace`` and the resulting number is
converted to a Python float.

Numeric anomalies are values, not errors:
- ``nan``           -> float('nan')
- ``oo`` / ``-oo``  -> float('inf') / float('-inf')
- ``zoo`` (division by zero) -> +inf or -inf, following the sign of the
  numerator when the expression is a ratio (as float division does), +inf
  otherwise
- non-real results (e.g. sqrt(-1)) -> float('nan')

Examples
--------
>>> x, u = make_variables('x u')
>>> env = Environment({x: 2.0})
>>> env[u] = 3.0
>>> env.evaluate(x * u + 1)
7.0
>>> clone = env.copy()
>>> clone[x] = 0.0
>>> env[x]
2.0
"""

import math
from typing import Dict, Iterator, Mapping, Optional

import sympy as sp

from symvec.types.core import Expression, ScalarLike, Variable


class UnboundVariableError(KeyError):
    """Raised when an expression references a variable with no binding"""
    pass


def _to_float(value: sp.Basic) -> float:
    if value is sp.zoo:
        return math.inf
    if value.is_Number:
        return float(value)
    evaluated = value.evalf()
    if evaluated is sp.zoo:
        return math.inf
    if evaluated.is_Number:
        return float(evaluated)
    # complex or otherwise non-real result
    return math.nan


def _pole_value(expr: sp.Basic, values) -> float:
    """Signed infinity for a ratio whose denominator evaluated to zero."""
    numerator, denominator = sp.fraction(expr)
    if denominator == 1:
        return math.inf
    if numerator.xreplace(values).is_extended_negative:
        return -math.inf
    return math.inf


class Environment:
    """
    Binding from variables to numeric values.

    Values are stored as SymPy Floats so substitution produces numbers
    directly. An Environment is cheap to clone with :meth:`copy`; clones
    share nothing mutable.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[Variable, ScalarLike]] = None):
        self._values: Dict[Variable, sp.Float] = {}
        if values:
            for var, value in values.items():
                self.insert(var, value)

    def insert(self, var: Variable, value: ScalarLike) -> None:
        """Add a new binding. Raises KeyError if ``var`` is already bound."""
        if not isinstance(var, sp.Symbol):
            raise TypeError(f"Environment keys must be SymPy symbols, got {type(var).__name__}")
        if var in self._values:
            raise KeyError(f"Variable {var} is already bound in this environment")
        self._values[var] = sp.Float(float(value))

    def __setitem__(self, var: Variable, value: ScalarLike) -> None:
        self._values[var] = sp.Float(float(value))

    def __getitem__(self, var: Variable) -> float:
        try:
            return float(self._values[var])
        except KeyError:
            raise UnboundVariableError(var) from None

    def __contains__(self, var) -> bool:
        return var in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._values)

    def domain(self):
        """Variables bound by this environment."""
        return frozenset(self._values)

    def copy(self) -> "Environment":
        """Return an independent clone."""
        clone = Environment.__new__(Environment)
        clone._values = dict(self._values)
        return clone

    def evaluate(self, expr: Expression) -> float:
        """
        Evaluate an expression against this environment.

        Raises
        ------
        UnboundVariableError
            If the expression references a variable with no binding
        """
        expr = sp.sympify(expr)
        value = expr.xreplace(self._values)
        unbound = value.free_symbols
        if unbound:
            raise UnboundVariableError(
                f"Cannot evaluate {expr}: no binding for {sorted(map(str, unbound))}"
            )
        if value is sp.zoo:
            return _pole_value(expr, self._values)
        return _to_float(value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Environment):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        bindings = ", ".join(f"{var}: {float(val)}" for var, val in self._values.items())
        return f"Environment({{{bindings}}})"


__all__ = ["Environment", "UnboundVariableError"]
