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
Core Types - Fundamental Building Blocks

Defines the basic types shared by the symbolic and numeric halves of a
symbolic vector system:
- Symbolic types (variables, expressions and their ordered vectors)
- Semantic numeric vector types (state, input, output, derivative)
- Callback signatures handed to the host framework

Design Philosophy
----------------
- **Semantic Clarity**: Names convey mathematical meaning
- **NumPy Numerics**: Every numeric vector is a 1-D float64 array
- **SymPy Symbolics**: Variables are SymPy symbols, expressions SymPy expressions

Usage
-----
>>> from symvec.types.core import StateVector, OutputVector
>>>
>>> def read_state(x: StateVector) -> OutputVector:
...     return x.copy()
"""

from typing import TYPE_CHECKING, Callable, Dict, Tuple, Union

import numpy as np
import sympy as sp

if TYPE_CHECKING:
    from symvec.systems.framework.context import SystemContext


# ============================================================================
# Symbolic Types
# ============================================================================

Variable = sp.Symbol
"""
Symbolic variable.

Either a plain SymPy ``Symbol`` (compared by name and assumptions) or a
``Dummy`` created through :func:`symvec.symbolic.make_variable` (compared
by identity).
"""

Expression = sp.Expr
"""Symbolic expression built from variables, constants and operators."""

VariableVector = Tuple[sp.Symbol, ...]
"""Ordered, immutable sequence of variables."""

ExpressionVector = Tuple[sp.Expr, ...]
"""Ordered, immutable sequence of expressions (one per equation)."""

ParameterDict = Dict[sp.Symbol, float]
"""Constant numeric bindings for parameter symbols: {m: 1.0}."""


# ============================================================================
# Numeric Types
# ============================================================================

ScalarLike = Union[float, int, np.number]
"""Scalar numeric value."""

NumericVector = np.ndarray
"""1-D float64 array."""

StateVector = NumericVector
"""
State vector x, shape (nx,).

Continuous state for period == 0, discrete state for period > 0.
"""

InputVector = NumericVector
"""Input vector u, shape (nu,)."""

OutputVector = NumericVector
"""Output vector y, shape (ny,)."""

DerivativeVector = NumericVector
"""Time derivative dx/dt, shape (nx,)."""

InputFunction = Callable[[float], InputVector]
"""Time-varying input u(t) used by the simulator."""


# ============================================================================
# Callback Types
# ============================================================================

CalcCallback = Callable[["SystemContext", NumericVector], None]
"""
Callback computing a vector from a context into a caller-owned sink.

Examples
--------
>>> def calc(context: SystemContext, output: OutputVector) -> None:
...     output[:] = 2.0 * context.get_time()
"""


__all__ = [
    "Variable",
    "Expression",
    "VariableVector",
    "ExpressionVector",
    "ParameterDict",
    "ScalarLike",
    "NumericVector",
    "StateVector",
    "InputVector",
    "OutputVector",
    "DerivativeVector",
    "InputFunction",
    "CalcCallback",
]
