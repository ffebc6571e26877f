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
Variables and Expression Vectors

Helpers between user-supplied SymPy objects and the immutable tuples a
symbolic vector system stores.

Variable identity
-----------------
``sp.symbols('x')`` called twice returns two *equal* symbols, because SymPy
compares plain symbols by name and assumptions. Variables made with
:func:`make_variable` are ``sp.Dummy`` instances and compare by identity,
but print under their plain name:

>>> x1 = make_variable('x')
>>> x2 = make_variable('x')
>>> x1 == x2
False
>>> str(x1 + 1)
'x + 1'
"""

from typing import FrozenSet, Iterable, Optional, Tuple, Union

import numpy as np
import sympy as sp

from symvec.types.core import Expression, ExpressionVector, Variable, VariableVector


class NamedDummy(sp.Dummy):
    """Dummy symbol printed by its name alone (SymPy prefixes plain Dummies with '_')."""

    def _sympystr(self, printer):
        return self.name


def make_variable(name: str, real: bool = True, **assumptions) -> Variable:
    """
    Create a variable with identity semantics.

    Parameters
    ----------
    name : str
        Display name (not used for equality)
    real : bool
        SymPy ``real`` assumption, True by default
    **assumptions
        Further SymPy assumptions (positive=True, ...)

    Returns
    -------
    NamedDummy
    """
    return NamedDummy(name, real=real, **assumptions)


def make_variables(names: Union[str, Iterable[str]], real: bool = True, **assumptions) -> VariableVector:
    """
    Create several variables at once.

    Parameters
    ----------
    names : str or iterable of str
        Either a whitespace/comma separated string ('x y z') or a sequence of names

    Returns
    -------
    tuple of NamedDummy

    Examples
    --------
    >>> x, v = make_variables('x v')
    >>> q = make_variables(['q0', 'q1', 'q2'])
    """
    if isinstance(names, str):
        names = names.replace(",", " ").split()
    return tuple(make_variable(name, real=real, **assumptions) for name in names)


def _flatten(items) -> Tuple:
    if items is None:
        return ()
    if isinstance(items, sp.MatrixBase):
        rows, cols = items.shape
        if rows > 1 and cols > 1:
            raise ValueError(
                f"Expected a row or column vector, got a {rows}x{cols} matrix"
            )
        return tuple(items)
    if isinstance(items, np.ndarray):
        if items.ndim > 1 and min(items.shape) > 1:
            raise ValueError(f"Expected a 1-D array, got shape {items.shape}")
        return tuple(items.ravel())
    if isinstance(items, (sp.Basic, str)):
        return (items,)
    return tuple(items)


def as_variable_vector(items) -> VariableVector:
    """
    Normalize a variable sequence into a tuple.

    Accepts None, a single symbol, lists/tuples, NumPy object arrays and
    SymPy row/column matrices. Entries are not type-checked here; the
    validator reports non-symbol entries.
    """
    return _flatten(items)


def as_expression_vector(items) -> ExpressionVector:
    """
    Normalize an expression sequence into a tuple.

    Python and NumPy numbers become SymPy numbers so that constant
    equations (``[0.0, 1]``) are valid expressions. Other entries are kept
    as given and type-checked by the validator.
    """
    expressions = []
    for item in _flatten(items):
        if isinstance(item, (bool, np.bool_)):
            expressions.append(item)
        elif isinstance(item, (int, float, np.number)):
            expressions.append(sp.sympify(item))
        else:
            expressions.append(item)
    return tuple(expressions)


def as_optional_variable(item) -> Optional[Variable]:
    """Normalize the time variable: None, a symbol, or a 1-element vector."""
    if item is None:
        return None
    if isinstance(item, sp.Basic):
        return item
    entries = _flatten(item)
    if len(entries) == 0:
        return None
    if len(entries) > 1:
        raise ValueError(f"At most one time variable may be declared, got {len(entries)}")
    return entries[0]


def get_variables(expr: Expression) -> FrozenSet[Variable]:
    """Return the set of variables referenced by an expression."""
    return frozenset(expr.free_symbols)


__all__ = [
    "NamedDummy",
    "make_variable",
    "make_variables",
    "as_variable_vector",
    "as_expression_vector",
    "as_optional_variable",
    "get_variables",
]
