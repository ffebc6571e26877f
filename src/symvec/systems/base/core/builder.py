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
Fluent builder for SymbolicVectorSystem.

>>> t, x, u = make_variables('t x u')
>>> system = (
...     SymbolicVectorSystemBuilder()
...     .time(t)
...     .state(x)
...     .input(u)
...     .dynamics(-x + sp.sin(t) * u)
...     .output(x)
...     .build()
... )
"""

from typing import Dict, Mapping, Optional

import sympy as sp

from symvec.systems.base.core.symbolic_vector_system import SymbolicVectorSystem
from symvec.types.core import Variable


def _as_list(items) -> list:
    if items is None:
        return []
    if isinstance(items, sp.MatrixBase):
        return list(items)
    if isinstance(items, (sp.Basic, int, float)):
        return [items]
    return list(items)


class SymbolicVectorSystemBuilder:
    """
    Collects the pieces of a SymbolicVectorSystem one call at a time.

    Each setter replaces what was set before and returns the builder.
    Setters accept either a single item or a sequence (list, tuple, Matrix).
    Nothing is validated until :meth:`build`.
    """

    def __init__(self):
        self._time_var: Optional[Variable] = None
        self._state_vars: list = []
        self._input_vars: list = []
        self._dynamics: list = []
        self._output: list = []
        self._time_period = 0.0
        self._parameters: Dict[Variable, float] = {}

    def time(self, var: Variable) -> "SymbolicVectorSystemBuilder":
        self._time_var = var
        return self

    def state(self, variables) -> "SymbolicVectorSystemBuilder":
        self._state_vars = _as_list(variables)
        return self

    def input(self, variables) -> "SymbolicVectorSystemBuilder":
        self._input_vars = _as_list(variables)
        return self

    def dynamics(self, expressions) -> "SymbolicVectorSystemBuilder":
        self._dynamics = _as_list(expressions)
        return self

    def output(self, expressions) -> "SymbolicVectorSystemBuilder":
        self._output = _as_list(expressions)
        return self

    def time_period(self, period: float) -> "SymbolicVectorSystemBuilder":
        self._time_period = period
        return self

    def parameters(self, values: Mapping[Variable, float]) -> "SymbolicVectorSystemBuilder":
        self._parameters = dict(values)
        return self

    def build(self) -> SymbolicVectorSystem:
        """
        Construct the system.

        Raises
        ------
        ValidationError
            If the collected definition is malformed
        """
        return SymbolicVectorSystem(
            time_var=self._time_var,
            state_vars=self._state_vars,
            input_vars=self._input_vars,
            dynamics=self._dynamics,
            output=self._output,
            time_period=self._time_period,
            parameters=self._parameters,
        )

    def __repr__(self) -> str:
        return (
            f"SymbolicVectorSystemBuilder(time={self._time_var}, "
            f"state={self._state_vars}, input={self._input_vars}, "
            f"time_period={self._time_period})"
        )


__all__ = ["SymbolicVectorSystemBuilder"]
