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
Type system for symvec.

>>> from symvec.types import StateVector, DiscreteTime, SimulationResult
"""

from .core import (
    CalcCallback,
    DerivativeVector,
    Expression,
    ExpressionVector,
    InputFunction,
    InputVector,
    NumericVector,
    OutputVector,
    ParameterDict,
    ScalarLike,
    StateVector,
    Variable,
    VariableVector,
)
from .results import SimulationResult
from .timing import ContinuousTime, DiscreteTime, TimingMode, timing_from_period

__all__ = [
    "CalcCallback",
    "DerivativeVector",
    "Expression",
    "ExpressionVector",
    "InputFunction",
    "InputVector",
    "NumericVector",
    "OutputVector",
    "ParameterDict",
    "ScalarLike",
    "StateVector",
    "Variable",
    "VariableVector",
    "SimulationResult",
    "ContinuousTime",
    "DiscreteTime",
    "TimingMode",
    "timing_from_period",
]
