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
symvec - Symbolic Vector Systems
================================

Dynamical systems whose dynamics and outputs are SymPy expressions,
evaluated numerically against a simulation context.

Quick Start
-----------
>>> from symvec import SymbolicVectorSystem, Simulator, make_variables
>>>
>>> t, x = make_variables('t x')
>>> system = SymbolicVectorSystem(time_var=t, state_vars=[x], dynamics=[-x])
>>>
>>> context = system.create_default_context()
>>> context.set_continuous_state([2.0])
>>> system.eval_time_derivatives(context)
array([-2.])
>>>
>>> result = Simulator(system).simulate(t_span=(0.0, 1.0), x0=[1.0])

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

from symvec.symbolic import Environment, UnboundVariableError, make_variable, make_variables
from symvec.systems.base.core import SymbolicVectorSystem, SymbolicVectorSystemBuilder
from symvec.systems.base.numerical_integration import Simulator
from symvec.systems.base.utils.expression_evaluator import EvaluationError
from symvec.systems.base.utils.symbolic_validator import ValidationError
from symvec.systems.framework import SystemContext
from symvec.types import ContinuousTime, DiscreteTime, SimulationResult

__version__ = "0.1.0"

__all__ = [
    "Environment",
    "UnboundVariableError",
    "make_variable",
    "make_variables",
    "SymbolicVectorSystem",
    "SymbolicVectorSystemBuilder",
    "Simulator",
    "EvaluationError",
    "ValidationError",
    "SystemContext",
    "ContinuousTime",
    "DiscreteTime",
    "SimulationResult",
]
