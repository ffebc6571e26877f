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
Symbolic Vector System
======================

A dynamical system whose state-transition and output functions are given
as SymPy expressions over declared variables rather than as Python code.

Overview
--------
SymbolicVectorSystem stores
- an optional time variable t,
- state variables x (zero or more),
- input variables u (zero or more),
- dynamics expressions f (one per state variable, or none),
- output expressions h (zero or more),
- an update period (0 -> continuous time, > 0 -> discrete time),

and evaluates them numerically against a SystemContext:

**Continuous Systems (time_period == 0):**
- dx/dt = f(t, x, u)
- y = h(t, x, u)

**Discrete Systems (time_period > 0):**
- x[k+1] = f(t, x[k], u)   applied every time_period seconds, phase 0
- y = h(t, x, u)

Architecture
-----------
SymbolicVectorSystem uses composition for its specialized tasks:

- **SymbolicValidator**: Structural checks at construction
- **SystemDeclarations**: Input port, state storage, periodic update, output port
- **EnvironmentBinder**: Environment template + context -> variable bindings
- **ExpressionEvaluator**: Output, derivative and update evaluation
- **FeedthroughAnalyzer**: Structural input -> output dependency queries

Construction validates once; the per-step evaluation path runs no
structural checks. The system is immutable after construction and keeps no
mutable state across evaluation calls.

Usage Example
-------------
```python
from symvec import SymbolicVectorSystem, make_variables

t, x, u = make_variables('t x u')
system = SymbolicVectorSystem(
    time_var=t,
    state_vars=[x],
    input_vars=[u],
    dynamics=[-x + u],
    output=[x],
)

context = system.create_default_context()
context.set_continuous_state([2.0])
context.fix_input_port(0, [0.5])
system.eval_time_derivatives(context)   # array([-1.5])
```
"""

import logging
from typing import Dict, Mapping, Optional

import numpy as np

from symvec.symbolic.variables import (
    as_expression_vector,
    as_optional_variable,
    as_variable_vector,
)
from symvec.systems.base.utils.environment_binder import EnvironmentBinder
from symvec.systems.base.utils.expression_evaluator import ExpressionEvaluator
from symvec.systems.base.utils.feedthrough_analyzer import FeedthroughAnalyzer
from symvec.systems.base.utils.symbolic_validator import SymbolicValidator, ValidationResult
from symvec.systems.framework.context import SystemContext
from symvec.systems.framework.declarations import (
    InputPort,
    OutputPort,
    PeriodicUpdate,
    SystemDeclarations,
)
from symvec.types.core import (
    DerivativeVector,
    Expression,
    ExpressionVector,
    OutputVector,
    StateVector,
    Variable,
    VariableVector,
)
from symvec.types.timing import TimingMode, timing_from_period

logger = logging.getLogger(__name__)


class SymbolicVectorSystem:
    """
    Dynamical system defined by symbolic dynamics and output expressions.

    Parameters
    ----------
    time_var : sp.Symbol, optional
        Variable bound to the simulation time
    state_vars : sequence of sp.Symbol or sp.Matrix
        State variables, in state-vector order
    input_vars : sequence of sp.Symbol or sp.Matrix
        Input variables, in input-port order
    dynamics : sequence of expressions or sp.Matrix
        dx/dt (continuous) or x[k+1] (discrete), one per state variable;
        may be empty
    output : sequence of expressions or sp.Matrix
        Output expressions; may be empty if dynamics are given
    time_period : float
        0 for continuous time, > 0 for the discrete update period
    parameters : dict, optional
        Constant numeric values for parameter symbols: {m: 1.0}

    Raises
    ------
    ValidationError
        If the definition is malformed (see SymbolicValidator)

    Examples
    --------
    >>> x, = make_variables('x')
    >>> system = SymbolicVectorSystem(state_vars=[x], dynamics=[x + 1], time_period=0.1)
    >>> system.is_discrete
    True
    >>> system.periodic_update
    PeriodicUpdate(period=0.1, offset=0.0)
    """

    def __init__(
        self,
        time_var: Optional[Variable] = None,
        state_vars=(),
        input_vars=(),
        dynamics=(),
        output=(),
        time_period: float = 0.0,
        parameters: Optional[Mapping[Variable, float]] = None,
    ):
        self._time_var: Optional[Variable] = as_optional_variable(time_var)
        self._state_vars: VariableVector = as_variable_vector(state_vars)
        self._input_vars: VariableVector = as_variable_vector(input_vars)
        self._dynamics: ExpressionVector = as_expression_vector(dynamics)
        self._output: ExpressionVector = as_expression_vector(output)
        self._parameters: Dict[Variable, float] = dict(parameters or {})
        self._time_period = time_period

        self._validation: ValidationResult = SymbolicValidator(self).validate(raise_on_error=True)

        self._time_period = float(time_period)
        self._parameters = {var: float(value) for var, value in self._parameters.items()}
        self._timing: TimingMode = timing_from_period(self._time_period)

        self._declarations = SystemDeclarations()
        self._declare_ports_and_state()

        self._binder = EnvironmentBinder(self)
        self._evaluator = ExpressionEvaluator(self, self._binder)
        self._feedthrough = FeedthroughAnalyzer(self)

        logger.debug(
            "Constructed %s: nx=%d, nu=%d, ny=%d, time_period=%g",
            type(self).__name__, self.nx, self.nu, self.ny, self._time_period,
        )

    def _declare_ports_and_state(self) -> None:
        decl = self._declarations
        if self._input_vars:
            decl.declare_input_port(len(self._input_vars))
        if self._state_vars:
            if self._timing.is_continuous:
                decl.declare_continuous_state(len(self._state_vars))
            else:
                decl.declare_discrete_state(len(self._state_vars))
                decl.declare_periodic_discrete_update(self._time_period, 0.0)
        if self._output:
            decl.declare_vector_output_port(len(self._output), self.calc_output)

    # ========================================================================
    # String Representations
    # ========================================================================

    def __repr__(self) -> str:
        """
        Return detailed string representation for debugging.

        Examples
        --------
        >>> repr(system)
        'SymbolicVectorSystem(nx=1, nu=1, ny=1, time_period=0.0)'
        """
        return (
            f"{self.__class__.__name__}("
            f"nx={self.nx}, nu={self.nu}, ny={self.ny}, time_period={self._time_period})"
        )

    def __str__(self) -> str:
        mode = "continuous" if self.is_continuous else f"discrete, dt={self._time_period}"
        return (
            f"{self.__class__.__name__}({mode}): "
            f"x={list(self._state_vars)}, u={list(self._input_vars)}, ny={self.ny}"
        )

    # ========================================================================
    # Symbolic Accessors
    # ========================================================================

    @property
    def time_var(self) -> Optional[Variable]:
        return self._time_var

    @property
    def state_vars(self) -> VariableVector:
        return self._state_vars

    @property
    def input_vars(self) -> VariableVector:
        return self._input_vars

    @property
    def dynamics(self) -> ExpressionVector:
        return self._dynamics

    @property
    def output(self) -> ExpressionVector:
        return self._output

    @property
    def parameters(self) -> Dict[Variable, float]:
        """Copy of the parameter values."""
        return dict(self._parameters)

    def dynamics_for_variable(self, var: Variable) -> Expression:
        """
        Dynamics expression governing a state variable.

        Raises
        ------
        RuntimeError
            If the system has no dynamics
        KeyError
            If ``var`` is not a state variable
        """
        if not self._dynamics:
            raise RuntimeError("System has no dynamics expressions")
        for state_var, expr in zip(self._state_vars, self._dynamics):
            if state_var == var:
                return expr
        raise KeyError(f"{var} is not a state variable of this system")

    # ========================================================================
    # Dimensions and Timing
    # ========================================================================

    @property
    def nx(self) -> int:
        """Number of state variables."""
        return len(self._state_vars)

    @property
    def nu(self) -> int:
        """Number of input variables."""
        return len(self._input_vars)

    @property
    def ny(self) -> int:
        """Number of output expressions."""
        return len(self._output)

    @property
    def time_period(self) -> float:
        return self._time_period

    @property
    def timing(self) -> TimingMode:
        return self._timing

    @property
    def is_continuous(self) -> bool:
        return self._timing.is_continuous

    @property
    def is_discrete(self) -> bool:
        return self._timing.is_discrete

    @property
    def validation_result(self) -> ValidationResult:
        return self._validation

    # ========================================================================
    # Framework Declarations
    # ========================================================================

    @property
    def declarations(self) -> SystemDeclarations:
        return self._declarations

    @property
    def periodic_update(self) -> Optional[PeriodicUpdate]:
        """(period, offset) of the discrete update, None for continuous systems."""
        return self._declarations.periodic_update

    def get_input_port(self) -> InputPort:
        if self._declarations.input_port is None:
            raise RuntimeError("System has no input port (no input variables)")
        return self._declarations.input_port

    def get_output_port(self) -> OutputPort:
        if self._declarations.output_port is None:
            raise RuntimeError("System has no output port (no output expressions)")
        return self._declarations.output_port

    def create_default_context(self) -> SystemContext:
        """Context with time 0, zero state and unconnected inputs."""
        return self._declarations.create_context()

    # ========================================================================
    # Evaluation (callbacks invoked by the host framework)
    # ========================================================================

    def calc_output(self, context: SystemContext, output: OutputVector) -> None:
        """Evaluate y = h(t, x, u) into ``output``."""
        self._evaluator.calc_output(context, output)

    def calc_time_derivatives(self, context: SystemContext, derivatives: DerivativeVector) -> None:
        """Evaluate dx/dt = f(t, x, u) into ``derivatives`` (continuous only)."""
        self._evaluator.calc_time_derivatives(context, derivatives)

    def calc_discrete_variable_updates(self, context: SystemContext, next_state: StateVector) -> None:
        """Evaluate x[k+1] = f(t, x[k], u) into ``next_state`` (discrete only)."""
        self._evaluator.calc_discrete_update(context, next_state)

    def eval_output(self, context: SystemContext) -> OutputVector:
        output = np.zeros(self.ny)
        self.calc_output(context, output)
        return output

    def eval_time_derivatives(self, context: SystemContext) -> DerivativeVector:
        derivatives = np.zeros(self.nx)
        self.calc_time_derivatives(context, derivatives)
        return derivatives

    def eval_discrete_update(self, context: SystemContext) -> StateVector:
        next_state = np.zeros(self.nx)
        self.calc_discrete_variable_updates(context, next_state)
        return next_state

    # ========================================================================
    # Feedthrough
    # ========================================================================

    def has_direct_feedthrough(self, input_port: int = 0, output_port: int = 0) -> bool:
        """Whether the output port depends directly on the input port."""
        return self._feedthrough.has_direct_feedthrough(input_port, output_port)

    def feedthrough_matrix(self) -> np.ndarray:
        """Boolean (ny, nu) structural dependency matrix of outputs on inputs."""
        return self._feedthrough.feedthrough_matrix()

    # ========================================================================
    # Display
    # ========================================================================

    def print_equations(self):
        """
        Print the symbolic equations (not simplified).

        Examples
        --------
        >>> system.print_equations()
        ======================================================================
        SymbolicVectorSystem (Continuous-Time)
        ======================================================================
        Time Variable: t
        State Variables: [x]
        Input Variables: [u]
        Dimensions: nx=1, nu=1, ny=1

        Dynamics: dx/dt = f(t, x, u)
          dx/dt = -x + u

        Output: y = h(t, x, u)
          y[0] = x
        ======================================================================
        """
        if self.is_continuous:
            print("=" * 70)
            print(f"{self.__class__.__name__} (Continuous-Time)")
        else:
            print("=" * 70)
            print(f"{self.__class__.__name__} (Discrete-Time, dt={self._time_period})")
        print("=" * 70)
        print(f"Time Variable: {self._time_var}")
        print(f"State Variables: {list(self._state_vars)}")
        print(f"Input Variables: {list(self._input_vars)}")
        if self._parameters:
            print(f"Parameters: {self._parameters}")
        print(f"Dimensions: nx={self.nx}, nu={self.nu}, ny={self.ny}")

        if self._dynamics:
            if self.is_continuous:
                print("\nDynamics: dx/dt = f(t, x, u)")
                for var, expr in zip(self._state_vars, self._dynamics):
                    print(f"  d{var}/dt = {expr}")
            else:
                print("\nDynamics: x[k+1] = f(t, x[k], u)")
                for var, expr in zip(self._state_vars, self._dynamics):
                    print(f"  {var}[k+1] = {expr}")

        if self._output:
            print("\nOutput: y = h(t, x, u)")
            for i, expr in enumerate(self._output):
                print(f"  y[{i}] = {expr}")
        print("=" * 70)


__all__ = ["SymbolicVectorSystem"]
