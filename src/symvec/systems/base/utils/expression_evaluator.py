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
Expression Evaluator for SymbolicVectorSystem

Evaluates the dynamics and output expression vectors of a system against a
context.

Responsibilities:
- Output evaluation: y = h(t, x, u)
- Continuous dynamics: dx/dt = f(t, x, u)   (period == 0 only)
- Discrete dynamics: x[k+1] = f(t, x[k], u) (period > 0 only)
- Entry-point checks (wrong timing mode, empty expression vector)

Every call clones the binder's template, populates it and substitutes it
into each expression in order. Numeric anomalies (NaN, Inf) are written to
the result unchanged.
"""

from typing import TYPE_CHECKING

from symvec.symbolic.environment import Environment
from symvec.systems.base.utils.environment_binder import EnvironmentBinder
from symvec.systems.framework.context import SystemContext
from symvec.types.core import DerivativeVector, ExpressionVector, NumericVector, OutputVector, StateVector

if TYPE_CHECKING:
    from symvec.systems.base.core.symbolic_vector_system import SymbolicVectorSystem


class EvaluationError(RuntimeError):
    """Raised when an evaluation entry point is invoked on the wrong kind of system"""
    pass


class ExpressionEvaluator:
    """
    Evaluates dynamics and output expressions.

    Example:
        >>> evaluator = ExpressionEvaluator(system, binder)
        >>> y = np.zeros(system.ny)
        >>> evaluator.calc_output(context, y)
        >>> xdot = np.zeros(system.nx)
        >>> evaluator.calc_time_derivatives(context, xdot)
    """

    def __init__(self, system: "SymbolicVectorSystem", binder: EnvironmentBinder):
        """
        Initialize expression evaluator.

        Args:
            system: The symbolic vector system
            binder: Binder producing populated environments
        """
        self.system = system
        self.binder = binder

    # ========================================================================
    # Evaluation Kernel
    # ========================================================================

    @staticmethod
    def evaluate_vector(
        expressions: ExpressionVector, env: Environment, sink: NumericVector
    ) -> NumericVector:
        """
        Evaluate each expression against ``env`` and write it to ``sink[i]``.

        Args:
            expressions: Expressions to evaluate, in order
            env: Fully bound environment
            sink: Preallocated vector of the same length

        Returns:
            The sink, for chaining
        """
        if len(sink) != len(expressions):
            raise ValueError(
                f"Result vector has {len(sink)} element(s) but "
                f"{len(expressions)} expression(s) are evaluated"
            )
        for i, expr in enumerate(expressions):
            sink[i] = env.evaluate(expr)
        return sink

    def _evaluate(
        self, expressions: ExpressionVector, context: SystemContext, sink: NumericVector
    ) -> NumericVector:
        env = self.binder.new_environment()
        self.binder.populate(context, env)
        return self.evaluate_vector(expressions, env, sink)

    # ========================================================================
    # Output Evaluation: y = h(t, x, u)
    # ========================================================================

    def calc_output(self, context: SystemContext, output: OutputVector) -> None:
        """
        Evaluate the output expressions into ``output``.

        Raises:
            EvaluationError: If the system has no output expressions
        """
        if len(self.system.output) == 0:
            raise EvaluationError("calc_output called on a system with no output expressions")
        self._evaluate(self.system.output, context, output)

    # ========================================================================
    # Dynamics Evaluation
    # ========================================================================

    def calc_time_derivatives(self, context: SystemContext, derivatives: DerivativeVector) -> None:
        """
        Evaluate dx/dt into ``derivatives``.

        Raises:
            EvaluationError: If the system is discrete-time or has no dynamics
        """
        if not self.system.is_continuous:
            raise EvaluationError(
                f"calc_time_derivatives called on a discrete-time system "
                f"(time_period={self.system.time_period})"
            )
        self._require_dynamics("calc_time_derivatives")
        self._evaluate(self.system.dynamics, context, derivatives)

    def calc_discrete_update(self, context: SystemContext, next_state: StateVector) -> None:
        """
        Evaluate x[k+1] into ``next_state``.

        Raises:
            EvaluationError: If the system is continuous-time or has no dynamics
        """
        if not self.system.is_discrete:
            raise EvaluationError(
                "calc_discrete_update called on a continuous-time system (time_period=0)"
            )
        self._require_dynamics("calc_discrete_update")
        self._evaluate(self.system.dynamics, context, next_state)

    def _require_dynamics(self, caller: str) -> None:
        if len(self.system.dynamics) == 0:
            raise EvaluationError(f"{caller} called on a system with no dynamics expressions")

    def __repr__(self) -> str:
        return (
            f"ExpressionEvaluator(system={type(self.system).__name__}, "
            f"n_dynamics={len(self.system.dynamics)}, n_output={len(self.system.output)})"
        )


__all__ = ["EvaluationError", "ExpressionEvaluator"]
