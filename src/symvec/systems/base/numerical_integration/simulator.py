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
Simulator - Driving a SymbolicVectorSystem Through Time

Plays the role of the host framework: decides when the system's derivative,
update and output callbacks are invoked and where their results go.

Continuous systems (time_period == 0)
    dx/dt = f(t, x, u) is integrated with scipy.integrate.solve_ivp
    (adaptive step size, error control via rtol/atol).

Discrete systems (time_period > 0)
    Updates fire at grid times t_k = offset + k*period. The update at t_k
    evaluates f(t_k, x(t_k), u(t_k)) and the result is the state at
    t_k + period (zero-order hold in between).

Stateless systems
    Only outputs are sampled, at t_eval (default: the two endpoints).

Inputs are either a fixed vector or a callable u(t). All results are
time-major: x has shape (T, nx) and y has shape (T, ny).

Examples
--------
>>> sim = Simulator(system)
>>> result = sim.simulate(t_span=(0.0, 1.0), x0=[1.0])
>>> result['x'][-1]           # ≈ exp(-1) for dx/dt = -x
array([0.36787944])
"""

import logging
import math
from typing import Callable, Optional, Tuple, Union

import numpy as np
from scipy.integrate import solve_ivp

from symvec.systems.base.core.symbolic_vector_system import SymbolicVectorSystem
from symvec.systems.framework.context import SystemContext
from symvec.types.core import InputFunction, InputVector, StateVector
from symvec.types.results import SimulationResult

logger = logging.getLogger(__name__)

InputSpec = Union[None, InputVector, InputFunction]


class Simulator:
    """
    Time-stepping driver for a SymbolicVectorSystem.

    Parameters
    ----------
    system : SymbolicVectorSystem
        System to simulate
    context : SystemContext, optional
        Initial context (default: system.create_default_context())
    method : str
        solve_ivp method for continuous systems ('RK45', 'DOP853', 'LSODA', ...)
    rtol, atol : float
        solve_ivp tolerances
    """

    def __init__(
        self,
        system: SymbolicVectorSystem,
        context: Optional[SystemContext] = None,
        method: str = "RK45",
        rtol: float = 1e-6,
        atol: float = 1e-9,
    ):
        if rtol <= 0 or atol <= 0:
            raise ValueError(f"Tolerances must be positive, got rtol={rtol}, atol={atol}")
        self.system = system
        self.context = context if context is not None else system.create_default_context()
        self.method = method
        self.rtol = rtol
        self.atol = atol

    def get_context(self) -> SystemContext:
        return self.context

    # ========================================================================
    # Public API
    # ========================================================================

    def simulate(
        self,
        t_span: Tuple[float, float],
        x0: Optional[StateVector] = None,
        u: InputSpec = None,
        t_eval: Optional[np.ndarray] = None,
    ) -> SimulationResult:
        """
        Simulate over ``t_span`` without touching the simulator's context.

        Parameters
        ----------
        t_span : (float, float)
            Start and end time
        x0 : array_like, optional
            Initial state (default: the context's state)
        u : array_like or callable, optional
            Fixed input vector or u(t); defaults to the input fixed in the
            context. Required iff the system has inputs.
        t_eval : array_like, optional
            Sample times (continuous and stateless systems only)

        Returns
        -------
        SimulationResult
        """
        context = self.context.clone()
        context.set_time(t_span[0])
        if x0 is not None:
            self._set_state(context, x0)
        return self._run(context, float(t_span[0]), float(t_span[1]), u, t_eval)

    def advance_to(self, t_final: float, u: InputSpec = None) -> SystemContext:
        """
        Advance the simulator's own context to ``t_final``.

        Returns
        -------
        SystemContext
            The updated context (same object as get_context())
        """
        result = self._run(self.context, self.context.get_time(), float(t_final), u, None)
        if not result["success"]:
            raise RuntimeError(f"Simulation failed: {result['message']}")
        return self.context

    # ========================================================================
    # Dispatch
    # ========================================================================

    def _run(
        self,
        context: SystemContext,
        t0: float,
        tf: float,
        u: InputSpec,
        t_eval: Optional[np.ndarray],
    ) -> SimulationResult:
        if tf < t0:
            raise ValueError(f"Final time {tf} is before start time {t0}")
        input_at = self._make_input(context, u)

        logger.debug(
            "Simulating %r from t=%g to t=%g", self.system, t0, tf,
        )
        if self.system.nx == 0:
            result = self._run_stateless(context, t0, tf, input_at, t_eval)
        elif self.system.is_continuous:
            result = self._run_continuous(context, t0, tf, input_at, t_eval)
        else:
            if t_eval is not None:
                raise ValueError("t_eval is not supported for discrete-time systems")
            result = self._run_discrete(context, t0, tf, input_at)
        logger.debug("Simulation finished: %s (%d steps)", result["message"], result["nsteps"])
        return result

    def _make_input(self, context: SystemContext, u: InputSpec) -> Callable[[float], Optional[np.ndarray]]:
        system = self.system
        if system.nu == 0:
            if u is not None:
                raise ValueError("System has no inputs but an input was given")
            return lambda t: None
        if u is None:
            if not context.has_input(0):
                raise ValueError(
                    f"System has {system.nu} input(s): pass u or fix input port 0 in the context"
                )
            fixed = np.array(context.get_input_vector(0))
            return lambda t: fixed
        if callable(u):
            return lambda t: np.asarray(u(t), dtype=float).reshape(-1)
        fixed = np.asarray(u, dtype=float).reshape(-1)
        return lambda t: fixed

    def _set_state(self, context: SystemContext, x: StateVector) -> None:
        if self.system.is_continuous:
            context.set_continuous_state(x)
        else:
            context.set_discrete_state(x)

    def _get_state(self, context: SystemContext) -> np.ndarray:
        if self.system.nx == 0:
            return np.zeros(0)
        if self.system.is_continuous:
            return np.array(context.get_continuous_state_vector())
        return np.array(context.get_discrete_state_vector())

    def _load(self, context: SystemContext, t: float, x: np.ndarray, input_at) -> None:
        context.set_time(t)
        if self.system.nx > 0:
            self._set_state(context, x)
        u = input_at(t)
        if u is not None:
            context.fix_input_port(0, u)

    def _outputs(self, context: SystemContext, times, states, input_at) -> Optional[np.ndarray]:
        if self.system.ny == 0:
            return None
        scratch = context.clone()
        y = np.zeros((len(times), self.system.ny))
        for k, (t, x) in enumerate(zip(times, states)):
            self._load(scratch, t, x, input_at)
            self.system.calc_output(scratch, y[k])
        return y

    # ========================================================================
    # Continuous Time
    # ========================================================================

    def _run_continuous(self, context, t0, tf, input_at, t_eval) -> SimulationResult:
        system = self.system
        scratch = context.clone()
        x0 = self._get_state(context)

        def ode_func(t: float, x: np.ndarray) -> np.ndarray:
            """Dynamics function in scipy's signature: f(t, x) → dx/dt"""
            self._load(scratch, t, x, input_at)
            return system.eval_time_derivatives(scratch)

        if tf == t0:
            times = np.array([t0])
            states = x0.reshape(1, -1)
            success, message, nfev = True, "Zero-length interval", 0
        else:
            sol = solve_ivp(
                fun=ode_func,
                t_span=(t0, tf),
                y0=x0,
                method=self.method,
                t_eval=t_eval,
                rtol=self.rtol,
                atol=self.atol,
            )
            times = sol.t
            states = sol.y.T
            success, message, nfev = bool(sol.success), str(sol.message), int(sol.nfev)

        if success:
            self._load(context, tf, states[-1], input_at)

        result: SimulationResult = {
            "t": times,
            "x": states,
            "y": self._outputs(context, times, states, input_at),
            "success": success,
            "message": message,
            "nsteps": max(len(times) - 1, 0),
            "nfev": nfev,
            "solver": self.method,
        }
        return result

    # ========================================================================
    # Discrete Time
    # ========================================================================

    def _update_times(self, t0: float, tf: float) -> np.ndarray:
        """Update times t_k whose result lands at t_k + period in (t0, tf]."""
        update = self.system.periodic_update
        period, offset = update.period, update.offset
        tol = 1e-12 * max(1.0, abs(tf))
        j = max(1, math.floor((t0 - offset) / period + 1e-9) + 1)
        times = []
        while offset + j * period <= tf + tol:
            times.append(offset + (j - 1) * period)
            j += 1
        return np.array(times)

    def _run_discrete(self, context, t0, tf, input_at) -> SimulationResult:
        system = self.system
        period = system.periodic_update.period
        x = self._get_state(context)
        times = [t0]
        states = [x.copy()]

        scratch = context.clone()
        for t_k in self._update_times(t0, tf):
            self._load(scratch, t_k, x, input_at)
            x = system.eval_discrete_update(scratch)
            times.append(t_k + period)
            states.append(x.copy())

        times = np.array(times)
        states = np.array(states)
        self._load(context, tf, states[-1], input_at)

        result: SimulationResult = {
            "t": times,
            "x": states,
            "y": self._outputs(context, times, states, input_at),
            "success": True,
            "message": "Reached final time",
            "nsteps": len(times) - 1,
            "nfev": len(times) - 1,
            "solver": "periodic",
        }
        return result

    # ========================================================================
    # Stateless
    # ========================================================================

    def _run_stateless(self, context, t0, tf, input_at, t_eval) -> SimulationResult:
        times = np.array([t0, tf] if t_eval is None else t_eval, dtype=float)
        states = np.zeros((len(times), 0))
        self._load(context, tf, np.zeros(0), input_at)
        result: SimulationResult = {
            "t": times,
            "x": states,
            "y": self._outputs(context, times, states, input_at),
            "success": True,
            "message": "Sampled outputs",
            "nsteps": 0,
            "nfev": 0,
            "solver": "none",
        }
        return result

    def __repr__(self) -> str:
        return (
            f"Simulator(system={self.system!r}, method={self.method}, "
            f"rtol={self.rtol}, atol={self.atol})"
        )


__all__ = ["Simulator"]
