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
System Context

Storage for the simulation quantities a system reads during evaluation:
current time, continuous state, discrete state and fixed input-port values.

Vector widths are fixed when the context is created. Accessors return
read-only views so evaluation code cannot mutate the context by accident.
"""

from typing import Dict

import numpy as np

from symvec.types.core import InputVector, ScalarLike, StateVector


def _as_vector(value, width: int, what: str) -> np.ndarray:
    vector = np.asarray(value, dtype=float).reshape(-1)
    if vector.shape[0] != width:
        raise ValueError(f"{what} must have {width} element(s), got {vector.shape[0]}")
    return vector.copy()


def _read_only(vector: np.ndarray) -> np.ndarray:
    view = vector.view()
    view.flags.writeable = False
    return view


class SystemContext:
    """
    Time, state and input storage for one system instance.

    Parameters
    ----------
    num_continuous_states : int
        Width of the continuous state vector
    num_discrete_states : int
        Width of the discrete state vector
    input_port_sizes : tuple of int
        Width of each input port, in port order

    Examples
    --------
    >>> context = SystemContext(num_continuous_states=1, input_port_sizes=(2,))
    >>> context.set_time(0.5)
    >>> context.set_continuous_state([2.0])
    >>> context.fix_input_port(0, [1.0, -1.0])
    >>> context.get_input_vector(0)
    array([ 1., -1.])
    """

    def __init__(
        self,
        num_continuous_states: int = 0,
        num_discrete_states: int = 0,
        input_port_sizes: tuple = (),
    ):
        if num_continuous_states < 0 or num_discrete_states < 0:
            raise ValueError("State widths must be non-negative")
        self._time = 0.0
        self._continuous_state = np.zeros(num_continuous_states)
        self._discrete_state = np.zeros(num_discrete_states)
        self._input_port_sizes = tuple(int(size) for size in input_port_sizes)
        self._fixed_inputs: Dict[int, np.ndarray] = {}

    # ========================================================================
    # Time
    # ========================================================================

    def get_time(self) -> float:
        return self._time

    def set_time(self, time: ScalarLike) -> None:
        self._time = float(time)

    # ========================================================================
    # State
    # ========================================================================

    @property
    def num_continuous_states(self) -> int:
        return self._continuous_state.shape[0]

    @property
    def num_discrete_states(self) -> int:
        return self._discrete_state.shape[0]

    def get_continuous_state_vector(self) -> StateVector:
        return _read_only(self._continuous_state)

    def set_continuous_state(self, x: StateVector) -> None:
        self._continuous_state = _as_vector(x, self.num_continuous_states, "continuous state")

    def get_discrete_state_vector(self) -> StateVector:
        return _read_only(self._discrete_state)

    def set_discrete_state(self, x: StateVector) -> None:
        self._discrete_state = _as_vector(x, self.num_discrete_states, "discrete state")

    # ========================================================================
    # Inputs
    # ========================================================================

    @property
    def num_input_ports(self) -> int:
        return len(self._input_port_sizes)

    def fix_input_port(self, port_index: int, value: InputVector) -> None:
        """Fix the value of an input port for subsequent evaluations."""
        self._check_port(port_index)
        self._fixed_inputs[port_index] = _as_vector(
            value, self._input_port_sizes[port_index], f"input port {port_index}"
        )

    def get_input_vector(self, port_index: int) -> InputVector:
        """
        Current value of an input port.

        Raises
        ------
        RuntimeError
            If the port was never fixed
        """
        self._check_port(port_index)
        if port_index not in self._fixed_inputs:
            raise RuntimeError(
                f"Input port {port_index} is not connected: call fix_input_port() first"
            )
        return _read_only(self._fixed_inputs[port_index])

    def has_input(self, port_index: int) -> bool:
        return port_index in self._fixed_inputs

    def _check_port(self, port_index: int) -> None:
        if not 0 <= port_index < self.num_input_ports:
            raise ValueError(
                f"Input port index {port_index} out of range "
                f"(context has {self.num_input_ports} input port(s))"
            )

    # ========================================================================
    # Copying
    # ========================================================================

    def clone(self) -> "SystemContext":
        """Return an independent copy of this context."""
        other = SystemContext(
            self.num_continuous_states, self.num_discrete_states, self._input_port_sizes
        )
        other._time = self._time
        other._continuous_state = self._continuous_state.copy()
        other._discrete_state = self._discrete_state.copy()
        other._fixed_inputs = {k: v.copy() for k, v in self._fixed_inputs.items()}
        return other

    def __repr__(self) -> str:
        return (
            f"SystemContext(time={self._time}, "
            f"continuous_state={self._continuous_state.tolist()}, "
            f"discrete_state={self._discrete_state.tolist()}, "
            f"inputs={ {k: v.tolist() for k, v in self._fixed_inputs.items()} })"
        )


__all__ = ["SystemContext"]
