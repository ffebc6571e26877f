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
Port and State Declarations

Records what a system tells its host framework during construction:

- "declare input port of width W"
- "declare continuous state of width W"
- "declare discrete state of width W" + "periodic update (period, offset)"
- "declare output of width W computed by callback C"

Each declaration may be made at most once. Continuous and discrete state
are mutually exclusive. Output ports hold a plain callable
``calc(context, output)``; the framework decides when to call it.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from symvec.systems.framework.context import SystemContext
from symvec.types.core import CalcCallback, InputVector, OutputVector


# ============================================================================
# Declaration Records
# ============================================================================


@dataclass(frozen=True)
class InputPort:
    """Vector-valued input port."""

    index: int
    size: int

    def eval(self, context: SystemContext) -> InputVector:
        """Current value of this port in ``context``."""
        return context.get_input_vector(self.index)


@dataclass(frozen=True)
class OutputPort:
    """Vector-valued output port computed by ``calc``."""

    index: int
    size: int
    calc: CalcCallback = field(repr=False, compare=False)

    def eval(self, context: SystemContext) -> OutputVector:
        """Allocate an output vector and compute it from ``context``."""
        output = np.zeros(self.size)
        self.calc(context, output)
        return output


@dataclass(frozen=True)
class StateDeclaration:
    """State storage: kind is 'continuous' or 'discrete'."""

    kind: str
    size: int


@dataclass(frozen=True)
class PeriodicUpdate:
    """Periodic discrete update at times offset + k*period."""

    period: float
    offset: float


# ============================================================================
# Registry
# ============================================================================


class SystemDeclarations:
    """
    Registry of the ports, state and events a system declared.

    Examples
    --------
    >>> decl = SystemDeclarations()
    >>> port = decl.declare_input_port(2)
    >>> decl.declare_discrete_state(1)
    >>> decl.declare_periodic_discrete_update(0.1, 0.0)
    >>> decl.periodic_update
    PeriodicUpdate(period=0.1, offset=0.0)
    """

    def __init__(self):
        self.input_port: Optional[InputPort] = None
        self.output_port: Optional[OutputPort] = None
        self.state: Optional[StateDeclaration] = None
        self.periodic_update: Optional[PeriodicUpdate] = None

    def declare_input_port(self, size: int) -> InputPort:
        if self.input_port is not None:
            raise RuntimeError("An input port has already been declared")
        self._check_size(size, "input port")
        self.input_port = InputPort(index=0, size=size)
        return self.input_port

    def declare_continuous_state(self, size: int) -> StateDeclaration:
        return self._declare_state("continuous", size)

    def declare_discrete_state(self, size: int) -> StateDeclaration:
        return self._declare_state("discrete", size)

    def declare_periodic_discrete_update(self, period: float, offset: float = 0.0) -> PeriodicUpdate:
        if self.periodic_update is not None:
            raise RuntimeError("A periodic discrete update has already been declared")
        if self.state is None or self.state.kind != "discrete":
            raise RuntimeError("Periodic discrete updates require declared discrete state")
        if not period > 0.0:
            raise ValueError(f"Update period must be > 0, got {period}")
        self.periodic_update = PeriodicUpdate(period=float(period), offset=float(offset))
        return self.periodic_update

    def declare_vector_output_port(self, size: int, calc: CalcCallback) -> OutputPort:
        if self.output_port is not None:
            raise RuntimeError("An output port has already been declared")
        self._check_size(size, "output port")
        if not callable(calc):
            raise TypeError("Output port calc must be callable")
        self.output_port = OutputPort(index=0, size=size, calc=calc)
        return self.output_port

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def num_input_ports(self) -> int:
        return 0 if self.input_port is None else 1

    @property
    def num_output_ports(self) -> int:
        return 0 if self.output_port is None else 1

    @property
    def num_continuous_states(self) -> int:
        if self.state is not None and self.state.kind == "continuous":
            return self.state.size
        return 0

    @property
    def num_discrete_states(self) -> int:
        if self.state is not None and self.state.kind == "discrete":
            return self.state.size
        return 0

    def create_context(self) -> SystemContext:
        """Allocate a context sized to these declarations."""
        sizes = () if self.input_port is None else (self.input_port.size,)
        return SystemContext(
            num_continuous_states=self.num_continuous_states,
            num_discrete_states=self.num_discrete_states,
            input_port_sizes=sizes,
        )

    # ========================================================================
    # Helpers
    # ========================================================================

    def _declare_state(self, kind: str, size: int) -> StateDeclaration:
        if self.state is not None:
            raise RuntimeError(
                f"Cannot declare {kind} state: {self.state.kind} state is already declared"
            )
        self._check_size(size, f"{kind} state")
        self.state = StateDeclaration(kind=kind, size=size)
        return self.state

    @staticmethod
    def _check_size(size: int, what: str) -> None:
        if size <= 0:
            raise ValueError(f"Width of {what} must be positive, got {size}")

    def __repr__(self) -> str:
        return (
            f"SystemDeclarations(input_port={self.input_port}, "
            f"state={self.state}, periodic_update={self.periodic_update}, "
            f"output_port={self.output_port})"
        )


__all__ = [
    "InputPort",
    "OutputPort",
    "StateDeclaration",
    "PeriodicUpdate",
    "SystemDeclarations",
]
