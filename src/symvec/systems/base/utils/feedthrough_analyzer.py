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
Feedthrough Analyzer for SymbolicVectorSystem

Structural direct-feedthrough queries: does an output expression reference
an input variable? The answer depends only on the expressions, never on
numeric values, so a host framework can use it for evaluation ordering.
"""

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from symvec.systems.base.core.symbolic_vector_system import SymbolicVectorSystem


class FeedthroughAnalyzer:
    """
    Answers direct-feedthrough queries for the single input/output port pair.

    Example:
        >>> analyzer = FeedthroughAnalyzer(system)
        >>> analyzer.has_direct_feedthrough(0, 0)
        True
        >>> analyzer.feedthrough_matrix()
        array([[ True, False]])
    """

    def __init__(self, system: "SymbolicVectorSystem"):
        self.system = system

    def has_direct_feedthrough(self, input_port: int = 0, output_port: int = 0) -> bool:
        """
        Whether any output expression references any input variable.

        Args:
            input_port: Input port index (only 0 exists)
            output_port: Output port index (only 0 exists)

        Raises:
            ValueError: If the system lacks an input or output port, or an
                index other than 0 is given
        """
        self._check_ports(input_port, output_port)
        output = self.system.output
        input_vars = self.system.input_vars
        for i in range(len(output)):
            variables = output[i].free_symbols
            for j in range(len(input_vars)):
                if input_vars[j] in variables:
                    return True
        return False

    def depends_on_input(self, output_index: int, input_index: int) -> bool:
        """Whether output component ``output_index`` references input ``input_index``."""
        self._check_ports(0, 0)
        output = self.system.output
        input_vars = self.system.input_vars
        if not 0 <= output_index < len(output):
            raise IndexError(f"output index {output_index} out of range [0, {len(output)})")
        if not 0 <= input_index < len(input_vars):
            raise IndexError(f"input index {input_index} out of range [0, {len(input_vars)})")
        return input_vars[input_index] in output[output_index].free_symbols

    def feedthrough_matrix(self) -> np.ndarray:
        """
        Boolean (ny, nu) matrix D_struct with D_struct[i, j] = output i references input j.
        """
        self._check_ports(0, 0)
        output = self.system.output
        input_vars = self.system.input_vars
        matrix = np.zeros((len(output), len(input_vars)), dtype=bool)
        for i, expr in enumerate(output):
            variables = expr.free_symbols
            for j, var in enumerate(input_vars):
                matrix[i, j] = var in variables
        return matrix

    def _check_ports(self, input_port: int, output_port: int) -> None:
        system = self.system
        if len(system.input_vars) == 0:
            raise ValueError("Feedthrough query on a system with no input port")
        if len(system.output) == 0:
            raise ValueError("Feedthrough query on a system with no output port")
        if input_port != 0:
            raise ValueError(f"Input port index must be 0, got {input_port}")
        if output_port != 0:
            raise ValueError(f"Output port index must be 0, got {output_port}")

    def __repr__(self) -> str:
        return f"FeedthroughAnalyzer(system={type(self.system).__name__})"


__all__ = ["FeedthroughAnalyzer"]
