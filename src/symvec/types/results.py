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
Result Types

TypedDict records returned by the simulator.
"""

from typing import Optional

import numpy as np
from typing_extensions import TypedDict


class SimulationResult(TypedDict, total=False):
    """
    Result from simulating a symbolic vector system.

    Shape Convention
    ----------------
    Time-major ordering:
    - t: (T,) - Time points
    - x: (T, nx) - State at each time point
    - y: (T, ny) - Output at each time point

    Attributes
    ----------
    t : np.ndarray
        Time points (T,)
    x : np.ndarray
        State trajectory (T, nx), nx may be 0
    y : Optional[np.ndarray]
        Output trajectory (T, ny), None if the system has no output
    success : bool
        Whether the simulation reached the final time
    message : str
        Status message
    nsteps : int
        Number of solver steps (continuous) or discrete updates (discrete)
    nfev : int
        Number of dynamics evaluations
    solver : str
        Name of the method used

    Examples
    --------
    >>> result: SimulationResult = simulator.simulate(t_span=(0.0, 1.0))
    >>> result['x'][-1]
    array([0.36787944])
    """

    t: np.ndarray
    x: np.ndarray
    y: Optional[np.ndarray]
    success: bool
    message: str
    nsteps: int
    nfev: int
    solver: str


__all__ = ["SimulationResult"]
