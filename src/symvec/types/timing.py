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
Timing Types - Continuous vs Discrete Time

A symbolic vector system is either continuous-time (dynamics are dx/dt) or
discrete-time with a fixed update period (dynamics are x[k+1]). The choice is
made once, at construction, from the update period:

    period == 0  ->  ContinuousTime()
    period  > 0  ->  DiscreteTime(period, offset=0.0)

Usage
-----
>>> timing = timing_from_period(0.1)
>>> timing
DiscreteTime(period=0.1, offset=0.0)
>>> timing.is_discrete
True
"""

import math
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ContinuousTime:
    """Continuous-time dynamics: dynamics expressions evaluate dx/dt."""

    @property
    def period(self) -> float:
        return 0.0

    @property
    def is_continuous(self) -> bool:
        return True

    @property
    def is_discrete(self) -> bool:
        return False


@dataclass(frozen=True)
class DiscreteTime:
    """
    Discrete-time dynamics: dynamics expressions evaluate x[k+1].

    Attributes
    ----------
    period : float
        Update period (> 0)
    offset : float
        Phase of the first update (updates happen at offset + k*period)
    """

    period: float
    offset: float = 0.0

    def __post_init__(self):
        if not self.period > 0.0:
            raise ValueError(f"DiscreteTime period must be > 0, got {self.period}")
        if self.offset < 0.0:
            raise ValueError(f"DiscreteTime offset must be >= 0, got {self.offset}")

    @property
    def is_continuous(self) -> bool:
        return False

    @property
    def is_discrete(self) -> bool:
        return True


TimingMode = Union[ContinuousTime, DiscreteTime]


def timing_from_period(period: float) -> TimingMode:
    """
    Decide the timing mode from an update period.

    Parameters
    ----------
    period : float
        0 for continuous time, > 0 for discrete time

    Returns
    -------
    TimingMode

    Raises
    ------
    ValueError
        If period is negative or not finite
    """
    period = float(period)
    if not math.isfinite(period) or period < 0.0:
        raise ValueError(f"time period must be a finite number >= 0, got {period}")
    if period == 0.0:
        return ContinuousTime()
    return DiscreteTime(period=period, offset=0.0)


__all__ = ["ContinuousTime", "DiscreteTime", "TimingMode", "timing_from_period"]
