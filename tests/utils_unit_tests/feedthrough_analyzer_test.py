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
Unit tests for FeedthroughAnalyzer
"""

import warnings

import numpy as np
import pytest

from symvec import SymbolicVectorSystem, make_variables
from symvec.systems.base.utils import FeedthroughAnalyzer


@pytest.fixture
def variables():
    return make_variables("x u1 u2")


def _system(**kwargs):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        return SymbolicVectorSystem(**kwargs)


class TestHasDirectFeedthrough:
    """Port-level feedthrough"""

    def test_output_references_input(self, variables):
        x, u1, u2 = variables
        system = _system(state_vars=[x], input_vars=[u1], dynamics=[-x], output=[u1 + x])
        assert FeedthroughAnalyzer(system).has_direct_feedthrough(0, 0)

    def test_output_without_input(self, variables):
        x, u1, u2 = variables
        system = _system(state_vars=[x], input_vars=[u1], dynamics=[u1 - x], output=[x])
        assert not FeedthroughAnalyzer(system).has_direct_feedthrough(0, 0)

    def test_last_output_and_last_input_are_checked(self, variables):
        x, u1, u2 = variables
        system = _system(
            state_vars=[x],
            input_vars=[u1, u2],
            dynamics=[u1 - x],
            output=[x, 2 * x, x * u2],
        )
        assert FeedthroughAnalyzer(system).has_direct_feedthrough()

    def test_is_structural_not_numeric(self, variables):
        x, u1, u2 = variables
        # x*u1**2 is zero at u1 = 0 but still references u1
        system = _system(state_vars=[x], input_vars=[u1], dynamics=[-x], output=[x * u1**2])
        assert FeedthroughAnalyzer(system).has_direct_feedthrough()

    def test_no_input_port(self, variables):
        x, u1, u2 = variables
        system = _system(state_vars=[x], dynamics=[-x], output=[x])
        with pytest.raises(ValueError, match="no input port"):
            FeedthroughAnalyzer(system).has_direct_feedthrough()

    def test_no_output_port(self, variables):
        x, u1, u2 = variables
        system = _system(state_vars=[x], input_vars=[u1], dynamics=[u1 - x])
        with pytest.raises(ValueError, match="no output port"):
            FeedthroughAnalyzer(system).has_direct_feedthrough()

    def test_nonzero_port_index(self, variables):
        x, u1, u2 = variables
        system = _system(state_vars=[x], input_vars=[u1], dynamics=[-x], output=[u1])
        with pytest.raises(ValueError, match="Input port index must be 0"):
            FeedthroughAnalyzer(system).has_direct_feedthrough(1, 0)
        with pytest.raises(ValueError, match="Output port index must be 0"):
            FeedthroughAnalyzer(system).has_direct_feedthrough(0, 1)


class TestFeedthroughMatrix:
    """Component-level feedthrough"""

    def test_matrix(self, variables):
        x, u1, u2 = variables
        system = _system(
            state_vars=[x],
            input_vars=[u1, u2],
            dynamics=[u1 - x],
            output=[x + u1, u2, x],
        )
        matrix = FeedthroughAnalyzer(system).feedthrough_matrix()

        assert matrix.dtype == bool
        np.testing.assert_array_equal(
            matrix,
            [[True, False], [False, True], [False, False]],
        )

    def test_depends_on_input(self, variables):
        x, u1, u2 = variables
        system = _system(
            state_vars=[x],
            input_vars=[u1, u2],
            dynamics=[u1 - x],
            output=[x + u2],
        )
        analyzer = FeedthroughAnalyzer(system)

        assert not analyzer.depends_on_input(0, 0)
        assert analyzer.depends_on_input(0, 1)

    def test_depends_on_input_range(self, variables):
        x, u1, u2 = variables
        system = _system(state_vars=[x], input_vars=[u1], dynamics=[-x], output=[u1])
        analyzer = FeedthroughAnalyzer(system)

        with pytest.raises(IndexError):
            analyzer.depends_on_input(1, 0)
        with pytest.raises(IndexError):
            analyzer.depends_on_input(0, 1)

    def test_matrix_agrees_with_port_query(self, variables):
        x, u1, u2 = variables
        system = _system(
            state_vars=[x],
            input_vars=[u1, u2],
            dynamics=[u1 - x],
            output=[x, x * u2],
        )
        analyzer = FeedthroughAnalyzer(system)
        assert analyzer.feedthrough_matrix().any() == analyzer.has_direct_feedthrough()
