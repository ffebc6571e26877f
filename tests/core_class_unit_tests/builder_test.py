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
Unit tests for SymbolicVectorSystemBuilder
"""

import numpy as np
import pytest
import sympy as sp

from symvec import SymbolicVectorSystem, SymbolicVectorSystemBuilder, ValidationError, make_variables


class TestBuilder:
    """Fluent construction"""

    def test_build_continuous(self):
        t, x, u = make_variables("t x u")
        system = (
            SymbolicVectorSystemBuilder()
            .time(t)
            .state(x)
            .input(u)
            .dynamics(-x + u)
            .output(x)
            .build()
        )

        assert isinstance(system, SymbolicVectorSystem)
        assert system.time_var == t
        assert system.state_vars == (x,)
        assert system.input_vars == (u,)
        assert system.dynamics == (-x + u,)
        assert system.is_continuous

    def test_build_discrete(self):
        (x,) = make_variables("x")
        system = SymbolicVectorSystemBuilder().state([x]).dynamics([x + 1]).time_period(0.1).build()

        assert system.is_discrete
        assert system.time_period == 0.1

    def test_matrix_arguments(self):
        x, v = make_variables("x v")
        system = (
            SymbolicVectorSystemBuilder()
            .state(sp.Matrix([x, v]))
            .dynamics(sp.ImmutableMatrix([v, -x]))
            .build()
        )
        assert system.state_vars == (x, v)
        assert system.dynamics == (v, -x)

    def test_numeric_output(self):
        (x,) = make_variables("x")
        system = SymbolicVectorSystemBuilder().state(x).dynamics(-x).output([x, 1]).build()
        context = system.create_default_context()
        np.testing.assert_array_equal(system.eval_output(context), [0.0, 1.0])

    def test_parameters(self):
        x, k = make_variables("x k")
        system = SymbolicVectorSystemBuilder().state(x).dynamics(-k * x).parameters({k: 3.0}).build()
        assert system.parameters == {k: 3.0}

    def test_setters_replace(self):
        x, v = make_variables("x v")
        system = SymbolicVectorSystemBuilder().state([x, v]).state(x).dynamics(-x).build()
        assert system.state_vars == (x,)

    def test_build_validates(self):
        (x,) = make_variables("x")
        with pytest.raises(ValidationError, match="dynamics has 2 rows"):
            SymbolicVectorSystemBuilder().state(x).dynamics([x, x]).build()

    def test_empty_builder_is_invalid(self):
        with pytest.raises(ValidationError):
            SymbolicVectorSystemBuilder().build()

    def test_repr(self):
        assert "time_period=0.0" in repr(SymbolicVectorSystemBuilder())
