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
Unit tests for SymbolicValidator

Tests cover, in validation order:
1. Type validation
2. Content (dynamics/output present, period >= 0)
3. Uniqueness of state/input/time/parameter variables
4. Undeclared variables in expressions
5. Dimension consistency
6. Phase gating, warnings and the result container
"""

import warnings

import numpy as np
import pytest
import sympy as sp

from symvec.systems.base.utils.symbolic_validator import (
    SymbolicValidator,
    ValidationError,
    ValidationResult,
)


# ============================================================================
# Mock System Classes for Testing
# ============================================================================


class MockSystem:
    """Plain attribute holder with the attributes the validator reads"""

    def __init__(self, **overrides):
        t, x, v = sp.symbols("t x v", real=True)
        u = sp.symbols("u", real=True)
        k = sp.symbols("k", positive=True)

        self.time_var = t
        self.state_vars = (x, v)
        self.input_vars = (u,)
        self.dynamics = (v, -k * x + u)
        self.output = (x,)
        self.time_period = 0.0
        self.parameters = {k: 4.0}
        for name, value in overrides.items():
            setattr(self, name, value)


def validate(system):
    return SymbolicValidator(system).validate(raise_on_error=True)


# ============================================================================
# Test Class 1: Valid Systems
# ============================================================================


class TestValidSystems:
    """Well-formed definitions pass"""

    def test_valid_system_passes(self):
        result = validate(MockSystem())

        assert isinstance(result, ValidationResult)
        assert result.is_valid
        assert result.errors == []

    def test_info_reports_dimensions(self):
        result = validate(MockSystem())

        assert result.info["nx"] == 2
        assert result.info["nu"] == 1
        assert result.info["ny"] == 1
        assert result.info["is_continuous"] is True
        assert result.info["has_time_variable"] is True

    def test_output_only_system(self):
        u = sp.symbols("u")
        system = MockSystem(
            time_var=None, state_vars=(), input_vars=(u,),
            dynamics=(), output=(2 * u,), parameters={},
        )
        assert validate(system).is_valid

    def test_state_without_dynamics_is_accepted(self):
        x, u = sp.symbols("x u")
        system = MockSystem(
            time_var=None, state_vars=(x,), input_vars=(u,),
            dynamics=(), output=(u + x,), parameters={},
        )
        assert validate(system).is_valid

    def test_time_variable_may_appear_in_expressions(self):
        t, x = sp.symbols("t x")
        system = MockSystem(
            time_var=t, state_vars=(x,), input_vars=(),
            dynamics=(sp.sin(t) * x,), output=(), parameters={},
        )
        assert validate(system).is_valid


# ============================================================================
# Test Class 2: Types
# ============================================================================


class TestTypes:
    """Type validation"""

    def test_string_state_variable(self):
        system = MockSystem(state_vars=("x", "v"))
        with pytest.raises(ValidationError, match="is not a SymPy Symbol"):
            validate(system)

    def test_expression_state_variable(self):
        x = sp.symbols("x")
        system = MockSystem(state_vars=(2 * x,), dynamics=(x,))
        with pytest.raises(ValidationError, match=r"state_vars\[0\]"):
            validate(system)

    def test_non_expression_dynamics(self):
        x, v = sp.symbols("x v", real=True)
        system = MockSystem(dynamics=(v, "x + 1"))
        with pytest.raises(ValidationError, match="is not a SymPy expression"):
            validate(system)

    def test_boolean_output_rejected(self):
        x = sp.symbols("x", real=True)
        system = MockSystem(output=(sp.Gt(x, 0),))
        with pytest.raises(ValidationError, match=r"output\[0\]"):
            validate(system)

    def test_string_parameter_key(self):
        system = MockSystem(parameters={"k": 4.0})
        with pytest.raises(ValidationError, match="Use Symbol objects as keys"):
            validate(system)

    def test_non_finite_parameter(self):
        k = sp.symbols("k", positive=True)
        system = MockSystem(parameters={k: np.inf})
        with pytest.raises(ValidationError, match="non-finite"):
            validate(system)

    def test_non_numeric_period(self):
        system = MockSystem(time_period="0.1")
        with pytest.raises(ValidationError, match="time_period must be a real number"):
            validate(system)

    def test_complex_period(self):
        system = MockSystem(time_period=np.complex128(0.1 + 1j))
        with pytest.raises(ValidationError, match="time_period must be a real number"):
            validate(system)

    def test_complex_parameter(self):
        k = sp.symbols("k", positive=True)
        system = MockSystem(parameters={k: np.complex64(2.0)})
        with pytest.raises(ValidationError, match="must be numeric"):
            validate(system)

    def test_numpy_real_scalars_accepted(self):
        k = sp.symbols("k", positive=True)
        system = MockSystem(time_period=np.float32(0.5), parameters={k: np.int64(2)})
        assert validate(system).is_valid


# ============================================================================
# Test Class 3: Content
# ============================================================================


class TestContent:
    """At least one equation, non-negative period"""

    def test_no_dynamics_and_no_output(self):
        system = MockSystem(dynamics=(), output=())
        with pytest.raises(ValidationError, match="dynamics and output are both empty"):
            validate(system)

    def test_negative_period(self):
        system = MockSystem(time_period=-0.1)
        with pytest.raises(ValidationError, match="time_period must be a finite number >= 0"):
            validate(system)

    def test_infinite_period(self):
        system = MockSystem(time_period=float("inf"))
        with pytest.raises(ValidationError, match="time_period"):
            validate(system)

    def test_positive_period_is_discrete(self):
        result = validate(MockSystem(time_period=0.1))
        assert result.info["is_continuous"] is False
        assert result.info["time_period"] == 0.1


# ============================================================================
# Test Class 4: Uniqueness
# ============================================================================


class TestUniqueness:
    """State and input variables are unique within and across groups"""

    def test_duplicate_within_state(self):
        x = sp.symbols("x", real=True)
        system = MockSystem(state_vars=(x, x), dynamics=(x, x))
        with pytest.raises(ValidationError, match="Duplicate variables"):
            validate(system)

    def test_duplicate_across_state_and_input(self):
        x, v = sp.symbols("x v", real=True)
        system = MockSystem(input_vars=(x,), dynamics=(v, -x), output=(x,))
        with pytest.raises(ValidationError, match="Duplicate variables"):
            validate(system)

    def test_duplicate_within_input(self):
        u = sp.symbols("u", real=True)
        system = MockSystem(input_vars=(u, u))
        with pytest.raises(ValidationError, match="Duplicate variables"):
            validate(system)

    def test_time_variable_reused_as_state(self):
        x, v = sp.symbols("x v", real=True)
        system = MockSystem(time_var=x)
        with pytest.raises(ValidationError, match="time_var x is also declared"):
            validate(system)

    def test_parameter_reused_as_input(self):
        u = sp.symbols("u", real=True)
        system = MockSystem(parameters={u: 1.0})
        with pytest.raises(ValidationError, match="also declared as"):
            validate(system)

    def test_same_name_dummies_are_distinct(self):
        x1 = sp.Dummy("x")
        x2 = sp.Dummy("x")
        system = MockSystem(
            time_var=None, state_vars=(x1, x2), input_vars=(),
            dynamics=(x2, -x1), output=(), parameters={},
        )
        assert validate(system).is_valid


# ============================================================================
# Test Class 5: Undeclared Variables
# ============================================================================


class TestSymbols:
    """Every referenced variable must be declared"""

    def test_undeclared_variable_in_dynamics(self):
        x, v, w = sp.symbols("x v w", real=True)
        system = MockSystem(dynamics=(v, -x + w))
        with pytest.raises(ValidationError, match=r"dynamics\[1\].*undefined variables: \['w'\]"):
            validate(system)

    def test_undeclared_variable_in_output(self):
        y = sp.symbols("y", real=True)
        system = MockSystem(output=(y,))
        with pytest.raises(ValidationError, match=r"output\[0\].*undefined"):
            validate(system)

    def test_time_used_without_time_variable(self):
        t, x, v = sp.symbols("t x v", real=True)
        system = MockSystem(time_var=None, dynamics=(v, -x * t))
        with pytest.raises(ValidationError, match="undefined variables: \\['t'\\]"):
            validate(system)

    def test_symbol_with_different_assumptions_is_undeclared(self):
        x_plain = sp.symbols("x")
        system = MockSystem(output=(x_plain,))
        with pytest.raises(ValidationError, match="undefined"):
            validate(system)


# ============================================================================
# Test Class 6: Dimensions
# ============================================================================


class TestDimensions:
    """One dynamics equation per state variable"""

    def test_three_states_two_equations(self):
        a, b, c = sp.symbols("a b c", real=True)
        system = MockSystem(
            time_var=None, state_vars=(a, b, c), input_vars=(),
            dynamics=(b, c), output=(), parameters={},
        )
        with pytest.raises(ValidationError, match="dynamics has 2 rows but state_vars has 3"):
            validate(system)

    def test_dynamics_without_state(self):
        u = sp.symbols("u")
        system = MockSystem(
            time_var=None, state_vars=(), input_vars=(u,),
            dynamics=(u,), output=(), parameters={},
        )
        with pytest.raises(ValidationError, match="dynamics has 1 rows but state_vars has 0"):
            validate(system)


# ============================================================================
# Test Class 7: Phase Gating and Reporting
# ============================================================================


class TestReporting:
    """Error collection, gating and warnings"""

    def test_later_phases_skipped_after_failure(self):
        x = sp.symbols("x", real=True)
        system = MockSystem(
            time_var=None, state_vars=(x, x), input_vars=(),
            dynamics=(x,), output=(), parameters={}, time_period=-1.0,
        )
        result = SymbolicValidator(system).validate(raise_on_error=False)

        assert not result.is_valid
        assert len(result.errors) == 1
        assert "time_period" in result.errors[0]

    def test_errors_in_one_phase_are_collected(self):
        w, z = sp.symbols("w z")
        system = MockSystem(output=(w, z))
        result = SymbolicValidator(system).validate(raise_on_error=False)

        assert len(result.errors) == 2

    def test_no_raise_returns_result(self):
        system = MockSystem(dynamics=(), output=())
        result = SymbolicValidator.validate_system(system, raise_on_error=False)

        assert result.is_valid is False
        assert result.info == {}

    def test_error_message_format(self):
        system = MockSystem(dynamics=(), output=())
        with pytest.raises(ValidationError) as exc_info:
            validate(system)

        message = str(exc_info.value)
        assert message.startswith("System validation failed")
        assert "COMMON FIXES" in message

    def test_validation_error_is_value_error(self):
        assert issubclass(ValidationError, ValueError)

    def test_warns_on_unused_input(self):
        x, u, w = sp.symbols("x u w")
        system = MockSystem(
            time_var=None, state_vars=(x,), input_vars=(u, w),
            dynamics=(-x + u,), output=(), parameters={},
        )
        with pytest.warns(UserWarning, match=r"Input variables \['w'\]"):
            result = validate(system)
        assert result.is_valid

    def test_warns_on_unused_parameter(self):
        x, m = sp.symbols("x m")
        system = MockSystem(
            time_var=None, state_vars=(x,), input_vars=(),
            dynamics=(-x,), output=(), parameters={m: 1.0},
        )
        with pytest.warns(UserWarning, match=r"Parameters \['m'\]"):
            validate(system)

    def test_warns_when_dynamics_ignore_state(self):
        x, u = sp.symbols("x u")
        system = MockSystem(
            time_var=None, state_vars=(x,), input_vars=(u,),
            dynamics=(u,), output=(), parameters={},
        )
        with pytest.warns(UserWarning, match="do not depend on any state"):
            validate(system)

    def test_valid_system_emits_no_warning(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            validate(MockSystem())

    def test_repr(self):
        assert repr(SymbolicValidator(MockSystem())) == "SymbolicValidator(system=MockSystem)"
