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
Symbolic Validator for SymbolicVectorSystem

Validates that a symbolic vector system definition is well-formed before any
port, state or environment is declared.

Checks, in order (a phase runs only if every earlier phase passed):
1. Types: variables are SymPy symbols, expressions are SymPy expressions,
   the period and parameter values are real numbers
2. Content: dynamics and/or output non-empty, period >= 0
3. Uniqueness: no duplicate among state and input variables, the time
   variable and parameters disjoint from both
4. Symbols: every variable referenced by dynamics/output is declared
5. Dimensions: one dynamics equation per state variable

Non-fatal findings (unused inputs or parameters, dynamics independent of
the state) are issued as UserWarnings.
"""

import math
import warnings
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List

import numpy as np
import sympy as sp

if TYPE_CHECKING:
    from symvec.systems.base.core.symbolic_vector_system import SymbolicVectorSystem

# Real scalar types accepted for time_period and parameter values (no complex)
_REAL_TYPES = (int, float, np.integer, np.floating)


# ============================================================================
# Exceptions
# ============================================================================


class ValidationError(ValueError):
    """Raised when system validation fails"""
    pass


# ============================================================================
# Validation Result Container
# ============================================================================


@dataclass
class ValidationResult:
    """
    Container for validation results.

    Attributes
    ----------
    is_valid : bool
        True if system passed all validation checks
    errors : List[str]
        List of validation errors (empty if valid)
    warnings : List[str]
        List of validation warnings (non-fatal issues)
    info : Dict
        Additional information about the validated system
    """
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    info: Dict


# ============================================================================
# Symbolic Validator
# ============================================================================


class SymbolicValidator:
    """
    Validates symbolic vector system definitions.

    The validator reads ``time_var``, ``state_vars``, ``input_vars``,
    ``dynamics``, ``output``, ``time_period`` and ``parameters`` from the
    object it is given, so it can check a system before the system declares
    anything.

    Examples
    --------
    >>> validator = SymbolicValidator(system)
    >>> result = validator.validate(raise_on_error=False)
    >>>
    >>> if result.is_valid:
    ...     print("System is valid!")
    ... else:
    ...     print(f"Errors: {result.errors}")
    """

    def __init__(self, system: "SymbolicVectorSystem"):
        """
        Initialize validator with system to validate.

        Parameters
        ----------
        system : SymbolicVectorSystem
            System (or any object with the same attributes) to validate
        """
        self.system = system
        self._errors: List[str] = []
        self._warnings: List[str] = []

    # ========================================================================
    # Public API
    # ========================================================================

    def validate(self, raise_on_error: bool = True) -> ValidationResult:
        """
        Validate system definition.

        Parameters
        ----------
        raise_on_error : bool
            If True, raise ValidationError on validation failure
            If False, return ValidationResult with errors

        Returns
        -------
        ValidationResult
            Validation results with errors, warnings, and info

        Raises
        ------
        ValidationError
            If validation fails and raise_on_error=True
        """
        self._errors = []
        self._warnings = []

        phases = (
            self._validate_types,
            self._validate_content,
            self._validate_uniqueness,
            self._validate_symbols,
            self._validate_dimensions,
        )
        for phase in phases:
            phase()
            if self._errors:
                break

        is_valid = len(self._errors) == 0
        if is_valid:
            self._check_usage_patterns()

        result = ValidationResult(
            is_valid=is_valid,
            errors=self._errors.copy(),
            warnings=self._warnings.copy(),
            info=self._build_info() if is_valid else {},
        )

        if result.warnings:
            self._issue_warnings(result.warnings)

        if not is_valid and raise_on_error:
            raise ValidationError(self._format_error_message())

        return result

    # ========================================================================
    # Validation Checks
    # ========================================================================

    def _validate_types(self):
        """Check that all attributes have correct types"""
        system = self.system

        if system.time_var is not None and not isinstance(system.time_var, sp.Symbol):
            self._errors.append(
                f"time_var = {system.time_var} is not a SymPy Symbol "
                f"(got {type(system.time_var).__name__})"
            )

        for group in ("state_vars", "input_vars"):
            for i, var in enumerate(getattr(system, group)):
                if not isinstance(var, sp.Symbol):
                    self._errors.append(
                        f"{group}[{i}] = {var} is not a SymPy Symbol "
                        f"(got {type(var).__name__})"
                    )

        for group in ("dynamics", "output"):
            for i, expr in enumerate(getattr(system, group)):
                if not isinstance(expr, sp.Expr):
                    self._errors.append(
                        f"{group}[{i}] = {expr!r} is not a SymPy expression "
                        f"(got {type(expr).__name__})"
                    )

        period = system.time_period
        if isinstance(period, (bool, np.bool_)) or not isinstance(period, _REAL_TYPES):
            self._errors.append(
                f"time_period must be a real number, got {type(period).__name__}"
            )

        for key, value in system.parameters.items():
            if not isinstance(key, sp.Symbol):
                self._errors.append(
                    f"Parameter key {key} is not a SymPy Symbol "
                    f"(got {type(key).__name__}). "
                    f"Use Symbol objects as keys: {{m: 1.0}} not {{'m': 1.0}}"
                )
            if isinstance(value, (bool, np.bool_)) or not isinstance(value, _REAL_TYPES):
                self._errors.append(
                    f"Parameter value for {key} must be numeric, "
                    f"got {type(value).__name__}"
                )
            elif not np.isfinite(value):
                self._errors.append(
                    f"Parameter {key} has non-finite value: {value}. "
                    f"Parameters must be finite numbers."
                )

    def _validate_content(self):
        """Dynamics and/or output must exist, period must be non-negative"""
        system = self.system

        if len(system.dynamics) == 0 and len(system.output) == 0:
            self._errors.append(
                "dynamics and output are both empty - at least one equation is required"
            )

        period = float(system.time_period)
        if not math.isfinite(period) or period < 0.0:
            self._errors.append(
                f"time_period must be a finite number >= 0, got {system.time_period}"
            )

    def _validate_uniqueness(self):
        """State and input variables must be unique, within and across groups"""
        system = self.system
        declared = list(system.state_vars) + list(system.input_vars)

        counts = Counter(declared)
        duplicates = [var for var, count in counts.items() if count > 1]
        if duplicates:
            self._errors.append(
                f"Duplicate variables found in state_vars/input_vars: "
                f"{[str(var) for var in duplicates]}. "
                f"Each variable must appear exactly once."
            )

        declared_set = set(declared)
        if system.time_var is not None and system.time_var in declared_set:
            self._errors.append(
                f"time_var {system.time_var} is also declared as a state or input variable"
            )

        if system.time_var is not None:
            declared_set.add(system.time_var)
        overlap = declared_set & set(system.parameters)
        if overlap:
            self._errors.append(
                f"Parameters {sorted(map(str, overlap))} are also declared as "
                f"time, state or input variables"
            )

    def _validate_symbols(self):
        """Every variable referenced by an expression must be declared"""
        allowed = self._declared_variables()

        for group in ("dynamics", "output"):
            expressions = getattr(self.system, group)
            if len(expressions) == 0:
                continue
            for i, expr in enumerate(expressions):
                undefined = expr.free_symbols - allowed
                if undefined:
                    self._errors.append(
                        f"{group}[{i}] = {expr} contains undefined variables: "
                        f"{sorted(map(str, undefined))}. "
                        f"All variables must be declared as time, state, input or parameter."
                    )

    def _validate_dimensions(self):
        """One dynamics equation per state variable"""
        system = self.system
        nx = len(system.state_vars)
        n_dynamics = len(system.dynamics)

        if n_dynamics > 0 and n_dynamics != nx:
            self._errors.append(
                f"dynamics has {n_dynamics} rows but state_vars has {nx} elements "
                f"(one equation per state variable is required)"
            )

    def _check_usage_patterns(self):
        """Check for unusual usage patterns (warnings only)"""
        system = self.system

        dynamics_symbols = set()
        for expr in system.dynamics:
            dynamics_symbols |= expr.free_symbols
        output_symbols = set()
        for expr in system.output:
            output_symbols |= expr.free_symbols
        used = dynamics_symbols | output_symbols

        if system.dynamics and system.state_vars:
            if not (dynamics_symbols & set(system.state_vars)):
                self._warnings.append(
                    "dynamics do not depend on any state variables. "
                    "Is this intentional? (e.g., integrator system)"
                )

        unused_inputs = [var for var in system.input_vars if var not in used]
        if unused_inputs:
            self._warnings.append(
                f"Input variables {[str(var) for var in unused_inputs]} are declared "
                f"but not used in dynamics or output."
            )

        unused_params = [key for key in system.parameters if key not in used]
        if unused_params:
            self._warnings.append(
                f"Parameters {[str(key) for key in unused_params]} are defined but "
                f"not used in dynamics or output. "
                f"Consider removing them or checking for typos."
            )

    # ========================================================================
    # Info Building
    # ========================================================================

    def _build_info(self) -> Dict:
        """Build info dictionary with system characteristics."""
        system = self.system
        period = float(system.time_period)
        return {
            "nx": len(system.state_vars),
            "nu": len(system.input_vars),
            "ny": len(system.output),
            "has_time_variable": system.time_var is not None,
            "has_dynamics": len(system.dynamics) > 0,
            "has_output": len(system.output) > 0,
            "is_continuous": period == 0.0,
            "time_period": period,
            "num_parameters": len(system.parameters),
        }

    # ========================================================================
    # Helper Methods
    # ========================================================================

    def _declared_variables(self) -> set:
        system = self.system
        allowed = set(system.state_vars) | set(system.input_vars) | set(system.parameters)
        if system.time_var is not None:
            allowed.add(system.time_var)
        return allowed

    def _issue_warnings(self, warnings_list: List[str]):
        """Issue Python warnings for validation warnings"""
        for warning in warnings_list:
            warnings.warn(f"System validation warning: {warning}", UserWarning, stacklevel=4)

    def _format_error_message(self) -> str:
        """Format error messages in a readable way"""
        msg = "System validation failed:\n\n"
        msg += "Errors:\n"
        msg += "\n".join(f"  • {error}" for error in self._errors)

        msg += "\n\n" + "=" * 70
        msg += "\nCOMMON FIXES:"
        msg += "\n  1. Declare every symbol used in an expression as time, state, input or parameter"
        msg += "\n  2. Do not reuse a variable in both state_vars and input_vars"
        msg += "\n  3. Provide one dynamics expression per state variable"
        msg += "\n  4. Use time_period=0 for continuous time, > 0 for discrete time"
        msg += "\n" + "=" * 70
        return msg

    # ========================================================================
    # Convenience Methods
    # ========================================================================

    @staticmethod
    def validate_system(
        system: "SymbolicVectorSystem",
        raise_on_error: bool = True
    ) -> ValidationResult:
        """
        Static convenience method for one-off validation.

        Examples
        --------
        >>> result = SymbolicValidator.validate_system(my_system)
        >>>
        >>> # Or without raising
        >>> result = SymbolicValidator.validate_system(
        ...     my_system, raise_on_error=False
        ... )
        """
        validator = SymbolicValidator(system)
        return validator.validate(raise_on_error=raise_on_error)

    def __repr__(self) -> str:
        """String representation"""
        return f"SymbolicValidator(system={type(self.system).__name__})"


__all__ = ["SymbolicValidator", "ValidationError", "ValidationResult"]
