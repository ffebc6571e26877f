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
Environment Binder for SymbolicVectorSystem

Bridges a SystemContext and the symbolic expressions of a system by
binding every declared variable to its current numeric value.

Responsibilities:
- Build the environment template once (time, state, input -> 0.0,
  parameters -> their values)
- Hand out independent clones of the template, one per evaluation
- Overwrite a clone with the context's time, state and input

The template itself is never mutated after construction, so bindings from
one evaluation cannot leak into the next.
"""

from typing import TYPE_CHECKING

from symvec.symbolic.environment import Environment
from symvec.systems.framework.context import SystemContext

if TYPE_CHECKING:
    from symvec.systems.base.core.symbolic_vector_system import SymbolicVectorSystem


class EnvironmentBinder:
    """
    Populates environments from a context.

    Example:
        >>> binder = EnvironmentBinder(system)
        >>> env = binder.new_environment()
        >>> binder.populate(context, env)
        >>> env[x]
        2.0
    """

    def __init__(self, system: "SymbolicVectorSystem"):
        """
        Initialize the binder and build the environment template.

        Args:
            system: A validated symbolic vector system
        """
        self.system = system
        self._template = self._build_template()

    def _build_template(self) -> Environment:
        system = self.system
        template = Environment()
        if system.time_var is not None:
            template.insert(system.time_var, 0.0)
        for var in system.state_vars:
            template.insert(var, 0.0)
        for var in system.input_vars:
            template.insert(var, 0.0)
        for var, value in system.parameters.items():
            template.insert(var, value)
        return template

    @property
    def template(self) -> Environment:
        """Copy of the template (the stored template stays untouched)."""
        return self._template.copy()

    def new_environment(self) -> Environment:
        """Clone the template for a single evaluation."""
        return self._template.copy()

    def populate(self, context: SystemContext, env: Environment) -> None:
        """
        Bind time, state and input variables to the values in ``context``.

        Args:
            context: Read-only source of time, state and input values
            env: Environment to overwrite (typically a fresh template clone)
        """
        system = self.system

        if system.time_var is not None:
            env[system.time_var] = context.get_time()

        if system.state_vars:
            if system.is_discrete:
                state = context.get_discrete_state_vector()
            else:
                state = context.get_continuous_state_vector()
            for i, var in enumerate(system.state_vars):
                env[var] = state[i]

        if system.input_vars:
            u = system.get_input_port().eval(context)
            for i, var in enumerate(system.input_vars):
                env[var] = u[i]

    def bind(self, context: SystemContext) -> Environment:
        """Clone the template and populate it from ``context``."""
        env = self.new_environment()
        self.populate(context, env)
        return env

    def __repr__(self) -> str:
        return f"EnvironmentBinder(variables={len(self._template)})"


__all__ = ["EnvironmentBinder"]
