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
System Utilities
================

Engines composed by SymbolicVectorSystem:

>>> from symvec.systems.base.utils import (
...     SymbolicValidator,
...     EnvironmentBinder,
...     ExpressionEvaluator,
...     FeedthroughAnalyzer,
... )
>>>
>>> SymbolicValidator(system).validate()        # structural checks
>>> env = EnvironmentBinder(system).bind(context) # variable -> value
>>> analyzer = FeedthroughAnalyzer(system)
>>> analyzer.has_direct_feedthrough(0, 0)

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

from .environment_binder import EnvironmentBinder
from .expression_evaluator import EvaluationError, ExpressionEvaluator
from .feedthrough_analyzer import FeedthroughAnalyzer

# Validation
from .symbolic_validator import SymbolicValidator, ValidationError, ValidationResult

__all__ = [
    "EnvironmentBinder",
    "EvaluationError",
    "ExpressionEvaluator",
    "FeedthroughAnalyzer",
    "SymbolicValidator",
    "ValidationError",
    "ValidationResult",
]
