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
Host-framework collaborators: contexts and port/state declarations.
"""

from .context import SystemContext
from .declarations import (
    InputPort,
    OutputPort,
    PeriodicUpdate,
    StateDeclaration,
    SystemDeclarations,
)

__all__ = [
    "SystemContext",
    "InputPort",
    "OutputPort",
    "PeriodicUpdate",
    "StateDeclaration",
    "SystemDeclarations",
]
