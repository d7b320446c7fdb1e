# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Environment variable interpolation for option files.

Follows the compose file rules: ``${VAR}``, ``${VAR-default}``,
``${VAR:-default}``, ``${VAR+value}``, ``${VAR:+value}``, ``${VAR?message}``,
``${VAR:?message}``, and ``$$`` for a literal dollar sign. The colon forms
treat an empty variable like an unset one.
"""
import re
from typing import Mapping

_PLACEHOLDER = re.compile(r"""
    \$(?:
        (?P<escaped>\$)
        |
        \{(?P<name>[A-Za-z_][A-Za-z0-9_]*)
          (?:(?P<colon>:)?(?P<op>[-+?])(?P<arg>[^}]*))?
        \}
    )
""", re.VERBOSE)


def interpolate(template: str, context: Mapping[str, str]) -> str:
    """
    Expands every placeholder in the template.

    :param template: Text containing placeholders.
    :param context: Variables available for substitution.
    :return: The expanded text.
    :raises KeyError: If a bare or ``?`` placeholder names a missing variable.
    """
    def replace(match):
        if match.group("escaped"):
            return "$"

        name, op, arg = match.group("name"), match.group("op"), match.group("arg") or ""
        value = context.get(name)
        present = bool(value) if match.group("colon") else value is not None

        if op == "-":
            return value if present else arg
        if op == "+":
            return arg if present else ""
        if op == "?":
            if not present:
                raise KeyError(arg or f"Variable {name} is required")
            return value
        if value is None:
            raise KeyError(f"Variable {name} not found in context")
        return value

    return _PLACEHOLDER.sub(replace, template)
