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
Loading of service options from a YAML file and the environment.

Precedence, lowest first: defaults, options file, ``SELENOID_*`` environment
variables, explicit overrides (command line flags).
"""
import os
import shlex
from typing import Any, Dict, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from ..exceptions import OptionsError
from ..MODELS.service_configuration import ServiceConfiguration
from ..UTILS.string_interpolation import interpolate

ENV_PREFIX = "SELENOID_"
_ARGUMENT_FIELDS = ("engine_args", "gateway_args", "ui_args")


class OptionsParser:
    """
    Builds a ServiceConfiguration from the available option sources.
    """
    def __init__(self, context: Optional[Dict[str, str]] = None, load_env_file: bool = True):
        """
        Initializes the parser.

        :param context: Environment used for interpolation and overrides.
            Defaults to the process environment, after loading ``.env``.
        :param load_env_file: Load a ``.env`` file into the process environment first.
        """
        if context is None:
            if load_env_file:
                load_dotenv(find_dotenv(usecwd=True))
            context = dict(os.environ)
        self.context = context

    def parse(self, options_path: Optional[str] = None, **overrides: Any) -> ServiceConfiguration:
        """
        Parses options from an optional YAML file.

        :param options_path: Path to the options file, or None for defaults only.
        :param overrides: Explicit values; None entries are ignored.
        :return: The resolved configuration.
        :raises OptionsError: If the file is missing or the options are invalid.
        """
        content = ""
        if options_path:
            try:
                with open(options_path, 'r', encoding='utf-8') as f:
                    content = f.read()
            except OSError as e:
                raise OptionsError(f"Cannot read options file {options_path}: {e}") from e
        return self.parse_from_string(content, **overrides)

    def parse_from_string(self, content: str, **overrides: Any) -> ServiceConfiguration:
        """
        Parses options from YAML text.

        :param content: YAML mapping of option names to values (may be empty).
        :param overrides: Explicit values; None entries are ignored.
        :return: The resolved configuration.
        :raises OptionsError: If interpolation, YAML parsing or validation fails.
        """
        try:
            content = interpolate(content, self.context)
        except KeyError as e:
            raise OptionsError(f"Options file interpolation failed: {e}") from e

        try:
            data = yaml.safe_load(content) if content.strip() else {}
        except yaml.YAMLError as e:
            raise OptionsError(f"Invalid YAML in options file: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise OptionsError("Options file must contain a mapping")

        options = dict(data)
        options.update(self._env_overrides())
        options.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return ServiceConfiguration(**options)
        except ValidationError as e:
            raise OptionsError(f"Invalid service options: {e}") from e

    def _env_overrides(self) -> Dict[str, Any]:
        """
        Collects ``SELENOID_<FIELD>`` variables for known option names.
        """
        found: Dict[str, Any] = {}
        for name in ServiceConfiguration.model_fields:
            key = f"{ENV_PREFIX}{name.upper()}"
            if key not in self.context:
                continue
            value = self.context[key]
            found[name] = shlex.split(value) if name in _ARGUMENT_FIELDS else value
        return found
