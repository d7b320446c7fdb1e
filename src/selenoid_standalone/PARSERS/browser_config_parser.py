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
Parser for the Selenoid browsers.json document.
"""
import json

from pydantic import ValidationError

from ..exceptions import BrowserConfigError
from ..MODELS.browser_configuration import BrowserConfiguration


class BrowserConfigParser:
    """
    Reads browsers.json into a BrowserConfiguration.
    """
    def parse(self, config_path: str) -> BrowserConfiguration:
        """
        Parses browsers.json from a path.

        :param config_path: Path to the document.
        :return: Parsed configuration.
        :raises BrowserConfigError: If the file is unreadable or invalid.
        """
        try:
            # utf-8-sig tolerates the BOM Windows editors prepend
            with open(config_path, 'r', encoding='utf-8-sig') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise BrowserConfigError(f"Cannot read browsers config {config_path}: {e}") from e
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> BrowserConfiguration:
        """
        Parses browsers.json from a string.

        :param content: JSON text.
        :return: Parsed configuration.
        :raises BrowserConfigError: If the text is not a valid browsers document.
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise BrowserConfigError(f"Invalid JSON in browsers config: {e}") from e

        if not isinstance(data, dict):
            raise BrowserConfigError("Browsers config must be a JSON object")

        try:
            return BrowserConfiguration.model_validate(data)
        except ValidationError as e:
            raise BrowserConfigError(f"Invalid browsers config: {e}") from e
