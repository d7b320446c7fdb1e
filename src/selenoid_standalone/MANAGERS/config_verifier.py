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
Pre-launch check that the browsers.json file is where the gateway will look.
"""
import os

import structlog

from ..exceptions import SevereServiceError

log = structlog.get_logger(__name__)


class ConfigurationVerifier:
    """
    Verifies the browser configuration file exists before any container starts.
    """
    def __init__(self, terminate_on_error: bool = True):
        self.terminate_on_error = terminate_on_error

    def verify(self, path: str) -> bool:
        """
        :param path: Resolved path of browsers.json.
        :return: True if the file exists.
        :raises SevereServiceError: If it is missing and failures terminate.
        """
        if os.path.isfile(path):
            log.debug("browsers_config_found", path=path)
            return True

        message = f"Unable to find browsers.json at {path}"
        log.error("browsers_config_missing", path=path)
        if self.terminate_on_error:
            raise SevereServiceError(message)
        return False
