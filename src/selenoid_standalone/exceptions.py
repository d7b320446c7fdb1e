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
Exceptions raised by the Selenoid lifecycle service.
"""


class SelenoidServiceError(Exception):
    """Base class for all service errors."""

    pass


class SevereServiceError(SelenoidServiceError):
    """
    Raised when a failure must abort the whole test session.

    Only raised when the terminate-on-error policy is enabled.
    """

    pass


class BrowserConfigError(SelenoidServiceError):
    """Raised when the browsers.json document cannot be read or validated."""

    pass


class OptionsError(SelenoidServiceError):
    """Raised when service options cannot be loaded or validated."""

    pass
