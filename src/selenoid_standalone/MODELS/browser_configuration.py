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
Models for the Selenoid browsers.json document.
"""
from typing import Dict, List, Union

from pydantic import BaseModel, ConfigDict, RootModel


class BrowserVersion(BaseModel):
    """
    One browser version served by the gateway.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    image: str
    port: Union[int, str]
    path: str = "/"


class Browser(BaseModel):
    """
    A browser and the versions available for it.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    default: str
    versions: Dict[str, BrowserVersion] = {}


class BrowserConfiguration(RootModel[Dict[str, Browser]]):
    """
    Mapping from browser name to its versions, as read from browsers.json.
    """

    def image_references(self) -> List[str]:
        """
        Every image the gateway may launch, without duplicates, in document order.
        """
        images: List[str] = []
        for browser in self.root.values():
            for version in browser.versions.values():
                if version.image not in images:
                    images.append(version.image)
        return images
