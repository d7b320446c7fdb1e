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
Local image lookup and pulling.
Images are only pulled when the engine does not list them locally.
"""
from enum import Enum
from typing import Iterable

import structlog

from ..RUNNERS.engine_command import EngineCommand

log = structlog.get_logger(__name__)


class InspectionErrorPolicy(str, Enum):
    """
    What ``exists`` reports when the image listing itself fails.
    """
    ASSUME_PRESENT = "assume_present"
    ASSUME_ABSENT = "assume_absent"


class ImageResolver:
    """
    Makes sure image references are available to the local engine.
    """

    def __init__(self,
                 engine: EngineCommand,
                 on_inspection_error: InspectionErrorPolicy = InspectionErrorPolicy.ASSUME_PRESENT):
        """
        Initialize the resolver.

        Args:
            engine: Command wrapper used for listing and pulling.
            on_inspection_error: Answer given when the listing command fails.
                Assuming presence keeps a broken engine from stalling the run;
                the problem then shows up when the container is started.
        """
        self.engine = engine
        self.on_inspection_error = on_inspection_error

    def exists(self, image: str) -> bool:
        """
        Check whether an image is present locally.

        Args:
            image: Exact image reference.

        Returns:
            True if the filtered listing holds more than its header row.
        """
        log.debug("image_checking", image=image)
        result = self.engine.run(["image", "ls", "-f", f"reference={image}"])
        if not result.success:
            log.error("image_inspection_failed", image=image, output=result.output,
                      policy=self.on_inspection_error.value)
            return self.on_inspection_error is InspectionErrorPolicy.ASSUME_PRESENT
        return result.has_data_rows()

    def ensure_present(self, image: str) -> None:
        """
        Pull the image unless it already exists.

        Pull failures are logged only; a missing image surfaces later when the
        container using it fails to start.

        Args:
            image: Exact image reference.
        """
        if self.exists(image):
            log.info("image_pull_skipped", image=image, reason="already exists")
            return

        log.info("image_pulling", image=image)
        result = self.engine.run(["pull", image])
        if result.success:
            log.info("image_pulled", image=image)
        else:
            log.error("image_pull_failed", image=image, output=result.output)

    def ensure_all(self, images: Iterable[str]) -> None:
        """Resolve each image in turn, never concurrently."""
        for image in images:
            self.ensure_present(image)
