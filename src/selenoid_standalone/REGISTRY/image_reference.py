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
Image reference parsing.
Splits references like 'aerokube/selenoid:latest-release' or
'localhost:5000/selenoid/chrome:120.0' into repository and tag.
"""
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class ImageReference:
    """
    Parsed container image reference.

    Examples:
        - aerokube/selenoid -> repository 'aerokube/selenoid', no tag
        - aerokube/selenoid-ui:1.10.11 -> tag '1.10.11'
        - localhost:5000/selenoid/chrome:120.0 -> registry port kept in repository
        - selenoid/chrome@sha256:abc... -> digest 'sha256:abc...'
    """

    repository: str
    tag: Optional[str] = None
    digest: Optional[str] = None

    @classmethod
    def parse(cls, reference: str) -> "ImageReference":
        """
        Parse an image reference string.

        Args:
            reference: Image reference, e.g. 'aerokube/selenoid:latest-release'.

        Returns:
            Parsed ImageReference.

        Raises:
            ValueError: If the reference is empty.
        """
        reference = (reference or "").strip()
        if not reference:
            raise ValueError("Empty image reference")

        digest = None
        if "@" in reference:
            reference, digest = reference.rsplit("@", 1)

        tag = None
        last_colon = reference.rfind(":")
        # A colon followed by a slash belongs to a registry port, not a tag
        if last_colon != -1 and "/" not in reference[last_colon + 1:]:
            tag = reference[last_colon + 1:]
            reference = reference[:last_colon]

        if not reference:
            raise ValueError("Image reference has no repository")

        return cls(repository=reference, tag=tag or None, digest=digest)

    def with_tag(self, tag: str) -> "ImageReference":
        """Same repository with the given tag (and no digest)."""
        return replace(self, tag=tag, digest=None)

    @property
    def reference(self) -> str:
        """The reference as passed to the container engine."""
        if self.digest:
            return f"{self.repository}@{self.digest}"
        if self.tag:
            return f"{self.repository}:{self.tag}"
        return self.repository

    def __str__(self) -> str:
        return self.reference
