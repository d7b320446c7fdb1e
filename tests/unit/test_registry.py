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
Unit tests for the registry module.
"""
import pytest

from selenoid_standalone.REGISTRY.image_reference import ImageReference


class TestImageReference:
    """Tests for ImageReference parsing."""

    def test_parse_without_tag(self):
        """Test parsing a repository without a tag."""
        ref = ImageReference.parse("aerokube/selenoid")
        assert ref.repository == "aerokube/selenoid"
        assert ref.tag is None

    def test_parse_with_tag(self):
        """Test parsing a repository with a tag."""
        ref = ImageReference.parse("aerokube/selenoid-ui:1.10.11")
        assert ref.repository == "aerokube/selenoid-ui"
        assert ref.tag == "1.10.11"

    def test_parse_registry_port(self):
        """Test that a registry port is not taken for a tag."""
        ref = ImageReference.parse("localhost:5000/selenoid/chrome")
        assert ref.repository == "localhost:5000/selenoid/chrome"
        assert ref.tag is None

    def test_parse_registry_port_with_tag(self):
        """Test a registry port followed by a tag."""
        ref = ImageReference.parse("localhost:5000/selenoid/chrome:120.0")
        assert ref.repository == "localhost:5000/selenoid/chrome"
        assert ref.tag == "120.0"

    def test_parse_with_digest(self):
        """Test parsing a digest reference."""
        ref = ImageReference.parse("selenoid/chrome@sha256:abc123")
        assert ref.repository == "selenoid/chrome"
        assert ref.digest == "sha256:abc123"
        assert ref.reference == "selenoid/chrome@sha256:abc123"

    def test_with_tag_replaces_tag(self):
        """Test that with_tag swaps the tag and drops a digest."""
        ref = ImageReference.parse("aerokube/selenoid:1.0@sha256:abc").with_tag("latest-release")
        assert ref.reference == "aerokube/selenoid:latest-release"

    def test_empty_reference_raises(self):
        """Test that empty reference raises error."""
        with pytest.raises(ValueError):
            ImageReference.parse("")

    def test_str_representation(self):
        """Test string representation."""
        assert str(ImageReference.parse("aerokube/selenoid:latest-release")) == "aerokube/selenoid:latest-release"
