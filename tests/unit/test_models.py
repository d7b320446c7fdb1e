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
Unit tests for configuration and container models.
"""
import pytest
from pydantic import ValidationError

from selenoid_standalone.MODELS.browser_configuration import BrowserConfiguration
from selenoid_standalone.MODELS.container import (
    CommandResult,
    ContainerHandle,
    ContainerRole,
    PortMapping,
    VolumeMount,
)
from selenoid_standalone.MODELS.service_configuration import ServiceConfiguration
from selenoid_standalone.UTILS.path_style import PathStyle


class TestServiceConfiguration:
    """Tests for ServiceConfiguration."""

    def test_defaults(self, make_config):
        """Test the documented defaults."""
        config = make_config()
        assert config.ui_port == 8080
        assert config.gateway_port == 4444
        assert config.gateway_version == "latest-release"
        assert config.ui_version == "latest-release"
        assert config.skip_image_pull is False
        assert config.terminate_on_error is True
        assert config.enable_ui is True
        assert config.browsers_config_path == "./browsers.json"
        assert config.engine == "docker"

    def test_is_immutable(self, make_config):
        """Test that fields cannot be reassigned."""
        config = make_config()
        with pytest.raises(ValidationError):
            config.gateway_container_name = "other"

    def test_unknown_option_rejected(self):
        """Test that typos in option names are reported."""
        with pytest.raises(ValidationError):
            ServiceConfiguration(selenoid_port=4444)

    def test_invalid_port_rejected(self):
        """Test that ports outside the valid range are rejected."""
        with pytest.raises(ValidationError):
            ServiceConfiguration(ui_port=70000)

    @pytest.mark.parametrize("field", ["gateway_image", "ui_image"])
    def test_empty_image_rejected(self, field):
        """Test that an empty image name fails validation up front."""
        with pytest.raises(ValidationError):
            ServiceConfiguration(**{field: ""})

    def test_resolved_paths_posix(self):
        """Test the resolved browsers.json path and mount directory on POSIX."""
        config = ServiceConfiguration(working_dir="/srv/suite", path_style=PathStyle.POSIX,
                                      browsers_config_path="config/browsers.json")
        assert config.resolved_config_path == "/srv/suite/config/browsers.json"
        assert config.config_mount_dir == "/srv/suite/config"
        assert config.engine_socket_path == "/var/run/docker.sock"

    def test_resolved_paths_windows(self):
        """Test that Windows hosts still produce POSIX-style mount paths."""
        config = ServiceConfiguration(working_dir=r"C:\suite", path_style=PathStyle.WINDOWS)
        assert config.resolved_config_path == "c:/suite/browsers.json"
        mounts = config.gateway_mounts()
        assert mounts[0].to_arg() == "//var/run/docker.sock:/var/run/docker.sock"
        assert mounts[1].to_arg() == "c:/suite/:/etc/selenoid/:ro"

    def test_image_references(self, make_config):
        """Test image references built from repository and version."""
        config = make_config(gateway_version="1.11.2", ui_image="registry.local:5000/aerokube/selenoid-ui")
        assert config.gateway_image_reference == "aerokube/selenoid:1.11.2"
        assert config.ui_image_reference == "registry.local:5000/aerokube/selenoid-ui:latest-release"

    def test_handles(self, make_config):
        """Test container handles per role."""
        config = make_config(gateway_container_name="gw", ui_container_name="dash")
        assert config.handle(ContainerRole.GATEWAY) == ContainerHandle("gw", ContainerRole.GATEWAY)
        assert config.handle(ContainerRole.UI) == ContainerHandle("dash", ContainerRole.UI)
        assert config.gateway_uri == "http://gw:4444"

    def test_port_mappings(self, make_config):
        """Test host to container port mappings."""
        config = make_config(gateway_port=5555, ui_port=9090)
        assert config.gateway_ports() == (PortMapping(5555, 4444),)
        assert config.ui_ports() == (PortMapping(9090, 8080),)

    def test_argument_lists_become_tuples(self, make_config):
        """Test pass-through arguments are stored immutably."""
        config = make_config(gateway_args=["-limit", "4"])
        assert config.gateway_args == ("-limit", "4")


class TestBrowserConfiguration:
    """Tests for BrowserConfiguration."""

    def test_image_references_deduplicated(self):
        """Test flattening with duplicates removed in document order."""
        config = BrowserConfiguration.model_validate({
            "chrome": {"default": "120.0", "versions": {
                "120.0": {"image": "selenoid/chrome:120.0", "port": "4444"},
                "latest": {"image": "selenoid/chrome:120.0", "port": "4444"},
            }},
            "opera": {"default": "105.0", "versions": {
                "105.0": {"image": "selenoid/opera:105.0", "port": 4444, "path": "/", "tmpfs": {"/tmp": "size=512m"}},
            }},
        })
        assert config.image_references() == ["selenoid/chrome:120.0", "selenoid/opera:105.0"]
        assert list(config.root) == ["chrome", "opera"]

    def test_default_path(self):
        """Test that the version path defaults to root."""
        config = BrowserConfiguration.model_validate({
            "chrome": {"default": "1", "versions": {"1": {"image": "c:1", "port": "4444"}}},
        })
        assert config.root["chrome"].versions["1"].path == "/"

    def test_missing_image_rejected(self):
        """Test that a version without an image is invalid."""
        with pytest.raises(ValidationError):
            BrowserConfiguration.model_validate({
                "chrome": {"default": "1", "versions": {"1": {"port": "4444"}}},
            })


class TestContainerModels:
    """Tests for container models."""

    def test_volume_mount_args(self):
        """Test volume argument rendering."""
        assert VolumeMount("/a", "/b").to_arg() == "/a:/b"
        assert VolumeMount("/a", "/b", read_only=True).to_arg() == "/a:/b:ro"

    def test_port_mapping_arg(self):
        """Test port argument rendering."""
        assert PortMapping(8080, 80).to_arg() == "8080:80"

    def test_header_only_listing(self):
        """Test that a header row alone is not data."""
        result = CommandResult(output="CONTAINER ID   IMAGE\n", success=True)
        assert result.has_data_rows() is False

    def test_listing_with_rows(self):
        """Test that a data row after the header counts."""
        result = CommandResult(output="CONTAINER ID   IMAGE\nabc   selenoid\n", success=True)
        assert result.has_data_rows() is True
        assert len(result.rows()) == 2

    def test_failed_listing_has_no_rows(self):
        """Test that failed commands never report data."""
        result = CommandResult(output="Error\nmore error", success=False)
        assert result.has_data_rows() is False

    def test_roles(self):
        """Test role values."""
        assert ContainerRole.GATEWAY == "gateway"
        assert ContainerRole.UI == "ui"
