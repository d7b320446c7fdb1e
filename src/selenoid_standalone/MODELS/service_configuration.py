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
Resolved, immutable configuration of the Selenoid gateway and UI containers.
"""
import os
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..REGISTRY.image_reference import ImageReference
from ..UTILS.path_style import (
    PathStyle,
    engine_socket_path,
    parent_directory,
    resolve_host_path,
)
from .container import ContainerHandle, ContainerRole, PortMapping, VolumeMount

GATEWAY_CONTAINER_PORT = 4444
UI_CONTAINER_PORT = 8080
GATEWAY_CONFIG_DIR = "/etc/selenoid/"
ENGINE_SOCKET_TARGET = "/var/run/docker.sock"


class ServiceConfiguration(BaseModel):
    """
    Everything the lifecycle controller needs, fixed at construction time.

    Container names are used verbatim for start, stop, readiness checks and
    linking, so they must not change during a run.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Containers
    gateway_container_name: str = "selenoid"
    ui_container_name: str = "selenoid_ui"
    enable_ui: bool = True

    # Images
    gateway_image: str = Field(default="aerokube/selenoid", min_length=1)
    gateway_version: str = "latest-release"
    ui_image: str = Field(default="aerokube/selenoid-ui", min_length=1)
    ui_version: str = "latest-release"
    skip_image_pull: bool = False

    # Networking
    gateway_port: int = Field(default=GATEWAY_CONTAINER_PORT, gt=0, lt=65536)
    ui_port: int = Field(default=UI_CONTAINER_PORT, gt=0, lt=65536)

    # Browser configuration
    browsers_config_path: str = "./browsers.json"

    # Pass-through arguments
    engine_args: Tuple[str, ...] = ()
    gateway_args: Tuple[str, ...] = ()
    ui_args: Tuple[str, ...] = ()

    # Policy
    terminate_on_error: bool = True

    # Host
    engine: str = "docker"
    working_dir: str = Field(default_factory=os.getcwd)
    path_style: PathStyle = Field(default_factory=PathStyle.for_host)

    @property
    def resolved_config_path(self) -> str:
        """Absolute POSIX-style path of browsers.json."""
        return resolve_host_path(self.working_dir, self.browsers_config_path, self.path_style)

    @property
    def config_mount_dir(self) -> str:
        """Directory holding browsers.json, mounted into the gateway."""
        return parent_directory(self.resolved_config_path)

    @property
    def engine_socket_path(self) -> str:
        return engine_socket_path(self.path_style)

    @property
    def gateway_image_reference(self) -> str:
        return ImageReference.parse(self.gateway_image).with_tag(self.gateway_version).reference

    @property
    def ui_image_reference(self) -> str:
        return ImageReference.parse(self.ui_image).with_tag(self.ui_version).reference

    @property
    def gateway_uri(self) -> str:
        """Address of the gateway as seen from the linked UI container."""
        return f"http://{self.gateway_container_name}:{GATEWAY_CONTAINER_PORT}"

    def handle(self, role: ContainerRole) -> ContainerHandle:
        """
        Container identity for the given role.
        """
        if role is ContainerRole.GATEWAY:
            return ContainerHandle(name=self.gateway_container_name, role=role)
        return ContainerHandle(name=self.ui_container_name, role=role)

    def gateway_ports(self) -> Tuple[PortMapping, ...]:
        return (PortMapping(host=self.gateway_port, container=GATEWAY_CONTAINER_PORT),)

    def ui_ports(self) -> Tuple[PortMapping, ...]:
        return (PortMapping(host=self.ui_port, container=UI_CONTAINER_PORT),)

    def gateway_mounts(self) -> Tuple[VolumeMount, ...]:
        """
        Engine socket plus the browsers.json directory (read-only).
        """
        return (
            VolumeMount(source=self.engine_socket_path, target=ENGINE_SOCKET_TARGET),
            VolumeMount(
                source=self.config_mount_dir.rstrip("/") + "/",
                target=GATEWAY_CONFIG_DIR,
                read_only=True,
            ),
        )
