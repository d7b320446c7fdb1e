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
Models describing the containers the service manages and the outcome of
engine commands.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class ContainerRole(str, Enum):
    """
    Role of a managed container.
    """
    GATEWAY = "gateway"
    UI = "ui"


@dataclass(frozen=True)
class ContainerHandle:
    """
    Addressable identity of a managed container.

    Recomputed from the configuration whenever it is needed; the fixed name is
    the only identity that survives a restart of the test process.
    """
    name: str
    role: ContainerRole


@dataclass(frozen=True)
class PortMapping:
    """
    Publishes a container port on the host.
    """
    host: int
    container: int

    def to_arg(self) -> str:
        return f"{self.host}:{self.container}"


@dataclass(frozen=True)
class VolumeMount:
    """
    Binds a host path into a container.
    """
    source: str
    target: str
    read_only: bool = False

    def to_arg(self) -> str:
        arg = f"{self.source}:{self.target}"
        if self.read_only:
            arg += ":ro"
        return arg


@dataclass
class CommandResult:
    """
    Outcome of one container engine invocation.

    ``output`` holds stdout on success and the error text on failure.
    """
    output: str
    success: bool
    args: Tuple[str, ...] = field(default_factory=tuple)

    def rows(self) -> List[str]:
        """
        Non-empty lines of a listing, header row included.
        """
        return [line for line in self.output.strip().splitlines() if line.strip()]

    def has_data_rows(self) -> bool:
        """
        True when a tabular listing holds more than its header row.
        """
        return self.success and len(self.rows()) > 1
