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
Start and stop of single named containers.
"""
from typing import List, Sequence

import structlog

from ..exceptions import SevereServiceError
from ..MODELS.container import CommandResult, PortMapping, VolumeMount
from .engine_command import EngineCommand

log = structlog.get_logger(__name__)


class ContainerRunner:
    """
    Issues ``run`` and ``rm`` commands for one container name at a time.
    """
    def __init__(self, engine: EngineCommand, terminate_on_error: bool = True):
        """
        Initializes the runner.

        :param engine: Command wrapper used for every engine call.
        :param terminate_on_error: Whether a failed critical start aborts the session.
        """
        self.engine = engine
        self.terminate_on_error = terminate_on_error

    def stop(self, name: str) -> CommandResult:
        """
        Force-removes the container with the given name.

        A missing container leaves nothing to do. The engine still reports it,
        so the result carries success=False with the engine message, but
        nothing is raised and callers treat it as a no-op.

        :param name: Container name.
        :return: Result of the removal.
        """
        log.info("container_stopping", name=name)
        result = self.engine.run(["rm", "-f", name])
        if not result.success:
            log.debug("container_stop_noop", name=name, output=result.output)
        return result

    def start(self,
              name: str,
              image: str,
              ports: Sequence[PortMapping] = (),
              mounts: Sequence[VolumeMount] = (),
              links: Sequence[str] = (),
              engine_args: Sequence[str] = (),
              command_args: Sequence[str] = (),
              critical: bool = False) -> CommandResult:
        """
        Runs the image detached under the given name.

        :param name: Container name, its only identity.
        :param image: Image reference to run.
        :param ports: Host to container port mappings.
        :param mounts: Volume mounts.
        :param links: Names of containers to link to.
        :param engine_args: Extra engine arguments placed before the image.
        :param command_args: Arguments passed to the container after the image.
        :param critical: Failure raises when the terminate policy is enabled.
        :return: Result of the run command.
        :raises SevereServiceError: If a critical start fails and failures terminate.
        """
        log.info("container_starting", name=name, image=image)
        result = self.engine.run(
            self.build_run_args(name, image, ports, mounts, links, engine_args, command_args)
        )
        if result.success:
            log.info("container_started", name=name, container_id=result.output[:12])
            return result

        if critical and self.terminate_on_error:
            raise SevereServiceError(f"Unable to start {name} container\n{result.output}")

        log.error("container_start_failed", name=name, output=result.output)
        return result

    @staticmethod
    def build_run_args(name: str,
                       image: str,
                       ports: Sequence[PortMapping] = (),
                       mounts: Sequence[VolumeMount] = (),
                       links: Sequence[str] = (),
                       engine_args: Sequence[str] = (),
                       command_args: Sequence[str] = ()) -> List[str]:
        """
        Assembles ``run -d --name <name> -p .. -v .. --link .. <engine args> <image> <args>``.
        """
        args = ["run", "-d", "--name", name]
        for port in ports:
            args += ["-p", port.to_arg()]
        for mount in mounts:
            args += ["-v", mount.to_arg()]
        for link in links:
            args += ["--link", link]
        args += list(engine_args)
        args.append(image)
        args += list(command_args)
        return args
