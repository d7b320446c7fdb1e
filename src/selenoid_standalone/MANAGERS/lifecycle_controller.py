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
Orchestration of the Selenoid gateway and UI containers around a test run.
"""
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog

from ..exceptions import BrowserConfigError
from ..MODELS.container import CommandResult, ContainerRole
from ..MODELS.service_configuration import ServiceConfiguration
from ..PARSERS.browser_config_parser import BrowserConfigParser
from ..REGISTRY.image_resolver import ImageResolver, InspectionErrorPolicy
from ..RUNNERS.container_runner import ContainerRunner
from ..RUNNERS.engine_command import EngineCommand
from .config_verifier import ConfigurationVerifier
from .readiness_poller import DEFAULT_RETRY_POLICY, ReadinessPoller, RetryPolicy

log = structlog.get_logger(__name__)


class LifecycleState(str, Enum):
    """
    Phase of the controller.
    """
    IDLE = "idle"
    STOPPING = "stopping"
    VERIFYING = "verifying"
    PULLING = "pulling"
    STARTING_GATEWAY = "starting_gateway"
    AWAITING_GATEWAY = "awaiting_gateway"
    STARTING_UI = "starting_ui"
    RUNNING = "running"
    STOPPING_ALL = "stopping_all"


class LifecycleController:
    """
    Prepares the containers before the tests and removes them afterwards.

    Every step of a sequence runs, in order, one engine command at a time.
    """
    def __init__(self,
                 config: ServiceConfiguration,
                 engine: Optional[EngineCommand] = None,
                 retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
                 inspection_policy: InspectionErrorPolicy = InspectionErrorPolicy.ASSUME_PRESENT,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initializes the controller and its collaborators.

        :param config: Resolved service configuration.
        :param engine: Engine command wrapper; built from ``config.engine`` if omitted.
        :param retry_policy: Readiness polling schedule.
        :param inspection_policy: Answer used when an image listing fails.
        :param sleep: Delay function used between readiness polls.
        """
        self.config = config
        self.engine = engine or EngineCommand(config.engine)
        self.runner = ContainerRunner(self.engine, terminate_on_error=config.terminate_on_error)
        self.resolver = ImageResolver(self.engine, on_inspection_error=inspection_policy)
        self.poller = ReadinessPoller(self.engine, policy=retry_policy, sleep=sleep)
        self.verifier = ConfigurationVerifier(terminate_on_error=config.terminate_on_error)
        self.browser_parser = BrowserConfigParser()

        self.state = LifecycleState.IDLE
        self.results: Dict[str, CommandResult] = {}
        self.gateway_ready = False

    def _transition(self, state: LifecycleState) -> None:
        log.debug("lifecycle_transition", previous=self.state.value, state=state.value)
        self.state = state

    def _run_steps(self, steps: List[Tuple[LifecycleState, Callable[[], Any]]]) -> Any:
        """
        Runs every step in order and returns the last step's value.
        """
        outcome = None
        for state, step in steps:
            self._transition(state)
            outcome = step()
        return outcome

    # Prepare

    def prepare(self, run_context: Any = None) -> Optional[CommandResult]:
        """
        Brings the containers up before the tests run.

        Order: remove leftovers, verify browsers.json, pull images, start the
        gateway, wait for it, start the UI.

        :param run_context: Opaque value from the host test runner; unused.
        :return: Result of the final start command.
        :raises SevereServiceError: On fatal failures when failures terminate.
        """
        log.info("lifecycle_prepare", gateway=self.config.gateway_container_name,
                 ui=self.config.ui_container_name if self.config.enable_ui else None)
        self.results = {}

        steps = [
            (LifecycleState.STOPPING, self.stop_existing),
            (LifecycleState.VERIFYING, self.verify_browser_config),
        ]
        if not self.config.skip_image_pull:
            steps.append((LifecycleState.PULLING, self.pull_images))
        steps.append((LifecycleState.STARTING_GATEWAY, self.start_gateway))
        if self.config.enable_ui:
            steps += [
                (LifecycleState.AWAITING_GATEWAY, self.await_gateway),
                (LifecycleState.STARTING_UI, self.start_ui),
            ]

        outcome = self._run_steps(steps)
        self._transition(LifecycleState.RUNNING)
        return outcome

    def stop_existing(self) -> None:
        """Removes containers left behind by an earlier, crashed run."""
        self.results["stop_gateway"] = self.runner.stop(self.config.gateway_container_name)
        if self.config.enable_ui:
            self.results["stop_ui"] = self.runner.stop(self.config.ui_container_name)

    def verify_browser_config(self) -> bool:
        return self.verifier.verify(self.config.resolved_config_path)

    def pull_images(self) -> None:
        """
        Resolves browser images, then the UI image, then the gateway image.
        """
        self.resolver.ensure_all(self.browser_images())
        if self.config.enable_ui:
            self.resolver.ensure_present(self.config.ui_image_reference)
        self.resolver.ensure_present(self.config.gateway_image_reference)

    def browser_images(self) -> List[str]:
        """
        Images listed in browsers.json; empty if the document cannot be read.
        """
        try:
            browsers = self.browser_parser.parse(self.config.resolved_config_path)
        except BrowserConfigError as e:
            log.error("browsers_config_unreadable", error=str(e))
            return []
        return browsers.image_references()

    def start_gateway(self) -> CommandResult:
        handle = self.config.handle(ContainerRole.GATEWAY)
        result = self.runner.start(
            handle.name,
            self.config.gateway_image_reference,
            ports=self.config.gateway_ports(),
            mounts=self.config.gateway_mounts(),
            engine_args=self.config.engine_args,
            command_args=self.config.gateway_args,
            critical=True,
        )
        self.results["start_gateway"] = result
        return result

    def await_gateway(self) -> bool:
        self.gateway_ready = self.poller.await_running(self.config.gateway_container_name)
        return self.gateway_ready

    def start_ui(self) -> CommandResult:
        """
        Starts the UI linked to the gateway; failures are never fatal.
        """
        handle = self.config.handle(ContainerRole.UI)
        result = self.runner.start(
            handle.name,
            self.config.ui_image_reference,
            ports=self.config.ui_ports(),
            links=(self.config.gateway_container_name,),
            engine_args=self.config.engine_args,
            command_args=("--selenoid-uri", self.config.gateway_uri, *self.config.ui_args),
        )
        self.results["start_ui"] = result
        return result

    # Complete

    def complete(self, exit_code: Any = None, run_context: Any = None) -> CommandResult:
        """
        Removes both containers after the tests finish.

        :param exit_code: Exit status of the test run; unused.
        :param run_context: Opaque value from the host test runner; unused.
        :return: Result of the final stop command.
        """
        log.info("lifecycle_complete", exit_code=exit_code)
        self._transition(LifecycleState.STOPPING_ALL)

        results = [self.runner.stop(self.config.gateway_container_name)]
        if self.config.enable_ui:
            results.append(self.runner.stop(self.config.ui_container_name))

        self.gateway_ready = False
        self._transition(LifecycleState.IDLE)
        return results[-1]

    def status(self) -> Dict[str, bool]:
        """
        Running state of each managed container, keyed by role.
        """
        roles = [ContainerRole.GATEWAY]
        if self.config.enable_ui:
            roles.append(ContainerRole.UI)
        return {
            role.value: self.poller.is_running(self.config.handle(role).name)
            for role in roles
        }
