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
Waiting for a container to show up as running, with bounded fixed-delay retries.
"""
import time
from dataclasses import dataclass
from typing import Callable

import structlog
from tenacity import Retrying, retry_if_result, stop_after_attempt, wait_fixed

from ..RUNNERS.engine_command import EngineCommand

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded polling schedule: a fixed delay between attempts, no backoff.
    """
    max_attempts: int = 10
    delay: float = 1.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay must not be negative")


DEFAULT_RETRY_POLICY = RetryPolicy()


class ReadinessPoller:
    """
    Polls the engine's container listing until a name appears.

    Readiness is best effort: running out of attempts is not an error.
    """
    def __init__(self,
                 engine: EngineCommand,
                 policy: RetryPolicy = DEFAULT_RETRY_POLICY,
                 sleep: Callable[[float], None] = time.sleep):
        """
        :param engine: Command wrapper used for ``ps``.
        :param policy: Attempts and delay.
        :param sleep: Delay function, replaceable in tests.
        """
        self.engine = engine
        self.policy = policy
        self.sleep = sleep

    def is_running(self, name: str) -> bool:
        """
        One poll: does ``ps -f name=<name>`` list more than its header row?

        A failing listing counts as not running yet.
        """
        result = self.engine.run(["ps", "-f", f"name={name}"])
        if not result.success:
            log.debug("readiness_check_failed", name=name, output=result.output)
            return False
        return result.has_data_rows()

    def await_running(self, name: str) -> bool:
        """
        Polls until the container is running or the attempts are used up.

        :param name: Container name.
        :return: True if the container was seen running, False otherwise.
        """
        log.info("container_awaiting", name=name, max_attempts=self.policy.max_attempts)

        def before_sleep(retry_state):
            log.debug("container_not_running", name=name,
                      attempt=retry_state.attempt_number, delay=self.policy.delay)

        retrying = Retrying(
            stop=stop_after_attempt(self.policy.max_attempts),
            wait=wait_fixed(self.policy.delay),
            retry=retry_if_result(lambda running: not running),
            retry_error_callback=lambda retry_state: False,
            before_sleep=before_sleep,
            sleep=self.sleep,
        )
        running = retrying(self.is_running, name)

        if running:
            log.info("container_running", name=name)
        else:
            log.warning("container_not_ready", name=name, attempts=self.policy.max_attempts)
        return running
