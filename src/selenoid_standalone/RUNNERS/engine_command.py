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
Blocking invocation of the container engine's command line.
"""
import subprocess
from typing import Optional, Sequence

import structlog

from ..MODELS.container import CommandResult

log = structlog.get_logger(__name__)


class EngineCommand:
    """
    Runs ``<engine> <args...>`` and captures its output.
    """
    def __init__(self, executable: str = "docker", timeout: Optional[float] = None):
        """
        Initializes the command wrapper.

        Args:
            executable (str): Engine binary, e.g. ``docker`` or ``podman``.
            timeout (Optional[float]): Seconds before a command is abandoned.
                ``None`` waits for the engine's own behaviour.
        """
        self.executable = executable
        self.timeout = timeout

    def run(self, args: Sequence[str]) -> CommandResult:
        """
        Runs one engine command to completion.

        Failures never raise: a non-zero exit, a missing executable or a
        timeout all come back as an unsuccessful result carrying the error text.

        Args:
            args (Sequence[str]): Arguments after the executable name.

        Returns:
            CommandResult: Captured output and success flag.
        """
        args = tuple(args)
        command = [self.executable, *args]
        log.debug("engine_command", command=" ".join(command))

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
                # Avoid shell=True for security reasons (CWE-78)
                shell=False,
            )
        except subprocess.CalledProcessError as e:
            output = (e.stderr or e.stdout or str(e)).strip()
            log.debug("engine_command_failed", command=args[0] if args else "", exit_code=e.returncode)
            return CommandResult(output=output, success=False, args=args)
        except subprocess.TimeoutExpired as e:
            return CommandResult(output=f"Command timed out after {e.timeout}s", success=False, args=args)
        except OSError as e:
            return CommandResult(output=str(e), success=False, args=args)

        return CommandResult(output=completed.stdout.strip(), success=True, args=args)
