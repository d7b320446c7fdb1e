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
Shared fixtures: an in-memory container engine and ready-made configurations.
"""
import json
from typing import Dict, List, Set, Tuple

import pytest

from selenoid_standalone.MANAGERS.lifecycle_controller import LifecycleController
from selenoid_standalone.MANAGERS.readiness_poller import RetryPolicy
from selenoid_standalone.MODELS.container import CommandResult
from selenoid_standalone.MODELS.service_configuration import ServiceConfiguration
from selenoid_standalone.UTILS.path_style import PathStyle

IMAGE_HEADER = "REPOSITORY          TAG       IMAGE ID       CREATED       SIZE"
PS_HEADER = "CONTAINER ID   IMAGE     COMMAND   CREATED   STATUS    PORTS     NAMES"

BROWSERS = {
    "chrome": {
        "default": "120.0",
        "versions": {
            "120.0": {"image": "selenoid/chrome:120.0", "port": "4444", "path": "/"},
            "119.0": {"image": "selenoid/chrome:119.0", "port": "4444", "path": "/"},
        },
    },
    "firefox": {
        "default": "121.0",
        "versions": {
            "121.0": {"image": "selenoid/firefox:121.0", "port": "4444", "path": "/wd/hub"},
        },
    },
}


class FakeEngine:
    """
    Scripted stand-in for the container engine that records every command.
    """

    def __init__(self):
        self.calls: List[Tuple[str, ...]] = []
        self.images: Set[str] = set()
        self.containers: Set[str] = set()
        # verb -> error text returned instead of running the command
        self.failures: Dict[str, str] = {}
        # container names whose ``run`` fails
        self.failing_starts: Set[str] = set()
        # container name -> number of ``ps`` polls before it is listed
        self.ready_after: Dict[str, int] = {}
        self._polls: Dict[str, int] = {}

    def run(self, args) -> CommandResult:
        args = tuple(args)
        self.calls.append(args)
        verb = args[0]

        if verb in self.failures:
            return CommandResult(output=self.failures[verb], success=False, args=args)

        if verb == "rm":
            name = args[-1]
            if name not in self.containers:
                return CommandResult(output=f"Error: No such container: {name}", success=False, args=args)
            self.containers.discard(name)
            return CommandResult(output=name, success=True, args=args)

        if verb == "run":
            name = args[args.index("--name") + 1]
            if name in self.failing_starts or name in self.containers:
                return CommandResult(output=f"Error: cannot start {name}", success=False, args=args)
            self.containers.add(name)
            return CommandResult(output="4f1c2d3e4a5b6c7d8e9f", success=True, args=args)

        if verb == "pull":
            self.images.add(args[1])
            return CommandResult(output=f"Status: Downloaded newer image for {args[1]}", success=True, args=args)

        if verb == "image":
            reference = args[-1].split("=", 1)[1]
            rows = [IMAGE_HEADER]
            if reference in self.images:
                rows.append(f"{reference}   abc123   2 days ago   1GB")
            return CommandResult(output="\n".join(rows), success=True, args=args)

        if verb == "ps":
            name = args[-1].split("=", 1)[1]
            self._polls[name] = self._polls.get(name, 0) + 1
            rows = [PS_HEADER]
            if name in self.containers and self._polls[name] > self.ready_after.get(name, 0):
                rows.append(f"4f1c2d3e4a5b   image   \"/entry\"   1s   Up 1s   {name}")
            return CommandResult(output="\n".join(rows), success=True, args=args)

        return CommandResult(output=f"unknown command {verb}", success=False, args=args)

    def commands(self, verb: str) -> List[Tuple[str, ...]]:
        return [call for call in self.calls if call[0] == verb]


class SleepRecorder:
    """Records requested delays instead of sleeping."""

    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def browsers_file(tmp_path):
    path = tmp_path / "browsers.json"
    path.write_text(json.dumps(BROWSERS))
    return path


@pytest.fixture
def make_config(tmp_path):
    """Factory for configurations rooted in the test's temporary directory."""
    def factory(**options) -> ServiceConfiguration:
        options.setdefault("working_dir", str(tmp_path))
        options.setdefault("path_style", PathStyle.POSIX)
        return ServiceConfiguration(**options)
    return factory


@pytest.fixture
def make_controller(make_config, fake_engine, sleep_recorder):
    """Factory for controllers wired to the fake engine with a fast retry policy."""
    def factory(**options) -> LifecycleController:
        return LifecycleController(
            make_config(**options),
            engine=fake_engine,
            retry_policy=RetryPolicy(max_attempts=3, delay=0.0),
            sleep=sleep_recorder,
        )
    return factory
