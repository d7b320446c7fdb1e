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
pytest plugin that brings Selenoid up before the session and down after it.

Enable with ``--selenoid`` or ``selenoid = true`` in the ini file.
"""
import pytest

from ..exceptions import OptionsError, SevereServiceError
from ..MANAGERS.lifecycle_controller import LifecycleController
from ..PARSERS.options_parser import OptionsParser
from ..UTILS.logging_setup import configure_logging

CONTROLLER_KEY = pytest.StashKey[LifecycleController]()


def pytest_addoption(parser):
    group = parser.getgroup("selenoid", "Selenoid gateway and UI containers")
    group.addoption("--selenoid", action="store_true", default=False,
                    help="Start Selenoid containers for the test session.")
    group.addoption("--selenoid-config", default=None,
                    help="Service options YAML file.")
    group.addoption("--selenoid-browsers", default=None,
                    help="Path to browsers.json (default: ./browsers.json).")
    group.addoption("--selenoid-skip-pull", action="store_true", default=False,
                    help="Do not pull missing images.")
    group.addoption("--selenoid-no-ui", action="store_true", default=False,
                    help="Start the gateway without the UI container.")
    group.addoption("--selenoid-log-file", default=None,
                    help="Also write service events as JSON lines to this file.")
    parser.addini("selenoid", type="bool", default=False,
                  help="Start Selenoid containers for the test session.")


def is_enabled(config) -> bool:
    return bool(config.getoption("selenoid") or config.getini("selenoid"))


def build_controller(config) -> LifecycleController:
    """
    Resolves service options from the ini/command line and builds the controller.
    """
    options = OptionsParser().parse(
        config.getoption("selenoid_config"),
        browsers_config_path=config.getoption("selenoid_browsers"),
        skip_image_pull=True if config.getoption("selenoid_skip_pull") else None,
        enable_ui=False if config.getoption("selenoid_no_ui") else None,
    )
    return LifecycleController(options)


def pytest_configure(config):
    if is_enabled(config):
        configure_logging(
            verbose=config.getoption("verbose", 0) > 1,
            log_file=config.getoption("selenoid_log_file"),
        )


def pytest_sessionstart(session):
    config = session.config
    # xdist workers share the containers started by the controller process
    if not is_enabled(config) or hasattr(config, "workerinput"):
        return

    try:
        controller = build_controller(config)
    except OptionsError as e:
        raise pytest.UsageError(str(e))

    config.stash[CONTROLLER_KEY] = controller
    try:
        controller.prepare(session)
    except SevereServiceError as e:
        # sessionfinish does not run once sessionstart exits
        controller.complete(pytest.ExitCode.INTERNAL_ERROR, session)
        del config.stash[CONTROLLER_KEY]
        pytest.exit(f"Selenoid service failed: {e}", returncode=pytest.ExitCode.INTERNAL_ERROR)


def pytest_sessionfinish(session, exitstatus):
    controller = session.config.stash.get(CONTROLLER_KEY, None)
    if controller is None:
        return
    controller.complete(exitstatus, session)


@pytest.fixture(scope="session")
def selenoid(pytestconfig) -> LifecycleController:
    """The session's lifecycle controller; skips when the service is disabled."""
    controller = pytestconfig.stash.get(CONTROLLER_KEY, None)
    if controller is None:
        pytest.skip("Selenoid service is not enabled (use --selenoid)")
    return controller
