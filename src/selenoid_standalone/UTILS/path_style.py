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
Host path conventions for paths handed to the container engine.

The engine always expects POSIX-style mount sources, so paths built on a
Windows host are rewritten before they reach a ``-v`` argument.
"""
import ntpath
import os
import posixpath
from enum import Enum
from pathlib import PurePosixPath, PureWindowsPath


class PathStyle(str, Enum):
    """Path separator convention of the host running the tests."""

    POSIX = "posix"
    WINDOWS = "windows"

    @classmethod
    def for_host(cls) -> "PathStyle":
        """Return the style of the current interpreter's host."""
        return cls.WINDOWS if os.name == "nt" else cls.POSIX


ENGINE_SOCKET_PATHS = {
    PathStyle.POSIX: "/var/run/docker.sock",
    PathStyle.WINDOWS: "//var/run/docker.sock",
}


def engine_socket_path(style: PathStyle) -> str:
    """
    Host path of the engine socket that is forwarded into the gateway.

    :param style: Host path style.
    :return: Socket path usable as a mount source.
    """
    return ENGINE_SOCKET_PATHS[PathStyle(style)]


def normalize_mount_path(raw: str, style: PathStyle) -> str:
    """
    Converts a host path into the POSIX form used for volume mounts.

    Windows paths get forward slashes and a lower-case drive letter,
    e.g. ``C:\\work\\browsers.json`` -> ``c:/work/browsers.json``.

    :param raw: Path as produced on the host.
    :param style: Host path style.
    :return: Normalized POSIX-style path.
    """
    if PathStyle(style) is PathStyle.POSIX:
        return posixpath.normpath(raw)

    path = PureWindowsPath(ntpath.normpath(raw)).as_posix()
    if len(path) >= 2 and path[1] == ":":
        path = path[0].lower() + path[1:]
    return path


def resolve_host_path(working_dir: str, relative: str, style: PathStyle) -> str:
    """
    Joins a possibly relative path onto the working directory and normalizes it.

    :param working_dir: Directory relative paths are resolved against.
    :param relative: Path to resolve; absolute paths are kept as they are.
    :param style: Host path style.
    :return: Absolute, normalized POSIX-style path.
    """
    if PathStyle(style) is PathStyle.WINDOWS:
        joined = str(PureWindowsPath(working_dir) / PureWindowsPath(relative))
    else:
        joined = str(PurePosixPath(working_dir) / PurePosixPath(relative))
    return normalize_mount_path(joined, style)


def parent_directory(path: str) -> str:
    """Directory part of an already normalized POSIX-style path."""
    return posixpath.dirname(path)
