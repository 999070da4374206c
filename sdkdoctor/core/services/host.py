"""
Host platform facts — operating system, architecture, runtime id.

Read-only probes. Everything else asks this module instead of calling
``platform`` directly, so tests can patch one place.
"""

from __future__ import annotations

import platform

WINDOWS = "windows"
MACOS = "macos"
LINUX = "linux"
OTHER = "other"

_ARCH_MAP = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "x86",
    "i686": "x86",
    "x86": "x86",
    "armv7l": "arm",
}


def current_platform() -> str:
    """One of ``windows``, ``macos``, ``linux``, ``other``."""
    system = platform.system().lower()
    if system == "windows":
        return WINDOWS
    if system == "darwin":
        return MACOS
    if system == "linux":
        return LINUX
    return OTHER


def is_windows() -> bool:
    return current_platform() == WINDOWS


def executable_name() -> str:
    """File name of the toolchain executable on this host."""
    return "dotnet.exe" if is_windows() else "dotnet"


def runtime_identifier() -> str:
    """Runtime identifier used by workload manifests, e.g. ``linux-x64``."""
    machine = platform.machine().lower()
    arch = _ARCH_MAP.get(machine, machine)
    os_part = {WINDOWS: "win", MACOS: "osx", LINUX: "linux"}.get(current_platform(), "unknown")
    return f"{os_part}-{arch}"
