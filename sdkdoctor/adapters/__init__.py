"""Adapters — process and installer bindings for external tools.

Public re-exports for convenient access.
"""

from sdkdoctor.adapters.base import Installer, InstallerError
from sdkdoctor.adapters.installer.bootstrapper import BootstrapperInstaller
from sdkdoctor.adapters.mock import MockInstaller

__all__ = [
    "BootstrapperInstaller",
    "Installer",
    "InstallerError",
    "MockInstaller",
]
