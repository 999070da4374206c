"""
SDK inventory — list installed SDKs by asking the toolchain.

Runs ``<dotnet> --list-sdks`` and parses each output line of the form::

    6.0.100 [/usr/share/dotnet/sdk]

The output format is not a stable contract, so parsing is tolerant and
line-at-a-time: a line that does not match, names a missing directory,
or has an unparseable version is skipped and never affects other lines.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from sdkdoctor.adapters.shell.command import CommandResult, run_command
from sdkdoctor.core.models.toolchain import SdkRecord
from sdkdoctor.core.models.version import SemanticVersion
from sdkdoctor.core.services.toolchain_locator import ToolchainLocator

logger = logging.getLogger(__name__)

LIST_SDKS_ARG = "--list-sdks"

CommandRunner = Callable[[Sequence[str], int], CommandResult]


def parse_sdk_line(
    line: str,
    is_dir: Callable[[Path], bool] = Path.is_dir,
) -> SdkRecord | None:
    """Parse one ``--list-sdks`` line. Never raises.

    Returns:
        SdkRecord, or None if the line is malformed, the install
        directory is missing, or the version does not parse.
    """
    try:
        if "[" not in line or "]" not in line:
            return None

        bracket = line.index("[")
        version_str = line[:bracket].strip()
        loc_str = line[bracket:].strip().strip("[]")

        if not version_str or not loc_str:
            return None

        location = Path(loc_str)
        if not is_dir(location):
            return None

        directory = location / version_str
        if not is_dir(directory):
            return None

        version = SemanticVersion.try_parse(version_str)
        if version is None:
            return None

        return SdkRecord(version=version, directory=directory)
    except Exception as e:
        # Bad line, ignore
        logger.debug("Skipping list-sdks line %r: %s", line, e)
        return None


def parse_sdk_lines(lines: Iterable[str]) -> list[SdkRecord]:
    """Parse every line, keeping output order and dropping bad lines."""
    records = []
    for line in lines:
        record = parse_sdk_line(line)
        if record is None:
            if line.strip():
                logger.debug("Ignoring list-sdks line: %r", line)
            continue
        records.append(record)
    return records


class SdkInventory:
    """Installed SDKs as reported by the located toolchain."""

    def __init__(
        self,
        locator: ToolchainLocator,
        runner: CommandRunner | None = None,
        timeout: int = 30,
    ):
        self.locator = locator
        self._runner = runner or run_command
        self._timeout = timeout

    def list_installed_sdks(self) -> list[SdkRecord]:
        """Return installed SDKs in the order the toolchain lists them.

        Returns an empty list when the toolchain is not found or the
        command cannot run.
        """
        if not self.locator.exists:
            logger.warning("Cannot list SDKs: toolchain not found")
            return []

        exe = str(self.locator.executable_path)
        result = self._runner([exe, LIST_SDKS_ARG], self._timeout)

        if result.error:
            logger.warning("%s %s failed: %s", exe, LIST_SDKS_ARG, result.error)
            return []
        if result.returncode not in (0, None):
            logger.debug("%s %s exited with %s", exe, LIST_SDKS_ARG, result.returncode)

        records = parse_sdk_lines(result.stdout_lines)
        logger.info("Found %d installed SDK(s)", len(records))
        return records

    def latest(self) -> SdkRecord | None:
        """Highest installed SDK version, or None."""
        records = self.list_installed_sdks()
        if not records:
            return None
        return max(records, key=lambda r: r.version)
