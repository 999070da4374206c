"""
Shared test fixtures and configuration.
"""

import json
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from sdkdoctor.adapters.shell.command import CommandResult
from sdkdoctor.core.services import host
from sdkdoctor.core.services.toolchain_locator import ToolchainLocator, candidate_strategy


@pytest.fixture
def dotnet_root(tmp_path: Path) -> Path:
    """A toolchain root containing a (fake) executable."""
    root = tmp_path / "dotnet"
    root.mkdir()
    (root / host.executable_name()).write_text("#!/bin/sh\n")
    return root


@pytest.fixture
def locator(dotnet_root: Path) -> ToolchainLocator:
    """Locator that finds the fake toolchain through a candidate path."""
    return ToolchainLocator([candidate_strategy([dotnet_root / host.executable_name()])])


@pytest.fixture
def missing_locator() -> ToolchainLocator:
    """Locator with no strategies: the toolchain is never found."""
    return ToolchainLocator(strategies=[])


@pytest.fixture
def fake_runner() -> Callable[[Sequence[str]], Callable]:
    """Build a command runner that returns canned stdout lines."""

    def _make(lines: Sequence[str], returncode: int = 0, error: str | None = None):
        calls: list[list[str]] = []

        def _run(cmd, timeout):
            calls.append(list(cmd))
            return CommandResult(
                command=list(cmd),
                returncode=None if error else returncode,
                stdout="\n".join(lines),
                error=error,
            )

        _run.calls = calls
        return _run

    return _make


@pytest.fixture
def write_manifest(dotnet_root: Path) -> Callable[..., Path]:
    """Write a WorkloadManifest.json under sdk-manifests/<band>/<id>/."""

    def _write(band: str, manifest_id: str, data: dict | str) -> Path:
        directory = dotnet_root / "sdk-manifests" / band / manifest_id
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "WorkloadManifest.json"
        path.write_text(data if isinstance(data, str) else json.dumps(data))
        return path

    return _write
