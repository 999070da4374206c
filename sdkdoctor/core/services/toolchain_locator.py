"""
Toolchain locator — find the installed toolchain executable.

Resolution is an ordered list of strategies; the first one that yields
an existing executable wins:

    1. Environment resolver: DOTNET_HOST_PATH, DOTNET_ROOT, then the
       ``dotnet`` on PATH (symlinks resolved). Yields a directory; the
       executable is that directory joined with the platform
       executable name.
    2. Candidate paths: conventional install locations for the host,
       scanned in priority order. Yields an executable; the root is
       its parent directory.

Not finding the toolchain is a normal outcome: the locator holds an
empty ToolchainLocation and ``exists`` is False. Every path tried is
kept in ``searched`` so callers can say what was searched, and where.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from sdkdoctor.core.models.toolchain import ToolchainLocation
from sdkdoctor.core.services import host

logger = logging.getLogger(__name__)

# A strategy appends what it tried to ``searched`` and returns a
# candidate location (or None).
LocatorStrategy = Callable[[list[str]], ToolchainLocation | None]


def platform_candidate_paths(
    platform_name: str | None = None,
    env: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> list[Path]:
    """Conventional toolchain executable locations, highest priority first."""
    platform_name = platform_name or host.current_platform()
    env = os.environ if env is None else env
    home = home or Path.home()

    if platform_name == host.WINDOWS:
        candidates = []
        for var, default in (
            ("ProgramFiles(x86)", r"C:\Program Files (x86)"),
            ("ProgramFiles", r"C:\Program Files"),
        ):
            base = env.get(var, default)
            candidates.append(Path(base) / "dotnet" / "dotnet.exe")
        return candidates

    if platform_name == host.MACOS:
        return [Path("/usr/local/share/dotnet/dotnet")]

    if platform_name == host.LINUX:
        return [
            home / "share" / "dotnet" / "dotnet",
            Path("/usr/share/dotnet/dotnet"),
            Path("/usr/lib/dotnet/dotnet"),
        ]

    return []


def resolver_strategy(
    env: Mapping[str, str] | None = None,
    which: Callable[[str], str | None] = shutil.which,
) -> LocatorStrategy:
    """Build the environment resolver strategy."""
    env_map = os.environ if env is None else env

    def _resolve(searched: list[str]) -> ToolchainLocation | None:
        host_path = env_map.get("DOTNET_HOST_PATH")
        if host_path:
            searched.append(f"DOTNET_HOST_PATH={host_path}")
            directory = Path(host_path).parent
            if directory.is_dir():
                return _from_directory(directory, "resolver")

        root = env_map.get("DOTNET_ROOT")
        if root:
            searched.append(f"DOTNET_ROOT={root}")
            if Path(root).is_dir():
                return _from_directory(Path(root), "resolver")

        on_path = which(host.executable_name())
        searched.append(f"PATH ({host.executable_name()})")
        if on_path:
            directory = Path(on_path).resolve().parent
            if directory.is_dir():
                return _from_directory(directory, "resolver")

        return None

    return _resolve


def candidate_strategy(candidates: Sequence[str | Path]) -> LocatorStrategy:
    """Build a strategy that scans ``candidates`` in order."""
    paths = [Path(c).expanduser() for c in candidates]

    def _scan(searched: list[str]) -> ToolchainLocation | None:
        for path in paths:
            searched.append(str(path))
            if path.is_file():
                return ToolchainLocation(
                    executable_path=path,
                    root_directory=path.parent,
                    strategy="candidates",
                )
        return None

    return _scan


def _from_directory(directory: Path, strategy: str) -> ToolchainLocation:
    return ToolchainLocation(
        executable_path=directory / host.executable_name(),
        root_directory=directory,
        strategy=strategy,
    )


class ToolchainLocator:
    """Resolve the toolchain once, at construction."""

    def __init__(self, strategies: Sequence[LocatorStrategy] | None = None):
        if strategies is None:
            strategies = default_strategies()

        self.searched: list[str] = []
        self.location = self._resolve(strategies)

        if self.exists:
            logger.debug(
                "Toolchain found at %s (%s)",
                self.location.executable_path,
                self.location.strategy,
            )
        else:
            logger.warning("Toolchain not found (searched: %s)", ", ".join(self.searched))

    def _resolve(self, strategies: Sequence[LocatorStrategy]) -> ToolchainLocation:
        for strategy in strategies:
            location = strategy(self.searched)
            if location is not None and location.exists:
                return location
        return ToolchainLocation()

    @property
    def exists(self) -> bool:
        return self.location.exists

    @property
    def executable_path(self) -> Path | None:
        return self.location.executable_path

    @property
    def root_directory(self) -> Path | None:
        return self.location.root_directory


def default_strategies(
    extra_candidates: Sequence[str] = (),
    use_resolver: bool = True,
) -> list[LocatorStrategy]:
    """Resolver first, then configured candidates, then platform defaults."""
    strategies: list[LocatorStrategy] = []
    if use_resolver:
        strategies.append(resolver_strategy())
    strategies.append(candidate_strategy([*extra_candidates, *platform_candidate_paths()]))
    return strategies
