"""
Toolchain facade — one entry point for toolchain queries.

Ties together the locator, the SDK inventory and per-SDK workload
resolvers. With ``cache_workloads`` on, one resolver (and its parsed
manifests) is reused per SDK version for the lifetime of the facade;
with it off, every query reads the disk again.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sdkdoctor.core.models.config import DoctorConfig
from sdkdoctor.core.models.toolchain import PackInfo, SdkRecord, WorkloadPackKind, WorkloadSuggestion
from sdkdoctor.core.services.sdk_inventory import CommandRunner, SdkInventory
from sdkdoctor.core.services.toolchain_locator import ToolchainLocator, default_strategies
from sdkdoctor.core.services.workload_resolver import WorkloadResolver

logger = logging.getLogger(__name__)


class ToolchainNotFound(Exception):
    """Raised by queries that need a toolchain root when none was found."""


class _CachedWorkloadResolver(WorkloadResolver):
    """Resolver that parses manifests once."""

    def __init__(self, root: Path, sdk_version: str, rid: str | None = None):
        super().__init__(root, sdk_version, rid)
        self._loaded = None

    def _load(self):
        if self._loaded is None:
            self._loaded = super()._load()
        return self._loaded


class Toolchain:
    """Located toolchain plus SDK and workload queries."""

    def __init__(
        self,
        locator: ToolchainLocator | None = None,
        runner: CommandRunner | None = None,
        cache_workloads: bool = False,
        list_sdks_timeout: int = 30,
    ):
        self.locator = locator or ToolchainLocator()
        self.inventory = SdkInventory(self.locator, runner=runner, timeout=list_sdks_timeout)
        self.cache_workloads = cache_workloads
        self._resolvers: dict[tuple[Path, str], WorkloadResolver] = {}

    @classmethod
    def from_config(cls, config: DoctorConfig) -> Toolchain:
        locator = ToolchainLocator(
            default_strategies(
                extra_candidates=config.toolchain.candidates,
                use_resolver=config.toolchain.use_resolver,
            )
        )
        return cls(
            locator=locator,
            cache_workloads=config.workloads.cache,
            list_sdks_timeout=config.toolchain.list_sdks_timeout,
        )

    @property
    def exists(self) -> bool:
        return self.locator.exists

    def get_sdks(self) -> list[SdkRecord]:
        return self.inventory.list_installed_sdks()

    def workload_resolver(self, sdk_version: str) -> WorkloadResolver:
        """Resolver for ``sdk_version`` under the toolchain root.

        Raises:
            ToolchainNotFound: If no toolchain root was located.
        """
        root = self.locator.root_directory
        if root is None:
            raise ToolchainNotFound(
                "Toolchain not found; searched: " + ", ".join(self.locator.searched)
            )

        if not self.cache_workloads:
            return WorkloadResolver(root, sdk_version)

        key = (root, sdk_version)
        if key not in self._resolvers:
            self._resolvers[key] = _CachedWorkloadResolver(root, sdk_version)
        return self._resolvers[key]

    def get_workload_suggestions(
        self, sdk_version: str, *missing_pack_ids: str
    ) -> set[WorkloadSuggestion]:
        return self.workload_resolver(sdk_version).suggest_for_missing_packs(missing_pack_ids)

    def get_workload_packs(self, sdk_version: str, kind: WorkloadPackKind | str) -> list[PackInfo]:
        return self.workload_resolver(sdk_version).get_installed_packs(kind)

    def clear_cache(self) -> None:
        """Forget cached resolvers, e.g. after a remedy installed packs."""
        self._resolvers.clear()
